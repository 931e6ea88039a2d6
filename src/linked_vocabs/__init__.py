"""
linked-vocabs - Controlled vocabularies for RDF resources

Features:
- Register named, prefixed vocabularies on a resource class
- Resolve plain strings and identifiers into vocabulary terms
- Pick display labels with language preference
- Search a SPARQL store for terms of the registered vocabularies
"""

from ._version import __version__
from .catalog import DEFAULT_CATALOG, VocabularyCatalog, load_catalog
from .errors import LinkedVocabsError, StoreUnavailable, UnknownVocabulary
from .labels import LabelSelector
from .registry import VocabularyConfig, VocabularyRegistry
from .resolver import Resolution, ResolutionStatus, TermResolver
from .resource import ControlledClass, Resource, validate
from .search import SearchHit, VocabularySearch
from .store import OxigraphStore, SparqlEndpointStore
from .terms import Vocabulary, parse_identifier

__all__ = [
    "__version__",
    "DEFAULT_CATALOG",
    "VocabularyCatalog",
    "load_catalog",
    "LinkedVocabsError",
    "StoreUnavailable",
    "UnknownVocabulary",
    "LabelSelector",
    "VocabularyConfig",
    "VocabularyRegistry",
    "Resolution",
    "ResolutionStatus",
    "TermResolver",
    "ControlledClass",
    "Resource",
    "validate",
    "SearchHit",
    "VocabularySearch",
    "OxigraphStore",
    "SparqlEndpointStore",
    "Vocabulary",
    "parse_identifier",
]
