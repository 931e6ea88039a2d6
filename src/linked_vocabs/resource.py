"""
Resources whose identity is controlled by vocabularies.

A ``ControlledClass`` groups the vocabulary behavior shared by all of its
resources: a registry, a term resolver, a label selector and, once a store
is attached, a search interface. ``Resource`` is a single record holding an
identifier and literal values.

Example:
    >>> places = ControlledClass("Place")
    >>> _ = places.use_vocabulary("geonames")
    >>> paris = places.new("http://sws.geonames.org/2988507/")
    >>> paris.add_value(SKOS_PREF_LABEL, Literal("Paris", language="en"))
    >>> paris.rdf_label()
    ['Paris']
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pyoxigraph import BlankNode, Literal, NamedNode

from .errors import LinkedVocabsError
from .labels import DEFAULT_PREFERRED_LANGUAGES, LabelSelector
from .namespaces import SKOS_HIDDEN_LABEL
from .registry import VocabularyConfig, VocabularyRegistry
from .resolver import Resolution, TermResolver
from .search import SearchHit, VocabularySearch
from .store import OxigraphStore, Store
from .terms import Identifier, term_text

logger = logging.getLogger(__name__)

# Literal values of one subject; str(NamedNode) is already in <...> form
RECORD_QUERY = "SELECT ?p ?o WHERE {{ {subject} ?p ?o . FILTER(isLiteral(?o)) }}"


@dataclass(frozen=True)
class Property:
    """A declared property. ``controlled`` names the class its values belong to."""

    name: str
    predicate: str
    controlled: ControlledClass | None = None


class ControlledClass:
    """Vocabulary behavior shared by every resource of one kind."""

    def __init__(
        self,
        name: str,
        registry: VocabularyRegistry | None = None,
        label_predicates: Sequence[str] = (),
        preferred_languages: Sequence[str] = DEFAULT_PREFERRED_LANGUAGES,
        store: Store | None = None,
    ):
        self.name = name
        self.registry = registry if registry is not None else VocabularyRegistry()
        self.label_predicates = list(label_predicates)
        self.resolver = TermResolver(self.registry)
        self.label_selector = LabelSelector(self.label_predicates, preferred_languages)
        self.store = store
        self._qa_interface: VocabularySearch | None = None
        self.properties: dict[str, Property] = {}
        self.declare_property("hiddenLabel", SKOS_HIDDEN_LABEL)

    def __repr__(self) -> str:
        return f"ControlledClass({self.name!r}, vocabularies={self.registry.names()})"

    def declare_property(self, name: str, predicate: str, controlled: ControlledClass | None = None) -> Property:
        """Declare a named property; values of a ``controlled`` property are checked by ``validate``."""
        prop = Property(name=name, predicate=predicate, controlled=controlled)
        self.properties[name] = prop
        return prop

    def use_vocabulary(self, name: str, **opts: Any) -> VocabularyConfig:
        """Register a catalog vocabulary for this class. See ``VocabularyRegistry.register``."""
        return self.registry.register(name, **opts)

    @property
    def vocabularies(self) -> dict[str, VocabularyConfig]:
        return {config.name: config for config in self.registry}

    def list_terms(self) -> list[NamedNode]:
        return self.registry.list_terms()

    def uses_vocab_prefix(self, identifier: Identifier) -> bool:
        return self.registry.uses_vocab_prefix(identifier)

    def matching_vocab(self, identifier: Identifier) -> VocabularyConfig | None:
        return self.registry.matching(identifier)

    def new(self, subject: Identifier | None = None) -> Resource:
        return Resource(self, subject)

    def attach_store(self, store: Store) -> None:
        self.store = store
        self._qa_interface = None

    @property
    def qa_interface(self) -> VocabularySearch:
        if self._qa_interface is None:
            if self.store is None:
                raise LinkedVocabsError(f"No store attached to {self.name}")
            self._qa_interface = VocabularySearch(self.registry, self.store, self.label_predicates)
        return self._qa_interface

    def search(self, q: str, sub_authority: str | None = None) -> list[SearchHit]:
        return self.qa_interface.search(q, sub_authority)

    def results(self) -> list[SearchHit]:
        return self.qa_interface.results()

    def get_full_record(self, id: str, sub_authority: str | None = None) -> None:
        return self.qa_interface.get_full_record(id, sub_authority)

    def fetch(self, subject: Identifier) -> Resource:
        """Build a resource and fill its literal values from the attached store.

        Only named subjects are looked up; a pass-through identifier gets a
        resource without values.

        Raises:
            LinkedVocabsError: If no store is attached.
            StoreUnavailable: If a remote store fails.
        """
        if self.store is None:
            raise LinkedVocabsError(f"No store attached to {self.name}")
        resource = self.new(subject)
        if not isinstance(resource.subject, NamedNode):
            return resource
        for row in self.store.query(RECORD_QUERY.format(subject=resource.subject)):
            obj = row["o"]
            value = Literal(obj["value"], language=obj["lang"]) if "lang" in obj else Literal(obj["value"])
            resource.add_value(row["p"]["value"], value)
        return resource

    def load_vocabularies(self, cache_dir: Path | None = None, **kwargs: Any) -> dict[str, int]:
        """Load every registered vocabulary's source document into the attached store.

        Afterwards new resources of this class can be labeled and searched
        using data from their source documents.
        """
        if not isinstance(self.store, OxigraphStore):
            raise LinkedVocabsError(f"{self.name} needs a local OxigraphStore to load vocabularies")
        return self.registry.load_vocabularies(self.store, cache_dir=cache_dir, **kwargs)


class Resource:
    """A record with a controlled identifier and literal values."""

    def __init__(self, controlled_class: ControlledClass, subject: Identifier | None = None):
        self.controlled_class = controlled_class
        self.subject: NamedNode | BlankNode | str | None = None
        self._values: dict[str, list] = {}
        if subject is not None:
            self.set_subject(subject)

    def __repr__(self) -> str:
        subject = term_text(self.subject) if self.subject is not None else None
        return f"<{self.controlled_class.name} {subject}>"

    def set_subject(self, candidate: Identifier) -> Resolution:
        """Resolve ``candidate`` and adopt the result as this resource's identity.

        Rejected candidates (blank nodes) leave the identity unchanged.
        """
        resolution = self.controlled_class.resolver.resolve(candidate)
        if resolution.accepted:
            self.subject = resolution.value
        else:
            logger.debug("Identity of %r left unchanged: %r rejected", self, candidate)
        return resolution

    def is_node(self) -> bool:
        """True if the resource has no stable global identifier."""
        return self.subject is None or isinstance(self.subject, BlankNode)

    def _predicate(self, key: str) -> str:
        prop = self.controlled_class.properties.get(key)
        return prop.predicate if prop is not None else key

    def get_values(self, predicate: str, literal: bool = False) -> list:
        values = self._values.get(self._predicate(predicate), [])
        if literal:
            return [v for v in values if isinstance(v, Literal)]
        return list(values)

    def add_value(self, predicate: str, value: object) -> None:
        """Append a value. Plain strings become literals without a language tag."""
        if isinstance(value, str):
            value = Literal(value)
        self._values.setdefault(self._predicate(predicate), []).append(value)

    def set_value(self, predicate: str, values: Sequence[object]) -> None:
        self._values.pop(self._predicate(predicate), None)
        for value in values:
            self.add_value(predicate, value)

    def rdf_label(self) -> list[str]:
        return self.controlled_class.label_selector.select(self)

    def in_vocab(self) -> bool:
        return self.controlled_class.resolver.in_vocab(self.subject)


def validate(resource: Resource) -> list[str]:
    """Check that values of controlled properties are vocabulary terms.

    Returns:
        One error message per offending value; empty if the resource is valid.
    """
    errors = []
    for prop in resource.controlled_class.properties.values():
        if prop.controlled is None:
            continue
        for value in resource.get_values(prop.predicate):
            if isinstance(value, Literal):
                continue
            if not prop.controlled.resolver.in_vocab(value):
                vocabularies = ", ".join(prop.controlled.registry.names())
                errors.append(
                    f"value `{term_text(value)}` for `{prop.name}` property is not a term "
                    f"in a controlled vocabulary {vocabularies}"
                )
    return errors
