"""
Per-class registry of controlled vocabularies.

A registry maps vocabulary names to their configuration. Insertion order is
significant: when prefixes overlap, the earliest registered vocabulary wins.

Example:
    >>> registry = VocabularyRegistry()
    >>> _ = registry.register("dcmitype")
    >>> registry.matching("http://purl.org/dc/dcmitype/Image").name
    'dcmitype'
"""
from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pyoxigraph import NamedNode

from .catalog import DEFAULT_CATALOG, VocabularyCatalog
from .errors import UnknownVocabulary
from .terms import TermSource, term_text

if TYPE_CHECKING:
    from .store import OxigraphStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VocabularyConfig:
    """A vocabulary as registered on a controlled class."""

    name: str
    prefix: str
    term_source: TermSource
    strict: bool = False
    source: str | None = None


class VocabularyRegistry:
    """Ordered mapping of vocabulary name to ``VocabularyConfig``."""

    def __init__(self, catalog: VocabularyCatalog | None = None):
        self.catalog = catalog if catalog is not None else DEFAULT_CATALOG
        self._vocabularies: dict[str, VocabularyConfig] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._vocabularies

    def __getitem__(self, name: str) -> VocabularyConfig:
        return self._vocabularies[name]

    def __iter__(self) -> Iterator[VocabularyConfig]:
        return iter(list(self._vocabularies.values()))

    def __len__(self) -> int:
        return len(self._vocabularies)

    def names(self) -> list[str]:
        return list(self._vocabularies)

    def register(self, name: str, **overrides: Any) -> VocabularyConfig:
        """Register a catalog vocabulary, optionally overriding its defaults.

        Args:
            name: Vocabulary name; must be known to the catalog.
            **overrides: Any of ``prefix``, ``term_source``, ``strict``,
                ``source``. Overrides win over the catalog defaults.

        Returns:
            The stored configuration.

        Raises:
            UnknownVocabulary: If the catalog does not define ``name``.
        """
        entry = self.catalog.get(name)
        if entry is None:
            raise UnknownVocabulary(name)

        settings = entry.defaults()
        settings.update(overrides)
        config = VocabularyConfig(name=name, **settings)
        self._vocabularies[name] = config
        logger.debug("Registered vocabulary %s (prefix %s, strict=%s)", name, config.prefix, config.strict)
        return config

    def matching(self, identifier: object) -> VocabularyConfig | None:
        """Return the first vocabulary whose prefix starts ``identifier``."""
        text = term_text(identifier)
        for config in self._vocabularies.values():
            if text.startswith(config.prefix):
                return config
        return None

    def uses_vocab_prefix(self, identifier: object) -> bool:
        return self.matching(identifier) is not None

    def list_terms(self) -> list[NamedNode]:
        """Return the terms allowed by the registered strict vocabularies.

        Note: this does not list every term the registry accepts. Non-strict
        vocabularies, and term sources without a term list, are not included.
        """
        terms: list[NamedNode] = []
        for config in self._vocabularies.values():
            if not config.strict:
                continue
            list_terms = getattr(config.term_source, "list_terms", None)
            if not callable(list_terms):
                continue
            namespace = getattr(config.term_source, "namespace", config.prefix)
            terms.extend(t for t in list_terms() if term_text(t).startswith(namespace))
        return terms

    def load_vocabularies(
        self,
        store: OxigraphStore,
        cache_dir: Path | None = None,
        ttl: int | None = None,
        timeout: float | None = None,
    ) -> dict[str, int]:
        """Fetch each vocabulary's source document into ``store``.

        Each document is loaded into a named graph equal to its source URL.
        Vocabularies without a source are skipped.

        Returns:
            Number of triples loaded per vocabulary name.

        Raises:
            StoreUnavailable: If a source document cannot be fetched.
        """
        from . import store as store_module

        loaded: dict[str, int] = {}
        for config in self._vocabularies.values():
            if not config.source:
                logger.debug("Vocabulary %s has no source document", config.name)
                continue
            path = store_module.fetch_document(
                config.source,
                cache_dir=cache_dir,
                ttl=ttl if ttl is not None else store_module.CACHE_TTL_SECONDS,
                timeout=timeout if timeout is not None else store_module.DEFAULT_TIMEOUT,
            )
            loaded[config.name] = store.load(path, graph=config.source)
        return loaded
