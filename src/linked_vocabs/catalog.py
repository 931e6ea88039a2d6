"""
System-wide catalog of known controlled vocabularies.

Registries may only register vocabularies named here. The catalog ships a
few well-known authorities and can be extended from a YAML/JSON file or the
``vocabularies`` section of the configuration.

Catalog file format (vocabularies.yaml):
    vocabularies:
      dcmitype:
        prefix: "http://purl.org/dc/dcmitype/"
        strict: true
        source: "https://www.dublincore.org/specifications/dublin-core/dcmi-terms/dublin_core_type.ttl"
        terms: [Collection, Dataset, Image]

      lcsh:
        prefix: "http://id.loc.gov/authorities/subjects/"
"""
from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .terms import TermSource, Vocabulary

if TYPE_CHECKING:
    from .config import Config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogEntry:
    """System-wide defaults for one vocabulary."""

    prefix: str
    term_source: TermSource
    strict: bool = False
    source: str | None = None  # URL of the vocabulary's RDF document

    def defaults(self) -> dict[str, Any]:
        return {
            "prefix": self.prefix,
            "term_source": self.term_source,
            "strict": self.strict,
            "source": self.source,
        }


class VocabularyCatalog:
    """Ordered mapping of vocabulary name to ``CatalogEntry``."""

    def __init__(self, entries: dict[str, CatalogEntry] | None = None):
        self._entries: dict[str, CatalogEntry] = dict(entries or {})

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, name: str) -> CatalogEntry | None:
        return self._entries.get(name)

    def names(self) -> list[str]:
        return list(self._entries)

    def add(
        self,
        name: str,
        prefix: str,
        strict: bool = False,
        source: str | None = None,
        terms: list[str] | None = None,
        term_source: TermSource | None = None,
    ) -> CatalogEntry:
        """Add or replace a catalog entry.

        Without an explicit ``term_source`` a ``Vocabulary`` over ``prefix``
        holding ``terms`` is used.
        """
        if term_source is None:
            term_source = Vocabulary(prefix, terms or [], strict=strict)
        entry = CatalogEntry(prefix=prefix, term_source=term_source, strict=strict, source=source)
        self._entries[name] = entry
        return entry

    def copy(self) -> VocabularyCatalog:
        return VocabularyCatalog(self._entries)

    def update_from_dict(self, data: dict[str, Any]) -> None:
        """Add entries from a ``{name: {prefix, strict, source, terms}}`` mapping."""
        for name, spec in data.items():
            if not isinstance(spec, dict) or not spec.get("prefix"):
                logger.warning("Skipping vocabulary %r: no prefix given", name)
                continue
            self.add(
                name,
                prefix=spec["prefix"],
                strict=bool(spec.get("strict", False)),
                source=spec.get("source"),
                terms=list(spec.get("terms", [])),
            )


DCMITYPE_TERMS = [
    "Collection",
    "Dataset",
    "Event",
    "Image",
    "InteractiveResource",
    "MovingImage",
    "PhysicalObject",
    "Service",
    "Software",
    "Sound",
    "StillImage",
    "Text",
]

DEFAULT_CATALOG = VocabularyCatalog()
DEFAULT_CATALOG.add(
    "dcmitype",
    prefix="http://purl.org/dc/dcmitype/",
    strict=True,
    source="https://www.dublincore.org/specifications/dublin-core/dcmi-terms/dublin_core_type.ttl",
    terms=DCMITYPE_TERMS,
)
DEFAULT_CATALOG.add("lcsh", prefix="http://id.loc.gov/authorities/subjects/")
DEFAULT_CATALOG.add("lcnames", prefix="http://id.loc.gov/authorities/names/")
DEFAULT_CATALOG.add("aat", prefix="http://vocab.getty.edu/aat/")
DEFAULT_CATALOG.add("geonames", prefix="http://sws.geonames.org/")
DEFAULT_CATALOG.add("iso_639_2", prefix="http://id.loc.gov/vocabulary/iso639-2/")


def load_catalog(path: Path, base: VocabularyCatalog | None = None) -> VocabularyCatalog:
    """Load vocabulary definitions from a YAML or JSON file.

    Args:
        path: Catalog file (.yaml/.yml or .json).
        base: Catalog to extend. Default: a copy of ``DEFAULT_CATALOG``.

    Returns:
        New catalog containing ``base`` plus the file's entries.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Vocabulary catalog not found: {path}")

    if path.suffix in (".yaml", ".yml"):
        import yaml

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    else:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)

    catalog = (base or DEFAULT_CATALOG).copy()
    catalog.update_from_dict(data.get("vocabularies", {}))
    logger.debug("Loaded %d catalog entries from %s", len(catalog), path)
    return catalog


def catalog_from_config(config: Config) -> VocabularyCatalog:
    """Return the default catalog extended with the config's ``vocabularies``."""
    catalog = DEFAULT_CATALOG.copy()
    catalog.update_from_dict(config.vocabularies)
    return catalog
