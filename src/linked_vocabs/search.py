"""
Keyword search over the backing store, scoped to registered vocabularies.

Not a very smart search: literals starting with the query are looked up
first, and only if there are none does a (more expensive) substring search
run. Matches on label predicates win over incidental literal matches.

Example:
    >>> search = VocabularySearch(registry, store)
    >>> search.search("coll")
    [SearchHit(id='http://purl.org/dc/dcmitype/Collection', label='Collection')]
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .namespaces import SEARCH_LABEL_PREDICATES
from .registry import VocabularyRegistry
from .store import Store

logger = logging.getLogger(__name__)

STARTS_QUERY = (
    "SELECT DISTINCT ?s ?p ?o WHERE {{ ?s ?p ?o . "
    'FILTER(isLiteral(?o) && STRSTARTS(LCASE(STR(?o)), "{q}")) }}'
)
CONTAINS_QUERY = (
    "SELECT DISTINCT ?s ?p ?o WHERE {{ ?s ?p ?o . "
    'FILTER(isLiteral(?o) && CONTAINS(LCASE(STR(?o)), "{q}")) }}'
)

_SPARQL_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def sparql_string(text: str) -> str:
    """Escape ``text`` for use inside a double-quoted SPARQL string literal."""
    return "".join(_SPARQL_ESCAPES.get(c, c) for c in text)


@dataclass(frozen=True)
class SearchHit:
    """A search result: subject identifier and the matching label."""

    id: str
    label: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "label": self.label}


class VocabularySearch:
    """Search a store for terms of the vocabularies in ``registry``."""

    def __init__(
        self,
        registry: VocabularyRegistry,
        store: Store,
        label_predicates: Sequence[str] = (),
    ):
        self.registry = registry
        self.store = store
        self.label_predicates = list(label_predicates)
        self.response: list[SearchHit] = []

    @property
    def priority_predicates(self) -> list[str]:
        return list(dict.fromkeys([*SEARCH_LABEL_PREDICATES, *self.label_predicates]))

    def search(self, q: str, sub_authority: str | None = None) -> list[SearchHit]:
        """Return hits for ``q``, trying a prefix match before a substring match.

        Store errors propagate unchanged.
        """
        self.response = self._starts_search(q)
        if not self.response:
            logger.debug("No prefix matches for %r, trying substring search", q)
            self.response = self._contains_search(q)
        return self.response

    def results(self) -> list[SearchHit]:
        return self.response

    def get_full_record(self, id: str, sub_authority: str | None = None) -> None:
        """Extension point for authorities that can return a full record."""
        return None

    def _starts_search(self, q: str) -> list[SearchHit]:
        rows = self.store.query(STARTS_QUERY.format(q=sparql_string(q.lower())))
        return self.hits_from_solutions(rows)

    def _contains_search(self, q: str) -> list[SearchHit]:
        rows = self.store.query(CONTAINS_QUERY.format(q=sparql_string(q.lower())))
        return self.hits_from_solutions(rows)

    def hits_from_solutions(self, rows: Iterable[dict]) -> list[SearchHit]:
        """Turn query rows into unique hits on in-vocabulary subjects.

        If any row matched on a label predicate, only those rows are used.
        """
        solutions = [
            row for row in rows
            if "s" in row and self.registry.uses_vocab_prefix(row["s"]["value"])
        ]
        priority = set(self.priority_predicates)
        label_solutions = [row for row in solutions if row["p"]["value"] in priority]
        if label_solutions:
            return _unique(build_hit(row) for row in label_solutions)
        return _unique(build_hit(row) for row in solutions)


def build_hit(row: dict) -> SearchHit:
    return SearchHit(id=row["s"]["value"], label=row["o"]["value"])


def _unique(hits: Iterable[SearchHit]) -> list[SearchHit]:
    return list(dict.fromkeys(hits))
