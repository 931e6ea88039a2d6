"""
Term sources and identifier parsing.

A term source knows which term names a vocabulary defines. ``Vocabulary`` is
the implementation used by the catalog; anything with ``has_term`` and
``term_for`` can stand in for it.

Example:
    >>> dcmitype = Vocabulary("http://purl.org/dc/dcmitype/", ["Image", "Text"], strict=True)
    >>> dcmitype.has_term("Image")
    True
    >>> dcmitype.term_for("Image").value
    'http://purl.org/dc/dcmitype/Image'
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol, Union, runtime_checkable

from pyoxigraph import BlankNode, NamedNode

logger = logging.getLogger(__name__)

Identifier = Union[NamedNode, BlankNode, str]


@runtime_checkable
class TermSource(Protocol):
    """Capability every vocabulary term source provides.

    ``list_terms()`` and ``is_strict()`` are optional and looked up with
    ``getattr`` by callers.
    """

    def has_term(self, name: str) -> bool: ...

    def term_for(self, name: str) -> NamedNode: ...


class Vocabulary:
    """A namespace of terms, optionally closed to a known term list."""

    def __init__(self, namespace: str, terms: Iterable[str] = (), strict: bool = False):
        self.namespace = namespace
        self._terms: dict[str, None] = dict.fromkeys(terms)
        self._strict = strict

    def __repr__(self) -> str:
        kind = "strict" if self._strict else "open"
        return f"Vocabulary({self.namespace!r}, {len(self._terms)} terms, {kind})"

    def has_term(self, name: str) -> bool:
        """Return True if ``name`` is a term this vocabulary defines."""
        return name in self._terms

    def term_for(self, name: str) -> NamedNode:
        """Return the full identifier of term ``name``.

        Raises:
            KeyError: If the vocabulary is strict and does not define ``name``.
        """
        if self._strict and name not in self._terms:
            raise KeyError(f"{name!r} is not a term of {self.namespace}")
        return NamedNode(self.namespace + name)

    def list_terms(self) -> list[NamedNode]:
        return [NamedNode(self.namespace + name) for name in self._terms]

    def is_strict(self) -> bool:
        return self._strict


@dataclass(frozen=True)
class Parsed:
    """An identifier that parsed as a named or blank node."""

    term: NamedNode | BlankNode


@dataclass(frozen=True)
class Unparsed:
    """A value that is not a valid identifier; kept as its string form."""

    original: str


def parse_identifier(value: object) -> Parsed | Unparsed:
    """Interpret ``value`` as a full identifier.

    Strings of the form ``_:id`` become blank nodes, anything else is parsed
    as an absolute IRI. Invalid input is returned as ``Unparsed``.
    """
    if isinstance(value, (NamedNode, BlankNode)):
        return Parsed(value)
    text = str(value)
    try:
        if text.startswith("_:"):
            return Parsed(BlankNode(text[2:]))
        return Parsed(NamedNode(text))
    except ValueError as e:
        logger.debug("Not an identifier, keeping string %r: %s", text, e)
        return Unparsed(text)


def term_text(value: object) -> str:
    """Return the plain string form of a term (no N-Triples brackets)."""
    if isinstance(value, (NamedNode, BlankNode)):
        return value.value
    return str(value)
