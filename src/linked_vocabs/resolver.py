"""
Resolution of raw identifiers into vocabulary terms.

Given a candidate identifier (a plain string, an IRI, or a blank node) the
resolver decides which registered vocabulary it belongs to and which
canonical term to adopt in its place:

1. Blank nodes are rejected; an identity cannot be anchored to them.
2. The candidate is parsed as a full identifier where possible, otherwise
   its string form is kept.
3. Vocabularies are scanned in registration order. A prefix match on a
   non-strict vocabulary keeps the value as is; a prefix match on a strict
   vocabulary adopts the term for the remaining suffix when the vocabulary
   defines it. Where the prefix does not match, a value that is itself a
   term name of the vocabulary is remembered as a candidate.
4. The first candidate is adopted only if its identifier is confirmed by a
   registered prefix. Otherwise the original value passes through.

Resolution never raises.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from pyoxigraph import BlankNode, NamedNode

from .registry import VocabularyConfig, VocabularyRegistry
from .terms import Identifier, Parsed, parse_identifier, term_text

logger = logging.getLogger(__name__)


class ResolutionStatus(enum.Enum):
    REJECTED = "rejected"  # anonymous node input
    UNCHANGED = "unchanged"  # prefix of a non-strict vocabulary
    CANONICAL = "canonical"  # defined term of a strict vocabulary
    CANDIDATE = "candidate"  # bare term name, confirmed by prefix
    PASS_THROUGH = "pass-through"  # no vocabulary claimed it


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a candidate identifier.

    ``bound`` is True when the adopted value carries a registered
    vocabulary prefix.
    """

    value: NamedNode | str | None
    status: ResolutionStatus
    bound: bool = False

    @property
    def accepted(self) -> bool:
        return self.status is not ResolutionStatus.REJECTED

    @property
    def text(self) -> str | None:
        return None if self.value is None else term_text(self.value)


REJECTED = Resolution(value=None, status=ResolutionStatus.REJECTED)


class TermResolver:
    """Resolve candidate identifiers against a ``VocabularyRegistry``."""

    def __init__(self, registry: VocabularyRegistry):
        self.registry = registry

    def resolve(self, candidate: Identifier) -> Resolution:
        """Decide which identifier to adopt for ``candidate``."""
        if isinstance(candidate, BlankNode):
            logger.debug("Rejecting blank node %s", candidate)
            return REJECTED

        parsed = parse_identifier(candidate)
        if isinstance(parsed, Parsed):
            if isinstance(parsed.term, BlankNode):
                logger.debug("Rejecting blank node %s", parsed.term)
                return REJECTED
            value: NamedNode | str = parsed.term
        else:
            value = parsed.original

        text = term_text(value)
        candidates: list[NamedNode] = []
        for config in self.registry:
            if text.startswith(config.prefix):
                if not config.strict:
                    return self._adopt(value, ResolutionStatus.UNCHANGED)
                suffix = text[len(config.prefix):]
                if config.term_source.has_term(suffix):
                    return self._adopt(config.term_source.term_for(suffix), ResolutionStatus.CANONICAL)
                logger.debug("%r is not a term of strict vocabulary %s", suffix, config.name)
            elif config.term_source.has_term(text):
                # bare term name; only explicitly defined terms count
                candidates.append(config.term_source.term_for(text))

        if not candidates:
            return self._adopt(value, ResolutionStatus.PASS_THROUGH)
        return self._confirm_candidate(candidates[0], value)

    def _confirm_candidate(self, candidate: NamedNode, original: NamedNode | str) -> Resolution:
        """Adopt a term-name match only if a registered prefix claims it."""
        if not isinstance(candidate, BlankNode) and self.registry.uses_vocab_prefix(candidate):
            return Resolution(value=candidate, status=ResolutionStatus.CANDIDATE, bound=True)
        logger.debug("Candidate %s has no registered prefix; keeping %r", candidate, term_text(original))
        return Resolution(value=original, status=ResolutionStatus.PASS_THROUGH, bound=False)

    def _adopt(self, value: NamedNode | str, status: ResolutionStatus) -> Resolution:
        bound = self.registry.uses_vocab_prefix(value)
        logger.debug("Resolved %r as %s (bound=%s)", term_text(value), status.value, bound)
        return Resolution(value=value, status=status, bound=bound)

    def matching(self, subject: Identifier | None) -> VocabularyConfig | None:
        if subject is None or isinstance(subject, BlankNode):
            return None
        return self.registry.matching(subject)

    def in_vocab(self, subject: Identifier | None) -> bool:
        """Return True if ``subject`` is a term of one of the registered vocabularies.

        The bare namespace itself is not a term, and a strict vocabulary only
        admits the terms its source defines.
        """
        config = self.matching(subject)
        if config is None:
            return False
        text = term_text(subject)
        if text == config.prefix:
            return False
        if config.strict and not config.term_source.has_term(text[len(config.prefix):]):
            return False
        return True
