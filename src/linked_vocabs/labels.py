"""
Display labels for resources under language preference.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Protocol

from pyoxigraph import BlankNode, Literal

from .namespaces import DEFAULT_LABEL_PREDICATES
from .terms import term_text

logger = logging.getLogger(__name__)

DEFAULT_PREFERRED_LANGUAGES = ("en", "en-us")


class LabeledRecord(Protocol):
    """What the selector needs from a record."""

    subject: object

    def get_values(self, predicate: str, literal: bool = False) -> list: ...


def filter_by_language(values: Iterable[Literal], language: str) -> list[Literal]:
    """Return the literals whose language tag is ``language``, ignoring case."""
    language = language.lower()
    return [v for v in values if (getattr(v, "language", None) or "").lower() == language]


class LabelSelector:
    """Pick the best display label of a record.

    Predicates are tried in order, the record class's own label predicates
    before the defaults. For the first predicate with any literal values,
    values in the first preferred language present are returned, or all of
    them when no preferred language is present.
    """

    def __init__(
        self,
        label_predicates: Sequence[str] = (),
        preferred_languages: Sequence[str] = DEFAULT_PREFERRED_LANGUAGES,
    ):
        self.label_predicates = list(label_predicates)
        # pyoxigraph normalizes language tags to lower case
        self.preferred_languages = [language.lower() for language in preferred_languages]

    @property
    def predicates(self) -> list[str]:
        """Declared predicates followed by the defaults, each visited once."""
        return list(dict.fromkeys([*self.label_predicates, *DEFAULT_LABEL_PREDICATES]))

    def label_with_preferred_language(self, record: LabeledRecord, predicate: str) -> list[str]:
        values = record.get_values(predicate, literal=True)
        for language in self.preferred_languages:
            result = filter_by_language(values, language)
            if result:
                return [v.value for v in result]
        return [v.value for v in values]

    def select(self, record: LabeledRecord) -> list[str]:
        for predicate in self.predicates:
            values = self.label_with_preferred_language(record, predicate)
            if values:
                return values
        subject = record.subject
        if subject is None or isinstance(subject, BlankNode):
            return []
        logger.debug("No label for %s, using its identifier", term_text(subject))
        return [term_text(subject)]
