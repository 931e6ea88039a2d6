"""
Exceptions raised by linked-vocabs.

Only configuration mistakes and backing-store failures are raised. Term
resolution never raises: unparseable identifiers and anonymous nodes are
reported through the returned ``Resolution`` instead.
"""


class LinkedVocabsError(Exception):
    """Base class for all linked-vocabs errors."""


class UnknownVocabulary(LinkedVocabsError, KeyError):
    """A vocabulary name was registered that the catalog does not define."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Vocabulary undefined: {str(name).upper()}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class StoreUnavailable(LinkedVocabsError):
    """The backing triple store could not answer a query or load a document."""
