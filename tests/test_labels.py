"""Tests for labels module."""
from __future__ import annotations

from pyoxigraph import BlankNode, Literal, NamedNode

from linked_vocabs.labels import LabelSelector, filter_by_language
from linked_vocabs.namespaces import DC_TITLE, RDFS_LABEL, SKOS_ALT_LABEL, SKOS_PREF_LABEL

SCHEMA_NAME = "http://schema.org/name"


class FakeRecord:
    """Minimal record: an identifier and literal values per predicate."""

    def __init__(self, subject=None, values=None):
        self.subject = subject
        self.values = values or {}

    def get_values(self, predicate, literal=False):
        return list(self.values.get(predicate, []))


class TestFilterByLanguage:
    """Tests for filter_by_language."""

    def test_exact_tag_only(self):
        """Test that only literals tagged with the language are kept."""
        values = [Literal("Cat", language="en"), Literal("Color", language="en-us"), Literal("Chat")]
        assert filter_by_language(values, "en") == [Literal("Cat", language="en")]
        assert filter_by_language(values, "fr") == []

    def test_ignores_case(self):
        """Test that tags are compared without case."""
        values = [Literal("Color", language="en-US"), Literal("Farbe", language="de")]
        assert filter_by_language(values, "EN-us") == [Literal("Color", language="en-us")]


class TestSelectLabel:
    """Tests for LabelSelector.select."""

    def test_preferred_language_wins(self):
        """Test that English is chosen over other languages."""
        record = FakeRecord(
            NamedNode("http://example.org/cat"),
            {SKOS_PREF_LABEL: [Literal("Cat", language="en"), Literal("Gato", language="es")]},
        )
        assert LabelSelector().select(record) == ["Cat"]

    def test_second_preferred_language(self):
        """Test falling back to en-us when no plain en label exists."""
        record = FakeRecord(
            NamedNode("http://example.org/color"),
            {SKOS_PREF_LABEL: [Literal("Colour", language="fr"), Literal("Color", language="en-us")]},
        )
        assert LabelSelector().select(record) == ["Color"]

    def test_all_values_without_preferred_language(self):
        """Test that all values are returned when no preferred language is present."""
        record = FakeRecord(
            NamedNode("http://example.org/cat"),
            {SKOS_PREF_LABEL: [Literal("Gato", language="es"), Literal("Chat", language="fr")]},
        )
        assert LabelSelector().select(record) == ["Gato", "Chat"]

    def test_all_matching_values_in_language(self):
        """Test that every value in the winning language is returned."""
        record = FakeRecord(
            NamedNode("http://example.org/cat"),
            {RDFS_LABEL: [Literal("Cat", language="en"), Literal("Kitty", language="en"), Literal("Gato", language="es")]},
        )
        assert LabelSelector().select(record) == ["Cat", "Kitty"]

    def test_declared_predicate_first(self):
        """Test that class-declared predicates are tried before the defaults."""
        record = FakeRecord(
            NamedNode("http://example.org/cat"),
            {
                SKOS_PREF_LABEL: [Literal("Cat", language="en")],
                SCHEMA_NAME: [Literal("Felis catus")],
            },
        )
        assert LabelSelector([SCHEMA_NAME]).select(record) == ["Felis catus"]

    def test_next_predicate_when_empty(self):
        """Test that predicates without values are skipped."""
        record = FakeRecord(
            NamedNode("http://example.org/cat"),
            {DC_TITLE: [Literal("Cats")], SKOS_ALT_LABEL: [Literal("Kitties", language="en")]},
        )
        assert LabelSelector([SCHEMA_NAME]).select(record) == ["Cats"]

    def test_custom_preferred_languages(self):
        """Test that configured languages replace the default order."""
        record = FakeRecord(
            NamedNode("http://example.org/cat"),
            {SKOS_PREF_LABEL: [Literal("Cat", language="en"), Literal("Katze", language="de")]},
        )
        assert LabelSelector(preferred_languages=["de", "en"]).select(record) == ["Katze"]

    def test_identifier_when_no_labels(self):
        """Test that the identifier is used when there are no labels."""
        record = FakeRecord(NamedNode("http://example.org/cat"))
        assert LabelSelector().select(record) == ["http://example.org/cat"]

    def test_empty_for_blank_node(self):
        """Test that an anonymous record without labels has no label."""
        assert LabelSelector().select(FakeRecord(BlankNode())) == []

    def test_empty_without_identifier(self):
        """Test that a record without identifier or labels has no label."""
        assert LabelSelector().select(FakeRecord(None)) == []

    def test_predicates_deduplicated(self):
        """Test that a declared default predicate is visited once, in declared position."""
        selector = LabelSelector([SKOS_PREF_LABEL, SCHEMA_NAME])
        assert selector.predicates.count(SKOS_PREF_LABEL) == 1
        assert selector.predicates[:2] == [SKOS_PREF_LABEL, SCHEMA_NAME]

    def test_does_not_mutate_record(self):
        """Test that selection leaves the record values untouched."""
        values = {SKOS_PREF_LABEL: [Literal("Cat", language="en"), Literal("Gato", language="es")]}
        record = FakeRecord(NamedNode("http://example.org/cat"), values)
        LabelSelector().select(record)
        assert len(record.values[SKOS_PREF_LABEL]) == 2

    def test_preferred_language_case_insensitive(self):
        """Test that a configured region tag matches pyoxigraph's lower-cased tags."""
        record = FakeRecord(
            NamedNode("http://example.org/color"),
            {SKOS_PREF_LABEL: [Literal("Color", language="en-US"), Literal("Farbe", language="de")]},
        )
        assert LabelSelector(preferred_languages=["en-US"]).select(record) == ["Color"]

