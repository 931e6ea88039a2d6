"""Tests for the package root."""
import linked_vocabs


class TestPackage:
    """Tests for the public API of the package root."""

    def test_public_names_importable(self):
        """Test that every exported name is available from the package root."""
        from linked_vocabs import ControlledClass, VocabularySearch, validate

        assert ControlledClass.__name__ == "ControlledClass"
        assert callable(validate)
        assert VocabularySearch.__name__ == "VocabularySearch"
        for name in linked_vocabs.__all__:
            assert hasattr(linked_vocabs, name), name

    def test_controlled_class_properties(self):
        """Test that ControlledClass exposes its vocabularies as a property."""
        places = linked_vocabs.ControlledClass("Place")
        places.use_vocabulary("geonames")
        assert list(places.vocabularies) == ["geonames"]
