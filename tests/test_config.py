"""Tests for config module."""
import json
from pathlib import Path
from unittest.mock import patch

import pytest

from linked_vocabs import config
from linked_vocabs.catalog import catalog_from_config


class TestFindConfigFile:
    """Tests for find_config_file function."""

    def test_find_config_in_cwd_json(self, tmp_path, monkeypatch):
        """Test finding config file in current directory (JSON)."""
        monkeypatch.chdir(tmp_path)
        config_file = tmp_path / "linked-vocabs.json"
        config_file.write_text('{"test": true}')

        with patch.object(config, '_get_config_dirs', return_value=[tmp_path]):
            result = config.find_config_file()
        assert result == config_file

    def test_find_config_in_cwd_yaml_preferred(self, tmp_path, monkeypatch):
        """Test that YAML is preferred over JSON in same directory."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "linked-vocabs.json").write_text('{"test": "json"}')
        yaml_file = tmp_path / "linked-vocabs.yaml"
        yaml_file.write_text('test: yaml')

        with patch.object(config, '_get_config_dirs', return_value=[tmp_path]):
            result = config.find_config_file()
        assert result == yaml_file

    def test_later_locations_have_priority(self, tmp_path, monkeypatch):
        """Test that the cwd config wins over the user config."""
        cwd = tmp_path / "project"
        cwd.mkdir()
        monkeypatch.chdir(cwd)
        user_dir = tmp_path / ".config" / "linked-vocabs"
        user_dir.mkdir(parents=True)
        user_file = user_dir / "config.json"
        user_file.write_text('{"timeout": 1}')
        cwd_file = cwd / "config.json"
        cwd_file.write_text('{"timeout": 2}')

        with patch.object(config, '_get_config_dirs', return_value=[user_dir, cwd]):
            assert config.find_config_files() == [user_file, cwd_file]
            assert config.find_config_file() == cwd_file

    def test_find_config_returns_none_when_not_found(self, tmp_path, monkeypatch):
        """Test that None is returned when no config file exists."""
        monkeypatch.chdir(tmp_path)

        with patch.object(config, '_get_config_dirs', return_value=[tmp_path]):
            result = config.find_config_file()

        assert result is None


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_simple_merge(self):
        """Test merging flat dictionaries."""
        base = {"a": 1, "b": 2}
        result = config._deep_merge(base, {"b": 3, "c": 4})

        assert result == {"a": 1, "b": 3, "c": 4}
        assert result is base  # Modified in place

    def test_nested_merge(self):
        """Test merging nested dictionaries."""
        base = {"store": {"path": None, "endpoint": None}}
        result = config._deep_merge(base, {"store": {"endpoint": "http://example.org/sparql"}})

        assert result == {"store": {"path": None, "endpoint": "http://example.org/sparql"}}

    def test_defaults_not_mutated(self, tmp_path):
        """Test that loading config never changes DEFAULTS."""
        config_file = tmp_path / "config.json"
        config_file.write_text('{"labels": {"preferred_languages": ["de"]}}')
        config.load_config(config_file)
        assert config.DEFAULTS["labels"]["preferred_languages"] == ["en", "en-us"]


class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_json_config(self, tmp_path):
        """Test loading JSON config file."""
        config_file = tmp_path / "config.json"
        config_file.write_text('{"use_vocabularies": ["dcmitype"], "cache": {"ttl_days": 7}}')

        result = config.load_config(config_file)

        assert result["use_vocabularies"] == ["dcmitype"]
        assert result["cache"]["ttl_days"] == 7
        assert result["cache"]["dir"] is None  # From defaults

    def test_load_yaml_config(self, tmp_path):
        """Test loading YAML config file."""
        pytest.importorskip("yaml")
        config_file = tmp_path / "config.yaml"
        config_file.write_text("labels:\n  preferred_languages: [de, en]\n")

        result = config.load_config(config_file)
        assert result["labels"]["preferred_languages"] == ["de", "en"]
        assert result["labels"]["predicates"] == []

    def test_load_config_missing_explicit_file(self, tmp_path):
        """Test that a missing explicit file yields defaults."""
        result = config.load_config(tmp_path / "missing.json")
        assert result["timeout"] == 30.0
        assert result["labels"]["preferred_languages"] == ["en", "en-us"]


class TestEnvOverrides:
    """Tests for environment variable overrides."""

    def test_nested_env_override(self, tmp_path, monkeypatch):
        """Test nested environment variable override with double underscore."""
        config_file = tmp_path / "config.json"
        config_file.write_text("{}")

        monkeypatch.setenv("LINKED_VOCABS_STORE__ENDPOINT", "http://example.org/sparql")

        result = config.load_config(config_file)
        assert result["store"]["endpoint"] == "http://example.org/sparql"

    def test_list_env_override(self, tmp_path, monkeypatch):
        """Test that list keys are split on commas."""
        config_file = tmp_path / "config.json"
        config_file.write_text("{}")

        monkeypatch.setenv("LINKED_VOCABS_USE_VOCABULARIES", "dcmitype, lcsh")

        result = config.load_config(config_file)
        assert result["use_vocabularies"] == ["dcmitype", "lcsh"]

    def test_env_override_boolean(self, tmp_path, monkeypatch):
        """Test boolean environment values."""
        config_file = tmp_path / "config.json"
        config_file.write_text("{}")

        monkeypatch.setenv("LINKED_VOCABS_DEBUG", "true")
        assert config.load_config(config_file)["debug"] is True


class TestConvertValue:
    """Tests for _convert_value function."""

    def test_convert_numbers(self):
        """Test numeric conversion."""
        assert config._convert_value("123") == 123
        assert config._convert_value("1") == 1
        assert config._convert_value("3.14") == 3.14

    def test_convert_boolean(self):
        """Test boolean conversion."""
        assert config._convert_value("True") is True
        assert config._convert_value("yes") is True
        assert config._convert_value("false") is False

    def test_convert_string(self):
        """Test that other strings are kept."""
        assert config._convert_value("hello") == "hello"
        assert config._convert_value("http://example.org/sparql") == "http://example.org/sparql"


class TestConfigClass:
    """Tests for Config class."""

    def test_config_defaults(self, tmp_path, monkeypatch):
        """Test Config with no file uses defaults."""
        monkeypatch.chdir(tmp_path)

        with patch.object(config, '_get_config_dirs', return_value=[tmp_path]):
            cfg = config.Config()

        assert cfg.path is None
        assert cfg.preferred_languages == ["en", "en-us"]
        assert cfg.label_predicates == []
        assert cfg.use_vocabularies == []
        assert cfg.store_path is None
        assert cfg.store_endpoint is None
        assert cfg.cache_dir == Path.home() / ".cache" / "linked-vocabs"
        assert cfg.cache_ttl_seconds == 30 * 24 * 60 * 60

    def test_config_properties(self, tmp_path):
        """Test Config convenience properties."""
        config_file = tmp_path / "my-config.json"
        config_file.write_text(json.dumps({
            "timeout": 5,
            "use_vocabularies": "dcmitype",
            "labels": {"preferred_languages": "de", "predicates": ["http://schema.org/name"]},
            "store": {"path": "/var/lib/vocabs", "data": "/data/types.ttl"},
            "cache": {"dir": "/tmp/vocab-cache", "ttl_days": 1},
        }))

        cfg = config.Config(config_file)

        assert cfg.path == config_file
        assert cfg.timeout == 5.0
        assert cfg.use_vocabularies == ["dcmitype"]
        assert cfg.preferred_languages == ["de"]
        assert cfg.label_predicates == ["http://schema.org/name"]
        assert cfg.store_path == Path("/var/lib/vocabs")
        assert cfg.store_data == [Path("/data/types.ttl")]
        assert cfg.cache_dir == Path("/tmp/vocab-cache")
        assert cfg.cache_ttl_seconds == 24 * 60 * 60

    def test_yaml_norwegian_language(self, tmp_path):
        """Test that YAML's bare 'no' is read as Norwegian."""
        pytest.importorskip("yaml")
        config_file = tmp_path / "config.yaml"
        config_file.write_text("labels:\n  preferred_languages: [nb, no]\n")

        assert config.Config(config_file).preferred_languages == ["nb", "no"]

    def test_catalog_from_config(self, tmp_path):
        """Test that config vocabularies extend the catalog."""
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({
            "vocabularies": {"widgets": {"prefix": "http://example.org/widgets/", "terms": ["gear"]}},
        }))

        catalog = catalog_from_config(config.Config(config_file))
        assert "widgets" in catalog
        assert "dcmitype" in catalog


class TestEnvValueTypes:
    """Tests for how environment values are typed per key."""

    def test_endpoint_with_comma_kept_whole(self, tmp_path, monkeypatch):
        """Test that a comma inside a URL does not split it."""
        config_file = tmp_path / "config.json"
        config_file.write_text("{}")
        endpoint = "http://example.org/sparql?default-graph-uri=a,b"

        monkeypatch.setenv("LINKED_VOCABS_STORE__ENDPOINT", endpoint)

        assert config.Config(config_file).store_endpoint == endpoint

    def test_single_item_list_key(self, tmp_path, monkeypatch):
        """Test that a list key without commas still gives a list."""
        config_file = tmp_path / "config.json"
        config_file.write_text("{}")

        monkeypatch.setenv("LINKED_VOCABS_LABELS__PREFERRED_LANGUAGES", "no")

        assert config.Config(config_file).preferred_languages == ["no"]
