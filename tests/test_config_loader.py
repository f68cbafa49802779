"""
Unit tests for the YAML configuration loader.
"""

import pytest

from backend_bootstrap.config import Configuration, load_configuration
from backend_bootstrap.core import ConfigurationException

pytestmark = pytest.mark.unit


# =============================================================================
# File discovery
# =============================================================================


class TestLoadConfiguration:
    """Tests for locating and parsing the configuration file."""

    def test_loads_yaml_file(self, tmp_path, write_config):
        path = write_config("database:\n  dsn: \"sqlite://\"\n")

        config = load_configuration(paths=[tmp_path / "config"])

        assert config.get_string("database.dsn") == "sqlite://"
        assert config.config_file == path

    def test_falls_back_to_yml_extension(self, tmp_path, write_config):
        write_config("rabbitmq:\n  url: memory://\n", filename="config.yml")

        config = load_configuration(paths=[tmp_path / "config"])

        assert config.get_string("rabbitmq.url") == "memory://"

    def test_falls_back_to_file_without_extension(self, tmp_path, write_config):
        write_config("redis:\n  db: 4\n", filename="config")

        config = load_configuration(paths=[tmp_path / "config"])

        assert config.get_int("redis.db") == 4

    def test_first_search_path_wins(self, tmp_path, write_config):
        write_config("redis:\n  db: 1\n", directory="first")
        write_config("redis:\n  db: 2\n", directory="second")

        config = load_configuration(paths=[tmp_path / "first", tmp_path / "second"])

        assert config.get_int("redis.db") == 1

    def test_skips_paths_without_the_file(self, tmp_path, write_config):
        write_config("redis:\n  db: 2\n", directory="second")

        config = load_configuration(paths=[tmp_path / "missing", tmp_path / "second"])

        assert config.get_int("redis.db") == 2

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigurationException) as exc_info:
            load_configuration(paths=[tmp_path / "config"])

        assert "not found" in exc_info.value.message
        assert exc_info.value.details["name"] == "config"

    def test_malformed_yaml_raises(self, tmp_path, write_config):
        write_config("database: [unclosed\n")

        with pytest.raises(ConfigurationException) as exc_info:
            load_configuration(paths=[tmp_path / "config"])

        assert "cannot parse" in exc_info.value.message

    def test_non_mapping_document_raises(self, tmp_path, write_config):
        write_config("- one\n- two\n")

        with pytest.raises(ConfigurationException):
            load_configuration(paths=[tmp_path / "config"])

    def test_empty_document_gives_empty_configuration(self, tmp_path, write_config):
        write_config("")

        config = load_configuration(paths=[tmp_path / "config"])

        assert config.is_set("database.dsn") is False

    def test_unsupported_type_raises(self, tmp_path, write_config):
        write_config("database:\n  dsn: x\n")

        with pytest.raises(ConfigurationException):
            load_configuration(paths=[tmp_path / "config"], config_type="json")

    def test_custom_name(self, tmp_path, write_config):
        write_config("database:\n  dsn: x\n", filename="backends.yaml")

        config = load_configuration(name="backends", paths=[tmp_path / "config"])

        assert config.get_string("database.dsn") == "x"


# =============================================================================
# Key lookups
# =============================================================================


class TestConfigurationLookups:
    """Tests for dotted key-path lookups."""

    @pytest.fixture
    def config(self):
        return Configuration.from_mapping({
            "database": {"dsn": "root:pw@tcp(127.0.0.1:3306)/app"},
            "Redis": {"Addr": "cache:6379", "password": "0123", "db": 7, "port": "6380"},
            "flags": {"enabled": True, "ratio": 0.5},
            "nested": {"section": {"key": "value"}},
        })

    def test_values_round_trip_literally(self, tmp_path, write_config):
        write_config(
            "database:\n"
            "  dsn: \"user:p@ss@tcp(db:3306)/app?charset=utf8mb4\"\n"
            "redis:\n"
            "  password: \"0123\"\n"
            "  db: 15\n"
        )

        config = load_configuration(paths=[tmp_path / "config"])

        assert config.get_string("database.dsn") == "user:p@ss@tcp(db:3306)/app?charset=utf8mb4"
        assert config.get_string("redis.password") == "0123"
        assert config.get("redis.db") == 15
        assert config.get_int("redis.db") == 15

    def test_keys_are_case_insensitive(self, config):
        assert config.get_string("redis.addr") == "cache:6379"
        assert config.get_string("REDIS.ADDR") == "cache:6379"

    def test_nested_lookup(self, config):
        assert config.get_string("nested.section.key") == "value"

    def test_get_returns_default_for_missing_key(self, config):
        assert config.get("missing.key") is None
        assert config.get("missing.key", "fallback") == "fallback"

    def test_get_string_missing_key_raises(self, config):
        with pytest.raises(ConfigurationException) as exc_info:
            config.get_string("rabbitmq.url")

        assert exc_info.value.details["key"] == "rabbitmq.url"

    def test_get_string_missing_key_with_default(self, config):
        assert config.get_string("rabbitmq.url", "") == ""

    def test_get_string_renders_numbers(self, config):
        assert config.get_string("redis.db") == "7"

    def test_get_string_rejects_mapping(self, config):
        with pytest.raises(ConfigurationException):
            config.get_string("nested.section")

    def test_get_string_rejects_bool(self, config):
        with pytest.raises(ConfigurationException):
            config.get_string("flags.enabled")

    def test_get_int_parses_decimal_string(self, config):
        assert config.get_int("redis.port") == 6380

    def test_get_int_rejects_text(self, config):
        with pytest.raises(ConfigurationException):
            config.get_int("redis.addr")

    def test_get_int_rejects_bool_and_float(self, config):
        with pytest.raises(ConfigurationException):
            config.get_int("flags.enabled")
        with pytest.raises(ConfigurationException):
            config.get_int("flags.ratio")

    def test_get_int_missing_key_with_default(self, config):
        assert config.get_int("cache.db", 0) == 0

    def test_lookup_through_scalar_is_missing(self, config):
        assert config.is_set("database.dsn.host") is False

    def test_from_mapping_has_no_file(self, config):
        assert config.config_file is None

    def test_source_mapping_is_not_shared(self):
        source = {"redis": {"db": 1}}
        config = Configuration.from_mapping(source)

        source["redis"]["db"] = 2

        assert config.get_int("redis.db") == 1
