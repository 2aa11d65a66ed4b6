"""
Tests for the CLI configuration manager.
"""

import json

import pytest
import yaml

from addresses.models import Network
from cli import config as config_module
from cli.config import DEFAULT_CONFIG, PROFILES, ConfigurationManager


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keep real config files and XCPV_ variables out of the tests."""
    monkeypatch.setattr(config_module, "CONFIG_SEARCH_PATHS", [])
    for key in list(config_module.os.environ):
        if key.startswith(config_module.ENV_PREFIX):
            monkeypatch.delenv(key)


class TestDefaults:
    """Test loading without any overrides."""

    def test_defaults_only(self):
        manager = ConfigurationManager()

        assert manager.load() == DEFAULT_CONFIG
        assert manager.get_sources() == ["defaults"]

    def test_load_does_not_mutate_defaults(self):
        manager = ConfigurationManager()
        manager.set("memo.max_bytes", 10)

        assert DEFAULT_CONFIG["memo"]["max_bytes"] == 34

    def test_default_settings(self):
        settings = ConfigurationManager().settings()

        assert settings.network.expected is None
        assert settings.amounts.allow_dust is True


class TestProfiles:
    """Test profile overlays."""

    @pytest.mark.parametrize("profile", sorted(PROFILES))
    def test_profile_sets_network(self, profile):
        manager = ConfigurationManager(profile=profile)

        assert manager.get("network.expected") == profile
        assert manager.get_sources() == ["defaults", f"profile:{profile}"]

    def test_mainnet_profile_rejects_dust(self):
        assert ConfigurationManager(profile="mainnet").get("amounts.allow_dust") is False

    def test_regtest_profile_lowers_min_fee(self):
        settings = ConfigurationManager(profile="regtest").settings()

        assert settings.network.expected is Network.REGTEST
        assert settings.fees.min_rate == 0.1

    def test_unknown_profile(self):
        with pytest.raises(ValueError, match="Unknown profile"):
            ConfigurationManager(profile="signet").load()


class TestConfigFiles:
    """Test YAML and JSON configuration files."""

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "xcpv.yml"
        path.write_text(yaml.safe_dump({"memo": {"max_bytes": 80}}))

        manager = ConfigurationManager(config_file=str(path))

        assert manager.get("memo.max_bytes") == 80
        assert manager.get("memo.allow_hex") is True
        assert manager.get_sources() == ["defaults", f"file:{path}"]

    def test_json_file(self, tmp_path):
        path = tmp_path / "xcpv.json"
        path.write_text(json.dumps({"fees": {"max_rate": 250}}))

        assert ConfigurationManager(config_file=str(path)).settings().fees.max_rate == 250

    def test_empty_yaml_file(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("")

        assert ConfigurationManager(config_file=str(path)).load() == DEFAULT_CONFIG

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigurationManager(config_file=str(tmp_path / "missing.yml")).load()

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("- 1\n- 2\n")

        with pytest.raises(ValueError, match="mapping"):
            ConfigurationManager(config_file=str(path)).load()

    def test_unknown_extension(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("")

        with pytest.raises(ValueError, match="Unknown config file format"):
            ConfigurationManager(config_file=str(path)).load()

    def test_search_paths(self, tmp_path, monkeypatch):
        first = tmp_path / "first.yml"
        second = tmp_path / "second.yml"
        first.write_text(yaml.safe_dump({"cli": {"output_format": "json"}}))
        second.write_text(yaml.safe_dump({"cli": {"output_format": "yaml"}}))
        monkeypatch.setattr(config_module, "CONFIG_SEARCH_PATHS", [tmp_path / "none.yml", first, second])

        assert ConfigurationManager().get("cli.output_format") == "json"

    def test_file_overrides_profile(self, tmp_path):
        path = tmp_path / "xcpv.yml"
        path.write_text(yaml.safe_dump({"network": {"expected": "mainnet"}}))

        manager = ConfigurationManager(config_file=str(path), profile="testnet")
        assert manager.get("network.expected") == "mainnet"


class TestEnvironment:
    """Test XCPV_ environment overrides."""

    def test_nested_values(self, monkeypatch):
        monkeypatch.setenv("XCPV_AMOUNTS__ALLOW_DUST", "false")
        monkeypatch.setenv("XCPV_FEES__MAX_RATE", "500")

        manager = ConfigurationManager()

        assert manager.get("amounts.allow_dust") is False
        assert manager.get("fees.max_rate") == 500
        assert manager.get_sources() == ["defaults", "environment"]

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "xcpv.yml"
        path.write_text(yaml.safe_dump({"memo": {"max_bytes": 80}}))
        monkeypatch.setenv("XCPV_MEMO__MAX_BYTES", "40")

        assert ConfigurationManager(config_file=str(path)).get("memo.max_bytes") == 40

    def test_malformed_variable_ignored(self, monkeypatch):
        monkeypatch.setenv("XCPV_MEMO____MAX_BYTES", "40")

        assert ConfigurationManager().get("memo.max_bytes") == 34

    @pytest.mark.parametrize("raw,parsed", [
        ("true", True),
        ("Yes", True),
        ("no", False),
        ("null", None),
        ("", None),
        ("42", 42),
        ("0.5", 0.5),
        ("testnet", "testnet"),
    ])
    def test_parse_env_value(self, raw, parsed):
        assert ConfigurationManager()._parse_env_value(raw) == parsed


class TestAccessors:
    """Test dot-path access and validation."""

    def test_get_missing_key(self):
        manager = ConfigurationManager()

        assert manager.get("memo.nope") is None
        assert manager.get("nope.deeper", "fallback") == "fallback"

    def test_set_creates_sections(self):
        manager = ConfigurationManager()
        manager.set("extra.value", 1)

        assert manager.get("extra.value") == 1

    def test_validate_ok(self):
        assert ConfigurationManager().validate() == []

    def test_validate_reports_errors(self):
        manager = ConfigurationManager()
        manager.set("fees.min_rate", 50)
        manager.set("fees.max_rate", 10)
        manager.set("cli.output_format", "xml")

        errors = manager.validate()

        assert len(errors) == 2
        assert errors[0].startswith("fees")
        assert errors[1] == "Invalid output format: xml"

    def test_reset_reloads(self, monkeypatch):
        manager = ConfigurationManager()
        manager.set("memo.max_bytes", 10)
        manager.reset()

        assert manager.get("memo.max_bytes") == 34
