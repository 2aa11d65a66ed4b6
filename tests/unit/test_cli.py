"""
Tests for the xcpv command line interface.
"""

import json

import pytest
import yaml
from click.testing import CliRunner

from cli import __version__
from cli import config as config_module
from cli.main import cli

P2PKH = "1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa"
P2WPKH = "bc1qw508d6qejxtdg4y5r3zarvary0c5xw7kv8f3t4"
TESTNET_P2WPKH = "tb1qw508d6qejxtdg4y5r3zarvary0c5xw7kxpjzsx"
P2PKH_SCRIPT = "76a914" + "11" * 20 + "88ac"


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    monkeypatch.setattr(config_module, "CONFIG_SEARCH_PATHS", [])
    for key in list(config_module.os.environ):
        if key.startswith(config_module.ENV_PREFIX):
            monkeypatch.delenv(key)


@pytest.fixture
def runner():
    return CliRunner()


def run_json(runner, *args):
    result = runner.invoke(cli, ["-o", "json", *args])
    return result, json.loads(result.output)


class TestCliGroup:
    """Test global options."""

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert result.output.strip() == f"xcpv v{__version__}"

    def test_help_lists_commands(self, runner):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("address", "asset", "amount", "send", "config"):
            assert command in result.output

    def test_table_output_is_default(self, runner):
        result = runner.invoke(cli, ["asset", "PEPECASH"])

        assert result.exit_code == 0
        assert result.output.startswith("is_valid")

    def test_yaml_output(self, runner):
        result = runner.invoke(cli, ["-o", "yaml", "fee", "10"])

        assert result.exit_code == 0
        assert yaml.safe_load(result.output)["is_valid"] is True

    def test_output_format_from_config_file(self, runner, tmp_path):
        path = tmp_path / "xcpv.yml"
        path.write_text(yaml.safe_dump({"cli": {"output_format": "json"}}))

        result = runner.invoke(cli, ["-c", str(path), "fee", "10"])

        assert result.exit_code == 0
        assert json.loads(result.output)["sats_per_byte"] == "10"


class TestValidationCommands:
    """Test the validation commands and their exit codes."""

    def test_address_valid(self, runner):
        result, data = run_json(runner, "address", P2WPKH)

        assert result.exit_code == 0
        assert data["address_format"] == "P2WPKH"
        assert data["network"] == "mainnet"

    def test_address_invalid(self, runner):
        result, data = run_json(runner, "address", "not-an-address")

        assert result.exit_code == 1
        assert data["is_valid"] is False
        assert "error" in data

    def test_address_network_option(self, runner):
        result, data = run_json(runner, "address", P2WPKH, "--network", "testnet")

        assert result.exit_code == 1
        assert data["error"] == "Address is for mainnet, expected testnet"

    def test_address_profile(self, runner):
        result = runner.invoke(cli, ["--profile", "testnet", "-o", "json", "address", TESTNET_P2WPKH])

        assert result.exit_code == 0

    def test_script(self, runner):
        result, data = run_json(runner, "script", P2PKH_SCRIPT)

        assert result.exit_code == 0
        assert data["script_type"] == "P2PKH"

    def test_script_bad_hex(self, runner):
        result, data = run_json(runner, "script", "zz")

        assert result.exit_code == 1
        assert data["error"] == "Script must be valid hexadecimal"

    def test_asset(self, runner):
        assert run_json(runner, "asset", "PEPECASH")[0].exit_code == 0
        assert run_json(runner, "asset", "BTC")[0].exit_code == 1

    def test_subasset(self, runner):
        result, _ = run_json(runner, "asset", "PEPECASH.card", "--subasset")

        assert result.exit_code == 0

    def test_amount(self, runner):
        result, data = run_json(runner, "amount", "0.5")

        assert result.exit_code == 0
        assert data["satoshis"] == 50_000_000
        assert data["normalized"] == "0.50000000"

    def test_amount_satoshis(self, runner):
        result, data = run_json(runner, "amount", "1000", "--unit", "satoshis")

        assert result.exit_code == 0
        assert data["satoshis"] == 1000

    def test_amount_dust_flag(self, runner):
        assert run_json(runner, "amount", "0.000001")[0].exit_code == 0
        assert run_json(runner, "amount", "0.000001", "--no-dust")[0].exit_code == 1

    def test_amount_mainnet_profile_rejects_dust(self, runner):
        result = runner.invoke(cli, ["--profile", "mainnet", "-o", "json", "amount", "0.000001"])

        assert result.exit_code == 1

    def test_amount_injection(self, runner):
        result, data = run_json(runner, "amount", "=1+1")

        assert result.exit_code == 1
        assert data["error_kind"] == "injection"

    def test_quantity_indivisible(self, runner):
        assert run_json(runner, "quantity", "5")[0].exit_code == 0
        assert run_json(runner, "quantity", "1.5", "--indivisible")[0].exit_code == 1

    def test_memo(self, runner):
        result, data = run_json(runner, "memo", "0xcafe")

        assert result.exit_code == 0
        assert data["is_hex"] is True
        assert data["byte_length"] == 2

    def test_memo_too_long(self, runner):
        result, _ = run_json(runner, "memo", "x" * 35)

        assert result.exit_code == 1

    def test_qr(self, runner):
        result, data = run_json(runner, "qr", "bitcoin:" + P2PKH + "?amount=0.5")

        assert result.exit_code == 0
        assert data["sanitized_text"] == "bitcoin:" + P2PKH + "?amount=0.5"

    def test_qr_dangerous_url(self, runner):
        result, data = run_json(runner, "qr", "javascript:alert(1)")

        assert result.exit_code == 1
        assert data["error_kind"] == "injection"

    def test_fee(self, runner):
        assert run_json(runner, "fee", "10")[0].exit_code == 0
        assert run_json(runner, "fee", "5000")[0].exit_code == 1

    def test_complexity(self, runner):
        result, data = run_json(runner, "complexity", P2PKH_SCRIPT)

        assert result.exit_code == 0
        assert data["complexity"] == 75

    def test_pack_and_unpack(self, runner):
        result, data = run_json(runner, "pack", P2PKH)

        assert result.exit_code == 0
        assert data["packed"] == "0062e907b15cbf27d5425399ebf6f0fb50ebb88f18"
        assert data["segwit"] is False

        result, data = run_json(runner, "unpack", data["packed"])
        assert result.exit_code == 0
        assert data["address"] == P2PKH

    def test_unpack_bad_hex(self, runner):
        result, data = run_json(runner, "unpack", "xyz")

        assert result.exit_code == 1
        assert data["error"] == "Packed address must be valid hexadecimal"

    def test_send(self, runner):
        result, data = run_json(runner, "send", P2PKH, "XCP", "10", "--fee-rate", "5")

        assert result.exit_code == 0
        assert set(data["fields"]) == {"destination", "asset", "quantity", "fee_rate"}

    def test_send_invalid(self, runner):
        result, data = run_json(runner, "send", P2PKH, "PEPECASH", "1.5", "--indivisible")

        assert result.exit_code == 1
        assert data["is_valid"] is False
        assert data["fields"]["quantity"]["is_valid"] is False


class TestConfigCommands:
    """Test the config command group."""

    def test_get(self, runner):
        result = runner.invoke(cli, ["config", "get", "memo.max_bytes"])

        assert result.exit_code == 0
        assert result.output.strip() == "34"

    def test_get_bool(self, runner):
        result = runner.invoke(cli, ["--profile", "mainnet", "config", "get", "amounts.allow_dust"])

        assert result.output.strip() == "false"

    def test_get_missing(self, runner):
        result = runner.invoke(cli, ["config", "get", "memo.nope"])

        assert result.exit_code == 1
        assert "Configuration key not found: memo.nope" in result.output

    def test_sources(self, runner):
        result = runner.invoke(cli, ["-o", "json", "--profile", "regtest", "config", "sources"])

        assert json.loads(result.output) == ["defaults", "profile:regtest"]

    def test_show_section(self, runner):
        result = runner.invoke(cli, ["-o", "json", "config", "show", "--key", "fees"])

        assert json.loads(result.output) == {"min_rate": 1, "max_rate": 1000}

    def test_validate(self, runner, monkeypatch):
        result = runner.invoke(cli, ["config", "validate"])
        assert result.exit_code == 0
        assert "Configuration is valid" in result.output

        monkeypatch.setenv("XCPV_FEES__MIN_RATE", "5000")
        result = runner.invoke(cli, ["config", "validate"])
        assert result.exit_code == 1

    def test_list_profiles(self, runner):
        result = runner.invoke(cli, ["-o", "json", "config", "list-profiles"])

        assert set(json.loads(result.output)) == {"mainnet", "testnet", "regtest"}

    def test_init(self, runner, tmp_path):
        path = tmp_path / "out.yml"

        result = runner.invoke(cli, ["config", "init", "--profile", "testnet", "--output", str(path)])
        assert result.exit_code == 0
        assert yaml.safe_load(path.read_text())["network"]["expected"] == "testnet"

        result = runner.invoke(cli, ["config", "init", "--output", str(path)])
        assert result.exit_code == 1
        assert "already exists" in result.output
