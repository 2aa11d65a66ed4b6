"""
Tests for Validator Core Engine

Tests the ValidationEngine, its rule registry, settings handling and the
module-level send validation facade.
"""

import pydantic
import pytest

from addresses.models import Network
from core.exceptions import ErrorKind
from core.results import ValidationResult
from validator import (
    SendContext,
    ValidationEngine,
    ValidationReport,
    ValidationRule,
    ValidationSettings,
    create_default_validator,
    validate_send_params,
)

P2PKH = "1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa"
P2WPKH = "bc1qw508d6qejxtdg4y5r3zarvary0c5xw7kv8f3t4"
TESTNET_P2WPKH = "tb1qw508d6qejxtdg4y5r3zarvary0c5xw7kxpjzsx"
WALLET_ID = "ab" * 32


class TestValidationSettings:
    """Test the pydantic settings models."""

    def test_defaults(self, settings):
        assert settings.network.expected is None
        assert settings.amounts.unit == "btc"
        assert settings.fees.min_rate == 1
        assert settings.memo.max_bytes == 34
        assert settings.rate_limit.max_operations == 10

    def test_from_config_ignores_unknown_sections(self):
        settings = ValidationSettings.from_config({
            "network": {"expected": "TESTNET"},
            "cli": {"output_format": "json"},
        })

        assert settings.network.expected is Network.TESTNET

    def test_any_network(self):
        assert ValidationSettings.from_config({"network": {"expected": "any"}}).network.expected is None

    def test_fee_bounds_checked(self):
        with pytest.raises(pydantic.ValidationError):
            ValidationSettings.from_config({"fees": {"min_rate": 10, "max_rate": 5}})

    def test_memo_needs_an_encoding(self):
        with pytest.raises(pydantic.ValidationError):
            ValidationSettings.from_config({"memo": {"allow_hex": False, "allow_text": False}})

    def test_unknown_unit_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            ValidationSettings.from_config({"amounts": {"unit": "mbtc"}})

    def test_none_config(self):
        assert ValidationSettings.from_config(None) == ValidationSettings()


class TestValidationEngine:
    """Test send validation through the engine."""

    def test_valid_btc_send(self, engine):
        report = engine.validate_send(P2PKH, "BTC", "0.01")

        assert report.is_valid
        assert bool(report)
        assert set(report.results) == {"destination", "asset", "quantity"}
        assert report.results["quantity"].satoshis == 1_000_000

    def test_valid_asset_send_with_memo_and_fee(self, engine):
        report = engine.validate_send(P2WPKH, "PEPECASH", "10", memo="gm", fee_rate="5")

        assert report.is_valid
        assert set(report.results) == {"destination", "asset", "quantity", "memo", "fee_rate"}

    def test_all_bad_fields_reported(self, engine):
        report = engine.validate_send("nope", "ABC", "-1", fee_rate="0")

        assert not report.is_valid
        assert set(report.errors) == {"destination", "asset", "quantity", "fee_rate"}

    def test_indivisible_asset(self, engine):
        report = engine.validate_send(P2PKH, "PEPECASH", "1.5", divisible=False)

        assert report.errors == {"quantity": "Asset is not divisible - whole numbers only"}

    def test_xcp_is_sendable(self, engine):
        assert engine.validate_send(P2PKH, "XCP", "1").is_valid

    def test_subasset_send(self, engine):
        assert engine.validate_send(P2PKH, "PEPECASH.card", "1").is_valid

    def test_btc_dust_warning(self, engine):
        report = engine.validate_send(P2PKH, "BTC", "0.00000100")

        assert report.is_valid
        assert report.warnings == ["quantity: Amount is below the dust limit (546 satoshis)"]

    def test_expected_network(self, testnet_engine):
        assert testnet_engine.validate_send(TESTNET_P2WPKH, "XCP", "1").is_valid

        report = testnet_engine.validate_send(P2PKH, "XCP", "1")
        assert report.errors == {"destination": "Address is for mainnet, expected testnet"}

    def test_settings_flow_into_rules(self):
        engine = ValidationEngine(config={
            "amounts": {"allow_dust": False},
            "memo": {"max_bytes": 4},
            "fees": {"min_rate": 1, "max_rate": 20},
        })

        report = engine.validate_send(P2PKH, "BTC", "0.00000100", memo="hello", fee_rate="50")
        assert set(report.errors) == {"quantity", "memo", "fee_rate"}

    def test_report_to_dict(self, engine):
        data = engine.validate_send(P2PKH, "BTC", "1").to_dict()

        assert data["is_valid"] is True
        assert data["fields"]["destination"]["address_format"] == "P2PKH"
        assert data["fields"]["quantity"]["satoshis"] == 100_000_000

    def test_statistics(self, engine):
        engine.validate_send(P2PKH, "BTC", "1")
        engine.validate_send("bad", "BTC", "1")

        stats = engine.get_statistics()
        assert stats["total_validations"] == 2
        assert stats["approved_validations"] == 1
        assert stats["rejected_validations"] == 1
        assert stats["registered_rules"] == 5


class TestRuleRegistry:
    """Test rule registration."""

    class AlwaysFailRule(ValidationRule):
        def __init__(self):
            super().__init__(name="always_fail", field_name="custom", description="Fails every request")

        def validate(self, context, settings):
            return ValidationResult.fail("Custom rule failed")

    def test_register_custom_rule(self, engine):
        engine.register_rule(self.AlwaysFailRule())

        report = engine.validate_send(P2PKH, "BTC", "1")
        assert report.errors == {"custom": "Custom rule failed"}

    def test_register_replaces_same_name(self, engine):
        engine.register_rule(self.AlwaysFailRule())
        engine.register_rule(self.AlwaysFailRule())

        assert len(engine.rules) == 6

    def test_unregister(self, engine):
        assert engine.unregister_rule("memo")
        assert not engine.unregister_rule("memo")

        report = engine.validate_send(P2PKH, "BTC", "1", memo="\x00")
        assert "memo" not in report.results

    def test_disabled_rule_skipped(self, engine):
        engine.rule_registry["fee_rate"].enabled = False

        report = engine.validate_send(P2PKH, "BTC", "1", fee_rate="0")
        assert report.is_valid


class TestEngineHelpers:
    """Test single-field helpers."""

    def test_validate_address(self, testnet_engine):
        assert testnet_engine.validate_address(TESTNET_P2WPKH).is_valid
        assert not testnet_engine.validate_address(P2WPKH).is_valid

    def test_validate_amount_uses_settings(self):
        engine = ValidationEngine(config={"amounts": {"unit": "satoshis"}})

        assert engine.validate_amount("1000").satoshis == 1000

    def test_validate_fee_rate(self, engine):
        assert engine.validate_fee_rate("10").is_valid

    def test_validate_memo(self, engine):
        assert engine.validate_memo("0xcafe").byte_length == 2

    def test_validate_message(self, engine):
        assert engine.validate_message("sign this").is_valid
        assert engine.validate_message("=cmd").error_kind is ErrorKind.INJECTION

    def test_validate_message_scan_length(self):
        engine = ValidationEngine(config={"guards": {"max_scan_length": 10}})

        assert ValidationEngine().validate_message("ha" * 30).warnings
        assert engine.validate_message("ha" * 30).warnings == ()

    def test_validate_qr_text(self, engine):
        assert engine.validate_qr_text("bitcoin:" + P2PKH).is_valid
        assert engine.validate_qr_text("javascript:alert(1)").error_kind is ErrorKind.INJECTION

    def test_validate_qr_text_uses_guard_settings(self, engine):
        strict = ValidationEngine(config={"guards": {"qr_repeat_min_count": 10}})
        short_scan = ValidationEngine(config={"guards": {"max_scan_length": 50}})

        assert engine.validate_qr_text("ab" * 60).warnings == ()
        assert strict.validate_qr_text("ab" * 60).warnings == ("Text contains long repeating patterns",)
        assert engine.validate_qr_text("x" * 200).warnings
        assert short_scan.validate_qr_text("x" * 200).warnings == ()

    def test_validate_transaction_params(self, engine):
        assert engine.validate_transaction_params("0200", {"type": "send"}).is_valid

        result = engine.validate_transaction_params("0200", {"memo": "ab" * 101})
        assert result.error == "Transaction data contains patterns that may cause performance issues"

    def test_validate_transaction_params_uses_guard_settings(self):
        engine = ValidationEngine(config={"guards": {"qr_repeat_min_count": 20}})

        assert not engine.validate_transaction_params("0200", {"memo": "ab" * 50}).is_valid

    def test_authorize_secret_operation(self):
        engine = ValidationEngine(config={"rate_limit": {"max_operations": 2}})

        assert engine.authorize_secret_operation(WALLET_ID).is_valid
        assert engine.authorize_secret_operation(WALLET_ID).is_valid
        assert not engine.authorize_secret_operation(WALLET_ID).is_valid

    def test_authorize_rejects_bad_wallet_id(self, engine):
        result = engine.authorize_secret_operation("not-a-hash")

        assert result.error == "Invalid wallet ID format. Expected SHA-256 hash"
        assert engine.rate_limiter.remaining("not-a-hash") == engine.rate_limiter.max_operations


class TestFacade:
    """Test module-level helpers."""

    def test_validate_send_params(self):
        report = validate_send_params(P2PKH, "BTC", "0.5")

        assert isinstance(report, ValidationReport)
        assert report.is_valid

    def test_validate_send_params_invalid(self):
        report = validate_send_params(P2PKH, "BTC", "abc")

        assert not report.is_valid
        assert report.results["quantity"].error == "Amount contains invalid characters"

    def test_create_default_validator(self):
        engine = create_default_validator({"network": {"expected": "regtest"}})

        assert engine.settings.network.expected is Network.REGTEST

    def test_send_context(self):
        context = SendContext(destination=P2PKH, asset="BTC", quantity="1")

        assert not context.has_errors()
        context.record("asset", ValidationResult.fail("bad"))
        assert context.has_errors()
