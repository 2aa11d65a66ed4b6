"""
Counterparty Wallet Validation - Validator Core Engine

This module provides the public validation facade and the ValidationEngine that
composes the address, asset, amount, memo and fee validators into checks of whole
send requests.

The ValidationEngine acts as the central coordinator for:
- Destination address checks (including expected network)
- Asset name and quantity checks
- Memo and fee rate checks
- QR payload and transaction-parameter guards
- Secret-storage rate limiting
"""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from addresses.classifier import classify_address
from addresses.models import AddressFormat, AddressInfo, Network
from amounts.fees import FeeRateResult, validate_fee_rate
from amounts.validation import AmountResult, NumericInput, validate_amount
from core.exceptions import ErrorKind
from core.results import ValidationResult
from guards.injection import check_transaction_for_redos, validate_text_input
from guards.memo import MemoResult, validate_memo
from guards.qr import QRTextResult, validate_qr_text
from session.rate_limiter import SlidingWindowRateLimiter
from session.validation import validate_wallet_id
from .settings import ValidationSettings

logger = logging.getLogger(__name__)

BASE58_FORMATS = (AddressFormat.P2PKH, AddressFormat.P2SH)


def _network_matches(info: AddressInfo, expected: Network) -> bool:
    if info.network is expected:
        return True
    # Regtest shares the testnet Base58 version bytes
    if expected is Network.REGTEST and info.network is Network.TESTNET:
        if info.address_format in BASE58_FORMATS:
            return True
        if info.multisig is not None:
            return all(m.address_format in BASE58_FORMATS for m in info.multisig.member_addresses)
    return False


def validate_bitcoin_address(
    address: str,
    expected_network: Optional[Network] = None,
    allow_multisig: bool = True
) -> AddressInfo:
    """
    Validate and classify a Bitcoin or Counterparty multisig address.

    Args:
        address: Candidate address
        expected_network: Reject addresses from any other network
        allow_multisig: Accept ``M_addr..._N`` bare multisig strings

    Returns:
        AddressInfo verdict
    """
    info = classify_address(address)
    if not info.is_valid:
        return info

    if not allow_multisig and info.address_format is AddressFormat.MULTISIG:
        return AddressInfo.invalid("Multisig destinations are not allowed")

    if expected_network is not None:
        expected_network = Network(expected_network)
        if not _network_matches(info, expected_network):
            return AddressInfo.invalid(
                f"Address is for {info.network.value}, expected {expected_network.value}"
            )

    return info


@dataclass
class SendContext:
    """
    Parameters of a send request plus the per-field results collected while
    the rules run.
    """
    destination: Any
    asset: Any
    quantity: Any
    memo: Optional[str] = None
    fee_rate: Optional[NumericInput] = None
    divisible: bool = True

    results: Dict[str, ValidationResult] = field(default_factory=dict)

    def record(self, field_name: str, result: ValidationResult):
        self.results[field_name] = result

    def has_errors(self) -> bool:
        return any(not result.is_valid for result in self.results.values())


@dataclass(frozen=True)
class ValidationReport:
    """One ValidationResult per checked field of a request."""
    results: Dict[str, ValidationResult]

    @property
    def is_valid(self) -> bool:
        return all(result.is_valid for result in self.results.values())

    def __bool__(self) -> bool:
        return self.is_valid

    @property
    def errors(self) -> Dict[str, str]:
        return {name: r.error for name, r in self.results.items() if not r.is_valid}

    @property
    def warnings(self) -> List[str]:
        return [f"{name}: {w}" for name, r in self.results.items() for w in r.warnings]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "fields": {name: result.to_dict() for name, result in self.results.items()},
        }


class ValidationRule(ABC):
    """
    Abstract base class for validation rules.

    Each rule checks one field of a send request and records its result on the
    context under its field name.
    """

    def __init__(self, name: str, field_name: str, description: str, enabled: bool = True):
        self.name = name
        self.field_name = field_name
        self.description = description
        self.enabled = enabled
        self.logger = logging.getLogger(f"validator.rules.{name}")

    @abstractmethod
    def validate(self, context: SendContext, settings: ValidationSettings) -> ValidationResult:
        """
        Validate one field of the request.

        Args:
            context: Send request being validated
            settings: Active validation settings

        Returns:
            Result for the rule's field
        """
        pass

    def is_applicable(self, context: SendContext) -> bool:
        """Override to skip optional fields that were not supplied."""
        return self.enabled


class ValidationEngine:
    """
    Main validation engine that orchestrates validation of send requests.

    Rules are applied in registration order; every applicable rule runs even if an
    earlier one failed, so a report lists every bad field at once.
    """

    def __init__(
        self,
        settings: Optional[ValidationSettings] = None,
        config: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize the validation engine.

        Args:
            settings: Typed settings; built from ``config`` when omitted
            config: Raw configuration dictionary
        """
        self.settings = settings or ValidationSettings.from_config(config)
        self.logger = logging.getLogger("validator.engine")

        self.rules: List[ValidationRule] = []
        self.rule_registry: Dict[str, ValidationRule] = {}

        self.rate_limiter = SlidingWindowRateLimiter(
            window_ms=self.settings.rate_limit.window_ms,
            max_operations=self.settings.rate_limit.max_operations,
            cleanup_threshold=self.settings.rate_limit.cleanup_threshold,
        )

        self.validation_stats = {
            "total_validations": 0,
            "approved_validations": 0,
            "rejected_validations": 0,
        }
        self._stats_lock = threading.Lock()

        self._register_default_rules()

    def _register_default_rules(self):
        """Register default validation rules."""
        # Import here to avoid circular imports
        from .rules.destination import DestinationRule
        from .rules.asset import AssetRule, QuantityRule
        from .rules.memo import MemoRule
        from .rules.fee import FeeRateRule

        self.register_rule(DestinationRule())
        self.register_rule(AssetRule())
        self.register_rule(QuantityRule())
        self.register_rule(MemoRule())
        self.register_rule(FeeRateRule())

    def register_rule(self, rule: ValidationRule):
        """
        Register a validation rule.

        Args:
            rule: Validation rule to register
        """
        if rule.name in self.rule_registry:
            self.logger.warning(f"Rule {rule.name} already registered, replacing")
            self.rules.remove(self.rule_registry[rule.name])

        self.rules.append(rule)
        self.rule_registry[rule.name] = rule
        self.logger.debug(f"Registered validation rule: {rule.name}")

    def unregister_rule(self, rule_name: str) -> bool:
        """
        Unregister a validation rule.

        Returns:
            True if rule was found and removed
        """
        rule = self.rule_registry.pop(rule_name, None)
        if rule is None:
            return False
        self.rules.remove(rule)
        self.logger.debug(f"Unregistered validation rule: {rule_name}")
        return True

    def validate_send(
        self,
        destination: str,
        asset: str,
        quantity: NumericInput,
        memo: Optional[str] = None,
        fee_rate: Optional[NumericInput] = None,
        divisible: bool = True
    ) -> ValidationReport:
        """
        Validate every field of a send request.

        Returns:
            ValidationReport with one result per applicable rule
        """
        context = SendContext(
            destination=destination,
            asset=asset,
            quantity=quantity,
            memo=memo,
            fee_rate=fee_rate,
            divisible=divisible,
        )
        self._apply_validation_rules(context)

        with self._stats_lock:
            self.validation_stats["total_validations"] += 1
            if context.has_errors():
                self.validation_stats["rejected_validations"] += 1
            else:
                self.validation_stats["approved_validations"] += 1

        if context.has_errors():
            self.logger.info(
                "Send request rejected: %s", ", ".join(sorted(
                    name for name, r in context.results.items() if not r.is_valid
                ))
            )
        return ValidationReport(results=dict(context.results))

    def _apply_validation_rules(self, context: SendContext):
        """Apply all applicable validation rules."""
        for rule in self.rules:
            if not rule.is_applicable(context):
                self.logger.debug(f"Skipping rule {rule.name} - not applicable")
                continue

            result = rule.validate(context, self.settings)
            context.record(rule.field_name, result)
            if not result.is_valid:
                self.logger.debug(f"Rule {rule.name} failed: {result.error}")

    def validate_address(self, address: str) -> AddressInfo:
        return validate_bitcoin_address(
            address,
            expected_network=self.settings.network.expected,
            allow_multisig=self.settings.network.allow_multisig,
        )

    def validate_amount(self, value: NumericInput) -> AmountResult:
        amounts = self.settings.amounts
        return validate_amount(
            value,
            unit=amounts.unit,
            allow_zero=amounts.allow_zero,
            allow_dust=amounts.allow_dust,
            max_amount=amounts.max_amount,
        )

    def validate_fee_rate(self, rate: NumericInput) -> FeeRateResult:
        return validate_fee_rate(
            rate, min_rate=self.settings.fees.min_rate, max_rate=self.settings.fees.max_rate
        )

    def validate_memo(self, memo: str) -> MemoResult:
        memo_settings = self.settings.memo
        return validate_memo(
            memo,
            max_bytes=memo_settings.max_bytes,
            allow_hex=memo_settings.allow_hex,
            allow_text=memo_settings.allow_text,
        )

    def validate_message(self, text: str) -> ValidationResult:
        """Validate free-form text (e.g. a message to sign) with the configured guards."""
        guards = self.settings.guards
        return validate_text_input(
            text,
            field_name="Message",
            max_length=guards.max_text_length,
            repeat_unit_max_length=guards.repeat_unit_max_length,
            repeat_min_count=guards.repeat_min_count,
            max_scan_length=guards.max_scan_length,
        )

    def validate_qr_text(self, text: str) -> QRTextResult:
        guards = self.settings.guards
        return validate_qr_text(
            text,
            repeat_unit_max_length=guards.repeat_unit_max_length,
            repeat_min_count=guards.qr_repeat_min_count,
            max_scan_length=guards.max_scan_length,
        )

    def validate_transaction_params(
        self,
        raw_tx_hex: str,
        params: Optional[Dict[str, Any]] = None
    ) -> ValidationResult:
        """Reject transaction-parsing input that is oversized or highly repetitive."""
        guards = self.settings.guards
        if check_transaction_for_redos(
            raw_tx_hex,
            params,
            repeat_unit_max_length=guards.repeat_unit_max_length,
            repeat_min_count=guards.qr_repeat_min_count,
            max_scan_length=guards.max_scan_length,
        ):
            return ValidationResult.fail(
                "Transaction data contains patterns that may cause performance issues",
                ErrorKind.LENGTH,
            )
        return ValidationResult.ok()

    def authorize_secret_operation(self, wallet_id: str) -> ValidationResult:
        """Check a wallet id and consume one rate-limited secret-storage operation."""
        result = validate_wallet_id(wallet_id)
        if not result.is_valid:
            return result
        return self.rate_limiter.check(wallet_id)

    def get_statistics(self) -> Dict[str, Any]:
        """Get validation statistics."""
        with self._stats_lock:
            stats = dict(self.validation_stats)
        return {**stats, "registered_rules": len(self.rules)}


def create_default_validator(config: Optional[Dict[str, Any]] = None) -> ValidationEngine:
    """
    Create a ValidationEngine from an optional configuration dictionary.

    Args:
        config: Optional configuration overrides

    Returns:
        Configured ValidationEngine instance
    """
    return ValidationEngine(config=config)


_default_engine: Optional[ValidationEngine] = None
_default_engine_lock = threading.Lock()


def _get_default_engine() -> ValidationEngine:
    global _default_engine
    with _default_engine_lock:
        if _default_engine is None:
            _default_engine = create_default_validator()
        return _default_engine


def validate_send_params(
    destination: str,
    asset: str,
    quantity: NumericInput,
    memo: Optional[str] = None,
    fee_rate: Optional[NumericInput] = None,
    divisible: bool = True
) -> ValidationReport:
    """
    Validate the parameters of a send with default settings.

    Returns:
        ValidationReport keyed by field name (destination, asset, quantity,
        and memo / fee_rate when supplied)
    """
    return _get_default_engine().validate_send(
        destination, asset, quantity, memo=memo, fee_rate=fee_rate, divisible=divisible
    )
