"""
Destination Address Rule

Checks the destination of a send against the address classifier and the
configured network.
"""

from core.results import ValidationResult
from validator.core import SendContext, ValidationRule, validate_bitcoin_address
from validator.settings import ValidationSettings


class DestinationRule(ValidationRule):
    """Validates the destination address of a send."""

    def __init__(self):
        super().__init__(
            name="destination",
            field_name="destination",
            description="Destination must be a valid address on the expected network",
        )

    def validate(self, context: SendContext, settings: ValidationSettings) -> ValidationResult:
        return validate_bitcoin_address(
            context.destination,
            expected_network=settings.network.expected,
            allow_multisig=settings.network.allow_multisig,
        )
