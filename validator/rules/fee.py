"""
Fee Rate Rule

Validates the optional fee rate of a send against the configured bounds.
"""

from amounts.fees import validate_fee_rate
from core.results import ValidationResult
from validator.core import SendContext, ValidationRule
from validator.settings import ValidationSettings


class FeeRateRule(ValidationRule):

    def __init__(self):
        super().__init__(
            name="fee_rate",
            field_name="fee_rate",
            description="Fee rate must be within the configured sat/vB bounds",
        )

    def is_applicable(self, context: SendContext) -> bool:
        return self.enabled and context.fee_rate is not None

    def validate(self, context: SendContext, settings: ValidationSettings) -> ValidationResult:
        return validate_fee_rate(
            context.fee_rate,
            min_rate=settings.fees.min_rate,
            max_rate=settings.fees.max_rate,
        )
