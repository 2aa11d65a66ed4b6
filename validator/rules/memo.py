"""
Memo Rule

Validates the optional memo attached to a send.
"""

from core.results import ValidationResult
from guards.memo import validate_memo
from validator.core import SendContext, ValidationRule
from validator.settings import ValidationSettings


class MemoRule(ValidationRule):

    def __init__(self):
        super().__init__(
            name="memo",
            field_name="memo",
            description="Memo must fit the size limit and carry no injection payload",
        )

    def is_applicable(self, context: SendContext) -> bool:
        return self.enabled and context.memo is not None

    def validate(self, context: SendContext, settings: ValidationSettings) -> ValidationResult:
        return validate_memo(
            context.memo,
            max_bytes=settings.memo.max_bytes,
            allow_hex=settings.memo.allow_hex,
            allow_text=settings.memo.allow_text,
        )
