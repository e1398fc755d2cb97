from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from library_app.errors import InvalidIdentifierError
from library_app.normalization import is_disallowed_control_char, normalize_identifier

MIN_ID_LENGTH = 1
MAX_ID_LENGTH = 100


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: Optional[str] = None

    def __bool__(self) -> bool:
        return self.valid


VALID = ValidationResult(True)


class IdentifierValidator:
    """Checks that a raw identifier is usable as a store key.

    Rules run in order and the first failure wins; the raw value is checked
    exactly as supplied, before any normalization.
    """

    @staticmethod
    def validate(raw: Any, max_length: int = MAX_ID_LENGTH) -> ValidationResult:
        if not isinstance(raw, str) or not raw.strip():
            return ValidationResult(False, "must be a non-empty string")
        if raw.strip() != raw:
            return ValidationResult(False, "cannot contain leading or trailing whitespace")
        if len(raw) > max_length:
            return ValidationResult(False, f"length must be between {MIN_ID_LENGTH} and {max_length} characters")
        if any(is_disallowed_control_char(ch) for ch in raw):
            return ValidationResult(False, "cannot contain control characters")
        return VALID


class TextValidator:
    """Validations for free-text fields such as titles and names."""

    @staticmethod
    def validate_non_empty(value: Any, field: str) -> ValidationResult:
        if not isinstance(value, str):
            return ValidationResult(False, f"{field} must be a non-empty string")
        if not value.strip():
            return ValidationResult(False, f"{field} cannot be empty or whitespace-only")
        return VALID

    @staticmethod
    def validate_length(value: Any, min_length: int, max_length: int, field: str) -> ValidationResult:
        if not isinstance(value, str):
            return ValidationResult(False, f"{field} must be a string")
        length = len(value)
        if length < min_length or length > max_length:
            return ValidationResult(
                False,
                f"{field} length must be between {min_length} and {max_length} characters, but got {length}",
            )
        return VALID


def parse_identifier(field: str, raw: Any, max_length: int = MAX_ID_LENGTH) -> str:
    """Validate ``raw`` and return its canonical form.

    Raises InvalidIdentifierError naming ``field`` when validation fails; no
    store is touched before this returns.
    """
    result = IdentifierValidator.validate(raw, max_length=max_length)
    if not result:
        raise InvalidIdentifierError(field, raw, result.error)
    return normalize_identifier(raw)
