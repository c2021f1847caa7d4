"""
Input validation utilities for HTTP query and body parameters.
"""

from typing import Optional
import re

from shared_utils.error_handler import ValidationError


_IDENTIFIER = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_\-.:]{0,127}$")
_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no"}


class InputValidator:
    """Utility class for input validation."""

    @staticmethod
    def validate_non_empty_string(value: object, field_name: str) -> str:
        """Validate non-empty string.

        Args:
            value: Value to validate
            field_name: Name of field for error messages

        Returns:
            Stripped string

        Raises:
            ValidationError: If validation fails
        """
        if not isinstance(value, str):
            raise ValidationError(f"{field_name} must be a string")

        if not value or not value.strip():
            raise ValidationError(f"{field_name} cannot be empty")

        return value.strip()

    @staticmethod
    def validate_identifier(value: Optional[str], field_name: str) -> str:
        """Validate a record identifier such as a project id."""
        if value is None or not value.strip():
            raise ValidationError(f"{field_name} required")

        value = value.strip()
        if not _IDENTIFIER.match(value):
            raise ValidationError(f"Invalid {field_name} format", context={field_name: value})
        return value

    @staticmethod
    def validate_positive_int(value: int, field_name: str, allow_zero: bool = False) -> int:
        if not isinstance(value, int):
            raise ValidationError(f"{field_name} must be an integer")

        min_val = 0 if allow_zero else 1
        if value < min_val:
            raise ValidationError(f"{field_name} must be >= {min_val}")

        return value

    @staticmethod
    def parse_optional_int(value: Optional[str], field_name: str, default: int) -> int:
        """Parse a positive integer query parameter; *default* when absent."""
        if value is None or not value.strip():
            return default

        try:
            parsed = int(value.strip())
        except ValueError as exc:
            raise ValidationError(f"{field_name} must be an integer", context={field_name: value}) from exc
        return InputValidator.validate_positive_int(parsed, field_name)

    @staticmethod
    def parse_optional_bool(value: Optional[str], field_name: str) -> Optional[bool]:
        """Parse ``true``/``false`` style query flags; None when absent."""
        if value is None or value == "":
            return None

        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ValidationError(f"{field_name} must be true or false", context={field_name: value})
