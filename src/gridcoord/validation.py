"""Validation utilities for the grid demand coordinator."""

import math
from datetime import datetime
from numbers import Real
from typing import Any, Optional, Tuple, Type, Union

from .exceptions import ValidationError, ValidationTypeError, ValidationRangeError

class Validator:
    """Base validator class."""

    @staticmethod
    def validate_type(value: Any, expected_type: Union[Type, Tuple[Type, ...]]) -> None:
        """Validate value type."""
        if not isinstance(value, expected_type) or isinstance(value, bool):
            name = getattr(expected_type, "__name__", str(expected_type))
            raise ValidationTypeError(
                f"Expected type {name}, got {type(value).__name__}"
            )

    @staticmethod
    def validate_range(
        value: Union[int, float],
        min_value: Optional[Union[int, float]] = None,
        max_value: Optional[Union[int, float]] = None,
        inclusive_min: bool = True
    ) -> None:
        """Validate numeric range."""
        if not math.isfinite(value):
            raise ValidationRangeError(f"Value {value} is not finite")

        if min_value is not None:
            if inclusive_min and value < min_value:
                raise ValidationRangeError(f"Value {value} is below minimum {min_value}")
            if not inclusive_min and value <= min_value:
                raise ValidationRangeError(f"Value {value} must be greater than {min_value}")

        if max_value is not None and value > max_value:
            raise ValidationRangeError(f"Value {value} exceeds maximum {max_value}")

class PowerValidator(Validator):
    """Validator for power quantities."""

    @staticmethod
    def validate_power(power: float) -> None:
        """Validate a requested or rated power in MW (strictly positive)."""
        Validator.validate_type(power, Real)
        Validator.validate_range(power, min_value=0, inclusive_min=False)

class WindowValidator(Validator):
    """Validator for maintenance windows."""

    @staticmethod
    def validate_window(start: datetime, end: datetime) -> None:
        """Validate a half-open [start, end) window."""
        Validator.validate_type(start, datetime)
        Validator.validate_type(end, datetime)
        if end < start:
            raise ValidationRangeError(
                f"Maintenance window ends ({end.isoformat()}) before it starts ({start.isoformat()})"
            )

def validate_identifier(identifier: str, what: str = "Identifier") -> None:
    """Validate a substation or consumer identifier."""
    if not identifier or not isinstance(identifier, str):
        raise ValidationError(f"{what} must be a non-empty string")
