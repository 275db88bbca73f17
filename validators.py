from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar


T = TypeVar("T")

# largest signal magnitude (dBm) accepted for roaming
MAX_THRESHOLD = 120


@dataclass
class ValidationResult(Generic[T]):
    value: Optional[T]
    error: Optional[str]

    @property
    def is_valid(self) -> bool:
        return self.error is None


def validate_int(
    value: str | None,
    *,
    default: Optional[int] = None,
    name: str = "value",
    min_value: Optional[int] = None,
    max_value: Optional[int] = None,
) -> ValidationResult[int]:
    if value is None or str(value).strip() == "":
        if default is None:
            return ValidationResult(None, f"{name} must be provided")
        return ValidationResult(default, None)
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return ValidationResult(None, f"{name} must be an integer")
    if min_value is not None and parsed < min_value:
        return ValidationResult(None, f"{name} must be >= {min_value}")
    if max_value is not None and parsed > max_value:
        return ValidationResult(None, f"{name} must be <= {max_value}")
    return ValidationResult(parsed, None)


def validate_threshold(value: str | None, *, name: str = "Roaming threshold") -> ValidationResult[int]:
    """Parse a signal magnitude typed as ``65`` into the stored level ``-65``."""
    result = validate_int(value, name=name, min_value=0, max_value=MAX_THRESHOLD)
    if not result.is_valid or result.value is None:
        return result
    return ValidationResult(-result.value, None)


def validate_float(value: str | None, *, default: float, name: str = "value", min_value: float = 0.0) -> ValidationResult[float]:
    if value is None or str(value).strip() == "":
        return ValidationResult(default, None)
    try:
        parsed = float(str(value).strip())
    except ValueError:
        return ValidationResult(default, f"{name} must be a number")
    if parsed < min_value:
        return ValidationResult(default, f"{name} must be >= {min_value}")
    return ValidationResult(parsed, None)
