"""Validation helper functions for structured configs."""

from collections.abc import Mapping, Sequence
from typing import Any

from measuretheory.exceptions import ConfigValidationError


def validate_nonempty_str(value: Any, field_name: str, is_none_allowed: bool = False) -> None:
    """Validate that a value is a non-empty string."""
    if is_none_allowed and value is None:
        return
    if not isinstance(value, str):
        allowed_types = "a string or None" if is_none_allowed else "a string"
        raise ConfigValidationError(f"{field_name} must be {allowed_types}, got {type(value)}")
    if not value.strip():
        raise ConfigValidationError(f"{field_name} must be a non-empty string")


def validate_positive_int(value: Any, field_name: str, is_none_allowed: bool = False) -> None:
    """Validate that a value is a positive integer."""
    if is_none_allowed and value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int):
        allowed_types = "an int or None" if is_none_allowed else "an int"
        raise ConfigValidationError(f"{field_name} must be {allowed_types}, got {type(value)}")
    if value <= 0:
        raise ConfigValidationError(f"{field_name} must be positive, got {value}")


def validate_number(value: Any, field_name: str, is_none_allowed: bool = False) -> None:
    """Validate that a value is an int or a float."""
    if is_none_allowed and value is None:
        return
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        allowed_types = "a number or None" if is_none_allowed else "a number"
        raise ConfigValidationError(f"{field_name} must be {allowed_types}, got {type(value)}")


def validate_sequence(
    value: Any,
    field_name: str,
    element_validator: Any | None = None,
    is_none_allowed: bool = False,
) -> None:
    """Validate that a value is a non-empty sequence, optionally validating each element."""
    if is_none_allowed and value is None:
        return
    if isinstance(value, str) or not isinstance(value, Sequence):
        allowed_types = "a sequence or None" if is_none_allowed else "a sequence"
        raise ConfigValidationError(f"{field_name} must be {allowed_types}, got {type(value)}")
    if len(value) == 0:
        raise ConfigValidationError(f"{field_name} must not be empty")
    if element_validator is None:
        return
    for i, item in enumerate(value):
        element_validator(item, f"{field_name}[{i}]")


def validate_mapping(
    value: Any,
    field_name: str,
    key_type: type | None = None,
    value_validator: Any | None = None,
    is_none_allowed: bool = False,
) -> None:
    """Validate that a value is a mapping with keys of a given type, optionally validating each value."""
    if is_none_allowed and value is None:
        return
    if not isinstance(value, Mapping):
        allowed_types = "a mapping or None" if is_none_allowed else "a mapping"
        raise ConfigValidationError(f"{field_name} must be {allowed_types}, got {type(value)}")
    for key, item in value.items():
        if key_type is not None and not isinstance(key, key_type):
            raise ConfigValidationError(f"{field_name} keys must be {key_type.__name__}s, got {type(key)}")
        if value_validator is not None:
            value_validator(item, f"{field_name}[{key!r}]")
