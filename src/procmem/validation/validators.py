"""
Validators for configuration values and command-line input.

Every validator returns the normalized value or raises ValidationError
naming the offending field.
"""

import os
from pathlib import Path
from typing import Any, Callable, List, Union, Optional

from .exceptions import ValidationError


def _coerce_number(
    value: Any,
    convert: Callable[[Any], Union[int, float]],
    kind: str,
    min_value: Union[int, float],
    max_value: Optional[Union[int, float]],
    field_name: str,
) -> Union[int, float]:
    # bool is a subclass of int; TOML true/false never means a number here.
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a valid {kind}, got {value}",
            field_name=field_name,
            value=value
        )
    try:
        number = convert(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid {kind}, got {value}",
            field_name=field_name,
            value=value
        )
    if number < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {number}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and number > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {number}",
            field_name=field_name,
            value=value
        )
    return number


def validate_positive_integer(
    value: Any,
    min_value: int = 1,
    max_value: Optional[int] = None,
    field_name: str = "value"
) -> int:
    """
    Validate an integer within [min_value, max_value].

    Strings such as a pid given on the command line are converted.

    Raises:
        ValidationError: If the value is not an integer or is out of range
    """
    return _coerce_number(value, int, "integer", min_value, max_value, field_name)


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
    field_name: str = "value"
) -> float:
    """Validate a number (int or float) within [min_value, max_value]."""
    return _coerce_number(value, float, "number", min_value, max_value, field_name)


def validate_boolean(value: Any, field_name: str = "value") -> bool:
    """Validate that a value is a real boolean (TOML true/false)."""
    if not isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a boolean, got {value!r}",
            field_name=field_name,
            value=value
        )
    return value


def validate_path_exists(path: Union[str, Path], field_name: str = "path") -> str:
    """
    Validate that a path exists.

    Args:
        path: Path to validate
        field_name: Name of the field being validated

    Returns:
        Validated path string

    Raises:
        ValidationError: If path doesn't exist
    """
    path_str = str(path)
    if not os.path.exists(path_str):
        raise ValidationError(
            f"{field_name} does not exist: {path_str}",
            field_name=field_name,
            value=path_str
        )
    return path_str


def validate_process_name(name: Any, field_name: str = "process_name") -> str:
    """
    Validate a process name as it appears in the `Name:` field of a status file.

    The kernel truncates names to 15 characters, so longer input can never
    match; it is still accepted because a caller may pass the full executable
    name, but it must be a non-empty single line.

    Raises:
        ValidationError: If the name is empty or spans several lines.
    """
    if not isinstance(name, str):
        raise ValidationError(
            f"{field_name} must be a string, got {type(name).__name__}",
            field_name=field_name,
            value=name
        )
    stripped = name.strip()
    if not stripped:
        raise ValidationError(
            f"{field_name} cannot be empty",
            field_name=field_name,
            value=name
        )
    if "\n" in stripped or "\r" in stripped:
        raise ValidationError(
            f"{field_name} must be a single line",
            field_name=field_name,
            value=name
        )
    return stripped


def validate_enum_choice(
    value: Any,
    valid_choices: Optional[List[str]] = None,
    field_name: str = "value",
    case_sensitive: bool = True
) -> str:
    """
    Validate that a value is one of the allowed choices.

    Args:
        value: Value to validate
        valid_choices: List of allowed choices
        field_name: Name of the field being validated
        case_sensitive: Whether the comparison should be case-sensitive

    Returns:
        Validated choice, spelled as in `valid_choices`

    Raises:
        ValidationError: If value is not in choices
    """
    if valid_choices is None:
        raise ValidationError(
            f"No valid choices provided for {field_name}",
            field_name=field_name,
            value=value
        )

    str_value = str(value)

    if case_sensitive:
        if str_value not in valid_choices:
            raise ValidationError(
                f"{field_name} must be one of {valid_choices}, got {value}",
                field_name=field_name,
                value=value
            )
        return str_value

    lower_choices = [choice.lower() for choice in valid_choices]
    lower_value = str_value.lower()
    if lower_value not in lower_choices:
        raise ValidationError(
            f"{field_name} must be one of {valid_choices}, got {value}",
            field_name=field_name,
            value=value
        )
    return valid_choices[lower_choices.index(lower_value)]
