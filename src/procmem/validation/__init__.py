"""
Validation and error handling for the procmem package.

This module provides the domain error taxonomy, input validation and
error handling with consistent error reporting across the application.
"""

from .exceptions import (
    AddressOverflowError,
    ErrorKind,
    ErrorSeverity,
    InsufficientPrivilegeError,
    MapFormatError,
    ProcessNotFoundError,
    ProcfsError,
    ProcMemError,
    RegionReadError,
    RegionReadTimeoutError,
    StaleRegionError,
    ValidationError,
    handle_error,
    handle_config_error,
    handle_procfs_error,
    handle_cli_error,
)

from .validators import (
    validate_boolean,
    validate_enum_choice,
    validate_path_exists,
    validate_positive_float,
    validate_positive_integer,
    validate_process_name,
)

__all__ = [
    # Error taxonomy
    "AddressOverflowError",
    "ErrorKind",
    "ErrorSeverity",
    "InsufficientPrivilegeError",
    "MapFormatError",
    "ProcessNotFoundError",
    "ProcfsError",
    "ProcMemError",
    "RegionReadError",
    "RegionReadTimeoutError",
    "StaleRegionError",
    "ValidationError",
    # Handlers
    "handle_error",
    "handle_config_error",
    "handle_procfs_error",
    "handle_cli_error",
    # Validators
    "validate_boolean",
    "validate_enum_choice",
    "validate_path_exists",
    "validate_positive_float",
    "validate_positive_integer",
    "validate_process_name",
]
