"""
Exception taxonomy and error management.

This module defines the error kinds the sampling engine can report and the
helpers used to log them consistently before re-raising or exiting:

- Environment errors (procfs unreadable, malformed maps line, failed read)
  abort the scan.
- Lookup failures are reported as "not found", distinct from I/O errors.
- Stale regions (unmapped between the maps read and the memory read) can be
  skipped without losing the rest of the scan.
- Numeric edge cases (address overflow) surface only when a caller asks for
  the size of a region whose bounds could not be decoded.
"""

import logging
import sys
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorKind(Enum):
    """Classification of domain errors, used by callers to pick a reaction."""
    ENVIRONMENT = "environment"
    NOT_FOUND = "not_found"
    PRIVILEGE = "privilege"
    STALE_REGION = "stale_region"
    NUMERIC = "numeric"


class ValidationError(Exception):
    """
    Exception raised when validation fails.

    Used for configuration values and command-line input.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class ProcMemError(Exception):
    """Base class for every error raised by the sampling engine."""

    kind: ErrorKind = ErrorKind.ENVIRONMENT


class ProcfsError(ProcMemError):
    """A procfs directory or pseudo-file could not be opened or read."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class MapFormatError(ProcMemError):
    """A maps line does not follow the kernel's format."""

    def __init__(self, message: str, line: Optional[str] = None):
        super().__init__(message)
        self.line = line


class RegionReadError(ProcMemError):
    """Reading a region from the memory image failed."""

    def __init__(self, message: str, region: Any = None):
        super().__init__(message)
        self.region = region


class StaleRegionError(RegionReadError):
    """The region vanished (or shrank) between listing and reading it."""

    kind = ErrorKind.STALE_REGION


class RegionReadTimeoutError(StaleRegionError):
    """A region read did not finish before its deadline."""


class ProcessNotFoundError(ProcMemError):
    """No process matches the requested name or pid."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str, name: Optional[str] = None, pid: Optional[int] = None):
        super().__init__(message)
        self.name = name
        self.pid = pid


class InsufficientPrivilegeError(ProcMemError):
    """The caller is not allowed to read the target process's memory."""

    kind = ErrorKind.PRIVILEGE


class AddressOverflowError(ProcMemError):
    """The size of a region with an overflowed bound was requested."""

    kind = ErrorKind.NUMERIC


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Handle errors with consistent logging and optional re-raising.

    Args:
        error: The exception that occurred
        context: Context description of where the error occurred
        severity: Severity level for logging
        reraise: Whether to re-raise the exception after logging
        logger: Logger instance to use (defaults to module logger)
    """
    effective_logger = logger or globals()['logger']

    error_msg = f"Error in {context}: {error}"

    if isinstance(severity, str):
        severity_str = severity.lower()
    else:
        severity_str = severity.value

    if severity_str == "debug":
        effective_logger.debug(error_msg, exc_info=True)
    elif severity_str == "info":
        effective_logger.info(error_msg)
    elif severity_str == "warning":
        effective_logger.warning(error_msg)
    elif severity_str == "error":
        effective_logger.error(error_msg)
    elif severity_str == "critical":
        effective_logger.critical(error_msg, exc_info=True)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_procfs_error(error: Exception, context: str, **kwargs) -> None:
    """Handle procfs read errors."""
    handle_error(error, f"procfs {context}", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """Log a CLI-level error and exit with the requested code."""
    exit_code = kwargs.pop('exit_code', 1)
    include_traceback = kwargs.pop('include_traceback', False)

    severity = kwargs.pop(
        'severity', ErrorSeverity.CRITICAL if include_traceback else ErrorSeverity.ERROR
    )
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)

    sys.exit(exit_code)
