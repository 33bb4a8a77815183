"""
Privilege checks for reading another process's memory image.

Reading `/proc/<pid>/mem` of an arbitrary process needs root, so the CLI
refuses to start a scan unless the effective uid is 0 (what `whoami` reports
as root).
"""

import logging

import psutil

from ..validation import InsufficientPrivilegeError

logger = logging.getLogger(__name__)

ROOT_UID = 0


def current_username() -> str:
    """Name of the real user running this process."""
    return psutil.Process().username()


def effective_uid() -> int:
    """Effective uid of this process, the one the kernel checks on reads."""
    return psutil.Process().uids().effective


def has_root_privileges() -> bool:
    try:
        uid = effective_uid()
    except psutil.Error as e:
        logger.warning(f"Unable to determine the effective uid: {e}")
        return False
    return uid == ROOT_UID


def ensure_root_privileges() -> None:
    """
    Raise unless running as root.

    Raises:
        InsufficientPrivilegeError: If the effective uid is not 0.
    """
    if not has_root_privileges():
        raise InsufficientPrivilegeError("Unable to operate without root")
    logger.debug("Running with root privileges")
