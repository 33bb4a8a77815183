"""
Unit tests for root privilege checks.
"""

from types import SimpleNamespace
from unittest.mock import patch

import psutil
import pytest

from procmem.system.privileges import (
    current_username,
    effective_uid,
    ensure_root_privileges,
    has_root_privileges,
)
from procmem.validation import ErrorKind, InsufficientPrivilegeError


def uids(real, effective):
    return SimpleNamespace(real=real, effective=effective, saved=effective)


@pytest.mark.unit
class TestPrivileges:
    """Test cases for the privilege helpers."""

    def test_current_username_uses_psutil(self, mock_psutil_process):
        mock_psutil_process.username.return_value = "alice"
        assert current_username() == "alice"

    def test_effective_uid_uses_psutil(self, mock_psutil_process):
        mock_psutil_process.uids.return_value = uids(1000, 0)
        assert effective_uid() == 0

    def test_root_user(self, mock_psutil_process):
        mock_psutil_process.uids.return_value = uids(0, 0)

        assert has_root_privileges() is True
        ensure_root_privileges()

    def test_regular_user(self, mock_psutil_process):
        mock_psutil_process.uids.return_value = uids(1000, 1000)

        assert has_root_privileges() is False
        with pytest.raises(InsufficientPrivilegeError) as exc_info:
            ensure_root_privileges()
        assert exc_info.value.kind is ErrorKind.PRIVILEGE

    def test_setuid_root_counts_as_root(self, mock_psutil_process):
        # Real user alice, effective root.
        mock_psutil_process.uids.return_value = uids(1000, 0)

        assert has_root_privileges() is True

    def test_dropped_privileges_are_not_root(self, mock_psutil_process):
        # Real user root, effective uid dropped to nobody.
        mock_psutil_process.uids.return_value = uids(0, 65534)

        assert has_root_privileges() is False

    def test_unknown_uid_is_not_root(self, mock_psutil_process):
        mock_psutil_process.uids.side_effect = psutil.AccessDenied(pid=1)

        assert has_root_privileges() is False


@pytest.fixture
def mock_psutil_process():
    """Patch psutil.Process() as seen by the privileges module."""
    with patch("procmem.system.privileges.psutil.Process") as mock_process_class:
        yield mock_process_class.return_value
