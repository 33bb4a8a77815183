"""
Pytest configuration and shared fixtures for the procmem test suite.

This module provides a fake procfs tree (status, maps and mem files per
process), configuration files, and cleanup of the configuration singleton.
"""

import sys
import tempfile
import shutil
from pathlib import Path
from typing import Dict, List, Optional

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


# Maps lines shared across tests.
CAT_TEXT_LINE = "00400000-00401000 r-xp 00000000 08:01 123 /bin/cat"
ANON_LINE = "00600000-00601000 rw-p 00000000 00:00 0 "
GUARD_LINE = "7f0000000000-7f0000001000 ---p 00000000 00:00 0"


class FakeProcfs:
    """Builds a procfs-like tree of numeric process directories."""

    def __init__(self, root: Path):
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def add_process(
        self,
        pid: int,
        name: str,
        maps_lines: Optional[List[str]] = None,
        memory: Optional[Dict[int, bytes]] = None,
        status_text: Optional[str] = None,
    ) -> Path:
        """
        Create /<root>/<pid>/{status,maps,mem}.

        Args:
            pid: Process id (directory name).
            name: Value of the Name: field.
            maps_lines: Lines of the maps file.
            memory: Offset -> bytes written into a sparse mem file.
            status_text: Full status file content, overriding `name`.
        """
        proc_dir = self.root / str(pid)
        proc_dir.mkdir(parents=True, exist_ok=True)
        if status_text is None:
            status_text = f"Name:\t{name}\nUmask:\t0022\nState:\tS (sleeping)\nPid:\t{pid}\n"
        (proc_dir / "status").write_text(status_text)
        (proc_dir / "maps").write_text("\n".join(maps_lines or []) + "\n")
        with open(proc_dir / "mem", "wb") as f:
            for offset, data in sorted((memory or {}).items()):
                f.seek(offset)
                f.write(data)
        return proc_dir


@pytest.fixture
def fake_procfs(temp_dir):
    """An empty fake procfs root with a couple of non-process entries."""
    procfs = FakeProcfs(temp_dir / "proc")
    (procfs.root / "self").mkdir()
    (procfs.root / "meminfo").write_text("MemTotal: 1 kB\n")
    (procfs.root / "1234-not-a-pid").mkdir()
    return procfs


@pytest.fixture
def cat_process(fake_procfs):
    """
    A process named 'cat' whose maps match the documented example, with a
    readable mem image for the two readable regions.
    """
    fake_procfs.add_process(
        4242,
        "cat",
        maps_lines=[CAT_TEXT_LINE, ANON_LINE, GUARD_LINE],
        memory={
            0x400000: b"\x7fELF" + b"T" * (0x1000 - 4),
            0x600000: b"A" * 0x1000,
        },
    )
    return fake_procfs


@pytest.fixture
def mem_file(temp_dir):
    """A regular file standing in for a memory image, with known content."""
    path = temp_dir / "mem"
    with open(path, "wb") as f:
        f.write(bytes(range(256)) * 64)  # 16 KiB
    return path


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def sample_config_data():
    """Sample [monitor] configuration data."""
    return {
        "general": {
            "proc_root": "/proc",
            "log_level": "INFO",
            "require_root": True,
        },
        "collection": {
            "read_timeout_seconds": 0,
            "skip_stale_regions": True,
            "capture_chunks": False,
        },
        "storage": {
            "format": "parquet",
            "compression": "snappy",
        },
    }


@pytest.fixture
def config_file(temp_dir, sample_config_data):
    """Write sample_config_data to a temporary config.toml."""
    import toml

    path = temp_dir / "config.toml"
    with open(path, "w") as f:
        toml.dump({"monitor": sample_config_data}, f)
    return path


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically reset the configuration singleton after each test."""
    yield

    from procmem.config import reset_config_path

    reset_config_path()
