"""
Reading region bytes from a process's memory image (`/proc/<pid>/mem`).

MemoryImage holds one read handle for the duration of a scan and releases it
when the scan ends, whichever way it ends. Reads are positional (`os.pread`),
so no seek position is shared between reads.

A region listed in the map may be unmapped by the time it is read. Such reads
come back short or fail with EIO; they raise StaleRegionError so the caller can
skip the region instead of losing the whole scan. An optional per-region
deadline turns a read that blocks (e.g. a page fault against a frozen cgroup)
into a RegionReadTimeoutError, which is also a stale region.
"""

import errno
import logging
import os
import queue
import threading
from pathlib import Path
from typing import Any, Optional, Tuple, Union

from ..models.regions import MemoryChunk, MemoryRegion
from ..validation import (
    InsufficientPrivilegeError,
    ProcfsError,
    RegionReadError,
    RegionReadTimeoutError,
    StaleRegionError,
)

logger = logging.getLogger(__name__)

# Largest span requested from a single pread call.
READ_BLOCK_SIZE = 1 << 20

# Errors meaning the address range is no longer backed in the target process.
_STALE_ERRNOS = {errno.EIO, errno.EFAULT, errno.ESRCH, errno.ENXIO}
_PRIVILEGE_ERRNOS = {errno.EACCES, errno.EPERM}


class MemoryImage:
    """
    Scoped read handle on a process memory image.

    Usage:
        with MemoryImage("/proc/1234/mem") as image:
            chunk = image.read_region(region)

    Args:
        mem_path: Path of the memory-image pseudo-file.
        read_timeout: Per-region deadline in seconds, or None to read inline
                      without a deadline.
    """

    def __init__(self, mem_path: Union[str, Path], read_timeout: Optional[float] = None):
        self.mem_path = Path(mem_path)
        self.read_timeout = read_timeout
        self._fd: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self._fd is not None

    def open(self) -> "MemoryImage":
        """
        Open the read handle.

        Raises:
            InsufficientPrivilegeError: If the caller may not read the image.
            ProcfsError: If the image cannot be opened for any other reason.
            RuntimeError: If the handle is already open.
        """
        if self._fd is not None:
            raise RuntimeError(f"Memory image {self.mem_path} is already open")
        try:
            self._fd = os.open(self.mem_path, os.O_RDONLY)
        except PermissionError as e:
            raise InsufficientPrivilegeError(
                f"Permission denied opening {self.mem_path}: {e}"
            ) from e
        except OSError as e:
            raise ProcfsError(
                f"Unable to open memory image {self.mem_path}: {e}", path=str(self.mem_path)
            ) from e
        logger.debug(f"Opened memory image {self.mem_path} (fd {self._fd})")
        return self

    def close(self) -> None:
        """Release the handle. Safe to call twice."""
        if self._fd is not None:
            os.close(self._fd)
            logger.debug(f"Closed memory image {self.mem_path}")
            self._fd = None

    def __enter__(self) -> "MemoryImage":
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def read_region(self, region: MemoryRegion) -> MemoryChunk:
        """
        Read exactly `region.size` bytes starting at `region.start`.

        Args:
            region: A readable region with determinate bounds.

        Returns:
            MemoryChunk whose size equals `region.end - region.start`.

        Raises:
            ValueError: If the region is not readable.
            AddressOverflowError: If a bound of the region overflowed.
            RegionReadError: If the span is negative or the read fails.
            StaleRegionError: If the region vanished or the read came back short.
            RegionReadTimeoutError: If the read missed its deadline.
            InsufficientPrivilegeError: If the kernel refuses the read.
            RuntimeError: If the image is not open.
        """
        if not region.readable:
            raise ValueError(f"Region {region} is not readable")
        size = region.size
        if size < 0:
            raise RegionReadError(f"Region {region} ends before it starts", region=region)
        if self._fd is None:
            raise RuntimeError(f"Memory image {self.mem_path} is not open")

        if self.read_timeout is None:
            data = self._read_span(self._fd, region)
        else:
            data = self._read_span_with_deadline(region)

        logger.debug(f"Read {len(data)} bytes from {region}")
        return MemoryChunk(data=data)

    def _read_span_with_deadline(self, region: MemoryRegion) -> bytes:
        """
        Run the read on a daemon thread and wait at most `read_timeout`.

        The worker reads through its own duplicate of the handle and closes it
        when the read returns. A worker that never returns is left behind; as a
        daemon thread it does not hold up interpreter exit.
        """
        try:
            worker_fd = os.dup(self._fd)
        except OSError as e:
            raise RegionReadError(
                f"Unable to duplicate handle on {self.mem_path}: {e}", region=region
            ) from e

        results: "queue.Queue[Tuple[bool, Any]]" = queue.Queue(maxsize=1)
        worker = threading.Thread(
            target=self._deadline_worker,
            args=(worker_fd, region, results),
            name=f"RegionReader-{region.start:#x}",
            daemon=True,
        )
        worker.start()

        try:
            succeeded, outcome = results.get(timeout=self.read_timeout)
        except queue.Empty:
            logger.warning(
                f"Abandoning read of {region} after {self.read_timeout}s (thread {worker.name})"
            )
            raise RegionReadTimeoutError(
                f"Reading {region} did not finish within {self.read_timeout}s",
                region=region,
            )
        if not succeeded:
            raise outcome
        return outcome

    @staticmethod
    def _deadline_worker(
        fd: int, region: MemoryRegion, results: "queue.Queue[Tuple[bool, Any]]"
    ) -> None:
        try:
            results.put((True, MemoryImage._read_span(fd, region)))
        except Exception as e:
            # Handed to the waiting caller, which re-raises it.
            results.put((False, e))
        finally:
            os.close(fd)

    @staticmethod
    def _read_span(fd: int, region: MemoryRegion) -> bytes:
        size = region.end - region.start
        buffer = bytearray()
        try:
            while len(buffer) < size:
                offset = region.start + len(buffer)
                piece = os.pread(fd, min(READ_BLOCK_SIZE, size - len(buffer)), offset)
                if not piece:
                    break
                buffer += piece
        except OSError as e:
            if e.errno in _STALE_ERRNOS:
                raise StaleRegionError(
                    f"Region {region} is no longer readable: {e}", region=region
                ) from e
            if e.errno in _PRIVILEGE_ERRNOS:
                raise InsufficientPrivilegeError(
                    f"Permission denied reading {region}: {e}"
                ) from e
            raise RegionReadError(f"Failed to read {region}: {e}", region=region) from e

        if len(buffer) != size:
            raise StaleRegionError(
                f"Incomplete read of {region}: got {len(buffer)} of {size} bytes",
                region=region,
            )
        return bytes(buffer)
