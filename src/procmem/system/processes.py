"""
Process lookup through the procfs root.

This module resolves a process id from a process name by scanning the numeric
entries of the procfs root and matching the `Name:` field of each status file,
and builds the paths of the per-process pseudo-files the sampler reads.
"""

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, NamedTuple, Optional, Union

from ..validation import ProcessNotFoundError, ProcfsError, handle_procfs_error, ErrorSeverity

logger = logging.getLogger(__name__)

DEFAULT_PROC_ROOT = Path("/proc")

_NAME_FIELD = "Name:"


class ProcessPaths(NamedTuple):
    """Pseudo-files of one process under the procfs root."""

    pid: int
    root: Path
    status: Path
    maps: Path
    mem: Path


def process_paths(pid: int, proc_root: Union[str, Path] = DEFAULT_PROC_ROOT) -> ProcessPaths:
    """Build the status/maps/mem paths for `pid`."""
    root = Path(proc_root) / str(pid)
    return ProcessPaths(
        pid=pid,
        root=root,
        status=root / "status",
        maps=root / "maps",
        mem=root / "mem",
    )


def ensure_process_exists(pid: int, proc_root: Union[str, Path] = DEFAULT_PROC_ROOT) -> ProcessPaths:
    """
    Return the paths of `pid` after checking its procfs directory exists.

    Raises:
        ProcessNotFoundError: If there is no directory for `pid`.
    """
    paths = process_paths(pid, proc_root)
    if not paths.root.is_dir():
        raise ProcessNotFoundError(f"No process with pid {pid} under {proc_root}", pid=pid)
    return paths


@contextmanager
def not_found_if_exited(paths: ProcessPaths) -> Iterator[ProcessPaths]:
    """
    Report procfs failures caused by the process exiting as ProcessNotFoundError.

    A pid can be resolved and then exit before its maps or mem file is opened.
    Inside the block, a ProcfsError raised for a missing file, or after the
    process directory has gone, becomes ProcessNotFoundError. Other procfs
    failures propagate unchanged.
    """
    try:
        yield paths
    except ProcfsError as e:
        exited = isinstance(e.__cause__, (FileNotFoundError, ProcessLookupError))
        if exited or not paths.root.is_dir():
            raise ProcessNotFoundError(
                f"Process {paths.pid} exited during the scan", pid=paths.pid
            ) from e
        raise


def list_pids(proc_root: Union[str, Path] = DEFAULT_PROC_ROOT) -> List[int]:
    """
    List the ids of every process directory under the procfs root, ascending.

    Raises:
        ProcfsError: If the procfs root cannot be listed.
    """
    try:
        entries = list(os.scandir(proc_root))
    except OSError as e:
        raise ProcfsError(f"Unable to open proc dir {proc_root}: {e}", path=str(proc_root)) from e

    pids = []
    for entry in entries:
        if not entry.name.isdigit():
            continue
        try:
            if entry.is_dir():
                pids.append(int(entry.name))
        except OSError:
            # The process exited while we were listing.
            continue
    pids.sort()
    logger.debug(f"Found {len(pids)} process directories under {proc_root}")
    return pids


def extract_process_name(status_text: str) -> Optional[str]:
    """
    Return the whitespace-trimmed value of the `Name:` line of a status file.

    Examples:
        >>> extract_process_name("Name:\\tcat\\nUmask:\\t0022\\n")
        'cat'
    """
    for line in status_text.splitlines():
        if line.startswith(_NAME_FIELD):
            return line[len(_NAME_FIELD):].strip()
    return None


def read_process_name(status_path: Union[str, Path]) -> Optional[str]:
    """
    Read the process name from one status file.

    Raises:
        FileNotFoundError, ProcessLookupError: If the process has exited.
        ProcfsError: On any other read failure.
    """
    try:
        with open(status_path, "r", encoding="utf-8", errors="replace") as f:
            return extract_process_name(f.read())
    except (FileNotFoundError, ProcessLookupError):
        raise
    except OSError as e:
        raise ProcfsError(f"Unable to read {status_path}: {e}", path=str(status_path)) from e


def find_pid_by_name(name: str, proc_root: Union[str, Path] = DEFAULT_PROC_ROOT) -> int:
    """
    Find the lowest pid whose status `Name:` equals `name` exactly.

    The comparison is case-sensitive after trimming surrounding whitespace
    from both sides. Processes that exit during the scan are skipped.

    Args:
        name: Process name as shown in /proc/<pid>/status.
        proc_root: Root of the procfs tree.

    Returns:
        The matching process id.

    Raises:
        ProcessNotFoundError: If no process has that name.
        ProcfsError: If the procfs root or a status file cannot be read.
    """
    wanted = name.strip()
    # Matches status Name: fields under proc_root; psutil.process_iter() only sees the live /proc.
    for pid in list_pids(proc_root):
        status_path = process_paths(pid, proc_root).status
        try:
            proc_name = read_process_name(status_path)
        except (FileNotFoundError, ProcessLookupError):
            logger.debug(f"Process {pid} exited before its status could be read")
            continue
        except ProcfsError as e:
            handle_procfs_error(
                error=e,
                context=f"reading status of pid {pid}",
                severity=ErrorSeverity.ERROR,
                reraise=True,
                logger=logger,
            )
        if proc_name == wanted:
            logger.info(f"Resolved process name '{wanted}' to pid {pid}")
            return pid

    raise ProcessNotFoundError(
        f"Unable to find pid for process name: {wanted}", name=wanted
    )
