"""
Size-only sampling of a process's memory map.

The Sampler turns one snapshot of a map listing into a MemorySample: for each
backing object, the number of readable bytes mapped from it, plus the reserved
Total key. No memory bytes are read, so sampling needs only read access to the
maps file. Each call is independent; nothing is kept between calls.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from ..maps.parser import parse_map_lines, read_map_listing
from ..models.sample import MemorySample
from ..system.processes import (
    DEFAULT_PROC_ROOT,
    ensure_process_exists,
    find_pid_by_name,
    not_found_if_exited,
)
from ..validation import MapFormatError

logger = logging.getLogger(__name__)


class Sampler:
    """
    Produces point-in-time MemorySamples.

    Running as root and resolving the right pid are the caller's concern; the
    Sampler only reads the files it is pointed at.

    Args:
        proc_root: Root of the procfs tree used by the pid/name entry points.
    """

    def __init__(self, proc_root: Union[str, Path] = DEFAULT_PROC_ROOT):
        self.proc_root = Path(proc_root)

    def sample_lines(self, lines: Iterable[str], pid: Optional[int] = None) -> MemorySample:
        """
        Build a sample from map-listing lines.

        Readable regions add `end - start` to the total of their backing path.
        Readable regions with an overflowed bound are counted in
        `indeterminate_regions` and contribute nothing.

        Raises:
            MapFormatError: On a malformed line.
        """
        sample_time = datetime.now(timezone.utc)
        totals: Dict[str, int] = {}
        indeterminate = 0

        for region in parse_map_lines(lines):
            if not region.readable:
                continue
            if not region.is_size_determinate:
                logger.warning(f"Region with overflowed address bound excluded from sample: {region}")
                indeterminate += 1
                continue
            size = region.size
            if size < 0:
                raise MapFormatError(f"Region {region} ends before it starts")
            totals[region.path] = totals.get(region.path, 0) + size

        sample = MemorySample.from_totals(
            totals,
            sample_time=sample_time,
            pid=pid,
            indeterminate_regions=indeterminate,
        )
        logger.info(
            f"Sampled {len(totals)} backing objects, {sample.total} readable bytes"
            + (f" for pid {pid}" if pid is not None else "")
        )
        return sample

    def sample_maps_file(self, maps_path: Union[str, Path], pid: Optional[int] = None) -> MemorySample:
        """
        Sample a map listing file, read once.

        Raises:
            ProcfsError: If the file cannot be read.
            MapFormatError: On a malformed line.
        """
        return self.sample_lines(read_map_listing(maps_path), pid=pid)

    def sample_process(self, pid: int) -> MemorySample:
        """
        Sample the process with id `pid`.

        Raises:
            ProcessNotFoundError: If there is no such process, or it exits
                                  before its map listing is read.
            ProcfsError: If its map listing cannot be read.
            MapFormatError: On a malformed line.
        """
        paths = ensure_process_exists(pid, self.proc_root)
        with not_found_if_exited(paths):
            return self.sample_maps_file(paths.maps, pid=pid)

    def sample_process_by_name(self, name: str) -> MemorySample:
        """
        Resolve `name` to a pid through the status files, then sample it.

        Raises:
            ProcessNotFoundError: If no process has that name.
            ProcfsError: If procfs cannot be read.
            MapFormatError: On a malformed line.
        """
        pid = find_pid_by_name(name, self.proc_root)
        return self.sample_process(pid)
