"""
Per-backing-object aggregation of region reads.

The ChunkAggregator walks the regions of a map listing in order, reads every
readable one through a MemoryImage and groups the resulting chunks by backing
path. It owns its mapping for the duration of the scan and exposes it
read-only afterwards.
"""

import logging
from datetime import datetime
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, NamedTuple, Optional, Union

from ..maps.parser import parse_map_lines, read_map_listing
from ..models.regions import AggregatedObject, MemoryRegion
from ..models.sample import MemorySample
from ..system.processes import DEFAULT_PROC_ROOT, ensure_process_exists, not_found_if_exited
from ..validation import StaleRegionError
from .reader import MemoryImage

logger = logging.getLogger(__name__)

# SkippedRegion reason for a region whose address bound overflowed.
OVERFLOW_REASON = "address overflow"


class SkippedRegion(NamedTuple):
    """A readable region left out of the aggregation, with the reason."""

    region: MemoryRegion
    reason: str


class ChunkAggregator:
    """
    Groups the bytes of readable regions by backing path.

    Non-readable regions are ignored. Readable regions whose size is
    indeterminate (an address bound overflowed) are skipped and recorded.
    Regions that vanish mid-scan are skipped and recorded when
    `skip_stale_regions` is true; otherwise the StaleRegionError propagates.

    Attributes:
        skipped_regions: Readable regions that contributed no chunk.
    """

    def __init__(self, image: MemoryImage, skip_stale_regions: bool = True):
        self.image = image
        self.skip_stale_regions = skip_stale_regions
        self._objects: Dict[str, AggregatedObject] = {}
        self.skipped_regions: List[SkippedRegion] = []

    def consume(self, regions: Iterable[MemoryRegion]) -> "ChunkAggregator":
        """
        Read and group every readable region of `regions`, in order.

        Returns:
            self, so `ChunkAggregator(image).consume(regions)` reads naturally.
        """
        for region in regions:
            self.add_region(region)
        logger.info(
            f"Aggregated {len(self._objects)} backing objects, "
            f"{self.total_size} bytes, {len(self.skipped_regions)} regions skipped"
        )
        return self

    def add_region(self, region: MemoryRegion) -> None:
        if not region.readable:
            return

        if not region.is_size_determinate:
            logger.warning(f"Skipping region with overflowed address bound: {region}")
            self.skipped_regions.append(SkippedRegion(region, OVERFLOW_REASON))
            return

        try:
            chunk = self.image.read_region(region)
        except StaleRegionError as e:
            if not self.skip_stale_regions:
                raise
            logger.warning(f"Skipping stale region: {e}")
            self.skipped_regions.append(SkippedRegion(region, str(e)))
            return

        aggregated = self._objects.get(region.path)
        if aggregated is None:
            aggregated = AggregatedObject(path=region.path)
            self._objects[region.path] = aggregated
        aggregated.add_chunk(chunk)

    @property
    def objects(self) -> Mapping[str, AggregatedObject]:
        """Backing path to AggregatedObject, in order of first occurrence."""
        return MappingProxyType(self._objects)

    @property
    def total_size(self) -> int:
        """Sum of the total sizes of all aggregated objects."""
        return sum(obj.total_size for obj in self._objects.values())

    def sizes(self) -> Dict[str, int]:
        """Backing path to total bytes read."""
        return {path: obj.total_size for path, obj in self._objects.items()}

    @property
    def indeterminate_regions(self) -> int:
        """Readable regions skipped because an address bound overflowed."""
        return sum(1 for skipped in self.skipped_regions if skipped.reason == OVERFLOW_REASON)

    def to_sample(
        self, sample_time: Optional[datetime] = None, pid: Optional[int] = None
    ) -> MemorySample:
        """
        Summarize the bytes read per backing object as a MemorySample.

        Args:
            sample_time: When the scan started; defaults to now (UTC).
            pid: The scanned process id, when known.
        """
        return MemorySample.from_totals(
            self.sizes(),
            sample_time=sample_time,
            pid=pid,
            indeterminate_regions=self.indeterminate_regions,
        )


def aggregate_process(
    pid: int,
    proc_root: Union[str, Path] = DEFAULT_PROC_ROOT,
    read_timeout: Optional[float] = None,
    skip_stale_regions: bool = True,
) -> ChunkAggregator:
    """
    Read every readable region of a process and group it by backing object.

    The map listing is read once up front; the memory image is opened once for
    the whole scan and closed before returning or raising.

    Args:
        pid: Target process id.
        proc_root: Root of the procfs tree.
        read_timeout: Optional per-region deadline in seconds.
        skip_stale_regions: Skip regions that vanish mid-scan instead of aborting.

    Raises:
        ProcessNotFoundError: If the process does not exist or exits before its
                              maps and mem files are opened.
        ProcfsError, MapFormatError, RegionReadError: On environment errors.
        InsufficientPrivilegeError: If the memory image cannot be read.
    """
    paths = ensure_process_exists(pid, proc_root)
    with not_found_if_exited(paths):
        lines = read_map_listing(paths.maps)
        image = MemoryImage(paths.mem, read_timeout=read_timeout).open()

    try:
        aggregator = ChunkAggregator(image, skip_stale_regions=skip_stale_regions)
        aggregator.consume(parse_map_lines(lines))
    finally:
        image.close()
    return aggregator
