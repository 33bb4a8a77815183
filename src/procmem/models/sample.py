"""
Point-in-time memory sample model.

A MemorySample maps each backing object of a process to the number of
readable bytes mapped from it, plus a reserved "Total" key holding the sum
across all objects. Samples are immutable once built.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

# Reserved key holding the sum of every other entry of a sample.
TOTAL_KEY = "Total"


@dataclass(frozen=True)
class MemorySample:
    """
    Readable bytes per backing object at one instant.

    Attributes:
        sample_time: When the map listing was captured (UTC).
        sizes: Read-only mapping of backing path to byte count, with TOTAL_KEY last.
        pid: The sampled process id, when known.
        indeterminate_regions: Readable regions left out of the sizes because an
                               address bound overflowed.
    """

    sample_time: datetime
    sizes: Mapping[str, int]
    pid: Optional[int] = None
    indeterminate_regions: int = 0

    @classmethod
    def from_totals(
        cls,
        totals: Mapping[str, int],
        sample_time: Optional[datetime] = None,
        pid: Optional[int] = None,
        indeterminate_regions: int = 0,
    ) -> "MemorySample":
        """
        Build a sample from per-path totals, appending the Total key.

        Raises:
            ValueError: If `totals` already contains the reserved key.
        """
        if TOTAL_KEY in totals:
            raise ValueError(f"'{TOTAL_KEY}' is reserved and cannot be used as a path")
        sizes: Dict[str, int] = dict(totals)
        # Computed after every per-path total is final.
        sizes[TOTAL_KEY] = sum(sizes.values())
        return cls(
            sample_time=sample_time or datetime.now(timezone.utc),
            sizes=MappingProxyType(sizes),
            pid=pid,
            indeterminate_regions=indeterminate_regions,
        )

    def __getitem__(self, path: str) -> int:
        return self.sizes[path]

    def __contains__(self, path: object) -> bool:
        return path in self.sizes

    def __iter__(self) -> Iterator[str]:
        return iter(self.sizes)

    def __len__(self) -> int:
        return len(self.sizes)

    @property
    def total(self) -> int:
        return self.sizes[TOTAL_KEY]

    def per_path(self) -> Dict[str, int]:
        """Sizes for every backing object, without the Total key."""
        return {path: size for path, size in self.sizes.items() if path != TOTAL_KEY}

    def sorted_by_size(self) -> List[Tuple[str, int]]:
        """Per-path entries, largest first, ties broken by path."""
        return sorted(self.per_path().items(), key=lambda item: (-item[1], item[0]))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sample_time": self.sample_time.isoformat(),
            "pid": self.pid,
            "indeterminate_regions": self.indeterminate_regions,
            "sizes": dict(self.sizes),
        }

    def to_rows(self) -> List[Dict[str, Any]]:
        """One row per key (Total included), ready for a DataFrame."""
        return [
            {
                "sample_time": self.sample_time,
                "pid": self.pid,
                "path": path,
                "size_bytes": size,
            }
            for path, size in self.sizes.items()
        ]
