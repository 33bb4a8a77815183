"""
Memory region data models.

This module defines the structures produced while walking a process's memory
map: the decoded address bounds of each region, the region descriptor itself,
the raw bytes read for a region, and the per-backing-object accumulation of
those reads.
"""

from dataclasses import dataclass, field
from typing import List

from ..validation import AddressOverflowError

# Grouping key for regions whose maps line carries no pathname field.
ANONYMOUS_PATH = "anonymous"

# Value recorded for an address bound that does not fit in a signed 64-bit integer.
OVERFLOW_SENTINEL = -1


@dataclass(frozen=True)
class DecodedAddress:
    """
    Outcome of decoding one hexadecimal address from a maps line.

    Attributes:
        value: The decoded address, or OVERFLOW_SENTINEL when the text encodes
               a value above the signed 64-bit range.
        overflowed: True when `value` is the sentinel rather than an address.
    """

    value: int
    overflowed: bool = False

    @classmethod
    def overflow(cls) -> "DecodedAddress":
        return cls(value=OVERFLOW_SENTINEL, overflowed=True)


@dataclass(frozen=True)
class MemoryRegion:
    """
    One mapping from the process's memory map.

    `start` and `end` are the raw decoded values (OVERFLOW_SENTINEL for an
    overflowed bound). Code doing arithmetic on the bounds must go through
    `size`, which refuses indeterminate regions.
    """

    start_address: DecodedAddress
    end_address: DecodedAddress
    readable: bool
    path: str = ANONYMOUS_PATH

    @property
    def start(self) -> int:
        return self.start_address.value

    @property
    def end(self) -> int:
        return self.end_address.value

    @property
    def is_size_determinate(self) -> bool:
        """True when both bounds decoded to real addresses."""
        return not (self.start_address.overflowed or self.end_address.overflowed)

    @property
    def is_anonymous(self) -> bool:
        return self.path == ANONYMOUS_PATH

    @property
    def size(self) -> int:
        """
        Number of bytes spanned by the region (`end - start`).

        Raises:
            AddressOverflowError: If either bound overflowed during decoding.
        """
        if not self.is_size_determinate:
            raise AddressOverflowError(
                f"Region {self.start:#x}-{self.end:#x} ({self.path}) has an "
                f"overflowed bound; its size is indeterminate"
            )
        return self.end - self.start

    def __str__(self) -> str:
        perms = "r" if self.readable else "-"
        return f"{self.start:#x}-{self.end:#x} {perms} {self.path}"


@dataclass(frozen=True)
class MemoryChunk:
    """Bytes read from one region of the memory image."""

    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class AggregatedObject:
    """
    All chunks read for one backing object, in map order.

    `total_size` is derived from the chunks on every access and cannot be set
    independently.
    """

    path: str
    chunks: List[MemoryChunk] = field(default_factory=list)

    def add_chunk(self, chunk: MemoryChunk) -> None:
        self.chunks.append(chunk)

    @property
    def total_size(self) -> int:
        return sum(chunk.size for chunk in self.chunks)

    @property
    def data(self) -> bytes:
        """Concatenation of every chunk's bytes."""
        return b"".join(chunk.data for chunk in self.chunks)
