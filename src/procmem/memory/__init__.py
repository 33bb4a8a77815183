"""
Memory image reading and per-backing-object chunk aggregation.
"""

from .aggregator import OVERFLOW_REASON, ChunkAggregator, SkippedRegion, aggregate_process
from .reader import READ_BLOCK_SIZE, MemoryImage

__all__ = [
    "ChunkAggregator",
    "MemoryImage",
    "OVERFLOW_REASON",
    "READ_BLOCK_SIZE",
    "SkippedRegion",
    "aggregate_process",
]
