"""
Data models for the sampling engine.

Region Models:
- Decoded address bounds with an explicit overflow tag
- Memory regions parsed from a process's map listing
- Raw chunks read from the memory image and their per-object accumulation

Sample Models:
- Timestamped per-backing-object byte counts with a reserved Total key

Configuration Models:
- Sampler behaviour and storage settings
"""

from .regions import (
    ANONYMOUS_PATH,
    OVERFLOW_SENTINEL,
    AggregatedObject,
    DecodedAddress,
    MemoryChunk,
    MemoryRegion,
)
from .sample import TOTAL_KEY, MemorySample
from .config import AppConfig, MonitorConfig, StorageConfig

__all__ = [
    # Regions
    "ANONYMOUS_PATH",
    "OVERFLOW_SENTINEL",
    "AggregatedObject",
    "DecodedAddress",
    "MemoryChunk",
    "MemoryRegion",
    # Samples
    "TOTAL_KEY",
    "MemorySample",
    # Configuration
    "AppConfig",
    "MonitorConfig",
    "StorageConfig",
]
