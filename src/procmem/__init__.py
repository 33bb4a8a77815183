"""
procmem: per-backing-object memory accounting for Linux processes.

This package reads a process's map listing and memory image from procfs and
reports how many readable bytes each mapped file (or anonymous region)
accounts for.

The package is organized into specialized modules:
- maps: address decoding and maps line parsing
- memory: memory image reading and per-object chunk aggregation
- sampling: size-only, timestamped samples
- system: process lookup by name and privilege checks
- storage: persisting samples (Parquet/JSON)
- config: configuration management and validation
- validation: error taxonomy and input validation
- cli: command-line interface

Usage:
    From command line:
        procmem --name nginx

    Programmatically:
        from procmem import Sampler
        sample = Sampler().sample_process_by_name("nginx")
        print(sample["Total"])
"""

from .config import get_config, clear_config_cache, set_config_path

from .models import (
    ANONYMOUS_PATH,
    OVERFLOW_SENTINEL,
    TOTAL_KEY,
    AggregatedObject,
    AppConfig,
    DecodedAddress,
    MemoryChunk,
    MemoryRegion,
    MemorySample,
    MonitorConfig,
    StorageConfig,
)

from .maps import decode_address, parse_map_line, parse_map_lines, read_map_listing
from .memory import ChunkAggregator, MemoryImage, aggregate_process
from .sampling import Sampler
from .system import ensure_root_privileges, find_pid_by_name

from .validation import (
    AddressOverflowError,
    ErrorKind,
    InsufficientPrivilegeError,
    MapFormatError,
    ProcessNotFoundError,
    ProcfsError,
    ProcMemError,
    RegionReadError,
    RegionReadTimeoutError,
    StaleRegionError,
    ValidationError,
)

from .cli import main_cli

__version__ = "1.0.0"

__all__ = [
    # Configuration
    "get_config",
    "clear_config_cache",
    "set_config_path",
    # Models
    "ANONYMOUS_PATH",
    "OVERFLOW_SENTINEL",
    "TOTAL_KEY",
    "AggregatedObject",
    "AppConfig",
    "DecodedAddress",
    "MemoryChunk",
    "MemoryRegion",
    "MemorySample",
    "MonitorConfig",
    "StorageConfig",
    # Core
    "decode_address",
    "parse_map_line",
    "parse_map_lines",
    "read_map_listing",
    "ChunkAggregator",
    "MemoryImage",
    "aggregate_process",
    "Sampler",
    "ensure_root_privileges",
    "find_pid_by_name",
    # Errors
    "AddressOverflowError",
    "ErrorKind",
    "InsufficientPrivilegeError",
    "MapFormatError",
    "ProcessNotFoundError",
    "ProcfsError",
    "ProcMemError",
    "RegionReadError",
    "RegionReadTimeoutError",
    "StaleRegionError",
    "ValidationError",
    # CLI
    "main_cli",
]
