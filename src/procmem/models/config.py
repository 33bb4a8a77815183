"""
Configuration data models.

This module contains the configuration structures loaded from `config.toml`:
sampler behaviour, sample persistence, and the root object aggregating them.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Literal, Optional

STORAGE_FORMATS = ("parquet", "json")
COMPRESSION_ALGORITHMS = ("snappy", "gzip", "brotli", "lz4", "zstd")


@dataclass
class StorageConfig:
    """
    Configuration model for sample persistence.

    Attributes:
        format: Output format for saved samples
            - 'parquet': Columnar rows (sample_time, pid, path, size_bytes)
            - 'json': The sample's dictionary form, human-readable
        compression: Compression algorithm for Parquet format
            - 'snappy': Fast compression/decompression (default)
            - 'gzip': Higher compression ratio, slower
            - 'brotli': Very high compression ratio
            - 'lz4': Very fast compression
            - 'zstd': Modern balanced compression

    Note:
        Compression setting only applies to Parquet format.
    """

    format: Literal["parquet", "json"] = "parquet"
    compression: Literal["snappy", "gzip", "brotli", "lz4", "zstd"] = "snappy"

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "StorageConfig":
        """
        Create a StorageConfig instance from a dictionary.

        Args:
            config_dict: Dictionary containing storage configuration

        Returns:
            StorageConfig instance

        Raises:
            ValueError: If invalid configuration values are provided
        """
        format_type = config_dict.get("format", "parquet")
        compression = config_dict.get("compression", "snappy")

        if format_type not in STORAGE_FORMATS:
            raise ValueError(f"Unsupported storage format: {format_type}")

        if format_type == "parquet" and compression not in COMPRESSION_ALGORITHMS:
            raise ValueError(f"Unsupported compression algorithm: {compression}")

        return cls(format=format_type, compression=compression)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "format": self.format,
            "compression": self.compression,
        }


@dataclass
class MonitorConfig:
    """
    Configuration for the sampler's behaviour, loaded from `config.toml`.
    """

    # [monitor.general]
    # Root of the process-information pseudo-filesystem.
    proc_root: Path = Path("/proc")
    log_level: str = "INFO"
    # Refuse to run unless the effective user is root.
    require_root: bool = True

    # [monitor.collection]
    # Deadline for one region read in seconds; None reads without a deadline.
    read_timeout_seconds: Optional[float] = None
    # Skip regions that vanish mid-scan instead of aborting the whole scan.
    skip_stale_regions: bool = True
    # Read region bytes (chunk aggregation) rather than only summing sizes.
    capture_chunks: bool = False

    # [monitor.storage]
    storage: StorageConfig = field(default_factory=StorageConfig)


@dataclass
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    monitor: MonitorConfig = field(default_factory=MonitorConfig)
