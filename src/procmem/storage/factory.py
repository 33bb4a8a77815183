"""
Factory for creating storage instances.
"""

import logging
from typing import Literal

from ..models.config import StorageConfig
from .base import DataStorage
from .parquet_storage import ParquetStorage

logger = logging.getLogger(__name__)


def create_storage(
    format_type: Literal["parquet", "json"] = "parquet",
    compression: Literal["snappy", "gzip", "brotli", "lz4", "zstd"] = "snappy",
) -> DataStorage:
    """
    Create a storage instance based on the specified format type.

    Args:
        format_type: Sample format ('parquet' or 'json')
        compression: Compression algorithm (for Parquet only)

    Returns:
        DataStorage instance

    Raises:
        ValueError: If an unsupported format type is specified
    """
    if format_type not in ("parquet", "json"):
        raise ValueError(f"Unsupported storage format: {format_type}")
    logger.debug(f"Creating ParquetStorage ({format_type}) with compression: {compression}")
    return ParquetStorage(compression=compression, sample_format=format_type)


def create_storage_from_config(config: StorageConfig) -> DataStorage:
    return create_storage(format_type=config.format, compression=config.compression)
