"""
Persistence of memory samples.
"""

from .base import DataStorage
from .factory import create_storage, create_storage_from_config
from .parquet_storage import SAMPLE_SCHEMA, ParquetStorage, sample_to_dataframe

__all__ = [
    "DataStorage",
    "ParquetStorage",
    "SAMPLE_SCHEMA",
    "create_storage",
    "create_storage_from_config",
    "sample_to_dataframe",
]
