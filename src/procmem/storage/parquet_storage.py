"""
Sample storage using Polars, in Parquet or JSON form.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Any, Literal
import polars as pl

from ..models.sample import MemorySample
from .base import DataStorage

logger = logging.getLogger(__name__)

SAMPLE_SCHEMA = {
    "sample_time": pl.Datetime(time_unit="us", time_zone="UTC"),
    "pid": pl.Int64,
    "path": pl.Utf8,
    "size_bytes": pl.Int64,
}


def sample_to_dataframe(sample: MemorySample) -> pl.DataFrame:
    """One row per sample key, Total included as the last row."""
    return pl.DataFrame(sample.to_rows(), schema=SAMPLE_SCHEMA)


class ParquetStorage(DataStorage):
    """
    Polars-backed storage.

    Samples are written as Parquet rows (`sample_time`, `pid`, `path`,
    `size_bytes`) when `sample_format` is 'parquet', or as the sample's
    dictionary form in JSON when it is 'json'.
    """

    def __init__(
        self,
        compression: Literal["snappy", "gzip", "brotli", "lz4", "zstd"] = "snappy",
        sample_format: Literal["parquet", "json"] = "parquet",
    ):
        """
        Args:
            compression: Compression algorithm for Parquet files
            sample_format: Format used by save_sample
        """
        self.compression = compression
        self.sample_format = sample_format
        logger.debug(
            f"Initialized ParquetStorage with compression: {compression}, sample format: {sample_format}"
        )

    def save_sample(self, sample: MemorySample, path: str) -> None:
        if self.sample_format == "json":
            self.save_dict(sample.to_dict(), path)
        else:
            self.save_dataframe(sample_to_dataframe(sample), path)
        logger.info(f"Saved sample with {len(sample)} entries to {path}")

    def save_dataframe(self, df: pl.DataFrame, path: str) -> None:
        """
        Save a Polars DataFrame to Parquet format.

        Args:
            df: Polars DataFrame to save
            path: File path to save to
        """
        try:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            df.write_parquet(path, compression=self.compression)
            logger.debug(f"Saved DataFrame with {len(df)} rows to {path}")
        except Exception as e:
            logger.error(f"Failed to save DataFrame to {path}: {e}")
            raise

    def load_dataframe(self, path: str, columns: Optional[List[str]] = None) -> pl.DataFrame:
        """
        Load a Polars DataFrame from Parquet format.

        Args:
            path: File path to load from
            columns: Optional list of columns to load (for column pruning)

        Returns:
            Loaded Polars DataFrame
        """
        try:
            if columns:
                df = pl.read_parquet(path, columns=columns)
                logger.debug(f"Loaded DataFrame with columns {columns} from {path}")
            else:
                df = pl.read_parquet(path)
                logger.debug(f"Loaded DataFrame with {len(df)} rows from {path}")
            return df
        except Exception as e:
            logger.error(f"Failed to load DataFrame from {path}: {e}")
            raise

    def save_dict(self, data: Dict[str, Any], path: str) -> None:
        """
        Save dictionary data to JSON format.

        Args:
            data: Dictionary data to save
            path: File path to save to
        """
        try:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            logger.debug(f"Saved dictionary data to {path}")
        except Exception as e:
            logger.error(f"Failed to save dictionary to {path}: {e}")
            raise

    def load_dict(self, path: str) -> Dict[str, Any]:
        """
        Load dictionary data from JSON format.

        Args:
            path: File path to load from

        Returns:
            Loaded dictionary data
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            logger.debug(f"Loaded dictionary data from {path}")
            return data
        except Exception as e:
            logger.error(f"Failed to load dictionary from {path}: {e}")
            raise
