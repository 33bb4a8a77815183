"""
Abstract base class for sample storage implementations.

The interface covers saving a MemorySample, plus the lower-level DataFrame
and dictionary operations the sample formats are built on.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Any, Optional
import polars as pl

from ..models.sample import MemorySample


class DataStorage(ABC):
    """Abstract base class for data storage implementations."""

    @abstractmethod
    def save_sample(self, sample: MemorySample, path: str) -> None:
        """
        Persist one sample.

        Args:
            sample: The sample to save
            path: File path to save to
        """
        pass

    @abstractmethod
    def save_dataframe(self, df: pl.DataFrame, path: str) -> None:
        """
        Save a Polars DataFrame to the specified path.

        Args:
            df: Polars DataFrame to save
            path: File path to save to
        """
        pass

    @abstractmethod
    def load_dataframe(
        self, path: str, columns: Optional[List[str]] = None
    ) -> pl.DataFrame:
        """
        Load a Polars DataFrame from the specified path.

        Args:
            path: File path to load from
            columns: Optional list of columns to load (for column pruning)

        Returns:
            Loaded Polars DataFrame
        """
        pass

    @abstractmethod
    def save_dict(self, data: Dict[str, Any], path: str) -> None:
        """
        Save dictionary data to the specified path.

        Args:
            data: Dictionary data to save
            path: File path to save to
        """
        pass

    @abstractmethod
    def load_dict(self, path: str) -> Dict[str, Any]:
        """
        Load dictionary data from the specified path.

        Args:
            path: File path to load from

        Returns:
            Loaded dictionary data
        """
        pass
