"""
Command-line interface for the procmem package.
"""

from .main import main_cli

__all__ = [
    "main_cli",
]
