"""
Point-in-time sampling of per-backing-object mapped sizes.
"""

from .sampler import Sampler

__all__ = [
    "Sampler",
]
