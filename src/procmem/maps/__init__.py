"""
Map listing parsing: address decoding and maps line parsing.
"""

from .address import INT64_MAX, decode_address
from .parser import parse_map_line, parse_map_lines, read_map_listing

__all__ = [
    "INT64_MAX",
    "decode_address",
    "parse_map_line",
    "parse_map_lines",
    "read_map_listing",
]
