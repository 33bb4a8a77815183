"""
Parsing of the per-process map listing (`/proc/<pid>/maps`).

Each line has the whitespace-separated fields

    address           perms offset  dev   inode   pathname
    00400000-00452000 r-xp 00000000 08:02 173521  /usr/bin/dbus-daemon

Only the address range, the read flag and the pathname matter here. The
pathname (field 5) is used verbatim as the grouping key; lines without it
are anonymous mappings.
"""

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Union

from ..models.regions import ANONYMOUS_PATH, MemoryRegion
from ..validation import MapFormatError, ProcfsError
from .address import decode_address

logger = logging.getLogger(__name__)

ADDRESS_FIELD = 0
PERMS_FIELD = 1
PATH_FIELD = 5


def parse_map_line(line: str) -> MemoryRegion:
    """
    Parse a single maps line into a MemoryRegion.

    Args:
        line: One line of the map listing, with or without its trailing newline.

    Returns:
        The decoded region. Bounds that overflow 64 bits carry the -1 sentinel
        and are tagged as overflowed.

    Raises:
        MapFormatError: If the line has fewer than two fields, if the address
                        field does not split into exactly two hyphen-separated
                        tokens, or if a bound is not hexadecimal.

    Examples:
        >>> region = parse_map_line("00400000-00401000 r-xp 00000000 08:01 123 /bin/cat")
        >>> (region.start, region.end, region.readable, region.path)
        (4194304, 4198400, True, '/bin/cat')
    """
    fields = line.split()
    if len(fields) <= PERMS_FIELD:
        raise MapFormatError(f"Unable to parse maps line: {line!r}", line=line)

    bounds = fields[ADDRESS_FIELD].split("-")
    if len(bounds) != 2:
        raise MapFormatError(
            f"Unable to parse address space {fields[ADDRESS_FIELD]!r}", line=line
        )

    try:
        start = decode_address(bounds[0])
        end = decode_address(bounds[1])
    except MapFormatError as e:
        raise MapFormatError(f"{e} in maps line {line!r}", line=line) from e

    perms = fields[PERMS_FIELD]
    path = fields[PATH_FIELD] if len(fields) > PATH_FIELD else ANONYMOUS_PATH

    return MemoryRegion(
        start_address=start,
        end_address=end,
        readable=perms[0] == "r",
        path=path,
    )


def parse_map_lines(lines: Iterable[str]) -> Iterator[MemoryRegion]:
    """
    Lazily parse every non-blank line of a map listing, in order.

    Raises:
        MapFormatError: On the first malformed line.
    """
    for line in lines:
        if not line.strip():
            continue
        yield parse_map_line(line)


def read_map_listing(maps_path: Union[str, Path]) -> List[str]:
    """
    Read a map listing in one go so later parsing works on a single snapshot.

    Args:
        maps_path: Path to a `/proc/<pid>/maps` file.

    Returns:
        The listing's lines without trailing newlines.

    Raises:
        ProcfsError: If the file cannot be read.
    """
    try:
        with open(maps_path, "r", encoding="utf-8", errors="surrogateescape") as f:
            content = f.read()
    except OSError as e:
        raise ProcfsError(f"Unable to read map listing {maps_path}: {e}", path=str(maps_path)) from e

    lines = content.splitlines()
    logger.debug(f"Read {len(lines)} map lines from {maps_path}")
    return lines
