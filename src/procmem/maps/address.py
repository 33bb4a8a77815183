"""
Hexadecimal address decoding for maps lines.

Addresses are decoded as signed 64-bit integers. Kernel-half addresses such as
the `[vsyscall]` page (ffffffffff600000) do not fit that range; they decode to
an explicit overflow outcome carrying the -1 sentinel instead of aborting the
scan. Anything that is not plain hexadecimal is a fatal format error.
"""

import logging
import re

from ..models.regions import DecodedAddress
from ..validation import MapFormatError

logger = logging.getLogger(__name__)

INT64_MAX = 2**63 - 1

_HEX_PATTERN = re.compile(r"[0-9a-fA-F]+")


def decode_address(text: str) -> DecodedAddress:
    """
    Decode one hexadecimal address field (no `0x` prefix, no sign).

    Args:
        text: The address text, e.g. "7f3a1c000000".

    Returns:
        DecodedAddress with the integer value, or DecodedAddress.overflow()
        when the value exceeds the signed 64-bit range.

    Raises:
        MapFormatError: If the text is empty or contains non-hex characters.

    Examples:
        >>> decode_address("00400000").value
        4194304
        >>> decode_address("ffffffffff600000").overflowed
        True
    """
    if not _HEX_PATTERN.fullmatch(text):
        raise MapFormatError(f"Invalid hexadecimal address: {text!r}")

    value = int(text, 16)
    if value > INT64_MAX:
        logger.debug(f"Address {text} exceeds the signed 64-bit range; recording overflow")
        return DecodedAddress.overflow()
    return DecodedAddress(value=value)
