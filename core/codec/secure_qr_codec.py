"""
Secure QR Byte Codec Module.

Converts the decimal string carried by a secure QR code into the byte
buffer it encodes, and inflates that buffer when it is compressed.

The QR content is one very large non-negative integer written in base 10.
Its minimal big-endian byte representation is the (usually gzip
compressed) identity payload.
"""

import re
import zlib
import logging

from core.exceptions import PayloadFormatError


logger = logging.getLogger(__name__)

DECIMAL_PATTERN = re.compile(r'^[0-9]+$')

# Digits converted per step; stays below the interpreter's
# int/str conversion limit (4300 digits by default).
DECIMAL_CHUNK_DIGITS = 1000

# Accept both zlib and gzip wrappers (auto-detected from the header).
AUTO_DETECT_WBITS = zlib.MAX_WBITS | 32


def decimalToBytes(decimal: str) -> bytes:
    """
    Convert a base-10 integer string into its big-endian byte form.

    The integer is written in minimal hexadecimal, left-padded to an
    even number of digits, then read as bytes. Zero therefore becomes a
    single 0x00 byte.

    Args:
        decimal: Decimal digits read from the QR code. Surrounding
                 whitespace is ignored.

    Returns:
        bytes: Big-endian byte representation.

    Raises:
        PayloadFormatError: If the input is not a non-negative integer literal.

    Examples:
        >>> decimalToBytes("255")
        b'\\xff'
        >>> decimalToBytes("256")
        b'\\x01\\x00'
    """
    if not isinstance(decimal, str):
        raise PayloadFormatError(
            f"Expected decimal string, got {type(decimal).__name__}"
        )

    digits = decimal.strip()
    if not DECIMAL_PATTERN.match(digits):
        preview = digits[:20] + ("..." if len(digits) > 20 else "")
        raise PayloadFormatError(
            f"QR content is not a non-negative decimal integer: '{preview}'"
        )

    value = _parseLargeDecimal(digits)
    byteLength = max(1, (value.bit_length() + 7) // 8)
    data = value.to_bytes(byteLength, 'big')

    logger.debug(f"Converted {len(digits)} decimal digits to {len(data)} bytes")
    return data


def _parseLargeDecimal(digits: str) -> int:
    """Parse an arbitrarily long digit string in fixed-size chunks."""
    value = 0
    for start in range(0, len(digits), DECIMAL_CHUNK_DIGITS):
        chunk = digits[start:start + DECIMAL_CHUNK_DIGITS]
        value = value * (10 ** len(chunk)) + int(chunk)
    return value


def decompress(data: bytes) -> bytes:
    """
    Inflate a gzip or zlib compressed buffer.

    Secure QR payloads are not guaranteed to be compressed, so a failed
    inflate is not an error: the input is returned unchanged and the
    fallback is logged.

    Args:
        data: Possibly compressed bytes.

    Returns:
        bytes: Inflated bytes, or the input itself if inflation failed.
    """
    try:
        inflated = zlib.decompress(data, AUTO_DETECT_WBITS)
        logger.debug(f"Decompressed {len(data)} bytes to {len(inflated)} bytes")
        return inflated
    except zlib.error as e:
        logger.warning(
            f"Decompression failed, continuing with raw bytes "
            f"({len(data)} bytes): {e}"
        )
        return data


def isCompressed(data: bytes) -> bool:
    """Check whether a buffer starts with a gzip or zlib header."""
    if len(data) < 2:
        return False
    if data[0] == 0x1F and data[1] == 0x8B:
        return True
    # zlib: CM=8 and header checksum divisible by 31
    return (data[0] & 0x0F) == 8 and ((data[0] << 8) | data[1]) % 31 == 0


def bytesToLatin1(data: bytes) -> str:
    """Decode single-byte (ISO-8859-1) text."""
    return data.decode('latin-1')


def bytesToHex(data: bytes) -> str:
    """Lowercase hex string of a byte buffer."""
    return data.hex()
