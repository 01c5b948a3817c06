"""Synthetic secure QR payloads for tests."""

import zlib
from typing import Dict, Optional

from core.interfaces.identity_record_interface import TEXT_FIELD_NAMES


SIGNATURE = bytes(range(256))
EMAIL_HASH = bytes([0xE1]) * 32
MOBILE_HASH = bytes([0x3C]) * 32

DEFAULT_FIELDS: Dict[str, Optional[str]] = {
    "referenceId": "269720190612163909327",
    "name": "Asha Verma",
    "dateOfBirth": "15/06/2000",
    "gender": "F",
    "careOf": "C/O Ravi Verma",
    "district": "Pune",
    "landmark": "Near Temple",
    "house": "12B",
    "location": "Kothrud",
    "pinCode": "411038",
    "postOffice": "Kothrud",
    "state": "Maharashtra",
    "street": "MG Road",
    "subDistrict": "Haveli",
    "vtc": "Pune City",
}


def buildPayload(
    indicator: str = "0",
    fields: Optional[Dict[str, Optional[str]]] = None,
    photo: bytes = b"",
    emailHash: bytes = b"",
    mobileHash: bytes = b"",
    signature: bytes = SIGNATURE
) -> bytes:
    """Delimited text fields followed by the binary tail."""
    values = dict(DEFAULT_FIELDS)
    values.update(fields or {})

    tokens = [indicator] + [values[name] for name in TEXT_FIELD_NAMES if values[name] is not None]
    text = b"".join(token.encode("latin-1") + b"\xff" for token in tokens)
    return text + photo + emailHash + mobileHash + signature


def toDecimal(data: bytes) -> str:
    """Big-endian bytes as a base-10 string, for any length."""
    value = int.from_bytes(data, "big")
    if value == 0:
        return "0"

    base = 10 ** 1000
    chunks = []
    while value:
        value, chunk = divmod(value, base)
        chunks.append(chunk)

    parts = [str(chunks[-1])] + [str(chunk).zfill(1000) for chunk in reversed(chunks[:-1])]
    return "".join(parts)


def gzipPayload(data: bytes) -> bytes:
    """Gzip-wrapped deflate stream, as written by secure QR encoders."""
    compressor = zlib.compressobj(9, zlib.DEFLATED, zlib.MAX_WBITS | 16)
    return compressor.compress(data) + compressor.flush()
