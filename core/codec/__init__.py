"""Byte codec for secure QR payloads."""

from core.codec.secure_qr_codec import (
    decimalToBytes,
    decompress,
    isCompressed,
    bytesToLatin1,
    bytesToHex
)

__all__ = [
    'decimalToBytes',
    'decompress',
    'isCompressed',
    'bytesToLatin1',
    'bytesToHex'
]
