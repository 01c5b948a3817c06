"""Secure QR payload parsing."""

from core.parser.secure_qr_field_parser import (
    SecureQrFieldParser,
    tokenize,
    correctFieldShift,
    computeBinaryLayout,
    parseLeadingInteger
)

__all__ = [
    'SecureQrFieldParser',
    'tokenize',
    'correctFieldShift',
    'computeBinaryLayout',
    'parseLeadingInteger'
]
