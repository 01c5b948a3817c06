"""Record post-processing: age derivation and verification claims."""

from core.processor.date_of_birth_processor import (
    DateOfBirthProcessor,
    parseDate,
    parseDateStrict,
    calculateAge
)
from core.processor.identity_claims import (
    IdentityClaim,
    VerificationQrPayload,
    referencePrefixMatches,
    buildIdentityClaim,
    buildVerificationPayload,
    parseVerificationPayload
)

__all__ = [
    'DateOfBirthProcessor',
    'parseDate',
    'parseDateStrict',
    'calculateAge',
    'IdentityClaim',
    'VerificationQrPayload',
    'referencePrefixMatches',
    'buildIdentityClaim',
    'buildVerificationPayload',
    'parseVerificationPayload'
]
