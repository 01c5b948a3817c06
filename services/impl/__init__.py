"""
Services Implementation Package.

Exports all service implementations for the secure QR decoder pipeline.
"""

from services.impl.config_service import ConfigService
from services.impl.s1_camera_service import S1CameraService
from services.impl.s2_qr_localization_service import S2QrLocalizationService
from services.impl.s3_payload_decoding_service import S3PayloadDecodingService
from services.impl.s4_field_parsing_service import S4FieldParsingService
from services.impl.s5_age_derivation_service import S5AgeDerivationService
from services.impl.s6_verification_claim_service import S6VerificationClaimService


__all__ = [
    "ConfigService",
    "S1CameraService",
    "S2QrLocalizationService",
    "S3PayloadDecodingService",
    "S4FieldParsingService",
    "S5AgeDerivationService",
    "S6VerificationClaimService",
]
