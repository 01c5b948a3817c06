"""
Services Interfaces Package.

Exports all service interfaces for the secure QR decoder pipeline.
"""

from services.interfaces.base_service_interface import (
    IBaseService,
    BaseService,
    generateFrameId
)

from services.interfaces.config_service_interface import IConfigService

from services.interfaces.camera_service_interface import (
    CameraFrame,
    ICameraService
)

from services.interfaces.qr_localization_service_interface import (
    QrLocalizationResult,
    IQrLocalizationService
)

from services.interfaces.payload_decoding_service_interface import (
    PayloadDecodingResult,
    IPayloadDecodingService
)

from services.interfaces.field_parsing_service_interface import (
    FieldParsingResult,
    IFieldParsingService
)

from services.interfaces.age_derivation_service_interface import (
    AgeDerivationResult,
    IAgeDerivationService
)

from services.interfaces.verification_claim_service_interface import (
    IVerificationClaimService
)


__all__ = [
    # Base
    "IBaseService",
    "BaseService",
    "generateFrameId",

    # Config
    "IConfigService",

    # S1 Camera
    "CameraFrame",
    "ICameraService",

    # S2 QR Localization
    "QrLocalizationResult",
    "IQrLocalizationService",

    # S3 Payload Decoding
    "PayloadDecodingResult",
    "IPayloadDecodingService",

    # S4 Field Parsing
    "FieldParsingResult",
    "IFieldParsingService",

    # S5 Age Derivation
    "AgeDerivationResult",
    "IAgeDerivationService",

    # S6 Verification Claim
    "IVerificationClaimService",
]
