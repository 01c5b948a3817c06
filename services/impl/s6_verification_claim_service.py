"""
S6 Verification Claim Service Implementation.

Step 6: outputs handed to collaborators once a record is decoded. The
identity claim exposes only a commitment and boolean flags; the
verification QR carries a claim reference, never the record itself.

Follows:
- SRP: Only handles claim and verification QR construction
"""

from typing import Optional

from core.interfaces.identity_record_interface import IdentityRecord
from core.processor.identity_claims import (
    IdentityClaim,
    VerificationQrPayload,
    referencePrefixMatches,
    buildIdentityClaim,
    buildVerificationPayload,
    parseVerificationPayload
)
from core.qr.verification_qr_generator import VerificationQrGenerator
from services.interfaces.verification_claim_service_interface import (
    IVerificationClaimService
)
from services.interfaces.base_service_interface import BaseService


class S6VerificationClaimService(IVerificationClaimService, BaseService):
    """
    Step 6: Verification Claim Service Implementation.
    """

    SERVICE_NAME = "s6_verification_claim"

    def __init__(
        self,
        referencePrefixLength: int = 4,
        errorCorrection: str = "H",
        border: int = 1,
        size: int = 300,
        debugBasePath: str = "output/debug",
        debugEnabled: bool = False
    ):
        """
        Initialize S6VerificationClaimService.

        Args:
            referencePrefixLength: Reference id characters compared in ownership checks.
            errorCorrection: Verification QR error-correction level (L/M/Q/H).
            border: Verification QR quiet-zone width in modules.
            size: Verification QR edge length in pixels.
            debugBasePath: Base path for debug output.
            debugEnabled: Whether to save debug output.
        """
        BaseService.__init__(
            self,
            serviceName=self.SERVICE_NAME,
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )

        self._referencePrefixLength = referencePrefixLength
        self._generator = VerificationQrGenerator(
            errorCorrection=errorCorrection,
            border=border,
            size=size,
            logger=self._logger
        )

        self._logger.info(
            f"S6VerificationClaimService initialized "
            f"(errorCorrection={errorCorrection}, size={size}px)"
        )

    def matchesReferencePrefix(self, record: IdentityRecord, digits: str) -> bool:
        """Check user-entered digits against the start of the reference id."""
        matched = referencePrefixMatches(record, digits, self._referencePrefixLength)
        if not matched:
            self._logger.warning("Reference id prefix does not match")
        return matched

    def buildClaim(
        self,
        record: IdentityRecord,
        livenessVerified: bool,
        timestampMs: Optional[int] = None
    ) -> IdentityClaim:
        """Build the identity claim for a record."""
        claim = buildIdentityClaim(record, livenessVerified, timestampMs)
        self._saveDebugJson(claim.proofId, claim.toDict(), prefix="claim")
        self._logger.info(f"Identity claim built: {claim.proofId}")
        return claim

    def createVerificationQr(self, claimType: str, proofId: str, address: str) -> bytes:
        """Render a verification QR as PNG bytes."""
        payload = buildVerificationPayload(claimType, proofId, address)
        return self._generator.toPngBytes(payload)

    def createVerificationQrDataUrl(self, claimType: str, proofId: str, address: str) -> str:
        """Render a verification QR as a data URL for embedding in pages."""
        payload = buildVerificationPayload(claimType, proofId, address)
        return self._generator.toDataUrl(payload)

    def saveVerificationQr(
        self,
        claimType: str,
        proofId: str,
        address: str,
        outputPath: str
    ) -> str:
        """Render a verification QR and write it to a PNG file."""
        payload = buildVerificationPayload(claimType, proofId, address)
        return self._generator.save(payload, outputPath)

    def parseVerificationQr(self, text: str) -> VerificationQrPayload:
        """Validate the text of a scanned verification QR."""
        return parseVerificationPayload(text)
