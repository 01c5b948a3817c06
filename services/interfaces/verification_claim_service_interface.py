"""
Verification Claim Service Interface Module.

Defines the interface for the collaborator-facing outputs built from a
decoded record (Step 6): the commitment-style identity claim and the
verification QR code that points at it.
"""

from abc import ABC, abstractmethod
from typing import Optional

from core.interfaces.identity_record_interface import IdentityRecord
from core.processor.identity_claims import IdentityClaim, VerificationQrPayload


class IVerificationClaimService(ABC):
    """
    Interface for verification claim operations (Step 6).
    """

    @abstractmethod
    def matchesReferencePrefix(self, record: IdentityRecord, digits: str) -> bool:
        """
        Check user-entered digits against the start of the reference id.

        Args:
            record: Decoded record.
            digits: Digits supplied by the card holder.

        Returns:
            bool: True if they match.
        """
        pass

    @abstractmethod
    def buildClaim(
        self,
        record: IdentityRecord,
        livenessVerified: bool,
        timestampMs: Optional[int] = None
    ) -> IdentityClaim:
        """
        Build the identity claim for a record.

        Raises:
            ClaimError: If the record has no reference id or no derived age.
        """
        pass

    @abstractmethod
    def createVerificationQr(
        self,
        claimType: str,
        proofId: str,
        address: str
    ) -> bytes:
        """
        Render a verification QR as PNG bytes.

        Args:
            claimType: "identity" or "age".
            proofId: Proof identifier of a stored claim.
            address: Account address the claim belongs to.

        Returns:
            bytes: PNG image data.
        """
        pass

    @abstractmethod
    def saveVerificationQr(
        self,
        claimType: str,
        proofId: str,
        address: str,
        outputPath: str
    ) -> str:
        """
        Render a verification QR and write it to a PNG file.

        Returns:
            str: The written path.
        """
        pass

    @abstractmethod
    def parseVerificationQr(self, text: str) -> VerificationQrPayload:
        """
        Validate the text of a scanned verification QR.

        Raises:
            VerificationPayloadError: If the payload is malformed.
        """
        pass
