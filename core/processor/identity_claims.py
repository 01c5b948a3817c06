"""
Identity Claims Module.

Builds the facts handed to the ledger and verification collaborators
from a decoded IdentityRecord:

- Ownership check on the leading digits of the reference id
- Commitment-style digest binding reference id, age, adult flag and the
  externally supplied liveness result
- Verification QR payloads ({type, proofId, address}) and their parsing

The digest is illustrative. It is not a zero-knowledge proof and it
exposes nothing from the record besides the adult and liveness flags.
"""

import json
import time
import hashlib
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from core.exceptions import ClaimError, VerificationPayloadError
from core.interfaces.identity_record_interface import IdentityRecord


logger = logging.getLogger(__name__)

CLAIM_TYPE_IDENTITY = "identity"
CLAIM_TYPE_AGE = "age"
SUPPORTED_CLAIM_TYPES = [CLAIM_TYPE_IDENTITY, CLAIM_TYPE_AGE]

DEFAULT_REFERENCE_PREFIX_LENGTH = 4


@dataclass(frozen=True)
class IdentityClaim:
    """
    Facts submitted to the ledger for one identity.

    Attributes:
        proofId: Identifier of this claim.
        commitment: Hex SHA-256 digest over the identity facts.
        isAdult: Adult flag derived from the date of birth.
        livenessVerified: Result of the external liveness check.
    """
    proofId: str
    commitment: str
    isAdult: bool
    livenessVerified: bool

    def toDict(self) -> Dict[str, Any]:
        return {
            "proofId": self.proofId,
            "commitment": self.commitment,
            "publicSignals": {
                "isAdult": self.isAdult,
                "livenessVerified": self.livenessVerified,
            },
        }


@dataclass(frozen=True)
class VerificationQrPayload:
    """Content of a verification QR code."""
    type: str
    proofId: str
    address: str

    def toJson(self) -> str:
        return json.dumps(
            {"type": self.type, "proofId": self.proofId, "address": self.address},
            separators=(',', ':')
        )


def referencePrefixMatches(
    record: IdentityRecord,
    digits: str,
    prefixLength: int = DEFAULT_REFERENCE_PREFIX_LENGTH
) -> bool:
    """
    Check user-entered digits against the start of the reference id.

    Args:
        record: Decoded record.
        digits: Digits entered by the holder.
        prefixLength: Number of leading characters compared.

    Returns:
        bool: True if both are non-empty and the prefixes are equal.
    """
    reference = (record.referenceId or "").strip()
    entered = (digits or "").strip()
    if len(reference) < prefixLength or len(entered) != prefixLength:
        return False
    return reference[:prefixLength] == entered


def _sha256Hex(text: str) -> str:
    return hashlib.sha256(text.encode('utf-8')).hexdigest()


def computeCommitment(referenceId: str, age: int, isAdult: bool, livenessVerified: bool) -> str:
    """Hex SHA-256 digest over the identity facts."""
    material = "|".join([
        _sha256Hex(referenceId),
        str(age),
        "1" if isAdult else "0",
        "1" if livenessVerified else "0",
    ])
    return _sha256Hex(material)


def generateProofId(referenceId: str, timestampMs: Optional[int] = None) -> str:
    """Proof identifier of the form proof_<digest prefix>_<milliseconds>."""
    if timestampMs is None:
        timestampMs = int(time.time() * 1000)
    return f"proof_{_sha256Hex(referenceId)[:16]}_{timestampMs}"


def buildIdentityClaim(
    record: IdentityRecord,
    livenessVerified: bool,
    timestampMs: Optional[int] = None
) -> IdentityClaim:
    """
    Build the claim stored for a decoded identity.

    Args:
        record: Record with derived age.
        livenessVerified: Result supplied by the liveness subsystem.
        timestampMs: Timestamp used in the proof id (defaults to now).

    Returns:
        IdentityClaim

    Raises:
        ClaimError: If the record has no reference id or no derived age.
    """
    referenceId = (record.referenceId or "").strip()
    if not referenceId:
        raise ClaimError("Record has no reference id")
    if record.age is None:
        raise ClaimError("Age is unknown; date of birth could not be used")

    commitment = computeCommitment(referenceId, record.age, record.isAdult, livenessVerified)
    claim = IdentityClaim(
        proofId=generateProofId(referenceId, timestampMs),
        commitment=commitment,
        isAdult=bool(record.isAdult),
        livenessVerified=bool(livenessVerified)
    )
    logger.debug(f"Built claim {claim.proofId} (isAdult={claim.isAdult}, liveness={claim.livenessVerified})")
    return claim


def buildVerificationPayload(claimType: str, proofId: str, address: str) -> VerificationQrPayload:
    """
    Create the payload of a verification QR code.

    Raises:
        VerificationPayloadError: If a field is missing or the type is unknown.
    """
    payload = VerificationQrPayload(type=claimType, proofId=proofId, address=address)
    _validatePayload(payload)
    return payload


def parseVerificationPayload(text: str) -> VerificationQrPayload:
    """
    Parse and validate the content of a scanned verification QR code.

    Args:
        text: Decoded QR text (compact JSON).

    Returns:
        VerificationQrPayload

    Raises:
        VerificationPayloadError: If the text is not a valid verification payload.
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise VerificationPayloadError(
            "Invalid QR code format. Please scan a valid verification QR code."
        ) from e

    if not isinstance(data, dict):
        raise VerificationPayloadError("Verification QR payload must be a JSON object")

    payload = VerificationQrPayload(
        type=str(data.get("type") or ""),
        proofId=str(data.get("proofId") or ""),
        address=str(data.get("address") or "")
    )
    _validatePayload(payload)
    return payload


def _validatePayload(payload: VerificationQrPayload) -> None:
    missing = [name for name in ("proofId", "address", "type") if not getattr(payload, name)]
    if missing:
        raise VerificationPayloadError(f"Verification payload missing: {', '.join(missing)}")
    if payload.type not in SUPPORTED_CLAIM_TYPES:
        raise VerificationPayloadError(
            f"Unknown verification type '{payload.type}'. Supported: {SUPPORTED_CLAIM_TYPES}"
        )
