"""
Identity Record Interface Module.

Data classes produced by the secure QR field parser and consumed by the
age deriver and the verification-claim collaborators.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


# Binary layout constants of the secure QR payload
DELIMITER = 0xFF
SIGNATURE_LENGTH = 256
HASH_LENGTH = 32
MAX_TEXT_FIELDS = 16

# Named text fields in payload order (index 0 is the indicator flag)
TEXT_FIELD_NAMES: List[str] = [
    "referenceId",
    "name",
    "dateOfBirth",
    "gender",
    "careOf",
    "district",
    "landmark",
    "house",
    "location",
    "pinCode",
    "postOffice",
    "state",
    "street",
    "subDistrict",
    "vtc",
]

# Email/mobile indicator values
INDICATOR_NONE = 0
INDICATOR_EMAIL = 1
INDICATOR_MOBILE = 2
INDICATOR_BOTH = 3


@dataclass(frozen=True)
class ByteRange:
    """Half-open byte range [start, end) inside a payload."""
    start: int
    end: int

    @property
    def length(self) -> int:
        return max(0, self.end - self.start)

    def slice(self, data: bytes) -> bytes:
        if self.end <= self.start:
            return b""
        return data[self.start:self.end]


@dataclass(frozen=True)
class BinaryLayout:
    """
    Location of the binary tail segments.

    Attributes:
        photo: Range of the embedded photo (may be empty).
        emailHash: Range of the email hash, if present.
        mobileHash: Range of the mobile hash, if present.
        signature: Range of the trailing signature.
    """
    photo: ByteRange
    emailHash: Optional[ByteRange]
    mobileHash: Optional[ByteRange]
    signature: ByteRange


@dataclass(frozen=True)
class DecodedPayload:
    """
    Byte buffer recovered from the QR decimal string.

    Attributes:
        data: Payload bytes after (attempted) decompression.
        compressedLength: Length of the buffer before inflation.
        wasCompressed: True if inflation succeeded.
    """
    data: bytes
    compressedLength: int
    wasCompressed: bool


@dataclass
class IdentityRecord:
    """
    Structured result of parsing a secure QR payload.

    `age` is read-only; the date-of-birth processor fills it in through
    setDerivedAge() and leaves it None when the date of birth cannot be
    used. `isAdult` is derived from it.
    """
    emailMobileIndicator: int = INDICATOR_NONE
    referenceId: str = ""
    name: str = ""
    dateOfBirth: str = ""
    gender: str = ""

    # Address
    careOf: str = ""
    district: str = ""
    landmark: str = ""
    house: str = ""
    location: str = ""
    pinCode: str = ""
    postOffice: str = ""
    state: str = ""
    street: str = ""
    subDistrict: str = ""
    vtc: Optional[str] = None

    # Binary tail
    photo: bytes = b""
    emailHash: Optional[bytes] = None
    mobileHash: Optional[bytes] = None
    signature: bytes = b""

    anomalyCorrected: bool = False
    _age: Optional[int] = field(default=None, init=False)
    _adultAge: int = field(default=18, init=False, repr=False)

    @property
    def age(self) -> Optional[int]:
        """Derived age in years, or None when unknown."""
        return self._age

    @property
    def adultAge(self) -> int:
        """Age threshold used for isAdult."""
        return self._adultAge

    @property
    def isAdult(self) -> Optional[bool]:
        """Adult flag, or None when the age is unknown."""
        if self._age is None:
            return None
        return self._age >= self._adultAge

    def setDerivedAge(self, age: Optional[int], adultAge: int) -> None:
        """Record the result of age derivation (None clears it)."""
        self._age = age
        self._adultAge = adultAge

    @property
    def emailHashHex(self) -> Optional[str]:
        return self.emailHash.hex() if self.emailHash is not None else None

    @property
    def mobileHashHex(self) -> Optional[str]:
        return self.mobileHash.hex() if self.mobileHash is not None else None

    def toSummary(self) -> Dict[str, Any]:
        """
        JSON-safe view of the record.

        Binary segments are reported by length (photo) or hex (hashes,
        signature). `age`/`isAdult` are left out when unknown.

        Returns:
            Dictionary suitable for json.dumps().
        """
        summary: Dict[str, Any] = {
            "emailMobileIndicator": self.emailMobileIndicator,
        }
        for name in TEXT_FIELD_NAMES:
            value = getattr(self, name)
            if value is not None:
                summary[name] = value

        summary["photoLength"] = len(self.photo)
        if self.emailHash is not None:
            summary["emailHash"] = self.emailHashHex
        if self.mobileHash is not None:
            summary["mobileHash"] = self.mobileHashHex
        summary["signature"] = self.signature.hex()
        summary["anomalyCorrected"] = self.anomalyCorrected

        if self.age is not None:
            summary["age"] = self.age
            summary["isAdult"] = self.isAdult

        return summary


class IFieldParser(ABC):
    """
    Interface for secure QR payload parsers.

    Implementations turn a decompressed payload into an IdentityRecord.
    """

    @abstractmethod
    def parseFields(self, payload: bytes) -> IdentityRecord:
        """
        Parse a decompressed payload.

        Args:
            payload: Payload bytes.

        Returns:
            IdentityRecord with text fields and raw binary segments.
        """
        pass
