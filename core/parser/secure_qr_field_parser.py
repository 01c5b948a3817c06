"""
Secure QR Field Parser Module.

Parses the decompressed secure QR payload:

    indicator 0xFF referenceId 0xFF name 0xFF ... 0xFF vtc 0xFF
    photo [emailHash] [mobileHash] signature

The text region has a variable length, the binary tail a fixed layout
that depends on the email/mobile indicator. Text is tokenized from the
front, the tail is located from the back.
"""

import re
import logging
from typing import List, Optional, Tuple

from core.codec.secure_qr_codec import bytesToLatin1
from core.exceptions import FieldCountError, SignatureBoundsError
from core.interfaces.identity_record_interface import (
    IFieldParser,
    IdentityRecord,
    BinaryLayout,
    ByteRange,
    DELIMITER,
    SIGNATURE_LENGTH,
    HASH_LENGTH,
    MAX_TEXT_FIELDS,
    TEXT_FIELD_NAMES,
    INDICATOR_NONE,
    INDICATOR_EMAIL,
    INDICATOR_MOBILE,
    INDICATOR_BOTH
)


logger = logging.getLogger(__name__)

# Leading integer, parsed the way the upstream encoders' readers do
# ("3", " 2", "1abc" are integers; "abc" is not)
LEADING_INTEGER_PATTERN = re.compile(r'^\s*([+-]?\d+)')

# token[1] value that marks the known field-shift encoder defect
SHIFTED_INDICATOR_TOKEN = "3"

MIN_TOKENS = 2


def tokenize(payload: bytes, maxTokens: int = MAX_TEXT_FIELDS) -> Tuple[List[str], int]:
    """
    Split the leading text fields on the delimiter byte.

    Scanning stops after `maxTokens` tokens so that delimiter-valued
    bytes inside the binary tail are never treated as separators.

    Args:
        payload: Decompressed payload.
        maxTokens: Maximum number of text tokens to read.

    Returns:
        Tuple of (tokens as Latin-1 text, offset where the binary region starts).
    """
    tokens: List[str] = []
    index = 0
    length = len(payload)

    while index < length and len(tokens) < maxTokens:
        endIndex = payload.find(DELIMITER, index)
        if endIndex < 0:
            endIndex = length
        tokens.append(bytesToLatin1(payload[index:endIndex]))
        index = endIndex + 1

    return tokens, min(index, length)


def parseLeadingInteger(text: str) -> Optional[int]:
    """Parse the leading integer of a token, or None if it has none."""
    match = LEADING_INTEGER_PATTERN.match(text)
    if not match:
        return None
    return int(match.group(1))


def correctFieldShift(tokens: List[str]) -> Tuple[List[str], bool]:
    """
    Undo the known one-position field shift of some encoders.

    The defect shows up as a non-numeric token[0] followed by the
    literal "3" in token[1]. Tokens 1..n-2 are then shifted left by one.
    Any other input is returned unchanged.

    Args:
        tokens: Raw text tokens.

    Returns:
        Tuple of (possibly shifted copy of tokens, whether the shift was applied).
    """
    if len(tokens) < MIN_TOKENS:
        return list(tokens), False

    if parseLeadingInteger(tokens[0]) is not None or tokens[1] != SHIFTED_INDICATOR_TOKEN:
        return list(tokens), False

    shifted = list(tokens)
    for i in range(1, len(shifted) - 1):
        shifted[i] = shifted[i + 1]
    return shifted, True


def computeBinaryLayout(
    payloadLength: int,
    emailMobileIndicator: int,
    textRegionEnd: int,
    anomalyCorrected: bool = False
) -> BinaryLayout:
    """
    Locate photo, hashes and signature from the end of the payload.

    Layout by indicator (tail order is email, mobile, signature):
    - 3 (or anomaly corrected): photo | emailHash | mobileHash | signature
    - 2: photo | mobileHash | signature
    - 1: photo | emailHash | signature
    - otherwise: photo | signature

    Args:
        payloadLength: Total payload length in bytes.
        emailMobileIndicator: Indicator flag value.
        textRegionEnd: Offset right after the last text field's delimiter.
        anomalyCorrected: Whether the field-shift correction fired.

    Returns:
        BinaryLayout with the four byte ranges.

    Raises:
        SignatureBoundsError: If the payload cannot hold the required tail.
    """
    bothPresent = anomalyCorrected or emailMobileIndicator == INDICATOR_BOTH
    if bothPresent:
        hashCount = 2
    elif emailMobileIndicator in (INDICATOR_EMAIL, INDICATOR_MOBILE):
        hashCount = 1
    else:
        hashCount = 0

    requiredLength = SIGNATURE_LENGTH + hashCount * HASH_LENGTH
    if payloadLength < requiredLength:
        raise SignatureBoundsError(payloadLength, requiredLength)

    signatureStart = payloadLength - SIGNATURE_LENGTH
    signature = ByteRange(signatureStart, payloadLength)

    emailHash: Optional[ByteRange] = None
    mobileHash: Optional[ByteRange] = None

    if bothPresent:
        mobileStart = signatureStart - HASH_LENGTH
        emailStart = mobileStart - HASH_LENGTH
        mobileHash = ByteRange(mobileStart, signatureStart)
        emailHash = ByteRange(emailStart, mobileStart)
        photoEnd = emailStart
    elif emailMobileIndicator == INDICATOR_MOBILE:
        mobileStart = signatureStart - HASH_LENGTH
        mobileHash = ByteRange(mobileStart, signatureStart)
        photoEnd = mobileStart
    elif emailMobileIndicator == INDICATOR_EMAIL:
        emailStart = signatureStart - HASH_LENGTH
        emailHash = ByteRange(emailStart, signatureStart)
        photoEnd = emailStart
    else:
        photoEnd = signatureStart

    # Text region overrunning the tail leaves an empty photo
    photoStart = min(textRegionEnd, photoEnd)

    return BinaryLayout(
        photo=ByteRange(photoStart, photoEnd),
        emailHash=emailHash,
        mobileHash=mobileHash,
        signature=signature
    )


class SecureQrFieldParser(IFieldParser):
    """
    Parser for the delimiter-separated secure QR identity payload.

    Steps:
    1. Tokenize up to 16 text fields
    2. Correct the known field-shift defect
    3. Assign tokens to named fields
    4. Extract the binary tail from the end of the payload
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize SecureQrFieldParser.

        Args:
            logger: Logger instance for debug output.
        """
        self._logger = logger or logging.getLogger(__name__)

    def parseFields(self, payload: bytes) -> IdentityRecord:
        """
        Parse a decompressed payload into an IdentityRecord.

        Args:
            payload: Decompressed payload bytes.

        Returns:
            IdentityRecord with age not yet derived.

        Raises:
            FieldCountError: If fewer than 2 tokens are recoverable.
            SignatureBoundsError: If the payload is too short for its tail.
        """
        tokens, textRegionEnd = tokenize(payload)
        self._logger.debug(
            f"Read {len(tokens)} text field(s), binary region starts at {textRegionEnd}"
        )

        if len(tokens) < MIN_TOKENS:
            raise FieldCountError(len(tokens), MIN_TOKENS)

        tokens, anomalyCorrected = correctFieldShift(tokens)
        if anomalyCorrected:
            self._logger.warning(
                "Indicator field is not numeric and next field is '3'; "
                "applying field-shift correction"
            )
            indicator = INDICATOR_BOTH
        else:
            indicator = self._readIndicator(tokens[0])

        record = IdentityRecord(emailMobileIndicator=indicator, anomalyCorrected=anomalyCorrected)
        self._assignTextFields(record, tokens)

        layout = computeBinaryLayout(len(payload), indicator, textRegionEnd, anomalyCorrected)
        if textRegionEnd > layout.photo.end:
            self._logger.warning(
                f"Text region ({textRegionEnd} bytes) overlaps the binary tail "
                f"starting at {layout.photo.end}; photo left empty"
            )

        record.photo = layout.photo.slice(payload)
        record.signature = layout.signature.slice(payload)
        if layout.emailHash is not None:
            record.emailHash = layout.emailHash.slice(payload)
        if layout.mobileHash is not None:
            record.mobileHash = layout.mobileHash.slice(payload)

        self._logger.debug(
            f"Parsed record: indicator={indicator}, photo={len(record.photo)} bytes, "
            f"emailHash={record.emailHash is not None}, "
            f"mobileHash={record.mobileHash is not None}, "
            f"signature={len(record.signature)} bytes"
        )
        return record

    def _readIndicator(self, token: str) -> int:
        """Parse the email/mobile indicator, defaulting to 0."""
        value = parseLeadingInteger(token)
        if value is None:
            self._logger.warning(f"Indicator field '{token}' is not numeric, using 0")
            return INDICATOR_NONE
        if value not in (INDICATOR_NONE, INDICATOR_EMAIL, INDICATOR_MOBILE, INDICATOR_BOTH):
            self._logger.warning(f"Indicator value {value} out of range 0..3, using 0")
            return INDICATOR_NONE
        return value

    def _assignTextFields(self, record: IdentityRecord, tokens: List[str]) -> None:
        """Assign tokens 1..15 to the named fields."""
        for position, name in enumerate(TEXT_FIELD_NAMES, start=1):
            if position < len(tokens):
                setattr(record, name, tokens[position])
