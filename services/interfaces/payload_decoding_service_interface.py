"""
Payload Decoding Service Interface Module.

Defines the interface for turning the decimal symbol text into the
decompressed payload bytes (Step 3 of the pipeline).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from core.interfaces.identity_record_interface import DecodedPayload


@dataclass
class PayloadDecodingResult:
    """
    Result of the payload decoding service.

    Attributes:
        payload: Decoded payload bytes and compression flag.
        frameId: Frame identifier for debug output.
        processingTimeMs: Time taken for decoding.
    """
    payload: DecodedPayload
    frameId: str
    processingTimeMs: float = 0.0


class IPayloadDecodingService(ABC):
    """
    Interface for payload decoding operations (Step 3).
    """

    @abstractmethod
    def decode(self, decimal: str, frameId: str) -> PayloadDecodingResult:
        """
        Convert a decimal string to bytes and decompress them.

        Args:
            decimal: Decimal integer text read from the QR symbol.
            frameId: Frame identifier for debug output.

        Returns:
            PayloadDecodingResult

        Raises:
            PayloadFormatError: If the text is not a non-negative decimal integer.
        """
        pass
