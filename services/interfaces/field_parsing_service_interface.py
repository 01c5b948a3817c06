"""
Field Parsing Service Interface Module.

Defines the interface for parsing the decompressed payload into an
IdentityRecord (Step 4 of the pipeline).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from core.interfaces.identity_record_interface import IdentityRecord


@dataclass
class FieldParsingResult:
    """
    Result of the field parsing service.

    Attributes:
        record: Parsed record (age not derived yet).
        frameId: Frame identifier for debug output.
        processingTimeMs: Time taken for parsing.
    """
    record: IdentityRecord
    frameId: str
    processingTimeMs: float = 0.0


class IFieldParsingService(ABC):
    """
    Interface for field parsing operations (Step 4).
    """

    @abstractmethod
    def parse(self, payload: bytes, frameId: str) -> FieldParsingResult:
        """
        Parse payload bytes into an IdentityRecord.

        Args:
            payload: Decompressed payload bytes.
            frameId: Frame identifier for debug output.

        Returns:
            FieldParsingResult

        Raises:
            FieldCountError: If fewer than 2 tokens are recoverable.
            SignatureBoundsError: If the payload is too short for its binary tail.
        """
        pass
