"""
Age Derivation Service Interface Module.

Defines the interface for deriving age and adult status from the
record's date of birth (Step 5 of the pipeline).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Optional

from core.interfaces.identity_record_interface import IdentityRecord


@dataclass
class AgeDerivationResult:
    """
    Result of the age derivation service.

    Attributes:
        record: The enriched record.
        frameId: Frame identifier for debug output.
        derived: False when the date of birth could not be used.
        processingTimeMs: Time taken for derivation.
    """
    record: IdentityRecord
    frameId: str
    derived: bool
    processingTimeMs: float = 0.0


class IAgeDerivationService(ABC):
    """
    Interface for age derivation operations (Step 5).

    Never fails the pipeline: an unusable date leaves age unknown.
    """

    @abstractmethod
    def derive(
        self,
        record: IdentityRecord,
        frameId: str,
        today: Optional[date] = None
    ) -> AgeDerivationResult:
        """
        Fill in age/isAdult on a record.

        Args:
            record: Parsed record.
            frameId: Frame identifier for debug output.
            today: Reference date (defaults to the current date).

        Returns:
            AgeDerivationResult
        """
        pass
