"""
S5 Age Derivation Service Implementation.

Step 5 of the pipeline: age and adult status from the date of birth.

Follows:
- SRP: Only handles age derivation
"""

import time
from datetime import date
from typing import Optional

from core.interfaces.identity_record_interface import IdentityRecord
from core.processor import DateOfBirthProcessor
from services.interfaces.age_derivation_service_interface import (
    IAgeDerivationService,
    AgeDerivationResult
)
from services.interfaces.base_service_interface import BaseService


class S5AgeDerivationService(IAgeDerivationService, BaseService):
    """
    Step 5: Age Derivation Service Implementation.
    """

    SERVICE_NAME = "s5_age_derivation"

    def __init__(
        self,
        adultAge: int = 18,
        maxAgeYears: int = 120,
        debugBasePath: str = "output/debug",
        debugEnabled: bool = False
    ):
        """
        Initialize S5AgeDerivationService.

        Args:
            adultAge: Minimum age considered adult.
            maxAgeYears: Oldest plausible age; older dates are rejected.
            debugBasePath: Base path for debug output.
            debugEnabled: Whether to save debug output.
        """
        BaseService.__init__(
            self,
            serviceName=self.SERVICE_NAME,
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )

        self._processor = DateOfBirthProcessor(
            adultAge=adultAge,
            maxAgeYears=maxAgeYears,
            logger=self._logger
        )

        self._logger.info(
            f"S5AgeDerivationService initialized (adultAge={adultAge}, maxAgeYears={maxAgeYears})"
        )

    def derive(
        self,
        record: IdentityRecord,
        frameId: str,
        today: Optional[date] = None
    ) -> AgeDerivationResult:
        """Fill in age/isAdult on a record."""
        startTime = time.time()

        self._processor.enrich(record, today)

        processingTimeMs = self._measureTime(startTime)
        derived = record.age is not None

        self._saveDebugJson(frameId, {
            "frameId": frameId,
            "derived": derived,
            "age": record.age,
            "isAdult": record.isAdult,
            "processingTimeMs": processingTimeMs
        })
        self._logTiming(frameId, processingTimeMs)

        return AgeDerivationResult(
            record=record,
            frameId=frameId,
            derived=derived,
            processingTimeMs=processingTimeMs
        )
