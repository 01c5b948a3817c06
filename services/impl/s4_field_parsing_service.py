"""
S4 Field Parsing Service Implementation.

Step 4 of the pipeline: split the payload into text fields and the
binary tail (photo, contact hashes, signature).

Follows:
- SRP: Only handles field parsing
- DIP: Depends on IFieldParser abstraction (interface)
"""

import time
from typing import Optional

from core.interfaces.identity_record_interface import IFieldParser
from core.parser import SecureQrFieldParser
from services.interfaces.field_parsing_service_interface import (
    IFieldParsingService,
    FieldParsingResult
)
from services.interfaces.base_service_interface import BaseService


class S4FieldParsingService(IFieldParsingService, BaseService):
    """
    Step 4: Field Parsing Service Implementation.

    Debug JSON carries the record summary only. The embedded photo is
    written as its own file when debugSavePhoto is set.
    """

    SERVICE_NAME = "s4_field_parsing"

    def __init__(
        self,
        fieldParser: Optional[IFieldParser] = None,
        debugSavePhoto: bool = False,
        debugBasePath: str = "output/debug",
        debugEnabled: bool = False
    ):
        """
        Initialize S4FieldParsingService.

        Args:
            fieldParser: Parser to use instead of SecureQrFieldParser.
            debugSavePhoto: Write the photo segment to the debug directory.
            debugBasePath: Base path for debug output.
            debugEnabled: Whether to save debug output.
        """
        BaseService.__init__(
            self,
            serviceName=self.SERVICE_NAME,
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )

        self._fieldParser: IFieldParser = fieldParser or SecureQrFieldParser(logger=self._logger)
        self._debugSavePhoto = debugSavePhoto

        self._logger.info("S4FieldParsingService initialized")

    def parse(self, payload: bytes, frameId: str) -> FieldParsingResult:
        """Parse payload bytes into an IdentityRecord."""
        startTime = time.time()

        record = self._fieldParser.parseFields(payload)

        processingTimeMs = self._measureTime(startTime)

        summary = record.toSummary()
        summary.pop("age", None)
        summary.pop("isAdult", None)
        summary["signature"] = f"<{len(record.signature)} bytes>"
        self._saveDebugJson(frameId, {
            "frameId": frameId,
            "payloadLength": len(payload),
            "record": summary,
            "processingTimeMs": processingTimeMs
        })
        if self._debugSavePhoto:
            self._savePhoto(frameId, record.photo)

        self._logger.debug(
            f"[{frameId}] Parsed record (indicator={record.emailMobileIndicator}, "
            f"photo={len(record.photo)} bytes, anomalyCorrected={record.anomalyCorrected})"
        )
        self._logTiming(frameId, processingTimeMs)

        return FieldParsingResult(
            record=record,
            frameId=frameId,
            processingTimeMs=processingTimeMs
        )

    def _savePhoto(self, frameId: str, photo: bytes) -> None:
        """Write the raw photo segment next to the debug JSON."""
        if not self._debugEnabled or not photo:
            return

        filepath = self._debugBasePath / f"photo_{frameId}.bin"
        try:
            filepath.write_bytes(photo)
            self._logger.debug(f"Saved debug photo: {filepath}")
        except OSError as e:
            self._logger.warning(f"Failed to save debug photo: {e}")
