"""
S3 Payload Decoding Service Implementation.

Step 3 of the pipeline: decimal symbol text -> big-endian bytes ->
inflated payload.

Follows:
- SRP: Only handles payload decoding
"""

import time

from core.codec import decimalToBytes, decompress, isCompressed
from core.interfaces.identity_record_interface import DecodedPayload
from services.interfaces.payload_decoding_service_interface import (
    IPayloadDecodingService,
    PayloadDecodingResult
)
from services.interfaces.base_service_interface import BaseService


class S3PayloadDecodingService(IPayloadDecodingService, BaseService):
    """
    Step 3: Payload Decoding Service Implementation.

    A payload that does not inflate is passed on unchanged; the codec
    logs the fallback.
    """

    SERVICE_NAME = "s3_payload_decoding"

    def __init__(
        self,
        decompressEnabled: bool = True,
        debugBasePath: str = "output/debug",
        debugEnabled: bool = False
    ):
        """
        Initialize S3PayloadDecodingService.

        Args:
            decompressEnabled: Attempt to inflate the decoded bytes.
            debugBasePath: Base path for debug output.
            debugEnabled: Whether to save debug output.
        """
        BaseService.__init__(
            self,
            serviceName=self.SERVICE_NAME,
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )

        self._decompressEnabled = decompressEnabled

        self._logger.info(
            f"S3PayloadDecodingService initialized (decompress={decompressEnabled})"
        )

    def decode(self, decimal: str, frameId: str) -> PayloadDecodingResult:
        """Convert decimal text to payload bytes."""
        startTime = time.time()

        raw = decimalToBytes(decimal)

        if self._decompressEnabled:
            data = decompress(raw)
            # decompress() hands back the same object when inflation fails
            wasCompressed = data is not raw
        else:
            data = raw
            wasCompressed = False

        payload = DecodedPayload(
            data=data,
            compressedLength=len(raw),
            wasCompressed=wasCompressed
        )

        processingTimeMs = self._measureTime(startTime)

        self._saveDebugJson(frameId, {
            "frameId": frameId,
            "decimalLength": len(decimal.strip()),
            "rawLength": len(raw),
            "compressionHeader": isCompressed(raw),
            "wasCompressed": wasCompressed,
            "payloadLength": len(data),
            "processingTimeMs": processingTimeMs
        })

        self._logger.debug(
            f"[{frameId}] Decoded {len(raw)} bytes -> {len(data)} bytes "
            f"(compressed={wasCompressed})"
        )
        self._logTiming(frameId, processingTimeMs)

        return PayloadDecodingResult(
            payload=payload,
            frameId=frameId,
            processingTimeMs=processingTimeMs
        )
