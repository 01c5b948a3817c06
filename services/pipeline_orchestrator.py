"""
Pipeline Orchestrator Module.

Orchestrates the secure QR decoding pipeline.
Creates ConfigService and initializes all services with proper parameters.

Pipeline Steps:
1. S1 Camera: Capture frames for the live feed
2. S2 QR Localization: Find the QR symbol and read its decimal text
3. S3 Payload Decoding: Decimal text -> bytes -> inflated payload
4. S4 Field Parsing: Text fields and binary tail -> IdentityRecord
5. S5 Age Derivation: Age and adult status from the date of birth
6. S6 Verification Claim: Claim and verification QR for collaborators

Any stage failure stops the run and surfaces as PipelineError(stage, cause);
no partial record is returned.

Follows:
- SRP: Only handles pipeline orchestration
- DIP: Services receive parameters, not dependencies
"""

import json
import logging
import time
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Dict, Optional, TypeVar

import numpy as np

from core.exceptions import PipelineError
from core.interfaces.camera_interface import ICameraCapture
from core.interfaces.identity_record_interface import IdentityRecord
from core.interfaces.image_reader_interface import IImageReader
from core.interfaces.qr_detector_interface import IQrDetector
from core.reader.local_image_reader import LocalImageReader
from services.impl.config_service import ConfigService
from services.impl.s1_camera_service import S1CameraService
from services.impl.s2_qr_localization_service import S2QrLocalizationService
from services.impl.s3_payload_decoding_service import S3PayloadDecodingService
from services.impl.s4_field_parsing_service import S4FieldParsingService
from services.impl.s5_age_derivation_service import S5AgeDerivationService
from services.impl.s6_verification_claim_service import S6VerificationClaimService
from services.interfaces.base_service_interface import generateFrameId
from services.live_scan_session import CancellationToken, LiveScanSession, LiveScanState
from services.performance_logger import PerformanceLogger


DEFAULT_CONFIG_PATH = str(Path(__file__).resolve().parent.parent / "config" / "application_config.json")

T = TypeVar("T")


class PipelineOrchestrator:
    """
    Orchestrates the complete decoding pipeline.

    Responsibilities:
    - Initialize ConfigService
    - Create all pipeline services with parameters from config
    - Run the stages in order for images, decimal text and the live feed
    - Provide access to individual services

    Not thread-safe: callers run one scan at a time per instance.
    """

    def __init__(
        self,
        configPath: str = DEFAULT_CONFIG_PATH,
        qrDetector: Optional[IQrDetector] = None,
        cameraCapture: Optional[ICameraCapture] = None,
        imageReader: Optional[IImageReader] = None
    ):
        """
        Initialize the pipeline orchestrator.

        Args:
            configPath: Path to the application configuration file.
            qrDetector: Symbol detector to use instead of the configured backend.
            cameraCapture: Frame source to use instead of OpenCVCamera.
            imageReader: Image reader to use instead of LocalImageReader.
        """
        self._logger = logging.getLogger(__name__)

        # Step 1: Initialize ConfigService (reads from JSON)
        self._configService = ConfigService(configPath)
        self._logger.info("ConfigService initialized")

        debugBasePath = self._configService.getDebugBasePath()
        debugEnabled = self._configService.isDebugEnabled()

        self._imageReader: IImageReader = imageReader or LocalImageReader()
        self._performanceLogger = PerformanceLogger(
            enabled=self._configService.isPerformanceLoggingEnabled(),
            logInterval=self._configService.getPerformanceLogInterval()
        )

        # Step 2: Initialize all services with parameters from config
        self._initializeServices(debugBasePath, debugEnabled, qrDetector, cameraCapture)

        self._logger.info("PipelineOrchestrator initialized successfully")

    def _initializeServices(
        self,
        debugBasePath: str,
        debugEnabled: bool,
        qrDetector: Optional[IQrDetector],
        cameraCapture: Optional[ICameraCapture]
    ) -> None:
        """
        Initialize all pipeline services with parameters from config.

        Following DIP: Services receive parameters, not IConfigService.
        """
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        # S1 Camera Service
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        self._s1CameraService = self._createCameraService(cameraCapture)

        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        # S2 QR Localization Service
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        self._s2QrLocalizationService = S2QrLocalizationService(
            backend=self._configService.getQrBackend(),
            zxingTryRotate=self._configService.isQrTryRotate(),
            zxingTryDownscale=self._configService.isQrTryDownscale(),
            longEdges=self._configService.getScanLongEdges(),
            filterNames=self._configService.getScanFilters(),
            qrDetector=qrDetector,
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )

        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        # S3 Payload Decoding Service
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        self._s3PayloadDecodingService = S3PayloadDecodingService(
            decompressEnabled=self._configService.isDecompressionEnabled(),
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )

        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        # S4 Field Parsing Service
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        self._s4FieldParsingService = S4FieldParsingService(
            debugSavePhoto=self._configService.isDebugSavePhoto(),
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )

        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        # S5 Age Derivation Service
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        self._s5AgeDerivationService = S5AgeDerivationService(
            adultAge=self._configService.getAdultAge(),
            maxAgeYears=self._configService.getMaxAgeYears(),
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )

        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        # S6 Verification Claim Service
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        self._s6VerificationClaimService = S6VerificationClaimService(
            referencePrefixLength=self._configService.getReferencePrefixLength(),
            errorCorrection=self._configService.getVerificationQrErrorCorrection(),
            border=self._configService.getVerificationQrBorder(),
            size=self._configService.getVerificationQrSize(),
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )

    def _createCameraService(self, cameraCapture: Optional[ICameraCapture]) -> S1CameraService:
        return S1CameraService(
            frameWidth=self._configService.getFrameWidth(),
            frameHeight=self._configService.getFrameHeight(),
            maxCameraSearch=self._configService.getMaxCameraSearch(),
            cameraCapture=cameraCapture,
            debugBasePath=self._configService.getDebugBasePath(),
            debugEnabled=self._configService.isDebugEnabled()
        )

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Decoding Entry Points
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def decodeFromImage(
        self,
        image: np.ndarray,
        frameId: Optional[str] = None,
        today: Optional[date] = None
    ) -> IdentityRecord:
        """
        Decode the secure QR in a raster image.

        Args:
            image: Image as numpy array (BGR or grayscale).
            frameId: Identifier for logs and debug files (generated if omitted).
            today: Reference date for age derivation.

        Returns:
            IdentityRecord with derived age when the date of birth is usable.

        Raises:
            PipelineError: Stage "localize", "decode" or "parse".
        """
        frameId = frameId or generateFrameId()
        timing: Dict[str, float] = {}
        return self._decodeImage(image, frameId, timing, today)

    def decodeFromFile(self, filepath: str, today: Optional[date] = None) -> IdentityRecord:
        """
        Decode the secure QR in an image file.

        Raises:
            PipelineError: Stage "load" if the file cannot be rasterized,
                otherwise as decodeFromImage().
        """
        frameId = generateFrameId()
        timing: Dict[str, float] = {}
        image = self._runStage(
            "load", frameId, timing,
            lambda: self._imageReader.readFile(str(filepath))
        )
        return self._decodeImage(image, frameId, timing, today)

    def decodeFromImageBytes(self, data: bytes, today: Optional[date] = None) -> IdentityRecord:
        """
        Decode the secure QR in an encoded image held in memory (an upload).

        Raises:
            PipelineError: Stage "load" if the bytes cannot be rasterized,
                otherwise as decodeFromImage().
        """
        frameId = generateFrameId()
        timing: Dict[str, float] = {}
        image = self._runStage(
            "load", frameId, timing,
            lambda: self._imageReader.readBytes(data)
        )
        return self._decodeImage(image, frameId, timing, today)

    def decodeFromDecimal(
        self,
        decimal: str,
        frameId: Optional[str] = None,
        today: Optional[date] = None
    ) -> IdentityRecord:
        """
        Decode already-extracted QR text, skipping localization.

        Raises:
            PipelineError: Stage "decode" or "parse".
        """
        frameId = frameId or generateFrameId("text")
        timing: Dict[str, float] = {}
        return self._decodeText(decimal, frameId, timing, today)

    def decodeFromLiveFeed(
        self,
        frameSource: Optional[ICameraCapture] = None,
        cancelToken: Optional[CancellationToken] = None,
        cameraIndex: Optional[int] = None,
        onStateChange: Optional[Callable[[LiveScanState], None]] = None,
        today: Optional[date] = None
    ) -> IdentityRecord:
        """
        Poll a camera until a frame decodes.

        Args:
            frameSource: Frame source to scan (defaults to the S1 camera).
            cancelToken: Token that stops the scan when cancelled.
            cameraIndex: Camera device index (defaults to config).
            onStateChange: Called with each LiveScanState transition.
            today: Reference date for age derivation.

        Returns:
            IdentityRecord from the first frame that decodes.

        Raises:
            ScanCancelledError: If the token was cancelled.
            PipelineError: Stage "capture" if the camera fails.
        """
        cameraService = (
            self._createCameraService(frameSource) if frameSource is not None
            else self._s1CameraService
        )
        session = LiveScanSession(
            cameraService=cameraService,
            decodeFrame=lambda image, frameId: self.decodeFromImage(image, frameId, today),
            cameraIndex=self._configService.getCameraIndex() if cameraIndex is None else cameraIndex,
            pollIntervalMs=self._configService.getPollIntervalMs(),
            maxConsecutiveReadFailures=self._configService.getMaxConsecutiveReadFailures(),
            onStateChange=onStateChange,
            logger=self._logger
        )
        return session.run(cancelToken)

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Stage Execution
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def _decodeImage(
        self,
        image: np.ndarray,
        frameId: str,
        timing: Dict[str, float],
        today: Optional[date]
    ) -> IdentityRecord:
        located = self._runStage(
            "localize", frameId, timing,
            lambda: self._s2QrLocalizationService.localize(image, frameId)
        )
        return self._decodeText(located.text, frameId, timing, today)

    def _decodeText(
        self,
        decimal: str,
        frameId: str,
        timing: Dict[str, float],
        today: Optional[date]
    ) -> IdentityRecord:
        decoded = self._runStage(
            "decode", frameId, timing,
            lambda: self._s3PayloadDecodingService.decode(decimal, frameId)
        )
        parsed = self._runStage(
            "parse", frameId, timing,
            lambda: self._s4FieldParsingService.parse(decoded.payload.data, frameId)
        )

        # Never fails: an unusable date only leaves age unknown
        derived = self._s5AgeDerivationService.derive(parsed.record, frameId, today)
        timing["derive"] = derived.processingTimeMs

        self._performanceLogger.recordTiming(timing, frameId)
        self.savePipelineTiming(frameId, timing)

        return derived.record

    def _runStage(
        self,
        stage: str,
        frameId: str,
        timing: Dict[str, float],
        action: Callable[[], T]
    ) -> T:
        """Run one stage, timing it and wrapping its failure in PipelineError."""
        startTime = time.time()
        try:
            return action()
        except Exception as e:
            self._logger.debug(f"[{frameId}] Stage '{stage}' failed: {type(e).__name__}: {e}")
            raise PipelineError(stage, e, frameId) from e
        finally:
            timing[stage] = (time.time() - startTime) * 1000

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Service Getters (For CLI/External Access)
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    @property
    def configService(self) -> ConfigService:
        """Get the configuration service."""
        return self._configService

    @property
    def cameraService(self) -> S1CameraService:
        """Get Step 1: Camera service."""
        return self._s1CameraService

    @property
    def qrLocalizationService(self) -> S2QrLocalizationService:
        """Get Step 2: QR localization service."""
        return self._s2QrLocalizationService

    @property
    def payloadDecodingService(self) -> S3PayloadDecodingService:
        """Get Step 3: Payload decoding service."""
        return self._s3PayloadDecodingService

    @property
    def fieldParsingService(self) -> S4FieldParsingService:
        """Get Step 4: Field parsing service."""
        return self._s4FieldParsingService

    @property
    def ageDerivationService(self) -> S5AgeDerivationService:
        """Get Step 5: Age derivation service."""
        return self._s5AgeDerivationService

    @property
    def verificationClaimService(self) -> S6VerificationClaimService:
        """Get Step 6: Verification claim service."""
        return self._s6VerificationClaimService

    @property
    def performanceLogger(self) -> PerformanceLogger:
        """Get the performance logger."""
        return self._performanceLogger

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Debug Control
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def setDebugEnabled(self, enabled: bool) -> None:
        """
        Enable or disable debug mode for all services.

        Args:
            enabled: True to enable debug output for all services.
        """
        self._configService.setDebugEnabled(enabled)

        self._s1CameraService.setDebugEnabled(enabled)
        self._s2QrLocalizationService.setDebugEnabled(enabled)
        self._s3PayloadDecodingService.setDebugEnabled(enabled)
        self._s4FieldParsingService.setDebugEnabled(enabled)
        self._s5AgeDerivationService.setDebugEnabled(enabled)
        self._s6VerificationClaimService.setDebugEnabled(enabled)

        self._logger.info(f"Debug mode {'enabled' if enabled else 'disabled'} for all services")

    def isDebugEnabled(self) -> bool:
        """Check if debug mode is enabled."""
        return self._configService.isDebugEnabled()

    def getDebugBasePath(self) -> str:
        """Get the debug base path from config."""
        return self._configService.getDebugBasePath()

    def savePipelineTiming(
        self,
        frameId: str,
        timing: Dict[str, float]
    ) -> Optional[str]:
        """
        Save pipeline timing information to JSON file.

        Only saves when debug is enabled. Timing is saved to
        output/debug/timing/timing_{frameId}.json with same naming
        convention as other debug outputs.

        Args:
            frameId: Frame identifier (same as other debug outputs).
            timing: Dictionary with stage names and their timing in ms.

        Returns:
            Saved file path, or None if debug disabled or failed.
        """
        if not self.isDebugEnabled():
            return None

        try:
            timingPath = Path(self.getDebugBasePath()) / "timing"
            timingPath.mkdir(parents=True, exist_ok=True)

            totalMs = sum(timing.values())
            timingData = {
                "frameId": frameId,
                "timestamp": datetime.now().isoformat(),
                "timing_ms": timing,
                "summary": {
                    "total_ms": totalMs
                }
            }

            filepath = timingPath / f"timing_{frameId}.json"
            with open(filepath, 'w', encoding='utf-8') as f:
                json.dump(timingData, f, indent=2, ensure_ascii=False)

            self._logger.debug(f"Pipeline timing saved: {filepath}")
            return str(filepath)

        except OSError as e:
            self._logger.error(f"Failed to save pipeline timing: {e}")
            return None

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Lifecycle Management
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def shutdown(self) -> None:
        """
        Shutdown all services and release resources.

        Call this when the application is closing.
        """
        self._logger.info("Shutting down PipelineOrchestrator...")
        self._s1CameraService.closeCamera()
        self._logger.info("PipelineOrchestrator shutdown complete")
