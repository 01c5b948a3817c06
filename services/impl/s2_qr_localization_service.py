"""
S2 QR Localization Service Implementation.

Step 2 of the pipeline: locate the secure QR symbol in a raster image.
Creates the symbol detector from core layer using the factory pattern
and sweeps the localizer's size/filter/inversion strategy table.

Follows:
- SRP: Only handles symbol localization
- DIP: Depends on IQrDetector abstraction (interface)
- Factory Pattern: Uses createQrDetector() for backend selection
"""

import time
from typing import Optional, Sequence

import numpy as np

from core.exceptions import NoSymbolFoundError
from core.interfaces.qr_detector_interface import IQrDetector
from core.qr import createQrDetector, QrLocalizer
from core.qr.scan_strategy import DEFAULT_LONG_EDGES
from services.interfaces.qr_localization_service_interface import (
    IQrLocalizationService,
    QrLocalizationResult
)
from services.interfaces.base_service_interface import BaseService


class S2QrLocalizationService(IQrLocalizationService, BaseService):
    """
    Step 2: QR Localization Service Implementation.

    Supports multiple backends (ZXing, ZBar) via factory pattern. A
    detector instance may be injected instead, e.g. for tests.
    """

    SERVICE_NAME = "s2_qr_localization"

    def __init__(
        self,
        # Backend selection
        backend: str = "zxing",

        # ZXing params (prefixed with 'zxing')
        zxingTryRotate: bool = True,
        zxingTryDownscale: bool = True,

        # Strategy table
        longEdges: Sequence[int] = DEFAULT_LONG_EDGES,
        filterNames: Optional[Sequence[str]] = None,

        qrDetector: Optional[IQrDetector] = None,

        # Debug settings
        debugBasePath: str = "output/debug",
        debugEnabled: bool = False
    ):
        """
        Initialize S2QrLocalizationService.

        Args:
            backend: Symbol-detection backend ("zxing" or "pyzbar").
            zxingTryRotate: (ZXing) Try rotated barcodes (90/270 degrees).
            zxingTryDownscale: (ZXing) Try downscaled versions for better detection.
            longEdges: Long-edge sizes tried after the native size.
            filterNames: Image filters in scan order (None = all).
            qrDetector: Detector to use instead of the factory-built one.
            debugBasePath: Base path for debug output.
            debugEnabled: Whether to save debug output.
        """
        BaseService.__init__(
            self,
            serviceName=self.SERVICE_NAME,
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )

        if qrDetector is None:
            qrDetector = createQrDetector(
                backend=backend,
                zxingTryRotate=zxingTryRotate,
                zxingTryDownscale=zxingTryDownscale
            )
            backendName = backend
        else:
            backendName = type(qrDetector).__name__

        self._localizer = QrLocalizer(
            qrDetector=qrDetector,
            longEdges=longEdges,
            filterNames=filterNames,
            logger=self._logger
        )

        self._logger.info(
            f"S2QrLocalizationService initialized "
            f"(backend={backendName}, longEdges={list(longEdges)})"
        )

    def localize(self, image: np.ndarray, frameId: str) -> QrLocalizationResult:
        """
        Locate and decode the QR symbol in an image.

        Debug image saving is NOT included in timing.
        """
        startTime = time.time()

        try:
            located = self._localizer.locateWithDetails(image)
        except NoSymbolFoundError as e:
            self._logger.warning(
                f"[{frameId}] No QR code detected "
                f"(attempts={e.attempts}, time={self._measureTime(startTime):.2f}ms)"
            )
            raise

        processingTimeMs = self._measureTime(startTime)

        self._saveDebugImage(frameId, image, prefix="input")
        self._saveDebugJson(frameId, {
            "frameId": frameId,
            "strategy": located.strategy.describe(),
            "attempts": located.attempts,
            "textLength": len(located.text),
            "polygon": located.detection.polygon,
            "inverted": located.detection.inverted,
            "processingTimeMs": processingTimeMs
        })

        self._logger.info(
            f"[{frameId}] QR located with {located.strategy.describe()} "
            f"after {located.attempts} attempt(s) ({processingTimeMs:.2f}ms)"
        )
        self._logTiming(frameId, processingTimeMs)

        return QrLocalizationResult(
            text=located.text,
            frameId=frameId,
            strategy=located.strategy,
            attempts=located.attempts,
            processingTimeMs=processingTimeMs
        )
