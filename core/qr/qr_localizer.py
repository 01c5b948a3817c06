"""
QR Localizer Module.

Finds and decodes a QR symbol in an arbitrary photograph by sweeping a
bounded, fixed set of raster sizes, pixel filters and inversion modes,
returning the first successful decode.

Document photos vary widely in exposure and resolution and detectors
are sensitive to both. The cheapest combinations (native size, no
filter, no inversion) come first.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from core.exceptions import NoSymbolFoundError
from core.interfaces.qr_detector_interface import IQrDetector, QrDetectionResult
from core.qr.qr_image_filters import applyFilter, getSupportedFilters, toBgr
from core.qr.scan_strategy import (
    DEFAULT_LONG_EDGES,
    ScanStrategy,
    buildScanStrategies,
    resizeImage
)


@dataclass
class LocateResult:
    """
    Successful localization.

    Attributes:
        text: Decoded symbol text.
        strategy: Combination that produced the decode.
        attempts: Number of detector calls made, including the successful one.
        detection: Raw detector result (coordinates relative to the scanned size).
    """
    text: str
    strategy: ScanStrategy
    attempts: int
    detection: QrDetectionResult


class QrLocalizer:
    """
    Multi-strategy QR symbol locator.

    Iterates the static strategy table from buildScanStrategies() and
    asks the detector for a symbol at each step. Resized and filtered
    images are computed once per (size) and (size, filter).
    """

    def __init__(
        self,
        qrDetector: IQrDetector,
        longEdges: Sequence[int] = DEFAULT_LONG_EDGES,
        filterNames: Optional[Sequence[str]] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize QrLocalizer.

        Args:
            qrDetector: Symbol detection primitive.
            longEdges: Long-edge lengths tried after the native size.
            filterNames: Filters to try, in order (default: all).
            logger: Logger instance for debug output.

        Raises:
            ValueError: If a filter name is unknown.
        """
        self._qrDetector = qrDetector
        self._longEdges = tuple(longEdges)
        self._filterNames = list(filterNames) if filterNames else getSupportedFilters()
        self._logger = logger or logging.getLogger(__name__)

        unknown = [name for name in self._filterNames if name not in getSupportedFilters()]
        if unknown:
            raise ValueError(
                f"Unknown image filter(s) {unknown}. Supported: {getSupportedFilters()}"
            )

        self._logger.info(
            f"QrLocalizer initialized "
            f"(longEdges={list(self._longEdges)}, filters={self._filterNames})"
        )

    def strategiesFor(self, image: np.ndarray) -> List[ScanStrategy]:
        """Strategy table for an image, in search order."""
        height, width = image.shape[:2]
        return buildScanStrategies(width, height, self._longEdges, self._filterNames)

    def locate(self, image: np.ndarray) -> str:
        """
        Extract the text of the first QR symbol found.

        Args:
            image: Raster image (BGR, BGRA or grayscale).

        Returns:
            str: Decoded symbol text.

        Raises:
            NoSymbolFoundError: If no combination yields a symbol.
        """
        return self.locateWithDetails(image).text

    def locateWithDetails(self, image: np.ndarray) -> LocateResult:
        """
        Same as locate(), also reporting which combination succeeded.

        Raises:
            NoSymbolFoundError: If no combination yields a symbol.
        """
        if image is None or image.size == 0:
            raise NoSymbolFoundError("Image is empty")

        image = toBgr(image)
        strategies = self.strategiesFor(image)

        resizedCache: Tuple[object, Optional[np.ndarray]] = (None, None)
        filteredCache: Tuple[object, Optional[np.ndarray]] = (None, None)
        attempts = 0

        for strategy in strategies:
            if resizedCache[0] != strategy.size:
                resizedCache = (strategy.size, resizeImage(image, strategy.size))
                filteredCache = (None, None)

            filterKey = (strategy.size, strategy.filterName)
            if filteredCache[0] != filterKey:
                filteredCache = (filterKey, applyFilter(strategy.filterName, resizedCache[1]))

            attempts += 1
            try:
                detection = self._qrDetector.detect(filteredCache[1], tryInvert=strategy.tryInvert)
            except Exception as e:
                self._logger.debug(f"Detector error with {strategy.describe()}: {e}")
                continue

            if detection is not None and detection.text:
                self._logger.info(
                    f"QR code found with {strategy.describe()} after {attempts} attempt(s)"
                )
                return LocateResult(
                    text=detection.text,
                    strategy=strategy,
                    attempts=attempts,
                    detection=detection
                )

        self._logger.debug(f"No QR code found after {attempts} attempt(s)")
        raise NoSymbolFoundError(
            "No QR code found in the image. Please try a clearer image or different lighting.",
            attempts=attempts
        )
