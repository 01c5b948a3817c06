"""
ZXing QR Code Detector Implementation.

Symbol detection primitive backed by zxing-cpp. Secure QR codes carry
one long decimal string in numeric mode; the detector returns it
unchanged for the byte codec.
"""

import logging
from typing import List, Optional, Tuple

import cv2
import numpy as np

from core.interfaces.qr_detector_interface import IQrDetector, QrDetectionResult


class ZxingQrDetector(IQrDetector):
    """
    QR code detector using zxing-cpp library.

    Inversion is applied here (cv2.bitwise_not) rather than through the
    library's own try_invert flag, so that the plain and inverted passes
    stay separate steps of the localizer sweep.
    """

    def __init__(
        self,
        tryRotate: bool = True,
        tryDownscale: bool = True,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize ZxingQrDetector.

        Args:
            tryRotate: Try rotated symbols (90/270 degrees)
            tryDownscale: Let zxing-cpp scan downscaled copies of large frames
            logger: Logger instance for debug output
        """
        self._tryRotate = tryRotate
        self._tryDownscale = tryDownscale
        self._logger = logger or logging.getLogger(__name__)
        self._zxingcpp = None

        self._logger.info(
            f"ZxingQrDetector initialized "
            f"(tryRotate={tryRotate}, tryDownscale={tryDownscale})"
        )

    def _ensureZxing(self) -> None:
        """Import zxing-cpp on first use."""
        if self._zxingcpp is None:
            try:
                import zxingcpp
            except ImportError as e:
                self._logger.error(f"zxing-cpp is not installed (pip install zxing-cpp): {e}")
                raise
            self._zxingcpp = zxingcpp

    def detect(self, image: np.ndarray, tryInvert: bool = False) -> Optional[QrDetectionResult]:
        """
        Decode the first valid QR symbol in an image.

        Args:
            image: Input image (BGR or grayscale)
            tryInvert: Also decode the negated image (light-on-dark symbols)

        Returns:
            QrDetectionResult if a symbol was read, None otherwise
        """
        self._ensureZxing()

        grayImage = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY) if image.ndim == 3 else image

        result = self._decodeFirst(grayImage, inverted=False)
        if result is None and tryInvert:
            result = self._decodeFirst(cv2.bitwise_not(grayImage), inverted=True)

        if result is None:
            self._logger.debug(f"No QR code detected (tryInvert={tryInvert})")
        return result

    def _decodeFirst(self, grayImage: np.ndarray, inverted: bool) -> Optional[QrDetectionResult]:
        barcodes = self._zxingcpp.read_barcodes(
            grayImage,
            formats=self._zxingcpp.BarcodeFormat.QRCode,
            try_rotate=self._tryRotate,
            try_downscale=self._tryDownscale,
            try_invert=False
        )

        for barcode in barcodes:
            if not barcode.valid or not barcode.text:
                continue

            polygon = _positionToPolygon(barcode.position)
            self._logger.debug(
                f"QR code detected ({len(barcode.text)} characters, inverted={inverted})"
            )
            return QrDetectionResult(
                text=barcode.text,
                polygon=polygon,
                rect=_boundingRect(polygon),
                confidence=1.0,  # zxing-cpp reports no score
                inverted=inverted
            )

        return None


def _positionToPolygon(position) -> List[Tuple[int, int]]:
    """Corners in clockwise order from top-left."""
    return [
        (position.top_left.x, position.top_left.y),
        (position.top_right.x, position.top_right.y),
        (position.bottom_right.x, position.bottom_right.y),
        (position.bottom_left.x, position.bottom_left.y)
    ]


def _boundingRect(polygon: List[Tuple[int, int]]) -> Tuple[int, int, int, int]:
    xs = [p[0] for p in polygon]
    ys = [p[1] for p in polygon]
    return (min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))
