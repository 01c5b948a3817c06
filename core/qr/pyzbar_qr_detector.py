"""
Pyzbar QR Detector Implementation.

This module provides QR code detection using the pyzbar library.
ZBar has no inversion option, so inverted symbols are found by
decoding a negated copy of the image.
"""

import logging
from typing import Optional, List

import cv2
import numpy as np
from pyzbar.pyzbar import decode, ZBarSymbol, Decoded

from core.interfaces.qr_detector_interface import IQrDetector, QrDetectionResult


class PyzbarQrDetector(IQrDetector):
    """
    QR code detector using pyzbar library.

    Symbol bytes are decoded as Latin-1 so that any payload survives the
    conversion to text; secure QR content is plain decimal digits.
    """

    def __init__(
        self,
        symbolTypes: Optional[List[ZBarSymbol]] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize PyzbarQrDetector.

        Args:
            symbolTypes: List of barcode types to detect (default: QRCODE only)
            logger: Logger instance for debug output
        """
        self._symbolTypes = symbolTypes or [ZBarSymbol.QRCODE]
        self._logger = logger or logging.getLogger(__name__)

    def detect(self, image: np.ndarray, tryInvert: bool = False) -> Optional[QrDetectionResult]:
        """
        Detect QR code in an image.

        Args:
            image: Input image (BGR or grayscale numpy array)
            tryInvert: Also decode the negated image

        Returns:
            QrDetectionResult if QR code found, None otherwise
        """
        try:
            if len(image.shape) == 3:
                grayImage = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
            else:
                grayImage = image

            result = self._decodeFirst(grayImage, inverted=False)
            if result is None and tryInvert:
                result = self._decodeFirst(cv2.bitwise_not(grayImage), inverted=True)

            if result is None:
                self._logger.debug(f"No QR code detected in image (tryInvert={tryInvert})")
            return result

        except Exception as e:
            self._logger.error(f"Error detecting QR code: {e}")
            return None

    def _decodeFirst(self, image: np.ndarray, inverted: bool) -> Optional[QrDetectionResult]:
        """Decode the first symbol in a grayscale image."""
        results: List[Decoded] = decode(image, symbols=self._symbolTypes)
        if not results:
            return None

        qr = results[0]
        text = qr.data.decode('latin-1')
        self._logger.debug(f"QR code detected ({len(text)} characters, inverted={inverted})")

        return QrDetectionResult(
            text=text,
            polygon=[(p.x, p.y) for p in qr.polygon],
            rect=(qr.rect.left, qr.rect.top, qr.rect.width, qr.rect.height),
            confidence=qr.quality / 100.0 if qr.quality else 1.0,
            inverted=inverted
        )
