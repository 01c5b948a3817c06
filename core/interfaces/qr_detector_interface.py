"""
QR Detector Interface Module.

This module defines the interface and data classes for QR code detection.
Follows the Interface Segregation Principle (ISP) from SOLID.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, List, Tuple
import numpy as np


@dataclass
class QrDetectionResult:
    """
    Result of QR code detection.

    Attributes:
        text: Full QR code content (for secure QR codes, a long decimal string)
        polygon: Four corners of QR code [(x,y), ...]
        rect: Bounding rectangle (left, top, width, height)
        confidence: Detection confidence score (0-1)
        inverted: True if the symbol was found as light-on-dark
    """
    text: str
    polygon: List[Tuple[int, int]]
    rect: Tuple[int, int, int, int]
    confidence: float
    inverted: bool = False


class IQrDetector(ABC):
    """
    Interface for QR code detector (symbol detection primitive).

    Implementations decode the first QR symbol found in a pixel buffer.
    """

    @abstractmethod
    def detect(self, image: np.ndarray, tryInvert: bool = False) -> Optional[QrDetectionResult]:
        """
        Detect QR code in an image.

        Args:
            image: Input image (BGR or grayscale numpy array)
            tryInvert: Also look for inverted (light-on-dark) symbols

        Returns:
            QrDetectionResult if QR code found, None otherwise
        """
        pass
