"""
QR Localization Service Interface Module.

Defines the interface for locating and decoding the secure QR symbol
in a raster image (Step 2 of the pipeline).

Follows:
- SRP: Only handles symbol localization
- DIP: Depends on IQrDetector abstraction from core layer
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
import numpy as np

from core.qr.scan_strategy import ScanStrategy


@dataclass
class QrLocalizationResult:
    """
    Result of the QR localization service.

    Attributes:
        text: Decoded symbol text (the decimal payload string).
        frameId: Frame identifier for debug output.
        strategy: Size/filter/inversion combination that succeeded.
        attempts: Number of detector calls made.
        processingTimeMs: Time taken for localization.
    """
    text: str
    frameId: str
    strategy: ScanStrategy
    attempts: int
    processingTimeMs: float = 0.0


class IQrLocalizationService(ABC):
    """
    Interface for QR localization operations (Step 2).
    """

    @abstractmethod
    def localize(self, image: np.ndarray, frameId: str) -> QrLocalizationResult:
        """
        Locate and decode the QR symbol in an image.

        Args:
            image: Input image (BGR or grayscale).
            frameId: Frame identifier for debug output.

        Returns:
            QrLocalizationResult

        Raises:
            NoSymbolFoundError: If no strategy located a symbol.
        """
        pass
