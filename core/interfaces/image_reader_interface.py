"""
Image Reader Interface Module

Defines the abstract interface for turning stored images into raster
arrays for the QR localizer.
Follows ISP: Only contains methods related to image reading.
"""

from abc import ABC, abstractmethod
import numpy as np


class IImageReader(ABC):
    """
    Abstract interface for image reading operations.

    Implementations return BGR arrays and raise ImageLoadError when the
    source cannot be rasterized.
    """

    @abstractmethod
    def readFile(self, filepath: str) -> np.ndarray:
        """
        Read an image file.

        Args:
            filepath: Path to the image file.

        Returns:
            np.ndarray: Image in BGR format.

        Raises:
            ImageLoadError: If the file is missing or not a readable image.
        """
        pass

    @abstractmethod
    def readBytes(self, data: bytes) -> np.ndarray:
        """
        Read an encoded image (PNG, JPEG, ...) held in memory.

        Args:
            data: Encoded image bytes.

        Returns:
            np.ndarray: Image in BGR format.

        Raises:
            ImageLoadError: If the bytes are not a readable image.
        """
        pass
