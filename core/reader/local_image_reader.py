"""
Local Image Reader Implementation

Implements IImageReader for the local filesystem and in-memory
uploads using OpenCV.
Follows SRP: Only handles image decoding.
"""

import os
import logging
import numpy as np
import cv2

from core.exceptions import ImageLoadError
from core.interfaces.image_reader_interface import IImageReader


logger = logging.getLogger(__name__)


class LocalImageReader(IImageReader):
    """
    Image reader implementation for local files and byte buffers.

    Alpha channels are dropped; grayscale sources come back as 3-channel BGR.
    """

    def readFile(self, filepath: str) -> np.ndarray:
        """Read an image file into a BGR array."""
        if not os.path.isfile(filepath):
            raise ImageLoadError(f"Image file not found: {filepath}")

        # cv2.imread cannot open non-ASCII paths on some platforms
        try:
            with open(filepath, 'rb') as f:
                data = f.read()
        except OSError as e:
            raise ImageLoadError(f"Cannot read image file {filepath}: {e}") from e

        image = self._decode(data)
        if image is None:
            raise ImageLoadError(f"Not a readable image: {filepath}")

        logger.debug(f"Image loaded from {filepath} ({image.shape[1]}x{image.shape[0]})")
        return image

    def readBytes(self, data: bytes) -> np.ndarray:
        """Read encoded image bytes into a BGR array."""
        if not data:
            raise ImageLoadError("Image data is empty")

        image = self._decode(data)
        if image is None:
            raise ImageLoadError(f"Not a readable image ({len(data)} bytes)")

        logger.debug(f"Image decoded from memory ({image.shape[1]}x{image.shape[0]})")
        return image

    def _decode(self, data: bytes):
        buffer = np.frombuffer(data, dtype=np.uint8)
        try:
            return cv2.imdecode(buffer, cv2.IMREAD_COLOR)
        except cv2.error as e:
            logger.error(f"Error decoding image: {e}")
            return None
