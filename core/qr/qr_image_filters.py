"""
QR Image Filters Module.

Pixel-level pre-filters tried by the QR localizer. Each filter takes a
BGR uint8 image and returns a new BGR uint8 image of the same size.

Filters:
- "original": unchanged
- "highContrast": every channel thresholded at 128
- "grayscale": channel average
- "binarize": grayscale, then thresholded at the global mean
- "sharpen": 3x3 cross kernel (5*center - 4 neighbours), borders kept
"""

import logging
from typing import Callable, Dict, List

import cv2
import numpy as np


logger = logging.getLogger(__name__)

HIGH_CONTRAST_THRESHOLD = 128


def toBgr(image: np.ndarray) -> np.ndarray:
    """
    Normalize an image to 3-channel BGR uint8.

    Args:
        image: Grayscale, BGR or BGRA image.

    Returns:
        BGR image.
    """
    if image.dtype != np.uint8:
        image = np.clip(image, 0, 255).astype(np.uint8)
    if len(image.shape) == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
    return image


def _channelAverage(image: np.ndarray) -> np.ndarray:
    average = image.astype(np.float32).mean(axis=2)
    return np.clip(np.rint(average), 0, 255).astype(np.uint8)


def _grayToBgr(gray: np.ndarray) -> np.ndarray:
    return np.repeat(gray[:, :, np.newaxis], 3, axis=2)


def applyOriginal(image: np.ndarray) -> np.ndarray:
    return image


def applyHighContrast(image: np.ndarray) -> np.ndarray:
    return np.where(image < HIGH_CONTRAST_THRESHOLD, 0, 255).astype(np.uint8)


def applyGrayscale(image: np.ndarray) -> np.ndarray:
    return _grayToBgr(_channelAverage(image))


def applyBinarize(image: np.ndarray) -> np.ndarray:
    gray = _channelAverage(image)
    threshold = float(gray.mean()) if gray.size else 0.0
    binary = np.where(gray < threshold, 0, 255).astype(np.uint8)
    return _grayToBgr(binary)


def applySharpen(image: np.ndarray) -> np.ndarray:
    """Sharpen interior pixels; the one-pixel border is left as is."""
    height, width = image.shape[:2]
    result = image.copy()
    if height < 3 or width < 3:
        return result

    source = image.astype(np.int16)
    center = source[1:-1, 1:-1]
    sharpened = (
        5 * center
        - source[:-2, 1:-1]   # above
        - source[1:-1, :-2]   # left
        - source[1:-1, 2:]    # right
        - source[2:, 1:-1]    # below
    )
    result[1:-1, 1:-1] = np.clip(sharpened, 0, 255).astype(np.uint8)
    return result


# Filter table in search order
IMAGE_FILTERS: Dict[str, Callable[[np.ndarray], np.ndarray]] = {
    "original": applyOriginal,
    "highContrast": applyHighContrast,
    "grayscale": applyGrayscale,
    "binarize": applyBinarize,
    "sharpen": applySharpen,
}


def getSupportedFilters() -> List[str]:
    """Names of the available filters, in default search order."""
    return list(IMAGE_FILTERS.keys())


def applyFilter(name: str, image: np.ndarray) -> np.ndarray:
    """
    Apply a named filter.

    Raises:
        ValueError: If the filter name is unknown.
    """
    try:
        imageFilter = IMAGE_FILTERS[name]
    except KeyError:
        raise ValueError(
            f"Unknown image filter '{name}'. Supported: {getSupportedFilters()}"
        ) from None
    return imageFilter(image)
