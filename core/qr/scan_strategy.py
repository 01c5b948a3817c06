"""
Scan Strategy Module.

Static search table for the QR localizer: raster sizes crossed with
pixel filters crossed with the two inversion modes. The table is built
without touching any detector, so the search order can be checked on
its own.

Order: sizes (outer), filters, inversion (innermost).
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import cv2
import numpy as np

from core.qr.qr_image_filters import getSupportedFilters


# Target long-edge lengths tried after the native size
DEFAULT_LONG_EDGES: Tuple[int, ...] = (800, 1000, 1200)

# Inversion disallowed first, then allowed
INVERSION_MODES: Tuple[bool, ...] = (False, True)

NATIVE_SIZE_LABEL = "native"


@dataclass(frozen=True)
class ScanSize:
    """Raster size to try."""
    label: str
    width: int
    height: int


@dataclass(frozen=True)
class ScanStrategy:
    """One (size, filter, inversion) combination."""
    size: ScanSize
    filterName: str
    tryInvert: bool

    def describe(self) -> str:
        return (
            f"size={self.size.label} ({self.size.width}x{self.size.height}), "
            f"filter={self.filterName}, "
            f"inversion={'attemptBoth' if self.tryInvert else 'dontInvert'}"
        )


def computeScanSizes(
    width: int,
    height: int,
    longEdges: Sequence[int] = DEFAULT_LONG_EDGES
) -> List[ScanSize]:
    """
    Native size followed by aspect-preserving rescales.

    A rescale that matches a size already in the list is skipped.

    Args:
        width: Native image width.
        height: Native image height.
        longEdges: Target lengths of the longer edge.

    Returns:
        List of ScanSize, native first.
    """
    sizes = [ScanSize(NATIVE_SIZE_LABEL, width, height)]
    seen = {(width, height)}
    longest = max(width, height)

    for edge in longEdges:
        scale = edge / longest
        scaledWidth = max(1, int(round(width * scale)))
        scaledHeight = max(1, int(round(height * scale)))
        if (scaledWidth, scaledHeight) in seen:
            continue
        seen.add((scaledWidth, scaledHeight))
        sizes.append(ScanSize(f"long{edge}", scaledWidth, scaledHeight))

    return sizes


def buildScanStrategies(
    width: int,
    height: int,
    longEdges: Sequence[int] = DEFAULT_LONG_EDGES,
    filterNames: Optional[Sequence[str]] = None
) -> List[ScanStrategy]:
    """
    Build the ordered strategy table for an image of the given size.

    Args:
        width: Native image width.
        height: Native image height.
        longEdges: Target long-edge lengths.
        filterNames: Filters to try (default: all, in default order).

    Returns:
        Ordered list of ScanStrategy.
    """
    if filterNames is None:
        filterNames = getSupportedFilters()

    return [
        ScanStrategy(size=size, filterName=filterName, tryInvert=tryInvert)
        for size in computeScanSizes(width, height, longEdges)
        for filterName in filterNames
        for tryInvert in INVERSION_MODES
    ]


def resizeImage(image: np.ndarray, size: ScanSize) -> np.ndarray:
    """
    Resize an image to a scan size.

    Args:
        image: Input image.
        size: Target size.

    Returns:
        Resized image (the input itself if already at that size).
    """
    height, width = image.shape[:2]
    if (width, height) == (size.width, size.height):
        return image

    # Use appropriate interpolation method
    if size.width * size.height > width * height:
        interpolation = cv2.INTER_CUBIC  # Better for enlarging
    else:
        interpolation = cv2.INTER_AREA   # Better for shrinking

    return cv2.resize(image, (size.width, size.height), interpolation=interpolation)
