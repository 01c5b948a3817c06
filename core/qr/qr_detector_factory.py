"""
QR Detector Factory Module.

Factory function for creating QR detector instances based on backend selection.
Supports ZXing-cpp and pyzbar (ZBar) backends.

Follows:
- OCP (Open/Closed Principle): Easy to extend with new backends
- DIP (Dependency Inversion): Returns IQrDetector interface
"""

import logging
from typing import List

from core.interfaces.qr_detector_interface import IQrDetector


logger = logging.getLogger(__name__)


def createQrDetector(
    backend: str = "zxing",
    # ZXing params (prefixed with 'zxing')
    zxingTryRotate: bool = True,
    zxingTryDownscale: bool = True
) -> IQrDetector:
    """
    Factory function to create QR detector based on backend.

    Supports:
    - "zxing": ZXing-cpp backend (fast, native inversion support)
    - "pyzbar": ZBar backend via pyzbar

    Args:
        backend: Backend name ("zxing" or "pyzbar").
        zxingTryRotate: (zxing) Try rotated barcodes (90/270 degrees).
        zxingTryDownscale: (zxing) Try downscaled versions for better detection.

    Returns:
        IQrDetector: QR detector instance implementing IQrDetector interface.

    Raises:
        ValueError: If backend is invalid or not supported.
        ImportError: If required library is not installed.

    Examples:
        >>> detector = createQrDetector(backend="zxing", zxingTryRotate=True)
        >>> detector = createQrDetector(backend="pyzbar")
    """
    # Normalize backend name
    backend = backend.lower().strip()

    supportedBackends = getSupportedQrBackends()
    if backend not in supportedBackends:
        errorMsg = (
            f"Invalid QR backend: '{backend}'. "
            f"Supported backends: {supportedBackends}"
        )
        logger.error(errorMsg)
        raise ValueError(errorMsg)

    if backend == "pyzbar":
        return _createPyzbarDetector()

    return _createZxingDetector(
        zxingTryRotate=zxingTryRotate,
        zxingTryDownscale=zxingTryDownscale
    )


def _createZxingDetector(
    zxingTryRotate: bool,
    zxingTryDownscale: bool
) -> IQrDetector:
    """
    Create ZXing QR detector instance.

    Raises:
        ImportError: If zxing-cpp is not installed.
    """
    try:
        import zxingcpp  # noqa: F401
        from core.qr.zxing_qr_detector import ZxingQrDetector

        logger.info(
            f"Creating ZXing QR detector "
            f"(tryRotate={zxingTryRotate}, tryDownscale={zxingTryDownscale})"
        )

        return ZxingQrDetector(
            tryRotate=zxingTryRotate,
            tryDownscale=zxingTryDownscale
        )

    except ImportError as e:
        errorMsg = (
            "ZXing-cpp is not installed. "
            "Install with: pip install zxing-cpp"
        )
        logger.error(errorMsg)
        logger.error(f"Import error details: {e}")
        raise ImportError(errorMsg) from e


def _createPyzbarDetector() -> IQrDetector:
    """
    Create pyzbar QR detector instance.

    Raises:
        ImportError: If pyzbar (or the zbar shared library) is not installed.
    """
    try:
        from core.qr.pyzbar_qr_detector import PyzbarQrDetector

        logger.info("Creating pyzbar QR detector")
        return PyzbarQrDetector()

    except ImportError as e:
        errorMsg = (
            "pyzbar is not installed. "
            "Install with: pip install pyzbar (requires the zbar library)"
        )
        logger.error(errorMsg)
        logger.error(f"Import error details: {e}")
        raise ImportError(errorMsg) from e


def getSupportedQrBackends() -> List[str]:
    """
    Get list of supported QR backend names.

    Returns:
        List[str]: List of backend names ["zxing", "pyzbar"].
    """
    return ["zxing", "pyzbar"]


def isQrBackendAvailable(backend: str) -> bool:
    """
    Check if a QR backend is available (library installed).

    Args:
        backend: Backend name ("zxing" or "pyzbar").

    Returns:
        bool: True if backend library is installed and available.
    """
    backend = backend.lower().strip()

    if backend == "zxing":
        try:
            import zxingcpp  # noqa: F401
            return True
        except ImportError:
            return False

    elif backend == "pyzbar":
        try:
            from pyzbar import pyzbar  # noqa: F401
            return True
        except ImportError:
            return False

    return False
