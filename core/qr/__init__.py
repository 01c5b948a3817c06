"""QR Detection module."""

from core.qr.qr_detector_factory import (
    createQrDetector,
    getSupportedQrBackends,
    isQrBackendAvailable
)
from core.qr.qr_image_filters import applyFilter, getSupportedFilters
from core.qr.scan_strategy import ScanSize, ScanStrategy, buildScanStrategies
from core.qr.qr_localizer import QrLocalizer, LocateResult

__all__ = [
    'createQrDetector',
    'getSupportedQrBackends',
    'isQrBackendAvailable',
    'applyFilter',
    'getSupportedFilters',
    'ScanSize',
    'ScanStrategy',
    'buildScanStrategies',
    'QrLocalizer',
    'LocateResult'
]
