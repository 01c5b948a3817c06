# Core module for the secure QR decoder
# Contains interfaces and implementations for codec, parsing, QR and camera

from core.exceptions import DecoderError, PipelineError
from core.interfaces.camera_interface import ICameraCapture, CameraInfo
from core.interfaces.identity_record_interface import IdentityRecord, DecodedPayload
from core.interfaces.qr_detector_interface import IQrDetector, QrDetectionResult
from core.camera.opencv_camera import OpenCVCamera
from core.parser.secure_qr_field_parser import SecureQrFieldParser
from core.processor.date_of_birth_processor import DateOfBirthProcessor

__all__ = [
    "DecoderError",
    "PipelineError",
    "ICameraCapture",
    "CameraInfo",
    "IdentityRecord",
    "DecodedPayload",
    "IQrDetector",
    "QrDetectionResult",
    "OpenCVCamera",
    "SecureQrFieldParser",
    "DateOfBirthProcessor",
]
