"""
Decoder Exceptions Module.

Error taxonomy for the secure QR decoding pipeline.

Stage-level errors are raised by the core components. The pipeline
orchestrator wraps whichever one stops a run in a PipelineError that
records the failing stage.
"""

from typing import Optional


class DecoderError(Exception):
    """Base class for every error raised by the decoder."""
    pass


class NoSymbolFoundError(DecoderError):
    """No size/filter/inversion combination located a QR symbol."""

    def __init__(self, message: str = "No QR code found in the image", attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


class PayloadFormatError(DecoderError):
    """The scanned string is not a non-negative decimal integer."""
    pass


class FieldCountError(DecoderError):
    """Too few delimiter-separated tokens to be an identity payload."""

    def __init__(self, tokenCount: int, required: int = 2):
        super().__init__(
            f"Unrecognized document format: found {tokenCount} field(s), "
            f"at least {required} required"
        )
        self.tokenCount = tokenCount
        self.required = required


class SignatureBoundsError(DecoderError):
    """Payload is shorter than the trailing signature and hash segments."""

    def __init__(self, payloadLength: int, requiredLength: int):
        super().__init__(
            f"Payload of {payloadLength} bytes is shorter than the "
            f"{requiredLength} bytes required for the binary tail"
        )
        self.payloadLength = payloadLength
        self.requiredLength = requiredLength


class DateParseError(DecoderError):
    """Date of birth is unparsable or outside the plausible range."""

    def __init__(self, text: str, reason: str):
        super().__init__(f"Cannot use date of birth '{text}': {reason}")
        self.text = text
        self.reason = reason


class ImageLoadError(DecoderError):
    """An uploaded or captured image could not be rasterized."""
    pass


class FrameSourceError(DecoderError):
    """The camera could not be opened or stopped delivering frames."""
    pass


class ScanCancelledError(DecoderError):
    """A live-feed scan was cancelled by its caller."""
    pass


class ClaimError(DecoderError):
    """A verification claim cannot be built from the decoded record."""
    pass


class VerificationPayloadError(DecoderError):
    """A scanned verification QR does not carry a valid payload."""
    pass


class PipelineError(DecoderError):
    """
    A pipeline stage failed.

    Attributes:
        stage: Name of the failing stage ("load", "localize", "decode",
               "parse" or "capture").
        cause: The original stage error.
    """

    def __init__(self, stage: str, cause: Exception, frameId: Optional[str] = None):
        prefix = f"[{frameId}] " if frameId else ""
        super().__init__(f"{prefix}Stage '{stage}' failed: {cause}")
        self.stage = stage
        self.cause = cause
        self.frameId = frameId
