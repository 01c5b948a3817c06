"""
Verification QR Generator Module.

Renders verification QR codes carrying a compact JSON payload
({type, proofId, address}). The decoded identity record itself is never
encoded.
"""

import io
import base64
import logging
from pathlib import Path
from typing import Optional, Union

import qrcode
from PIL import Image

from core.processor.identity_claims import VerificationQrPayload


ERROR_CORRECTION_LEVELS = {
    'L': qrcode.constants.ERROR_CORRECT_L,
    'M': qrcode.constants.ERROR_CORRECT_M,
    'Q': qrcode.constants.ERROR_CORRECT_Q,
    'H': qrcode.constants.ERROR_CORRECT_H,
}


class VerificationQrGenerator:
    """
    QR code renderer for verification payloads.

    Defaults: error correction H, 1-module margin, 300x300 px,
    black on white.
    """

    def __init__(
        self,
        errorCorrection: str = 'H',
        border: int = 1,
        size: int = 300,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize VerificationQrGenerator.

        Args:
            errorCorrection: L(7%), M(15%), Q(25%), H(30%).
            border: Quiet-zone width in modules.
            size: Output edge length in pixels.
            logger: Logger instance for debug output.

        Raises:
            ValueError: If the error-correction level is unknown.
        """
        level = (errorCorrection or 'H').upper()
        if level not in ERROR_CORRECTION_LEVELS:
            raise ValueError(
                f"Invalid error correction '{errorCorrection}'. "
                f"Supported: {list(ERROR_CORRECTION_LEVELS)}"
            )
        self._errorCorrection = level
        self._border = border
        self._size = size
        self._logger = logger or logging.getLogger(__name__)

    def render(self, payload: Union[VerificationQrPayload, str]) -> Image.Image:
        """
        Render a payload as a square RGB image.

        Args:
            payload: Verification payload or pre-serialized text.

        Returns:
            PIL image of `size` x `size` pixels.
        """
        data = payload.toJson() if isinstance(payload, VerificationQrPayload) else payload

        qr = qrcode.QRCode(
            version=None,  # Auto-detect
            error_correction=ERROR_CORRECTION_LEVELS[self._errorCorrection],
            box_size=10,
            border=self._border
        )
        qr.add_data(data)
        qr.make(fit=True)

        image = qr.make_image(fill_color="black", back_color="white").convert("RGB")
        image = image.resize((self._size, self._size), Image.NEAREST)

        self._logger.debug(
            f"Rendered verification QR (version={qr.version}, "
            f"ec={self._errorCorrection}, {len(data)} characters)"
        )
        return image

    def toPngBytes(self, payload: Union[VerificationQrPayload, str]) -> bytes:
        """Render a payload as PNG bytes."""
        buffer = io.BytesIO()
        self.render(payload).save(buffer, format="PNG")
        return buffer.getvalue()

    def toDataUrl(self, payload: Union[VerificationQrPayload, str]) -> str:
        """Render a payload as a base64 PNG data URL."""
        encoded = base64.b64encode(self.toPngBytes(payload)).decode('ascii')
        return f"data:image/png;base64,{encoded}"

    def save(self, payload: Union[VerificationQrPayload, str], outputPath: str) -> str:
        """
        Render a payload to a PNG file.

        Returns:
            Absolute path of the written file.
        """
        path = Path(outputPath)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.render(payload).save(path, format="PNG")
        self._logger.info(f"Saved verification QR: {path}")
        return str(path.absolute())
