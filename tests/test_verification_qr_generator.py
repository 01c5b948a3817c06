import base64
import io

import numpy as np
import pytest
from PIL import Image, ImageOps

from core.processor import buildVerificationPayload
from core.qr.verification_qr_generator import VerificationQrGenerator


def _payload():
    return buildVerificationPayload("identity", "proof_0123456789abcdef_1700000000000", "0xabc")


def test_png_is_square_at_configured_size():
    data = VerificationQrGenerator(size=300).toPngBytes(_payload())

    image = Image.open(io.BytesIO(data))
    assert image.format == "PNG"
    assert image.size == (300, 300)


def test_data_url_wraps_png():
    url = VerificationQrGenerator().toDataUrl(_payload())

    assert url.startswith("data:image/png;base64,")
    assert base64.b64decode(url.split(",", 1)[1])[:8] == b"\x89PNG\r\n\x1a\n"


def test_save_writes_file(tmp_path):
    target = tmp_path / "nested" / "verify.png"

    written = VerificationQrGenerator().save(_payload(), str(target))

    assert target.exists()
    assert written == str(target.absolute())


def test_generated_qr_scans_back_to_payload():
    zxingcpp = pytest.importorskip("zxingcpp")
    image = VerificationQrGenerator(size=400).render(_payload())
    # Wider quiet zone for the reader
    padded = ImageOps.expand(image.convert("L"), border=40, fill=255)

    results = zxingcpp.read_barcodes(np.array(padded))

    assert results
    assert results[0].text == _payload().toJson()


def test_invalid_error_correction_level():
    with pytest.raises(ValueError):
        VerificationQrGenerator(errorCorrection="X")
