import json
from datetime import date

import cv2
import numpy as np
import pytest

from core.exceptions import (
    FieldCountError,
    ImageLoadError,
    NoSymbolFoundError,
    PayloadFormatError,
    PipelineError,
    ScanCancelledError,
)
from core.interfaces.camera_interface import CameraInfo, ICameraCapture
from core.interfaces.qr_detector_interface import IQrDetector, QrDetectionResult
from payload_builders import buildPayload, gzipPayload, toDecimal
from services.live_scan_session import CancellationToken, LiveScanState
from services.pipeline_orchestrator import DEFAULT_CONFIG_PATH, PipelineOrchestrator


TODAY = date(2024, 6, 14)
PHOTO = bytes(range(40)) * 3


class _FixedDetector(IQrDetector):
    """Returns the same text on every call, or nothing."""

    def __init__(self, text=None):
        self.text = text
        self.calls = 0

    def detect(self, image, tryInvert=False):
        self.calls += 1
        if self.text is None:
            return None
        return QrDetectionResult(
            text=self.text, polygon=[], rect=(0, 0, 0, 0), confidence=1.0, inverted=tryInvert
        )


class _CancellingDetector(IQrDetector):
    """Finds nothing and cancels the scan on the first frame."""

    def __init__(self, token):
        self._token = token

    def detect(self, image, tryInvert=False):
        self._token.cancel()
        return None


class _FrameSource(ICameraCapture):
    def __init__(self):
        self.opened = False
        self.reads = 0

    def listAvailableCameras(self):
        return [CameraInfo(index=0, name="Fake")]

    def open(self, cameraIndex, width=1280, height=720):
        self.opened = True
        return True

    def read(self):
        self.reads += 1
        return True, np.full((60, 80, 3), 255, dtype=np.uint8)

    def release(self):
        self.opened = False

    def isOpened(self):
        return self.opened


@pytest.fixture
def configPath(tmp_path):
    with open(DEFAULT_CONFIG_PATH, encoding="utf-8") as f:
        config = json.load(f)
    config["debug"]["basePath"] = str(tmp_path / "debug")
    config["s1_camera"]["pollIntervalMs"] = 0
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config), encoding="utf-8")
    return str(path)


def _decimal(**kwargs):
    return toDecimal(gzipPayload(buildPayload(photo=PHOTO, **kwargs)))


def _orchestrator(configPath, text=None, **kwargs):
    return PipelineOrchestrator(configPath, qrDetector=_FixedDetector(text), **kwargs)


def test_decimal_text_decodes_to_full_record(configPath):
    orchestrator = _orchestrator(configPath)

    record = orchestrator.decodeFromDecimal(_decimal(), today=TODAY)

    assert record.referenceId == "269720190612163909327"
    assert record.name == "Asha Verma"
    assert record.vtc == "Pune City"
    assert record.photo == PHOTO
    assert record.emailHash is None
    assert record.mobileHash is None
    assert record.signature == bytes(range(256))
    assert record.age == 23
    assert record.isAdult is True


def test_uncompressed_payload_is_still_parsed(configPath):
    orchestrator = _orchestrator(configPath)
    decimal = toDecimal(buildPayload(photo=PHOTO))

    record = orchestrator.decodeFromDecimal(decimal, today=TODAY)

    assert record.name == "Asha Verma"
    assert record.photo == PHOTO


def test_unusable_birth_date_leaves_age_unknown(configPath):
    orchestrator = _orchestrator(configPath)

    record = orchestrator.decodeFromDecimal(
        _decimal(fields={"dateOfBirth": "unknown"}), today=TODAY
    )

    assert record.name == "Asha Verma"
    assert record.age is None
    assert record.isAdult is None


def test_non_decimal_text_fails_in_decode_stage(configPath):
    orchestrator = _orchestrator(configPath)

    with pytest.raises(PipelineError) as excInfo:
        orchestrator.decodeFromDecimal("https://example.com")

    assert excInfo.value.stage == "decode"
    assert isinstance(excInfo.value.cause, PayloadFormatError)


def test_short_payload_fails_in_parse_stage(configPath):
    orchestrator = _orchestrator(configPath)

    with pytest.raises(PipelineError) as excInfo:
        orchestrator.decodeFromDecimal(toDecimal(b"\x01\x02"))

    assert excInfo.value.stage == "parse"
    assert isinstance(excInfo.value.cause, FieldCountError)


def test_image_without_symbol_fails_in_localize_stage(configPath):
    detector = _FixedDetector()
    orchestrator = PipelineOrchestrator(configPath, qrDetector=detector)

    with pytest.raises(PipelineError) as excInfo:
        orchestrator.decodeFromImage(np.full((60, 80, 3), 255, dtype=np.uint8))

    assert excInfo.value.stage == "localize"
    assert isinstance(excInfo.value.cause, NoSymbolFoundError)
    assert detector.calls > 1


def test_image_decodes_through_detector_text(configPath):
    orchestrator = _orchestrator(configPath, text=_decimal())

    record = orchestrator.decodeFromImage(
        np.full((60, 80, 3), 255, dtype=np.uint8), frameId="frame_test", today=TODAY
    )

    assert record.name == "Asha Verma"
    assert record.age == 23


def test_image_file_is_loaded_then_decoded(configPath, tmp_path):
    path = tmp_path / "card.png"
    cv2.imwrite(str(path), np.full((60, 80, 3), 200, dtype=np.uint8))
    orchestrator = _orchestrator(configPath, text=_decimal())

    record = orchestrator.decodeFromFile(str(path), today=TODAY)

    assert record.pinCode == "411038"
    assert orchestrator.performanceLogger.getLastTiming().loadMs >= 0.0
    assert orchestrator.performanceLogger.getScanCount() == 1


def test_missing_file_fails_in_load_stage(configPath, tmp_path):
    orchestrator = _orchestrator(configPath, text=_decimal())

    with pytest.raises(PipelineError) as excInfo:
        orchestrator.decodeFromFile(str(tmp_path / "missing.png"))

    assert excInfo.value.stage == "load"
    assert isinstance(excInfo.value.cause, ImageLoadError)


def test_undecodable_upload_fails_in_load_stage(configPath):
    orchestrator = _orchestrator(configPath, text=_decimal())

    with pytest.raises(PipelineError) as excInfo:
        orchestrator.decodeFromImageBytes(b"not an image")

    assert excInfo.value.stage == "load"


def test_uploaded_image_bytes_are_decoded(configPath):
    ok, encoded = cv2.imencode(".png", np.full((60, 80, 3), 200, dtype=np.uint8))
    assert ok
    orchestrator = _orchestrator(configPath, text=_decimal())

    record = orchestrator.decodeFromImageBytes(encoded.tobytes(), today=TODAY)

    assert record.district == "Pune"


def test_live_feed_returns_first_decoded_frame(configPath):
    source = _FrameSource()
    states = []
    orchestrator = _orchestrator(configPath, text=_decimal())

    record = orchestrator.decodeFromLiveFeed(
        frameSource=source, onStateChange=states.append, today=TODAY
    )

    assert record.name == "Asha Verma"
    assert states == [LiveScanState.POLLING, LiveScanState.FOUND]
    assert source.reads == 1
    assert not source.opened


def test_live_feed_keeps_scanning_until_cancelled(configPath):
    source = _FrameSource()
    token = CancellationToken()
    orchestrator = PipelineOrchestrator(configPath, qrDetector=_CancellingDetector(token))

    with pytest.raises(ScanCancelledError):
        orchestrator.decodeFromLiveFeed(frameSource=source, cancelToken=token)

    assert source.reads == 1
    assert not source.opened


def test_debug_mode_writes_stage_and_timing_files(configPath, tmp_path):
    orchestrator = _orchestrator(configPath)
    orchestrator.setDebugEnabled(True)

    orchestrator.decodeFromDecimal(_decimal(), frameId="text_debug", today=TODAY)

    debugDir = tmp_path / "debug"
    timing = json.loads((debugDir / "timing" / "timing_text_debug.json").read_text(encoding="utf-8"))
    assert set(timing["timing_ms"]) == {"decode", "parse", "derive"}

    parsed = json.loads(
        (debugDir / "s4_field_parsing" / "text_debug.json").read_text(encoding="utf-8")
    )
    assert parsed["record"]["name"] == "Asha Verma"
    assert parsed["record"]["photoLength"] == len(PHOTO)
    assert "photo" not in parsed["record"]


def test_qr_image_decodes_end_to_end(configPath):
    pytest.importorskip("zxingcpp")
    qrcode = pytest.importorskip("qrcode")

    symbol = qrcode.QRCode(error_correction=qrcode.constants.ERROR_CORRECT_L, box_size=4, border=4)
    symbol.add_data(_decimal())
    symbol.make(fit=True)
    image = np.array(symbol.make_image(fill_color="black", back_color="white").convert("L"))

    orchestrator = PipelineOrchestrator(configPath)
    record = orchestrator.decodeFromImage(cv2.cvtColor(image, cv2.COLOR_GRAY2BGR), today=TODAY)

    assert record.referenceId == "269720190612163909327"
    assert record.photo == PHOTO
    assert record.age == 23


def test_out_of_range_birth_year_leaves_age_unknown(configPath):
    orchestrator = _orchestrator(configPath)

    record = orchestrator.decodeFromDecimal(
        _decimal(fields={"dateOfBirth": "01/01/99999999999999999999"}), today=TODAY
    )

    assert record.name == "Asha Verma"
    assert record.age is None
    assert "age" not in record.toSummary()
