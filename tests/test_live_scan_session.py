import threading

import numpy as np
import pytest

from core.exceptions import (
    FieldCountError,
    NoSymbolFoundError,
    PipelineError,
    ScanCancelledError,
)
from core.interfaces.camera_interface import CameraInfo, ICameraCapture
from core.interfaces.identity_record_interface import IdentityRecord
from services.impl.s1_camera_service import S1CameraService
from services.live_scan_session import CancellationToken, LiveScanSession, LiveScanState


class _FakeCapture(ICameraCapture):
    """Camera that yields a fixed sequence of reads."""

    def __init__(self, reads=None, openSucceeds=True):
        self._reads = list(reads or [])
        self._openSucceeds = openSucceeds
        self.opened = False
        self.releaseCount = 0

    def listAvailableCameras(self):
        return [CameraInfo(index=0, name="Fake")]

    def open(self, cameraIndex, width=1280, height=720):
        self.opened = self._openSucceeds
        return self._openSucceeds

    def read(self):
        if self._reads:
            return self._reads.pop(0)
        return (True, np.zeros((4, 4, 3), dtype=np.uint8))

    def release(self):
        self.opened = False
        self.releaseCount += 1

    def isOpened(self):
        return self.opened


def _frame():
    return (True, np.zeros((4, 4, 3), dtype=np.uint8))


def _session(capture, decodeFrame, **kwargs):
    cameraService = S1CameraService(cameraCapture=capture)
    kwargs.setdefault("pollIntervalMs", 0)
    return LiveScanSession(cameraService, decodeFrame, **kwargs)


def _decoderSucceedingOn(callNumber, errors=None):
    calls = []

    def decodeFrame(image, frameId):
        calls.append(frameId)
        if len(calls) < callNumber:
            error = (errors or {}).get(len(calls), NoSymbolFoundError())
            raise PipelineError("localize", error, frameId)
        return IdentityRecord(name="Found")

    return decodeFrame, calls


def test_keeps_polling_until_a_frame_decodes():
    capture = _FakeCapture()
    decodeFrame, calls = _decoderSucceedingOn(3)
    states = []
    session = _session(capture, decodeFrame, onStateChange=states.append)

    record = session.run()

    assert record.name == "Found"
    assert len(calls) == 3
    assert session.attempts == 3
    assert session.state == LiveScanState.FOUND
    assert states == [LiveScanState.POLLING, LiveScanState.FOUND]
    assert capture.releaseCount == 1
    assert not capture.opened


def test_other_decode_errors_also_keep_polling():
    capture = _FakeCapture()
    errors = {1: FieldCountError(1), 2: NoSymbolFoundError()}
    decodeFrame, calls = _decoderSucceedingOn(3, errors)

    record = _session(capture, decodeFrame).run()

    assert record.name == "Found"
    assert len(calls) == 3


def test_cancel_before_start_releases_camera():
    capture = _FakeCapture()
    token = CancellationToken()
    token.cancel()
    session = _session(capture, lambda image, frameId: IdentityRecord())

    with pytest.raises(ScanCancelledError):
        session.run(token)

    assert session.state == LiveScanState.CANCELLED
    assert not capture.opened


def test_cancel_while_polling():
    capture = _FakeCapture()
    token = CancellationToken()

    def decodeFrame(image, frameId):
        token.cancel()
        raise PipelineError("localize", NoSymbolFoundError(), frameId)

    session = _session(capture, decodeFrame)

    with pytest.raises(ScanCancelledError):
        session.run(token)

    assert session.state == LiveScanState.CANCELLED
    assert session.attempts == 1
    assert capture.releaseCount == 1


def test_cancel_from_another_thread():
    capture = _FakeCapture()
    token = CancellationToken()
    firstAttempt = threading.Event()

    def decodeFrame(image, frameId):
        firstAttempt.set()
        raise PipelineError("localize", NoSymbolFoundError(), frameId)

    session = _session(capture, decodeFrame, pollIntervalMs=10)
    canceller = threading.Thread(target=lambda: firstAttempt.wait(5) and token.cancel())
    canceller.start()

    with pytest.raises(ScanCancelledError):
        session.run(token)
    canceller.join()

    assert capture.releaseCount == 1


def test_camera_that_cannot_open_fails_with_capture_stage():
    capture = _FakeCapture(openSucceeds=False)
    session = _session(capture, lambda image, frameId: IdentityRecord())

    with pytest.raises(PipelineError) as excInfo:
        session.run()

    assert excInfo.value.stage == "capture"
    assert session.state == LiveScanState.FAILED


def test_repeated_read_failures_end_the_scan():
    capture = _FakeCapture(reads=[(False, None)] * 5)
    session = _session(
        capture, lambda image, frameId: IdentityRecord(), maxConsecutiveReadFailures=3
    )

    with pytest.raises(PipelineError) as excInfo:
        session.run()

    assert excInfo.value.stage == "capture"
    assert session.state == LiveScanState.FAILED
    assert session.attempts == 0
    assert capture.releaseCount == 1


def test_read_failures_below_limit_are_tolerated():
    capture = _FakeCapture(reads=[(False, None), (False, None), _frame()])
    session = _session(
        capture, lambda image, frameId: IdentityRecord(name="ok"), maxConsecutiveReadFailures=3
    )

    assert session.run().name == "ok"


def test_unexpected_errors_fail_the_session_and_release():
    capture = _FakeCapture()

    def decodeFrame(image, frameId):
        raise KeyError("bug")

    session = _session(capture, decodeFrame)

    with pytest.raises(KeyError):
        session.run()

    assert session.state == LiveScanState.FAILED
    assert capture.releaseCount == 1


def test_session_runs_only_once():
    session = _session(_FakeCapture(), lambda image, frameId: IdentityRecord())
    session.run()

    with pytest.raises(RuntimeError):
        session.run()
