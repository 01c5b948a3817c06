"""
Live Scan Session Module.

Polls a camera until one frame decodes into an IdentityRecord or the
scan is cancelled. One session runs once:

    IDLE -> POLLING -> FOUND | CANCELLED | FAILED

Frames that do not decode (no symbol, bad payload, ...) keep the session
polling. Only cancellation or a failing frame source end it without a
record. The camera is closed on every exit path.
"""

import logging
import threading
from enum import Enum
from typing import Callable, Optional

import numpy as np

from core.exceptions import (
    DecoderError,
    FrameSourceError,
    NoSymbolFoundError,
    PipelineError,
    ScanCancelledError
)
from core.interfaces.identity_record_interface import IdentityRecord
from services.interfaces.camera_service_interface import ICameraService


class LiveScanState(Enum):
    """Lifecycle of a live scan session."""
    IDLE = "idle"
    POLLING = "polling"
    FOUND = "found"
    CANCELLED = "cancelled"
    FAILED = "failed"


class CancellationToken:
    """
    Cancellation flag shared between a scan and its caller.

    Backed by threading.Event so cancel() may be called from another
    thread (UI, signal handler).
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    def isCancelled(self) -> bool:
        """Check whether cancellation was requested."""
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """
        Sleep up to `timeout` seconds, waking early on cancellation.

        Returns:
            bool: True if cancelled.
        """
        return self._event.wait(timeout)


class LiveScanSession:
    """
    Single-use live-feed scan.

    The decode callable receives (image, frameId) and returns a record
    or raises a DecoderError.
    """

    def __init__(
        self,
        cameraService: ICameraService,
        decodeFrame: Callable[[np.ndarray, str], IdentityRecord],
        cameraIndex: int = 0,
        pollIntervalMs: int = 100,
        maxConsecutiveReadFailures: int = 30,
        onStateChange: Optional[Callable[[LiveScanState], None]] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize LiveScanSession.

        Args:
            cameraService: Frame source.
            decodeFrame: Pipeline run on each captured frame.
            cameraIndex: Camera device to open.
            pollIntervalMs: Delay between decode attempts.
            maxConsecutiveReadFailures: Failed reads in a row that end the scan.
            onStateChange: Called with each new state.
            logger: Logger instance for debug output.
        """
        self._cameraService = cameraService
        self._decodeFrame = decodeFrame
        self._cameraIndex = cameraIndex
        self._pollInterval = max(0, pollIntervalMs) / 1000.0
        self._maxConsecutiveReadFailures = max(1, maxConsecutiveReadFailures)
        self._onStateChange = onStateChange
        self._logger = logger or logging.getLogger(__name__)

        self._state = LiveScanState.IDLE
        self._attempts = 0

    @property
    def state(self) -> LiveScanState:
        """Current session state."""
        return self._state

    @property
    def attempts(self) -> int:
        """Number of frames handed to the decoder."""
        return self._attempts

    def run(self, cancelToken: Optional[CancellationToken] = None) -> IdentityRecord:
        """
        Poll the camera until a record is decoded.

        Args:
            cancelToken: Token checked between frames.

        Returns:
            IdentityRecord from the first frame that decodes.

        Raises:
            ScanCancelledError: If the token was cancelled.
            PipelineError: Stage "capture" if the camera cannot be opened or
                stops delivering frames.
            RuntimeError: If the session has already run.
        """
        if self._state != LiveScanState.IDLE:
            raise RuntimeError(f"Live scan session already used (state={self._state.value})")

        token = cancelToken or CancellationToken()

        with self._cameraService:
            try:
                return self._poll(token)
            except Exception:
                if self._state == LiveScanState.POLLING:
                    self._setState(LiveScanState.FAILED)
                raise

    def _poll(self, token: CancellationToken) -> IdentityRecord:
        if token.isCancelled():
            self._setState(LiveScanState.CANCELLED)
            raise ScanCancelledError("Live scan cancelled before start")

        if not self._cameraService.openCamera(self._cameraIndex):
            self._setState(LiveScanState.FAILED)
            raise PipelineError(
                "capture",
                FrameSourceError(f"Cannot open camera {self._cameraIndex}")
            )

        self._setState(LiveScanState.POLLING)
        consecutiveFailures = 0

        while True:
            if token.isCancelled():
                self._setState(LiveScanState.CANCELLED)
                self._logger.info(f"Live scan cancelled after {self._attempts} attempt(s)")
                raise ScanCancelledError("Live scan cancelled")

            frame = self._cameraService.captureFrame()

            if not frame.success or frame.image is None:
                consecutiveFailures += 1
                if consecutiveFailures >= self._maxConsecutiveReadFailures:
                    self._setState(LiveScanState.FAILED)
                    raise PipelineError(
                        "capture",
                        FrameSourceError(
                            f"{consecutiveFailures} consecutive frame reads failed"
                        ),
                        frame.frameId
                    )
            else:
                consecutiveFailures = 0
                self._attempts += 1
                try:
                    record = self._decodeFrame(frame.image, frame.frameId)
                except DecoderError as e:
                    self._logFrameMiss(frame.frameId, e)
                else:
                    self._setState(LiveScanState.FOUND)
                    self._logger.info(
                        f"[{frame.frameId}] Record decoded after {self._attempts} attempt(s)"
                    )
                    return record

            token.wait(self._pollInterval)

    def _logFrameMiss(self, frameId: str, error: DecoderError) -> None:
        cause = error.cause if isinstance(error, PipelineError) else error
        if isinstance(cause, NoSymbolFoundError):
            self._logger.debug(f"[{frameId}] No QR code in frame")
        else:
            self._logger.warning(f"[{frameId}] Frame not decoded, continuing: {error}")

    def _setState(self, state: LiveScanState) -> None:
        if state == self._state:
            return
        self._logger.debug(f"Live scan state: {self._state.value} -> {state.value}")
        self._state = state
        if self._onStateChange:
            self._onStateChange(state)
