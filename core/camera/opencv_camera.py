"""
OpenCV Camera Implementation

Implements ICameraCapture using OpenCV's VideoCapture.
Frame source for scanning ID cards from a live camera.
"""

import logging
from typing import List, Tuple, Optional
import numpy as np
import cv2

from core.interfaces.camera_interface import (
    ICameraCapture,
    CameraInfo,
    DEFAULT_FRAME_WIDTH,
    DEFAULT_FRAME_HEIGHT
)


logger = logging.getLogger(__name__)


class OpenCVCamera(ICameraCapture):
    """
    Camera capture implementation using OpenCV VideoCapture.

    The capture buffer is kept at one frame so each read returns the
    most recent image rather than a queued one.
    """

    def __init__(self, maxCameraSearch: int = 2):
        """
        Initialize OpenCVCamera.

        Args:
            maxCameraSearch: Maximum number of camera indices to probe when listing.
        """
        self._capture: Optional[cv2.VideoCapture] = None
        self._cameraIndex: int = -1
        self._maxCameraSearch = maxCameraSearch

    def listAvailableCameras(self) -> List[CameraInfo]:
        """
        List all available camera devices by probing camera indices.

        Returns:
            List[CameraInfo]: List of available cameras.
        """
        cameras = []

        for index in range(self._maxCameraSearch):
            tempCapture = cv2.VideoCapture(index)
            try:
                if tempCapture.isOpened():
                    # Confirm the device actually delivers frames
                    ret, _ = tempCapture.read()
                    if ret:
                        cameras.append(CameraInfo(index=index, name=f"Camera {index}"))
            except cv2.error as e:
                logger.debug(f"Error probing camera {index}: {e}")
            finally:
                tempCapture.release()

        if not cameras:
            logger.warning("No cameras found in the system")
        else:
            logger.info(f"Found {len(cameras)} camera(s)")

        return cameras

    def open(
        self,
        cameraIndex: int,
        width: int = DEFAULT_FRAME_WIDTH,
        height: int = DEFAULT_FRAME_HEIGHT
    ) -> bool:
        """
        Open a camera device by its index.

        Args:
            cameraIndex: The index of the camera to open.
            width: Desired frame width.
            height: Desired frame height.

        Returns:
            bool: True if camera opened successfully.
        """
        # Release any existing camera first
        if self._capture is not None:
            self.release()

        try:
            capture = cv2.VideoCapture(cameraIndex)
        except cv2.error as e:
            logger.error(f"Error opening camera {cameraIndex}: {e}")
            return False

        if not capture.isOpened():
            logger.error(f"Failed to open camera {cameraIndex}")
            capture.release()
            return False

        capture.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        capture.set(cv2.CAP_PROP_BUFFERSIZE, 1)

        self._capture = capture
        self._cameraIndex = cameraIndex
        logger.info(f"Camera {cameraIndex} opened ({width}x{height})")
        return True

    def read(self) -> Tuple[bool, Optional[np.ndarray]]:
        """
        Read a frame from the opened camera.

        Returns:
            Tuple[bool, Optional[np.ndarray]]: Success flag and frame.
        """
        if self._capture is None or not self._capture.isOpened():
            return (False, None)

        try:
            ret, frame = self._capture.read()
            return (ret, frame if ret else None)
        except cv2.error as e:
            logger.error(f"Error reading frame: {e}")
            return (False, None)

    def release(self) -> None:
        """
        Release the camera device and free resources.

        Safe to call more than once.
        """
        if self._capture is None:
            return

        try:
            self._capture.release()
            logger.info(f"Camera {self._cameraIndex} released")
        except cv2.error as e:
            logger.error(f"Error releasing camera: {e}")
        finally:
            self._capture = None
            self._cameraIndex = -1

    def isOpened(self) -> bool:
        """
        Check if a camera is currently opened.

        Returns:
            bool: True if camera is opened.
        """
        return self._capture is not None and self._capture.isOpened()

    def getCameraIndex(self) -> int:
        """
        Get the current camera index.

        Returns:
            int: Current camera index, or -1 if no camera is opened.
        """
        return self._cameraIndex
