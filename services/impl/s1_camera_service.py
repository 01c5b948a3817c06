"""
S1 Camera Service Implementation.

Step 1 of the pipeline: Camera capture and frame ID generation for the
live-feed scanner. Creates and manages OpenCV camera from core layer.

Follows:
- SRP: Only handles camera operations
- DIP: Depends on ICameraCapture abstraction (interface)
"""

import time
from typing import List, Optional

from core.interfaces.camera_interface import (
    ICameraCapture,
    CameraInfo,
    DEFAULT_FRAME_WIDTH,
    DEFAULT_FRAME_HEIGHT
)
from core.camera.opencv_camera import OpenCVCamera
from services.interfaces.camera_service_interface import (
    ICameraService,
    CameraFrame
)
from services.interfaces.base_service_interface import BaseService, generateFrameId


class S1CameraService(ICameraService, BaseService):
    """
    Step 1: Camera Service Implementation.

    Captures frames from camera and generates unique frame IDs
    for tracking through the pipeline.

    Creates OpenCVCamera internally unless a capture is injected.
    """

    SERVICE_NAME = "s1_camera"

    def __init__(
        self,
        frameWidth: int = DEFAULT_FRAME_WIDTH,
        frameHeight: int = DEFAULT_FRAME_HEIGHT,
        maxCameraSearch: int = 2,
        cameraCapture: Optional[ICameraCapture] = None,
        debugBasePath: str = "output/debug",
        debugEnabled: bool = False
    ):
        """
        Initialize S1CameraService.

        Args:
            frameWidth: Default frame width.
            frameHeight: Default frame height.
            maxCameraSearch: Maximum number of camera indices to search.
            cameraCapture: Frame source to use instead of OpenCVCamera.
            debugBasePath: Base path for debug output.
            debugEnabled: Whether to save debug output.
        """
        BaseService.__init__(
            self,
            serviceName=self.SERVICE_NAME,
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )

        self._cameraCapture: ICameraCapture = cameraCapture or OpenCVCamera(
            maxCameraSearch=maxCameraSearch
        )

        self._frameWidth = frameWidth
        self._frameHeight = frameHeight
        self._currentCameraIndex: Optional[int] = None

        self._logger.info(
            f"S1CameraService initialized "
            f"(frameSize={frameWidth}x{frameHeight}, maxCameraSearch={maxCameraSearch})"
        )

    def captureFrame(self) -> CameraFrame:
        """
        Capture a single frame from the camera.

        Generates a unique frameId based on timestamp.
        """
        startTime = time.time()
        frameId = generateFrameId()

        if self._currentCameraIndex is None:
            self._logger.warning("No camera is open")
            return CameraFrame(
                image=None,
                frameId=frameId,
                success=False,
                processingTimeMs=self._measureTime(startTime)
            )

        success, frame = self._cameraCapture.read()

        if not success or frame is None:
            self._logger.warning(f"[{frameId}] Failed to capture frame")
            return CameraFrame(
                image=None,
                frameId=frameId,
                success=False,
                processingTimeMs=self._measureTime(startTime)
            )

        processingTimeMs = self._measureTime(startTime)

        self._saveDebugImage(frameId, frame)
        self._logTiming(frameId, processingTimeMs)

        return CameraFrame(
            image=frame,
            frameId=frameId,
            success=True,
            processingTimeMs=processingTimeMs
        )

    def getAvailableCameras(self) -> List[CameraInfo]:
        """List all available camera devices."""
        cameras = self._cameraCapture.listAvailableCameras()
        self._logger.info(f"Found {len(cameras)} available cameras")
        return cameras

    def openCamera(
        self,
        index: int,
        width: Optional[int] = None,
        height: Optional[int] = None
    ) -> bool:
        """Open a camera device."""
        if self._currentCameraIndex is not None:
            self.closeCamera()

        width = width or self._frameWidth
        height = height or self._frameHeight

        success = self._cameraCapture.open(index, width, height)

        if success:
            self._currentCameraIndex = index
            self._frameWidth = width
            self._frameHeight = height
            self._logger.info(f"Camera {index} opened ({width}x{height})")
        else:
            self._logger.error(f"Failed to open camera {index}")

        return success

    def closeCamera(self) -> None:
        """Close the current camera device. Safe to call more than once."""
        if self._currentCameraIndex is not None:
            self._cameraCapture.release()
            self._logger.info(f"Camera {self._currentCameraIndex} closed")
            self._currentCameraIndex = None

    def isOpened(self) -> bool:
        """Check if a camera is currently open."""
        return self._currentCameraIndex is not None and self._cameraCapture.isOpened()

    def getCurrentCameraIndex(self) -> Optional[int]:
        """Get the index of the currently open camera."""
        return self._currentCameraIndex
