"""
Camera Interface Module

Defines the abstract interface for camera frame sources used by the
live-feed scanner.
Follows ISP (Interface Segregation Principle): Only contains camera-related methods.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Tuple, Optional
import numpy as np


# Preferred capture size for document scanning
DEFAULT_FRAME_WIDTH = 1280
DEFAULT_FRAME_HEIGHT = 720


@dataclass
class CameraInfo:
    """Data class representing camera device information."""
    index: int
    name: str

    def __str__(self) -> str:
        return self.name


class ICameraCapture(ABC):
    """
    Abstract interface for camera frame sources.

    Implementations yield successive BGR frames and must release the
    device when asked. Usable as a context manager: leaving the block
    releases the device on every path.
    """

    @abstractmethod
    def listAvailableCameras(self) -> List[CameraInfo]:
        """
        List all available camera devices in the system.

        Returns:
            List[CameraInfo]: List of available camera devices with index and name.
        """
        pass

    @abstractmethod
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
            bool: True if camera opened successfully, False otherwise.
        """
        pass

    @abstractmethod
    def read(self) -> Tuple[bool, Optional[np.ndarray]]:
        """
        Read the latest frame from the opened camera.

        Returns:
            Tuple[bool, Optional[np.ndarray]]:
                - First element: True if frame read successfully, False otherwise.
                - Second element: The frame as numpy array (BGR format), or None if failed.
        """
        pass

    @abstractmethod
    def release(self) -> None:
        """
        Release the camera device and free resources.
        """
        pass

    @abstractmethod
    def isOpened(self) -> bool:
        """
        Check if a camera is currently opened.

        Returns:
            bool: True if camera is opened, False otherwise.
        """
        pass

    def __enter__(self) -> "ICameraCapture":
        return self

    def __exit__(self, excType, excValue, traceback) -> None:
        self.release()
