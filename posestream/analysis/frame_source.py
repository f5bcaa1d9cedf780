"""Camera frame source backed by OpenCV."""

import logging
from typing import Optional, Union

import cv2
import numpy as np

from posestream.errors import DeviceUnavailableError

logger = logging.getLogger(__name__)


class CameraFrameSource:
    """
    Reads BGR frames from a camera index or stream URL.

    open() must succeed before read(); a device that cannot be opened raises
    DeviceUnavailableError and is not retried.
    """

    def __init__(self, device: Union[int, str] = 0):
        self.device = device
        self._capture: Optional[cv2.VideoCapture] = None

    @property
    def is_open(self) -> bool:
        return self._capture is not None and self._capture.isOpened()

    def open(self) -> "CameraFrameSource":
        if self.is_open:
            return self
        capture = cv2.VideoCapture(self.device)
        if not capture.isOpened():
            capture.release()
            raise DeviceUnavailableError(f"Camera not available: {self.device}")
        self._capture = capture
        logger.info(f"Opened camera {self.device}")
        return self

    def read(self) -> Optional[np.ndarray]:
        """Next frame, or None if the device delivered nothing."""
        if not self.is_open:
            return None
        ok, frame = self._capture.read()
        if not ok:
            return None
        return frame

    def release(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None
            logger.info(f"Released camera {self.device}")

    def __enter__(self) -> "CameraFrameSource":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
