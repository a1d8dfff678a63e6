import logging
from typing import Callable, Optional

import cv2
import numpy as np

from .errors import CameraError

logger = logging.getLogger(__name__)


class CameraSource:
    """
    Local webcam, video only.

    Args:
        index: camera index
        width: requested capture width
        height: requested capture height
        capture_factory: builds the capture object, cv2.VideoCapture by default
    """

    def __init__(self, index: int = 0, width: Optional[int] = 640, height: Optional[int] = 480,
                 capture_factory: Callable = cv2.VideoCapture):
        self.index = index
        self.width = width
        self.height = height
        self._factory = capture_factory
        self.cap = None

    @property
    def is_running(self) -> bool:
        return self.cap is not None

    def start(self) -> None:
        if self.cap is not None:
            return
        cap = self._factory(self.index)
        if not cap.isOpened():
            cap.release()
            raise CameraError(
                f"Could not open camera {self.index}. Check that it is connected "
                "and that camera access is allowed."
            )
        if self.width is not None:
            cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        if self.height is not None:
            cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        self.cap = cap
        logger.info("Camera %s started", self.index)

    def stop(self) -> None:
        if self.cap is None:
            return
        self.cap.release()
        self.cap = None
        logger.info("Camera %s stopped", self.index)

    def read(self) -> Optional[np.ndarray]:
        """Latest frame, or None when stopped or the read failed."""
        if self.cap is None:
            return None
        ret, frame = self.cap.read()
        if not ret:
            return None
        return frame

    def capture(self) -> np.ndarray:
        """A still copy of the current frame."""
        if self.cap is None:
            raise CameraError("Camera is not started.")
        frame = self.read()
        if frame is None:
            raise CameraError(f"Could not read a frame from camera {self.index}.")
        return frame.copy()

    def __enter__(self) -> "CameraSource":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()
