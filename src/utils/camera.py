"""
Media Stream Utility for Live Emotion Overlay
Opens the two supported live sources behind one small interface:
- Camera capture through OpenCV (laptop webcam or USB camera)
- Screen capture through mss (one monitor)
"""

import cv2
import mss
from mss.exception import ScreenShotError
import numpy as np
from typing import Optional

from .config import Config
from .logger import get_logger

logger = get_logger("live_emotions.camera")


class StreamOpenError(RuntimeError):
    """Raised when a live source cannot be acquired"""


class CameraStream:
    """
    Live camera stream backed by cv2.VideoCapture.

    Usage:
        stream = CameraStream(device_id=0)
        frame = stream.read()   # BGR ndarray or None
        stream.close()
    """

    kind = "camera"

    def __init__(
        self,
        device_id: Optional[int] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
        fps: Optional[int] = None
    ):
        """
        Open the camera with optional overrides.

        Args:
            device_id: Camera device index (0=default, 1=USB cam)
            width: Requested frame width in pixels
            height: Requested frame height in pixels
            fps: Requested frames per second

        Raises:
            StreamOpenError: if the device cannot be opened
        """
        cam_config = Config().camera

        self.device_id = device_id if device_id is not None else cam_config.device_id
        self.width = width if width is not None else cam_config.width
        self.height = height if height is not None else cam_config.height
        self.fps = fps if fps is not None else cam_config.fps

        self._cap: Optional[cv2.VideoCapture] = cv2.VideoCapture(self.device_id)

        if not self._cap.isOpened():
            self._cap.release()
            self._cap = None
            raise StreamOpenError(f"Could not open camera {self.device_id}")

        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        self._cap.set(cv2.CAP_PROP_FPS, self.fps)

        # Camera may not support requested values
        actual_width = int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        actual_height = int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        if actual_width != self.width or actual_height != self.height:
            logger.info(f"Camera resolution set to {actual_width}x{actual_height} "
                        f"(requested {self.width}x{self.height})")
            self.width = actual_width
            self.height = actual_height

        logger.info(f"Camera {self.device_id} opened: {self.width}x{self.height} @ {self.fps}fps")

    def read(self) -> Optional[np.ndarray]:
        """Read the next frame, or None if none was decoded"""
        if self._cap is None:
            return None

        ret, frame = self._cap.read()
        if not ret:
            return None
        return frame

    def close(self) -> None:
        """Release the capture device"""
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.debug(f"Camera {self.device_id} released")

    def __repr__(self) -> str:
        return f"CameraStream(device_id={self.device_id})"


class ScreenStream:
    """
    Live screen capture backed by mss.

    Grabs one monitor per read() and converts BGRA to BGR so frames
    match what the camera stream produces.
    """

    kind = "screen"

    def __init__(self, monitor: Optional[int] = None):
        """
        Args:
            monitor: mss monitor index (1 = primary, 0 = all monitors)

        Raises:
            StreamOpenError: if the monitor does not exist or capture fails
        """
        self.monitor_index = monitor if monitor is not None else Config().screen.monitor

        try:
            self._sct = mss.mss()
        except ScreenShotError as e:
            raise StreamOpenError(f"Screen capture unavailable: {e}") from e

        if self.monitor_index >= len(self._sct.monitors):
            self._sct.close()
            raise StreamOpenError(
                f"Monitor {self.monitor_index} not found "
                f"({len(self._sct.monitors) - 1} available)"
            )

        self._monitor = self._sct.monitors[self.monitor_index]
        logger.info(f"Screen capture opened: monitor {self.monitor_index} "
                    f"{self._monitor['width']}x{self._monitor['height']}")

    def read(self) -> Optional[np.ndarray]:
        """Grab the monitor, or None if the grab failed"""
        if self._sct is None:
            return None

        try:
            shot = self._sct.grab(self._monitor)
        except ScreenShotError as e:
            logger.warning(f"Screen grab failed: {e}")
            return None

        bgra = np.frombuffer(shot.bgra, dtype=np.uint8).reshape((shot.height, shot.width, 4))
        return cv2.cvtColor(bgra, cv2.COLOR_BGRA2BGR)

    def close(self) -> None:
        """Release the mss handle"""
        if self._sct is not None:
            self._sct.close()
            self._sct = None
            logger.debug(f"Screen capture {self.monitor_index} released")

    def __repr__(self) -> str:
        return f"ScreenStream(monitor={self.monitor_index})"


def open_stream(kind: str):
    """
    Open a live stream by kind.

    Args:
        kind: "camera" or "screen"

    Returns:
        CameraStream or ScreenStream

    Raises:
        StreamOpenError: if the source cannot be acquired
        ValueError: for an unknown kind
    """
    if kind == "camera":
        return CameraStream()
    if kind == "screen":
        return ScreenStream()
    raise ValueError(f"Unknown source kind: {kind!r}")
