"""
Frame sampling: copies the video source's current frame into one
reusable buffer for detection.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from src.utils.logger import get_logger

logger = get_logger("live_emotions.sampler")


@dataclass
class RasterFrame:
    """BGR pixels plus their size. Overwritten on the next sample."""
    pixels: np.ndarray
    width: int
    height: int


class FrameSampler:
    """
    Owns a single BGR buffer sized to the source's native dimensions.

    The buffer is reallocated only when the native size changes (e.g. after
    switching from camera to screen). Each extract_frame() call overwrites
    it, so callers must not keep the returned frame across calls.
    """

    def __init__(self):
        self._buffer: Optional[np.ndarray] = None
        self.reallocations = 0

    def extract_frame(self, video_source) -> RasterFrame:
        """
        Copy the current video frame into the buffer.

        Args:
            video_source: VideoSource that has decoded at least one frame

        Returns:
            RasterFrame backed by the shared buffer

        Raises:
            RuntimeError: if the source has no frame yet
        """
        current = video_source.current_frame
        if current is None:
            raise RuntimeError("No video frame available; wait_for_frame() first")

        height, width = current.shape[:2]

        if self._buffer is None or self._buffer.shape != current.shape:
            self._buffer = np.empty_like(current)
            self.reallocations += 1
            logger.debug(f"Frame buffer sized to {width}x{height}")

        np.copyto(self._buffer, current)
        return RasterFrame(pixels=self._buffer, width=width, height=height)
