"""
Display surface and playback task.

The playback task keeps the video moving at display rate, independent of
the slower detection loop: it decodes frames, shows them with the current
overlay, tracks window resizes and dispatches key presses.
"""

import asyncio
from typing import Callable, Optional, Tuple

import cv2
import numpy as np

from src.utils.logger import get_logger
from .capture.video_source import VideoSource
from .face_detection.overlay import OverlayContainer

logger = get_logger("live_emotions.display")

QUIT_KEYS = {"q", "\x1b"}


class DisplaySurface:
    """
    Resizable OpenCV window showing video plus overlay.

    Frames are scaled to the window's rendered size before the overlay is
    painted, so markers are drawn at display resolution.
    """

    def __init__(self, window_name: str, overlay: OverlayContainer):
        self.window_name = window_name
        self.overlay = overlay
        self._opened = False

    def open(self) -> None:
        cv2.namedWindow(self.window_name, cv2.WINDOW_NORMAL)
        self._opened = True

    def rendered_size(self, frame: np.ndarray) -> Tuple[int, int]:
        """Current on-screen size of the video area, falling back to the frame size"""
        h, w = frame.shape[:2]
        if not self._opened:
            return w, h

        _, _, win_w, win_h = cv2.getWindowImageRect(self.window_name)
        if win_w <= 0 or win_h <= 0:
            return w, h
        return win_w, win_h

    def present(self, frame: np.ndarray) -> np.ndarray:
        """Show frame with overlay; returns the composed image"""
        width = self.overlay.width or frame.shape[1]
        height = self.overlay.height or frame.shape[0]

        if (width, height) != (frame.shape[1], frame.shape[0]):
            composed = cv2.resize(frame, (width, height))
        else:
            composed = frame.copy()

        self.overlay.draw(composed)

        if self._opened:
            cv2.imshow(self.window_name, composed)
        return composed

    def poll_key(self, delay_ms: int = 1) -> Optional[str]:
        """Return the pressed key as a character, or None"""
        code = cv2.waitKey(delay_ms)
        if code < 0:
            return None
        return chr(code & 0xFF)

    def close(self) -> None:
        if self._opened:
            cv2.destroyWindow(self.window_name)
            self._opened = False


class PlaybackLoop:
    """
    Async task that plays the bound stream until a quit key is pressed.

    Args:
        video_source: Source to pump
        display: Surface to present on
        on_key: Called with every non-quit key press (source selection)
        fps: Target playback rate
    """

    def __init__(
        self,
        video_source: VideoSource,
        display: DisplaySurface,
        on_key: Callable[[str], object],
        fps: int = 30,
        sleep=asyncio.sleep
    ):
        self.video_source = video_source
        self.display = display
        self.on_key = on_key
        self.frame_delay = 1.0 / max(1, fps)
        self._sleep = sleep
        self._running = False
        self.frames_shown = 0

    def tick(self) -> bool:
        """
        One playback step.

        Returns:
            False once a quit key was pressed
        """
        frame = self.video_source.pump()
        if frame is not None:
            self.video_source.notify_display_size(*self.display.rendered_size(frame))
            self.display.present(frame)
            self.frames_shown += 1

        key = self.display.poll_key()
        if key is None:
            return True
        if key.lower() in QUIT_KEYS:
            logger.info("Quit requested")
            return False

        self.on_key(key.lower())
        return True

    async def run(self, max_ticks: Optional[int] = None) -> None:
        self._running = True
        ticks = 0
        try:
            while self._running and self.tick():
                ticks += 1
                if max_ticks is not None and ticks >= max_ticks:
                    break
                await self._sleep(self.frame_delay)
        finally:
            self._running = False

    def stop(self) -> None:
        self._running = False
