"""
Video source: the live stream currently shown on the display surface.

Holds at most one bound stream. The playback task calls pump() to decode
frames; the detection loop awaits wait_for_frame() before sampling.
"""

import asyncio
from enum import Enum
from typing import Callable, List, Optional, Protocol, Tuple

import numpy as np

from src.utils.logger import get_logger

logger = get_logger("live_emotions.video")


class MediaStream(Protocol):
    """Anything that yields BGR frames: CameraStream, ScreenStream, test fakes."""

    def read(self) -> Optional[np.ndarray]:
        ...

    def close(self) -> None:
        ...


class VideoSourceState(Enum):
    UNBOUND = "unbound"
    BOUND_NO_FRAME = "bound-no-frame"
    BOUND_PLAYING = "bound-playing"


class VideoSource:
    """
    Live video wrapper with frame-ready signalling.

    Usage:
        source = VideoSource()
        source.bind(CameraStream())
        ...
        await source.wait_for_frame()
        w, h = source.native_width, source.native_height
    """

    def __init__(self):
        self._stream: Optional[MediaStream] = None
        self._state = VideoSourceState.UNBOUND
        self._frame: Optional[np.ndarray] = None
        self._native_size: Tuple[int, int] = (0, 0)
        self._frame_ready = asyncio.Event()
        self._display_size: Tuple[int, int] = (0, 0)
        self._resize_listeners: List[Callable[[int, int], None]] = []

    def bind(self, stream: MediaStream) -> None:
        """
        Attach a new stream, superseding any bound one.

        Native dimensions reset to 0x0 until the new stream decodes a frame.
        """
        previous = self._stream
        self._stream = stream
        self._frame = None
        self._native_size = (0, 0)
        self._frame_ready.clear()
        self._state = VideoSourceState.BOUND_NO_FRAME

        if previous is not None and previous is not stream:
            previous.close()

        logger.info(f"Bound video stream {stream!r}")

    def pump(self) -> Optional[np.ndarray]:
        """
        Decode one frame from the bound stream.

        Returns:
            The decoded frame, or None if unbound or nothing was decoded
        """
        if self._stream is None:
            return None

        frame = self._stream.read()
        if frame is None or frame.size == 0:
            return None

        height, width = frame.shape[:2]
        if (width, height) != self._native_size:
            logger.debug(f"Native video size {width}x{height}")

        self._frame = frame
        self._native_size = (width, height)

        if self._state is not VideoSourceState.BOUND_PLAYING:
            self._state = VideoSourceState.BOUND_PLAYING
            self._frame_ready.set()
            logger.info(f"Video playing at {width}x{height}")

        return frame

    async def wait_for_frame(self) -> "VideoSource":
        """Suspend until the current binding has decoded a frame. No timeout."""
        while self._native_size[0] == 0:
            await self._frame_ready.wait()
        return self

    def add_resize_listener(self, listener: Callable[[int, int], None]) -> None:
        """Call listener(width, height) whenever the display's rendered size changes"""
        self._resize_listeners.append(listener)

    def notify_display_size(self, width: int, height: int) -> None:
        """Record the display surface's rendered size, fanning out on change"""
        if (width, height) == self._display_size:
            return

        self._display_size = (width, height)
        for listener in self._resize_listeners:
            listener(width, height)

    def close(self) -> None:
        """Release the bound stream and return to unbound"""
        if self._stream is not None:
            self._stream.close()
        self._stream = None
        self._frame = None
        self._native_size = (0, 0)
        self._frame_ready.clear()
        self._state = VideoSourceState.UNBOUND

    @property
    def state(self) -> VideoSourceState:
        return self._state

    @property
    def stream(self) -> Optional[MediaStream]:
        return self._stream

    @property
    def current_frame(self) -> Optional[np.ndarray]:
        return self._frame

    @property
    def native_width(self) -> int:
        return self._native_size[0]

    @property
    def native_height(self) -> int:
        return self._native_size[1]

    @property
    def display_size(self) -> Tuple[int, int]:
        return self._display_size
