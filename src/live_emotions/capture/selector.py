"""
Keyboard source selection: 's' switches to screen capture, 'c' to camera.
"""

from typing import Callable, Dict, Optional

from src.utils.camera import StreamOpenError, open_stream
from src.utils.logger import get_logger
from .video_source import MediaStream, VideoSource

logger = get_logger("live_emotions.selector")

KEY_SOURCES = {
    "s": "screen",
    "c": "camera",
}


class SourceSelector:
    """
    Maps key presses to stream rebinding.

    Args:
        video_source: Source to rebind
        opener: Callable turning a source kind into an open stream
    """

    def __init__(
        self,
        video_source: VideoSource,
        opener: Callable[[str], MediaStream] = open_stream,
        key_sources: Optional[Dict[str, str]] = None
    ):
        self.video_source = video_source
        self.opener = opener
        self.key_sources = dict(KEY_SOURCES if key_sources is None else key_sources)

    def handle_key(self, key: Optional[str]) -> bool:
        """
        Rebind the video source if key selects a source.

        Returns:
            True if a new stream was bound
        """
        kind = self.key_sources.get(key) if key else None
        if kind is None:
            return False

        try:
            stream = self.opener(kind)
        except StreamOpenError as e:
            # Keep whatever is currently bound
            logger.error(f"Could not switch to {kind}: {e}")
            return False

        self.video_source.bind(stream)
        logger.info(f"Switched video source to {kind}")
        return True
