"""
Shared fakes for the live overlay tests.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.live_emotions.face_detection.detect import FaceDetector


class FakeStream:
    """Media stream yielding solid frames of a fixed size"""

    def __init__(self, width=1000, height=500, value=0, kind="fake"):
        self.width = width
        self.height = height
        self.value = value
        self.kind = kind
        self.reads = 0
        self.closed = False

    def read(self):
        if self.closed:
            return None
        self.reads += 1
        return np.full((self.height, self.width, 3), self.value, dtype=np.uint8)

    def close(self):
        self.closed = True

    def __repr__(self):
        return f"FakeStream({self.kind} {self.width}x{self.height})"


class SilentStream(FakeStream):
    """Stream that never decodes a frame"""

    def read(self):
        return None


class FakeDetector(FaceDetector):
    """Returns preset boxes and records each call in a shared log"""

    def __init__(self, boxes=(), log=None):
        self.boxes = list(boxes)
        self.log = log if log is not None else []
        self.frames = []

    def detect(self, frame):
        self.log.append("detect")
        self.frames.append((frame.width, frame.height))
        return list(self.boxes)


@pytest.fixture
def fake_stream():
    return FakeStream()
