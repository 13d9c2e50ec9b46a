"""
Tests for FrameSampler buffer reuse
"""

import pytest

from conftest import FakeStream
from src.live_emotions.capture.frame_sampler import FrameSampler
from src.live_emotions.capture.video_source import VideoSource


@pytest.fixture
def source():
    source = VideoSource()
    source.bind(FakeStream(width=64, height=48, value=10))
    source.pump()
    return source


class TestFrameSampler:

    def test_requires_a_frame(self):
        source = VideoSource()
        source.bind(FakeStream())

        with pytest.raises(RuntimeError):
            FrameSampler().extract_frame(source)

    def test_frame_matches_native_size(self, source):
        frame = FrameSampler().extract_frame(source)

        assert (frame.width, frame.height) == (64, 48)
        assert frame.pixels.shape == (48, 64, 3)
        assert frame.pixels is not source.current_frame

    def test_buffer_reused_and_overwritten(self, source):
        sampler = FrameSampler()
        first = sampler.extract_frame(source)
        assert first.pixels[0, 0, 0] == 10

        source.stream.value = 99
        source.pump()
        second = sampler.extract_frame(source)

        assert second.pixels is first.pixels
        assert first.pixels[0, 0, 0] == 99, "previous frame is overwritten in place"
        assert sampler.reallocations == 1

    def test_buffer_resized_after_rebind(self, source):
        sampler = FrameSampler()
        sampler.extract_frame(source)

        source.bind(FakeStream(width=200, height=100))
        source.pump()
        frame = sampler.extract_frame(source)

        assert (frame.width, frame.height) == (200, 100)
        assert frame.pixels.shape == (100, 200, 3)
        assert sampler.reallocations == 2
