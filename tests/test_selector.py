"""
Tests for keyboard source selection
"""

import pytest

from conftest import FakeStream
from src.live_emotions.capture.selector import SourceSelector
from src.live_emotions.capture.video_source import VideoSource, VideoSourceState
from src.utils.camera import StreamOpenError, open_stream


class FakeOpener:

    def __init__(self, fail=()):
        self.fail = set(fail)
        self.opened = []

    def __call__(self, kind):
        if kind in self.fail:
            raise StreamOpenError(f"{kind} denied")
        stream = FakeStream(kind=kind)
        self.opened.append(stream)
        return stream


@pytest.fixture
def source():
    source = VideoSource()
    source.bind(FakeStream(kind="initial"))
    source.pump()
    return source


class TestSourceSelector:

    @pytest.mark.parametrize("key,kind", [("s", "screen"), ("c", "camera")])
    def test_key_binds_source(self, source, key, kind):
        opener = FakeOpener()

        assert SourceSelector(source, opener=opener).handle_key(key)

        assert source.stream.kind == kind
        assert source.state is VideoSourceState.BOUND_NO_FRAME

    @pytest.mark.parametrize("key", ["x", "", None, "S "])
    def test_other_keys_ignored(self, source, key):
        opener = FakeOpener()

        assert not SourceSelector(source, opener=opener).handle_key(key)

        assert opener.opened == []
        assert source.stream.kind == "initial"

    def test_failed_acquisition_keeps_current_stream(self, source):
        selector = SourceSelector(source, opener=FakeOpener(fail={"screen"}))

        assert not selector.handle_key("s")

        assert source.stream.kind == "initial"
        assert source.state is VideoSourceState.BOUND_PLAYING

    def test_repeated_switches_release_old_streams(self, source):
        opener = FakeOpener()
        selector = SourceSelector(source, opener=opener)

        selector.handle_key("s")
        selector.handle_key("c")

        screen, camera = opener.opened
        assert screen.closed
        assert not camera.closed


def test_open_stream_unknown_kind():
    with pytest.raises(ValueError):
        open_stream("webcam")
