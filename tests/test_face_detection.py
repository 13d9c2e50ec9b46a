"""
Tests for the Haar cascade face detector
Run with: python -m pytest tests/test_face_detection.py -v
"""

import numpy as np
import pytest

from src.live_emotions.capture.frame_sampler import RasterFrame
from src.live_emotions.face_detection import detect as detect_module
from src.live_emotions.face_detection.detect import (
    DetectorLoadError, FaceBox, FaceDetector, HaarFaceDetector,
)


class FakeCascade:
    """Stands in for cv2.CascadeClassifier"""

    def __init__(self, path, empty=False, rects=()):
        self.path = path
        self._empty = empty
        self.rects = rects
        self.calls = []

    def empty(self):
        return self._empty

    def detectMultiScale(self, image, **kwargs):
        self.calls.append((image, kwargs))
        return self.rects


def make_frame(width=160, height=120):
    pixels = np.zeros((height, width, 3), dtype=np.uint8)
    return RasterFrame(pixels=pixels, width=width, height=height)


@pytest.fixture
def cascade_file(tmp_path):
    path = tmp_path / "cascade.xml"
    path.write_text("<opencv_storage></opencv_storage>")
    return path


class TestDetectorLoading:
    """Startup failures are raised, never deferred to the first frame"""

    def test_missing_cascade_raises(self, tmp_path):
        with pytest.raises(DetectorLoadError):
            HaarFaceDetector(cascade_path=str(tmp_path / "missing.xml"))

    def test_unparseable_cascade_raises(self, cascade_file, monkeypatch):
        monkeypatch.setattr(detect_module.cv2, "CascadeClassifier",
                            lambda path: FakeCascade(path, empty=True))

        with pytest.raises(DetectorLoadError):
            HaarFaceDetector(cascade_path=str(cascade_file))

    def test_bundled_cascade_loads(self):
        detector = HaarFaceDetector()

        assert isinstance(detector, FaceDetector)
        assert detector.cascade_path.endswith("haarcascade_frontalface_default.xml")


class TestDetection:

    def test_search_parameters(self, cascade_file, monkeypatch):
        fake = FakeCascade(str(cascade_file), rects=np.array([[10, 20, 30, 40]]))
        monkeypatch.setattr(detect_module.cv2, "CascadeClassifier", lambda path: fake)

        boxes = HaarFaceDetector(cascade_path=str(cascade_file)).detect(make_frame())

        assert boxes == [FaceBox(x=10, y=20, width=30, height=40)]
        image, kwargs = fake.calls[0]
        assert image.ndim == 2, "detector should run on grayscale"
        assert kwargs["scaleFactor"] == pytest.approx(1.1)
        assert kwargs["minNeighbors"] == 3
        assert kwargs["flags"] == 0
        assert "minSize" not in kwargs

    def test_multiple_boxes_kept_in_order(self, cascade_file, monkeypatch):
        rects = np.array([[50, 50, 20, 20], [0, 0, 10, 10], [52, 51, 20, 20]])
        fake = FakeCascade(str(cascade_file), rects=rects)
        monkeypatch.setattr(detect_module.cv2, "CascadeClassifier", lambda path: fake)

        boxes = HaarFaceDetector(cascade_path=str(cascade_file)).detect(make_frame())

        # overlapping boxes are not merged
        assert [(b.x, b.y) for b in boxes] == [(50, 50), (0, 0), (52, 51)]
        assert all(isinstance(b.x, int) for b in boxes)

    def test_no_faces_returns_empty_list(self, cascade_file, monkeypatch):
        monkeypatch.setattr(detect_module.cv2, "CascadeClassifier",
                            lambda path: FakeCascade(path, rects=()))

        detector = HaarFaceDetector(cascade_path=str(cascade_file))

        assert detector.detect(make_frame()) == []
        assert detector.last_detection_time_ms >= 0

    def test_zero_size_frame_rejected(self, cascade_file, monkeypatch):
        monkeypatch.setattr(detect_module.cv2, "CascadeClassifier", lambda path: FakeCascade(path))
        detector = HaarFaceDetector(cascade_path=str(cascade_file))

        frame = RasterFrame(pixels=np.zeros((0, 0, 3), dtype=np.uint8), width=0, height=0)
        with pytest.raises(ValueError):
            detector.detect(frame)

    def test_blank_frame_has_no_faces(self):
        detector = HaarFaceDetector()

        assert detector.detect(make_frame(320, 240)) == []
