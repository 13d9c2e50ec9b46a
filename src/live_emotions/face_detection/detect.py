"""
Face Detection Module using OpenCV Haar cascades
Finds axis-aligned face boxes in sampled video frames.

The pipeline only depends on the FaceDetector interface; HaarFaceDetector
is the shipped implementation.
"""

import abc
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import cv2
import numpy as np

from src.utils.logger import get_logger
from src.live_emotions.capture.frame_sampler import RasterFrame

logger = get_logger("live_emotions.detect")


class DetectorLoadError(RuntimeError):
    """Raised when the detector model cannot be loaded"""


@dataclass(frozen=True)
class FaceBox:
    """Face bounding box in source-frame pixels"""
    x: int
    y: int
    width: int
    height: int


class FaceDetector(abc.ABC):
    """Frame in, face boxes out."""

    @abc.abstractmethod
    def detect(self, frame: RasterFrame) -> List[FaceBox]:
        raise NotImplementedError


class HaarFaceDetector(FaceDetector):
    """
    Haar-cascade face detector.

    Usage:
        detector = HaarFaceDetector()
        boxes = detector.detect(frame)
        for box in boxes:
            # box.x, box.y, box.width, box.height
    """

    DEFAULT_CASCADE = "haarcascade_frontalface_default.xml"

    # Multi-scale search parameters
    SCALE_FACTOR = 1.1
    MIN_NEIGHBORS = 3
    FLAGS = 0

    def __init__(
        self,
        cascade_path: Optional[str] = None,
        scale_factor: float = SCALE_FACTOR,
        min_neighbors: int = MIN_NEIGHBORS
    ):
        """
        Load the cascade classifier.

        Args:
            cascade_path: Path to a cascade XML (None = OpenCV bundled frontal face)
            scale_factor: Image pyramid step between scales
            min_neighbors: Neighbouring detections needed to keep a candidate

        Raises:
            DetectorLoadError: if the cascade is missing or fails to parse
        """
        if cascade_path is None:
            cascade_path = str(Path(cv2.data.haarcascades) / self.DEFAULT_CASCADE)

        self.cascade_path = cascade_path
        self.scale_factor = scale_factor
        self.min_neighbors = min_neighbors
        self.last_detection_time_ms = 0.0

        if not Path(cascade_path).is_file():
            raise DetectorLoadError(f"Cascade file not found: {cascade_path}")

        self.classifier = cv2.CascadeClassifier(cascade_path)
        if self.classifier.empty():
            raise DetectorLoadError(f"Cascade failed to load: {cascade_path}")

        logger.info(f"Loaded face cascade from {cascade_path}")
        logger.debug(f"OpenCV {cv2.__version__}\n{cv2.getBuildInformation()}")

    def detect(self, frame: RasterFrame) -> List[FaceBox]:
        """
        Detect faces in a frame.

        Args:
            frame: Sampled BGR frame

        Returns:
            Face boxes in frame pixel coordinates, in detector order

        Raises:
            ValueError: if the frame has no pixels
        """
        if frame.width <= 0 or frame.height <= 0:
            raise ValueError(f"Cannot detect on a {frame.width}x{frame.height} frame")

        start_time = time.perf_counter()

        gray = cv2.cvtColor(frame.pixels, cv2.COLOR_BGR2GRAY)
        rects = self.classifier.detectMultiScale(
            gray,
            scaleFactor=self.scale_factor,
            minNeighbors=self.min_neighbors,
            flags=self.FLAGS
        )

        self.last_detection_time_ms = (time.perf_counter() - start_time) * 1000

        return [
            FaceBox(x=int(x), y=int(y), width=int(w), height=int(h))
            for x, y, w, h in np.asarray(rects).reshape(-1, 4)
        ]
