"""
Emotion labelling for detected faces.

Only a constant classifier ships; the interface is where a real
per-face model plugs in.
"""

import abc
from dataclasses import dataclass

from src.live_emotions.capture.frame_sampler import RasterFrame
from src.live_emotions.face_detection.detect import FaceBox

UNKNOWN_EMOTION = "unknown"


@dataclass(frozen=True)
class FaceBoxEmotion:
    """A detected face paired with its label for one cycle"""
    face_box: FaceBox
    emotion: str


class EmotionClassifier(abc.ABC):

    @abc.abstractmethod
    def classify(self, frame: RasterFrame, face_box: FaceBox) -> str:
        raise NotImplementedError

    def __call__(self, frame: RasterFrame, face_box: FaceBox) -> FaceBoxEmotion:
        return FaceBoxEmotion(face_box=face_box, emotion=self.classify(frame, face_box))


class ConstantEmotionClassifier(EmotionClassifier):
    """Labels every face with the same string (default "unknown")."""

    def __init__(self, label: str = UNKNOWN_EMOTION):
        self.label = label

    def classify(self, frame: RasterFrame, face_box: FaceBox) -> str:
        return self.label
