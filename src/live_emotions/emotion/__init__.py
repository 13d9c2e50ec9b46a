# Emotion labelling
from .classifier import (
    UNKNOWN_EMOTION, FaceBoxEmotion, EmotionClassifier, ConstantEmotionClassifier,
)

__all__ = [
    "UNKNOWN_EMOTION", "FaceBoxEmotion", "EmotionClassifier", "ConstantEmotionClassifier",
]
