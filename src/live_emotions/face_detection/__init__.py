# Face Detection Module
from .detect import FaceDetector, HaarFaceDetector, FaceBox, DetectorLoadError
from .overlay import FaceOverlayRenderer, OverlayContainer, OverlayElement

__all__ = [
    "FaceDetector", "HaarFaceDetector", "FaceBox", "DetectorLoadError",
    "FaceOverlayRenderer", "OverlayContainer", "OverlayElement",
]
