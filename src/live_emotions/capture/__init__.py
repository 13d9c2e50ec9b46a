# Video capture: live source binding, frame sampling, source selection
from .frame_sampler import FrameSampler, RasterFrame
from .video_source import MediaStream, VideoSource, VideoSourceState
from .selector import SourceSelector

__all__ = [
    "FrameSampler", "RasterFrame", "MediaStream", "VideoSource",
    "VideoSourceState", "SourceSelector",
]
