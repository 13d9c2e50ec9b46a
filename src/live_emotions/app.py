"""
Application wiring: builds the pipeline context once and runs playback and
detection side by side on one asyncio loop. A failed detection cycle stops
playback too, so the process ends instead of showing a frozen overlay.
"""

import asyncio
from typing import Optional

from src.utils.camera import open_stream
from src.utils.config import Config
from src.utils.logger import get_logger
from .capture.frame_sampler import FrameSampler
from .capture.selector import SourceSelector
from .capture.video_source import VideoSource
from .display import DisplaySurface, PlaybackLoop
from .emotion.classifier import ConstantEmotionClassifier
from .face_detection.detect import FaceDetector, HaarFaceDetector
from .face_detection.overlay import FaceOverlayRenderer, OverlayContainer
from .pipeline import PipelineContext, PipelineError, PipelineLoop

logger = get_logger("live_emotions.app")


def build_context(config: Optional[Config] = None, detector: Optional[FaceDetector] = None) -> PipelineContext:
    """
    Construct all pipeline components.

    Args:
        config: Configuration (singleton by default)
        detector: Detector to use instead of the configured Haar cascade

    Raises:
        DetectorLoadError: if the face cascade cannot be loaded
    """
    config = config or Config()

    # Detector first: a load failure must stop startup before any capture opens
    if detector is None:
        det_cfg = config.detector
        detector = HaarFaceDetector(
            cascade_path=det_cfg.cascade_path,
            scale_factor=det_cfg.scale_factor,
            min_neighbors=det_cfg.min_neighbors
        )

    video_source = VideoSource()
    container = OverlayContainer()
    video_source.add_resize_listener(container.resize)

    return PipelineContext(
        video_source=video_source,
        sampler=FrameSampler(),
        detector=detector,
        renderer=FaceOverlayRenderer(container),
        classifier=ConstantEmotionClassifier()
    )


async def run_app(
    config: Optional[Config] = None,
    source: Optional[str] = None,
    interval_ms: Optional[int] = None,
    opener=open_stream,
    context: Optional[PipelineContext] = None
) -> None:
    """
    Run the live overlay until the window is closed with 'q' or Esc.

    Args:
        config: Configuration (singleton by default)
        source: Initial source kind, "camera" or "screen"
        interval_ms: Delay between detection cycles
        opener: Stream factory (kind -> stream)
        context: Prebuilt pipeline components (built from config by default)

    Raises:
        ConfigError: invalid configuration
        DetectorLoadError: detector unavailable
        StreamOpenError: initial source unavailable
        PipelineError: a detection cycle failed; playback is stopped with it
    """
    config = config or Config()
    pipe_cfg = config.pipeline
    disp_cfg = config.display

    context = context or build_context(config)
    video_source = context.video_source

    initial = source or pipe_cfg.initial_source
    video_source.bind(opener(initial))

    display = DisplaySurface(disp_cfg.window_name, context.renderer.container)
    selector = SourceSelector(video_source, opener=opener)
    playback = PlaybackLoop(video_source, display, selector.handle_key, fps=disp_cfg.fps)

    interval = (interval_ms if interval_ms is not None else pipe_cfg.interval_ms) / 1000
    pipeline = PipelineLoop(context, interval_s=interval)

    logger.info("Press 's' for screen capture, 'c' for camera, 'q' to quit")
    display.open()
    playback_task = asyncio.create_task(playback.run())
    pipeline_task = asyncio.create_task(pipeline.run())
    try:
        done, _ = await asyncio.wait(
            {playback_task, pipeline_task}, return_when=asyncio.FIRST_COMPLETED
        )
        if pipeline_task in done and pipeline_task.exception() is not None:
            error = pipeline_task.exception()
            logger.error(f"Pipeline failed after {pipeline.cycles} cycle(s): {error!r}")
            raise PipelineError(f"Detection cycle failed: {error}") from error
        await playback_task
    finally:
        playback.stop()
        for task in (playback_task, pipeline_task):
            task.cancel()
        await asyncio.gather(playback_task, pipeline_task, return_exceptions=True)
        display.close()
        video_source.close()
