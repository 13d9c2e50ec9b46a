"""
Detection pipeline loop.

Each cycle: wait for a frame -> sample -> detect faces -> label -> render
overlay -> sleep a fixed delay. The delay starts after rendering, so the
real cadence is detection latency plus the delay. Cycles never overlap.

Detection runs in a worker thread and is awaited, so video playback on the
event loop keeps going while a frame is analysed. Only this loop touches the
sampled frame buffer, and it waits for each detection before moving on.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from src.utils.checks import ensure_instance
from src.utils.logger import get_logger
from .capture.frame_sampler import FrameSampler
from .capture.video_source import VideoSource
from .emotion.classifier import ConstantEmotionClassifier, EmotionClassifier, FaceBoxEmotion
from .face_detection.detect import FaceDetector
from .face_detection.overlay import FaceOverlayRenderer

logger = get_logger("live_emotions.pipeline")

DEFAULT_INTERVAL_S = 1.0


class PipelineError(RuntimeError):
    """Raised when a detection cycle fails; the loop is not retried"""


class PipelineState(Enum):
    IDLE = "idle"
    SAMPLING = "sampling"
    DETECTING = "detecting"
    RENDERING = "rendering"
    WAITING = "waiting"


@dataclass
class PipelineContext:
    """Everything one pipeline instance owns, built once at startup"""
    video_source: VideoSource
    sampler: FrameSampler
    detector: FaceDetector
    renderer: FaceOverlayRenderer
    classifier: Optional[EmotionClassifier] = None

    def __post_init__(self):
        ensure_instance(self.video_source, VideoSource)
        ensure_instance(self.sampler, FrameSampler)
        ensure_instance(self.detector, FaceDetector)
        ensure_instance(self.renderer, FaceOverlayRenderer)
        if self.classifier is None:
            self.classifier = ConstantEmotionClassifier()
        ensure_instance(self.classifier, EmotionClassifier)


class PipelineLoop:
    """
    Sequential sample/detect/render loop.

    Usage:
        loop = PipelineLoop(context, interval_s=1.0)
        await loop.run()            # forever
        await loop.run(max_cycles=3)
    """

    def __init__(self, context: PipelineContext, interval_s: float = DEFAULT_INTERVAL_S, sleep=asyncio.sleep):
        """
        Args:
            context: Pipeline components
            interval_s: Delay after each render before the next cycle
            sleep: Awaitable sleep function (swapped for a fake clock in tests)
        """
        self.context = context
        self.interval_s = interval_s
        self._sleep = sleep
        self.state = PipelineState.IDLE
        self.cycles = 0
        self._running = False

    async def run_cycle(self) -> List[FaceBoxEmotion]:
        """Run one sample/detect/render pass and return the rendered items"""
        ctx = self.context

        self.state = PipelineState.SAMPLING
        await ctx.video_source.wait_for_frame()
        frame = ctx.sampler.extract_frame(ctx.video_source)

        self.state = PipelineState.DETECTING
        face_boxes = await asyncio.to_thread(ctx.detector.detect, frame)
        items = [ctx.classifier(frame, box) for box in face_boxes]

        # Map with the sampled frame's size; the source may have been rebound since
        self.state = PipelineState.RENDERING
        ctx.renderer.render(items, frame.width, frame.height)

        self.cycles += 1
        logger.debug(
            f"Cycle {self.cycles}: {len(items)} face(s) in {frame.width}x{frame.height} frame"
            f" ({getattr(ctx.detector, 'last_detection_time_ms', 0.0):.0f}ms)"
        )
        return items

    async def run(self, max_cycles: Optional[int] = None) -> None:
        """
        Loop until cancelled (or max_cycles reached).

        Raises:
            RuntimeError: if this loop is already running
        """
        if self._running:
            raise RuntimeError("Pipeline loop is already running")

        self._running = True
        logger.info(f"Pipeline started (interval {self.interval_s * 1000:.0f}ms)")
        try:
            while max_cycles is None or self.cycles < max_cycles:
                await self.run_cycle()
                self.state = PipelineState.WAITING
                await self._sleep(self.interval_s)
        finally:
            self._running = False
            self.state = PipelineState.IDLE
            logger.info(f"Pipeline stopped after {self.cycles} cycle(s)")
