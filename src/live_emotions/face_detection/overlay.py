"""
Face Overlay Module
Maps detections into display-relative markers and paints them over video.

Marker geometry is stored as percentages of the video's native size, so the
same markers line up at any display size.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple, TYPE_CHECKING

import cv2
import numpy as np

from src.utils.logger import get_logger

if TYPE_CHECKING:
    from src.live_emotions.emotion.classifier import FaceBoxEmotion

logger = get_logger("live_emotions.overlay")


@dataclass(frozen=True)
class OverlayElement:
    """One labelled marker; geometry in percent of display width/height"""
    left: float
    top: float
    width: float
    height: float
    label: str


class OverlayContainer:
    """
    Ordered set of overlay elements drawn atop the display surface.

    Contents are only ever replaced wholesale. The pixel size tracks the
    display surface's rendered size via resize().
    """

    # Colors (BGR format)
    COLOR_BOX = (0, 255, 0)
    COLOR_LABEL_BG = (40, 40, 40)
    COLOR_WHITE = (255, 255, 255)

    def __init__(self, width: int = 0, height: int = 0):
        self._elements: Tuple[OverlayElement, ...] = ()
        self.width = width
        self.height = height

    def replace(self, elements: Sequence[OverlayElement]) -> None:
        self._elements = tuple(elements)

    def clear(self) -> None:
        self._elements = ()

    def resize(self, width: int, height: int) -> None:
        """Match the display surface's rendered pixel size"""
        self.width = width
        self.height = height
        logger.debug(f"Overlay container resized to {width}x{height}")

    @property
    def elements(self) -> Tuple[OverlayElement, ...]:
        return self._elements

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self):
        return iter(self._elements)

    def draw(self, image: np.ndarray) -> np.ndarray:
        """
        Paint all elements onto image in place.

        Args:
            image: BGR image the overlay covers (any size)

        Returns:
            The same image
        """
        h, w = image.shape[:2]

        for element in self._elements:
            x = int(round(element.left / 100 * w))
            y = int(round(element.top / 100 * h))
            bw = int(round(element.width / 100 * w))
            bh = int(round(element.height / 100 * h))

            cv2.rectangle(image, (x, y), (x + bw, y + bh), self.COLOR_BOX, 2)
            self._draw_label(image, x, y, element.label)

        return image

    def _draw_label(self, image: np.ndarray, x: int, y: int, text: str):
        """Draw label text on a dark badge just above the box"""
        (tw, th), baseline = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, 0.5, 1)
        top = max(0, y - th - baseline - 4)
        cv2.rectangle(image, (x, top), (x + tw + 6, top + th + baseline + 4),
                      self.COLOR_LABEL_BG, -1)
        cv2.putText(image, text, (x + 3, top + th + 2),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, self.COLOR_WHITE, 1)


class FaceOverlayRenderer:
    """
    Turns labelled face boxes into overlay elements.

    Usage:
        renderer = FaceOverlayRenderer(OverlayContainer())
        renderer.render(items, native_width=1280, native_height=720)
    """

    def __init__(self, container: OverlayContainer):
        self.container = container

    @staticmethod
    def to_element(item: "FaceBoxEmotion", native_width: int, native_height: int) -> OverlayElement:
        box = item.face_box
        return OverlayElement(
            left=box.x / native_width * 100,
            top=box.y / native_height * 100,
            width=box.width / native_width * 100,
            height=box.height / native_height * 100,
            label=item.emotion
        )

    def render(
        self,
        items: Sequence["FaceBoxEmotion"],
        native_width: int,
        native_height: int
    ) -> Tuple[OverlayElement, ...]:
        """
        Replace the container contents with one element per item.

        Args:
            items: Labelled face boxes in native pixel coordinates
            native_width: Width of the frame the boxes came from
            native_height: Height of the frame the boxes came from

        Returns:
            The new elements

        Raises:
            ValueError: if native size is not yet known (non-positive)
        """
        if native_width <= 0 or native_height <= 0:
            raise ValueError(
                f"Native size {native_width}x{native_height} unknown; "
                "render only after a frame has been observed"
            )

        elements = tuple(self.to_element(item, native_width, native_height) for item in items)
        self.container.replace(elements)
        return elements
