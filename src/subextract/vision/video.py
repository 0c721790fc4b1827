"""Video access for frame sampling."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Protocol

import cv2
import numpy as np

from ..exceptions import VideoError

logger = logging.getLogger(__name__)

DEFAULT_FPS = 30.0


class VideoSource(Protocol):
    """What the sampler needs from a video."""

    duration: float
    width: int
    height: int

    def seek(self, t: float) -> None:
        ...

    def current_frame(self) -> np.ndarray:
        ...


class OpenCVVideoSource:
    """``cv2.VideoCapture`` wrapper that decodes one frame per seek."""

    def __init__(self, video_path: Path, capture_factory=None):
        self.video_path = Path(video_path)
        factory = capture_factory or cv2.VideoCapture
        self._cap = factory(str(self.video_path))
        if not self._cap.isOpened():
            raise VideoError(f"Could not open video: {self.video_path}")

        self.fps = self._cap.get(cv2.CAP_PROP_FPS) or DEFAULT_FPS
        frame_count = self._cap.get(cv2.CAP_PROP_FRAME_COUNT) or 0.0
        self.duration = max(float(frame_count) / self.fps, 0.0)
        self.width = int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        self.height = int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        self._frame: Optional[np.ndarray] = None

    def seek(self, t: float) -> None:
        """Position at ``t`` seconds and decode the frame there."""
        self._cap.set(cv2.CAP_PROP_POS_MSEC, t * 1000.0)
        ok, frame = self._cap.read()
        if not ok or frame is None:
            raise VideoError(f"No frame available at {t:.2f}s in {self.video_path}")
        self._frame = frame

    def current_frame(self) -> np.ndarray:
        if self._frame is None:
            raise VideoError("No frame decoded yet; seek first")
        return self._frame

    def release(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
        self._frame = None


@contextmanager
def open_video(video_path: Path, capture_factory=None) -> Iterator[OpenCVVideoSource]:
    """Open a video for sampling and always release the capture."""
    source = OpenCVVideoSource(video_path, capture_factory=capture_factory)
    logger.debug(
        f"Opened {video_path}: {source.width}x{source.height}, "
        f"{source.fps:.2f} fps, {source.duration:.2f}s"
    )
    try:
        yield source
    finally:
        source.release()
