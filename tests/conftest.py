"""Test configuration and fixtures.

Provides reusable fixtures for:
- Temporary files and directories
- A scripted in-memory video source
- A scripted OCR engine
- Synthetic frames with a light caption on a dark background
"""

import os
import tempfile
from pathlib import Path
from typing import List, Optional

import numpy as np
import pytest

from subextract.exceptions import OCRError, VideoError
from subextract.vision.ocr import OCRResult


def pytest_collection_modifyitems(config, items):
    if os.getenv("RUN_INTEGRATION_TESTS") == "1":
        return

    skip_integration = pytest.mark.skip(
        reason="requires the tesseract binary (set RUN_INTEGRATION_TESTS=1)"
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


# =============================================================================
# Basic Fixtures
# =============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_video_file(temp_dir):
    """Create a placeholder video file (content is never decoded)."""
    video_file = temp_dir / "test_video.mp4"
    video_file.write_bytes(b"fake video data")
    return video_file


def make_caption_frame(
    height: int = 40, width: int = 64, caption_rows=(34, 38), value: int = 240
) -> np.ndarray:
    """Dark BGR frame with a bright bar where a caption would be."""
    frame = np.full((height, width, 3), 20, dtype=np.uint8)
    top, bottom = caption_rows
    frame[top:bottom, 8 : width - 8] = value
    return frame


@pytest.fixture
def caption_frame():
    return make_caption_frame()


# =============================================================================
# Collaborator fakes
# =============================================================================


class FakeVideo:
    """In-memory video: every seek succeeds unless it reaches ``fail_at``."""

    def __init__(
        self,
        duration: float,
        frame: Optional[np.ndarray] = None,
        fail_at: Optional[float] = None,
    ):
        self.duration = duration
        self._frame = frame if frame is not None else make_caption_frame()
        self.height, self.width = self._frame.shape[:2]
        self.fail_at = fail_at
        self.seeks: List[float] = []
        self.released = False

    def seek(self, t: float) -> None:
        if self.fail_at is not None and t >= self.fail_at:
            raise VideoError(f"No frame available at {t:.2f}s")
        self.seeks.append(t)

    def current_frame(self) -> np.ndarray:
        return self._frame

    def release(self) -> None:
        self.released = True


class ScriptedOCR:
    """Return scripted ``(text, confidence)`` results, one per call.

    A script entry that is an exception instance is raised instead. Calls
    past the end of the script return empty text.
    """

    def __init__(self, script):
        self.script = list(script)
        self.calls = 0
        self.images: List[np.ndarray] = []
        self.languages: List[str] = []
        self.closed = False

    def recognize(self, image, language):
        self.images.append(image)
        self.languages.append(language)
        item = self.script[self.calls] if self.calls < len(self.script) else ("", 0.0)
        self.calls += 1
        if isinstance(item, Exception):
            raise item
        text, confidence = item
        return OCRResult(text=text, confidence=confidence)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_video():
    """Factory for FakeVideo instances."""
    return FakeVideo


@pytest.fixture
def scripted_ocr():
    """Factory for ScriptedOCR instances."""
    return ScriptedOCR


@pytest.fixture
def ocr_failure():
    """Factory for per-call OCR errors to place in a script."""
    return lambda msg="unreadable bitmap": OCRError(msg)
