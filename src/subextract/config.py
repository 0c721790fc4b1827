"""Configuration settings for subextract."""

import os
from dataclasses import dataclass, replace
from typing import Dict, Tuple

from .exceptions import ConfigError

# Allowed ranges for run settings
FRAME_INTERVAL_RANGE = (100, 2000)  # milliseconds
REGION_Y_RANGE = (0, 100)  # percent of frame height
REGION_HEIGHT_RANGE = (5, 50)  # percent of frame height
MIN_CONFIDENCE_RANGE = (0, 100)
SIMILARITY_RANGE = (0.5, 1.0)

# Defaults (can be overridden via environment variables)
FRAME_INTERVAL_MS = int(os.getenv("SUBEXTRACT_FRAME_INTERVAL_MS", "500"))
REGION_Y_PERCENT = int(os.getenv("SUBEXTRACT_REGION_Y", "80"))
REGION_HEIGHT_PERCENT = int(os.getenv("SUBEXTRACT_REGION_HEIGHT", "20"))
MIN_CONFIDENCE = float(os.getenv("SUBEXTRACT_MIN_CONFIDENCE", "60"))
SIMILARITY_THRESHOLD = float(os.getenv("SUBEXTRACT_SIMILARITY", "0.85"))
LANGUAGE = os.getenv("SUBEXTRACT_LANGUAGE", "eng")
OCR_BACKEND = os.getenv("SUBEXTRACT_OCR_BACKEND", "tesseract")

SUPPORTED_LANGUAGES: Dict[str, str] = {
    "eng": "English",
    "fra": "French",
    "spa": "Spanish",
    "deu": "German",
    "ita": "Italian",
}

OCR_BACKENDS = ("tesseract", "paddle")

# Tesseract parameters tuned for a single block of subtitle text
TESSERACT_CHAR_WHITELIST = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789 .,!?'-"
)
TESSERACT_PAGE_SEG_MODE = 6

# Binarization cut-off on the 0-255 channel average
BINARIZE_THRESHOLD = 128

SUBTITLE_FORMATS = ("srt", "vtt", "json")

# Region preview image types cv2.imwrite can encode
IMAGE_FORMATS = ("png", "jpg", "jpeg", "bmp", "tif", "tiff", "webp")


def _clamp(value, bounds: Tuple[float, float]):
    low, high = bounds
    return max(low, min(high, value))


@dataclass(frozen=True)
class ExtractionSettings:
    """Read-only settings for one extraction run."""

    frame_interval_ms: int = FRAME_INTERVAL_MS
    region_y_percent: float = REGION_Y_PERCENT
    region_height_percent: float = REGION_HEIGHT_PERCENT
    min_confidence: float = MIN_CONFIDENCE
    similarity_threshold: float = SIMILARITY_THRESHOLD
    preprocess: bool = True
    language: str = LANGUAGE

    @property
    def frame_interval(self) -> float:
        """Sampling step in seconds."""
        return self.frame_interval_ms / 1000

    def clamped(self) -> "ExtractionSettings":
        """Return a copy with every numeric value forced into its allowed range."""
        return replace(
            self,
            frame_interval_ms=_clamp(self.frame_interval_ms, FRAME_INTERVAL_RANGE),
            region_y_percent=_clamp(self.region_y_percent, REGION_Y_RANGE),
            region_height_percent=_clamp(
                self.region_height_percent, REGION_HEIGHT_RANGE
            ),
            min_confidence=_clamp(self.min_confidence, MIN_CONFIDENCE_RANGE),
            similarity_threshold=_clamp(self.similarity_threshold, SIMILARITY_RANGE),
        )


def _in_range(value, bounds: Tuple[float, float]) -> bool:
    return bounds[0] <= value <= bounds[1]


def validate_config() -> None:
    """Validate configuration values."""
    if not _in_range(FRAME_INTERVAL_MS, FRAME_INTERVAL_RANGE):
        raise ConfigError("Invalid frame interval")

    if not _in_range(REGION_Y_PERCENT, REGION_Y_RANGE):
        raise ConfigError("Invalid subtitle region position")

    if not _in_range(REGION_HEIGHT_PERCENT, REGION_HEIGHT_RANGE):
        raise ConfigError("Invalid subtitle region height")

    if not _in_range(MIN_CONFIDENCE, MIN_CONFIDENCE_RANGE):
        raise ConfigError("Invalid minimum confidence")

    if not _in_range(SIMILARITY_THRESHOLD, SIMILARITY_RANGE):
        raise ConfigError("Invalid similarity threshold")

    if LANGUAGE not in SUPPORTED_LANGUAGES:
        raise ConfigError(f"Unsupported OCR language: {LANGUAGE}")

    if OCR_BACKEND not in OCR_BACKENDS:
        raise ConfigError(f"Unknown OCR backend: {OCR_BACKEND}")


# Validate config on import
validate_config()
