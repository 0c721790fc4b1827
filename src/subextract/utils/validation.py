"""Validation utilities."""

import logging
import re
from pathlib import Path
from typing import Optional

from ..config import (
    IMAGE_FORMATS,
    OCR_BACKENDS,
    SUBTITLE_FORMATS,
    SUPPORTED_LANGUAGES,
)
from ..exceptions import ValidationError

logger = logging.getLogger(__name__)


def validate_video_path(path: str) -> Path:
    """Validate that the input video exists and is a regular file."""
    if not path:
        raise ValidationError("Video path cannot be empty")
    video_path = Path(path).expanduser()
    if not video_path.is_file():
        raise ValidationError(f"Video file not found: {video_path}")
    return video_path


def validate_language(language: str) -> str:
    """Validate OCR language code."""
    code = (language or "").strip().lower()
    if code not in SUPPORTED_LANGUAGES:
        raise ValidationError(
            f"Unsupported language '{language}'. "
            f"Choose one of: {', '.join(SUPPORTED_LANGUAGES)}"
        )
    return code


def validate_backend(backend: str) -> str:
    """Validate OCR backend name."""
    name = (backend or "").strip().lower()
    if name not in OCR_BACKENDS:
        raise ValidationError(
            f"Unknown OCR backend '{backend}'. Choose one of: {', '.join(OCR_BACKENDS)}"
        )
    return name


def validate_output_path(path: str, fmt: Optional[str] = None) -> Path:
    """Validate and normalize the subtitle output path.

    When ``fmt`` is given the file suffix must match it; otherwise the suffix
    alone must name a supported subtitle format.
    """
    output_path = Path(path)

    # Check if parent directory exists or can be created
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ValidationError(f"Cannot create output directory: {e}")

    suffix = output_path.suffix.lower().lstrip(".")
    if suffix not in SUBTITLE_FORMATS:
        allowed = ", ".join(f".{f}" for f in SUBTITLE_FORMATS)
        raise ValidationError(f"Output file must have one of: {allowed}")
    if fmt and suffix != fmt:
        raise ValidationError(
            f"Output extension .{suffix} does not match format '{fmt}'"
        )

    return output_path


def validate_image_path(path: str) -> Path:
    """Validate the region preview image path."""
    image_path = Path(path)
    suffix = image_path.suffix.lower().lstrip(".")
    if suffix not in IMAGE_FORMATS:
        allowed = ", ".join(f".{f}" for f in IMAGE_FORMATS)
        raise ValidationError(f"Preview image must have one of: {allowed}")
    return image_path


def validate_timestamp(seconds: float, duration: Optional[float] = None) -> float:
    """Validate a seek position in seconds."""
    if seconds < 0:
        raise ValidationError("Time must be non-negative")
    if duration is not None and seconds >= duration:
        raise ValidationError(
            f"Time {seconds:.2f}s is beyond the end of the video ({duration:.2f}s)"
        )
    return seconds


def sanitize_filename(name: str) -> str:
    """Remove invalid characters from filename."""
    # Remove invalid characters
    sanitized = re.sub(r'[<>:"/\\|?*]', "", name)
    # Limit length
    return sanitized[:100].strip()


def default_output_path(video_path: Path, fmt: str) -> Path:
    """Place the subtitle file beside the video, named after it."""
    stem = sanitize_filename(video_path.stem) or "subtitles"
    return video_path.with_name(f"{stem}.{fmt}")
