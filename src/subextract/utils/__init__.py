"""Utility modules."""

from .logging import setup_logging, get_logger, RunLogCollector
from .validation import (
    validate_video_path,
    validate_language,
    validate_backend,
    validate_output_path,
    validate_image_path,
    validate_timestamp,
    sanitize_filename,
    default_output_path,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "RunLogCollector",
    "validate_video_path",
    "validate_language",
    "validate_backend",
    "validate_output_path",
    "validate_image_path",
    "validate_timestamp",
    "sanitize_filename",
    "default_output_path",
]
