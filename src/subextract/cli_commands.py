"""Execution helpers for CLI commands."""

import sys
from dataclasses import replace

import click
import cv2

from .core.extractor import SubtitleExtractor
from .core.progress import ExtractionProgressBar
from .core.subtitles import format_timestamp, write_subtitles
from .exceptions import SubExtractError
from .utils.validation import (
    default_output_path,
    validate_backend,
    validate_image_path,
    validate_language,
    validate_output_path,
    validate_timestamp,
    validate_video_path,
)
from .vision.preprocess import preprocess_region
from .vision.video import open_video


def echo_cues(cues) -> None:
    """Print cues with their time range and, when known, OCR confidence."""
    for index, cue in enumerate(cues, start=1):
        line = (
            f"{index:4d}. {format_timestamp(cue.start)} → "
            f"{format_timestamp(cue.end)}  {cue.text}"
        )
        if cue.confidence > 0:
            line += f"  ({cue.confidence:.0f}% confidence)"
        click.echo(line)


def run_extract_command(
    *,
    ctx,
    logger,
    video,
    output,
    fmt,
    settings,
    backend,
    no_progress,
    show_cues,
    extractor_cls=None,
    write_fn=None,
):
    """Execute the `extract` command implementation."""
    extractor_cls = extractor_cls or SubtitleExtractor
    write_fn = write_fn or write_subtitles
    try:
        video_path = validate_video_path(video)
        backend = validate_backend(backend)
        settings = replace(settings, language=validate_language(settings.language))
        if output:
            output_path = validate_output_path(output, fmt)
            fmt = output_path.suffix.lower().lstrip(".")
        else:
            fmt = fmt or "srt"
            output_path = default_output_path(video_path, fmt)

        logger.info(
            f"Sampling every {settings.frame_interval_ms}ms, region "
            f"{settings.region_y_percent}%+{settings.region_height_percent}%, "
            f"language={settings.language}, backend={backend}"
        )
        progress = None if no_progress else ExtractionProgressBar()
        extractor = extractor_cls(settings=settings, backend=backend)
        try:
            result = extractor.extract(video_path, on_progress=progress)
        finally:
            if progress is not None:
                progress.finish()

        if result.ocr_errors:
            logger.warning(f"{result.ocr_errors} samples skipped after OCR errors")
        if show_cues:
            echo_cues(result.cues)

        write_fn(result.cues, output_path, fmt)
        logger.info(f"✅ Subtitles written: {output_path}")

    except SubExtractError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"❌ Unexpected error: {e}")
        if ctx.obj.get("verbose"):
            import traceback

            traceback.print_exc()
        sys.exit(1)


def run_preview_command(
    *,
    logger,
    video,
    time,
    output,
    region_y,
    region_height,
    preprocess,
    open_video_fn=None,
    imwrite_fn=None,
):
    """Write the subtitle band at one timestamp to an image file."""
    open_video_fn = open_video_fn or open_video
    imwrite = imwrite_fn or cv2.imwrite
    try:
        video_path = validate_video_path(video)
        output_path = validate_image_path(output) if output else None
        with open_video_fn(video_path) as source:
            validate_timestamp(time, source.duration)
            source.seek(time)
            region = preprocess_region(
                source.current_frame(), region_y, region_height, enabled=preprocess
            )

        if output_path is None:
            output_path = video_path.with_name(
                f"{video_path.stem}_region_{time:.2f}s.png"
            )
        output_path.parent.mkdir(parents=True, exist_ok=True)
        if not imwrite(str(output_path), region):
            raise SubExtractError(f"Could not write image: {output_path}")
        logger.info(
            f"✅ Region preview ({region.shape[1]}x{region.shape[0]}) written: "
            f"{output_path}"
        )
    except SubExtractError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"❌ Unexpected error: {e}")
        sys.exit(1)
