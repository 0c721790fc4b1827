"""Command-line interface using Click."""

from pathlib import Path

import click

from . import __version__
from .cli_commands import run_extract_command, run_preview_command
from .config import (
    FRAME_INTERVAL_MS,
    FRAME_INTERVAL_RANGE,
    LANGUAGE,
    MIN_CONFIDENCE,
    MIN_CONFIDENCE_RANGE,
    OCR_BACKEND,
    OCR_BACKENDS,
    REGION_HEIGHT_PERCENT,
    REGION_HEIGHT_RANGE,
    REGION_Y_PERCENT,
    REGION_Y_RANGE,
    SIMILARITY_RANGE,
    SIMILARITY_THRESHOLD,
    SUBTITLE_FORMATS,
    SUPPORTED_LANGUAGES,
    ExtractionSettings,
)
from .utils.logging import setup_logging

# Out-of-range values are clamped rather than rejected
_region_y = click.IntRange(*REGION_Y_RANGE, clamp=True)
_region_height = click.IntRange(*REGION_HEIGHT_RANGE, clamp=True)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--log-file', type=click.Path(), help='Log to file')
@click.pass_context
def cli(ctx, verbose, log_file):
    """subextract - Extract burnt-in subtitles from video with OCR."""
    ctx.ensure_object(dict)
    logger = setup_logging(
        level="DEBUG" if verbose else "INFO",
        log_file=Path(log_file) if log_file else None,
        verbose=verbose
    )
    ctx.obj['logger'] = logger
    ctx.obj['verbose'] = verbose


@cli.command()
@click.argument('video', type=click.Path())
@click.option('-o', '--output', help='Output subtitle path (.srt, .vtt or .json)')
@click.option('--format', 'fmt', type=click.Choice(SUBTITLE_FORMATS),
              help='Subtitle format (default: the --output suffix, else srt)')
@click.option('--interval', type=click.IntRange(*FRAME_INTERVAL_RANGE, clamp=True),
              default=FRAME_INTERVAL_MS, show_default=True,
              help='Sampling interval in milliseconds')
@click.option('--region-y', type=_region_y, default=REGION_Y_PERCENT,
              show_default=True, help='Top of the subtitle band, % of frame height')
@click.option('--region-height', type=_region_height,
              default=REGION_HEIGHT_PERCENT, show_default=True,
              help='Height of the subtitle band, % of frame height')
@click.option('--min-confidence',
              type=click.FloatRange(*MIN_CONFIDENCE_RANGE, clamp=True),
              default=MIN_CONFIDENCE, show_default=True,
              help='Ignore OCR results at or below this confidence')
@click.option('--similarity', type=click.FloatRange(*SIMILARITY_RANGE, clamp=True),
              default=SIMILARITY_THRESHOLD, show_default=True,
              help='Text similarity at which two samples are the same subtitle')
@click.option('--no-preprocess', is_flag=True,
              help='Skip black/white binarization of the subtitle band')
@click.option('--language', type=click.Choice(list(SUPPORTED_LANGUAGES)),
              default=LANGUAGE, show_default=True, help='OCR language')
@click.option('--ocr-backend', type=click.Choice(OCR_BACKENDS),
              default=OCR_BACKEND, show_default=True, help='OCR engine')
@click.option('--no-progress', is_flag=True, help='Disable progress bar')
@click.option('--show-cues', is_flag=True, help='Print extracted subtitles')
@click.pass_context
def extract(ctx, video, output, fmt, interval, region_y, region_height,
            min_confidence, similarity, no_preprocess, language, ocr_backend,
            no_progress, show_cues):
    """Extract subtitles from VIDEO into an SRT, WebVTT or JSON file."""
    settings = ExtractionSettings(
        frame_interval_ms=interval,
        region_y_percent=region_y,
        region_height_percent=region_height,
        min_confidence=min_confidence,
        similarity_threshold=similarity,
        preprocess=not no_preprocess,
        language=language,
    )
    run_extract_command(
        ctx=ctx,
        logger=ctx.obj['logger'],
        video=video,
        output=output,
        fmt=fmt,
        settings=settings,
        backend=ocr_backend,
        no_progress=no_progress,
        show_cues=show_cues,
    )


@cli.command()
@click.argument('video', type=click.Path())
@click.option('--time', 'time_', type=float, required=True,
              help='Timestamp in seconds to sample')
@click.option('-o', '--output', help='Output image path (default: PNG beside video)')
@click.option('--region-y', type=_region_y, default=REGION_Y_PERCENT,
              show_default=True, help='Top of the subtitle band, % of frame height')
@click.option('--region-height', type=_region_height,
              default=REGION_HEIGHT_PERCENT, show_default=True,
              help='Height of the subtitle band, % of frame height')
@click.option('--no-preprocess', is_flag=True,
              help='Save the raw crop instead of the binarized band')
@click.pass_context
def preview(ctx, video, time_, output, region_y, region_height, no_preprocess):
    """Save the subtitle band of VIDEO at --time as an image for tuning."""
    run_preview_command(
        logger=ctx.obj['logger'],
        video=video,
        time=time_,
        output=output,
        region_y=region_y,
        region_height=region_height,
        preprocess=not no_preprocess,
    )


@cli.command()
def languages():
    """List supported OCR languages."""
    for code, name in SUPPORTED_LANGUAGES.items():
        click.echo(f"{code}  {name}")


def main():
    cli(obj={})


if __name__ == '__main__':
    main()
