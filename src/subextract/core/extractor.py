"""Frame sampler driving preprocessing, OCR and cue segmentation."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable, Optional

from ..config import OCR_BACKEND, ExtractionSettings
from ..exceptions import OCRError, VideoError
from ..utils.logging import RunLogCollector, get_logger
from ..vision.ocr import OCREngine, ocr_session
from ..vision.preprocess import preprocess_region
from ..vision.video import VideoSource, open_video
from .models import Cue, ExtractionResult, Sample
from .segmenter import CueSegmenter
from .subtitles import format_timestamp
from .text_utils import normalize_ocr_text

logger = get_logger(__name__)

ProgressCallback = Callable[[float, float], None]


def _log_cue(cue: Cue) -> None:
    logger.info(
        f'[{format_timestamp(cue.start)} -> {format_timestamp(cue.end)}] "{cue.text}"'
    )


def sample_frame(
    video: VideoSource,
    timestamp: float,
    settings: ExtractionSettings,
    ocr: OCREngine,
) -> Sample:
    """Seek, crop, OCR and normalize one tick.

    Raises VideoError when the frame cannot be decoded and OCRError when
    recognition fails.
    """
    video.seek(timestamp)
    region = preprocess_region(
        video.current_frame(),
        settings.region_y_percent,
        settings.region_height_percent,
        enabled=settings.preprocess,
    )
    result = ocr.recognize(region, settings.language)
    return Sample(
        timestamp=timestamp,
        text=normalize_ocr_text(result.text),
        confidence=result.confidence,
    )


def extract_cues(
    video: VideoSource,
    settings: ExtractionSettings,
    ocr: OCREngine,
    on_progress: Optional[ProgressCallback] = None,
    cancel_event: Optional[threading.Event] = None,
) -> ExtractionResult:
    """Sample ``video`` at a fixed interval and segment the OCR stream into cues.

    Ticks run strictly one after another. A failed OCR call skips its tick;
    a failed seek aborts the run. Setting ``cancel_event`` stops sampling
    before the next tick, and any open cue is closed where sampling stopped.
    """
    duration = float(video.duration)
    interval = settings.frame_interval
    segmenter = CueSegmenter(settings.min_confidence, settings.similarity_threshold)
    samples = 0
    ocr_errors = 0
    cancelled = False

    logger.info(f"Processing video (duration: {duration:.2f}s)...")

    tick = 0
    current_time = 0.0
    while current_time < duration:
        if cancel_event is not None and cancel_event.is_set():
            cancelled = True
            logger.warning(f"Extraction cancelled at {current_time:.2f}s")
            break

        try:
            sample = sample_frame(video, current_time, settings, ocr)
        except OCRError as e:
            ocr_errors += 1
            logger.warning(f"OCR error at {current_time:.2f}s: {e}")
        else:
            samples += 1
            logger.debug(
                f"{current_time:.2f}s conf={sample.confidence:.1f} text={sample.text!r}"
            )
            cue = segmenter.feed(sample)
            if cue is not None:
                _log_cue(cue)

        # Tick times are index-based, not accumulated
        tick += 1
        current_time = tick * interval
        if on_progress is not None:
            on_progress(min(current_time / duration, 1.0), min(current_time, duration))

    final = segmenter.flush(current_time if cancelled else duration)
    if final is not None:
        _log_cue(final)

    cues = segmenter.cues
    logger.info(f"✓ Extraction complete! Found {len(cues)} subtitles.")
    return ExtractionResult(
        cues=cues,
        duration=duration,
        samples=samples,
        ocr_errors=ocr_errors,
        cancelled=cancelled,
    )


class SubtitleExtractor:
    """Run-scoped extraction: owns the video and OCR engine for one run."""

    def __init__(
        self,
        settings: Optional[ExtractionSettings] = None,
        backend: str = OCR_BACKEND,
        open_video_fn=open_video,
        ocr_session_fn=ocr_session,
    ):
        self.settings = (settings or ExtractionSettings()).clamped()
        self.backend = backend
        self._open_video = open_video_fn
        self._ocr_session = ocr_session_fn

    def extract(
        self,
        video_path: Path,
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> ExtractionResult:
        """Extract cues from ``video_path``.

        The returned result carries the run's timestamped log trail. When the
        video fails mid-run the trail is attached to the raised VideoError.
        """
        with RunLogCollector() as trail:
            logger.info(f"Video loaded: {Path(video_path).name}")
            try:
                with self._open_video(video_path) as video, self._ocr_session(
                    self.backend, self.settings.language
                ) as ocr:
                    result = extract_cues(
                        video,
                        self.settings,
                        ocr,
                        on_progress=on_progress,
                        cancel_event=cancel_event,
                    )
            except VideoError as e:
                logger.error(f"Extraction stopped: {e}")
                e.log = list(trail.lines)
                raise
        result.log = list(trail.lines)
        return result
