"""Turn a stream of OCR samples into timed subtitle cues.

The segmenter is a two-state machine. While idle it waits for an accepted
sample (non-empty text with confidence strictly above the minimum). While
active it keeps the caption that opened the cue and closes it when:

- an accepted sample is less similar than the threshold (a new caption
  replaces it and a new cue opens at the same timestamp), or
- a rejected sample arrives (the caption disappeared).

Samples at or above the similarity threshold belong to the active cue.
Cues closed by a sample carry that sample's confidence; a cue still open at
the end of the run is closed at the video duration with confidence 0.
"""

import logging
from typing import List, Optional

from .models import Cue, Sample
from .text_utils import text_similarity

logger = logging.getLogger(__name__)


class CueSegmenter:
    """Stateful reducer over one run's samples."""

    def __init__(self, min_confidence: float, similarity_threshold: float):
        self.min_confidence = min_confidence
        self.similarity_threshold = similarity_threshold
        self.active_text = ""
        self.active_start = 0.0
        self.cues: List[Cue] = []

    @property
    def is_active(self) -> bool:
        return bool(self.active_text)

    def accepts(self, sample: Sample) -> bool:
        return bool(sample.text) and sample.confidence > self.min_confidence

    def feed(self, sample: Sample) -> Optional[Cue]:
        """Consume one sample; return the cue it closed, if any."""
        if self.accepts(sample):
            if not self.is_active:
                self._open(sample)
                return None
            similarity = text_similarity(sample.text, self.active_text)
            if similarity >= self.similarity_threshold:
                return None
            logger.debug(
                "Caption changed at %.3fs (similarity %.2f)", sample.timestamp, similarity
            )
            cue = self._close(sample.timestamp, sample.confidence)
            self._open(sample)
            return cue

        if self.is_active and (
            not sample.text or sample.confidence <= self.min_confidence
        ):
            cue = self._close(sample.timestamp, sample.confidence)
            self._reset()
            return cue
        return None

    def flush(self, end: float) -> Optional[Cue]:
        """Close a still-active cue at ``end`` (the end of the run)."""
        if not self.is_active:
            return None
        cue = self._close(end, 0.0)
        self._reset()
        return cue

    def _open(self, sample: Sample) -> None:
        self.active_text = sample.text
        self.active_start = sample.timestamp

    def _reset(self) -> None:
        self.active_text = ""
        self.active_start = 0.0

    def _close(self, end: float, confidence: float) -> Cue:
        cue = Cue(
            start=self.active_start,
            end=end,
            text=self.active_text,
            confidence=confidence,
        )
        self.cues.append(cue)
        return cue
