"""Data models for OCR samples and subtitle cues."""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class Sample:
    """One OCR observation of the subtitle region."""

    timestamp: float
    text: str  # already normalized
    confidence: float  # 0-100 as reported by the OCR engine


@dataclass(frozen=True)
class Cue:
    """A finalized subtitle interval."""

    start: float
    end: float
    text: str
    confidence: float = 0.0  # 0 when the cue was closed by the end of the video

    @property
    def duration(self) -> float:
        return self.end - self.start

    def validate(self) -> None:
        if self.start < 0:
            raise ValueError("Cue timing must be non-negative")
        if self.end <= self.start:
            raise ValueError("Cue end must be after start")
        if not self.text:
            raise ValueError("Cue text must not be empty")


def validate_cue_order(cues: List[Cue]) -> None:
    """Validate that cues are well-formed, ordered and non-overlapping."""
    prev_end = None
    for idx, cue in enumerate(cues):
        cue.validate()
        if prev_end is not None and cue.start < prev_end:
            raise ValueError(
                f"Cue {idx + 1} starts before previous cue ends "
                f"({cue.start:.3f}s < {prev_end:.3f}s)"
            )
        prev_end = cue.end


@dataclass
class ExtractionResult:
    """Outcome of one extraction run."""

    cues: List[Cue]
    duration: float
    samples: int = 0  # ticks that produced a Sample
    ocr_errors: int = 0
    cancelled: bool = False
    log: List[str] = field(default_factory=list)
