"""SRT / WebVTT / JSON serialization for extracted cues."""

import json
import logging
import math
from pathlib import Path
from typing import Iterable, List, Optional

from ..config import SUBTITLE_FORMATS
from ..exceptions import ExportError
from .models import Cue

logger = logging.getLogger(__name__)


# ----------------------
# Timestamps
# ----------------------
def format_timestamp(seconds: float, separator: str = ",") -> str:
    """Format seconds as ``HH:MM:SS,mmm``; milliseconds are truncated.

    Hours are not wrapped, so values past 99 hours simply widen the field.
    """
    # Absorb float representation error (3725.123 * 1000 -> 3725122.99...)
    # without rounding up real sub-millisecond fractions
    total_ms = math.floor(seconds * 1000 + 1e-6)
    hours = total_ms // 3_600_000
    minutes = (total_ms // 60_000) % 60
    secs = (total_ms // 1000) % 60
    millis = total_ms % 1000
    return f"{hours:02d}:{minutes:02d}:{secs:02d}{separator}{millis:03d}"


def format_vtt_timestamp(seconds: float) -> str:
    return format_timestamp(seconds, separator=".")


# ----------------------
# Text formats
# ----------------------
def cues_to_srt(cues: Iterable[Cue]) -> str:
    parts = []
    for index, cue in enumerate(cues, start=1):
        parts.append(
            f"{index}\n"
            f"{format_timestamp(cue.start)} --> {format_timestamp(cue.end)}\n"
            f"{cue.text}\n\n"
        )
    return "".join(parts)


def cues_to_vtt(cues: Iterable[Cue]) -> str:
    parts = ["WEBVTT\n\n"]
    for index, cue in enumerate(cues, start=1):
        parts.append(
            f"{index}\n"
            f"{format_vtt_timestamp(cue.start)} --> {format_vtt_timestamp(cue.end)}\n"
            f"{cue.text}\n\n"
        )
    return "".join(parts)


def cues_to_json(cues: Iterable[Cue]) -> List[dict]:
    """Convert cues into JSON-serializable dicts."""
    return [
        {
            "start": cue.start,
            "end": cue.end,
            "text": cue.text,
            "confidence": cue.confidence,
        }
        for cue in cues
    ]


def cues_from_json(data: List[dict]) -> List[Cue]:
    """Convert JSON data back into Cue objects."""
    return [
        Cue(
            start=float(item["start"]),
            end=float(item["end"]),
            text=item["text"],
            confidence=float(item.get("confidence", 0.0)),
        )
        for item in data
    ]


def render_subtitles(cues: List[Cue], fmt: str) -> str:
    """Render cues in one of the supported formats."""
    fmt = fmt.lower()
    if fmt == "srt":
        return cues_to_srt(cues)
    if fmt == "vtt":
        return cues_to_vtt(cues)
    if fmt == "json":
        return json.dumps({"cues": cues_to_json(cues)}, ensure_ascii=False, indent=2)
    raise ExportError(
        f"Unknown subtitle format '{fmt}'. Use one of: {', '.join(SUBTITLE_FORMATS)}"
    )


def write_subtitles(cues: List[Cue], path: Path, fmt: Optional[str] = None) -> Path:
    """Write cues to ``path``; the format defaults to the file suffix."""
    path = Path(path)
    fmt = fmt or path.suffix.lower().lstrip(".")
    content = render_subtitles(cues, fmt)
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        raise ExportError(f"Could not write {path}: {e}") from e
    logger.info(f"Wrote {len(cues)} cues to {path}")
    return path


def load_cues_from_json(filepath: Path) -> List[Cue]:
    """Load cues saved by :func:`write_subtitles` in JSON format."""
    with open(filepath, "r", encoding="utf-8") as f:
        data = json.load(f)
    return cues_from_json(data.get("cues", []))
