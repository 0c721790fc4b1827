"""Core functionality modules.

Only the pure-Python pieces are imported eagerly; the extractor pulls in
OpenCV and is imported from ``subextract.core.extractor`` directly.
"""

from .models import Cue, ExtractionResult, Sample
from .segmenter import CueSegmenter
from .subtitles import format_timestamp, format_vtt_timestamp, write_subtitles
from .text_utils import normalize_ocr_text, text_similarity

__all__ = [
    "Cue",
    "ExtractionResult",
    "Sample",
    "CueSegmenter",
    "format_timestamp",
    "format_vtt_timestamp",
    "write_subtitles",
    "normalize_ocr_text",
    "text_similarity",
]
