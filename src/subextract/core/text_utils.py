"""
Text utilities for cleaning OCR output and comparing subtitle captions.

OCR of the same caption jitters from frame to frame, so captions are
compared with a normalized edit-distance similarity instead of equality.
"""

import re

from rapidfuzz.distance import Levenshtein

# Anything that is not a word character, whitespace or common punctuation
_OCR_NOISE_RE = re.compile(r"[^\w\s.,!?'-]")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_ocr_text(text: str) -> str:
    """Replace OCR noise characters with spaces and collapse whitespace."""
    if not text:
        return ""
    cleaned = _OCR_NOISE_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def levenshtein_distance(a: str, b: str) -> int:
    """Character-level edit distance with unit insert/delete/substitute cost."""
    return Levenshtein.distance(a, b)


def text_similarity(a: str, b: str) -> float:
    """Similarity in [0, 1]: 1 - distance / length of the longer string.

    Two empty strings are identical (1.0).
    """
    return Levenshtein.normalized_similarity(a, b)
