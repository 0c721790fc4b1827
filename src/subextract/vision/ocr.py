"""OCR engine wrappers for Tesseract and PaddleOCR."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Protocol

import cv2
import numpy as np

from ..config import TESSERACT_CHAR_WHITELIST, TESSERACT_PAGE_SEG_MODE
from ..exceptions import OCRError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OCRResult:
    """Raw text and confidence (0-100) for one bitmap."""

    text: str
    confidence: float


class OCREngine(Protocol):
    def recognize(self, image: np.ndarray, language: str) -> OCRResult:
        ...

    def close(self) -> None:
        ...


def _to_rgb(image: np.ndarray) -> np.ndarray:
    """Convert an OpenCV BGR(A) image to RGB; grayscale passes through."""
    if image.ndim == 2:
        return image
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2RGB)
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)


class TesseractOCR:
    """Wrapper around the ``tesseract`` binary via pytesseract."""

    def __init__(self, language: str = "eng") -> None:
        try:
            import pytesseract
        except ImportError as e:
            raise OCRError(
                "pytesseract not found. Install with: pip install pytesseract "
                "(and the tesseract binary for your platform)"
            ) from e

        self._tesseract = pytesseract
        self.language = language
        self.config = (
            f"--psm {TESSERACT_PAGE_SEG_MODE} "
            f'-c "tessedit_char_whitelist={TESSERACT_CHAR_WHITELIST}"'
        )
        try:
            version = pytesseract.get_tesseract_version()
        except (pytesseract.TesseractNotFoundError, OSError) as e:
            raise OCRError(f"Tesseract binary not available: {e}") from e
        logger.debug(f"Using tesseract {version}")

    def recognize(self, image: np.ndarray, language: Optional[str] = None) -> OCRResult:
        """Run OCR on a numpy image array (BGR)."""
        if image.size == 0:
            raise OCRError("Empty image")
        try:
            data = self._tesseract.image_to_data(
                _to_rgb(image),
                lang=language or self.language,
                config=self.config,
                output_type=self._tesseract.Output.DICT,
            )
        except (self._tesseract.TesseractError, RuntimeError, OSError) as e:
            raise OCRError(f"Tesseract failed: {e}") from e
        return self._parse_data(data)

    @staticmethod
    def _parse_data(data: Dict[str, Any]) -> OCRResult:
        words = []
        confidences = []
        for raw_text, raw_conf in zip(data.get("text", []), data.get("conf", [])):
            text = str(raw_text).strip()
            if not text:
                continue
            words.append(text)
            conf = float(raw_conf)
            # Tesseract reports -1 for layout rows that carry no word
            if conf >= 0:
                confidences.append(conf)
        confidence = sum(confidences) / len(confidences) if confidences else 0.0
        return OCRResult(text=" ".join(words), confidence=confidence)

    def close(self) -> None:
        # Each call runs its own tesseract process; nothing is held open
        pass


class PaddleOCRBackend:
    """Wrapper for PaddleOCR, one model per language."""

    LANGUAGE_CODES = {
        "eng": "en",
        "fra": "fr",
        "spa": "es",
        "deu": "german",
        "ita": "it",
    }

    def __init__(self, language: str = "eng") -> None:
        try:
            from paddleocr import PaddleOCR
        except ImportError as e:
            msg = "PaddleOCR not found. Please install via `pip install paddlepaddle paddleocr`"
            logger.error(msg)
            raise OCRError(msg) from e

        self._factory = PaddleOCR
        self.language = language
        self._engines: Dict[str, Any] = {}
        self._engine_for(language)

    def _engine_for(self, language: str) -> Any:
        if language in self._engines:
            return self._engines[language]

        lang = self.LANGUAGE_CODES.get(language)
        if lang is None:
            raise OCRError(f"PaddleOCR backend does not support language '{language}'")

        logger.info(f"Initializing PaddleOCR ({lang})...")
        # Newer PaddleOCR releases reject `show_log`
        try:
            engine = self._factory(
                use_textline_orientation=False, lang=lang, show_log=False
            )
        except Exception as e:
            if "show_log" not in str(e):
                raise OCRError(f"Failed to initialize PaddleOCR: {e}") from e
            logger.warning(
                "PaddleOCR rejected show_log argument; retrying with compatible kwargs"
            )
            engine = self._factory(use_textline_orientation=False, lang=lang)
        self._engines[language] = engine
        return engine

    def recognize(self, image: np.ndarray, language: Optional[str] = None) -> OCRResult:
        """Run OCR on a numpy image array (BGR)."""
        engine = self._engine_for(language or self.language)
        try:
            res = engine.predict(image)
        except Exception as e:
            raise OCRError(f"PaddleOCR failed: {e}") from e

        if not res or not res[0]:
            return OCRResult(text="", confidence=0.0)
        items = res[0]
        rec_texts = [str(t).strip() for t in items.get("rec_texts", [])]
        rec_scores = list(items.get("rec_scores", [1.0] * len(rec_texts)))
        pairs = [(t, float(s)) for t, s in zip(rec_texts, rec_scores) if t]
        if not pairs:
            return OCRResult(text="", confidence=0.0)
        text = " ".join(t for t, _ in pairs)
        confidence = 100.0 * sum(s for _, s in pairs) / len(pairs)
        return OCRResult(text=text, confidence=confidence)

    def close(self) -> None:
        self._engines.clear()


_BACKENDS = {
    "tesseract": TesseractOCR,
    "paddle": PaddleOCRBackend,
}


def create_ocr_engine(backend: str = "tesseract", language: str = "eng") -> OCREngine:
    """Instantiate the OCR backend named ``backend``."""
    try:
        factory = _BACKENDS[backend]
    except KeyError:
        raise OCRError(
            f"Unknown OCR backend '{backend}'. Choose one of: {', '.join(_BACKENDS)}"
        ) from None
    return factory(language)


@contextmanager
def ocr_session(backend: str = "tesseract", language: str = "eng") -> Iterator[OCREngine]:
    """Acquire one OCR engine for a run and close it on every exit path."""
    logger.info(f"Initializing {backend} OCR engine ({language})...")
    engine = create_ocr_engine(backend, language)
    logger.info("OCR engine initialized")
    try:
        yield engine
    finally:
        engine.close()
