"""Crop and binarize the subtitle band of a frame before OCR."""

from __future__ import annotations

import logging
import math
from typing import Tuple

import numpy as np

from ..config import BINARIZE_THRESHOLD

logger = logging.getLogger(__name__)


def subtitle_band(
    frame_height: int, region_y_percent: float, region_height_percent: float
) -> Tuple[int, int]:
    """Return ``(y, height)`` in pixels for the subtitle band."""
    region_y = int(math.floor(region_y_percent * frame_height / 100))
    region_height = int(math.floor(region_height_percent * frame_height / 100))
    return region_y, region_height


def crop_region(
    frame: np.ndarray, region_y_percent: float, region_height_percent: float
) -> np.ndarray:
    """Crop a full-width horizontal band out of ``frame``.

    The band always has the requested height. Rows falling below the
    bottom edge of the frame are left black.
    """
    frame_h, frame_w = frame.shape[:2]
    region_y, region_height = subtitle_band(
        frame_h, region_y_percent, region_height_percent
    )
    band = np.zeros((region_height, frame_w) + frame.shape[2:], dtype=frame.dtype)
    visible = frame[region_y : region_y + region_height]
    band[: visible.shape[0]] = visible
    return band


def binarize(image: np.ndarray, threshold: int = BINARIZE_THRESHOLD) -> np.ndarray:
    """Hard black/white on the average of the color channels.

    Pixels whose channel average is at least ``threshold`` become 255, all
    others 0. Light text on a dark background survives; antialiasing does
    not. The channel layout of ``image`` is preserved, and any alpha
    channel is copied through unchanged.
    """
    if image.ndim == 2:
        luminance = image.astype(np.float32)
    else:
        luminance = image[..., :3].astype(np.float32).mean(axis=2)

    mask = np.where(luminance >= threshold, 255, 0).astype(np.uint8)
    if image.ndim == 2:
        return mask

    out = np.repeat(mask[..., np.newaxis], image.shape[2], axis=2)
    if image.shape[2] > 3:
        out[..., 3:] = image[..., 3:]
    return out


def preprocess_region(
    frame: np.ndarray,
    region_y_percent: float,
    region_height_percent: float,
    enabled: bool = True,
) -> np.ndarray:
    """Crop the subtitle band and, when ``enabled``, binarize it."""
    band = crop_region(frame, region_y_percent, region_height_percent)
    if not enabled:
        return band
    return binarize(band)
