"""Tone remapping: exposure, contrast and shadow/highlight recovery.

Every function here works channel-wise on values in the [0, 255] display
range. Channels may be plain floats (a single pixel) or numpy arrays holding
one channel of a whole working buffer; the arithmetic is identical for both.
"""

import logging
from typing import Tuple

import numpy as np

logger = logging.getLogger(__name__)

EXPOSURE_SCALE = 2.2

CONTRAST_MIN = -80.0
CONTRAST_MAX = 120.0
CONTRAST_PIVOT = 128.0
CONTRAST_DIVISOR_GUARD = 0.0001

SHADOW_THRESHOLD = 118.0
HIGHLIGHT_THRESHOLD = 170.0
SHADOW_STRENGTH = 0.6
HIGHLIGHT_STRENGTH = 0.7


def clamp(value, lo: float = 0.0, hi: float = 255.0):
    """Truncate a value (or array of values) to [lo, hi]."""
    return np.clip(value, lo, hi)


def lerp(start, end, amount):
    """Linear interpolation: start + (end - start) * amount.

    Amounts outside [0, 1] extrapolate, which the color ops rely on to push
    channels away from gray.
    """
    return start + (end - start) * amount


def luminance(r, g, b):
    """Perceptual brightness using ITU-R BT.709 weights."""
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def apply_exposure(r, g, b, exposure: float) -> Tuple:
    """Shift all three channels by exposure * 2.2 and clamp.

    Args:
        r, g, b: Channel values [0, 255]
        exposure: Exposure parameter (UI range -40..40)

    Returns:
        Tuple of adjusted (r, g, b)
    """
    offset = exposure * EXPOSURE_SCALE
    return clamp(r + offset), clamp(g + offset), clamp(b + offset)


def contrast_factor(contrast: float) -> float:
    """Compute the contrast multiplier for a contrast parameter.

    The parameter is clamped to [-80, 120] before use. The classic
    ``259 * (C + 255) / (255 * (259 - C))`` curve has a pole at C == 259, so a
    zero divisor is replaced by 0.0001.

    Args:
        contrast: Raw contrast parameter

    Returns:
        Multiplicative factor applied around the 128 pivot
    """
    c = float(clamp(contrast, CONTRAST_MIN, CONTRAST_MAX))
    divisor = 259.0 - c
    if divisor == 0:
        divisor = CONTRAST_DIVISOR_GUARD
    return (259.0 * (c + 255.0)) / (255.0 * divisor)


def apply_contrast(r, g, b, factor: float) -> Tuple:
    """Scale channels around the 128 pivot by a precomputed factor."""

    def _stretch(channel):
        return clamp(factor * (channel - CONTRAST_PIVOT) + CONTRAST_PIVOT)

    return _stretch(r), _stretch(g), _stretch(b)


def apply_shadow_highlight(r, g, b, shadow_lift: float, highlight_recovery: float) -> Tuple:
    """Lift dark pixels and pull down bright ones by a uniform offset.

    Pixels with luminance below 118 are brightened in proportion to how dark
    they are; pixels above 170 are darkened in proportion to how bright they
    are. The band [118, 170] is left untouched.

    Args:
        r, g, b: Channel values [0, 255]
        shadow_lift: Shadow boost strength (UI range 0..40)
        highlight_recovery: Highlight reduction strength (UI range 0..40)

    Returns:
        Tuple of adjusted (r, g, b), clamped to [0, 255]
    """
    if shadow_lift == 0 and highlight_recovery == 0:
        return r, g, b

    gray = luminance(r, g, b)

    shadow_boost = 0.0
    if shadow_lift > 0:
        influence = (SHADOW_THRESHOLD - gray) / SHADOW_THRESHOLD
        shadow_boost = np.where(
            gray < SHADOW_THRESHOLD,
            shadow_lift * influence * SHADOW_STRENGTH,
            0.0,
        )

    highlight_reduction = 0.0
    if highlight_recovery > 0:
        influence = (gray - HIGHLIGHT_THRESHOLD) / (255.0 - HIGHLIGHT_THRESHOLD)
        highlight_reduction = np.where(
            gray > HIGHLIGHT_THRESHOLD,
            highlight_recovery * influence * HIGHLIGHT_STRENGTH,
            0.0,
        )

    def _shift(channel):
        return clamp(channel + shadow_boost - highlight_reduction)

    return _shift(r), _shift(g), _shift(b)
