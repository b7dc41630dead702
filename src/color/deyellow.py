"""Sepia removal for aged photo restoration.

Old prints drift toward a yellow/brown cast as the paper and dyes age. This
module cools each pixel (less red, a little less green, more blue) and then
re-blends every channel against the pixel's luminance with its own mix
weight. Blue is extrapolated past the cooled value (1.10) while red is
pulled closest to gray (0.75).
"""

import logging
from typing import Tuple

from src.color.tone import clamp, lerp, luminance

logger = logging.getLogger(__name__)

SEPIA_STRENGTH_SCALE = 0.75

# Per-channel cooling applied before the gray blend, as multiples of strength
COOL_SHIFT_R = -1.0
COOL_SHIFT_G = -0.5
COOL_SHIFT_B = 0.6

# Per-channel blend weights from gray toward the cooled value
MIX_R = 0.75
MIX_G = 0.85
MIX_B = 1.10


def remove_sepia(r, g, b, amount: float) -> Tuple:
    """Neutralize a sepia/yellow cast.

    Args:
        r, g, b: Channel values [0, 255]
        amount: Sepia reduction strength (UI range 0..80). Values <= 0 leave
            the pixel unchanged.

    Returns:
        Tuple of adjusted (r, g, b). The blend can leave [0, 255] (blue is
        extrapolated), so callers clamp afterwards.
    """
    if amount <= 0:
        return r, g, b

    gray = luminance(r, g, b)
    strength = amount * SEPIA_STRENGTH_SCALE

    cooled_r = clamp(r + strength * COOL_SHIFT_R)
    cooled_g = clamp(g + strength * COOL_SHIFT_G)
    cooled_b = clamp(b + strength * COOL_SHIFT_B)

    return (
        lerp(gray, cooled_r, MIX_R),
        lerp(gray, cooled_g, MIX_G),
        lerp(gray, cooled_b, MIX_B),
    )
