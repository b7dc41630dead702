"""Blur-derived passes: denoise and clarity.

Both passes run the same 3x3 box blur on the working buffer and differ only
in how they blend the blurred copy back. Denoise pulls each pixel toward its
neighborhood mean; clarity is an unsharp mask that adds back the difference
between the pixel and its neighborhood mean.
"""

import logging

import numpy as np

from src.color.tone import clamp, lerp
from src.filters.box_blur import box_blur

logger = logging.getLogger(__name__)

DENOISE_MAX_MIX = 0.85

CLARITY_BASE_GAIN = 0.8
# Per-channel weight of the clarity amount (R, G, B)
CLARITY_CHANNEL_WEIGHTS = (1.0, 0.9, 0.9)


def apply_denoise(working: np.ndarray, denoise: float) -> np.ndarray:
    """Blend R, G, B toward their 3x3 neighborhood mean.

    Args:
        working: Working buffer (H, W, 4) float32, values [0, 255]
        denoise: Denoise parameter (UI range 0..60). Mix weight is
            min(0.85, denoise / 100).

    Returns:
        New working buffer; alpha is carried over unchanged
    """
    if working.ndim != 3 or working.shape[2] != 4:
        raise ValueError(f"Invalid buffer shape: {working.shape}, expected (H, W, 4)")

    blurred = box_blur(working)
    mix = min(DENOISE_MAX_MIX, denoise / 100.0)

    result = working.copy()
    result[:, :, :3] = lerp(
        working[:, :, :3].astype(np.float64),
        blurred[:, :, :3].astype(np.float64),
        mix,
    )

    logger.debug(f"Denoise applied: mix={mix:.3f}")

    return result


def apply_clarity(working: np.ndarray, clarity: float) -> np.ndarray:
    """Boost local contrast by adding back detail lost to a 3x3 blur.

    detail = current - blurred, and each channel becomes
    ``current + detail * (0.8 + clarity_mix * k)`` with k = 1.0 for red and
    0.9 for green and blue.

    Args:
        working: Working buffer (H, W, 4) float32, values [0, 255]
        clarity: Clarity parameter (UI range 0..60)

    Returns:
        New working buffer with R, G, B clamped; alpha unchanged
    """
    if working.ndim != 3 or working.shape[2] != 4:
        raise ValueError(f"Invalid buffer shape: {working.shape}, expected (H, W, 4)")

    softened = box_blur(working)
    clarity_mix = clarity / 100.0

    current = working[:, :, :3].astype(np.float64)
    detail = current - softened[:, :, :3].astype(np.float64)
    gains = np.array(
        [CLARITY_BASE_GAIN + clarity_mix * k for k in CLARITY_CHANNEL_WEIGHTS],
        dtype=np.float64,
    )

    result = working.copy()
    result[:, :, :3] = clamp(current + detail * gains)

    logger.debug(
        f"Clarity applied: mix={clarity_mix:.3f}, "
        f"gains=({gains[0]:.3f}, {gains[1]:.3f}, {gains[2]:.3f})"
    )

    return result
