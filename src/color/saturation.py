"""Saturation and vibrance adjustment around the BT.709 gray reference."""

from typing import Tuple

from src.color.tone import clamp, lerp, luminance


def adjust_saturation(r, g, b, amount: float, vibrance: float) -> Tuple:
    """Push channels away from (or toward) their luminance.

    Saturation scales the distance from gray by ``1 + amount``. Vibrance adds
    a further ``(channel - gray) * vibrance`` term weighted by
    ``1 - gray / 255``, so it fades out on bright pixels and has no effect on
    pure white.

    Args:
        r, g, b: Channel values [0, 255]
        amount: Saturation as a fraction (slider value / 100)
        vibrance: Vibrance as a fraction (slider value / 100)

    Returns:
        Tuple of adjusted (r, g, b), clamped to [0, 255]
    """
    if amount == 0 and vibrance == 0:
        return r, g, b

    gray = luminance(r, g, b)
    sat_factor = 1.0 + amount
    vib_factor = 1.0 + vibrance

    def _enhance(channel):
        return clamp(
            lerp(gray, channel, sat_factor)
            + (channel - gray) * (vib_factor - 1.0) * (1.0 - gray / 255.0)
        )

    return _enhance(r), _enhance(g), _enhance(b)
