"""Warmth (color temperature) shift."""

from typing import Tuple

from src.color.tone import clamp

WARM_SCALE = 1.2
COOL_SCALE = 1.1
GREEN_SHARE = 0.35
BLUE_SHARE = 0.8


def apply_warmth(r, g, b, warmth: float) -> Tuple:
    """Shift a pixel toward amber (warmth > 0) or blue (warmth < 0).

    Warming scales the amount by 1.2 and adds it to red, 35% of it to green
    and removes 80% of it from blue. Cooling uses the raw (negative) amount
    for the same terms and additionally drops blue by |warmth| * 1.1.

    Args:
        r, g, b: Channel values [0, 255]
        warmth: Warmth parameter (UI range -30..40), 0 = unchanged

    Returns:
        Tuple of adjusted (r, g, b), clamped to [0, 255]
    """
    if warmth == 0:
        return r, g, b

    warm_amount = warmth * WARM_SCALE if warmth > 0 else warmth
    cool_amount = warmth * -COOL_SCALE if warmth < 0 else 0.0

    return (
        clamp(r + warm_amount),
        clamp(g + warm_amount * GREEN_SHARE),
        clamp(b - warm_amount * BLUE_SHARE - cool_amount),
    )
