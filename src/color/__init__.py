"""Color and tone operations for aged photo restoration.

This package provides the per-pixel tone and color remapping used by the
restoration pipeline (exposure, contrast, saturation/vibrance, sepia removal,
warmth, shadow/highlight recovery) plus the blur-derived denoise and clarity
passes.
"""

from src.color.tone import (
    clamp,
    lerp,
    luminance,
    apply_exposure,
    contrast_factor,
    apply_contrast,
    apply_shadow_highlight,
)

from src.color.saturation import adjust_saturation

from src.color.deyellow import remove_sepia

from src.color.white_balance import apply_warmth

from src.color.enhance import (
    apply_denoise,
    apply_clarity,
)

__all__ = [
    # Scalar helpers
    'clamp',
    'lerp',
    'luminance',
    # Tone
    'apply_exposure',
    'contrast_factor',
    'apply_contrast',
    'apply_shadow_highlight',
    # Color balance
    'adjust_saturation',
    'remove_sepia',
    'apply_warmth',
    # Blur-derived passes
    'apply_denoise',
    'apply_clarity',
]
