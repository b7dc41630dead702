"""Restoration parameters, their UI bounds, and the bundled presets."""

import dataclasses
import logging
import math
from dataclasses import dataclass, fields, asdict
from typing import Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Adjustments:
    """The ten restoration parameters. Zero means "no effect" for each one.

    Values are trusted as supplied; only contrast is clamped by the pipeline.
    Use ``clamp_to_bounds`` to bound values to the slider ranges first.
    """

    exposure: float = 0.0
    contrast: float = 0.0
    saturation: float = 0.0
    vibrance: float = 0.0
    warmth: float = 0.0
    sepia_reduction: float = 0.0
    shadow_lift: float = 0.0
    highlight_recovery: float = 0.0
    clarity: float = 0.0
    denoise: float = 0.0

    def replace(self, **changes: float) -> "Adjustments":
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, float]) -> "Adjustments":
        """Build adjustments from a mapping, filling missing fields with 0.

        Accepts snake_case field names as well as the camelCase names used by
        browser front ends (``sepiaReduction``, ``shadowLift``, ...).

        Raises:
            ValueError: If the mapping has a key that is not a parameter
        """
        values: Dict[str, float] = {}
        for key, value in data.items():
            name = _CAMEL_ALIASES.get(key, key)
            if name not in ADJUSTMENT_FIELDS:
                raise ValueError(
                    f"Unknown adjustment: {key!r} (expected one of {', '.join(ADJUSTMENT_FIELDS)})"
                )
            values[name] = float(value)
        return cls(**values)


ADJUSTMENT_FIELDS = tuple(f.name for f in fields(Adjustments))

_CAMEL_ALIASES = {
    'sepiaReduction': 'sepia_reduction',
    'shadowLift': 'shadow_lift',
    'highlightRecovery': 'highlight_recovery',
}


@dataclass(frozen=True)
class SliderSpec:
    """UI bounds for one adjustment. The pipeline does not enforce these."""

    field: str
    label: str
    min: float
    max: float
    step: float = 1.0


ADJUSTMENT_SLIDERS: List[SliderSpec] = [
    SliderSpec('exposure', 'Exposure', -40, 40),
    SliderSpec('contrast', 'Contrast', -40, 60),
    SliderSpec('saturation', 'Saturation', -40, 60),
    SliderSpec('vibrance', 'Vibrance', -30, 60),
    SliderSpec('warmth', 'Warmth', -30, 40),
    SliderSpec('sepia_reduction', 'Sepia reduction', 0, 80),
    SliderSpec('shadow_lift', 'Shadow lift', 0, 40),
    SliderSpec('highlight_recovery', 'Highlight recovery', 0, 40),
    SliderSpec('clarity', 'Clarity', 0, 60),
    SliderSpec('denoise', 'Denoise', 0, 60),
]

# Balanced starting point; every bundled preset is built on top of it
DEFAULT_ADJUSTMENTS = Adjustments(
    exposure=6,
    contrast=12,
    saturation=16,
    vibrance=18,
    warmth=4,
    sepia_reduction=30,
    shadow_lift=12,
    highlight_recovery=8,
    clarity=14,
    denoise=18,
)

# Reset-to-original
NEUTRAL_ADJUSTMENTS = Adjustments()


@dataclass(frozen=True)
class Preset:
    """A named, described bundle of adjustments."""

    id: str
    name: str
    description: str
    adjustments: Adjustments


PRESETS: List[Preset] = [
    Preset(
        id='auto',
        name='Smart restoration',
        description='A general balance that recovers detail, color and contrast in old photos.',
        adjustments=DEFAULT_ADJUSTMENTS,
    ),
    Preset(
        id='cores',
        name='Revive colors',
        description='More saturation and warmth, for faded photos with cold tones.',
        adjustments=DEFAULT_ADJUSTMENTS.replace(
            saturation=24,
            vibrance=26,
            warmth=12,
            shadow_lift=8,
            highlight_recovery=6,
        ),
    ),
    Preset(
        id='detalhes',
        name='Recover details',
        description='Raises clarity and local contrast to bring out faces and textures.',
        adjustments=DEFAULT_ADJUSTMENTS.replace(
            clarity=26,
            contrast=18,
            denoise=10,
            shadow_lift=10,
        ),
    ),
    Preset(
        id='suave',
        name='Gentle cleanup',
        description='Removes scan noise and grain without losing the classic look of the photo.',
        adjustments=DEFAULT_ADJUSTMENTS.replace(
            exposure=4,
            contrast=6,
            clarity=6,
            denoise=32,
            warmth=2,
            vibrance=12,
        ),
    ),
]

PRESETS_BY_ID: Dict[str, Preset] = {preset.id: preset for preset in PRESETS}


def get_preset(preset_id: str) -> Preset:
    """Look up a bundled preset by id.

    Raises:
        KeyError: If no preset has that id
    """
    try:
        return PRESETS_BY_ID[preset_id]
    except KeyError:
        raise KeyError(
            f"Unknown preset: {preset_id!r} (available: {', '.join(PRESETS_BY_ID)})"
        ) from None


def apply_preset(preset_id: str, overrides: Optional[Mapping[str, float]] = None) -> Adjustments:
    """Replace the whole parameter set with a preset, then apply manual edits.

    Args:
        preset_id: Id of a bundled preset
        overrides: Optional field -> value edits on top of the preset

    Returns:
        The resulting adjustments
    """
    adjustments = get_preset(preset_id).adjustments
    if overrides:
        edits = Adjustments.from_dict(overrides)
        changed = {}
        for key in overrides:
            name = _CAMEL_ALIASES.get(key, key)
            changed[name] = getattr(edits, name)
        adjustments = adjustments.replace(**changed)
        logger.debug(f"Preset {preset_id!r} with overrides: {changed}")
    return adjustments


def clamp_to_bounds(adjustments: Adjustments) -> Adjustments:
    """Bound every parameter to its slider range."""
    bounded = {}
    for slider in ADJUSTMENT_SLIDERS:
        value = getattr(adjustments, slider.field)
        bounded[slider.field] = min(slider.max, max(slider.min, value))
    return Adjustments(**bounded)


def adjustment_intensity(adjustments: Adjustments) -> int:
    """How far the parameters are from neutral, as a percentage.

    Each slider contributes ``|value| / max(|min|, |max|)``; the mean over all
    sliders is rounded to an integer percent. In-bound values give 0..100.
    """
    total = 0.0
    for slider in ADJUSTMENT_SLIDERS:
        max_range = max(abs(slider.min), abs(slider.max))
        total += abs(getattr(adjustments, slider.field)) / max_range
    # Halves round up
    return int(math.floor(total / len(ADJUSTMENT_SLIDERS) * 100 + 0.5))
