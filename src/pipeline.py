"""Main pipeline orchestrator for photo restoration."""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional

import numpy as np

from src.adjustments import Adjustments, get_preset
from src.bitmap import Bitmap
from src.color.tone import (
    clamp,
    apply_exposure,
    contrast_factor,
    apply_contrast,
    apply_shadow_highlight,
)
from src.color.saturation import adjust_saturation
from src.color.deyellow import remove_sepia
from src.color.white_balance import apply_warmth
from src.color.enhance import apply_denoise, apply_clarity
from src.preprocessing.loader import load_bitmap, ImageMetadata

logger = logging.getLogger(__name__)

# Ordered pipeline steps; denoise and clarity only run when their parameter > 0
PIPELINE_STEPS = [
    'load',
    'exposure',
    'contrast',
    'saturation',
    'sepia',
    'warmth',
    'shadow_highlight',
    'clamp',
    'denoise',
    'clarity',
    'quantize',
]


class RestorationCancelled(Exception):
    """Raised when a caller cancels a run between two pipeline steps."""

    def __init__(self, step: str) -> None:
        super().__init__(f"Restoration cancelled before step '{step}'")
        self.step = step


@dataclass
class PipelineConfig:
    """Tunable parameters for the code around the pipeline (CLI, output)."""

    # Preset applied when the caller does not pick one
    default_preset: str = "auto"

    # Output
    output_format: str = "jpeg"
    jpeg_quality: int = 92
    output_prefix: str = "restored_"

    # Before/after comparison, percent of width taken by the original
    comparison_split: float = 50.0


@dataclass
class PipelineResult:
    """Result of one restoration run."""

    bitmap: Bitmap
    adjustments: Adjustments
    processing_time: float
    steps_completed: List[str]
    step_times: Dict[str, float] = field(default_factory=dict)
    metadata: Optional[ImageMetadata] = None


class Pipeline:
    """Applies a restoration parameter set to RGBA bitmaps.

    A run never mutates the caller's bitmap: pixels are copied into a float32
    working buffer owned by that run and quantized into a new bitmap at the
    end. Separate runs share no state, so one Pipeline may serve several
    threads at once.
    """

    def __init__(self, config: Optional[PipelineConfig] = None) -> None:
        """Initialize pipeline with configuration.

        Args:
            config: Pipeline configuration. If None, uses defaults.
        """
        self.config = config or PipelineConfig()

    def run(
        self,
        bitmap: Bitmap,
        adjustments: Optional[Adjustments] = None,
        should_cancel: Optional[Callable[[], bool]] = None
    ) -> PipelineResult:
        """Restore a bitmap.

        Args:
            bitmap: Source bitmap; left untouched
            adjustments: Parameter set, fixed for the whole run. If None, the
                config's default preset is used.
            should_cancel: Optional callable polled before each step. When it
                returns True the run stops with RestorationCancelled.

        Returns:
            PipelineResult holding a new bitmap of the same width and height

        Raises:
            ValueError: If the bitmap's pixel buffer does not match its shape
            RestorationCancelled: If should_cancel asked to stop
        """
        if not isinstance(bitmap, Bitmap):
            raise TypeError(f"Expected Bitmap, got {type(bitmap).__name__}")

        expected = bitmap.width * bitmap.height * 4
        if bitmap.pixels.size != expected:
            raise ValueError(
                f"Pixel buffer length {bitmap.pixels.size} does not match "
                f"{bitmap.width}x{bitmap.height}x4 = {expected}"
            )

        if adjustments is None:
            adjustments = get_preset(self.config.default_preset).adjustments
            logger.debug(f"Using default preset {self.config.default_preset!r}")

        start_time = time.perf_counter()
        steps_completed: List[str] = []
        step_times: Dict[str, float] = {}

        @contextmanager
        def step(name: str) -> Iterator[None]:
            if should_cancel is not None and should_cancel():
                logger.info(f"Restoration cancelled before step '{name}'")
                raise RestorationCancelled(name)
            step_start = time.perf_counter()
            yield
            step_times[name] = time.perf_counter() - step_start
            steps_completed.append(name)
            logger.debug(f"Step {name}: {step_times[name] * 1000:.2f}ms")

        a = adjustments

        # Step 1: Copy source bytes into the working buffer (no scaling)
        with step('load'):
            working = bitmap.pixels.reshape(bitmap.shape).astype(np.float32)
            r = working[:, :, 0].astype(np.float64)
            g = working[:, :, 1].astype(np.float64)
            b = working[:, :, 2].astype(np.float64)

        # Step 2-7: Tone and color, per pixel
        with step('exposure'):
            r, g, b = apply_exposure(r, g, b, a.exposure)

        with step('contrast'):
            r, g, b = apply_contrast(r, g, b, contrast_factor(a.contrast))

        with step('saturation'):
            r, g, b = adjust_saturation(r, g, b, a.saturation / 100.0, a.vibrance / 100.0)

        with step('sepia'):
            # Fraction re-scaled to 0-100 before the op; the net effect is the raw value
            sepia = a.sepia_reduction / 100.0
            r, g, b = remove_sepia(r, g, b, sepia * 100.0)

        with step('warmth'):
            r, g, b = apply_warmth(r, g, b, a.warmth)

        with step('shadow_highlight'):
            r, g, b = apply_shadow_highlight(r, g, b, a.shadow_lift, a.highlight_recovery)

        # Step 8: Re-clamp all four channels into the working buffer
        with step('clamp'):
            working[:, :, 0] = clamp(r)
            working[:, :, 1] = clamp(g)
            working[:, :, 2] = clamp(b)
            working[:, :, 3] = clamp(working[:, :, 3])

        # Step 9-10: Blur-derived passes, skipped outright when disabled
        if a.denoise > 0:
            with step('denoise'):
                working = apply_denoise(working, a.denoise)

        if a.clarity > 0:
            with step('clarity'):
                working = apply_clarity(working, a.clarity)

        # Step 11: Clamp and quantize every channel, alpha included
        with step('quantize'):
            output = np.rint(clamp(working)).astype(np.uint8)
            restored = Bitmap(width=bitmap.width, height=bitmap.height, pixels=output.reshape(-1))

        total_time = time.perf_counter() - start_time
        logger.info(
            f"Restored {bitmap.width}x{bitmap.height} bitmap in {total_time:.3f}s "
            f"({len(steps_completed)} steps)"
        )

        return PipelineResult(
            bitmap=restored,
            adjustments=adjustments,
            processing_time=total_time,
            steps_completed=steps_completed,
            step_times=step_times,
        )

    def process(
        self,
        input_path: str,
        adjustments: Optional[Adjustments] = None,
        should_cancel: Optional[Callable[[], bool]] = None
    ) -> PipelineResult:
        """Load an image file and restore it.

        Args:
            input_path: Path to input image
            adjustments: Parameter set to apply; defaults as in ``run``
            should_cancel: Optional cancellation callback, see ``run``

        Returns:
            PipelineResult with the restored bitmap and the file's metadata
        """
        logger.info(f"Processing: {input_path}")

        bitmap, metadata = load_bitmap(input_path)
        result = self.run(bitmap, adjustments, should_cancel=should_cancel)
        result.metadata = metadata

        return result


def restore(
    bitmap: Bitmap,
    adjustments: Adjustments,
    should_cancel: Optional[Callable[[], bool]] = None
) -> Bitmap:
    """Restore a bitmap with the given adjustments.

    Args:
        bitmap: Source bitmap; left untouched
        adjustments: Parameter set to apply
        should_cancel: Optional cancellation callback polled between steps

    Returns:
        New bitmap with identical width and height
    """
    return Pipeline().run(bitmap, adjustments, should_cancel=should_cancel).bitmap
