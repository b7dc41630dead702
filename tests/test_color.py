"""Tests for the per-pixel tone and color operations."""

import math

import numpy as np
import pytest

from src.color import (
    clamp,
    lerp,
    luminance,
    apply_exposure,
    contrast_factor,
    apply_contrast,
    apply_shadow_highlight,
    adjust_saturation,
    remove_sepia,
    apply_warmth,
)


def _floats(channels):
    return tuple(float(c) for c in channels)


class TestScalarHelpers:
    """Test clamp, lerp and luminance."""

    def test_clamp_bounds(self):
        assert float(clamp(300)) == 255.0
        assert float(clamp(-5)) == 0.0
        assert float(clamp(42.5)) == 42.5

    def test_clamp_custom_range(self):
        assert float(clamp(200, -80, 120)) == 120.0
        assert float(clamp(-100, -80, 120)) == -80.0

    def test_clamp_arrays(self):
        result = clamp(np.array([-10.0, 10.0, 400.0]))
        np.testing.assert_array_equal(result, [0.0, 10.0, 255.0])

    def test_lerp_extrapolates(self):
        assert lerp(100.0, 200.0, 0.5) == 150.0
        assert lerp(100.0, 200.0, 1.1) == pytest.approx(210.0)
        assert lerp(100.0, 200.0, 0.0) == 100.0

    def test_luminance_weights(self):
        assert luminance(255, 0, 0) == pytest.approx(0.2126 * 255)
        assert luminance(0, 255, 0) == pytest.approx(0.7152 * 255)
        assert luminance(0, 0, 255) == pytest.approx(0.0722 * 255)
        assert luminance(255, 255, 255) == pytest.approx(255.0)


class TestExposureContrast:
    """Test exposure shift and contrast curve."""

    def test_exposure_offset(self):
        assert _floats(apply_exposure(10, 10, 10, 10)) == pytest.approx((32.0, 32.0, 32.0))

    def test_exposure_clamps(self):
        assert _floats(apply_exposure(250, 5, 128, 10)) == pytest.approx((255.0, 27.0, 150.0))
        assert _floats(apply_exposure(20, 5, 128, -10)) == pytest.approx((0.0, 0.0, 106.0))

    def test_contrast_factor_neutral(self):
        assert contrast_factor(0) == pytest.approx(1.0)

    def test_contrast_factor_clamped(self):
        """Out-of-range contrast is clamped to [-80, 120] before the curve."""
        assert contrast_factor(500) == contrast_factor(120)
        assert contrast_factor(-500) == contrast_factor(-80)

    def test_contrast_factor_pole_is_finite(self):
        """C == 259 is the curve's pole; the factor must stay finite."""
        factor = contrast_factor(259)
        assert math.isfinite(factor), "Contrast factor should be finite at the pole"
        assert factor == pytest.approx(259 * 375 / (255 * 139))

    def test_contrast_identity_and_stretch(self):
        assert _floats(apply_contrast(40, 128, 200, 1.0)) == pytest.approx((40.0, 128.0, 200.0))
        assert _floats(apply_contrast(100, 128, 200, 2.0)) == pytest.approx((72.0, 128.0, 255.0))

    def test_negative_contrast_flattens(self):
        r, g, b = apply_contrast(20, 128, 240, contrast_factor(-40))
        assert 20 < float(r) < 128
        assert float(g) == pytest.approx(128.0)
        assert 128 < float(b) < 240


class TestSaturation:
    """Test saturation and vibrance."""

    def test_zero_is_identity(self):
        assert adjust_saturation(12, 34, 56, 0, 0) == (12, 34, 56)

    def test_full_desaturation(self):
        """Saturation -100% collapses every channel onto luminance."""
        gray = luminance(200, 100, 50)
        r, g, b = adjust_saturation(200, 100, 50, -1.0, 0)
        assert _floats((r, g, b)) == pytest.approx((gray, gray, gray))

    def test_saturation_spreads_channels(self):
        r, g, b = adjust_saturation(200, 100, 50, 0.3, 0)
        assert float(r) > 200
        assert float(b) < 50

    def test_vibrance_formula(self):
        gray = luminance(200, 100, 50)
        expected_r = 200 + (200 - gray) * 0.5 * (1 - gray / 255)
        r, _, _ = adjust_saturation(200, 100, 50, 0, 0.5)
        assert float(r) == pytest.approx(expected_r)

    def test_vibrance_vanishes_on_white(self):
        """Vibrance adds nothing when gray == 255."""
        with_vibrance = adjust_saturation(255, 255, 255, 0.2, 0.6)
        without_vibrance = adjust_saturation(255, 255, 255, 0.2, 0)
        assert _floats(with_vibrance) == pytest.approx(_floats(without_vibrance))
        assert _floats(with_vibrance) == pytest.approx((255.0, 255.0, 255.0))

    def test_vibrance_weaker_on_bright_pixels(self):
        dark_r, _, _ = adjust_saturation(80, 40, 40, 0, 0.5)
        bright_r, _, _ = adjust_saturation(240, 200, 200, 0, 0.5)
        dark_gain = float(dark_r) - 80
        bright_gain = float(bright_r) - 240
        assert dark_gain > bright_gain > 0

    def test_vectorized_matches_scalar(self):
        r = np.array([200.0, 30.0])
        g = np.array([100.0, 60.0])
        b = np.array([50.0, 90.0])
        vr, vg, vb = adjust_saturation(r, g, b, 0.16, 0.18)
        for i in range(2):
            sr, sg, sb = adjust_saturation(r[i], g[i], b[i], 0.16, 0.18)
            assert (vr[i], vg[i], vb[i]) == pytest.approx(_floats((sr, sg, sb)))


class TestShadowHighlight:
    """Test shadow lift and highlight recovery."""

    def test_zero_is_identity(self):
        assert apply_shadow_highlight(10, 20, 30, 0, 0) == (10, 20, 30)

    def test_shadow_lift(self):
        boost = 20 * ((118 - 50) / 118) * 0.6
        result = apply_shadow_highlight(50, 50, 50, 20, 0)
        assert _floats(result) == pytest.approx((50 + boost,) * 3)

    def test_highlight_recovery(self):
        reduction = 20 * ((220 - 170) / 85) * 0.7
        result = apply_shadow_highlight(220, 220, 220, 0, 20)
        assert _floats(result) == pytest.approx((220 - reduction,) * 3)

    def test_dead_zone(self):
        """Luminance in [118, 170] gets neither boost nor reduction."""
        for level in (118, 140, 170):
            result = apply_shadow_highlight(level, level, level, 40, 40)
            assert _floats(result) == pytest.approx((float(level),) * 3)

    def test_shadow_lift_ignores_highlights(self):
        result = apply_shadow_highlight(230, 230, 230, 40, 0)
        assert _floats(result) == pytest.approx((230.0,) * 3)

    def test_per_pixel_masks(self):
        r = np.array([30.0, 140.0, 240.0])
        result = apply_shadow_highlight(r, r.copy(), r.copy(), 30, 30)
        assert result[0][0] > 30
        assert result[0][1] == pytest.approx(140.0)
        assert result[0][2] < 240


class TestSepia:
    """Test sepia removal."""

    def test_non_positive_is_identity(self):
        assert remove_sepia(180, 140, 90, 0) == (180, 140, 90)
        assert remove_sepia(180, 140, 90, -10) == (180, 140, 90)

    def test_gray_pixel(self):
        r, g, b = remove_sepia(128, 128, 128, 40)
        # strength 30 -> cooled (98, 113, 146), blended against gray 128
        assert _floats((r, g, b)) == pytest.approx((105.5, 115.25, 147.8))

    def test_reduces_warm_cast(self):
        r, g, b = remove_sepia(180, 140, 90, 60)
        assert float(r) - float(b) < 180 - 90, "Red/blue gap should shrink"
        assert float(b) > 90

    def test_blue_can_exceed_range(self):
        """The 1.10 blue weight extrapolates; clamping is left to the caller."""
        _, _, b = remove_sepia(0, 0, 255, 80)
        assert float(b) > 255


class TestWarmth:
    """Test the warmth shift."""

    def test_zero_is_identity(self):
        assert apply_warmth(1, 2, 3, 0) == (1, 2, 3)

    def test_warming(self):
        result = apply_warmth(100, 100, 100, 10)
        assert _floats(result) == pytest.approx((112.0, 104.2, 90.4))

    def test_cooling_hits_blue_harder(self):
        result = apply_warmth(100, 100, 100, -10)
        assert _floats(result) == pytest.approx((90.0, 96.5, 97.0))

    def test_clamped(self):
        result = apply_warmth(250, 250, 5, 40)
        assert _floats(result) == pytest.approx((255.0, 255.0, 0.0))
