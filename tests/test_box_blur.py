"""Tests for the 3x3 box blur and the blur-derived passes."""

import numpy as np
import pytest

from src.filters.box_blur import box_blur, neighbor_counts
from src.color.enhance import apply_denoise, apply_clarity


def _reference_blur(buffer: np.ndarray) -> np.ndarray:
    """Straightforward per-pixel loop over in-bounds neighbors."""
    height, width = buffer.shape[:2]
    result = np.zeros_like(buffer, dtype=np.float64)
    for y in range(height):
        for x in range(width):
            total = np.zeros(4, dtype=np.float64)
            samples = 0
            for ky in (-1, 0, 1):
                yy = y + ky
                if yy < 0 or yy >= height:
                    continue
                for kx in (-1, 0, 1):
                    xx = x + kx
                    if xx < 0 or xx >= width:
                        continue
                    total += buffer[yy, xx]
                    samples += 1
            result[y, x] = total / samples
    return result


@pytest.fixture
def random_buffer():
    """A 7x5 RGBA working buffer with random values, alpha included."""
    np.random.seed(7)
    return (np.random.rand(5, 7, 4) * 255).astype(np.float32)


@pytest.fixture
def step_buffer():
    """Dark left half, bright right half, opaque."""
    buf = np.zeros((6, 8, 4), dtype=np.float32)
    buf[:, :4, :3] = 60.0
    buf[:, 4:, :3] = 200.0
    buf[:, :, 3] = 255.0
    return buf


class TestBoxBlur:
    """Test the blur primitive."""

    def test_matches_reference(self, random_buffer):
        result = box_blur(random_buffer)
        expected = _reference_blur(random_buffer)
        np.testing.assert_allclose(result, expected, rtol=0, atol=1e-3)

    def test_shape_and_dtype(self, random_buffer):
        result = box_blur(random_buffer)
        assert result.shape == random_buffer.shape
        assert result.dtype == np.float32

    def test_does_not_modify_input(self, random_buffer):
        before = random_buffer.copy()
        box_blur(random_buffer)
        np.testing.assert_array_equal(random_buffer, before)

    def test_uniform_image_unchanged(self):
        """Shrinking divisors at the borders keep flat images flat."""
        buf = np.full((4, 5, 4), 123.0, dtype=np.float32)
        np.testing.assert_allclose(box_blur(buf), buf, atol=1e-4)

    def test_corner_averages_four(self):
        buf = np.zeros((3, 3, 4), dtype=np.float32)
        buf[0, 0] = 40.0
        result = box_blur(buf)
        assert result[0, 0, 0] == pytest.approx(10.0), "Corner divides by 4"
        assert result[0, 1, 0] == pytest.approx(40.0 / 6), "Edge divides by 6"
        assert result[1, 1, 0] == pytest.approx(40.0 / 9), "Center divides by 9"
        assert result[2, 2, 0] == pytest.approx(0.0), "No wraparound"

    def test_blurs_alpha(self):
        buf = np.zeros((1, 3, 4), dtype=np.float32)
        buf[0, 1, 3] = 90.0
        result = box_blur(buf)
        np.testing.assert_allclose(result[0, :, 3], [45.0, 30.0, 45.0], atol=1e-4)

    @pytest.mark.parametrize("shape", [(1, 1, 4), (1, 6, 4), (6, 1, 4), (2, 2, 4)])
    def test_degenerate_sizes(self, shape):
        np.random.seed(3)
        buf = (np.random.rand(*shape) * 255).astype(np.float32)
        np.testing.assert_allclose(box_blur(buf), _reference_blur(buf), atol=1e-3)

    def test_rejects_non_rgba(self):
        with pytest.raises(ValueError, match="expected"):
            box_blur(np.zeros((4, 4, 3), dtype=np.float32))

    def test_neighbor_counts(self):
        counts = neighbor_counts(3, 4)
        np.testing.assert_array_equal(
            counts,
            [[4, 6, 6, 4],
             [6, 9, 9, 6],
             [4, 6, 6, 4]],
        )


class TestDenoise:
    """Test the denoise blend."""

    def test_flattens_step_edge(self, step_buffer):
        result = apply_denoise(step_buffer, 40)
        # Columns 3 and 4 sit on the edge and move toward each other
        assert result[2, 3, 0] > 60.0
        assert result[2, 4, 0] < 200.0
        # Far from the edge nothing changes
        assert result[2, 0, 0] == pytest.approx(60.0)
        assert result[2, 7, 0] == pytest.approx(200.0)

    def test_mix_weight(self, step_buffer):
        blurred = box_blur(step_buffer)
        result = apply_denoise(step_buffer, 40)
        expected = 60.0 + (blurred[2, 3, 0] - 60.0) * 0.4
        assert result[2, 3, 0] == pytest.approx(expected, abs=1e-3)

    def test_mix_capped(self, step_buffer):
        """Denoise above 85 behaves like 85."""
        np.testing.assert_array_equal(
            apply_denoise(step_buffer, 100),
            apply_denoise(step_buffer, 85),
        )

    def test_alpha_untouched(self, random_buffer):
        result = apply_denoise(random_buffer, 60)
        np.testing.assert_array_equal(result[:, :, 3], random_buffer[:, :, 3])


class TestClarity:
    """Test the clarity unsharp mask."""

    def test_increases_edge_contrast(self, step_buffer):
        result = apply_clarity(step_buffer, 30)
        assert result[2, 3, 0] < 60.0, "Dark side of the edge gets darker"
        assert result[2, 4, 0] > 200.0, "Bright side of the edge gets brighter"

    def test_red_gain_exceeds_green_blue(self, step_buffer):
        # Gains at clarity 10: red 0.8 + 0.1, green 0.8 + 0.09
        result = apply_clarity(step_buffer, 10)
        red_shift = result[2, 4, 0] - 200.0
        green_shift = result[2, 4, 1] - 200.0
        assert red_shift == pytest.approx(green_shift * 0.9 / 0.89, abs=1e-3)

    def test_flat_image_unchanged(self):
        buf = np.full((4, 4, 4), 90.0, dtype=np.float32)
        np.testing.assert_allclose(apply_clarity(buf, 60), buf, atol=1e-3)

    def test_output_clamped(self):
        buf = np.zeros((3, 3, 4), dtype=np.float32)
        buf[1, 1, :3] = 255.0
        result = apply_clarity(buf, 60)
        assert result.min() >= 0.0
        assert result.max() <= 255.0

    def test_alpha_untouched(self, random_buffer):
        result = apply_clarity(random_buffer, 60)
        np.testing.assert_array_equal(result[:, :, 3], random_buffer[:, :, 3])
