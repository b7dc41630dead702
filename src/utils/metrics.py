"""Image statistics for before/after restoration summaries."""

import logging
from typing import Dict

import cv2
import numpy as np

from src.bitmap import Bitmap
from src.color.tone import luminance

logger = logging.getLogger(__name__)


def compute_tone_stats(bitmap: Bitmap) -> Dict[str, float]:
    """Compute luminance statistics of a bitmap.

    Args:
        bitmap: RGBA bitmap

    Returns:
        Dictionary with:
        - mean_brightness: Mean BT.709 luminance [0, 255]
        - contrast: Standard deviation of luminance
        - dynamic_range: Max - min luminance
        - clipped_shadows: Fraction of pixels with luminance <= 2
        - clipped_highlights: Fraction of pixels with luminance >= 253
    """
    rgb = bitmap.to_array()[:, :, :3].astype(np.float64)
    gray = luminance(rgb[:, :, 0], rgb[:, :, 1], rgb[:, :, 2])

    return {
        'mean_brightness': float(np.mean(gray)),
        'contrast': float(np.std(gray)),
        'dynamic_range': float(np.max(gray) - np.min(gray)),
        'clipped_shadows': float(np.mean(gray <= 2.0)),
        'clipped_highlights': float(np.mean(gray >= 253.0)),
    }


def compute_color_cast(bitmap: Bitmap) -> Dict[str, float]:
    """Measure the average color cast in LAB space.

    Sepia-toned prints sit well above zero on the b* (blue-yellow) axis.

    Args:
        bitmap: RGBA bitmap

    Returns:
        Dictionary with 'mean_a' (green-red) and 'mean_b' (blue-yellow),
        both centered on 0, and 'saturation_mean' in [0, 1]
    """
    rgb = np.ascontiguousarray(bitmap.to_array()[:, :, :3])

    lab = cv2.cvtColor(rgb, cv2.COLOR_RGB2LAB).astype(np.float32)
    hsv = cv2.cvtColor(rgb, cv2.COLOR_RGB2HSV)

    return {
        'mean_a': float(np.mean(lab[:, :, 1]) - 128.0),
        'mean_b': float(np.mean(lab[:, :, 2]) - 128.0),
        'saturation_mean': float(np.mean(hsv[:, :, 1]) / 255.0),
    }


def compute_sharpness(bitmap: Bitmap) -> float:
    """Compute sharpness using Laplacian variance.

    Higher values indicate sharper images (more high-frequency detail).
    """
    rgb = np.ascontiguousarray(bitmap.to_array()[:, :, :3])
    gray = cv2.cvtColor(rgb, cv2.COLOR_RGB2GRAY)

    laplacian = cv2.Laplacian(gray, cv2.CV_64F)

    return float(laplacian.var())
