"""Saving restored bitmaps and building before/after comparisons."""

import logging
from pathlib import Path
from typing import Optional, Union

import cv2

from src.bitmap import Bitmap

logger = logging.getLogger(__name__)

# Output format name -> file suffix
OUTPUT_SUFFIXES = {
    'jpeg': '.jpg',
    'png': '.png',
}


def output_suffix(output_format: str) -> str:
    """File suffix for an output format name ('jpeg' or 'png').

    Raises:
        ValueError: If the format is not supported
    """
    try:
        return OUTPUT_SUFFIXES[output_format.lower()]
    except KeyError:
        raise ValueError(
            f"Unsupported output format: {output_format!r} "
            f"(expected one of {', '.join(OUTPUT_SUFFIXES)})"
        ) from None


def save_bitmap(
    bitmap: Bitmap,
    output_path: Union[str, Path],
    description: Optional[str] = None,
    quality: int = 92
) -> Path:
    """Save a bitmap to disk.

    PNG output keeps the alpha channel; everything else is written as JPEG
    (alpha dropped) and gets a .jpg suffix.

    Args:
        bitmap: Bitmap to save
        output_path: Destination path
        description: Optional description to log
        quality: JPEG quality (0-100)

    Returns:
        The path actually written
    """
    output_path = Path(output_path)

    # Ensure parent directory exists
    output_path.parent.mkdir(parents=True, exist_ok=True)

    rgba = bitmap.to_array()

    if output_path.suffix.lower() == '.png':
        img_bgra = cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGRA)
        ok = cv2.imwrite(str(output_path), img_bgra)
    else:
        if output_path.suffix.lower() not in ('.jpg', '.jpeg'):
            output_path = output_path.with_suffix('.jpg')
        img_bgr = cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGR)
        ok = cv2.imwrite(
            str(output_path),
            img_bgr,
            [cv2.IMWRITE_JPEG_QUALITY, int(quality)]
        )

    if not ok:
        raise IOError(f"Failed to write image: {output_path}")

    if description:
        logger.debug(f"Saved image: {output_path} - {description}")
    else:
        logger.debug(f"Saved image: {output_path}")

    return output_path


def compose_comparison(original: Bitmap, restored: Bitmap, split: float = 50.0) -> Bitmap:
    """Build a before/after split view of two bitmaps of the same size.

    Columns left of ``round(width * split / 100)`` come from the original and
    the rest from the restored bitmap.

    Args:
        original: Bitmap before restoration
        restored: Bitmap after restoration
        split: Percent of the width showing the original, clamped to [0, 100]

    Returns:
        New bitmap with the same size as the inputs

    Raises:
        ValueError: If the bitmaps differ in size
    """
    if (original.width, original.height) != (restored.width, restored.height):
        raise ValueError(
            f"Cannot compare {original.width}x{original.height} "
            f"with {restored.width}x{restored.height}"
        )

    split = min(100.0, max(0.0, float(split)))
    boundary = int(round(original.width * split / 100.0))

    combined = restored.to_array()
    combined[:, :boundary] = original.to_array()[:, :boundary]

    logger.debug(f"Comparison split at column {boundary}/{original.width}")

    return Bitmap.from_array(combined)
