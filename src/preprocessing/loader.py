"""Image loading module: decodes photo files into RGBA bitmaps."""

import logging
from pathlib import Path
from typing import Tuple

import numpy as np
from PIL import Image, ExifTags

from src.bitmap import Bitmap

logger = logging.getLogger(__name__)

STANDARD_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.tiff', '.tif', '.webp', '.bmp')
HEIC_EXTENSIONS = ('.heic', '.heif')
SUPPORTED_EXTENSIONS = STANDARD_EXTENSIONS + HEIC_EXTENSIONS


class ImageMetadata:
    """Metadata extracted from loaded image."""

    def __init__(
        self,
        original_size: Tuple[int, int],
        format: str,
        mode: str,
        orientation: int = 1
    ) -> None:
        self.original_size = original_size  # (width, height)
        self.format = format
        self.mode = mode  # PIL mode before RGBA conversion
        self.orientation = orientation


def _apply_exif_orientation(img: Image.Image) -> Tuple[Image.Image, int]:
    """Apply EXIF orientation to PIL Image.

    Returns:
        Tuple of (oriented image, EXIF orientation value, 1 when absent)
    """
    orientation_key = next(
        (tag for tag, name in ExifTags.TAGS.items() if name == 'Orientation'),
        None
    )
    if orientation_key is None:
        return img, 1

    orientation = img.getexif().get(orientation_key, 1)

    if orientation == 2:
        img = img.transpose(Image.Transpose.FLIP_LEFT_RIGHT)
    elif orientation == 3:
        img = img.rotate(180, expand=True)
    elif orientation == 4:
        img = img.rotate(180, expand=True).transpose(Image.Transpose.FLIP_LEFT_RIGHT)
    elif orientation == 5:
        img = img.rotate(-90, expand=True).transpose(Image.Transpose.FLIP_LEFT_RIGHT)
    elif orientation == 6:
        img = img.rotate(-90, expand=True)
    elif orientation == 7:
        img = img.rotate(90, expand=True).transpose(Image.Transpose.FLIP_LEFT_RIGHT)
    elif orientation == 8:
        img = img.rotate(90, expand=True)

    if orientation != 1:
        logger.debug(f"Applied EXIF orientation: {orientation}")

    return img, orientation


def _register_heic_support() -> None:
    try:
        from pillow_heif import register_heif_opener
    except ImportError as e:
        raise ImportError(
            "pillow-heif is required for HEIC support. "
            "Install with: pip install pillow-heif"
        ) from e
    register_heif_opener()


def image_to_bitmap(img: Image.Image) -> Bitmap:
    """Convert a PIL image of any mode to an RGBA bitmap."""
    rgba = img.convert('RGBA')
    arr = np.array(rgba, dtype=np.uint8)
    return Bitmap.from_array(arr)


def load_bitmap(path: str) -> Tuple[Bitmap, ImageMetadata]:
    """Load an image file as an RGBA bitmap.

    Supports JPEG, PNG, TIFF, WebP, BMP and HEIC. EXIF orientation is applied,
    grayscale and palette images are expanded, and images without alpha get
    a fully opaque alpha channel.

    Args:
        path: Path to image file

    Returns:
        Tuple of (Bitmap, metadata)

    Raises:
        ValueError: If file format is not supported
        FileNotFoundError: If file does not exist
    """
    path_obj = Path(path)

    if not path_obj.exists():
        raise FileNotFoundError(f"Image file not found: {path}")

    ext = path_obj.suffix.lower()

    if ext not in SUPPORTED_EXTENSIONS:
        raise ValueError(f"Unsupported image format: {ext}")

    if ext in HEIC_EXTENSIONS:
        _register_heic_support()

    with Image.open(path_obj) as img:
        original_size = img.size  # (width, height)
        mode = img.mode
        oriented, orientation = _apply_exif_orientation(img)
        bitmap = image_to_bitmap(oriented)

    format_name = 'JPEG' if ext in ('.jpg', '.jpeg') else ext.lstrip('.').upper()

    metadata = ImageMetadata(
        original_size=original_size,
        format=format_name,
        mode=mode,
        orientation=orientation
    )

    logger.info(f"Loaded {format_name}: {path} ({bitmap.width}x{bitmap.height}, mode={mode})")

    return bitmap, metadata
