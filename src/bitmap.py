"""In-memory RGBA bitmap exchanged between callers and the restoration pipeline."""

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np

logger = logging.getLogger(__name__)

CHANNELS = 4  # R, G, B, A


@dataclass
class Bitmap:
    """A width x height grid of RGBA pixels stored as a flat uint8 buffer.

    The buffer is laid out row-major, four channels per pixel, so its length
    is always ``width * height * 4``. Construction fails fast with
    ``ValueError`` when that invariant does not hold.
    """

    width: int
    height: int
    pixels: Any

    def __post_init__(self) -> None:
        if int(self.width) != self.width or int(self.height) != self.height:
            raise ValueError(
                f"Bitmap dimensions must be integers, got {self.width}x{self.height}"
            )
        self.width = int(self.width)
        self.height = int(self.height)

        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Bitmap dimensions must be positive, got {self.width}x{self.height}"
            )

        if isinstance(self.pixels, (bytes, bytearray, memoryview)):
            arr = np.frombuffer(self.pixels, dtype=np.uint8)
        else:
            arr = np.asarray(self.pixels)
        if arr.dtype != np.uint8:
            if arr.size and (arr.min() < 0 or arr.max() > 255):
                raise ValueError("Bitmap channel values must be within [0, 255]")
            if arr.size and not np.array_equal(arr, np.floor(arr)):
                raise ValueError("Bitmap channel values must be integers")
        # Own the buffer; never alias the caller's array
        arr = np.array(arr, dtype=np.uint8, copy=True).reshape(-1)

        expected = self.width * self.height * CHANNELS
        if arr.size != expected:
            raise ValueError(
                f"Pixel buffer length {arr.size} does not match "
                f"{self.width}x{self.height}x{CHANNELS} = {expected}"
            )

        self.pixels = arr

    @property
    def shape(self) -> tuple:
        """Array shape of the bitmap as (height, width, channels)."""
        return (self.height, self.width, CHANNELS)

    def to_array(self) -> np.ndarray:
        """Return a copy of the pixels as a uint8 array of shape (H, W, 4)."""
        return self.pixels.reshape(self.shape).copy()

    @classmethod
    def from_array(cls, array: np.ndarray) -> "Bitmap":
        """Build a bitmap from an (H, W, 4) or (H, W, 3) uint8 array.

        RGB arrays get a fully opaque alpha channel.

        Args:
            array: Pixel array, uint8 [0, 255]

        Returns:
            Bitmap holding a copy of the array's pixels
        """
        arr = np.asarray(array)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise ValueError(f"Invalid array shape: {arr.shape}, expected (H, W, 3) or (H, W, 4)")

        if arr.shape[2] == 3:
            alpha = np.full(arr.shape[:2] + (1,), 255, dtype=arr.dtype)
            arr = np.concatenate([arr, alpha], axis=-1)
            logger.debug("Added opaque alpha channel to RGB array")

        height, width = arr.shape[:2]
        return cls(width=width, height=height, pixels=arr.copy())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bitmap):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self.pixels, other.pixels)
        )
