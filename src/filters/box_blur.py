"""3x3 box blur over an RGBA working buffer.

Each output value is the mean of the in-bounds pixels of the 3x3 window
around it. Nothing is padded or wrapped: border pixels average fewer samples
(6 on an edge, 4 in a corner) and divide by that smaller count.
"""

import logging

import numpy as np
from scipy import ndimage

logger = logging.getLogger(__name__)

# 3x3 spatial window, applied to each channel independently
_KERNEL = np.ones((3, 3, 1), dtype=np.float64)


def neighbor_counts(height: int, width: int) -> np.ndarray:
    """Number of in-bounds samples in the 3x3 window of every pixel.

    Args:
        height: Buffer height in pixels
        width: Buffer width in pixels

    Returns:
        float64 array of shape (H, W) with values in {1, 2, 3, 4, 6, 9}
    """
    ones = np.ones((height, width), dtype=np.float64)
    return ndimage.correlate(ones, _KERNEL[:, :, 0], mode='constant', cval=0.0)


def box_blur(buffer: np.ndarray) -> np.ndarray:
    """Blur every channel (alpha included) with a border-shrinking 3x3 mean.

    Sums are taken with a zero constant border, so out-of-bounds samples add
    nothing, then divided by the per-pixel count of real neighbors.

    Args:
        buffer: Working buffer of shape (H, W, 4), values [0, 255]

    Returns:
        New float32 buffer of the same shape; the input is not modified
    """
    if buffer.ndim != 3 or buffer.shape[2] != 4:
        raise ValueError(f"Invalid buffer shape: {buffer.shape}, expected (H, W, 4)")

    height, width = buffer.shape[:2]

    # Window sums, zero outside the image
    sums = ndimage.correlate(
        buffer.astype(np.float64),
        _KERNEL,
        mode='constant',
        cval=0.0,
    )
    counts = neighbor_counts(height, width)

    blurred = sums / counts[:, :, np.newaxis]

    logger.debug(f"Box blur applied to {width}x{height} buffer")

    return blurred.astype(np.float32)
