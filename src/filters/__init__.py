"""Spatial filters shared by the local-contrast and denoise passes."""

from src.filters.box_blur import box_blur, neighbor_counts

__all__ = [
    "box_blur",
    "neighbor_counts",
]
