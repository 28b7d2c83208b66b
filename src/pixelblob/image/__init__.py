"""
Image module - whole-buffer transforms.

The OpenCV conversion adapters live in :mod:`pixelblob.image.converters` and the
preprocessing pipeline in :mod:`pixelblob.image.preprocessing`; both are imported
explicitly so the core algorithms load without OpenCV.
"""

from .transform import (
    blacken_all_but_color_and_white,
    bounding_box_of_color,
    central_blob_color,
    crop_border,
    draw_rectangle,
    erase_all_but_color,
    flip_if_top_heavy,
    grayscale,
    threshold,
)

__all__ = [
    "grayscale",
    "threshold",
    "crop_border",
    "erase_all_but_color",
    "blacken_all_but_color_and_white",
    "bounding_box_of_color",
    "central_blob_color",
    "flip_if_top_heavy",
    "draw_rectangle",
]
