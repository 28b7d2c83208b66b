"""
Core modules - the packed pixel buffer and color types every algorithm uses.
"""

from .buffer import PixelBuffer, shift_flat
from .color import BLACK, RED, WHITE, Color, LabelPalette

__all__ = [
    "PixelBuffer",
    "shift_flat",
    "Color",
    "LabelPalette",
    "WHITE",
    "BLACK",
    "RED",
]
