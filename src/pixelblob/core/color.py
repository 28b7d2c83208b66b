"""
Color value type and label palette.

Pure white is the background sentinel everywhere; pure black marks foreground
pixels that have not been labeled yet.
"""

import logging
from typing import Dict, Iterable, NamedTuple, Optional, Set

import numpy as np

from pixelblob.common.constants import Colors, LabelingConstants

logger = logging.getLogger(__name__)


class Color(NamedTuple):
    """A 3-channel (R, G, B) value. Equality is exact channel match."""

    r: int
    g: int
    b: int

    @classmethod
    def from_bgr(cls, b: int, g: int, r: int) -> "Color":
        """Create a color from channels in buffer (B, G, R) order."""
        return cls(int(r), int(g), int(b))

    def to_bgr(self) -> tuple:
        """Channels in buffer (B, G, R) order."""
        return (self.b, self.g, self.r)

    @property
    def is_white(self) -> bool:
        return self == WHITE

    @property
    def is_black(self) -> bool:
        return self == BLACK

    def __str__(self) -> str:
        return f"({self.r}, {self.g}, {self.b})"


WHITE = Color(*Colors.WHITE)
BLACK = Color(*Colors.BLACK)
RED = Color(*Colors.RED)


class LabelPalette:
    """
    Deterministic mapping from integer region labels to display colors.

    Colors are drawn uniformly from [1, 254] per channel so they never collide
    with the black/white sentinels, and are unique within one palette. With a
    seed the sequence is reproducible; ``seed=None`` draws from OS entropy.
    """

    def __init__(
        self,
        seed: Optional[int] = LabelingConstants.DEFAULT_PALETTE_SEED,
        reserved: Optional[Iterable[Color]] = None,
    ):
        """
        Initialize palette.

        Args:
            seed: Random seed for reproducible colors
            reserved: Colors that must never be handed out (e.g. colors already
                present in the image being labeled)
        """
        self.seed = seed
        self._rng = np.random.default_rng(seed)
        self._colors: Dict[int, Color] = {}
        self._used: Set[Color] = set(reserved or ())

    def color_for(self, label: int) -> Color:
        """Get the color for a label, drawing a fresh one on first use."""
        color = self._colors.get(label)
        if color is None:
            color = self._draw()
            self._colors[label] = color
        return color

    def _draw(self) -> Color:
        while True:
            r, g, b = self._rng.integers(
                LabelingConstants.MIN_CHANNEL_VALUE,
                LabelingConstants.MAX_CHANNEL_VALUE,
                size=3,
                endpoint=True,
            )
            color = Color(int(r), int(g), int(b))
            if color not in self._used:
                self._used.add(color)
                return color
            logger.debug(f"Palette collision on {color}, redrawing")

    def __len__(self) -> int:
        return len(self._colors)
