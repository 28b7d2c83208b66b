"""
Single-pass connected-component coloring with deferred merge resolution.

Foreground (non-white) pixels are visited in raster order. Each one inspects
only its causal neighbors, the already-visited left, top-left, top and
top-right slots, and either starts a new tentative label, reuses a neighbor's
label, or picks one neighbor label and records that the others are
equivalent. After the scan the merge forest is resolved and every foreground
pixel is rewritten with its root region's color, so 8-connected components end
up sharing one color.

Neighbor slots are found by address arithmetic on the stride, exactly like the
pixel-level lookups in :class:`~pixelblob.core.buffer.PixelBuffer`.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from pixelblob.common.constants import BufferConstants, LabelingConstants
from pixelblob.common.enums import TieBreakPolicy
from pixelblob.core.buffer import PixelBuffer
from pixelblob.core.color import Color, LabelPalette

from .disjoint_set import DisjointSet

logger = logging.getLogger(__name__)

_NO_LABEL = -1


@dataclass
class LabelingResult:
    """Outcome of one labeling pass."""

    colors: List[Color]
    """Final distinct region colors, ordered by discovery of each region's root."""

    label_map: np.ndarray
    """(height, width) int32 array: 0 for background, ``i + 1`` for ``colors[i]``."""

    tentative_labels: int = 0
    merges: int = 0
    roots: List[int] = field(default_factory=list)

    @property
    def region_count(self) -> int:
        return len(self.colors)


class RegionLabeler:
    """Colors 8-connected foreground components of a thresholded buffer."""

    def __init__(
        self,
        tie_break: TieBreakPolicy = TieBreakPolicy.NEIGHBOR_ORDER,
        palette_seed: Optional[int] = LabelingConstants.DEFAULT_PALETTE_SEED,
    ):
        """
        Initialize labeler.

        Args:
            tie_break: Which neighbor label a pixel takes when neighbors disagree
            palette_seed: Seed for the label palette (None for non-reproducible colors)
        """
        self.tie_break = TieBreakPolicy(tie_break)
        self.palette_seed = palette_seed

    def label(self, buffer: PixelBuffer) -> LabelingResult:
        """
        Color every foreground component of ``buffer`` in place.

        Args:
            buffer: Thresholded buffer; white is background, anything else foreground

        Returns:
            LabelingResult with one color per component (empty when there is
            no foreground)
        """
        width, height = buffer.width, buffer.height
        slots_per_row = buffer.slots_per_row

        foreground_grid = np.zeros((height, slots_per_row), dtype=bool)
        foreground_grid[:, :width] = buffer.foreground_mask()
        foreground = foreground_grid.ravel().tolist()

        labels = [_NO_LABEL] * len(foreground)
        offsets = (-1, -slots_per_row - 1, -slots_per_row, -slots_per_row + 1)
        forest = DisjointSet()
        merges = 0
        use_min_label = self.tie_break is TieBreakPolicy.MIN_LABEL

        for row in range(height):
            base = row * slots_per_row
            for column in range(width):
                slot = base + column
                if not foreground[slot]:
                    continue

                neighbors = [labels[slot + o] if slot + o >= 0 else _NO_LABEL for o in offsets]
                known = [n for n in neighbors if n != _NO_LABEL]

                if not known:
                    labels[slot] = forest.make_set()
                    continue

                if len(known) == 4 and known.count(known[0]) == 4:
                    labels[slot] = known[0]
                    continue

                chosen = min(known) if use_min_label else known[0]
                for other in set(known):
                    if other != chosen and forest.find(other) != forest.find(chosen):
                        forest.union(other, chosen)
                        merges += 1
                labels[slot] = chosen

        return self._apply_colors(buffer, labels, forest, merges)

    def _apply_colors(
        self, buffer: PixelBuffer, labels: List[int], forest: DisjointSet, merges: int
    ) -> LabelingResult:
        width, height = buffer.width, buffer.height
        resolved = forest.resolve()
        roots = forest.roots()

        palette = LabelPalette(self.palette_seed, reserved=buffer.distinct_colors())
        colors = [palette.color_for(root) for root in roots]

        # Tentative label -> 1-based region index (0 stays background)
        region_of_root = {root: index + 1 for index, root in enumerate(roots)}
        region_lookup = np.zeros(len(resolved) + 1, dtype=np.int32)
        for label, root in enumerate(resolved):
            region_lookup[label + 1] = region_of_root[root]

        label_grid = np.asarray(labels, dtype=np.int64).reshape(height, -1)[:, :width]
        label_map = region_lookup[label_grid + 1]

        if colors:
            color_table = np.zeros((len(colors) + 1, 3), dtype=np.uint8)
            color_table[1:] = [color.to_bgr() for color in colors]
            foreground = label_map > 0
            pixels = buffer.pixels
            pixels[foreground, : BufferConstants.ALPHA_OFFSET] = color_table[label_map[foreground]]

        logger.debug(
            f"Labeled {len(roots)} region(s) from {len(resolved)} tentative label(s), "
            f"{merges} merge(s)"
        )
        return LabelingResult(
            colors=colors,
            label_map=label_map,
            tentative_labels=len(resolved),
            merges=merges,
            roots=roots,
        )
