"""
Sliding-window histogram scan.

Every window size from ``width - 1`` (and ``height - 1``) downwards in fixed
steps is slid over the image on a coarse grid. Each window's normalized color
histogram is compared with a template; close windows are kept, and finally
windows that describe substantially the same region are merged.

Window positions of one size are evaluated in parallel. Each worker only reads
the shared image and computes its own histograms; the list of kept windows is
the single shared collection and is appended to under a lock. There is no
cancellation or timeout: a scan always runs to completion.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from pixelblob.algorithms.color_histogram import bin_distance, color_bins
from pixelblob.common.base import Rect
from pixelblob.common.constants import HistogramConstants, SystemConstants
from pixelblob.config import ScanConfig
from pixelblob.core.buffer import PixelBuffer
from pixelblob.schemas.results import WindowMatch
from pixelblob.utils import distinct, stepped_range, timer

logger = logging.getLogger(__name__)


def merge_significant_intersections(
    rects: Sequence[Rect], overlap_fraction: float = 0.5
) -> List[Rect]:
    """
    Merge rectangles that significantly intersect until the count is stable.

    Each rectangle is grown by the union of every rectangle it significantly
    intersects (checked against its grown self, in list order); duplicates are
    then dropped. This repeats while the number of rectangles keeps changing.
    """

    def grow(rect: Rect, others: Sequence[Rect]) -> Rect:
        for other in others:
            if rect.significantly_intersects(other, overlap_fraction):
                rect = rect.union(other)
        return rect

    current = distinct(grow(rect, rects) for rect in rects)
    while True:
        old_count = len(current)
        current = distinct(grow(rect, current) for rect in current)
        if len(current) == old_count:
            return current


class WindowScanner:
    """Finds image windows whose color histogram is close to a template."""

    def __init__(
        self,
        template: Sequence[float],
        config: Optional[ScanConfig] = None,
        max_workers: int = SystemConstants.THREAD_POOL_SIZE,
    ):
        """
        Initialize scanner.

        Args:
            template: Normalized 64-bin histogram to look for
            config: Scan parameters (defaults if None)
            max_workers: Worker threads for one window size

        Raises:
            ValueError: If the template does not have 64 bins
        """
        if len(template) != HistogramConstants.BIN_COUNT:
            raise ValueError(
                f"Template must have {HistogramConstants.BIN_COUNT} bins, got {len(template)}"
            )
        self.template = list(template)
        self.config = config or ScanConfig()
        self.max_workers = max_workers

    def window_sizes(self, width: int, height: int) -> List[tuple]:
        """All (window_width, window_height) pairs in scan order, largest first."""
        step = self.config.window_step
        widths = range(width - 1, self.config.min_window, -step)
        heights = range(height - 1, self.config.min_window, -step)
        return [(w, h) for w in widths for h in heights]

    def find_matches(self, buffer: PixelBuffer) -> List[WindowMatch]:
        """
        Scan every window size and keep windows close to the template.

        A window is not kept when an already kept window contains it.

        Returns:
            Kept windows, largest size first, then by position
        """
        matches: List[WindowMatch] = []
        lock = threading.Lock()
        column_step = buffer.width // self.config.position_divisions
        row_step = buffer.height // self.config.position_divisions

        def scan_column(column: int, width: int, height: int) -> None:
            for row in stepped_range(0, buffer.height - height, row_step):
                window = buffer.crop(column, row, width, height)
                distance = bin_distance(color_bins(window, normalize=True), self.template)
                if distance > self.config.distance_threshold:
                    continue

                rect = Rect(x=column, y=row, width=width, height=height)
                with lock:
                    if not any(match.rect.contains(rect) for match in matches):
                        matches.append(WindowMatch(rect=rect, distance=distance))

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="scan") as executor:
            for width, height in self.window_sizes(buffer.width, buffer.height):
                columns = stepped_range(0, buffer.width - width, column_step)
                futures = [executor.submit(scan_column, c, width, height) for c in columns]
                for future in futures:
                    future.result()

        # Completion order within a size depends on scheduling
        matches.sort(key=lambda m: (-m.rect.width, -m.rect.height, m.rect.x, m.rect.y))
        return matches

    def scan(self, buffer: PixelBuffer) -> List[Rect]:
        """
        Find template-like regions.

        Returns:
            Merged rectangles of the kept windows
        """
        with timer() as t:
            matches = self.find_matches(buffer)
            regions = merge_significant_intersections(
                [match.rect for match in matches], self.config.overlap_fraction
            )

        logger.info(
            f"Window scan of {buffer.width}x{buffer.height}: {len(matches)} window(s), "
            f"{len(regions)} region(s) in {t['ms']}ms"
        )
        return regions
