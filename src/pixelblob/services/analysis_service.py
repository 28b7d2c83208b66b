"""
Analysis Service - orchestration of the pixel algorithms for one image.

This service wires configuration into the labeler, the gradient pipeline, the
histogram functions and the OpenCV collaborators. Every call works on a clone
of the caller's buffer, so inputs are never modified.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from pixelblob.algorithms.blob_metrics import compute_blob_metrics
from pixelblob.algorithms.color_histogram import (
    bin_distance,
    color_bins,
    color_bins_within_blob,
)
from pixelblob.algorithms.convolution import gaussian_blur
from pixelblob.algorithms.region_labeling import LabelingResult, RegionLabeler
from pixelblob.common.base import Rect
from pixelblob.config import Settings, get_settings
from pixelblob.core.buffer import PixelBuffer
from pixelblob.exceptions import PixelBlobException
from pixelblob.image.converters import decode_image_file, resize_to_fit, rotate
from pixelblob.image.preprocessing import gradient_pipeline
from pixelblob.image.transform import (
    blacken_all_but_color_and_white,
    central_blob_color,
    flip_if_top_heavy,
    threshold,
)
from pixelblob.schemas.results import BlobMetrics
from pixelblob.utils import timer
from pixelblob.vision.blob_detection import BlobDetector

from .window_scanner import WindowScanner

logger = logging.getLogger(__name__)


class AnalysisService:
    """
    Service for per-image blob analysis.

    Combines thresholding, region labeling, shape metrics, gradient maps and
    color histograms behind one configured entry point.
    """

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize analysis service.

        Args:
            settings: Configuration (cached global settings if None)
        """
        self.settings = settings or get_settings()
        self.labeler = RegionLabeler(
            tie_break=self.settings.labeling.tie_break,
            palette_seed=self.settings.labeling.palette_seed,
        )
        self.blob_detector = BlobDetector(self.settings.blob_detection)

    def load_image(self, path: Union[str, Path], resize: bool = True) -> PixelBuffer:
        """
        Decode an image file, optionally scaling it to fit the configured box.
        """
        buffer = decode_image_file(path)
        if resize:
            buffer = resize_to_fit(buffer, self.settings.blob_detection.resize_box)
        return buffer

    def label_regions(
        self, buffer: PixelBuffer, threshold_value: Optional[int] = None
    ) -> Tuple[PixelBuffer, LabelingResult]:
        """
        Color the connected foreground regions of a copy of ``buffer``.

        Args:
            buffer: Source buffer; white is background
            threshold_value: Binarize on the blue channel first when given

        Returns:
            Tuple of (labeled_copy, labeling_result)
        """
        work = buffer.clone()
        if threshold_value is not None:
            threshold(work, threshold_value)
        result = self.labeler.label(work)
        logger.debug(f"Labeled {result.region_count} region(s), {result.merges} merge(s)")
        return work, result

    def analyze_blobs(
        self, buffer: PixelBuffer, threshold_value: Optional[int] = None
    ) -> List[BlobMetrics]:
        """
        Label the buffer and compute shape metrics for every region.

        Args:
            buffer: Source buffer
            threshold_value: Threshold applied before labeling; defaults to the
                configured gradient threshold

        Returns:
            One BlobMetrics per region, in label order

        Raises:
            EmptyRegionError, UnclosedBoundaryError: If any region fails; no
                partial result is returned
        """
        if threshold_value is None:
            threshold_value = self.settings.gradient.threshold

        with timer() as t:
            labeled, result = self.label_regions(buffer, threshold_value)
            metrics = []
            for color in result.colors:
                try:
                    metrics.append(compute_blob_metrics(labeled, color))
                except PixelBlobException as e:
                    logger.warning(f"Metrics failed for region {color}: {e.message}")
                    raise

        logger.info(f"Analyzed {len(metrics)} blob(s) in {t['ms']}ms")
        return metrics

    def gradient_map(self, buffer: PixelBuffer) -> PixelBuffer:
        """Run the configured gradient pipeline on a copy of ``buffer``."""
        pipeline = gradient_pipeline(self.settings.gradient)
        with timer() as t:
            result, applied = pipeline.process(buffer)
        logger.info(f"Gradient map ({len(applied)} steps) in {t['ms']}ms")
        return result

    def blur(self, buffer: PixelBuffer, radius: Optional[int] = None) -> PixelBuffer:
        """Blurred copy of ``buffer`` (configured radius if None)."""
        if radius is None:
            radius = self.settings.convolution.radius
        return gaussian_blur(buffer.clone(), radius)

    def region_histogram(
        self,
        buffer: PixelBuffer,
        mask: Optional[PixelBuffer] = None,
        normalize: bool = True,
    ) -> List[float]:
        """
        Color histogram of the whole buffer, or only of the pixels a thresholded
        ``mask`` marks as object (blue channel 0).
        """
        if mask is None:
            return color_bins(buffer, normalize)
        return color_bins_within_blob(buffer, mask, normalize)

    def compare_to_template(
        self,
        buffer: PixelBuffer,
        template: Sequence[float],
        mask: Optional[PixelBuffer] = None,
    ) -> float:
        """Histogram distance between the buffer (or its masked blob) and a template."""
        return bin_distance(self.region_histogram(buffer, mask, normalize=True), template)

    def find_template_windows(self, buffer: PixelBuffer, template: Sequence[float]) -> List[Rect]:
        """Regions whose color histogram is close to ``template``."""
        scanner = WindowScanner(
            template,
            config=self.settings.scan,
            max_workers=self.settings.system.worker_threads,
        )
        return scanner.scan(buffer)

    def isolate_blobs(self, buffer: PixelBuffer) -> List[PixelBuffer]:
        """
        Cut each detected dark blob out of ``buffer`` as an upright mask.

        For every blob candidate the margin-padded crop is rotated onto its
        principal axis, thresholded and labeled; the region crossing the middle
        row is kept and everything else that is not white turns black. The
        result is rotated half a turn when the region is top-heavy.

        Returns:
            One buffer per candidate that has a central region
        """
        isolated = []
        for candidate in self.blob_detector.detect(buffer):
            cropped = self.blob_detector.crop(buffer, candidate)
            upright = rotate(cropped, -candidate.angle, fill=255)
            labeled, _ = self.label_regions(upright, self.settings.gradient.threshold)

            color = central_blob_color(labeled)
            if color is None:
                logger.debug(f"No central region in blob at {candidate.bounding_box.to_dict()}")
                continue

            blacken_all_but_color_and_white(labeled, color)
            isolated.append(flip_if_top_heavy(labeled, color))

        logger.info(f"Isolated {len(isolated)} blob(s)")
        return isolated
