"""
Dark-blob detection using OpenCV connected components.

The image is converted to grayscale and inverse-thresholded so dark objects
on a light background become foreground. Components that are too small, or
whose bounding box covers almost the whole image, are ignored. Each
remaining blob is reported with its bounding box, centroid, area and the
angle of its principal axis from central image moments.
"""

import logging
import math
from typing import List, Optional

import cv2
import numpy as np

from pixelblob.common.base import Point, Rect
from pixelblob.config import BlobDetectionConfig
from pixelblob.core.buffer import PixelBuffer
from pixelblob.image.converters import to_grayscale_ndarray
from pixelblob.schemas.vision import BlobCandidate

logger = logging.getLogger(__name__)


def blob_angle(mu11: float, mu20: float, mu02: float) -> float:
    """Principal axis angle in radians: ``0.5 * atan2(2 * mu11, mu20 - mu02)``."""
    return 0.5 * math.atan2(2.0 * mu11, mu20 - mu02)


class BlobDetector:
    """Finds dark blobs for the auxiliary crop-and-orient step."""

    def __init__(self, config: Optional[BlobDetectionConfig] = None):
        """
        Initialize blob detector.

        Args:
            config: Detection parameters (defaults if None)
        """
        self.config = config or BlobDetectionConfig()

    def detect(self, buffer: PixelBuffer) -> List[BlobCandidate]:
        """
        Detect dark blobs.

        Args:
            buffer: Image to analyze

        Returns:
            Blob candidates in component order
        """
        gray = to_grayscale_ndarray(buffer)
        _, binary = cv2.threshold(gray, self.config.gray_threshold, 255, cv2.THRESH_BINARY_INV)
        count, labels, stats, centroids = cv2.connectedComponentsWithStats(binary, connectivity=8)

        image_area = buffer.width * buffer.height
        candidates: List[BlobCandidate] = []

        # Label 0 is the background
        for label in range(1, count):
            x, y, w, h, area = (int(v) for v in stats[label])
            if area <= self.config.min_area:
                continue
            if w * h >= image_area * self.config.max_bounding_box_fraction:
                continue

            mask = (labels == label).astype(np.uint8)
            moments = cv2.moments(mask, binaryImage=True)
            angle = blob_angle(moments["mu11"], moments["mu20"], moments["mu02"])

            cx, cy = centroids[label]
            candidates.append(
                BlobCandidate(
                    bounding_box=Rect(x=x, y=y, width=w, height=h),
                    centroid=Point(x=float(cx), y=float(cy)),
                    area=area,
                    angle=math.degrees(angle),
                )
            )

        logger.debug(f"Detected {len(candidates)} blob(s) among {count - 1} component(s)")
        return candidates

    def crop(self, buffer: PixelBuffer, candidate: BlobCandidate) -> PixelBuffer:
        """
        Crop a candidate's bounding box grown by the configured margin,
        clipped to the image.
        """
        margin = self.config.crop_margin
        box = candidate.bounding_box
        x1, y1 = max(0, box.x - margin), max(0, box.y - margin)
        x2 = min(buffer.width, box.x2 + margin)
        y2 = min(buffer.height, box.y2 + margin)
        return buffer.crop(x1, y1, x2 - x1, y2 - y1)
