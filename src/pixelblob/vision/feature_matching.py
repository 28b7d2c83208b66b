"""
Keypoint detection and matching using ORB features.

Provides the model-in-observed-image test used for auxiliary identification:
- ORB keypoint detection and binary descriptors
- BFMatcher kNN (k=2) with a uniqueness ratio test
- Acceptance by match count and matched share of observed keypoints
"""

import logging
from typing import List, Optional

import cv2
import numpy as np

from pixelblob.config import FeatureConfig
from pixelblob.core.buffer import PixelBuffer
from pixelblob.image.converters import to_grayscale_ndarray
from pixelblob.schemas.vision import Keypoint

logger = logging.getLogger(__name__)


class FeatureMatcher:
    """Model-image search with ORB keypoints."""

    def __init__(self, config: Optional[FeatureConfig] = None):
        """
        Initialize feature matcher.

        Args:
            config: Matching parameters (defaults if None)
        """
        self.config = config or FeatureConfig()
        self._orb = cv2.ORB_create(nfeatures=self.config.max_features)
        self._bf_matcher = cv2.BFMatcher(cv2.NORM_HAMMING, crossCheck=False)

    def detect_keypoints(self, buffer: PixelBuffer) -> List[Keypoint]:
        """
        Detect keypoints and compute their descriptors.

        Args:
            buffer: Image to analyze; converted to grayscale first

        Returns:
            Keypoints with descriptors (empty if none were found)
        """
        gray = to_grayscale_ndarray(buffer)
        keypoints, descriptors = self._orb.detectAndCompute(gray, None)
        if not keypoints or descriptors is None:
            logger.debug("No keypoints found")
            return []

        return [
            Keypoint(
                x=float(kp.pt[0]),
                y=float(kp.pt[1]),
                size=float(kp.size),
                angle=float(kp.angle),
                response=float(kp.response),
                descriptor=descriptor.tolist(),
            )
            for kp, descriptor in zip(keypoints, descriptors)
        ]

    def match_keypoints(self, model: List[Keypoint], observed: List[Keypoint]) -> int:
        """
        Count observed keypoints with a unique match among the model keypoints.

        A match is unique when its best distance is at most
        ``uniqueness_threshold`` times the second-best distance.

        Args:
            model: Keypoints of the model image
            observed: Keypoints of the observed image

        Returns:
            Number of unique matches
        """
        if len(model) < 2 or not observed:
            return 0

        model_descriptors = np.array([kp.descriptor for kp in model], dtype=np.uint8)
        observed_descriptors = np.array([kp.descriptor for kp in observed], dtype=np.uint8)

        matches = self._bf_matcher.knnMatch(observed_descriptors, model_descriptors, k=2)

        unique = 0
        for match_pair in matches:
            if len(match_pair) == 2:
                m, n = match_pair
                if m.distance <= self.config.uniqueness_threshold * n.distance:
                    unique += 1
        return unique

    def find_model(self, model_buffer: PixelBuffer, observed_buffer: PixelBuffer) -> bool:
        """
        Decide whether the model image appears in the observed image.

        Returns:
            True when there are at least ``min_match_count`` unique matches and
            they make up more than ``min_match_ratio`` of the observed keypoints
        """
        model = self.detect_keypoints(model_buffer)
        observed = self.detect_keypoints(observed_buffer)
        if not model or not observed:
            logger.debug(f"Insufficient keypoints: model={len(model)}, observed={len(observed)}")
            return False

        matched = self.match_keypoints(model, observed)
        ratio = matched / len(observed)
        logger.debug(f"{matched} unique matches over {len(observed)} observed keypoints")
        return matched >= self.config.min_match_count and ratio > self.config.min_match_ratio
