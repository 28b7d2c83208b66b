"""
Vision collaborators built on OpenCV: keypoint matching and blob detection.
"""

from .blob_detection import BlobDetector, blob_angle
from .feature_matching import FeatureMatcher

__all__ = ["BlobDetector", "FeatureMatcher", "blob_angle"]
