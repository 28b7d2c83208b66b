"""
Models returned by the OpenCV collaborators.
"""

from typing import List

from pydantic import BaseModel, Field

from pixelblob.common.base import Point, Rect


class Keypoint(BaseModel):
    """Feature keypoint with its binary descriptor."""

    x: float
    y: float
    size: float = 0.0
    angle: float = -1.0
    response: float = 0.0
    descriptor: List[int] = Field(default_factory=list, description="Descriptor bytes")


class BlobCandidate(BaseModel):
    """Dark blob found by connected-component analysis of the thresholded image."""

    bounding_box: Rect
    centroid: Point
    area: int = Field(..., gt=0)
    angle: float = Field(..., description="Principal axis angle in degrees")
