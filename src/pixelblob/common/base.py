"""
Base data models - fundamental types without dependencies.

This module contains basic Pydantic models used throughout the system:
- Point: 2D point with x, y coordinates
- Rect: axis-aligned rectangle with the geometric operations used by the
  window scanner and blob detection

IMPORTANT: This module must NOT import from core, algorithms, image, services
or vision to avoid circular dependencies.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .constants import ScanConstants


class Point(BaseModel):
    """2D Point"""

    x: float
    y: float


class Rect(BaseModel):
    """
    Axis-aligned rectangle in pixel coordinates.

    ``x``/``y`` is the top-left corner; ``x2``/``y2`` are exclusive edges.
    Instances are immutable so they can be collected into sets.
    """

    model_config = ConfigDict(frozen=True)

    x: int = Field(..., description="X coordinate")
    y: int = Field(..., description="Y coordinate")
    width: int = Field(..., ge=0, description="Width")
    height: int = Field(..., ge=0, description="Height")

    def to_dict(self) -> Dict[str, int]:
        """Convert to dictionary."""
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Rect":
        """Create Rect from dictionary."""
        return cls(
            x=int(data.get("x", 0)),
            y=int(data.get("y", 0)),
            width=int(data.get("width", 0)),
            height=int(data.get("height", 0)),
        )

    @property
    def x2(self) -> int:
        """Get right edge coordinate."""
        return self.x + self.width

    @property
    def y2(self) -> int:
        """Get bottom edge coordinate."""
        return self.y + self.height

    @property
    def area(self) -> int:
        """Get area of the rectangle in pixels."""
        return self.width * self.height

    def contains_point(self, x: int, y: int) -> bool:
        """Check if point is inside the rectangle."""
        return self.x <= x < self.x2 and self.y <= y < self.y2

    def contains(self, other: "Rect") -> bool:
        """Check if ``other`` lies entirely within this rectangle."""
        return (
            self.x <= other.x
            and self.y <= other.y
            and other.x2 <= self.x2
            and other.y2 <= self.y2
        )

    def intersects(self, other: "Rect") -> bool:
        """Check if the rectangles overlap or touch."""
        return (
            other.x <= self.x2
            and other.x2 >= self.x
            and other.y <= self.y2
            and other.y2 >= self.y
        )

    def intersection(self, other: "Rect") -> Optional["Rect"]:
        """
        Calculate intersection with another rectangle.

        Args:
            other: Other rectangle

        Returns:
            Intersection rectangle or None if no intersection
        """
        if not self.intersects(other):
            return None

        x1 = max(self.x, other.x)
        y1 = max(self.y, other.y)
        x2 = min(self.x2, other.x2)
        y2 = min(self.y2, other.y2)
        return Rect(x=x1, y=y1, width=x2 - x1, height=y2 - y1)

    def union(self, other: "Rect") -> "Rect":
        """Smallest rectangle enclosing both rectangles."""
        x1 = min(self.x, other.x)
        y1 = min(self.y, other.y)
        x2 = max(self.x2, other.x2)
        y2 = max(self.y2, other.y2)
        return Rect(x=x1, y=y1, width=x2 - x1, height=y2 - y1)

    def significantly_intersects(
        self, other: "Rect", overlap_fraction: float = ScanConstants.SIGNIFICANT_OVERLAP
    ) -> bool:
        """
        Check whether two rectangles describe substantially the same region.

        True when either rectangle contains the other, or when their overlap
        covers more than ``overlap_fraction`` of either rectangle's area.
        """
        if self.contains(other) or other.contains(self):
            return True

        overlap = self.intersection(other)
        if overlap is None:
            return False

        return (
            overlap.area > overlap_fraction * self.area
            or overlap.area > overlap_fraction * other.area
        )
