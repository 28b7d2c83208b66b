"""
Result models produced by the pixel algorithms and the window scanner.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from pixelblob.common.base import Point, Rect
from pixelblob.core.color import Color


class BlobMetrics(BaseModel):
    """Shape descriptors of one labeled region. Immutable once computed."""

    model_config = ConfigDict(frozen=True)

    color: Color = Field(..., description="Label color of the region")
    area: int = Field(..., gt=0, description="Pixel count")
    centroid: Point = Field(..., description="Mean (column, row) of the region's pixels")
    second_row_moment: float
    second_mixed_moment: float
    second_column_moment: float
    max_inertia: float
    min_inertia: float
    circularity: float = Field(
        ..., description="Mean radial distance over its standard deviation (inf when the deviation is 0)"
    )
    perimeter: float = Field(..., ge=0, description="Boundary length, diagonal steps weigh 1.4")

    def report_lines(self) -> List[str]:
        """Human-readable summary, one value per line, rounded to one decimal."""
        return [
            f"Blob Color: {self.color}",
            f"Area: {self.area} px",
            f"Centroid: ({round(self.centroid.x, 1)}, {round(self.centroid.y, 1)})",
            f"Second-Order Row Moment: {round(self.second_row_moment, 1)}",
            f"Second-Order Mixed Moment: {round(self.second_mixed_moment, 1)}",
            f"Second-Order Column Moment: {round(self.second_column_moment, 1)}",
            f"Max Inertia: {round(self.max_inertia, 1)}",
            f"Min Inertia: {round(self.min_inertia, 1)}",
            f"Circularity: {round(self.circularity, 1)}",
            f"Perimeter/Circumference: {round(self.perimeter, 1)} px",
        ]


class WindowMatch(BaseModel):
    """A scanned window whose histogram is close to the template."""

    model_config = ConfigDict(frozen=True)

    rect: Rect
    distance: float = Field(..., ge=0, description="Histogram distance to the template")
