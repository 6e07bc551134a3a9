"""
Base data models - fundamental types without dependencies.

This module contains basic Pydantic models used throughout the system:
- Point: 2D point with x, y coordinates
- Rect: pixel rectangle with the geometric helpers used for cropping and placement

IMPORTANT: This module must NOT import from schemas, core, services, or api
to avoid circular dependencies.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from pydantic import AliasChoices, BaseModel, Field


class Point(BaseModel):
    """2D Point"""

    x: float
    y: float

    def as_int(self) -> Tuple[int, int]:
        """Round to integer pixel coordinates."""
        return (int(round(self.x)), int(round(self.y)))


class Rect(BaseModel):
    """
    Pixel rectangle.

    Unlike a crop region, a placement rectangle may start at negative
    coordinates or run past the canvas; use ``clip`` to get the visible part.
    Accepts ``w``/``h`` as shorthands for width/height.
    """

    x: int = Field(..., description="Left coordinate")
    y: int = Field(..., description="Top coordinate")
    width: int = Field(..., validation_alias=AliasChoices("width", "w"), description="Width")
    height: int = Field(..., validation_alias=AliasChoices("height", "h"), description="Height")

    def to_dict(self) -> Dict[str, int]:
        """Convert to dictionary."""
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_points(cls, x1: int, y1: int, x2: int, y2: int) -> "Rect":
        """Create Rect from two corner points."""
        return cls(x=min(x1, x2), y=min(y1, y2), width=abs(x2 - x1), height=abs(y2 - y1))

    @property
    def x2(self) -> int:
        """Get right edge coordinate."""
        return self.x + self.width

    @property
    def y2(self) -> int:
        """Get bottom edge coordinate."""
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def intersects(self, other: "Rect") -> bool:
        """Check if this Rect intersects with another."""
        return not (
            self.x2 <= other.x or other.x2 <= self.x or self.y2 <= other.y or other.y2 <= self.y
        )

    def intersection(self, other: "Rect") -> Optional["Rect"]:
        """Get intersection with another Rect, or None if no intersection."""
        if self.is_empty or other.is_empty or not self.intersects(other):
            return None

        x1 = max(self.x, other.x)
        y1 = max(self.y, other.y)
        x2 = min(self.x2, other.x2)
        y2 = min(self.y2, other.y2)

        return Rect.from_points(x1, y1, x2, y2)

    def clip(self, image_width: int, image_height: int) -> Optional["Rect"]:
        """
        Clip Rect to image bounds.

        Args:
            image_width: Canvas width
            image_height: Canvas height

        Returns:
            Visible part of the rectangle, or None if nothing is visible
        """
        return self.intersection(Rect(x=0, y=0, width=image_width, height=image_height))
