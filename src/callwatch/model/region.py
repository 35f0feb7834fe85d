"""Region - rectangular area on the device screen."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Region:
    """Represents a rectangular area on the screen.

    Defined by the top-left corner and width/height, in device pixels.
    UI nodes report their on-screen bounds as a Region and tap coordinates are
    derived from its centre.
    """

    x: int = 0
    """X coordinate of top-left corner."""

    y: int = 0
    """Y coordinate of top-left corner."""

    width: int = 0
    """Width of the region."""

    height: int = 0
    """Height of the region."""

    @classmethod
    def from_bounds(cls, left: int, top: int, right: int, bottom: int) -> Region:
        """Create a region from edge coordinates (Android ``Rect`` style).

        Args:
            left: Left edge
            top: Top edge
            right: Right edge
            bottom: Bottom edge

        Returns:
            New Region
        """
        return cls(x=left, y=top, width=right - left, height=bottom - top)

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def center_x(self) -> int:
        return self.x + self.width // 2

    @property
    def center_y(self) -> int:
        return self.y + self.height // 2

    @property
    def center(self) -> tuple[int, int]:
        """Get the centre point as ``(x, y)``."""
        return self.center_x, self.center_y

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def contains_point(self, x: int, y: int) -> bool:
        """Check if a point lies inside this region (edges inclusive on the top-left)."""
        return self.x <= x < self.right and self.y <= y < self.bottom

    def __str__(self) -> str:
        return f"[{self.x},{self.y} {self.width}x{self.height}]"
