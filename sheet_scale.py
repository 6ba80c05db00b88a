"""
Sheet calibration and orientation.

The Scale is computed once per sheet by the calibration stage and is shared
read-only by every filament of that sheet.
"""

from dataclasses import dataclass
from enum import Enum


class Orientation(str, Enum):
    """Dominant direction of a filament or of the runs of a section"""

    HORIZONTAL = "horizontal"   # staff line candidates, coord is x
    VERTICAL = "vertical"       # bar line candidates, coord is y

    def point(self, coord, pos):
        """Build an (x, y) point from a (coord, pos) pair"""
        if self is Orientation.HORIZONTAL:
            return (coord, pos)
        return (pos, coord)


@dataclass(frozen=True)
class Scale:
    """Document-wide calibration constants, in pixels"""

    interline: float   # distance between two staff lines
    main_fore: float   # most frequent foreground run thickness

    def __post_init__(self):
        if not self.interline > 0:
            raise ValueError(f"interline must be positive, got {self.interline}")
        if not self.main_fore > 0:
            raise ValueError(f"main_fore must be positive, got {self.main_fore}")

    def to_pixels(self, ratio):
        """Convert an interline fraction into a pixel count.

        Args:
            ratio (float): Fraction of interline

        Returns:
            float: Pixel value
        """
        return ratio * self.interline

    def get_description(self):
        return f"Scale(interline={self.interline}px, main_fore={self.main_fore}px)"
