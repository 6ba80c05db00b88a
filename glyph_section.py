"""
Section: a set of connected foreground runs, as produced by raster analysis.

Runs lie on consecutive positions (rows for horizontal runs, columns for
vertical ones). A filament only references its sections and never mutates
them.
"""

from dataclasses import dataclass
from functools import cached_property
from typing import Tuple

import numpy as np

from sheet_scale import Orientation

Run = Tuple[int, int]  # (start, length)


@dataclass(frozen=True, eq=False)
class Section:
    """Immutable run sequence, compared by identity"""

    id: int
    orientation: Orientation
    first_pos: int
    runs: Tuple[Run, ...]

    def __post_init__(self):
        runs = tuple((int(start), int(length)) for start, length in self.runs)
        if not runs:
            raise ValueError(f"Section #{self.id} has no run")
        for start, length in runs:
            if length <= 0:
                raise ValueError(f"Section #{self.id} has a run of length {length} at {start}")
        object.__setattr__(self, "runs", runs)
        object.__setattr__(self, "orientation", Orientation(self.orientation))

    @classmethod
    def from_runs(cls, section_id, first_pos, runs, orientation=Orientation.HORIZONTAL):
        return cls(section_id, orientation, first_pos, tuple(runs))

    @property
    def weight(self):
        """Number of foreground pixels"""
        return sum(length for _, length in self.runs)

    @property
    def start_coord(self):
        return min(start for start, _ in self.runs)

    @property
    def stop_coord(self):
        """Last covered coordinate (inclusive)"""
        return max(start + length for start, length in self.runs) - 1

    @property
    def last_pos(self):
        return self.first_pos + len(self.runs) - 1

    @property
    def bounds(self):
        """Bounding box as (x, y, width, height)"""
        coord_span = self.stop_coord - self.start_coord + 1
        pos_span = self.last_pos - self.first_pos + 1
        if self.orientation is Orientation.HORIZONTAL:
            return (self.start_coord, self.first_pos, coord_span, pos_span)
        return (self.first_pos, self.start_coord, pos_span, coord_span)

    @cached_property
    def _pixel_arrays(self):
        coords = np.concatenate([np.arange(start, start + length) for start, length in self.runs])
        lengths = np.array([length for _, length in self.runs])
        positions = np.repeat(np.arange(self.first_pos, self.first_pos + len(self.runs)), lengths)
        coords.flags.writeable = False
        positions.flags.writeable = False
        return coords, positions

    def pixels(self):
        """Report the section pixels.

        Returns:
            tuple: (coords, positions) read-only numpy arrays, one entry per pixel
        """
        return self._pixel_arrays

    @property
    def centroid(self):
        """Pixel barycenter as an (x, y) point"""
        coords, positions = self.pixels()
        return self.orientation.point(float(coords.mean()), float(positions.mean()))

    def __repr__(self):
        x, y, w, h = self.bounds
        return f"Section#{self.id}[{self.orientation.value} x={x} y={y} w={w} h={h} weight={self.weight}]"
