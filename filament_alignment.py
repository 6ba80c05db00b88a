"""
Alignment models: continuous position, slope and thickness of a filament
along its coordinate axis (x for horizontal filaments, y for vertical ones).

Pixels of the member sections are cut into slices of probe width. Each slice
gives one sample: its pixel barycenter and its mean cross-section thickness.
FilamentAlignment runs a natural cubic spline through the samples, so that
slightly curved staff lines are followed; LineAlignment is a plain least
squares line, enough for short filaments or bar lines.
"""

import logging

import numpy as np
from scipy.interpolate import CubicSpline

from filament_errors import EmptyFilamentError
from sheet_scale import Orientation

logger = logging.getLogger('Filaments.alignment')


class Alignment:
    """Common sampling and query logic, subclasses provide the fitted curve"""

    def __init__(self, orientation=Orientation.HORIZONTAL, probe_width=10):
        self.orientation = Orientation(orientation)
        self.probe_width = max(1, int(round(probe_width)))
        self.reset()

    def reset(self):
        self.sample_coords = None
        self.sample_positions = None
        self.sample_thicknesses = None
        self.start_coord = None
        self.stop_coord = None
        self._mean_distance = None

    @property
    def is_empty(self):
        return self.sample_coords is None

    def compute(self, sections):
        """Fit the model on the pixels of the provided sections.

        Args:
            sections (iterable): Sections to fit, possibly empty
        """
        self.reset()
        sections = list(sections)
        if not sections:
            return

        coords = np.concatenate([s.pixels()[0] for s in sections])
        positions = np.concatenate([s.pixels()[1] for s in sections]).astype(float)

        c_min = int(coords.min())
        c_max = int(coords.max())
        bins = (coords - c_min) // self.probe_width
        n_bins = int(bins.max()) + 1

        counts = np.bincount(bins, minlength=n_bins)
        coord_sums = np.bincount(bins, weights=coords, minlength=n_bins)
        pos_sums = np.bincount(bins, weights=positions, minlength=n_bins)

        # Thickness is the mean pixel count over the inked coordinates of a slice
        inked = np.unique(coords)
        inked_counts = np.bincount((inked - c_min) // self.probe_width, minlength=n_bins)

        keep = counts > 0
        self.sample_coords = coord_sums[keep] / counts[keep]
        self.sample_positions = pos_sums[keep] / counts[keep]
        self.sample_thicknesses = counts[keep] / inked_counts[keep]
        self.start_coord = c_min
        self.stop_coord = c_max

        self._fit(coords, positions)

        distances = np.abs(positions - self._positions(coords.astype(float)))
        self._mean_distance = float(distances.mean())

        logger.debug(f"{type(self).__name__}: {len(sections)} sections, {len(coords)} pixels, "
                     f"{len(self.sample_coords)} samples over [{c_min}, {c_max}]")

    def _fit(self, coords, positions):
        raise NotImplementedError

    def _positions(self, coords):
        raise NotImplementedError

    def _slopes(self, coords):
        raise NotImplementedError

    def _check(self):
        if self.is_empty:
            raise EmptyFilamentError()

    def position_at(self, coord):
        """Report the precise position for the provided coordinate.

        Args:
            coord (float): x for horizontal filament, y for vertical filament

        Returns:
            float: y for horizontal filament, x for vertical filament
        """
        self._check()
        return float(self._positions(np.asarray(coord, dtype=float)))

    def slope_at(self, coord):
        """Report the local slope (d pos / d coord) at the provided coordinate"""
        self._check()
        return float(self._slopes(np.asarray(coord, dtype=float)))

    def thickness_at(self, coord):
        """Report the mean cross-section thickness around the provided coordinate.

        Beyond the sampled range, the thickness of the closest sample is used.
        """
        self._check()
        return float(np.interp(coord, self.sample_coords, self.sample_thicknesses))

    def start_point(self):
        self._check()
        return self.orientation.point(float(self.start_coord), self.position_at(self.start_coord))

    def stop_point(self):
        self._check()
        return self.orientation.point(float(self.stop_coord), self.position_at(self.stop_coord))

    def mean_distance(self):
        """Mean absolute distance of member pixels from the fitted curve"""
        self._check()
        return self._mean_distance


class LineAlignment(Alignment):
    """Least squares straight line through all member pixels"""

    def _fit(self, coords, positions):
        if np.unique(coords).size < 2:
            self.slope = 0.0
            self.intercept = float(positions.mean())
        else:
            slope, intercept = np.polyfit(coords.astype(float), positions, 1)
            self.slope = float(slope)
            self.intercept = float(intercept)

    def _positions(self, coords):
        return self.intercept + self.slope * coords

    def _slopes(self, coords):
        return np.full_like(coords, self.slope, dtype=float)


class FilamentAlignment(Alignment):
    """Natural cubic spline through slice samples, linear beyond the end samples"""

    def _fit(self, coords, positions):
        xs = self.sample_coords
        ys = self.sample_positions

        if len(xs) == 1:
            self._spline = None
            self._first_slope = self._last_slope = 0.0
        elif len(xs) == 2:
            self._spline = None
            slope = (ys[1] - ys[0]) / (xs[1] - xs[0])
            self._first_slope = self._last_slope = float(slope)
        else:
            self._spline = CubicSpline(xs, ys, bc_type='natural')
            derivative = self._spline.derivative()
            self._first_slope = float(derivative(xs[0]))
            self._last_slope = float(derivative(xs[-1]))

    def _positions(self, coords):
        xs = self.sample_coords
        ys = self.sample_positions

        before = ys[0] + self._first_slope * (coords - xs[0])
        after = ys[-1] + self._last_slope * (coords - xs[-1])

        if self._spline is None:
            inside = before
        else:
            inside = self._spline(np.clip(coords, xs[0], xs[-1]))

        return np.where(coords < xs[0], before, np.where(coords > xs[-1], after, inside))

    def _slopes(self, coords):
        xs = self.sample_coords

        if self._spline is None:
            inside = np.full_like(coords, self._first_slope, dtype=float)
        else:
            inside = self._spline.derivative()(np.clip(coords, xs[0], xs[-1]))

        return np.where(coords < xs[0], self._first_slope,
                        np.where(coords > xs[-1], self._last_slope, inside))
