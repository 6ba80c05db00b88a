"""
Filament: a long glyph that can be far from being a straight line.

It is used to handle candidate staff lines (horizontal filaments) and bar
lines (vertical filaments). A filament grows by absorbing sections and other
filaments; its geometry is fitted by an alignment model owned per filament
and recomputed whenever it is read after a membership change.
"""

import logging

from filament_alignment import FilamentAlignment
from filament_ancestry import FilamentArena
from filament_config import FilamentConfig
from filament_errors import DuplicateMemberError, EmptyFilamentError, PreconditionError, SelfIncludeError
from sheet_scale import Orientation

logger = logging.getLogger('Filaments.filament')


class Filament:
    def __init__(self, scale, orientation=Orientation.HORIZONTAL, arena=None,
                 alignment_class=FilamentAlignment, config=None):
        """Create a new empty Filament.

        Args:
            scale (Scale): Scaling data of the sheet
            orientation (Orientation): Dominant direction of the filament
            arena (FilamentArena): Arena of the sheet run, a private one if None
            alignment_class (type): Alignment model to fit the filament with
            config (FilamentConfig): Fitting parameters, default ones if None
        """
        config = config or FilamentConfig()
        self._scale = scale
        self.orientation = Orientation(orientation)
        self.arena = arena if arena is not None else FilamentArena()
        self._alignment = alignment_class(self.orientation, scale.to_pixels(config.probe_width_ratio))
        self._members = {}  # insertion ordered set of sections
        self._ref_distance = None
        self._dirty = True
        self.id = self.arena.register(self)

    @property
    def scale(self):
        return self._scale

    @property
    def members(self):
        """Sections included so far, in inclusion order"""
        return tuple(self._members)

    def __contains__(self, section):
        return section in self._members

    #------------#
    # Membership #
    #------------#

    def add_section(self, section, strict=True):
        """Append a section to this filament.

        Args:
            section (Section): Section to append, oriented as the filament
            strict (bool): If True, an already present section is an error,
                otherwise it is skipped

        Returns:
            bool: True if the section was actually appended
        """
        if section.orientation is not self.orientation:
            raise PreconditionError(
                f"Section #{section.id} is {section.orientation.value}, "
                f"filament #{self.id} is {self.orientation.value}")

        if section in self._members:
            if strict:
                raise DuplicateMemberError(self.id, section.id)
            return False

        self._members[section] = None
        self.invalidate_cache()
        return True

    def include(self, other):
        """Include a whole other filament into this one.

        The other filament keeps its own sections for traceability, but is
        dead from now on: its geometry is answered by its ancestor.

        Args:
            other (Filament): The filament to swallow
        """
        if other is self:
            raise SelfIncludeError(self.id)
        if other.arena is not self.arena:
            raise PreconditionError(f"Filaments #{self.id} and #{other.id} belong to different arenas")
        if other.orientation is not self.orientation:
            raise PreconditionError(f"Filaments #{self.id} and #{other.id} differ in orientation")

        self.arena.link(other.id, self.id)

        for section in other.members:
            self.add_section(section, strict=False)

        self.invalidate_cache()
        logger.debug(f"Filament #{self.id} included #{other.id}, now {len(self._members)} sections")

    def invalidate_cache(self):
        self._dirty = True
        self._ref_distance = None

    #----------#
    # Ancestry #
    #----------#

    @property
    def parent(self):
        """Filament which directly absorbed this one, None while alive"""
        parent_id = self.arena.parent_of(self.id)
        return None if parent_id is None else self.arena[parent_id]

    @property
    def is_dead(self):
        return not self.arena.is_representative(self.id)

    def ancestor(self):
        """Report the living filament this one has ended in"""
        return self.arena[self.arena.find(self.id)]

    def lineage(self):
        """Report the filaments from this one up to its ancestor"""
        return [self.arena[i] for i in self.arena.lineage(self.id)]

    def absorbed(self):
        """Report the filaments directly absorbed by this one"""
        return [self.arena[i] for i in self.arena.absorbed(self.id)]

    #---------------#
    # Ref distance  #
    #---------------#

    def set_ref_distance(self, ref_distance):
        """Remember the filament distance to reference axis.

        Args:
            ref_distance (float): Orthogonal distance to reference axis
        """
        if self.is_dead:
            raise PreconditionError(
                f"Filament #{self.id} is absorbed by {self.ancestor()!r}, set distance on the ancestor")
        self._ref_distance = ref_distance

    @property
    def ref_distance(self):
        """Distance of the living ancestor to reference axis, None if not set since last change"""
        return self.ancestor()._ref_distance

    #----------#
    # Geometry #
    #----------#

    def _get_alignment(self):
        target = self.ancestor()
        if target._dirty:
            target._alignment.compute(target._members)
            target._dirty = False
        if target._alignment.is_empty:
            raise EmptyFilamentError(target.id)
        return target._alignment

    def position_at(self, coord):
        """Report the precise filament position for the provided coordinate.

        Args:
            coord (float): x for horizontal filament, y for vertical filament

        Returns:
            float: y for horizontal filament, x for vertical filament
        """
        return self._get_alignment().position_at(coord)

    def slope_at(self, coord):
        return self._get_alignment().slope_at(coord)

    def thickness_at(self, coord):
        return self._get_alignment().thickness_at(coord)

    def start_point(self):
        return self._get_alignment().start_point()

    def stop_point(self):
        return self._get_alignment().stop_point()

    @property
    def start_coord(self):
        return self._get_alignment().start_coord

    @property
    def stop_coord(self):
        return self._get_alignment().stop_coord

    @property
    def length(self):
        """Number of coordinates spanned, gaps included"""
        alignment = self._get_alignment()
        return alignment.stop_coord - alignment.start_coord + 1

    def mean_distance(self):
        return self._get_alignment().mean_distance()

    @property
    def weight(self):
        """Total pixel count of the living ancestor"""
        return sum(section.weight for section in self.ancestor()._members)

    def resulting_thickness_at(self, other, coord):
        """Compute the thickness at provided coordinate of the potential merge
        between this and other filaments.

        Args:
            other (Filament): The other filament
            coord (float): The provided coordinate

        Returns:
            float: The resulting thickness
        """
        this_pos = self.position_at(coord)
        other_pos = other.position_at(coord)
        this_thickness = self.thickness_at(coord)
        other_thickness = other.thickness_at(coord)

        return abs(this_pos - other_pos) + (this_thickness + other_thickness) / 2

    def true_length(self):
        """Report an evaluation of how this filament is filled by sections.

        Returns:
            int: How solid this filament is
        """
        return int(round(self.weight / self._scale.main_fore))

    #-----------#
    # Reporting #
    #-----------#

    def __repr__(self):
        return f"Filament#{self.id}"

    def __str__(self):
        sb = [f"Filament#{self.id} {self.orientation.value} sections:{len(self._members)}"]

        if self.ancestor()._members:
            start = self.start_point()
            stop = self.stop_point()
            sb.append(f" start[x={start[0]:.0f},y={start[1]:.1f}]")
            sb.append(f" stop[x={stop[0]:.0f},y={stop[1]:.1f}]")
            sb.append(f" meanDist:{self.mean_distance():.2f}")

        if self.is_dead:
            sb.append(f" anc:{self.ancestor()!r}")

        if self.ref_distance is not None:
            sb.append(f" refDist:{self.ref_distance}")

        return "".join(sb)
