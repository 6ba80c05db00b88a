import cv2
import numpy as np
import pytest

from filament import Filament
from filament_ancestry import FilamentArena
from glyph_section import Section
from sheet_scale import Orientation, Scale


@pytest.fixture
def scale():
    return Scale(interline=20, main_fore=4)


@pytest.fixture
def arena():
    return FilamentArena()


@pytest.fixture
def section_ids():
    """Shared id counter so that sections of a test never collide"""
    return iter(range(10000))


@pytest.fixture
def band(section_ids):
    """Factory for a straight section: coords [start, stop] on `thickness` consecutive positions"""
    def make(start, stop, first_pos, thickness, orientation=Orientation.HORIZONTAL):
        runs = tuple((start, stop - start + 1) for _ in range(thickness))
        return Section(next(section_ids), orientation, first_pos, runs)
    return make


@pytest.fixture
def filament_factory(scale, arena):
    """Factory for filaments of the shared arena, seeded with sections"""
    def make(*sections, orientation=Orientation.HORIZONTAL):
        filament = Filament(scale, orientation, arena=arena)
        for section in sections:
            filament.add_section(section)
        return filament
    return make


def draw_curve(width, height, curve, thickness=3):
    """Rasterize pos = curve(coord) as a polyline into a {0,1} mask"""
    mask = np.zeros((height, width), dtype=np.uint8)
    points = np.array([[x, int(round(curve(x)))] for x in range(width)], dtype=np.int32)
    cv2.polylines(mask, [points.reshape(-1, 1, 2)], False, 1, thickness=thickness)
    return mask


def sections_from_mask(mask, chunk_width=10, first_id=0):
    """Cut a mask into horizontal sections, one per chunk of columns and group of consecutive rows"""
    sections = []
    next_id = first_id
    height, width = mask.shape

    for x0 in range(0, width, chunk_width):
        chunk = mask[:, x0:x0 + chunk_width]
        rows = np.flatnonzero(chunk.any(axis=1))
        if rows.size == 0:
            continue

        groups = np.split(rows, np.flatnonzero(np.diff(rows) > 1) + 1)
        for group in groups:
            runs = []
            for y in group:
                cols = np.flatnonzero(chunk[y])
                runs.append((x0 + int(cols[0]), int(cols[-1] - cols[0] + 1)))
            sections.append(Section(next_id, Orientation.HORIZONTAL, int(group[0]), tuple(runs)))
            next_id += 1

    return sections


@pytest.fixture
def curved_staff_line():
    """Sections of a gently curved staff line around y=100, 600 pixels wide"""
    def curve(x):
        return 100 + 0.0002 * (x - 300) ** 2

    mask = draw_curve(600, 200, curve)
    return curve, mask, sections_from_mask(mask)


@pytest.fixture
def mask_to_sections():
    return sections_from_mask
