#!/usr/bin/env python3
"""
Filaments - Scan and merge pass over the sections of one sheet.
This module seeds one filament per section, merges the filaments that are
fragments of the same physical line, and discards those too sparse to be
real staff lines or bar lines.
"""

import argparse
import json
import logging
import os
from datetime import datetime
from pathlib import Path

from filament import Filament
from filament_ancestry import FilamentArena
from filament_config import FilamentConfig
from filament_order import sorted_by_start
from glyph_section import Section
from sheet_scale import Orientation, Scale

logger = logging.getLogger('Filaments')


def setup_logger(logs_dir="logs"):
    """Setup logger to save debug messages to dated files in logs/ directory"""
    # Create logs directory if it doesn't exist
    if not os.path.exists(logs_dir):
        os.makedirs(logs_dir)

    logger = logging.getLogger('Filaments')

    # Only setup if not already configured
    if not logger.handlers:
        logger.setLevel(logging.DEBUG)

        current_date = datetime.now().strftime("%Y%m%d")
        log_filename = os.path.join(logs_dir, f"filaments_{current_date}.log")

        file_handler = logging.FileHandler(log_filename, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        file_handler.setFormatter(formatter)
        console_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        logger.addHandler(console_handler)

    return logger


class FilamentDetector:
    def __init__(self, scale, config=None, orientation=Orientation.HORIZONTAL):
        """Initialize the FilamentDetector.

        Args:
            scale (Scale): Calibration of the sheet
            config (FilamentConfig): Configuration for fitting and merging
            orientation (Orientation): Orientation of the filaments to detect
        """
        self.scale = scale
        self.config = config or FilamentConfig()
        self.orientation = Orientation(orientation)
        self.arena = FilamentArena()

    @property
    def max_resulting_thickness(self):
        return self.config.max_resulting_thickness_ratio * self.scale.main_fore

    @property
    def max_gap(self):
        return self.scale.to_pixels(self.config.max_gap_ratio)

    @property
    def min_true_length(self):
        return self.scale.to_pixels(self.config.min_true_length_ratio)

    def create_filament(self):
        return Filament(self.scale, self.orientation, arena=self.arena, config=self.config)

    def build_filaments(self, sections):
        """Seed one filament per section.

        Args:
            sections (iterable): Sections of the sheet, oriented as the detector

        Returns:
            list: New filaments, in section order
        """
        filaments = []
        for section in sections:
            filament = self.create_filament()
            filament.add_section(section)
            filaments.append(filament)

        logger.debug(f"Seeded {len(filaments)} {self.orientation.value} filaments")
        return filaments

    @staticmethod
    def junction_coord(f1, f2):
        """Coordinate where two filaments meet: middle of their gap or of their overlap"""
        lo = max(f1.start_coord, f2.start_coord)
        hi = min(f1.stop_coord, f2.stop_coord)
        return (lo + hi) / 2

    @staticmethod
    def coord_gap(f1, f2):
        """Coordinate gap between two filaments, negative when they overlap"""
        return max(f2.start_coord - f1.stop_coord, f1.start_coord - f2.stop_coord) - 1

    def find_merge_candidate(self, filament, others):
        """Find the best filament to merge with the provided one.

        Args:
            filament (Filament): Living filament
            others (iterable): Living filaments to evaluate

        Returns:
            tuple: (candidate, resulting thickness), or None if no acceptable candidate
        """
        best = None
        for other in others:
            if other is filament:
                continue
            if self.coord_gap(filament, other) > self.max_gap:
                continue

            thickness = filament.resulting_thickness_at(other, self.junction_coord(filament, other))
            if best is None or thickness < best[1]:
                best = (other, thickness)

        if best is None or best[1] > self.max_resulting_thickness:
            return None

        return best

    def merge_filaments(self, filaments):
        """Merge filaments until no acceptable candidate remains.

        The longer filament of a pair always absorbs the shorter one.

        Args:
            filaments (iterable): Filaments to merge

        Returns:
            list: Surviving filaments sorted by start
        """
        alive = sorted_by_start(f for f in filaments if not f.is_dead)
        merges = 0
        merged = True

        while merged:
            merged = False
            for filament in alive:
                if filament.is_dead:
                    continue

                others = [f for f in alive if f is not filament and not f.is_dead]
                candidate = self.find_merge_candidate(filament, others)
                if candidate is None:
                    continue

                other, thickness = candidate
                if filament.length >= other.length:
                    winner, loser = filament, other
                else:
                    winner, loser = other, filament

                logger.debug(f"Merging {loser!r} into {winner!r}, resulting thickness {thickness:.2f}")
                winner.include(loser)
                merges += 1
                merged = True

            alive = sorted_by_start(f for f in alive if not f.is_dead)

        logger.info(f"Performed {merges} merges, {len(alive)} filaments remain")
        return alive

    def detect(self, sections):
        """Detect filaments from the sections of a sheet.

        Args:
            sections (iterable): Sections of the sheet

        Returns:
            list: Solid enough filaments sorted by start
        """
        filaments = self.build_filaments(sections)
        merged = self.merge_filaments(filaments)
        kept = [f for f in merged if f.true_length() >= self.min_true_length]

        logger.info(f"Detected {len(kept)} {self.orientation.value} filaments "
                    f"({len(merged) - len(kept)} discarded as too sparse)")
        for filament in kept:
            logger.debug(f"  {filament}")

        return kept

    @staticmethod
    def summarize(filaments):
        """Build a JSON-ready description of filaments"""
        results = []
        for filament in filaments:
            results.append({
                'id': filament.id,
                'start': list(filament.start_point()),
                'stop': list(filament.stop_point()),
                'true_length': filament.true_length(),
                'mean_distance': filament.mean_distance(),
                'sections': [section.id for section in filament.members],
                'absorbed': [f.id for f in filament.absorbed()],
            })
        return results


def load_sections(path, orientation):
    """Load sections from a JSON file.

    Args:
        path (str): JSON file holding a list of {"id", "first_pos", "runs"}
        orientation (Orientation): Orientation of the runs

    Returns:
        list: Sections
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Sections not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    return [Section.from_runs(item['id'], item['first_pos'], item['runs'], orientation) for item in data]


def main(argv=None):
    parser = argparse.ArgumentParser(description='Detect filaments from the sections of a sheet')
    parser.add_argument('input', help='Path to the JSON sections file')
    parser.add_argument('--interline', type=float, required=True, help='Interline of the sheet in pixels')
    parser.add_argument('--main-fore', type=float, required=True, help='Main foreground thickness in pixels')
    parser.add_argument('--vertical', action='store_true', help='Detect vertical filaments (bar lines)')
    parser.add_argument('-o', '--output', help='Path to save the JSON results')
    parser.add_argument('-d', '--debug', action='store_true', help='Print the configuration in use')
    parser.add_argument('--config', help='YAML configuration file')
    parser.add_argument('--config-preset', choices=['default', 'strict', 'relaxed'], default='default',
                        help='Configuration preset: default (balanced), strict (fewer merges), relaxed (more merges)')

    args = parser.parse_args(argv)
    setup_logger()

    try:
        if args.config:
            config = FilamentConfig.from_yaml(args.config)
        elif args.config_preset == 'strict':
            config = FilamentConfig.create_strict_config()
        elif args.config_preset == 'relaxed':
            config = FilamentConfig.create_relaxed_config()
        else:
            config = FilamentConfig()

        if args.debug:
            logger.debug(config.get_description())

        orientation = Orientation.VERTICAL if args.vertical else Orientation.HORIZONTAL
        scale = Scale(args.interline, args.main_fore)
        sections = load_sections(args.input, orientation)
        logger.info(f"Loaded {len(sections)} sections from {args.input}, {scale.get_description()}")

        detector = FilamentDetector(scale, config, orientation)
        filaments = detector.detect(sections)
        results = detector.summarize(filaments)

        if args.output:
            output_path = Path(args.output)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, 'w', encoding='utf-8') as f:
                json.dump(results, f, indent=2)
            logger.info(f"Results saved to: {output_path}")
        else:
            print(json.dumps(results, indent=2))

    except Exception as e:
        logger.error(f"Error: {e}", exc_info=True)
        return 1

    return 0


if __name__ == "__main__":
    exit(main())
