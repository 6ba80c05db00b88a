"""
Tunable parameters of filament fitting and merging, as scale-relative ratios.
"""

from dataclasses import asdict, dataclass, fields
from pathlib import Path

import yaml


@dataclass
class FilamentConfig:
    """Configuration parameters for filament fitting and merging using relative ratios"""

    # Alignment fitting ratios (fraction of interline)
    probe_width_ratio: float = 0.5                 # Width of each sampling slice

    # Merge ratios
    max_resulting_thickness_ratio: float = 1.5     # Accepted merged thickness, x main_fore
    max_gap_ratio: float = 1.0                     # Coordinate gap allowed between candidates

    # Discard ratios (fraction of interline)
    min_true_length_ratio: float = 2.0             # Filaments shorter than this are noise

    def __post_init__(self):
        """Validate configuration parameters"""
        if self.probe_width_ratio <= 0:
            raise ValueError("probe_width_ratio must be positive")
        if self.max_resulting_thickness_ratio < 1.0:
            raise ValueError("max_resulting_thickness_ratio must be at least 1.0")
        if self.max_gap_ratio < 0:
            raise ValueError("max_gap_ratio cannot be negative")
        if self.min_true_length_ratio < 0:
            raise ValueError("min_true_length_ratio cannot be negative")

    @classmethod
    def create_strict_config(cls):
        """Create configuration for strict merging (fewer false merges)"""
        return cls(
            max_resulting_thickness_ratio=1.2,
            max_gap_ratio=0.5,
            min_true_length_ratio=3.0
        )

    @classmethod
    def create_relaxed_config(cls):
        """Create configuration for relaxed merging (broken lines on noisy scans)"""
        return cls(
            max_resulting_thickness_ratio=2.0,
            max_gap_ratio=2.0,
            min_true_length_ratio=1.0
        )

    @classmethod
    def from_yaml(cls, path):
        """Load a configuration from a YAML file.

        Missing keys keep their default value, unknown keys are rejected.

        Args:
            path (str or Path): YAML file path

        Returns:
            FilamentConfig: Loaded configuration
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Config {path} must hold a mapping, got {type(data).__name__}")

        known = {field.name for field in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys in {path}: {sorted(unknown)}")

        return cls(**{key: float(value) for key, value in data.items()})

    def to_yaml(self, path):
        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump(asdict(self), f, default_flow_style=False)

    def get_description(self):
        """Get human-readable description of current configuration"""
        return f"""Filament Configuration:
  Alignment:
    - Probe width ratio: {self.probe_width_ratio}

  Merge:
    - Max resulting thickness ratio: {self.max_resulting_thickness_ratio}
    - Max gap ratio: {self.max_gap_ratio}

  Discard:
    - Min true length ratio: {self.min_true_length_ratio}
"""
