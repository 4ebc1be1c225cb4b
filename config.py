from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG_PATH = "photo_dedup.yaml"
DEFAULT_OUTPUT_SUBDIR = "duplicates"


@dataclass
class DetectionConfig:
    """Defaults for duplicate detection"""
    thumbnail_size: int = 200
    n_workers: int = 1
    best_effort: bool = False  # False: first failed move aborts the run


@dataclass
class SystemConfig:
    """Tool-wide defaults, read from YAML"""
    log_level: str = "INFO"
    log_dir: Optional[str] = None
    show_progress: bool = False

    detection: DetectionConfig = field(default_factory=DetectionConfig)

    def save(self, path: str = DEFAULT_CONFIG_PATH):
        """Save configuration to YAML file"""
        config_dict = {
            'log_level': self.log_level,
            'log_dir': self.log_dir,
            'show_progress': self.show_progress,
            'detection': {
                'thumbnail_size': self.detection.thumbnail_size,
                'n_workers': self.detection.n_workers,
                'best_effort': self.detection.best_effort
            }
        }

        with open(path, 'w') as f:
            yaml.dump(config_dict, f, default_flow_style=False, indent=2)

    @classmethod
    def load(cls, path: str = DEFAULT_CONFIG_PATH) -> 'SystemConfig':
        """Load configuration from YAML file"""
        if not Path(path).exists():
            return cls()  # Return default config

        with open(path, 'r') as f:
            config_dict = yaml.safe_load(f) or {}

        config = cls()

        config.log_level = config_dict.get('log_level', config.log_level)
        config.log_dir = config_dict.get('log_dir', config.log_dir)
        config.show_progress = config_dict.get('show_progress', config.show_progress)

        if 'detection' in config_dict:
            dd = config_dict['detection'] or {}
            config.detection = DetectionConfig(
                thumbnail_size=dd.get('thumbnail_size', config.detection.thumbnail_size),
                n_workers=dd.get('n_workers', config.detection.n_workers),
                best_effort=dd.get('best_effort', config.detection.best_effort)
            )

        return config


@dataclass(frozen=True)
class ScanConfig:
    """
    Settings for a single detection run. Immutable once built.

    `output_dir` falls back to `<input_dir>/duplicates`.
    """
    input_dir: str
    output_dir: Optional[str] = None
    thumbnail_size: int = 200
    verbose: bool = False
    n_workers: int = 1
    best_effort: bool = False
    dry_run: bool = False
    show_progress: bool = False

    def __post_init__(self):
        if not isinstance(self.thumbnail_size, int) or self.thumbnail_size <= 0:
            raise ValueError(f"thumbnail_size must be a positive integer, got {self.thumbnail_size!r}")
        if not isinstance(self.n_workers, int) or self.n_workers < 1:
            raise ValueError(f"n_workers must be at least 1, got {self.n_workers!r}")
        if not self.output_dir:
            # frozen dataclass, so bypass __setattr__
            object.__setattr__(
                self, 'output_dir', str(Path(self.input_dir) / DEFAULT_OUTPUT_SUBDIR)
            )

    @classmethod
    def from_system(cls, system: SystemConfig, input_dir: str, **overrides) -> 'ScanConfig':
        """Build a run config from file defaults, letting explicit values win"""
        values = {
            'thumbnail_size': system.detection.thumbnail_size,
            'n_workers': system.detection.n_workers,
            'best_effort': system.detection.best_effort,
            'show_progress': system.show_progress
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(input_dir=input_dir, **values)
