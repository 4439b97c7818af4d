"""
utils.config: Pipeline settings and config file loading
"""
import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml  # safe_load only

from imaging.errors import ConfigError
from imaging.transform import DEFAULT_JPEG_QUALITY, DEFAULT_MIN_RESOLUTION, DEFAULT_TARGET_SIZE


@dataclass(frozen=True)
class PipelineConfig:
    """Settings shared by every image in a batch."""

    input_dir: Path = Path("process-images")
    output_dir: Path = Path("processed-images")
    min_resolution: int = DEFAULT_MIN_RESOLUTION
    target_size: int = DEFAULT_TARGET_SIZE
    jpeg_quality: int = DEFAULT_JPEG_QUALITY
    force_jpeg_extension: bool = False
    num_workers: int = 0

    def __post_init__(self):
        # Config files may hold plain strings for paths
        for name in ("input_dir", "output_dir"):
            value = getattr(self, name)
            if not isinstance(value, (str, Path)) or not str(value):
                raise ConfigError(f"{name} must be a path, got {value!r}")
            object.__setattr__(self, name, Path(value))

        if not isinstance(self.force_jpeg_extension, bool):
            raise ConfigError(
                f"force_jpeg_extension must be true or false, got {self.force_jpeg_extension!r}"
            )

        for name in ("min_resolution", "target_size", "jpeg_quality", "num_workers"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer, got {value!r}")

        if self.min_resolution <= 0:
            raise ConfigError(f"min_resolution must be positive, got {self.min_resolution}")
        if self.target_size <= 0:
            raise ConfigError(f"target_size must be positive, got {self.target_size}")
        if not 1 <= self.jpeg_quality <= 100:
            raise ConfigError(f"jpeg_quality must be between 1 and 100, got {self.jpeg_quality}")
        if self.num_workers < 0:
            raise ConfigError(f"num_workers must be >= 0, got {self.num_workers}")

    @classmethod
    def from_mapping(cls, values: Dict[str, Any]) -> "PipelineConfig":
        """Build a config from a dict, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        return cls(**values)

    def merged(self, overrides: Dict[str, Any]) -> "PipelineConfig":
        """Return a copy with every non-None override applied."""
        updates = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **updates)


def load_config_file(path: Path) -> Dict[str, Any]:
    """
    Read a YAML (.yml/.yaml) or JSON config file.

    Returns:
        The top-level mapping; an empty file yields an empty dict
    """
    path = Path(path)
    if path.suffix not in {".yml", ".yaml", ".json"}:
        raise ConfigError(f"Unsupported config format: {path.suffix or path.name}")

    with open(path) as f:
        try:
            cfg = yaml.safe_load(f) if path.suffix in {".yml", ".yaml"} else json.load(f)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigError(f"Could not parse {path}: {e}") from e

    if cfg is None:
        cfg = {}
    if not isinstance(cfg, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    logging.info(f"Loaded configuration from {path}")
    return cfg


def build_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> PipelineConfig:
    """Defaults, then the config file, then command-line overrides."""
    cfg = PipelineConfig()
    if config_path:
        cfg = PipelineConfig.from_mapping(load_config_file(config_path))
    if overrides:
        cfg = cfg.merged(overrides)
    return cfg
