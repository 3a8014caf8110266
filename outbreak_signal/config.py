"""
Configuration loader for the Outbreak Signal Engine.
Loads YAML config and provides typed access to the engine settings.

The engine itself recognises exactly three options (``window``, ``lag`` and
``z``); every other section of the YAML file belongs to the experiment glue
(data paths, simulation, baseline choice, logging).
"""
import logging
import math
import numbers
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from outbreak_signal.common.errors import ConfigurationError
from outbreak_signal.common.paths import find_project_root

DEFAULT_Z = 2.0

SIGNAL_OPTIONS = ("window", "lag", "z")


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. Defaults to config/config_default.yaml

    Returns:
        Dictionary containing all configuration settings
    """
    if config_path is None:
        config_path = get_project_root() / "config" / "config_default.yaml"
    else:
        config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)

    return config or {}


def get_project_root() -> Path:
    """Get the project root directory."""
    return find_project_root(Path(__file__).parent.parent)


def get_data_path(relative_path: str) -> Path:
    """
    Get absolute path for a data file.

    Args:
        relative_path: Path relative to project root (e.g., "data/raw/file.csv")

    Returns:
        Absolute Path object
    """
    path = Path(relative_path)
    if path.is_absolute():
        return path
    return get_project_root() / path


def check_window(window: Any) -> int:
    if isinstance(window, bool) or not isinstance(window, numbers.Integral):
        raise ConfigurationError("window", window, "must be a positive integer")
    if window <= 0:
        raise ConfigurationError("window", window, "must be >= 1")
    return int(window)


def check_lag(lag: Any) -> int:
    if isinstance(lag, bool) or not isinstance(lag, numbers.Integral):
        raise ConfigurationError("lag", lag, "must be a positive integer")
    if lag <= 0:
        raise ConfigurationError("lag", lag, "must be >= 1")
    return int(lag)


def check_z(z: Any) -> float:
    if isinstance(z, bool) or not isinstance(z, numbers.Real):
        raise ConfigurationError("z", z, "must be a real number")
    if not math.isfinite(z):
        raise ConfigurationError("z", z, "must be finite")
    if z <= 0:
        raise ConfigurationError("z", z, "must be > 0")
    return float(z)


@dataclass(frozen=True)
class PipelineConfig:
    """Scalar options of one pipeline run."""
    window: int
    lag: int
    z: float = DEFAULT_Z

    def validate(self) -> 'PipelineConfig':
        """Fail fast on any invalid option; returns a normalised copy."""
        return PipelineConfig(
            window=check_window(self.window),
            lag=check_lag(self.lag),
            z=check_z(self.z),
        )

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> 'PipelineConfig':
        """
        Build from the ``signal`` section of the YAML config.

        Unknown keys are rejected; ``window`` and ``lag`` are required.
        """
        if mapping is None:
            raise ConfigurationError("signal", mapping, "section is missing")
        unknown = sorted(set(mapping) - set(SIGNAL_OPTIONS))
        if unknown:
            raise ConfigurationError(
                "signal", unknown, f"unknown option(s); expected {list(SIGNAL_OPTIONS)}"
            )
        for required in ("window", "lag"):
            if required not in mapping:
                raise ConfigurationError(required, None, "is required")
        return cls(
            window=mapping["window"],
            lag=mapping["lag"],
            z=mapping.get("z", DEFAULT_Z),
        ).validate()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def configure_logging(config: Optional[Mapping[str, Any]] = None) -> None:
    """Apply the ``logging`` section (only ``level`` is read)."""
    level_name = "INFO"
    if config and config.get("logging"):
        level_name = str(config["logging"].get("level", level_name)).upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        raise ConfigurationError("logging.level", level_name, "unknown logging level")
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Convenience: load default config on module import
try:
    CONFIG = load_config()
except FileNotFoundError:
    CONFIG = {}
