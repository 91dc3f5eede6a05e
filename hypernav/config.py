"""
Configuration management for hypernav.

Dataclass sections with defaults and validation for navigation, the
ray-marching camera settings handed to a renderer, invariant checking,
and logging.
"""

import json
import math
import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Dict, Any, Optional, Union
from enum import Enum

import torch

from .exceptions import ConfigFileNotFoundError, ConfigurationError, ErrorHandler


class LogLevel(Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


_DTYPES = {
    "float32": torch.float32,
    "float64": torch.float64,
}


@dataclass
class NavigationConfig:
    """Movement and look configuration."""
    move_speed: float = 0.5
    look_sensitivity: float = 0.1
    dtype: str = "float32"

    def __post_init__(self):
        self.validate()

    @property
    def torch_dtype(self) -> torch.dtype:
        return _DTYPES[self.dtype]

    def validate(self) -> None:
        """Validate navigation parameters."""
        if self.move_speed < 0:
            raise ValueError(f"Move speed must be non-negative, got {self.move_speed}")
        if self.look_sensitivity < 0:
            raise ValueError(f"Look sensitivity must be non-negative, got {self.look_sensitivity}")
        if self.dtype not in _DTYPES:
            raise ValueError(f"Unsupported dtype: {self.dtype}")


@dataclass
class CameraConfig:
    """Ray-marching camera settings, passed through to the renderer as plain numbers."""
    aspect_ratio: float = 1.0
    max_iterations: int = 300
    min_dist: float = 0.0001
    max_dist: float = 1000.0
    fov_degrees: float = 140.0

    def __post_init__(self):
        self.validate()

    @property
    def tan_fov(self) -> float:
        """Tangent of half the field of view."""
        return math.tan(math.radians(self.fov_degrees) / 2.0)

    def validate(self) -> None:
        """Validate camera parameters."""
        if self.aspect_ratio <= 0:
            raise ValueError(f"Aspect ratio must be positive, got {self.aspect_ratio}")
        if self.max_iterations <= 0:
            raise ValueError(f"Max iterations must be positive, got {self.max_iterations}")
        if self.min_dist <= 0 or self.max_dist <= 0:
            raise ValueError("Ray distances must be positive")
        if self.min_dist >= self.max_dist:
            raise ValueError("Min distance must be less than max distance")
        if not (0 < self.fov_degrees < 180):
            raise ValueError(f"Field of view must be between 0 and 180 degrees, got {self.fov_degrees}")


@dataclass
class FrameConfig:
    """Invariant checking for transported frames."""
    tolerance: float = 1e-5
    check_invariants: bool = False
    strict: bool = False

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Validate invariant check parameters."""
        if self.tolerance <= 0:
            raise ValueError(f"Tolerance must be positive, got {self.tolerance}")


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: LogLevel = LogLevel.INFO
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_handler: Optional[Path] = None
    console_handler: bool = True

    def validate(self) -> None:
        """Coerce names and paths read from JSON."""
        if isinstance(self.level, str):
            self.level = LogLevel(self.level.upper())
        if isinstance(self.file_handler, str):
            self.file_handler = Path(self.file_handler)

    def configure_logging(self) -> None:
        """Configure the package logger."""
        self.validate()
        logger = logging.getLogger("hypernav")
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)

        logger.setLevel(getattr(logging, self.level.value))

        formatter = logging.Formatter(self.format)

        if self.console_handler:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        if self.file_handler:
            file_handler = logging.FileHandler(self.file_handler)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        if not logger.handlers:
            logger.addHandler(logging.NullHandler())


@dataclass
class HyperNavConfig:
    """Main configuration class that combines all sub-configurations."""
    navigation: NavigationConfig = field(default_factory=NavigationConfig)
    camera: CameraConfig = field(default_factory=CameraConfig)
    frame: FrameConfig = field(default_factory=FrameConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        """Initialize logging and validate all configurations."""
        self.logging.configure_logging()
        self.validate_all()

    def validate_all(self) -> None:
        """Validate all configuration sections."""
        self.navigation.validate()
        self.camera.validate()
        self.frame.validate()
        self.logging.validate()

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "HyperNavConfig":
        """Create configuration from dictionary."""
        config = cls()

        for section_name in ["navigation", "camera", "frame", "logging"]:
            if section_name in config_dict:
                values = config_dict[section_name]
                if not isinstance(values, dict):
                    raise ConfigurationError(
                        f"Section '{section_name}' must be a mapping",
                        {"type": type(values).__name__},
                    )
                section = getattr(config, section_name)
                for key, value in values.items():
                    if hasattr(section, key):
                        setattr(section, key, value)

        config.validate_all()
        if "logging" in config_dict:
            config.logging.configure_logging()
        return config

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "HyperNavConfig":
        """Load configuration from JSON file."""
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigFileNotFoundError(config_path)

        with ErrorHandler(f"Loading configuration from {config_path}"):
            with open(config_path, "r") as f:
                config_dict = json.load(f)

        return cls.from_dict(config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a JSON-compatible dictionary."""
        config_dict = asdict(self)
        config_dict["logging"]["level"] = self.logging.level.value
        if self.logging.file_handler is not None:
            config_dict["logging"]["file_handler"] = str(self.logging.file_handler)
        return config_dict

    def save(self, config_path: Union[str, Path]) -> None:
        """Save configuration to JSON file."""
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)


def get_default_config() -> HyperNavConfig:
    """Get default configuration."""
    return HyperNavConfig()


def load_config(config_path: Optional[Union[str, Path]] = None) -> HyperNavConfig:
    """Load configuration from file or return default."""
    if config_path is None:
        # Try to load from default locations
        default_paths = [
            Path("hypernav.json"),
            Path("~/.hypernav/config.json").expanduser(),
        ]

        for path in default_paths:
            if path.exists():
                config_path = path
                break

    if config_path is not None:
        return HyperNavConfig.from_file(config_path)
    return get_default_config()
