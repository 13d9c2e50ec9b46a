"""
Configuration Loader for Live Emotion Overlay
Loads settings from config.yaml and environment variables
"""

import os
import yaml
from pathlib import Path
from typing import Any, Optional
from dataclasses import dataclass

SOURCE_KINDS = ("camera", "screen")


class ConfigError(ValueError):
    """Raised for a configuration value the app cannot use"""


@dataclass
class CameraConfig:
    """Camera capture settings"""
    device_id: int = 0
    width: int = 1280
    height: int = 720
    fps: int = 30


@dataclass
class ScreenConfig:
    """Screen capture settings"""
    monitor: int = 1  # mss index, 0 = all monitors combined


@dataclass
class DetectorConfig:
    """Haar cascade detector settings"""
    cascade_path: Optional[str] = None  # None = OpenCV bundled frontal face cascade
    scale_factor: float = 1.1
    min_neighbors: int = 3


@dataclass
class PipelineConfig:
    """Detection loop settings"""
    interval_ms: int = 1000
    initial_source: str = "camera"


@dataclass
class DisplayConfig:
    """Preview window settings"""
    window_name: str = "Live Emotions"
    fps: int = 30


class Config:
    """
    Central configuration manager.
    Loads from config.yaml with environment variable overrides.

    Usage:
        config = Config()
        interval = config.get("pipeline.interval_ms")
        # Or use typed configs
        detector = config.detector
    """

    _instance: Optional['Config'] = None
    _config: dict = {}

    def __new__(cls) -> 'Config':
        """Singleton pattern - only one config instance"""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._load_config()
        return cls._instance

    def _load_config(self) -> None:
        """Load configuration from YAML file"""
        config_path = self.project_root / "config.yaml"

        if config_path.exists():
            with open(config_path, 'r', encoding='utf-8') as f:
                self._config = yaml.safe_load(f) or {}
        else:
            self._config = {}

        # Override with environment variables
        self._apply_env_overrides()

    def _apply_env_overrides(self) -> None:
        """Override config values with environment variables"""
        if os.getenv("CAMERA_DEVICE_ID"):
            self._set_nested("camera.device_id", int(os.getenv("CAMERA_DEVICE_ID")))

        if os.getenv("CASCADE_PATH"):
            self._set_nested("detector.cascade_path", os.getenv("CASCADE_PATH"))

        if os.getenv("PIPELINE_INTERVAL_MS"):
            self._set_nested("pipeline.interval_ms", int(os.getenv("PIPELINE_INTERVAL_MS")))

        if os.getenv("LOG_LEVEL"):
            self._set_nested("logging.level", os.getenv("LOG_LEVEL"))

    def _set_nested(self, key: str, value: Any) -> None:
        """Set a nested configuration value using dot notation"""
        keys = key.split(".")
        d = self._config
        for k in keys[:-1]:
            d = d.setdefault(k, {})
        d[keys[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key: Dot-separated key path (e.g., "camera.width")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key.split(".")
        value = self._config

        try:
            for k in keys:
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any) -> None:
        """Override a value at runtime (used for CLI flags)"""
        self._set_nested(key, value)

    @property
    def camera(self) -> CameraConfig:
        """Get typed camera configuration"""
        cam = self.get("camera", {})
        return CameraConfig(
            device_id=cam.get("device_id", 0),
            width=cam.get("width", 1280),
            height=cam.get("height", 720),
            fps=cam.get("fps", 30)
        )

    @property
    def screen(self) -> ScreenConfig:
        """Get typed screen capture configuration"""
        screen = self.get("screen", {})
        return ScreenConfig(monitor=screen.get("monitor", 1))

    @property
    def detector(self) -> DetectorConfig:
        """Get typed detector configuration"""
        det = self.get("detector", {})
        return DetectorConfig(
            cascade_path=det.get("cascade_path"),
            scale_factor=float(det.get("scale_factor", 1.1)),
            min_neighbors=int(det.get("min_neighbors", 3))
        )

    @property
    def pipeline(self) -> PipelineConfig:
        """
        Get typed pipeline configuration

        Raises:
            ConfigError: if initial_source is not a known source kind
        """
        pipe = self.get("pipeline", {})
        source = pipe.get("initial_source", "camera")
        if source not in SOURCE_KINDS:
            raise ConfigError(
                f"pipeline.initial_source must be one of {SOURCE_KINDS}, got {source!r}"
            )

        return PipelineConfig(
            interval_ms=int(pipe.get("interval_ms", 1000)),
            initial_source=source
        )

    @property
    def display(self) -> DisplayConfig:
        """Get typed display configuration"""
        disp = self.get("display", {})
        return DisplayConfig(
            window_name=disp.get("window_name", "Live Emotions"),
            fps=int(disp.get("fps", 30))
        )

    @property
    def project_root(self) -> Path:
        """Get the project root directory"""
        return Path(__file__).resolve().parent.parent.parent

    def reload(self) -> None:
        """Reload configuration from file"""
        self._load_config()
