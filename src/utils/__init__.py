# Utility modules for the live emotion overlay
from .config import Config, ConfigError
from .camera import CameraStream, ScreenStream, StreamOpenError, open_stream
from .checks import ensure_instance
from .logger import setup_logger, get_logger

__all__ = [
    "Config", "ConfigError", "CameraStream", "ScreenStream", "StreamOpenError", "open_stream",
    "ensure_instance", "setup_logger", "get_logger",
]
