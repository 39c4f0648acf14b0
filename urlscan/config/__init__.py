# Config module - client configuration system
from .exceptions import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigParseError,
    ConfigValidationError,
)
from .loader import ConfigLoader, build_config, from_environment, load_config
from .models import BaseConfig, ClientConfig

__all__ = [
    # Exceptions
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigParseError",
    "ConfigValidationError",
    # Loader
    "ConfigLoader",
    "build_config",
    "from_environment",
    "load_config",
    # Models
    "BaseConfig",
    "ClientConfig",
]
