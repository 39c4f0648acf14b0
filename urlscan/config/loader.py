"""
Configuration Loader.

Builds a ClientConfig from YAML files (with environment overlays and ${VAR}
substitution) or from URLSCAN_* environment variables.
"""

import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from urlscan.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_CONNECT_TIMEOUT_MS,
    DEFAULT_ENABLE_LOGGING,
    DEFAULT_FOLLOW_REDIRECTS,
    DEFAULT_MAX_RETRIES,
    DEFAULT_SOCKET_TIMEOUT_MS,
    DEFAULT_TIMEOUT_MS,
    ConfigKeys,
)

from .exceptions import (
    ConfigFileNotFoundError,
    ConfigParseError,
    ConfigValidationError,
)
from .models import ClientConfig
from .models.base import ENV_VAR_PATTERN, expand_env

# Top-level YAML key holding client settings; flat files are accepted too
CONFIG_SECTION = "urlscan"


def _field_problems(error: ValidationError) -> dict[str, str]:
    """Field path -> message; cross-field rules are reported under "config"."""
    problems: dict[str, str] = {}
    for err in error.errors():
        name = ".".join(str(part) for part in err["loc"]) or "config"
        problems[name] = f"{problems[name]}; {err['msg']}" if name in problems else err["msg"]
    return problems


def build_config(data: dict[str, Any], source: Optional[str] = None) -> ClientConfig:
    """Validate a settings mapping, raising ConfigValidationError on failure."""
    try:
        return ClientConfig(**data)
    except ValidationError as e:
        raise ConfigValidationError(_field_problems(e), source=source) from e


class ConfigLoader:
    """
    Configuration loader with YAML support and environment variable substitution.

    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load("config/urlscan.yaml", env="production")
        >>> print(config.base_url)
    """

    def __init__(self, env_file: Optional[str | Path] = None):
        """
        Initialize ConfigLoader.

        Args:
            env_file: Optional path to .env file. If not provided,
                     will look for .env next to the config file.
        """
        self._env_file = Path(env_file) if env_file else None
        self._loaded_env = False

    def load(
        self,
        path: str | Path,
        env: Optional[str] = None,
    ) -> ClientConfig:
        """
        Load configuration from YAML file with optional environment overlay.

        Loading flow:
        1. Load .env file (if exists)
        2. Load base file, e.g. urlscan.yaml
        3. Load urlscan.{env}.yaml (if env specified and file exists)
        4. Deep merge
        5. Substitute environment variables
        6. Validate

        Raises:
            ConfigFileNotFoundError: If base config file not found
            ConfigParseError: If YAML parsing fails
            ConfigValidationError: If validation fails
        """
        path = Path(path)

        self._load_env_file(path.parent)

        config = self.load_yaml(path)

        if env:
            env_config_path = path.parent / f"{path.stem}.{env}{path.suffix}"
            if env_config_path.exists():
                config = self.merge_configs(config, self.load_yaml(env_config_path))

        config = self.substitute_env_vars(config)

        section = config.get(CONFIG_SECTION, config)
        if not isinstance(section, dict):
            raise ConfigValidationError(
                {CONFIG_SECTION: "must be a mapping"}, source=str(path)
            )
        return build_config(section, source=str(path))

    def load_yaml(self, path: str | Path) -> dict[str, Any]:
        """
        Load a YAML configuration file.

        Raises:
            ConfigFileNotFoundError: If file not found
            ConfigParseError: If YAML parsing fails or the root is not a mapping
        """
        path = Path(path)

        if not path.exists():
            raise ConfigFileNotFoundError(str(path))

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigParseError(str(path), str(e)) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigParseError(str(path), "top-level YAML value must be a mapping")
        return data

    def merge_configs(
        self,
        base: dict[str, Any],
        override: dict[str, Any],
    ) -> dict[str, Any]:
        """
        Deep merge two configuration dictionaries; override values win.

        Example:
            >>> loader.merge_configs({"a": {"b": 1, "c": 2}}, {"a": {"b": 10}})
            {'a': {'b': 10, 'c': 2}}
        """
        result = deepcopy(base)

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self.merge_configs(result[key], value)
            else:
                result[key] = deepcopy(value)

        return result

    def substitute_env_vars(self, data: Any) -> Any:
        """
        Resolve ${VAR} references in nested configuration data.

        A value that is exactly one reference takes the type of the resolved
        text (bool, int, float); references embedded in longer strings are
        expanded as text. Lone references with no value and no default are
        left as written.
        """
        if isinstance(data, dict):
            return {key: self.substitute_env_vars(value) for key, value in data.items()}
        if isinstance(data, list):
            return [self.substitute_env_vars(item) for item in data]
        if not isinstance(data, str):
            return data

        lone = ENV_VAR_PATTERN.fullmatch(data)
        if lone is None:
            return expand_env(data)

        name, default = lone.groups()
        resolved = os.environ.get(name, default)
        return data if resolved is None else self._convert_value(resolved)

    @staticmethod
    def _convert_value(value: str) -> Any:
        """Interpret YAML-style scalars coming from the environment."""
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "on"):
            return True
        if lowered in ("false", "no", "off"):
            return False
        for cast in (int, float):
            try:
                return cast(value)
            except ValueError:
                continue
        return value

    def _load_env_file(self, config_dir: Path) -> None:
        if self._loaded_env:
            return

        candidates = [config_dir / ".env", config_dir.parent / ".env", Path.cwd() / ".env"]
        if self._env_file:
            candidates.insert(0, self._env_file)

        for env_path in candidates:
            if env_path.exists():
                load_dotenv(env_path)
                self._loaded_env = True
                return


# =============================================================================
# Environment-only configuration
# =============================================================================


def _env_str(key: str, default: str) -> str:
    value = os.environ.get(key)
    return value if value is not None else default


def _env_int(key: str, default: int) -> int:
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.environ.get(key)
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return default


def from_environment(
    api_key: Optional[str] = None,
    env_file: Optional[str | Path] = None,
) -> ClientConfig:
    """
    Create a config from URLSCAN_* environment variables with fallback to defaults.

    Unset or unparseable variables fall back to the default value.

    Args:
        api_key: Explicit API key, takes precedence over URLSCAN_API_KEY
        env_file: Optional .env file loaded first (existing variables win)

    Raises:
        ConfigValidationError: If the resulting values are inconsistent
    """
    if env_file is not None:
        load_dotenv(env_file)
    else:
        load_dotenv()

    return build_config({
        "api_key": api_key if api_key is not None else _env_str(ConfigKeys.API_KEY, ""),
        "base_url": _env_str(ConfigKeys.BASE_URL, DEFAULT_BASE_URL),
        "timeout_ms": _env_int(ConfigKeys.TIMEOUT, DEFAULT_TIMEOUT_MS),
        "connect_timeout_ms": _env_int(ConfigKeys.CONNECT_TIMEOUT, DEFAULT_CONNECT_TIMEOUT_MS),
        "socket_timeout_ms": _env_int(ConfigKeys.SOCKET_TIMEOUT, DEFAULT_SOCKET_TIMEOUT_MS),
        "enable_logging": _env_bool(ConfigKeys.ENABLE_LOGGING, DEFAULT_ENABLE_LOGGING),
        "follow_redirects": _env_bool(ConfigKeys.FOLLOW_REDIRECTS, DEFAULT_FOLLOW_REDIRECTS),
        "max_retries": _env_int(ConfigKeys.MAX_RETRIES, DEFAULT_MAX_RETRIES),
    }, source="environment")


# Convenience function
def load_config(
    path: str | Path,
    env: Optional[str] = None,
    env_file: Optional[str | Path] = None,
) -> ClientConfig:
    """Load configuration from a YAML file."""
    loader = ConfigLoader(env_file=env_file)
    return loader.load(path, env=env)
