"""
Configuration errors.

Raised while building a ClientConfig from a YAML file or the environment.
They are never retried and sit outside the UrlScanError family, which only
describes failed API calls.
"""

from typing import Optional


class ConfigError(Exception):
    """A ClientConfig could not be built from `source`."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        super().__init__(f"{source}: {message}" if source else message)


class ConfigFileNotFoundError(ConfigError, FileNotFoundError):
    """The YAML file named by load_config() does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__("urlscan config file does not exist", source=path)


class ConfigParseError(ConfigError):
    """The YAML file exists but is not a usable mapping."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot parse urlscan config: {reason}", source=path)


class ConfigValidationError(ConfigError):
    """
    Settings were read but rejected by ClientConfig validation.

    Attributes:
        problems: Field path (e.g. "max_retries", or "config" for cross-field
            rules) mapped to the validation message
    """

    def __init__(self, problems: dict[str, str], source: Optional[str] = None):
        self.problems = dict(problems)
        lines = "\n".join(f"  - {line}" for line in self.errors)
        super().__init__(f"invalid urlscan client settings:\n{lines}", source=source)

    @property
    def fields(self) -> list[str]:
        return list(self.problems)

    @property
    def errors(self) -> list[str]:
        return [f"{name}: {message}" for name, message in self.problems.items()]
