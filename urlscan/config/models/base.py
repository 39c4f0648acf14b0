"""
Base Configuration Model.

Immutable pydantic model that expands ${VAR} / ${VAR:default} references on
construction and never displays credentials.
"""

import os
import re
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, model_validator

# ${VAR} or ${VAR:default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::([^}]*))?\}")

MASK = "***"


def expand_env(value: str) -> str:
    """
    Expand environment references inside a string.

    Unset variables without a default expand to an empty string.
    """
    return ENV_VAR_PATTERN.sub(
        lambda m: os.environ.get(m.group(1), m.group(2) or ""),
        value,
    )


def expand_env_deep(value: Any) -> Any:
    """expand_env() applied to every string in nested dicts and lists."""
    if isinstance(value, str):
        return expand_env(value)
    if isinstance(value, dict):
        return {key: expand_env_deep(item) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env_deep(item) for item in value]
    return value


class BaseConfig(BaseModel):
    """
    Base for urlscan configuration models.

    Field names containing one of `sensitive_markers` are masked in
    masked_dict(), repr() and str().
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        validate_default=True,
        str_strip_whitespace=True,
    )

    sensitive_markers: ClassVar[tuple[str, ...]] = ("api_key", "password", "secret", "token")

    @model_validator(mode="before")
    @classmethod
    def _expand_environment(cls, data: Any) -> Any:
        return expand_env_deep(data) if isinstance(data, dict) else data

    @classmethod
    def is_sensitive(cls, name: str) -> bool:
        lowered = name.lower()
        return any(marker in lowered for marker in cls.sensitive_markers)

    def masked_dict(self) -> dict[str, Any]:
        """model_dump() with credential values replaced by '***'."""
        return {
            name: MASK if value and self.is_sensitive(name) else value
            for name, value in self.model_dump().items()
        }

    def __repr__(self) -> str:
        body = ", ".join(f"{name}={value!r}" for name, value in self.masked_dict().items())
        return f"{type(self).__name__}({body})"

    __str__ = __repr__
