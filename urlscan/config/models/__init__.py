# Configuration models
from .base import BaseConfig
from .client import ClientConfig

__all__ = [
    "BaseConfig",
    "ClientConfig",
]
