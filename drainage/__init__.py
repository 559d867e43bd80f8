"""Multi-resolution drainage network noise."""

from .config import ConfigError, FieldConfig
from .field import DrainageField

__all__ = ["ConfigError", "DrainageField", "FieldConfig"]
