"""Configuration store adapters."""

from .memory import InMemoryConfigStore
from .yaml_file import YamlConfigStore

__all__ = ["InMemoryConfigStore", "YamlConfigStore"]
