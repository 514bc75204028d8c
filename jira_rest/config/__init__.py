"""Configuration package: execution context models and environment settings."""

from .loader import ConfigLoader, is_test_environment, load_settings
from .schemas import DirectConfig, HostConfig, JiraConfig
from .settings import JiraSettings

__all__ = [
    "ConfigLoader",
    "DirectConfig",
    "HostConfig",
    "JiraConfig",
    "JiraSettings",
    "is_test_environment",
    "load_settings",
]
