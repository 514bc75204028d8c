"""Configuration loader for direct Jira access.

Combines ``.env`` files, ``JIRA_*`` environment variables and an optional YAML
file into :class:`JiraSettings`.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from jira_rest.clients.exceptions import ConfigurationValidationError
from jira_rest.config.schemas import DirectConfig
from jira_rest.config.settings import JiraSettings

logger = logging.getLogger(__name__)

TEST_MODE_VARIABLE = "JIRA_REST_TEST_MODE"


def is_test_environment() -> bool:
    """Detect if code is running in a test environment.

    Returns:
        bool: True when pytest is running or the test mode flag is set

    """
    if "PYTEST_CURRENT_TEST" in os.environ:
        return True

    return os.environ.get(TEST_MODE_VARIABLE, "").lower() in ("true", "1", "yes")


class ConfigLoader:
    """Loads settings from dotenv files, the environment and a YAML file.

    Precedence, lowest first: ``.env``, ``.env.local``, ``.env.test`` and
    ``.env.test.local`` (test mode only), process environment, YAML ``jira``
    section.
    """

    def __init__(
        self,
        config_file_path: Path | None = None,
        *,
        env_dir: Path | None = None,
    ) -> None:
        """Initialize the configuration loader.

        Args:
            config_file_path (Path): Path to the YAML configuration file (optional)
            env_dir (Path): Directory holding the ``.env*`` files, the working
                directory by default

        """
        self.env_dir = env_dir or Path()
        self._load_environment_configuration()

        self.yaml_config: dict[str, Any] = {}
        if config_file_path is not None:
            self.yaml_config = self._load_yaml_config(config_file_path)

        self.settings = JiraSettings(**self._yaml_overrides())

    def _load_env_file(self, name: str, *, override: bool) -> None:
        path = self.env_dir / name
        if path.exists():
            load_dotenv(path, override=override)
            logger.debug("Loaded environment from %s", path)

    def _load_environment_configuration(self) -> None:
        """Load dotenv files; later files override values from earlier files."""
        # The real environment wins over .env
        self._load_env_file(".env", override=False)
        self._load_env_file(".env.local", override=True)

        if is_test_environment():
            logger.debug("Running in test environment")
            self._load_env_file(".env.test", override=True)
            self._load_env_file(".env.test.local", override=True)

    def _load_yaml_config(self, config_file_path: Path) -> dict[str, Any]:
        """Load configuration from YAML file.

        Raises:
            FileNotFoundError: If the file does not exist
            ConfigurationValidationError: If the file is not a YAML mapping

        """
        try:
            with config_file_path.open("r", encoding="utf-8") as config_file:
                config = yaml.safe_load(config_file)
        except FileNotFoundError:
            logger.exception("Config file not found: %s", config_file_path)
            raise
        except yaml.YAMLError as e:
            raise ConfigurationValidationError("config_file", str(config_file_path), "valid YAML", str(e)) from e

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ConfigurationValidationError("config_file", str(config_file_path), "a YAML mapping")
        return config

    def _yaml_overrides(self) -> dict[str, Any]:
        """Settings values from the YAML ``jira`` and ``logging`` sections."""
        overrides: dict[str, Any] = dict(self.yaml_config.get("jira") or {})
        level = (self.yaml_config.get("logging") or {}).get("level")
        if level:
            overrides["log_level"] = level
        if overrides:
            logger.debug("Applied YAML overrides: %s", ", ".join(sorted(overrides)))
        return overrides

    def get_jira_config(self) -> dict[str, Any]:
        """Get Jira connection settings as a dictionary."""
        return self.settings.get_jira_config()

    def get_value(self, key: str, default: Any = None) -> Any:
        """Get a single settings value by field name."""
        return getattr(self.settings, key, default)

    def to_direct_config(self, **overrides: Any) -> DirectConfig:
        """Build a validated direct-access configuration."""
        return self.settings.to_direct_config(**overrides)


def load_settings(config_file_path: Path | None = None) -> JiraSettings:
    """Load settings with the default precedence rules."""
    return ConfigLoader(config_file_path).settings
