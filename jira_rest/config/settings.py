"""Environment-backed settings for direct Jira access.

All fields map to ``JIRA_*`` environment variables (``JIRA_BASE_URL``,
``JIRA_EMAIL``, ``JIRA_API_TOKEN``, ...), optionally populated from ``.env``
files by :class:`~jira_rest.config.loader.ConfigLoader`.
"""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from jira_rest.config.schemas import DEFAULT_TIMEOUT, DirectConfig

VALID_LOG_LEVELS = ("DEBUG", "INFO", "NOTICE", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class JiraSettings(BaseSettings):
    """Connection and logging settings read from the environment."""

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="forbid",
        env_prefix="JIRA_",
    )

    # Connection
    base_url: str | None = Field(default=None, description="Jira site URL")
    email: str | None = Field(default=None, description="Account email for basic auth")
    api_token: str | None = Field(default=None, description="API token for basic auth")
    bearer_token: str | None = Field(default=None, description="OAuth 2.0 or personal access token")
    jwt: str | None = Field(default=None, description="Signed Connect JWT assertion")

    # Transport
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")
    default_headers: dict[str, str] = Field(default_factory=dict, description="Headers sent with every request")

    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str | None) -> str | None:
        """Normalize the Jira URL; full validation happens in DirectConfig."""
        return v.rstrip("/") if v else None

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        if v.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f'Log level must be one of: {", ".join(VALID_LOG_LEVELS)}')
        return v.upper()

    def get_jira_config(self) -> dict[str, Any]:
        """Connection settings as a mapping, without unset credentials."""
        values = self.model_dump(exclude={"log_level"})
        return {key: value for key, value in values.items() if value is not None}

    def to_direct_config(self, **overrides: Any) -> DirectConfig:
        """Build a validated :class:`DirectConfig`; keyword overrides win.

        Raises:
            ConfigurationValidationError: If the resulting configuration is invalid

        """
        from jira_rest.utils.config_validation import validate_jira_config  # noqa: PLC0415

        return validate_jira_config({"type": "direct", **self.get_jira_config(), **overrides})  # type: ignore[return-value]
