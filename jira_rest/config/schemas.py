"""Execution context configuration models.

A client is configured either for direct HTTP access (base URL plus
credentials) or for host-mediated access through a capability object
injected by an enclosing runtime.
"""

from typing import Any, Literal
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from jira_rest.utils.headers import basic_auth_header

DEFAULT_TIMEOUT = 30.0


class DirectConfig(BaseModel):
    """Connection settings for calling a Jira site directly over HTTP(S)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["direct"] = "direct"
    base_url: str = Field(description="Jira site URL, e.g. https://your-domain.atlassian.net")
    email: str | None = Field(default=None, description="Account email for basic auth")
    api_token: str | None = Field(default=None, description="API token for basic auth")
    bearer_token: str | None = Field(default=None, description="OAuth 2.0 or personal access token")
    jwt: str | None = Field(default=None, description="Signed Connect JWT assertion")
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")
    default_headers: dict[str, str] = Field(default_factory=dict)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate the Jira URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Jira URL must start with http:// or https://")
        if not urlparse(v).netloc:
            raise ValueError("Jira URL must have a valid hostname")
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_auth_mode(self) -> "DirectConfig":
        """Require exactly one authentication mode."""
        if (self.email is None) != (self.api_token is None):
            raise ValueError("Basic auth requires both 'email' and 'api_token'")

        modes = [
            name
            for name, enabled in (
                ("basic", self.email is not None),
                ("bearer", self.bearer_token is not None),
                ("jwt", self.jwt is not None),
            )
            if enabled
        ]
        if len(modes) != 1:
            found = ", ".join(modes) or "none"
            raise ValueError(
                f"Exactly one auth mode (email/api_token, bearer_token or jwt) is required, got: {found}",
            )
        return self

    @property
    def auth_mode(self) -> Literal["basic", "bearer", "jwt"]:
        if self.bearer_token is not None:
            return "bearer"
        if self.jwt is not None:
            return "jwt"
        return "basic"

    def auth_headers(self) -> dict[str, str]:
        """Authorization header for the configured auth mode."""
        match self.auth_mode:
            case "bearer":
                return {"Authorization": f"Bearer {self.bearer_token}"}
            case "jwt":
                return {"Authorization": f"JWT {self.jwt}"}
            case _:
                return {"Authorization": basic_auth_header(self.email or "", self.api_token or "")}


class HostConfig(BaseModel):
    """Settings for routing calls through a host runtime capability.

    ``api`` must provide ``as_user()`` and ``as_app()``; each returns an object
    with an awaitable ``request_jira(path, *, method, headers, body)``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    type: Literal["host"] = "host"
    api: Any = Field(description="Host capability handle")
    timeout: float | None = Field(default=None, gt=0, description="Request timeout in seconds")
    default_headers: dict[str, str] = Field(default_factory=dict)

    @field_validator("api")
    @classmethod
    def validate_api(cls, v: Any) -> Any:
        """Check the capability exposes both request identities."""
        missing = [name for name in ("as_user", "as_app") if not callable(getattr(v, name, None))]
        if missing:
            raise ValueError(f"Host capability is missing: {', '.join(missing)}")
        return v


type JiraConfig = DirectConfig | HostConfig
