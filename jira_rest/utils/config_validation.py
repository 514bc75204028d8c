"""Validation of client configuration objects.

Accepts ready-made config models or plain mappings, including the
``{"type": ..., "auth": {...}}`` shape used by JavaScript clients.
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from jira_rest.clients.exceptions import ConfigurationValidationError
from jira_rest.config.schemas import DirectConfig, HostConfig, JiraConfig

logger = logging.getLogger(__name__)

DIRECT_TYPES = frozenset({"direct", "default"})
HOST_TYPES = frozenset({"host", "forge"})

# camelCase auth keys accepted in mapping configs
AUTH_KEY_ALIASES = {
    "baseUrl": "base_url",
    "apiToken": "api_token",
    "bearerToken": "bearer_token",
    "verifySsl": "verify_ssl",
    "defaultHeaders": "default_headers",
}


def _flatten(config: Mapping[str, Any]) -> dict[str, Any]:
    flat = {key: value for key, value in config.items() if key not in ("type", "auth")}
    auth = config.get("auth")
    if auth is not None:
        if not isinstance(auth, Mapping):
            # Host configs may pass the capability itself as ``auth``
            flat.setdefault("api", auth)
        else:
            flat.update(auth)
    return {AUTH_KEY_ALIASES.get(key, key): value for key, value in flat.items()}


def validate_jira_config(config: JiraConfig | Mapping[str, Any]) -> JiraConfig:
    """Validate a configuration and return it as a config model.

    Raises:
        ConfigurationValidationError: If the configuration is missing, has an
            unknown type, or fails model validation

    """
    if isinstance(config, DirectConfig | HostConfig):
        return config

    if not config:
        raise ConfigurationValidationError("config", config, "a DirectConfig, HostConfig or mapping")

    if not isinstance(config, Mapping):
        raise ConfigurationValidationError(
            "config",
            type(config).__name__,
            "a DirectConfig, HostConfig or mapping",
        )

    config_type = config.get("type")
    if config_type in DIRECT_TYPES:
        model: type[DirectConfig] | type[HostConfig] = DirectConfig
    elif config_type in HOST_TYPES:
        model = HostConfig
    else:
        raise ConfigurationValidationError(
            "type",
            config_type,
            "one of 'direct', 'default', 'host', 'forge'",
        )

    try:
        validated = model(**_flatten(config))
    except ValidationError as exc:
        error = exc.errors()[0]
        location = ".".join(str(part) for part in error["loc"]) or "config"
        raise ConfigurationValidationError(
            location,
            error.get("input"),
            error["msg"],
            additional_context=f"{len(exc.errors())} validation error(s) in {model.__name__}",
        ) from exc

    logger.debug("Validated %s configuration", validated.type)
    return validated
