"""Loading and validation of the declarative endpoint catalog.

Each YAML file in this package describes one resource group. Operations name
their arguments with the wire (camelCase) names used by the REST API; the
client exposes them to Python callers in snake_case.
"""

import keyword
import logging
import re
from collections.abc import Mapping
from functools import cache
from importlib import resources
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from jira_rest.clients.exceptions import CatalogError
from jira_rest.utils.params import placeholders

logger = logging.getLogger(__name__)

CATALOG_PACKAGE = "jira_rest.catalog"
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def snake_case(name: str) -> str:
    """``issueIdOrKey`` -> ``issue_id_or_key``; ``_updateSequenceId`` keeps its prefix."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def python_name(name: str) -> str:
    """Keyword argument name for a wire argument (``from`` becomes ``from_``)."""
    converted = snake_case(name)
    return f"{converted}_" if keyword.iskeyword(converted) else converted


class EndpointSpec(BaseModel):
    """One REST operation: everything needed to build its descriptor."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    method: Literal["GET", "POST", "PUT", "DELETE"]
    path: str
    path_params: list[str] = Field(default_factory=list)
    query: dict[str, str] = Field(default_factory=dict, description="wire name -> argument")
    body: str | None = None
    body_fields: list[str] | None = None
    raw_body: str | None = None
    files: str | None = None
    headers: dict[str, str] = Field(default_factory=dict)
    header_params: dict[str, str] = Field(default_factory=dict, description="header -> argument")
    response: bool = True
    experimental: bool = False

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError(f"Path must be absolute: {v}")
        return v

    @field_validator("query", mode="before")
    @classmethod
    def normalize_query(cls, v: Any) -> Any:
        """Accept ``[name, {wire: argument}, ...]`` and turn it into a mapping."""
        if v is None:
            return {}
        if not isinstance(v, list):
            return v
        query: dict[str, str] = {}
        for item in v:
            if isinstance(item, str):
                query[item] = item
            elif isinstance(item, Mapping):
                query.update({str(wire): str(argument) for wire, argument in item.items()})
            else:
                raise ValueError(f"Invalid query entry: {item!r}")
        return query

    @model_validator(mode="after")
    def validate_consistency(self) -> "EndpointSpec":
        declared = placeholders(self.path)
        if sorted(declared) != sorted(self.path_params):
            raise ValueError(
                f"Path parameters {self.path_params} do not match placeholders {declared} in {self.path}",
            )

        payloads = [name for name in ("body", "body_fields", "raw_body", "files") if getattr(self, name) is not None]
        if len(payloads) > 1:
            raise ValueError(f"Only one payload kind allowed, got: {', '.join(payloads)}")

        names = self.argument_names()
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate argument names in {self.method} {self.path}")
        return self

    def argument_names(self) -> list[str]:
        """Wire names of every argument the operation accepts, in declaration order."""
        names = [*self.path_params, *self.query.values()]
        if self.body is not None:
            names.append(self.body)
        if self.body_fields is not None:
            names.extend(self.body_fields)
        if self.raw_body is not None:
            names.append(self.raw_body)
        if self.files is not None:
            names.append(self.files)
        names.extend(self.header_params.values())
        return names


class ServiceSpec(BaseModel):
    """A resource group and its operations."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    description: str = ""
    operations: dict[str, EndpointSpec]


def _parse_service(name: str, text: str) -> ServiceSpec:
    try:
        raw = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise CatalogError(f"Catalog file {name}.yaml is not valid YAML: {e}") from e

    if not isinstance(raw, dict):
        raise CatalogError(f"Catalog file {name}.yaml must contain a mapping")

    try:
        return ServiceSpec(name=name, **raw)
    except ValidationError as e:
        raise CatalogError(f"Catalog file {name}.yaml is invalid: {e}") from e


@cache
def load_catalog() -> dict[str, ServiceSpec]:
    """Load every resource group shipped with the package, keyed by group name."""
    services: dict[str, ServiceSpec] = {}
    for entry in sorted(resources.files(CATALOG_PACKAGE).iterdir(), key=lambda item: item.name):
        if not entry.name.endswith(".yaml"):
            continue
        name = entry.name.removesuffix(".yaml")
        services[name] = _parse_service(name, entry.read_text(encoding="utf-8"))

    logger.debug(
        "Loaded endpoint catalog: %d services, %d operations",
        len(services),
        sum(len(service.operations) for service in services.values()),
    )
    return services
