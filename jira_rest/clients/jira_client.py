"""Jira REST API client.

The client exposes one :class:`Service` per catalog resource group and one
:class:`Operation` per endpoint::

    async with JiraClient({"type": "direct", "base_url": ..., "email": ..., "api_token": ...}) as jira:
        result = await jira.issues.get_issue(issue_id_or_key="PROJ-1")
        if result.success:
            print(result.data["fields"]["summary"])

Every operation builds an :class:`OperationDescriptor` and hands it to the
shared dispatcher; no endpoint carries logic of its own.
"""

import json
import logging
import os
from collections.abc import Iterator, Mapping
from contextlib import ExitStack
from pathlib import Path
from typing import Any, Self

import httpx

from jira_rest.catalog import EndpointSpec, ServiceSpec, load_catalog, python_name
from jira_rest.clients.contexts import create_context, describe_context
from jira_rest.clients.exceptions import InvalidParameterError, UnknownOperationError, UnknownParameterError
from jira_rest.config.schemas import JiraConfig
from jira_rest.display import configure_logging
from jira_rest.type_definitions import JiraResult, OperationDescriptor, RequestOptions
from jira_rest.utils.config_validation import validate_jira_config
from jira_rest.utils.dispatcher import jira_request
from jira_rest.utils.params import build_path

logger = logging.getLogger(__name__)


def _request_options(opts: RequestOptions | Mapping[str, Any] | None) -> RequestOptions:
    if opts is None:
        return RequestOptions()
    if isinstance(opts, RequestOptions):
        return opts
    if isinstance(opts, Mapping):
        try:
            return RequestOptions(**opts)
        except TypeError as e:
            raise UnknownParameterError(f"Invalid request options: {e}") from e
    raise InvalidParameterError(f"opts must be RequestOptions or a mapping, got {type(opts).__name__}")


def _json_body(name: str, value: Any) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"Argument '{name}' is not JSON serializable: {e}") from e


def _file_parts(field: str, value: Any, stack: ExitStack | None) -> list[tuple[str, Any]]:
    """Multipart parts for a file argument.

    Accepts one entry or a list of entries; an entry is a path, raw content,
    a binary file object or an ``(filename, content[, content_type])`` tuple.
    Paths are opened for streaming when a stack is given, read otherwise.
    """
    entries = value if isinstance(value, list) else [value]
    parts: list[tuple[str, Any]] = []
    for entry in entries:
        if isinstance(entry, os.PathLike):
            path = Path(entry)
            content = stack.enter_context(path.open("rb")) if stack is not None else path.read_bytes()
            parts.append((field, (path.name, content)))
        else:
            parts.append((field, entry))
    return parts


class Operation:
    """A single catalog endpoint bound to a client."""

    def __init__(self, client: "JiraClient", service: str, name: str, spec: EndpointSpec) -> None:
        self._client = client
        self.service = service
        self.name = name
        self.spec = spec
        self.operation_id = f"{service}.{name}"

        # Keyword name (snake_case or the wire name itself) -> wire name
        self._arguments: dict[str, str] = {}
        for wire in spec.argument_names():
            self._arguments[python_name(wire)] = wire
            self._arguments.setdefault(wire, wire)

    @property
    def parameters(self) -> list[str]:
        """Keyword arguments accepted by this operation."""
        return [python_name(wire) for wire in self.spec.argument_names()]

    def _bind(self, kwargs: Mapping[str, Any]) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for key, value in kwargs.items():
            wire = self._arguments.get(key)
            if wire is None:
                msg = (
                    f"{self.operation_id}() got an unexpected argument '{key}'. "
                    f"Accepted: {', '.join(self.parameters) or 'none'}"
                )
                raise UnknownParameterError(msg)
            if wire in values:
                raise UnknownParameterError(f"{self.operation_id}() got multiple values for argument '{key}'")
            values[wire] = value
        return values

    def _payload(self, values: Mapping[str, Any], stack: ExitStack | None) -> tuple[str | bytes | None, Any]:
        spec = self.spec
        if spec.body is not None:
            value = values.get(spec.body)
            return (None if value is None else _json_body(spec.body, value)), None
        if spec.body_fields is not None:
            fields = {name: values[name] for name in spec.body_fields if values.get(name) is not None}
            return _json_body(self.operation_id, fields), None
        if spec.raw_body is not None:
            value = values.get(spec.raw_body)
            if value is not None and not isinstance(value, str | bytes):
                raise InvalidParameterError(
                    f"Argument '{python_name(spec.raw_body)}' must be str or bytes, got {type(value).__name__}",
                )
            return value, None
        if spec.files is not None and values.get(spec.files) is not None:
            return None, _file_parts(spec.files, values[spec.files], stack)
        return None, None

    def _descriptor(
        self,
        kwargs: Mapping[str, Any],
        opts: RequestOptions | Mapping[str, Any] | None,
        stack: ExitStack | None,
    ) -> OperationDescriptor:
        spec = self.spec
        options = _request_options(opts)
        values = self._bind(kwargs)

        path_params = {name: values.get(name) for name in spec.path_params}
        # Fail before any file is opened or request is sent
        build_path(spec.path, path_params)

        query_params = {wire: values.get(argument) for wire, argument in spec.query.items()}
        body, files = self._payload(values, stack)

        headers = dict(spec.headers)
        for header, argument in spec.header_params.items():
            if values.get(argument) is not None:
                headers[header] = str(values[argument])
        if options.headers:
            headers.update(options.headers)

        return OperationDescriptor(
            method=spec.method,
            path=spec.path,
            path_params=path_params,
            query_params=query_params,
            body=body,
            files=files,
            headers=headers,
            expects_response_body=spec.response,
            experimental=spec.experimental,
            act_as=options.act_as,
            operation_id=self.operation_id,
        )

    def describe(self, *, opts: RequestOptions | Mapping[str, Any] | None = None, **kwargs: Any) -> OperationDescriptor:
        """Build the descriptor for a call without sending it."""
        return self._descriptor(kwargs, opts, None)

    async def __call__(self, *, opts: RequestOptions | Mapping[str, Any] | None = None, **kwargs: Any) -> JiraResult:
        with ExitStack() as stack:
            descriptor = self._descriptor(kwargs, opts, stack)
            return await self._client.request(descriptor)

    def __repr__(self) -> str:
        return f"<Operation {self.operation_id}: {self.spec.method} {self.spec.path}>"


class Service:
    """A resource group: attribute access returns its operations."""

    def __init__(self, client: "JiraClient", spec: ServiceSpec) -> None:
        self.name = spec.name
        self.description = spec.description
        self._operations = {name: Operation(client, spec.name, name, endpoint) for name, endpoint in spec.operations.items()}

    @property
    def operations(self) -> list[str]:
        return sorted(self._operations)

    def __getattr__(self, name: str) -> Operation:
        operations = self.__dict__.get("_operations", {})
        if name in operations:
            return operations[name]
        raise UnknownOperationError(f"Service '{self.__dict__.get('name')}' has no operation '{name}'")

    def __iter__(self) -> Iterator[Operation]:
        return iter(self._operations.values())

    def __dir__(self) -> list[str]:
        return [*super().__dir__(), *self._operations]

    def __repr__(self) -> str:
        return f"<Service {self.name}: {len(self._operations)} operations>"


class JiraClient:
    """Jira REST client bound to one execution context.

    ``config`` is a :class:`~jira_rest.config.schemas.DirectConfig`, a
    :class:`~jira_rest.config.schemas.HostConfig` or an equivalent mapping.
    ``transport`` replaces the HTTP transport of a direct context (tests use
    ``httpx.MockTransport``).
    """

    def __init__(
        self,
        config: JiraConfig | Mapping[str, Any],
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = validate_jira_config(config)
        self.context = create_context(self.config, transport=transport)
        self._services = {name: Service(self, spec) for name, spec in load_catalog().items()}
        logger.debug(
            "Initialized Jira client (%s context, %d services)",
            describe_context(self.context),
            len(self._services),
        )

    @classmethod
    def from_settings(
        cls,
        settings: Any = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        configure_logs: bool = False,
        **overrides: Any,
    ) -> "JiraClient":
        """Create a direct client from ``JIRA_*`` environment/YAML settings.

        With ``configure_logs`` the ``jira_rest`` logger is set up at the
        configured ``log_level``.
        """
        from jira_rest.config.loader import ConfigLoader  # noqa: PLC0415

        if settings is None:
            settings = ConfigLoader().settings
        if configure_logs:
            configure_logging(settings.log_level)
        return cls(settings.to_direct_config(**overrides), transport=transport)

    @property
    def client_type(self) -> str:
        return describe_context(self.context)

    @property
    def services(self) -> list[str]:
        return sorted(self._services)

    def __getattr__(self, name: str) -> Service:
        services = self.__dict__.get("_services", {})
        if name in services:
            return services[name]
        raise UnknownOperationError(f"Jira client has no service '{name}'")

    def __dir__(self) -> list[str]:
        return [*super().__dir__(), *self._services]

    async def request(self, descriptor: OperationDescriptor) -> JiraResult:
        """Dispatch a descriptor through this client's execution context."""
        return await jira_request(descriptor, self.context)

    async def aclose(self) -> None:
        await self.context.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
