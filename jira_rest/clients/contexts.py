"""Execution contexts: how a prepared request physically leaves the process.

``DirectContext`` performs the HTTP call with ``httpx``; ``HostContext``
forwards it through a capability supplied by an enclosing host runtime.
Both translate their native failures into :class:`TransportError` and
return a response exposing ``status_code``, ``headers`` and ``content``.
"""

import asyncio
import logging
from typing import Any, Protocol, runtime_checkable

import httpx

from jira_rest.config.schemas import DirectConfig, HostConfig, JiraConfig
from jira_rest.type_definitions import FailureKind, PreparedRequest, TransportResponse

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """A request that never completed, tagged with its failure kind."""

    def __init__(self, kind: FailureKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message


@runtime_checkable
class ExecutionContext(Protocol):
    """Runtime through which a prepared request is carried out."""

    default_headers: dict[str, str]

    def auth_headers(self) -> dict[str, str]: ...

    async def send(self, request: PreparedRequest) -> TransportResponse: ...

    async def aclose(self) -> None: ...


class HostRequester(Protocol):
    async def request_jira(
        self,
        path: str,
        *,
        method: str,
        headers: dict[str, str],
        body: str | bytes | None,
    ) -> TransportResponse: ...


class HostCapability(Protocol):
    """Capability object injected by the host runtime."""

    def as_user(self) -> HostRequester: ...

    def as_app(self) -> HostRequester: ...


class DirectContext:
    """Direct HTTP(S) access using one shared ``httpx.AsyncClient``."""

    def __init__(
        self,
        config: DirectConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.default_headers = dict(config.default_headers)
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=httpx.Timeout(config.timeout),
            verify=config.verify_ssl,
            transport=transport,
        )

    def auth_headers(self) -> dict[str, str]:
        return self.config.auth_headers()

    async def send(self, request: PreparedRequest) -> httpx.Response:
        http_request = self._client.build_request(
            request.method,
            request.url,
            headers=request.headers,
            content=request.content,
            files=request.files,
        )
        try:
            return await self._client.send(http_request)
        except httpx.TimeoutException as e:
            raise TransportError(
                FailureKind.TIMEOUT,
                f"Request timed out after {self.config.timeout}s: {e!s}",
            ) from e
        except (httpx.ConnectError, httpx.NetworkError) as e:
            raise TransportError(FailureKind.CONNECTION, f"Connection to Jira failed: {e!s}") from e
        except httpx.DecodingError as e:
            raise TransportError(FailureKind.DECODING, f"Cannot decode response body: {e!s}") from e
        except httpx.RequestError as e:
            raise TransportError(FailureKind.TRANSPORT, f"Transport error: {e!s}") from e

    async def aclose(self) -> None:
        await self._client.aclose()


class HostContext:
    """Routes requests through a host runtime's ``request_jira`` entry point.

    The host authenticates the call, so no ``Authorization`` header is added.
    """

    def __init__(self, config: HostConfig) -> None:
        self.config = config
        self.api: HostCapability = config.api
        self.default_headers = dict(config.default_headers)

    def auth_headers(self) -> dict[str, str]:
        return {}

    async def _encode_body(self, request: PreparedRequest) -> tuple[dict[str, str], str | bytes | None]:
        if not request.files:
            return dict(request.headers), request.content

        # The bridge only carries a byte payload, so multipart is encoded here
        encoded = httpx.Request(request.method, request.url, headers=request.headers, files=request.files)
        body = await encoded.aread()
        headers = {key: value for key, value in encoded.headers.items() if key not in ("host", "content-length")}
        return headers, body

    async def send(self, request: PreparedRequest) -> TransportResponse:
        """Forward the request through the capability for ``request.act_as``.

        Multipart encoding happens before the bridge is involved, so a file
        part that cannot be read raises to the caller as a usage error.
        """
        headers, body = await self._encode_body(request)
        try:
            requester = self.api.as_app() if request.act_as == "app" else self.api.as_user()
            call = requester.request_jira(request.url, method=request.method, headers=headers, body=body)
            if self.config.timeout is not None:
                return await asyncio.wait_for(call, timeout=self.config.timeout)
            return await call
        except TimeoutError as e:
            raise TransportError(
                FailureKind.TIMEOUT,
                f"Host request timed out after {self.config.timeout}s",
            ) from e
        except (ConnectionError, OSError) as e:
            raise TransportError(FailureKind.CONNECTION, f"Host connection failed: {e!s}") from e
        except Exception as e:
            # Host runtimes raise their own error types; all of them mean the call did not complete
            raise TransportError(FailureKind.TRANSPORT, f"Host request failed: {e!s}") from e

    async def aclose(self) -> None:
        # The host owns the capability's lifecycle
        return None


def create_context(
    config: JiraConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> DirectContext | HostContext:
    """Create the execution context matching the configuration variant."""
    if isinstance(config, HostConfig):
        if transport is not None:
            logger.warning("Ignoring custom transport for host-mediated context")
        return HostContext(config)
    return DirectContext(config, transport=transport)


def describe_context(context: Any) -> str:
    """Short context name for log messages."""
    return "host" if isinstance(context, HostContext) else "direct"
