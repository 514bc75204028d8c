"""Type definitions for the Jira REST client.

This module contains the value objects passed between the generated endpoint
operations, the request dispatcher and the execution contexts.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Literal, Protocol

if TYPE_CHECKING:
    from jira_rest.clients.exceptions import JiraError

type HttpMethod = Literal["GET", "POST", "PUT", "DELETE"]
type ActAs = Literal["user", "app"]
type ClientType = Literal["direct", "host"]

type PathValue = str | int | bool
type QueryScalar = str | int | float | bool
type QueryValue = QueryScalar | Sequence[QueryScalar] | None
type JiraData = Any

HTTP_METHODS: frozenset[str] = frozenset({"GET", "POST", "PUT", "DELETE"})


class FailureKind(StrEnum):
    """Kind tag carried by every failed result."""

    TIMEOUT = "timeout"
    CONNECTION = "connection"
    CANCELLED = "cancelled"
    TRANSPORT = "transport"
    PROTOCOL = "protocol"
    DECODING = "decoding"

    @property
    def category(self) -> str:
        """Error category: ``transport``, ``protocol`` or ``decoding``."""
        if self in (FailureKind.PROTOCOL, FailureKind.DECODING):
            return self.value
        return "transport"


@dataclass(frozen=True, slots=True)
class RequestOptions:
    """Per-call options accepted by every generated operation."""

    headers: Mapping[str, str] | None = None
    act_as: ActAs = "user"


@dataclass(frozen=True, slots=True)
class OperationDescriptor:
    """A single API call, fully described and independent of the execution context."""

    method: HttpMethod
    path: str
    path_params: Mapping[str, PathValue] = field(default_factory=dict)
    query_params: Mapping[str, QueryValue] = field(default_factory=dict)
    body: str | bytes | None = None
    files: Sequence[tuple[str, Any]] | None = None
    headers: Mapping[str, str] = field(default_factory=dict)
    expects_response_body: bool = True
    experimental: bool = False
    act_as: ActAs = "user"
    operation_id: str | None = None

    def __post_init__(self) -> None:
        if self.method not in HTTP_METHODS:
            msg = f"Unsupported HTTP method: {self.method}"
            raise ValueError(msg)
        if self.act_as not in ("user", "app"):
            msg = f"Invalid act_as value: {self.act_as}. Must be 'user' or 'app'"
            raise ValueError(msg)

    @property
    def label(self) -> str:
        """Short human readable name used in log and error messages."""
        return self.operation_id or f"{self.method} {self.path}"


@dataclass(frozen=True, slots=True)
class PreparedRequest:
    """A descriptor resolved to concrete URL, headers and payload."""

    method: HttpMethod
    url: str
    headers: Mapping[str, str]
    content: str | bytes | None = None
    files: Sequence[tuple[str, Any]] | None = None
    act_as: ActAs = "user"


class TransportResponse(Protocol):
    """Response shape shared by both execution contexts (``httpx.Response`` fits)."""

    status_code: int
    headers: Mapping[str, str]
    content: bytes


@dataclass(frozen=True, slots=True)
class JiraSuccess:
    """Successful call; ``data`` is decoded JSON, text, raw bytes or None."""

    status: int
    data: JiraData = None
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def success(self) -> Literal[True]:
        return True

    def raise_for_error(self) -> JiraData:
        """Return the decoded data; successes never raise."""
        return self.data


@dataclass(frozen=True, slots=True)
class JiraFailure:
    """Failed call: transport, protocol or decoding error.

    ``status`` is 0 when the request never completed. ``error`` holds the
    machine-readable error payload returned by the server when there is one.
    """

    kind: FailureKind
    status: int
    message: str
    error: JiraData = None
    descriptor: OperationDescriptor | None = None
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def success(self) -> Literal[False]:
        return False

    def to_exception(self) -> "JiraError":
        """Build the matching exception from :mod:`jira_rest.clients.exceptions`."""
        from jira_rest.clients.exceptions import exception_for_failure  # noqa: PLC0415

        return exception_for_failure(self)

    def raise_for_error(self) -> JiraData:
        """Raise the matching :class:`~jira_rest.clients.exceptions.JiraError`."""
        raise self.to_exception()


type JiraResult = JiraSuccess | JiraFailure
