"""Shared pytest fixtures and configuration for all tests."""

import asyncio
import os
from collections.abc import Callable
from typing import Any

import httpx
import pytest
from _pytest.config import Config

from jira_rest.clients.contexts import DirectContext, HostContext
from jira_rest.clients.jira_client import JiraClient
from jira_rest.config.schemas import DirectConfig, HostConfig

BASE_URL = "https://example.atlassian.net"

type Handler = Callable[[httpx.Request], httpx.Response]


def pytest_configure(config: Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark a test as a unit test")
    config.addinivalue_line("markers", "functional: mark a test as a functional test")
    config.addinivalue_line(
        "markers",
        "integration: mark a test as an integration test against a live Jira site",
    )
    config.addinivalue_line("markers", "slow: mark a test as slow-running")


def _env_flag(name: str, default: bool = False) -> bool:
    """Read boolean environment flag (true/false)."""
    val = os.environ.get(name, "true" if default else "false").strip().lower()
    return val in {"1", "true", "yes", "on"}


def pytest_collection_modifyitems(config: Config, items: list[pytest.Item]) -> None:
    """Skip live integration tests unless JIRA_REST_RUN_INTEGRATION is true."""
    if _env_flag("JIRA_REST_RUN_INTEGRATION"):
        return

    skip_integration = pytest.mark.skip(
        reason="Integration tests disabled by default. Set JIRA_REST_RUN_INTEGRATION=true to enable.",
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


class StubJira:
    """Callable for ``httpx.MockTransport`` that records requests.

    The default reply is ``200 {}``; tests swap in their own handler with
    :meth:`respond` or :meth:`handle`.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._handler: Handler = lambda request: httpx.Response(200, json={})

    def respond(self, *args: Any, **kwargs: Any) -> None:
        self._handler = lambda request: httpx.Response(*args, **kwargs)

    def handle(self, handler: Handler) -> None:
        self._handler = handler

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return self._handler(request)


class FakeRequester:
    """Host requester for one identity; replies with the shared stub handler."""

    def __init__(self, identity: str, host: "FakeHostApi") -> None:
        self.identity = identity
        self.host = host

    async def request_jira(
        self,
        path: str,
        *,
        method: str,
        headers: dict[str, str],
        body: str | bytes | None,
    ) -> httpx.Response:
        self.host.calls.append(
            {"identity": self.identity, "path": path, "method": method, "headers": headers, "body": body},
        )
        if self.host.delay:
            await asyncio.sleep(self.host.delay)
        if self.host.error is not None:
            raise self.host.error
        request = httpx.Request(method, BASE_URL + path, headers=headers, content=body)
        return self.host.stub(request)


class FakeHostApi:
    """Capability object mimicking a host runtime's ``as_user``/``as_app`` API."""

    def __init__(self, stub: StubJira) -> None:
        self.stub = stub
        self.calls: list[dict[str, Any]] = []
        self.delay = 0.0
        self.error: BaseException | None = None

    def as_user(self) -> FakeRequester:
        return FakeRequester("user", self)

    def as_app(self) -> FakeRequester:
        return FakeRequester("app", self)


@pytest.fixture
def stub_jira() -> StubJira:
    return StubJira()


@pytest.fixture
def direct_config() -> DirectConfig:
    return DirectConfig(base_url=BASE_URL, email="user@example.com", api_token="secret-token")


@pytest.fixture
def direct_context(direct_config: DirectConfig, stub_jira: StubJira) -> DirectContext:
    return DirectContext(direct_config, transport=httpx.MockTransport(stub_jira))


@pytest.fixture
def host_api(stub_jira: StubJira) -> FakeHostApi:
    return FakeHostApi(stub_jira)


@pytest.fixture
def host_context(host_api: FakeHostApi) -> HostContext:
    return HostContext(HostConfig(api=host_api, timeout=1.0))


@pytest.fixture
def direct_client(direct_config: DirectConfig, stub_jira: StubJira) -> JiraClient:
    return JiraClient(direct_config, transport=httpx.MockTransport(stub_jira))


@pytest.fixture
def host_client(host_api: FakeHostApi) -> JiraClient:
    return JiraClient({"type": "forge", "api": host_api})
