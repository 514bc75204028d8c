"""Tests for the direct and host-mediated execution contexts."""

import httpx
import pytest

from jira_rest.clients.contexts import (
    DirectContext,
    ExecutionContext,
    HostContext,
    TransportError,
    create_context,
    describe_context,
)
from jira_rest.config.schemas import DirectConfig, HostConfig
from jira_rest.type_definitions import FailureKind, PreparedRequest

BASE_URL = "https://example.atlassian.net"


def _prepared(**kwargs) -> PreparedRequest:
    values = {"method": "GET", "url": "/rest/api/3/myself", "headers": {"Accept": "application/json"}}
    values.update(kwargs)
    return PreparedRequest(**values)


class WithoutUserContext:
    """Capability for an invocation that has no user to act as."""

    def as_user(self):
        raise RuntimeError("no user context in this invocation")

    def as_app(self):
        raise RuntimeError("app access not granted")


@pytest.mark.unit
class TestDirectContext:
    @pytest.mark.parametrize(
        ("auth", "expected"),
        [
            ({"bearer_token": "oauth-token"}, "Bearer oauth-token"),
            ({"jwt": "signed.jwt.value"}, "JWT signed.jwt.value"),
        ],
    )
    def test_auth_header_follows_auth_mode(self, auth: dict, expected: str) -> None:
        context = DirectContext(DirectConfig(base_url=BASE_URL, **auth))

        assert context.auth_headers() == {"Authorization": expected}

    def test_basic_auth_header(self, direct_context: DirectContext) -> None:
        assert direct_context.auth_headers()["Authorization"].startswith("Basic ")

    def test_satisfies_context_protocol(self, direct_context: DirectContext) -> None:
        assert isinstance(direct_context, ExecutionContext)
        assert describe_context(direct_context) == "direct"

    @pytest.mark.asyncio
    async def test_send_uses_base_url(self, direct_context: DirectContext, stub_jira) -> None:
        response = await direct_context.send(_prepared())

        assert response.status_code == 200
        assert str(stub_jira.last.url) == f"{BASE_URL}/rest/api/3/myself"

    @pytest.mark.asyncio
    async def test_multipart_upload_is_streamed_by_httpx(self, direct_context: DirectContext, stub_jira) -> None:
        request = _prepared(
            method="POST",
            url="/rest/api/3/issue/PROJ-1/attachments",
            headers={"X-Atlassian-Token": "no-check"},
            files=[("file", ("notes.txt", b"hello attachment", "text/plain"))],
        )

        await direct_context.send(request)

        sent = stub_jira.last
        assert sent.headers["Content-Type"].startswith("multipart/form-data; boundary=")
        assert b'filename="notes.txt"' in sent.content
        assert b"hello attachment" in sent.content

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("error", "kind"),
        [
            (httpx.ConnectTimeout("slow"), FailureKind.TIMEOUT),
            (httpx.ConnectError("refused"), FailureKind.CONNECTION),
            (httpx.ReadError("reset"), FailureKind.CONNECTION),
            (httpx.RemoteProtocolError("garbage"), FailureKind.TRANSPORT),
            (httpx.TooManyRedirects("redirect loop"), FailureKind.TRANSPORT),
            (httpx.DecodingError("incorrect header check"), FailureKind.DECODING),
        ],
    )
    async def test_transport_errors_are_tagged(
        self, direct_context: DirectContext, stub_jira, error: Exception, kind: FailureKind,
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise error

        stub_jira.handle(handler)

        with pytest.raises(TransportError) as exc_info:
            await direct_context.send(_prepared())

        assert exc_info.value.kind is kind

    @pytest.mark.asyncio
    async def test_aclose_closes_http_client(self, direct_context: DirectContext) -> None:
        await direct_context.aclose()

        assert direct_context._client.is_closed


@pytest.mark.unit
class TestHostContext:
    def test_host_adds_no_authorization(self, host_context: HostContext) -> None:
        assert host_context.auth_headers() == {}
        assert describe_context(host_context) == "host"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("act_as", ["user", "app"])
    async def test_identity_follows_act_as(self, host_context: HostContext, host_api, act_as: str) -> None:
        await host_context.send(_prepared(act_as=act_as))

        assert host_api.calls[-1]["identity"] == act_as

    @pytest.mark.asyncio
    async def test_forwards_request_tuple(self, host_context: HostContext, host_api) -> None:
        await host_context.send(_prepared(method="PUT", url="/rest/api/3/x?y=1", content='{"a": 1}'))

        call = host_api.calls[-1]
        assert call["path"] == "/rest/api/3/x?y=1"
        assert call["method"] == "PUT"
        assert call["body"] == '{"a": 1}'
        assert call["headers"] == {"Accept": "application/json"}

    @pytest.mark.asyncio
    async def test_multipart_is_encoded_for_the_bridge(self, host_context: HostContext, host_api) -> None:
        request = _prepared(
            method="POST",
            url="/rest/api/3/issue/PROJ-1/attachments",
            headers={"X-Atlassian-Token": "no-check"},
            files=[("file", ("notes.txt", b"hello attachment"))],
        )

        await host_context.send(request)

        call = host_api.calls[-1]
        assert isinstance(call["body"], bytes)
        assert b"hello attachment" in call["body"]
        assert call["headers"]["content-type"].startswith("multipart/form-data; boundary=")
        assert call["headers"]["x-atlassian-token"] == "no-check"
        assert "content-length" not in call["headers"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("error", "kind"),
        [
            (ConnectionRefusedError("refused"), FailureKind.CONNECTION),
            (RuntimeError("bridge unavailable"), FailureKind.TRANSPORT),
        ],
    )
    async def test_host_errors_are_tagged(
        self, host_context: HostContext, host_api, error: Exception, kind: FailureKind,
    ) -> None:
        host_api.error = error

        with pytest.raises(TransportError) as exc_info:
            await host_context.send(_prepared())

        assert exc_info.value.kind is kind

    @pytest.mark.asyncio
    async def test_capability_raising_synchronously_is_tagged(self) -> None:
        context = HostContext(HostConfig(api=WithoutUserContext()))

        with pytest.raises(TransportError) as exc_info:
            await context.send(_prepared())

        assert exc_info.value.kind is FailureKind.TRANSPORT
        assert "no user context" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_no_timeout_when_unset(self, host_api) -> None:
        context = HostContext(HostConfig(api=host_api))
        host_api.delay = 0.01

        response = await context.send(_prepared())

        assert response.status_code == 200


@pytest.mark.unit
def test_create_context_picks_variant(direct_config: DirectConfig, host_api) -> None:
    assert isinstance(create_context(direct_config), DirectContext)
    assert isinstance(create_context(HostConfig(api=host_api)), HostContext)
