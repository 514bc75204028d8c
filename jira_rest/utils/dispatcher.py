"""The request dispatcher shared by every generated endpoint operation.

``jira_request`` resolves an :class:`OperationDescriptor` against the active
execution context and always returns a :class:`JiraResult`. Success/failure
classification and body decoding live in :func:`decode_response` so both
context variants share them.
"""

import asyncio
import json
import logging
import time
from collections.abc import Mapping
from typing import Any

from jira_rest.clients.contexts import ExecutionContext, TransportError, describe_context
from jira_rest.type_definitions import (
    FailureKind,
    JiraFailure,
    JiraResult,
    JiraSuccess,
    OperationDescriptor,
    PreparedRequest,
    TransportResponse,
)
from jira_rest.utils.headers import create_headers
from jira_rest.utils.params import build_url

logger = logging.getLogger(__name__)

HTTP_SUCCESS_MIN = 200
HTTP_SUCCESS_MAX = 299
CAPTCHA_HEADER = "X-Authentication-Denied-Reason"


def is_success_status(status: int) -> bool:
    """2xx, including 207 multi-status returned by bulk endpoints."""
    return HTTP_SUCCESS_MIN <= status <= HTTP_SUCCESS_MAX


def prepare_request(descriptor: OperationDescriptor, context: ExecutionContext) -> PreparedRequest:
    """Resolve URL and headers; raises on programming errors before any I/O."""
    url = build_url(descriptor.path, descriptor.path_params, descriptor.query_params)
    headers = create_headers(
        auth_headers=context.auth_headers(),
        default_headers=context.default_headers,
        headers=descriptor.headers,
        experimental=descriptor.experimental,
        multipart=bool(descriptor.files),
    )
    return PreparedRequest(
        method=descriptor.method,
        url=url,
        headers=headers,
        content=descriptor.body,
        files=descriptor.files,
        act_as=descriptor.act_as,
    )


def _headers_dict(headers: Mapping[str, str]) -> dict[str, str]:
    return {str(key): str(value) for key, value in headers.items()}


def _header(headers: Mapping[str, str], name: str) -> str:
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return ""


def _media_type(headers: Mapping[str, str]) -> tuple[str, str]:
    """Return ``(media type, charset)`` from the Content-Type header."""
    raw = _header(headers, "Content-Type")
    media_type, _, params = raw.partition(";")
    charset = "utf-8"
    for param in params.split(";"):
        key, _, value = param.strip().partition("=")
        if key.lower() == "charset" and value:
            charset = value.strip('"')
    return media_type.strip().lower(), charset


def _is_json(media_type: str) -> bool:
    return media_type == "application/json" or media_type.endswith("+json")


def _reason(response: TransportResponse) -> str:
    reason = getattr(response, "reason_phrase", None) or getattr(response, "status_text", None)
    return str(reason) if reason else ""


def _error_payload(response: TransportResponse) -> Any:
    """Structured error body, or ``{"message": ...}`` when the body is not JSON."""
    content = response.content or b""
    if content:
        try:
            return json.loads(content)
        except ValueError:
            pass
    _, charset = _media_type(response.headers)
    text = content.decode(charset, errors="replace").strip() if content else ""
    return {"message": _reason(response) or text or f"HTTP {response.status_code}"}


def _error_message(response: TransportResponse, payload: Any) -> str:
    message = f"HTTP Error {response.status_code}: {_reason(response)}".rstrip(": ")
    if isinstance(payload, Mapping):
        if payload.get("errorMessages"):
            message = f"{message} - {', '.join(map(str, payload['errorMessages']))}"
        elif payload.get("errors"):
            message = f"{message} - {payload['errors']}"
        elif payload.get("message") and payload["message"] != _reason(response):
            message = f"{message} - {payload['message']}"

    denied_reason = _header(response.headers, CAPTCHA_HEADER)
    if "CAPTCHA_CHALLENGE" in denied_reason:
        login_url = ""
        if "; login-url=" in denied_reason:
            login_url = denied_reason.split("; login-url=")[1].strip()
        logger.error("CAPTCHA challenge detected from Jira!")
        message = (
            f"{message} - CAPTCHA challenge detected. Log in through the browser"
            f"{f' at {login_url}' if login_url else ''} to resolve it"
        )
    return message


def decode_response(response: TransportResponse, descriptor: OperationDescriptor) -> JiraResult:
    """Classify a completed response and decode its body."""
    status = response.status_code
    headers = _headers_dict(response.headers)

    if not is_success_status(status):
        payload = _error_payload(response)
        return JiraFailure(
            kind=FailureKind.PROTOCOL,
            status=status,
            message=_error_message(response, payload),
            error=payload,
            descriptor=descriptor,
            headers=headers,
        )

    content = response.content or b""
    if not descriptor.expects_response_body or not content:
        return JiraSuccess(status=status, data=None, headers=headers)

    media_type, charset = _media_type(response.headers)

    if _is_json(media_type) or not media_type:
        try:
            return JiraSuccess(status=status, data=json.loads(content), headers=headers)
        except ValueError as e:
            if media_type:
                return JiraFailure(
                    kind=FailureKind.DECODING,
                    status=status,
                    message=f"Malformed JSON response for {descriptor.label}: {e!s}",
                    error={"message": str(e)},
                    descriptor=descriptor,
                    headers=headers,
                )
            return JiraSuccess(status=status, data=bytes(content), headers=headers)

    if media_type == "text/html":
        return JiraFailure(
            kind=FailureKind.DECODING,
            status=status,
            message=f"Unexpected content type '{media_type}' for {descriptor.label}",
            error={"message": f"Unexpected content type: {media_type}"},
            descriptor=descriptor,
            headers=headers,
        )

    if media_type.startswith("text/"):
        try:
            return JiraSuccess(status=status, data=content.decode(charset), headers=headers)
        except (UnicodeDecodeError, LookupError) as e:
            return JiraFailure(
                kind=FailureKind.DECODING,
                status=status,
                message=f"Cannot decode {media_type} response as {charset}: {e!s}",
                error={"message": str(e)},
                descriptor=descriptor,
                headers=headers,
            )

    # Images, archives and other binary content pass through untouched
    return JiraSuccess(status=status, data=bytes(content), headers=headers)


async def jira_request(descriptor: OperationDescriptor, context: ExecutionContext) -> JiraResult:
    """Carry out one API call and return a normalized result.

    Only programming errors (unresolved path placeholders, unserializable
    parameters) raise; every transport, protocol and decoding failure is
    returned as a :class:`JiraFailure`.
    """
    prepared = prepare_request(descriptor, context)
    started = time.perf_counter()

    try:
        response = await context.send(prepared)
    except TransportError as e:
        logger.warning("%s %s failed (%s): %s", prepared.method, prepared.url, e.kind, e.message)
        return JiraFailure(kind=e.kind, status=0, message=e.message, descriptor=descriptor)
    except asyncio.CancelledError:
        logger.debug("%s %s cancelled", prepared.method, prepared.url)
        # Cancellation is consumed, so clear the pending request on the task
        task = asyncio.current_task()
        if task is not None:
            task.uncancel()
        return JiraFailure(
            kind=FailureKind.CANCELLED,
            status=0,
            message=f"Request cancelled: {descriptor.label}",
            descriptor=descriptor,
        )

    result = decode_response(response, descriptor)
    logger.debug(
        "%s %s -> %s in %.3fs via %s context",
        prepared.method,
        prepared.url,
        result.status,
        time.perf_counter() - started,
        describe_context(context),
    )
    return result
