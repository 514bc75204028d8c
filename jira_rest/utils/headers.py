"""Request header assembly: defaults, authentication and per-call overrides."""

import base64
from collections.abc import Mapping

import httpx

DEFAULT_HEADERS: dict[str, str] = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}
EXPERIMENTAL_HEADER = ("X-ExperimentalApi", "opt-in")


def basic_auth_header(email: str, api_token: str) -> str:
    """Build an HTTP Basic ``Authorization`` value."""
    credentials = base64.b64encode(f"{email}:{api_token}".encode()).decode("ascii")
    return f"Basic {credentials}"


def create_headers(
    *,
    auth_headers: Mapping[str, str] | None = None,
    default_headers: Mapping[str, str] | None = None,
    headers: Mapping[str, str] | None = None,
    experimental: bool = False,
    multipart: bool = False,
) -> dict[str, str]:
    """Merge request headers; later sources win, names compare case-insensitively.

    Order: JSON defaults, authentication, experimental opt-in, configured
    defaults, per-call headers.
    """
    merged = httpx.Headers(DEFAULT_HEADERS)
    if auth_headers:
        merged.update(auth_headers)
    if experimental:
        merged[EXPERIMENTAL_HEADER[0]] = EXPERIMENTAL_HEADER[1]
    if default_headers:
        merged.update(default_headers)
    if headers:
        merged.update(headers)

    # The multipart encoder must be free to add its boundary
    if multipart and "boundary=" not in merged.get("Content-Type", ""):
        merged.pop("Content-Type", None)

    # ``raw`` keeps the caller's header name casing
    return {key.decode(merged.encoding): value.decode(merged.encoding) for key, value in merged.raw}
