"""Common exceptions for the Jira REST client.

Expected failures (network problems, error responses, undecodable bodies) are
returned as :class:`~jira_rest.type_definitions.JiraFailure` values. The classes
below are raised for programming and configuration errors, and by
``raise_for_error()`` for callers that prefer exceptions.
"""

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from jira_rest.type_definitions import JiraFailure

logger = logging.getLogger(__name__)

HTTP_UNAUTHORIZED = 401
HTTP_FORBIDDEN = 403
HTTP_NOT_FOUND = 404
HTTP_TOO_MANY_REQUESTS = 429


class JiraError(Exception):
    """Base exception for all Jira client errors."""

    def __init__(self, message: str, failure: "JiraFailure | None" = None) -> None:
        super().__init__(message)
        self.failure = failure

    @property
    def status(self) -> int:
        return self.failure.status if self.failure else 0


class JiraConnectionError(JiraError):
    """Error when connection to the Jira server fails."""


class JiraTimeoutError(JiraConnectionError):
    """Error when a request exceeds the configured timeout."""


class JiraCancelledError(JiraError):
    """Error when an in-flight request was cancelled."""


class JiraApiError(JiraError):
    """Error when the Jira API returns an error response."""


class JiraAuthenticationError(JiraApiError):
    """Error when authentication to Jira fails."""


class JiraResourceNotFoundError(JiraApiError):
    """Error when a requested Jira resource is not found."""


class JiraCaptchaError(JiraAuthenticationError):
    """Error when Jira requires CAPTCHA resolution."""


class JiraRateLimitError(JiraApiError):
    """Error when the rate limit is exceeded."""

    def __init__(
        self,
        message: str,
        failure: "JiraFailure | None" = None,
        retry_after: int | None = None,
    ) -> None:
        """Initialize a rate limit error with optional retry-after seconds."""
        super().__init__(message, failure)
        self.retry_after = retry_after


class JiraDecodingError(JiraError):
    """Error when a successful response body cannot be decoded."""


class CatalogError(JiraError):
    """Error when the endpoint catalog is malformed."""


class JiraUsageError(JiraError, ValueError):
    """Programming error in the calling code, raised before any I/O."""


class UnresolvedPathParameterError(JiraUsageError):
    """A path placeholder has no value."""


class UnexpectedPathParameterError(JiraUsageError):
    """A path parameter was supplied for a placeholder the template does not have."""


class InvalidParameterError(JiraUsageError):
    """A parameter value cannot be serialized."""


class UnknownOperationError(JiraUsageError, AttributeError):
    """No catalog operation or service with the requested name."""


class UnknownParameterError(JiraUsageError, TypeError):
    """An operation was called with an argument it does not declare."""


class ConfigurationValidationError(JiraError, ValueError):
    """Configuration validation failure with detailed context."""

    def __init__(
        self,
        parameter_name: str,
        invalid_value: Any,
        expected: str,
        additional_context: str | None = None,
    ) -> None:
        self.parameter_name = parameter_name
        self.invalid_value = invalid_value
        self.expected = expected
        self.additional_context = additional_context

        sanitized_value = self._sanitize_error_value(parameter_name, invalid_value)

        message = f"Invalid {parameter_name}: '{sanitized_value}' (expected: {expected})"
        if additional_context:
            message += f" - {additional_context}"

        super().__init__(message)

        logger.warning("Configuration validation failed: %s", message)

    @staticmethod
    def _sanitize_error_value(parameter_name: str, value: Any) -> str:
        """Sanitize error values to prevent credential disclosure."""
        if value is None:
            return "None"

        if any(pattern in parameter_name.lower() for pattern in ("password", "token", "secret", "jwt")):
            return "[REDACTED]"

        if isinstance(value, Mapping):
            return f"{{{', '.join(map(str, value))}}}"

        value_str = str(value)

        if len(value_str) > 100:
            return f"{value_str[:50]}...(truncated, {len(value_str)} chars total)"

        return value_str


def _retry_after(failure: "JiraFailure") -> int | None:
    value = failure.headers.get("Retry-After") or failure.headers.get("retry-after")
    if value and str(value).isdigit():
        return int(value)
    return None


def exception_for_failure(failure: "JiraFailure") -> JiraError:
    """Map a failed result to the matching exception class."""
    from jira_rest.type_definitions import FailureKind  # noqa: PLC0415

    match failure.kind:
        case FailureKind.TIMEOUT:
            return JiraTimeoutError(failure.message, failure)
        case FailureKind.CONNECTION | FailureKind.TRANSPORT:
            return JiraConnectionError(failure.message, failure)
        case FailureKind.CANCELLED:
            return JiraCancelledError(failure.message, failure)
        case FailureKind.DECODING:
            return JiraDecodingError(failure.message, failure)

    if "CAPTCHA" in failure.message:
        return JiraCaptchaError(failure.message, failure)
    if failure.status == HTTP_NOT_FOUND:
        return JiraResourceNotFoundError(failure.message, failure)
    if failure.status in {HTTP_UNAUTHORIZED, HTTP_FORBIDDEN}:
        return JiraAuthenticationError(failure.message, failure)
    if failure.status == HTTP_TOO_MANY_REQUESTS:
        return JiraRateLimitError(failure.message, failure, retry_after=_retry_after(failure))
    return JiraApiError(failure.message, failure)
