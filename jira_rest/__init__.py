"""Async client for the Jira Cloud REST APIs.

Every endpoint is described declaratively in the bundled catalog and executed
through one shared dispatcher, either directly over HTTP or through a host
runtime capability.
"""

from jira_rest.clients.exceptions import (
    ConfigurationValidationError,
    JiraApiError,
    JiraAuthenticationError,
    JiraError,
    JiraUsageError,
)
from jira_rest.clients.jira_client import JiraClient
from jira_rest.config.schemas import DirectConfig, HostConfig
from jira_rest.type_definitions import (
    FailureKind,
    JiraFailure,
    JiraResult,
    JiraSuccess,
    OperationDescriptor,
    RequestOptions,
)
from jira_rest.utils.dispatcher import jira_request

__version__ = "1.0.0"

__all__ = [
    "ConfigurationValidationError",
    "DirectConfig",
    "FailureKind",
    "HostConfig",
    "JiraApiError",
    "JiraAuthenticationError",
    "JiraClient",
    "JiraError",
    "JiraFailure",
    "JiraResult",
    "JiraSuccess",
    "JiraUsageError",
    "OperationDescriptor",
    "RequestOptions",
    "jira_request",
]
