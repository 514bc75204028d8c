"""API client package for the Jira REST client.

Lazily expose the client classes so that importing the exception module does
not pull in the endpoint catalog.
"""

__all__ = ["DirectContext", "HostContext", "JiraClient"]


def __getattr__(name: str) -> object:  # pragma: no cover - simple lazy import shim
    if name == "JiraClient":
        from .jira_client import JiraClient as _JiraClient  # noqa: PLC0415

        return _JiraClient
    if name in ("DirectContext", "HostContext"):
        from . import contexts  # noqa: PLC0415

        return getattr(contexts, name)
    raise AttributeError(name)
