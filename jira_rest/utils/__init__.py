"""Request building and dispatch utilities.

Delay imports so low-level helpers can be used without loading the dispatcher.
"""

__all__ = ["jira_request"]


def __getattr__(name: str) -> object:  # pragma: no cover - lazy shim
    if name == "jira_request":
        from .dispatcher import jira_request as _jira_request  # noqa: PLC0415

        return _jira_request
    raise AttributeError(name)
