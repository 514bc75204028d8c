"""URL templating and query string encoding for Jira REST paths."""

import re
from collections.abc import Mapping, Sequence
from urllib.parse import quote, urlencode

from jira_rest.clients.exceptions import (
    InvalidParameterError,
    UnexpectedPathParameterError,
    UnresolvedPathParameterError,
)
from jira_rest.type_definitions import PathValue, QueryValue

PLACEHOLDER_PATTERN = re.compile(r"\{([^{}]+)\}")


def placeholders(template: str) -> list[str]:
    """Return placeholder names of a path template in order of appearance."""
    return PLACEHOLDER_PATTERN.findall(template)


def _scalar_to_str(value: object) -> str:
    # Booleans go first: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str | int | float):
        return str(value)
    msg = f"Cannot serialize value of type {type(value).__name__}: {value!r}"
    raise InvalidParameterError(msg)


def build_path(template: str, path_params: Mapping[str, PathValue] | None = None) -> str:
    """Substitute ``{name}`` placeholders with percent-encoded path segments.

    Raises:
        UnresolvedPathParameterError: a placeholder has no (or a ``None``) value
        UnexpectedPathParameterError: a value was given for an unknown placeholder

    """
    params = dict(path_params or {})
    names = placeholders(template)

    missing = [name for name in names if params.get(name) is None]
    if missing:
        msg = f"Unresolved path parameter(s) {', '.join(missing)} in '{template}'"
        raise UnresolvedPathParameterError(msg)

    extra = sorted(set(params) - set(names))
    if extra:
        msg = f"Path parameter(s) {', '.join(extra)} do not appear in '{template}'"
        raise UnexpectedPathParameterError(msg)

    return PLACEHOLDER_PATTERN.sub(
        lambda match: quote(_scalar_to_str(params[match.group(1)]), safe=""),
        template,
    )


def query_pairs(query_params: Mapping[str, QueryValue] | None) -> list[tuple[str, str]]:
    """Flatten query parameters into ordered ``(key, value)`` pairs.

    ``None`` values are dropped; empty strings, ``0`` and ``False`` are kept.
    Sequences produce one pair per element.
    """
    pairs: list[tuple[str, str]] = []
    for key, value in (query_params or {}).items():
        if value is None:
            continue
        if isinstance(value, Mapping):
            msg = f"Query parameter '{key}' must be a scalar or a list of scalars"
            raise InvalidParameterError(msg)
        if isinstance(value, Sequence) and not isinstance(value, str | bytes):
            pairs.extend((key, _scalar_to_str(item)) for item in value if item is not None)
            continue
        pairs.append((key, _scalar_to_str(value)))
    return pairs


def build_query(query_params: Mapping[str, QueryValue] | None) -> str:
    """Encode query parameters, repeating keys for list values."""
    return urlencode(query_pairs(query_params))


def build_url(
    template: str,
    path_params: Mapping[str, PathValue] | None = None,
    query_params: Mapping[str, QueryValue] | None = None,
) -> str:
    """Build the request target (path plus optional query string)."""
    path = build_path(template, path_params)
    query = build_query(query_params)
    return f"{path}?{query}" if query else path
