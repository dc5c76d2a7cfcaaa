"""Template substitution functionality."""

import json
import re
from collections.abc import Mapping
from typing import Any

from .expressions import DEFAULT_REGEX, MISSING, URL_REGEX, lookup


def to_text(value: Any) -> str:
    """Stringify a context value the way it should appear inside a rendered string."""
    match value:
        case str():
            return value
        case bool():
            return "true" if value else "false"
        case None:
            return ""
        case _ if value is MISSING:
            return ""
        case float() if value.is_integer():
            return str(int(value))
        case dict() | list():
            return json.dumps(value, separators=(",", ":"))
        case _:
            return str(value)


def _sub_string(line: str, context: Mapping[str, Any], regex: re.Pattern[str]) -> str:
    def _repl(match: re.Match[str]) -> str:
        expr = next(group for group in match.groups() if group is not None)
        return to_text(lookup(context, expr))

    return regex.sub(_repl, line)


def render(template: str, context: Mapping[str, Any]) -> str:
    """Resolve ``<%= expr %>`` and ``${expr}`` placeholders."""
    return _sub_string(template, context, DEFAULT_REGEX)


def render_url(template: str, context: Mapping[str, Any]) -> str:
    """Resolve ``${expr}`` and ``{expr}`` placeholders in a URL."""
    return _sub_string(template, context, URL_REGEX)


def walk(obj: Any, context: Mapping[str, Any]) -> Any:
    """Recursively render every string inside an arbitrary JSON value."""
    match obj:
        case str():
            return render(obj, context)
        case dict():
            return {key: walk(value, context) for key, value in obj.items()}
        case list():
            return [walk(item, context) for item in obj]
        case _:
            return obj
