import re
from collections.abc import Mapping, Sequence
from typing import Any

from .exceptions import TemplatesError

# `<%= expr %>` or `${expr}`
DEFAULT_PATTERN = r"<%=(?P<erb>[\s\S]+?)%>|\$\{(?P<es>[\s\S]+?)\}"
DEFAULT_REGEX = re.compile(DEFAULT_PATTERN)

# `${expr}` or brace-style `{expr}`, so Swagger path parameters get filled in too
URL_PATTERN = r"\$?\{(?P<expr>[\s\S]+?)\}"
URL_REGEX = re.compile(URL_PATTERN)

PATH_SEGMENT_REGEX = re.compile(r"(?P<name>[A-Za-z_$][\w$]*)|\[(?P<index>\d+)\]")
PATH_REGEX = re.compile(r"^[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*|\[\d+\])*$")


class Missing:
    """Result of looking up a path that is not defined in the context.

    Falsy and renders as an empty string, but is distinct from ``""``.
    """

    _instance: "Missing | None" = None

    def __new__(cls) -> "Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return ""

    def __repr__(self) -> str:
        return "MISSING"


MISSING = Missing()


def parse_path(expr: str) -> tuple[str | int, ...]:
    """Split a property path like ``a.b[0].c`` into its keys and indexes."""
    expr = expr.strip()
    if not PATH_REGEX.match(expr):
        raise TemplatesError(f"Invalid template expression: {expr!r}")
    return tuple(int(m.group("index")) if m.group("index") is not None else m.group("name") for m in PATH_SEGMENT_REGEX.finditer(expr))


def lookup(context: Mapping[str, Any], expr: str) -> Any:
    """Evaluate a property path against the context, returning MISSING for undefined paths."""
    value: Any = context
    for key in parse_path(expr):
        match value:
            case Mapping() if isinstance(key, str) and key in value:
                value = value[key]
            case Sequence() if isinstance(key, int) and not isinstance(value, str) and key < len(value):
                value = value[key]
            case _:
                return MISSING
    return value
