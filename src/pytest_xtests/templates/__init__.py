from .exceptions import TemplatesError
from .expressions import MISSING, Missing, lookup, parse_path
from .substitution import render, render_url, to_text, walk

__all__ = [
    "render",
    "render_url",
    "walk",
    "lookup",
    "parse_path",
    "to_text",
    "MISSING",
    "Missing",
    "TemplatesError",
]
