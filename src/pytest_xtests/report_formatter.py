"""Formatting utilities for test report generation.

This module provides functions to format HTTP requests and responses
for display in pytest test reports.
"""

import json

import httpx

MAX_BODY_LENGTH = 1000


def _format_body(content: bytes, content_type: str) -> str:
    if "json" in content_type:
        try:
            return json.dumps(json.loads(content), indent=2, ensure_ascii=False)
        except (json.JSONDecodeError, UnicodeDecodeError):
            pass
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError:
        return f"<Binary content: {len(content)} bytes>"
    if any(ord(ch) < 32 and ch not in "\r\n\t" for ch in text):
        return f"<Binary content: {len(content)} bytes>"
    return text


def _truncate(text: str) -> str:
    if len(text) > MAX_BODY_LENGTH:
        return text[:MAX_BODY_LENGTH] + "\n... (truncated)"
    return text


def format_request(request: httpx.Request) -> str:
    lines = [f"{request.method} {request.url}"]

    for key, value in request.headers.items():
        lines.append(f"{key}: {value}")

    content = request.content
    if content:
        lines.append("")
        lines.append(_truncate(_format_body(content, request.headers.get("content-type", ""))))

    return "\n".join(lines)


def format_response(response: httpx.Response) -> str:
    lines = [f"{response.http_version or 'HTTP/1.1'} {response.status_code} {response.reason_phrase}"]

    for key, value in response.headers.items():
        lines.append(f"{key}: {value}")

    # Empty line between headers and body
    lines.append("")

    if response.content:
        lines.append(_format_body(response.content, response.headers.get("content-type", "")))

    return "\n".join(lines)
