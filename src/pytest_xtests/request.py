import json
import logging
import time
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass, field
from http.cookies import CookieError, SimpleCookie
from typing import Any
from urllib.parse import quote, unquote, urlsplit

import httpx

from .exceptions import CaseTimeoutError, RequestError
from .models import Operation, SwaggerSpec, XTest, XTestRequest
from .templates import render, render_url, walk

logger = logging.getLogger(__name__)

# characters JavaScript's encodeURIComponent leaves alone
URI_COMPONENT_SAFE = "-_.!~*'()"


@dataclass
class ResolvedRequest:
    method: str
    url: str
    query: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None
    has_body: bool = False
    cookies: httpx.Cookies = field(default_factory=httpx.Cookies)

    @property
    def full_url(self) -> str:
        return self.url + self.query


def encode_uri_component(value: str) -> str:
    return quote(value, safe=URI_COMPONENT_SAFE)


def build_url(spec: SwaggerSpec, path: str, context: Mapping[str, Any]) -> str:
    return render_url(f"{spec.scheme}://{context['host']}{spec.base_path}{path}", context)


def build_query(request: XTestRequest | None, context: Mapping[str, Any]) -> str:
    if request is None or not request.query:
        return ""
    pairs = (f"{encode_uri_component(key)}={encode_uri_component(render(value, context))}" for key, value in request.query.items())
    return "?" + "&".join(pairs)


def build_headers(test: XTest, context: Mapping[str, Any]) -> dict[str, str]:
    headers = {name: render(value, context) for name, value in test.request.headers.items()} if test.request else {}

    token = context.get("token")
    if test.auth and token:
        headers = {name: value for name, value in headers.items() if name.lower() != "authorization"}
        headers["Authorization"] = f"Bearer {token}"

    return headers


def build_body(request: XTestRequest | None, context: Mapping[str, Any]) -> tuple[bool, Any]:
    """Return whether a body is sent, and the rendered body.

    An absent body and an explicit null are different: the latter is sent as JSON null.
    """
    if request is None or not request.has_body:
        return False, None
    return True, walk(request.body, context)


def cookie_domain(url: str) -> str:
    hostname = urlsplit(url).hostname or ""
    # cookiejar matches dotless hosts as "<host>.local"
    return hostname if "." in hostname else f"{hostname}.local"


def build_cookie_jar(cookie: str | None, url: str) -> httpx.Cookies:
    """Parse a Set-Cookie style string into a jar scoped to the URL's host."""
    jar = httpx.Cookies()
    if not cookie:
        return jar

    parsed: SimpleCookie = SimpleCookie()
    try:
        parsed.load(cookie)
    except CookieError as e:
        logger.warning(f"Ignoring invalid request cookie '{cookie}': {str(e)}")
        return jar

    for name, morsel in parsed.items():
        jar.set(
            name,
            morsel.value,
            domain=morsel["domain"] or cookie_domain(url),
            path=morsel["path"] or "/",
        )
    return jar


def cookie_string(jar: httpx.Cookies, url: str) -> str:
    """The Cookie header value the jar would send to the URL."""
    probe = urllib.request.Request(url)
    jar.jar.add_cookie_header(probe)
    return probe.get_header("Cookie", "")


def parse_cookie_string(header: str) -> dict[str, str]:
    result: dict[str, str] = {}
    for pair in header.split(";"):
        name, sep, value = pair.strip().partition("=")
        name = name.strip()
        if sep and name and name not in result:
            result[name] = unquote(value.strip().strip('"'))
    return result


def build_request(
    test: XTest,
    operation: Operation,
    spec: SwaggerSpec,
    context: Mapping[str, Any],
) -> ResolvedRequest:
    """Turn a case and its resolved context into the one request it sends."""
    url = build_url(spec, operation.path, context)
    has_body, body = build_body(test.request, context)

    return ResolvedRequest(
        method=str(operation.method),
        url=url,
        query=build_query(test.request, context),
        headers=build_headers(test, context),
        body=body,
        has_body=has_body,
        cookies=build_cookie_jar(test.request.cookie if test.request else None, url),
    )


def _read_within(response: httpx.Response, deadline: float) -> httpx.Response:
    """Read the body chunk by chunk, giving up once the deadline has passed."""
    if response.is_stream_consumed:
        # in-memory bodies are loaded when the response is created
        loaded = response
    else:
        raw = bytearray()
        for chunk in response.iter_raw():
            raw += chunk
            if time.monotonic() > deadline:
                raise CaseTimeoutError(f"HTTP request timed out: response body still arriving after {len(raw)} bytes")

        # raw chunks are still content-encoded; the rebuilt response decodes them once
        loaded = httpx.Response(
            status_code=response.status_code,
            headers=response.headers,
            content=bytes(raw),
            request=response.request,
            extensions=response.extensions,
        )

    if time.monotonic() > deadline:
        raise CaseTimeoutError("HTTP request timed out: response arrived after the case deadline")
    return loaded


def execute_request(client: httpx.Client, resolved: ResolvedRequest, deadline: float) -> httpx.Response:
    """Send the request and read the whole response before the deadline (a ``time.monotonic()`` value).

    Raises:
        CaseTimeoutError: If any phase times out or the body is not complete by the deadline
        RequestError: On transport failures, invalid URLs or headers that cannot be encoded
    """
    try:
        headers = httpx.Headers({"Accept": "application/json"})
        headers.update(resolved.headers)

        request_kwargs: dict[str, Any] = {
            "method": resolved.method,
            "url": resolved.full_url,
            "headers": headers,
            "timeout": max(deadline - time.monotonic(), 0.001),
        }
        if resolved.has_body:
            if "content-type" not in headers:
                headers["Content-Type"] = "application/json"
            request_kwargs["content"] = json.dumps(resolved.body).encode("utf-8")

        with client.stream(**request_kwargs) as response:
            return _read_within(response, deadline)
    except httpx.TimeoutException as e:
        raise CaseTimeoutError(f"HTTP request timed out: {str(e)}") from None
    except httpx.ConnectError as e:
        raise RequestError(f"HTTP connection error: {str(e)}") from None
    except httpx.HTTPError as e:
        raise RequestError(f"HTTP request failed: {str(e)}") from None
    except httpx.InvalidURL as e:
        raise RequestError(f"Invalid request URL '{resolved.full_url}': {str(e)}") from None
    except UnicodeEncodeError as e:
        raise RequestError(f"Request headers must be ASCII: {str(e)}") from None


def parse_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text
