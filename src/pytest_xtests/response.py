import logging
from collections.abc import Mapping
from typing import Any

import httpx

from .exceptions import CookieMismatchError, HeaderMismatchError, SchemaMismatchError, StatusMismatchError
from .models import Operation, XTestResponse
from .request import cookie_string, parse_cookie_string
from .schema import SchemaValidator

logger = logging.getLogger(__name__)


def verify_status(expected: XTestResponse, method: str, status_code: int) -> None:
    statuses = list(expected.statuses)
    if status_code not in statuses:
        raise StatusMismatchError(f"status code mismatch for {method.upper()}: expected {statuses}, got {status_code}")


def verify_schema(
    validator: SchemaValidator,
    operation: Operation,
    status_code: int,
    body: Any,
) -> None:
    schema = operation.response_schema(status_code)
    if schema is None:
        return

    errors = validator.validate(schema, body)
    if errors:
        raise SchemaMismatchError("response schema validation failed:\n" + "\n".join(f"  - {error}" for error in errors))


def verify_headers(expected: Mapping[str, str], headers: httpx.Headers) -> None:
    mismatches = {name: value for name, value in expected.items() if headers.get(name) != value}
    if mismatches:
        details = ", ".join(f"'{name}': expected '{value}', got '{headers.get(name)}'" for name, value in mismatches.items())
        raise HeaderMismatchError(f"missing response headers: {details}")


def verify_cookie(expected: Mapping[str, str], actual: Mapping[str, str]) -> None:
    mismatches = {name: value for name, value in expected.items() if actual.get(name) != value}
    if mismatches:
        details = ", ".join(f"'{name}': expected '{value}', got '{actual.get(name)}'" for name, value in mismatches.items())
        raise CookieMismatchError(f"missing cookie values: {details}")


def verify_response(
    expected: XTestResponse,
    operation: Operation,
    response: httpx.Response,
    body: Any,
    cookies: httpx.Cookies,
    url: str,
    validator: SchemaValidator,
) -> None:
    """Check the response against the case's expectations.

    Checks run in the order status, schema, headers, cookie and stop at the
    first failure.

    Raises:
        VerificationError: A subclass naming the failing check
    """
    verify_status(expected, str(operation.method), response.status_code)
    verify_schema(validator, operation, response.status_code, body)

    if expected.headers:
        verify_headers(expected.headers, response.headers)

    if expected.cookie:
        actual = parse_cookie_string(cookie_string(cookies, url))
        logger.info(f"Cookies for {url}: {actual}")
        verify_cookie(expected.cookie, actual)
