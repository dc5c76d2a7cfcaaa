"""Loading Swagger documents and the x-tests cases embedded in them."""

import json
import logging
from collections.abc import Iterator
from http import HTTPMethod
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .constants import TESTS_EXTENSION
from .exceptions import LoaderError
from .models import Operation, SwaggerSpec, XTest

logger = logging.getLogger(__name__)

HTTP_METHODS = frozenset(method.lower() for method in HTTPMethod)


def format_validation_error(e: ValidationError, prefix: str = "") -> str:
    """Render pydantic validation errors as one indented line per problem."""
    error_details = []
    for error in e.errors():
        loc = " -> ".join(str(x) for x in (prefix, *error["loc"]) if x != "")
        error_details.append(f"  - {loc}: {error['msg']}")
    return "\n".join(error_details)


def load_spec(path: Path) -> SwaggerSpec:
    """Read and validate a Swagger JSON document.

    Raises:
        LoaderError: If the file cannot be read, is not JSON or is not a Swagger object
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise LoaderError(f"Failed to load JSON from {path}: {e}") from e

    if not isinstance(data, dict):
        raise LoaderError(f"Swagger document {path} must be a JSON object")

    try:
        return SwaggerSpec.model_validate(data)
    except ValidationError as e:
        raise LoaderError(f"Cannot parse Swagger document {path}:\n{format_validation_error(e)}") from None


def _parse_tests(path: str, method: str, raw_tests: Any) -> list[XTest]:
    if not isinstance(raw_tests, list):
        raise LoaderError(f"{method.upper()} {path}: {TESTS_EXTENSION} must be a list")

    tests = []
    for index, raw_test in enumerate(raw_tests):
        try:
            tests.append(XTest.model_validate(raw_test))
        except ValidationError as e:
            prefix = f"{method.upper()} {path} -> {TESTS_EXTENSION}[{index}]"
            raise LoaderError(f"Cannot parse test case:\n{format_validation_error(e, prefix)}") from None
    return tests


def iter_operations(spec: SwaggerSpec) -> Iterator[Operation]:
    """Yield every operation that declares at least one x-tests case, in document order."""
    for path, path_item in spec.paths.items():
        for method, operation_spec in path_item.items():
            if method.lower() not in HTTP_METHODS or not isinstance(operation_spec, dict):
                continue

            tests = _parse_tests(path, method, operation_spec.get(TESTS_EXTENSION) or [])
            if not tests:
                continue

            logger.info(f"Found {len(tests)} case(s) for {method.upper()} {path}")
            yield Operation(
                path=path,
                method=HTTPMethod(method.upper()),
                spec=operation_spec,
                tests=tests,
            )
