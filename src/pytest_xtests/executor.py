"""Execution of a single x-tests case.

One case runs strictly in this order: reachability probe, skip flag,
context building, required parameters, request building, the HTTP call and
the response checks. Every case gets its own context, client and cookie jar.
"""

import logging
import random
import time
from collections import ChainMap
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import httpx

from .constants import API_VERSION, REACHABILITY_TIMEOUT
from .exceptions import CaseSkipped, CaseTimeoutError, UnreachableHostError
from .models import Operation, SwaggerSpec, XTest
from .reachability import is_reachable
from .request import ResolvedRequest, build_request, execute_request, parse_body
from .response import verify_response
from .schema import JsonSchemaValidator, NullSchemaValidator, SchemaValidator
from .settings import RunConfig
from .templates import lookup, render

logger = logging.getLogger(__name__)

Probe = Callable[[str, str, float], bool]


@dataclass
class CaseResult:
    request: ResolvedRequest
    response: httpx.Response
    body: Any


class CaseExecutor:
    """Runs x-tests cases of one Swagger document against the configured host."""

    def __init__(
        self,
        spec: SwaggerSpec,
        config: RunConfig,
        *,
        probe: Probe = is_reachable,
        transport: httpx.BaseTransport | None = None,
        validator: SchemaValidator | None = None,
    ):
        self.spec = spec
        self.config = config
        self.probe = probe
        self.transport = transport
        if validator is None:
            validator = JsonSchemaValidator(spec.definitions) if config.validate_schema else NullSchemaValidator()
        self.validator = validator
        self.last_request: httpx.Request | None = None
        self.last_response: httpx.Response | None = None

    def base_context(self) -> dict[str, Any]:
        return {
            "host": self.config.host,
            "version": API_VERSION,
            "token": self.config.token,
            "auth": False,
            "random": random.randrange(100_000),
            "response": None,
        }

    def build_context(self, test: XTest) -> ChainMap[str, Any]:
        """Base parameters plus the case's own params, rendered against the base only."""
        base = self.base_context()
        params = {name: render(template, base) for name, template in test.params.items()}
        for name, value in params.items():
            logger.info(f"Seeded {name} = {value}")
        return ChainMap(params, base)

    def check_reachable(self, timeout: float) -> None:
        if self.probe(self.config.host, self.spec.scheme, min(timeout, REACHABILITY_TIMEOUT)):
            return
        hint = " Start the local server in a different process." if self.config.local else ""
        raise UnreachableHostError(f'The host "{self.config.host}" is not reachable. Please ensure that the server is running.{hint}')

    def execute(self, test: XTest, operation: Operation) -> CaseResult:
        """Run one case end to end.

        Raises:
            CaseSkipped: If the case is flagged skip or lacks required parameters
            UnreachableHostError: If the host does not accept connections
            RequestError: On transport failures
            CaseTimeoutError: If the case runs over its time budget
            VerificationError: If the response does not meet expectations
        """
        self.last_request = None
        self.last_response = None
        deadline = time.monotonic() + self.config.timeout_seconds

        self.check_reachable(self.config.timeout_seconds)

        if test.skip:
            raise CaseSkipped("skipped by x-tests definition")

        context = self.build_context(test)

        missing = [name for name in test.required if not lookup(context, name)]
        if missing:
            raise CaseSkipped(f"required parameters not available: {', '.join(missing)}")

        resolved = build_request(test, operation, self.spec, context)
        logger.info(f"{resolved.method} {resolved.full_url}")

        if time.monotonic() >= deadline:
            raise CaseTimeoutError(f"Case timed out after {self.config.timeout} ms")

        with httpx.Client(
            cookies=resolved.cookies,
            verify=self.config.verify_ssl,
            transport=self.transport,
        ) as client:
            response = execute_request(client, resolved, deadline)
            self.last_request = response.request
            self.last_response = response
            body = parse_body(response)

            verify_response(
                test.response,
                operation,
                response,
                body,
                client.cookies,
                resolved.url,
                self.validator,
            )

        return CaseResult(request=resolved, response=response, body=body)
