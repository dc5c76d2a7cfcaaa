"""Pytest plugin for running x-tests cases from Swagger documents.

Swagger JSON files are collected as test files. Every operation declaring
``x-tests`` becomes a collector named ``<METHOD> <path>`` and every case
becomes a test item named ``(<status>) <description>``.
"""

import logging
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import pytest
from _pytest import config, nodes, reports, runner
from _pytest.config import argparsing
from pydantic import ValidationError
from simpleeval import EvalWithCompoundTypes

from .constants import DEFAULT_SUFFIX, CommandLineOptions, ConfigOptions
from .exceptions import CaseSkipped, ConfigurationError, LoaderError, XTestsError
from .executor import CaseExecutor
from .loader import format_validation_error, iter_operations, load_spec
from .models import Operation, SwaggerSpec, XTest
from .report_formatter import format_request, format_response
from .settings import EnvSettings, RunConfig, RunOptions, resolve_config, validate_suffix
from .templates import TemplatesError

logger = logging.getLogger(__name__)

RUN_OPTIONS_KEY = pytest.StashKey[RunOptions]()
ENV_SETTINGS_KEY = pytest.StashKey[EnvSettings]()


class SwaggerFile(pytest.File):
    """A Swagger document whose operations carry x-tests cases."""

    def collect(self) -> Iterable[nodes.Item | nodes.Collector]:
        """Load the document, resolve the run configuration and yield one collector per operation.

        Raises:
            Collector.CollectError: If the document is invalid or no host can be determined
        """
        try:
            spec = load_spec(self.path)
            operations = list(iter_operations(spec))
        except LoaderError as e:
            raise nodes.Collector.CollectError(str(e)) from None

        try:
            run_config = resolve_config(spec, self.config.stash[RUN_OPTIONS_KEY], self.config.stash[ENV_SETTINGS_KEY])
        except ConfigurationError as e:
            raise nodes.Collector.CollectError(str(e)) from None

        logger.info(f"Running tests for {spec.scheme}://{run_config.host}")

        for operation in operations:
            yield OperationCollector.from_parent(
                self,
                name=operation.name,
                operation=operation,
                spec=spec,
                run_config=run_config,
            )


class OperationCollector(nodes.Collector):
    """All cases declared for one (path, method) pair."""

    def __init__(self, *, operation: Operation, spec: SwaggerSpec, run_config: RunConfig, **kwargs: Any):
        super().__init__(**kwargs)
        self.operation = operation
        self.spec = spec
        self.run_config = run_config

    def collect(self) -> Iterable[nodes.Item]:
        for test in self.operation.tests:
            yield XTestItem.from_parent(
                self,
                name=test.name,
                test=test,
                operation=self.operation,
                spec=self.spec,
                run_config=self.run_config,
            )


class XTestItem(pytest.Item):
    """A single x-tests case executed as one live HTTP request."""

    def __init__(self, *, test: XTest, operation: Operation, spec: SwaggerSpec, run_config: RunConfig, **kwargs: Any):
        super().__init__(**kwargs)
        self.test = test
        self.operation = operation
        self.spec = spec
        self.run_config = run_config
        self.last_request = None
        self.last_response = None

        evaluator = EvalWithCompoundTypes(names={"mark": pytest.mark})
        for mark_str in test.marks:
            try:
                marker = evaluator.eval(f"mark.{mark_str}")
                if marker:
                    self.add_marker(marker)
            except Exception as e:
                logger.warning(f"Failed to create marker '{mark_str}': {e}")

    def runtest(self) -> None:
        executor = CaseExecutor(self.spec, self.run_config)
        try:
            executor.execute(self.test, self.operation)
        except CaseSkipped as e:
            pytest.skip(reason=e.message)
        except (XTestsError, TemplatesError) as e:
            logger.error(f"{self.operation.name} {self.name}: {str(e)}")
            pytest.fail(reason=str(e), pytrace=False)
        finally:
            self.last_request = executor.last_request
            self.last_response = executor.last_response
            # stdout, so --xtests-verbose works without raising the log level
            if self.run_config.verbose and self.last_response is not None:
                print(format_response(self.last_response))

    def reportinfo(self) -> tuple[Path, int | None, str]:
        return self.path, None, f"{self.operation.name} {self.name}"


def pytest_addoption(parser: argparsing.Parser) -> None:
    """Add command-line and ini options for the plugin.

    Args:
        parser: Pytest's argument parser to add options to
    """
    group = parser.getgroup("xtests", "x-tests runner for Swagger documents")
    group.addoption("--xtests-local", action="store_true", dest=CommandLineOptions.LOCAL, help="Run against the local development server (localhost:5000).")
    group.addoption("--xtests-host", action="store", dest=CommandLineOptions.HOST, default=None, help="Target host, overrides OPENAPI_HOST and the document host.")
    group.addoption("--xtests-token", action="store", dest=CommandLineOptions.TOKEN, default=None, help="Bearer token, overrides OPENAPI_TOKEN.")
    group.addoption("--xtests-verbose", action="store_true", dest=CommandLineOptions.VERBOSE, help="Print every response.")
    group.addoption("--xtests-timeout", action="store", type=int, dest=CommandLineOptions.TIMEOUT, default=None, help="Per-case timeout in milliseconds (default 300000).")
    group.addoption("--xtests-verify-ssl", action="store_true", dest=CommandLineOptions.VERIFY_SSL, help="Verify TLS certificates of the target host.")
    group.addoption("--xtests-no-schema", action="store_true", dest=CommandLineOptions.NO_SCHEMA, help="Skip response schema validation.")

    parser.addini(
        name=ConfigOptions.SUFFIX,
        help="File suffix for Swagger documents: <suffix>.json or <name>.<suffix>.json.",
        type="string",
        default=DEFAULT_SUFFIX,
    )


def pytest_configure(config: config.Config) -> None:
    """Validate configuration settings and resolve command line options and environment once.

    Raises:
        ValueError: If the suffix is invalid
        pytest.UsageError: If option or environment values are invalid
    """
    validate_suffix(str(config.getini(ConfigOptions.SUFFIX)))

    try:
        config.stash[RUN_OPTIONS_KEY] = RunOptions(
            local=bool(config.getoption(CommandLineOptions.LOCAL)),
            host=config.getoption(CommandLineOptions.HOST),
            token=config.getoption(CommandLineOptions.TOKEN),
            verbose=bool(config.getoption(CommandLineOptions.VERBOSE)),
            timeout=config.getoption(CommandLineOptions.TIMEOUT),
            verify_ssl=bool(config.getoption(CommandLineOptions.VERIFY_SSL)),
            validate_schema=not config.getoption(CommandLineOptions.NO_SCHEMA),
        )
        config.stash[ENV_SETTINGS_KEY] = EnvSettings()
    except ValidationError as e:
        raise pytest.UsageError(f"Invalid x-tests configuration:\n{format_validation_error(e)}") from None


def pytest_collect_file(file_path: Path, parent: nodes.Collector) -> nodes.Collector | None:
    """Collect Swagger documents matching the configured suffix.

    Example:
        For suffix="swagger", these files would be collected:
        - swagger.json
        - petstore.swagger.json
    """
    suffix: str = parent.config.getini(ConfigOptions.SUFFIX)
    pattern = re.compile(rf"^(?:(?P<name>.+)\.)?{re.escape(suffix)}\.json$")
    if pattern.match(file_path.name):
        return SwaggerFile.from_parent(parent, path=file_path)
    return None


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item: nodes.Item, call: runner.CallInfo[Any]) -> Any:
    """Attach the case's HTTP exchange to its report."""
    outcome = yield
    report: reports.TestReport = outcome.get_result()

    if call.when == "call" and isinstance(item, XTestItem):
        if item.last_request is not None:
            report.sections.append(("HTTP Request", format_request(item.last_request)))
        if item.last_response is not None:
            report.sections.append(("HTTP Response", format_response(item.last_response)))
