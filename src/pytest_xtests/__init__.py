from .exceptions import (
    CaseSkipped,
    CaseTimeoutError,
    ConfigurationError,
    CookieMismatchError,
    HeaderMismatchError,
    LoaderError,
    RequestError,
    SchemaMismatchError,
    StatusMismatchError,
    UnreachableHostError,
    VerificationError,
    XTestsError,
)
from .executor import CaseExecutor, CaseResult
from .loader import iter_operations, load_spec
from .models import Operation, SwaggerSpec, XTest, XTestRequest, XTestResponse
from .settings import EnvSettings, RunConfig, RunOptions, resolve_config

__all__ = [
    "CaseExecutor",
    "CaseResult",
    "load_spec",
    "iter_operations",
    "Operation",
    "SwaggerSpec",
    "XTest",
    "XTestRequest",
    "XTestResponse",
    "EnvSettings",
    "RunConfig",
    "RunOptions",
    "resolve_config",
    "XTestsError",
    "LoaderError",
    "ConfigurationError",
    "CaseSkipped",
    "UnreachableHostError",
    "RequestError",
    "CaseTimeoutError",
    "VerificationError",
    "StatusMismatchError",
    "SchemaMismatchError",
    "HeaderMismatchError",
    "CookieMismatchError",
]
