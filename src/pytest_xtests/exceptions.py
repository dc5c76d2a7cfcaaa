"""Exception classes for pytest-xtests."""


class XTestsError(Exception):
    """Base exception for all pytest-xtests errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LoaderError(XTestsError):
    """An error reading or parsing a Swagger document."""


class ConfigurationError(XTestsError):
    """Run configuration cannot be resolved."""


class CaseSkipped(XTestsError):
    """A test case must not run. Not a failure."""


class CaseExecutionError(XTestsError):
    pass


class UnreachableHostError(CaseExecutionError):
    pass


class RequestError(CaseExecutionError):
    pass


class CaseTimeoutError(CaseExecutionError):
    pass


class VerificationError(CaseExecutionError):
    check = "response"


class StatusMismatchError(VerificationError):
    check = "status"


class SchemaMismatchError(VerificationError):
    check = "schema"


class HeaderMismatchError(VerificationError):
    check = "headers"


class CookieMismatchError(VerificationError):
    check = "cookie"
