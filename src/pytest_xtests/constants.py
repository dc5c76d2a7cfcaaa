from enum import StrEnum

LOCAL_HOST = "localhost:5000"
API_VERSION = "v1"
DEFAULT_TIMEOUT_MS = 300_000
DEFAULT_SUFFIX = "swagger"
ENV_PREFIX = "OPENAPI_"
TESTS_EXTENSION = "x-tests"
REACHABILITY_TIMEOUT = 5.0


class ConfigOptions(StrEnum):
    """Configuration option names for the pytest-xtests plugin."""

    SUFFIX = "xtests_suffix"


class CommandLineOptions(StrEnum):
    LOCAL = "xtests_local"
    HOST = "xtests_host"
    TOKEN = "xtests_token"
    VERBOSE = "xtests_verbose"
    TIMEOUT = "xtests_timeout"
    VERIFY_SSL = "xtests_verify_ssl"
    NO_SCHEMA = "xtests_no_schema"
