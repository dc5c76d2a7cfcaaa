"""Run configuration.

Values come from three places, highest precedence first:

1. command line options (``--xtests-local``, ``--xtests-host``, ...)
2. environment variables with the ``OPENAPI_`` prefix, also read from a ``.env`` file
3. the Swagger document itself (``host``)

Everything is resolved once into a frozen :class:`RunConfig` that is passed
explicitly to the executor.
"""

import re
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_TIMEOUT_MS, ENV_PREFIX, LOCAL_HOST
from .exceptions import ConfigurationError
from .models import SwaggerSpec


def validate_suffix(v: str) -> str:
    if not re.match(r"^[a-zA-Z0-9_-]{1,32}$", v):
        raise ValueError("suffix must contain only alphanumeric characters, underscores, hyphens, and be ≤32 chars")
    return v


Suffix = Annotated[str, AfterValidator(validate_suffix)]


class EnvSettings(BaseSettings):
    host: str | None = Field(default=None)
    token: str | None = Field(default=None)
    timeout: PositiveInt | None = Field(default=None, description="Per-case timeout in milliseconds.")

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, env_file=".env", env_file_encoding="utf-8", extra="ignore")


class RunOptions(BaseModel):
    """Values given on the command line; None means not given."""

    local: bool = False
    host: str | None = None
    token: str | None = None
    verbose: bool = False
    timeout: PositiveInt | None = None
    verify_ssl: bool = False
    validate_schema: bool = True

    model_config = ConfigDict(frozen=True)


class RunConfig(BaseModel):
    host: str
    token: str | None = None
    local: bool = False
    verbose: bool = False
    timeout: PositiveInt = Field(default=DEFAULT_TIMEOUT_MS, description="Per-case timeout in milliseconds.")
    verify_ssl: bool = False
    validate_schema: bool = True

    model_config = ConfigDict(frozen=True)

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000


def resolve_config(spec: SwaggerSpec, options: RunOptions, env: EnvSettings) -> RunConfig:
    """Merge command line options, environment and the document into a RunConfig.

    Raises:
        ConfigurationError: If no host is available from any source
    """
    host = LOCAL_HOST if options.local else options.host or env.host or spec.host
    if not host:
        raise ConfigurationError("Must specify --xtests-host (or OPENAPI_HOST in .env file)")

    return RunConfig(
        host=host,
        token=options.token or env.token,
        local=options.local,
        verbose=options.verbose,
        timeout=options.timeout or env.timeout or DEFAULT_TIMEOUT_MS,
        verify_ssl=options.verify_ssl,
        validate_schema=options.validate_schema,
    )
