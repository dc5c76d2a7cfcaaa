from http import HTTPMethod
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, JsonValue, PositiveInt, field_validator

from .templates import TemplatesError, parse_path, to_text


def _stringify_values(v: Any) -> Any:
    if isinstance(v, dict):
        return {key: to_text(value) for key, value in v.items()}
    return v


StringMap = Annotated[dict[str, str], BeforeValidator(_stringify_values)]


class XTestRequest(BaseModel):
    query: StringMap = Field(default_factory=dict, description="Query parameters, values are templates.")
    headers: StringMap = Field(default_factory=dict, description="Request headers, values are templates.")
    body: JsonValue = Field(default=None, description="JSON body. An explicit null is sent as null, an absent body is not sent.")
    cookie: str | None = Field(default=None, description="Cookie string attached to the request, e.g. 'session=abc; Path=/'.")

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def has_body(self) -> bool:
        return "body" in self.model_fields_set


class XTestResponse(BaseModel):
    status: PositiveInt | list[PositiveInt] = Field(description="Expected status code or set of acceptable codes.")
    headers: StringMap | None = Field(default=None, description="Headers the response must contain.")
    cookie: StringMap | None = Field(default=None, description="Cookie values the jar must contain after the call.")

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: int | list[int]) -> int | list[int]:
        if isinstance(v, list) and not v:
            raise ValueError("status list cannot be empty")
        return v

    @property
    def statuses(self) -> tuple[int, ...]:
        return tuple(self.status) if isinstance(self.status, list) else (self.status,)

    @property
    def status_label(self) -> str:
        return ",".join(str(code) for code in self.statuses)


class XTest(BaseModel):
    """One declared scenario for a (path, method) pair."""

    description: str = Field(description="Human readable name of the case.")
    skip: bool = Field(default=False)
    required: list[str] = Field(default_factory=list, description="Context names that must be truthy for the case to run.")
    params: StringMap = Field(default_factory=dict, description="Custom template parameters merged into the context.")
    auth: bool = Field(default=False, description="Send the bearer token in an Authorization header.")
    request: XTestRequest | None = Field(default=None)
    response: XTestResponse
    marks: list[str] = Field(default_factory=list, examples=["xfail", "skip(reason='flaky')"], description="pytest markers")

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("required")
    @classmethod
    def validate_required(cls, v: list[str]) -> list[str]:
        for name in v:
            try:
                parse_path(name)
            except TemplatesError as e:
                raise ValueError(str(e)) from e
        return v

    @property
    def name(self) -> str:
        return f"({self.response.status_label}) {self.description}"


class SwaggerSpec(BaseModel):
    swagger: str | None = Field(default=None)
    host: str | None = Field(default=None)
    base_path: str = Field(default="", alias="basePath")
    schemes: list[str] = Field(default_factory=lambda: ["https"])
    paths: dict[str, dict[str, Any]] = Field(default_factory=dict)
    definitions: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    @field_validator("schemes")
    @classmethod
    def validate_schemes(cls, v: list[str]) -> list[str]:
        return v or ["https"]

    @property
    def scheme(self) -> str:
        return self.schemes[0]


class Operation(BaseModel):
    path: str
    method: HTTPMethod
    spec: dict[str, Any] = Field(default_factory=dict, description="The Swagger operation object.")
    tests: list[XTest] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def name(self) -> str:
        return f"{self.method} {self.path}"

    def response_schema(self, status_code: int) -> dict[str, Any] | None:
        response = self.spec.get("responses", {}).get(str(status_code))
        if isinstance(response, dict) and isinstance(response.get("schema"), dict):
            return response["schema"]
        return None
