"""Response body validation against Swagger 2.0 schemas."""

import copy
import re
from collections.abc import Iterator
from typing import Any, Protocol

import jsonschema
from jsonschema.validators import extend


class SchemaValidator(Protocol):
    def validate(self, schema: dict[str, Any], body: Any) -> list[str]:
        """Return error messages, empty when the body conforms."""
        ...


def _remove_additional_properties(validator: Any, additional_properties: Any, instance: Any, schema: dict[str, Any]) -> Iterator[jsonschema.ValidationError]:
    # drop what additionalProperties: false forbids instead of reporting it
    if additional_properties is False and validator.is_type(instance, "object"):
        properties = schema.get("properties", {})
        patterns = schema.get("patternProperties", {})
        for name in list(instance):
            if name not in properties and not any(re.search(pattern, name) for pattern in patterns):
                del instance[name]
        return
    yield from jsonschema.Draft4Validator.VALIDATORS["additionalProperties"](validator, additional_properties, instance, schema)


StrippingDraft4Validator = extend(
    jsonschema.Draft4Validator,
    validators={"additionalProperties": _remove_additional_properties},
)


class JsonSchemaValidator:
    """Validates bodies with jsonschema, using the Draft 4 dialect Swagger 2.0 is built on.

    The document's ``definitions`` are attached to every schema so that
    ``#/definitions/...`` references resolve. Properties forbidden by
    ``additionalProperties: false`` are removed from a copy of the body before
    validation rather than reported.
    """

    def __init__(self, definitions: dict[str, Any] | None = None):
        self.definitions = definitions or {}

    def validate(self, schema: dict[str, Any], body: Any) -> list[str]:
        root = {**schema, "definitions": {**self.definitions, **schema.get("definitions", {})}}
        try:
            StrippingDraft4Validator.check_schema(root)
        except jsonschema.SchemaError as e:
            return [f"Invalid response schema: {e.message}"]

        validator = StrippingDraft4Validator(root)
        errors = sorted(validator.iter_errors(copy.deepcopy(body)), key=lambda e: tuple(str(part) for part in e.absolute_path))
        return [_format_error(error) for error in errors]


class NullSchemaValidator:
    """Accepts every body."""

    def validate(self, schema: dict[str, Any], body: Any) -> list[str]:
        return []


def _format_error(error: jsonschema.ValidationError) -> str:
    location = "".join(f"[{part}]" if isinstance(part, int) else f".{part}" for part in error.absolute_path)
    return f"body{location}: {error.message}"
