from pytest_xtests.schema import JsonSchemaValidator, NullSchemaValidator

DEFINITIONS = {
    "Pet": {
        "type": "object",
        "required": ["id", "name"],
        "additionalProperties": False,
        "properties": {
            "id": {"type": "integer", "format": "int64"},
            "name": {"type": "string"},
            "owner": {"$ref": "#/definitions/Owner"},
        },
    },
    "Owner": {
        "type": "object",
        "required": ["name"],
        "properties": {"name": {"type": "string"}},
    },
}


class TestJsonSchemaValidator:
    def test_resolves_definitions(self):
        validator = JsonSchemaValidator(DEFINITIONS)

        assert validator.validate({"$ref": "#/definitions/Pet"}, {"id": 1, "name": "rex", "owner": {"name": "ann"}}) == []

    def test_reports_nested_errors(self):
        validator = JsonSchemaValidator(DEFINITIONS)

        errors = validator.validate({"$ref": "#/definitions/Pet"}, {"id": 1, "name": "rex", "owner": {}})

        assert errors == ["body.owner: 'name' is a required property"]

    def test_array_of_refs(self):
        validator = JsonSchemaValidator(DEFINITIONS)

        errors = validator.validate({"type": "array", "items": {"$ref": "#/definitions/Pet"}}, [{"id": 1, "name": "a"}, {"id": "2", "name": "b"}])

        assert errors == ["body[1].id: '2' is not of type 'integer'"]

    def test_additional_properties_are_stripped_not_reported(self):
        validator = JsonSchemaValidator(DEFINITIONS)
        body = {"id": 1, "name": "rex", "unexpected": True}

        assert validator.validate({"$ref": "#/definitions/Pet"}, body) == []
        # the caller's body is left alone
        assert body == {"id": 1, "name": "rex", "unexpected": True}

    def test_additional_properties_schema_still_applies(self):
        validator = JsonSchemaValidator()
        schema = {"type": "object", "additionalProperties": {"type": "integer"}}

        assert validator.validate(schema, {"a": 1}) == []
        assert validator.validate(schema, {"a": "x"}) == ["body.a: 'x' is not of type 'integer'"]

    def test_pattern_properties_are_kept(self):
        validator = JsonSchemaValidator()
        schema = {
            "type": "object",
            "additionalProperties": False,
            "patternProperties": {"^x-": {"type": "string"}},
        }

        assert validator.validate(schema, {"x-a": 1}) == ["body.x-a: 1 is not of type 'string'"]

    def test_invalid_schema(self):
        errors = JsonSchemaValidator().validate({"type": "nope"}, {})

        assert len(errors) == 1
        assert errors[0].startswith("Invalid response schema")


def test_null_validator_accepts_everything():
    assert NullSchemaValidator().validate({"type": "integer"}, "not an integer") == []
