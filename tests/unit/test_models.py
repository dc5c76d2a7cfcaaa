from http import HTTPMethod

import pytest
from pydantic import ValidationError

from pytest_xtests.models import Operation, SwaggerSpec, XTest, XTestRequest, XTestResponse


class TestXTestResponse:
    def test_single_status_normalized(self):
        assert XTestResponse(status=200).statuses == (200,)

    def test_status_set(self):
        expected = XTestResponse(status=[200, 201])

        assert expected.statuses == (200, 201)
        assert expected.status_label == "200,201"

    def test_empty_status_list_rejected(self):
        with pytest.raises(ValidationError, match="status list cannot be empty"):
            XTestResponse(status=[])

    def test_status_required(self):
        with pytest.raises(ValidationError):
            XTestResponse.model_validate({})

    def test_header_values_stringified(self):
        expected = XTestResponse.model_validate({"status": 200, "headers": {"x-count": 3, "x-flag": True}})

        assert expected.headers == {"x-count": "3", "x-flag": "true"}


class TestXTestRequest:
    def test_absent_body(self):
        request = XTestRequest.model_validate({"headers": {"a": "b"}})

        assert request.has_body is False
        assert request.body is None

    def test_explicit_null_body(self):
        request = XTestRequest.model_validate({"body": None})

        assert request.has_body is True
        assert request.body is None

    def test_object_body(self):
        request = XTestRequest.model_validate({"body": {"name": "${random}", "age": 2}})

        assert request.has_body is True
        assert request.body == {"name": "${random}", "age": 2}

    def test_query_values_stringified(self):
        request = XTestRequest.model_validate({"query": {"limit": 10}})

        assert request.query == {"limit": "10"}

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            XTestRequest.model_validate({"form": {}})


class TestXTest:
    def test_minimal(self):
        test = XTest.model_validate({"description": "get pet", "response": {"status": 200}})

        assert test.skip is False
        assert test.auth is False
        assert test.required == []
        assert test.params == {}
        assert test.request is None
        assert test.marks == []

    def test_name_includes_expected_status(self):
        test = XTest.model_validate({"description": "get pet", "response": {"status": 200}})

        assert test.name == "(200) get pet"

    def test_name_with_status_set(self):
        test = XTest.model_validate({"description": "create", "response": {"status": [200, 201]}})

        assert test.name == "(200,201) create"

    def test_numeric_params_render_like_json_numbers(self):
        test = XTest.model_validate({"description": "x", "params": {"id": 1.0, "ratio": 0.5, "page": 2}, "response": {"status": 200}})

        assert test.params == {"id": "1", "ratio": "0.5", "page": "2"}

    def test_response_required(self):
        with pytest.raises(ValidationError, match="response"):
            XTest.model_validate({"description": "no expectation"})

    def test_invalid_required_name(self):
        with pytest.raises(ValidationError, match="Invalid template expression"):
            XTest.model_validate({"description": "x", "required": ["not valid"], "response": {"status": 200}})

    def test_frozen(self):
        test = XTest.model_validate({"description": "x", "response": {"status": 200}})

        with pytest.raises(ValidationError):
            test.description = "y"


class TestSwaggerSpec:
    def test_defaults(self):
        spec = SwaggerSpec.model_validate({"swagger": "2.0"})

        assert spec.host is None
        assert spec.base_path == ""
        assert spec.scheme == "https"

    def test_aliases_and_extra_keys(self):
        spec = SwaggerSpec.model_validate({"basePath": "/v1", "schemes": ["http", "https"], "info": {"title": "Petstore"}})

        assert spec.base_path == "/v1"
        assert spec.scheme == "http"
        assert spec.model_extra == {"info": {"title": "Petstore"}}

    def test_empty_schemes_fall_back_to_https(self):
        assert SwaggerSpec.model_validate({"schemes": []}).scheme == "https"


class TestOperation:
    def test_name(self):
        operation = Operation(path="/pets/{id}", method=HTTPMethod.GET)

        assert operation.name == "GET /pets/{id}"

    def test_response_schema(self):
        operation = Operation(
            path="/pets",
            method=HTTPMethod.GET,
            spec={"responses": {"200": {"schema": {"type": "array"}}, "404": {"description": "not found"}}},
        )

        assert operation.response_schema(200) == {"type": "array"}
        assert operation.response_schema(404) is None
        assert operation.response_schema(500) is None
