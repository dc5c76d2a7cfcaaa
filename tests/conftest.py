import json
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture
def swagger_document() -> dict[str, Any]:
    """A small Petstore document with x-tests cases."""
    return {
        "swagger": "2.0",
        "info": {"title": "Petstore", "version": "1.0.0"},
        "host": "petstore.example.com",
        "basePath": "/v1",
        "schemes": ["https"],
        "paths": {
            "/pets/{id}": {
                "parameters": [{"name": "id", "in": "path", "required": True, "type": "integer"}],
                "get": {
                    "responses": {"200": {"description": "a pet", "schema": {"$ref": "#/definitions/Pet"}}},
                    "x-tests": [{"description": "get pet", "params": {"id": "1"}, "response": {"status": 200}}],
                },
                "delete": {"responses": {"204": {"description": "deleted"}}},
            },
            "/pets": {
                "post": {
                    "responses": {"201": {"description": "created"}},
                    "x-tests": [
                        {"description": "create pet", "auth": True, "request": {"body": {"name": "rex"}}, "response": {"status": [200, 201]}},
                        {"description": "create without token", "required": ["token"], "response": {"status": 401}},
                    ],
                },
            },
        },
        "definitions": {
            "Pet": {
                "type": "object",
                "required": ["id", "name"],
                "properties": {"id": {"type": "integer"}, "name": {"type": "string"}},
            },
        },
    }


@pytest.fixture
def create_json_file(tmp_path: Path):
    """Factory fixture for creating temporary JSON files."""

    def _create(name: str, content: Any) -> Path:
        file = tmp_path / name
        file.parent.mkdir(parents=True, exist_ok=True)
        file.write_text(json.dumps(content))
        return file

    return _create
