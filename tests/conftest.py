"""Shared fixtures for swagger-codegen tests.

WIDGETS_SPEC is a small OpenAPI 3 document exercising most of what the
generator handles: array responses, $ref'd request bodies, path-level
parameters, enums, nested objects, maps, self references and an untagged
operation without an operationId.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

import pytest

from swagger_codegen.config import GeneratorConfig
from swagger_codegen.loader import RefResolver


# ---------------------------------------------------------------------------
# Specs
# ---------------------------------------------------------------------------

def _json_schema(ref: str) -> dict[str, Any]:
    return {"content": {"application/json": {"schema": {"$ref": ref}}}}


WIDGETS_SPEC: dict[str, Any] = {
    "openapi": "3.0.3",
    "info": {"title": "Widgets", "version": "1.0.0"},
    "paths": {
        "/api/v1/widgets": {
            "parameters": [
                {"name": "tenant", "in": "query", "schema": {"type": "string"}},
            ],
            "get": {
                "tags": ["Widgets"],
                "operationId": "getWidgets",
                "summary": "List widgets",
                "parameters": [
                    {"name": "page", "in": "query", "required": True, "schema": {"type": "integer"}},
                    {"name": "status", "in": "query", "schema": {"$ref": "#/components/schemas/WidgetStatus"}},
                ],
                "responses": {
                    "200": {
                        "description": "ok",
                        "content": {
                            "application/json": {
                                "schema": {
                                    "type": "array",
                                    "items": {"$ref": "#/components/schemas/Widget"},
                                },
                            },
                        },
                    },
                },
            },
            "post": {
                "tags": ["Widgets"],
                "operationId": "widgetCreateWidget",
                "requestBody": {"$ref": "#/components/requestBodies/WidgetBody"},
                "responses": {"201": {"description": "created", **_json_schema("#/components/schemas/Widget")}},
            },
        },
        "/api/v1/widgets/{widget-id}": {
            "get": {
                "tags": ["Widgets"],
                "operationId": "WidgetController_getWidgetById",
                "parameters": [
                    {"name": "widget-id", "in": "path", "required": True, "schema": {"type": "string"}},
                ],
                "responses": {"200": {"description": "ok", **_json_schema("#/components/schemas/Widget")}},
            },
            "delete": {
                "tags": ["Widgets"],
                "responses": {"204": {"description": "deleted"}},
            },
        },
        "/api/v1/health": {
            "get": {
                "responses": {
                    "200": {
                        "description": "ok",
                        "content": {
                            "application/json": {
                                "schema": {
                                    "type": "object",
                                    "properties": {"status": {"type": "string"}},
                                },
                            },
                        },
                    },
                },
            },
        },
    },
    "components": {
        "schemas": {
            "Widget": {
                "type": "object",
                "description": "A widget.",
                "required": ["id", "name"],
                "properties": {
                    "id": {"type": "string", "readOnly": True},
                    "name": {"type": "string", "description": "Display name"},
                    "status": {"$ref": "#/components/schemas/WidgetStatus"},
                    "owner": {"$ref": "#/components/schemas/Owner"},
                    "dimensions": {
                        "type": "object",
                        "properties": {
                            "width": {"type": "number"},
                            "height": {"type": "number"},
                        },
                    },
                    "tags": {"type": "array", "items": {"type": "string"}},
                    "labels": {"type": "object", "additionalProperties": {"type": "string"}},
                    "parent": {"$ref": "#/components/schemas/Widget"},
                    "x-trace-id": {"type": "string", "nullable": True},
                },
            },
            "WidgetStatus": {"type": "string", "enum": ["active", "retired"]},
            "Owner": {
                "type": "object",
                "properties": {"email": {"type": "string"}},
            },
            "NewWidget": {
                "type": "object",
                "required": ["name"],
                "properties": {"name": {"type": "string"}},
            },
        },
        "requestBodies": {
            "WidgetBody": _json_schema("#/components/schemas/NewWidget"),
        },
    },
}


SWAGGER2_SPEC: dict[str, Any] = {
    "swagger": "2.0",
    "info": {"title": "Pets", "version": "1.0"},
    "paths": {
        "/pets": {
            "post": {
                "tags": ["pets"],
                "operationId": "addPet",
                "parameters": [
                    {"name": "body", "in": "body", "schema": {"$ref": "#/definitions/Pet"}},
                ],
                "responses": {"200": {"description": "ok", "schema": {"$ref": "#/definitions/Pet"}}},
            },
            "get": {
                "tags": ["pets"],
                "operationId": "findPets",
                "parameters": [
                    {"name": "limit", "in": "query", "type": "integer", "description": "Max results"},
                ],
                "responses": {
                    "200": {
                        "description": "ok",
                        "schema": {"type": "array", "items": {"$ref": "#/definitions/Pet"}},
                    },
                },
            },
        },
        "/pets/{id}/photo": {
            "put": {
                "tags": ["pets"],
                "operationId": "uploadPhoto",
                "parameters": [
                    {"name": "id", "in": "path", "required": True, "type": "integer"},
                    {"name": "caption", "in": "formData", "required": True, "type": "string"},
                    {"name": "width", "in": "formData", "type": "integer"},
                ],
                "responses": {"default": {"description": "ok", "schema": {"type": "object"}}},
            },
        },
    },
    "definitions": {
        "Pet": {
            "type": "object",
            "required": ["name"],
            "properties": {
                "name": {"type": "string"},
                "tag": {"type": "string"},
            },
        },
    },
}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def widgets_spec() -> dict[str, Any]:
    """A fresh copy per test, so tests may mutate it."""
    return copy.deepcopy(WIDGETS_SPEC)


@pytest.fixture
def swagger2_spec() -> dict[str, Any]:
    return copy.deepcopy(SWAGGER2_SPEC)


@pytest.fixture
def refs(widgets_spec) -> RefResolver:
    return RefResolver(widgets_spec)


@pytest.fixture
def spec_file(tmp_path, widgets_spec) -> Path:
    """WIDGETS_SPEC written to disk as JSON."""
    path = tmp_path / "openapi.json"
    path.write_text(json.dumps(widgets_spec), encoding="utf-8")
    return path


@pytest.fixture
def config(tmp_path, spec_file) -> GeneratorConfig:
    """Config writing below tmp_path/generated with /api/v1 stripped."""
    return GeneratorConfig(
        swagger_url=str(spec_file),
        output_dir=str(tmp_path / "generated"),
        strip_base_path="/api/v1",
    )
