"""Shared fixtures: a small OpenAPI spec and payload files on disk."""

import json

import pytest
import yaml

PRODUCT_PATH = "/v1/webhooks/4mdg/product_upserted"


def _schema_ref(name):
    return {"$ref": f"#/components/schemas/{name}"}


def make_spec():
    return {
        "openapi": "3.0.3",
        "info": {"title": "Orders API", "version": "1.0.0"},
        "paths": {
            PRODUCT_PATH: {
                "post": {
                    "requestBody": {
                        "required": True,
                        "content": {"application/json": {"schema": _schema_ref("Product")}},
                    },
                    "responses": {"204": {"description": "accepted"}},
                }
            },
            "/v1/orders": {
                "get": {"responses": {"200": {"description": "list orders"}}},
                "post": {
                    "requestBody": {
                        "required": True,
                        "content": {"application/json": {"schema": _schema_ref("Order")}},
                    },
                    "responses": {"201": {"description": "created"}},
                },
            },
            "/v1/orders/{orderId}": {
                "put": {
                    "requestBody": {
                        "content": {"application/json": {"schema": _schema_ref("Order")}},
                    },
                    "responses": {"200": {"description": "updated"}},
                },
                "delete": {"responses": {"204": {"description": "deleted"}}},
            },
            "/v1/categories": {
                "post": {
                    "requestBody": {
                        "required": True,
                        "content": {"application/json": {"schema": _schema_ref("Category")}},
                    },
                    "responses": {"201": {"description": "created"}},
                }
            },
            "/v1/uploads": {
                "post": {
                    "requestBody": {
                        "required": True,
                        "content": {"multipart/form-data": {"schema": {"type": "object"}}},
                    },
                    "responses": {"201": {"description": "uploaded"}},
                }
            },
        },
        "components": {
            "schemas": {
                "Product": {
                    "type": "object",
                    "required": ["sku", "name", "status"],
                    "properties": {
                        "sku": {"type": "string"},
                        "name": {"type": "string"},
                        "status": {
                            "type": "string",
                            "enum": ["active", "inactive", "discontinued"],
                        },
                        "price": {"type": "number", "minimum": 0},
                        "supportEmail": {"type": "string", "format": "email"},
                        "contact": {"oneOf": [_schema_ref("EmailContact"), _schema_ref("PhoneContact")]},
                    },
                },
                "EmailContact": {
                    "type": "object",
                    "required": ["email"],
                    "properties": {"email": {"type": "string"}},
                    "additionalProperties": False,
                },
                "PhoneContact": {
                    "type": "object",
                    "required": ["phone"],
                    "properties": {"phone": {"type": "string"}},
                    "additionalProperties": False,
                },
                "Category": {
                    "type": "object",
                    "required": ["name"],
                    "properties": {
                        "name": {"type": "string"},
                        "children": {"type": "array", "items": _schema_ref("Category")},
                    },
                },
                "Order": {
                    "type": "object",
                    "required": ["item", "quantity"],
                    "properties": {
                        "item": {"type": "string"},
                        "quantity": {"type": "integer", "minimum": 1},
                        "state": {"type": "string", "enum": ["SP", "RJ", "MG"]},
                    },
                },
            }
        },
    }


def make_product(**overrides):
    product = {"sku": "SKU-001", "name": "Widget", "status": "active", "price": 9.5}
    product.update(overrides)
    return product


@pytest.fixture
def product():
    return make_product()


@pytest.fixture
def spec_dict():
    return make_spec()


@pytest.fixture
def spec_file(tmp_path, spec_dict):
    path = tmp_path / "openapi.yaml"
    path.write_text(yaml.safe_dump(spec_dict, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture
def write_payload(tmp_path):
    """Factory: write a JSON payload file and return its path as a string."""

    def _write(data, name="payload.json"):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    return _write
