"""Tests for reading, checking and dereferencing OpenAPI documents."""

import json

import pytest
import yaml

from openapi_request_validator.exceptions import SpecFileError
from openapi_request_validator.services.spec_loader import (
    check_openapi_structure,
    dereference,
    load_spec,
    read_spec_document,
)


def test_load_yaml_spec_resolves_refs(spec_file):
    spec = load_spec(spec_file)
    schema = spec["paths"]["/v1/orders"]["post"]["requestBody"]["content"]["application/json"]["schema"]

    assert "$ref" not in schema
    assert schema["required"] == ["item", "quantity"]


def test_nested_refs_are_resolved(spec_file):
    spec = load_spec(spec_file)
    product = spec["components"]["schemas"]["Product"]
    branches = product["properties"]["contact"]["oneOf"]
    assert [b["required"] for b in branches] == [["email"], ["phone"]]


def test_load_json_spec(tmp_path, spec_dict):
    """JSON content is parsed regardless of being read through the YAML parser."""
    path = tmp_path / "openapi.json"
    path.write_text(json.dumps(spec_dict), encoding="utf-8")

    spec = load_spec(path)
    assert "/v1/orders" in spec["paths"]


def test_unquoted_dates_stay_strings(tmp_path):
    path = tmp_path / "openapi.yaml"
    path.write_text(
        "openapi: 3.0.3\n"
        "info: {title: t, version: '1'}\n"
        "paths: {}\n"
        "components:\n"
        "  schemas:\n"
        "    Day:\n"
        "      type: string\n"
        "      enum: [2024-01-01, 2024-12-31]\n",
        encoding="utf-8",
    )
    spec = load_spec(path)
    assert spec["components"]["schemas"]["Day"]["enum"] == ["2024-01-01", "2024-12-31"]


def test_external_file_reference(tmp_path):
    (tmp_path / "schemas").mkdir()
    (tmp_path / "schemas" / "order.yaml").write_text(
        yaml.safe_dump({"type": "object", "required": ["item"]}), encoding="utf-8"
    )
    document = {
        "openapi": "3.0.3",
        "info": {"title": "t", "version": "1"},
        "paths": {
            "/orders": {
                "post": {
                    "requestBody": {
                        "content": {"application/json": {"schema": {"$ref": "schemas/order.yaml"}}}
                    },
                    "responses": {},
                }
            }
        },
    }
    path = tmp_path / "openapi.yaml"
    path.write_text(yaml.safe_dump(document), encoding="utf-8")

    spec = load_spec(path)
    schema = spec["paths"]["/orders"]["post"]["requestBody"]["content"]["application/json"]["schema"]
    assert schema == {"type": "object", "required": ["item"]}


def test_unresolvable_ref_is_fatal():
    document = {
        "openapi": "3.0.3",
        "paths": {"/x": {"post": {"requestBody": {"$ref": "#/components/requestBodies/Missing"}}}},
    }
    with pytest.raises(SpecFileError, match="Could not resolve"):
        dereference(document)


def test_missing_file(tmp_path):
    with pytest.raises(SpecFileError, match="Could not read"):
        read_spec_document(tmp_path / "nope.yaml")


def test_unparsable_file(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("openapi: 3.0.3\npaths: {\n", encoding="utf-8")
    with pytest.raises(SpecFileError, match="Could not parse"):
        read_spec_document(path)


@pytest.mark.parametrize(
    "document",
    [
        ["not", "a", "mapping"],
        {"info": {"title": "no version"}},
    ],
)
def test_not_an_openapi_definition(document):
    with pytest.raises(SpecFileError, match="not a valid Swagger/OpenAPI definition"):
        check_openapi_structure(document, "spec")


def test_unsupported_versions():
    with pytest.raises(SpecFileError, match="unsupported OpenAPI version"):
        check_openapi_structure({"openapi": "4.0.0", "paths": {}}, "spec")
    with pytest.raises(SpecFileError, match="unsupported Swagger version"):
        check_openapi_structure({"swagger": "1.2", "paths": {}}, "spec")


def test_paths_rules_by_version():
    with pytest.raises(SpecFileError, match="'paths'"):
        check_openapi_structure({"openapi": "3.0.3"}, "spec")
    # 3.1 documents may omit paths (webhooks-only APIs).
    check_openapi_structure({"openapi": "3.1.0", "webhooks": {}}, "spec")
    check_openapi_structure({"swagger": "2.0", "paths": {}}, "spec")


def test_circular_ref_resolves_to_any_depth(spec_file):
    spec = load_spec(spec_file)
    category = spec["components"]["schemas"]["Category"]
    node = category
    for _ in range(5):
        node = node["properties"]["children"]["items"]
    assert node["required"] == ["name"]
