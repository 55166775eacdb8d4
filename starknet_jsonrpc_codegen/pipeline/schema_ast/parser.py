"""
OpenRPC specification parser that builds the schema model.

Phase 1 of the pipeline: parse the raw JSON documents into schema nodes
without resolving references or doing any classification.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..errors import SpecificationParseError
from .nodes import (
    AllOfNode,
    ArrayNode,
    BooleanNode,
    Components,
    ErrorDef,
    ErrorRef,
    IntegerNode,
    Method,
    ObjectNode,
    OneOfNode,
    Param,
    RefNode,
    SchemaNode,
    Specification,
    StringNode,
)

logger = logging.getLogger(__name__)


class SpecificationParser:
    """Parses an OpenRPC document into a Specification."""

    def parse(self, raw: dict[str, Any]) -> Specification:
        """
        Parse an OpenRPC document.

        Args:
            raw: The decoded JSON document

        Returns:
            Specification with schemas, errors and methods in document order
        """
        if not isinstance(raw, dict):
            raise SpecificationParseError("Specification root must be a JSON object")

        components = raw.get("components") or {}
        if not isinstance(components, dict):
            raise SpecificationParseError("`components` must be a JSON object")

        spec = Specification(raw=raw)

        for name, schema in (components.get("schemas") or {}).items():
            spec.components.schemas[name] = self._parse_schema_node(schema, f"#/components/schemas/{name}")

        for name, error in (components.get("errors") or {}).items():
            spec.components.errors[name] = self._parse_error(error, f"#/components/errors/{name}")

        for index, method in enumerate(raw.get("methods") or []):
            spec.methods.append(self._parse_method(method, f"#/methods/{index}"))

        logger.debug(
            "Parsed specification: %d schemas, %d errors, %d methods",
            len(spec.components.schemas),
            len(spec.components.errors),
            len(spec.methods),
        )

        return spec

    def _parse_schema_node(self, schema: Any, path: str) -> SchemaNode:
        """
        Parse a schema node recursively.

        Args:
            schema: The schema dictionary
            path: Current path in the document (for error messages)

        Returns:
            Appropriate SchemaNode subclass
        """
        if not isinstance(schema, dict):
            raise SpecificationParseError(f"Schema at {path} must be a JSON object")

        docs = {
            "title": schema.get("title"),
            "description": schema.get("description"),
            "summary": schema.get("summary"),
        }

        if "$ref" in schema:
            return RefNode(ref_path=schema["$ref"], **docs)

        if "oneOf" in schema:
            variants = tuple(self._parse_schema_node(item, f"{path}/oneOf/{i}") for i, item in enumerate(schema["oneOf"]))
            return OneOfNode(variants=variants, **docs)

        if "allOf" in schema:
            fragments = tuple(self._parse_schema_node(item, f"{path}/allOf/{i}") for i, item in enumerate(schema["allOf"]))
            return AllOfNode(fragments=fragments, **docs)

        type_value = schema.get("type")

        # Objects are sometimes written without an explicit type
        if type_value is None and "properties" in schema:
            type_value = "object"

        # So are string enumerations
        if type_value is None and "enum" in schema:
            type_value = "string"

        if type_value == "object":
            return self._parse_object_node(schema, path, docs)

        if type_value == "array":
            if "items" not in schema:
                raise SpecificationParseError(f"Array schema at {path} has no `items`")
            items = self._parse_schema_node(schema["items"], f"{path}/items")
            return ArrayNode(items=items, **docs)

        if type_value == "string":
            enum = schema.get("enum")
            return StringNode(enum=tuple(str(value) for value in enum) if enum is not None else None, **docs)

        if type_value == "integer":
            return IntegerNode(**docs)

        if type_value == "boolean":
            return BooleanNode(**docs)

        raise SpecificationParseError(f"Unsupported schema shape at {path}: {sorted(schema.keys())}")

    def _parse_object_node(self, schema: dict[str, Any], path: str, docs: dict[str, Any]) -> ObjectNode:
        """Parse an object node."""
        properties = {}
        for prop_name, prop_schema in (schema.get("properties") or {}).items():
            properties[prop_name] = self._parse_schema_node(prop_schema, f"{path}/properties/{prop_name}")

        required = schema.get("required")

        return ObjectNode(
            properties=properties,
            required=tuple(required) if required is not None else None,
            **docs,
        )

    def _parse_error(self, error: Any, path: str) -> ErrorDef | ErrorRef:
        """Parse an error definition."""
        if not isinstance(error, dict):
            raise SpecificationParseError(f"Error at {path} must be a JSON object")

        if "$ref" in error:
            return ErrorRef(ref_path=error["$ref"])

        if "message" not in error:
            raise SpecificationParseError(f"Error at {path} has no `message`")

        return ErrorDef(code=error.get("code", 0), message=error["message"])

    def _parse_method(self, method: Any, path: str) -> Method:
        """Parse a method with its parameters and result."""
        if not isinstance(method, dict) or "name" not in method:
            raise SpecificationParseError(f"Method at {path} must be a JSON object with a `name`")

        params = []
        for index, param in enumerate(method.get("params") or []):
            param_path = f"{path}/params/{index}"
            if not isinstance(param, dict) or "name" not in param or "schema" not in param:
                raise SpecificationParseError(f"Parameter at {param_path} needs a `name` and a `schema`")

            params.append(
                Param(
                    name=param["name"],
                    schema=self._parse_schema_node(param["schema"], f"{param_path}/schema"),
                    required=bool(param.get("required", False)),
                    description=param.get("description") or param.get("summary"),
                )
            )

        result = None
        if isinstance(method.get("result"), dict) and "schema" in method["result"]:
            result = self._parse_schema_node(method["result"]["schema"], f"{path}/result/schema")

        return Method(
            name=method["name"],
            params=tuple(params),
            result=result,
            summary=method.get("summary"),
        )


def merge_specifications(core: Specification, write: Specification) -> Specification:
    """
    Merge the write-operations specification into the core one.

    Write methods are appended after core methods. Write errors are added
    only when the core map does not already define the same name. Write
    schemas are not merged: the write document carries no extra models.

    Returns:
        A new Specification; neither input is modified
    """
    errors = dict(core.components.errors)
    for name, error in write.components.errors.items():
        errors.setdefault(name, error)

    return Specification(
        components=Components(schemas=dict(core.components.schemas), errors=errors),
        methods=[*core.methods, *write.methods],
        raw=core.raw,
    )


def load_specification(path: Path) -> Specification:
    """Read and parse a single OpenRPC document from disk."""
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError as e:
        raise SpecificationParseError(f"Specification document not found: {path}") from e
    except json.JSONDecodeError as e:
        raise SpecificationParseError(f"Failed to parse specification {path}: {e}") from e

    return SpecificationParser().parse(raw)
