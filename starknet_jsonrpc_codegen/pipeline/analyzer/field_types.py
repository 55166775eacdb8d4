"""
Field type mapping.

Maps a schema node used in field or parameter position to a native type
name plus an optional codec. References first go through a fixed table of
domain overrides that cannot be derived from the schemas themselves.
"""

from __future__ import annotations

from ...utils import to_type_name
from ..errors import SchemaResolutionError, UnsupportedSchemaError
from ..schema_ast import (
    AllOfNode,
    ArrayNode,
    BooleanNode,
    IntegerNode,
    ObjectNode,
    OneOfNode,
    RefNode,
    SchemaNode,
    Specification,
    StringNode,
)
from .ir_nodes import Codec, FieldType

UFE_HEX = Codec("UfeHex")
NUM_AS_HEX = Codec("NumAsHex")
BASE64 = Codec("Base64")

_FELT = FieldType("FieldElement", UFE_HEX)

FIELD_TYPE_OVERRIDES: dict[str, FieldType] = {
    "ADDRESS": _FELT,
    "STORAGE_KEY": _FELT,
    "TXN_HASH": _FELT,
    "FELT": _FELT,
    "BLOCK_HASH": _FELT,
    "CHAIN_ID": _FELT,
    "PROTOCOL_VERSION": _FELT,
    "BLOCK_NUMBER": FieldType("int"),
    "NUM_AS_HEX": FieldType("int", NUM_AS_HEX),
    "ETH_ADDRESS": FieldType("EthAddress"),
    "SIGNATURE": _FELT.sequence(),
    "CONTRACT_ABI": FieldType("list[LegacyContractAbiEntry]"),
    "CONTRACT_ENTRY_POINT_LIST": FieldType("list[ContractEntryPoint]"),
    "LEGACY_CONTRACT_ENTRY_POINT_LIST": FieldType("list[LegacyContractEntryPoint]"),
    "TXN_TYPE": FieldType("str"),
}


def get_field_type_override(name: str) -> FieldType | None:
    """Return the hard-coded field type of a schema name, if any."""
    return FIELD_TYPE_OVERRIDES.get(name)


def get_field_type(schema: SchemaNode, spec: Specification) -> FieldType:
    """
    Map a schema node in field position to a field type.

    Args:
        schema: The field or parameter schema
        spec: The document the references resolve against

    Raises:
        SchemaResolutionError: A reference does not name a known schema
        UnsupportedSchemaError: An anonymous composite schema is used as a field type
    """
    if isinstance(schema, RefNode):
        if schema.name not in spec.components.schemas:
            raise SchemaResolutionError(f"Reference target not found: {schema.ref_path}")

        override = get_field_type_override(schema.name)
        if override is not None:
            return override

        type_name = to_type_name(schema.name)
        if isinstance(spec.components.schemas[schema.name], (RefNode, AllOfNode, ObjectNode)):
            return FieldType(type_name, nested=Codec.nested(type_name))
        return FieldType(type_name)

    if isinstance(schema, ArrayNode):
        return get_field_type(schema.items, spec).sequence()

    if isinstance(schema, BooleanNode):
        return FieldType("bool")

    if isinstance(schema, IntegerNode):
        return FieldType("int")

    if isinstance(schema, StringNode):
        if schema.description is not None and "base64" in schema.description:
            return FieldType("bytes", BASE64)
        return FieldType("str")

    if isinstance(schema, OneOfNode):
        raise UnsupportedSchemaError("Anonymous oneOf used as field type")

    if isinstance(schema, AllOfNode):
        raise UnsupportedSchemaError("Anonymous allOf used as field type")

    if isinstance(schema, ObjectNode):
        raise UnsupportedSchemaError("Anonymous object used as field type")

    raise UnsupportedSchemaError(f"Unsupported field schema: {type(schema).__name__}")
