"""
Schema model module.

Contains the schema node definitions and the OpenRPC parser.
"""

from __future__ import annotations

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
from .parser import SpecificationParser, load_specification, merge_specifications

__all__ = [
    "SchemaNode",
    "RefNode",
    "OneOfNode",
    "AllOfNode",
    "ObjectNode",
    "ArrayNode",
    "StringNode",
    "IntegerNode",
    "BooleanNode",
    "ErrorDef",
    "ErrorRef",
    "Param",
    "Method",
    "Components",
    "Specification",
    "SpecificationParser",
    "load_specification",
    "merge_specifications",
]
