"""
Analyzer module.

Contains the IR definitions, the field type mapper, the flatten-only
analysis and the schema classifier.
"""

from __future__ import annotations

from .analyzer import ERROR_TYPE_NAME, SchemaAnalyzer
from .field_types import FIELD_TYPE_OVERRIDES, get_field_type, get_field_type_override
from .flatten import FLATTEN_VETO, get_flatten_only_schemas
from .ir_nodes import (
    IR,
    Codec,
    EnumKind,
    EnumVariant,
    FieldDef,
    FieldType,
    StructKind,
    TypeDef,
    TypeKind,
    UnitKind,
    WrapperKind,
)

__all__ = [
    "IR",
    "Codec",
    "EnumKind",
    "EnumVariant",
    "FieldDef",
    "FieldType",
    "StructKind",
    "TypeDef",
    "TypeKind",
    "UnitKind",
    "WrapperKind",
    "ERROR_TYPE_NAME",
    "SchemaAnalyzer",
    "FIELD_TYPE_OVERRIDES",
    "get_field_type",
    "get_field_type_override",
    "FLATTEN_VETO",
    "get_flatten_only_schemas",
]
