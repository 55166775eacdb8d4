"""
Schema resolution and classification.

Phase 2 of the pipeline: turn the schema model into the IR. Every named
schema that is not skipped becomes a struct or a string enum, the error
definitions become the error enum, and every method gets a request type.
Override tables of the generation profile are applied along the way.
"""

from __future__ import annotations

import logging

from ...utils import method_request_name, to_doc, to_field_name, to_type_name
from ..config import FlattenOption, GenerationProfile
from ..errors import SchemaResolutionError, UnsupportedSchemaError
from ..schema_ast import (
    AllOfNode,
    ErrorRef,
    Method,
    ObjectNode,
    RefNode,
    SchemaNode,
    Specification,
    StringNode,
)
from .field_types import get_field_type, get_field_type_override
from .flatten import get_flatten_only_schemas
from .ir_nodes import IR, Codec, EnumKind, EnumVariant, FieldDef, StructKind, TypeDef, TypeKind, UnitKind

logger = logging.getLogger(__name__)

ERROR_TYPE_NAME = "StarknetError"
ERROR_TYPE_TITLE = "JSON-RPC error codes"


class SchemaAnalyzer:
    """
    Builds the IR of a specification.

    Handles:
    - Skipping ignored, overridden and flatten-only schemas
    - allOf expansion, flattening selected fragments
    - Field naming, optionality and documentation
    - Fixed and shared field tables
    """

    def __init__(self, profile: GenerationProfile):
        self.profile = profile

    @property
    def flatten_option(self) -> FlattenOption:
        return self.profile.flatten_options

    def analyze(self, spec: Specification) -> IR:
        """
        Resolve and classify the whole specification.

        Args:
            spec: The merged core and write documents

        Returns:
            IR with sorted model types, request types and not implemented names
        """
        ir = IR(ignored=list(self.profile.ignore_types))

        flatten_only = get_flatten_only_schemas(spec, self.flatten_option)

        for name, schema in spec.components.schemas.items():
            if name in self.profile.ignore_types:
                continue

            if get_field_type_override(name) is not None:
                continue

            if name in flatten_only:
                continue

            type_name = to_type_name(name)
            kind = self._classify(type_name, schema, spec)
            if kind is None:
                ir.not_implemented.append(name)
                logger.warning("%s generation not implemented. Type not generated for %s", type(schema).__name__, name)
                continue

            description = schema.doc()
            ir.model_types.append(
                TypeDef(
                    name=type_name,
                    kind=kind,
                    title=to_doc(schema.title, True) if schema.title is not None else None,
                    description=to_doc(description, True) if description is not None else None,
                )
            )

        ir.model_types.append(self._build_error_type(spec))

        for method in spec.methods:
            ir.request_types.append(self._build_request_type(method, spec))

        ir.model_types.sort(key=lambda t: t.name)
        ir.request_types.sort(key=lambda t: t.name)
        ir.not_implemented.sort()

        logger.debug(
            "Analyzed specification: %d model types, %d request types, %d not implemented",
            len(ir.model_types),
            len(ir.request_types),
            len(ir.not_implemented),
        )

        return ir

    def _classify(self, type_name: str, schema: SchemaNode, spec: Specification) -> TypeKind | None:
        """Classify a top-level schema, or return None when not implemented."""
        if isinstance(schema, RefNode):
            target = self._resolve(schema, spec)
            fields: list[FieldDef] = []
            self._collect_fields(target, spec, fields, type_name)
            return StructKind(fields=fields)

        if isinstance(schema, (AllOfNode, ObjectNode)):
            fields = []
            self._collect_fields(schema, spec, fields, type_name)
            return StructKind(fields=fields)

        if isinstance(schema, StringNode) and schema.enum is not None:
            return EnumKind(
                variants=[EnumVariant(name=to_type_name(literal), wire_name=literal) for literal in schema.enum]
            )

        return None

    def _resolve(self, ref: RefNode, spec: Specification) -> SchemaNode:
        try:
            return spec.components.schemas[ref.name]
        except KeyError:
            raise SchemaResolutionError(f"Reference target not found: {ref.ref_path}") from None

    def _collect_fields(self, schema: SchemaNode, spec: Specification, fields: list[FieldDef], owner: str) -> None:
        """
        Append the fields of a schema, in order.

        Args:
            schema: A reference, allOf or object schema
            spec: The document references resolve against
            fields: Output list
            owner: Type name the fixed and shared field tables are keyed by
        """
        if isinstance(schema, RefNode):
            self._collect_fields(self._resolve(schema, spec), spec, fields, owner)

        elif isinstance(schema, AllOfNode):
            for fragment in schema.fragments:
                if isinstance(fragment, RefNode) and not self.flatten_option.should_flatten(fragment.name):
                    self._resolve(fragment, spec)
                    type_name = to_type_name(fragment.name)
                    fields.append(
                        FieldDef(
                            name=fragment.name.lower(),
                            description=fragment.description,
                            type_name=type_name,
                            flatten=True,
                            nested=Codec.nested(type_name),
                        )
                    )
                else:
                    # Anonymous fragments can only be inlined
                    self._collect_fields(fragment, spec, fields, owner)

        elif isinstance(schema, ObjectNode):
            for wire_name, prop in schema.properties.items():
                fields.append(self._object_field(wire_name, prop, schema.required, spec, owner))

        else:
            raise UnsupportedSchemaError(f"Unexpected {type(schema).__name__} when collecting object fields")

    def _object_field(
        self,
        wire_name: str,
        prop: SchemaNode,
        required: tuple[str, ...] | None,
        spec: Specification,
        owner: str,
    ) -> FieldDef:
        name = to_field_name(wire_name)
        field_type = get_field_type(prop, spec)

        shared = self.profile.shared_field_types.is_field_shared(owner, name)
        if shared:
            field_type = field_type.shared()

        optional = required is not None and wire_name not in required
        if optional:
            field_type = field_type.optional()

        doc = prop.description
        if doc is None:
            doc = prop.title if prop.title is not None else prop.summary

        return FieldDef(
            name=name,
            description=to_doc(doc, False) if doc is not None else None,
            type_name=field_type.type_name,
            optional=optional,
            fixed=self.profile.fixed_field_types.find_fixed_field(owner, name),
            shared=shared,
            rename=wire_name if name != wire_name else None,
            codec=field_type.codec,
            nested=field_type.nested,
        )

    def _build_error_type(self, spec: Specification) -> TypeDef:
        variants = []
        for name, error in spec.components.errors.items():
            if isinstance(error, ErrorRef):
                raise UnsupportedSchemaError(f"Error redirection not implemented: {name} -> {error.ref_path}")

            variants.append(
                EnumVariant(
                    name=to_type_name(name),
                    description=error.message,
                    error_text=error.message,
                    error_code=error.code,
                )
            )

        return TypeDef(
            name=ERROR_TYPE_NAME,
            kind=EnumKind(variants=variants, is_error=True),
            title=ERROR_TYPE_TITLE,
        )

    def _build_request_type(self, method: Method, spec: Specification) -> TypeDef:
        fields = []
        for param in method.params:
            field_type = get_field_type(param.schema, spec)
            if not param.required:
                field_type = field_type.optional()

            # Parameter names and descriptions are kept as written in the document
            fields.append(
                FieldDef(
                    name=param.name,
                    description=param.description,
                    type_name=field_type.type_name,
                    optional=not param.required,
                    codec=field_type.codec,
                    nested=field_type.nested,
                )
            )

        kind: TypeKind
        if fields:
            kind = StructKind(fields=fields, array_encoded=True, has_ref_view=True)
        else:
            kind = UnitKind(array_encoded=True)

        return TypeDef(
            name=method_request_name(method.name),
            kind=kind,
            title=f"Request for method {method.name}",
        )
