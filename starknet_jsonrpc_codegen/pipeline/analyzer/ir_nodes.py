"""
IR (Intermediate Representation) node definitions.

These nodes represent the classified schemas, ready for code generation.
All references are resolved, names are final and override tables applied.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..config import FixedField


@dataclass(frozen=True)
class Codec:
    """A named codec applied to a field value during encode/decode.

    `expr` is the expression the generated module uses to build it,
    e.g. "UfeHex" or "SeqOf(UfeHex)".
    """

    expr: str

    # Generated type a nested codec defers to
    ref: str | None = None

    @classmethod
    def nested(cls, type_name: str) -> Codec:
        return cls(f"Nested(lambda: {type_name})", ref=type_name)

    @classmethod
    def shared(cls, inner: Codec | None) -> Codec:
        if inner is None:
            return cls("SharedOf()")
        return cls(f"SharedOf({inner.expr})", ref=inner.ref)

    def sequence(self) -> Codec:
        return Codec(f"SeqOf({self.expr})", ref=self.ref)

    def optional(self) -> Codec:
        return Codec(f"OptionOf({self.expr})", ref=self.ref)


@dataclass(frozen=True)
class FieldType:
    """A native field type plus an optional codec override.

    `nested` defers to the wire format of the generated type the field is
    made of. It only matters when that type encodes differently from a
    plain record.
    """

    type_name: str
    codec: Codec | None = None
    nested: Codec | None = None

    def sequence(self) -> FieldType:
        return FieldType(
            type_name=f"list[{self.type_name}]",
            codec=self.codec.sequence() if self.codec else None,
            nested=self.nested.sequence() if self.nested else None,
        )

    def optional(self) -> FieldType:
        return FieldType(
            type_name=f"{self.type_name} | None",
            codec=self.codec.optional() if self.codec else None,
            nested=self.nested.optional() if self.nested else None,
        )

    def shared(self) -> FieldType:
        return FieldType(
            type_name=f"Shared[{self.type_name}]",
            codec=Codec.shared(self.codec if self.codec is not None else self.nested),
        )


@dataclass
class FieldDef:
    """A field definition in a struct."""

    name: str = ""
    description: str | None = None
    type_name: str = ""
    optional: bool = False

    # Literal wire value; the field is not stored in the struct when set
    fixed: FixedField | None = None

    # Wrapped for shared ownership in the public struct
    shared: bool = False

    # Wire name when it differs from the attribute name
    rename: str | None = None

    # Embedded sub-object whose fields are merged into the parent on the wire
    flatten: bool = False

    codec: Codec | None = None

    # Codec of the generated type the field refers to
    nested: Codec | None = None

    @property
    def wire_name(self) -> str:
        return self.rename if self.rename is not None else self.name


@dataclass
class StructKind:
    """A record with named fields."""

    fields: list[FieldDef] = field(default_factory=list)

    # Encoded as a positional JSON array in field declaration order
    array_encoded: bool = False

    # Also emit a read-only reference view of the struct
    has_ref_view: bool = False

    def needs_custom_codec(self) -> bool:
        return self.array_encoded or any(f.fixed is not None or f.flatten for f in self.fields)


@dataclass
class EnumVariant:
    """A variant of an enum."""

    name: str = ""
    description: str | None = None

    # Wire literal when it differs from the variant name
    wire_name: str | None = None

    # Display text of error variants
    error_text: str | None = None

    # JSON-RPC error code of error variants
    error_code: int | None = None


@dataclass
class EnumKind:
    """A closed set of string literals."""

    variants: list[EnumVariant] = field(default_factory=list)

    # Every variant carries error text usable as a diagnostic
    is_error: bool = False

    def needs_custom_codec(self) -> bool:
        return False


@dataclass
class WrapperKind:
    """A newtype around a single value, transparent on the wire."""

    type_name: str = ""
    codec: Codec | None = None

    def needs_custom_codec(self) -> bool:
        return False


@dataclass
class UnitKind:
    """A type without fields."""

    array_encoded: bool = False

    def needs_custom_codec(self) -> bool:
        return self.array_encoded


TypeKind = StructKind | EnumKind | WrapperKind | UnitKind


@dataclass
class TypeDef:
    """An emittable type."""

    name: str = ""
    kind: TypeKind = field(default_factory=UnitKind)
    title: str | None = None
    description: str | None = None

    def needs_custom_codec(self) -> bool:
        return self.kind.needs_custom_codec()


@dataclass
class IR:
    """The complete Intermediate Representation."""

    # Schema types and the error enum, sorted by name
    model_types: list[TypeDef] = field(default_factory=list)

    # One request type per method, sorted by name
    request_types: list[TypeDef] = field(default_factory=list)

    # Schema names whose classification is not implemented, sorted
    not_implemented: list[str] = field(default_factory=list)

    # Schema names skipped on request, in profile order
    ignored: list[str] = field(default_factory=list)

    @property
    def types(self) -> list[TypeDef]:
        return [*self.model_types, *self.request_types]
