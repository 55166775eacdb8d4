"""
Schema model node definitions.

These nodes represent a parsed OpenRPC specification before any
reference resolution or classification. The model is read-only once
parsed: schemas are addressed by name through the components map and
references are kept as names, never as links.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SchemaNode:
    """Base class for all schema nodes."""

    title: str | None = None
    description: str | None = None
    summary: str | None = None

    def doc(self) -> str | None:
        """Description, falling back to the summary."""
        return self.description if self.description is not None else self.summary


@dataclass(frozen=True)
class RefNode(SchemaNode):
    """Represents a reference to a named schema."""

    ref_path: str = ""  # e.g. "#/components/schemas/FELT"

    @property
    def name(self) -> str:
        return self.ref_path.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class OneOfNode(SchemaNode):
    """Represents a oneOf union."""

    variants: tuple[SchemaNode, ...] = ()


@dataclass(frozen=True)
class AllOfNode(SchemaNode):
    """Represents an allOf composition."""

    fragments: tuple[SchemaNode, ...] = ()


@dataclass(frozen=True)
class ObjectNode(SchemaNode):
    """Represents an object with named properties."""

    # Insertion order is the document order
    properties: dict[str, SchemaNode] = field(default_factory=dict)

    # None when the schema carries no "required" list at all
    required: tuple[str, ...] | None = None


@dataclass(frozen=True)
class ArrayNode(SchemaNode):
    """Represents an array of a single item schema."""

    items: SchemaNode | None = None


@dataclass(frozen=True)
class StringNode(SchemaNode):
    """Represents a string, optionally restricted to literal values."""

    enum: tuple[str, ...] | None = None


@dataclass(frozen=True)
class IntegerNode(SchemaNode):
    """Represents an integer."""


@dataclass(frozen=True)
class BooleanNode(SchemaNode):
    """Represents a boolean."""


@dataclass(frozen=True)
class ErrorDef:
    """A literal error definition."""

    code: int = 0
    message: str = ""


@dataclass(frozen=True)
class ErrorRef:
    """An error definition that points to another error."""

    ref_path: str = ""

    @property
    def name(self) -> str:
        return self.ref_path.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class Param:
    """A method parameter."""

    name: str = ""
    schema: SchemaNode | None = None
    required: bool = False
    description: str | None = None


@dataclass(frozen=True)
class Method:
    """A JSON-RPC method."""

    name: str = ""
    params: tuple[Param, ...] = ()
    result: SchemaNode | None = None
    summary: str | None = None


@dataclass
class Components:
    """Named schemas and errors of a specification."""

    schemas: dict[str, SchemaNode] = field(default_factory=dict)
    errors: dict[str, ErrorDef | ErrorRef] = field(default_factory=dict)


@dataclass
class Specification:
    """Root of the parsed specification."""

    components: Components = field(default_factory=Components)
    methods: list[Method] = field(default_factory=list)

    # Raw document for reference
    raw: dict = field(default_factory=dict, repr=False)
