"""
Python code generation backend.

Generates a Python module of dataclass_json dataclasses and string enums
from IR. Types whose wire shape differs from their fields (fixed literals,
flattened sub-objects, positional requests) get custom `to_dict` and
`from_dict` methods backed by private shadow dataclasses.
"""

from __future__ import annotations

import collections
import json
import re
from typing import Any

from ... import __version__
from ...utils import camel_to_snake_case, to_constant_name, to_type_name
from ..analyzer.ir_nodes import IR, Codec, EnumKind, FieldDef, StructKind, TypeDef, UnitKind, WrapperKind
from ..errors import RenderError
from .base import CodeBackend

TOOL_NAME = "starknet_jsonrpc_codegen"

UNKNOWN_COMMIT = "<Unable to determine Git commit hash>"

# Names the generated module may need from the runtime
RUNTIME_NAMES = frozenset(
    {
        "Base64",
        "DecodeError",
        "EthAddress",
        "FieldElement",
        "JsonRpcError",
        "Nested",
        "NumAsHex",
        "OptionOf",
        "SeqOf",
        "Shared",
        "SharedOf",
        "UfeHex",
        "pop_element",
    }
)

_IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

STDLIB_MODULES = {"dataclasses", "enum", "typing"}

THIRD_PARTY_MODULES = {"dataclasses_json"}

# Field of the single-field shadows of wrappers and positional elements
VALUE_FIELD = "value"


def python_literal(value: Any) -> str:
    """Render a constant as Python source, strings double-quoted."""
    if isinstance(value, str):
        return json.dumps(value)
    return repr(value)


def python_tuple(values: list[str]) -> str:
    """Render strings as a Python tuple literal."""
    if len(values) == 1:
        return f"({python_literal(values[0])},)"
    return f"({', '.join(python_literal(value) for value in values)})"


class PythonBackend(CodeBackend):
    """Python code generation backend."""

    TEMPLATE_LANG = "python"
    FILE_EXTENSION = "py"
    TEMPLATES = (
        "prefix",
        "struct",
        "enum",
        "wrapper",
        "unit",
        "codec_tagged",
        "codec_array",
        "codec_unit",
    )

    def __init__(self, config):
        super().__init__(config)
        self.python_imports: set[tuple[str, str]] = set()
        self.types_by_name: dict[str, TypeDef] = {}
        self.custom_wire_types: set[str] = set()

    def generate(self, ir: IR) -> str:
        """Generate Python code from IR."""
        self.python_imports = {("__future__", "annotations")}
        self.index_types(ir.types)

        blocks = []
        custom_codec_types = []
        for type_def in ir.types:
            if type_def.needs_custom_codec():
                custom_codec_types.append(type_def)
            blocks.append(self.render_type(type_def))

        for type_def in custom_codec_types:
            blocks.append(self.render_codec(type_def))

        prefix = self.render(
            "prefix",
            generation_comment=self.config.add_generation_comment,
            command_line=self.config.command_line,
            tool_version=self._tool_version(),
            ignored=ir.ignored,
            not_implemented=ir.not_implemented,
            imports=self._assemble_imports(ir),
        )

        return "\n\n\n".join([prefix, *blocks]) + "\n"

    def index_types(self, types: list[TypeDef]) -> None:
        """Record the emitted types, and those whose wire shape is not a plain record."""
        self.types_by_name = {type_def.name: type_def for type_def in types}
        self.custom_wire_types = {
            type_def.name
            for type_def in types
            if type_def.needs_custom_codec() or isinstance(type_def.kind, WrapperKind)
        }

    def _tool_version(self) -> str:
        if self.config.commit_hash:
            return f"{TOOL_NAME} {__version__} ({self.config.commit_hash})"
        return f"{TOOL_NAME} {__version__} {UNKNOWN_COMMIT}"

    def _use(self, module: str, name: str) -> None:
        self.python_imports.add((module, name))

    def _use_runtime(self, *names: str) -> None:
        for name in names:
            self._use(self.config.runtime_module, name)

    def _track(self, expression: str) -> str:
        """Record the imports an annotation or codec expression needs."""
        for identifier in _IDENTIFIER_PATTERN.findall(expression):
            if identifier in RUNTIME_NAMES:
                self._use_runtime(identifier)
            elif identifier == "Any":
                self._use("typing", identifier)
        return expression

    def _assemble_imports(self, ir: IR) -> list[str]:
        """Assemble Python import statements."""
        # Group imports by module
        import_groups: dict[str, set[str]] = collections.defaultdict(set)
        for module, name in self.python_imports:
            import_groups[module].add(name)

        stdlib_groups = {m: import_groups[m] for m in import_groups if m in STDLIB_MODULES}
        third_party_groups = {m: import_groups[m] for m in import_groups if m in THIRD_PARTY_MODULES}
        local_groups = {
            m: import_groups[m]
            for m in import_groups
            if m not in STDLIB_MODULES and m not in THIRD_PARTY_MODULES and m != "__future__"
        }

        assembled = [f"from __future__ import {', '.join(sorted(import_groups['__future__']))}", ""]

        for module in sorted(stdlib_groups):
            assembled.append(f"from {module} import {', '.join(sorted(stdlib_groups[module]))}")

        for groups in (third_party_groups, local_groups):
            if groups:
                assembled.append("")
                for module in sorted(groups):
                    assembled.append(f"from {module} import {', '.join(sorted(groups[module]))}")

        manual_types = sorted({to_type_name(name) for name in [*ir.ignored, *ir.not_implemented]})
        if self.config.manual_types_module and manual_types:
            assembled.append(f"from {self.config.manual_types_module} import {', '.join(manual_types)}")

        return assembled

    # Docstrings

    def docstring(self, text: str | None, indent: int = 4) -> str | None:
        """
        Format text as a docstring, indented for a class body.

        Backslashes and triple quotes are escaped. Single-line text that fits
        stays on one line.
        """
        if not text:
            return None

        text = text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
        lines = self.wrap_doc(text, indent + 6)
        pad = " " * indent

        if len(lines) == 1 and not lines[0].endswith('"'):
            return f'{pad}"""{lines[0]}"""'

        body = "\n".join(f"{pad}{line}" if line else "" for line in lines)
        return f'{pad}"""\n{body}\n{pad}"""'

    # Fields

    def json_decorator(self) -> str:
        """Decorator line of the generated dataclass_json records."""
        self._use("dataclasses_json", "dataclass_json")
        if self.config.deny_unknown_fields:
            self._use("dataclasses_json", "Undefined")
            return "@dataclass_json(undefined=Undefined.RAISE)"
        return "@dataclass_json"

    def field_codec(self, field: FieldDef) -> Codec | None:
        """
        Codec of a field value.

        Falls back to the codec of the generated type the field refers to
        when that type does not encode as a plain record.
        """
        if field.codec is not None:
            return field.codec
        if field.nested is not None and field.nested.ref in self.custom_wire_types:
            return field.nested
        return None

    def declaration(
        self,
        field: FieldDef,
        type_name: str | None = None,
        codec: Codec | None = None,
        optional: bool | None = None,
        metadata: bool = True,
    ) -> str:
        """
        Build a dataclass field declaration.

        Args:
            field: The field
            type_name: Declared type, defaults to the field type
            codec: Codec, defaults to the field codec
            optional: Whether the field defaults to None and is left out
                when None, defaults to the field optionality
            metadata: Whether to attach the dataclass_json field config
        """
        if type_name is None:
            type_name = field.type_name
        if codec is None:
            codec = self.field_codec(field)
        if optional is None:
            optional = field.optional

        declaration = f"{field.name}: {self._track(type_name)}"

        options = []
        if metadata:
            if field.rename is not None:
                options.append(f"field_name={python_literal(field.rename)}")
            if codec is not None:
                expr = self._track(codec.expr)
                options.append(f"encoder={expr}.encode")
                options.append(f"decoder={expr}.decode")
            if optional:
                options.append("exclude=lambda x: x is None")

        if not options:
            return f"{declaration} = None" if optional else declaration

        self._use("dataclasses", "field")
        self._use("dataclasses_json", "config")
        default = "default=None, " if optional else ""
        return f"{declaration} = field({default}metadata=config({', '.join(options)}))"

    def element_declaration(self, field: FieldDef) -> str:
        """Declaration of the single field of a positional element shadow."""
        element = FieldDef(name=VALUE_FIELD, type_name=field.type_name, codec=field.codec, nested=field.nested)
        return self.declaration(element, optional=False)

    def _shadow_declaration(self, field: FieldDef) -> str:
        """Declaration of a field in a tagged shadow: fixed fields become optional."""
        if field.fixed is None or field.optional:
            return self.declaration(field)

        codec = self.field_codec(field)
        return self.declaration(
            field,
            type_name=f"{field.type_name} | None",
            codec=codec.optional() if codec is not None else None,
            optional=True,
        )

    def wire_keys(self, type_name: str) -> list[str] | None:
        """
        Wire keys of a struct, flattened sub-objects included.

        Returns None when the type is not an emitted struct.
        """
        type_def = self.types_by_name.get(type_name)
        if type_def is None or not isinstance(type_def.kind, StructKind):
            return None

        keys = []
        for field in type_def.kind.fields:
            if not field.flatten:
                keys.append(field.wire_name)
                continue

            nested_keys = self.wire_keys(field.type_name)
            if nested_keys is None:
                return None
            keys.extend(nested_keys)
        return keys

    # Types

    def render_type(self, type_def: TypeDef) -> str:
        kind = type_def.kind
        doc = self.docstring(self.type_doc(type_def))

        if isinstance(kind, StructKind):
            return self._render_struct(type_def, kind, doc)

        if isinstance(kind, EnumKind):
            return self._render_enum(type_def, kind, doc)

        if isinstance(kind, WrapperKind):
            self._use("dataclasses", "dataclass")
            self._use("dataclasses_json", "DataClassJsonMixin")
            self._use("typing", "Any")
            wrapped = FieldDef(name=VALUE_FIELD, type_name=kind.type_name, codec=kind.codec)
            return self.render(
                "wrapper",
                name=type_def.name,
                docstring=doc,
                declaration=self.declaration(wrapped),
            )

        if isinstance(kind, UnitKind):
            self._use("dataclasses", "dataclass")
            custom_codec = kind.needs_custom_codec()
            if custom_codec:
                self._use("dataclasses_json", "DataClassJsonMixin")
                self._use("typing", "Any")
            return self.render(
                "unit",
                name=type_def.name,
                docstring=doc,
                custom_codec=custom_codec,
                json_decorator=None if custom_codec else self.json_decorator(),
                function_suffix=camel_to_snake_case(type_def.name),
            )

        raise RenderError(f"Unknown type kind for {type_def.name}: {type(kind).__name__}")

    def _render_struct(self, type_def: TypeDef, kind: StructKind, doc: str | None) -> str:
        self._use("dataclasses", "dataclass")
        custom_codec = kind.needs_custom_codec()
        if custom_codec:
            self._use("dataclasses_json", "DataClassJsonMixin")
            self._use("typing", "Any")

        # The shadows of custom-coded types carry the field config
        fields = [
            {
                "declaration": self.declaration(field, metadata=not custom_codec),
                "docstring": self.docstring(field.description),
            }
            for field in kind.fields
            if field.fixed is None
        ]
        ref_fields = []
        if kind.has_ref_view:
            ref_fields = [
                {"declaration": self.declaration(field, metadata=False)}
                for field in kind.fields
                if field.fixed is None
            ]

        return self.render(
            "struct",
            name=type_def.name,
            docstring=doc,
            fields=fields,
            custom_codec=custom_codec,
            json_decorator=None if custom_codec else self.json_decorator(),
            function_suffix=camel_to_snake_case(type_def.name),
            wire_type="list[Any]" if kind.array_encoded else "dict[str, Any]",
            has_ref_view=kind.has_ref_view,
            ref_docstring=self.docstring(f"Reference version of [{type_def.name}]."),
            ref_fields=ref_fields,
        )

    def _render_enum(self, type_def: TypeDef, kind: EnumKind, doc: str | None) -> str:
        self._use("enum", "Enum")

        members: dict[str, str] = {}
        variants = []
        for variant in kind.variants:
            member = to_constant_name(variant.name)
            if member in members:
                raise RenderError(
                    f"Enum {type_def.name} maps variants `{members[member]}` and `{variant.name}` "
                    f"to the same member `{member}`"
                )
            members[member] = variant.name
            variants.append(
                {
                    "member": member,
                    "value": python_literal(variant.wire_name if variant.wire_name is not None else variant.name),
                    "docstring": self.docstring(variant.description),
                    "code": variant.error_code if variant.error_code is not None else 0,
                    "message": python_literal(variant.error_text or ""),
                }
            )

        if kind.is_error:
            self._use_runtime("JsonRpcError")
        return self.render(
            "enum",
            name=type_def.name,
            docstring=doc,
            variants=variants,
            is_error=kind.is_error,
            details_name=f"_{to_constant_name(type_def.name)}_DETAILS",
        )

    # Codecs

    def render_codec(self, type_def: TypeDef) -> str:
        kind = type_def.kind

        if isinstance(kind, (EnumKind, WrapperKind)):
            raise RenderError(f"Custom codec not supported for {type(kind).__name__} type {type_def.name}")

        self._use("typing", "Any")
        self._use_runtime("DecodeError")
        function_suffix = camel_to_snake_case(type_def.name)

        if isinstance(kind, UnitKind):
            if not kind.array_encoded:
                raise RenderError(f"Custom codec requested for non-array unit type {type_def.name}")
            return self.render("codec_unit", name=type_def.name, function_suffix=function_suffix)

        if isinstance(kind, StructKind):
            if kind.array_encoded:
                return self._render_array_codec(type_def, kind, function_suffix)
            return self._render_tagged_codec(type_def, kind, function_suffix)

        raise RenderError(f"Unknown type kind for {type_def.name}: {type(kind).__name__}")

    def _render_tagged_codec(self, type_def: TypeDef, kind: StructKind, function_suffix: str) -> str:
        self._use("dataclasses", "dataclass")

        encode_args = []
        decode_args = []
        fixed_checks = []
        for field in kind.fields:
            if field.fixed is not None:
                encode_args.append(f"{field.name}={python_literal(field.fixed.value)}")
                fixed_checks.append(
                    {"name": field.name, "wire_name": field.wire_name, "literal": python_literal(field.fixed.value)}
                )
            else:
                encode_args.append(f"{field.name}=value.{field.name}")
                decode_args.append(f"{field.name}=tagged.{field.name}")

        # Keys of the parent itself, left in place when a flattened type is not known
        claimed = [field.wire_name for field in kind.fields if not field.flatten]

        flattened = []
        for field in kind.fields:
            if not field.flatten:
                continue

            keys = self.wire_keys(field.type_name)
            if keys is None:
                source = f"{{key: data.pop(key) for key in list(data) if key not in {python_tuple(claimed)}}}"
            else:
                source = f"{{key: data.pop(key) for key in {python_tuple(keys)} if key in data}}"
                claimed.extend(keys)
            flattened.append({"name": field.name, "source": source})

        return self.render(
            "codec_tagged",
            name=type_def.name,
            function_suffix=function_suffix,
            json_decorator=self.json_decorator(),
            declarations=[self._shadow_declaration(field) for field in kind.fields],
            encode_args=encode_args,
            decode_args=decode_args,
            fixed_checks=fixed_checks,
            flattened=flattened,
        )

    def _render_array_codec(self, type_def: TypeDef, kind: StructKind, function_suffix: str) -> str:
        if any(field.fixed is not None or field.shared or field.flatten for field in kind.fields):
            raise RenderError(f"Array-encoded type {type_def.name} cannot have fixed, shared or flattened fields")

        self._use("dataclasses", "dataclass")
        self._use_runtime("pop_element")

        # Element shadows keep every element, None included
        self._use("dataclasses_json", "dataclass_json")

        fields = []
        for index, field in enumerate(kind.fields):
            fields.append(
                {
                    "index": index,
                    "name": field.name,
                    "element_declaration": self.element_declaration(field),
                    "declaration": self.declaration(field),
                }
            )

        encode_types = [type_def.name]
        if kind.has_ref_view:
            encode_types.append(f"{type_def.name}Ref")

        return self.render(
            "codec_array",
            name=type_def.name,
            function_suffix=function_suffix,
            json_decorator=self.json_decorator(),
            fields=fields,
            encode_types=encode_types,
        )
