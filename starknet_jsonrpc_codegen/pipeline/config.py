"""
Configuration for the code generator pipeline.

Generation profiles bind a specification version to its documents,
flatten policy and override tables. They are plain read-only data and
are passed explicitly into every stage.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import UnknownSpecVersionError


class SpecVersion(str, Enum):
    """Supported versions of the Starknet JSON-RPC specification."""

    V0_1_0 = "0.1.0"
    V0_2_1 = "0.2.1"
    V0_3_0 = "0.3.0"

    @classmethod
    def parse(cls, value: str) -> SpecVersion:
        """Parse a version string, accepting an optional leading `v`."""
        try:
            return cls(value.removeprefix("v"))
        except ValueError:
            raise UnknownSpecVersionError(f"unknown spec version: {value}") from None


@dataclass(frozen=True)
class FlattenOption:
    """Which allOf fragments are merged into their parent.

    `selected` is None to flatten every fragment, or the schema names to flatten.
    """

    selected: tuple[str, ...] | None = None

    @classmethod
    def all(cls) -> FlattenOption:
        return cls(selected=None)

    @classmethod
    def only(cls, names: list[str] | tuple[str, ...]) -> FlattenOption:
        return cls(selected=tuple(names))

    def should_flatten(self, name: str) -> bool:
        return self.selected is None or name in self.selected


@dataclass(frozen=True)
class FixedField:
    """A field whose wire value is a literal implied by the type."""

    name: str
    value: Any


@dataclass(frozen=True)
class TypeWithFixedFields:
    name: str
    fields: tuple[FixedField, ...]


@dataclass(frozen=True)
class FixedFieldsOptions:
    """Per-type table of fixed fields, looked up by generated type name."""

    fixed_field_types: tuple[TypeWithFixedFields, ...] = ()

    def find_fixed_field(self, type_name: str, field_name: str) -> FixedField | None:
        for item in self.fixed_field_types:
            if item.name != type_name:
                continue
            for fixed in item.fields:
                if fixed.name == field_name:
                    return fixed
        return None


@dataclass(frozen=True)
class TypeWithSharedFields:
    name: str
    fields: tuple[str, ...]


@dataclass(frozen=True)
class SharedFieldsOptions:
    """Per-type table of fields wrapped for shared ownership."""

    shared_field_types: tuple[TypeWithSharedFields, ...] = ()

    def is_field_shared(self, type_name: str, field_name: str) -> bool:
        return any(item.name == type_name and field_name in item.fields for item in self.shared_field_types)


@dataclass(frozen=True)
class RawSpecs:
    """Document pair of a version, relative to the specs directory."""

    main: str
    write: str


@dataclass(frozen=True)
class GenerationProfile:
    """Everything that differs between specification versions."""

    version: SpecVersion
    raw_specs: RawSpecs
    flatten_options: FlattenOption = field(default_factory=FlattenOption.all)
    ignore_types: tuple[str, ...] = ()
    fixed_field_types: FixedFieldsOptions = field(default_factory=FixedFieldsOptions)
    shared_field_types: SharedFieldsOptions = field(default_factory=SharedFieldsOptions)

    def with_config(self, config: CodeGeneratorConfig) -> GenerationProfile:
        """Return a copy with the run configuration applied on top."""
        profile = self
        if config.ignore_types:
            profile = dataclasses.replace(profile, ignore_types=(*profile.ignore_types, *config.ignore_types))
        if config.flatten_types is not None:
            profile = dataclasses.replace(profile, flatten_options=FlattenOption.only(config.flatten_types))
        return profile


@dataclass
class CodeGeneratorConfig:
    """Run options for code generation."""

    # Schema names to skip; they must be implemented by hand
    ignore_types: list[str] = field(default_factory=list)

    # Replaces the profile flatten allow-list when set
    flatten_types: list[str] | None = None

    # Add the provenance header at the top of the output
    add_generation_comment: bool = True

    # Source commit of the generator, shown in the header when known
    commit_hash: str | None = None

    # Command line shown in the header
    command_line: str = "starknet_jsonrpc_codegen"

    # Module the generated code imports its codecs from
    runtime_module: str = "starknet_jsonrpc_codegen.runtime"

    # Module providing the hand-written types (ignored and not implemented ones)
    manual_types_module: str | None = None

    # Generated decoders reject keys the type does not declare
    deny_unknown_fields: bool = False

    @staticmethod
    def from_dict(d: dict) -> CodeGeneratorConfig:
        """Create a config from a dictionary."""
        config = CodeGeneratorConfig()
        for k, v in d.items():
            if hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "ignore_types": self.ignore_types,
            "flatten_types": self.flatten_types,
            "add_generation_comment": self.add_generation_comment,
            "commit_hash": self.commit_hash,
            "command_line": self.command_line,
            "runtime_module": self.runtime_module,
            "manual_types_module": self.manual_types_module,
            "deny_unknown_fields": self.deny_unknown_fields,
        }
