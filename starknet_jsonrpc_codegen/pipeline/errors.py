"""
Errors raised by the code generator pipeline.

Every error here aborts the run: the CLI reports a single diagnostic and
writes nothing to standard output.
"""

from __future__ import annotations


class CodegenError(Exception):
    """Base class for all fatal code generation errors."""


class SpecificationParseError(CodegenError):
    """The raw specification document could not be turned into a schema model."""


class SchemaResolutionError(CodegenError):
    """A reference points to a schema name that does not exist."""


class UnsupportedSchemaError(CodegenError):
    """A schema shape appears where no representation exists for it."""


class UnknownSpecVersionError(CodegenError):
    """The requested specification version has no generation profile."""


class RenderError(CodegenError):
    """The renderer was asked for output a type kind cannot provide."""
