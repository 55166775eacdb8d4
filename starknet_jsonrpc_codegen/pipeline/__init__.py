"""
Pipeline - Starknet OpenRPC to Python code generator.

This module provides a multi-phase architecture for generating typed
Python definitions from the Starknet JSON-RPC specification:

1. Phase 1 (Parser): Parse the OpenRPC documents into the schema model
2. Phase 2 (Analyzer): Flatten analysis, resolve references and build IR
3. Phase 3 (Backend): Render IR to Python source with jinja2 templates
"""

from __future__ import annotations

from .config import CodeGeneratorConfig, FlattenOption, GenerationProfile, SpecVersion
from .errors import (
    CodegenError,
    RenderError,
    SchemaResolutionError,
    SpecificationParseError,
    UnknownSpecVersionError,
    UnsupportedSchemaError,
)
from .generator import DEFAULT_SPECS_DIR, PipelineGenerator
from .profiles import PROFILES, get_profile

__all__ = [
    "PipelineGenerator",
    "DEFAULT_SPECS_DIR",
    "CodeGeneratorConfig",
    "FlattenOption",
    "GenerationProfile",
    "SpecVersion",
    "PROFILES",
    "get_profile",
    "CodegenError",
    "RenderError",
    "SchemaResolutionError",
    "SpecificationParseError",
    "UnknownSpecVersionError",
    "UnsupportedSchemaError",
]
