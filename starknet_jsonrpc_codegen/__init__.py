"""Starknet JSON-RPC Code Generator

A Python package for generating typed Python definitions and their JSON
wire codecs from the Starknet JSON-RPC OpenRPC specification, for several
frozen versions of the specification.
"""

__version__ = "0.1.0"

from .pipeline import (
    CodegenError,
    CodeGeneratorConfig,
    PipelineGenerator,
    SpecVersion,
    get_profile,
)

__all__ = [
    "PipelineGenerator",
    "CodeGeneratorConfig",
    "CodegenError",
    "SpecVersion",
    "get_profile",
]
