"""
Flatten-only analysis.

Scans every named schema of a document to find the ones that are only ever
merged into allOf parents. Those are never emitted as standalone types.
"""

from __future__ import annotations

import logging

from ..config import FlattenOption
from ..schema_ast import AllOfNode, ArrayNode, ObjectNode, OneOfNode, RefNode, SchemaNode, Specification

logger = logging.getLogger(__name__)

# Used through method signatures, which the scan does not inspect
FLATTEN_VETO = ("FUNCTION_CALL", "PENDING_STATE_UPDATE")


class _FlattenScan:
    """Collects flatten candidates and standalone references."""

    def __init__(self, flatten_option: FlattenOption):
        self.flatten_option = flatten_option
        self.flatten: set[str] = set()
        self.non_flatten: set[str] = set()

    def visit(self, schema: SchemaNode) -> None:
        if isinstance(schema, OneOfNode):
            for variant in schema.variants:
                self.visit_member(variant)
        elif isinstance(schema, AllOfNode):
            for fragment in schema.fragments:
                if not isinstance(fragment, RefNode):
                    self.visit(fragment)
                elif self.flatten_option.should_flatten(fragment.name):
                    self.flatten.add(fragment.name)
                else:
                    self.non_flatten.add(fragment.name)
        elif isinstance(schema, ObjectNode):
            for prop in schema.properties.values():
                self.visit_member(prop)
        elif isinstance(schema, ArrayNode):
            self.visit_member(schema.items)

    def visit_member(self, schema: SchemaNode) -> None:
        """Visit a variant, property or item schema, where a reference names a standalone type."""
        if isinstance(schema, RefNode):
            self.non_flatten.add(schema.name)
        else:
            self.visit(schema)


def get_flatten_only_schemas(spec: Specification, flatten_option: FlattenOption) -> frozenset[str]:
    """
    Compute the names of the schemas that only exist to be flattened.

    Args:
        spec: The parsed document
        flatten_option: Which allOf fragments may be flattened

    Returns:
        Flatten candidates never referenced elsewhere, minus the veto list
    """
    scan = _FlattenScan(flatten_option)
    for schema in spec.components.schemas.values():
        scan.visit(schema)

    result = frozenset(scan.flatten - scan.non_flatten - set(FLATTEN_VETO))
    logger.debug("Flatten-only schemas: %s", sorted(result))
    return result
