"""Property paths: syntax, breakpoints, tables, element schemas and the resolver."""

from .syntax import FieldSegment, RepeaterSegment, Segment, parse_path, format_path
from .breakpoints import Breakpoint, State, breakpoint_id, breakpoint_key
from .tables import PropertyEntry, GLOBAL_PROPERTIES, RESPONSIVE_PROPERTIES
from .elements import ELEMENT_PROPERTIES, SPACING_PATHS, LAYOUT_TYPES
from .schemas import (
    ElementSchema,
    PropertySchema,
    ELEMENT_SCHEMAS,
    ELEMENT_TYPE_MAP,
    CONTAINER_TYPES,
    canonical_type,
    get_schema,
    validate_definition,
)
from .resolver import PathSpec, PathResolver, default_resolver, get_property_metadata

__all__ = [
    # Syntax
    "FieldSegment",
    "RepeaterSegment",
    "Segment",
    "parse_path",
    "format_path",
    # Breakpoints
    "Breakpoint",
    "State",
    "breakpoint_id",
    "breakpoint_key",
    # Tables
    "PropertyEntry",
    "GLOBAL_PROPERTIES",
    "RESPONSIVE_PROPERTIES",
    "ELEMENT_PROPERTIES",
    "SPACING_PATHS",
    "LAYOUT_TYPES",
    # Schemas
    "ElementSchema",
    "PropertySchema",
    "ELEMENT_SCHEMAS",
    "ELEMENT_TYPE_MAP",
    "CONTAINER_TYPES",
    "canonical_type",
    "get_schema",
    "validate_definition",
    # Resolver
    "PathSpec",
    "PathResolver",
    "default_resolver",
    "get_property_metadata",
]
