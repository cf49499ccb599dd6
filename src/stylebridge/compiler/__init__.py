"""Compilation pipeline: simplified requests -> canonical element trees."""

from .pipeline import CompiledDocument, CompiledElement, StyleCompiler, table_type
from .layout import (
    build_layout_v2,
    expand_spacing,
    items_per_row,
    background_image_layer,
)
from .composites import composite_wire, wrapped_item_wire

__all__ = [
    # Pipeline
    "StyleCompiler",
    "CompiledElement",
    "CompiledDocument",
    "table_type",
    # Layout
    "build_layout_v2",
    "expand_spacing",
    "items_per_row",
    "background_image_layer",
    # Composites
    "composite_wire",
    "wrapped_item_wire",
]
