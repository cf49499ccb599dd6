"""Document tree: arena builder, wire models, value placement and validation."""

from .builder import DocumentBuilder
from .models import ElementData, ElementNode, ElementTree
from .placement import find_node, merge_properties, place_at, place_value
from .validate import MAX_TREE_DEPTH, TreeReport, validate_tree

__all__ = [
    # Builder
    "DocumentBuilder",
    # Wire models
    "ElementData",
    "ElementNode",
    "ElementTree",
    # Placement
    "find_node",
    "merge_properties",
    "place_at",
    "place_value",
    # Validation
    "MAX_TREE_DEPTH",
    "TreeReport",
    "validate_tree",
]
