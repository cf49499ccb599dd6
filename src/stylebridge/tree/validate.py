"""
Tree Validation
Structural checks for element trees read from storage or callers.

Unlike model parsing, validation keeps going after the first problem and
reports every finding together with tree statistics.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Mapping

from ..core.errors import Diagnostic, ErrorKind
from ..core.id import ROOT_ID
from .models import ElementTree

MAX_TREE_DEPTH = 50

_NODE_KEYS = frozenset({"id", "data", "children"})


@dataclass(frozen=True)
class TreeReport:
    """Validation result (errors, warnings and stats)."""

    errors: tuple[Diagnostic, ...] = ()
    warnings: tuple[Diagnostic, ...] = ()
    element_count: int = 0
    max_depth: int = 0
    element_types: Mapping[str, int] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.is_valid,
            "errors": [d.to_dict() for d in self.errors],
            "warnings": [d.to_dict() for d in self.warnings],
            "stats": {
                "element_count": self.element_count,
                "max_depth": self.max_depth,
                "element_types": dict(self.element_types),
            },
        }


class _Collector:
    def __init__(self) -> None:
        self.errors: list[Diagnostic] = []
        self.warnings: list[Diagnostic] = []

    def error(self, kind: ErrorKind, code: str, message: str, **context: Any) -> None:
        self.errors.append(Diagnostic(kind, code, message, context))

    def warn(self, code: str, message: str, **context: Any) -> None:
        self.warnings.append(Diagnostic(ErrorKind.INVALID_REQUEST, code, message, context))


def validate_tree(tree: Mapping[str, Any] | ElementTree, max_depth: int = MAX_TREE_DEPTH) -> TreeReport:
    """
    Check an element tree without modifying it.

    The root sits at depth 0 and is not counted in ``element_count``.
    Subtrees deeper than ``max_depth`` are reported once and not walked.

    Args:
        tree: Wire tree (``{"root": {...}}``) or ElementTree
        max_depth: Deepest allowed element depth

    Returns:
        TreeReport with every finding
    """
    if isinstance(tree, ElementTree):
        tree = tree.to_wire()
    sink = _Collector()
    if not isinstance(tree, Mapping) or not isinstance(tree.get("root"), Mapping):
        sink.error(ErrorKind.INVALID_REQUEST, "missing_root", "Tree has no root node")
        return TreeReport(tuple(sink.errors))

    unexpected = sorted(set(tree) - {"root"})
    if unexpected:
        sink.warn("unexpected_tree_keys", f"Tree has unexpected keys: {', '.join(unexpected)}", keys=unexpected)

    seen: set[str] = set()
    types: Counter[str] = Counter()
    deepest = 0
    count = 0
    stack: list[tuple[Any, str, int]] = [(tree["root"], "root", 0)]
    while stack:
        node, path, depth = stack.pop()
        if not isinstance(node, Mapping):
            sink.error(ErrorKind.INVALID_REQUEST, "invalid_node", f"Node at {path} is not an object", path=path)
            continue
        if depth > max_depth:
            sink.error(
                ErrorKind.INVALID_REQUEST,
                "max_depth_exceeded",
                f"Tree depth exceeds maximum {max_depth} at {path}",
                path=path,
                max_depth=max_depth,
            )
            continue

        _check_node(node, path, depth, seen, sink)
        if depth > 0:
            count += 1
            deepest = max(deepest, depth)
            element_type = _node_type(node)
            if element_type:
                types[element_type] += 1

        children = node.get("children")
        if children is None:
            continue
        if not isinstance(children, list):
            sink.error(ErrorKind.INVALID_REQUEST, "invalid_children", f"Children of {path} must be a list", path=path)
            continue
        for index in reversed(range(len(children))):
            stack.append((children[index], f"{path}.children[{index}]", depth + 1))

    return TreeReport(
        errors=tuple(sink.errors),
        warnings=tuple(sink.warnings),
        element_count=count,
        max_depth=deepest,
        element_types=dict(types),
    )


def _check_node(node: Mapping[str, Any], path: str, depth: int, seen: set[str], sink: _Collector) -> None:
    element_id = node.get("id")
    if not isinstance(element_id, str) or not element_id:
        sink.error(ErrorKind.INVALID_REQUEST, "invalid_element_id", f"Node at {path} has no id", path=path)
    elif element_id in seen:
        sink.error(
            ErrorKind.DUPLICATE_ELEMENT_ID,
            "duplicate_element_id",
            f"Element id '{element_id}' appears twice",
            path=path,
            element_id=element_id,
        )
    elif depth > 0 and element_id == ROOT_ID:
        sink.error(
            ErrorKind.DUPLICATE_ELEMENT_ID,
            "reserved_element_id",
            f"Element at {path} uses the reserved id '{ROOT_ID}'",
            path=path,
            element_id=element_id,
        )
    if isinstance(element_id, str) and element_id:
        seen.add(element_id)

    data = node.get("data")
    if not isinstance(data, Mapping):
        sink.error(ErrorKind.INVALID_REQUEST, "invalid_element_data", f"Node at {path} has no data object", path=path)
    else:
        if not _node_type(node):
            sink.error(ErrorKind.INVALID_REQUEST, "missing_element_type", f"Node at {path} has no type", path=path)
        properties = data.get("properties")
        if properties is not None and not isinstance(properties, Mapping):
            sink.error(
                ErrorKind.INVALID_REQUEST,
                "invalid_properties",
                f"Properties of {path} must be an object",
                path=path,
            )

    extra = sorted(set(node) - _NODE_KEYS)
    if extra:
        sink.warn("unexpected_node_keys", f"Node at {path} has unexpected keys: {', '.join(extra)}", path=path)


def _node_type(node: Mapping[str, Any]) -> str | None:
    data = node.get("data")
    element_type = data.get("type") if isinstance(data, Mapping) else None
    return element_type if isinstance(element_type, str) and element_type else None
