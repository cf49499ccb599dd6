"""
Value Placement
Writes wire values into an element's property subtree at a resolved path.
"""

from typing import Any, Callable, Mapping

from ..core.errors import Diagnostic, ErrorKind
from ..paths.resolver import PathSpec
from ..paths.syntax import FieldSegment, RepeaterSegment, Segment, format_path


def _conflict(path: tuple[Segment, ...], message: str) -> Diagnostic:
    return Diagnostic(
        ErrorKind.PATH_CONFLICT,
        "path_conflict",
        message,
        {"path": format_path(path)},
    )


def _holds(item: Mapping[str, Any], name: str, breakpoint_key: str | None) -> bool:
    """Whether ``item`` already has a value for ``name`` (at ``breakpoint_key``)."""
    if name not in item:
        return False
    if breakpoint_key is None:
        return True
    existing = item[name]
    return not isinstance(existing, dict) or breakpoint_key in existing


def _locate_item(
    container: dict[str, Any],
    segment: RepeaterSegment,
    occupied: Callable[[Mapping[str, Any]], bool],
) -> dict[str, Any] | None:
    """
    Find or create the repeater item a segment addresses.

    ``[key=value]`` picks the first matching item, appending one when none
    matches. ``[]`` picks the last item unless ``occupied`` reports that it
    already holds the field being written.
    """
    items = container.setdefault(segment.name, [])
    if not isinstance(items, list):
        return None

    if segment.discriminator is not None:
        key, wanted = segment.discriminator
        for item in items:
            if isinstance(item, dict) and item.get(key) == wanted:
                return item
        item = {key: wanted}
        items.append(item)
        return item

    if items and isinstance(items[-1], dict) and not occupied(items[-1]):
        return items[-1]
    item = {}
    items.append(item)
    return item


def place_at(
    properties: dict[str, Any],
    path: tuple[Segment, ...],
    value: Any,
    breakpoint_key: str | None = None,
) -> Diagnostic | None:
    """
    Write ``value`` at ``path`` inside ``properties``.

    With a ``breakpoint_key`` the leaf becomes ``{breakpoint_key: value}``
    merged with the keys already present. Intermediate objects and repeater
    items are created on demand.

    Returns:
        None on success, a PathConflict diagnostic when the existing tree
        has the wrong shape for the path
    """
    node: Any = properties
    for index, segment in enumerate(path[:-1]):
        following = path[index + 1]
        if isinstance(segment, RepeaterSegment):
            node = _locate_item(
                node, segment, lambda item: _holds(item, following.name, breakpoint_key)
            )
            if node is None:
                return _conflict(path, f"'{segment.name}' is not a list")
            continue
        child = node.setdefault(segment.name, {})
        if not isinstance(child, dict):
            return _conflict(path, f"'{segment.name}' is not an object")
        node = child

    last = path[-1]
    if isinstance(last, RepeaterSegment):
        return _merge_item(node, last, path, value, breakpoint_key)
    return _write_leaf(node, last, path, value, breakpoint_key)


def _write_leaf(
    node: dict[str, Any],
    segment: FieldSegment,
    path: tuple[Segment, ...],
    value: Any,
    breakpoint_key: str | None,
) -> Diagnostic | None:
    if breakpoint_key is None:
        node[segment.name] = value
        return None
    existing = node.get(segment.name)
    if existing is None:
        node[segment.name] = {breakpoint_key: value}
        return None
    if not isinstance(existing, dict):
        return _conflict(path, f"'{segment.name}' holds a plain value, not a breakpoint map")
    existing[breakpoint_key] = value
    return None


def _merge_item(
    node: dict[str, Any],
    segment: RepeaterSegment,
    path: tuple[Segment, ...],
    value: Any,
    breakpoint_key: str | None,
) -> Diagnostic | None:
    if isinstance(value, list) and segment.discriminator is None:
        # Whole-list assignment replaces the repeater
        if not isinstance(node.get(segment.name, []), list):
            return _conflict(path, f"'{segment.name}' is not a list")
        node[segment.name] = list(value)
        return None
    if not isinstance(value, Mapping):
        return _conflict(path, f"'{segment.name}' items must be objects")

    discriminator_key = segment.discriminator[0] if segment.discriminator else None
    fields = [name for name in value if name != discriminator_key]
    item = _locate_item(
        node, segment, lambda current: any(_holds(current, name, breakpoint_key) for name in fields)
    )
    if item is None:
        return _conflict(path, f"'{segment.name}' is not a list")

    for name, field_value in value.items():
        if breakpoint_key is None or name == discriminator_key:
            item[name] = field_value
            continue
        existing = item.setdefault(name, {})
        if not isinstance(existing, dict):
            return _conflict(path, f"'{name}' holds a plain value, not a breakpoint map")
        existing[breakpoint_key] = field_value
    return None


def place_value(
    properties: dict[str, Any],
    spec: PathSpec,
    value: Any,
    breakpoint_key: str | None = None,
) -> Diagnostic | None:
    """Place a wire value for a resolved property; responsive specs key it by breakpoint."""
    key = breakpoint_key if spec.responsive else None
    return place_at(properties, spec.path, value, key)


def merge_properties(target: dict[str, Any], patch: Mapping[str, Any]) -> dict[str, Any]:
    """Deep merge ``patch`` into ``target``; lists and scalars replace."""
    for key, value in patch.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            merge_properties(current, value)
        elif isinstance(value, Mapping):
            target[key] = merge_properties({}, value)
        else:
            target[key] = value
    return target


def find_node(tree: Mapping[str, Any], element_id: str) -> dict[str, Any] | None:
    """Depth-first search of a wire tree (``{"root": ...}`` or a bare node)."""
    stack = [tree["root"] if "root" in tree and "id" not in tree else tree]
    while stack:
        node = stack.pop()
        if not isinstance(node, dict):
            continue
        if node.get("id") == element_id:
            return node
        stack.extend(reversed(node.get("children") or []))
    return None
