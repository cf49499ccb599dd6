"""
Document Tree Builder
Arena of element slots with a scope stack for nested construction.

Features:
- Containers open a scope, leaves do not
- Ids are prefixed ULIDs; clones always get fresh ids
- Structural operations return Result[..., TreeError]
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError
from returns.result import Failure, Result, Success

from ..core.errors import ErrorKind, TreeError
from ..core.id import ROOT_ID, Prefix, new_element_id
from ..core.json import safe_json_dumps
from ..core.logging_config import get_logger
from .models import ElementNode, ElementTree
from .placement import merge_properties
from .validate import validate_tree

logger = get_logger(__name__)

Position = int | str


@dataclass
class _Slot:
    """Arena record. ``children`` is None for leaves."""

    id: str
    type: str
    parent: str | None
    properties: dict[str, Any] | None = None
    children: list[str] | None = None
    extra: dict[str, Any] = field(default_factory=dict)


class DocumentBuilder:
    """
    Builds an element tree node by node.

    The scope stack holds the ids of open containers, innermost last. New
    nodes are appended to the innermost open container, or to the root when
    no container is open.
    """

    def __init__(self, id_prefix: str = Prefix.ELEMENT) -> None:
        self.id_prefix = id_prefix
        self._slots: dict[str, _Slot] = {}
        self._root: str | None = None
        self._scope: list[str] = []
        self._last: str | None = None

    # ========================================================================
    # Construction
    # ========================================================================

    def create_document(self, root_type: str = "root") -> str:
        """Start a fresh tree. Returns the root id."""
        self.reset()
        self._slots[ROOT_ID] = _Slot(id=ROOT_ID, type=root_type, parent=None, children=[])
        self._root = ROOT_ID
        return ROOT_ID

    def open_container(
        self,
        element_type: str,
        properties: Mapping[str, Any] | None = None,
        element_id: str | None = None,
    ) -> str:
        """Append a container and make it the current parent."""
        slot = self._append(element_type, properties, container=True, element_id=element_id)
        self._scope.append(slot.id)
        return slot.id

    def add_leaf(
        self,
        element_type: str,
        properties: Mapping[str, Any] | None = None,
        element_id: str | None = None,
    ) -> str:
        """Append a childless node; the scope is unchanged."""
        return self._append(element_type, properties, container=False, element_id=element_id).id

    def close(self) -> None:
        """Leave the innermost open container. No-op at the root."""
        if self._scope:
            self._scope.pop()

    def close_all(self) -> None:
        self._scope.clear()

    def set_properties_on_last(self, patch: Mapping[str, Any]) -> None:
        """Deep merge ``patch`` into the most recently added node."""
        slot = self._slots.get(self._last) if self._last else None
        if slot is None:
            return
        if slot.properties is None:
            slot.properties = {}
        merge_properties(slot.properties, patch)

    def _append(
        self,
        element_type: str,
        properties: Mapping[str, Any] | None,
        container: bool,
        element_id: str | None = None,
    ) -> _Slot:
        self._ensure_document()
        if element_id is not None and (element_id in self._slots or element_id == ROOT_ID):
            raise ValueError(f"Element id '{element_id}' already exists")
        parent_id = self.current_parent_id
        parent = self._slots[parent_id]
        if parent.children is None:
            parent.children = []
        slot = _Slot(
            id=element_id or new_element_id(self.id_prefix),
            type=element_type,
            parent=parent.id,
            properties=copy.deepcopy(dict(properties)) if properties else None,
            children=[] if container else None,
        )
        self._slots[slot.id] = slot
        parent.children.append(slot.id)
        self._last = slot.id
        return slot

    # ========================================================================
    # Structural operations
    # ========================================================================

    def insert(
        self,
        parent_id: str,
        node: Mapping[str, Any] | ElementNode,
        position: Position = "last",
    ) -> Result[str, TreeError]:
        """
        Insert a wire node (and its subtree) under ``parent_id``.

        Args:
            parent_id: Existing element id, or ``"root"``
            node: Wire node dict or ElementNode
            position: ``"first"``, ``"last"`` or an index (clamped)

        Returns:
            Result with the inserted node's id or a TreeError
        """
        self._ensure_document()
        parent = self._slots.get(self._resolve(parent_id))
        if parent is None:
            return Failure(
                TreeError(ErrorKind.PARENT_NOT_FOUND, f"Parent '{parent_id}' not found", parent_id)
            )

        parsed = _parse_node(node)
        if isinstance(parsed, TreeError):
            return Failure(parsed)

        collision = self._first_collision(parsed)
        if collision is not None:
            return Failure(
                TreeError(ErrorKind.DUPLICATE_ELEMENT_ID, f"Element id '{collision}' already exists", collision)
            )

        if parent.children is None:
            parent.children = []
        index = _clamp(position, len(parent.children))
        if index is None:
            return Failure(TreeError(ErrorKind.INVALID_REQUEST, f"Invalid position: {position!r}"))

        self._ingest(parsed, parent.id)
        parent.children.insert(index, parsed.id)
        self._last = parsed.id
        logger.debug("element_inserted", element_id=parsed.id, parent_id=parent.id, index=index)
        return Success(parsed.id)

    def clone_subtree(self, node: str | Mapping[str, Any] | ElementNode, deep: bool = True) -> Result[str, TreeError]:
        """
        Copy a subtree into the current parent with fresh ids.

        ``node`` is the id of an element in this tree or a wire node. A
        shallow clone keeps the node's own data with an empty child list.
        """
        self._ensure_document()
        if isinstance(node, str):
            if self._resolve(node) not in self._slots:
                return Failure(TreeError(ErrorKind.ELEMENT_NOT_FOUND, f"Element '{node}' not found", node))
            source = ElementNode.model_validate(self._materialize(self._resolve(node)))
        else:
            parsed = _parse_node(node)
            if isinstance(parsed, TreeError):
                return Failure(parsed)
            source = parsed

        clone = self._renumber(source, deep)
        parent = self._slots[self.current_parent_id]
        if parent.children is None:
            parent.children = []
        self._ingest(clone, parent.id)
        parent.children.append(clone.id)
        self._last = clone.id
        logger.debug("element_cloned", source_id=source.id, clone_id=clone.id, deep=deep)
        return Success(clone.id)

    def import_tree(self, tree: Mapping[str, Any] | ElementTree) -> Result[int, TreeError]:
        """
        Replace the builder contents with an existing tree.

        The imported root keeps its id; ``"root"`` resolves to it. The
        builder is unchanged when validate_tree reports any error.

        Returns:
            Result with the element count (excluding the root)
        """
        report = validate_tree(tree)
        if not report.is_valid:
            first = report.errors[0]
            logger.debug("tree_import_rejected", errors=len(report.errors), code=first.code)
            return Failure(TreeError(first.kind, first.message, first.context.get("element_id")))
        try:
            parsed = tree if isinstance(tree, ElementTree) else ElementTree.model_validate(dict(tree))
        except PydanticValidationError as e:
            return Failure(TreeError(ErrorKind.INVALID_REQUEST, f"Malformed tree: {e.error_count()} error(s)"))

        self.reset()
        self._root = parsed.root.id
        self._ingest(parsed.root, None)
        if self._slots[self._root].children is None:
            self._slots[self._root].children = []
        logger.debug("tree_imported", root_id=self._root, elements=self.element_count())
        return Success(self.element_count())

    def reindex(self) -> int:
        """
        Rebuild parent links from the root by depth-first walk.

        Slots no longer reachable from the root are dropped, as are repeated
        child references. Returns the element count (excluding the root).
        """
        if self._root is None:
            return 0
        reachable: set[str] = set()
        stack = [(self._root, None)]
        while stack:
            slot_id, parent_id = stack.pop()
            slot = self._slots.get(slot_id)
            if slot is None or slot_id in reachable:
                continue
            reachable.add(slot_id)
            slot.parent = parent_id
            if slot.children is not None:
                slot.children = [
                    child for index, child in enumerate(slot.children)
                    if child in self._slots and child not in slot.children[:index]
                ]
                stack.extend((child, slot_id) for child in reversed(slot.children))

        dropped = [slot_id for slot_id in self._slots if slot_id not in reachable]
        for slot_id in dropped:
            del self._slots[slot_id]
        self._scope = [slot_id for slot_id in self._scope if slot_id in reachable]
        if self._last not in reachable:
            self._last = None
        if dropped:
            logger.debug("unreachable_elements_dropped", count=len(dropped))
        return self.element_count()

    # ========================================================================
    # Queries
    # ========================================================================

    @property
    def root_id(self) -> str | None:
        return self._root

    @property
    def current_parent_id(self) -> str:
        self._ensure_document()
        return self._scope[-1] if self._scope else self._root  # type: ignore[return-value]

    @property
    def depth(self) -> int:
        return len(self._scope)

    @property
    def last_id(self) -> str | None:
        return self._last

    def get_element(self, element_id: str) -> dict[str, Any] | None:
        """Wire copy of an element and its subtree."""
        resolved = self._resolve(element_id)
        if resolved not in self._slots:
            return None
        return self._materialize(resolved)

    def element_ids(self) -> list[str]:
        """All ids in depth-first order, root first."""
        if self._root is None:
            return []
        ids: list[str] = []
        stack = [self._root]
        while stack:
            slot = self._slots[stack.pop()]
            ids.append(slot.id)
            stack.extend(reversed(slot.children or []))
        return ids

    def element_count(self) -> int:
        return max(0, len(self._slots) - 1)

    def build(self) -> dict[str, Any]:
        """The finished tree as ``{"root": {...}}``."""
        self._ensure_document()
        return {"root": self._materialize(self._root)}  # type: ignore[arg-type]

    def build_json(self, indent: int = 0) -> str:
        return safe_json_dumps(self.build(), indent=indent)

    def reset(self) -> None:
        self._slots = {}
        self._root = None
        self._scope = []
        self._last = None

    # ========================================================================
    # Internals
    # ========================================================================

    def _ensure_document(self) -> None:
        if self._root is None:
            self.create_document()

    def _resolve(self, element_id: str) -> str:
        if element_id == ROOT_ID and self._root is not None:
            return self._root
        return element_id

    def _materialize(self, slot_id: str) -> dict[str, Any]:
        slot = self._slots[slot_id]
        data: dict[str, Any] = {"type": slot.type, **copy.deepcopy(slot.extra)}
        if slot.properties is not None:
            data["properties"] = copy.deepcopy(slot.properties)
        node: dict[str, Any] = {"id": slot.id, "data": data}
        if slot.children is not None:
            node["children"] = [self._materialize(child) for child in slot.children]
        return node

    def _first_collision(self, node: ElementNode) -> str | None:
        seen: set[str] = set()
        for current in _walk(node):
            if current.id in self._slots or current.id in seen or current.id == ROOT_ID:
                return current.id
            seen.add(current.id)
        return None

    def _ingest(self, node: ElementNode, parent_id: str | None) -> None:
        extra = dict(node.data.model_extra or {})
        self._slots[node.id] = _Slot(
            id=node.id,
            type=node.data.type,
            parent=parent_id,
            properties=copy.deepcopy(node.data.properties),
            children=[child.id for child in node.children] if node.children is not None else None,
            extra=copy.deepcopy(extra),
        )
        for child in node.children or []:
            self._ingest(child, node.id)

    def _renumber(self, node: ElementNode, deep: bool) -> ElementNode:
        if node.children is None:
            children = None
        elif deep:
            children = [self._renumber(child, deep) for child in node.children]
        else:
            children = []
        return ElementNode(
            id=new_element_id(self.id_prefix),
            data=node.data.model_copy(deep=True),
            children=children,
        )


def _parse_node(node: Mapping[str, Any] | ElementNode) -> ElementNode | TreeError:
    if isinstance(node, ElementNode):
        return node
    try:
        return ElementNode.model_validate(dict(node))
    except PydanticValidationError as e:
        return TreeError(ErrorKind.INVALID_REQUEST, f"Malformed element node: {e.error_count()} error(s)")


def _walk(node: ElementNode):
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children or []))


def _clamp(position: Position, length: int) -> int | None:
    if position == "first":
        return 0
    if position == "last":
        return length
    if isinstance(position, int) and not isinstance(position, bool):
        return min(max(position, 0), length)
    return None
