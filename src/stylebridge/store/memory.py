"""
In-memory content store.

Trees are kept as orjson snapshots, so neither side of the store ever
shares a mutable tree with the other.
"""

from dataclasses import dataclass
from typing import Any

import orjson
from returns.result import Failure, Result, Success

from ..core.logging_config import get_logger
from .base import StoreError

logger = get_logger(__name__)


@dataclass
class Stats:
    """Store statistics."""

    documents: int = 0
    loads: int = 0
    saves: int = 0
    misses: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "documents": self.documents,
            "loads": self.loads,
            "saves": self.saves,
            "misses": self.misses,
        }


class InMemoryContentStore:
    """
    Reference ContentStore backed by a dict of encoded snapshots.

    Examples:
        >>> store = InMemoryContentStore()
        >>> store.save("doc_1", {"root": {"id": "root", "data": {"type": "root"}, "children": []}})
        <Success: None>
        >>> store.load("doc_1")["root"]["id"]
        'root'
    """

    def __init__(self) -> None:
        self._documents: dict[str, bytes] = {}
        self._stats = Stats()

    def load(self, document_id: str) -> dict[str, Any] | None:
        snapshot = self._documents.get(document_id)
        if snapshot is None:
            self._stats.misses += 1
            return None
        self._stats.loads += 1
        return orjson.loads(snapshot)

    def save(self, document_id: str, tree: dict[str, Any]) -> Result[None, StoreError]:
        if not document_id:
            return Failure(StoreError("Document id must not be empty"))
        if not isinstance(tree, dict) or "root" not in tree:
            return Failure(StoreError("Tree must be an object with a 'root' node", document_id))
        try:
            snapshot = orjson.dumps(tree)
        except TypeError as e:
            logger.warning("document_encode_failed", document_id=document_id, error=str(e))
            return Failure(StoreError(f"Tree is not JSON-serializable: {e}", document_id))

        self._documents[document_id] = snapshot
        self._stats.saves += 1
        self._stats.documents = len(self._documents)
        logger.debug("document_saved", document_id=document_id, size=len(snapshot))
        return Success(None)

    def delete(self, document_id: str) -> bool:
        removed = self._documents.pop(document_id, None) is not None
        self._stats.documents = len(self._documents)
        return removed

    def document_ids(self) -> list[str]:
        return sorted(self._documents)

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._documents

    def __len__(self) -> int:
        return len(self._documents)

    @property
    def stats(self) -> Stats:
        return self._stats
