"""Content store interface: where finished document trees are kept."""

from dataclasses import dataclass
from typing import Any, Protocol

from returns.result import Result


@dataclass(frozen=True)
class StoreError:
    """Storage failure (for Result pattern)."""

    message: str
    document_id: str | None = None


class ContentStore(Protocol):
    """Protocol for document tree persistence"""

    def load(self, document_id: str) -> dict[str, Any] | None:
        """Return the stored tree, or None when the document has none"""
        ...

    def save(self, document_id: str, tree: dict[str, Any]) -> Result[None, StoreError]:
        """Persist a tree, replacing the previous one"""
        ...
