"""
Document Tree Models
Pydantic models for the element tree wire shape.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ElementData(BaseModel):
    """Type and property subtree of one element."""

    model_config = ConfigDict(extra="allow")

    type: str = Field(..., min_length=1, description="Canonical element type")
    properties: dict[str, Any] | None = Field(default=None, description="content/design regions")


class ElementNode(BaseModel):
    """One node of the element tree. Leaves carry no children list."""

    id: str = Field(..., min_length=1)
    data: ElementData
    children: list["ElementNode"] | None = Field(default=None)

    def to_wire(self) -> dict[str, Any]:
        data = self.data.model_dump(exclude={"properties"})
        if self.data.properties is not None:
            data["properties"] = self.data.properties
        node: dict[str, Any] = {"id": self.id, "data": data}
        if self.children is not None:
            node["children"] = [child.to_wire() for child in self.children]
        return node


class ElementTree(BaseModel):
    """Root wrapper: ``{"root": {...}}``."""

    root: ElementNode

    def to_wire(self) -> dict[str, Any]:
        return {"root": self.root.to_wire()}


ElementNode.model_rebuild()
