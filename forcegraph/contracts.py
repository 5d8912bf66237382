"""Immutable input contracts for graph payloads."""
from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

NodeId = Union[StrictInt, str]


class _FrozenBaseModel(BaseModel):
    """Base model enforcing immutability after creation."""

    model_config = ConfigDict(frozen=True)


class NodeRecord(_FrozenBaseModel):
    """Node entry as supplied by the caller."""

    id: NodeId
    value: float = Field(..., description="Weight driving radius and optional repulsion scaling.")
    categories: Optional[Union[StrictInt, str]] = Field(None, description="Discrete colour category.")
    label: Optional[str] = None
    title: Optional[str] = None
    image: Optional[str] = Field(None, description="Reference to an external drawable asset.")

    @field_validator("id")
    @classmethod
    def _reject_blank_ids(cls, value: NodeId) -> NodeId:
        """Reject empty string identifiers.

        Args:
            value: The proposed node identifier.

        Returns:
            NodeId: The validated identifier.

        Raises:
            ValueError: If the identifier is an empty or whitespace-only string.
        """
        if isinstance(value, str) and not value.strip():
            raise ValueError("node id must not be blank")
        return value


class LinkRecord(_FrozenBaseModel):
    """Link entry referencing two node identifiers."""

    source: NodeId
    target: NodeId
    value: float = Field(1.0, ge=0.0, description="Visual weight; width is its square root.")


class GraphPayload(_FrozenBaseModel):
    """Complete graph payload with nodes and links."""

    nodes: List[NodeRecord] = Field(default_factory=list)
    links: List[LinkRecord] = Field(default_factory=list)


__all__ = [
    "GraphPayload",
    "LinkRecord",
    "NodeId",
    "NodeRecord",
]
