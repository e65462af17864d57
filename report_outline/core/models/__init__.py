from __future__ import annotations

"""Shared data structures used across the report outline core.

This package exposes the outline node dataclass and the helpers that build
and copy forests. It is intentionally free of UI / I/O code so that the
contained objects can be reused in any context (unit-tests, CLI, GUI, etc.).
"""

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .node_types import (
    NODE_CAPABILITIES,
    NodeCapabilities,
    NodeSubType,
    NodeType,
    capabilities_for,
    drop_target_types,
)

__all__ = [
    "OutlineNode",
    "Forest",
    "build_forest",
    "clone_forest",
    "NodeType",
    "NodeSubType",
    "NodeCapabilities",
    "NODE_CAPABILITIES",
    "capabilities_for",
    "drop_target_types",
]


@dataclass
class OutlineNode:
    """One entry in the report outline tree.

    Attributes
    ----------
    id
        Opaque unique identifier, stable for the node's lifetime.
    name
        User-editable label.
    type
        Role of the node (see :class:`NodeType`), drives drop acceptance.
    sub_type
        Report content kind the node is bound to (see :class:`NodeSubType`).
    children
        Child nodes, ordered by ``sort_order``.
    parent_id
        Id of the owning node, or ``""`` for root level nodes.
    sort_order
        Dense zero-based rank among siblings sharing ``parent_id``.
    loading
        Transient display flag; irrelevant to tree consistency.
    display_name
        Optional label shown instead of ``name``.
    properties
        Arbitrary custom key/value pairs carried along with the node.
    """

    id: str
    name: str
    type: str = NodeType.OUTLINE_ITEM.value
    sub_type: Optional[str] = None
    children: List["OutlineNode"] = field(default_factory=list)
    parent_id: str = ""
    sort_order: int = 0
    loading: bool = False
    display_name: Optional[str] = None
    properties: Dict[str, Any] = field(default_factory=dict)

    @property
    def label(self) -> str:
        """Return the label a renderer should display."""
        return self.display_name if self.display_name is not None else self.name

    def has_children(self) -> bool:
        """Return True if this node has child nodes."""
        return len(self.children) > 0

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain mapping of this node and its subtree."""
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "parent_id": self.parent_id,
            "sort_order": self.sort_order,
            "children": [child.to_dict() for child in self.children],
        }
        if self.sub_type is not None:
            data["sub_type"] = self.sub_type
        if self.display_name is not None:
            data["display_name"] = self.display_name
        if self.loading:
            data["loading"] = True
        if self.properties:
            data["properties"] = dict(self.properties)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OutlineNode":
        """Build a node (and its subtree) from a plain mapping.

        ``parent_id`` and ``sort_order`` are taken verbatim when present; use
        :func:`build_forest` to derive them from the nesting instead.
        """
        if not data.get("id"):
            raise ValueError("Outline node id cannot be empty")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            type=str(data.get("type") or NodeType.OUTLINE_ITEM.value),
            sub_type=data.get("sub_type"),
            children=[cls.from_dict(child) for child in data.get("children") or []],
            parent_id=str(data.get("parent_id") or ""),
            sort_order=int(data.get("sort_order") or 0),
            loading=bool(data.get("loading", False)),
            display_name=data.get("display_name"),
            properties=dict(data.get("properties") or {}),
        )


# A forest is the ordered list of root-level nodes
Forest = List[OutlineNode]


def build_forest(entries: Iterable[Mapping[str, Any]], parent_id: str = "") -> Forest:
    """Build a canonical forest from nested mappings.

    ``parent_id`` is assigned from the containing entry and ``sort_order``
    from the position in the containing list, so the result satisfies the
    ordering invariants whatever values the mappings carried.
    """
    forest: Forest = []
    for position, entry in enumerate(entries or []):
        node = OutlineNode.from_dict({**entry, "children": []})
        node.parent_id = parent_id
        node.sort_order = position
        node.children = build_forest(entry.get("children") or [], node.id)
        forest.append(node)
    return forest


def clone_forest(forest: Iterable[OutlineNode]) -> Forest:
    """Return a deep, fully independent copy of *forest*."""
    return deepcopy(list(forest or []))
