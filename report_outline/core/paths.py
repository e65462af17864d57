from __future__ import annotations

"""Path resolution, move destinations and drop validation.

A *path* is the ordered list of node ids from a root node to a target node,
inclusive. Paths are what UI collaborators hand to the core: a clicked node
is identified by its path, and a completed drag-and-drop delivers a
``(source_path, destination_path)`` pair.
"""

from dataclasses import dataclass
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from report_outline.core.models import Forest, OutlineNode

__all__ = [
    "MoveDestination",
    "resolve_path",
    "parent_path",
    "path_to",
    "valid_move_targets",
    "parse_path_value",
    "is_drop_valid",
]

logger = logging.getLogger(__name__)

PATH_VALUE_SEPARATOR = ","
PATH_LABEL_SEPARATOR = "/"


@dataclass(frozen=True)
class MoveDestination:
    """A candidate destination offered to the user for a move.

    Attributes
    ----------
    label
        Human-readable path, slash-joined node names (e.g. ``"Intro/Scope"``).
    value
        Comma-joined node ids; a unique string key for the destination.
    path
        The node ids from root to the destination node.
    """

    label: str
    value: str
    path: Tuple[str, ...]


def resolve_path(path: Sequence[str], forest: Iterable[OutlineNode]) -> Optional[OutlineNode]:
    """Return the live node at *path* inside *forest*, or None.

    The first id is matched against the root nodes, every following id
    against the children of the node found so far.
    """
    if not path:
        return None
    candidates: Iterable[OutlineNode] = forest or []
    current: Optional[OutlineNode] = None
    for node_id in path:
        current = next((node for node in candidates if node.id == node_id), None)
        if current is None:
            logger.debug("Path segment not found: %s (path=%s)", node_id, list(path))
            return None
        candidates = current.children
    return current


def parent_path(path: Sequence[str]) -> List[str]:
    """Return the path of the parent of the node at *path* (empty for roots)."""
    return list(path[:-1]) if path else []


def path_to(node_id: str, forest: Iterable[OutlineNode]) -> List[str]:
    """Return the path of the node *node_id* inside *forest*, or [] if absent."""
    trail: List[OutlineNode] = []

    def walk(nodes: Iterable[OutlineNode]) -> bool:
        for node in nodes:
            trail.append(node)
            if node.id == node_id or walk(node.children):
                return True
            trail.pop()
        return False

    return [n.id for n in trail] if walk(forest or []) else []


def valid_move_targets(
    path_to_active_node: Sequence[str],
    forest: Forest,
    accepted_types: Iterable[str],
) -> List[MoveDestination]:
    """List the destinations the active node can be moved into.

    A node qualifies when its ``type`` is accepted and it is not the active
    node itself. The walk only descends into qualifying nodes, which keeps
    the active node's descendants out of the list. The active node's current
    parent is skipped because moving there changes nothing, but its
    children are still walked. Candidates come back in pre-order.
    """
    accepted = {getattr(t, "value", t) for t in accepted_types or []}
    active_id = path_to_active_node[-1] if path_to_active_node else None
    parent_id = path_to_active_node[-2] if len(path_to_active_node or []) > 1 else None

    destinations: List[MoveDestination] = []

    def walk(node: OutlineNode, trail: List[OutlineNode]) -> None:
        if node.id == active_id or node.type not in accepted:
            return
        current = trail + [node]
        if node.id != parent_id:
            destinations.append(
                MoveDestination(
                    label=PATH_LABEL_SEPARATOR.join(n.name for n in current),
                    value=PATH_VALUE_SEPARATOR.join(n.id for n in current),
                    path=tuple(n.id for n in current),
                )
            )
        for child in node.children:
            walk(child, current)

    for root in forest or []:
        walk(root, [])
    return destinations


def parse_path_value(value: str) -> List[str]:
    """Split a comma-joined destination value back into a path."""
    if not value:
        return []
    return [part for part in value.split(PATH_VALUE_SEPARATOR) if part]


def is_drop_valid(source_path: Sequence[str], destination_path: Sequence[str]) -> bool:
    """Return True if the node at *source_path* may be dropped on *destination_path*.

    The drop is valid as soon as the destination strays from the source path.
    A destination that repeats the whole source path is the source itself or
    one of its descendants, and dropping there would create a loop.
    """
    destination = list(destination_path or [])
    for index, node_id in enumerate(source_path or []):
        if index >= len(destination) or destination[index] != node_id:
            return True
    return False
