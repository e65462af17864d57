from __future__ import annotations

"""Reordering algorithms for the outline forest.

Two disjoint algorithms are provided, selected by whether the moved node and
its target share a parent:

- :func:`common_parent_move` shifts sort orders inside a single sibling set,
  touching only the window between the origin and target positions.
- :func:`different_parent_move` detaches the node, closes the gap it leaves in
  its old sibling set and opens a slot in the new one.

Both converge on ``recursive_update`` + ``recursive_sort`` so callers only
ever observe a canonical forest whose sibling sort orders are dense
(``0..n-1``). Invalid requests (unknown nodes, a target inside the moved
subtree) leave the forest unchanged.
"""

from dataclasses import replace
import logging
from typing import List, Optional, Sequence

from report_outline.core.models import Forest, OutlineNode
from report_outline.core.tree import (
    iter_nodes,
    recursive_filter,
    recursive_search,
    recursive_sort,
    recursive_update,
)

__all__ = [
    "common_parent_move",
    "different_parent_move",
    "move_into_parent",
    "detach_node",
    "reorder_move",
]

logger = logging.getLogger(__name__)


def _shifted_order(order: int, origin_order: int, target_order: int) -> int:
    if order == origin_order:
        return target_order
    if order == target_order:
        return target_order - 1 if target_order > origin_order else target_order + 1
    if order < target_order:
        return order - 1
    return order + 1


def common_parent_move(
    forest: Forest,
    parent_id: str,
    origin_order: int,
    target_order: int,
) -> Forest:
    """Move the sibling at *origin_order* to *target_order* under *parent_id*.

    Every sibling strictly between the old and new positions shifts one slot
    toward the vacated gap; siblings outside the window are not touched.
    """
    parent_id = parent_id or ""
    if origin_order == target_order:
        logger.debug("Move noop: same slot parent=%r order=%d", parent_id, origin_order)
        return recursive_sort(forest)

    low, high = min(origin_order, target_order), max(origin_order, target_order)
    updated: List[OutlineNode] = []
    for node in iter_nodes(forest):
        if node.parent_id != parent_id or not (low <= node.sort_order <= high):
            continue
        new_order = _shifted_order(node.sort_order, origin_order, target_order)
        updated.append(replace(node, sort_order=new_order))

    logger.debug(
        "Same-parent move parent=%r origin=%d target=%d touched=%d",
        parent_id, origin_order, target_order, len(updated),
    )
    return recursive_sort(recursive_update(forest, updated))


def _siblings(forest: Forest, parent_id: str) -> Optional[List[OutlineNode]]:
    if not parent_id:
        return list(forest)
    parent = recursive_search(forest, parent_id)
    return None if parent is None else list(parent.children)


def _close_gap(forest: Forest, parent_id: str, vacated_order: int) -> Forest:
    siblings = _siblings(forest, parent_id)
    if not siblings:
        return forest
    updates = [
        replace(node, sort_order=node.sort_order - 1)
        for node in siblings
        if node.sort_order > vacated_order
    ]
    return recursive_update(forest, updates)


def _insert_sibling(forest: Forest, parent_id: str, node: OutlineNode) -> Forest:
    # Open a slot at node.sort_order, then append node to the sibling set
    def shift(sibling: OutlineNode) -> OutlineNode:
        if sibling.sort_order >= node.sort_order:
            return replace(sibling, sort_order=sibling.sort_order + 1)
        return sibling

    if not parent_id:
        return [shift(sibling) for sibling in forest] + [node]

    parent = recursive_search(forest, parent_id)
    if parent is None:
        logger.warning("Insert skipped: parent %s not found", parent_id)
        return forest
    children = [shift(child) for child in parent.children] + [node]
    return recursive_update(forest, [replace(parent, children=children)])


def detach_node(forest: Forest, node: OutlineNode) -> Forest:
    """Remove *node* and its subtree, keeping the old sibling set dense."""
    remaining = recursive_filter(forest, lambda n: n.id != node.id)
    return _close_gap(remaining, node.parent_id, node.sort_order)


def different_parent_move(
    forest: Forest,
    origin_node: OutlineNode,
    target_node: OutlineNode,
) -> Forest:
    """Move *origin_node* into *target_node*'s sibling set, at the target's position.

    The target and every later sibling shift one slot down. When the target
    sits at the forest root, root-level sort orders are shifted instead of a
    parent's children.
    """
    origin = recursive_search(forest, origin_node.id)
    if origin is None:
        logger.warning("Move noop: origin %s not found", origin_node.id)
        return recursive_sort(forest)

    remaining = detach_node(forest, origin)
    target = recursive_search(remaining, target_node.id)
    if target is None:
        # Target was detached along with the origin's subtree (or never existed)
        logger.warning(
            "Move noop: target %s unreachable from origin %s", target_node.id, origin.id
        )
        return recursive_sort(forest)

    moved = replace(origin, parent_id=target.parent_id, sort_order=target.sort_order)
    logger.debug(
        "Cross-parent move node=%s from=%r to=%r order=%d",
        origin.id, origin.parent_id, target.parent_id, target.sort_order,
    )
    return recursive_sort(_insert_sibling(remaining, target.parent_id, moved))


def move_into_parent(
    forest: Forest,
    origin_node: OutlineNode,
    new_parent: OutlineNode,
) -> Forest:
    """Reparent *origin_node* as the last child of *new_parent*."""
    origin = recursive_search(forest, origin_node.id)
    if origin is None:
        logger.warning("Move noop: origin %s not found", origin_node.id)
        return recursive_sort(forest)

    remaining = detach_node(forest, origin)
    parent = recursive_search(remaining, new_parent.id)
    if parent is None:
        logger.warning(
            "Move noop: parent %s unreachable from origin %s", new_parent.id, origin.id
        )
        return recursive_sort(forest)

    moved = replace(origin, parent_id=parent.id, sort_order=len(parent.children))
    logger.debug("Reparent node=%s from=%r to=%r", origin.id, origin.parent_id, parent.id)
    return recursive_sort(_insert_sibling(remaining, parent.id, moved))


def reorder_move(
    forest: Forest,
    source_path: Sequence[str],
    destination_path: Sequence[str],
) -> Forest:
    """Place the source node beside the destination node (drag-and-drop reorder).

    Dispatches to :func:`common_parent_move` when both nodes share a parent,
    otherwise to :func:`different_parent_move`.
    """
    if not source_path or not destination_path:
        return recursive_sort(forest)
    origin = recursive_search(forest, source_path[-1])
    target = recursive_search(forest, destination_path[-1])
    if origin is None or target is None or origin.id == target.id:
        logger.debug("Reorder noop: source=%s destination=%s", source_path, destination_path)
        return recursive_sort(forest)

    if origin.parent_id == target.parent_id:
        return common_parent_move(forest, origin.parent_id, origin.sort_order, target.sort_order)
    return different_parent_move(forest, origin, target)
