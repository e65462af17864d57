from __future__ import annotations

"""Recursive primitives over an in-memory outline forest.

All functions are side-effect-free: they return new lists and use
``dataclasses.replace`` for nodes whose children change, so subtrees that
are not touched are shared with the input rather than copied.

None of these helpers defend against cyclic input; callers guarantee that
the forest is acyclic.
"""

from dataclasses import replace
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from report_outline.core.models import Forest, OutlineNode

__all__ = [
    "iter_nodes",
    "flatten_nodes",
    "index_nodes",
    "recursive_search",
    "recursive_filter",
    "recursive_update",
    "recursive_sort",
    "with_children",
]


def iter_nodes(nodes: Iterable[OutlineNode]) -> Iterator[OutlineNode]:
    """Yield every node of *nodes* in depth-first pre-order."""
    stack = list(nodes or [])[::-1]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def flatten_nodes(nodes: Iterable[OutlineNode]) -> List[OutlineNode]:
    """Return every node of *nodes* exactly once, in depth-first pre-order."""
    return list(iter_nodes(nodes))


def index_nodes(nodes: Iterable[OutlineNode]) -> Dict[str, OutlineNode]:
    """Return an id -> node lookup table for *nodes*."""
    return {node.id: node for node in iter_nodes(nodes)}


def recursive_search(nodes: Iterable[OutlineNode], node_id: str) -> Optional[OutlineNode]:
    """Return the node whose id is exactly *node_id*, or None."""
    for node in iter_nodes(nodes):
        if node.id == node_id:
            return node
    return None


def with_children(node: OutlineNode, children: List[OutlineNode]) -> OutlineNode:
    # Same node when no child changed identity or position
    if len(children) == len(node.children) and all(
        a is b for a, b in zip(children, node.children)
    ):
        return node
    return replace(node, children=children)


def recursive_filter(
    nodes: Iterable[OutlineNode],
    predicate: Callable[[OutlineNode], bool],
) -> Forest:
    """Keep nodes satisfying *predicate*, recursing into the kept nodes' children.

    A removed node takes its whole subtree with it.
    """
    result: Forest = []
    for node in nodes or []:
        if not predicate(node):
            continue
        if node.children:
            node = with_children(node, recursive_filter(node.children, predicate))
        result.append(node)
    return result


def recursive_update(
    nodes: Iterable[OutlineNode],
    updated_nodes: Union[Iterable[OutlineNode], Mapping[str, OutlineNode]],
) -> Forest:
    """Replace every node whose id matches an updated node.

    The replacement is taken wholesale, including its ``children``. Children
    of nodes that were not replaced are updated recursively.
    """
    if isinstance(updated_nodes, Mapping):
        updates = dict(updated_nodes)
    else:
        updates = {node.id: node for node in updated_nodes}
    if not updates:
        return list(nodes or [])
    return _update_level(nodes, updates)


def _update_level(nodes: Iterable[OutlineNode], updates: Dict[str, OutlineNode]) -> Forest:
    result: Forest = []
    for node in nodes or []:
        replacement = updates.get(node.id)
        if replacement is not None:
            result.append(replacement)
        elif node.children:
            result.append(with_children(node, _update_level(node.children, updates)))
        else:
            result.append(node)
    return result


def recursive_sort(nodes: Iterable[OutlineNode], parent_id: str = "") -> Forest:
    """Return the canonical ordering of *nodes*.

    Selects the nodes whose ``parent_id`` equals *parent_id*, stable-sorts them
    by ``sort_order`` and sorts each selected node's children using that
    node's id as the parent. ``sort_order`` values themselves are never
    changed, so the function is idempotent.
    """
    parent_id = parent_id or ""
    selected = sorted(
        (node for node in nodes or [] if node.parent_id == parent_id),
        key=lambda node: node.sort_order,
    )
    result: Forest = []
    for node in selected:
        if node.children:
            node = with_children(node, recursive_sort(node.children, node.id))
        result.append(node)
    return result
