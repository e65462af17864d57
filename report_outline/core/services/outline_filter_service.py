from __future__ import annotations

"""Search projection over the report outline.

A query narrows the outline down to matching nodes and the branches that
lead to them, and computes which branches should be expanded so that every
match is visible. The canonical forest is never mutated; callers keep it and
render the projection instead.
"""

from dataclasses import dataclass, field
import logging
from typing import FrozenSet, Iterable, List, Optional, Set, Tuple

from report_outline.core.models import Forest, OutlineNode
from report_outline.core.tree import with_children

__all__ = ["FilterResult", "filter_outline", "matched_ids", "node_matches"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterResult:
    """Projected forest and the expansion state that reveals its matches."""
    forest: Forest
    expanded_ids: FrozenSet[str] = field(default_factory=frozenset)
    query: str = ""

    @property
    def is_active(self) -> bool:
        return bool(self.query.strip())


def node_matches(node: OutlineNode, query: str) -> bool:
    """Case-insensitive substring match on ``name`` or ``display_name``."""
    needle = query.lower()
    if needle in (node.name or "").lower():
        return True
    return bool(node.display_name) and needle in node.display_name.lower()


def _project(nodes: Iterable[OutlineNode], query: str, expanded: Set[str]) -> List[OutlineNode]:
    kept: List[OutlineNode] = []
    for node in nodes:
        if node_matches(node, query):
            # Matches keep their full subtree; expand when something below also matches
            if node.has_children() and _has_match_below(node.children, query):
                expanded.add(node.id)
            kept.append(node)
            continue
        children = _project(node.children, query, expanded)
        if children:
            expanded.add(node.id)
            kept.append(with_children(node, children))
    return kept


def _has_match_below(nodes: Iterable[OutlineNode], query: str) -> bool:
    stack = list(nodes)
    while stack:
        node = stack.pop()
        if node_matches(node, query):
            return True
        stack.extend(node.children)
    return False


def filter_outline(
    forest: Forest,
    query: Optional[str],
    expanded: Optional[Iterable[str]] = None,
) -> FilterResult:
    """Project *forest* onto the nodes matching *query*.

    Parameters
    ----------
    forest
        Canonical forest, left untouched.
    query
        Search text. Empty or whitespace-only text disables filtering.
    expanded
        Current expansion state, returned as-is when filtering is disabled.

    Returns
    -------
    FilterResult
        The projected forest and the ids of the kept nodes that have at
        least one kept descendant. The expansion set replaces the caller's
        expansion state wholesale.
    """
    text = query or ""
    if not text.strip():
        return FilterResult(list(forest), frozenset(expanded or ()), text)

    expanded_ids: Set[str] = set()
    projected = _project(forest, text, expanded_ids)
    logger.debug("Filter '%s': %d root(s) kept, %d expanded", text, len(projected), len(expanded_ids))
    return FilterResult(projected, frozenset(expanded_ids), text)


def matched_ids(forest: Forest, query: str) -> Tuple[str, ...]:
    """Return the ids of every node matching *query*, in pre-order."""
    if not (query or "").strip():
        return ()
    out: List[str] = []
    stack = list(reversed(forest))
    while stack:
        node = stack.pop()
        if node_matches(node, query):
            out.append(node.id)
        stack.extend(reversed(node.children))
    return tuple(out)
