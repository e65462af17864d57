"""Default outline and the fixed catalog of report content nodes.

Both are declared in packaged YAML files (see :mod:`report_outline.config`)
so that deployments can adjust them without code changes. Every call returns
fresh node objects; callers are free to hand them to the editing service.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Set

from report_outline.config import ConfigManager
from report_outline.core.models import Forest, OutlineNode, build_forest
from report_outline.core.tree import iter_nodes

__all__ = [
    "load_default_outline",
    "load_report_content",
    "available_report_content",
    "all_node_ids",
]

logger = logging.getLogger(__name__)


def _section_nodes(section: dict, name: str) -> list:
    nodes = (section or {}).get("nodes") or []
    if not isinstance(nodes, list):
        logger.error("Config section '%s' must hold a 'nodes' list, got %s", name, type(nodes).__name__)
        return []
    return nodes


def load_default_outline() -> Forest:
    """Return a fresh canonical copy of the default outline."""
    entries = _section_nodes(ConfigManager().get_default_outline(), "default_outline")
    return build_forest(entries)


def load_report_content() -> List[OutlineNode]:
    """Return the report content templates, each ready to be appended at root."""
    entries = _section_nodes(ConfigManager().get_report_content(), "report_content")
    return build_forest(entries)


def all_node_ids(forest: Iterable[OutlineNode]) -> Set[str]:
    """Return the ids of every node in *forest*."""
    return {node.id for node in iter_nodes(forest)}


def available_report_content(
    forest: Forest,
    templates: Optional[Iterable[OutlineNode]] = None,
) -> List[OutlineNode]:
    """Return the report content templates not already present in *forest*.

    Report nodes are bound to fixed ids, so a template whose id is already
    in the outline is excluded rather than offered twice.
    """
    present = all_node_ids(forest)
    candidates = list(templates) if templates is not None else load_report_content()
    return [node for node in candidates if node.id not in present]
