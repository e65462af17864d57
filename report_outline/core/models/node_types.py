"""Node type enumerations and the capability table.

Outline nodes carry a ``type`` (their role in the tree) and an optional
``sub_type`` (the report content they are bound to). Behaviour that depends
on those tags (which nodes accept children, which icon is shown, which
report generator a node is bound to) is resolved once through
:data:`NODE_CAPABILITIES` instead of being re-dispatched ad hoc.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from report_outline.core.models import OutlineNode  # noqa: F401


class NodeType(str, Enum):
    """Role of a node in the outline."""

    OUTLINE_ITEM = "OUTLINE_ITEM"


class NodeSubType(str, Enum):
    """Kind of report content a node is bound to."""

    BACKGROUND = "BACKGROUND"
    SIGNAL_PARAMETERS = "SIGNAL_PARAMETERS"
    ANALYSIS_DETAILS = "ANALYSIS_DETAILS"


@dataclass(frozen=True)
class NodeCapabilities:
    """What a node of a given kind can do.

    Attributes
    ----------
    can_contain
        Whether nodes may be dropped or moved into this node.
    icon_key
        Key of the icon the renderer shows for this kind.
    report_binding
        Identifier of the report generator bound to the node, if any.
    """

    can_contain: bool
    icon_key: str
    report_binding: Optional[str] = None


NODE_CAPABILITIES: Dict[str, NodeCapabilities] = {
    NodeType.OUTLINE_ITEM.value: NodeCapabilities(True, "notes"),
    NodeSubType.BACKGROUND.value: NodeCapabilities(
        True, "summarize", NodeSubType.BACKGROUND.value
    ),
    NodeSubType.SIGNAL_PARAMETERS.value: NodeCapabilities(
        True, "cell_tower", NodeSubType.SIGNAL_PARAMETERS.value
    ),
    NodeSubType.ANALYSIS_DETAILS.value: NodeCapabilities(
        True, "query_stats", NodeSubType.ANALYSIS_DETAILS.value
    ),
}

# Used for kinds missing from the table (e.g. types coming from user config)
DEFAULT_CAPABILITIES = NodeCapabilities(can_contain=False, icon_key="")


def capabilities_for(node: "OutlineNode") -> NodeCapabilities:
    """Return the capabilities of *node*, resolving ``sub_type`` before ``type``."""
    kind = getattr(node, "sub_type", None) or getattr(node, "type", None)
    if kind in NODE_CAPABILITIES:
        return NODE_CAPABILITIES[kind]
    return NODE_CAPABILITIES.get(getattr(node, "type", None), DEFAULT_CAPABILITIES)


def drop_target_types() -> List[str]:
    """Return the node ``type`` values that can receive moved or dropped nodes."""
    return [t.value for t in NodeType if NODE_CAPABILITIES[t.value].can_contain]


__all__ = [
    "NodeType",
    "NodeSubType",
    "NodeCapabilities",
    "NODE_CAPABILITIES",
    "DEFAULT_CAPABILITIES",
    "capabilities_for",
    "drop_target_types",
]
