from __future__ import annotations

"""Service layer for structural edits on the report outline.

This module provides a UI-agnostic, testable service that encapsulates the
append / rename / delete / move operations offered to the outline's UI
collaborators (menus, dialogs, drag-and-drop).

Scope and guarantees:
- Operates purely in-memory on a forest of OutlineNode, no file I/O nor UI imports.
- Every operation works on a deep copy of the forest; the caller's
  forest is never mutated.
- Invalid operations return OperationResult(success=False, ...) carrying the
  untouched input forest, never raise.

Examples
--------
Basic usage:

    service = OutlineEditingService()
    result = service.rename_node(forest, ["INTRO", "SCOPE"], "Scope and goals")
    if result.success:
        forest = result.forest
    else:
        print(result.message)

"""

from dataclasses import dataclass
import logging
import uuid
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union

from report_outline.core.exceptions import InvalidMoveError, OutlineError, PathResolutionError
from report_outline.core.models import (
    Forest,
    OutlineNode,
    capabilities_for,
    clone_forest,
    drop_target_types,
)
from report_outline.core.moves import detach_node, move_into_parent, reorder_move
from report_outline.core.paths import (
    MoveDestination,
    is_drop_valid,
    parent_path,
    resolve_path,
    valid_move_targets,
)
from report_outline.core.tree import flatten_nodes, recursive_search, recursive_sort


__all__ = ["OperationResult", "OutlineEditingService"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationResult:
    """Result of a structural editing operation.

    Attributes
    ----------
    success
        Whether the operation completed successfully.
    message
        Human-readable summary suitable for logs or UI display.
    details
        Optional structured details for diagnostics or caller logic.
    forest
        The new canonical forest on success; the untouched input forest
        when the operation was a no-op.
    """
    success: bool
    message: str
    details: Optional[Dict[str, Any]] = None
    forest: Optional[Forest] = None


def _normalize_name(name: Optional[str]) -> str:
    return " ".join((name or "").split())


def _next_sort_order(siblings: Iterable[OutlineNode]) -> int:
    orders = [node.sort_order for node in siblings]
    return max(orders) + 1 if orders else 0


class OutlineEditingService:
    """Encapsulates structural edit operations on a report outline.

    Design principles:
    - No UI dependencies, no disk I/O.
    - No exceptions for expected invalid actions; return OperationResult.
    - Each operation clones the forest, applies exactly one algorithm and
      returns a canonically sorted result.

    Parameters
    ----------
    id_factory
        Zero-arg callable producing ids for newly created header nodes.
        Defaults to random UUID4 strings.
    """

    def __init__(self, id_factory: Optional[Callable[[], str]] = None) -> None:
        self._new_id = id_factory or (lambda: str(uuid.uuid4()))

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def append_node(
        self,
        forest: Forest,
        name_or_template: Union[str, OutlineNode],
        to_root: bool = False,
        active_path: Optional[Sequence[str]] = None,
    ) -> OperationResult:
        """Append a header (by name) or a report content template node.

        The node lands at the end of the forest root when *to_root* is true,
        otherwise at the end of the children of the node at *active_path*.
        """
        logger.info("Edit: append_node to_root=%s path=%s", to_root, list(active_path or []))

        def _append(working: Forest) -> OperationResult:
            if isinstance(name_or_template, OutlineNode):
                node = clone_forest([name_or_template])[0]
            else:
                node = OutlineNode(id=self._new_id(), name=_normalize_name(name_or_template))
            if recursive_search(working, node.id) is not None:
                logger.warning("Append: node id %s already present in outline", node.id)

            if to_root:
                node.parent_id = ""
                node.sort_order = _next_sort_order(working)
                working.append(node)
            else:
                parent = self._require_node(working, active_path)
                node.parent_id = parent.id
                node.sort_order = _next_sort_order(parent.children)
                parent.children.append(node)

            logger.info("Edit OK: append_node node=%s parent=%r order=%d", node.id, node.parent_id, node.sort_order)
            return OperationResult(
                True,
                f"Appended '{node.name}'.",
                {"node_id": node.id, "parent_id": node.parent_id, "sort_order": node.sort_order},
                recursive_sort(working),
            )

        return self._execute("append_node", forest, _append)

    def rename_node(self, forest: Forest, active_path: Sequence[str], new_name: str) -> OperationResult:
        """Rename the node at *active_path*; whitespace in *new_name* is collapsed."""
        logger.info("Edit: rename_node path=%s", list(active_path or []))

        def _rename(working: Forest) -> OperationResult:
            node = self._require_node(working, active_path)
            name = _normalize_name(new_name)
            node.name = name
            logger.info("Edit OK: rename_node node=%s", node.id)
            return OperationResult(
                True,
                f"Renamed node to '{name}'.",
                {"node_id": node.id, "new_name": name},
                recursive_sort(working),
            )

        return self._execute("rename_node", forest, _rename)

    def delete_node(self, forest: Forest, active_path: Sequence[str]) -> OperationResult:
        """Delete the node at *active_path* together with its entire subtree.

        Children are discarded, not promoted. The remaining siblings close
        the gap left by the deleted node.
        """
        logger.info("Edit: delete_node path=%s", list(active_path or []))

        def _delete(working: Forest) -> OperationResult:
            node = self._require_node(working, active_path)
            removed = len(flatten_nodes([node]))
            result = recursive_sort(detach_node(working, node))
            logger.info("Edit OK: delete_node node=%s removed=%d", node.id, removed)
            return OperationResult(
                True,
                f"Deleted '{node.name}'.",
                {"node_id": node.id, "removed": removed},
                result,
            )

        return self._execute("delete_node", forest, _delete)

    def move_into_new_parent(
        self,
        forest: Forest,
        active_path: Sequence[str],
        target_path: Sequence[str],
    ) -> OperationResult:
        """Reparent the node at *active_path* as the last child of *target_path*."""
        logger.info(
            "Edit: move_into_new_parent path=%s target=%s",
            list(active_path or []), list(target_path or []),
        )

        def _move(working: Forest) -> OperationResult:
            node = self._require_node(working, active_path)
            target = self._require_node(working, target_path)
            if not is_drop_valid(active_path, target_path):
                raise InvalidMoveError("Cannot move a node into itself or its descendants.", node.id)
            if list(target_path) == parent_path(active_path):
                raise InvalidMoveError(f"Node is already under '{target.name}'.", node.id)
            if not capabilities_for(target).can_contain:
                raise InvalidMoveError(f"'{target.name}' cannot hold child nodes.", node.id)

            result = move_into_parent(working, node, target)
            moved = recursive_search(result, node.id)
            logger.info("Edit OK: move_into_new_parent node=%s parent=%s", node.id, target.id)
            return OperationResult(
                True,
                f"Moved '{node.name}' under '{target.name}'.",
                {"node_id": node.id, "parent_id": target.id, "sort_order": moved.sort_order if moved else None},
                result,
            )

        return self._execute("move_into_new_parent", forest, _move)

    def move_same_level(
        self,
        forest: Forest,
        source_path: Sequence[str],
        destination_path: Sequence[str],
    ) -> OperationResult:
        """Handle a completed drag-and-drop: place the source beside the destination.

        Drops onto the source itself or one of its descendants are expected
        during free-form dragging and are ignored without raising or warning.
        """
        logger.info(
            "Edit: move_same_level source=%s destination=%s",
            list(source_path or []), list(destination_path or []),
        )
        if not is_drop_valid(source_path, destination_path):
            logger.debug("Edit noop: move_same_level invalid drop")
            return OperationResult(False, "Invalid drop target.", {"reason": "invalid_drop"}, forest)

        def _move(working: Forest) -> OperationResult:
            origin = self._require_node(working, source_path)
            target = self._require_node(working, destination_path)
            if not capabilities_for(target).can_contain:
                logger.debug("Edit noop: move_same_level target %s refuses drops", target.id)
                return OperationResult(False, "Invalid drop target.", {"reason": "invalid_drop"}, forest)

            result = reorder_move(working, source_path, destination_path)
            moved = recursive_search(result, origin.id)
            logger.info(
                "Edit OK: move_same_level node=%s parent=%r order=%s",
                origin.id, moved.parent_id if moved else None, moved.sort_order if moved else None,
            )
            return OperationResult(
                True,
                f"Moved '{origin.name}'.",
                {
                    "node_id": origin.id,
                    "parent_id": moved.parent_id if moved else None,
                    "sort_order": moved.sort_order if moved else None,
                },
                result,
            )

        return self._execute("move_same_level", forest, _move)

    def list_move_destinations(
        self,
        forest: Forest,
        active_path: Sequence[str],
        accepted_types: Optional[Iterable[str]] = None,
    ) -> List[MoveDestination]:
        """Return the destinations offered when moving the node at *active_path*."""
        if accepted_types is None:
            accepted_types = drop_target_types()
        return valid_move_targets(list(active_path or []), forest, accepted_types)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _execute(
        self,
        operation: str,
        forest: Forest,
        mutate: Callable[[Forest], OperationResult],
    ) -> OperationResult:
        """Run *mutate* on a clone of *forest*, turning failures into results."""
        working = clone_forest(forest)
        try:
            return mutate(working)
        except OutlineError as exc:
            logger.warning("Edit FAIL: %s %s", operation, exc)
            return OperationResult(False, str(exc), {"error": type(exc).__name__}, forest)
        except Exception as exc:
            logger.error("Edit FAIL: %s error=%s", operation, exc, exc_info=True)
            return OperationResult(False, f"{operation} failed.", {"error": str(exc)}, forest)

    @staticmethod
    def _require_node(forest: Forest, path: Optional[Sequence[str]]) -> OutlineNode:
        node = resolve_path(list(path or []), forest)
        if node is None:
            raise PathResolutionError(list(path or []))
        return node
