from typing import Iterable, List, Optional, Sequence, Set, Union

from report_outline.core.catalog import (
    all_node_ids,
    available_report_content,
    load_default_outline,
)
from report_outline.core.models import Forest, OutlineNode, capabilities_for
from report_outline.core.paths import MoveDestination, parse_path_value, path_to, resolve_path
from report_outline.core.services.outline_editing_service import (
    OperationResult,
    OutlineEditingService,
)
from report_outline.core.services.outline_filter_service import FilterResult, filter_outline


class OutlineController:
    """Controller coordinating outline UI events with the editing services.

    The controller owns the canonical forest and the transient UI state around
    it (selection, expansion, search). Every ``handle_*`` method runs one
    synchronous cycle: delegate to the service, publish the new forest on
    success, refresh the filtered view, then clear the selection the way a
    closed context menu does.

    Parameters
    ----------
    editing_service : OutlineEditingService, optional
        Service performing the structural edits. A default instance is
        created when omitted.
    forest : list of OutlineNode, optional
        Initial canonical forest. The default outline is loaded when omitted.

    Notes
    -----
    - The controller does not raise for routine validation failures; it
      returns ``OperationResult`` objects with ``success=False``.
    - No UI toolkit code and no I/O besides the catalog lookups.
    """

    def __init__(
        self,
        editing_service: Optional[OutlineEditingService] = None,
        forest: Optional[Forest] = None,
    ) -> None:
        self.editing_service: OutlineEditingService = editing_service or OutlineEditingService()
        self.forest: Forest = list(forest) if forest is not None else load_default_outline()

        # Transient UI-related state
        self.active_path: List[str] = []
        self.expanded_ids: Set[str] = all_node_ids(self.forest)
        self.search_text: str = ""
        self.view: FilterResult = FilterResult(self.forest, frozenset(self.expanded_ids), "")

    # ---------------------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------------------

    def _commit(
        self,
        result: OperationResult,
        expand_id: Optional[str] = None,
        keep_selection: bool = False,
    ) -> OperationResult:
        """Publish the forest of a successful result and refresh the view."""
        if result.success and result.forest is not None:
            self.forest = result.forest
            self._refresh_view()
            if expand_id:
                self.expanded_ids.add(expand_id)
        if not keep_selection:
            self.clear_selection()
        elif result.success and self.active_path:
            # Moves shift paths; follow the selected node to its new location
            self.active_path = path_to(self.active_path[-1], self.forest)
        return result

    def _refresh_view(self) -> None:
        if self.search_text.strip():
            self.view = filter_outline(self.forest, self.search_text, self.expanded_ids)
            self.expanded_ids = set(self.view.expanded_ids)
        else:
            self.view = FilterResult(self.forest, frozenset(self.expanded_ids), "")

    @staticmethod
    def _no_selection() -> OperationResult:
        return OperationResult(success=False, message="No selection")

    @staticmethod
    def _is_blank(name: Optional[str]) -> bool:
        return not (name or "").strip()

    # ---------------------------------------------------------------------------------
    # Selection and expansion
    # ---------------------------------------------------------------------------------

    def select(self, path: Sequence[str]) -> bool:
        """Set the active node path; returns False when *path* does not resolve."""
        path = list(path or [])
        if resolve_path(path, self.forest) is None:
            return False
        self.active_path = path
        return True

    def clear_selection(self) -> None:
        self.active_path = []

    def has_selection(self) -> bool:
        return bool(self.active_path)

    def toggle_expanded(self, node_id: str) -> bool:
        """Flip the expansion state of *node_id*; returns the new state."""
        if node_id in self.expanded_ids:
            self.expanded_ids.discard(node_id)
            return False
        self.expanded_ids.add(node_id)
        return True

    def is_expanded(self, node_id: str) -> bool:
        return node_id in self.expanded_ids

    # ---------------------------------------------------------------------------------
    # Edit handlers
    # ---------------------------------------------------------------------------------

    def handle_append_header(self, name: str, to_root: bool = False) -> OperationResult:
        """Append a new header, at root or under the active node."""
        if self._is_blank(name):
            return OperationResult(success=False, message="Name cannot be empty")
        if not to_root and not self.has_selection():
            return self._no_selection()
        result = self.editing_service.append_node(
            self.forest, name, to_root=to_root, active_path=self.active_path
        )
        node_id = (result.details or {}).get("node_id")
        return self._commit(result, expand_id=node_id)

    def handle_append_report_content(self, template_id: str, to_root: bool = False) -> OperationResult:
        """Append the report content node *template_id* if it is still available."""
        if not to_root and not self.has_selection():
            return self._no_selection()
        template = next(
            (node for node in available_report_content(self.forest) if node.id == template_id),
            None,
        )
        if template is None:
            return OperationResult(
                success=False,
                message=f"Report content '{template_id}' is not available",
                details={"template_id": template_id},
            )
        result = self.editing_service.append_node(
            self.forest, template, to_root=to_root, active_path=self.active_path
        )
        return self._commit(result, expand_id=template.id)

    def handle_rename(self, new_name: str) -> OperationResult:
        if not self.has_selection():
            return self._no_selection()
        if self._is_blank(new_name):
            return OperationResult(success=False, message="Name cannot be empty")
        return self._commit(self.editing_service.rename_node(self.forest, self.active_path, new_name))

    def handle_delete(self) -> OperationResult:
        if not self.has_selection():
            return self._no_selection()
        return self._commit(self.editing_service.delete_node(self.forest, self.active_path))

    def handle_move(self, target: Union[str, Sequence[str]]) -> OperationResult:
        """Move the active node under *target*.

        *target* is either a path list or the comma-joined value of a
        :class:`MoveDestination`.
        """
        if not self.has_selection():
            return self._no_selection()
        target_path = parse_path_value(target) if isinstance(target, str) else list(target or [])
        result = self.editing_service.move_into_new_parent(self.forest, self.active_path, target_path)
        return self._commit(result, expand_id=target_path[-1] if target_path else None)

    def handle_drop(self, source_path: Sequence[str], destination_path: Sequence[str]) -> OperationResult:
        """Handle a completed drag-and-drop of *source_path* onto *destination_path*."""
        destination_path = list(destination_path or [])
        result = self.editing_service.move_same_level(self.forest, list(source_path or []), destination_path)
        return self._commit(
            result,
            expand_id=destination_path[-1] if destination_path else None,
            keep_selection=True,
        )

    def handle_search(self, text: str) -> FilterResult:
        """Recompute the filtered view for *text* and adopt its expansion state."""
        self.search_text = text or ""
        self.view = filter_outline(self.forest, self.search_text, self.expanded_ids)
        self.expanded_ids = set(self.view.expanded_ids)
        return self.view

    def reset_outline(self) -> OperationResult:
        """Replace the outline with the default one and expand everything."""
        self.forest = load_default_outline()
        self.expanded_ids = all_node_ids(self.forest)
        self.search_text = ""
        self._refresh_view()
        self.clear_selection()
        return OperationResult(
            success=True,
            message="Outline reset to default.",
            details={"roots": len(self.forest)},
            forest=self.forest,
        )

    # ---------------------------------------------------------------------------------
    # Queries
    # ---------------------------------------------------------------------------------

    def get_move_destinations(self, accepted_types: Optional[Iterable[str]] = None) -> List[MoveDestination]:
        if not self.has_selection():
            return []
        return self.editing_service.list_move_destinations(self.forest, self.active_path, accepted_types)

    def get_available_report_content(self) -> List[OutlineNode]:
        return available_report_content(self.forest)

    def visible_forest(self) -> Forest:
        """Forest currently rendered: the filtered projection while searching."""
        return self.view.forest

    def icon_key_for(self, node: OutlineNode) -> str:
        return capabilities_for(node).icon_key
