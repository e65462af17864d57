from __future__ import annotations

"""Outline editing exception classes.

These exceptions describe the expected failure modes of outline edits
(stale paths, moves into a node's own subtree). They are raised by internal
helpers and converted into unsuccessful ``OperationResult`` objects by the
editing service, so they never escape to UI collaborators.
"""

from typing import Optional, Sequence


class OutlineError(Exception):
    """Base exception for all outline-related errors."""

    def __init__(self, message: str, node_id: Optional[str] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.node_id = node_id
        self.cause = cause

    def __str__(self) -> str:
        if self.node_id:
            return f"[Node: {self.node_id}] {super().__str__()}"
        return super().__str__()


class PathResolutionError(OutlineError):
    """Raised when a path of node ids does not resolve to a live node.

    Typically a stale path issued after the node (or one of its ancestors)
    was deleted.
    """

    def __init__(self, path: Sequence[str], cause: Optional[Exception] = None) -> None:
        self.path = list(path or [])
        node_id = self.path[-1] if self.path else None
        shown = ",".join(self.path) if self.path else "<empty>"
        super().__init__(f"Path does not resolve: {shown}", node_id, cause)


class InvalidMoveError(OutlineError):
    """Raised when a move would create a cycle or has no effect."""
    pass


__all__ = ["OutlineError", "PathResolutionError", "InvalidMoveError"]
