from __future__ import annotations

"""High-level outline services (editing, search projection).

Services are instantiated directly; they hold no state besides their
collaborators and operate on forests passed in by the caller.
"""

from .outline_editing_service import OperationResult, OutlineEditingService  # noqa: F401
from .outline_filter_service import FilterResult, filter_outline  # noqa: F401

__all__: list[str] = [
    "OperationResult",
    "OutlineEditingService",
    "FilterResult",
    "filter_outline",
]
