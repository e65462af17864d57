"""Top-level package of the report outline editor.

Front-ends should only depend on the public API exposed here rather than
importing internal modules directly.
"""

from .core.models import OutlineNode  # re-export for convenience
from .controllers import OutlineController

__all__: list[str] = [
    "OutlineNode",
    "OutlineController",
]
