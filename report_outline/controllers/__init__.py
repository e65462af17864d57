"""Controllers mediating between outline UI widgets and the core services."""

from .outline_controller import OutlineController

__all__: list[str] = [
    "OutlineController",
]
