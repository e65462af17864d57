"""Test configuration and shared fixtures for the report outline tests.

Forest fixtures are built through ``build_forest`` so they are canonical
(dense sort orders, parent ids matching the nesting) before any test runs.
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from report_outline.config import ConfigManager
from report_outline.core.models import OutlineNode, build_forest
from report_outline.core.tree import iter_nodes

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@pytest.fixture
def abc_forest():
    """Three root nodes; B holds two children.

    A "Intro" (0), B "Body" (1) [B1 "Background" (0), B2 "Budget" (1)], C "Conclusion" (2)
    """
    return build_forest([
        {"id": "A", "name": "Intro"},
        {"id": "B", "name": "Body", "children": [
            {"id": "B1", "name": "Background"},
            {"id": "B2", "name": "Budget"},
        ]},
        {"id": "C", "name": "Conclusion"},
    ])


@pytest.fixture
def nested_forest():
    """Deeper forest used for cross-parent and subtree checks.

    A [A1 [A1a], A2], B [B1, B2, B3], C
    """
    return build_forest([
        {"id": "A", "name": "Alpha", "children": [
            {"id": "A1", "name": "Alpha One", "children": [
                {"id": "A1a", "name": "Alpha One A"},
            ]},
            {"id": "A2", "name": "Alpha Two"},
        ]},
        {"id": "B", "name": "Beta", "children": [
            {"id": "B1", "name": "Beta One"},
            {"id": "B2", "name": "Beta Two"},
            {"id": "B3", "name": "Beta Three"},
        ]},
        {"id": "C", "name": "Gamma"},
    ])


def _assert_canonical(forest: List[OutlineNode]) -> None:
    seen: Dict[str, int] = {}
    for node in iter_nodes(forest):
        seen[node.id] = seen.get(node.id, 0) + 1
    dupes = [node_id for node_id, count in seen.items() if count > 1]
    assert not dupes, f"duplicate ids: {dupes}"

    def check_level(nodes: List[OutlineNode], parent_id: str, ancestors: frozenset) -> None:
        assert [n.sort_order for n in nodes] == list(range(len(nodes))), (
            f"sort orders under {parent_id!r} not dense/ascending: "
            f"{[(n.id, n.sort_order) for n in nodes]}"
        )
        for node in nodes:
            assert node.parent_id == parent_id, f"{node.id} parent_id={node.parent_id!r}, expected {parent_id!r}"
            assert node.id not in ancestors, f"cycle through {node.id}"
            check_level(node.children, node.id, ancestors | {node.id})

    check_level(forest, "", frozenset())


@pytest.fixture
def assert_canonical():
    """Assert unique ids, matching parent ids, dense sibling orders and no cycles."""
    return _assert_canonical


@pytest.fixture
def order_of():
    """Return ``[(id, sort_order), ...]`` for a sibling list."""
    def _order_of(nodes):
        return [(n.id, n.sort_order) for n in nodes]
    return _order_of


@pytest.fixture(autouse=True)
def reset_config_singleton(tmp_path, monkeypatch):
    """Isolate every test from user overrides and the cached ConfigManager."""
    monkeypatch.setenv("REPORT_OUTLINE_CONFIG_DIR", str(tmp_path / "user_config"))
    ConfigManager._instance = None
    yield
    ConfigManager._instance = None
