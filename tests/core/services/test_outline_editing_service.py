import logging

import pytest

from report_outline.core.models import OutlineNode, build_forest, clone_forest
from report_outline.core.paths import MoveDestination
from report_outline.core.services.outline_editing_service import (
    OperationResult,
    OutlineEditingService,
)
from report_outline.core.tree import index_nodes, recursive_search


def assert_result_shape(res, success=None, message_substr=None):
    assert isinstance(res, OperationResult)
    assert isinstance(res.success, bool)
    assert isinstance(res.message, str)
    assert isinstance(res.forest, list)
    if success is not None:
        assert res.success is success
    if message_substr:
        assert message_substr.lower() in res.message.lower()
    # details may or may not exist; only check type if present
    if getattr(res, "details", None) is not None:
        assert isinstance(res.details, dict)


def _ids(nodes):
    return [n.id for n in nodes]


@pytest.fixture
def ab_forest():
    return build_forest([{"id": "A", "name": "Intro"}, {"id": "B", "name": "Body"}])


# ---------------------------------------------------------------------------
# append
# ---------------------------------------------------------------------------

def test_append_template_to_root_scenario(service, ab_forest, assert_canonical):
    template = OutlineNode(id="NEW", name="Signal Parameters", sub_type="SIGNAL_PARAMETERS")
    res = service.append_node(ab_forest, template, to_root=True)
    assert_result_shape(res, success=True)
    assert _ids(res.forest) == ["A", "B", "NEW"]
    assert res.forest[2].sort_order == 2
    assert res.details == {"node_id": "NEW", "parent_id": "", "sort_order": 2}
    assert_canonical(res.forest)
    # template itself is not adopted by the forest
    assert template.sort_order == 0
    assert res.forest[2] is not template


def test_append_header_under_active_node(service, abc_forest, assert_canonical):
    res = service.append_node(abc_forest, "  New   header ", active_path=["B"])
    assert_result_shape(res, success=True)
    b = recursive_search(res.forest, "B")
    assert _ids(b.children) == ["B1", "B2", "N1"]
    new = b.children[2]
    assert (new.name, new.parent_id, new.sort_order, new.type) == ("New header", "B", 2, "OUTLINE_ITEM")
    assert_canonical(res.forest)
    # caller's forest untouched
    assert _ids(recursive_search(abc_forest, "B").children) == ["B1", "B2"]


def test_append_into_childless_node_starts_at_zero(service, abc_forest):
    res = service.append_node(abc_forest, "Child", active_path=["A"])
    assert_result_shape(res, success=True)
    assert recursive_search(res.forest, "N1").sort_order == 0


def test_append_to_empty_forest(service):
    res = service.append_node([], "First", to_root=True)
    assert_result_shape(res, success=True)
    assert [(n.id, n.sort_order) for n in res.forest] == [("N1", 0)]


def test_append_default_ids_are_uuid_strings(abc_forest):
    res = OutlineEditingService().append_node(abc_forest, "Header", to_root=True)
    new_id = res.details["node_id"]
    assert isinstance(new_id, str) and len(new_id) == 36


def test_append_with_stale_path_is_noop(service, abc_forest):
    res = service.append_node(abc_forest, "Orphan", active_path=["B", "gone"])
    assert_result_shape(res, success=False, message_substr="does not resolve")
    assert res.forest is abc_forest


def test_append_existing_id_warns_but_appends(service, ab_forest, caplog):
    dup = OutlineNode(id="A", name="Duplicate")
    with caplog.at_level(logging.WARNING):
        res = service.append_node(ab_forest, dup, to_root=True)
    assert_result_shape(res, success=True)
    assert _ids(res.forest) == ["A", "B", "A"]
    assert any("already present" in r.getMessage() for r in caplog.records)


# ---------------------------------------------------------------------------
# rename
# ---------------------------------------------------------------------------

def test_rename_collapses_whitespace(service, abc_forest):
    res = service.rename_node(abc_forest, ["B", "B2"], "  Costs \t and  budget ")
    assert_result_shape(res, success=True)
    assert recursive_search(res.forest, "B2").name == "Costs and budget"
    assert recursive_search(abc_forest, "B2").name == "Budget"


def test_rename_stale_path_is_noop(service, abc_forest):
    res = service.rename_node(abc_forest, ["B2"], "Nope")
    assert_result_shape(res, success=False)
    assert res.forest is abc_forest
    assert res.details == {"error": "PathResolutionError"}


# ---------------------------------------------------------------------------
# delete
# ---------------------------------------------------------------------------

def test_delete_removes_subtree_scenario(service, abc_forest, assert_canonical):
    res = service.delete_node(abc_forest, ["B"])
    assert_result_shape(res, success=True)
    assert _ids(res.forest) == ["A", "C"]
    assert "B1" not in index_nodes(res.forest)
    assert "B2" not in index_nodes(res.forest)
    assert res.details["removed"] == 3
    assert_canonical(res.forest)


def test_delete_leaf_keeps_siblings_dense(service, nested_forest, assert_canonical):
    res = service.delete_node(nested_forest, ["B", "B1"])
    assert_result_shape(res, success=True)
    assert [(n.id, n.sort_order) for n in recursive_search(res.forest, "B").children] == [
        ("B2", 0), ("B3", 1),
    ]
    assert_canonical(res.forest)


def test_delete_stale_path_is_noop(service, abc_forest):
    res = service.delete_node(abc_forest, ["X"])
    assert_result_shape(res, success=False)
    assert res.forest is abc_forest


# ---------------------------------------------------------------------------
# move_into_new_parent
# ---------------------------------------------------------------------------

def test_move_into_new_parent_appends_last(service, nested_forest, assert_canonical):
    res = service.move_into_new_parent(nested_forest, ["C"], ["B"])
    assert_result_shape(res, success=True)
    assert _ids(res.forest) == ["A", "B"]
    assert _ids(recursive_search(res.forest, "B").children) == ["B1", "B2", "B3", "C"]
    assert res.details["parent_id"] == "B"
    assert res.details["sort_order"] == 3
    assert_canonical(res.forest)


@pytest.mark.parametrize(
    "active, target, message",
    [
        (["A"], ["A"], "itself"),
        (["A"], ["A", "A1", "A1a"], "itself"),
        (["A", "A1"], ["A"], "already under"),
        (["B", "B3"], ["B"], "already under"),
        (["A", "A1"], ["missing"], "does not resolve"),
    ],
)
def test_move_into_new_parent_noops(service, nested_forest, active, target, message):
    snapshot = clone_forest(nested_forest)
    res = service.move_into_new_parent(nested_forest, active, target)
    assert_result_shape(res, success=False, message_substr=message)
    assert res.forest is nested_forest
    assert nested_forest == snapshot


def test_move_into_new_parent_rejects_non_container(service):
    forest = build_forest([
        {"id": "A", "name": "a"},
        {"id": "L", "name": "leaf", "type": "LEAF"},
    ])
    res = service.move_into_new_parent(forest, ["A"], ["L"])
    assert_result_shape(res, success=False, message_substr="cannot hold")


# ---------------------------------------------------------------------------
# move_same_level
# ---------------------------------------------------------------------------

def test_move_same_level_reorders_siblings(service, abc_forest, assert_canonical):
    res = service.move_same_level(abc_forest, ["A"], ["C"])
    assert_result_shape(res, success=True)
    assert _ids(res.forest) == ["B", "C", "A"]
    assert res.details == {"node_id": "A", "parent_id": "", "sort_order": 2}
    assert_canonical(res.forest)


def test_move_same_level_cross_parent(service, nested_forest, assert_canonical):
    res = service.move_same_level(nested_forest, ["C"], ["A", "A2"])
    assert_result_shape(res, success=True)
    assert _ids(recursive_search(res.forest, "A").children) == ["A1", "C", "A2"]
    assert_canonical(res.forest)


@pytest.mark.parametrize(
    "source, destination",
    [
        (["A"], ["A"]),
        (["A"], ["A", "A1"]),
        (["A", "A1"], ["A", "A1", "A1a"]),
        ([], ["B"]),
    ],
)
def test_move_same_level_invalid_drop_is_silent(service, nested_forest, caplog, source, destination):
    with caplog.at_level(logging.DEBUG, logger="report_outline.core.services.outline_editing_service"):
        res = service.move_same_level(nested_forest, source, destination)
    assert_result_shape(res, success=False)
    assert res.details == {"reason": "invalid_drop"}
    assert res.forest is nested_forest
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


def test_move_same_level_stale_destination(service, nested_forest):
    res = service.move_same_level(nested_forest, ["C"], ["B", "gone"])
    assert_result_shape(res, success=False, message_substr="does not resolve")
    assert res.forest is nested_forest


# ---------------------------------------------------------------------------
# list_move_destinations and failure handling
# ---------------------------------------------------------------------------

def test_list_move_destinations_defaults_to_drop_targets(service, nested_forest):
    destinations = service.list_move_destinations(nested_forest, ["B", "B1"])
    assert all(isinstance(d, MoveDestination) for d in destinations)
    values = [d.value for d in destinations]
    assert "B" not in values
    assert "B,B1" not in values
    assert "B,B2" in values


def test_list_move_destinations_with_no_accepted_types(service, nested_forest):
    assert service.list_move_destinations(nested_forest, ["C"], accepted_types=[]) == []


def test_unexpected_error_is_reported_not_raised(service, abc_forest, monkeypatch, caplog):
    import report_outline.core.services.outline_editing_service as mod

    def boom(*args, **kwargs):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(mod, "detach_node", boom)
    with caplog.at_level(logging.ERROR):
        res = service.delete_node(abc_forest, ["A"])
    assert_result_shape(res, success=False)
    assert res.details == {"error": "disk on fire"}
    assert res.forest is abc_forest
    assert any(r.exc_info for r in caplog.records if r.levelno == logging.ERROR)
