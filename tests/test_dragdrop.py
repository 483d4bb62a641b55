"""Tests for drag-and-drop status transitions."""

from datetime import date

import pytest

from tui_hrdash.dragdrop import RequestStatusChange, StatusTransitionHandler, resolve_lane
from tui_hrdash.models import Status


class RecordingMutator:
    def __init__(self, result=True):
        self.calls = []
        self.result = result

    def __call__(self, item_id, changes, notice=None):
        self.calls.append((item_id, dict(changes), notice))
        return object() if self.result else None


class TestResolveLane:
    @pytest.mark.parametrize("key", ["pending", "in-progress", "on-hold", "completed"])
    def test_legal_keys(self, key):
        assert resolve_lane(key) == Status(key)

    @pytest.mark.parametrize("key", [None, "", "archived", "Completed"])
    def test_unresolvable(self, key):
        assert resolve_lane(key) is None

    def test_status_passthrough(self):
        assert resolve_lane(Status.ON_HOLD) is Status.ON_HOLD


class TestHandler:
    def test_status_only_change(self):
        mutate = RecordingMutator()
        handler = StatusTransitionHandler(mutate)
        assert handler.handle(RequestStatusChange("t1", "completed"))
        assert mutate.calls == [("t1", {"status": Status.COMPLETED}, "Task moved to Completed")]

    def test_drop_outside_lane_is_noop(self):
        mutate = RecordingMutator()
        handler = StatusTransitionHandler(mutate)
        assert not handler.handle(RequestStatusChange("t1", None))
        assert not handler.handle(RequestStatusChange("t1", "trash"))
        assert mutate.calls == []

    def test_refused_mutation(self):
        handler = StatusTransitionHandler(RecordingMutator(result=False))
        assert not handler.handle(RequestStatusChange("t1", "pending"))


def test_completed_drop_keeps_progress_and_ignores_dependencies(store):
    dep = store.create({"title": "Background check", "id": "dep"})
    item = store.create({
        "title": "Offer letter",
        "id": "t",
        "progress": 40,
        "dependencies": [dep.id],
        "due_date": date(2025, 11, 20),
    })

    def mutate(item_id, changes, notice=None):
        return store.update(item_id, changes)

    handler = StatusTransitionHandler(mutate)
    assert handler.handle(RequestStatusChange(item.id, "completed"))
    moved = store.get("t")
    assert moved.status == Status.COMPLETED
    assert moved.progress == 40
    assert store.get("dep").status == Status.PENDING
