import json
from datetime import datetime

from compass.models import Goal, Task, TaskPriority
from compass.storage import JsonStorage, MemoryStorage
from compass.workspace import Workspace


def test_export_document_shape():
    ws = Workspace(MemoryStorage())
    text = ws.data.export_data(now=datetime(2025, 1, 29, 12, 0, 0))
    doc = json.loads(text)

    assert set(doc) == {"goals", "tasks", "exportedAt", "version"}
    assert doc["version"] == "1.0.0"
    assert doc["exportedAt"] == "2025-01-29T12:00:00"
    assert doc["goals"][1]["parentId"] == "1"
    assert doc["tasks"][0]["visionConnection"]["impactScore"] == 7.5
    assert "\n  " in text  # pretty printed


def test_export_then_import_leaves_state_unchanged():
    ws = Workspace(MemoryStorage())
    ws.tasks.add_task({
        "title": "Weekly review",
        "goalId": "2",
        "dueDate": "2025-01-05",
        "recurrence": {"type": "weekly", "daysOfWeek": [0], "weeklyTimes": {"0": "20:00"}},
    })
    goals_before, tasks_before = ws.goals.goals, ws.tasks.tasks

    assert ws.data.import_data(ws.data.export_data()) is True
    assert ws.goals.goals == goals_before
    assert ws.tasks.tasks == tasks_before


def test_import_invalid_json_keeps_state():
    ws = Workspace(MemoryStorage())
    goals_before, tasks_before = ws.goals.goals, ws.tasks.tasks

    assert ws.data.import_data("not json") is False
    assert ws.data.import_data("[1, 2, 3]") is False
    assert ws.goals.goals == goals_before
    assert ws.tasks.tasks == tasks_before


def test_import_replaces_collections_wholesale(tmp_path):
    ws = Workspace(JsonStorage(tmp_path))
    payload = {
        "goals": [{"id": "g9", "title": "Only goal", "level": 1}],
        "tasks": [],
        "version": "1.0.0",
    }
    assert ws.data.import_data(json.dumps(payload)) is True
    assert [g.id for g in ws.goals.goals] == ["g9"]
    assert ws.tasks.tasks == []

    reloaded = Workspace(JsonStorage(tmp_path))
    assert [g.id for g in reloaded.goals.goals] == ["g9"]
    assert reloaded.tasks.tasks == []


def test_import_without_arrays_only_touches_present_collections():
    ws = Workspace(MemoryStorage(), seed_defaults=False)
    ws.goals.replace_all([Goal(id="keep", title="k")])
    ws.tasks.replace_all([Task(id="t", title="t")])

    assert ws.data.import_data(json.dumps({"tasks": [{"id": "n", "title": "new", "priority": "high"}]})) is True
    assert [g.id for g in ws.goals.goals] == ["keep"]
    assert [t.id for t in ws.tasks.tasks] == ["n"]
    assert ws.tasks.tasks[0].priority == TaskPriority.HIGH

    assert ws.data.import_data(json.dumps({"goals": "nope"})) is True
    assert [g.id for g in ws.goals.goals] == ["keep"]


def test_import_accepts_legacy_recurring_pattern():
    ws = Workspace(MemoryStorage(), seed_defaults=False)
    payload = {"goals": [], "tasks": [{
        "id": "t1",
        "title": "Run",
        "dueDate": "2025-01-01",
        "recurringPattern": {"type": "weekly", "frequency": 2, "daysOfWeek": [1]},
    }]}
    assert ws.data.import_data(json.dumps(payload)) is True

    rule = ws.tasks.get_task("t1").recurrence
    assert rule.interval == 2
    assert rule.days_of_week == [1]
    assert "recurringPattern" not in ws.data.export_data()


def test_clear_all_data_restores_defaults_and_removes_keys(tmp_path):
    storage = JsonStorage(tmp_path)
    ws = Workspace(storage)
    ws.goals.add_goal({"title": "Extra"})
    ws.tasks.add_task({"title": "Extra"})
    ws.profile.update_user({"name": "Aki"})

    ws.data.clear_all_data()

    assert [g.id for g in ws.goals.goals] == ["1", "2", "3"]
    assert len(ws.tasks.tasks) == 5
    assert ws.profile.get_user() is None
    assert storage.get("compass_goals") is None
    assert storage.get("compass_tasks") is None
    assert storage.get("compass_user") is None
