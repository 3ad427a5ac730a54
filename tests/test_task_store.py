from datetime import date, timedelta

import pytest

import compass.task_store as task_store_module
from compass.models import Goal, GoalType, Task, TaskPriority, TaskStatus, VisionConnection
from compass.schema import TaskPatch
from compass.storage import MemoryStorage
from compass.workspace import Workspace

TODAY = date(2025, 3, 10)


def _workspace() -> Workspace:
    ws = Workspace(MemoryStorage(), seed_defaults=False)
    ws.goals.replace_all([
        Goal(id="g1", title="Global engineer", level=1, goal_type=GoalType.VISION),
        Goal(id="g2", title="Work abroad", level=2, parent_id="g1"),
        Goal(id="g3", title="TOEIC 900", level=3, parent_id="g2"),
    ])
    return ws


def _scored_task(priority: TaskPriority, impact: float, days_out: int) -> Task:
    return Task(
        id="t",
        title="x",
        priority=priority,
        due_date=(TODAY + timedelta(days=days_out)).isoformat(),
        vision_connection=VisionConnection(impact_score=impact),
    )


def test_add_task_derives_schedule_window():
    ws = _workspace()
    task = ws.tasks.add_task({
        "title": "Listening practice",
        "goalId": "g3",
        "dueDate": "2025-03-10",
        "dueTime": "18:30",
        "estimatedDuration": 30,
    })
    assert task.scheduled_start == "2025-03-10T18:30:00"
    assert task.scheduled_end == "2025-03-10T19:00:00"
    assert task.status == TaskStatus.PENDING
    assert task.vision_connection is None


def test_add_task_auto_connect_uses_keyword_table():
    ws = _workspace()
    task = ws.tasks.add_task({"title": "Read an English article", "dueDate": "2025-03-10"}, auto_connect=True)
    assert task.vision_connection.impact_score == 7.0
    assert "growth" in task.vision_connection.value_alignment

    other = ws.tasks.add_task({"title": "Tidy desk", "dueDate": "2025-03-10"}, auto_connect=True)
    assert other.vision_connection.impact_score == 5.0


def test_update_task_merges_and_stamps_completion():
    ws = _workspace()
    task = ws.tasks.add_task({"title": "a", "dueDate": "2025-03-10", "priority": "low"})

    done = ws.tasks.update_task(task.id, TaskPatch(status=TaskStatus.COMPLETED))
    assert done.status == TaskStatus.COMPLETED
    assert done.completed_at
    assert done.priority == TaskPriority.LOW

    reopened = ws.tasks.toggle_task_complete(task.id)
    assert reopened.status == TaskStatus.PENDING
    assert reopened.completed_at is None


def test_update_and_delete_unknown_task_are_noops():
    ws = _workspace()
    assert ws.tasks.update_task("missing", {"title": "x"}) is None
    assert ws.tasks.delete_task("missing") is False


def test_delete_task_has_no_cascade():
    ws = _workspace()
    task = ws.tasks.add_task({"title": "a", "goalId": "g3"})
    assert ws.tasks.delete_task(task.id) is True
    assert ws.tasks.tasks == []
    assert len(ws.goals.goals) == 3


def test_todays_tasks_compare_date_part_only():
    ws = _workspace()
    ws.tasks.replace_all([
        Task(id="yesterday", title="y", due_date="2025-03-09"),
        Task(id="today", title="t", due_date="2025-03-10"),
        Task(id="today_timestamp", title="ts", due_date="2025-03-10T23:00:00"),
        Task(id="tomorrow", title="m", due_date="2025-03-11"),
        Task(id="today_done", title="d", due_date="2025-03-10", status=TaskStatus.COMPLETED),
    ])
    assert [t.id for t in ws.tasks.get_todays_tasks(today=TODAY)] == ["today", "today_timestamp", "today_done"]
    assert [t.id for t in ws.tasks.get_todays_tasks(today=TODAY, include_completed=False)] == [
        "today", "today_timestamp",
    ]


def test_todays_tasks_default_to_the_real_date():
    ws = _workspace()
    ws.tasks.replace_all([
        Task(id="now", title="n", due_date=date.today().isoformat()),
        Task(id="later", title="l", due_date=(date.today() + timedelta(days=1)).isoformat()),
    ])
    assert [t.id for t in ws.tasks.get_todays_tasks()] == ["now"]


def test_tasks_with_vision_connection_and_update():
    ws = _workspace()
    ws.tasks.replace_all([Task(id="a", title="a"), Task(id="b", title="b")])

    ws.tasks.update_task_vision_connection("b", VisionConnection(core_vision_relevance="x", impact_score=4.0))
    assert [t.id for t in ws.tasks.get_tasks_with_vision_connection()] == ["b"]

    ws.tasks.update_task_vision_connection("b", None)
    assert ws.tasks.get_tasks_with_vision_connection() == []


def test_impact_score_is_zero_without_vision_connection():
    ws = _workspace()
    task = Task(id="t", title="x", priority=TaskPriority.HIGH, due_date=TODAY.isoformat())
    assert ws.tasks.calculate_task_impact_score(task, today=TODAY) == 0


@pytest.mark.parametrize(
    "days_out,expected",
    [(-3, 5), (0, 5), (2, 4), (3, 4), (5, 3), (7, 3), (20, 2), (30, 2), (31, 1), (400, 1)],
)
def test_impact_score_urgency_bonus(days_out, expected):
    ws = _workspace()
    task = _scored_task(TaskPriority.LOW, 0.0, days_out)
    assert ws.tasks.calculate_task_impact_score(task, today=TODAY) == 1 + expected


def test_impact_score_monotonic_in_priority_and_capped():
    ws = _workspace()
    scores = [
        ws.tasks.calculate_task_impact_score(_scored_task(p, 2.0, 40), today=TODAY)
        for p in (TaskPriority.LOW, TaskPriority.MEDIUM, TaskPriority.HIGH)
    ]
    assert scores == [4, 5, 6]

    for impact in (0.0, 5.0, 7.5, 10.0):
        for days_out in (-10, 0, 3, 100):
            for p in TaskPriority:
                score = ws.tasks.calculate_task_impact_score(_scored_task(p, impact, days_out), today=TODAY)
                assert 0 <= score <= 10

    assert ws.tasks.calculate_task_impact_score(_scored_task(TaskPriority.HIGH, 7.5, 0), today=TODAY) == 10


def test_task_hierarchy_path_is_shallow():
    ws = _workspace()
    task = ws.tasks.add_task({"title": "Vocabulary", "goalId": "g3"})
    assert ws.tasks.get_task_hierarchy_path(task.id) == {
        "vision": "Work abroad",
        "goal": "TOEIC 900",
        "task": "Vocabulary",
    }


def test_task_hierarchy_path_missing_links_are_empty():
    ws = _workspace()
    orphan = ws.tasks.add_task({"title": "Orphan", "goalId": "gone"})
    root_task = ws.tasks.add_task({"title": "Top", "goalId": "g1"})

    assert ws.tasks.get_task_hierarchy_path("nope") == {"vision": "", "goal": "", "task": ""}
    assert ws.tasks.get_task_hierarchy_path(orphan.id) == {"vision": "", "goal": "", "task": "Orphan"}
    assert ws.tasks.get_task_hierarchy_path(root_task.id) == {"vision": "", "goal": "Global engineer", "task": "Top"}


def test_todays_instances_expand_recurring_tasks():
    ws = _workspace()
    ws.tasks.add_task({
        "title": "Vocabulary",
        "dueDate": "2025-03-03",
        "dueTime": "09:00",
        "recurrence": {"type": "daily", "interval": 1},
    })
    ws.tasks.add_task({"title": "One-off", "dueDate": "2025-03-10", "dueTime": "07:00"})

    todays = ws.tasks.get_todays_instances(today=TODAY)
    assert [t.title for t in todays] == ["One-off", "Vocabulary"]
    assert todays[1].instance_number == 8


def test_null_in_patch_leaves_required_task_fields_alone():
    ws = _workspace()
    ws.tasks.replace_all([
        Task(
            id="a",
            title="Shadowing",
            goal_id="g3",
            due_date="2025-03-10",
            due_time="07:00",
            priority=TaskPriority.HIGH,
            status=TaskStatus.COMPLETED,
            completed_at="2025-03-10T07:30:00",
        ),
    ])

    updated = ws.tasks.update_task("a", {"title": None, "status": None, "priority": None, "dueTime": None})
    assert updated.title == "Shadowing"
    assert updated.status == TaskStatus.COMPLETED
    assert updated.completed_at == "2025-03-10T07:30:00"
    assert updated.priority == TaskPriority.HIGH
    assert updated.due_time is None
    assert ws.tasks.get_task_hierarchy_path("a") == {"vision": "Work abroad", "goal": "TOEIC 900", "task": "Shadowing"}


def test_update_task_keeps_other_tasks_when_list_changes_mid_update(monkeypatch):
    ws = _workspace()
    ws.tasks.replace_all([Task(id="a", title="a"), Task(id="b", title="b"), Task(id="c", title="c")])

    real_from_dict = task_store_module.task_from_dict

    def from_dict_with_delete(d):
        if ws.tasks.get_task("a") is not None:
            ws.tasks.delete_task("a")
        return real_from_dict(d)

    monkeypatch.setattr(task_store_module, "task_from_dict", from_dict_with_delete)
    updated = ws.tasks.update_task("c", {"title": "renamed"})

    assert updated.title == "renamed"
    assert [(t.id, t.title) for t in ws.tasks.tasks] == [("b", "b"), ("c", "renamed")]


def test_update_task_deleted_mid_update_is_not_resurrected(monkeypatch):
    ws = _workspace()
    ws.tasks.replace_all([Task(id="a", title="a"), Task(id="b", title="b")])

    real_from_dict = task_store_module.task_from_dict

    def from_dict_with_delete(d):
        ws.tasks.delete_task("b")
        return real_from_dict(d)

    monkeypatch.setattr(task_store_module, "task_from_dict", from_dict_with_delete)
    assert ws.tasks.update_task("b", {"title": "renamed"}) is None
    assert [t.id for t in ws.tasks.tasks] == ["a"]
