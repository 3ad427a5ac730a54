from datetime import date, timedelta

from compass.models import RecurrenceRule, RecurrenceType, Task, TaskInstance, VisionConnection, task_to_dict
from compass.recurrence import expand_task, expand_tasks, instances_between, instances_on, weekday_index


def _task(task_id="t1", due_date="2025-01-01", due_time=None, **rule_fields) -> Task:
    rule = RecurrenceRule(**rule_fields) if rule_fields else None
    return Task(
        id=task_id,
        title=f"task-{task_id}",
        goal_id="g1",
        due_date=due_date,
        due_time=due_time,
        recurrence=rule,
    )


def _dates(instances):
    return [t.due_date for t in instances]


def test_non_recurring_task_is_its_own_single_instance():
    task = _task(type=RecurrenceType.NONE)
    result = expand_task(task)
    assert result == [task]
    assert result[0] is task

    plain = _task()
    assert expand_task(plain) == [plain]


def test_daily_interval_steps_and_hard_cap():
    task = _task(type=RecurrenceType.DAILY, interval=3)
    result = expand_task(task)

    assert len(result) == 1000
    start = date(2025, 1, 1)
    for i in (0, 1, 2, 500, 999):
        assert result[i].due_date == (start + timedelta(days=3 * i)).isoformat()
    assert result[0].id == "t1_0"
    assert result[999].id == "t1_999"
    assert result[0].instance_number == 1
    assert result[999].instance_number == 1000
    assert all(isinstance(t, TaskInstance) and t.original_task_id == "t1" for t in result)


def test_weekly_days_from_sunday_start_monday_then_wednesday():
    task = _task(due_date="2025-01-05", type=RecurrenceType.WEEKLY, days_of_week=[1, 3])
    result = expand_task(task)

    assert _dates(result[:2]) == ["2025-01-06", "2025-01-08"]


def test_weekly_monday_friday_scenario():
    task = _task(type=RecurrenceType.WEEKLY, interval=1, days_of_week=[1, 5])
    result = expand_task(task)

    assert _dates(result[:4]) == ["2025-01-03", "2025-01-06", "2025-01-10", "2025-01-13"]
    assert [t.id for t in result[:4]] == ["t1_0", "t1_1", "t1_2", "t1_3"]
    days = [date.fromisoformat(t.due_date) for t in result]
    assert all(weekday_index(d) in (1, 5) for d in days)
    assert days == sorted(days)


def test_weekly_without_days_repeats_on_start_weekday():
    task = _task(type=RecurrenceType.WEEKLY, interval=2, max_occurrences=3)
    assert _dates(expand_task(task)) == ["2025-01-01", "2025-01-15", "2025-01-29"]


def test_weekly_days_respect_interval_weeks():
    task = _task(due_date="2025-01-05", type=RecurrenceType.WEEKLY, interval=2, days_of_week=[1], max_occurrences=3)
    assert _dates(expand_task(task)) == ["2025-01-06", "2025-01-20", "2025-02-03"]


def test_weekly_time_override_per_weekday():
    task = _task(
        due_date="2025-01-05",
        due_time="07:00",
        type=RecurrenceType.WEEKLY,
        days_of_week=[1, 3],
        weekly_times={3: "18:30"},
        max_occurrences=2,
    )
    monday, wednesday = expand_task(task)
    assert monday.due_time == "07:00"
    assert wednesday.due_time == "18:30"


def test_monthly_day_of_month_is_always_respected():
    task = _task(type=RecurrenceType.MONTHLY, day_of_month=15, max_occurrences=12)
    result = expand_task(task)

    assert len(result) == 12
    assert result[0].due_date == "2025-01-15"
    assert result[1].due_date == "2025-02-15"
    assert all(date.fromisoformat(t.due_date).day == 15 for t in result)


def test_monthly_31st_skips_short_months():
    task = _task(due_date="2025-01-31", type=RecurrenceType.MONTHLY, day_of_month=31, max_occurrences=5)
    result = expand_task(task)

    assert len(result) == 5
    assert all(date.fromisoformat(t.due_date).day == 31 for t in result)


def test_monthly_defaults_to_first_of_month():
    task = _task(due_date="2025-01-10", type=RecurrenceType.MONTHLY, max_occurrences=2)
    assert _dates(expand_task(task)) == ["2025-02-01", "2025-03-01"]


def test_max_occurrences_wins_over_distant_end_date():
    task = _task(type=RecurrenceType.DAILY, max_occurrences=3, end_date="2030-01-01")
    assert len(expand_task(task)) == 3


def test_end_date_is_inclusive():
    task = _task(type=RecurrenceType.DAILY, end_date="2025-01-05")
    assert _dates(expand_task(task)) == [
        "2025-01-01", "2025-01-02", "2025-01-03", "2025-01-04", "2025-01-05",
    ]


def test_end_date_before_start_yields_nothing():
    task = _task(type=RecurrenceType.DAILY, end_date="2024-12-31")
    assert expand_task(task) == []


def test_custom_type_includes_every_day():
    task = _task(type=RecurrenceType.CUSTOM, max_occurrences=3)
    assert _dates(expand_task(task)) == ["2025-01-01", "2025-01-02", "2025-01-03"]


def test_exception_dates_are_skipped_without_gaps_in_numbering():
    task = _task(type=RecurrenceType.DAILY, max_occurrences=3, exceptions=["2025-01-02"])
    result = expand_task(task)
    assert _dates(result) == ["2025-01-01", "2025-01-03", "2025-01-04"]
    assert [t.id for t in result] == ["t1_0", "t1_1", "t1_2"]


def test_weekday_filter_that_never_matches_terminates():
    task = _task(type=RecurrenceType.WEEKLY, days_of_week=[9])
    assert expand_task(task) == []


def test_unparseable_due_date_is_not_expanded():
    task = _task(due_date="someday", type=RecurrenceType.DAILY)
    assert expand_task(task) == [task]


def test_expansion_does_not_touch_the_source_task():
    task = _task(type=RecurrenceType.DAILY, max_occurrences=3)
    task.vision_connection = VisionConnection(value_alignment=["growth"], impact_score=5.0)
    before = task_to_dict(task)

    result = expand_task(task)
    result[0].vision_connection.value_alignment.append("changed")
    result[0].title = "changed"

    assert task_to_dict(task) == before


def test_expand_tasks_concatenates_in_store_order():
    a = _task("a", type=RecurrenceType.DAILY, max_occurrences=2)
    b = _task("b")
    assert [t.id for t in expand_tasks([a, b])] == ["a_0", "a_1", "b"]


def test_instances_between_sorts_by_date_then_time():
    a = _task("a", due_time="20:00", type=RecurrenceType.DAILY, max_occurrences=3)
    b = _task("b", due_date="2025-01-02", due_time="08:00")
    result = instances_between([a, b], date(2025, 1, 2), date(2025, 1, 3))
    assert [t.id for t in result] == ["b", "a_1", "a_2"]

    assert [t.id for t in instances_on([a, b], date(2025, 1, 1))] == ["a_0"]
