"""
Recurrence expansion.

Turns one task carrying a RecurrenceRule into the dated instances it
stands for. Instances are computed on read and never stored; the source
task is never modified.

The cursor starts on the task's dueDate and only moves forward, so the
result is chronological. Each step tests one calendar day:
- daily / custom: every day visited is included, jump `interval` days
- weekly without daysOfWeek: every visited day is included, jump 7*interval days
- weekly with daysOfWeek: each day is tested, included when its weekday is
  listed and it falls in an active week (every `interval`-th week counted
  from the week of dueDate)
- monthly: included when day-of-month == dayOfMonth (default 1), then jump
  `interval` months
A day that is not included advances the cursor by one day.
"""
import copy
from dataclasses import fields, replace
from datetime import date, timedelta
from typing import Iterable, List, Optional

from dateutil.relativedelta import relativedelta

from compass.config_manager import config
from compass.logger import get_logger
from compass.models import RecurrenceRule, RecurrenceType, Task, TaskInstance

logger = get_logger("recurrence")


def parse_date(value) -> Optional[date]:
    """Date part of an ISO date or datetime string, None when unparseable."""
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def weekday_index(day: date) -> int:
    """0=Sunday .. 6=Saturday."""
    return day.isoweekday() % 7


def _week_start(day: date) -> date:
    return day - timedelta(days=weekday_index(day))


def _is_included(rule: RecurrenceRule, day: date, start: date) -> bool:
    if rule.type == RecurrenceType.WEEKLY:
        if not rule.days_of_week:
            return True
        if weekday_index(day) not in rule.days_of_week:
            return False
        weeks = (_week_start(day) - _week_start(start)).days // 7
        return weeks % rule.interval == 0
    if rule.type == RecurrenceType.MONTHLY:
        return day.day == (rule.day_of_month or 1)
    return True


def _advance(rule: RecurrenceRule, day: date, included: bool) -> date:
    if not included:
        return day + timedelta(days=1)
    if rule.type == RecurrenceType.WEEKLY:
        if rule.days_of_week:
            return day + timedelta(days=1)
        return day + timedelta(days=7 * rule.interval)
    if rule.type == RecurrenceType.MONTHLY:
        return day + relativedelta(months=rule.interval)
    return day + timedelta(days=rule.interval)


def _make_instance(task: Task, rule: RecurrenceRule, day: date, index: int) -> TaskInstance:
    values = {f.name: copy.deepcopy(getattr(task, f.name)) for f in fields(Task)}
    values["id"] = f"{task.id}_{index}"
    values["due_date"] = day.isoformat()
    if rule.type == RecurrenceType.WEEKLY and rule.weekly_times.get(weekday_index(day)):
        values["due_time"] = rule.weekly_times[weekday_index(day)]
    return TaskInstance(
        **values,
        original_task_id=task.id,
        instance_number=index + 1,
    )


def expand_task(task: Task, max_occurrences: Optional[int] = None) -> List[Task]:
    """
    Expand a task into its instances.

    Args:
        task: the stored task
        max_occurrences: hard cap override (default config.MAX_OCCURRENCES)

    Returns:
        [task] itself when it does not recur, otherwise the TaskInstance list.
    """
    rule = task.recurrence
    if rule is None or rule.type == RecurrenceType.NONE:
        return [task]

    start = parse_date(task.due_date)
    if start is None:
        logger.warning("Task %s has unparseable dueDate %r, not expanding", task.id, task.due_date)
        return [task]

    if not rule.interval or rule.interval < 1:
        rule = replace(rule, interval=1)

    if rule.type == RecurrenceType.WEEKLY and rule.days_of_week:
        if not any(0 <= d <= 6 for d in rule.days_of_week):
            return []
    if rule.type == RecurrenceType.MONTHLY and not 1 <= (rule.day_of_month or 1) <= 31:
        return []

    hard_cap = max_occurrences if max_occurrences is not None else config.MAX_OCCURRENCES
    end = parse_date(rule.end_date)
    limit = rule.max_occurrences if rule.max_occurrences and rule.max_occurrences > 0 else None
    skipped = {d for d in (parse_date(x) for x in rule.exceptions) if d is not None}

    instances: List[Task] = []
    cursor = start
    scanned = 0
    while True:
        if end is not None and cursor > end:
            break
        if limit is not None and len(instances) >= limit:
            break
        if len(instances) >= hard_cap:
            logger.debug("Task %s hit the %d occurrence cap", task.id, hard_cap)
            break
        if scanned >= config.MAX_SCAN_DAYS:
            logger.warning("Task %s: no further matching day within %d days", task.id, scanned)
            break
        scanned += 1

        included = _is_included(rule, cursor, start)
        if included and cursor not in skipped:
            instances.append(_make_instance(task, rule, cursor, len(instances)))
        try:
            cursor = _advance(rule, cursor, included)
        except OverflowError:
            break

    return instances


def expand_tasks(tasks: Iterable[Task]) -> List[Task]:
    """Concatenate the expansion of every task, in store order."""
    result: List[Task] = []
    for task in tasks:
        result.extend(expand_task(task))
    return result


def instances_between(tasks: Iterable[Task], start: date, end: date) -> List[Task]:
    """Instances whose dueDate falls in [start, end], sorted by date then time."""
    result = []
    for instance in expand_tasks(tasks):
        day = parse_date(instance.due_date)
        if day is not None and start <= day <= end:
            result.append(instance)
    result.sort(key=lambda t: (t.due_date[:10], t.due_time or "99:99"))
    return result


def instances_on(tasks: Iterable[Task], day: date) -> List[Task]:
    return instances_between(tasks, day, day)
