"""
Derived progress and schedule views.

Goal progress stays the value the user typed in; task counts are reported
next to it, never folded into it.
"""
from datetime import date
from typing import Any, Dict, List, Optional

from compass.config_manager import config
from compass.models import Goal, GoalStatus, Task, TaskStatus, goal_to_dict, task_to_dict
from compass.recurrence import instances_on


def completion_rate(tasks: List[Task]) -> int:
    """Percent of tasks completed, rounded; 0 when there are none."""
    if not tasks:
        return 0
    done = sum(1 for t in tasks if t.status == TaskStatus.COMPLETED)
    return int(round(done * 100 / len(tasks)))


def goal_progress(goals: List[Goal], tasks: List[Task]) -> List[Dict[str, Any]]:
    result = []
    for goal in goals:
        related = [t for t in tasks if t.goal_id == goal.id]
        entry = goal_to_dict(goal)
        entry["relatedTasks"] = len(related)
        entry["completedTasks"] = sum(1 for t in related if t.status == TaskStatus.COMPLETED)
        result.append(entry)
    return result


def dashboard_summary(goals: List[Goal], tasks: List[Task], today: Optional[date] = None) -> Dict[str, Any]:
    today = today or date.today()
    todays = instances_on(tasks, today)
    return {
        "date": today.isoformat(),
        "activeGoals": sum(1 for g in goals if g.status == GoalStatus.ACTIVE),
        "totalTasks": len(tasks),
        "overallCompletionRate": completion_rate(tasks),
        "todaysTasks": len(todays),
        "todaysCompleted": sum(1 for t in todays if t.status == TaskStatus.COMPLETED),
        "todaysCompletionRate": completion_rate(todays),
    }


def _hour_of(due_time: Optional[str]) -> Optional[int]:
    if not due_time or ":" not in due_time:
        return None
    try:
        return int(due_time.split(":")[0])
    except ValueError:
        return None


def time_slots(tasks: List[Task], day: date) -> Dict[str, Any]:
    """
    Hour slots for the day view. Each slot lists the instances whose
    dueTime falls in that hour; untimed or out-of-range instances go to
    "unscheduled".
    """
    slots = []
    by_hour: Dict[int, List[Dict[str, Any]]] = {}
    unscheduled = []
    for instance in instances_on(tasks, day):
        hour = _hour_of(instance.due_time)
        if hour is None or not config.SCHEDULE_START_HOUR <= hour < config.SCHEDULE_END_HOUR:
            unscheduled.append(task_to_dict(instance))
        else:
            by_hour.setdefault(hour, []).append(task_to_dict(instance))

    for hour in range(config.SCHEDULE_START_HOUR, config.SCHEDULE_END_HOUR):
        slots.append({"time": f"{hour:02d}:00", "hour": hour, "tasks": by_hour.get(hour, [])})

    return {"date": day.isoformat(), "slots": slots, "unscheduled": unscheduled}
