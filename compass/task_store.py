"""
Task store: CRUD over tasks, today's view, vision connections and impact scoring.
"""
import threading
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Union

from compass.config_manager import config
from compass.goal_store import new_entity_id
from compass.logger import get_logger
from compass.models import (
    Task,
    TaskPriority,
    TaskStatus,
    VisionConnection,
    task_from_dict,
    task_to_dict,
    vision_connection_to_dict,
)
from compass.recurrence import expand_task, instances_on, parse_date
from compass.schema import TaskCreate, TaskPatch
from compass.seed_data import default_tasks
from compass.vision_connection import generate_vision_connection

logger = get_logger("task_store")

PRIORITY_POINTS = {
    TaskPriority.HIGH: 3,
    TaskPriority.MEDIUM: 2,
    TaskPriority.LOW: 1,
}


def _scheduled_window(due_date: str, due_time: Optional[str], minutes: Optional[int]):
    """(scheduledStart, scheduledEnd) ISO strings for a timed task, or (None, None)."""
    if not due_date or not due_time:
        return None, None
    try:
        start = datetime.fromisoformat(f"{due_date[:10]}T{due_time}")
    except ValueError:
        return None, None
    end = start + timedelta(minutes=minutes) if minutes else None
    return start.isoformat(), end.isoformat() if end else None


class TaskStore:
    """Owns the task collection. goal_store is only read, for hierarchy labels."""

    def __init__(
        self,
        storage,
        goal_store=None,
        key: Optional[str] = None,
        seed_defaults: Optional[bool] = None,
    ):
        self.storage = storage
        self.goal_store = goal_store
        self.key = key or config.TASKS_KEY
        self._seed_defaults = config.SEED_DEFAULTS if seed_defaults is None else seed_defaults
        self._tasks: List[Task] = []
        self._lock = threading.RLock()
        self._load()

    # ---------------------------------------------------------------------
    # Persistence
    # ---------------------------------------------------------------------
    def _load(self) -> None:
        raw = self.storage.get(self.key)
        if isinstance(raw, list):
            self._tasks = [task_from_dict(d) for d in raw if isinstance(d, dict)]
            return
        if raw is not None:
            logger.warning("Persisted tasks under %s are not a list, ignoring", self.key)
        if self._seed_defaults:
            logger.info("No persisted tasks, seeding defaults")
            self._tasks = default_tasks()

    def save(self) -> bool:
        ok = self.storage.set(self.key, [task_to_dict(t) for t in self._tasks])
        if not ok:
            logger.warning("Tasks changed in memory but were not persisted")
        return ok

    def replace_all(self, tasks: List[Task]) -> bool:
        with self._lock:
            self._tasks = list(tasks)
            return self.save()

    def reset_to_defaults(self) -> None:
        with self._lock:
            self._tasks = default_tasks()
            self.storage.remove(self.key)

    # ---------------------------------------------------------------------
    # Queries
    # ---------------------------------------------------------------------
    @property
    def tasks(self) -> List[Task]:
        return list(self._tasks)

    def get_task(self, task_id: str) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def list_tasks(
        self,
        goal_id: Optional[str] = None,
        status: Optional[Union[str, TaskStatus]] = None,
    ) -> List[Task]:
        result = self.tasks
        if goal_id is not None:
            result = [t for t in result if t.goal_id == goal_id]
        if status is not None:
            wanted = TaskStatus(status)
            result = [t for t in result if t.status == wanted]
        return result

    def get_todays_tasks(self, today: Optional[date] = None, include_completed: bool = True) -> List[Task]:
        """Tasks whose dueDate (date part) is today. Evaluated on every call."""
        today = today or date.today()
        result = [t for t in self._tasks if parse_date(t.due_date) == today]
        if not include_completed:
            result = [t for t in result if t.status != TaskStatus.COMPLETED]
        return result

    def get_todays_instances(self, today: Optional[date] = None) -> List[Task]:
        """Today's rows after recurrence expansion, ordered by dueTime."""
        return instances_on(self._tasks, today or date.today())

    def get_task_instances(self, task_id: str) -> List[Task]:
        task = self.get_task(task_id)
        return expand_task(task) if task else []

    def get_tasks_with_vision_connection(self) -> List[Task]:
        return [t for t in self._tasks if t.vision_connection is not None]

    def calculate_task_impact_score(self, task: Task, today: Optional[date] = None) -> int:
        """
        0..10 score: priority points + the vision connection's impactScore
        + an urgency bonus from the days left until dueDate, capped at 10.
        Tasks without a vision connection score 0.
        """
        if task.vision_connection is None:
            return 0

        score = PRIORITY_POINTS.get(task.priority, 0)
        score += task.vision_connection.impact_score

        due = parse_date(task.due_date)
        if due is not None:
            days_left = (due - (today or date.today())).days
            bonus = config.URGENCY_FALLBACK_BONUS
            for max_days, points in config.URGENCY_BONUS:
                if days_left <= max_days:
                    bonus = points
                    break
            score += bonus

        return int(max(0, min(config.IMPACT_SCORE_CAP, score)))

    def get_task_hierarchy_path(self, task_id: str) -> Dict[str, str]:
        """
        Labels for breadcrumb display: the task, its goal and that goal's
        parent (shown as the vision). Anything missing is "".
        """
        task = self.get_task(task_id)
        if task is None:
            return {"vision": "", "goal": "", "task": ""}

        goal = self.goal_store.get_goal(task.goal_id) if self.goal_store else None
        parent = None
        if goal is not None and goal.parent_id:
            parent = self.goal_store.get_goal(goal.parent_id)
        return {
            "vision": parent.title if parent else "",
            "goal": goal.title if goal else "",
            "task": task.title,
        }

    # ---------------------------------------------------------------------
    # Commands
    # ---------------------------------------------------------------------
    def add_task(self, fields: Union[TaskCreate, Dict[str, Any]], auto_connect: bool = False) -> Task:
        """
        Create a task. With auto_connect a missing visionConnection is filled
        in from the keyword table.
        """
        if not isinstance(fields, TaskCreate):
            fields = TaskCreate.model_validate(fields)
        data = fields.to_json_fields(exclude_unset=False)
        data["id"] = new_entity_id()

        if not data.get("scheduledStart"):
            start, end = _scheduled_window(data.get("dueDate", ""), data.get("dueTime"), data.get("estimatedDuration"))
            data["scheduledStart"] = start
            data["scheduledEnd"] = data.get("scheduledEnd") or end
        if data.get("status") == TaskStatus.COMPLETED.value and not data.get("completedAt"):
            data["completedAt"] = datetime.now().isoformat()

        task = task_from_dict(data)
        if auto_connect and task.vision_connection is None:
            task.vision_connection = generate_vision_connection(task.title, task.description)

        with self._lock:
            self._tasks.append(task)
            self.save()
        logger.info("Task created: %s (%s)", task.id, task.title)
        return task

    def update_task(self, task_id: str, patch: Union[TaskPatch, Dict[str, Any]]) -> Optional[Task]:
        """
        Merge the set fields onto the task. Unknown ids are a no-op.

        Moving into completed stamps completedAt and moving out of it clears
        the stamp, unless the patch sets completedAt itself.
        """
        if not isinstance(patch, TaskPatch):
            patch = TaskPatch.model_validate(patch)
        changes = patch.to_json_fields()

        with self._lock:
            task = self.get_task(task_id)
            if task is None:
                logger.debug("update_task: %s not found", task_id)
                return None

            merged = task_to_dict(task)
            merged.update(changes)
            merged["id"] = task.id
            # the merged dict must not keep the legacy shape around
            merged.pop("recurringPattern", None)

            new_status = changes.get("status")
            if new_status and "completedAt" not in changes:
                if new_status == TaskStatus.COMPLETED.value and task.status != TaskStatus.COMPLETED:
                    merged["completedAt"] = datetime.now().isoformat()
                elif new_status != TaskStatus.COMPLETED.value:
                    merged.pop("completedAt", None)

            updated = task_from_dict(merged)
            # write back by id: the list may have been replaced meanwhile
            if self.get_task(task_id) is None:
                logger.debug("update_task: %s was deleted during the update", task_id)
                return None
            self._tasks = [updated if t.id == task_id else t for t in self._tasks]
            self.save()
            return updated

    def delete_task(self, task_id: str) -> bool:
        with self._lock:
            before = len(self._tasks)
            self._tasks = [t for t in self._tasks if t.id != task_id]
            self.save()
            return len(self._tasks) != before

    def delete_tasks_for_goal(self, goal_id: str) -> int:
        """Cascade for goal deletion. Returns the number of tasks removed."""
        with self._lock:
            before = len(self._tasks)
            self._tasks = [t for t in self._tasks if t.goal_id != goal_id]
            removed = before - len(self._tasks)
            self.save()
            return removed

    def set_task_status(self, task_id: str, status: Union[str, TaskStatus]) -> Optional[Task]:
        return self.update_task(task_id, TaskPatch(status=TaskStatus(status)))

    def toggle_task_complete(self, task_id: str) -> Optional[Task]:
        task = self.get_task(task_id)
        if task is None:
            return None
        new_status = TaskStatus.PENDING if task.status == TaskStatus.COMPLETED else TaskStatus.COMPLETED
        return self.set_task_status(task_id, new_status)

    def update_task_vision_connection(
        self,
        task_id: str,
        connection: Optional[Union[VisionConnection, Dict[str, Any]]],
    ) -> Optional[Task]:
        if isinstance(connection, VisionConnection):
            connection = vision_connection_to_dict(connection)
        return self.update_task(task_id, TaskPatch.model_validate({"visionConnection": connection}))
