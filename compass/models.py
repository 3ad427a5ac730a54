"""
Core data models for Compass.

Goals form a tree through parent_id; tasks hang off goals through goal_id.
Dates stay ISO strings exactly as the UI hands them over. The *_to_dict /
*_from_dict helpers define the persisted and exported JSON shape, which
uses camelCase keys.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar

from compass.logger import get_logger

logger = get_logger("models")

E = TypeVar("E", bound=Enum)


class GoalStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    PAUSED = "paused"


class GoalType(str, Enum):
    VISION = "vision"
    LONG_TERM = "long-term"
    MID_TERM = "mid-term"
    SHORT_TERM = "short-term"


class TaskPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class RecurrenceType(str, Enum):
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


@dataclass
class Goal:
    """A node in the vision -> long-term -> mid-term -> short-term tree."""
    id: str
    title: str
    description: str = ""
    level: int = 1                          # 1 = top of the hierarchy
    parent_id: Optional[str] = None
    start_date: str = ""
    end_date: str = ""
    progress: int = 0                       # 0-100, set by the user
    status: GoalStatus = GoalStatus.ACTIVE
    goal_type: GoalType = GoalType.SHORT_TERM


@dataclass
class RecurrenceRule:
    """How a task repeats. weekday indices run 0=Sunday .. 6=Saturday."""
    type: RecurrenceType = RecurrenceType.NONE
    interval: int = 1
    days_of_week: List[int] = field(default_factory=list)
    day_of_month: Optional[int] = None
    end_date: Optional[str] = None
    max_occurrences: Optional[int] = None
    weekly_times: Dict[int, str] = field(default_factory=dict)  # weekday -> "HH:MM"
    exceptions: List[str] = field(default_factory=list)         # skipped ISO dates


@dataclass
class VisionConnection:
    core_vision_relevance: str = ""
    value_alignment: List[str] = field(default_factory=list)
    impact_score: float = 0.0  # 0-10
    why_statement: str = ""


@dataclass
class Task:
    """A schedulable unit of work linked to one goal."""
    id: str
    title: str
    description: str = ""
    goal_id: str = ""
    due_date: str = ""
    due_time: Optional[str] = None          # "09:00"
    estimated_duration: Optional[int] = None  # minutes
    actual_duration: Optional[int] = None     # minutes
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    completed_at: Optional[str] = None
    time_granularity: str = "daily"
    recurrence: Optional[RecurrenceRule] = None
    scheduled_start: Optional[str] = None
    scheduled_end: Optional[str] = None
    vision_connection: Optional[VisionConnection] = None


@dataclass
class TaskInstance(Task):
    """One computed occurrence of a recurring task. Never persisted."""
    original_task_id: str = ""
    instance_number: int = 1


@dataclass
class UserProfile:
    id: str = ""
    email: str = ""
    name: str = ""
    has_completed_onboarding: bool = False
    future_vision: Optional[str] = None
    core_values: List[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Field mapping: python attribute -> JSON key
# ---------------------------------------------------------------------------

GOAL_FIELDS = {
    "id": "id",
    "title": "title",
    "description": "description",
    "level": "level",
    "parent_id": "parentId",
    "start_date": "startDate",
    "end_date": "endDate",
    "progress": "progress",
    "status": "status",
    "goal_type": "type",
}

TASK_FIELDS = {
    "id": "id",
    "title": "title",
    "description": "description",
    "goal_id": "goalId",
    "due_date": "dueDate",
    "due_time": "dueTime",
    "estimated_duration": "estimatedDuration",
    "actual_duration": "actualDuration",
    "priority": "priority",
    "status": "status",
    "completed_at": "completedAt",
    "time_granularity": "timeGranularity",
    "recurrence": "recurrence",
    "scheduled_start": "scheduledStart",
    "scheduled_end": "scheduledEnd",
    "vision_connection": "visionConnection",
}

VISION_CONNECTION_FIELDS = {
    "core_vision_relevance": "coreVisionRelevance",
    "value_alignment": "valueAlignment",
    "impact_score": "impactScore",
    "why_statement": "whyStatement",
}

USER_FIELDS = {
    "id": "id",
    "email": "email",
    "name": "name",
    "has_completed_onboarding": "hasCompletedOnboarding",
    "future_vision": "futureVision",
    "core_values": "coreValues",
}


def _enum_or_default(enum_cls: Type[E], raw: Any, default: E) -> E:
    if isinstance(raw, enum_cls):
        return raw
    try:
        return enum_cls(raw)
    except ValueError:
        if raw is not None:
            logger.warning("Unknown %s value %r, using %s", enum_cls.__name__, raw, default.value)
        return default


def _int_or_none(raw: Any) -> Optional[int]:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def _value(v: Any) -> Any:
    return v.value if isinstance(v, Enum) else v


# ---------------------------------------------------------------------------
# Goal
# ---------------------------------------------------------------------------

def goal_to_dict(goal: Goal) -> Dict[str, Any]:
    d: Dict[str, Any] = {}
    for attr, key in GOAL_FIELDS.items():
        value = getattr(goal, attr)
        if value is None:
            continue
        d[key] = _value(value)
    return d


def goal_from_dict(d: Dict[str, Any]) -> Goal:
    return Goal(
        id=str(d.get("id", "")),
        title=d.get("title", ""),
        description=d.get("description", ""),
        level=_int_or_none(d.get("level")) or 1,
        parent_id=d.get("parentId"),
        start_date=d.get("startDate", ""),
        end_date=d.get("endDate", ""),
        progress=_int_or_none(d.get("progress")) or 0,
        status=_enum_or_default(GoalStatus, d.get("status"), GoalStatus.ACTIVE),
        goal_type=_enum_or_default(GoalType, d.get("type"), GoalType.SHORT_TERM),
    )


# ---------------------------------------------------------------------------
# Recurrence
# ---------------------------------------------------------------------------

def recurrence_to_dict(rule: RecurrenceRule) -> Dict[str, Any]:
    d: Dict[str, Any] = {"type": rule.type.value, "interval": rule.interval}
    if rule.days_of_week:
        d["daysOfWeek"] = list(rule.days_of_week)
    if rule.day_of_month is not None:
        d["dayOfMonth"] = rule.day_of_month
    if rule.end_date:
        d["endDate"] = rule.end_date
    if rule.max_occurrences is not None:
        d["maxOccurrences"] = rule.max_occurrences
    if rule.weekly_times:
        # JSON object keys are strings
        d["weeklyTimes"] = {str(k): v for k, v in rule.weekly_times.items()}
    if rule.exceptions:
        d["exceptions"] = list(rule.exceptions)
    return d


def recurrence_from_dict(d: Dict[str, Any]) -> RecurrenceRule:
    """
    Parse either the current `recurrence` shape or the legacy
    `recurringPattern` shape (which called the interval `frequency`).
    """
    interval = _int_or_none(d.get("interval", d.get("frequency")))
    weekly_times: Dict[int, str] = {}
    for k, v in (d.get("weeklyTimes") or {}).items():
        day = _int_or_none(k)
        if day is not None and v:
            weekly_times[day] = v

    days = []
    for raw in d.get("daysOfWeek") or []:
        day = _int_or_none(raw)
        if day is not None:
            days.append(day)

    return RecurrenceRule(
        # a rule without a usable type repeats every day
        type=_enum_or_default(RecurrenceType, d.get("type"), RecurrenceType.CUSTOM),
        interval=interval if interval and interval > 0 else 1,
        days_of_week=days,
        day_of_month=_int_or_none(d.get("dayOfMonth")),
        end_date=d.get("endDate") or None,
        max_occurrences=_int_or_none(d.get("maxOccurrences")),
        weekly_times=weekly_times,
        exceptions=list(d.get("exceptions") or []),
    )


# ---------------------------------------------------------------------------
# Vision connection
# ---------------------------------------------------------------------------

def vision_connection_to_dict(conn: VisionConnection) -> Dict[str, Any]:
    return {key: getattr(conn, attr) for attr, key in VISION_CONNECTION_FIELDS.items()}


def vision_connection_from_dict(d: Dict[str, Any]) -> VisionConnection:
    try:
        score = float(d.get("impactScore", 0.0))
    except (TypeError, ValueError):
        score = 0.0
    return VisionConnection(
        core_vision_relevance=d.get("coreVisionRelevance", ""),
        value_alignment=list(d.get("valueAlignment") or []),
        impact_score=score,
        why_statement=d.get("whyStatement", ""),
    )


# ---------------------------------------------------------------------------
# Task
# ---------------------------------------------------------------------------

def task_to_dict(task: Task) -> Dict[str, Any]:
    d: Dict[str, Any] = {}
    for attr, key in TASK_FIELDS.items():
        value = getattr(task, attr)
        if value is None:
            continue
        if attr == "recurrence":
            value = recurrence_to_dict(value)
        elif attr == "vision_connection":
            value = vision_connection_to_dict(value)
        d[key] = _value(value)
    if isinstance(task, TaskInstance):
        d["originalTaskId"] = task.original_task_id
        d["instanceNumber"] = task.instance_number
    return d


def task_from_dict(d: Dict[str, Any]) -> Task:
    raw_rule = d.get("recurrence")
    if not isinstance(raw_rule, dict):
        raw_rule = d.get("recurringPattern")
    recurrence = recurrence_from_dict(raw_rule) if isinstance(raw_rule, dict) else None

    raw_conn = d.get("visionConnection")
    vision_connection = (
        vision_connection_from_dict(raw_conn) if isinstance(raw_conn, dict) else None
    )

    return Task(
        id=str(d.get("id", "")),
        title=d.get("title", ""),
        description=d.get("description", ""),
        goal_id=str(d.get("goalId", "") or ""),
        due_date=d.get("dueDate", ""),
        due_time=d.get("dueTime") or None,
        estimated_duration=_int_or_none(d.get("estimatedDuration")),
        actual_duration=_int_or_none(d.get("actualDuration")),
        priority=_enum_or_default(TaskPriority, d.get("priority"), TaskPriority.MEDIUM),
        status=_enum_or_default(TaskStatus, d.get("status"), TaskStatus.PENDING),
        completed_at=d.get("completedAt"),
        time_granularity=d.get("timeGranularity", "daily"),
        recurrence=recurrence,
        scheduled_start=d.get("scheduledStart"),
        scheduled_end=d.get("scheduledEnd"),
        vision_connection=vision_connection,
    )


# ---------------------------------------------------------------------------
# User profile
# ---------------------------------------------------------------------------

def user_to_dict(user: UserProfile) -> Dict[str, Any]:
    d: Dict[str, Any] = {}
    for attr, key in USER_FIELDS.items():
        value = getattr(user, attr)
        if value is None:
            continue
        d[key] = value
    return d


def user_from_dict(d: Dict[str, Any]) -> UserProfile:
    return UserProfile(
        id=str(d.get("id", "")),
        email=d.get("email", ""),
        name=d.get("name", ""),
        has_completed_onboarding=bool(d.get("hasCompletedOnboarding", False)),
        future_vision=d.get("futureVision"),
        core_values=list(d.get("coreValues") or []),
    )
