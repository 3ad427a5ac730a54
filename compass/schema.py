"""
Create / patch structures for Compass entities.

A patch only carries the fields the caller explicitly set; unset fields
leave the stored value alone. An explicit null clears a field that may be
empty (parentId, dueTime, visionConnection, ...) and is ignored for the
rest, so title or status can never be nulled out. Field names accept
both the JSON camelCase keys and the python attribute names.
"""
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from compass.models import GoalStatus, GoalType, RecurrenceType, TaskPriority, TaskStatus


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_json_fields(self, exclude_unset: bool = True) -> Dict[str, Any]:
        """Dump in the persisted JSON shape (camelCase keys, enum values)."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=exclude_unset)


class _PatchModel(_CamelModel):
    """Partial update. An explicit null only clears the fields named in clearable_fields."""

    clearable_fields: ClassVar[FrozenSet[str]] = frozenset()

    def to_json_fields(self, exclude_unset: bool = True) -> Dict[str, Any]:
        data = super().to_json_fields(exclude_unset=exclude_unset)
        for name, info in type(self).model_fields.items():
            key = info.alias or to_camel(name)
            if key in data and data[key] is None and name not in self.clearable_fields:
                del data[key]
        return data


class RecurrenceModel(_CamelModel):
    type: RecurrenceType
    interval: int = 1
    days_of_week: List[int] = Field(default_factory=list)
    day_of_month: Optional[int] = None
    end_date: Optional[str] = None
    max_occurrences: Optional[int] = None
    weekly_times: Dict[int, str] = Field(default_factory=dict)
    exceptions: List[str] = Field(default_factory=list)


class VisionConnectionModel(_CamelModel):
    core_vision_relevance: str = ""
    value_alignment: List[str] = Field(default_factory=list)
    impact_score: float = 0.0
    why_statement: str = ""


class GoalCreate(_CamelModel):
    title: str
    description: str = ""
    level: int = 1
    parent_id: Optional[str] = None
    start_date: str = ""
    end_date: str = ""
    progress: int = 0
    status: GoalStatus = GoalStatus.ACTIVE
    goal_type: GoalType = Field(default=GoalType.SHORT_TERM, alias="type")


class GoalPatch(_PatchModel):
    clearable_fields: ClassVar[FrozenSet[str]] = frozenset({"parent_id"})

    title: Optional[str] = None
    description: Optional[str] = None
    level: Optional[int] = None
    parent_id: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    progress: Optional[int] = None
    status: Optional[GoalStatus] = None
    goal_type: Optional[GoalType] = Field(default=None, alias="type")


class TaskCreate(_CamelModel):
    title: str
    description: str = ""
    goal_id: str = ""
    due_date: str = ""
    due_time: Optional[str] = None
    estimated_duration: Optional[int] = None
    actual_duration: Optional[int] = None
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    completed_at: Optional[str] = None
    time_granularity: str = "daily"
    recurrence: Optional[RecurrenceModel] = None
    scheduled_start: Optional[str] = None
    scheduled_end: Optional[str] = None
    vision_connection: Optional[VisionConnectionModel] = None


class TaskPatch(_PatchModel):
    clearable_fields: ClassVar[FrozenSet[str]] = frozenset({
        "due_time",
        "estimated_duration",
        "actual_duration",
        "completed_at",
        "recurrence",
        "scheduled_start",
        "scheduled_end",
        "vision_connection",
    })

    title: Optional[str] = None
    description: Optional[str] = None
    goal_id: Optional[str] = None
    due_date: Optional[str] = None
    due_time: Optional[str] = None
    estimated_duration: Optional[int] = None
    actual_duration: Optional[int] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    completed_at: Optional[str] = None
    time_granularity: Optional[str] = None
    recurrence: Optional[RecurrenceModel] = None
    scheduled_start: Optional[str] = None
    scheduled_end: Optional[str] = None
    vision_connection: Optional[VisionConnectionModel] = None


class ProfilePatch(_PatchModel):
    clearable_fields: ClassVar[FrozenSet[str]] = frozenset({"future_vision"})

    id: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    has_completed_onboarding: Optional[bool] = None
    future_vision: Optional[str] = None
    core_values: Optional[List[str]] = None
