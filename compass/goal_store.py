"""
Goal store: CRUD over goals plus hierarchy traversal.

Goals live in memory in insertion order and are written through the
storage adapter after every mutation. A failed write is logged and the
in-memory change stands. Mutations hold the store lock, since the API
runs its handlers on a thread pool.
"""
import threading
import time
import uuid
from typing import Any, Dict, List, Optional, Set, Union

from compass.config_manager import config
from compass.exceptions import HierarchyCycleError
from compass.logger import get_logger
from compass.models import Goal, GoalStatus, goal_from_dict, goal_to_dict
from compass.schema import GoalCreate, GoalPatch
from compass.seed_data import default_goals

logger = get_logger("goal_store")


def new_entity_id() -> str:
    """Creation-time token: epoch milliseconds plus a short random suffix."""
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"


class GoalStore:
    """Owns the goal collection."""

    def __init__(
        self,
        storage,
        task_store=None,
        key: Optional[str] = None,
        seed_defaults: Optional[bool] = None,
    ):
        self.storage = storage
        self.task_store = task_store
        self.key = key or config.GOALS_KEY
        self._seed_defaults = config.SEED_DEFAULTS if seed_defaults is None else seed_defaults
        self._goals: List[Goal] = []
        self._lock = threading.RLock()
        self._load()

    # ---------------------------------------------------------------------
    # Persistence
    # ---------------------------------------------------------------------
    def _load(self) -> None:
        raw = self.storage.get(self.key)
        if isinstance(raw, list):
            self._goals = [goal_from_dict(d) for d in raw if isinstance(d, dict)]
            return
        if raw is not None:
            logger.warning("Persisted goals under %s are not a list, ignoring", self.key)
        if self._seed_defaults:
            logger.info("No persisted goals, seeding defaults")
            self._goals = default_goals()

    def save(self) -> bool:
        ok = self.storage.set(self.key, [goal_to_dict(g) for g in self._goals])
        if not ok:
            logger.warning("Goals changed in memory but were not persisted")
        return ok

    def replace_all(self, goals: List[Goal]) -> bool:
        with self._lock:
            self._goals = list(goals)
            return self.save()

    def reset_to_defaults(self) -> None:
        """Restore the seed goals and drop the persisted key."""
        with self._lock:
            self._goals = default_goals()
            self.storage.remove(self.key)

    # ---------------------------------------------------------------------
    # Queries
    # ---------------------------------------------------------------------
    @property
    def goals(self) -> List[Goal]:
        return list(self._goals)

    def get_goal(self, goal_id: str) -> Optional[Goal]:
        for goal in self._goals:
            if goal.id == goal_id:
                return goal
        return None

    def list_goals(self, status: Optional[Union[str, GoalStatus]] = None) -> List[Goal]:
        if status is None:
            return self.goals
        wanted = GoalStatus(status)
        return [g for g in self._goals if g.status == wanted]

    def get_children(self, goal_id: str) -> List[Goal]:
        return [g for g in self._goals if g.parent_id == goal_id]

    def get_goal_hierarchy(self, goal_id: str) -> List[Goal]:
        """
        Goals from the root down to goal_id, following parentId links.

        Returns an empty list when goal_id does not exist; a missing parent
        ends the walk. Raises HierarchyCycleError when a goal is revisited.
        """
        hierarchy: List[Goal] = []
        seen: Set[str] = set()
        current = self.get_goal(goal_id)
        while current is not None:
            if current.id in seen:
                raise HierarchyCycleError(current.id, [g.id for g in reversed(hierarchy)])
            seen.add(current.id)
            hierarchy.append(current)
            current = self.get_goal(current.parent_id) if current.parent_id else None
        hierarchy.reverse()
        return hierarchy

    def get_goal_tree(self) -> List[Dict[str, Any]]:
        """
        Nested goal dicts with a "children" list each.

        Roots are goals without a parent or whose parent is missing; goals
        only reachable through a cycle are left out.
        """
        ids = {g.id for g in self._goals}
        by_parent: Dict[Optional[str], List[Goal]] = {}
        for goal in self._goals:
            parent = goal.parent_id if goal.parent_id in ids else None
            by_parent.setdefault(parent, []).append(goal)

        visited: Set[str] = set()

        def build(parent_id: Optional[str]) -> List[Dict[str, Any]]:
            nodes = []
            for item in by_parent.get(parent_id, []):
                if item.id in visited:
                    continue
                visited.add(item.id)
                d = goal_to_dict(item)
                d["children"] = build(item.id)
                nodes.append(d)
            return nodes

        return build(None)

    # ---------------------------------------------------------------------
    # Commands
    # ---------------------------------------------------------------------
    def add_goal(self, fields: Union[GoalCreate, Dict[str, Any]]) -> Goal:
        if not isinstance(fields, GoalCreate):
            fields = GoalCreate.model_validate(fields)
        data = fields.to_json_fields(exclude_unset=False)
        data["id"] = new_entity_id()
        goal = goal_from_dict(data)
        with self._lock:
            self._goals.append(goal)
            self.save()
        logger.info("Goal created: %s (%s)", goal.id, goal.title)
        return goal

    def update_goal(self, goal_id: str, patch: Union[GoalPatch, Dict[str, Any]]) -> Optional[Goal]:
        """Merge the set fields onto the goal. Unknown ids are a no-op."""
        if not isinstance(patch, GoalPatch):
            patch = GoalPatch.model_validate(patch)
        with self._lock:
            goal = self.get_goal(goal_id)
            if goal is None:
                logger.debug("update_goal: %s not found", goal_id)
                return None
            merged = goal_to_dict(goal)
            merged.update(patch.to_json_fields())
            merged["id"] = goal.id
            updated = goal_from_dict(merged)
            # write back by id: the list may have been replaced meanwhile
            if self.get_goal(goal_id) is None:
                logger.debug("update_goal: %s was deleted during the update", goal_id)
                return None
            self._goals = [updated if g.id == goal_id else g for g in self._goals]
            self.save()
            return updated

    def delete_goal(self, goal_id: str) -> bool:
        """Remove the goal and every task whose goalId points at it."""
        with self._lock:
            before = len(self._goals)
            self._goals = [g for g in self._goals if g.id != goal_id]
            removed = len(self._goals) != before
            self.save()

        cascaded = 0
        if self.task_store is not None:
            cascaded = self.task_store.delete_tasks_for_goal(goal_id)
        if removed or cascaded:
            logger.info("Goal deleted: %s (cascaded %d tasks)", goal_id, cascaded)
        return removed
