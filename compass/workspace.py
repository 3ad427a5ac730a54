"""
Explicit wiring of one storage adapter and the stores built on it.

Build one Workspace at process start and pass it to whatever needs the
stores; nothing looks them up globally.
"""
from pathlib import Path
from typing import Optional

from compass.data_service import DataService
from compass.goal_store import GoalStore
from compass.profile_store import ProfileStore
from compass.storage import JsonStorage, MemoryStorage
from compass.task_store import TaskStore


class Workspace:
    def __init__(self, storage, seed_defaults: Optional[bool] = None):
        self.storage = storage
        self.tasks = TaskStore(storage, seed_defaults=seed_defaults)
        self.goals = GoalStore(storage, task_store=self.tasks, seed_defaults=seed_defaults)
        self.tasks.goal_store = self.goals
        self.profile = ProfileStore(storage)
        self.data = DataService(self.goals, self.tasks, self.profile)

    @classmethod
    def open(cls, data_dir: Optional[Path] = None, seed_defaults: Optional[bool] = None) -> "Workspace":
        """Workspace backed by JSON files (default: the configured data dir)."""
        return cls(JsonStorage(data_dir), seed_defaults=seed_defaults)

    @classmethod
    def in_memory(cls, seed_defaults: Optional[bool] = None) -> "Workspace":
        return cls(MemoryStorage(), seed_defaults=seed_defaults)
