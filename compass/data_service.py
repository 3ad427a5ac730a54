"""
Import / export of the full goal + task state.

Export document:
    {"goals": [...], "tasks": [...], "exportedAt": "<ISO timestamp>", "version": "1.0.0"}

Import only checks that the text is a JSON object and that goals/tasks are
arrays; the entities themselves are taken as they are. A payload that
fails those checks leaves the current state untouched.
"""
import json
from datetime import datetime
from typing import Any, Dict, Optional

from compass.config_manager import config
from compass.exceptions import DataFormatError
from compass.logger import get_logger
from compass.models import goal_from_dict, goal_to_dict, task_from_dict, task_to_dict

logger = get_logger("data_service")


def parse_export_document(text: str) -> Dict[str, Any]:
    """Parse export text, raising DataFormatError when it is unusable."""
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise DataFormatError(f"Import payload is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise DataFormatError("Import payload must be a JSON object")
    return data


class DataService:
    def __init__(self, goal_store, task_store, profile_store=None):
        self.goal_store = goal_store
        self.task_store = task_store
        self.profile_store = profile_store

    def export_data(self, now: Optional[datetime] = None) -> str:
        document = {
            "goals": [goal_to_dict(g) for g in self.goal_store.goals],
            "tasks": [task_to_dict(t) for t in self.task_store.tasks],
            "exportedAt": (now or datetime.now()).isoformat(),
            "version": config.EXPORT_VERSION,
        }
        return json.dumps(document, ensure_ascii=False, indent=2)

    def import_data(self, text: str) -> bool:
        """
        Replace goals and/or tasks wholesale from an export document.

        Returns False (state unchanged) when the text cannot be parsed.
        Collections missing from the document are left alone.
        """
        try:
            data = parse_export_document(text)
        except DataFormatError as e:
            logger.warning("Import rejected: %s", e.message)
            return False

        goals = data.get("goals")
        tasks = data.get("tasks")
        # convert both before touching either store
        new_goals = [goal_from_dict(d) for d in goals if isinstance(d, dict)] if isinstance(goals, list) else None
        new_tasks = [task_from_dict(d) for d in tasks if isinstance(d, dict)] if isinstance(tasks, list) else None

        if isinstance(goals, list) and len(new_goals) != len(goals):
            logger.warning("Import dropped %d goal entries that are not objects", len(goals) - len(new_goals))
        if isinstance(tasks, list) and len(new_tasks) != len(tasks):
            logger.warning("Import dropped %d task entries that are not objects", len(tasks) - len(new_tasks))

        if new_goals is not None:
            self.goal_store.replace_all(new_goals)
        if new_tasks is not None:
            self.task_store.replace_all(new_tasks)

        logger.info(
            "Imported data (version %s): goals=%s tasks=%s",
            data.get("version", "unknown"),
            len(new_goals) if new_goals is not None else "unchanged",
            len(new_tasks) if new_tasks is not None else "unchanged",
        )
        return True

    def clear_all_data(self) -> None:
        """Back to the seed goals/tasks; persisted keys and the profile are removed."""
        self.goal_store.reset_to_defaults()
        self.task_store.reset_to_defaults()
        if self.profile_store is not None:
            self.profile_store.clear_user()
        logger.info("All data cleared, defaults restored")
