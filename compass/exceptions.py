"""
Compass exception hierarchy.

- CompassError: base class for every known error
- ConfigError: runtime configuration is invalid
- HierarchyCycleError: a parentId walk revisited a goal
- DataFormatError: an export document could not be parsed
- NotFoundError: a goal/task id does not exist (HTTP layer only)
"""
from typing import List, Optional


class CompassError(Exception):
    """Base class for expected Compass errors.

    Catching this handles every anticipated failure.
    """

    def __init__(self, message: str, hint: Optional[str] = None):
        """
        Args:
            message: what went wrong
            hint: what the user can do about it
        """
        super().__init__(message)
        self.message = message
        self.hint = hint

    def get_user_message(self) -> str:
        """Return a user facing message."""
        if self.hint:
            return f"{self.message}\nHint: {self.hint}"
        return self.message


class ConfigError(CompassError):
    """Runtime configuration is missing required structure or holds bad values."""

    def __init__(self, message: str, config_path: Optional[str] = None):
        hint = f"Check the config file: {config_path}" if config_path else "Check the config file format"
        super().__init__(message, hint)
        self.config_path = config_path


class HierarchyCycleError(CompassError):
    """Goal parent links loop back on themselves."""

    def __init__(self, goal_id: str, chain: List[str]):
        path = " -> ".join(chain + [goal_id])
        super().__init__(
            f"Goal hierarchy contains a cycle: {path}",
            hint="Edit one of the goals so its parentId points outside the loop",
        )
        self.goal_id = goal_id
        self.chain = chain


class DataFormatError(CompassError):
    """An import payload is not a usable export document."""

    def __init__(self, message: str):
        super().__init__(message, hint="Import a file produced by the export function")


class NotFoundError(CompassError):
    def __init__(self, kind: str, entity_id: str):
        super().__init__(f"{kind} not found: {entity_id}")
        self.kind = kind
        self.entity_id = entity_id
