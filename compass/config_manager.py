"""
Configuration manager for Compass.

Central place for system constants. Every tunable value is declared
here and can be overridden from config/runtime.yaml.

Usage:
    from compass.config_manager import config
    cap = config.MAX_OCCURRENCES
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from compass.exceptions import ConfigError
from compass.logger import get_logger

CONFIG_DIR = Path(__file__).parent.parent / "config"
RUNTIME_CONFIG_PATH = CONFIG_DIR / "runtime.yaml"

logger = get_logger("config")


@dataclass
class SystemConfig:
    """
    Runtime constants.

    Defaults match the behaviour the UI depends on; change them only
    together with the views that consume the values.
    """

    # === Recurrence ===

    # Hard stop for one task's expansion, regardless of endDate/maxOccurrences
    MAX_OCCURRENCES: int = 1000

    # Upper bound on scanned calendar days for filters that never match
    # (e.g. daysOfWeek=[9] or dayOfMonth=32)
    MAX_SCAN_DAYS: int = 200000

    # === Import / export ===

    EXPORT_VERSION: str = "1.0.0"

    # === Persistence keys ===

    GOALS_KEY: str = "compass_goals"
    TASKS_KEY: str = "compass_tasks"
    USER_KEY: str = "compass_user"

    # Seed the example goals/tasks when nothing is persisted yet
    SEED_DEFAULTS: bool = True

    # === Impact score ===

    # (max days until due, bonus); checked in order, first match wins
    URGENCY_BONUS: Optional[List[Tuple[int, int]]] = None

    # Bonus when the due date is further out than every threshold
    URGENCY_FALLBACK_BONUS: int = 1

    IMPACT_SCORE_CAP: int = 10

    # === Schedule view ===

    SCHEDULE_START_HOUR: int = 6
    SCHEDULE_END_HOUR: int = 24

    def __post_init__(self):
        if self.URGENCY_BONUS is None:
            self.URGENCY_BONUS = [
                (0, 5),   # due today or overdue
                (3, 4),
                (7, 3),
                (30, 2),
            ]
        self.URGENCY_BONUS = [tuple(pair) for pair in self.URGENCY_BONUS]


def _load_runtime_config(path: Path = RUNTIME_CONFIG_PATH, strict: bool = False) -> Dict[str, Any]:
    """Load runtime overrides if the file exists."""
    if not path.exists():
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (yaml.YAMLError, OSError) as e:
        if strict:
            raise ConfigError(f"Failed to read runtime config: {e}", str(path)) from e
        logger.warning("Ignoring unreadable runtime config %s: %s", path, e)
        return {}

    if not isinstance(data, dict):
        if strict:
            raise ConfigError("Runtime config must be a mapping", str(path))
        logger.warning("Ignoring runtime config %s: top level is not a mapping", path)
        return {}
    return data


def get_config(path: Path = RUNTIME_CONFIG_PATH, strict: bool = False) -> SystemConfig:
    """
    Build a config instance.

    Priority: runtime.yaml > defaults. With strict=True unreadable files and
    unknown keys raise ConfigError instead of being skipped.
    """
    base = SystemConfig()
    overrides = _load_runtime_config(path, strict=strict)

    for key, value in overrides.items():
        if hasattr(base, key):
            setattr(base, key, value)
        elif strict:
            raise ConfigError(f"Unknown config key: {key}", str(path))
        else:
            logger.warning("Unknown config key ignored: %s", key)

    base.__post_init__()
    return base


config = get_config()
