"""
Key-value persistence for Compass.

Every value is JSON. Operations never raise: failures are logged and
reported as None (get) or False (set/remove), so callers keep their
in-memory state and carry on.
"""
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from compass.logger import get_logger
from compass.paths import DATA_DIR

logger = get_logger("storage")


class JsonStorage:
    """One <key>.json file per key under base_dir."""

    def __init__(self, base_dir: Optional[Path] = None):
        self._base_dir = Path(base_dir) if base_dir is not None else DATA_DIR

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def _path(self, key: str) -> Path:
        return self._base_dir / f"{key}.json"

    def get(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Corrupt JSON under key %s (%s): %s", key, path, e)
            return None
        except OSError as e:
            logger.error("Failed to read key %s from %s: %s", key, path, e)
            return None

    def set(self, key: str, value: Any) -> bool:
        path = self._path(key)
        try:
            payload = json.dumps(value, ensure_ascii=False, indent=2)
        except (TypeError, ValueError) as e:
            logger.error("Value for key %s is not JSON serializable: %s", key, e)
            return False

        tmp_name = None
        try:
            self._base_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._base_dir, prefix=f".{key}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, path)
            return True
        except OSError as e:
            logger.error("Failed to write key %s to %s: %s", key, path, e)
            if tmp_name and os.path.exists(tmp_name):
                try:
                    os.remove(tmp_name)
                except OSError:
                    logger.debug("Could not remove temp file %s", tmp_name)
            return False

    def remove(self, key: str) -> bool:
        path = self._path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error("Failed to remove key %s (%s): %s", key, path, e)
            return False
        return True


class MemoryStorage:
    """Same contract as JsonStorage, kept in a dict."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Corrupt JSON under key %s: %s", key, e)
            return None

    def set(self, key: str, value: Any) -> bool:
        try:
            self._data[key] = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error("Value for key %s is not JSON serializable: %s", key, e)
            return False
        return True

    def remove(self, key: str) -> bool:
        self._data.pop(key, None)
        return True

    def keys(self):
        return list(self._data.keys())
