"""
User profile persisted under its own storage key.

Authentication is mocked by the UI; this only keeps what the UI learned
about the user (name, onboarding flag, future vision, core values).
"""
from typing import Any, Dict, Optional, Union

from compass.config_manager import config
from compass.logger import get_logger
from compass.models import UserProfile, user_from_dict, user_to_dict
from compass.schema import ProfilePatch

logger = get_logger("profile_store")


class ProfileStore:
    def __init__(self, storage, key: Optional[str] = None):
        self.storage = storage
        self.key = key or config.USER_KEY
        raw = self.storage.get(self.key)
        self._user: Optional[UserProfile] = user_from_dict(raw) if isinstance(raw, dict) else None

    def get_user(self) -> Optional[UserProfile]:
        return self._user

    def update_user(self, patch: Union[ProfilePatch, Dict[str, Any]]) -> UserProfile:
        """Merge the set fields, creating the profile on first use."""
        if not isinstance(patch, ProfilePatch):
            patch = ProfilePatch.model_validate(patch)
        merged = user_to_dict(self._user) if self._user else {}
        merged.update(patch.to_json_fields())
        self._user = user_from_dict(merged)
        if not self.storage.set(self.key, user_to_dict(self._user)):
            logger.warning("Profile changed in memory but was not persisted")
        return self._user

    def clear_user(self) -> None:
        self._user = None
        self.storage.remove(self.key)
