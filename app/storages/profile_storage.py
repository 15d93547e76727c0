from dataclasses import replace
from typing import Any, Dict

from app.core.models import ResumeReference, UserProfile

EDITABLE_FIELDS = ("name", "email", "career_path", "avatar_data_uri")


class ProfileStorage:
    """Per-user profile records keyed by user id."""

    def __init__(self):
        self._profiles: Dict[str, UserProfile] = {}

    def get(self, user_id: str) -> UserProfile:
        profile = self._profiles.get(user_id)
        if profile is None:
            profile = UserProfile(user_id=user_id)
            self._profiles[user_id] = profile
        return profile

    def update(self, user_id: str, **fields: Any) -> UserProfile:
        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown profile fields: {sorted(unknown)}")
        profile = replace(self.get(user_id), **{k: v for k, v in fields.items() if v is not None})
        self._profiles[user_id] = profile
        return profile

    def set_resume(self, user_id: str, resume: ResumeReference | None) -> UserProfile:
        profile = replace(self.get(user_id), resume=resume)
        self._profiles[user_id] = profile
        return profile

    def get_resume_reference(self, user_id: str) -> ResumeReference | None:
        profile = self._profiles.get(user_id)
        return profile.resume if profile else None
