from pydantic import BaseModel

from app.core.models import UserProfile


class ProfileUpdateRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    career_path: str | None = None
    avatar_data_uri: str | None = None


class ResumeInfo(BaseModel):
    filename: str
    media_type: str
    size: int
    fingerprint: str


class ProfileResponse(BaseModel):
    user_id: str
    name: str
    email: str
    career_path: str
    avatar_data_uri: str | None = None
    resume: ResumeInfo | None = None

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "ProfileResponse":
        resume = None
        if profile.resume is not None:
            resume = ResumeInfo(
                filename=profile.resume.filename,
                media_type=profile.resume.media_type,
                size=len(profile.resume.content),
                fingerprint=profile.resume.fingerprint,
            )
        return cls(
            user_id=profile.user_id,
            name=profile.name,
            email=profile.email,
            career_path=profile.career_path,
            avatar_data_uri=profile.avatar_data_uri,
            resume=resume,
        )
