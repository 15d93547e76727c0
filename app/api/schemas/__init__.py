from app.api.schemas.career import CareerPathsResponse, ChannelsRequest, MentorRequest, MentorResponse
from app.api.schemas.interview import (
    CaptureRequest,
    DraftRequest,
    InterviewStateResponse,
    SessionConfigureRequest,
    SessionCreateRequest,
    TranscriptRequest,
)
from app.api.schemas.profile import ProfileResponse, ProfileUpdateRequest

__all__ = [
    "CaptureRequest",
    "CareerPathsResponse",
    "ChannelsRequest",
    "DraftRequest",
    "InterviewStateResponse",
    "MentorRequest",
    "MentorResponse",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "SessionConfigureRequest",
    "SessionCreateRequest",
    "TranscriptRequest",
]
