from typing import List, Literal

from pydantic import BaseModel, Field


class SessionCreateRequest(BaseModel):
    user_id: str = Field(min_length=1)
    session_id: str | None = None
    speech_supported: bool = True


class SessionConfigureRequest(BaseModel):
    domain: str
    mode: Literal["video", "audio", "text"] = "video"
    experience_level: Literal["entry", "mid", "senior"] = "entry"
    media_permitted: bool = True


class DraftRequest(BaseModel):
    text: str


class CaptureRequest(BaseModel):
    active: bool


class TranscriptRequest(BaseModel):
    text: str
    is_final: bool = False


class FeedbackResponse(BaseModel):
    clarity_note: str
    content_note: str
    score: float
    improvement_tips: str


class QAPairResponse(BaseModel):
    question: str
    answer: str
    feedback: FeedbackResponse


class InterviewStateResponse(BaseModel):
    session_id: str
    domain: str
    mode: str
    experience_level: str
    status: str
    current_question: str
    current_answer_draft: str
    is_capturing: bool = False
    speech_offered: bool = False
    preview: str | None = None
    capability_warnings: List[str] = []
    feedback: FeedbackResponse | None = None
    history: List[QAPairResponse] = []
