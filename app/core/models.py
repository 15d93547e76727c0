from dataclasses import dataclass, field
from enum import Enum
from typing import List, Literal

from app.core.cache import fingerprint


class InterviewMode(str, Enum):
    VIDEO = "video"
    AUDIO = "audio"
    TEXT = "text"

    @property
    def offers_speech(self) -> bool:
        return self is not InterviewMode.TEXT

    @property
    def preview(self) -> str | None:
        return {"video": "camera", "audio": "microphone"}.get(self.value)


class SessionStatus(str, Enum):
    CONFIGURING = "configuring"
    AWAITING_QUESTION = "awaiting_question"
    AWAITING_ANSWER = "awaiting_answer"
    AWAITING_FEEDBACK = "awaiting_feedback"
    SHOWING_FEEDBACK = "showing_feedback"


PENDING_STATES = frozenset({
    SessionStatus.AWAITING_QUESTION,
    SessionStatus.AWAITING_FEEDBACK,
})

ExperienceLevel = Literal["entry", "mid", "senior"]


@dataclass(frozen=True)
class Feedback:
    clarity_note: str
    content_note: str
    score: float
    improvement_tips: str


@dataclass(frozen=True)
class QAPair:
    question: str
    answer: str
    feedback: Feedback


@dataclass
class InterviewSession:
    domain: str = ""
    mode: InterviewMode = InterviewMode.TEXT
    experience_level: ExperienceLevel = "entry"
    status: SessionStatus = SessionStatus.CONFIGURING
    current_question: str = ""
    current_answer_draft: str = ""
    history: List[QAPair] = field(default_factory=list)

    @property
    def last_feedback(self) -> Feedback | None:
        if self.status is SessionStatus.SHOWING_FEEDBACK and self.history:
            return self.history[-1].feedback
        return None


@dataclass(frozen=True)
class ResumeReference:
    """Uploaded résumé document, held as raw bytes plus its media type."""

    content: bytes
    media_type: str
    filename: str = ""

    @property
    def fingerprint(self) -> str:
        return fingerprint(self.content)


@dataclass
class UserProfile:
    user_id: str
    name: str = ""
    email: str = ""
    avatar_data_uri: str | None = None
    career_path: str = ""
    resume: ResumeReference | None = None
