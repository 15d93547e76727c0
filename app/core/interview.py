from typing import Any, Callable, Dict, List, Protocol

from app.core.capabilities import (
    MediaPreview,
    NoMediaPreview,
    SpeechCapture,
    TranscriptIncrement,
    UnavailableSpeechCapture,
)
from app.core.errors import (
    CapabilityUnavailableError,
    CritiqueError,
    EmptyAnswerError,
    InvalidConfigurationError,
    InvalidTransitionError,
    InvocationError,
    MissingResumeError,
    QuestionFetchError,
    SessionBusyError,
)
from app.core.flow_schemas import CritiqueAnswerOutput, GenerateQuestionOutput
from app.core.models import (
    PENDING_STATES,
    ExperienceLevel,
    Feedback,
    InterviewMode,
    InterviewSession,
    QAPair,
    ResumeReference,
    SessionStatus,
)
from app.utils.documents import extract_text
from app.utils.logger import CoachLogger


class InterviewFlows(Protocol):
    async def generate_interview_question(self, domain: str, resume_text: str,
                                          experience_level: str = "entry",
                                          logger: CoachLogger | None = None) -> GenerateQuestionOutput: ...

    async def critique_answer(self, question: str, answer: str,
                              logger: CoachLogger | None = None) -> CritiqueAnswerOutput: ...


class ResumeSource(Protocol):
    def get_resume_reference(self, user_id: str) -> ResumeReference | None: ...


class InterviewSessionController:
    """Drives one mock-interview session from configuration to feedback.

    The controller is the only writer of ``session.history``. Every AI call
    puts the session into a pending status first, so a second trigger that
    arrives while the call is in flight is rejected with ``SessionBusyError``.
    """

    def __init__(
        self,
        flows: InterviewFlows,
        profiles: ResumeSource,
        user_id: str,
        speech: SpeechCapture | None = None,
        preview: MediaPreview | None = None,
        logger: CoachLogger | None = None,
        text_extractor: Callable[[ResumeReference], str] = extract_text,
    ):
        self.flows = flows
        self.profiles = profiles
        self.user_id = user_id
        self.speech = speech if speech is not None else UnavailableSpeechCapture()
        self.preview = preview if preview is not None else NoMediaPreview()
        self.logger = logger or CoachLogger()
        self.text_extractor = text_extractor

        self.session = InterviewSession()
        self.capability_warnings: List[str] = []
        self._resume_text = ""
        self._committed = ""
        self._interim = ""
        self._closed = False

        self.speech.subscribe(self.ingest_transcript)

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def is_capturing(self) -> bool:
        return self.speech.is_active

    @property
    def speech_offered(self) -> bool:
        return self.session.mode.offers_speech and self.speech.is_available

    def _set_status(self, status: SessionStatus, reason: str = "") -> None:
        previous = self.session.status
        self.session.status = status
        self.logger.log_state_transition(previous.value, status.value, reason)

    def _require(self, action: str, *allowed: SessionStatus) -> None:
        if self._closed:
            raise InvalidTransitionError(action, "closed")
        if self.session.status in PENDING_STATES:
            raise SessionBusyError()
        if self.session.status not in allowed:
            raise InvalidTransitionError(action, self.session.status.value)

    async def configure(self, domain: str, mode: InterviewMode | str,
                        experience_level: ExperienceLevel = "entry",
                        preview: MediaPreview | None = None) -> InterviewSession:
        self._require("configure", SessionStatus.CONFIGURING)
        domain = (domain or "").strip()
        if not domain:
            raise InvalidConfigurationError()
        mode = InterviewMode(mode)

        resume = self.profiles.get_resume_reference(self.user_id)
        if resume is None:
            self.logger.warning("Interview", f"No résumé on file for user {self.user_id}")
            raise MissingResumeError()
        self._resume_text = self.text_extractor(resume)

        self.session.domain = domain
        self.session.mode = mode
        self.session.experience_level = experience_level
        self._open_preview(preview)
        self.logger.log("Interview", f"Configured: domain={domain}, mode={mode.value}, level={experience_level}")

        await self._fetch_question("configuration submitted")
        return self.session

    async def next_question(self) -> InterviewSession:
        self._require("request next question", SessionStatus.SHOWING_FEEDBACK)
        await self._fetch_question("next question requested")
        return self.session

    async def _fetch_question(self, reason: str) -> None:
        self._set_status(SessionStatus.AWAITING_QUESTION, reason)
        self.session.current_question = ""
        self._reset_draft()

        try:
            result = await self.flows.generate_interview_question(
                self.session.domain, self._resume_text, self.session.experience_level, logger=self.logger
            )
        except InvocationError as e:
            if self._closed:
                return
            self.session.current_question = ""
            self._set_status(SessionStatus.CONFIGURING, f"question fetch failed: {e.cause.value}")
            raise QuestionFetchError(e) from e

        if self._closed:
            self.logger.log("Interview", "Discarding question received after session close")
            return
        self.session.current_question = result.question
        self._set_status(SessionStatus.AWAITING_ANSWER, "question received")

    def update_draft(self, text: str) -> InterviewSession:
        self._require("edit the answer", SessionStatus.AWAITING_ANSWER)
        self._committed = text
        self._interim = ""
        self._sync_draft()
        return self.session

    def start_capture(self) -> InterviewSession:
        self._require("start recording", SessionStatus.AWAITING_ANSWER)
        if not self.session.mode.offers_speech:
            raise CapabilityUnavailableError("speech", "Voice answers are not offered in text mode")
        if self.speech.is_active:
            return self.session
        try:
            self.speech.start()
        except CapabilityUnavailableError as e:
            self._warn(e)
            raise
        self._interim = ""
        self.logger.log("Speech", "Capture started")
        return self.session

    def stop_capture(self) -> InterviewSession:
        if self._closed:
            raise InvalidTransitionError("stop recording", "closed")
        self._finalize_capture()
        return self.session

    def toggle_capture(self) -> InterviewSession:
        if self.speech.is_active:
            return self.stop_capture()
        return self.start_capture()

    def _finalize_capture(self) -> None:
        if not self.speech.is_active:
            return
        self.speech.stop()
        self._committed = self._join(self._committed, self._interim)
        self._interim = ""
        self._sync_draft()
        self.logger.log("Speech", "Capture stopped", {"draft_length": len(self.session.current_answer_draft)})

    def ingest_transcript(self, increment: TranscriptIncrement) -> bool:
        if self._closed or not self.speech.is_active:
            return False
        if self.session.status is not SessionStatus.AWAITING_ANSWER:
            return False

        if increment.is_final:
            self._committed = self._join(self._committed, increment.text)
            self._interim = ""
        else:
            self._interim = increment.text
        self._sync_draft()
        return True

    async def submit_answer(self) -> InterviewSession:
        self._require("submit an answer", SessionStatus.AWAITING_ANSWER)
        self._finalize_capture()

        answer = self.session.current_answer_draft.strip()
        if not answer:
            raise EmptyAnswerError()
        question = self.session.current_question

        self._set_status(SessionStatus.AWAITING_FEEDBACK, "answer submitted")
        try:
            result = await self.flows.critique_answer(question, answer, logger=self.logger)
        except InvocationError as e:
            if self._closed:
                return self.session
            self._set_status(SessionStatus.AWAITING_ANSWER, f"critique failed: {e.cause.value}")
            raise CritiqueError(e) from e

        if self._closed:
            self.logger.log("Interview", "Discarding feedback received after session close")
            return self.session

        feedback = Feedback(
            clarity_note=result.analysis.clarity,
            content_note=result.analysis.content,
            score=result.score,
            improvement_tips=result.improvement_tips,
        )
        self.session.history.append(QAPair(question=question, answer=answer, feedback=feedback))
        self._set_status(SessionStatus.SHOWING_FEEDBACK, f"feedback received, score={result.score}")
        return self.session

    def close(self) -> None:
        if self._closed:
            return
        if self.speech.is_active:
            self.speech.stop()
        self.preview.close()
        self._closed = True
        self.logger.log("Interview", "Session closed", {"answered": len(self.session.history)})

    def _open_preview(self, preview: MediaPreview | None) -> None:
        self.preview.close()
        if preview is not None:
            self.preview = preview
        if self.session.mode.preview is None or self.preview.kind != self.session.mode.preview:
            return
        try:
            self.preview.open()
        except CapabilityUnavailableError as e:
            self._warn(e)

    def _warn(self, error: CapabilityUnavailableError) -> None:
        if error.message not in self.capability_warnings:
            self.capability_warnings.append(error.message)
        self.logger.warning("Media" if error.capability != "speech" else "Speech", error.message)

    def _reset_draft(self) -> None:
        self._committed = ""
        self._interim = ""
        self._sync_draft()

    def _sync_draft(self) -> None:
        self.session.current_answer_draft = self._join(self._committed, self._interim)

    @staticmethod
    def _join(base: str, addition: str) -> str:
        if not base or not addition:
            return base + addition
        if base[-1].isspace() or addition[0].isspace():
            return base + addition
        return f"{base} {addition}"

    def snapshot(self) -> Dict[str, Any]:
        session = self.session
        feedback = session.last_feedback
        return {
            "domain": session.domain,
            "mode": session.mode.value,
            "experience_level": session.experience_level,
            "status": session.status.value,
            "current_question": session.current_question,
            "current_answer_draft": session.current_answer_draft,
            "is_capturing": self.is_capturing,
            "speech_offered": self.speech_offered,
            "preview": self.preview.kind if self.preview.is_open else None,
            "capability_warnings": list(self.capability_warnings),
            "feedback": _feedback_dict(feedback) if feedback else None,
            "history": [
                {"question": qa.question, "answer": qa.answer, "feedback": _feedback_dict(qa.feedback)}
                for qa in session.history
            ],
        }


def _feedback_dict(feedback: Feedback) -> Dict[str, Any]:
    return {
        "clarity_note": feedback.clarity_note,
        "content_note": feedback.content_note,
        "score": feedback.score,
        "improvement_tips": feedback.improvement_tips,
    }
