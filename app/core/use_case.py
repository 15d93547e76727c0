import uuid
from typing import Any, Dict, List

from app.config.settings import settings
from app.core.cache import GLOBAL_SCOPE, ResultCache
from app.core.capabilities import (
    BrowserMediaPreview,
    BrowserSpeechCapture,
    MediaPreview,
    NoMediaPreview,
    TranscriptIncrement,
)
from app.core.career_graph import CareerInsightsPipeline
from app.core.engine import CoachEngine
from app.core.errors import MissingResumeError, SessionNotFoundError, UnsupportedDocumentError
from app.core.flow_schemas import (
    AnalyzeResumeOutput,
    JobTrendsOutput,
    MentorGuidanceOutput,
    MentorMessage,
    RecommendCareerPathsOutput,
    RecommendChannelsOutput,
)
from app.core.interview import InterviewSessionController
from app.core.models import InterviewMode, ResumeReference, UserProfile
from app.storages.profile_storage import ProfileStorage
from app.storages.session_storage import SessionStorage
from app.utils.documents import extract_text, guess_media_type
from app.utils.logger import CoachLogger

ANALYSIS_KEY = "resume_analysis"
CAREER_PATHS_KEY = "career_paths"
JOB_TRENDS_KEY = "job_trends"


class CoachUseCase:
    def __init__(self, engine: CoachEngine, storage: SessionStorage[InterviewSessionController],
                 profiles: ProfileStorage, log_dir: str | None = None):
        self.engine = engine
        self.storage = storage
        self.profiles = profiles
        self.log_dir = log_dir
        self.logger = getattr(engine, "logger", None) or CoachLogger()
        self.career_pipeline = CareerInsightsPipeline(engine, self.logger)
        self._caches: Dict[str, ResultCache] = {}
        self._mentor_history: Dict[str, List[MentorMessage]] = {}

    def cache_for(self, user_id: str) -> ResultCache:
        if user_id not in self._caches:
            self._caches[user_id] = ResultCache()
        return self._caches[user_id]

    # Profile

    def get_profile(self, user_id: str) -> UserProfile:
        return self.profiles.get(user_id)

    def update_profile(self, user_id: str, **fields: Any) -> UserProfile:
        profile = self.profiles.update(user_id, **fields)
        self.logger.log("Profile", f"Profile updated for {user_id}", {"fields": sorted(k for k, v in fields.items() if v is not None)})
        return profile

    def upload_resume(self, user_id: str, content: bytes, filename: str,
                      media_type: str | None = None) -> UserProfile:
        if len(content) > settings.MAX_RESUME_BYTES:
            raise UnsupportedDocumentError(media_type or "unknown", "Résumé file is too large")
        resume = ResumeReference(content=content, media_type=guess_media_type(filename, media_type), filename=filename)
        extract_text(resume)

        dropped = self.cache_for(user_id).invalidate()
        profile = self.profiles.set_resume(user_id, resume)
        self.logger.log("Profile", f"Résumé uploaded for {user_id}", {
            "filename": filename,
            "fingerprint": resume.fingerprint[:12],
            "invalidated": dropped,
        })
        return profile

    def remove_resume(self, user_id: str) -> UserProfile:
        self.cache_for(user_id).invalidate()
        self.logger.log("Profile", f"Résumé removed for {user_id}")
        return self.profiles.set_resume(user_id, None)

    def _resume_text(self, user_id: str) -> tuple[ResumeReference, str]:
        resume = self.profiles.get_resume_reference(user_id)
        if resume is None:
            raise MissingResumeError()
        return resume, extract_text(resume)

    def _is_current(self, user_id: str, resume: ResumeReference) -> bool:
        current = self.profiles.get_resume_reference(user_id)
        return current is not None and current.fingerprint == resume.fingerprint

    # Career insights

    async def analyze_resume(self, user_id: str) -> AnalyzeResumeOutput:
        resume, text = self._resume_text(user_id)
        cache = self.cache_for(user_id)
        cached = cache.get(resume.fingerprint, ANALYSIS_KEY)
        if cached is not None:
            return cached
        analysis = await self.engine.analyze_resume(text)
        if self._is_current(user_id, resume):
            cache.put(resume.fingerprint, ANALYSIS_KEY, analysis)
        return analysis

    async def career_paths(self, user_id: str) -> RecommendCareerPathsOutput | None:
        resume, text = self._resume_text(user_id)
        cache = self.cache_for(user_id)
        cached = cache.get(resume.fingerprint, CAREER_PATHS_KEY)
        if cached is not None:
            return cached

        result = await self.career_pipeline.run(text)
        if not self._is_current(user_id, resume):
            self.logger.log("Career", f"Résumé for {user_id} changed during analysis, result not cached")
            return result.get("career_paths")
        cache.put(resume.fingerprint, ANALYSIS_KEY, result["analysis"])
        if result.get("career_paths") is not None:
            cache.put(resume.fingerprint, CAREER_PATHS_KEY, result["career_paths"])
        return result.get("career_paths")

    async def job_trends(self, user_id: str) -> JobTrendsOutput:
        cache = self.cache_for(user_id)
        cached = cache.get(GLOBAL_SCOPE, JOB_TRENDS_KEY)
        if cached is not None:
            return cached
        trends = await self.engine.get_job_trends()
        cache.put(GLOBAL_SCOPE, JOB_TRENDS_KEY, trends)
        return trends

    async def recommend_channels(self, topic: str) -> RecommendChannelsOutput:
        return await self.engine.recommend_youtube_channels(topic)

    # Mentor chat

    def mentor_history(self, user_id: str) -> List[MentorMessage]:
        return list(self._mentor_history.get(user_id, []))

    async def mentor_chat(self, user_id: str, query: str) -> MentorGuidanceOutput:
        history = self._mentor_history.setdefault(user_id, [])
        resume_text = None
        if self.profiles.get_resume_reference(user_id) is not None:
            _, resume_text = self._resume_text(user_id)

        reply = await self.engine.mentor_guidance(query, history, resume_text)
        history.append(MentorMessage(role="user", content=query))
        history.append(MentorMessage(role="model", content=reply.response))
        self.logger.log("Mentor", f"Mentor reply for {user_id}", {
            "turns": len(history),
            "with_resume": resume_text is not None,
        })
        return reply

    def clear_mentor(self, user_id: str) -> None:
        self._mentor_history.pop(user_id, None)

    # Interview sessions

    def create_session(self, user_id: str, speech_supported: bool = True,
                       session_id: str | None = None) -> str:
        session_id = session_id or f"session_{uuid.uuid4().hex[:8]}"
        existing = self.storage.get(session_id)
        if existing is not None:
            existing.close()

        session_logger = CoachLogger(log_dir=self.log_dir, session_id=session_id)
        controller = InterviewSessionController(
            flows=self.engine,
            profiles=self.profiles,
            user_id=user_id,
            speech=BrowserSpeechCapture(available=speech_supported),
            logger=session_logger,
        )
        self.storage.save(session_id, controller)
        session_logger.log("Interview", f"Session created for {user_id}")
        return session_id

    def get_session(self, session_id: str) -> InterviewSessionController:
        controller = self.storage.get(session_id)
        if controller is None:
            raise SessionNotFoundError(session_id)
        return controller

    async def configure_session(self, session_id: str, domain: str, mode: str,
                                experience_level: str = "entry",
                                media_permitted: bool = True) -> InterviewSessionController:
        controller = self.get_session(session_id)
        await controller.configure(domain, mode, experience_level, preview=self._build_preview(mode, media_permitted))
        return controller

    @staticmethod
    def _build_preview(mode: str, permitted: bool) -> MediaPreview:
        kind = InterviewMode(mode).preview
        if kind is None:
            return NoMediaPreview()
        return BrowserMediaPreview(kind, permitted=permitted)

    def update_draft(self, session_id: str, text: str) -> InterviewSessionController:
        controller = self.get_session(session_id)
        controller.update_draft(text)
        return controller

    def set_capture(self, session_id: str, active: bool) -> InterviewSessionController:
        controller = self.get_session(session_id)
        if active:
            controller.start_capture()
        else:
            controller.stop_capture()
        return controller

    def push_transcript(self, session_id: str, text: str, is_final: bool) -> InterviewSessionController:
        controller = self.get_session(session_id)
        speech = controller.speech
        if isinstance(speech, BrowserSpeechCapture):
            speech.push(TranscriptIncrement(text=text, is_final=is_final))
        return controller

    async def submit_answer(self, session_id: str) -> InterviewSessionController:
        controller = self.get_session(session_id)
        await controller.submit_answer()
        return controller

    async def next_question(self, session_id: str) -> InterviewSessionController:
        controller = self.get_session(session_id)
        await controller.next_question()
        return controller

    def close_session(self, session_id: str) -> None:
        controller = self.storage.get(session_id)
        if controller is not None:
            controller.close()
        self.storage.delete(session_id)
