from app.config.settings import settings
from app.core.engine import CoachEngine
from app.core.interview import InterviewSessionController
from app.core.use_case import CoachUseCase
from app.storages.profile_storage import ProfileStorage
from app.storages.session_storage import SessionStorage

_engine: CoachEngine | None = None
_storage: SessionStorage[InterviewSessionController] | None = None
_profiles: ProfileStorage | None = None
_use_case: CoachUseCase | None = None


def get_engine() -> CoachEngine:
    global _engine
    if _engine is None:
        _engine = CoachEngine()
    return _engine


def get_storage() -> SessionStorage[InterviewSessionController]:
    global _storage
    if _storage is None:
        _storage = SessionStorage()
    return _storage


def get_profiles() -> ProfileStorage:
    global _profiles
    if _profiles is None:
        _profiles = ProfileStorage()
    return _profiles


def get_use_case() -> CoachUseCase:
    global _use_case
    if _use_case is None:
        log_dir = settings.LOG_DIR if settings.SESSION_LOGS_ENABLED else None
        _use_case = CoachUseCase(get_engine(), get_storage(), get_profiles(), log_dir=log_dir)
    return _use_case


def set_use_case(use_case: CoachUseCase | None) -> None:
    global _use_case
    _use_case = use_case
