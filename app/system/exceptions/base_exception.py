from fastapi import status

from app.core.errors import (
    CapabilityUnavailableError,
    CoachError,
    CritiqueError,
    EmptyAnswerError,
    InvalidConfigurationError,
    InvalidTransitionError,
    InvocationError,
    MissingResumeError,
    QuestionFetchError,
    SessionBusyError,
    SessionNotFoundError,
    UnsupportedDocumentError,
)


class BaseHTTPException(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    kind: str = "internal_error"

    def __init__(self, detail: str, status_code: int | None = None, kind: str | None = None):
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code
        if kind is not None:
            self.kind = kind


STATUS_BY_ERROR = {
    MissingResumeError: status.HTTP_409_CONFLICT,
    EmptyAnswerError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InvalidConfigurationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    UnsupportedDocumentError: status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    CapabilityUnavailableError: status.HTTP_409_CONFLICT,
    InvalidTransitionError: status.HTTP_409_CONFLICT,
    SessionBusyError: status.HTTP_429_TOO_MANY_REQUESTS,
    SessionNotFoundError: status.HTTP_404_NOT_FOUND,
    QuestionFetchError: status.HTTP_502_BAD_GATEWAY,
    CritiqueError: status.HTTP_502_BAD_GATEWAY,
    InvocationError: status.HTTP_502_BAD_GATEWAY,
}


def from_coach_error(error: CoachError) -> BaseHTTPException:
    status_code = status.HTTP_400_BAD_REQUEST
    for error_type, code in STATUS_BY_ERROR.items():
        if isinstance(error, error_type):
            status_code = code
            break
    return BaseHTTPException(error.message, status_code=status_code, kind=error.kind)
