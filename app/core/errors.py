from enum import Enum


class InvocationCause(str, Enum):
    INVALID_INPUT = "invalid_input"
    TRANSPORT = "transport"
    MALFORMED_RESPONSE = "malformed_response"
    SCHEMA_VIOLATION = "schema_violation"
    UNKNOWN_OPERATION = "unknown_operation"


class CoachError(Exception):
    """Base class for every error the coaching core reports to callers."""

    kind = "coach_error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__doc__ or self.kind)
        self.message = message or (self.__class__.__doc__ or self.kind).strip()


class InvocationError(CoachError):
    """A flow call failed before producing a valid structured result."""

    kind = "invocation_error"

    def __init__(self, operation: str, cause: InvocationCause, detail: str = ""):
        self.operation = operation
        self.cause = cause
        self.detail = detail
        message = f"{operation} failed ({cause.value})"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class MissingResumeError(CoachError):
    """No résumé has been uploaded for this user."""

    kind = "missing_resume"


class QuestionFetchError(CoachError):
    """Could not generate an interview question. Please try again."""

    kind = "question_fetch_failed"

    def __init__(self, cause: InvocationError | None = None):
        super().__init__()
        self.cause = cause


class CritiqueError(CoachError):
    """Could not analyze your answer. Please try again."""

    kind = "critique_failed"

    def __init__(self, cause: InvocationError | None = None):
        super().__init__()
        self.cause = cause


class EmptyAnswerError(CoachError):
    """Please provide an answer."""

    kind = "empty_answer"


class CapabilityUnavailableError(CoachError):
    """A media or speech capability is not available on this client."""

    kind = "capability_unavailable"

    def __init__(self, capability: str, message: str = ""):
        self.capability = capability
        super().__init__(message or f"{capability} is not available")


class InvalidConfigurationError(CoachError):
    """Please enter an interview domain."""

    kind = "invalid_configuration"


class InvalidTransitionError(CoachError):
    kind = "invalid_transition"

    def __init__(self, action: str, status: str):
        self.action = action
        self.status = status
        super().__init__(f"Cannot {action} while session is {status}")


class SessionBusyError(CoachError):
    """A request for this session is already in progress."""

    kind = "session_busy"


class SessionNotFoundError(CoachError):
    kind = "session_not_found"

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session {session_id} not found")


class UnsupportedDocumentError(CoachError):
    kind = "unsupported_document"

    def __init__(self, media_type: str, message: str = ""):
        self.media_type = media_type
        super().__init__(message or f"Unsupported document type: {media_type}")
