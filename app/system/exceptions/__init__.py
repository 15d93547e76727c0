from app.system.exceptions.api_exception_handler import coach_exception_handler, common_exception_handler
from app.system.exceptions.base_exception import BaseHTTPException, from_coach_error

__all__ = [
    "BaseHTTPException",
    "coach_exception_handler",
    "common_exception_handler",
    "from_coach_error",
]
