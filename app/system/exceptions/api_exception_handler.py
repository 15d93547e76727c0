from fastapi import Request
from fastapi.responses import JSONResponse

from app.core.errors import CoachError
from app.system.exceptions.base_exception import BaseHTTPException, from_coach_error


async def common_exception_handler(request: Request, exc: BaseHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "kind": exc.kind, "path": str(request.url)}
    )


async def coach_exception_handler(request: Request, exc: CoachError) -> JSONResponse:
    return await common_exception_handler(request, from_coach_error(exc))
