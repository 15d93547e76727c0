from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.api import api_router
from app.api.deps import get_storage
from app.api.endpoints.interview import websocket_interview
from app.config.logging_config import setup_logging
from app.config.settings import settings
from app.core.errors import CoachError
from app.system.exceptions import BaseHTTPException, coach_exception_handler, common_exception_handler

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    yield
    storage = get_storage()
    for session_id in storage.ids():
        controller = storage.get(session_id)
        if controller is not None:
            controller.close()
        storage.delete(session_id)


def prepare_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="AI career coaching: résumé analysis, career paths, mock interviews and mentoring",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")
    app.add_exception_handler(BaseHTTPException, common_exception_handler)
    app.add_exception_handler(CoachError, coach_exception_handler)
    app.websocket("/api/v1/interview/ws")(websocket_interview)

    @app.get("/")
    async def root():
        return {"message": f"{settings.APP_NAME} backend is running"}

    return app


def start_service() -> None:
    uvicorn.run(
        prepare_app(),
        host=settings.APP_ADDRESS,
        port=settings.APP_PORT,
    )


app = prepare_app()

if __name__ == "__main__":
    start_service()
