import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from app.api.deps import get_use_case
from app.api.schemas.interview import (
    CaptureRequest,
    DraftRequest,
    InterviewStateResponse,
    SessionConfigureRequest,
    SessionCreateRequest,
    TranscriptRequest,
)
from app.core.errors import CoachError
from app.core.interview import InterviewSessionController
from app.core.use_case import CoachUseCase

logger = logging.getLogger(__name__)
interview_router = APIRouter()


def _state(session_id: str, controller: InterviewSessionController) -> InterviewStateResponse:
    return InterviewStateResponse(session_id=session_id, **controller.snapshot())


@interview_router.post("/sessions", response_model=InterviewStateResponse, status_code=201)
async def create_session(request: SessionCreateRequest, use_case: CoachUseCase = Depends(get_use_case)):
    session_id = use_case.create_session(request.user_id, request.speech_supported, request.session_id)
    logger.info(f"Interview session {session_id} created for {request.user_id}")
    return _state(session_id, use_case.get_session(session_id))


@interview_router.get("/sessions/{session_id}", response_model=InterviewStateResponse)
async def get_session(session_id: str, use_case: CoachUseCase = Depends(get_use_case)):
    return _state(session_id, use_case.get_session(session_id))


@interview_router.post("/sessions/{session_id}/configure", response_model=InterviewStateResponse)
async def configure_session(session_id: str, request: SessionConfigureRequest,
                            use_case: CoachUseCase = Depends(get_use_case)):
    controller = await use_case.configure_session(
        session_id, request.domain, request.mode, request.experience_level, request.media_permitted
    )
    return _state(session_id, controller)


@interview_router.put("/sessions/{session_id}/draft", response_model=InterviewStateResponse)
async def update_draft(session_id: str, request: DraftRequest, use_case: CoachUseCase = Depends(get_use_case)):
    return _state(session_id, use_case.update_draft(session_id, request.text))


@interview_router.post("/sessions/{session_id}/capture", response_model=InterviewStateResponse)
async def set_capture(session_id: str, request: CaptureRequest, use_case: CoachUseCase = Depends(get_use_case)):
    return _state(session_id, use_case.set_capture(session_id, request.active))


@interview_router.post("/sessions/{session_id}/transcript", response_model=InterviewStateResponse)
async def push_transcript(session_id: str, request: TranscriptRequest,
                          use_case: CoachUseCase = Depends(get_use_case)):
    return _state(session_id, use_case.push_transcript(session_id, request.text, request.is_final))


@interview_router.post("/sessions/{session_id}/answer", response_model=InterviewStateResponse)
async def submit_answer(session_id: str, use_case: CoachUseCase = Depends(get_use_case)):
    return _state(session_id, await use_case.submit_answer(session_id))


@interview_router.post("/sessions/{session_id}/next", response_model=InterviewStateResponse)
async def next_question(session_id: str, use_case: CoachUseCase = Depends(get_use_case)):
    return _state(session_id, await use_case.next_question(session_id))


@interview_router.delete("/sessions/{session_id}", status_code=204)
async def close_session(session_id: str, use_case: CoachUseCase = Depends(get_use_case)):
    use_case.close_session(session_id)


async def _send(websocket: WebSocket, payload: Dict[str, Any]) -> None:
    await websocket.send_text(json.dumps(payload, ensure_ascii=False))


async def _send_state(websocket: WebSocket, session_id: str, use_case: CoachUseCase) -> None:
    controller = use_case.get_session(session_id)
    await _send(websocket, {"type": "state", "session_id": session_id, "state": controller.snapshot()})


async def _send_bad_request(websocket: WebSocket, message: str) -> None:
    await _send(websocket, {"type": "notification", "level": "error", "kind": "bad_request", "message": message})


async def _handle_action(websocket: WebSocket, use_case: CoachUseCase, session_id: str | None,
                         message: Dict[str, Any]) -> str | None:
    action = message.get("action")

    if session_id is None:
        session_id = message.get("session_id")
    if not session_id:
        await _send(websocket, {
            "type": "notification",
            "level": "error",
            "kind": "session_not_found",
            "message": "Session not found. Start a new interview.",
        })
        return None

    if action == "configure":
        request = SessionConfigureRequest.model_validate(message)
        await use_case.configure_session(
            session_id, request.domain, request.mode, request.experience_level, request.media_permitted
        )
    elif action == "draft":
        use_case.update_draft(session_id, DraftRequest.model_validate(message).text)
    elif action == "capture":
        use_case.set_capture(session_id, CaptureRequest.model_validate(message).active)
    elif action == "transcript":
        request = TranscriptRequest.model_validate(message)
        use_case.push_transcript(session_id, request.text, request.is_final)
    elif action == "submit":
        await _send(websocket, {"type": "status", "status": "processing", "message": "Analyzing your answer..."})
        await use_case.submit_answer(session_id)
    elif action == "next":
        await _send(websocket, {"type": "status", "status": "processing", "message": "Preparing the next question..."})
        await use_case.next_question(session_id)
    elif action == "close":
        use_case.close_session(session_id)
        await _send(websocket, {"type": "closed", "session_id": session_id})
        return None
    elif action != "get_state":
        await _send(websocket, {
            "type": "notification",
            "level": "error",
            "kind": "unknown_action",
            "message": f"Unknown action: {action}",
        })
        return session_id

    await _send_state(websocket, session_id, use_case)
    return session_id


async def websocket_interview(websocket: WebSocket):
    logger.info(f"WebSocket connection attempt from {websocket.client}")
    await websocket.accept()

    session_id = None
    use_case = get_use_case()

    try:
        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
                if not isinstance(message, dict):
                    raise ValueError("message must be an object")
            except ValueError:
                await _send_bad_request(websocket, "Messages must be JSON objects")
                continue

            try:
                if message.get("action") == "start":
                    request = SessionCreateRequest.model_validate(message)
                    if session_id:
                        use_case.close_session(session_id)
                    session_id = use_case.create_session(
                        request.user_id, request.speech_supported, request.session_id
                    )
                    await _send(websocket, {"type": "session_id", "session_id": session_id})
                    message = {**message, "action": "configure" if message.get("domain") else "get_state"}
                session_id = await _handle_action(websocket, use_case, session_id, message)
            except ValidationError as e:
                logger.info(f"Session {session_id}: rejected {message.get('action')} message: {e.error_count()} errors")
                await _send_bad_request(websocket, f"Invalid {message.get('action')} message: {_first_error(e)}")
            except CoachError as e:
                logger.info(f"Session {session_id}: {e.kind}: {e.message}")
                await _send(websocket, {
                    "type": "notification",
                    "level": "warning" if e.kind == "capability_unavailable" else "error",
                    "kind": e.kind,
                    "message": e.message,
                })
                if session_id and use_case.storage.exists(session_id):
                    await _send_state(websocket, session_id, use_case)

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected for session {session_id}")
    finally:
        if session_id:
            logger.info(f"Closing session {session_id}")
            use_case.close_session(session_id)


def _first_error(error: ValidationError) -> str:
    detail = error.errors(include_url=False)[0]
    location = ".".join(str(part) for part in detail["loc"])
    return f"{location}: {detail['msg']}" if location else detail["msg"]
