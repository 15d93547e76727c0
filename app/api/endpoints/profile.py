import logging

from fastapi import APIRouter, Depends, File, UploadFile

from app.api.deps import get_use_case
from app.api.schemas.profile import ProfileResponse, ProfileUpdateRequest
from app.core.use_case import CoachUseCase

logger = logging.getLogger(__name__)
profile_router = APIRouter()


@profile_router.get("/{user_id}", response_model=ProfileResponse)
async def get_profile(user_id: str, use_case: CoachUseCase = Depends(get_use_case)):
    return ProfileResponse.from_profile(use_case.get_profile(user_id))


@profile_router.put("/{user_id}", response_model=ProfileResponse)
async def update_profile(user_id: str, request: ProfileUpdateRequest,
                         use_case: CoachUseCase = Depends(get_use_case)):
    profile = use_case.update_profile(user_id, **request.model_dump())
    return ProfileResponse.from_profile(profile)


@profile_router.post("/{user_id}/resume", response_model=ProfileResponse)
async def upload_resume(user_id: str, file: UploadFile = File(...),
                        use_case: CoachUseCase = Depends(get_use_case)):
    content = await file.read()
    logger.info(f"Résumé upload for {user_id}: {file.filename} ({len(content)} bytes)")
    profile = use_case.upload_resume(user_id, content, file.filename or "resume", file.content_type)
    return ProfileResponse.from_profile(profile)


@profile_router.delete("/{user_id}/resume", response_model=ProfileResponse)
async def remove_resume(user_id: str, use_case: CoachUseCase = Depends(get_use_case)):
    return ProfileResponse.from_profile(use_case.remove_resume(user_id))
