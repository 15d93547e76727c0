from fastapi import APIRouter

from app.api.endpoints.career import career_router
from app.api.endpoints.interview import interview_router
from app.api.endpoints.profile import profile_router

api_router = APIRouter()

api_router.include_router(interview_router, prefix="/interview", tags=["interview"])
api_router.include_router(profile_router, prefix="/profile", tags=["profile"])
api_router.include_router(career_router, prefix="/career", tags=["career"])
