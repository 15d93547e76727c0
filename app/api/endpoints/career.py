import logging

from fastapi import APIRouter, Depends

from app.api.deps import get_use_case
from app.api.schemas.career import CareerPathsResponse, ChannelsRequest, MentorRequest, MentorResponse
from app.core.flow_schemas import AnalyzeResumeOutput, JobTrendsOutput, RecommendChannelsOutput
from app.core.use_case import CoachUseCase

logger = logging.getLogger(__name__)
career_router = APIRouter()


@career_router.post("/channels", response_model=RecommendChannelsOutput)
async def recommend_channels(request: ChannelsRequest, use_case: CoachUseCase = Depends(get_use_case)):
    return await use_case.recommend_channels(request.topic)


@career_router.post("/{user_id}/resume-analysis", response_model=AnalyzeResumeOutput)
async def analyze_resume(user_id: str, use_case: CoachUseCase = Depends(get_use_case)):
    return await use_case.analyze_resume(user_id)


@career_router.post("/{user_id}/career-paths", response_model=CareerPathsResponse)
async def career_paths(user_id: str, use_case: CoachUseCase = Depends(get_use_case)):
    paths = await use_case.career_paths(user_id)
    if paths is None:
        logger.info(f"No career paths for {user_id}: résumé has no extractable skills")
        return CareerPathsResponse(message="No skills were found in the résumé.")
    return CareerPathsResponse(career_paths=paths)


@career_router.get("/{user_id}/trends", response_model=JobTrendsOutput)
async def job_trends(user_id: str, use_case: CoachUseCase = Depends(get_use_case)):
    return await use_case.job_trends(user_id)


@career_router.get("/{user_id}/mentor", response_model=MentorResponse)
async def mentor_history(user_id: str, use_case: CoachUseCase = Depends(get_use_case)):
    return MentorResponse(history=use_case.mentor_history(user_id))


@career_router.post("/{user_id}/mentor", response_model=MentorResponse)
async def mentor_chat(user_id: str, request: MentorRequest, use_case: CoachUseCase = Depends(get_use_case)):
    reply = await use_case.mentor_chat(user_id, request.query)
    return MentorResponse(reply=reply, history=use_case.mentor_history(user_id))


@career_router.delete("/{user_id}/mentor", status_code=204)
async def clear_mentor(user_id: str, use_case: CoachUseCase = Depends(get_use_case)):
    use_case.clear_mentor(user_id)
