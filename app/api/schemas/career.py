from typing import List

from pydantic import BaseModel, Field

from app.core.flow_schemas import MentorGuidanceOutput, MentorMessage, RecommendCareerPathsOutput


class MentorRequest(BaseModel):
    query: str = Field(min_length=1)


class MentorResponse(BaseModel):
    reply: MentorGuidanceOutput | None = None
    history: List[MentorMessage]


class ChannelsRequest(BaseModel):
    topic: str = Field(min_length=1)


class CareerPathsResponse(BaseModel):
    career_paths: RecommendCareerPathsOutput | None = None
    message: str | None = None
