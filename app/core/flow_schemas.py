from typing import List, Literal

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FlowModel(BaseModel):
    """Flow payloads travel as camelCase JSON, matching the prompt field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class GenerateQuestionInput(FlowModel):
    domain: str = Field(min_length=1)
    experience_level: Literal["entry", "mid", "senior"] = "entry"
    resume_text: str = Field(min_length=1)


class GenerateQuestionOutput(FlowModel):
    question: str = Field(min_length=1)


class CritiqueAnswerInput(FlowModel):
    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)


class AnswerAnalysis(FlowModel):
    clarity: str
    content: str


class CritiqueAnswerOutput(FlowModel):
    analysis: AnswerAnalysis
    score: float = Field(ge=0, le=100)
    improvement_tips: str


class AnalyzeResumeInput(FlowModel):
    resume_text: str = Field(min_length=1)


class Skill(FlowModel):
    name: str
    category: str
    proficiency: Literal["Beginner", "Intermediate", "Advanced", "Expert"]


class MarketSkill(FlowModel):
    name: str
    in_resume: bool


class AnalyzeResumeOutput(FlowModel):
    skill_summary: str
    improvement_insights: List[str]
    extracted_skills: List[Skill]
    market_skills_comparison: List[MarketSkill]


class RecommendCareerPathsInput(FlowModel):
    skills: List[str] = Field(min_length=1)


class CareerPath(FlowModel):
    title: str
    description: str
    demand_score: float = Field(ge=1, le=10)
    salary_range: str
    skills: List[str]
    progress: float = Field(ge=0, le=100)
    roadmap_url: AnyHttpUrl


class RecommendCareerPathsOutput(FlowModel):
    career_paths: List[CareerPath] = Field(min_length=3, max_length=3)


class JobTrendsInput(FlowModel):
    pass


class SalaryPoint(FlowModel):
    month: str
    software_engineer: float = Field(alias="Software Engineer")
    data_scientist: float = Field(alias="Data Scientist")
    product_manager: float = Field(alias="Product Manager")


class RoleDemand(FlowModel):
    role: str
    demand: float = Field(ge=1, le=100)


class JobTrendsOutput(FlowModel):
    salary_trends: List[SalaryPoint] = Field(min_length=12, max_length=12)
    market_demand: List[RoleDemand] = Field(min_length=3, max_length=3)


class MentorMessage(FlowModel):
    role: Literal["user", "model"]
    content: str


class MentorGuidanceInput(FlowModel):
    query: str = Field(min_length=1)
    resume_text: str | None = None
    history: List[MentorMessage] = []


class SuggestedResource(FlowModel):
    title: str
    url: str
    description: str | None = None


class MentorGuidanceOutput(FlowModel):
    response: str
    key_points: List[str] = []
    suggested_resources: List[SuggestedResource] = []


class RecommendChannelsInput(FlowModel):
    topic: str = Field(min_length=1)


class RecommendedChannel(FlowModel):
    channel_name: str
    channel_link: AnyHttpUrl
    description: str
    recommendation_reason: str
    example_videos: List[str]


class RecommendChannelsOutput(FlowModel):
    recommended_channels: List[RecommendedChannel]
