"""Named, schema-typed prompt operations.

A flow pairs a pydantic input model, a pydantic output model and a prompt
template. The engine looks flows up by name, so every AI feature of the
application is declared here in one place.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Type

from pydantic import BaseModel

from app.core import prompts
from app.core.flow_schemas import (
    AnalyzeResumeInput,
    AnalyzeResumeOutput,
    CritiqueAnswerInput,
    CritiqueAnswerOutput,
    GenerateQuestionInput,
    GenerateQuestionOutput,
    JobTrendsInput,
    JobTrendsOutput,
    MentorGuidanceInput,
    MentorGuidanceOutput,
    RecommendCareerPathsInput,
    RecommendCareerPathsOutput,
    RecommendChannelsInput,
    RecommendChannelsOutput,
)

GENERATE_INTERVIEW_QUESTION = "generateInterviewQuestion"
CRITIQUE_ANSWER = "critiqueAnswer"
ANALYZE_RESUME = "analyzeResume"
RECOMMEND_CAREER_PATHS = "recommendCareerPaths"
GET_JOB_TRENDS = "getJobTrends"
MENTOR_GUIDANCE = "mentorGuidance"
RECOMMEND_YOUTUBE_CHANNELS = "recommendYoutubeChannels"


@dataclass(frozen=True)
class Flow:
    name: str
    input_model: Type[BaseModel]
    output_model: Type[BaseModel]
    prompt: str
    extra_context: Callable[[BaseModel], Dict[str, Any]] | None = None

    def render(self, payload: BaseModel) -> str:
        context = payload.model_dump(by_alias=True)
        if self.extra_context is not None:
            context.update(self.extra_context(payload))
        return self.prompt.format(**context)


def _skill_list(payload: RecommendCareerPathsInput) -> Dict[str, Any]:
    return {"skillList": "\n".join(f"- {skill}" for skill in payload.skills)}


def _mentor_blocks(payload: MentorGuidanceInput) -> Dict[str, Any]:
    resume_block = f"\nUser Resume:\n{payload.resume_text}\n" if payload.resume_text else ""
    history_block = ""
    if payload.history:
        lines = "\n".join(f"{msg.role}: {msg.content}" for msg in payload.history)
        history_block = f"\nChat History:\n{lines}\n"
    return {"resumeBlock": resume_block, "historyBlock": history_block}


@dataclass
class FlowRegistry:
    flows: Dict[str, Flow] = field(default_factory=dict)

    def register(self, flow: Flow) -> Flow:
        if flow.name in self.flows:
            raise ValueError(f"Flow {flow.name} is already registered")
        self.flows[flow.name] = flow
        return flow

    def get(self, name: str) -> Flow | None:
        return self.flows.get(name)


def default_registry() -> FlowRegistry:
    registry = FlowRegistry()
    registry.register(Flow(
        GENERATE_INTERVIEW_QUESTION, GenerateQuestionInput, GenerateQuestionOutput,
        prompts.INTERVIEW_QUESTION_PROMPT,
    ))
    registry.register(Flow(
        CRITIQUE_ANSWER, CritiqueAnswerInput, CritiqueAnswerOutput,
        prompts.CRITIQUE_ANSWER_PROMPT,
    ))
    registry.register(Flow(
        ANALYZE_RESUME, AnalyzeResumeInput, AnalyzeResumeOutput,
        prompts.ANALYZE_RESUME_PROMPT,
    ))
    registry.register(Flow(
        RECOMMEND_CAREER_PATHS, RecommendCareerPathsInput, RecommendCareerPathsOutput,
        prompts.CAREER_PATHS_PROMPT, _skill_list,
    ))
    registry.register(Flow(
        GET_JOB_TRENDS, JobTrendsInput, JobTrendsOutput,
        prompts.JOB_TRENDS_PROMPT,
    ))
    registry.register(Flow(
        MENTOR_GUIDANCE, MentorGuidanceInput, MentorGuidanceOutput,
        prompts.MENTOR_PROMPT, _mentor_blocks,
    ))
    registry.register(Flow(
        RECOMMEND_YOUTUBE_CHANNELS, RecommendChannelsInput, RecommendChannelsOutput,
        prompts.YOUTUBE_CHANNELS_PROMPT,
    ))
    return registry
