import asyncio
import json
import re
import time
from typing import Any, Dict, List, Sequence

from mistralai import Mistral
from pydantic import BaseModel, ValidationError

from app.config.settings import settings
from app.core.errors import InvocationCause, InvocationError
from app.core.flow_schemas import (
    AnalyzeResumeOutput,
    CritiqueAnswerOutput,
    GenerateQuestionOutput,
    JobTrendsOutput,
    MentorGuidanceOutput,
    MentorMessage,
    RecommendCareerPathsOutput,
    RecommendChannelsOutput,
)
from app.core.flows import (
    ANALYZE_RESUME,
    CRITIQUE_ANSWER,
    GENERATE_INTERVIEW_QUESTION,
    GET_JOB_TRENDS,
    MENTOR_GUIDANCE,
    RECOMMEND_CAREER_PATHS,
    RECOMMEND_YOUTUBE_CHANNELS,
    FlowRegistry,
    default_registry,
)
from app.core.prompts import JSON_SYSTEM_PROMPT
from app.utils.logger import CoachLogger


class CoachEngine:
    """Runs flows against the Mistral chat API and validates their output.

    The engine never retries: a failed call surfaces as ``InvocationError``
    and the caller decides what to do next.
    """

    def __init__(self, client: Any = None, model: str | None = None,
                 registry: FlowRegistry | None = None, logger: CoachLogger | None = None):
        self.client = client if client is not None else Mistral(api_key=settings.MISTRAL_API_KEY)
        self.model = model or settings.MISTRAL_MODEL
        self.temperature = settings.MISTRAL_TEMPERATURE
        self.registry = registry or default_registry()
        self.logger = logger or CoachLogger()

    @staticmethod
    def _parse_json_response(content: str) -> str | None:
        if "```json" in content:
            json_str = content.split("```json")[1].split("```")[0].strip()
        elif "```" in content:
            json_str = content.split("```")[1].split("```")[0].strip()
        else:
            json_str = content.strip()

        if not json_str or not json_str.startswith("{"):
            start_idx = content.find("{")
            end_idx = content.rfind("}")
            if start_idx != -1 and end_idx > start_idx:
                json_str = content[start_idx:end_idx + 1]
            else:
                return None
        return json_str.strip() or None

    def _extract_json(self, operation: str, content: str, logger: CoachLogger) -> Dict[str, Any]:
        json_str = self._parse_json_response(content or "")
        if not json_str:
            logger.warning("Engine", f"{operation}: no JSON found in response", {"content": (content or "")[:500]})
            raise InvocationError(operation, InvocationCause.MALFORMED_RESPONSE, "no JSON object in response")

        try:
            data = json.loads(json_str)
        except json.JSONDecodeError:
            cleaned = re.sub(r'//.*?$', '', json_str, flags=re.MULTILINE)
            cleaned = re.sub(r',\s*}', '}', cleaned)
            cleaned = re.sub(r',\s*]', ']', cleaned)
            try:
                data = json.loads(cleaned)
            except json.JSONDecodeError as e:
                logger.warning("Engine", f"{operation}: JSON parse error {e}", {"content": json_str[:500]})
                raise InvocationError(operation, InvocationCause.MALFORMED_RESPONSE, str(e)) from e

        if not isinstance(data, dict):
            raise InvocationError(operation, InvocationCause.MALFORMED_RESPONSE, "response is not a JSON object")
        return data

    def _complete(self, messages: List[Dict[str, str]]) -> Any:
        return self.client.chat.complete(
            model=self.model,
            messages=messages,
            temperature=self.temperature,
            response_format={"type": "json_object"},
        )

    async def _call_llm_async(self, operation: str, prompt: str, system_prompt: str = JSON_SYSTEM_PROMPT,
                              logger: CoachLogger | None = None) -> Dict[str, Any]:
        logger = logger or self.logger
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": prompt},
        ]

        start_time = time.time()
        try:
            response = await asyncio.to_thread(self._complete, messages)
        except Exception as e:
            logger.warning("Engine", f"{operation}: model call failed: {e}")
            raise InvocationError(operation, InvocationCause.TRANSPORT, str(e)) from e
        logger.log_latency((time.time() - start_time) * 1000)

        usage = getattr(response, "usage", None)
        if usage is not None:
            logger.log_tokens(usage.prompt_tokens, usage.completion_tokens)

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError) as e:
            raise InvocationError(operation, InvocationCause.MALFORMED_RESPONSE, "empty completion") from e
        if isinstance(content, list):
            content = "".join(getattr(chunk, "text", "") for chunk in content)
        return self._extract_json(operation, content, logger)

    async def invoke(self, operation: str, payload: BaseModel | Dict[str, Any],
                     logger: CoachLogger | None = None) -> BaseModel:
        """Validate, render and run one flow.

        ``logger`` receives the call's events and metrics; sessions pass their
        own so token usage lands in the session log.
        """
        logger = logger or self.logger
        flow = self.registry.get(operation)
        if flow is None:
            raise InvocationError(operation, InvocationCause.UNKNOWN_OPERATION)

        try:
            if isinstance(payload, BaseModel):
                payload = payload.model_dump(by_alias=True)
            request = flow.input_model.model_validate(payload)
        except ValidationError as e:
            raise InvocationError(operation, InvocationCause.INVALID_INPUT, str(e)) from e

        logger.log("Engine", f"Invoking {operation}")
        data = await self._call_llm_async(operation, flow.render(request), logger=logger)

        try:
            result = flow.output_model.model_validate(data)
        except ValidationError as e:
            logger.warning("Engine", f"{operation}: response failed schema validation", {"errors": e.errors(include_url=False)})
            raise InvocationError(operation, InvocationCause.SCHEMA_VIOLATION, str(e)) from e

        logger.log("Engine", f"{operation} completed")
        return result

    async def generate_interview_question(self, domain: str, resume_text: str,
                                          experience_level: str = "entry",
                                          logger: CoachLogger | None = None) -> GenerateQuestionOutput:
        return await self.invoke(GENERATE_INTERVIEW_QUESTION, {
            "domain": domain,
            "experienceLevel": experience_level,
            "resumeText": resume_text,
        }, logger=logger)

    async def critique_answer(self, question: str, answer: str,
                              logger: CoachLogger | None = None) -> CritiqueAnswerOutput:
        return await self.invoke(CRITIQUE_ANSWER, {"question": question, "answer": answer}, logger=logger)

    async def analyze_resume(self, resume_text: str) -> AnalyzeResumeOutput:
        return await self.invoke(ANALYZE_RESUME, {"resumeText": resume_text})

    async def recommend_career_paths(self, skills: Sequence[str]) -> RecommendCareerPathsOutput:
        return await self.invoke(RECOMMEND_CAREER_PATHS, {"skills": list(skills)})

    async def get_job_trends(self) -> JobTrendsOutput:
        return await self.invoke(GET_JOB_TRENDS, {})

    async def mentor_guidance(self, query: str, history: Sequence[MentorMessage] = (),
                              resume_text: str | None = None) -> MentorGuidanceOutput:
        return await self.invoke(MENTOR_GUIDANCE, {
            "query": query,
            "resumeText": resume_text,
            "history": [msg.model_dump() for msg in history],
        })

    async def recommend_youtube_channels(self, topic: str) -> RecommendChannelsOutput:
        return await self.invoke(RECOMMEND_YOUTUBE_CHANNELS, {"topic": topic})
