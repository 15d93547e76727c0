from typing import Any, Dict, TypedDict

from langgraph.graph import END, StateGraph

from app.core.flow_schemas import AnalyzeResumeOutput, RecommendCareerPathsOutput
from app.utils.logger import CoachLogger


class CareerInsightsState(TypedDict, total=False):
    resume_text: str
    analysis: AnalyzeResumeOutput | None
    career_paths: RecommendCareerPathsOutput | None


class CareerInsightsPipeline:
    """Résumé analysis followed by career-path recommendation.

    The recommendation step is skipped when the analysis extracted no skills.
    Flow failures propagate out of ``run`` unchanged.
    """

    def __init__(self, engine: Any, logger: CoachLogger | None = None):
        self.engine = engine
        self.logger = logger or CoachLogger()
        self.graph = self._build_graph()

    async def analyze_resume_node(self, state: CareerInsightsState) -> Dict[str, Any]:
        self.logger.log("Career", "Analyzing résumé")
        analysis = await self.engine.analyze_resume(state["resume_text"])
        self.logger.log("Career", f"Extracted {len(analysis.extracted_skills)} skills")
        return {"analysis": analysis}

    async def recommend_paths_node(self, state: CareerInsightsState) -> Dict[str, Any]:
        skills = [skill.name for skill in state["analysis"].extracted_skills]
        self.logger.log("Career", "Recommending career paths", {"skills": skills})
        career_paths = await self.engine.recommend_career_paths(skills)
        return {"career_paths": career_paths}

    def should_recommend(self, state: CareerInsightsState) -> str:
        analysis = state.get("analysis")
        if analysis is None or not analysis.extracted_skills:
            self.logger.log("Career", "No skills extracted, skipping recommendations")
            return "done"
        return "recommend"

    def _build_graph(self):
        workflow = StateGraph(CareerInsightsState)
        workflow.add_node("analyze_resume", self.analyze_resume_node)
        workflow.add_node("recommend_paths", self.recommend_paths_node)
        workflow.set_entry_point("analyze_resume")

        workflow.add_conditional_edges(
            "analyze_resume",
            self.should_recommend,
            {"recommend": "recommend_paths", "done": END}
        )
        workflow.add_edge("recommend_paths", END)
        return workflow.compile()

    async def run(self, resume_text: str) -> CareerInsightsState:
        result = await self.graph.ainvoke({
            "resume_text": resume_text,
            "analysis": None,
            "career_paths": None,
        })
        return result
