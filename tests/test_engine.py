import json
import tempfile
import unittest
from pathlib import Path

from app.core.engine import CoachEngine
from app.core.errors import InvocationCause, InvocationError
from app.core.flow_schemas import MentorMessage
from app.core.flows import CRITIQUE_ANSWER, default_registry
from app.utils.logger import CoachLogger
from tests.fakes import MONTHS, FakeMistralClient

CRITIQUE_JSON = {
    "analysis": {"clarity": "Clear structure.", "content": "Accurate."},
    "score": 78,
    "improvementTips": "Mention the outcome.",
}


def engine_with(*contents) -> tuple[CoachEngine, FakeMistralClient]:
    client = FakeMistralClient(list(contents))
    return CoachEngine(client=client, model="test-model"), client


class CoachEngineTests(unittest.IsolatedAsyncioTestCase):
    async def test_critique_parses_structured_output(self):
        engine, client = engine_with(CRITIQUE_JSON)

        result = await engine.critique_answer("Describe a bug.", "A race condition.")

        self.assertEqual(result.score, 78)
        self.assertEqual(result.analysis.clarity, "Clear structure.")
        self.assertEqual(result.improvement_tips, "Mention the outcome.")
        call = client.calls[0]
        self.assertEqual(call["model"], "test-model")
        self.assertEqual(call["response_format"], {"type": "json_object"})
        self.assertEqual(call["messages"][0]["role"], "system")
        self.assertIn("A race condition.", call["messages"][1]["content"])

    async def test_metrics_go_to_the_callers_logger(self):
        engine, _ = engine_with(CRITIQUE_JSON, {"question": "What is a deadlock?"})

        with tempfile.TemporaryDirectory() as log_dir:
            session_logger = CoachLogger(log_dir=log_dir, session_id="s1")
            await engine.critique_answer("Q?", "A", logger=session_logger)
            await engine.generate_interview_question("Software Engineering", "resume", logger=session_logger)

            metrics = session_logger.get_log_data()["metrics"]
            self.assertEqual(metrics["total_tokens"], 40)
            self.assertEqual(len(metrics["latency_ms"]), 2)
            saved = json.loads(session_logger.log_file.read_text(encoding="utf-8"))
            self.assertEqual(saved["metrics"]["total_tokens"], 40)
            self.assertEqual(Path(log_dir), session_logger.log_file.parent)

        self.assertEqual(engine.logger.get_log_data()["metrics"]["total_tokens"], 0)

    async def test_shared_logger_keeps_no_history(self):
        engine, _ = engine_with(*[{"question": f"Question {i}?"} for i in range(50)])

        for _ in range(50):
            await engine.generate_interview_question("Software Engineering", "resume")

        log_data = engine.logger.get_log_data()
        self.assertEqual(log_data["events"], [])
        self.assertEqual(log_data["metrics"]["latency_ms"], [])
        self.assertEqual(log_data["metrics"]["total_tokens"], 1000)

    async def test_fenced_json_with_trailing_commas(self):
        content = (
            "Here is the feedback:\n```json\n"
            '{"analysis": {"clarity": "ok", "content": "ok",}, "score": 55, "improvementTips": "more detail",}\n'
            "```"
        )
        engine, _ = engine_with(content)
        result = await engine.critique_answer("Q?", "A")
        self.assertEqual(result.score, 55)

    async def test_json_embedded_in_prose(self):
        engine, _ = engine_with('Sure! {"question": "What is a deadlock?"} Good luck.')
        result = await engine.generate_interview_question("Software Engineering", "resume text")
        self.assertEqual(result.question, "What is a deadlock?")

    async def test_reply_without_json_is_malformed(self):
        engine, _ = engine_with("I cannot answer that.")
        with self.assertRaises(InvocationError) as ctx:
            await engine.critique_answer("Q?", "A")
        self.assertEqual(ctx.exception.operation, CRITIQUE_ANSWER)
        self.assertEqual(ctx.exception.cause, InvocationCause.MALFORMED_RESPONSE)

    async def test_out_of_range_score_violates_schema(self):
        engine, _ = engine_with({**CRITIQUE_JSON, "score": 140})
        with self.assertRaises(InvocationError) as ctx:
            await engine.critique_answer("Q?", "A")
        self.assertEqual(ctx.exception.cause, InvocationCause.SCHEMA_VIOLATION)

    async def test_missing_field_violates_schema(self):
        engine, _ = engine_with({"score": 50})
        with self.assertRaises(InvocationError) as ctx:
            await engine.critique_answer("Q?", "A")
        self.assertEqual(ctx.exception.cause, InvocationCause.SCHEMA_VIOLATION)

    async def test_transport_failure(self):
        engine, client = engine_with(ConnectionError("connection reset"))
        with self.assertRaises(InvocationError) as ctx:
            await engine.generate_interview_question("Software Engineering", "resume text")
        self.assertEqual(ctx.exception.cause, InvocationCause.TRANSPORT)
        self.assertIn("connection reset", str(ctx.exception))
        self.assertEqual(len(client.calls), 1)

    async def test_invalid_input_never_reaches_model(self):
        engine, client = engine_with(CRITIQUE_JSON)
        with self.assertRaises(InvocationError) as ctx:
            await engine.critique_answer("Q?", "")
        self.assertEqual(ctx.exception.cause, InvocationCause.INVALID_INPUT)
        self.assertEqual(client.calls, [])

    async def test_unknown_operation(self):
        engine, _ = engine_with()
        with self.assertRaises(InvocationError) as ctx:
            await engine.invoke("summarizeEverything", {})
        self.assertEqual(ctx.exception.cause, InvocationCause.UNKNOWN_OPERATION)

    async def test_job_trends_require_twelve_months(self):
        demand = [{"role": r, "demand": 70} for r in ("Software Engineer", "Data Scientist", "Product Manager")]
        points = [
            {"month": m, "Software Engineer": 120000, "Data Scientist": 110000, "Product Manager": 130000}
            for m in MONTHS
        ]
        engine, _ = engine_with(
            {"salaryTrends": points, "marketDemand": demand},
            {"salaryTrends": points[:11], "marketDemand": demand},
        )

        trends = await engine.get_job_trends()
        self.assertEqual(len(trends.salary_trends), 12)
        self.assertEqual(trends.salary_trends[0].software_engineer, 120000)
        self.assertIn("Software Engineer", trends.model_dump(by_alias=True)["salaryTrends"][0])

        with self.assertRaises(InvocationError) as ctx:
            await engine.get_job_trends()
        self.assertEqual(ctx.exception.cause, InvocationCause.SCHEMA_VIOLATION)

    async def test_mentor_prompt_includes_history_and_resume(self):
        engine, client = engine_with({"response": "Learn Kubernetes next.", "keyPoints": ["Kubernetes"]})
        history = [
            MentorMessage(role="user", content="How do I grow as a backend dev?"),
            MentorMessage(role="model", content="Focus on distributed systems."),
        ]

        reply = await engine.mentor_guidance("What should I learn next?", history, "Python developer")

        self.assertEqual(reply.response, "Learn Kubernetes next.")
        self.assertEqual(reply.suggested_resources, [])
        prompt = client.calls[0]["messages"][1]["content"]
        self.assertIn("user: How do I grow as a backend dev?", prompt)
        self.assertIn("model: Focus on distributed systems.", prompt)
        self.assertIn("User Resume:\nPython developer", prompt)
        self.assertIn("User Query: What should I learn next?", prompt)

    async def test_career_paths_prompt_lists_skills(self):
        path = {
            "title": "Backend Engineer", "description": "APIs", "demandScore": 8,
            "salaryRange": "$100k - $150k", "skills": ["Python"], "progress": 70,
            "roadmapUrl": "https://roadmap.sh/backend",
        }
        engine, client = engine_with({"careerPaths": [path, path, path]})

        result = await engine.recommend_career_paths(["Python", "SQL"])

        self.assertEqual(len(result.career_paths), 3)
        self.assertIn("- Python\n- SQL", client.calls[0]["messages"][1]["content"])


class FlowRegistryTests(unittest.TestCase):
    def test_every_flow_renders_its_prompt(self):
        registry = default_registry()
        flow = registry.get("generateInterviewQuestion")
        payload = flow.input_model.model_validate({
            "domain": "Marketing", "experienceLevel": "senior", "resumeText": "Ten years in brand strategy {not a field}",
        })
        prompt = flow.render(payload)
        self.assertIn("Domain: Marketing", prompt)
        self.assertIn("Experience Level: senior", prompt)
        self.assertIn("{not a field}", prompt)

    def test_duplicate_registration_fails(self):
        registry = default_registry()
        with self.assertRaises(ValueError):
            registry.register(registry.get("critiqueAnswer"))


if __name__ == "__main__":
    unittest.main()
