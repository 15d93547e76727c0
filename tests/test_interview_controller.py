import asyncio
import unittest

from app.core.capabilities import BrowserMediaPreview, BrowserSpeechCapture, TranscriptIncrement
from app.core.errors import (
    CapabilityUnavailableError,
    CritiqueError,
    EmptyAnswerError,
    InvalidConfigurationError,
    InvalidTransitionError,
    InvocationCause,
    InvocationError,
    MissingResumeError,
    QuestionFetchError,
    SessionBusyError,
)
from app.core.interview import InterviewSessionController
from app.core.models import InterviewMode, SessionStatus
from app.storages.profile_storage import ProfileStorage
from app.utils.logger import CoachLogger
from tests.fakes import RESUME_TEXT, FakeFlows, critique, network_error, text_resume


class InterviewControllerTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.profiles = ProfileStorage()
        self.profiles.set_resume("u1", text_resume())
        self.flows = FakeFlows()
        self.speech = BrowserSpeechCapture()

    def make_controller(self, **kwargs) -> InterviewSessionController:
        kwargs.setdefault("speech", self.speech)
        return InterviewSessionController(self.flows, self.profiles, "u1", **kwargs)

    async def test_configure_fetches_first_question(self):
        self.flows.questions = ["What is a closure?"]
        controller = self.make_controller()

        session = await controller.configure("Software Engineering", "text", "mid")

        self.assertEqual(session.status, SessionStatus.AWAITING_ANSWER)
        self.assertEqual(session.current_question, "What is a closure?")
        self.assertEqual(session.current_answer_draft, "")
        self.assertEqual(self.flows.question_calls, [("Software Engineering", RESUME_TEXT, "mid")])

    async def test_flow_calls_use_the_session_logger(self):
        session_logger = CoachLogger(session_id="s1")
        controller = self.make_controller(logger=session_logger)

        await controller.configure("Software Engineering", "text")
        controller.update_draft("My answer")
        await controller.submit_answer()

        self.assertEqual(self.flows.loggers, [session_logger, session_logger])

    async def test_configure_passes_through_awaiting_question(self):
        self.flows.gate = asyncio.Event()
        controller = self.make_controller()

        task = asyncio.create_task(controller.configure("Data Science", InterviewMode.AUDIO))
        await asyncio.sleep(0)
        self.assertEqual(controller.session.status, SessionStatus.AWAITING_QUESTION)
        self.assertEqual(controller.session.current_question, "")

        self.flows.gate.set()
        await task
        self.assertEqual(controller.session.status, SessionStatus.AWAITING_ANSWER)
        self.assertTrue(controller.session.current_question)

    async def test_blank_domain_is_rejected(self):
        controller = self.make_controller()
        with self.assertRaises(InvalidConfigurationError):
            await controller.configure("   ", "text")
        self.assertEqual(controller.session.status, SessionStatus.CONFIGURING)
        self.assertEqual(self.flows.question_calls, [])

    async def test_missing_resume_keeps_configuring(self):
        self.profiles.set_resume("u1", None)
        controller = self.make_controller()

        with self.assertRaises(MissingResumeError):
            await controller.configure("Marketing", "text")

        self.assertEqual(controller.session.status, SessionStatus.CONFIGURING)
        self.assertEqual(controller.session.current_question, "")
        self.assertEqual(self.flows.question_calls, [])

    async def test_question_fetch_failure_reverts_to_configuring(self):
        self.flows.questions = [network_error(), "Second attempt question?"]
        controller = self.make_controller()

        raised = []
        try:
            await controller.configure("Software Engineering", "text")
        except QuestionFetchError as e:
            raised.append(e)

        self.assertEqual(len(raised), 1)
        self.assertEqual(raised[0].cause.cause, InvocationCause.TRANSPORT)
        self.assertEqual(controller.session.status, SessionStatus.CONFIGURING)
        self.assertEqual(controller.session.current_question, "")
        self.assertEqual(len(controller.session.history), 0)
        self.assertEqual(len(self.flows.question_calls), 1)

        await controller.configure("Software Engineering", "text")
        self.assertEqual(controller.session.current_question, "Second attempt question?")

    async def test_empty_answer_changes_nothing(self):
        controller = self.make_controller()
        await controller.configure("Software Engineering", "text")

        for draft in ("", "   ", "\n\t "):
            controller.update_draft(draft)
            with self.assertRaises(EmptyAnswerError):
                await controller.submit_answer()
            self.assertEqual(controller.session.status, SessionStatus.AWAITING_ANSWER)
            self.assertEqual(controller.session.history, [])
        self.assertEqual(self.flows.critique_calls, [])

    async def test_failed_critique_preserves_draft(self):
        self.flows.critiques = [InvocationError("critiqueAnswer", InvocationCause.MALFORMED_RESPONSE)]
        controller = self.make_controller()
        await controller.configure("Software Engineering", "text")
        controller.update_draft("I would profile first.")

        with self.assertRaises(CritiqueError):
            await controller.submit_answer()

        self.assertEqual(controller.session.status, SessionStatus.AWAITING_ANSWER)
        self.assertEqual(controller.session.current_answer_draft, "I would profile first.")
        self.assertEqual(controller.session.history, [])

        await controller.submit_answer()
        self.assertEqual(controller.session.status, SessionStatus.SHOWING_FEEDBACK)
        self.assertEqual(len(controller.session.history), 1)

    async def test_history_grows_in_question_order(self):
        self.flows.questions = ["Q1?", "Q2?", "Q3?"]
        self.flows.critiques = [critique(60), critique(70), critique(80)]
        controller = self.make_controller()
        await controller.configure("Software Engineering", "text")

        for i, answer in enumerate(["A1", "A2", "A3"]):
            controller.update_draft(answer)
            await controller.submit_answer()
            self.assertEqual(len(controller.session.history), i + 1)
            if i < 2:
                await controller.next_question()

        history = controller.session.history
        self.assertEqual([qa.question for qa in history], ["Q1?", "Q2?", "Q3?"])
        self.assertEqual([qa.answer for qa in history], ["A1", "A2", "A3"])
        self.assertEqual([qa.feedback.score for qa in history], [60, 70, 80])
        self.assertEqual(self.flows.critique_calls, [("Q1?", "A1"), ("Q2?", "A2"), ("Q3?", "A3")])

    async def test_scenario_single_round(self):
        self.flows.questions = ["Describe a challenging bug you fixed."]
        self.flows.critiques = [critique(78)]
        controller = self.make_controller()

        await controller.configure("Software Engineering", "text")
        controller.update_draft("I once debugged a race condition...")
        session = await controller.submit_answer()

        self.assertEqual(session.status, SessionStatus.SHOWING_FEEDBACK)
        self.assertEqual(len(session.history), 1)
        pair = session.history[0]
        self.assertEqual(pair.question, "Describe a challenging bug you fixed.")
        self.assertEqual(pair.answer, "I once debugged a race condition...")
        self.assertEqual(pair.feedback.score, 78)
        self.assertEqual(session.last_feedback, pair.feedback)

    async def test_next_question_failure_keeps_history(self):
        self.flows.questions = ["Q1?", network_error()]
        controller = self.make_controller()
        await controller.configure("Software Engineering", "text")
        controller.update_draft("answer")
        await controller.submit_answer()

        with self.assertRaises(QuestionFetchError):
            await controller.next_question()

        self.assertEqual(controller.session.status, SessionStatus.CONFIGURING)
        self.assertEqual(controller.session.current_question, "")
        self.assertEqual(len(controller.session.history), 1)

    async def test_speech_interim_then_final(self):
        controller = self.make_controller()
        await controller.configure("Software Engineering", "audio")

        controller.toggle_capture()
        self.speech.push(TranscriptIncrement("foo", is_final=False))
        self.assertEqual(controller.session.current_answer_draft, "foo")
        self.speech.push(TranscriptIncrement("foo bar", is_final=True))
        controller.toggle_capture()

        self.assertFalse(controller.is_capturing)
        self.assertEqual(controller.session.current_answer_draft, "foo bar")

    async def test_finals_concatenate_in_arrival_order(self):
        controller = self.make_controller()
        await controller.configure("Software Engineering", "video")

        controller.start_capture()
        self.speech.push(TranscriptIncrement("first part", is_final=True))
        self.speech.push(TranscriptIncrement("second", is_final=False))
        self.speech.push(TranscriptIncrement("second part", is_final=True))
        self.speech.push(TranscriptIncrement("trailing wor", is_final=False))
        controller.stop_capture()

        self.assertEqual(controller.session.current_answer_draft, "first part second part trailing wor")

    async def test_submit_stops_capture_first(self):
        controller = self.make_controller()
        await controller.configure("Software Engineering", "audio")
        controller.start_capture()
        self.speech.push(TranscriptIncrement("spoken answer", is_final=False))

        await controller.submit_answer()

        self.assertFalse(self.speech.is_active)
        self.assertEqual(self.flows.critique_calls, [(controller.session.history[0].question, "spoken answer")])

    async def test_increments_ignored_when_not_capturing(self):
        controller = self.make_controller()
        await controller.configure("Software Engineering", "audio")
        controller.update_draft("typed")

        self.assertFalse(self.speech.push(TranscriptIncrement("ghost", is_final=True)))
        self.assertEqual(controller.session.current_answer_draft, "typed")

    async def test_speech_unavailable_is_not_fatal(self):
        controller = self.make_controller(speech=BrowserSpeechCapture(available=False))
        await controller.configure("Software Engineering", "audio")

        with self.assertRaises(CapabilityUnavailableError):
            controller.start_capture()
        self.assertEqual(controller.session.status, SessionStatus.AWAITING_ANSWER)
        self.assertEqual(len(controller.capability_warnings), 1)

        controller.update_draft("typed instead")
        await controller.submit_answer()
        self.assertEqual(len(controller.session.history), 1)

    async def test_text_mode_does_not_offer_speech(self):
        controller = self.make_controller()
        await controller.configure("Software Engineering", "text")
        self.assertFalse(controller.speech_offered)
        with self.assertRaises(CapabilityUnavailableError):
            controller.start_capture()

    async def test_camera_denied_only_warns(self):
        controller = self.make_controller()
        preview = BrowserMediaPreview("camera", permitted=False)

        await controller.configure("Software Engineering", "video", preview=preview)

        self.assertEqual(controller.session.status, SessionStatus.AWAITING_ANSWER)
        self.assertFalse(preview.is_open)
        self.assertEqual(controller.capability_warnings, ["Camera access denied"])
        self.assertIsNone(controller.snapshot()["preview"])

    async def test_preview_opens_for_matching_mode(self):
        controller = self.make_controller()
        preview = BrowserMediaPreview("microphone")
        await controller.configure("Software Engineering", "audio", preview=preview)
        self.assertTrue(preview.is_open)
        self.assertEqual(controller.snapshot()["preview"], "microphone")

        controller.close()
        self.assertFalse(preview.is_open)

    async def test_reentrant_actions_are_rejected(self):
        controller = self.make_controller()
        await controller.configure("Software Engineering", "text")
        controller.update_draft("my answer")

        self.flows.gate = asyncio.Event()
        task = asyncio.create_task(controller.submit_answer())
        await asyncio.sleep(0)
        self.assertEqual(controller.session.status, SessionStatus.AWAITING_FEEDBACK)

        with self.assertRaises(SessionBusyError):
            await controller.submit_answer()
        with self.assertRaises(SessionBusyError):
            controller.update_draft("changed")

        self.flows.gate.set()
        await task
        self.assertEqual(len(self.flows.critique_calls), 1)
        self.assertEqual(len(controller.session.history), 1)

    async def test_invalid_transitions(self):
        controller = self.make_controller()
        with self.assertRaises(InvalidTransitionError):
            await controller.submit_answer()
        with self.assertRaises(InvalidTransitionError):
            await controller.next_question()

        await controller.configure("Software Engineering", "text")
        with self.assertRaises(InvalidTransitionError):
            await controller.configure("Other", "text")
        with self.assertRaises(InvalidTransitionError):
            await controller.next_question()

    async def test_results_after_close_are_discarded(self):
        self.flows.gate = asyncio.Event()
        controller = self.make_controller()

        task = asyncio.create_task(controller.configure("Software Engineering", "text"))
        await asyncio.sleep(0)
        controller.close()
        self.flows.gate.set()
        await task

        self.assertTrue(controller.is_closed)
        self.assertEqual(controller.session.current_question, "")
        with self.assertRaises(InvalidTransitionError):
            controller.update_draft("too late")

    async def test_snapshot_reports_history(self):
        self.flows.questions = ["Q1?"]
        controller = self.make_controller()
        await controller.configure("Software Engineering", "text")
        controller.update_draft("A1")
        await controller.submit_answer()

        snapshot = controller.snapshot()
        self.assertEqual(snapshot["status"], "showing_feedback")
        self.assertEqual(snapshot["feedback"]["score"], 78)
        self.assertEqual(snapshot["history"][0]["question"], "Q1?")


if __name__ == "__main__":
    unittest.main()
