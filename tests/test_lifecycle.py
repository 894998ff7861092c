import random
import unittest
from datetime import datetime
from unittest.mock import MagicMock

from presentation_coach.schemas.evaluation import EvaluationCreate, EvaluationStatus
from presentation_coach.services.analyzer import Analyzer, SimulatedAnalyzer
from presentation_coach.services.lifecycle import (
    EvaluationLifecycle,
    build_completion_update,
    default_title,
)
from presentation_coach.services.storage import MemStorage

RESULT_FIELDS = (
    "overall_score",
    "confidence_score",
    "facial_expressions_score",
    "eye_contact_score",
    "body_language_score",
    "feedback",
    "analysis_details",
)


class BrokenAnalyzer(Analyzer):
    def evaluate(self, video_ref):
        raise RuntimeError("model crashed")


class EvaluationLifecycleTest(unittest.TestCase):
    def setUp(self):
        self.storage = MemStorage()

    def make_lifecycle(self, analyzer=None, delay=0.0):
        lifecycle = EvaluationLifecycle(
            self.storage,
            analyzer or SimulatedAnalyzer(rng=random.Random(42)),
            delay_seconds=delay,
            max_workers=2,
        )
        self.addCleanup(lifecycle.shutdown)
        return lifecycle

    def wait(self, lifecycle, evaluation_id):
        future = lifecycle.pending(evaluation_id)
        if future is not None:
            future.result(timeout=5)

    def test_submit_returns_processing_record_immediately(self):
        lifecycle = self.make_lifecycle(delay=30)
        evaluation = lifecycle.submit_evaluation(1, "Demo", "/uploads/a.mp4")

        self.assertEqual(evaluation.status, EvaluationStatus.PROCESSING)
        self.assertIsNone(evaluation.overall_score)
        self.assertIsNotNone(lifecycle.pending(evaluation.id))
        self.assertEqual(
            self.storage.get_evaluation(evaluation.id).status, EvaluationStatus.PROCESSING
        )

    def test_job_completes_evaluation(self):
        lifecycle = self.make_lifecycle()
        evaluation = lifecycle.submit_evaluation(1, "Demo", "/uploads/a.mp4")
        self.wait(lifecycle, evaluation.id)

        done = self.storage.get_evaluation(evaluation.id)
        self.assertEqual(done.status, EvaluationStatus.COMPLETED)
        for field in RESULT_FIELDS:
            self.assertIsNotNone(getattr(done, field), field)
        self.assertTrue(0 <= done.overall_score <= 100)
        self.assertTrue(done.feedback)
        self.assertEqual(done.analysis_details.expression_distribution.total(), 100)

    def test_analyzer_error_marks_failed_with_empty_results(self):
        lifecycle = self.make_lifecycle(analyzer=BrokenAnalyzer())
        evaluation = lifecycle.submit_evaluation(1, "Demo", "/uploads/a.mp4")
        self.wait(lifecycle, evaluation.id)

        failed = self.storage.get_evaluation(evaluation.id)
        self.assertEqual(failed.status, EvaluationStatus.FAILED)
        for field in RESULT_FIELDS:
            self.assertIsNone(getattr(failed, field), field)

    def test_missing_record_is_logged_not_raised(self):
        lifecycle = self.make_lifecycle()
        with self.assertLogs("presentation_coach.services.lifecycle", level="ERROR"):
            self.assertIsNone(lifecycle.complete_evaluation(9999))
        self.assertIsNone(self.storage.get_evaluation(9999))

    def test_terminal_record_is_not_touched_again(self):
        lifecycle = self.make_lifecycle()
        evaluation = lifecycle.submit_evaluation(1, "Demo", "/uploads/a.mp4")
        self.wait(lifecycle, evaluation.id)
        completed = self.storage.get_evaluation(evaluation.id)

        with self.assertLogs("presentation_coach.services.lifecycle", level="ERROR"):
            lifecycle.complete_evaluation(evaluation.id)
        self.assertEqual(self.storage.get_evaluation(evaluation.id), completed)

    def test_blank_title_gets_default(self):
        lifecycle = self.make_lifecycle(delay=30)
        evaluation = lifecycle.submit_evaluation(1, "   ", "/uploads/a.mp4")
        self.assertTrue(evaluation.title.startswith("Evaluation "))
        self.assertTrue(lifecycle.submit_evaluation(1, None, "/uploads/b.mp4").title)

    def test_shutdown_cancels_waiting_job(self):
        lifecycle = EvaluationLifecycle(
            self.storage, SimulatedAnalyzer(), delay_seconds=30, max_workers=1
        )
        evaluation = lifecycle.submit_evaluation(1, "Demo", "/uploads/a.mp4")
        future = lifecycle.pending(evaluation.id)
        lifecycle.shutdown(wait=True)

        self.assertIsNone(future.result(timeout=5))
        self.assertEqual(
            self.storage.get_evaluation(evaluation.id).status, EvaluationStatus.PROCESSING
        )

    def test_build_completion_update_uses_video_url(self):
        analyzer = MagicMock(spec=Analyzer)
        analyzer.evaluate.return_value = SimulatedAnalyzer(rng=random.Random(1)).evaluate("x")
        evaluation = self.storage.create_evaluation(
            EvaluationCreate(user_id=1, title="Demo", video_url="/uploads/z.mp4")
        )

        update = build_completion_update(evaluation, analyzer)
        analyzer.evaluate.assert_called_once_with("/uploads/z.mp4")
        self.assertEqual(update.status, EvaluationStatus.COMPLETED)
        self.assertEqual(set(update.changes()), {"status", *RESULT_FIELDS})

    def test_default_title_format(self):
        self.assertEqual(
            default_title(datetime(2024, 3, 5, 14, 7, 9)), "Evaluation 2024-03-05 14:07:09"
        )


if __name__ == "__main__":
    unittest.main()
