import random
import unittest

from presentation_coach.schemas.evaluation import FeedbackType
from presentation_coach.services.analyzer import (
    SCORE_RANGES,
    SimulatedAnalyzer,
    format_time,
    overall_score,
)


class SimulatedAnalyzerTest(unittest.TestCase):
    def setUp(self):
        self.analyzer = SimulatedAnalyzer(rng=random.Random(1234), duration_seconds=60)

    def test_scores_stay_in_their_ranges(self):
        for _ in range(50):
            bundle = self.analyzer.evaluate("/uploads/a.mp4")
            pairs = {
                "confidence": bundle.confidence_score,
                "facial_expressions": bundle.facial_expressions_score,
                "eye_contact": bundle.eye_contact_score,
                "body_language": bundle.body_language_score,
            }
            for name, score in pairs.items():
                low, high = SCORE_RANGES[name]
                self.assertGreaterEqual(score, low, name)
                self.assertLessEqual(score, high, name)
            self.assertEqual(
                bundle.overall_score,
                overall_score(*pairs.values()),
            )
            self.assertTrue(0 <= bundle.overall_score <= 100)

    def test_expression_distribution_sums_to_100(self):
        for _ in range(50):
            distribution = self.analyzer.expression_distribution()
            self.assertEqual(distribution.total(), 100)
            self.assertTrue(all(v >= 0 for v in distribution.model_dump().values()))

    def test_timeline_covers_nominal_duration(self):
        points = self.analyzer.timeline(60)
        self.assertEqual(len(points), 8)
        self.assertEqual(points[0].time, "0:00")
        self.assertEqual(points[-1].time, "1:00")

        longer = self.analyzer.timeline(300)
        self.assertEqual(len(longer), 20)
        self.assertTrue(all(0 <= p.confidence <= 100 for p in longer))

    def test_feedback_is_sorted_and_never_empty(self):
        feedback = self.analyzer.feedback(70, 72, 65, 60)
        self.assertTrue(feedback)
        timestamps = [item.timestamp for item in feedback]
        self.assertEqual(timestamps, sorted(timestamps))
        types = {item.type for item in feedback}
        self.assertIn(FeedbackType.NEGATIVE, types)
        self.assertIn(FeedbackType.NEUTRAL, types)
        self.assertNotIn(FeedbackType.POSITIVE, types)

    def test_high_scores_get_positive_feedback(self):
        feedback = self.analyzer.feedback(90, 88, 85, 88)
        self.assertEqual(
            sum(1 for item in feedback if item.type == FeedbackType.POSITIVE), 4
        )
        self.assertFalse(any(item.type == FeedbackType.NEGATIVE for item in feedback))

    def test_weighted_score_clamps_to_range(self):
        rng = random.Random(0)
        analyzer = SimulatedAnalyzer(rng=rng)
        scores = [analyzer.weighted_score(60, 85) for _ in range(500)]
        self.assertGreaterEqual(min(scores), 60)
        self.assertLessEqual(max(scores), 85)

    def test_same_seed_same_result(self):
        a = SimulatedAnalyzer(rng=random.Random(7)).evaluate("x")
        b = SimulatedAnalyzer(rng=random.Random(7)).evaluate("x")
        self.assertEqual(a, b)

    def test_format_time(self):
        self.assertEqual(format_time(0), "0:00")
        self.assertEqual(format_time(7.5), "0:07")
        self.assertEqual(format_time(125), "2:05")


if __name__ == "__main__":
    unittest.main()
