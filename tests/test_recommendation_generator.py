"""
Tests for recommendation generation.
"""

from unittest.mock import MagicMock

import pytest

from app.core.agents.analysis.recommendation_generator import (
    RecommendationGenerator,
    build_recommendation_generator,
)
from app.core.config import settings


def by_type(recommendations, rec_type):
    return [r for r in recommendations if r.type == rec_type]


class TestWeaknessRecommendations:

    def test_threshold_is_strictly_below_sixty(self, build_attempt, topic_row):
        topics = [topic_row("Fractions", 60.0), topic_row("Decimals", 59.999)]

        recs = RecommendationGenerator().generate_recommendations(build_attempt(), topics)

        weaknesses = by_type(recs, "weakness")
        assert [r.topic for r in weaknesses] == ["Decimals"]
        assert weaknesses[0].priority == "Medium"

    @pytest.mark.parametrize("accuracy,priority", [(39.9, "High"), (0.0, "High"), (40.0, "Medium")])
    def test_priority(self, build_attempt, topic_row, accuracy, priority):
        recs = RecommendationGenerator().generate_recommendations(
            build_attempt(), [topic_row("Geometry", accuracy)]
        )
        assert recs[0].priority == priority

    def test_topic_template(self, build_attempt, topic_row):
        recs = RecommendationGenerator().generate_recommendations(
            build_attempt(), [topic_row("Fractions", 45.0)]
        )

        rec = recs[0]
        assert rec.title == "Improve Fractions Performance"
        assert rec.subject == "Mathematics"
        assert "45.0%" in rec.description
        assert "Practice simplifying fractions to lowest terms" in rec.action_items

    def test_generic_template(self, build_attempt, topic_row):
        recs = RecommendationGenerator().generate_recommendations(
            build_attempt(), [topic_row("Optics", 30.0, subject="Physics")]
        )

        rec = recs[0]
        assert rec.description == "Your accuracy in Optics is 30.0%, which needs improvement."
        assert rec.action_items[0] == "Review Optics fundamentals and key concepts"
        assert len(rec.action_items) == 5


class TestStrengthRecommendations:

    def test_top_two_by_accuracy(self, build_attempt, topic_row):
        topics = [
            topic_row("Geometry", 85.0),
            topic_row("Calculus", 95.0),
            topic_row("Statistics", 90.0),
            topic_row("Fractions", 79.9),
        ]

        recs = RecommendationGenerator().generate_recommendations(build_attempt(), topics)

        strengths = by_type(recs, "strength")
        assert [r.topic for r in strengths] == ["Calculus", "Statistics"]
        assert all(r.priority == "Low" for r in strengths)
        assert strengths[0].title == "Maintain Excellence in Calculus"
        assert "95.0% accuracy" in strengths[0].description

    def test_threshold_is_inclusive(self, build_attempt, topic_row):
        recs = RecommendationGenerator().generate_recommendations(build_attempt(), [topic_row("Geometry", 80.0)])
        assert [r.type for r in recs] == ["strength"]


class TestAttemptLevelRecommendations:

    def test_slow_attempt_gets_time_management(self, build_attempt):
        attempt = build_attempt(total_questions=2, total_time=250)
        recs = RecommendationGenerator().generate_recommendations(attempt, [])

        assert [r.type for r in recs] == ["time_management"]
        assert recs[0].priority == "Medium"

    def test_exactly_two_minutes_is_not_slow(self, build_attempt):
        attempt = build_attempt(total_questions=2, total_time=240)
        assert RecommendationGenerator().generate_recommendations(attempt, []) == []

    def test_frequent_changes_get_strategy(self, build_attempt):
        attempt = build_attempt(total_questions=10, total_time=600, changed=4, changed_correct=1)
        recs = RecommendationGenerator().generate_recommendations(attempt, [])

        assert [r.type for r in recs] == ["strategy"]
        assert recs[0].title == "Trust Your First Instinct"
        assert "changed 4 of 10 answers" in recs[0].description
        assert "only 1 of those changes" in recs[0].description

    def test_changes_at_thirty_percent_do_not_trigger_strategy(self, build_attempt):
        attempt = build_attempt(total_questions=10, total_time=600, changed=3)
        assert RecommendationGenerator().generate_recommendations(attempt, []) == []

    def test_zero_questions(self, build_attempt):
        attempt = build_attempt(total_questions=0, total_time=500, changed=5)
        assert RecommendationGenerator().generate_recommendations(attempt, []) == []

    def test_insertion_order(self, build_attempt, topic_row):
        attempt = build_attempt(total_questions=4, total_time=800, changed=3)
        topics = [topic_row("Geometry", 95.0), topic_row("Fractions", 20.0)]

        recs = RecommendationGenerator().generate_recommendations(attempt, topics)

        assert [r.type for r in recs] == ["weakness", "strength", "time_management", "strategy"]


class TestAdviceEnrichment:

    def make_llm(self, content=None, side_effect=None):
        llm = MagicMock()
        if side_effect is not None:
            llm.invoke.side_effect = side_effect
        else:
            llm.invoke.return_value = MagicMock(content=content)
        return llm

    def test_llm_descriptions_replace_templates(self, build_attempt, topic_row):
        llm = self.make_llm('{"descriptions": {"Fractions": "You mix up numerators and denominators."}}')
        generator = RecommendationGenerator(llm=llm)

        recs = generator.generate_recommendations(
            build_attempt(), [topic_row("Fractions", 30.0), topic_row("Geometry", 30.0)]
        )

        assert recs[0].description == "You mix up numerators and denominators."
        assert recs[1].description.startswith("Your accuracy in Geometry is 30.0%")
        llm.invoke.assert_called_once()

    @pytest.mark.parametrize("content", ["no json", '{"advice": "work harder"}', '{"descriptions": ["x"]}'])
    def test_malformed_reply_keeps_templates(self, build_attempt, topic_row, content):
        generator = RecommendationGenerator(llm=self.make_llm(content))
        recs = generator.generate_recommendations(build_attempt(), [topic_row("Fractions", 30.0)])
        assert "30.0%" in recs[0].description

    def test_client_error_keeps_templates(self, build_attempt, topic_row):
        generator = RecommendationGenerator(llm=self.make_llm(side_effect=RuntimeError("rate limited")))
        recs = generator.generate_recommendations(build_attempt(), [topic_row("Fractions", 30.0)])
        assert "30.0%" in recs[0].description

    def test_no_call_without_weak_topics(self, build_attempt, topic_row):
        llm = self.make_llm("{}")
        RecommendationGenerator(llm=llm).generate_recommendations(build_attempt(), [topic_row("Geometry", 90.0)])
        llm.invoke.assert_not_called()

    def test_disabled_by_default(self, monkeypatch):
        monkeypatch.setattr(settings, "ADVICE_ENRICHMENT_ENABLED", False)
        assert build_recommendation_generator().llm is None
