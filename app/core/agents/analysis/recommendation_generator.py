"""
Recommendation generator for a completed test attempt.
Turns topic metrics into typed, prioritised study recommendations.
"""
import logging
import json
import re
from typing import Dict, List, Optional, Sequence

from langchain_core.messages import SystemMessage, HumanMessage

from app.core.agents.analysis.prompts import ADVICE_SYSTEM_PROMPT, ADVICE_USER_PROMPT_TEMPLATE
from app.core.agents.analysis.schemas import AttemptData, Recommendation, TopicAnalysis
from app.core.agents.analysis.taxonomy import Taxonomy, load_taxonomy
from app.core.config import settings
from app.core.llm_config import LLMFactory

logger = logging.getLogger(__name__)

WEAKNESS_THRESHOLD = 60
HIGH_PRIORITY_THRESHOLD = 40
STRENGTH_THRESHOLD = 80
MAX_STRENGTHS = 2
SLOW_AVERAGE_SECONDS = 120
CHANGED_ANSWER_RATIO = 0.3


class RecommendationGenerator:
    """
    Generates recommendations from topic analysis.

    Output order is weaknesses, strengths, time management, strategy. Sorting
    by priority is left to whoever presents the list.
    """

    def __init__(self, taxonomy: Optional[Taxonomy] = None, llm=None):
        self.taxonomy = taxonomy or load_taxonomy()
        self.llm = llm

    def generate_recommendations(
        self,
        attempt: AttemptData,
        topics: Sequence[TopicAnalysis],
    ) -> List[Recommendation]:
        """
        Build recommendations for an attempt.

        Args:
            attempt: The learner's attempt (timing and answer-change counts)
            topics: Topic rows from PerformanceAnalyzer

        Returns:
            Recommendations in insertion order
        """
        recommendations: List[Recommendation] = []

        weak_topics = [t for t in topics if t.accuracy < WEAKNESS_THRESHOLD]
        descriptions = self._enrich_descriptions(weak_topics)
        for topic in weak_topics:
            recommendations.append(self._weakness(topic, descriptions.get(topic.topic)))

        strong_topics = sorted(
            (t for t in topics if t.accuracy >= STRENGTH_THRESHOLD),
            key=lambda t: t.accuracy,
            reverse=True,
        )
        for topic in strong_topics[:MAX_STRENGTHS]:
            recommendations.append(self._strength(topic))

        if attempt.total_questions > 0:
            avg_time = attempt.total_time_taken / attempt.total_questions
            if avg_time > SLOW_AVERAGE_SECONDS:
                recommendations.append(self._time_management())

            if attempt.changed_answers_count > attempt.total_questions * CHANGED_ANSWER_RATIO:
                recommendations.append(self._strategy(attempt))

        logger.info(f"Generated {len(recommendations)} recommendations")
        return recommendations

    def _weakness(self, topic: TopicAnalysis, description: Optional[str] = None) -> Recommendation:
        template = self.taxonomy.template_for(topic.topic)
        return Recommendation(
            type="weakness",
            subject=topic.subject,
            topic=topic.topic,
            title=f"Improve {topic.topic} Performance",
            description=description or template.render_description(topic.topic, topic.accuracy),
            action_items=template.render_action_items(topic.topic),
            priority="High" if topic.accuracy < HIGH_PRIORITY_THRESHOLD else "Medium",
        )

    def _strength(self, topic: TopicAnalysis) -> Recommendation:
        return Recommendation(
            type="strength",
            subject=topic.subject,
            topic=topic.topic,
            title=f"Maintain Excellence in {topic.topic}",
            description=(
                f"Excellent performance in {topic.topic} with {topic.accuracy:.1f}% accuracy. "
                "Keep up the great work!"
            ),
            action_items=[
                f"Continue practicing {topic.topic} to maintain proficiency",
                f"Help others with {topic.topic} to reinforce your understanding",
                f"Explore advanced applications of {topic.topic}",
                "Use this strength to build confidence in related topics",
            ],
            priority="Low",
        )

    def _time_management(self) -> Recommendation:
        return Recommendation(
            type="time_management",
            title="Improve Time Management",
            description=(
                "You're spending too much time per question. Work on improving your speed "
                "while maintaining accuracy."
            ),
            action_items=[
                "Practice solving problems under time pressure",
                "Learn to quickly eliminate obviously wrong answers",
                "Skip difficult questions and return to them later",
                "Practice mental math to reduce calculation time",
            ],
            priority="Medium",
        )

    def _strategy(self, attempt: AttemptData) -> Recommendation:
        return Recommendation(
            type="strategy",
            title="Trust Your First Instinct",
            description=(
                f"You changed {attempt.changed_answers_count} of {attempt.total_questions} answers, "
                f"and only {attempt.changed_correct_count} of those changes turned a wrong answer "
                "into a right one. Frequent second-guessing costs time and marks."
            ),
            action_items=[
                "Change an answer only when you find a concrete error in your reasoning",
                "Mark uncertain questions and revisit them once at the end",
                "Review which of your changes helped after each practice test",
            ],
            priority="Medium",
        )

    def _enrich_descriptions(self, weak_topics: Sequence[TopicAnalysis]) -> Dict[str, str]:
        """Ask the LLM for personalised weakness descriptions; empty on any failure."""
        if self.llm is None or not weak_topics:
            return {}

        try:
            weak_list = "\n".join(
                f"- {t.topic} ({t.subject}): {t.accuracy:.1f}% accuracy, "
                f"{t.average_time:.0f}s per question"
                for t in weak_topics
            )
            messages = [
                SystemMessage(content=ADVICE_SYSTEM_PROMPT),
                HumanMessage(content=ADVICE_USER_PROMPT_TEMPLATE.format(weak_topics=weak_list)),
            ]
            response = self.llm.invoke(messages)
            return self._parse_descriptions(str(response.content))
        except Exception as e:
            logger.error(f"Error enriching recommendations, keeping templates: {e}")
            return {}

    def _parse_descriptions(self, response_text: str) -> Dict[str, str]:
        """Parse ``{"descriptions": {topic: text}}``, dropping anything malformed."""
        match = re.search(r"\{[\s\S]*\}", response_text)
        if not match:
            raise ValueError("No JSON object in response")

        payload = json.loads(match.group(0))
        descriptions = payload.get("descriptions") if isinstance(payload, dict) else None
        if not isinstance(descriptions, dict):
            raise ValueError("Response has no descriptions object")

        return {
            str(topic): text.strip()
            for topic, text in descriptions.items()
            if isinstance(text, str) and text.strip()
        }


def build_recommendation_generator(taxonomy: Optional[Taxonomy] = None) -> RecommendationGenerator:
    """Generator configured from settings; advice enrichment only when enabled."""
    if not settings.ADVICE_ENRICHMENT_ENABLED:
        return RecommendationGenerator(taxonomy=taxonomy)

    try:
        llm = LLMFactory.create_llm(
            temperature=0.7,
            json_mode=True,
            tracing_project="analysis-advice",
            timeout=settings.SEMANTIC_CLASSIFIER_TIMEOUT,
            max_retries=0,
            max_tokens=1500,
        )
    except Exception as e:
        logger.warning(f"Advice enrichment unavailable, using templates: {e}")
        llm = None
    return RecommendationGenerator(taxonomy=taxonomy, llm=llm)
