"""
Three-horizon study plan built from topic analysis.
"""
from typing import Optional, Sequence

from app.core.agents.analysis.schemas import StudyPlan, TopicAnalysis
from app.core.agents.analysis.taxonomy import Taxonomy, load_taxonomy

WEAK_ACCURACY = 60
FOCUS_TOPICS = 2


class StudyPlanBuilder:
    """Immediate, short-term and long-term tasks for the weakest topics."""

    def __init__(self, taxonomy: Optional[Taxonomy] = None):
        self.taxonomy = taxonomy or load_taxonomy()

    def build_plan(self, topics: Sequence[TopicAnalysis]) -> StudyPlan:
        plan = StudyPlan()

        weakest = sorted(
            (t for t in topics if t.accuracy < WEAK_ACCURACY),
            key=lambda t: t.accuracy,
        )[:FOCUS_TOPICS]

        for topic in weakest:
            immediate, short_term, long_term = self.taxonomy.template_for(topic.topic).render_plan(topic.topic)
            plan.immediate.append(immediate)
            plan.short_term.append(short_term)
            plan.long_term.append(long_term)

        # General study strategies, always present
        plan.immediate.append("Review today's test mistakes and understand why answers were wrong")
        plan.short_term.append("Take practice tests weekly to track improvement")
        plan.long_term.append("Build confidence through consistent practice and gradual difficulty increase")

        return plan
