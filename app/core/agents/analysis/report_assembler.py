"""
Report assembly and compute-once caching for test attempt analysis.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.agents.analysis.classifier import BatchClassifier, build_classifier
from app.core.agents.analysis.concept_linker import ConceptLinker
from app.core.agents.analysis.loaders import attempt_from_record, paper_from_test
from app.core.agents.analysis.performance_analyzer import PerformanceAnalyzer
from app.core.agents.analysis.recommendation_generator import (
    RecommendationGenerator,
    build_recommendation_generator,
)
from app.core.agents.analysis.schemas import (
    AttemptData,
    DetailedAnalysis,
    ExamPaper,
    ExamSpecificInsights,
    OverallPerformance,
    TopicAnalysis,
)
from app.core.agents.analysis.study_plan import StudyPlanBuilder
from app.core.agents.analysis.taxonomy import Taxonomy, load_taxonomy
from app.core.agents.analysis.time_analyzer import TimeManagementAnalyzer
from app.core.exceptions import NotFoundError
from app.models.test import Test
from app.models.test_attempt import TestAttempt
from app.services.report_store import ReportStore

logger = logging.getLogger(__name__)

JEE_EXAM_LABEL = "JEE Main 2025"


def calculate_grade(score_percent: float) -> str:
    if score_percent >= 90:
        return "A+"
    if score_percent >= 80:
        return "A"
    if score_percent >= 70:
        return "B+"
    if score_percent >= 60:
        return "B"
    if score_percent >= 50:
        return "C+"
    if score_percent >= 40:
        return "C"
    return "D"


def estimate_percentile(score_percent: float) -> int:
    """
    Placeholder percentile derived from the score alone.

    TODO: replace with a rank against stored attempts of the same test.
    """
    return round(min(95.0, max(5.0, score_percent * 0.8 + 10)))


@dataclass
class StoredAnalysis:
    """A persisted report and whether it came from the cache."""
    analysis_id: int
    test_attempt_id: int
    analysis: DetailedAnalysis
    cached: bool


class AnalysisService:
    """
    Serves the analysis for a test attempt, computing it at most once.

    A stored report is returned unchanged on every later request, even if the
    topic tables have changed since it was built.
    """

    def __init__(
        self,
        db: Session,
        taxonomy: Optional[Taxonomy] = None,
        classifier: Optional[BatchClassifier] = None,
        recommendation_generator: Optional[RecommendationGenerator] = None,
        time_analyzer: Optional[TimeManagementAnalyzer] = None,
    ):
        self.db = db
        self.store = ReportStore(db)
        self.taxonomy = taxonomy or load_taxonomy()
        self.performance_analyzer = PerformanceAnalyzer(classifier or build_classifier(self.taxonomy))
        self.recommendation_generator = (
            recommendation_generator or build_recommendation_generator(self.taxonomy)
        )
        self.study_plan_builder = StudyPlanBuilder(self.taxonomy)
        self.concept_linker = ConceptLinker(self.taxonomy)
        self.time_analyzer = time_analyzer or TimeManagementAnalyzer()

    def get_attempt_owner(self, test_attempt_id: int) -> int:
        """User id owning the attempt, for the caller's access check."""
        attempt = self._get_attempt(test_attempt_id)
        return int(attempt.user_id)

    def get_or_create(self, test_attempt_id: int) -> StoredAnalysis:
        """
        Return the stored report for an attempt, building it on first request.

        Raises:
            NotFoundError: attempt or its test does not exist
        """
        existing = self.store.find_by_attempt(test_attempt_id)
        if existing is not None:
            logger.info(f"Analysis cache hit for attempt {test_attempt_id}")
            return self._stored(existing, cached=True)

        logger.info(f"Analysis cache miss for attempt {test_attempt_id}, computing")
        attempt = self._get_attempt(test_attempt_id)
        test = self.db.query(Test).filter(Test.id == attempt.test_id).first()
        if test is None:
            raise NotFoundError(f"Test {attempt.test_id} not found")

        analysis = self.build_analysis(paper_from_test(test), attempt_from_record(attempt))

        row, created = self.store.create(
            test_attempt_id=test_attempt_id,
            user_id=int(attempt.user_id),
            report=analysis.model_dump(mode="json"),
        )
        if created:
            logger.info(f"Stored analysis {row.id} for attempt {test_attempt_id}")
        return self._stored(row, cached=not created)

    def build_analysis(self, paper: ExamPaper, attempt: AttemptData) -> DetailedAnalysis:
        """Run the full pipeline on in-memory inputs; touches no storage."""
        topics = self.performance_analyzer.analyze_performance(paper, attempt)

        return DetailedAnalysis(
            overall_performance=OverallPerformance(
                grade=calculate_grade(attempt.score_percent),
                percentile=estimate_percentile(attempt.score_percent),
                strengths=[t.topic for t in topics if t.accuracy >= 80],
                weaknesses=[t.topic for t in topics if t.accuracy < 60],
            ),
            topic_analysis=topics,
            subject_analysis=self.performance_analyzer.summarize_subjects(topics),
            recommendations=self.recommendation_generator.generate_recommendations(attempt, topics),
            study_plan=self.study_plan_builder.build_plan(topics),
            conceptual_insights=self.concept_linker.link(topics),
            time_management_analysis=self.time_analyzer.analyze(attempt),
            exam_specific=self._exam_specific(paper, topics),
        )

    def _exam_specific(
        self, paper: ExamPaper, topics: List[TopicAnalysis]
    ) -> Optional[ExamSpecificInsights]:
        """Syllabus alignment, only for JEE papers."""
        if "jee" not in (paper.exam_type or "").lower():
            return None

        aligned = 0
        topic_units = {}
        for topic in topics:
            unit = self.taxonomy.unit_for_topic(topic.topic, topic.subject)
            if unit is not None:
                aligned += 1
                topic_units[topic.topic] = unit

        return ExamSpecificInsights(
            exam_type=JEE_EXAM_LABEL,
            syllabus_compliance=(aligned / len(topics) * 100) if topics else 0.0,
            priority_topics=[t.topic for t in topics if t.accuracy < 50],
            topic_units=topic_units,
        )

    def _get_attempt(self, test_attempt_id: int) -> TestAttempt:
        attempt = self.db.query(TestAttempt).filter(TestAttempt.id == test_attempt_id).first()
        if attempt is None:
            raise NotFoundError(f"Test attempt {test_attempt_id} not found")
        return attempt

    def _stored(self, row, cached: bool) -> StoredAnalysis:
        return StoredAnalysis(
            analysis_id=int(row.id),
            test_attempt_id=int(row.test_attempt_id),
            analysis=DetailedAnalysis.model_validate(row.report),
            cached=cached,
        )
