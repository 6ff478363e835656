"""
Topic-level performance aggregation for a test attempt.
Classifies each section's questions and joins them with the learner's responses.
"""
import logging
from collections import OrderedDict
from typing import Dict, List, Optional, Sequence, Tuple

from app.core.agents.analysis.classifier import BatchClassifier, RuleBasedClassifier
from app.core.agents.analysis.schemas import (
    AttemptData,
    AttemptedQuestion,
    ExamPaper,
    QuestionData,
    SubjectAnalysis,
    TopicAnalysis,
)

logger = logging.getLogger(__name__)

DIFFICULTY_SCORES = {"easy": 1, "medium": 2, "hard": 3}


def average_difficulty(questions: Sequence[QuestionData]) -> str:
    """Mean of Easy=1/Medium=2/Hard=3 mapped back to a label; unknown counts as Medium."""
    if not questions:
        return "Medium"
    scores = [DIFFICULTY_SCORES.get((q.difficulty or "").lower(), 2) for q in questions]
    avg_score = sum(scores) / len(scores)
    if avg_score <= 1.5:
        return "Easy"
    if avg_score <= 2.5:
        return "Medium"
    return "Hard"


def performance_level(accuracy: float) -> str:
    if accuracy >= 90:
        return "Excellent"
    if accuracy >= 75:
        return "Good"
    if accuracy >= 60:
        return "Average"
    return "Needs Improvement"


class PerformanceAnalyzer:
    """
    Builds TopicAnalysis rows for an attempt.

    Each attempted question lands in exactly one topic row of its section,
    and topics nobody answered produce no row.
    """

    def __init__(self, classifier: Optional[BatchClassifier] = None):
        self.classifier = classifier or RuleBasedClassifier()

    def analyze_performance(self, paper: ExamPaper, attempt: AttemptData) -> List[TopicAnalysis]:
        """
        Aggregate correctness and timing per topic, section by section.

        Args:
            paper: Test in the sectioned layout
            attempt: The learner's recorded responses

        Returns:
            Topic rows in section order, topics in first-seen order
        """
        responses = self._index_responses(attempt.attempted_questions)
        topic_analysis: List[TopicAnalysis] = []

        for section_index, section in enumerate(paper.sections):
            if not section.questions:
                continue

            question_topics = self.classifier.classify_many(section.questions, section.subject)

            # Group question indices by topic
            topic_groups: Dict[str, List[int]] = OrderedDict()
            for question_index in range(len(section.questions)):
                topic = question_topics[question_index]
                topic_groups.setdefault(topic, []).append(question_index)

            for topic, question_indices in topic_groups.items():
                topic_responses = [
                    responses[(section_index, idx)]
                    for idx in question_indices
                    if (section_index, idx) in responses
                ]
                if not topic_responses:
                    continue

                correct_answers = sum(1 for r in topic_responses if r.is_correct)
                accuracy = correct_answers / len(topic_responses) * 100
                average_time = sum(r.time_taken for r in topic_responses) / len(topic_responses)

                topic_analysis.append(TopicAnalysis(
                    topic=topic,
                    subject=section.subject,
                    questions_attempted=len(topic_responses),
                    correct_answers=correct_answers,
                    accuracy=accuracy,
                    average_time=average_time,
                    difficulty=average_difficulty([section.questions[i] for i in question_indices]),
                    performance=performance_level(accuracy),
                ))

        logger.info(
            f"Topic analysis: {len(topic_analysis)} topics across {len(paper.sections)} sections"
        )
        return topic_analysis

    def summarize_subjects(self, topics: Sequence[TopicAnalysis]) -> List[SubjectAnalysis]:
        """Roll topic rows up per subject, in first-seen order."""
        totals: Dict[str, Dict[str, float]] = OrderedDict()
        for topic in topics:
            data = totals.setdefault(topic.subject, {"attempted": 0, "correct": 0, "time": 0.0})
            data["attempted"] += topic.questions_attempted
            data["correct"] += topic.correct_answers
            data["time"] += topic.average_time * topic.questions_attempted

        summary = []
        for subject, data in totals.items():
            attempted = int(data["attempted"])
            summary.append(SubjectAnalysis(
                subject=subject,
                questions_attempted=attempted,
                correct_answers=int(data["correct"]),
                accuracy=(data["correct"] / attempted * 100) if attempted else 0.0,
                average_time=(data["time"] / attempted) if attempted else 0.0,
            ))
        return summary

    def _index_responses(
        self, attempted: Sequence[AttemptedQuestion]
    ) -> Dict[Tuple[int, int], AttemptedQuestion]:
        """Key responses by (section, question); a repeated pair keeps its first entry."""
        indexed: Dict[Tuple[int, int], AttemptedQuestion] = {}
        for response in attempted:
            key = (response.section_index, response.question_index)
            if key in indexed:
                logger.warning(f"Duplicate response for section {key[0]} question {key[1]} ignored")
                continue
            indexed[key] = response
        return indexed
