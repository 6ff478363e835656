"""
Conversion from ORM rows to the engine's value objects.
"""
from app.core.agents.analysis.schemas import (
    AttemptData,
    AttemptedQuestion,
    ExamPaper,
    QuestionData,
    SectionData,
)
from app.models.test import Question, Test
from app.models.test_attempt import TestAttempt


def _question_data(question: Question, test: Test) -> QuestionData:
    return QuestionData(
        question_text=question.question_text or "",
        options=list(question.options or []),
        correct_answer=question.correct_answer or "",
        explanation=question.explanation,
        difficulty=question.difficulty or test.difficulty,
    )


def paper_from_test(test: Test) -> ExamPaper:
    """
    Normalise a test to the sectioned layout.

    A legacy test without sections becomes one section at index 0 holding
    its directly attached questions, labelled with the test's subject.
    """
    if test.sections:
        sections = [
            SectionData(
                subject=section.subject,
                questions=[_question_data(q, test) for q in section.questions],
            )
            for section in test.sections
        ]
    else:
        legacy_questions = [q for q in test.questions if q.section_id is None]
        sections = [
            SectionData(
                subject=test.subject or "General",
                questions=[_question_data(q, test) for q in legacy_questions],
            )
        ]

    return ExamPaper(
        test_id=test.id,
        title=test.title or "",
        exam_type=test.exam_type or "",
        sections=sections,
    )


def attempt_from_record(attempt: TestAttempt) -> AttemptData:
    return AttemptData(
        attempt_id=attempt.id,
        user_id=attempt.user_id,
        test_id=attempt.test_id,
        score_percent=attempt.score_percent or 0.0,
        total_questions=attempt.total_questions or 0,
        correct_count=attempt.correct_count or 0,
        incorrect_count=attempt.incorrect_count or 0,
        total_time_taken=attempt.total_time_taken or 0.0,
        attempted_questions=[
            AttemptedQuestion.model_validate(item) for item in (attempt.attempted_questions or [])
        ],
        changed_answers_count=attempt.changed_answers_count or 0,
        changed_correct_count=attempt.changed_correct_count or 0,
    )
