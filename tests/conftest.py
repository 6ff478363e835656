"""
Pytest configuration and fixtures for the analysis backend tests.
"""

import os
import tempfile

# Settings are read at import time, so the environment must be in place first
_TEST_DB_DIR = tempfile.mkdtemp(prefix="exam-analysis-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DB_DIR, 'app.db')}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["OPENAI_API_KEY"] = "sk-test"
os.environ["SEMANTIC_CLASSIFIER_ENABLED"] = "false"
os.environ["ADVICE_ENRICHMENT_ENABLED"] = "false"

import itertools
from typing import Dict, Optional, Sequence, Tuple

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.agents.analysis.schemas import (
    AttemptData,
    AttemptedQuestion,
    ExamPaper,
    QuestionData,
    SectionData,
    TopicAnalysis,
)
from app.core.agents.analysis.performance_analyzer import performance_level
from app.core.security import create_access_token
from app.db.base import Base, get_db
from app.main import app
from app.models import Question, Test, TestAttempt, TestSection, User


DEFAULT_OPTIONS = ["A", "B", "C", "D"]

# One Physics section: a force question and a trigonometric value question
PHYSICS_SECTIONS = [
    ("Physics", [
        ("Calculate the force on a 2kg mass accelerating at 3m/s²", "Medium"),
        ("What is sin(30°)?", "Easy"),
    ]),
]


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture
def engine(tmp_path):
    """Fresh SQLite database file per test."""
    test_engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory) -> Session:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory) -> TestClient:
    """Test client whose requests use the per-test database."""
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# =============================================================================
# Model Factories
# =============================================================================

@pytest.fixture
def make_user(db: Session):
    counter = itertools.count(1)

    def _make_user(**overrides) -> User:
        n = next(counter)
        fields = {
            "email": f"student{n}@example.com",
            "username": f"student{n}",
            "full_name": f"Student {n}",
            "role": "student",
            "is_active": True,
        }
        fields.update(overrides)
        user = User(**fields)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_test(db: Session):
    def _make_test(
        sections: Optional[Sequence[Tuple[str, Sequence[Tuple[str, str]]]]] = None,
        questions: Optional[Sequence[Tuple[str, str]]] = None,
        subject: Optional[str] = None,
        exam_type: str = "JEE",
        difficulty: str = "Medium",
        title: str = "Practice Test",
    ) -> Test:
        """
        Create a test.

        `sections` is [(subject, [(question_text, difficulty), ...])]. Passing
        `questions` instead builds the legacy layout with no sections.
        """
        test = Test(title=title, exam_type=exam_type, subject=subject, difficulty=difficulty)
        for position, (section_subject, section_questions) in enumerate(sections or []):
            section = TestSection(position=position, subject=section_subject)
            test.sections.append(section)
            for q_position, (text, q_difficulty) in enumerate(section_questions):
                question = Question(
                    position=q_position,
                    question_text=text,
                    options=DEFAULT_OPTIONS,
                    correct_answer="A",
                    difficulty=q_difficulty,
                )
                section.questions.append(question)
                test.questions.append(question)

        for q_position, (text, q_difficulty) in enumerate(questions or []):
            test.questions.append(Question(
                position=q_position,
                question_text=text,
                options=DEFAULT_OPTIONS,
                correct_answer="A",
                difficulty=q_difficulty,
            ))

        db.add(test)
        db.commit()
        db.refresh(test)
        return test

    return _make_test


@pytest.fixture
def make_attempt(db: Session):
    def _make_attempt(
        user: User,
        test: Test,
        responses: Sequence[Tuple[int, int, bool, float]],
        total_questions: Optional[int] = None,
        total_time: Optional[float] = None,
        changed: int = 0,
        changed_correct: int = 0,
    ) -> TestAttempt:
        """`responses` is [(section_index, question_index, is_correct, time_taken)]."""
        total = len(responses) if total_questions is None else total_questions
        correct = sum(1 for r in responses if r[2])
        attempt = TestAttempt(
            user_id=user.id,
            test_id=test.id,
            score=float(correct),
            score_percent=(correct / total * 100) if total else 0.0,
            total_questions=total,
            correct_count=correct,
            incorrect_count=len(responses) - correct,
            total_time_taken=sum(r[3] for r in responses) if total_time is None else total_time,
            attempted_questions=[
                {
                    "section_index": section_index,
                    "question_index": question_index,
                    "selected_answer": "A" if is_correct else "B",
                    "is_correct": is_correct,
                    "time_taken": time_taken,
                    "answer_history": [],
                }
                for section_index, question_index, is_correct, time_taken in responses
            ],
            changed_answers_count=changed,
            changed_correct_count=changed_correct,
        )
        db.add(attempt)
        db.commit()
        db.refresh(attempt)
        return attempt

    return _make_attempt


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> Dict[str, str]:
        token = create_access_token(str(user.id))
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


# =============================================================================
# Engine Value Builders
# =============================================================================

@pytest.fixture
def build_paper():
    def _build_paper(
        sections: Sequence[Tuple[str, Sequence[Tuple[str, Optional[str]]]]],
        exam_type: str = "JEE",
    ) -> ExamPaper:
        return ExamPaper(
            test_id=1,
            title="Practice Test",
            exam_type=exam_type,
            sections=[
                SectionData(
                    subject=subject,
                    questions=[
                        QuestionData(question_text=text, difficulty=difficulty)
                        for text, difficulty in questions
                    ],
                )
                for subject, questions in sections
            ],
        )

    return _build_paper


@pytest.fixture
def build_attempt():
    def _build_attempt(
        responses: Sequence[Tuple[int, int, bool, float]] = (),
        total_questions: Optional[int] = None,
        total_time: Optional[float] = None,
        changed: int = 0,
        changed_correct: int = 0,
        score_percent: Optional[float] = None,
    ) -> AttemptData:
        total = len(responses) if total_questions is None else total_questions
        correct = sum(1 for r in responses if r[2])
        if score_percent is None:
            score_percent = (correct / total * 100) if total else 0.0
        return AttemptData(
            attempt_id=1,
            user_id=1,
            test_id=1,
            score_percent=score_percent,
            total_questions=total,
            correct_count=correct,
            incorrect_count=len(responses) - correct,
            total_time_taken=sum(r[3] for r in responses) if total_time is None else total_time,
            attempted_questions=[
                AttemptedQuestion(
                    section_index=section_index,
                    question_index=question_index,
                    is_correct=is_correct,
                    time_taken=time_taken,
                )
                for section_index, question_index, is_correct, time_taken in responses
            ],
            changed_answers_count=changed,
            changed_correct_count=changed_correct,
        )

    return _build_attempt


@pytest.fixture
def topic_row():
    def _topic_row(
        topic: str,
        accuracy: float,
        subject: str = "Mathematics",
        attempted: int = 10,
        average_time: float = 60.0,
    ) -> TopicAnalysis:
        return TopicAnalysis(
            topic=topic,
            subject=subject,
            questions_attempted=attempted,
            correct_answers=round(attempted * accuracy / 100),
            accuracy=accuracy,
            average_time=average_time,
            difficulty="Medium",
            performance=performance_level(accuracy),
        )

    return _topic_row


@pytest.fixture
def physics_sections():
    return PHYSICS_SECTIONS
