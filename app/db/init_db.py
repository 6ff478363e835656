"""
Database initialization and seeding.
"""
import logging

from sqlalchemy.orm import Session

from app.models.test import Question, Test, TestSection
from app.models.user import User

logger = logging.getLogger(__name__)

SAMPLE_TEST_TITLE = "JEE Main Sample Mock"

# (subject, [(question_text, options, correct_answer, difficulty), ...])
SAMPLE_SECTIONS = [
    ("Physics", [
        ("Calculate the force on a 2kg mass accelerating at 3m/s²", ["3N", "5N", "6N", "9N"], "6N", "Medium"),
        ("What is sin(30°)?", ["0", "0.5", "1", "√3/2"], "0.5", "Easy"),
        ("Which mirror forms a virtual, erect and magnified image?", ["Plane", "Concave", "Convex", "None"], "Concave", "Medium"),
    ]),
    ("Chemistry", [
        ("Which of the following is an alkane?", ["C2H4", "C2H2", "C2H6", "C6H6"], "C2H6", "Easy"),
        ("What is the pH of a neutral salt solution at 25°C?", ["5", "7", "9", "14"], "7", "Easy"),
    ]),
    ("Mathematics", [
        ("What is 12 × 8?", ["86", "96", "106", "92"], "96", "Easy"),
        ("Solve for x: 2x + 3 = 11", ["3", "4", "5", "7"], "4", "Easy"),
        ("Find the derivative of x³ with respect to x", ["x²", "3x²", "3x", "x³/3"], "3x²", "Hard"),
    ]),
]


def init_db(db: Session) -> None:
    """
    Initialize database with default data.

    Args:
        db: Database session
    """
    # Check if demo student exists
    student = db.query(User).filter(User.email == "student@example.com").first()
    if not student:
        student = User(
            email="student@example.com",
            username="student",
            full_name="Demo Student",
            role="student",
            is_active=True,
        )
        db.add(student)
        db.commit()
        db.refresh(student)
        logger.info("Demo student created successfully")

    test = db.query(Test).filter(Test.title == SAMPLE_TEST_TITLE).first()
    if not test:
        test = Test(
            title=SAMPLE_TEST_TITLE,
            exam_type="JEE",
            test_type="fullMock",
            difficulty="Medium",
            duration=30,
        )
        for position, (subject, questions) in enumerate(SAMPLE_SECTIONS):
            section = TestSection(position=position, subject=subject)
            test.sections.append(section)
            for q_position, (text, options, answer, difficulty) in enumerate(questions):
                question = Question(
                    position=q_position,
                    question_text=text,
                    options=options,
                    correct_answer=answer,
                    difficulty=difficulty,
                )
                section.questions.append(question)
                test.questions.append(question)
        db.add(test)
        db.commit()
        logger.info(f"Sample test '{SAMPLE_TEST_TITLE}' created successfully")
