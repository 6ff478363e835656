"""
Test, section and question models for the question bank.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class Test(Base):
    """
    Test model.

    Newer tests own an ordered list of sections. Older tests have no sections
    and keep their questions directly, with a single subject on the test.
    """

    __test__ = False  # keep pytest from collecting this model
    __tablename__ = "tests"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    exam_type = Column(String, nullable=False, default="JEE")  # JEE, BITSAT
    subject = Column(String, nullable=True)  # Physics, Chemistry, Math (legacy layout)
    test_type = Column(String, nullable=True)  # fullMock, chapterWise, dailyQuiz, themedEvent
    difficulty = Column(String, default="Medium")  # Easy, Medium, Hard
    duration = Column(Integer, nullable=True)  # minutes
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    sections = relationship(
        "TestSection",
        back_populates="test",
        order_by="TestSection.position",
        cascade="all, delete-orphan",
    )
    questions = relationship(
        "Question",
        back_populates="test",
        order_by="Question.position",
        cascade="all, delete-orphan",
    )


class TestSection(Base):
    """Subject-scoped group of questions within a test."""

    __test__ = False
    __tablename__ = "test_sections"

    id = Column(Integer, primary_key=True, index=True)
    test_id = Column(Integer, ForeignKey("tests.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)  # 0-based section index
    subject = Column(String, nullable=False)

    # Relationships
    test = relationship("Test", back_populates="sections")
    questions = relationship("Question", back_populates="section", order_by="Question.position")


class Question(Base):
    """Multiple choice question."""

    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    test_id = Column(Integer, ForeignKey("tests.id", ondelete="CASCADE"), nullable=False, index=True)
    section_id = Column(Integer, ForeignKey("test_sections.id", ondelete="CASCADE"), nullable=True)
    position = Column(Integer, nullable=False)  # 0-based index within its section
    question_text = Column(Text, nullable=False)
    options = Column(JSON, nullable=False)  # List of four option strings
    correct_answer = Column(String, nullable=False)
    explanation = Column(Text, nullable=True)
    difficulty = Column(String, nullable=True)  # Easy, Medium, Hard

    # Relationships
    test = relationship("Test", back_populates="questions")
    section = relationship("TestSection", back_populates="questions")
