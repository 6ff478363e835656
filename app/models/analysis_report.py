"""
Analysis Report Model - stores the generated performance analysis for a test attempt.
"""
from sqlalchemy import Column, Integer, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base import Base


class AnalysisReport(Base):
    """
    Stores the analysis computed for a test attempt.

    The unique constraint on test_attempt_id makes report creation idempotent:
    a second writer for the same attempt fails and reads the first row instead.
    """
    __tablename__ = "analysis_reports"

    id = Column(Integer, primary_key=True, index=True)

    # One analysis per attempt
    test_attempt_id = Column(
        Integer,
        ForeignKey("test_attempts.id", ondelete="CASCADE"),
        unique=True,
        nullable=False
    )
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Full DetailedAnalysis document (JSON object)
    report = Column(JSON, nullable=False)

    # Metadata
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    test_attempt = relationship("TestAttempt", backref="analysis_report")
    user = relationship("User", backref="analysis_reports")
