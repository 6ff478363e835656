"""Models module - Import all models here so metadata sees every table."""
from app.db.base import Base
from app.models.user import User
from app.models.test import Test, TestSection, Question
from app.models.test_attempt import TestAttempt
from app.models.analysis_report import AnalysisReport

__all__ = ["Base", "User", "Test", "TestSection", "Question", "TestAttempt", "AnalysisReport"]
