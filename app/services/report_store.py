"""
Persistence for analysis reports.
"""
import logging
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import PersistenceConflict
from app.models.analysis_report import AnalysisReport

logger = logging.getLogger(__name__)


class ReportStore:
    """
    Reads and writes AnalysisReport rows.

    There is no lock around compute-and-store: two requests for the same
    attempt may both compute a report, and the unique attempt id lets only
    one insert succeed. The loser gets the winner's row back.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_attempt(self, test_attempt_id: int) -> Optional[AnalysisReport]:
        return self.db.query(AnalysisReport).filter(
            AnalysisReport.test_attempt_id == test_attempt_id
        ).first()

    def create(
        self,
        test_attempt_id: int,
        user_id: int,
        report: Dict[str, Any],
    ) -> Tuple[AnalysisReport, bool]:
        """
        Store a report unless one already exists for the attempt.

        Returns:
            (row, created) where created is False if another writer won
        """
        try:
            return self._insert(test_attempt_id, user_id, report), True
        except PersistenceConflict as e:
            logger.warning(f"{e}; returning existing report")
            existing = self.find_by_attempt(test_attempt_id)
            if existing is None:
                raise
            return existing, False

    def _insert(self, test_attempt_id: int, user_id: int, report: Dict[str, Any]) -> AnalysisReport:
        row = AnalysisReport(
            test_attempt_id=test_attempt_id,
            user_id=user_id,
            report=report,
        )
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise PersistenceConflict(
                f"Analysis report for attempt {test_attempt_id} already exists"
            ) from e
        self.db.refresh(row)
        return row
