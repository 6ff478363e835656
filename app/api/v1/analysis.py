"""
API endpoints for test attempt performance analysis.
"""
import logging
from typing import Any
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.agents.analysis import AnalysisService
from app.core.agents.analysis.schemas import AnalysisReportResponse
from app.core.dependencies import get_current_active_user
from app.core.exceptions import ForbiddenError, NotFoundError
from app.db.base import get_db
from app.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/attempts/{attempt_id}", response_model=AnalysisReportResponse)
def get_attempt_analysis(
    attempt_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> Any:
    """
    Get the detailed performance analysis for one of your test attempts.

    The first request computes and stores the report; later requests return
    the stored report unchanged.
    """
    service = AnalysisService(db)
    try:
        owner_id = service.get_attempt_owner(attempt_id)
        if owner_id != int(current_user.id):  # type: ignore
            raise ForbiddenError("You do not have access to this test attempt")

        stored = service.get_or_create(attempt_id)
        return AnalysisReportResponse(
            analysis_id=stored.analysis_id,
            test_attempt_id=stored.test_attempt_id,
            cached=stored.cached,
            analysis=stored.analysis,
        )

    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(f"Error generating analysis for attempt {attempt_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate analysis"
        )
