"""
Pacing analysis for a test attempt.
"""
from typing import Dict, List, Optional

from app.core.agents.analysis.schemas import AttemptData, TimeManagementAnalysis
from app.core.config import settings

MIN_EFFICIENCY = 20.0
MAX_EFFICIENCY = 100.0

PACING_GUIDANCE: Dict[str, List[str]] = {
    "Too Fast": [
        "Slow down and double-check your answers",
        "Spend more time reading questions carefully",
        "Review your work before submitting",
    ],
    "Too Slow": [
        "Practice solving questions under time pressure",
        "Focus on eliminating obviously wrong options quickly",
        "Skip difficult questions and return to them later",
        "Improve mental math skills to reduce calculation time",
    ],
    "Optimal": [
        "Maintain your current pacing strategy",
        "Continue balancing speed with accuracy",
    ],
}


class TimeManagementAnalyzer:
    """Compares average time per question against an ideal baseline."""

    def __init__(self, ideal_time: Optional[float] = None):
        self.ideal_time = ideal_time or settings.IDEAL_TIME_PER_QUESTION

    def analyze(self, attempt: AttemptData) -> TimeManagementAnalysis:
        if attempt.total_questions <= 0:
            return self._result(MAX_EFFICIENCY, "Optimal")

        avg_time = max(0.0, attempt.total_time_taken / attempt.total_questions)
        if avg_time == 0:
            efficiency = MAX_EFFICIENCY
        else:
            efficiency = min(MAX_EFFICIENCY, max(MIN_EFFICIENCY, self.ideal_time / avg_time * 100))

        if avg_time < self.ideal_time * 0.7:
            pacing = "Too Fast"
        elif avg_time > self.ideal_time * 1.3:
            pacing = "Too Slow"
        else:
            pacing = "Optimal"

        return self._result(efficiency, pacing)

    def _result(self, efficiency: float, pacing: str) -> TimeManagementAnalysis:
        return TimeManagementAnalysis(
            efficiency=efficiency,
            pacing=pacing,
            recommendations=list(PACING_GUIDANCE[pacing]),
        )
