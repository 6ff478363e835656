"""
Pydantic schemas for the test performance analysis engine.
"""
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, Field


Difficulty = Literal["Easy", "Medium", "Hard"]
PerformanceTier = Literal["Excellent", "Good", "Average", "Needs Improvement"]
RecommendationType = Literal["strength", "weakness", "time_management", "strategy"]
Priority = Literal["High", "Medium", "Low"]
Pacing = Literal["Too Fast", "Optimal", "Too Slow"]


# ============= Inputs =============

class QuestionData(BaseModel):
    """A question as the engine sees it."""
    question_text: str = ""
    options: List[str] = Field(default_factory=list)
    correct_answer: str = ""
    explanation: Optional[str] = None
    difficulty: Optional[str] = None


class SectionData(BaseModel):
    """Ordered questions sharing one subject."""
    subject: str
    questions: List[QuestionData] = Field(default_factory=list)


class ExamPaper(BaseModel):
    """A test normalised to the sectioned layout."""
    test_id: Optional[int] = None
    title: str = ""
    exam_type: str = ""
    sections: List[SectionData] = Field(default_factory=list)


class AttemptedQuestion(BaseModel):
    """One recorded learner response."""
    section_index: int = 0
    question_index: int
    selected_answer: str = ""
    is_correct: bool
    time_taken: float = 0.0  # seconds
    answer_history: List[str] = Field(default_factory=list)


class AttemptData(BaseModel):
    """Immutable snapshot of a submitted test attempt."""
    attempt_id: Optional[int] = None
    user_id: Optional[int] = None
    test_id: Optional[int] = None
    score_percent: float = 0.0
    total_questions: int = 0
    correct_count: int = 0
    incorrect_count: int = 0
    total_time_taken: float = 0.0
    attempted_questions: List[AttemptedQuestion] = Field(default_factory=list)
    changed_answers_count: int = 0
    changed_correct_count: int = 0


# ============= Derived analysis =============

class TopicAnalysis(BaseModel):
    """Aggregated performance for one topic in one section."""
    topic: str
    subject: str
    questions_attempted: int
    correct_answers: int
    accuracy: float
    average_time: float
    difficulty: Difficulty
    performance: PerformanceTier


class SubjectAnalysis(BaseModel):
    """Topic rows rolled up per subject."""
    subject: str
    questions_attempted: int
    correct_answers: int
    accuracy: float
    average_time: float


class Recommendation(BaseModel):
    """Study recommendation."""
    type: RecommendationType
    subject: Optional[str] = None
    topic: Optional[str] = None
    title: str
    description: str
    action_items: List[str] = Field(default_factory=list)
    priority: Priority


class StudyPlan(BaseModel):
    """Tasks over three horizons."""
    immediate: List[str] = Field(default_factory=list)
    short_term: List[str] = Field(default_factory=list)
    long_term: List[str] = Field(default_factory=list)


class ConceptualInsights(BaseModel):
    """Mastered and struggling concepts with their dependencies."""
    mastered_concepts: List[str] = Field(default_factory=list)
    struggling_concepts: List[str] = Field(default_factory=list)
    concept_connections: List[str] = Field(default_factory=list)


class TimeManagementAnalysis(BaseModel):
    """Pacing verdict for the attempt."""
    efficiency: float
    pacing: Pacing
    recommendations: List[str] = Field(default_factory=list)


class OverallPerformance(BaseModel):
    """Headline grade for the attempt."""
    grade: str
    percentile: int
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)


class ExamSpecificInsights(BaseModel):
    """Syllabus alignment for exams with a published syllabus."""
    exam_type: str
    syllabus_compliance: float
    priority_topics: List[str] = Field(default_factory=list)
    topic_units: Dict[str, str] = Field(default_factory=dict)


class DetailedAnalysis(BaseModel):
    """The complete report stored for an attempt."""
    overall_performance: OverallPerformance
    topic_analysis: List[TopicAnalysis] = Field(default_factory=list)
    subject_analysis: List[SubjectAnalysis] = Field(default_factory=list)
    recommendations: List[Recommendation] = Field(default_factory=list)
    study_plan: StudyPlan
    conceptual_insights: ConceptualInsights
    time_management_analysis: TimeManagementAnalysis
    exam_specific: Optional[ExamSpecificInsights] = None


class AnalysisReportResponse(BaseModel):
    """API response wrapping a stored report."""
    analysis_id: int
    test_attempt_id: int
    cached: bool
    analysis: DetailedAnalysis
