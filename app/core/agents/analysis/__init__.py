"""
Test performance analysis agent modules.
"""
from .classifier import BatchClassifier, RuleBasedClassifier, SemanticClassifier, build_classifier
from .performance_analyzer import PerformanceAnalyzer
from .recommendation_generator import RecommendationGenerator
from .study_plan import StudyPlanBuilder
from .concept_linker import ConceptLinker
from .time_analyzer import TimeManagementAnalyzer
from .report_assembler import AnalysisService, StoredAnalysis

__all__ = [
    "BatchClassifier",
    "RuleBasedClassifier",
    "SemanticClassifier",
    "build_classifier",
    "PerformanceAnalyzer",
    "RecommendationGenerator",
    "StudyPlanBuilder",
    "ConceptLinker",
    "TimeManagementAnalyzer",
    "AnalysisService",
    "StoredAnalysis",
]
