from .analysis import (
    INDUSTRIES,
    LEVELS,
    SECTION_NAMES,
    ComprehensiveAnalysis,
    Industry,
    JobAnalysis,
    Level,
    Priority,
    Recommendation,
    ResumeAnalysis,
    SectionScore,
    SectionScores,
    Suggestion,
)
from .requests import (
    ComprehensiveRequest,
    ComprehensiveResponse,
    ExportRequest,
    HistoryRecord,
    HistoryStats,
    JobAnalysisRequest,
    JobAnalysisResponse,
    ResumeAnalysisRequest,
    ResumeAnalysisResponse,
)

__all__ = [
    "INDUSTRIES",
    "LEVELS",
    "SECTION_NAMES",
    "Industry",
    "Level",
    "Priority",
    "SectionScore",
    "SectionScores",
    "Suggestion",
    "Recommendation",
    "ResumeAnalysis",
    "JobAnalysis",
    "ComprehensiveAnalysis",
    "ResumeAnalysisRequest",
    "JobAnalysisRequest",
    "ComprehensiveRequest",
    "ExportRequest",
    "ResumeAnalysisResponse",
    "JobAnalysisResponse",
    "ComprehensiveResponse",
    "HistoryRecord",
    "HistoryStats",
]
