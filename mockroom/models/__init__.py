"""
Data models and schemas for MockRoom

Contains Pydantic models for:
- Interview sessions, responses and orchestrator phases
- Questions
- Evaluation results
- Results report
- Candidates, job posts and applications
"""

from mockroom.models.interview import (
    InterviewSession,
    InterviewResponse,
    SessionStatus,
    NarrationSegment,
    InterviewPhase,
    NotStarted,
    Previewing,
    Narrating,
    AwaitingResponse,
    Recording,
    Completed,
    Exited,
)
from mockroom.models.question import (
    InterviewQuestion,
    QuestionType,
    QuestionDifficulty,
    FALLBACK_QUESTIONS,
    get_fallback_questions,
)
from mockroom.models.evaluation import Evaluation
from mockroom.models.report import ResultsReport, DimensionScore, ScoreBand
from mockroom.models.catalog import (
    Candidate,
    JobPost,
    JobPostStatus,
    JobApplication,
    ApplicationStatus,
)

__all__ = [
    # Interview
    "InterviewSession",
    "InterviewResponse",
    "SessionStatus",
    "NarrationSegment",
    "InterviewPhase",
    "NotStarted",
    "Previewing",
    "Narrating",
    "AwaitingResponse",
    "Recording",
    "Completed",
    "Exited",
    # Question
    "InterviewQuestion",
    "QuestionType",
    "QuestionDifficulty",
    "FALLBACK_QUESTIONS",
    "get_fallback_questions",
    # Evaluation
    "Evaluation",
    # Report
    "ResultsReport",
    "DimensionScore",
    "ScoreBand",
    # Catalog
    "Candidate",
    "JobPost",
    "JobPostStatus",
    "JobApplication",
    "ApplicationStatus",
]
