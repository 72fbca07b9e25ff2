"""
Report models for MockRoom

Defines the structure of the results view for a completed interview.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class ScoreBand(str, Enum):
    """Colour band used for a score on the results view."""
    
    EXCELLENT = "excellent"  # 80+
    GOOD = "good"            # 70-79
    FAIR = "fair"            # 60-69
    POOR = "poor"            # <60
    
    @property
    def display_text(self) -> str:
        """Human-readable band."""
        return self.value.capitalize()


class DimensionScore(BaseModel):
    """One scored dimension with its grade."""
    
    label: str
    score: int = Field(..., ge=0, le=100)
    grade: str
    band: ScoreBand


class ResultsReport(BaseModel):
    """Everything the results view shows for a completed session."""
    
    session_id: str
    user_id: str
    job_post_id: str | None = None
    
    # Overall
    overall_score: int = Field(..., ge=0, le=100)
    overall_grade: str
    overall_band: ScoreBand
    dimension_scores: list[DimensionScore] = Field(default_factory=list)
    
    # Feedback
    feedback: str
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    question_scores: dict[str, int] = Field(default_factory=dict)
    
    # Stats
    questions_total: int
    questions_answered: int
    interview_duration_minutes: int
    started_at: datetime
    completed_at: datetime
