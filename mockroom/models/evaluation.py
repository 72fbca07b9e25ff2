"""
Evaluation models for MockRoom

The score bundle produced once, when an interview session completes.
"""

from pydantic import BaseModel, ConfigDict, Field


class Evaluation(BaseModel):
    """Synthesized scores and feedback for a completed session."""
    
    model_config = ConfigDict(frozen=True)
    
    # Scores (each 0-100)
    overall: int = Field(..., ge=0, le=100)
    communication: int = Field(..., ge=0, le=100)
    technical: int = Field(..., ge=0, le=100)
    body_language: int = Field(..., ge=0, le=100)
    confidence: int = Field(..., ge=0, le=100)
    presentation: int = Field(
        ..., ge=0, le=100,
        description="Professional presentation (attire, framing)"
    )
    
    # Qualitative feedback
    feedback: str = ""
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    
    # Per-question scores keyed by question ID (may be empty)
    question_scores: dict[str, int] = Field(default_factory=dict)
    
    def dimension_scores(self) -> dict[str, int]:
        """Get the sub-scores shown on the results view, keyed by label."""
        return {
            "Communication Skills": self.communication,
            "Technical Knowledge": self.technical,
            "Body Language": self.body_language,
            "Confidence Level": self.confidence,
            "Professional Presentation": self.presentation,
        }
