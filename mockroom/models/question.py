"""
Question models for MockRoom
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class QuestionType(str, Enum):
    """Types of interview questions."""
    
    GENERAL = "general"
    BEHAVIORAL = "behavioral"          # Tell me about a time...
    TECHNICAL = "technical"
    SITUATIONAL = "situational"        # How would you handle X?


class QuestionDifficulty(str, Enum):
    """Question difficulty levels."""
    
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class InterviewQuestion(BaseModel):
    """A single interview question. Immutable once a session starts."""
    
    model_config = ConfigDict(frozen=True)
    
    # Identification
    id: str = Field(..., description="Unique question ID")
    
    # Content
    question: str = Field(..., min_length=1, description="The prompt text")
    
    # Classification
    type: QuestionType = Field(
        default=QuestionType.GENERAL,
        description="Question category"
    )
    category: str | None = Field(
        default=None,
        description="Free-form topic label authored with the job post"
    )
    difficulty: QuestionDifficulty | None = None
    
    # Timing
    expected_duration: int = Field(
        default=120, gt=0,
        description="Expected answer length in seconds"
    )
    
    # Guidance
    evaluation_criteria: list[str] = Field(
        default_factory=list,
        description="Key points expected in a good answer"
    )
    suggested_answers: list[str] = Field(default_factory=list)
    
    # Ordering
    is_required: bool = True
    order: int = 0


# Used by the generic (non-job) interview path
FALLBACK_QUESTIONS: tuple[InterviewQuestion, ...] = (
    InterviewQuestion(
        id="1",
        question="Tell me about yourself and your professional background.",
        type=QuestionType.GENERAL,
        expected_duration=120,
        order=1,
    ),
    InterviewQuestion(
        id="2",
        question="Why are you interested in this position and our company?",
        type=QuestionType.BEHAVIORAL,
        expected_duration=90,
        order=2,
    ),
    InterviewQuestion(
        id="3",
        question="Describe a challenging project you worked on and how you overcame obstacles.",
        type=QuestionType.BEHAVIORAL,
        expected_duration=150,
        order=3,
    ),
    InterviewQuestion(
        id="4",
        question="How do you stay updated with the latest technologies in your field?",
        type=QuestionType.TECHNICAL,
        expected_duration=90,
        order=4,
    ),
    InterviewQuestion(
        id="5",
        question="Where do you see yourself in the next 5 years?",
        type=QuestionType.GENERAL,
        expected_duration=90,
        order=5,
    ),
)


def get_fallback_questions() -> list[InterviewQuestion]:
    """Get the built-in question set for interviews without a job post."""
    return list(FALLBACK_QUESTIONS)
