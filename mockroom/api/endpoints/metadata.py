"""
Metadata API endpoints

Provides reference data for:
- The fallback question set
- Question types and difficulty levels
"""

from fastapi import APIRouter

from mockroom.models.question import (
    InterviewQuestion,
    QuestionDifficulty,
    QuestionType,
    get_fallback_questions,
)

router = APIRouter()


@router.get("/questions/fallback", response_model=list[InterviewQuestion])
async def get_fallback_question_set() -> list[InterviewQuestion]:
    """Get the questions used for interviews without a job post."""
    return get_fallback_questions()


@router.get("/question-types")
async def get_question_types() -> list[dict[str, str]]:
    """Get the available question types."""
    return [
        {"id": t.value, "name": t.value.replace("_", " ").title()}
        for t in QuestionType
    ]


@router.get("/difficulty-levels")
async def get_difficulty_levels() -> list[dict[str, str]]:
    """Get the available difficulty levels."""
    return [
        {"id": d.value, "name": d.value.title()}
        for d in QuestionDifficulty
    ]
