"""
Interview session and orchestrator phase models for MockRoom
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

from mockroom.exceptions import SessionInvariantError
from mockroom.models.evaluation import Evaluation
from mockroom.models.question import InterviewQuestion


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionStatus(str, Enum):
    """Persisted session lifecycle."""
    
    SCHEDULED = "scheduled"
    IN_PROGRESS = "inprogress"
    COMPLETED = "completed"


class InterviewResponse(BaseModel):
    """A recorded answer. Never mutated after creation."""
    
    model_config = ConfigDict(frozen=True)
    
    question_id: str
    response: str = ""  # Candidate notes or placeholder text
    duration: int = Field(..., ge=0, description="Recorded duration in seconds")
    timestamp: datetime = Field(default_factory=utc_now)


class InterviewSession(BaseModel):
    """
    One end-to-end interview attempt by one candidate.
    
    Frozen: every change produces a new value, which is written back to the
    session store as a whole object.
    """
    
    model_config = ConfigDict(frozen=True)
    
    # Identification
    id: str = Field(default_factory=lambda: uuid4().hex)
    user_id: str
    job_post_id: str | None = None
    application_id: str | None = None
    
    # Timing
    start_time: datetime = Field(default_factory=utc_now)
    end_time: datetime | None = None
    
    # State
    status: SessionStatus = SessionStatus.IN_PROGRESS
    
    # Questions & Responses
    questions: tuple[InterviewQuestion, ...] = ()
    responses: tuple[InterviewResponse, ...] = ()
    
    evaluation: Evaluation | None = None

    @model_validator(mode="after")
    def check_completion(self) -> "InterviewSession":
        """A session is completed exactly when it has an evaluation and an end time."""
        finished = self.evaluation is not None and self.end_time is not None
        if self.is_completed != finished:
            raise ValueError(
                "status 'completed' requires both evaluation and end_time, "
                "and an evaluated, ended session must be completed"
            )
        if len(self.responses) > len(self.questions):
            raise ValueError("more responses than questions")
        return self

    @property
    def is_completed(self) -> bool:
        return self.status == SessionStatus.COMPLETED
    
    @property
    def answered_question_ids(self) -> set[str]:
        """IDs of questions that already have a response."""
        return {r.question_id for r in self.responses}
    
    def get_question(self, index: int) -> InterviewQuestion | None:
        """Get a question by position, or None when out of range."""
        if 0 <= index < len(self.questions):
            return self.questions[index]
        return None
    
    def with_response(self, response: InterviewResponse) -> "InterviewSession":
        """
        Return a copy with one more response appended.
        
        Raises:
            SessionInvariantError: If the session is closed, the question is
                unknown, already answered, or every question has a response
        """
        if self.is_completed:
            raise SessionInvariantError(f"Session {self.id} is already completed")
        if response.question_id not in {q.id for q in self.questions}:
            raise SessionInvariantError(f"Unknown question: {response.question_id}")
        if response.question_id in self.answered_question_ids:
            raise SessionInvariantError(
                f"Question {response.question_id} already has a response"
            )
        if len(self.responses) >= len(self.questions):
            raise SessionInvariantError("Every question already has a response")
        
        return self.model_copy(update={"responses": self.responses + (response,)})
    
    def completed_with(
        self,
        evaluation: Evaluation,
        end_time: datetime | None = None,
    ) -> "InterviewSession":
        """Return a completed copy carrying the evaluation and end time."""
        if self.is_completed:
            raise SessionInvariantError(f"Session {self.id} is already completed")
        
        return self.model_copy(update={
            "status": SessionStatus.COMPLETED,
            "evaluation": evaluation,
            "end_time": end_time or utc_now(),
        })
    
    def duration_seconds(self) -> float:
        """Get interview duration in seconds."""
        end = self.end_time or utc_now()
        return (end - self.start_time).total_seconds()


# ============================================================================
# ORCHESTRATOR PHASES
# ============================================================================

class NarrationSegment(str, Enum):
    """What a spoken prompt is for."""
    
    GREETING = "greeting"
    QUESTION = "question"
    TRANSITION = "transition"
    CLOSING = "closing"


class NotStarted(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["not_started"] = "not_started"


class Previewing(BaseModel):
    """Devices requested, waiting for the candidate to confirm readiness."""
    model_config = ConfigDict(frozen=True)
    kind: Literal["previewing"] = "previewing"


class Narrating(BaseModel):
    """The AI interviewer is speaking; recording is disabled."""
    model_config = ConfigDict(frozen=True)
    kind: Literal["narrating"] = "narrating"
    segment: NarrationSegment
    index: int = Field(..., ge=0)


class AwaitingResponse(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["awaiting_response"] = "awaiting_response"
    index: int = Field(..., ge=0)


class Recording(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["recording"] = "recording"
    index: int = Field(..., ge=0)
    started_at: datetime = Field(default_factory=utc_now)


class Completed(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["completed"] = "completed"


class Exited(BaseModel):
    """Left early. The stored session is untouched and stays in progress."""
    model_config = ConfigDict(frozen=True)
    kind: Literal["exited"] = "exited"


InterviewPhase = Annotated[
    Union[NotStarted, Previewing, Narrating, AwaitingResponse, Recording, Completed, Exited],
    Field(discriminator="kind"),
]
