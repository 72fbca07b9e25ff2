"""
Candidate, job post and application models for MockRoom

These records are owned by the job-post and application screens; the
interview flow only reads them.
"""

from enum import Enum

from pydantic import BaseModel, Field

from mockroom.models.question import InterviewQuestion


class JobPostStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"
    CLOSED = "closed"


class ApplicationStatus(str, Enum):
    APPLIED = "applied"
    INTERVIEWED = "interviewed"
    SHORTLISTED = "shortlisted"
    REJECTED = "rejected"


class Candidate(BaseModel):
    """The resolved user taking an interview."""
    
    id: str
    name: str
    email: str = ""
    position: str = Field(
        default="",
        description="Role the candidate is practising for (generic interviews)"
    )


class JobPost(BaseModel):
    """A job post with its authored interview questions."""
    
    id: str
    title: str
    company: str = ""
    department: str = ""
    status: JobPostStatus = JobPostStatus.ACTIVE
    questions: list[InterviewQuestion] = Field(default_factory=list)
    
    @property
    def role_label(self) -> str:
        """Role description used in narration, e.g. 'Data Analyst position at Acme'."""
        if self.company:
            return f"{self.title} position at {self.company}"
        return f"{self.title} position"


class JobApplication(BaseModel):
    """A candidate's application to a job post."""
    
    id: str
    job_post_id: str
    candidate_name: str
    candidate_email: str = ""
    status: ApplicationStatus = ApplicationStatus.APPLIED
    interview_session_id: str | None = None
