"""
Interview Context for MockRoom

Resolves who is being interviewed, for which role, and with which questions.

- Job-tailored interviews use the job post's authored questions and need both
  the job post and the candidate's application.
- Generic interviews use the built-in fallback questions and the candidate's
  own target position as the role.
"""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field

from mockroom.exceptions import MissingContext, PreconditionError
from mockroom.models.catalog import (
    ApplicationStatus,
    Candidate,
    JobApplication,
    JobPost,
    JobPostStatus,
)
from mockroom.models.interview import InterviewSession
from mockroom.models.question import InterviewQuestion, get_fallback_questions

logger = logging.getLogger(__name__)


class JobCatalog:
    """
    Lookup of candidates, job posts and applications.
    
    The records are owned by the job-post and application screens; this
    catalog is seeded from a JSON file or programmatically. The interview
    only writes back the link from an application to its completed session.
    """
    
    def __init__(self):
        self._candidates: dict[str, Candidate] = {}
        self._job_posts: dict[str, JobPost] = {}
        self._applications: dict[str, JobApplication] = {}
    
    @classmethod
    def from_file(cls, path: str | Path) -> "JobCatalog":
        """
        Load a catalog from JSON with "candidates", "job_posts" and
        "applications" lists.
        """
        catalog = cls()
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        
        for raw in data.get("candidates", []):
            catalog.add_candidate(Candidate.model_validate(raw))
        for raw in data.get("job_posts", []):
            catalog.add_job_post(JobPost.model_validate(raw))
        for raw in data.get("applications", []):
            catalog.add_application(JobApplication.model_validate(raw))
        
        logger.info(
            f"Loaded catalog from {path}: {len(catalog._candidates)} candidates, "
            f"{len(catalog._job_posts)} job posts, {len(catalog._applications)} applications"
        )
        return catalog
    
    def add_candidate(self, candidate: Candidate) -> None:
        self._candidates[candidate.id] = candidate
    
    def add_job_post(self, job_post: JobPost) -> None:
        self._job_posts[job_post.id] = job_post
    
    def add_application(self, application: JobApplication) -> None:
        self._applications[application.id] = application
    
    def get_candidate(self, candidate_id: str) -> Candidate | None:
        return self._candidates.get(candidate_id)
    
    def get_job_post(self, job_post_id: str) -> JobPost | None:
        return self._job_posts.get(job_post_id)
    
    def get_application(self, application_id: str) -> JobApplication | None:
        return self._applications.get(application_id)

    def record_interview(self, session: InterviewSession) -> JobApplication | None:
        """
        Mark the session's application as interviewed and link the session.

        Returns:
            The updated application, or None when the session has no
            application or is not completed
        """
        if not session.is_completed or not session.application_id:
            return None

        application = self._applications.get(session.application_id)
        if application is None:
            logger.warning(f"Session {session.id} refers to unknown application {session.application_id}")
            return None

        application = application.model_copy(update={
            "status": ApplicationStatus.INTERVIEWED,
            "interview_session_id": session.id,
        })
        self._applications[application.id] = application
        logger.info(f"Application {application.id} interviewed in session {session.id}")
        return application


class InterviewContext(BaseModel):
    """Everything needed to start one interview."""
    
    candidate: Candidate
    role: str = Field(..., description="Role label spoken in narration")
    company: str = ""
    questions: list[InterviewQuestion] = Field(default_factory=list)
    job_post_id: str | None = None
    application_id: str | None = None
    
    @property
    def is_job_tailored(self) -> bool:
        return self.job_post_id is not None


class InterviewContextResolver:
    """Builds an InterviewContext from catalog IDs."""
    
    def __init__(self, catalog: JobCatalog):
        self.catalog = catalog
    
    def resolve(
        self,
        user_id: str,
        job_post_id: str | None = None,
        application_id: str | None = None,
    ) -> InterviewContext:
        """
        Resolve an interview context.
        
        Raises:
            PreconditionError: If the user is unknown
            MissingContext: If a job-tailored interview has no active job post
                or no application for it
        """
        candidate = self.catalog.get_candidate(user_id)
        if candidate is None:
            raise PreconditionError(f"Unknown user: {user_id}")
        
        if job_post_id is None:
            return InterviewContext(
                candidate=candidate,
                role=self._generic_role(candidate),
                questions=get_fallback_questions(),
            )
        
        job_post = self.catalog.get_job_post(job_post_id)
        if job_post is None or job_post.status != JobPostStatus.ACTIVE:
            raise MissingContext("Interview session not found")
        
        application = self.catalog.get_application(application_id) if application_id else None
        if application is None or application.job_post_id != job_post.id:
            raise MissingContext("Interview session not found")
        
        questions = sorted(job_post.questions, key=lambda q: q.order)
        
        return InterviewContext(
            candidate=candidate,
            role=job_post.role_label,
            company=job_post.company,
            questions=questions,
            job_post_id=job_post.id,
            application_id=application.id,
        )
    
    @staticmethod
    def _generic_role(candidate: Candidate) -> str:
        if candidate.position:
            return f"{candidate.position} position"
        return "practice session"
