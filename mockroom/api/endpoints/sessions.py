"""
Session API endpoints

Read access to stored interview sessions.
"""

from fastapi import APIRouter, HTTPException

from mockroom.api.dependencies import get_session_store
from mockroom.models.interview import InterviewSession

router = APIRouter()


@router.get("", response_model=list[InterviewSession])
async def list_sessions(user_id: str | None = None) -> list[InterviewSession]:
    """List stored sessions, oldest first, optionally for one user."""
    return get_session_store().list_sessions(user_id=user_id)


@router.get("/active", response_model=InterviewSession)
async def get_active_session() -> InterviewSession:
    """Get the session most recently opened by an interview screen."""
    session = get_session_store().active_session
    if not session:
        raise HTTPException(status_code=404, detail="No active session")
    return session


@router.get("/{session_id}", response_model=InterviewSession)
async def get_session(session_id: str) -> InterviewSession:
    """Get one session by ID."""
    session = get_session_store().get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session
