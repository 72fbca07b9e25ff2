"""
Report API endpoints

Handles:
- Results retrieval for completed interviews
"""

from fastapi import APIRouter, HTTPException

from mockroom.api.dependencies import get_session_store
from mockroom.core.report_generator import build_results_report
from mockroom.exceptions import ReportNotReady
from mockroom.models.report import ResultsReport

router = APIRouter()


@router.get("/{session_id}", response_model=ResultsReport)
async def get_report(session_id: str) -> ResultsReport:
    """
    Get the results view for a session.
    
    Returns 409 while the interview is still in progress.
    """
    session = get_session_store().get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    
    try:
        return build_results_report(session)
    except ReportNotReady as e:
        raise HTTPException(status_code=409, detail=str(e))
