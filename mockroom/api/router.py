"""
Main API router for MockRoom

Aggregates all API routes and provides the main application router.
"""

from fastapi import APIRouter

from mockroom.api.endpoints import interview, sessions, report, metadata

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(
    interview.router,
    prefix="/interview",
    tags=["Interview"]
)

api_router.include_router(
    sessions.router,
    prefix="/sessions",
    tags=["Sessions"]
)

api_router.include_router(
    report.router,
    prefix="/report",
    tags=["Report"]
)

api_router.include_router(
    metadata.router,
    prefix="/metadata",
    tags=["Metadata"]
)
