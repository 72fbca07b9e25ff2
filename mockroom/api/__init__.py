"""
API layer for MockRoom

Contains FastAPI routers for:
- The interview WebSocket
- Session retrieval
- Results reports
- Reference metadata
"""

from mockroom.api.router import api_router

__all__ = ["api_router"]
