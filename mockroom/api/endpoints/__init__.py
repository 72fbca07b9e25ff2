"""
API endpoint modules for MockRoom
"""

from mockroom.api.endpoints import interview, sessions, report, metadata

__all__ = ["interview", "sessions", "report", "metadata"]
