"""
API Dependencies

Provides dependency injection for API endpoints.
Manages singleton instances of application-wide components.
"""

import logging

from mockroom.config.settings import get_settings
from mockroom.core.interview_context import InterviewContextResolver, JobCatalog
from mockroom.core.session_store import SessionStore

logger = logging.getLogger(__name__)


# ============================================================================
# SINGLETON INSTANCES
# ============================================================================

_session_store: SessionStore | None = None
_job_catalog: JobCatalog | None = None


def get_session_store() -> SessionStore:
    """
    Get the session store singleton.
    
    Restores persisted sessions on first use when a snapshot path is set.
    """
    global _session_store
    
    if _session_store is None:
        settings = get_settings()
        _session_store = SessionStore(settings.session_store_path or None)
        _session_store.load()
    
    return _session_store


def get_job_catalog() -> JobCatalog:
    """Get the job catalog singleton, seeded from file when configured."""
    global _job_catalog
    
    if _job_catalog is None:
        settings = get_settings()
        if settings.job_catalog_path:
            try:
                _job_catalog = JobCatalog.from_file(settings.job_catalog_path)
            except (OSError, ValueError) as e:
                logger.error(f"Could not load job catalog from {settings.job_catalog_path}: {e}")
                _job_catalog = JobCatalog()
        else:
            _job_catalog = JobCatalog()
    
    return _job_catalog


def get_context_resolver() -> InterviewContextResolver:
    return InterviewContextResolver(get_job_catalog())


async def cleanup():
    """Flush and drop singletons on shutdown."""
    global _session_store, _job_catalog
    
    if _session_store:
        _session_store.save()
        _session_store = None
    
    _job_catalog = None
