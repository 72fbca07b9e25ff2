"""
Core business logic modules for MockRoom

Contains:
- Interview Orchestrator: State machine for one interview screen
- Device Capture: Camera/microphone stream lifecycle
- Narration Queue: Serialized AI interviewer speech
- Session Clock: Elapsed-time ticks
- Evaluation Engine: Pluggable scoring
- Session Store: Whole-object session persistence
- Report Generator: Results view
"""

from mockroom.core.interview_orchestrator import InterviewOrchestrator, InterviewTiming, View
from mockroom.core.device_capture import DeviceCaptureManager, MediaDevices, MediaStream, MediaTrack
from mockroom.core.narration import NarrationQueue, NarrationItem
from mockroom.core.session_clock import SessionClock, format_elapsed
from mockroom.core.evaluation_engine import Scorer, RandomizedScorer
from mockroom.core.session_store import SessionStore
from mockroom.core.interview_context import JobCatalog, InterviewContext, InterviewContextResolver
from mockroom.core.report_generator import build_results_report

__all__ = [
    "InterviewOrchestrator",
    "InterviewTiming",
    "View",
    "DeviceCaptureManager",
    "MediaDevices",
    "MediaStream",
    "MediaTrack",
    "NarrationQueue",
    "NarrationItem",
    "SessionClock",
    "format_elapsed",
    "Scorer",
    "RandomizedScorer",
    "SessionStore",
    "JobCatalog",
    "InterviewContext",
    "InterviewContextResolver",
    "build_results_report",
]
