"""
Exception taxonomy for MockRoom.

Device and narration failures are absorbed by the interview flow and logged;
only precondition and missing-context errors block the candidate.
"""


class InterviewError(Exception):
    """Base class for interview flow errors."""
    pass


class DeviceUnavailable(InterviewError):
    """Raised when camera/microphone access is denied or no device exists."""
    pass


class PreconditionError(InterviewError):
    """Raised when an interview cannot start (no user or no questions)."""
    pass


class MissingContext(InterviewError):
    """Raised when a job-tailored interview has no resolvable job post or application."""
    pass


class StateTransitionError(InterviewError):
    """Raised when an invalid state transition is attempted."""
    pass


class SessionInvariantError(InterviewError):
    """Raised when a session update would break the response/question bounds."""
    pass


class ReportNotReady(InterviewError):
    """Raised when results are requested for a session without an evaluation."""
    pass
