"""
Interview Orchestrator - State machine for one candidate's interview screen.

Sequences the AI interviewer's narration, the candidate's recording toggle,
progression through the questions and the final evaluation. Device capture,
narration playback and the elapsed-time clock are owned by collaborators
passed in by the host screen; sessions are written to the SessionStore as
whole objects.
"""

import asyncio
import logging
import random
from typing import Awaitable, Callable

from pydantic import BaseModel, Field

from mockroom.config.settings import Settings
from mockroom.core.device_capture import DeviceCaptureManager
from mockroom.core.evaluation_engine import RandomizedScorer, Scorer
from mockroom.core.narration import NarrationItem, NarrationQueue
from mockroom.core.session_clock import SessionClock
from mockroom.core.session_store import SessionStore
from mockroom.exceptions import (
    DeviceUnavailable,
    PreconditionError,
    StateTransitionError,
)
from mockroom.models.catalog import Candidate
from mockroom.models.interview import (
    AwaitingResponse,
    Completed,
    Exited,
    InterviewPhase,
    InterviewResponse,
    InterviewSession,
    Narrating,
    NarrationSegment,
    NotStarted,
    Previewing,
    Recording,
)
from mockroom.models.question import InterviewQuestion
from mockroom.prompts.narration import NarrationPrompts

logger = logging.getLogger(__name__)


class View:
    """Views the host application can be asked to show."""

    RESULTS = "results"
    LANDING = "landing"
    PROFILE = "profile"


class InterviewTiming(BaseModel):
    """Delays between narration segments, in seconds."""

    greeting_delay: float = Field(default=1.0, ge=0)
    first_question_delay: float = Field(default=8.0, ge=0)  # From greeting start
    transition_delay: float = Field(default=1.0, ge=0)
    next_question_delay: float = Field(default=3.0, ge=0)  # From transition start
    results_navigation_delay: float = Field(default=6.0, ge=0)  # From closing start

    @classmethod
    def from_settings(cls, settings: Settings) -> "InterviewTiming":
        return cls(
            greeting_delay=settings.greeting_delay_seconds,
            first_question_delay=settings.first_question_delay_seconds,
            transition_delay=settings.transition_delay_seconds,
            next_question_delay=settings.next_question_delay_seconds,
            results_navigation_delay=settings.results_navigation_delay_seconds,
        )

    @classmethod
    def immediate(cls) -> "InterviewTiming":
        return cls(
            greeting_delay=0,
            first_question_delay=0,
            transition_delay=0,
            next_question_delay=0,
            results_navigation_delay=0,
        )


PhaseCallback = Callable[[InterviewPhase, InterviewPhase], Awaitable[None]]
NarrationCallback = Callable[[NarrationItem, bool], Awaitable[None]]
ErrorCallback = Callable[[Exception], Awaitable[None]]
Navigate = Callable[[str], Awaitable[None]]

# One narration step: (delay before speaking, segment, text)
ScriptStep = tuple[float, NarrationSegment, str]


class InterviewOrchestrator:
    """
    Drives one interview using a state machine pattern.

    Phases:
        NotStarted → Previewing → Narrating(greeting) → AwaitingResponse(i)
            ↔ Recording(i) → Narrating(transition) → AwaitingResponse(i+1) ...
            → Narrating(closing) → Completed
        Any phase → Exited (exit)

    While Narrating, recording cannot start. A Narrating phase lasts from the
    moment a narration sequence is enqueued until its last utterance ends, so
    the candidate is never recorded over the AI's voice.
    """

    def __init__(
        self,
        store: SessionStore,
        devices: DeviceCaptureManager,
        narration: NarrationQueue,
        clock: SessionClock,
        navigate: Navigate | None = None,
        scorer: Scorer | None = None,
        timing: InterviewTiming | None = None,
        prompts: NarrationPrompts | None = None,
        rng: random.Random | None = None,
        response_duration_range: tuple[int, int] = (30, 89),
        exit_view: str = View.LANDING,
    ):
        """
        Initialize the orchestrator with its collaborators.

        Args:
            store: Application-wide session store
            devices: Camera/microphone lifecycle
            narration: Spoken prompt queue
            clock: Elapsed-time counter
            navigate: Asks the host application to show a view
            scorer: Produces the final Evaluation
            timing: Delays between narration segments
            prompts: Spoken line templates
            rng: Random source for placeholder response durations
            response_duration_range: Inclusive bounds for placeholder durations
            exit_view: View shown after exit()
        """
        self.store = store
        self.devices = devices
        self.narration = narration
        self.clock = clock
        self.navigate = navigate
        self.scorer = scorer or RandomizedScorer()
        self.timing = timing or InterviewTiming()
        self.prompts = prompts or NarrationPrompts()
        self.rng = rng or random.Random()
        self.response_duration_range = response_duration_range
        self.exit_view = exit_view

        self._phase: InterviewPhase = NotStarted()
        self._session: InterviewSession | None = None
        self._candidate: Candidate | None = None
        self._role: str = ""
        self._index = 0
        self._notes = ""
        self._scripts: set[asyncio.Task] = set()
        self._closed = False

        self.device_error: str | None = None

        # Event callbacks
        self._phase_callbacks: list[PhaseCallback] = []
        self._narration_callbacks: list[NarrationCallback] = []
        self._error_callbacks: list[ErrorCallback] = []

        self.narration.on_speech_start(self._on_speech_start)
        self.narration.on_speech_end(self._on_speech_end)

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def phase(self) -> InterviewPhase:
        return self._phase

    @property
    def session(self) -> InterviewSession | None:
        return self._session

    @property
    def current_question_index(self) -> int:
        return self._index

    @property
    def current_question(self) -> InterviewQuestion | None:
        if self._session is None:
            return None
        return self._session.get_question(self._index)

    @property
    def is_listening(self) -> bool:
        """True while the AI interviewer is speaking."""
        return self.narration.is_speaking

    @property
    def is_recording(self) -> bool:
        return isinstance(self._phase, Recording)

    @property
    def notes(self) -> str:
        return self._notes

    @property
    def elapsed_seconds(self) -> int:
        return self.clock.elapsed

    @property
    def _abandoned(self) -> bool:
        return self._closed or isinstance(self._phase, Exited)

    @property
    def _last_index(self) -> int:
        return len(self._session.questions) - 1 if self._session else -1

    # =========================================================================
    # INTERVIEW FLOW
    # =========================================================================

    async def preview(self) -> InterviewPhase:
        """
        Acquire camera and microphone before the interview starts.

        Failure is reported through the error callbacks; the phase still
        moves to Previewing and the interview can start without preview.
        Calling again from Previewing retries acquisition. Raises
        StateTransitionError if the screen is left before permission arrives.
        """
        if not isinstance(self._phase, (NotStarted, Previewing)):
            raise StateTransitionError(f"Cannot preview in phase: {self._phase.kind}")

        await self._acquire_devices()

        if isinstance(self._phase, NotStarted):
            await self._set_phase(Previewing())
        return self._phase

    async def start(
        self,
        candidate: Candidate | None,
        questions: list[InterviewQuestion],
        role: str,
        job_post_id: str | None = None,
        application_id: str | None = None,
    ) -> InterviewSession:
        """
        Open a new session and begin the greeting.

        Returns:
            The new in-progress session

        Raises:
            PreconditionError: If there is no resolved user or no questions
            StateTransitionError: If the interview has already started, or the
                screen was closed while waiting for devices
        """
        if not isinstance(self._phase, (NotStarted, Previewing)):
            raise StateTransitionError(f"Cannot start interview in phase: {self._phase.kind}")
        if candidate is None:
            raise PreconditionError("No signed-in user to interview")
        if not questions:
            raise PreconditionError("Cannot start an interview without questions")

        session = InterviewSession(
            user_id=candidate.id,
            job_post_id=job_post_id,
            application_id=application_id,
            questions=tuple(questions),
        )
        self.store.create_session(session)
        self.store.set_active_session(session)

        self._session = session
        self._candidate = candidate
        self._role = role
        self._index = 0
        self._notes = ""

        if not self.devices.has_stream:
            await self._acquire_devices()

        self.clock.start()

        await self._set_phase(Narrating(segment=NarrationSegment.GREETING, index=0))
        self._run_script(0, [
            (
                self.timing.greeting_delay,
                NarrationSegment.GREETING,
                self.prompts.greeting(candidate.name, role, len(questions)),
            ),
            (
                self.timing.first_question_delay,
                NarrationSegment.QUESTION,
                questions[0].question,
            ),
        ])

        logger.info(
            f"Started interview {session.id} for user {candidate.id} "
            f"({len(questions)} questions, role: {role})"
        )
        return session

    async def toggle_recording(self) -> bool:
        """
        Start or stop recording the answer to the current question.

        Stopping appends an InterviewResponse for the current question.
        Does nothing while the AI is speaking.

        Returns:
            True if the phase changed
        """
        phase = self._phase

        if isinstance(phase, Recording):
            await self._close_response(phase.index)
            return True

        if not isinstance(phase, AwaitingResponse) or self.is_listening or self._session.is_completed:
            logger.debug(f"Ignoring recording toggle in phase: {phase.kind}")
            return False

        question = self._session.get_question(phase.index)
        if question.id in self._session.answered_question_ids:
            logger.info(f"Question {question.id} already answered; not recording again")
            return False

        # Make sure the candidate is not talked over
        await self._cancel_scripts()
        await self.narration.cancel_all()

        self._notes = ""
        await self._set_phase(Recording(index=phase.index))
        return True

    def update_notes(self, text: str) -> bool:
        """Replace the note buffer for the answer being recorded."""
        if not isinstance(self._phase, Recording):
            return False
        self._notes = text
        return True

    async def next(self) -> InterviewSession:
        """
        Move to the next question, or complete the interview on the last one.

        An in-flight recording is dropped without a response, and narration
        still playing is cut short.
        """
        phase = self._phase

        accepted = isinstance(phase, (AwaitingResponse, Recording)) or (
            isinstance(phase, Narrating) and phase.segment != NarrationSegment.CLOSING
        )
        if not accepted:
            raise StateTransitionError(f"Cannot advance in phase: {phase.kind}")

        await self._cancel_scripts()
        await self.narration.cancel_all()

        if isinstance(phase, Recording):
            logger.info(f"Session {self._session.id}: discarding unfinished recording for question {self._index + 1}")
        self._notes = ""

        if self._index >= self._last_index:
            await self._set_phase(AwaitingResponse(index=self._index))
            return await self.complete()

        self._index += 1
        question = self._session.questions[self._index]

        await self._set_phase(Narrating(segment=NarrationSegment.TRANSITION, index=self._index))
        self._run_script(self._index, [
            (
                self.timing.transition_delay,
                NarrationSegment.TRANSITION,
                self.prompts.transition(self._index + 1),
            ),
            (
                self.timing.next_question_delay,
                NarrationSegment.QUESTION,
                question.question,
            ),
        ])
        return self._session

    async def complete(self) -> InterviewSession:
        """
        Finish the interview with a synthesized evaluation.

        Calling again after completion returns the completed session
        unchanged.
        """
        if self._session is not None and self._session.is_completed:
            logger.info(f"Session {self._session.id} already completed")
            return self._session

        phase = self._phase
        accepted = isinstance(phase, AwaitingResponse) or (
            isinstance(phase, Narrating) and phase.segment != NarrationSegment.CLOSING
        )
        if not accepted or self._index != self._last_index:
            raise StateTransitionError(
                f"Cannot complete interview in phase {phase.kind} "
                f"at question {self._index + 1}"
            )

        evaluation = self.scorer.score(self._session, self._role)

        # Status, evaluation and end time are set in one write, before any
        # await, so an overlapping call sees the completed session
        self._session = self._session.completed_with(evaluation)
        self.store.replace_session(self._session)

        await self._cancel_scripts()
        await self.narration.cancel_all()
        await self.clock.stop()

        await self._set_phase(Narrating(segment=NarrationSegment.CLOSING, index=self._index))
        self._run_script(
            self._index,
            [(0, NarrationSegment.CLOSING, self.prompts.closing(self._candidate.name, self._role))],
            then=self._show_results,
        )

        logger.info(
            f"Completed interview {self._session.id}: overall {evaluation.overall}, "
            f"{len(self._session.responses)}/{len(self._session.questions)} answered"
        )
        return self._session

    async def exit(self) -> None:
        """
        Leave the interview from any phase.

        Releases devices and silences narration. The stored session is left as
        it is; an unfinished session stays in progress.
        """
        await self.close()

        if not isinstance(self._phase, (Completed, Exited)):
            await self._set_phase(Exited())

        if self._session is not None and not self._session.is_completed:
            logger.info(f"Candidate left session {self._session.id} at question {self._index + 1}")

        await self._navigate(self.exit_view)

    async def close(self) -> None:
        """
        Tear down the screen: pending delays, narration, clock and devices.

        Safe to call repeatedly. Does not touch the session or navigate.
        """
        first_close = not self._closed
        self._closed = True

        await self._cancel_scripts()
        await self.narration.cancel_all()
        await self.clock.stop()
        await self.devices.release()

        if first_close:
            logger.debug("Interview screen closed")

    async def wait_for_narration(self) -> None:
        """Wait until every enqueued narration sequence has played out."""
        while True:
            pending = [t for t in self._scripts if not t.done()]
            if not pending:
                break
            await asyncio.gather(*pending, return_exceptions=True)
        await self.narration.wait_until_idle()

    # =========================================================================
    # HELPER METHODS
    # =========================================================================

    async def _close_response(self, index: int) -> None:
        question = self._session.questions[index]
        low, high = self.response_duration_range

        response = InterviewResponse(
            question_id=question.id,
            response=self._notes.strip() or f"Response to: {question.question}",
            duration=self.rng.randint(low, high),
        )

        self._session = self._session.with_response(response)
        self.store.replace_session(self._session)
        self._notes = ""

        logger.info(
            f"Session {self._session.id}: recorded response to question {index + 1} "
            f"({response.duration}s)"
        )
        await self._set_phase(AwaitingResponse(index=index))

    async def _acquire_devices(self) -> None:
        """
        Request devices, absorbing DeviceUnavailable.

        Raises:
            StateTransitionError: If the screen was closed or exited while
                the permission request was pending
        """
        error: DeviceUnavailable | None = None
        try:
            await self.devices.acquire()
        except DeviceUnavailable as e:
            error = e

        if self._abandoned:
            # Permission was answered after the candidate left
            await self.devices.release()
            raise StateTransitionError("Interview screen closed while waiting for devices")

        if error is None:
            self.device_error = None
        else:
            # No preview, but the interview goes on
            self.device_error = str(error)
            await self._emit_error(error)

    def _run_script(
        self,
        index: int,
        steps: list[ScriptStep],
        then: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        task = asyncio.create_task(self._play_script(index, steps, then))
        self._scripts.add(task)
        task.add_done_callback(self._scripts.discard)

    async def _play_script(
        self,
        index: int,
        steps: list[ScriptStep],
        then: Callable[[], Awaitable[None]] | None,
    ) -> None:
        try:
            # Each delay counts from the start of the previous utterance
            for delay, segment, text in steps:
                await asyncio.sleep(delay)
                await self.narration.speak(text, segment=segment, question_index=index)

            if then is not None:
                await then()
                return

            await self.narration.wait_until_idle()
            if isinstance(self._phase, Narrating) and self._phase.segment != NarrationSegment.CLOSING:
                await self._set_phase(AwaitingResponse(index=index))
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Narration sequence failed: {e}")
            if isinstance(self._phase, Narrating) and self._phase.segment != NarrationSegment.CLOSING:
                await self._set_phase(AwaitingResponse(index=index))

    async def _show_results(self) -> None:
        await asyncio.sleep(self.timing.results_navigation_delay)
        await self._set_phase(Completed())
        await self._navigate(View.RESULTS)
        await self.close()

    async def _cancel_scripts(self) -> None:
        current = asyncio.current_task()
        pending = [t for t in self._scripts if t is not current and not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.wait(pending)

    async def _navigate(self, view: str) -> None:
        logger.info(f"Navigating to view: {view}")
        if self.navigate is None:
            return
        try:
            await self.navigate(view)
        except Exception as e:
            logger.error(f"Navigation to {view} failed: {e}")

    async def _set_phase(self, new_phase: InterviewPhase) -> None:
        old_phase = self._phase
        if old_phase == new_phase:
            return
        self._phase = new_phase

        session_id = self._session.id if self._session else "-"
        logger.info(f"Session {session_id}: {old_phase.kind} → {new_phase.kind}")

        for callback in self._phase_callbacks:
            try:
                await callback(old_phase, new_phase)
            except Exception as e:
                logger.error(f"Phase change callback error: {e}")

    async def _on_speech_start(self, item: NarrationItem) -> None:
        phase = self._phase
        if isinstance(phase, Narrating) and phase.segment != item.segment:
            await self._set_phase(Narrating(segment=item.segment, index=phase.index))
        await self._emit_narration(item, True)

    async def _on_speech_end(self, item: NarrationItem) -> None:
        await self._emit_narration(item, False)

    async def _emit_narration(self, item: NarrationItem, speaking: bool) -> None:
        for callback in self._narration_callbacks:
            try:
                await callback(item, speaking)
            except Exception as e:
                logger.error(f"Narration callback error: {e}")

    async def _emit_error(self, error: Exception) -> None:
        for callback in self._error_callbacks:
            try:
                await callback(error)
            except Exception as e:
                logger.error(f"Error callback error: {e}")

    # =========================================================================
    # EVENT CALLBACKS
    # =========================================================================

    def on_phase_change(self, callback: PhaseCallback) -> None:
        """Register a callback for phase changes (old, new)."""
        self._phase_callbacks.append(callback)

    def on_narration(self, callback: NarrationCallback) -> None:
        """Register a callback for narration start (True) and end (False)."""
        self._narration_callbacks.append(callback)

    def on_tick(self, callback: Callable[[int], Awaitable[None]]) -> None:
        """Register a callback for elapsed-seconds ticks."""
        self.clock.on_tick(callback)

    def on_error(self, callback: ErrorCallback) -> None:
        """Register a callback for non-fatal errors (e.g. devices unavailable)."""
        self._error_callbacks.append(callback)
