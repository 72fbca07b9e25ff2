"""
Shared fixtures: fake devices, controllable speech and a ready-made orchestrator.
"""

import asyncio
import random

import pytest

from mockroom.core.audio_processor import Prosody, SilentSpeechSynthesizer, SpeechSynthesizer, Voice
from mockroom.core.device_capture import DeviceCaptureManager, MediaDevices, MediaStream, MediaTrack
from mockroom.core.evaluation_engine import RandomizedScorer
from mockroom.core.interview_orchestrator import InterviewOrchestrator, InterviewTiming
from mockroom.core.narration import NarrationQueue
from mockroom.core.session_clock import SessionClock
from mockroom.core.session_store import SessionStore
from mockroom.exceptions import DeviceUnavailable
from mockroom.models.catalog import Candidate
from mockroom.models.question import InterviewQuestion, QuestionType


class FakeMediaDevices(MediaDevices):
    """Grants or denies capture on demand and remembers the streams it gave out."""

    def __init__(self, granted: bool = True):
        self.granted = granted
        self.requests = 0
        self.streams: list[MediaStream] = []

    async def get_user_media(self, *, audio: bool = True, video: bool = True) -> MediaStream:
        self.requests += 1
        if not self.granted:
            raise DeviceUnavailable("Permission denied")
        stream = MediaStream([MediaTrack("audio"), MediaTrack("video")])
        self.streams.append(stream)
        return stream


class GatedMediaDevices(FakeMediaDevices):
    """Holds every permission request until open() is called."""

    def __init__(self, granted: bool = True):
        super().__init__(granted)
        self._gate = asyncio.Event()

    async def get_user_media(self, *, audio: bool = True, video: bool = True) -> MediaStream:
        await self._gate.wait()
        return await super().get_user_media(audio=audio, video=video)

    def open(self) -> None:
        self._gate.set()


class BlockingSynthesizer(SpeechSynthesizer):
    """Keeps 'speaking' until release() is called."""

    def __init__(self):
        self.spoken: list[str] = []
        self._released = asyncio.Event()

    async def list_voices(self) -> list[Voice]:
        return []

    async def speak(self, text: str, voice: Voice | None, prosody: Prosody) -> None:
        self.spoken.append(text)
        await self._released.wait()

    def release(self) -> None:
        self._released.set()


class Recorder:
    """Collects navigation requests and errors from an orchestrator."""

    def __init__(self):
        self.views: list[str] = []
        self.errors: list[Exception] = []

    async def navigate(self, view: str) -> None:
        self.views.append(view)

    async def error(self, error: Exception) -> None:
        self.errors.append(error)


async def wait_until(predicate, timeout: float = 1.0) -> None:
    """Yield to the event loop until predicate() holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("Condition not reached in time")
        await asyncio.sleep(0.001)


@pytest.fixture
def candidate() -> Candidate:
    return Candidate(id="user-1", name="Priya", position="Backend Engineer")


@pytest.fixture
def questions() -> list[InterviewQuestion]:
    return [
        InterviewQuestion(id="q1", question="Tell me about yourself.", type=QuestionType.GENERAL),
        InterviewQuestion(id="q2", question="Describe a hard bug you fixed.", type=QuestionType.BEHAVIORAL),
        InterviewQuestion(id="q3", question="How does a hash map work?", type=QuestionType.TECHNICAL),
    ]


@pytest.fixture
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
async def make_orchestrator(store, recorder):
    """Build an orchestrator with instant timing and silent speech."""
    created: list[InterviewOrchestrator] = []

    def factory(
        devices: MediaDevices | None = None,
        synthesizer: SpeechSynthesizer | None = None,
        timing: InterviewTiming | None = None,
        scorer=None,
        clock_interval: float = 60.0,
    ) -> InterviewOrchestrator:
        orchestrator = InterviewOrchestrator(
            store=store,
            devices=DeviceCaptureManager(devices or FakeMediaDevices()),
            narration=NarrationQueue(synthesizer or SilentSpeechSynthesizer(time_scale=0)),
            clock=SessionClock(clock_interval),
            navigate=recorder.navigate,
            scorer=scorer or RandomizedScorer(random.Random(7)),
            timing=timing or InterviewTiming.immediate(),
            rng=random.Random(11),
        )
        orchestrator.on_error(recorder.error)
        created.append(orchestrator)
        return orchestrator

    yield factory

    for orchestrator in created:
        await orchestrator.close()
