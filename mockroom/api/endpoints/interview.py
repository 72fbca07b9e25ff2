"""
Interview API endpoints

One WebSocket connection is one candidate's interview screen:
- Previewing the camera
- Starting the interview
- Toggling recording and taking notes
- Moving through questions
- Leaving the interview
"""

import asyncio
import base64
import json
import logging
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, ValidationError

from mockroom.api.dependencies import get_context_resolver, get_session_store
from mockroom.config.settings import Settings, get_settings
from mockroom.core.audio_processor import (
    EdgeSpeechSynthesizer,
    Prosody,
    SilentSpeechSynthesizer,
    SpeechSynthesizer,
)
from mockroom.core.device_capture import ClientMediaDevices, DeviceCaptureManager
from mockroom.core.interview_context import InterviewContextResolver
from mockroom.core.interview_orchestrator import InterviewOrchestrator, InterviewTiming
from mockroom.core.narration import NarrationItem, NarrationQueue
from mockroom.core.session_clock import SessionClock, format_elapsed
from mockroom.core.session_store import SessionStore
from mockroom.exceptions import (
    DeviceUnavailable,
    InterviewError,
    MissingContext,
    PreconditionError,
    SessionInvariantError,
    StateTransitionError,
)
from mockroom.models.interview import InterviewPhase, InterviewSession

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# REQUEST MODELS
# ============================================================================

class StartRequest(BaseModel):
    """Payload of a ``start`` message."""
    user_id: str
    job_post_id: str | None = None
    application_id: str | None = None


class TrackRequest(BaseModel):
    """Payload of a ``set_track`` message (camera/microphone toggle)."""
    kind: str
    enabled: bool


ERROR_CODES: dict[type[Exception], str] = {
    DeviceUnavailable: "device_unavailable",
    PreconditionError: "precondition_failed",
    MissingContext: "missing_context",
    StateTransitionError: "invalid_transition",
    SessionInvariantError: "invalid_session_update",
}

# Errors that leave the candidate at a dead end
BLOCKING_ERRORS = (PreconditionError, MissingContext)


def error_message(error: Exception) -> dict[str, Any]:
    """Build the ``error`` message for an exception."""
    code = next(
        (c for cls, c in ERROR_CODES.items() if isinstance(error, cls)),
        "error",
    )
    return {
        "type": "error",
        "code": code,
        "message": str(error),
        "blocking": isinstance(error, BLOCKING_ERRORS),
    }


# ============================================================================
# CONNECTION
# ============================================================================

class InterviewConnection:
    """
    Runs one interview screen over a WebSocket.

    A reader task hands ``media_result`` replies straight to the device
    backend and queues every other command; commands are then handled one at
    a time. All outgoing messages go through a single writer task.
    """

    def __init__(
        self,
        websocket: WebSocket,
        store: SessionStore,
        resolver: InterviewContextResolver,
        settings: Settings,
        synthesizer: SpeechSynthesizer | None = None,
    ):
        self.websocket = websocket
        self.store = store
        self.resolver = resolver
        self.settings = settings

        self._commands: asyncio.Queue = asyncio.Queue()
        self._outbox: asyncio.Queue = asyncio.Queue()

        self.media_devices = ClientMediaDevices(
            self.send,
            timeout_seconds=settings.device_timeout_seconds,
        )
        self.orchestrator = self._build_orchestrator(synthesizer or self._build_synthesizer())

    def _build_synthesizer(self) -> SpeechSynthesizer:
        if self.settings.tts_backend.lower() == "silent":
            return SilentSpeechSynthesizer(time_scale=self.settings.silent_tts_time_scale)
        return EdgeSpeechSynthesizer(self._send_audio, default_voice=self.settings.tts_voice)

    def _build_orchestrator(self, synthesizer: SpeechSynthesizer) -> InterviewOrchestrator:
        settings = self.settings

        narration = NarrationQueue(
            synthesizer,
            prosody=Prosody.from_settings(settings),
            voice_name_markers=settings.voice_name_markers,
            voice_locale_prefix=settings.voice_locale_prefix,
        )

        orchestrator = InterviewOrchestrator(
            store=self.store,
            devices=DeviceCaptureManager(self.media_devices),
            narration=narration,
            clock=SessionClock(settings.clock_interval_seconds),
            navigate=self._navigate,
            timing=InterviewTiming.from_settings(settings),
            response_duration_range=(
                settings.response_duration_min,
                settings.response_duration_max,
            ),
        )

        orchestrator.on_phase_change(self._on_phase_change)
        orchestrator.on_narration(self._on_narration)
        orchestrator.on_tick(self._on_tick)
        orchestrator.on_error(self._on_error)
        return orchestrator

    # =========================================================================
    # MAIN LOOP
    # =========================================================================

    async def run(self) -> None:
        reader = asyncio.create_task(self._read())
        writer = asyncio.create_task(self._write())

        try:
            while True:
                message = await self._commands.get()
                if message is None:
                    break
                await self.handle(message)
        finally:
            # Screen teardown: nothing may outlive the connection
            await self.orchestrator.close()
            reader.cancel()
            self._outbox.put_nowait(None)
            await asyncio.gather(reader, writer, return_exceptions=True)

    async def _read(self) -> None:
        try:
            while True:
                text = await self.websocket.receive_text()
                try:
                    message = json.loads(text)
                except ValueError as e:
                    # One bad frame does not end the interview
                    logger.warning(f"Malformed message from interview client: {e}")
                    await self._send_bad_message("Message is not valid JSON")
                    continue
                if not isinstance(message, dict):
                    await self._send_bad_message("Expected a JSON object")
                    continue
                if message.get("type") == "media_result":
                    self.media_devices.resolve(message)
                else:
                    self._commands.put_nowait(message)
        except WebSocketDisconnect:
            logger.info("Interview client disconnected")
        finally:
            self.media_devices.cancel_pending()
            self._commands.put_nowait(None)

    async def _write(self) -> None:
        while True:
            message = await self._outbox.get()
            if message is None:
                return
            try:
                await self.websocket.send_json(message)
            except Exception as e:
                # Client is gone; keep draining so producers never block
                logger.debug(f"Dropping outgoing {message.get('type')} message: {e}")

    async def send(self, message: dict[str, Any]) -> None:
        self._outbox.put_nowait(message)

    async def _send_bad_message(self, text: str) -> None:
        await self.send({"type": "error", "code": "bad_message", "message": text, "blocking": False})

    # =========================================================================
    # COMMANDS
    # =========================================================================

    async def handle(self, message: dict[str, Any]) -> None:
        """Handle one client command, reporting failures as error messages."""
        message_type = message.get("type")
        orchestrator = self.orchestrator

        try:
            if message_type == "preview":
                await orchestrator.preview()

            elif message_type == "start":
                request = StartRequest.model_validate(message)
                context = self.resolver.resolve(
                    request.user_id,
                    job_post_id=request.job_post_id,
                    application_id=request.application_id,
                )
                session = await orchestrator.start(
                    context.candidate,
                    context.questions,
                    context.role,
                    job_post_id=context.job_post_id,
                    application_id=context.application_id,
                )
                await self._send_session(session)

            elif message_type == "toggle_recording":
                was_recording = orchestrator.is_recording
                if await orchestrator.toggle_recording() and was_recording:
                    await self._send_session(orchestrator.session)

            elif message_type == "notes":
                orchestrator.update_notes(str(message.get("text", "")))

            elif message_type == "set_track":
                request = TrackRequest.model_validate(message)
                orchestrator.devices.set_track_enabled(request.kind, request.enabled)

            elif message_type == "next":
                session = await orchestrator.next()
                if session.is_completed:
                    await self._finish(session)

            elif message_type == "complete":
                await self._finish(await orchestrator.complete())

            elif message_type == "exit":
                await orchestrator.exit()

            elif message_type == "ping":
                await self.send({"type": "pong"})

            else:
                await self.send({
                    "type": "error",
                    "code": "unknown_message",
                    "message": f"Unknown message type: {message_type}",
                    "blocking": False,
                })

        except InterviewError as e:
            logger.warning(f"Interview command {message_type} rejected: {e}")
            await self.send(error_message(e))
        except ValidationError as e:
            await self._send_bad_message(str(e))

    async def _finish(self, session: InterviewSession) -> None:
        """Link a completed job interview to its application and report it."""
        self.resolver.catalog.record_interview(session)
        await self._send_session(session)

    # =========================================================================
    # ORCHESTRATOR EVENTS
    # =========================================================================

    async def _send_session(self, session: InterviewSession | None) -> None:
        if session is None:
            return
        await self.send({"type": "session", "session": session.model_dump(mode="json")})

    async def _on_phase_change(self, old: InterviewPhase, new: InterviewPhase) -> None:
        await self.send({
            "type": "phase",
            "phase": new.model_dump(mode="json"),
            "previous": old.kind,
            "question_index": self.orchestrator.current_question_index,
            "is_listening": self.orchestrator.is_listening,
            "is_recording": self.orchestrator.is_recording,
        })

    async def _on_narration(self, item: NarrationItem, speaking: bool) -> None:
        await self.send({
            "type": "narration",
            "segment": item.segment.value,
            "text": item.text,
            "question_index": item.question_index,
            "speaking": speaking,
        })

    async def _on_tick(self, elapsed: int) -> None:
        await self.send({
            "type": "tick",
            "elapsed": elapsed,
            "display": format_elapsed(elapsed),
        })

    async def _on_error(self, error: Exception) -> None:
        await self.send(error_message(error))

    async def _navigate(self, view: str) -> None:
        await self.send({"type": "navigate", "view": view})

    async def _send_audio(self, audio: bytes, audio_format: str) -> None:
        await self.send({
            "type": "narration_audio",
            "format": audio_format,
            "audio_base64": base64.b64encode(audio).decode("utf-8"),
        })


# ============================================================================
# WEBSOCKET ENDPOINT
# ============================================================================

@router.websocket("/ws")
async def websocket_interview(websocket: WebSocket):
    """
    WebSocket endpoint for one interview screen.

    Client sends:
    - preview, start, toggle_recording, notes, set_track, next, complete,
      exit, ping
    - media_result: reply to a media_request

    Server sends:
    - phase, narration, narration_audio, tick, session, navigate
    - media_request, media_release
    - error, pong
    """
    await websocket.accept()

    connection = InterviewConnection(
        websocket,
        store=get_session_store(),
        resolver=get_context_resolver(),
        settings=get_settings(),
    )
    await connection.run()
