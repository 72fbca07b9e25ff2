"""
Narration Queue for MockRoom

Serializes the AI interviewer's spoken prompts: at most one utterance plays
at a time, and a new speak() silences whatever is currently playing.
"""

import asyncio
import logging
from typing import Awaitable, Callable

from mockroom.core.audio_processor import (
    Prosody,
    SpeechSynthesizer,
    Voice,
    select_voice,
)
from mockroom.models.interview import NarrationSegment

logger = logging.getLogger(__name__)


class NarrationItem:
    """A single spoken prompt. Transient, never persisted."""
    
    def __init__(
        self,
        text: str,
        segment: NarrationSegment = NarrationSegment.QUESTION,
        question_index: int | None = None,
        on_start: Callable[["NarrationItem"], Awaitable[None]] | None = None,
        on_end: Callable[["NarrationItem"], Awaitable[None]] | None = None,
    ):
        self.text = text
        self.segment = segment
        self.question_index = question_index
        self.on_start = on_start
        self.on_end = on_end
        self.started = False
        self.finished = False
        self.cancelled = False
    
    def __repr__(self) -> str:
        return f"NarrationItem(segment={self.segment.value!r}, text={self.text[:40]!r})"


SpeechCallback = Callable[[NarrationItem], Awaitable[None]]


class NarrationQueue:
    """
    Plays narration through a SpeechSynthesizer, one utterance at a time.
    
    Listeners registered with on_speech_start/on_speech_end are told when an
    utterance begins and ends; an end notification follows every start, also
    when playback fails or is cancelled.
    """
    
    def __init__(
        self,
        synthesizer: SpeechSynthesizer,
        prosody: Prosody | None = None,
        voice_name_markers: list[str] | tuple[str, ...] = ("Google", "Microsoft"),
        voice_locale_prefix: str = "en",
    ):
        self.synthesizer = synthesizer
        self.prosody = prosody or Prosody()
        self.voice_name_markers = voice_name_markers
        self.voice_locale_prefix = voice_locale_prefix
        
        self._task: asyncio.Task | None = None
        self._current: NarrationItem | None = None
        self._speaking = False
        
        # Voice is looked up once, on first use
        self._voice: Voice | None = None
        self._voice_resolved = False
        
        self._start_callbacks: list[SpeechCallback] = []
        self._end_callbacks: list[SpeechCallback] = []
    
    @property
    def is_speaking(self) -> bool:
        return self._speaking
    
    @property
    def current_item(self) -> NarrationItem | None:
        return self._current
    
    # =========================================================================
    # PLAYBACK
    # =========================================================================
    
    async def speak(
        self,
        text: str,
        segment: NarrationSegment = NarrationSegment.QUESTION,
        question_index: int | None = None,
        on_start: SpeechCallback | None = None,
        on_end: SpeechCallback | None = None,
    ) -> NarrationItem:
        """
        Start speaking text, cancelling any utterance still in flight.
        
        Returns immediately; playback continues in the background.
        """
        await self.cancel_all()
        
        item = NarrationItem(
            text,
            segment=segment,
            question_index=question_index,
            on_start=on_start,
            on_end=on_end,
        )
        self._current = item
        self._task = asyncio.create_task(self._play(item))
        return item
    
    async def cancel_all(self) -> None:
        """Silence the playing utterance immediately."""
        task, self._task = self._task, None
        # Called from a listener of the utterance that is already ending
        if task is None or task.done() or task is asyncio.current_task():
            return

        if self._current is not None:
            self._current.cancelled = True
        self._speaking = False
        task.cancel()

        # Let the cancelled utterance deliver its end notification
        await asyncio.wait([task])
    
    async def wait_until_idle(self) -> None:
        """Wait for the current utterance, if any, to finish."""
        task = self._task
        if task is not None and not task.done():
            await asyncio.wait([task])
    
    async def _play(self, item: NarrationItem) -> None:
        try:
            voice = await self._resolve_voice()
            
            item.started = True
            self._speaking = True
            await self._notify(item, item.on_start, self._start_callbacks)
            
            await self.synthesizer.speak(item.text, voice, self.prosody)
            item.finished = True
            
        except asyncio.CancelledError:
            logger.debug(f"Narration cancelled: {item!r}")
            raise
        except Exception as e:
            # Narration errors never block the interview
            logger.error(f"Narration failed for {item!r}: {e}")
        finally:
            self._speaking = False
            if item.started:
                await self._notify(item, item.on_end, self._end_callbacks)
    
    async def _resolve_voice(self) -> Voice | None:
        if self._voice_resolved:
            return self._voice
        
        try:
            voices = await self.synthesizer.list_voices()
        except Exception as e:
            logger.warning(f"Could not list voices, using platform default: {e}")
            voices = []
        
        self._voice = select_voice(
            voices,
            name_markers=self.voice_name_markers,
            locale_prefix=self.voice_locale_prefix,
        )
        self._voice_resolved = True
        
        if self._voice:
            logger.info(f"Using narration voice: {self._voice.name}")
        else:
            logger.info("No preferred voice found, using platform default")
        return self._voice
    
    # =========================================================================
    # EVENT CALLBACKS
    # =========================================================================
    
    def on_speech_start(self, callback: SpeechCallback) -> None:
        """Register a callback for when an utterance starts playing."""
        self._start_callbacks.append(callback)
    
    def on_speech_end(self, callback: SpeechCallback) -> None:
        """Register a callback for when an utterance stops playing."""
        self._end_callbacks.append(callback)
    
    async def _notify(
        self,
        item: NarrationItem,
        item_callback: SpeechCallback | None,
        callbacks: list[SpeechCallback],
    ) -> None:
        for callback in ([item_callback] if item_callback else []) + callbacks:
            try:
                await callback(item)
            except Exception as e:
                logger.error(f"Narration callback error: {e}")
