"""
Speech Synthesis Layer for MockRoom

Handles:
- Text-to-Speech (TTS) for the AI interviewer's voice
- Voice selection

Playback happens on the candidate's client: synthesized audio is handed to an
audio sink and speak() returns once the estimated playback time has elapsed.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable

import edge_tts
from pydantic import BaseModel, Field

from mockroom.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

# Rough speaking pace used for playback estimates
WORDS_PER_MINUTE = 150

AudioSink = Callable[[bytes, str], Awaitable[None]]


class Voice(BaseModel):
    """A synthesized voice offered by a TTS backend."""

    id: str = ""  # Backend identifier, e.g. "en-US-AriaNeural"
    name: str
    locale: str = ""
    gender: str | None = None


class Prosody(BaseModel):
    """Speech rate, pitch and volume, as multipliers of the platform default."""
    
    rate: float = Field(default=0.9, gt=0)
    pitch: float = Field(default=1.0, gt=0)
    volume: float = Field(default=0.8, ge=0, le=1.0)
    
    @classmethod
    def from_settings(cls, settings: Settings) -> "Prosody":
        return cls(
            rate=settings.speech_rate,
            pitch=settings.speech_pitch,
            volume=settings.speech_volume,
        )


def estimate_speech_seconds(text: str, rate: float = 1.0) -> float:
    """Estimate how long text takes to speak at the given rate."""
    word_count = len(text.split())
    return word_count / WORDS_PER_MINUTE * 60 / rate


def select_voice(
    voices: list[Voice],
    name_markers: list[str] | tuple[str, ...] = ("Google", "Microsoft"),
    locale_prefix: str = "en",
) -> Voice | None:
    """
    Pick a professional-sounding voice.
    
    Prefers the first voice whose name carries one of the markers or whose
    locale starts with the prefix. Returns None when nothing matches, in
    which case the platform default voice is used.
    """
    for voice in voices:
        if any(marker in voice.name for marker in name_markers):
            return voice
        if locale_prefix and voice.locale.startswith(locale_prefix):
            return voice
    return None


class SpeechSynthesizer(ABC):
    """
    Abstract base class for TTS backends.
    
    speak() must only return once the utterance has finished playing, and
    must be cancellable at any await point.
    """
    
    @abstractmethod
    async def list_voices(self) -> list[Voice]:
        """List the voices this backend can speak with."""
        pass
    
    @abstractmethod
    async def speak(self, text: str, voice: Voice | None, prosody: Prosody) -> None:
        """Speak text and wait for playback to finish."""
        pass


class SilentSpeechSynthesizer(SpeechSynthesizer):
    """
    Backend without audio output.
    
    Waits for the estimated playback time so narration timing behaves as if
    the text were spoken. A time_scale of 0 makes every utterance instant.
    """
    
    def __init__(self, time_scale: float = 1.0, voices: list[Voice] | None = None):
        self.time_scale = time_scale
        self.voices = voices or []
        self.spoken: list[str] = []
    
    async def list_voices(self) -> list[Voice]:
        return list(self.voices)
    
    async def speak(self, text: str, voice: Voice | None, prosody: Prosody) -> None:
        self.spoken.append(text)
        await asyncio.sleep(estimate_speech_seconds(text, prosody.rate) * self.time_scale)


class EdgeSpeechSynthesizer(SpeechSynthesizer):
    """Generate speech using Edge TTS (Microsoft) and stream it to the client."""
    
    def __init__(self, audio_sink: AudioSink, default_voice: str | None = None):
        self.audio_sink = audio_sink
        self.default_voice = default_voice or get_settings().tts_voice
    
    async def list_voices(self) -> list[Voice]:
        raw_voices = await edge_tts.list_voices()
        return [
            Voice(
                id=v.get("ShortName", ""),
                name=v.get("FriendlyName") or v.get("ShortName", ""),
                locale=v.get("Locale", ""),
                gender=v.get("Gender"),
            )
            for v in raw_voices
        ]
    
    async def speak(self, text: str, voice: Voice | None, prosody: Prosody) -> None:
        voice_name = voice.id if voice and voice.id else self.default_voice

        communicate = edge_tts.Communicate(
            text,
            voice_name,
            **self._prosody_options(prosody),
        )
        
        # Collect audio chunks
        audio_chunks = []
        async for chunk in communicate.stream():
            if chunk["type"] == "audio":
                audio_chunks.append(chunk["data"])
        
        await self.audio_sink(b"".join(audio_chunks), "mp3")
        await asyncio.sleep(estimate_speech_seconds(text, prosody.rate))
    
    @staticmethod
    def _prosody_options(prosody: Prosody) -> dict[str, Any]:
        """Map multipliers onto Edge TTS relative adjustments."""
        rate = round((prosody.rate - 1.0) * 100)
        volume = round((prosody.volume - 1.0) * 100)
        pitch = round((prosody.pitch - 1.0) * 50)
        return {
            "rate": f"{rate:+d}%",
            "volume": f"{volume:+d}%",
            "pitch": f"{pitch:+d}Hz",
        }
