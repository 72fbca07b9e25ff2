"""
Tests for the narration queue and voice selection.
"""

import asyncio

from conftest import BlockingSynthesizer, wait_until
from mockroom.core.audio_processor import (
    EdgeSpeechSynthesizer,
    Prosody,
    SilentSpeechSynthesizer,
    SpeechSynthesizer,
    Voice,
    estimate_speech_seconds,
    select_voice,
)
from mockroom.core.narration import NarrationQueue
from mockroom.models.interview import NarrationSegment


class FailingSynthesizer(SpeechSynthesizer):
    async def list_voices(self):
        raise RuntimeError("voice list unavailable")

    async def speak(self, text, voice, prosody):
        raise RuntimeError("audio device busy")


def test_select_voice_prefers_vendor_marker():
    voices = [
        Voice(name="Thomas", locale="fr-FR"),
        Voice(name="Microsoft Aria Online", locale="en-US"),
    ]
    assert select_voice(voices).name == "Microsoft Aria Online"


def test_select_voice_falls_back_to_locale():
    voices = [Voice(name="Thomas", locale="fr-FR"), Voice(name="Daniel", locale="en-GB")]
    assert select_voice(voices).name == "Daniel"


def test_select_voice_none_when_nothing_matches():
    assert select_voice([Voice(name="Thomas", locale="fr-FR")]) is None
    assert select_voice([]) is None


def test_default_prosody():
    prosody = Prosody()
    assert (prosody.rate, prosody.pitch, prosody.volume) == (0.9, 1.0, 0.8)


def test_estimate_speech_seconds_scales_with_rate():
    text = " ".join(["word"] * 150)
    assert estimate_speech_seconds(text) == 60
    assert estimate_speech_seconds(text, rate=2.0) == 30


def test_edge_prosody_options():
    options = EdgeSpeechSynthesizer._prosody_options(Prosody())
    assert options == {"rate": "-10%", "volume": "-20%", "pitch": "+0Hz"}


async def test_speak_notifies_start_and_end():
    queue = NarrationQueue(SilentSpeechSynthesizer(time_scale=0))
    events = []

    async def on_start(item):
        events.append(("start", item.text))

    async def on_end(item):
        events.append(("end", item.text))

    queue.on_speech_start(on_start)
    queue.on_speech_end(on_end)

    item = await queue.speak("Hello there", segment=NarrationSegment.GREETING)
    await queue.wait_until_idle()

    assert events == [("start", "Hello there"), ("end", "Hello there")]
    assert item.finished
    assert not queue.is_speaking


async def test_new_speech_cancels_current():
    synthesizer = BlockingSynthesizer()
    queue = NarrationQueue(synthesizer)
    ended = []

    async def on_end(item):
        ended.append(item.text)

    queue.on_speech_end(on_end)

    first = await queue.speak("First")
    await wait_until(lambda: queue.is_speaking)
    second = await queue.speak("Second")
    await wait_until(lambda: queue.is_speaking)

    assert first.cancelled
    assert not first.finished
    assert ended == ["First"]
    assert queue.current_item is second

    synthesizer.release()
    await queue.wait_until_idle()
    assert second.finished
    assert ended == ["First", "Second"]


async def test_cancel_all_silences_immediately():
    queue = NarrationQueue(BlockingSynthesizer())
    item = await queue.speak("A long question")
    await wait_until(lambda: queue.is_speaking)

    await queue.cancel_all()

    assert not queue.is_speaking
    assert item.cancelled
    await queue.cancel_all()


async def test_synthesis_errors_are_absorbed():
    queue = NarrationQueue(FailingSynthesizer())
    ended = []

    async def on_end(item):
        ended.append(item)

    queue.on_speech_end(on_end)

    item = await queue.speak("Can you hear me?")
    await queue.wait_until_idle()

    assert ended == [item]
    assert not item.finished
    assert not queue.is_speaking


async def test_voice_is_resolved_once():
    voices = [Voice(id="en-US-GuyNeural", name="Microsoft Guy", locale="en-US")]
    synthesizer = SilentSpeechSynthesizer(time_scale=0, voices=voices)
    calls = []
    real_list_voices = synthesizer.list_voices

    async def counting_list_voices():
        calls.append(1)
        return await real_list_voices()

    synthesizer.list_voices = counting_list_voices
    queue = NarrationQueue(synthesizer)

    await queue.speak("One")
    await queue.wait_until_idle()
    await queue.speak("Two")
    await queue.wait_until_idle()

    assert len(calls) == 1
    assert synthesizer.spoken == ["One", "Two"]


async def test_silent_synthesizer_waits_for_estimate():
    synthesizer = SilentSpeechSynthesizer(time_scale=0.001)
    loop = asyncio.get_running_loop()
    started = loop.time()

    await synthesizer.speak(" ".join(["word"] * 150), None, Prosody(rate=1.0))

    assert loop.time() - started >= 0.05
