"""
Tests for camera/microphone capture.
"""

import asyncio

import pytest

from conftest import FakeMediaDevices, wait_until
from mockroom.core.device_capture import ClientMediaDevices, DeviceCaptureManager
from mockroom.exceptions import DeviceUnavailable


class Outbox:
    def __init__(self):
        self.messages = []

    async def send(self, message):
        self.messages.append(message)


class BrokenDevices(FakeMediaDevices):
    async def get_user_media(self, *, audio=True, video=True):
        raise OSError("camera driver crashed")


async def test_acquire_and_release():
    devices = FakeMediaDevices()
    manager = DeviceCaptureManager(devices)

    stream = await manager.acquire()

    assert manager.has_stream
    assert {t.kind for t in stream.get_tracks()} == {"audio", "video"}

    await manager.release()
    await manager.release()

    assert manager.stream is None
    assert not stream.active
    assert all(t.ready_state == "ended" for t in stream.get_tracks())


async def test_acquire_reuses_live_stream():
    devices = FakeMediaDevices()
    manager = DeviceCaptureManager(devices)

    first = await manager.acquire()
    second = await manager.acquire()

    assert first is second
    assert devices.requests == 1


async def test_denied_acquire_records_error():
    manager = DeviceCaptureManager(FakeMediaDevices(granted=False))

    with pytest.raises(DeviceUnavailable):
        await manager.acquire()

    assert manager.stream is None
    assert manager.last_error == "Permission denied"


async def test_unexpected_backend_error_is_wrapped():
    manager = DeviceCaptureManager(BrokenDevices())

    with pytest.raises(DeviceUnavailable, match="camera driver crashed"):
        await manager.acquire()


async def test_set_track_enabled():
    manager = DeviceCaptureManager(FakeMediaDevices())
    assert manager.set_track_enabled("video", False) is False

    stream = await manager.acquire()

    assert manager.set_track_enabled("video", False) is True
    video = [t for t in stream.get_tracks() if t.kind == "video"][0]
    assert video.enabled is False
    assert manager.set_track_enabled("screen", False) is False


async def test_client_devices_granted():
    outbox = Outbox()
    devices = ClientMediaDevices(outbox.send, timeout_seconds=1)

    request = asyncio.create_task(devices.get_user_media())
    await wait_until(lambda: outbox.messages)
    assert outbox.messages[0] == {"type": "media_request", "audio": True, "video": True}

    assert devices.resolve({"type": "media_result", "granted": True, "stream_id": "s1"})
    stream = await request

    assert stream.id == "s1"
    assert [t.kind for t in stream.get_tracks()] == ["audio", "video"]

    for track in stream.get_tracks():
        await track.stop()
    releases = [m for m in outbox.messages if m["type"] == "media_release"]
    assert {m["kind"] for m in releases} == {"audio", "video"}
    assert all(m["stream_id"] == "s1" for m in releases)


async def test_client_devices_denied():
    outbox = Outbox()
    devices = ClientMediaDevices(outbox.send, timeout_seconds=1)

    request = asyncio.create_task(devices.get_user_media())
    await wait_until(lambda: outbox.messages)
    devices.resolve({"type": "media_result", "granted": False, "error": "NotAllowedError"})

    with pytest.raises(DeviceUnavailable, match="NotAllowedError"):
        await request


async def test_client_devices_timeout():
    devices = ClientMediaDevices(Outbox().send, timeout_seconds=0.01)

    with pytest.raises(DeviceUnavailable, match="Timed out"):
        await devices.get_user_media()


async def test_client_devices_cancel_pending():
    outbox = Outbox()
    devices = ClientMediaDevices(outbox.send, timeout_seconds=5)

    request = asyncio.create_task(devices.get_user_media())
    await wait_until(lambda: outbox.messages)
    devices.cancel_pending()

    with pytest.raises(DeviceUnavailable, match="disconnected"):
        await request


def test_unsolicited_result_is_ignored():
    devices = ClientMediaDevices(Outbox().send)
    assert devices.resolve({"type": "media_result", "granted": True}) is False
