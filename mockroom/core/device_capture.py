"""
Device Capture for MockRoom

Owns the camera+microphone stream lifecycle for one interview screen.

The stream is acquired from a MediaDevices backend (the candidate's browser,
reached over the interview WebSocket) and must be released on every exit path.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable
from uuid import uuid4

from mockroom.exceptions import DeviceUnavailable

logger = logging.getLogger(__name__)


class MediaTrack:
    """A single audio or video track of a capture stream."""
    
    def __init__(self, kind: str, track_id: str | None = None):
        self.kind = kind
        self.id = track_id or uuid4().hex
        self.enabled = True
        self.ready_state = "live"
    
    async def stop(self) -> None:
        """Stop the track. Stopping an ended track does nothing."""
        if self.ready_state == "ended":
            return
        self.ready_state = "ended"
        await self._on_stop()
    
    async def _on_stop(self) -> None:
        """Hook for backends that must be told about the stop."""
        pass


class MediaStream:
    """A set of capture tracks acquired together."""
    
    def __init__(self, tracks: list[MediaTrack], stream_id: str | None = None):
        self.id = stream_id or uuid4().hex
        self._tracks = list(tracks)
    
    def get_tracks(self) -> list[MediaTrack]:
        return list(self._tracks)
    
    @property
    def active(self) -> bool:
        """True while at least one track is live."""
        return any(t.ready_state == "live" for t in self._tracks)


class MediaDevices(ABC):
    """
    Abstract capture backend.
    
    Implementations raise DeviceUnavailable when permission is denied or
    no device is present.
    """
    
    @abstractmethod
    async def get_user_media(self, *, audio: bool = True, video: bool = True) -> MediaStream:
        pass


class ClientMediaDevices(MediaDevices):
    """
    Capture backend that asks the connected client for camera/microphone access.
    
    Sends a ``media_request`` message and waits for the client's
    ``media_result`` reply, which the connection's reader passes to resolve().
    """
    
    def __init__(
        self,
        send: Callable[[dict[str, Any]], Awaitable[None]],
        timeout_seconds: float = 30.0,
    ):
        self._send = send
        self.timeout_seconds = timeout_seconds
        self._pending: asyncio.Future | None = None
    
    async def get_user_media(self, *, audio: bool = True, video: bool = True) -> MediaStream:
        loop = asyncio.get_running_loop()
        self._pending = loop.create_future()
        
        try:
            await self._send({"type": "media_request", "audio": audio, "video": video})
            result = await asyncio.wait_for(self._pending, timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            raise DeviceUnavailable("Timed out waiting for camera/microphone permission")
        finally:
            self._pending = None
        
        if not result.get("granted"):
            raise DeviceUnavailable(result.get("error") or "Camera/microphone permission denied")
        
        kinds = result.get("tracks") or [k for k, wanted in (("audio", audio), ("video", video)) if wanted]
        if not kinds:
            raise DeviceUnavailable("No capture device available")
        
        stream_id = result.get("stream_id") or uuid4().hex
        tracks = [ClientMediaTrack(kind, stream_id, self._send) for kind in kinds]
        return MediaStream(tracks, stream_id=stream_id)
    
    def resolve(self, message: dict[str, Any]) -> bool:
        """
        Deliver the client's permission reply.
        
        Returns:
            False if no request was waiting for a reply
        """
        if self._pending is None or self._pending.done():
            logger.warning("Ignoring unsolicited media_result message")
            return False
        self._pending.set_result(message)
        return True

    def cancel_pending(self, reason: str = "Client disconnected") -> None:
        """Fail a permission request that can no longer be answered."""
        if self._pending is not None and not self._pending.done():
            self._pending.set_exception(DeviceUnavailable(reason))


class ClientMediaTrack(MediaTrack):
    """Track living on the client; stopping it tells the client to stop capture."""
    
    def __init__(
        self,
        kind: str,
        stream_id: str,
        send: Callable[[dict[str, Any]], Awaitable[None]],
    ):
        super().__init__(kind)
        self.stream_id = stream_id
        self._send = send
    
    async def _on_stop(self) -> None:
        await self._send({
            "type": "media_release",
            "stream_id": self.stream_id,
            "kind": self.kind,
        })


class DeviceCaptureManager:
    """
    Acquires and releases the combined audio+video capture stream.
    
    acquire() failures leave the manager without a stream; the caller is
    expected to continue without preview. release() is idempotent.
    """
    
    def __init__(self, devices: MediaDevices):
        self.devices = devices
        self._stream: MediaStream | None = None
        self.last_error: str | None = None
    
    @property
    def stream(self) -> MediaStream | None:
        """The live stream available for preview, if any."""
        return self._stream
    
    @property
    def has_stream(self) -> bool:
        return self._stream is not None and self._stream.active
    
    async def acquire(self) -> MediaStream:
        """
        Request camera and microphone capture.
        
        Returns:
            The live stream (the held one if already acquired)
            
        Raises:
            DeviceUnavailable: If permission is denied or no device exists
        """
        if self.has_stream:
            return self._stream
        
        try:
            stream = await self.devices.get_user_media(audio=True, video=True)
        except DeviceUnavailable as e:
            self.last_error = str(e)
            logger.warning(f"Device capture unavailable: {e}")
            raise
        except Exception as e:
            self.last_error = str(e)
            logger.error(f"Device capture failed: {e}")
            raise DeviceUnavailable(str(e)) from e
        
        self._stream = stream
        self.last_error = None
        logger.info(f"Acquired capture stream {stream.id} ({len(stream.get_tracks())} tracks)")
        return stream
    
    async def release(self) -> None:
        """Stop every track of the held stream. Safe to call repeatedly."""
        stream, self._stream = self._stream, None
        if stream is None:
            return
        
        for track in stream.get_tracks():
            try:
                await track.stop()
            except Exception as e:
                logger.error(f"Failed to stop {track.kind} track {track.id}: {e}")
        
        logger.info(f"Released capture stream {stream.id}")
    
    def set_track_enabled(self, kind: str, enabled: bool) -> bool:
        """
        Mute or unmute the camera or microphone without releasing it.
        
        Returns:
            True if a track of that kind was found
        """
        if self._stream is None:
            return False
        
        found = False
        for track in self._stream.get_tracks():
            if track.kind == kind:
                track.enabled = enabled
                found = True
        return found
