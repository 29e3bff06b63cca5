"""
Camera and microphone acquisition for mock interview sessions.

``MediaDevices.acquire`` is the permission request; the returned
``MediaStream`` must be released on every exit path from an active session.
"""

import asyncio
import threading
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from .errors import PermissionDeniedError
from ..config import MediaConfig, get_media_config
from ..utils import get_logger

logger = get_logger(__name__)

class MediaTrack:
    """A single acquired device with its stop callback."""

    def __init__(self, kind: str, stop: Callable[[], None]):
        self.kind = kind
        self._stop = stop
        self.live = True

    def stop(self) -> None:
        if not self.live:
            return
        self.live = False
        self._stop()

class MediaStream:
    """Bundle of acquired tracks; ``release`` is idempotent and stops every track."""

    def __init__(self, tracks: List[MediaTrack]):
        self.tracks = tracks
        self._lock = threading.Lock()

    @property
    def active(self) -> bool:
        return any(track.live for track in self.tracks)

    def release(self) -> None:
        with self._lock:
            errors = []
            for track in self.tracks:
                try:
                    track.stop()
                except Exception as e:
                    # Keep stopping the remaining tracks
                    errors.append(e)
                    logger.error(f"Failed to stop {track.kind} track: {e}")
        if errors:
            logger.warning(f"Released media stream with {len(errors)} track errors")

class MediaDevices(ABC):
    """Source of exclusive camera and microphone access."""

    @abstractmethod
    async def acquire(self) -> MediaStream:
        """
        Request camera and microphone access.

        Raises:
            PermissionDeniedError: access refused or a device failed; nothing
                is left acquired
        """

class LocalMediaDevices(MediaDevices):
    """
    Opens the local webcam with OpenCV and the microphone with PyAudio.

    Both libraries come from the ``media`` extra and are imported on first use.
    """

    def __init__(self, config: Optional[MediaConfig] = None):
        self.config = config or get_media_config()

    async def acquire(self) -> MediaStream:
        return await asyncio.to_thread(self._open_devices)

    def _open_devices(self) -> MediaStream:
        camera = self._open_camera()
        try:
            microphone = self._open_microphone()
        except PermissionDeniedError:
            camera.stop()
            raise
        except Exception as e:
            camera.stop()
            raise PermissionDeniedError(f"Microphone could not be opened: {e}") from e
        logger.info("Camera and microphone acquired")
        return MediaStream([camera, microphone])

    def _open_camera(self) -> MediaTrack:
        try:
            import cv2
        except ImportError as e:
            raise PermissionDeniedError("Camera support requires opencv-python (install offerflow[media])") from e

        capture = cv2.VideoCapture(self.config.camera_index)
        if not capture.isOpened():
            capture.release()
            raise PermissionDeniedError(f"Camera {self.config.camera_index} could not be opened")
        return MediaTrack("video", capture.release)

    def _open_microphone(self) -> MediaTrack:
        try:
            import pyaudio
        except ImportError as e:
            raise PermissionDeniedError("Microphone support requires pyaudio (install offerflow[media])") from e

        pa = pyaudio.PyAudio()
        try:
            stream = pa.open(
                format=pyaudio.paInt16,
                channels=self.config.audio_channels,
                rate=self.config.audio_sample_rate,
                input=True,
                frames_per_buffer=self.config.audio_frames_per_buffer,
            )
        except (OSError, ValueError) as e:
            pa.terminate()
            raise PermissionDeniedError(f"Microphone could not be opened: {e}") from e

        def stop() -> None:
            try:
                stream.stop_stream()
                stream.close()
            finally:
                pa.terminate()

        return MediaTrack("audio", stop)
