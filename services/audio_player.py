import logging
import queue
import threading
import time
from pathlib import Path
from typing import Optional

import numpy as np
import pygame

from models.playback import DEFAULT_VOLUME, Command, CommandKind, StatusEvent, StatusKind

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100
NUM_CHANNELS = 2
POLL_INTERVAL = 0.05
POSITION_INTERVAL = 0.5

_SHUTDOWN = object()


def resample(samples: np.ndarray, rate: float) -> np.ndarray:
    """Speed up or slow down audio like a turntable, pitch included.

    Args:
        samples: Sample frames, shape (frames, channels).
        rate: Playback rate multiplier; 1.0 leaves the audio untouched.

    Returns:
        Resampled frames, contiguous so pygame can wrap them in a Sound.
    """
    if rate <= 0:
        raise ValueError(f"Playback rate must be positive, got {rate}")
    if rate == 1.0 or len(samples) == 0:
        return np.ascontiguousarray(samples)
    indices = np.arange(0, len(samples), rate).astype(np.int64)
    return np.ascontiguousarray(samples[indices])


class AudioPlayer:
    """pygame audio backend running on its own thread.

    The player only talks to the rest of the application through two
    queues: it reads Commands from `commands` and writes StatusEvents to
    `status`. Decoding and resampling happen on the backend thread, so the
    UI thread never blocks on audio I/O.
    """

    def __init__(self, commands: Optional[queue.Queue] = None,
                 status: Optional[queue.Queue] = None):
        self.commands: queue.Queue = commands if commands is not None else queue.Queue()
        self.status: queue.Queue = status if status is not None else queue.Queue()

        self._thread: Optional[threading.Thread] = None
        self._samples: Optional[np.ndarray] = None
        self._sound = None
        self._channel = None
        self._path: Optional[Path] = None
        self._token: int = 0
        self._rate: float = 1.0
        self._volume: float = DEFAULT_VOLUME
        self._source_offset: float = 0.0
        self._segment_started: float = 0.0
        self._last_report: float = 0.0
        self._active: bool = False
        self._paused: bool = False

        self._handlers = {
            CommandKind.LOAD: self._load,
            CommandKind.PLAY: self._play,
            CommandKind.PAUSE: self._pause,
            CommandKind.SEEK: self._seek,
            CommandKind.SET_RATE: self._set_rate,
            CommandKind.SET_VOLUME: self._set_volume,
            CommandKind.STOP: self._stop,
        }

    def start(self) -> None:
        """Open the audio device and start the backend thread.

        Raises:
            RuntimeError: If the audio device cannot be opened.
        """
        try:
            pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=NUM_CHANNELS, buffer=512)
        except pygame.error as e:
            raise RuntimeError(f"Cannot open audio output: {e}") from e

        self._thread = threading.Thread(target=self._run, name="audio-backend", daemon=True)
        self._thread.start()
        logger.info("Audio backend started")

    def close(self, grace: float = 0.5) -> None:
        """Stop the backend thread, waiting at most `grace` seconds.

        Commands queued before the call are still executed.
        """
        self.commands.put(_SHUTDOWN)
        if self._thread is not None:
            self._thread.join(timeout=grace)
            if self._thread.is_alive():
                logger.warning(f"Audio backend did not stop within {grace}s")
        try:
            pygame.mixer.quit()
        except pygame.error as e:
            logger.debug(f"Mixer shutdown error: {e}")

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run(self) -> None:
        while True:
            try:
                command = self.commands.get(timeout=POLL_INTERVAL)
            except queue.Empty:
                command = None

            if command is _SHUTDOWN:
                break
            if command is not None:
                self.execute(command)
            self.poll()

        self._stop(None)
        logger.info("Audio backend stopped")

    def execute(self, command: Command) -> None:
        """Run one command, reporting failures on the status channel."""
        handler = self._handlers[command.kind]
        try:
            handler(command)
        except (pygame.error, OSError, ValueError) as e:
            error_kind = "decode" if command.kind is CommandKind.LOAD else "playback"
            logger.error(f"{command.kind.value} failed for {command.path or self._path}: {e}")
            self._release()
            self._emit(StatusKind.BACKEND_ERROR, error_kind=error_kind, message=str(e),
                       token=command.token)

    def poll(self) -> None:
        """Report end of track and periodic position updates."""
        if not self._active or self._paused or self._channel is None:
            return

        if not self._channel.get_busy():
            self._active = False
            self._source_offset = 0.0
            self._emit(StatusKind.TRACK_FINISHED)
            return

        now = time.monotonic()
        if now - self._last_report >= POSITION_INTERVAL:
            self._last_report = now
            self._emit(StatusKind.POSITION, elapsed=self.get_position())

    def get_position(self) -> float:
        """Return the position within the current track in seconds of audio."""
        if self._active and not self._paused:
            return self._source_offset + (time.monotonic() - self._segment_started) * self._rate
        return self._source_offset

    def _load(self, command: Command) -> None:
        self._release()
        self._samples = None
        self._source_offset = 0.0
        self._token = command.token
        self._path = command.path
        sound = pygame.mixer.Sound(str(command.path))
        self._samples = pygame.sndarray.array(sound)
        logger.debug(f"Loaded {command.path} ({len(self._samples) / SAMPLE_RATE:.1f}s)")

    def _play(self, command: Command) -> None:
        if self._samples is None:
            return
        if self._active and self._paused:
            self._channel.unpause()
            self._segment_started = time.monotonic()
            self._paused = False
        elif not self._active:
            self._paused = False
            self._start_segment()

    def _pause(self, command: Command) -> None:
        if self._active and not self._paused:
            self._source_offset = self.get_position()
            self._channel.pause()
            self._paused = True

    def _seek(self, command: Command) -> None:
        if self._samples is None:
            return
        duration = len(self._samples) / SAMPLE_RATE
        self._source_offset = max(0.0, min(command.value, duration))
        if self._active:
            self._restart_segment()

    def _set_rate(self, command: Command) -> None:
        if command.value <= 0:
            raise ValueError(f"Playback rate must be positive, got {command.value}")
        if self._active:
            self._source_offset = self.get_position()
            self._rate = command.value
            self._restart_segment()
        else:
            self._rate = command.value

    def _set_volume(self, command: Command) -> None:
        self._volume = max(0.0, min(1.0, command.value))
        if self._channel is not None:
            self._channel.set_volume(self._volume)

    def _stop(self, command: Optional[Command]) -> None:
        self._release()
        self._samples = None
        self._path = None
        self._source_offset = 0.0

    def _restart_segment(self) -> None:
        paused = self._paused
        if self._channel is not None:
            self._channel.stop()
        self._start_segment()
        if paused and self._active:
            self._channel.pause()
            self._paused = True

    def _start_segment(self) -> None:
        start_frame = int(self._source_offset * SAMPLE_RATE)
        frames = resample(self._samples[start_frame:], self._rate)
        if len(frames) == 0:
            self._active = False
            self._emit(StatusKind.TRACK_FINISHED)
            return

        self._sound = pygame.sndarray.make_sound(frames)
        self._channel = self._sound.play()
        if self._channel is None:
            raise pygame.error("No free mixer channel")
        self._channel.set_volume(self._volume)
        self._segment_started = time.monotonic()
        self._last_report = self._segment_started
        self._active = True
        self._paused = False

    def _release(self) -> None:
        if self._channel is not None:
            self._channel.stop()
        self._channel = None
        self._sound = None
        self._active = False
        self._paused = False

    def _emit(self, kind: StatusKind, elapsed: float = 0.0, error_kind: str = "",
              message: str = "", token: Optional[int] = None) -> None:
        self.status.put(StatusEvent(
            kind=kind,
            token=self._token if token is None else token,
            elapsed=elapsed,
            error_kind=error_kind,
            message=message,
        ))
