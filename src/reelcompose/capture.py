"""Capture/encode pipeline — turns a repainted surface into a video stream.

A CaptureSession owns one render surface, one encoder, the encoded chunks
collected so far, and the scheduler handles of its render loop. Its
lifecycle is an explicit state machine:

    IDLE -> RECORDING -> STOPPING -> FINALIZED
                  \\-> ABORTED (encoding fault or render error)

Two triggers race to end a recording: the render loop noticing that the
timeline is over, and a fallback timer one second past the total
duration. Both call stop(), which is guarded by a single-shot `stopped`
flag so the artifact is finalized exactly once.
"""

import logging
import sched
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

from PIL import Image

from .encoders import VideoSettings
from .errors import SurfaceUnavailable
from .render import CanvasGeometry

logger = logging.getLogger(__name__)

FALLBACK_GRACE = 1.0             # seconds past the timeline before forcing stop

TICK_PRIORITY = 1
FALLBACK_PRIORITY = 0


class SessionState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"
    STOPPING = "stopping"
    FINALIZED = "finalized"
    ABORTED = "aborted"


@dataclass
class Artifact:
    """Finalized encoded video, plus where it was saved (if anywhere)."""

    data: bytes
    mime_type: str
    path: Path | None = None

    @property
    def uri(self) -> str | None:
        """file:// URI for playback, once the bytes are on disk."""
        if self.path is None:
            return None
        return self.path.resolve().as_uri()

    def save(self, path: str | Path) -> Path:
        """Write the bytes to path (parents created) and remember it."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(self.data)
        self.path = target
        return target


def create_surface(geometry: CanvasGeometry) -> Image.Image:
    """Allocate the RGB canvas frames are painted on.

    Raises:
        SurfaceUnavailable: The canvas cannot be allocated.
    """
    try:
        return Image.new("RGB", geometry.size)
    except (ValueError, MemoryError) as exc:
        raise SurfaceUnavailable(
            f"Cannot create {geometry.width}x{geometry.height} surface: {exc}"
        ) from exc


class CaptureSession:
    """One recording: surface, encoder, chunks, and loop handles.

    Args:
        surface: Canvas the render callback paints on.
        settings: Frame rate and encoder configuration.
        scheduler: Single-threaded scheduler driving the render loop. Its
            clock is the time base for elapsed seconds.
        encoder_factory: Called as factory(size, settings, on_data) and
            returns an object with start/write/finish/kill.
    """

    def __init__(
        self,
        surface: Image.Image,
        settings: VideoSettings,
        scheduler: sched.scheduler,
        encoder_factory: Callable,
    ):
        self.surface = surface
        self.settings = settings
        self.scheduler = scheduler
        self.encoder = encoder_factory(surface.size, settings, self._on_data)
        self.state = SessionState.IDLE
        self.stopped = False
        self.chunks: list[bytes] = []
        self.frames_written = 0
        self.artifact: Artifact | None = None
        self._tick_event = None
        self._fallback_event = None

    @property
    def frame_interval(self) -> float:
        return 1.0 / self.settings.fps

    def _on_data(self, chunk: bytes) -> None:
        if chunk and self.state is not SessionState.ABORTED:
            self.chunks.append(chunk)

    # ── Lifecycle ────────────────────────────────────────────────

    def start(self) -> None:
        """Spawn the encoder. IDLE -> RECORDING."""
        if self.state is not SessionState.IDLE:
            raise RuntimeError(f"Cannot start a session in state '{self.state.value}'")
        self.encoder.start()
        self.state = SessionState.RECORDING

    def capture(self, elapsed: float) -> None:
        """Forward the current surface to the encoder.

        Behaves like a capture stream at `fps`: a tick that lands in an
        already-filled frame slot is dropped, and a tick that arrives late
        repeats the frame to cover the slots it missed. The constant frame
        rate output therefore keeps pace with real elapsed time.
        """
        if self.state is not SessionState.RECORDING:
            return
        due = int(elapsed * self.settings.fps) + 1
        repeats = due - self.frames_written
        if repeats <= 0:
            return
        frame = self.surface.tobytes()
        for _ in range(repeats):
            self.encoder.write(frame)
        self.frames_written = due

    def stop(self) -> bool:
        """Finalize the recording. Safe to call more than once.

        Returns:
            True if this call finalized the artifact, False if the session
            had already been stopped.
        """
        if self.stopped or self.state is not SessionState.RECORDING:
            return False
        self.stopped = True
        self.state = SessionState.STOPPING
        self._release_handles()

        self.encoder.finish()
        self.artifact = Artifact(b"".join(self.chunks), self.settings.mime_type)
        self.state = SessionState.FINALIZED
        logger.debug(
            "capture finalized: %d frames, %d bytes",
            self.frames_written, len(self.artifact.data),
        )
        return True

    def abort(self) -> None:
        """Tear everything down after a failure; no artifact is produced."""
        self.stopped = True
        self.state = SessionState.ABORTED
        self._release_handles()
        self.encoder.kill()
        self.chunks.clear()

    def _release_handles(self) -> None:
        for event in (self._tick_event, self._fallback_event):
            if event is not None and event in self.scheduler.queue:
                self.scheduler.cancel(event)
        self._tick_event = None
        self._fallback_event = None

    # ── Render loop ──────────────────────────────────────────────

    def record(
        self, render: Callable[[float], None], duration: float,
    ) -> Artifact:
        """Drive the render loop until the recording is finalized.

        Each tick samples the scheduler clock, calls render(elapsed) to
        repaint the surface, captures it, and reschedules itself one frame
        interval later until elapsed reaches `duration`. A fallback stop
        is armed at duration + FALLBACK_GRACE.

        Args:
            render: Paints the frame for an elapsed time onto self.surface.
            duration: Total timeline length in seconds.

        Returns:
            The finalized Artifact (not yet saved).
        """
        if self.state is not SessionState.RECORDING:
            raise RuntimeError("record() requires a started session")

        clock = self.scheduler.timefunc
        started_at = clock()

        def tick():
            elapsed = clock() - started_at
            render(elapsed)
            # Never extend the video past the timeline, however late the tick.
            self.capture(min(elapsed, duration))
            if elapsed >= duration:
                self.stop()
                return
            self._tick_event = self.scheduler.enter(
                self.frame_interval, TICK_PRIORITY, tick,
            )

        self._tick_event = self.scheduler.enter(0, TICK_PRIORITY, tick)
        self._fallback_event = self.scheduler.enter(
            duration + FALLBACK_GRACE, FALLBACK_PRIORITY, self._fallback_stop,
        )
        self.scheduler.run()
        return self.artifact

    def _fallback_stop(self) -> None:
        if self.stop():
            logger.warning("render loop overran the timeline; stopped by fallback timer")


def start_capture(
    surface: Image.Image,
    settings: VideoSettings,
    scheduler: sched.scheduler,
    encoder_factory: Callable,
) -> CaptureSession:
    """Create a session bound to surface and start its encoder.

    Raises:
        UnsupportedCodec: The encoder could not be started.
    """
    session = CaptureSession(surface, settings, scheduler, encoder_factory)
    session.start()
    return session
