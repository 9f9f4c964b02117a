"""ffmpeg-backed video encoder and host capability probing.

Raw RGB frames are piped into the ffmpeg binary bundled with
imageio-ffmpeg. The encoded container is written to ffmpeg's stdout and
handed back in chunks as it is produced, so no intermediate file is
needed. Containers that need seekable output (mp4) are written as
fragmented streams.
"""

import functools
import logging
import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import imageio_ffmpeg
from moviepy import VideoFileClip

from .errors import EncodingFault, InputError, UnsupportedCodec

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
STDERR_TAIL = 2000

CONTAINER_MIME_TYPES = {
    "webm": "video/webm",
    "mp4": "video/mp4",
    "matroska": "video/x-matroska",
}

CONTAINER_EXTENSIONS = {
    "webm": "webm",
    "mp4": "mp4",
    "matroska": "mkv",
}


@dataclass(frozen=True)
class VideoSettings:
    """Encoder configuration for one composition run."""

    fps: int = 30
    bitrate: int = 4_000_000
    codec: str = "libvpx-vp9"
    container: str = "webm"

    def __post_init__(self) -> None:
        if isinstance(self.fps, bool) or not isinstance(self.fps, int) or self.fps <= 0:
            raise InputError(f"fps must be a positive integer, got {self.fps!r}")
        if isinstance(self.bitrate, bool) or not isinstance(self.bitrate, int) or self.bitrate <= 0:
            raise InputError(f"bitrate must be a positive integer, got {self.bitrate!r}")
        if self.container not in CONTAINER_MIME_TYPES:
            raise InputError(
                f"Unknown container '{self.container}'. "
                f"Valid: {sorted(CONTAINER_MIME_TYPES)}"
            )

    @property
    def mime_type(self) -> str:
        return f'{CONTAINER_MIME_TYPES[self.container]};codecs="{self.codec}"'

    @property
    def extension(self) -> str:
        return CONTAINER_EXTENSIONS[self.container]


def _ffmpeg_exe() -> str | None:
    """Path to the bundled ffmpeg, or None when the host has none."""
    try:
        return imageio_ffmpeg.get_ffmpeg_exe()
    except RuntimeError:
        return None


def _codec_params(settings: VideoSettings) -> list[str]:
    """Return ffmpeg output args for the configured codec."""
    params = ["-c:v", settings.codec, "-b:v", str(settings.bitrate), "-pix_fmt", "yuv420p"]
    if settings.codec == "libvpx-vp9":
        params += ["-deadline", "realtime", "-cpu-used", "8", "-row-mt", "1"]
    elif settings.codec == "libx264":
        params += ["-preset", "veryfast"]
    if settings.container == "mp4":
        params += ["-movflags", "frag_keyframe+empty_moov"]
    return params


# ── Capability probing ───────────────────────────────────────────


def _listed(listing: str, name: str) -> bool:
    """True if `name` appears as an entry in `ffmpeg -encoders/-muxers` output."""
    for line in listing.splitlines():
        parts = line.split()
        if len(parts) >= 2 and name in parts[1].split(","):
            return True
    return False


@functools.lru_cache(maxsize=None)
def probe_capability(codec: str, container: str) -> bool:
    """Check whether the bundled ffmpeg can encode `codec` into `container`."""
    exe = _ffmpeg_exe()
    if exe is None:
        return False
    try:
        encoders = subprocess.run(
            [exe, "-hide_banner", "-encoders"],
            capture_output=True, text=True, check=True,
        ).stdout
        muxers = subprocess.run(
            [exe, "-hide_banner", "-muxers"],
            capture_output=True, text=True, check=True,
        ).stdout
    except (OSError, subprocess.CalledProcessError) as exc:
        logger.warning("ffmpeg capability probe failed: %s", exc)
        return False
    return _listed(encoders, codec) and _listed(muxers, container)


def ffmpeg_supports(settings: VideoSettings) -> bool:
    """Default capability predicate for compose()."""
    return probe_capability(settings.codec, settings.container)


# ── Encoder ──────────────────────────────────────────────────────


class FFmpegEncoder:
    """Encode raw RGB frames through an ffmpeg subprocess.

    Encoded bytes are read from stdout on a background thread and passed
    to `on_data` in arrival order. stderr is drained the same way so a
    chatty encoder can never block the pipe.
    """

    def __init__(
        self,
        size: tuple[int, int],
        settings: VideoSettings,
        on_data: Callable[[bytes], None],
    ):
        self.size = size
        self.settings = settings
        self.on_data = on_data
        self._proc = None
        self._threads: list[threading.Thread] = []
        self._stderr: list[bytes] = []

    def command(self, exe: str) -> list[str]:
        width, height = self.size
        return [
            exe, "-hide_banner", "-loglevel", "error", "-y",
            "-f", "rawvideo",
            "-pix_fmt", "rgb24",
            "-s", f"{width}x{height}",
            "-r", str(self.settings.fps),
            "-i", "pipe:0",
            *_codec_params(self.settings),
            "-f", self.settings.container,
            "pipe:1",
        ]

    def start(self) -> None:
        exe = _ffmpeg_exe()
        if exe is None:
            raise UnsupportedCodec("No ffmpeg binary available")
        try:
            self._proc = subprocess.Popen(
                self.command(exe),
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as exc:
            raise UnsupportedCodec(f"Could not start ffmpeg: {exc}") from exc

        self._threads = [
            threading.Thread(target=self._drain, args=(self._proc.stdout, self.on_data), daemon=True),
            threading.Thread(target=self._drain, args=(self._proc.stderr, self._stderr.append), daemon=True),
        ]
        for thread in self._threads:
            thread.start()

    @staticmethod
    def _drain(stream, sink) -> None:
        while True:
            chunk = stream.read(CHUNK_SIZE)
            if not chunk:
                break
            sink(chunk)

    def _stderr_tail(self) -> str:
        return b"".join(self._stderr).decode(errors="replace")[-STDERR_TAIL:].strip()

    def write(self, frame: bytes) -> None:
        """Push one rgb24 frame."""
        try:
            self._proc.stdin.write(frame)
        except OSError as exc:
            self.kill()
            raise EncodingFault(f"Encoder pipe closed: {self._stderr_tail() or exc}") from exc

    def finish(self) -> None:
        """Flush remaining frames and wait for the container to be written."""
        try:
            self._proc.stdin.close()
        except OSError as exc:
            logger.debug("closing encoder stdin: %s", exc)
        returncode = self._proc.wait()
        for thread in self._threads:
            thread.join()
        if returncode != 0:
            raise EncodingFault(
                f"ffmpeg exited with code {returncode}: {self._stderr_tail()}"
            )

    def kill(self) -> None:
        """Terminate the subprocess without waiting for output."""
        if self._proc is None:
            return
        if self._proc.poll() is None:
            self._proc.kill()
        self._proc.wait()
        for thread in self._threads:
            thread.join(timeout=1.0)
        for stream in (self._proc.stdin, self._proc.stdout, self._proc.stderr):
            if stream is not None and not stream.closed:
                try:
                    stream.close()
                except OSError as exc:
                    logger.debug("closing encoder pipe: %s", exc)


# ── Read-back ────────────────────────────────────────────────────


def probe_duration(path: str | Path) -> float:
    """Duration of a rendered video in seconds, read back with moviepy.

    Streams muxed to a pipe carry no duration in their header, so the
    file is decoded end to end.
    """
    with VideoFileClip(str(path), decode_file=True, audio=False) as clip:
        return clip.duration
