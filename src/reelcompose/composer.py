"""Composition orchestrator — script + image in, encoded video out.

compose() validates its inputs before touching any capture resource,
checks the host can encode the configured container/codec, then records
the timeline in real time on a single-threaded scheduler.

Outcomes:
  - Artifact: the video was encoded (and saved).
  - None: the host cannot encode; callers present the script only.
  - InputError / SurfaceUnavailable / EncodingFault: hard failures.
"""

import logging
import sched
import tempfile
import time
from pathlib import Path
from typing import Callable, Sequence

from PIL import Image

from .capture import Artifact, create_surface, start_capture
from .common import load_image
from .encoders import FFmpegEncoder, VideoSettings, ffmpeg_supports
from .errors import InputError, UnsupportedCodec
from .render import fit_image, geometry_for, render_frame
from .timeline import ScriptSegment, Timeline

logger = logging.getLogger(__name__)


def compose(
    image: str | Path | bytes | Image.Image,
    timeline: Timeline | Sequence[ScriptSegment],
    orientation: str,
    settings: VideoSettings | None = None,
    output: str | Path | None = None,
    colors: dict[str, tuple[int, int, int]] | None = None,
    capability: Callable[[VideoSettings], bool] | None = None,
    scheduler: sched.scheduler | None = None,
    encoder_factory: Callable | None = None,
) -> Artifact | None:
    """Render a timeline over a still image into an encoded video.

    Args:
        image: Path, encoded bytes, or Pillow image.
        timeline: Timeline or ordered sequence of ScriptSegment.
        orientation: "portrait" (720x1280) or "landscape" (1280x720).
        settings: Frame rate and encoder configuration.
        output: Where to save the video. A temporary file is used when
            omitted.
        colors: Palette overrides for the renderer.
        capability: Predicate telling whether the host can encode
            `settings`. Defaults to probing the bundled ffmpeg.
        scheduler: Scheduler for the render loop. Defaults to one on the
            monotonic clock.
        encoder_factory: Encoder constructor; defaults to FFmpegEncoder.

    Returns:
        The saved Artifact, or None when encoding is unsupported.

    Raises:
        InputError: Empty timeline, bad orientation, unloadable image.
        SurfaceUnavailable: The render surface could not be created.
        EncodingFault: The encoder failed mid-recording.
    """
    if not isinstance(timeline, Timeline):
        timeline = Timeline.from_segments(timeline)
    total_duration = timeline.total_duration
    if total_duration <= 0:
        raise InputError(f"Timeline duration must be positive, got {total_duration}")
    geometry = geometry_for(orientation)
    source = load_image(image)

    settings = settings or VideoSettings()
    capability = capability or ffmpeg_supports
    if not capability(settings):
        logger.warning(
            "%s/%s encoding not supported here, providing the script only.",
            settings.container, settings.codec,
        )
        return None

    surface = create_surface(geometry)
    scheduler = scheduler or sched.scheduler(time.monotonic, time.sleep)
    try:
        session = start_capture(
            surface, settings, scheduler, encoder_factory or FFmpegEncoder,
        )
    except UnsupportedCodec as exc:
        logger.warning("%s, providing the script only.", exc)
        return None

    fitted = fit_image(source, geometry)

    def paint(elapsed: float) -> None:
        render_frame(surface, elapsed, fitted, timeline, geometry, colors)

    try:
        artifact = session.record(paint, total_duration)
    except Exception:
        session.abort()
        raise

    if output is None:
        with tempfile.NamedTemporaryFile(
            prefix="reel-", suffix=f".{settings.extension}", delete=False,
        ) as handle:
            output = handle.name
    artifact.save(output)
    logger.info(
        "composed %.1fs video (%d frames, %d bytes) -> %s",
        total_duration, session.frames_written, len(artifact.data), artifact.path,
    )
    return artifact
