"""Frame renderer — paints one complete video frame onto a Pillow surface.

Every coordinate derives from the canvas geometry and the fractions
below, so a frame is fully determined by (elapsed, timeline, geometry):

  - Background: vertical gradient, full canvas.
  - Image block: 55% of canvas height, source aspect ratio, centered,
    9% from the top, with a translucent glow panel 16px wider on each side.
  - Caption block: bold uppercase title below the image, then up to four
    wrapped body lines at 82% of canvas width.
  - Progress bar: advances one step per segment, not continuously.
  - Countdown: whole seconds remaining as MM:SS, bottom-left.
"""

import functools
import math
from dataclasses import dataclass
from enum import Enum

import numpy as np
from PIL import Image, ImageDraw

from .common import load_font
from .errors import InputError
from .timeline import Timeline
from .wrapping import pillow_measurer, wrap_text


# ── Geometry ─────────────────────────────────────────────────────


class Orientation(str, Enum):
    """Canvas orientation."""

    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


@dataclass(frozen=True)
class CanvasGeometry:
    width: int
    height: int

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)


CANVAS_SIZES = {
    Orientation.PORTRAIT: (720, 1280),
    Orientation.LANDSCAPE: (1280, 720),
}


def parse_orientation(value: str | Orientation) -> Orientation:
    """Accept an Orientation or its string value."""
    try:
        return Orientation(value)
    except ValueError:
        raise InputError(
            f"Unknown orientation '{value}'. "
            f"Valid: {sorted(o.value for o in Orientation)}"
        ) from None


def geometry_for(orientation: str | Orientation) -> CanvasGeometry:
    """Canvas size for an orientation: portrait 720x1280, landscape 1280x720."""
    width, height = CANVAS_SIZES[parse_orientation(orientation)]
    return CanvasGeometry(width, height)


# ── Layout constants ─────────────────────────────────────────────

IMAGE_HEIGHT_FRAC = 0.55
IMAGE_TOP_FRAC = 0.09
GLOW_INSET = 16
GLOW_ALPHA = 89                  # ~35% opacity

TITLE_FONT_SIZE = 42
TITLE_OFFSET = 64                # title baseline below the image block
BODY_FONT_SIZE = 24
BODY_OFFSET = 120                # first body baseline below the image block
BODY_LINE_HEIGHT = 34
CAPTION_WIDTH_FRAC = 0.82
CAPTION_MAX_LINES = 4

PROGRESS_LEFT_FRAC = 0.09
PROGRESS_WIDTH_FRAC = 0.82
PROGRESS_BOTTOM_OFFSET = 140
PROGRESS_HEIGHT = 8
TRACK_ALPHA = 64                 # ~25% opacity

COUNTDOWN_FONT_SIZE = 18
COUNTDOWN_BOTTOM_OFFSET = 104
COUNTDOWN_ALPHA = 178            # ~70% opacity

# The last rendered frame resolves just inside the timeline.
END_EPSILON = 0.01

DEFAULT_COLORS = {
    "background_top": (2, 8, 23),
    "background_bottom": (31, 41, 55),
    "glow": (15, 118, 110),
    "accent": (34, 211, 238),
    "text": (255, 255, 255),
}


@dataclass(frozen=True)
class FrameLayout:
    """Pixel positions for every element of a frame."""

    image_size: tuple[int, int]
    image_origin: tuple[int, int]
    glow_box: tuple[int, int, int, int]
    title_xy: tuple[int, int]
    body_xy: tuple[int, int]
    line_height: int
    caption_width: int
    track_box: tuple[int, int, int, int]
    countdown_xy: tuple[int, int]


def compute_layout(
    geometry: CanvasGeometry, image_size: tuple[int, int],
) -> FrameLayout:
    """Place the image, captions, progress bar and countdown.

    Args:
        geometry: Canvas dimensions.
        image_size: (width, height) of the source image; only its aspect
            ratio matters.
    """
    w, h = geometry.width, geometry.height
    src_w, src_h = image_size

    image_h = int(h * IMAGE_HEIGHT_FRAC)
    image_w = src_w * image_h // src_h
    image_x = (w - image_w) // 2
    image_y = int(h * IMAGE_TOP_FRAC)
    image_bottom = image_y + image_h

    track_x = int(w * PROGRESS_LEFT_FRAC)
    track_y = h - PROGRESS_BOTTOM_OFFSET
    track_w = int(w * PROGRESS_WIDTH_FRAC)

    return FrameLayout(
        image_size=(image_w, image_h),
        image_origin=(image_x, image_y),
        glow_box=(
            image_x - GLOW_INSET,
            image_y - GLOW_INSET,
            image_x + image_w + GLOW_INSET - 1,
            image_bottom + GLOW_INSET - 1,
        ),
        title_xy=(w // 2, image_bottom + TITLE_OFFSET),
        body_xy=(w // 2, image_bottom + BODY_OFFSET),
        line_height=BODY_LINE_HEIGHT,
        caption_width=int(w * CAPTION_WIDTH_FRAC),
        track_box=(track_x, track_y, track_x + track_w, track_y + PROGRESS_HEIGHT),
        countdown_xy=(track_x, h - COUNTDOWN_BOTTOM_OFFSET),
    )


def fit_image(image: Image.Image, geometry: CanvasGeometry) -> Image.Image:
    """Scale the source image to the image block once, ahead of the loop."""
    size = compute_layout(geometry, image.size).image_size
    if image.size == size:
        return image
    return image.resize(size, Image.LANCZOS)


def format_countdown(seconds: float) -> str:
    """Whole seconds remaining as MM:SS, never negative."""
    remaining = max(0, math.floor(seconds))
    minutes, secs = divmod(remaining, 60)
    return f"{minutes:02d}:{secs:02d}"


# ── Cached drawing resources ─────────────────────────────────────


@functools.lru_cache(maxsize=8)
def _gradient(
    width: int,
    height: int,
    top: tuple[int, int, int],
    bottom: tuple[int, int, int],
) -> Image.Image:
    """Vertical linear gradient from top color to bottom color."""
    t = np.linspace(0.0, 1.0, height, dtype=np.float32)[:, None]
    top_rgb = np.array(top, dtype=np.float32)
    bottom_rgb = np.array(bottom, dtype=np.float32)
    rows = top_rgb + (bottom_rgb - top_rgb) * t
    pixels = np.broadcast_to(rows[:, None, :], (height, width, 3))
    return Image.fromarray(np.round(pixels).astype(np.uint8))


@functools.lru_cache(maxsize=8)
def _font(size: int, bold: bool = False):
    return load_font(size, bold=bold)


# ── Frame rendering ──────────────────────────────────────────────


def render_frame(
    surface: Image.Image,
    elapsed: float,
    image: Image.Image,
    timeline: Timeline,
    geometry: CanvasGeometry,
    colors: dict[str, tuple[int, int, int]] | None = None,
) -> None:
    """Paint the frame for `elapsed` seconds onto surface, in place.

    Args:
        surface: RGB image of geometry.size; overwritten entirely.
        elapsed: Seconds since the start of playback.
        image: Source image. Pass the output of fit_image() to skip
            per-frame scaling.
        timeline: Script being played.
        geometry: Canvas dimensions.
        colors: Palette overrides on top of DEFAULT_COLORS.
    """
    palette = {**DEFAULT_COLORS, **(colors or {})}
    layout = compute_layout(geometry, image.size)
    if image.size != layout.image_size:
        image = image.resize(layout.image_size, Image.LANCZOS)

    total = timeline.total_duration
    state = timeline.resolve(min(max(elapsed, 0.0), total - END_EPSILON))

    surface.paste(_gradient(
        geometry.width, geometry.height,
        palette["background_top"], palette["background_bottom"],
    ))
    draw = ImageDraw.Draw(surface, "RGBA")

    draw.rectangle(layout.glow_box, fill=(*palette["glow"], GLOW_ALPHA))
    surface.paste(image, layout.image_origin)

    # Captions.
    text_color = (*palette["text"], 255)
    draw.text(
        layout.title_xy, state.segment.title.upper(),
        fill=text_color, font=_font(TITLE_FONT_SIZE, True), anchor="ms",
    )
    body_font = _font(BODY_FONT_SIZE)
    lines = wrap_text(
        state.segment.text, layout.caption_width,
        pillow_measurer(body_font), max_lines=CAPTION_MAX_LINES,
    )
    body_x, body_y = layout.body_xy
    for i, line in enumerate(lines):
        draw.text(
            (body_x, body_y + i * layout.line_height), line,
            fill=text_color, font=body_font, anchor="ms",
        )

    # Progress bar, one step per segment.
    x0, y0, x1, y1 = layout.track_box
    draw.rectangle((x0, y0, x1 - 1, y1 - 1), fill=(255, 255, 255, TRACK_ALPHA))
    filled = (x1 - x0) * (state.index + 1) // len(timeline)
    if filled > 0:
        draw.rectangle((x0, y0, x0 + filled - 1, y1 - 1), fill=(*palette["accent"], 255))

    draw.text(
        layout.countdown_xy, format_countdown(total - elapsed),
        fill=(*palette["text"], COUNTDOWN_ALPHA),
        font=_font(COUNTDOWN_FONT_SIZE), anchor="ls",
    )
