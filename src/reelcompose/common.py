"""reelcompose.common — shared utilities for script rendering.

Contains: color parsing, path variable resolution, font loading, and
source image loading.
"""

import io
import re
from pathlib import Path

from PIL import Image, ImageFont, UnidentifiedImageError

from .errors import InputError


# ── Font paths ─────────────────────────────────────────────────────
# Inter preferred for captions, DejaVu Sans as fallback.

FONT_PATHS = [
    Path.home() / ".local/share/fonts/Inter.ttc",
    Path("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"),
]

BOLD_FONT_PATHS = [
    Path.home() / ".local/share/fonts/Inter-Bold.ttf",
    Path("/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"),
]


# ── Color utilities ────────────────────────────────────────────────

def parse_hex_color(hex_str: str) -> tuple[int, int, int]:
    """Convert '#RRGGBB' or 'RRGGBB' string to (R, G, B) tuple."""
    hex_str = hex_str.lstrip("#")
    if len(hex_str) != 6 or not all(c in "0123456789abcdefABCDEF" for c in hex_str):
        raise ValueError(f"Invalid hex color: '#{hex_str}'")
    return (int(hex_str[0:2], 16), int(hex_str[2:4], 16), int(hex_str[4:6], 16))


# ── Path utilities ─────────────────────────────────────────────────

def resolve_path_vars(text: str, paths: dict[str, str]) -> str:
    """Replace ${name} variables in a string using the paths dict."""
    def _replace(match):
        key = match.group(1)
        if key not in paths:
            raise ValueError(f"Unknown path variable: ${{{key}}}")
        return paths[key]
    return re.sub(r"\$\{(\w+)\}", _replace, text)


# ── Font loading ───────────────────────────────────────────────────

def load_font(
    size: int, bold: bool = False,
) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Load Inter (or fallback) at the given size.

    Bold faces come from a separate list; when none is installed the
    regular face is used instead.
    """
    candidates = BOLD_FONT_PATHS + FONT_PATHS if bold else FONT_PATHS
    for font_path in candidates:
        if font_path.exists():
            try:
                return ImageFont.truetype(str(font_path), size=size, index=0)
            except (OSError, IndexError):
                continue
    # Last resort: Pillow's scalable default font.
    return ImageFont.load_default(size=size)


# ── Image loading ──────────────────────────────────────────────────

def load_image(source: str | Path | bytes | Image.Image) -> Image.Image:
    """Resolve an image reference to RGB pixel data.

    Accepts a file path, raw encoded bytes, or an already-open Pillow
    image.

    Raises:
        InputError: The reference cannot be read or decoded.
    """
    if isinstance(source, Image.Image):
        image = source
    else:
        try:
            if isinstance(source, (bytes, bytearray)):
                image = Image.open(io.BytesIO(source))
            else:
                image = Image.open(str(source))
            image.load()
        except (OSError, UnidentifiedImageError) as exc:
            raise InputError(f"Could not load image: {exc}") from exc

    if image.width <= 0 or image.height <= 0:
        raise InputError(f"Image has no pixels: {image.size}")
    return image.convert("RGB")
