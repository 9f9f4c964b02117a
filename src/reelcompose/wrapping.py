"""Greedy word wrapping for the caption block.

The caption area is small and fixed, so wrapping is best-effort: words
are never split, and anything past the line cap is dropped.
"""

from typing import Callable

from PIL import Image, ImageDraw, ImageFont

DEFAULT_MAX_LINES = 4


def wrap_text(
    text: str,
    max_width: float,
    measure: Callable[[str], float],
    max_lines: int = DEFAULT_MAX_LINES,
) -> list[str]:
    """Break text into display lines no wider than max_width.

    Words accumulate on the current line until adding the next one would
    overflow; then the line is closed and the word starts the next line.
    A word that is wider than max_width on its own gets a line to itself.

    Args:
        text: Caption body. Split on any whitespace.
        max_width: Available width in pixels.
        measure: Returns the rendered width of a string in pixels.
        max_lines: Lines beyond this count are silently dropped.

    Returns:
        Ordered list of at most max_lines lines.
    """
    lines: list[str] = []
    current = ""

    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if measure(candidate) <= max_width:
            current = candidate
        elif current:
            lines.append(current)
            current = word
        else:
            # Lone word already too wide.
            lines.append(candidate)
            current = ""

    if current:
        lines.append(current)

    return lines[:max_lines]


def pillow_measurer(
    font: ImageFont.FreeTypeFont | ImageFont.ImageFont,
) -> Callable[[str], float]:
    """Return a measure() callable backed by a Pillow font."""
    draw = ImageDraw.Draw(Image.new("RGB", (1, 1)))

    def _measure(text: str) -> float:
        return draw.textlength(text, font=font)

    return _measure
