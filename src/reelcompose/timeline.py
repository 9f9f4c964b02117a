"""Segment timeline — maps elapsed playback time to the active segment.

A timeline is an ordered run of script segments; insertion order is
playback order and the total duration is the sum of segment durations.
Resolution is a pure function of (segments, elapsed), so every frame can
be rendered from the elapsed time alone.
"""

import math
from dataclasses import dataclass
from typing import Sequence

from .errors import InputError


@dataclass(frozen=True)
class ScriptSegment:
    """One timed unit of narration."""

    id: str
    title: str
    text: str
    duration: float

    def __post_init__(self) -> None:
        if isinstance(self.duration, bool) or not isinstance(self.duration, (int, float)):
            raise InputError(
                f"Segment '{self.id}': duration must be a number, got {self.duration!r}"
            )
        if not math.isfinite(self.duration):
            raise InputError(
                f"Segment '{self.id}': duration must be finite, got {self.duration!r}"
            )
        if self.duration <= 0:
            raise InputError(
                f"Segment '{self.id}': duration must be positive, got {self.duration!r}"
            )


@dataclass(frozen=True)
class ResolvedSegment:
    """Render state for one frame."""

    segment: ScriptSegment
    index: int
    time_into_segment: float


def resolve_segment(
    segments: Sequence[ScriptSegment], elapsed: float,
) -> ResolvedSegment:
    """Find the segment playing at `elapsed` seconds.

    Returns the first segment whose cumulative end is past `elapsed`.
    At or beyond the total duration the last segment is returned, with
    its offset measured from its own start. Callers are responsible for
    detecting the end of the timeline.

    Raises:
        ValueError: If segments is empty.
    """
    if not segments:
        raise ValueError("Cannot resolve elapsed time against an empty timeline")

    start = 0.0
    for index, segment in enumerate(segments):
        end = start + segment.duration
        if elapsed < end:
            return ResolvedSegment(segment, index, elapsed - start)
        start = end

    last = len(segments) - 1
    last_start = start - segments[last].duration
    return ResolvedSegment(segments[last], last, elapsed - last_start)


@dataclass(frozen=True)
class Timeline:
    """Validated, ordered sequence of segments."""

    segments: tuple[ScriptSegment, ...]

    def __post_init__(self) -> None:
        if not self.segments:
            raise InputError("Timeline must contain at least one segment")
        seen = set()
        for segment in self.segments:
            if segment.id in seen:
                raise InputError(f"Duplicate segment id: '{segment.id}'")
            seen.add(segment.id)

    @classmethod
    def from_segments(cls, segments: Sequence[ScriptSegment]) -> "Timeline":
        return cls(tuple(segments))

    @classmethod
    def from_dicts(cls, items: Sequence[dict]) -> "Timeline":
        """Build a timeline from plain dicts (id, title, text, duration)."""
        segments = []
        for i, item in enumerate(items):
            for field in ("id", "title", "text", "duration"):
                if field not in item:
                    raise InputError(f"Segment {i}: missing required field '{field}'")
            segments.append(ScriptSegment(
                id=str(item["id"]),
                title=str(item["title"]),
                text=str(item["text"]),
                duration=item["duration"],
            ))
        return cls(tuple(segments))

    @property
    def total_duration(self) -> float:
        return sum(segment.duration for segment in self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    def resolve(self, elapsed: float) -> ResolvedSegment:
        return resolve_segment(self.segments, elapsed)

    def to_dicts(self) -> list[dict]:
        return [
            {"id": s.id, "title": s.title, "text": s.text, "duration": s.duration}
            for s in self.segments
        ]
