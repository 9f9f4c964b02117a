"""Tests for frame layout and rendering."""

import pytest
from PIL import Image

from reelcompose.errors import InputError
from reelcompose.render import (
    DEFAULT_COLORS,
    CanvasGeometry,
    Orientation,
    compute_layout,
    fit_image,
    format_countdown,
    geometry_for,
    render_frame,
)

RED = (200, 30, 30)


@pytest.fixture
def portrait():
    return geometry_for("portrait")


@pytest.fixture
def square_image():
    return Image.new("RGB", (400, 400), RED)


def _render(geometry, elapsed, image, timeline, colors=None):
    surface = Image.new("RGB", geometry.size)
    render_frame(surface, elapsed, image, timeline, geometry, colors)
    return surface


class TestGeometry:
    def test_portrait(self):
        assert geometry_for("portrait") == CanvasGeometry(720, 1280)

    def test_landscape(self):
        assert geometry_for("landscape") == CanvasGeometry(1280, 720)

    def test_accepts_enum(self):
        assert geometry_for(Orientation.LANDSCAPE).size == (1280, 720)

    def test_unknown_orientation_raises(self):
        with pytest.raises(InputError, match="Unknown orientation"):
            geometry_for("square")


class TestComputeLayout:
    def test_portrait_square_image(self, portrait):
        layout = compute_layout(portrait, (400, 400))
        assert layout.image_size == (704, 704)       # 55% of 1280
        assert layout.image_origin == (8, 115)       # centered, 9% from top
        assert layout.glow_box == (-8, 99, 727, 834)
        assert layout.title_xy == (360, 115 + 704 + 64)
        assert layout.body_xy == (360, 115 + 704 + 120)
        assert layout.caption_width == 590           # 82% of 720
        assert layout.track_box == (64, 1140, 654, 1148)
        assert layout.countdown_xy == (64, 1176)

    def test_keeps_aspect_ratio(self, portrait):
        layout = compute_layout(portrait, (300, 600))
        w, h = layout.image_size
        assert h == 704
        assert w == 352
        assert layout.image_origin[0] == (720 - 352) // 2

    def test_landscape(self):
        layout = compute_layout(geometry_for("landscape"), (1600, 900))
        assert layout.image_size == (704, 396)
        assert layout.image_origin == ((1280 - 704) // 2, 64)
        assert layout.caption_width == 1049

    def test_fitted_image_keeps_its_size(self, portrait):
        fitted = fit_image(Image.new("RGB", (1234, 987)), portrait)
        assert compute_layout(portrait, fitted.size).image_size == fitted.size


class TestFormatCountdown:
    @pytest.mark.parametrize("seconds, expected", [
        (48, "00:48"),
        (47.2, "00:47"),
        (0.99, "00:00"),
        (75.9, "01:15"),
        (-3, "00:00"),
    ])
    def test_format(self, seconds, expected):
        assert format_countdown(seconds) == expected


class TestRenderFrame:
    def test_background_gradient(self, portrait, square_image, script_timeline):
        frame = _render(portrait, 1.0, square_image, script_timeline)
        assert frame.getpixel((0, 0)) == DEFAULT_COLORS["background_top"]
        assert frame.getpixel((719, 1279)) == DEFAULT_COLORS["background_bottom"]

    def test_image_block(self, portrait, square_image, script_timeline):
        frame = _render(portrait, 1.0, square_image, script_timeline)
        assert frame.getpixel((360, 115 + 352)) == RED

    def test_glow_behind_image(self, portrait, script_timeline):
        # 300x600 source -> 352px wide block at x=184, glow from x=168.
        tall = Image.new("RGB", (300, 600), RED)
        frame = _render(portrait, 1.0, tall, script_timeline)
        background = frame.getpixel((100, 500))
        glow = frame.getpixel((175, 500))
        assert glow[1] > background[1] + 20

    def test_progress_steps_per_segment(self, portrait, square_image, script_timeline):
        accent = DEFAULT_COLORS["accent"]
        # Segment index 1 of 4: half the 590px track.
        frame = _render(portrait, 7.0, square_image, script_timeline)
        assert frame.getpixel((64 + 10, 1144)) == accent
        assert frame.getpixel((64 + 290, 1144)) == accent
        assert frame.getpixel((64 + 300, 1144)) != accent

    def test_progress_constant_within_segment(self, portrait, square_image, script_timeline):
        early = _render(portrait, 6.5, square_image, script_timeline)
        late = _render(portrait, 6.9, square_image, script_timeline)
        row = [(x, 1144) for x in range(64, 654, 10)]
        assert [early.getpixel(p) for p in row] == [late.getpixel(p) for p in row]

    def test_progress_full_on_last_segment(self, portrait, square_image, script_timeline):
        frame = _render(portrait, 40.0, square_image, script_timeline)
        assert frame.getpixel((650, 1144)) == DEFAULT_COLORS["accent"]

    def test_custom_accent(self, portrait, square_image, script_timeline):
        frame = _render(portrait, 1.0, square_image, script_timeline, colors={"accent": (0, 255, 0)})
        assert frame.getpixel((70, 1144)) == (0, 255, 0)

    def test_deterministic(self, portrait, square_image, script_timeline):
        a = _render(portrait, 12.3, square_image, script_timeline)
        b = _render(portrait, 12.3, square_image, script_timeline)
        assert a.tobytes() == b.tobytes()

    def test_segments_render_differently(self, portrait, square_image, script_timeline):
        a = _render(portrait, 1.0, square_image, script_timeline)
        b = _render(portrait, 7.0, square_image, script_timeline)
        assert a.tobytes() != b.tobytes()

    def test_end_of_timeline_renders_last_segment(self, portrait, square_image, script_timeline):
        at_end = _render(portrait, 48.0, square_image, script_timeline)
        just_before = _render(portrait, 47.995, square_image, script_timeline)
        assert at_end.tobytes() == just_before.tobytes()

    def test_past_end_and_negative_elapsed(self, portrait, square_image, script_timeline):
        _render(portrait, 60.0, square_image, script_timeline)
        _render(portrait, -1.0, square_image, script_timeline)

    def test_prefitted_image_matches(self, portrait, script_timeline):
        source = Image.new("RGB", (640, 480), (10, 120, 200))
        raw = _render(portrait, 3.0, source, script_timeline)
        fitted = _render(portrait, 3.0, fit_image(source, portrait), script_timeline)
        assert raw.tobytes() == fitted.tobytes()

    def test_landscape_frame(self, square_image, script_timeline):
        geometry = geometry_for("landscape")
        frame = _render(geometry, 20.0, square_image, script_timeline)
        assert frame.size == (1280, 720)
