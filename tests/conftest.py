"""Shared test fixtures for reelcompose tests."""

import sched

import pytest
from PIL import Image

from reelcompose.errors import EncodingFault, UnsupportedCodec
from reelcompose.timeline import ScriptSegment, Timeline


class FakeClock:
    """Deterministic time source; sleeping just advances the clock."""

    def __init__(self):
        self.now = 0.0

    def time(self):
        return self.now

    def sleep(self, seconds):
        self.now += max(0.0, seconds)

    def scheduler(self):
        return sched.scheduler(self.time, self.sleep)


class FakeEncoder:
    """In-memory encoder: one chunk per frame, a trailer on finish."""

    def __init__(self, size, settings, on_data, fail_start=False, fail_on_frame=None):
        self.size = size
        self.settings = settings
        self.on_data = on_data
        self.fail_start = fail_start
        self.fail_on_frame = fail_on_frame
        self.frames = []
        self.started = False
        self.finish_calls = 0
        self.killed = False

    def start(self):
        if self.fail_start:
            raise UnsupportedCodec("fake encoder unavailable")
        self.started = True

    def write(self, frame):
        if self.fail_on_frame is not None and len(self.frames) == self.fail_on_frame:
            raise EncodingFault("fake encoder broke")
        self.frames.append(len(frame))
        self.on_data(b"F")

    def finish(self):
        self.finish_calls += 1
        self.on_data(b"END")

    def kill(self):
        self.killed = True


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def encoder_factory():
    """Factory that records every FakeEncoder it builds on `.created`."""
    created = []

    def factory(size, settings, on_data, **kwargs):
        encoder = FakeEncoder(size, settings, on_data, **kwargs)
        created.append(encoder)
        return encoder

    factory.created = created
    return factory


@pytest.fixture
def script_timeline():
    """Four segments totalling 48 seconds."""
    return Timeline.from_segments([
        ScriptSegment("hook", "Abertura", "Conheça o produto.", 6),
        ScriptSegment("body", "Demonstração", "Resultado rápido. Experiência premium.", 18),
        ScriptSegment("proof", "Prova Social", "Clientes reais relatam: produto transformou nossa rotina.", 10),
        ScriptSegment("cta", "Chamada Final", "Garanta o seu hoje mesmo!", 14),
    ])


@pytest.fixture
def short_timeline():
    """Two half-second segments, fast enough for real-time recording."""
    return Timeline.from_segments([
        ScriptSegment("a", "Primeiro", "Texto do primeiro segmento.", 0.5),
        ScriptSegment("b", "Segundo", "Texto do segundo segmento.", 0.5),
    ])


@pytest.fixture
def product_image(tmp_path):
    """A 400x400 solid red PNG on disk."""
    path = tmp_path / "product.png"
    Image.new("RGB", (400, 400), (200, 30, 30)).save(path)
    return path
