import numpy as np
import pytest

from rs_disparity.vision.errors import FrameTimeout
from rs_disparity.vision.frames import DepthFrame, DisparityFrame


class FakeSession:
    def __init__(self, events, frames=(), start_error=None):
        self.events = events
        self.frames = list(frames)
        self.start_error = start_error
        self.started = False

    def start(self):
        self.events.append("start")
        if self.start_error is not None:
            raise self.start_error
        self.started = True

    def wait_for_latest_frame(self):
        self.events.append("wait")
        if not self.frames:
            raise FrameTimeout("no more simulated frames")
        return self.frames.pop(0)

    def stop(self):
        self.events.append("stop")
        self.started = False


class FakeConverter:
    def __init__(self, events, baseline=50.0, empty=False):
        self.events = events
        self.baseline = baseline
        self.empty = empty

    def to_disparity(self, depth):
        self.events.append("convert")
        if self.empty or depth.empty:
            data = np.empty((0, 0), dtype=np.float32)
        else:
            data = depth.data.astype(np.float32) + 1.0
        return DisparityFrame(width=depth.width, height=depth.height, data=data, baseline=self.baseline)


class FakeDisplay:
    """Returns queued keys, then the quit key once the queue is drained."""
    def __init__(self, events, keys=()):
        self.events = events
        self.keys = list(keys)
        self.shown = []
        self.timeouts = []

    def show(self, window_name, image):
        self.events.append(("show", window_name))
        self.shown.append((window_name, image))

    def destroy_all(self):
        self.events.append("destroy")

    def poll_key(self, timeout_ms):
        self.events.append("poll")
        self.timeouts.append(timeout_ms)
        if self.keys:
            return self.keys.pop(0)
        return ord('q')


def depth(value, width=4, height=3):
    return DepthFrame(width=width, height=height, data=np.full((height, width), value, dtype=np.int16))


@pytest.fixture
def events():
    return []


@pytest.fixture
def make_depth():
    return depth


@pytest.fixture
def make_session(events):
    def _make(frames=(), start_error=None):
        return FakeSession(events, frames, start_error)
    return _make


@pytest.fixture
def make_converter(events):
    def _make(baseline=50.0, empty=False):
        return FakeConverter(events, baseline, empty)
    return _make


@pytest.fixture
def make_display(events):
    def _make(keys=()):
        return FakeDisplay(events, keys)
    return _make
