import pytest

from camrig.core.math3d import Vec3, Euler
from camrig.camera.config import TimelineConfig
from camrig.camera.pose import AnimationSample
from camrig.camera.timeline import CameraTimeline, TimelineState


def linear_sample(t: float) -> AnimationSample:
    """Clip that dollies along +X with a slowly turning yaw."""
    return AnimationSample(
        position=Vec3(t, 1.0, 2.0),
        orientation=Euler(0.1, 0.2 + 0.01 * t, 0.0),
        fov=30.0,
    )


class FakeSource:
    def __init__(self, duration: float = 7.0, ready: bool = True, sample_fn=linear_sample):
        self.duration = duration
        self.ready = ready
        self.sample_fn = sample_fn
        self.calls = []

    def is_ready(self) -> bool:
        return self.ready

    def get_duration(self) -> float:
        return self.duration

    def get_camera_pose_at_time(self, local_seconds: float):
        self.calls.append(local_seconds)
        return self.sample_fn(local_seconds)


@pytest.fixture
def source():
    return FakeSource()


@pytest.fixture
def config():
    return TimelineConfig()


@pytest.fixture
def timeline(config, source):
    return CameraTimeline(config, source)


@pytest.fixture
def state():
    return TimelineState()
