import numpy as np
import pytest

from camrig.core.frame import FrameState
from camrig.core.math3d import Vec3
from camrig.core.signal import SignalBridge, SIGNAL_CAMERA_UPDATED, SIGNAL_PHASE_CHANGED
from camrig.camera.config import TimelineConfig
from camrig.camera.pose import CameraPose
from camrig.camera.rig import AnimatedCamera, VirtualCamera
from camrig.camera.timeline import CameraTimeline
from camrig.time.clock import PlaybackClock
from camrig.time.phases import CameraPhase

from conftest import FakeSource


@pytest.fixture
def bridge():
    return SignalBridge()


@pytest.fixture
def rig(timeline, bridge):
    return AnimatedCamera(timeline, bridge=bridge)


def test_update_applies_pose_to_camera(rig, config):
    update = rig.update(0.0)
    assert update.phase == CameraPhase.WAIT
    assert rig.camera.position == config.wait.position
    assert rig.camera.fov == config.wait.fov
    assert rig.state.applied_pose == rig.camera.pose()

def test_camera_copies_pose(rig):
    rig.update(0.0)
    applied = rig.state.applied_pose
    rig.camera.position.x = 99.0
    assert applied.position.x != 99.0

def test_callback_sees_applied_camera(timeline):
    seen = []
    camera = VirtualCamera()

    def on_update(update):
        seen.append((update.position, camera.position.to_tuple()))

    rig = AnimatedCamera(timeline, camera=camera, on_update=on_update)
    rig.update(2.5)
    rig.update(5.0)
    assert len(seen) == 2
    for sent, applied in seen:
        assert sent == applied

def test_camera_updated_signal_payload(rig, bridge):
    received = []
    bridge.connect(SIGNAL_CAMERA_UPDATED, received.append)

    rig.update(5.0)

    assert len(received) == 1
    payload = received[0].to_dict()
    assert payload['phase'] == int(CameraPhase.PLAYBACK)
    assert payload['phase_time'] == pytest.approx(2.0)
    assert payload['position'] == [2.0, 1.0, 2.0]
    assert payload['fov'] == 30.0

def test_phase_change_signal(rig, bridge):
    changes = []
    bridge.connect(SIGNAL_PHASE_CHANGED, lambda new, old: changes.append((new, old)))

    for t in (0.0, 1.0, 2.5, 3.5, 4.0, 10.5):
        rig.update(t)

    assert changes == [
        (CameraPhase.WAIT, None),
        (CameraPhase.TRANSITION, CameraPhase.WAIT),
        (CameraPhase.PLAYBACK, CameraPhase.TRANSITION),
        (CameraPhase.DRIFT, CameraPhase.PLAYBACK),
    ]

def test_paused_rig_does_nothing(rig):
    rig.playing = False
    before = rig.camera.pose()
    assert rig.update(5.0) is None
    assert rig.camera.pose() == before
    assert rig.state.phase is None

def test_held_pose_leaves_camera_untouched(config, bridge):
    source = FakeSource(ready=False)
    rig = AnimatedCamera(CameraTimeline(config, source), bridge=bridge)
    received = []
    bridge.connect(SIGNAL_CAMERA_UPDATED, received.append)

    rig.update(1.0)
    wait = rig.camera.pose()
    assert rig.update(2.5) is None

    assert rig.camera.pose() == wait
    assert rig.state.applied_pose == wait
    assert rig.state.phase == CameraPhase.TRANSITION
    assert len(received) == 1

def test_callback_error_is_contained(timeline):
    def explode(update):
        raise RuntimeError("listener failed")

    rig = AnimatedCamera(timeline, on_update=explode)
    assert rig.update(0.0) is not None
    assert rig.state.applied_pose is not None

def test_drift_uses_pose_applied_by_rig(rig):
    rig.update(9.99)
    last_playback = rig.state.applied_pose
    rig.update(10.01)
    assert rig.state.drift_baseline.pose is last_playback
    assert not rig.state.drift_baseline.reconstructed


def test_clock_drives_rig(rig, bridge):
    clock = PlaybackClock()
    clock.bind(bridge)

    clock.update(0.5)
    assert rig.state.phase is None

    clock.play()
    for _ in range(5):
        clock.update(0.5)
    assert rig.elapsed == pytest.approx(2.5)
    assert rig.state.phase == CameraPhase.TRANSITION

def test_clock_seek_and_stop(rig, bridge):
    clock = PlaybackClock()
    clock.bind(bridge)

    clock.seek(12.0)
    assert rig.state.phase == CameraPhase.DRIFT
    assert rig.state.drift_baseline.reconstructed

    clock.stop()
    assert rig.state.phase is None
    assert rig.state.drift_baseline is None
    assert rig.elapsed == 0.0

def test_rig_follows_clock_play_and_pause(rig, bridge):
    clock = PlaybackClock()
    clock.bind(bridge)

    clock.play()
    assert rig.playing
    clock.update(1.0)
    clock.pause()
    assert not rig.playing
    # Host frames while paused leave the camera alone
    assert rig.on_frame(FrameState(frame_id=1, dt=1.0, t=5.0)) is None
    assert rig.elapsed == pytest.approx(1.0)

    clock.play()
    assert rig.playing
    clock.update(1.5)
    assert rig.state.phase == CameraPhase.TRANSITION

def test_seek_while_paused_moves_camera(rig, bridge):
    clock = PlaybackClock()
    clock.bind(bridge)
    clock.play()
    clock.pause()

    clock.seek(5.0)
    assert not rig.playing
    assert rig.state.phase == CameraPhase.PLAYBACK
    assert rig.camera.position == Vec3(2.0, 1.0, 2.0)

def test_stop_pauses_rig(rig, bridge):
    clock = PlaybackClock()
    clock.bind(bridge)
    clock.play()
    clock.stop()
    assert not rig.playing
    assert rig.update(1.0) is None

def test_unbind_stops_following(rig, bridge):
    clock = PlaybackClock()
    clock.bind(bridge)
    rig.unbind()
    clock.seek(5.0)
    assert rig.state.phase is None

def test_on_frame(rig):
    frame = FrameState(frame_id=0, dt=0.0, t=0.0)
    for _ in range(4):
        frame = frame.advance(1.0)
    update = rig.on_frame(frame)
    assert frame.frame_id == 4
    assert update.phase == CameraPhase.PLAYBACK
    assert update.phase_time == pytest.approx(1.0)


def test_status(rig):
    status = rig.status(5.0)
    assert status.phase == CameraPhase.PLAYBACK
    assert status.phase_time == pytest.approx(2.0)
    assert status.total_duration == pytest.approx(10.0)
    assert status.progress == pytest.approx(0.5)
    assert status.phase_progress == pytest.approx(2.0 / 7.0)
    assert status.format() == "Time: 5.00s / 10.00s  [PLAYBACK 2.00s]"

def test_status_defaults_to_last_update(rig):
    rig.update(1.0)
    assert rig.status().phase == CameraPhase.WAIT


def test_wait_shot_looks_at_target(rig, config):
    rig.update(0.0)
    t = config.wait.target
    x, y, z, w = rig.camera.view_matrix().to_array() @ np.array([t.x, t.y, t.z, 1.0])
    assert x == pytest.approx(0.0, abs=1e-9)
    assert y == pytest.approx(0.0, abs=1e-9)
    assert z < 0.0
    assert w == pytest.approx(1.0)

def test_forward_matches_look_direction(rig, config):
    rig.update(0.0)
    expected = (config.wait.target - config.wait.position).normalized()
    assert rig.camera.forward().to_tuple() == pytest.approx(expected.to_tuple(), abs=1e-9)

def test_projection_uses_fov(rig):
    camera = VirtualCamera()
    camera.apply_pose(CameraPose(Vec3(), rig.camera.rotation, 90.0))
    m = camera.projection_matrix(1.0).to_array()
    assert m[1, 1] == pytest.approx(1.0)
