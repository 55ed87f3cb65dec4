import pytest

from camrig.core.math3d import Vec3, Quat, Euler
from camrig.camera.source import AnimationSource, Keyframe, KeyframeAnimationSource


def euler_clip():
    return KeyframeAnimationSource([
        Keyframe(0.0, Vec3(0.0, 0.0, 0.0), Euler(0.0, 0.0, 0.0), 30.0),
        Keyframe(2.0, Vec3(2.0, 4.0, 0.0), Euler(0.0, 1.0, 0.0), 40.0),
        Keyframe(4.0, Vec3(2.0, 4.0, 8.0), Euler(0.0, 1.0, 0.5), 40.0),
    ])


def test_satisfies_protocol():
    assert isinstance(euler_clip(), AnimationSource)

def test_duration_is_last_key():
    assert euler_clip().get_duration() == 4.0

def test_interpolates_between_keys():
    s = euler_clip().get_camera_pose_at_time(1.0)
    assert s.position == Vec3(1.0, 2.0, 0.0)
    assert s.orientation == Euler(0.0, 0.5, 0.0)
    assert s.fov == pytest.approx(35.0)

def test_exact_key_times():
    clip = euler_clip()
    assert clip.get_camera_pose_at_time(0.0).position == Vec3(0.0, 0.0, 0.0)
    assert clip.get_camera_pose_at_time(2.0).position == Vec3(2.0, 4.0, 0.0)
    assert clip.get_camera_pose_at_time(4.0).position == Vec3(2.0, 4.0, 8.0)

def test_clamps_outside_clip():
    clip = euler_clip()
    assert clip.get_camera_pose_at_time(-1.0).position == Vec3(0.0, 0.0, 0.0)
    assert clip.get_camera_pose_at_time(10.0).position == Vec3(2.0, 4.0, 8.0)

def test_unsorted_keys_are_sorted():
    clip = KeyframeAnimationSource([
        Keyframe(2.0, Vec3(2.0, 0.0, 0.0), Euler()),
        Keyframe(0.0, Vec3(0.0, 0.0, 0.0), Euler()),
    ])
    assert clip.get_camera_pose_at_time(0.5).position == Vec3(0.5, 0.0, 0.0)

def test_quaternion_keys_slerp():
    clip = KeyframeAnimationSource([
        Keyframe(0.0, Vec3(), Quat.identity()),
        Keyframe(1.0, Vec3(), Quat.from_axis_angle(Vec3(0.0, 1.0, 0.0), 1.0)),
    ])
    s = clip.get_camera_pose_at_time(0.5)
    assert isinstance(s.orientation, Quat)
    assert Euler.from_quat(s.orientation).y == pytest.approx(0.5)
    assert s.fov is None

def test_not_ready_returns_no_sample():
    clip = euler_clip()
    clip.set_ready(False)
    assert not clip.is_ready()
    assert clip.get_camera_pose_at_time(1.0) is None
    clip.set_ready()
    assert clip.get_camera_pose_at_time(1.0) is not None

def test_empty_source_is_never_ready():
    clip = KeyframeAnimationSource()
    assert len(clip) == 0
    assert not clip.is_ready()
    assert clip.get_duration() == 0.0

def test_nan_time_returns_no_sample():
    assert euler_clip().get_camera_pose_at_time(float('nan')) is None

def test_mixed_rotation_kinds_rejected():
    with pytest.raises(ValueError):
        KeyframeAnimationSource([
            Keyframe(0.0, Vec3(), Euler()),
            Keyframe(1.0, Vec3(), Quat.identity()),
        ])

def test_partial_fov_rejected():
    with pytest.raises(ValueError):
        KeyframeAnimationSource([
            Keyframe(0.0, Vec3(), Euler(), 30.0),
            Keyframe(1.0, Vec3(), Euler()),
        ])
