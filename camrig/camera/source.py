# camrig/camera/source.py
"""
Animation sources - supply camera samples for clip-local time.

The timeline only depends on the ``AnimationSource`` protocol. Asset
extraction lives outside this package; ``KeyframeAnimationSource`` is the
in-memory implementation hosts feed once their extractor has produced keys.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Union, runtime_checkable
import math

import numpy as np

from ..core.math3d import Vec3, Quat, Euler
from .pose import AnimationSample


@runtime_checkable
class AnimationSource(Protocol):
    def is_ready(self) -> bool: ...

    def get_duration(self) -> float: ...

    def get_camera_pose_at_time(self, local_seconds: float) -> Optional[AnimationSample]: ...


@dataclass(frozen=True)
class Keyframe:
    time: float
    position: Vec3
    rotation: Union[Euler, Quat]
    fov: Optional[float] = None


class KeyframeAnimationSource:
    """
    Sampled camera clip with linear interpolation between keys.

    Positions and fov blend linearly, quaternion keys slerp, Euler keys blend
    per axis. Times outside the clip clamp to the first/last key.
    """

    def __init__(self, keyframes: Sequence[Keyframe] = (), ready: bool = True):
        self._ready = ready
        self.set_keyframes(keyframes)

    def set_keyframes(self, keyframes: Sequence[Keyframe]):
        keys: List[Keyframe] = sorted(keyframes, key=lambda k: k.time)

        kinds = {isinstance(k.rotation, Quat) for k in keys}
        if len(kinds) > 1:
            raise ValueError("keyframes mix quaternion and Euler rotations")
        fov_flags = {k.fov is not None for k in keys}
        if len(fov_flags) > 1:
            raise ValueError("either every keyframe carries fov or none does")

        self._quaternion_keys = kinds == {True}
        self._times = np.array([k.time for k in keys], dtype=np.float64)
        self._positions = np.array([k.position.to_tuple() for k in keys], dtype=np.float64).reshape(-1, 3)
        if self._quaternion_keys:
            self._rotations = np.array([k.rotation.to_tuple() for k in keys], dtype=np.float64).reshape(-1, 4)
        else:
            self._rotations = np.array([k.rotation.to_tuple() for k in keys], dtype=np.float64).reshape(-1, 3)
        self._fovs = np.array([k.fov for k in keys], dtype=np.float64) if fov_flags == {True} else None

    def set_ready(self, ready: bool = True):
        self._ready = ready

    def __len__(self) -> int:
        return len(self._times)

    def is_ready(self) -> bool:
        return self._ready and len(self._times) > 0

    def get_duration(self) -> float:
        if len(self._times) == 0:
            return 0.0
        return float(self._times[-1])

    def get_camera_pose_at_time(self, local_seconds: float) -> Optional[AnimationSample]:
        if not self.is_ready() or not math.isfinite(local_seconds):
            return None

        n = len(self._times)
        idx = int(np.searchsorted(self._times, local_seconds, side='right'))
        if idx == 0:
            return self._sample(0, 0, 0.0)
        if idx >= n:
            return self._sample(n - 1, n - 1, 0.0)

        i0, i1 = idx - 1, idx
        span = self._times[i1] - self._times[i0]
        alpha = 0.0 if span <= 0.0 else float((local_seconds - self._times[i0]) / span)
        return self._sample(i0, i1, alpha)

    def _sample(self, i0: int, i1: int, alpha: float) -> AnimationSample:
        p = self._positions[i0] + (self._positions[i1] - self._positions[i0]) * alpha
        position = Vec3(float(p[0]), float(p[1]), float(p[2]))

        if self._quaternion_keys:
            q0 = Quat(*(float(c) for c in self._rotations[i0]))
            q1 = Quat(*(float(c) for c in self._rotations[i1]))
            orientation = q0.slerp(q1, alpha)
        else:
            r = self._rotations[i0] + (self._rotations[i1] - self._rotations[i0]) * alpha
            orientation = Euler(float(r[0]), float(r[1]), float(r[2]))

        fov = None
        if self._fovs is not None:
            fov = float(self._fovs[i0] + (self._fovs[i1] - self._fovs[i0]) * alpha)

        return AnimationSample(position=position, orientation=orientation, fov=fov)
