# camrig/camera/pose.py
"""
Camera pose value types.

Animation sources hand over orientations either as XYZ Euler angles or as
quaternions. ``ingest_sample`` decides the representation once, at the source
boundary, and everything downstream works on the canonical Euler form.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple
import math

import numpy as np

from ..core.errors import MalformedOrientation, MalformedSample
from ..core.math3d import Vec3, Quat, Euler
from ..time.phases import CameraPhase


class OrientationKind(Enum):
    EULER = auto()
    QUATERNION = auto()


@dataclass(frozen=True)
class CameraPose:
    """Camera extrinsics plus vertical field of view (degrees)."""
    position: Vec3
    rotation: Euler
    fov: float

    def quaternion(self) -> Quat:
        return Quat.from_euler_xyz(self.rotation)

    def is_finite(self) -> bool:
        return self.position.is_finite() and self.rotation.is_finite() and math.isfinite(self.fov)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'position': self.position.to_tuple(),
            'rotation': self.rotation.to_tuple(),
            'fov': self.fov,
        }


@dataclass(frozen=True)
class AnimationSample:
    """
    Raw camera sample produced by an animation source.

    Any channel may be missing. ``orientation`` keeps whatever representation
    the source produced; see ``ingest_sample``.
    """
    position: Optional[Vec3] = None
    orientation: Any = None
    fov: Optional[float] = None


@dataclass(frozen=True)
class IngestedSample:
    """An ``AnimationSample`` with its orientation normalized to Euler."""
    position: Optional[Vec3]
    rotation: Optional[Euler]
    kind: Optional[OrientationKind]
    quaternion: Optional[Quat]
    fov: Optional[float]


@dataclass(frozen=True)
class CameraUpdate:
    """Payload sent to listeners after a pose has been applied."""
    position: Tuple[float, float, float]
    rotation: Tuple[float, float, float]
    fov: float
    phase: CameraPhase
    phase_time: float

    @staticmethod
    def from_pose(pose: CameraPose, phase: CameraPhase, phase_time: float) -> CameraUpdate:
        return CameraUpdate(
            position=pose.position.to_tuple(),
            rotation=pose.rotation.to_tuple(),
            fov=pose.fov,
            phase=phase,
            phase_time=phase_time,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'position': list(self.position),
            'rotation': list(self.rotation),
            'fov': self.fov,
            'phase': int(self.phase),
            'phase_time': self.phase_time,
        }


def _components(value: Any) -> Tuple[float, ...]:
    if isinstance(value, (Euler, Vec3)):
        return (value.x, value.y, value.z)
    if isinstance(value, Quat):
        return (value.x, value.y, value.z, value.w)
    if isinstance(value, Mapping):
        keys = ('x', 'y', 'z', 'w') if 'w' in value else ('x', 'y', 'z')
        if not all(k in value for k in keys):
            raise MalformedOrientation(value, "missing orientation components")
        return tuple(value[k] for k in keys)
    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise MalformedOrientation(value, f"expected a flat array, got shape {value.shape}")
        return tuple(value.tolist())
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return tuple(value)
    raise MalformedOrientation(value)


def normalize_orientation(value: Any) -> Tuple[Euler, OrientationKind, Optional[Quat]]:
    """
    Convert a sample orientation to canonical XYZ Euler angles.

    Returns the Euler angles, the source representation, and the normalized
    quaternion when the source was a quaternion. Raises
    ``MalformedOrientation`` for anything that is neither 3 nor 4 finite numbers.
    """
    comps = _components(value)
    try:
        comps = tuple(float(c) for c in comps)
    except (TypeError, ValueError):
        raise MalformedOrientation(value, "non-numeric orientation component") from None

    if not all(math.isfinite(c) for c in comps):
        raise MalformedOrientation(value, "non-finite orientation component")

    if len(comps) == 3:
        return Euler(*comps), OrientationKind.EULER, None

    if len(comps) == 4:
        q = Quat(*comps)
        if q.length() < 1e-10:
            raise MalformedOrientation(value, "zero-length quaternion")
        q = q.normalized()
        return Euler.from_quat(q), OrientationKind.QUATERNION, q

    raise MalformedOrientation(value, f"expected 3 or 4 components, got {len(comps)}")


def _coerce_position(value: Any) -> Optional[Vec3]:
    if value is None:
        return None
    try:
        if isinstance(value, Vec3):
            pos = value.copy()
        elif isinstance(value, Mapping):
            pos = Vec3(float(value["x"]), float(value["y"]), float(value["z"]))
        else:
            pos = Vec3.from_tuple(value)
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise MalformedSample(f"unreadable sample position {value!r}: {e}") from e
    if not pos.is_finite():
        raise MalformedSample(f"non-finite sample position: {pos}")
    return pos


def ingest_sample(sample: AnimationSample) -> IngestedSample:
    """Normalize every channel of a raw sample. Missing channels stay ``None``."""
    rotation = kind = quat = None
    if sample.orientation is not None:
        rotation, kind, quat = normalize_orientation(sample.orientation)

    fov = None
    if sample.fov is not None:
        try:
            fov = float(sample.fov)
        except (TypeError, ValueError) as e:
            raise MalformedSample(f"unreadable sample fov {sample.fov!r}") from e
        if not math.isfinite(fov) or fov <= 0.0:
            fov = None

    return IngestedSample(
        position=_coerce_position(sample.position),
        rotation=rotation,
        kind=kind,
        quaternion=quat,
        fov=fov,
    )
