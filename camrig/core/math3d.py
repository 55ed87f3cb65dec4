# camrig/core/math3d.py
"""
Core math types for camera poses.

Vectors, matrices and quaternions are plain CPU-side value types. Orientation
interpolation works on XYZ-order Euler angles (radians), the canonical form
every camera pose is normalized to.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

WORLD_UP: Tuple[float, float, float] = (0.0, 1.0, 0.0)

# =============================================================================
# Vector Types
# =============================================================================

@dataclass
class Vec3:
    """3D vector for world-space positions and offsets."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vec3:
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar: float) -> Vec3:
        return self.__mul__(scalar)

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalized(self) -> Vec3:
        ln = self.length()
        if ln < 1e-10:
            return Vec3(0.0, 0.0, 0.0)
        return Vec3(self.x / ln, self.y / ln, self.z / ln)

    def lerp(self, other: Vec3, t: float) -> Vec3:
        return Vec3(
            self.x + (other.x - self.x) * t,
            self.y + (other.y - self.y) * t,
            self.z + (other.z - self.z) * t
        )

    def is_finite(self) -> bool:
        return all(math.isfinite(c) for c in (self.x, self.y, self.z))

    def copy(self) -> Vec3:
        return Vec3(self.x, self.y, self.z)

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @staticmethod
    def from_tuple(t: Tuple[float, float, float]) -> Vec3:
        return Vec3(float(t[0]), float(t[1]), float(t[2]))


# =============================================================================
# Matrix Types
# =============================================================================

class Mat3:
    """3x3 rotation matrix, row-major."""

    __slots__ = ('m',)

    def __init__(self, values: Tuple[float, ...] = None):
        """Initialize with row-major values or identity."""
        if values is None:
            self.m = (
                1.0, 0.0, 0.0,
                0.0, 1.0, 0.0,
                0.0, 0.0, 1.0
            )
        else:
            assert len(values) == 9
            self.m = tuple(float(v) for v in values)

    def __getitem__(self, idx: Tuple[int, int]) -> float:
        row, col = idx
        return self.m[row * 3 + col]

    def to_array(self) -> np.ndarray:
        return np.array(self.m, dtype=np.float64).reshape(3, 3)

    @staticmethod
    def from_array(a: np.ndarray) -> Mat3:
        return Mat3(tuple(np.asarray(a, dtype=np.float64).reshape(9)))


class Mat4:
    """4x4 matrix for 3D transforms, row-major."""

    __slots__ = ('m',)

    def __init__(self, values: Tuple[float, ...] = None):
        """Initialize with row-major values or identity."""
        if values is None:
            self.m = (
                1.0, 0.0, 0.0, 0.0,
                0.0, 1.0, 0.0, 0.0,
                0.0, 0.0, 1.0, 0.0,
                0.0, 0.0, 0.0, 1.0
            )
        else:
            assert len(values) == 16
            self.m = tuple(values)

    def __getitem__(self, idx: Tuple[int, int]) -> float:
        row, col = idx
        return self.m[row * 4 + col]

    def __matmul__(self, other: Mat4) -> Mat4:
        if isinstance(other, Mat4):
            return Mat4(tuple((self.to_array() @ other.to_array()).reshape(16)))
        raise TypeError(f"Cannot multiply Mat4 by {type(other)}")

    def to_array(self) -> np.ndarray:
        return np.array(self.m, dtype=np.float64).reshape(4, 4)

    def to_mat3(self) -> Mat3:
        """Extract upper-left 3x3 (rotation/scale)."""
        return Mat3((
            self[0,0], self[0,1], self[0,2],
            self[1,0], self[1,1], self[1,2],
            self[2,0], self[2,1], self[2,2]
        ))

    def inverse(self) -> Mat4:
        a = self.to_array()
        if abs(np.linalg.det(a)) < 1e-10:
            return Mat4.identity()
        return Mat4(tuple(np.linalg.inv(a).reshape(16)))

    @staticmethod
    def identity() -> Mat4:
        return Mat4()

    @staticmethod
    def translate_vec(v: Vec3) -> Mat4:
        return Mat4((
            1.0, 0.0, 0.0, v.x,
            0.0, 1.0, 0.0, v.y,
            0.0, 0.0, 1.0, v.z,
            0.0, 0.0, 0.0, 1.0
        ))

    @staticmethod
    def perspective(fov_y: float, aspect: float, near: float, far: float) -> Mat4:
        f = 1.0 / math.tan(fov_y / 2.0)
        dz = near - far

        return Mat4((
            f/aspect, 0.0, 0.0,                    0.0,
            0.0,      f,   0.0,                    0.0,
            0.0,      0.0, (far+near)/dz,          2.0*far*near/dz,
            0.0,      0.0, -1.0,                   0.0
        ))


# =============================================================================
# Quaternion
# =============================================================================

@dataclass
class Quat:
    """Quaternion for rotations. ``w`` is the scalar term."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0

    def __mul__(self, other: Quat) -> Quat:
        return Quat(
            self.w*other.x + self.x*other.w + self.y*other.z - self.z*other.y,
            self.w*other.y - self.x*other.z + self.y*other.w + self.z*other.x,
            self.w*other.z + self.x*other.y - self.y*other.x + self.z*other.w,
            self.w*other.w - self.x*other.x - self.y*other.y - self.z*other.z
        )

    def conjugate(self) -> Quat:
        return Quat(-self.x, -self.y, -self.z, self.w)

    def length(self) -> float:
        return math.sqrt(self.x*self.x + self.y*self.y + self.z*self.z + self.w*self.w)

    def normalized(self) -> Quat:
        ln = self.length()
        if ln < 1e-10:
            return Quat(0.0, 0.0, 0.0, 1.0)
        return Quat(self.x/ln, self.y/ln, self.z/ln, self.w/ln)

    def is_finite(self) -> bool:
        return all(math.isfinite(c) for c in (self.x, self.y, self.z, self.w))

    def rotate_vec(self, v: Vec3) -> Vec3:
        qv = Quat(v.x, v.y, v.z, 0.0)
        result = self * qv * self.conjugate()
        return Vec3(result.x, result.y, result.z)

    def to_mat4(self) -> Mat4:
        x, y, z, w = self.x, self.y, self.z, self.w

        xx = x*x; yy = y*y; zz = z*z
        xy = x*y; xz = x*z; yz = y*z
        wx = w*x; wy = w*y; wz = w*z

        return Mat4((
            1-2*(yy+zz),  2*(xy-wz),    2*(xz+wy),    0.0,
            2*(xy+wz),    1-2*(xx+zz),  2*(yz-wx),    0.0,
            2*(xz-wy),    2*(yz+wx),    1-2*(xx+yy),  0.0,
            0.0,          0.0,          0.0,          1.0
        ))

    def slerp(self, other: Quat, t: float) -> Quat:
        dot = self.x*other.x + self.y*other.y + self.z*other.z + self.w*other.w

        if dot < 0.0:
            other = Quat(-other.x, -other.y, -other.z, -other.w)
            dot = -dot

        if dot > 0.9995:
            return Quat(
                self.x + t*(other.x - self.x),
                self.y + t*(other.y - self.y),
                self.z + t*(other.z - self.z),
                self.w + t*(other.w - self.w)
            ).normalized()

        theta = math.acos(dot)
        sin_theta = math.sin(theta)

        s0 = math.sin((1-t)*theta) / sin_theta
        s1 = math.sin(t*theta) / sin_theta

        return Quat(
            s0*self.x + s1*other.x,
            s0*self.y + s1*other.y,
            s0*self.z + s1*other.z,
            s0*self.w + s1*other.w
        )

    def to_tuple(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.z, self.w)

    @staticmethod
    def identity() -> Quat:
        return Quat(0.0, 0.0, 0.0, 1.0)

    @staticmethod
    def from_axis_angle(axis: Vec3, angle: float) -> Quat:
        axis = axis.normalized()
        half = angle / 2.0
        s = math.sin(half)
        return Quat(axis.x * s, axis.y * s, axis.z * s, math.cos(half))

    @staticmethod
    def from_euler_xyz(e: Euler) -> Quat:
        """Compose rotations about X, then Y, then Z (intrinsic XYZ)."""
        c1 = math.cos(e.x / 2); s1 = math.sin(e.x / 2)
        c2 = math.cos(e.y / 2); s2 = math.sin(e.y / 2)
        c3 = math.cos(e.z / 2); s3 = math.sin(e.z / 2)

        return Quat(
            s1*c2*c3 + c1*s2*s3,
            c1*s2*c3 - s1*c2*s3,
            c1*c2*s3 + s1*s2*c3,
            c1*c2*c3 - s1*s2*s3
        )


# =============================================================================
# Euler Angles
# =============================================================================

@dataclass
class Euler:
    """
    Euler angles in radians, XYZ order.

    Interpolation is per-axis linear, not spherical. Camera blends in the
    timeline depend on this exact scheme.
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Euler) -> Euler:
        return Euler(self.x + other.x, self.y + other.y, self.z + other.z)

    def lerp(self, other: Euler, t: float) -> Euler:
        return Euler(
            self.x + (other.x - self.x) * t,
            self.y + (other.y - self.y) * t,
            self.z + (other.z - self.z) * t
        )

    def is_finite(self) -> bool:
        return all(math.isfinite(c) for c in (self.x, self.y, self.z))

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    @staticmethod
    def from_tuple(t: Tuple[float, float, float]) -> Euler:
        return Euler(float(t[0]), float(t[1]), float(t[2]))

    @staticmethod
    def from_rotation_matrix(m: Mat3) -> Euler:
        m11, m12, m13 = m[0,0], m[0,1], m[0,2]
        m22, m23 = m[1,1], m[1,2]
        m32, m33 = m[2,1], m[2,2]

        y = math.asin(clamp(m13, -1.0, 1.0))
        if abs(m13) < 0.9999999:
            x = math.atan2(-m23, m33)
            z = math.atan2(-m12, m11)
        else:
            # Gimbal lock: roll folds into x
            x = math.atan2(m32, m22)
            z = 0.0
        return Euler(x, y, z)

    @staticmethod
    def from_quat(q: Quat) -> Euler:
        return Euler.from_rotation_matrix(q.normalized().to_mat4().to_mat3())


# =============================================================================
# Look-at
# =============================================================================

def look_at_rotation(eye: Vec3, target: Vec3, up: Vec3 = None) -> Mat3:
    """
    Rotation whose local -Z axis points from ``eye`` to ``target``.

    Columns are the camera's right, up and back axes in world space. No roll
    is introduced relative to ``up`` (world +Y by default).
    """
    up_v = np.array(WORLD_UP if up is None else up.to_tuple(), dtype=np.float64)

    z = eye.to_array() - target.to_array()
    if not np.any(z):
        z = np.array([0.0, 0.0, 1.0])
    z = z / np.linalg.norm(z)

    x = np.cross(up_v, z)
    if np.linalg.norm(x) < 1e-12:
        # Forward parallel to up
        if abs(up_v[2]) == 1.0:
            z[0] += 0.0001
        else:
            z[2] += 0.0001
        z = z / np.linalg.norm(z)
        x = np.cross(up_v, z)
    x = x / np.linalg.norm(x)
    y = np.cross(z, x)

    return Mat3.from_array(np.column_stack((x, y, z)))


def look_at_euler(eye: Vec3, target: Vec3, up: Vec3 = None) -> Euler:
    return Euler.from_rotation_matrix(look_at_rotation(eye, target, up))


# =============================================================================
# Easing Functions
# =============================================================================

def ease_in_out_cubic(t: float) -> float:
    if t < 0.5:
        return 4.0 * t * t * t
    return 1.0 - (-2.0*t + 2.0) ** 3 / 2.0

def ease_out_quint(t: float) -> float:
    return 1.0 - (1.0 - t) ** 5


# =============================================================================
# Utility Functions
# =============================================================================

def clamp(value: float, min_val: float, max_val: float) -> float:
    return max(min_val, min(value, max_val))

def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t

def deg_to_rad(degrees: float) -> float:
    return degrees * (math.pi / 180.0)
