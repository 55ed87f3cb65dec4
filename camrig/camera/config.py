# camrig/camera/config.py
"""
Timeline configuration.

All values are plain numeric constants fixed at construction. The offsets in
``EndAdjustment`` and ``DriftSettings`` are visual tuning values: they keep the
subject framed as the authored clip nears its end and after it finishes.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
import json
import math

from ..core.errors import ConfigError
from ..core.math3d import Vec3, Euler


def _check_positive(name: str, value: float):
    if not math.isfinite(value) or value <= 0.0:
        raise ConfigError(f"{name} must be a positive number, got {value!r}")


def _check_fraction(name: str, value: float, low_open: bool, high_open: bool):
    low_ok = value > 0.0 if low_open else value >= 0.0
    high_ok = value < 1.0 if high_open else value <= 1.0
    if not (math.isfinite(value) and low_ok and high_ok):
        raise ConfigError(f"{name} out of range: {value!r}")


def _check_fov(name: str, value: float):
    if not math.isfinite(value) or not 0.0 < value < 180.0:
        raise ConfigError(f"{name} must be in (0, 180) degrees, got {value!r}")


def _vec(data: Dict[str, Any], key: str, default: Vec3) -> Vec3:
    if key not in data:
        return default.copy()
    try:
        return Vec3.from_tuple(data[key])
    except (IndexError, TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be three numbers, got {data[key]!r}") from e


@dataclass(frozen=True)
class WaitShot:
    """Still camera held during the WAIT phase."""
    position: Vec3 = field(default_factory=lambda: Vec3(-18.43, 14.48, 16.30))
    target: Vec3 = field(default_factory=lambda: Vec3(-1.40, 15.30, -1.33))
    fov: float = 35.0

    def validate(self):
        if not (self.position.is_finite() and self.target.is_finite()):
            raise ConfigError("wait camera position/target must be finite")
        _check_fov("wait.fov", self.fov)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'position': self.position.to_tuple(),
            'target': self.target.to_tuple(),
            'fov': self.fov,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> WaitShot:
        base = WaitShot()
        return WaitShot(
            position=_vec(data, 'position', base.position),
            target=_vec(data, 'target', base.target),
            fov=float(data.get('fov', base.fov)),
        )


@dataclass(frozen=True)
class EndAdjustment:
    """
    Late-clip framing correction applied on top of PLAYBACK samples.

    The window covers the last ``window`` seconds of the clip. Position offset
    reaches full effect at ``position_span`` of the window; yaw offset starts at
    ``rotation_delay`` and reaches full effect at the window's end.
    """
    window: float = 1.5
    position_offset: Vec3 = field(default_factory=lambda: Vec3(1.5, -0.7, 0.0))
    yaw_offset: float = -0.15
    position_span: float = 0.7
    rotation_delay: float = 0.3

    def validate(self):
        _check_positive("end_adjustment.window", self.window)
        _check_fraction("end_adjustment.position_span", self.position_span, True, False)
        _check_fraction("end_adjustment.rotation_delay", self.rotation_delay, False, True)
        if not self.position_offset.is_finite() or not math.isfinite(self.yaw_offset):
            raise ConfigError("end adjustment offsets must be finite")

    def adjust_factor(self, phase_time: float, clip_duration: float) -> float:
        start = clip_duration - self.window
        if phase_time < start:
            return 0.0
        return min(1.0, (phase_time - start) / self.window)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'window': self.window,
            'position_offset': self.position_offset.to_tuple(),
            'yaw_offset': self.yaw_offset,
            'position_span': self.position_span,
            'rotation_delay': self.rotation_delay,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> EndAdjustment:
        base = EndAdjustment()
        return EndAdjustment(
            window=float(data.get('window', base.window)),
            position_offset=_vec(data, 'position_offset', base.position_offset),
            yaw_offset=float(data.get('yaw_offset', base.yaw_offset)),
            position_span=float(data.get('position_span', base.position_span)),
            rotation_delay=float(data.get('rotation_delay', base.rotation_delay)),
        )


@dataclass(frozen=True)
class DriftSettings:
    """Open-ended settle after the clip ends, from a snapshot toward a final framing."""
    adjust_duration: float = 3.0
    position_offset: Vec3 = field(default_factory=lambda: Vec3(1.2, -0.4, 1.6))
    rotation_offset: Euler = field(default_factory=Euler)
    fov_offset: float = -3.0
    framing_target: Vec3 = field(default_factory=lambda: Vec3(-1.40, 15.30, -1.33))
    rotation_delay: float = 0.2
    capture_epsilon: float = 0.1

    def validate(self):
        _check_positive("drift.adjust_duration", self.adjust_duration)
        _check_fraction("drift.rotation_delay", self.rotation_delay, False, True)
        _check_positive("drift.capture_epsilon", self.capture_epsilon)
        if not (self.position_offset.is_finite() and self.rotation_offset.is_finite()
                and self.framing_target.is_finite() and math.isfinite(self.fov_offset)):
            raise ConfigError("drift offsets must be finite")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'adjust_duration': self.adjust_duration,
            'position_offset': self.position_offset.to_tuple(),
            'rotation_offset': self.rotation_offset.to_tuple(),
            'fov_offset': self.fov_offset,
            'framing_target': self.framing_target.to_tuple(),
            'rotation_delay': self.rotation_delay,
            'capture_epsilon': self.capture_epsilon,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> DriftSettings:
        base = DriftSettings()
        rotation = base.rotation_offset
        if 'rotation_offset' in data:
            rotation = Euler.from_tuple(_vec(data, 'rotation_offset', Vec3()).to_tuple())
        return DriftSettings(
            adjust_duration=float(data.get('adjust_duration', base.adjust_duration)),
            position_offset=_vec(data, 'position_offset', base.position_offset),
            rotation_offset=rotation,
            fov_offset=float(data.get('fov_offset', base.fov_offset)),
            framing_target=_vec(data, 'framing_target', base.framing_target),
            rotation_delay=float(data.get('rotation_delay', base.rotation_delay)),
            capture_epsilon=float(data.get('capture_epsilon', base.capture_epsilon)),
        )


@dataclass(frozen=True)
class TimelineConfig:
    wait_duration: float = 2.0
    transition_duration: float = 1.0
    wait: WaitShot = field(default_factory=WaitShot)
    default_fov: float = 25.361
    fallback_clip_duration: float = 0.0
    end_adjustment: EndAdjustment = field(default_factory=EndAdjustment)
    drift: Optional[DriftSettings] = field(default_factory=DriftSettings)
    trace: bool = False

    def __post_init__(self):
        if not math.isfinite(self.wait_duration) or self.wait_duration < 0.0:
            raise ConfigError(f"wait_duration must be >= 0, got {self.wait_duration!r}")
        _check_positive("transition_duration", self.transition_duration)
        _check_fov("default_fov", self.default_fov)
        if not math.isfinite(self.fallback_clip_duration) or self.fallback_clip_duration < 0.0:
            raise ConfigError(f"fallback_clip_duration must be >= 0, got {self.fallback_clip_duration!r}")
        self.wait.validate()
        self.end_adjustment.validate()
        if self.drift is not None:
            self.drift.validate()

    @property
    def drift_enabled(self) -> bool:
        return self.drift is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'wait_duration': self.wait_duration,
            'transition_duration': self.transition_duration,
            'wait': self.wait.to_dict(),
            'default_fov': self.default_fov,
            'fallback_clip_duration': self.fallback_clip_duration,
            'end_adjustment': self.end_adjustment.to_dict(),
            'drift': self.drift.to_dict() if self.drift is not None else None,
            'trace': self.trace,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> TimelineConfig:
        base = TimelineConfig()
        try:
            drift: Optional[DriftSettings] = base.drift
            if 'drift' in data:
                drift = DriftSettings.from_dict(data['drift']) if data['drift'] is not None else None
            return TimelineConfig(
                wait_duration=float(data.get('wait_duration', base.wait_duration)),
                transition_duration=float(data.get('transition_duration', base.transition_duration)),
                wait=WaitShot.from_dict(data.get('wait', {})),
                default_fov=float(data.get('default_fov', base.default_fov)),
                fallback_clip_duration=float(data.get('fallback_clip_duration', base.fallback_clip_duration)),
                end_adjustment=EndAdjustment.from_dict(data.get('end_adjustment', {})),
                drift=drift,
                trace=bool(data.get('trace', base.trace)),
            )
        except (TypeError, ValueError) as e:
            if isinstance(e, ConfigError):
                raise
            raise ConfigError(f"invalid timeline config: {e}") from e

    def save(self, path: str):
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @staticmethod
    def load(path: str) -> TimelineConfig:
        with open(path, 'r') as f:
            data = json.load(f)
        return TimelineConfig.from_dict(data)
