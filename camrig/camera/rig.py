# camrig/camera/rig.py
"""
AnimatedCamera - applies timeline poses to a camera once per frame.

The rig owns the ``TimelineState`` the timeline reads and writes, applies
each pose to its ``VirtualCamera`` in one step, then notifies listeners
through the signal bridge and an optional callback.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple
import logging

from ..core.frame import FrameState
from ..core.math3d import Vec3, Euler, Mat4, Quat, deg_to_rad
from ..core.signal import (
    SignalBridge, SignalEmitter,
    SIGNAL_DT, SIGNAL_PLAY, SIGNAL_PAUSE, SIGNAL_STOP, SIGNAL_SEEK,
    SIGNAL_CAMERA_UPDATED, SIGNAL_PHASE_CHANGED,
)
from ..time.phases import CameraPhase, PhaseSpan
from .pose import CameraPose, CameraUpdate
from .timeline import CameraTimeline, TimelineState

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[CameraUpdate], None]


@dataclass
class VirtualCamera:
    """
    Mutable perspective camera the rig drives.
    Mirrors what a rendering host registers as its active camera.
    """
    name: str = "animated"
    position: Vec3 = field(default_factory=lambda: Vec3(13.037, 2.624, 23.379))
    rotation: Euler = field(default_factory=lambda: Euler(0.318, 0.562, -0.051))
    fov: float = 25.361
    near: float = 0.1
    far: float = 10000.0

    def apply_pose(self, pose: CameraPose):
        self.position = pose.position.copy()
        self.rotation = Euler(pose.rotation.x, pose.rotation.y, pose.rotation.z)
        self.fov = pose.fov

    def pose(self) -> CameraPose:
        return CameraPose(self.position.copy(), Euler(*self.rotation.to_tuple()), self.fov)

    def forward(self) -> Vec3:
        return Quat.from_euler_xyz(self.rotation).rotate_vec(Vec3(0.0, 0.0, -1.0))

    def world_matrix(self) -> Mat4:
        return Mat4.translate_vec(self.position) @ Quat.from_euler_xyz(self.rotation).to_mat4()

    def view_matrix(self) -> Mat4:
        return self.world_matrix().inverse()

    def projection_matrix(self, aspect: float) -> Mat4:
        return Mat4.perspective(deg_to_rad(self.fov), aspect, self.near, self.far)


@dataclass(frozen=True)
class TimelineStatus:
    """Read-only phase and progress data for transport/progress panels."""
    elapsed: float
    total_duration: float
    phase: CameraPhase
    phase_time: float
    spans: Tuple[PhaseSpan, ...]

    @property
    def progress(self) -> float:
        if self.total_duration <= 0.0:
            return 0.0
        return min(1.0, self.elapsed / self.total_duration)

    @property
    def phase_progress(self) -> float:
        for span in self.spans:
            if span.phase == self.phase:
                return span.progress(self.elapsed)
        return 0.0

    def format(self) -> str:
        return (
            f"Time: {self.elapsed:.2f}s / {self.total_duration:.2f}s  "
            f"[{self.phase.name} {self.phase_time:.2f}s]"
        )


class AnimatedCamera(SignalEmitter):
    """Per-frame driver: timeline query, atomic apply, notify."""

    def __init__(self, timeline: CameraTimeline, camera: VirtualCamera = None,
                 bridge: SignalBridge = None, on_update: UpdateCallback = None):
        self.timeline = timeline
        self.camera = camera or VirtualCamera()
        self.state = TimelineState()
        self.on_update = on_update
        self.playing: bool = True
        self.elapsed: float = 0.0

        self._connections: list = []
        if bridge is not None:
            self.bind(bridge)

    def bind(self, bridge: SignalBridge):
        """Follow a ``PlaybackClock`` that emits on the same bridge."""
        self.unbind()
        self.bind_bridge(bridge)
        self._connections = [
            bridge.connect(SIGNAL_DT, self._on_dt),
            bridge.connect(SIGNAL_PLAY, self._on_transport),
            bridge.connect(SIGNAL_PAUSE, self._on_transport),
            bridge.connect(SIGNAL_SEEK, self._on_seek),
            bridge.connect(SIGNAL_STOP, self._on_stop),
        ]

    def unbind(self):
        for conn in self._connections:
            conn.disconnect()
        self._connections = []

    def update(self, elapsed: float) -> Optional[CameraUpdate]:
        """
        Query the timeline for ``elapsed`` and apply the pose.

        Returns the update sent to listeners, or ``None`` when the timeline
        held the previous pose (or the rig is paused).
        """
        if not self.playing:
            return None
        return self._refresh(elapsed)

    def _refresh(self, elapsed: float) -> Optional[CameraUpdate]:
        self.elapsed = elapsed
        previous_phase = self.state.phase

        pose = self.timeline.evaluate(elapsed, self.state)

        phase = self.state.phase
        if phase != previous_phase:
            logger.info(f"Camera phase {getattr(previous_phase, 'name', None)} -> {phase.name} at t={elapsed:.3f}s")
            self.emit(SIGNAL_PHASE_CHANGED, phase, previous_phase)

        if pose is None:
            return None

        self.camera.apply_pose(pose)
        self.state.applied_pose = pose

        update = CameraUpdate.from_pose(pose, phase, self.state.phase_time)
        self.emit(SIGNAL_CAMERA_UPDATED, update)
        if self.on_update is not None:
            try:
                self.on_update(update)
            except Exception as e:
                logger.error(f"Camera update callback error: {e}")
        return update

    def on_frame(self, frame: FrameState) -> Optional[CameraUpdate]:
        return self.update(frame.t)

    def reset(self):
        self.state.reset()
        self.elapsed = 0.0

    def status(self, elapsed: float = None) -> TimelineStatus:
        if elapsed is None:
            elapsed = self.elapsed
        clip_duration = self.timeline.clip_duration()
        resolver = self.timeline.resolver
        phase, phase_time = resolver.resolve(elapsed, clip_duration)
        return TimelineStatus(
            elapsed=elapsed,
            total_duration=resolver.total_duration(clip_duration),
            phase=phase,
            phase_time=phase_time,
            spans=resolver.spans(clip_duration),
        )

    def _on_dt(self, dt: float, elapsed: float):
        self.update(elapsed)

    def _on_transport(self, clock_state):
        self.playing = clock_state.playing

    def _on_seek(self, clock_state):
        # Scrubbing moves the camera even while paused
        self._refresh(clock_state.elapsed)

    def _on_stop(self, clock_state):
        self.playing = clock_state.playing
        self.reset()
