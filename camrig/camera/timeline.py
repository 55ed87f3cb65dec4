# camrig/camera/timeline.py
"""
CameraTimeline - elapsed time to camera pose.

Every query is derived from scratch: resolve the phase from global elapsed
time, sample the animation source where the phase needs it, blend. The only
state carried between queries lives in the caller-owned ``TimelineState``:
the pose last applied to the camera and the DRIFT baseline snapshot.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple
import logging
import math

from ..core.errors import (
    TimelineError, SourceNotReady, MissingSample, MalformedSample,
)
from ..core.math3d import (
    Quat, Euler, look_at_euler, ease_in_out_cubic, ease_out_quint, lerp,
)
from ..time.phases import CameraPhase, PhaseResolver
from .config import TimelineConfig, EndAdjustment
from .pose import CameraPose, IngestedSample, OrientationKind, ingest_sample
from .source import AnimationSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DriftBaseline:
    """Pose the DRIFT phase blends away from, frozen at phase entry."""
    pose: CameraPose
    captured_at: float
    reconstructed: bool = False


@dataclass
class TimelineState:
    """
    Cross-frame state owned by whoever drives the timeline.

    ``applied_pose`` must be updated by the caller after it applies a pose;
    the DRIFT phase snapshots it as its baseline.
    """
    applied_pose: Optional[CameraPose] = None
    drift_baseline: Optional[DriftBaseline] = None
    phase: Optional[CameraPhase] = None
    phase_time: float = 0.0
    last_error: Optional[TimelineError] = None

    def reset(self):
        self.applied_pose = None
        self.drift_baseline = None
        self.phase = None
        self.phase_time = 0.0
        self.last_error = None


def end_adjustment_progress(settings: EndAdjustment, phase_time: float,
                            clip_duration: float) -> Tuple[float, float, float]:
    """
    Return ``(adjust, position_progress, rotation_progress)`` for PLAYBACK.

    Position and rotation each get their own eased sub-progress: position
    completes at ``position_span`` of the window, rotation runs from
    ``rotation_delay`` to the end of the window.
    """
    adjust = settings.adjust_factor(phase_time, clip_duration)

    position_progress = ease_in_out_cubic(min(1.0, adjust / settings.position_span))

    rotation_progress = 0.0
    if adjust > settings.rotation_delay:
        rotation_progress = ease_in_out_cubic(
            (adjust - settings.rotation_delay) / (1.0 - settings.rotation_delay)
        )

    return adjust, position_progress, rotation_progress


class CameraTimeline:
    """Four-phase camera state machine: WAIT, TRANSITION, PLAYBACK, DRIFT."""

    def __init__(self, config: TimelineConfig = None, source: AnimationSource = None):
        self.config = config or TimelineConfig()
        self.source = source
        self.resolver = PhaseResolver(
            self.config.wait_duration,
            self.config.transition_duration,
            drift_enabled=self.config.drift_enabled,
        )

    # -------------------------------------------------------------------------
    # Phase resolution
    # -------------------------------------------------------------------------

    def clip_duration(self) -> float:
        """Current clip length, or the configured fallback when unavailable."""
        fallback = self.config.fallback_clip_duration
        if self.source is None or not self.source.is_ready():
            return fallback
        duration = self.source.get_duration()
        if duration is None or not math.isfinite(duration) or duration < 0.0:
            return fallback
        return float(duration)

    def resolve(self, elapsed: float) -> Tuple[CameraPhase, float]:
        return self.resolver.resolve(elapsed, self.clip_duration())

    # -------------------------------------------------------------------------
    # Query
    # -------------------------------------------------------------------------

    def evaluate(self, elapsed: float, state: TimelineState) -> Optional[CameraPose]:
        """
        Pose for ``elapsed`` seconds, or ``None`` to hold the current pose.

        Never raises for source or sample problems; the failure is logged and
        kept on ``state.last_error``.
        """
        try:
            clip_duration = self.clip_duration()
        except Exception as e:
            logger.exception("Animation source failed to report its duration")
            return self._fail(state, TimelineError(f"duration query failed: {e}"))

        previous_phase = state.phase
        phase, phase_time = self.resolver.resolve(elapsed, clip_duration)
        state.phase = phase
        state.phase_time = phase_time

        if phase != CameraPhase.DRIFT:
            state.drift_baseline = None

        try:
            if phase == CameraPhase.WAIT:
                pose = self.wait_pose()
            elif phase == CameraPhase.TRANSITION:
                pose = self._transition_pose(phase_time)
            elif phase == CameraPhase.PLAYBACK:
                pose = self._playback_pose(phase_time, clip_duration, state)
            else:
                pose = self._drift_pose(phase_time, clip_duration, state, previous_phase)
        except (SourceNotReady, MissingSample) as e:
            logger.debug(f"[{phase.name}] holding pose: {e}")
            return self._fail(state, e)
        except TimelineError as e:
            logger.warning(f"[{phase.name}] skipping update: {e}")
            return self._fail(state, e)
        except Exception as e:
            logger.exception(f"[{phase.name}] unexpected error computing camera pose")
            return self._fail(state, TimelineError(str(e)))

        if not pose.is_finite():
            logger.warning(f"[{phase.name}] computed non-finite pose, skipping update")
            return self._fail(state, MalformedSample(f"non-finite pose at t={elapsed:.3f}"))

        state.last_error = None
        if self.config.trace:
            logger.debug(
                f"[{phase.name}] t={elapsed:.3f} pt={phase_time:.3f} "
                f"pos={pose.position.to_tuple()} rot={pose.rotation.to_tuple()} fov={pose.fov:.3f}"
            )
        return pose

    def _fail(self, state: TimelineState, error: TimelineError) -> None:
        state.last_error = error
        return None

    # -------------------------------------------------------------------------
    # Phase bodies
    # -------------------------------------------------------------------------

    def wait_pose(self) -> CameraPose:
        wait = self.config.wait
        return CameraPose(
            position=wait.position.copy(),
            rotation=look_at_euler(wait.position, wait.target),
            fov=wait.fov,
        )

    def _transition_pose(self, phase_time: float) -> CameraPose:
        self._require_source()

        start = self.wait_pose()
        end = self._sample(0.0)

        p = ease_in_out_cubic(phase_time / self.config.transition_duration)

        end_position = end.position if end.position is not None else start.position
        end_rotation = end.rotation if end.rotation is not None else start.rotation
        end_fov = end.fov if end.fov is not None else self.config.default_fov

        return CameraPose(
            position=start.position.lerp(end_position, p),
            rotation=start.rotation.lerp(end_rotation, p),
            fov=lerp(start.fov, end_fov, p),
        )

    def _playback_pose(self, phase_time: float, clip_duration: float,
                       state: TimelineState) -> CameraPose:
        self._require_source()
        sample = self._sample(phase_time)
        return self._adjusted_pose(sample, phase_time, clip_duration, state.applied_pose)

    def _adjusted_pose(self, sample: IngestedSample, phase_time: float, clip_duration: float,
                       previous: Optional[CameraPose]) -> CameraPose:
        settings = self.config.end_adjustment
        _, position_progress, rotation_progress = end_adjustment_progress(
            settings, phase_time, clip_duration
        )

        if sample.position is not None:
            position = sample.position + settings.position_offset * position_progress
        elif previous is not None:
            position = previous.position.copy()
        else:
            position = self.config.wait.position.copy()

        yaw = settings.yaw_offset * rotation_progress
        if sample.rotation is None:
            rotation = previous.rotation if previous is not None else self.wait_pose().rotation
        elif rotation_progress == 0.0:
            rotation = sample.rotation
        elif sample.kind == OrientationKind.QUATERNION:
            # Adjustment rotates in the sample's local frame
            adjusted = sample.quaternion * Quat.from_euler_xyz(Euler(0.0, yaw, 0.0))
            rotation = Euler.from_quat(adjusted)
        else:
            r = sample.rotation
            rotation = Euler(r.x, r.y + yaw, r.z)

        if sample.fov is not None:
            fov = sample.fov
        elif previous is not None:
            fov = previous.fov
        else:
            fov = self.config.default_fov

        return CameraPose(position=position, rotation=rotation, fov=fov)

    def _drift_pose(self, phase_time: float, clip_duration: float,
                    state: TimelineState, previous_phase: Optional[CameraPhase] = None) -> CameraPose:
        self._require_source()
        drift = self.config.drift

        baseline = state.drift_baseline
        if baseline is None:
            baseline = self._capture_baseline(phase_time, clip_duration, state, previous_phase)
            state.drift_baseline = baseline

        base = baseline.pose
        overall = ease_out_quint(min(1.0, phase_time / drift.adjust_duration))
        rotation_progress = max(0.0, (overall - drift.rotation_delay) / (1.0 - drift.rotation_delay))

        position = base.position.lerp(base.position + drift.position_offset, overall)
        target_rotation = look_at_euler(position, drift.framing_target) + drift.rotation_offset

        return CameraPose(
            position=position,
            rotation=base.rotation.lerp(target_rotation, rotation_progress),
            fov=lerp(base.fov, base.fov + drift.fov_offset, overall),
        )

    def _capture_baseline(self, phase_time: float, clip_duration: float, state: TimelineState,
                          previous_phase: Optional[CameraPhase]) -> DriftBaseline:
        """
        Snapshot the rendered pose on phase entry.

        The applied pose is used when DRIFT is entered near pt=0 or straight
        from PLAYBACK (a long frame can land past ``capture_epsilon``). Any other
        entry, such as a seek from an earlier phase, rebuilds the clip's final
        adjusted pose instead.
        """
        applied = state.applied_pose
        near_entry = phase_time <= self.config.drift.capture_epsilon
        if applied is not None and (near_entry or previous_phase == CameraPhase.PLAYBACK):
            logger.debug(f"Drift baseline captured at pt={phase_time:.3f}")
            return DriftBaseline(pose=applied, captured_at=phase_time)

        if not near_entry:
            logger.warning(
                f"Entered drift at pt={phase_time:.3f}s without a baseline, "
                f"reconstructing from the clip's final pose"
            )
        sample = self._sample(clip_duration)
        pose = self._adjusted_pose(sample, clip_duration, clip_duration, applied)
        return DriftBaseline(pose=pose, captured_at=phase_time, reconstructed=True)

    # -------------------------------------------------------------------------
    # Source access
    # -------------------------------------------------------------------------

    def _require_source(self):
        if self.source is None or not self.source.is_ready():
            raise SourceNotReady("animation source not ready")

    def _sample(self, local_time: float) -> IngestedSample:
        raw = self.source.get_camera_pose_at_time(local_time)
        if raw is None:
            raise MissingSample(local_time)
        return ingest_sample(raw)
