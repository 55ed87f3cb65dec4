# camrig/time/phases.py
"""
Phase resolution - maps global elapsed time onto the camera timeline.

    WAIT        [0, Tw)
    TRANSITION  [Tw, Tw+Tt)
    PLAYBACK    [Tw+Tt, Tw+Tt+Dclip)
    DRIFT       [Tw+Tt+Dclip, inf)

The clip duration is passed in on every call; nothing is cached.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple
import math


class CameraPhase(IntEnum):
    WAIT = 0
    TRANSITION = 1
    PLAYBACK = 2
    DRIFT = 3


@dataclass(frozen=True)
class PhaseSpan:
    """Absolute time range of one phase. ``end`` is ``inf`` for open phases."""
    phase: CameraPhase
    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start

    def contains(self, elapsed: float) -> bool:
        return self.start <= elapsed < self.end

    def progress(self, elapsed: float) -> float:
        if elapsed <= self.start:
            return 0.0
        if math.isinf(self.end):
            return 0.0
        if self.duration <= 0.0:
            return 1.0
        return min(1.0, (elapsed - self.start) / self.duration)


class PhaseResolver:
    """Sequential threshold comparison against the cumulative phase boundaries."""

    def __init__(self, wait_duration: float, transition_duration: float,
                 drift_enabled: bool = True):
        self.wait_duration = wait_duration
        self.transition_duration = transition_duration
        self.drift_enabled = drift_enabled

    @property
    def playback_start(self) -> float:
        return self.wait_duration + self.transition_duration

    def playback_end(self, clip_duration: float) -> float:
        return self.playback_start + clip_duration

    def total_duration(self, clip_duration: float) -> float:
        return self.playback_end(clip_duration)

    def resolve(self, elapsed: float, clip_duration: float) -> Tuple[CameraPhase, float]:
        t = max(0.0, elapsed)

        if t < self.wait_duration:
            return CameraPhase.WAIT, t

        boundary = self.playback_start
        if t < boundary:
            return CameraPhase.TRANSITION, t - self.wait_duration

        if not self.drift_enabled or t < boundary + clip_duration:
            return CameraPhase.PLAYBACK, t - boundary

        return CameraPhase.DRIFT, t - (boundary + clip_duration)

    def spans(self, clip_duration: float) -> Tuple[PhaseSpan, ...]:
        wait_end = self.wait_duration
        playback_start = self.playback_start

        if not self.drift_enabled:
            return (
                PhaseSpan(CameraPhase.WAIT, 0.0, wait_end),
                PhaseSpan(CameraPhase.TRANSITION, wait_end, playback_start),
                PhaseSpan(CameraPhase.PLAYBACK, playback_start, math.inf),
            )

        playback_end = self.playback_end(clip_duration)
        return (
            PhaseSpan(CameraPhase.WAIT, 0.0, wait_end),
            PhaseSpan(CameraPhase.TRANSITION, wait_end, playback_start),
            PhaseSpan(CameraPhase.PLAYBACK, playback_start, playback_end),
            PhaseSpan(CameraPhase.DRIFT, playback_end, math.inf),
        )
