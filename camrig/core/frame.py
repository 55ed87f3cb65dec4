"""
Frame State

Per-frame timing handed from the host's render loop to the camera rig.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class FrameState:
    frame_id: int   # Host frame counter
    dt: float       # Seconds since the previous frame
    t: float        # Global elapsed playback time (seconds)

    def advance(self, dt: float) -> FrameState:
        return FrameState(frame_id=self.frame_id + 1, dt=dt, t=self.t + dt)
