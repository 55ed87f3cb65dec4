"""Time module - phase resolution and playback clock."""

from .phases import (
    CameraPhase,
    PhaseSpan,
    PhaseResolver,
)

from .clock import (
    PlaybackClock,
    ClockState,
)

__all__ = [
    'CameraPhase',
    'PhaseSpan',
    'PhaseResolver',
    'PlaybackClock',
    'ClockState',
]
