# camrig/__init__.py
"""
camrig - Scripted camera timeline for pre-authored visualizations.

Core components:
- PhaseResolver: Elapsed time to (phase, phase-local time)
- CameraTimeline: WAIT -> TRANSITION -> PLAYBACK -> DRIFT pose computation
- AnimatedCamera: Per-frame driver that applies poses and notifies listeners
- PlaybackClock: Elapsed-time source for hosts
- SignalBridge: Event routing system
"""

from .core import (
    # Math
    Vec3, Quat, Euler,
    look_at_euler,
    ease_in_out_cubic, ease_out_quint,

    # Signals
    SignalBridge,
    SIGNAL_CAMERA_UPDATED,
    SIGNAL_PHASE_CHANGED,

    # Errors
    CamrigError,
    ConfigError,
    TimelineError,

    FrameState,
)

from .time import (
    CameraPhase,
    PhaseSpan,
    PhaseResolver,
    PlaybackClock,
    ClockState,
)

from .camera import (
    CameraPose,
    AnimationSample,
    CameraUpdate,
    TimelineConfig,
    WaitShot,
    EndAdjustment,
    DriftSettings,
    AnimationSource,
    Keyframe,
    KeyframeAnimationSource,
    CameraTimeline,
    TimelineState,
    DriftBaseline,
    AnimatedCamera,
    VirtualCamera,
    TimelineStatus,
)

__version__ = '0.1.0'

__all__ = [
    # Math
    'Vec3', 'Quat', 'Euler',
    'look_at_euler',
    'ease_in_out_cubic', 'ease_out_quint',

    # Signals
    'SignalBridge',
    'SIGNAL_CAMERA_UPDATED',
    'SIGNAL_PHASE_CHANGED',

    # Errors
    'CamrigError',
    'ConfigError',
    'TimelineError',

    'FrameState',

    # Time
    'CameraPhase',
    'PhaseSpan',
    'PhaseResolver',
    'PlaybackClock',
    'ClockState',

    # Camera
    'CameraPose',
    'AnimationSample',
    'CameraUpdate',
    'TimelineConfig',
    'WaitShot',
    'EndAdjustment',
    'DriftSettings',
    'AnimationSource',
    'Keyframe',
    'KeyframeAnimationSource',
    'CameraTimeline',
    'TimelineState',
    'DriftBaseline',
    'AnimatedCamera',
    'VirtualCamera',
    'TimelineStatus',
]
