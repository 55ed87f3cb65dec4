"""Core module - math, signals, frame timing and error kinds."""

from .math3d import (
    Vec3,
    Mat3, Mat4,
    Quat, Euler,
    WORLD_UP,
    look_at_rotation, look_at_euler,
    ease_in_out_cubic, ease_out_quint,
    lerp, clamp,
    deg_to_rad,
)

from .errors import (
    CamrigError,
    ConfigError,
    TimelineError,
    SourceNotReady,
    MissingSample,
    MalformedOrientation,
    MalformedSample,
)

from .signal import (
    SignalBridge,
    Connection,
    SignalEmitter,
    SIGNAL_DT,
    SIGNAL_PLAY,
    SIGNAL_PAUSE,
    SIGNAL_STOP,
    SIGNAL_SEEK,
    SIGNAL_CAMERA_UPDATED,
    SIGNAL_PHASE_CHANGED,
)

from .frame import FrameState
