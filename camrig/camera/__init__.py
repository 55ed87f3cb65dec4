"""Camera module - pose types, configuration, animation sources, timeline and rig."""

from .pose import (
    CameraPose,
    AnimationSample,
    IngestedSample,
    OrientationKind,
    CameraUpdate,
    normalize_orientation,
    ingest_sample,
)

from .config import (
    TimelineConfig,
    WaitShot,
    EndAdjustment,
    DriftSettings,
)

from .source import (
    AnimationSource,
    Keyframe,
    KeyframeAnimationSource,
)

from .timeline import (
    CameraTimeline,
    TimelineState,
    DriftBaseline,
    end_adjustment_progress,
)

from .rig import (
    AnimatedCamera,
    VirtualCamera,
    TimelineStatus,
)

__all__ = [
    'CameraPose',
    'AnimationSample',
    'IngestedSample',
    'OrientationKind',
    'CameraUpdate',
    'normalize_orientation',
    'ingest_sample',
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
    'end_adjustment_progress',
    'AnimatedCamera',
    'VirtualCamera',
    'TimelineStatus',
]
