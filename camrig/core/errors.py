# camrig/core/errors.py
"""
Error kinds raised inside camrig.

Per-query errors (``TimelineError`` and subclasses) never escape
``CameraTimeline.evaluate``; they are logged and stored on the caller's
``TimelineState`` so the camera holds its last pose. ``ConfigError`` is raised
to the caller at construction time.
"""


class CamrigError(Exception):
    """Base class for all camrig errors."""


class ConfigError(CamrigError, ValueError):
    """Invalid timeline configuration."""


class TimelineError(CamrigError):
    """A single timeline query could not produce a pose."""


class SourceNotReady(TimelineError):
    """The animation source was queried before it was ready."""


class MissingSample(TimelineError):
    """The animation source is ready but has no sample for the requested time."""

    def __init__(self, local_time: float):
        super().__init__(f"No camera sample at clip time {local_time:.3f}s")
        self.local_time = local_time


class MalformedOrientation(TimelineError, ValueError):
    """Sample orientation is neither a valid Euler triple nor a valid quaternion."""

    def __init__(self, value: object, reason: str = "unrecognized orientation"):
        super().__init__(f"{reason}: {value!r}")
        self.value = value


class MalformedSample(TimelineError, ValueError):
    """Sample position or fov could not be interpreted."""
