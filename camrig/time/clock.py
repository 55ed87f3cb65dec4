# camrig/time/clock.py
"""
PlaybackClock - global elapsed-time source for hosts driving the camera rig.

The camera timeline never starts or stops this clock; it only reads the
elapsed seconds the host hands it.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..core.signal import (
    SignalBridge,
    SIGNAL_DT, SIGNAL_PLAY, SIGNAL_PAUSE, SIGNAL_STOP, SIGNAL_SEEK,
)


@dataclass(frozen=True)
class ClockState:
    """Immutable snapshot of clock state."""
    playing: bool
    elapsed: float
    rate: float


StateCallback = Callable[[ClockState], None]


class PlaybackClock:
    """Mutable playback clock."""

    def __init__(self, rate: float = 1.0):
        self.playing: bool = False
        self.elapsed: float = 0.0
        self.rate: float = rate

        self.on_play_callbacks: List[StateCallback] = []
        self.on_pause_callbacks: List[StateCallback] = []
        self.on_stop_callbacks: List[StateCallback] = []
        self.on_seek_callbacks: List[StateCallback] = []

        self._bridge: Optional[SignalBridge] = None

    def bind(self, bridge: SignalBridge):
        self._bridge = bridge

    def play(self):
        if not self.playing:
            self.playing = True
            self._notify(self.on_play_callbacks, SIGNAL_PLAY)

    def pause(self):
        if self.playing:
            self.playing = False
            self._notify(self.on_pause_callbacks, SIGNAL_PAUSE)

    def stop(self):
        self.playing = False
        self.elapsed = 0.0
        self._notify(self.on_stop_callbacks, SIGNAL_STOP)

    def toggle(self):
        if self.playing:
            self.pause()
        else:
            self.play()

    def seek(self, seconds: float):
        self.elapsed = max(0.0, seconds)
        self._notify(self.on_seek_callbacks, SIGNAL_SEEK)

    def update(self, dt: float) -> ClockState:
        if self.playing:
            step = dt * self.rate
            self.elapsed += step
            if self._bridge:
                self._bridge.emit(SIGNAL_DT, step, self.elapsed)
        return self._snapshot()

    def on_play(self, callback: StateCallback):
        self.on_play_callbacks.append(callback)
        return callback

    def on_pause(self, callback: StateCallback):
        self.on_pause_callbacks.append(callback)
        return callback

    def on_stop(self, callback: StateCallback):
        self.on_stop_callbacks.append(callback)
        return callback

    def on_seek(self, callback: StateCallback):
        self.on_seek_callbacks.append(callback)
        return callback

    def format_time(self, seconds: float = None) -> str:
        if seconds is None:
            seconds = self.elapsed
        minutes = int(seconds // 60)
        secs = seconds % 60
        return f"{minutes:02d}:{secs:05.2f}"

    def _notify(self, callbacks: List[StateCallback], signal: str):
        state = self._snapshot()
        for callback in callbacks:
            callback(state)
        if self._bridge:
            self._bridge.emit(signal, state)

    def _snapshot(self) -> ClockState:
        return ClockState(
            playing=self.playing,
            elapsed=self.elapsed,
            rate=self.rate,
        )
