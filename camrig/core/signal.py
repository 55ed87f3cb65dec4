# camrig/core/signal.py
"""
SignalBridge - routes clock and camera events to whoever listens.

The playback clock emits transport signals, the camera rig follows them and
emits its own camera/phase signals for display panels and host glue. A
failing listener is logged and skipped; it never interrupts the frame.
"""

from __future__ import annotations
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional, Tuple
from dataclasses import dataclass
import logging

logger = logging.getLogger(__name__)

# =============================================================================
# Signal Types
# =============================================================================

SIGNAL_DT = 'dt'                            # (dt, elapsed)
SIGNAL_PLAY = 'play'                        # (ClockState,)
SIGNAL_PAUSE = 'pause'                      # (ClockState,)
SIGNAL_STOP = 'stop'                        # (ClockState,)
SIGNAL_SEEK = 'seek'                        # (ClockState,)
SIGNAL_CAMERA_UPDATED = 'camera_updated'    # (CameraUpdate,)
SIGNAL_PHASE_CHANGED = 'phase_changed'      # (new CameraPhase, old CameraPhase or None)

Handler = Callable[..., None]


# =============================================================================
# Connection Handle
# =============================================================================

@dataclass
class Connection:
    """Returned by ``connect``; call ``disconnect`` to stop receiving."""
    signal: str
    handler_id: int
    bridge: Optional[SignalBridge] = None

    @property
    def active(self) -> bool:
        return self.bridge is not None

    def disconnect(self):
        if self.bridge is not None:
            self.bridge._release(self.signal, self.handler_id)
            self.bridge = None


# =============================================================================
# Signal Bridge
# =============================================================================

class SignalBridge:
    """
    Synchronous signal hub.

    Handlers run in connection order. Disconnecting from inside a handler is
    allowed; the removal takes effect once the outermost emit returns.
    """

    def __init__(self):
        self._handlers: Dict[str, List[Tuple[int, Handler]]] = {}
        self._ids: int = 0
        self._blocked: set = set()
        self._depth: int = 0
        self._deferred: List[Tuple[str, int]] = []

    def connect(self, signal: str, handler: Handler) -> Connection:
        self._ids += 1
        self._handlers.setdefault(signal, []).append((self._ids, handler))
        return Connection(signal=signal, handler_id=self._ids, bridge=self)

    def emit(self, signal: str, *args, **kwargs) -> int:
        """Deliver to every handler of ``signal``; returns how many succeeded."""
        if signal in self._blocked:
            return 0

        entries = list(self._handlers.get(signal, ()))
        delivered = 0

        self._depth += 1
        try:
            for _, handler in entries:
                try:
                    handler(*args, **kwargs)
                    delivered += 1
                except Exception as e:
                    logger.error(f"Signal handler error [{signal}]: {e}")
        finally:
            self._depth -= 1
            if self._depth == 0 and self._deferred:
                deferred, self._deferred = self._deferred, []
                for sig, handler_id in deferred:
                    self._drop(sig, handler_id)

        return delivered

    def block(self, signal: str):
        self._blocked.add(signal)

    def unblock(self, signal: str):
        self._blocked.discard(signal)

    @contextmanager
    def blocked(self, signal: str) -> Iterator[None]:
        """Suppress ``signal`` for the duration of a ``with`` block."""
        already = signal in self._blocked
        self.block(signal)
        try:
            yield
        finally:
            if not already:
                self.unblock(signal)

    def is_connected(self, signal: str) -> bool:
        return bool(self._handlers.get(signal))

    def handler_count(self, signal: str) -> int:
        return len(self._handlers.get(signal, ()))

    def _release(self, signal: str, handler_id: int):
        if self._depth > 0:
            self._deferred.append((signal, handler_id))
        else:
            self._drop(signal, handler_id)

    def _drop(self, signal: str, handler_id: int):
        entries = self._handlers.get(signal)
        if entries:
            self._handlers[signal] = [e for e in entries if e[0] != handler_id]


# =============================================================================
# Convenience
# =============================================================================

class SignalEmitter:
    """Mixin for objects that emit on an optional bridge."""

    _bridge: Optional[SignalBridge] = None

    def bind_bridge(self, bridge: SignalBridge):
        self._bridge = bridge

    def emit(self, signal: str, *args, **kwargs) -> int:
        if self._bridge is None:
            return 0
        return self._bridge.emit(signal, *args, **kwargs)
