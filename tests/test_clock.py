import pytest

from camrig.core.signal import (
    SignalBridge, SIGNAL_DT, SIGNAL_PLAY, SIGNAL_PAUSE, SIGNAL_STOP, SIGNAL_SEEK,
)
from camrig.time.clock import PlaybackClock


def test_paused_clock_does_not_advance():
    clock = PlaybackClock()
    state = clock.update(0.5)
    assert not state.playing
    assert state.elapsed == 0.0

def test_playing_clock_advances():
    clock = PlaybackClock()
    clock.play()
    clock.update(0.25)
    state = clock.update(0.25)
    assert state.playing
    assert state.elapsed == pytest.approx(0.5)

def test_rate_scales_time():
    clock = PlaybackClock(rate=2.0)
    clock.play()
    assert clock.update(0.5).elapsed == pytest.approx(1.0)

def test_stop_rewinds():
    clock = PlaybackClock()
    clock.play()
    clock.update(3.0)
    clock.stop()
    assert not clock.playing
    assert clock.elapsed == 0.0

def test_toggle():
    clock = PlaybackClock()
    clock.toggle()
    assert clock.playing
    clock.toggle()
    assert not clock.playing

def test_seek_clamps_at_zero():
    clock = PlaybackClock()
    clock.seek(-4.0)
    assert clock.elapsed == 0.0
    clock.seek(4.5)
    assert clock.elapsed == 4.5

def test_callbacks_receive_snapshots():
    clock = PlaybackClock()
    seen = []
    clock.on_play(lambda s: seen.append(('play', s.elapsed)))
    clock.on_pause(lambda s: seen.append(('pause', s.elapsed)))
    clock.on_seek(lambda s: seen.append(('seek', s.elapsed)))
    clock.on_stop(lambda s: seen.append(('stop', s.elapsed)))

    clock.play()
    clock.update(1.0)
    clock.pause()
    clock.seek(2.0)
    clock.stop()

    assert seen == [('play', 0.0), ('pause', 1.0), ('seek', 2.0), ('stop', 0.0)]

def test_play_twice_notifies_once():
    clock = PlaybackClock()
    count = []
    clock.on_play(lambda s: count.append(s))
    clock.play()
    clock.play()
    assert len(count) == 1

def test_bridge_signals():
    bridge = SignalBridge()
    clock = PlaybackClock()
    clock.bind(bridge)

    events = []
    for sig in (SIGNAL_PLAY, SIGNAL_PAUSE, SIGNAL_STOP, SIGNAL_SEEK):
        bridge.connect(sig, lambda s, sig=sig: events.append(sig))
    ticks = []
    bridge.connect(SIGNAL_DT, lambda dt, elapsed: ticks.append((dt, elapsed)))

    clock.play()
    clock.update(0.5)
    clock.update(0.5)
    clock.pause()
    clock.update(0.5)
    clock.seek(1.0)
    clock.stop()

    assert events == [SIGNAL_PLAY, SIGNAL_PAUSE, SIGNAL_SEEK, SIGNAL_STOP]
    assert ticks == [(0.5, 0.5), (0.5, 1.0)]

def test_format_time():
    clock = PlaybackClock()
    assert clock.format_time(0.0) == "00:00.00"
    assert clock.format_time(75.5) == "01:15.50"
