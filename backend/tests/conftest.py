"""Shared fakes for playback tests."""
import asyncio

import pytest

from highlight_reel.models.interval import HighlightInterval
from highlight_reel.playback.config import PlaybackConfig
from highlight_reel.playback.controller import PlaybackController
from highlight_reel.playback.player import PlayerState, ReadySignal


class _ManualHandle:
    def __init__(self, when, seq, callback, args):
        self.when = when
        self.seq = seq
        self.callback = callback
        self.args = args
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Scheduler driven by a virtual clock that only moves on advance()."""

    def __init__(self):
        self.now = 0.0
        self._seq = 0
        self._handles = []

    def call_later(self, delay, callback, *args):
        self._seq += 1
        handle = _ManualHandle(self.now + delay, self._seq, callback, args)
        self._handles.append(handle)
        return handle

    @property
    def live(self):
        return [h for h in self._handles if not h.cancelled and not h.fired]

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = [h for h in self.live if h.when <= target + 1e-9]
            if not due:
                break
            handle = min(due, key=lambda h: (h.when, h.seq))
            self.now = max(self.now, handle.when)
            handle.fired = True
            handle.callback(*handle.args)
        self.now = target

    def clock(self):
        return self.now


class FakePlayer:
    """Records commands; fails the methods named in fail_on."""

    def __init__(self, ready=True):
        self.commands = []
        self.state = PlayerState.UNSTARTED
        self.current_time = 0.0
        self.fail_on = set()
        self.ready = ReadySignal()
        if ready:
            self.ready.set_ready()

    def _record(self, name, *args):
        if name in self.fail_on:
            raise RuntimeError(f"{name} failed")
        self.commands.append((name,) + args)

    def seek_to(self, seconds, allow_seek_ahead):
        self._record("seek_to", seconds, allow_seek_ahead)
        self.current_time = seconds

    def play_video(self):
        self._record("play_video")
        self.state = PlayerState.PLAYING

    def pause_video(self):
        self._record("pause_video")
        self.state = PlayerState.PAUSED

    def get_player_state(self):
        if "get_player_state" in self.fail_on:
            raise RuntimeError("get_player_state failed")
        return self.state

    def get_current_time(self):
        if "get_current_time" in self.fail_on:
            raise RuntimeError("get_current_time failed")
        return self.current_time

    def destroy(self):
        self._record("destroy")

    def seeks(self):
        return [c[1] for c in self.commands if c[0] == "seek_to"]

    def names(self):
        return [c[0] for c in self.commands]


class IncompletePlayer:
    """A player object that exists but does not expose its commands yet."""

    def __init__(self):
        self.ready = ReadySignal()
        self.ready.set_ready()

    def get_current_time(self):
        return 0.0

    def destroy(self):
        pass


TEST_CONFIG = PlaybackConfig(
    initial_settle_seconds=0.5,
    seek_settle_seconds=0.2,
    ready_grace_seconds=0.0,
    start_initial_delay_seconds=0.0,
    start_retry_attempts=5,
    start_retry_backoff_seconds=0.0,
)


def make_interval(interval_id, start, end, name=None):
    return HighlightInterval(
        id=interval_id,
        name=name or f"Highlight {interval_id}",
        start_time=start,
        end_time=end,
        reason="test",
    )


def bind(controller, player):
    asyncio.run(controller.bind(player, player.ready))


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def player():
    return FakePlayer()


@pytest.fixture
def events():
    return []


@pytest.fixture
def controller(scheduler, events):
    ctrl = PlaybackController(config=TEST_CONFIG, scheduler=scheduler)
    ctrl.on_interval_change(events.append)
    return ctrl


@pytest.fixture
def bound(controller, player):
    """Controller bound to a ready FakePlayer."""
    bind(controller, player)
    return controller


@pytest.fixture
def two_intervals():
    return [make_interval("a", 0, 10), make_interval("b", 20, 35)]


@pytest.fixture
def three_intervals():
    return [make_interval("a", 0, 10), make_interval("b", 20, 30), make_interval("c", 40, 45)]
