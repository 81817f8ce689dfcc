"""Shared fixtures: a manual clock and a notifier that records everything."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from hearts_server.session import Session


class FakeHandle:
    def __init__(self, when: float, callback, args: tuple):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeClock:
    """Stands in for the event loop: time only moves when advance() is called."""

    def __init__(self):
        self.now = 0.0
        self.handles: list[FakeHandle] = []

    def time(self) -> float:
        return self.now

    def call_later(self, delay, callback, *args) -> FakeHandle:
        handle = FakeHandle(self.now + delay, callback, args)
        self.handles.append(handle)
        return handle

    def pending(self) -> list[FakeHandle]:
        return [h for h in self.handles if not h.cancelled]

    def advance(self, seconds: float):
        target = self.now + seconds
        while True:
            due = [h for h in self.pending() if h.when <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.when)
            self.handles.remove(handle)
            self.now = max(self.now, handle.when)
            handle.callback(*handle.args)
        self.now = target


class RecordingNotifier:
    def __init__(self):
        self.broadcasts: list[tuple] = []  # (msg_type, payload, exclude)
        self.unicasts: list[tuple] = []    # (player_id, msg_type, payload)

    def broadcast(self, msg_type, payload=None, exclude=None):
        self.broadcasts.append((msg_type, payload or {}, exclude))

    def unicast(self, player_id, msg_type, payload=None):
        self.unicasts.append((player_id, msg_type, payload or {}))

    def broadcast_payloads(self, msg_type) -> list[dict]:
        return [p for t, p, _ in self.broadcasts if t == msg_type]

    def sent_to(self, player_id, msg_type=None) -> list[tuple]:
        return [(t, p) for pid, t, p in self.unicasts
                if pid == player_id and (msg_type is None or t == msg_type)]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def make_session(notifier, clock):
    def _make(bot_count=3, **kwargs):
        return Session(notifier, clock=clock, bot_count=bot_count, **kwargs)
    return _make


@pytest.fixture
def session(make_session):
    return make_session()
