"""Tests for deferred trigger slots, the task pool and bot helpers."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from hearts_server.triggers import TriggerSlot, TaskPool
from hearts_server import bots
from hearts_shared.constants import MARKS


class TestTriggerSlot:
    def test_fires_once_after_delay(self, clock):
        fired = []
        slot = TriggerSlot("round")
        slot.arm(clock, 2000, fired.append, "x")
        assert slot.armed
        clock.advance(1.5)
        assert fired == []
        clock.advance(0.5)
        assert fired == ["x"]
        assert not slot.armed

    def test_rearm_replaces_previous(self, clock):
        fired = []
        slot = TriggerSlot("round")
        slot.arm(clock, 1000, fired.append, "first")
        slot.arm(clock, 1000, fired.append, "second")
        assert len(clock.pending()) == 1
        clock.advance(5)
        assert fired == ["second"]

    def test_cancel(self, clock):
        fired = []
        slot = TriggerSlot("confinement")
        slot.arm(clock, 1000, fired.append, 1)
        slot.cancel()
        clock.advance(5)
        assert fired == []
        slot.cancel()


class TestTaskPool:
    def test_keyed_schedule(self, clock):
        fired = []
        pool = TaskPool()
        pool.schedule(clock, "bot_1", 100, fired.append, "bot_1")
        pool.schedule(clock, "bot_2", 200, fired.append, "bot_2")
        assert len(pool) == 2
        clock.advance(0.15)
        assert fired == ["bot_1"]
        assert "bot_1" not in pool
        assert "bot_2" in pool

    def test_reschedule_same_key(self, clock):
        fired = []
        pool = TaskPool()
        pool.schedule(clock, "bot_1", 100, fired.append, "old")
        pool.schedule(clock, "bot_1", 300, fired.append, "new")
        clock.advance(1)
        assert fired == ["new"]

    def test_cancel_all(self, clock):
        fired = []
        pool = TaskPool()
        for key in ("a", "b", "c"):
            pool.schedule(clock, key, 10, fired.append, key)
        pool.cancel_all()
        clock.advance(1)
        assert fired == []
        assert len(pool) == 0


class TestBots:
    def test_bot_ids(self):
        assert bots.bot_ids(3) == ["bot_1", "bot_2", "bot_3"]
        assert bots.bot_ids(0) == []

    def test_guess_delay_within_window(self):
        for _ in range(100):
            delay = bots.guess_delay_ms(60000)
            assert 0 <= delay < 60000

    def test_guess_delay_zero_window(self):
        assert bots.guess_delay_ms(0) == 0

    def test_choose_guess(self):
        assert bots.choose_guess() in MARKS
