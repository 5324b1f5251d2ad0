"""Tests for clock implementations."""

import time

import pytest

from fleetcache.shared.utils.clock import ManualClock, SystemClock


def test_system_clock_tracks_wall_time() -> None:
    before = int(time.time() * 1000)
    now = SystemClock().now_ms()
    assert before <= now <= int(time.time() * 1000)


def test_manual_clock_moves_only_when_told() -> None:
    clock = ManualClock(start_ms=100)
    assert clock.now_ms() == 100
    assert clock.advance(50) == 150
    clock.set(10)
    assert clock.now_ms() == 10


def test_manual_clock_rejects_negative_advance() -> None:
    with pytest.raises(ValueError, match="backwards"):
        ManualClock().advance(-1)
