"""Tests for the per-canvas layout scheduler."""

import pytest

from canvas_mindmap.scheduler import (
    LayoutScheduler, SessionRegistry, CanvasSession,
    EXECUTED, DROPPED_BUSY, DROPPED_THROTTLED
)


class FakeClock:
    """Clock returning a settable time in seconds."""

    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance_ms(self, ms):
        self.now += ms / 1000.0


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    return LayoutScheduler(interval_ms=200, clock=clock)


def test_first_request_runs(scheduler):
    session = CanvasSession('c1')
    calls = []
    assert scheduler.submit(session, lambda: calls.append(1)) == EXECUTED
    assert calls == [1]
    assert session.executed == 1
    assert session.in_progress is False


def test_requests_inside_interval_are_dropped(scheduler, clock):
    session = CanvasSession('c1')
    calls = []
    scheduler.submit(session, lambda: calls.append('a'))

    clock.advance_ms(150)
    assert scheduler.submit(session, lambda: calls.append('b')) == DROPPED_THROTTLED

    clock.advance_ms(50)
    assert scheduler.submit(session, lambda: calls.append('c')) == EXECUTED
    assert calls == ['a', 'c']
    assert session.dropped == 1


def test_reentrant_request_is_dropped(scheduler):
    session = CanvasSession('c1')
    outcomes = []

    def run():
        outcomes.append(scheduler.submit(session, lambda: outcomes.append('inner')))

    assert scheduler.submit(session, run) == EXECUTED
    assert outcomes == [DROPPED_BUSY]


def test_sessions_are_independent(scheduler):
    first, second = CanvasSession('c1'), CanvasSession('c2')
    assert scheduler.submit(first, lambda: None) == EXECUTED
    assert scheduler.submit(second, lambda: None) == EXECUTED
    assert scheduler.submit(first, lambda: None) == DROPPED_THROTTLED


def test_failed_run_releases_the_slot(scheduler, clock):
    session = CanvasSession('c1')

    def boom():
        raise RuntimeError("layout failed")

    with pytest.raises(RuntimeError):
        scheduler.submit(session, boom)
    assert session.in_progress is False

    clock.advance_ms(200)
    assert scheduler.submit(session, lambda: None) == EXECUTED


def test_zero_interval_never_throttles():
    scheduler = LayoutScheduler(interval_ms=0, clock=FakeClock())
    session = CanvasSession('c1')
    for _ in range(3):
        assert scheduler.submit(session, lambda: None) == EXECUTED
    assert session.executed == 3


def test_session_registry():
    registry = SessionRegistry()
    session = registry.get('c1')
    assert registry.get('c1') is session
    assert 'c1' in registry
    assert len(registry) == 1

    registry.close('c1')
    registry.close('never-opened')
    assert 'c1' not in registry
    assert registry.get('c1') is not session
