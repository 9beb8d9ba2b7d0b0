from __future__ import annotations

import pytest

from iris_i18n.throttle import Throttle

pytestmark = [pytest.mark.qt]


def test_first_trigger_runs_immediately(qtbot):
    calls: list[int] = []
    throttle = Throttle(lambda: calls.append(1), 50)
    throttle.trigger()
    assert calls == [1]
    assert not throttle.pending


def test_burst_is_coalesced_into_one_trailing_call(qtbot):
    calls: list[int] = []
    throttle = Throttle(lambda: calls.append(1), 50)
    for _ in range(20):
        throttle.trigger()
    assert calls == [1]
    assert throttle.pending
    qtbot.waitUntil(lambda: len(calls) == 2, timeout=2000)
    qtbot.wait(150)
    assert calls == [1, 1]


def test_cancel_drops_trailing_call(qtbot):
    calls: list[int] = []
    throttle = Throttle(lambda: calls.append(1), 50)
    throttle.trigger()
    throttle.trigger()
    throttle.cancel()
    qtbot.wait(150)
    assert calls == [1]
    throttle.trigger()
    assert calls == [1, 1]


def test_throttles_are_independent(qtbot):
    first: list[int] = []
    second: list[int] = []
    a = Throttle(lambda: first.append(1), 200)
    b = Throttle(lambda: second.append(1), 200)
    a.trigger()
    b.trigger()
    a.trigger()
    assert first == [1]
    assert second == [1]
    assert a.pending
    assert not b.pending
