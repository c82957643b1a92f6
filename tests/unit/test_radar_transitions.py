from __future__ import annotations

import pytest

from radarcard.core.radar_transitions import Transition, ease_cubic_out


def test_cubic_out_is_anchored() -> None:
    assert ease_cubic_out(0.0) == pytest.approx(0.0)
    assert ease_cubic_out(1.0) == pytest.approx(1.0)


def test_cubic_out_front_loads_motion() -> None:
    assert ease_cubic_out(0.5) == pytest.approx(0.875)


def test_transition_samples_between_endpoints() -> None:
    t = Transition(start_ts=10.0, duration_s=1.0, start={"x": 0.0}, end={"x": 100.0}, generation=1)
    assert t.sample(9.0) == {"x": 0.0}
    assert t.sample(10.5)["x"] == pytest.approx(87.5)
    assert t.sample(12.0) == {"x": 100.0}
    assert not t.done(10.99)
    assert t.done(11.0)
    assert t.end_ts == 11.0


def test_zero_duration_is_immediately_done() -> None:
    t = Transition(start_ts=0.0, duration_s=0.0, start={"x": 1.0}, end={"x": 2.0}, generation=3)
    assert t.done(0.0)
    assert t.sample(0.0) == {"x": 2.0}
