# /tests/test_notifications.py

from __future__ import annotations

import pytest

from engine.notifications import NotificationTracker, pulse_width


def test_alpha_decays_linearly_and_expires():
    t = NotificationTracker(duration=2.0)
    t.notify(7, 10.0)
    assert t.tick(10.0) == {7: 1.0}
    assert t.tick(11.0)[7] == pytest.approx(0.5)
    assert t.active
    assert t.tick(12.0) == {}
    assert not t.active
    assert len(t) == 0


def test_expiry_survives_float_rounding():
    t = NotificationTracker(duration=0.3)
    t.notify(1, 0.1)
    assert t.tick(0.1 + 0.3) == {}


def test_renotify_restarts_pulse():
    t = NotificationTracker(duration=2.0)
    t.notify(1, 0.0)
    t.notify(1, 1.5)
    assert t.tick(2.5)[1] == pytest.approx(0.5)


def test_independent_entries():
    t = NotificationTracker(duration=2.0)
    t.notify(1, 0.0)
    t.notify(2, 1.0)
    alphas = t.tick(2.0)
    assert 1 not in alphas
    assert alphas[2] == pytest.approx(0.5)


def test_alpha_lookup_and_clear():
    t = NotificationTracker(duration=2.0)
    assert t.alpha(3, 0.0) == 0.0
    t.notify(3, 0.0)
    assert t.alpha(3, 0.5) == pytest.approx(0.75)
    assert t.elapsed(3, 0.5) == pytest.approx(0.5)
    t.clear()
    assert not t.active


def test_duration_must_be_positive():
    with pytest.raises(ValueError):
        NotificationTracker(duration=0)


def test_pulse_width_grows_with_time():
    assert pulse_width(0.0, base=4.0, growth=25.0) == 4.0
    assert pulse_width(1.0, base=4.0, growth=25.0) == 29.0
    assert pulse_width(-1.0, base=4.0, growth=25.0) == 4.0


def test_alpha_strictly_decreases_over_the_window():
    t = NotificationTracker(duration=2.0)
    t.notify(3, 50.0)
    samples = [t.alpha(3, 50.0 + k * 0.05) for k in range(40)]
    assert samples[0] == 1.0
    assert all(a > b for a, b in zip(samples, samples[1:]))
    assert t.alpha(3, 52.0) == 0.0
