"""Tests for time-domain root finding."""

from __future__ import annotations

import pytest

from ephemeris_engine.errors import NonConvergenceError
from ephemeris_engine.search import SearchOptions, find_ascent, search
from ephemeris_engine.time_utils import Instant

T1 = Instant(0.0)
T2 = Instant(10.0)


def test_linear_root() -> None:
    """An ascending line is solved to within the tolerance."""

    tx = search(lambda t: t.ut - 5.25, T1, T2)

    assert tx is not None
    assert tx.ut == pytest.approx(5.25, abs=1.0 / 86400.0)


def test_curved_root_with_tight_tolerance() -> None:
    """A cubic is refined to a tenth of a second."""

    tx = search(lambda t: (t.ut - 3.0) ** 3 + 0.5 * (t.ut - 3.0), T1, T2, SearchOptions(dt_tolerance_seconds=0.1, iter_limit=40))

    assert tx is not None
    assert tx.ut == pytest.approx(3.0, abs=0.2 / 86400.0)


def test_no_crossing_returns_none() -> None:
    """A function that never reaches zero has no root."""

    assert search(lambda t: 1.0 + (t.ut - 5.0) ** 2, T1, T2) is None


def test_iteration_limit_raises() -> None:
    """Exceeding the iteration cap is an error, not a silent miss."""

    with pytest.raises(NonConvergenceError):
        search(lambda t: t.ut - 5.0, T1, T2, SearchOptions(iter_limit=0))


def test_initial_values_are_used() -> None:
    """Known endpoint values skip those evaluations."""

    calls: list[float] = []

    def func(t: Instant) -> float:
        calls.append(t.ut)
        return t.ut - 2.0

    tx = search(func, T1, T2, SearchOptions(init_f1=-2.0, init_f2=8.0))

    assert tx is not None
    assert 0.0 not in calls
    assert 10.0 not in calls


def test_find_ascent_brackets_first_crossing() -> None:
    """find_ascent returns a subinterval that brackets the first ascent."""

    def func(t: Instant) -> float:
        # Ascends through zero at 2 and descends through zero at 6.
        return -(t.ut - 2.0) * (t.ut - 6.0)

    info = find_ascent(0, func, 8.0, T1, T2, func(T1), func(T2))

    assert info is not None
    assert info.ax < 0.0 <= info.ay
    assert info.tx.ut <= 2.0 <= info.ty.ut


def test_find_ascent_descending_returns_none() -> None:
    """A function falling across the whole interval has no ascent."""

    assert find_ascent(0, lambda t: 5.0 - t.ut, 1.0, T1, T2, 5.0, -5.0) is None


def test_find_ascent_prunes_with_derivative_bound() -> None:
    """A function far from zero relative to its rate bound is pruned."""

    assert find_ascent(0, lambda t: 100.0, 1.0, T1, T2, 100.0, 100.0) is None
