"""
Tests for the growth economy.

Covers:
- growth score formula and monotonicity in each input
- sanitising NaN/inf/negative counters and deltas to the last good value
- derived control values staying inside their clamps
- external actions (sell never goes negative)
- money formatting
"""

import math
import random

import pytest

from worm_colony.config import MAX_WORMS, MIN_WORMS
from worm_colony.economy import Economy, fmt_money, growth_score


def test_growth_score_formula():
    assert growth_score(10, 6000, 20000) == pytest.approx(3.0)
    assert growth_score(0, 0, 0) == 0.0


@pytest.mark.parametrize("which", [0, 1, 2])
def test_growth_score_monotonic_in_each_input(which):
    base = [5.0, 1200.0, 30000.0]
    prev = -math.inf
    for v in [0, 1, 10, 100, 1e3, 1e5, 1e7]:
        args = list(base)
        args[which] = v
        g = growth_score(*args)
        assert g >= prev
        prev = g


def test_sanitize_replaces_non_finite_with_last_good():
    e = Economy()
    e.add(buyers=2, volume=600.0, market_cap=2000.0)
    e.volume = float("inf")
    e.market_cap = float("nan")
    e.buyers = -4
    e.sanitize()
    assert e.buyers == 2
    assert e.volume == 600.0
    assert e.market_cap == 2000.0


def test_add_ignores_non_finite_deltas():
    e = Economy()
    e.add(buyers=3, volume=5000, market_cap=15000)
    e.add(buyers=float("nan"))
    e.add(buyers=float("inf"), volume=float("nan"), market_cap=float("-inf"))
    assert (e.buyers, e.volume, e.market_cap) == (3, 5000.0, 15000.0)
    e.add(buyers=1, volume=float("nan"), market_cap=1000)
    assert (e.buyers, e.volume, e.market_cap) == (4, 5000.0, 16000.0)


def test_non_finite_from_start_falls_back_to_zero():
    e = Economy(market_cap=float("nan"))
    assert e.growth_score() == 0.0
    assert e.market_cap == 0.0


def test_control_values_clamped():
    e = Economy()
    assert e.population_target() == MIN_WORMS
    assert e.spawn_interval() == pytest.approx(1.2)
    assert e.mutation_interval() == pytest.approx(2.2)
    assert e.split_starters() == 2
    e.add(market_cap=1e9)
    assert e.population_target() == MAX_WORMS
    assert e.spawn_interval() == pytest.approx(0.15)
    assert e.mutation_interval() == pytest.approx(0.4)
    assert e.split_starters() == 6


def test_intervals_shrink_with_activity():
    e = Economy()
    before = (e.spawn_interval(), e.mutation_interval())
    e.add(buyers=3, volume=5000, market_cap=15000)
    after = (e.spawn_interval(), e.mutation_interval())
    assert after[0] < before[0]
    assert after[1] < before[1]


def test_sell_floors_at_zero():
    e = Economy()
    e.sell(random.Random(0))
    assert e.volume == 0.0
    assert e.market_cap == 0.0


def test_whale_buy_ranges():
    e = Economy()
    e.whale_buy(random.Random(5))
    assert 2 <= e.buyers <= 5
    assert 2500 <= e.volume <= 8500
    assert 9000 <= e.market_cap <= 22000


def test_fmt_money():
    assert fmt_money(1234567.4) == "$1,234,567"
    assert fmt_money(-5) == "$0"
    assert fmt_money(float("nan")) == "$0"
