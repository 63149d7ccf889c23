from __future__ import annotations

from dataclasses import dataclass, field
import math
import random

from .config import MAX_WORMS, MIN_WORMS
from .noise import clamp, finite_or


def fmt_money(n: float) -> str:
    if not math.isfinite(n):
        n = 0.0
    return f"${max(0, round(n)):,}"


@dataclass
class Economy:
    """External activity counters driving growth.

    The hosting UI mutates these directly or through the action methods;
    `sanitize()` runs before any derived value is read, so NaN/inf or negative
    values fall back to the last good reading instead of reaching the world.
    """
    buyers: int = 0
    volume: float = 0.0
    market_cap: float = 0.0
    _good: tuple = field(default=(0, 0.0, 0.0), init=False, repr=False, compare=False)

    def sanitize(self) -> None:
        gb, gv, gm = self._good
        b = _finite_nonneg(self.buyers, gb)
        v = _finite_nonneg(self.volume, gv)
        m = _finite_nonneg(self.market_cap, gm)
        self.buyers, self.volume, self.market_cap = int(b), v, m
        self._good = (self.buyers, self.volume, self.market_cap)

    def growth_score(self) -> float:
        self.sanitize()
        return growth_score(self.buyers, self.volume, self.market_cap)

    # ----- control values -----
    def population_target(self) -> int:
        return int(clamp(math.floor(MIN_WORMS + self.growth_score() * 2.2), MIN_WORMS, MAX_WORMS))

    def spawn_interval(self) -> float:
        return clamp(1.2 - self.growth_score() * 0.04, 0.15, 1.2)

    def mutation_interval(self) -> float:
        return clamp(2.2 - self.growth_score() * 0.08, 0.4, 2.2)

    def split_starters(self) -> int:
        return int(clamp(math.floor(2 + self.growth_score() / 2), 2, 6))

    # ----- external actions -----
    def add(self, buyers: int = 0, volume: float = 0.0, market_cap: float = 0.0) -> None:
        self.sanitize()
        # a non-finite delta is dropped, the counter keeps its value
        self.buyers = max(0, self.buyers + int(finite_or(buyers, 0.0)))
        self.volume = max(0.0, self.volume + finite_or(volume, 0.0))
        self.market_cap = max(0.0, self.market_cap + finite_or(market_cap, 0.0))
        self.sanitize()

    def feed(self, rng: random.Random) -> None:
        self.add(volume=rng.uniform(20, 90), market_cap=rng.uniform(120, 460))

    def small_buy(self, rng: random.Random) -> None:
        self.add(buyers=1, volume=rng.uniform(180, 900), market_cap=rng.uniform(900, 3200))

    def whale_buy(self, rng: random.Random) -> None:
        self.add(buyers=rng.randint(2, 5), volume=rng.uniform(2500, 8500), market_cap=rng.uniform(9000, 22000))

    def sell(self, rng: random.Random) -> None:
        self.add(volume=-rng.uniform(600, 2600), market_cap=-rng.uniform(2200, 9000))

    def storm(self, rng: random.Random) -> None:
        self.add(volume=rng.uniform(5000, 18000), market_cap=rng.uniform(2000, 8000))


def _finite_nonneg(x, fallback):
    try:
        v = float(x)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(v) or v < 0:
        return fallback
    return v


def growth_score(buyers: float, volume: float, market_cap: float) -> float:
    """Dimensionless activity scalar; non-decreasing in every input."""
    return market_cap / 20000.0 + volume / 6000.0 + buyers / 10.0
