from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, TYPE_CHECKING
import random

import numpy as np

from .config import COLONY_NODES, DNA_SPECS
from .noise import TAU

if TYPE_CHECKING:
    from .worm import Worm

SHOCK_DECAY: float = 0.96
SHOCK_MIN_INTENSITY: float = 0.06
COLONY_DAMPING: float = 0.985
COLONY_KICK: float = 0.02
HOME_SPRING: float = 1e-5


class Temperament(Enum):
    CALM = "CALM"
    AGGRESSIVE = "AGGRESSIVE"
    CHAOTIC = "CHAOTIC"
    TOXIC = "TOXIC"


class Biome(Enum):
    NEON_GARDEN = "NEON GARDEN"
    DEEP_SEA = "DEEP SEA"
    VOID_BLOOM = "VOID BLOOM"
    GLASS_CAVE = "GLASS CAVE"
    ARC_STORM = "ARC STORM"


class Style(Enum):
    COMET = "COMET"
    CROWN = "CROWN"
    ARC = "ARC"
    SPIRAL = "SPIRAL"
    DRIFT = "DRIFT"


@dataclass(frozen=True)
class Dna:
    hue: float
    chaos: float
    drift: float
    aura_scale: float
    limbiness: float
    temperament: Temperament
    biome: Biome
    style: Style

    def summary(self) -> str:
        return (f"CHAOS {self.chaos:.2f} · DRIFT {self.drift:.2f} · "
                f"AURA {self.aura_scale:.2f} · LIMBS {self.limbiness:.2f}")


@dataclass(frozen=True)
class ShapeNode:
    ox: float
    oy: float
    r: float
    phase: float
    speed: float


@dataclass
class Shockwave:
    radius: float
    velocity: float
    intensity: float
    width: float

    def step(self, frames: float) -> None:
        self.radius += self.velocity * frames
        self.intensity *= SHOCK_DECAY ** frames

    @property
    def alive(self) -> bool:
        return self.intensity > SHOCK_MIN_INTENSITY


@dataclass
class Colony:
    id: str
    pos: np.ndarray    # shape (2,)
    vel: np.ndarray    # shape (2,), world units per frame
    home: np.ndarray   # shape (2,)
    dna: Dna
    nodes: List[ShapeNode]
    worms: List["Worm"] = field(default_factory=list)
    shocks: List[Shockwave] = field(default_factory=list)

    @property
    def x(self) -> float:
        return float(self.pos[0])

    @property
    def y(self) -> float:
        return float(self.pos[1])

    def shockwave(self, strength: float = 1.0) -> Shockwave:
        s = Shockwave(radius=0.0, velocity=2.6 + strength * 1.2, intensity=0.85, width=2.0 + strength)
        self.shocks.append(s)
        return s

    def drift(self, frames: float, rng: random.Random) -> None:
        """Random-walk the colony center, loosely tied to its home anchor."""
        d = self.dna.drift
        kick = np.array([rng.uniform(-COLONY_KICK, COLONY_KICK), rng.uniform(-COLONY_KICK, COLONY_KICK)])
        self.vel += kick * d * frames
        self.vel += (self.home - self.pos) * HOME_SPRING * frames
        self.vel *= COLONY_DAMPING ** frames
        self.pos += self.vel * frames

    def update_shocks(self, frames: float) -> None:
        for s in self.shocks:
            s.step(frames)
        self.shocks = [s for s in self.shocks if s.alive]


def random_dna(hue: float, rng: random.Random) -> Dna:
    vals = {name: rng.uniform(mn, mx) for name, mn, mx in DNA_SPECS}
    return Dna(
        hue=hue % 360.0,
        temperament=rng.choice(list(Temperament)),
        biome=rng.choice(list(Biome)),
        style=rng.choice(list(Style)),
        **vals,
    )


def new_colony(x: float, y: float, rng: random.Random, hue: float | None = None) -> Colony:
    if hue is None:
        hue = rng.uniform(0.0, 360.0)
    nodes = [
        ShapeNode(
            ox=rng.uniform(-70.0, 70.0),
            oy=rng.uniform(-70.0, 70.0),
            r=rng.uniform(60.0, 135.0),
            phase=rng.uniform(0.0, TAU),
            speed=rng.uniform(0.4, 1.2),
        )
        for _ in range(rng.randint(*COLONY_NODES))
    ]
    pos = np.array([x, y], dtype=float)
    return Colony(
        id=f"{rng.getrandbits(16):04X}",
        pos=pos,
        vel=np.array([rng.uniform(-0.18, 0.18), rng.uniform(-0.18, 0.18)], dtype=float),
        home=pos.copy(),
        dna=random_dna(hue, rng),
        nodes=nodes,
    )
