from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple
import math
import random

import numpy as np

from .camera import Camera
from .colony import Biome, Colony, Dna, ShapeNode, Style, Temperament, new_colony
from .config import (
    BOSS_MCAP, MAX_COLONIES, MAX_FRAME_DT, MC_STEP, SPLIT_DISTANCE, SPLIT_HUE_SPREAD, TARGET_FPS,
)
from .economy import Economy, fmt_money
from .events import EventLog
from .noise import TAU, clamp, finite_or
from .params import Params
from .worm import MAX_WIDTH, MIN_WIDTH, Worm, WormType, add_limb, new_worm


# ----- Read-only views handed to renderers / UI -----
@dataclass(frozen=True)
class WormView:
    id: str
    kind: WormType
    hue: float
    width: float
    phase: float
    is_boss: bool
    points: np.ndarray    # (n, 2), read-only copy
    headings: np.ndarray  # (n,), read-only copy
    limbs: Tuple[Tuple[int, float, float, float], ...]  # (at, length, angle, wobble)


@dataclass(frozen=True)
class ColonyView:
    id: str
    x: float
    y: float
    dna: Dna
    nodes: Tuple[ShapeNode, ...]
    shocks: Tuple[Tuple[float, float, float], ...]  # (radius, intensity, width)
    worms: Tuple[WormView, ...]
    selected: bool


@dataclass(frozen=True)
class Stats:
    colonies: int
    worms: int
    buyers: str
    volume: str
    market_cap: str


@dataclass(frozen=True)
class SelectedInfo:
    id: str
    dna_summary: str
    biome: Biome
    style: Style
    temperament: Temperament
    worms: int


@dataclass(frozen=True)
class WorldSnapshot:
    time: float
    colonies: Tuple[ColonyView, ...]
    pan: Tuple[float, float]
    zoom: float
    viewport: Tuple[float, float]
    dpr: float
    stats: Stats


ACTIONS: Tuple[str, ...] = (
    "feed", "small_buy", "whale_buy", "sell", "storm",
    "mutate", "focus", "zoom_in", "zoom_out", "fit",
)


def _frozen(a: np.ndarray) -> np.ndarray:
    a = np.array(a, dtype=float)
    a.setflags(write=False)
    return a


class World:
    """Root aggregate of the simulation.

    `step()` is the only writer of colonies and worms. Host actions are
    queued with `request()` and applied at the start of the next step.
    Everything handed out to renderers goes through `snapshot()`, `stats()`
    and `selected_info()`.
    """

    def __init__(self, seed: int | None = None, rng: random.Random | None = None,
                 params: Params | None = None, camera: Camera | None = None,
                 economy: Economy | None = None, populate: bool = True):
        self.rng = rng if rng is not None else random.Random(seed)
        self.params = params if params is not None else Params()
        self.camera = camera if camera is not None else Camera()
        self.economy = economy if economy is not None else Economy()
        self.log = EventLog()
        self.colonies: List[Colony] = []
        self.selected = 0
        self.focus = False
        self.time = 0.0
        self.next_split_at = MC_STEP
        self.boss_spawned = False
        self.mut_timer = 0.0
        self.spawn_timer = 0.0
        self.pending: List[str] = []
        if populate:
            c = new_colony(0.0, 0.0, self.rng, hue=150.0)
            c.worms.append(new_worm(c, self.rng, big=False))
            c.worms.append(new_worm(c, self.rng, big=False))
            c.worms.append(new_worm(c, self.rng, big=True))
            self.colonies.append(c)
            self.fit_all()
            self.emit("Simulation ready", "INFO")

    # ----- queries -----
    def total_worms(self) -> int:
        return sum(len(c.worms) for c in self.colonies)

    def centers(self) -> List[Tuple[float, float]]:
        return [(c.x, c.y) for c in self.colonies]

    def selected_colony(self) -> Optional[Colony]:
        if not self.colonies:
            return None
        if not 0 <= self.selected < len(self.colonies):
            self.selected = 0
        return self.colonies[self.selected]

    def emit(self, message: str, kind: str = "EVENT") -> None:
        self.log.push(message, kind, now=self.time)

    # ----- camera helpers -----
    def fit_all(self) -> None:
        self.camera.fit_all(self.centers())

    def center_on_selected(self, smooth: bool = True) -> None:
        c = self.selected_colony()
        if c is not None:
            self.camera.center_on(c.x, c.y, smooth=smooth)

    def select_at(self, px: float, py: float) -> Optional[int]:
        idx = self.camera.pick(px, py, self.centers())
        if idx is not None:
            self.selected = idx
            if self.focus:
                self.center_on_selected(True)
        return idx

    # ----- growth events -----
    def ensure_boss(self) -> Optional[Worm]:
        if self.boss_spawned or self.economy.market_cap < BOSS_MCAP or not self.colonies:
            return None
        c = self.colonies[0]
        boss = new_worm(c, self.rng, big=True)
        boss.is_boss = True
        boss.width *= 1.6
        boss.speed *= 0.7
        boss.hue = 120.0
        for _ in range(4):
            add_limb(boss, self.rng, big=True)
        c.worms.append(boss)
        self.boss_spawned = True
        c.shockwave(1.4)
        self.emit("Boss worm emerged")
        return boss

    def try_split(self) -> List[Colony]:
        """Spawn one colony per crossed market-cap threshold, up to MAX_COLONIES."""
        created: List[Colony] = []
        while self.economy.market_cap >= self.next_split_at and len(self.colonies) < MAX_COLONIES:
            base = self.colonies[0]
            ang = self.rng.uniform(0.0, TAU)
            dist = self.rng.uniform(*SPLIT_DISTANCE)
            nc = new_colony(
                base.x + math.cos(ang) * dist,
                base.y + math.sin(ang) * dist,
                self.rng,
                hue=base.dna.hue + self.rng.uniform(-SPLIT_HUE_SPREAD, SPLIT_HUE_SPREAD),
            )
            for _ in range(self.economy.split_starters()):
                nc.worms.append(new_worm(nc, self.rng, big=self.rng.random() < 0.25))
            nc.shockwave(1.1)
            self.colonies.append(nc)
            created.append(nc)
            self.emit(f"New colony spawned at {fmt_money(self.next_split_at)} MC")
            self.next_split_at += MC_STEP
            if len(self.colonies) <= 3:
                self.fit_all()
        return created

    def mutate_random(self) -> Optional[str]:
        if not self.colonies:
            return None
        c = self.rng.choice(self.colonies)
        if not c.worms:
            return None
        w = self.rng.choice(c.worms)
        r = self.rng.random()
        if r < 0.30:
            w.hue = (w.hue + self.rng.uniform(30.0, 140.0)) % 360.0
            msg = f"Color shift · Worm {w.id}"
        elif r < 0.56:
            w.speed *= self.rng.uniform(1.05, 1.25)
            msg = f"Aggression spike · Worm {w.id}"
        elif r < 0.78:
            w.width = clamp(w.width * self.rng.uniform(1.05, 1.25), MIN_WIDTH, MAX_WIDTH)
            msg = f"Body growth · Worm {w.id}"
        else:
            add_limb(w, self.rng, big=self.rng.random() < 0.35)
            msg = f"Limb growth · Worm {w.id}"
        self.emit(msg, "MUTATION")
        if self.rng.random() < 0.22:
            c.shockwave(0.9)
        return msg

    def maybe_spawn_worms(self, dt: float) -> Optional[Worm]:
        if self.total_worms() >= self.economy.population_target():
            return None
        self.spawn_timer += dt
        if self.spawn_timer < self.economy.spawn_interval():
            return None
        self.spawn_timer = 0.0
        c = self.selected_colony()
        if c is None:
            return None
        w = new_worm(c, self.rng, big=self.rng.random() < 0.18)
        c.worms.append(w)
        if self.rng.random() < 0.35:
            c.shockwave(0.6)
        self.emit("New worm hatched")
        return w

    # ----- external actions -----
    def request(self, name: str) -> None:
        """Queue an action; it takes effect at the start of the next `step()`."""
        if name not in ACTIONS:
            raise ValueError(f"unknown action {name!r}")
        self.pending.append(name)

    def _apply_action(self, name: str) -> None:
        trades: Dict[str, Tuple[Callable[[random.Random], None], str]] = {
            "feed": (self.economy.feed, "Feed"),
            "small_buy": (self.economy.small_buy, "Small buy"),
            "whale_buy": (self.economy.whale_buy, "Whale buy"),
            "sell": (self.economy.sell, "Sell"),
            "storm": (self.economy.storm, "Volume storm"),
        }
        if name in trades:
            fn, label = trades[name]
            before = self.economy.market_cap
            fn(self.rng)
            delta = self.economy.market_cap - before
            sign = "+" if delta >= 0 else "-"
            self.emit(f"{label} {sign}{fmt_money(abs(delta))} MC", "TRADE")
            if name == "whale_buy" and self.colonies:
                self.colonies[0].shockwave(1.2)
            elif name == "storm" and self.colonies:
                self.colonies[0].shockwave(1.0)
        elif name == "mutate":
            self.mutate_random()
        elif name == "focus":
            self.focus = not self.focus
            if self.focus:
                self.center_on_selected(False)
        elif name == "zoom_in":
            self.camera.zoom_by(1.12)
        elif name == "zoom_out":
            self.camera.zoom_by(0.88)
        elif name == "fit":
            self.fit_all()

    # ----- update phase -----
    def step(self, dt: float) -> None:
        dt = clamp(finite_or(dt, 0.0), 0.0, MAX_FRAME_DT)
        self.time += dt
        frames = dt * TARGET_FPS

        self.economy.sanitize()
        pending, self.pending = self.pending, []
        for name in pending:
            self._apply_action(name)
        self.ensure_boss()
        self.try_split()

        self.mut_timer += dt
        if self.mut_timer >= self.economy.mutation_interval():
            self.mut_timer = 0.0
            if self.rng.random() < 0.65:
                self.mutate_random()
        self.maybe_spawn_worms(dt)

        for c in self.colonies:
            c.drift(frames, self.rng)
            c.update_shocks(frames)
        for c in self.colonies:
            for w in c.worms:
                w.update(c, self.time, dt, self.params)

        if self.focus:
            self.center_on_selected(True)

    # ----- read side -----
    def stats(self) -> Stats:
        e = self.economy
        return Stats(
            colonies=len(self.colonies),
            worms=self.total_worms(),
            buyers=str(e.buyers),
            volume=fmt_money(e.volume),
            market_cap=fmt_money(e.market_cap),
        )

    def selected_info(self) -> Optional[SelectedInfo]:
        c = self.selected_colony()
        if c is None:
            return None
        return SelectedInfo(
            id=c.id,
            dna_summary=c.dna.summary(),
            biome=c.dna.biome,
            style=c.dna.style,
            temperament=c.dna.temperament,
            worms=len(c.worms),
        )

    def snapshot(self) -> WorldSnapshot:
        colonies = []
        for i, c in enumerate(self.colonies):
            worms = tuple(
                WormView(
                    id=w.id, kind=w.kind, hue=w.hue, width=w.width, phase=w.phase, is_boss=w.is_boss,
                    points=_frozen(w.positions()),
                    headings=_frozen([s.dir for s in w.segs]),
                    limbs=tuple((l.at, l.length, l.angle, l.wobble) for l in w.limbs),
                )
                for w in c.worms
            )
            colonies.append(ColonyView(
                id=c.id, x=c.x, y=c.y, dna=c.dna, nodes=tuple(c.nodes),
                shocks=tuple((s.radius, s.intensity, s.width) for s in c.shocks),
                worms=worms, selected=(i == self.selected),
            ))
        cam = self.camera
        return WorldSnapshot(
            time=self.time,
            colonies=tuple(colonies),
            pan=(float(cam.pan[0]), float(cam.pan[1])),
            zoom=cam.zoom,
            viewport=(cam.width, cam.height),
            dpr=cam.dpr,
            stats=self.stats(),
        )
