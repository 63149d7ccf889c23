from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence, Tuple, TYPE_CHECKING
import math
import random

import numpy as np

from .config import BOSS_SEGMENTS, MIN_DIST, TARGET_FPS, WORM_HUE_SPREAD, WORM_SEGMENTS
from .noise import TAU, lerp_angle, value_noise, wander, wrap_angle
from .params import Params

if TYPE_CHECKING:
    from .colony import Colony

MIN_WIDTH: float = 3.5
MAX_WIDTH: float = 16.0


class WormType(Enum):
    DRIFTER = "DRIFTER"
    ORBITER = "ORBITER"
    HUNTER = "HUNTER"


@dataclass
class Segment:
    pos: np.ndarray  # shape (2,)
    dir: float       # heading angle radians, pointing toward the predecessor
    length: float    # rest length to the predecessor


@dataclass
class Limb:
    at: int          # attachment segment index
    length: float
    angle: float     # base offset from the segment heading
    wobble: float


class Worm:
    def __init__(self, origin: Tuple[float, float], heading: float, lengths: Sequence[float],
                 kind: WormType, hue: float, width: float, speed: float, turn: float,
                 seed: int, rng: random.Random, chaos: float = 1.0, wid: str = "0000"):
        self.id = wid
        self.kind = kind
        self.hue = hue % 360.0
        self.width = width
        self.speed = speed
        self.turn = turn
        self.seed = seed
        self.phase = rng.uniform(0.0, TAU)
        self.spin_bias = rng.uniform(-1.0, 1.0) * turn
        self.orbit_dir = 1.0 if rng.random() < 0.5 else -1.0
        self.is_boss = False
        self.limbs: List[Limb] = []

        # Backward extrusion: each segment sits one rest length behind its
        # predecessor, and the heading bends a little before the next one.
        self.segs: List[Segment] = []
        pos = np.array(origin, dtype=float)
        ang = heading
        for i, seg_len in enumerate(lengths):
            if i > 0:
                pos = pos - np.array([math.cos(ang), math.sin(ang)]) * seg_len
            self.segs.append(Segment(pos=pos.copy(), dir=ang, length=float(seg_len)))
            ang += rng.uniform(-0.3, 0.3) * chaos

    @property
    def num_segments(self) -> int:
        return len(self.segs)

    def head_pos(self) -> Tuple[float, float]:
        p = self.segs[0].pos
        return float(p[0]), float(p[1])

    def head_dir(self) -> float:
        return self.segs[0].dir

    def positions(self) -> np.ndarray:
        return np.array([s.pos for s in self.segs], dtype=float)

    def desired_heading(self, toward: float, t_sec: float, params: Params) -> Tuple[float, float]:
        """Return (desired heading, blend per frame) for this worm's behaviour."""
        if self.kind is WormType.ORBITER:
            # orbit side only flips when a slow signal swings well past zero
            s = value_noise(self.seed + 7, t_sec * params.orbit_flip_rate)
            if s > params.orbit_flip_threshold:
                self.orbit_dir = 1.0
            elif s < -params.orbit_flip_threshold:
                self.orbit_dir = -1.0
            return toward + self.orbit_dir * params.orbit_offset, params.orbiter_blend
        if self.kind is WormType.HUNTER:
            weave = math.sin(t_sec * params.hunter_weave_freq + self.phase) * params.hunter_weave_amp
            return toward + weave, params.hunter_blend
        return toward, params.drifter_blend

    def update(self, colony: "Colony", t_sec: float, dt: float, params: Params) -> None:
        frames = dt * TARGET_FPS
        if frames <= 0.0:
            return
        head = self.segs[0]
        cx, cy = colony.x, colony.y
        hx, hy = self.head_pos()

        # Steering
        if params.seek_enabled:
            toward = math.atan2(cy - hy, cx - hx)
            desired, blend = self.desired_heading(toward, t_sec, params)
            k = 1.0 - (1.0 - blend) ** frames
            head.dir = lerp_angle(head.dir, desired, k)
        jitter = value_noise(self.seed ^ 0xA5A5, t_sec * 9.0) * 0.5 * self.turn * params.jitter_gain
        head.dir += (wander(t_sec, self.seed) * params.wander_gain
                     + self.spin_bias * params.spin_gain + jitter) * frames
        head.dir = wrap_angle(head.dir)

        # Advance
        boost = params.boss_mult if self.is_boss else 1.0
        step = self.speed * params.speed_mult * boost * frames
        head.pos += np.array([math.cos(head.dir), math.sin(head.dir)]) * step

        # Leash: continuous pull back toward the colony, never a jump
        if params.leash_enabled:
            rel = head.pos - colony.pos
            d = float(np.hypot(rel[0], rel[1]))
            if d > params.leash_radius:
                excess = min((d - params.leash_radius) / params.leash_soft, params.leash_max_pull)
                head.pos -= rel / max(d, MIN_DIST) * excess * params.leash_pull * frames
                inward = math.atan2(-rel[1], -rel[0])
                head.dir = lerp_angle(head.dir, inward, 1.0 - (1.0 - params.leash_turn) ** frames)

        self.relax(params.relax_weight)

    def relax(self, weight: float) -> None:
        """One chain-relaxation pass from the head backwards."""
        for i in range(1, len(self.segs)):
            prev = self.segs[i - 1]
            cur = self.segs[i]
            delta = cur.pos - prev.pos
            dist = float(np.hypot(delta[0], delta[1]))
            if dist < 1e-9:
                ang = cur.dir + math.pi
            else:
                ang = math.atan2(delta[1], delta[0])
            target = prev.pos + np.array([math.cos(ang), math.sin(ang)]) * cur.length
            cur.pos = cur.pos * (1.0 - weight) + target * weight
            fwd = prev.pos - cur.pos
            if fwd[0] != 0.0 or fwd[1] != 0.0:
                cur.dir = math.atan2(fwd[1], fwd[0])


def add_limb(worm: Worm, rng: random.Random, big: bool = False) -> Limb | None:
    n = worm.num_segments
    if n == 0:
        return None
    lo, hi = min(2, n - 1), max(min(2, n - 1), n - 3)
    limb = Limb(
        at=rng.randint(lo, hi),
        length=rng.uniform(35.0, 90.0) if big else rng.uniform(22.0, 70.0),
        angle=rng.uniform(-1.3, 1.3),
        wobble=rng.uniform(0.7, 1.6),
    )
    worm.limbs.append(limb)
    return limb


def new_worm(colony: "Colony", rng: random.Random, big: bool = False) -> Worm:
    dna = colony.dna
    seg_count = rng.randint(*BOSS_SEGMENTS) if big else rng.randint(*WORM_SEGMENTS)
    base_len = rng.uniform(10.0, 16.0) if big else rng.uniform(7.0, 12.0)
    lengths = [base_len * rng.uniform(0.85, 1.22) for _ in range(seg_count)]
    origin = (colony.x + rng.uniform(-55.0, 55.0), colony.y + rng.uniform(-55.0, 55.0))
    return Worm(
        origin=origin,
        heading=rng.uniform(0.0, TAU),
        lengths=lengths,
        kind=rng.choice(list(WormType)),
        hue=dna.hue + rng.uniform(-WORM_HUE_SPREAD, WORM_HUE_SPREAD),
        width=rng.uniform(7.0, 11.0) if big else rng.uniform(4.2, 7.0),
        speed=rng.uniform(0.38, 0.75) if big else rng.uniform(0.5, 1.05),
        turn=rng.uniform(0.008, 0.02) * dna.chaos,
        seed=rng.getrandbits(31),
        rng=rng,
        chaos=dna.chaos,
        wid=f"{rng.getrandbits(16):04x}",
    )
