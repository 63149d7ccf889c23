from __future__ import annotations

from dataclasses import dataclass

from .config import BASE_SPEED_MULT, BOSS_SPEED_MULT, LEASH_RADIUS


@dataclass
class Params:
    # Steering blend toward the desired heading, per 60 Hz frame
    drifter_blend: float = 0.08
    orbiter_blend: float = 0.12
    hunter_blend: float = 0.16
    orbit_offset: float = 1.35       # radians, ~77 deg either side of the seek vector
    orbit_flip_rate: float = 0.02    # Hz of the slow signal choosing the orbit side
    orbit_flip_threshold: float = 0.35
    hunter_weave_amp: float = 0.32
    hunter_weave_freq: float = 2.8   # rad/s
    wander_gain: float = 0.05        # radians per frame at full wander
    jitter_gain: float = 0.6         # scales worm.turn (already chaos-scaled)
    spin_gain: float = 0.15          # residual per-worm angular velocity
    speed_mult: float = BASE_SPEED_MULT
    boss_mult: float = BOSS_SPEED_MULT
    leash_radius: float = LEASH_RADIUS
    leash_soft: float = 120.0        # excess distance giving a full pull
    leash_pull: float = 8.0          # units per frame at full pull
    leash_max_pull: float = 1.5      # cap on pull multiple
    leash_turn: float = 0.22         # heading blend toward the colony when outside
    relax_weight: float = 0.78       # segment easing toward its chain target
    seek_enabled: bool = True
    leash_enabled: bool = True
