from __future__ import annotations

import math

TAU = 2.0 * math.pi

# Wander is a sum of phase-shifted sinusoids (angular frequencies in rad/s);
# the weights add up to 1 so the signal stays within [-1, 1].
WANDER_TERMS = ((1.6, 0.6), (0.71, 0.3), (2.9, 0.1))
WANDER_JITTER_MIX = 0.15
WANDER_JITTER_RATE = 4.0


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def finite_or(x: float, fallback: float) -> float:
    """Return `x` as float, or `fallback` when it is NaN/inf or not a number."""
    try:
        v = float(x)
    except (TypeError, ValueError):
        return fallback
    return v if math.isfinite(v) else fallback


def wrap_angle(a: float) -> float:
    """Wrap to [-pi, pi)."""
    return (a + math.pi) % TAU - math.pi


def lerp_angle(a: float, b: float, t: float) -> float:
    # shortest arc from a to b
    return a + wrap_angle(b - a) * t


def hash2i(x: int, y: int) -> int:
    n = (x * 374761393 + y * 668265263) & 0xFFFFFFFF
    n = (n ^ (n >> 13)) & 0xFFFFFFFF
    n = (n * 1274126177) & 0xFFFFFFFF
    return (n ^ (n >> 16)) & 0xFFFFFFFF


def h01(u32: int) -> float:
    return (u32 & 0xFFFFFFF) / 0xFFFFFFF


def value_noise(seed: int, x: float) -> float:
    """Smooth 1D value noise in [-1, 1]; lattice values are symmetric around 0."""
    i = math.floor(x)
    f = x - i
    a = h01(hash2i(seed, i)) * 2.0 - 1.0
    b = h01(hash2i(seed, i + 1)) * 2.0 - 1.0
    s = f * f * (3.0 - 2.0 * f)
    return a + (b - a) * s


def wander(t: float, seed: int) -> float:
    """Zero-mean, bounded heading perturbation for time `t` (seconds).

    Deterministic for a given seed. Every term is either a sinusoid or
    symmetric lattice noise, so the long-run average of the signal is 0 and
    no heading direction is favoured.
    """
    w = 0.0
    for k, (omega, weight) in enumerate(WANDER_TERMS):
        phase = h01(hash2i(seed, k + 1)) * TAU
        w += weight * math.sin(omega * t + phase)
    jitter = value_noise(seed ^ 0x5F3759DF, t * WANDER_JITTER_RATE)
    return (1.0 - WANDER_JITTER_MIX) * w + WANDER_JITTER_MIX * jitter
