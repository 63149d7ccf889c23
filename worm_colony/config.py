from __future__ import annotations

from typing import List, Tuple
import colorsys

# ----- Window / frame pacing -----
WIN_SIZE: Tuple[int, int] = (1280, 800)
TARGET_FPS: int = 60
RENDER_FPS: int = 40
MAX_FRAME_DT: float = 0.05       # seconds; larger gaps (stalls) are clamped

# ----- Economy thresholds -----
MAX_COLONIES: int = 8
MC_STEP: float = 50000.0         # market cap step between colony splits
BOSS_MCAP: float = 50000.0       # one-time boss unlock
MIN_WORMS: int = 3
MAX_WORMS: int = 80

# ----- Camera -----
DEFAULT_ZOOM: float = 0.78
MIN_ZOOM: float = 0.25
MAX_ZOOM: float = 2.8
PICK_RADIUS: float = 260.0       # world units
FIT_PAD: float = 520.0           # padding around each colony when fitting
FIT_MIN_BOX: float = 240.0
FIT_MARGIN: float = 0.90
CENTER_LERP: float = 0.18
WHEEL_ZOOM_IN: float = 1.08
WHEEL_ZOOM_OUT: float = 0.92

# ----- Locomotion -----
LEASH_RADIUS: float = 300.0
BASE_SPEED_MULT: float = 2.2
BOSS_SPEED_MULT: float = 2.0
MIN_DIST: float = 1.0            # substituted for zero-length vectors

# ----- Event log -----
LOG_COALESCE_S: float = 1.2
EVENT_LOG_CAP: int = 18

# ----- Procedural generation -----
# DNA ranges: (attr_name, min, max)
DNA_SPECS: List[Tuple[str, float, float]] = [
    ("chaos", 0.55, 1.35),
    ("drift", 0.55, 1.35),
    ("aura_scale", 0.95, 1.85),
    ("limbiness", 0.25, 1.1),
]
COLONY_NODES: Tuple[int, int] = (4, 7)
WORM_SEGMENTS: Tuple[int, int] = (10, 18)
BOSS_SEGMENTS: Tuple[int, int] = (18, 28)
WORM_HUE_SPREAD: float = 140.0
SPLIT_HUE_SPREAD: float = 90.0
SPLIT_DISTANCE: Tuple[float, float] = (260.0, 420.0)


def hue_to_rgb(hue: float, s: float = 0.9, v: float = 0.95) -> Tuple[int, int, int]:
    r, g, b = colorsys.hsv_to_rgb((hue % 360.0) / 360.0, s, v)
    return (int(r * 255), int(g * 255), int(b * 255))
