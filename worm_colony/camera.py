from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple
import math

import numpy as np

from .config import (
    CENTER_LERP, DEFAULT_ZOOM, FIT_MARGIN, FIT_MIN_BOX, FIT_PAD,
    MAX_ZOOM, MIN_ZOOM, PICK_RADIUS, WIN_SIZE,
)
from .noise import clamp, finite_or, lerp


class Camera:
    """Pan/zoom view onto the world.

    Screen = (world + pan) * zoom + viewport_center. Pan is stored in world
    units, so it is the negated world point shown at the viewport center.
    Width/height are in logical (CSS-style) pixels; `dpr` is kept for
    hosts that render into a backing store of `width * dpr` pixels.
    """

    def __init__(self, width: float = WIN_SIZE[0], height: float = WIN_SIZE[1], dpr: float = 1.0,
                 zoom: float = DEFAULT_ZOOM):
        self.width = 1.0
        self.height = 1.0
        self.dpr = 1.0
        self.pan = np.zeros(2, dtype=float)
        self.zoom = clamp(finite_or(zoom, DEFAULT_ZOOM), MIN_ZOOM, MAX_ZOOM)
        self.resize(width, height, dpr)

    def resize(self, width: float, height: float, dpr: float = 1.0) -> None:
        self.width = max(1.0, finite_or(width, self.width))
        self.height = max(1.0, finite_or(height, self.height))
        self.dpr = clamp(finite_or(dpr, self.dpr), 1.0, 2.0)

    # ----- transforms -----
    def world_to_screen(self, x: float, y: float) -> Tuple[float, float]:
        return ((x + self.pan[0]) * self.zoom + self.width * 0.5,
                (y + self.pan[1]) * self.zoom + self.height * 0.5)

    def screen_to_world(self, px: float, py: float) -> Tuple[float, float]:
        return ((px - self.width * 0.5) / self.zoom - self.pan[0],
                (py - self.height * 0.5) / self.zoom - self.pan[1])

    # ----- interaction -----
    def pan_by(self, dx: float, dy: float) -> None:
        """Pan by a screen-space drag; divided by zoom so drags track the pointer."""
        if not (math.isfinite(dx) and math.isfinite(dy)):
            return
        self.pan += np.array([dx, dy], dtype=float) / self.zoom

    def zoom_by(self, factor: float) -> None:
        if not math.isfinite(factor) or factor <= 0.0:
            return
        self.zoom = clamp(self.zoom * factor, MIN_ZOOM, MAX_ZOOM)

    def pick(self, px: float, py: float, centers: Sequence[Tuple[float, float]]) -> Optional[int]:
        """Index of the center nearest to screen point (px, py), or None when
        nothing lies within PICK_RADIUS world units."""
        if len(centers) == 0:
            return None
        wx, wy = self.screen_to_world(px, py)
        pts = np.asarray(centers, dtype=float).reshape(-1, 2)
        d2 = (pts[:, 0] - wx) ** 2 + (pts[:, 1] - wy) ** 2
        best = int(np.argmin(d2))
        return best if d2[best] < PICK_RADIUS * PICK_RADIUS else None

    def fit_all(self, centers: Iterable[Tuple[float, float]]) -> None:
        """Frame every center (padded by FIT_PAD) inside the viewport.

        Independent of the previous pan/zoom.
        """
        pts = np.asarray(list(centers), dtype=float).reshape(-1, 2)
        if pts.shape[0] == 0:
            self.pan[:] = 0.0
            self.zoom = clamp(DEFAULT_ZOOM, MIN_ZOOM, MAX_ZOOM)
            return
        lo = pts.min(axis=0) - FIT_PAD
        hi = pts.max(axis=0) + FIT_PAD
        bw = max(FIT_MIN_BOX, float(hi[0] - lo[0]))
        bh = max(FIT_MIN_BOX, float(hi[1] - lo[1]))
        fit = min(self.width / bw, self.height / bh)
        self.zoom = clamp(fit * FIT_MARGIN, MIN_ZOOM, MAX_ZOOM)
        self.pan = -(lo + hi) * 0.5

    def center_on(self, x: float, y: float, smooth: bool = True) -> None:
        if not (math.isfinite(x) and math.isfinite(y)):
            return
        if not smooth:
            self.pan = np.array([-x, -y], dtype=float)
            return
        self.pan = np.array([lerp(self.pan[0], -x, CENTER_LERP),
                             lerp(self.pan[1], -y, CENTER_LERP)], dtype=float)
