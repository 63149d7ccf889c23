from __future__ import annotations

from typing import Callable, Optional
import math

from .config import MAX_FRAME_DT, RENDER_FPS


class FrameLoop:
    """One iteration per scheduled frame: update always, render at a capped cadence.

    `update(dt)` runs to completion before `render()` is called, so a
    renderer never sees a half-updated world.
    """

    def __init__(self, update: Callable[[float], None], render: Callable[[], None],
                 render_fps: float = RENDER_FPS, max_dt: float = MAX_FRAME_DT):
        self.update = update
        self.render = render
        self.render_dt = 1.0 / max(1e-3, float(render_fps))
        self.max_dt = float(max_dt)
        self.last: Optional[float] = None
        self.render_accum = 0.0
        self.frames = 0
        self.renders = 0

    def frame(self, now: float) -> bool:
        """Advance to time `now` (seconds). Returns True when a render happened."""
        if self.last is None or not math.isfinite(now):
            dt = 0.0
        else:
            dt = min(max(0.0, now - self.last), self.max_dt)
        if math.isfinite(now):
            self.last = now

        self.update(dt)
        self.frames += 1

        self.render_accum += dt
        if self.render_accum >= self.render_dt:
            self.render_accum = 0.0
            self.render()
            self.renders += 1
            return True
        return False
