from __future__ import annotations

import math
from typing import Callable, Dict, Optional, Tuple
import pygame as pg

from .config import WHEEL_ZOOM_IN, WHEEL_ZOOM_OUT
from .world import World

TAP_SLOP_PX: float = 6.0
DOUBLE_TAP_S: float = 0.28

KEY_ACTIONS: Dict[int, str] = {
    pg.K_1: "feed",
    pg.K_2: "small_buy",
    pg.K_3: "whale_buy",
    pg.K_4: "sell",
    pg.K_5: "storm",
    pg.K_m: "mutate",
    pg.K_f: "focus",
    pg.K_z: "zoom_in",
    pg.K_x: "zoom_out",
    pg.K_a: "fit",
}


class PointerController:
    """Turns pointer, wheel and touch gestures into camera pan/zoom/pick calls.

    One active pointer drags the view; releasing it without much travel
    selects the nearest colony. Two touch points pinch-zoom by the ratio of
    their distances.
    """

    def __init__(self, world: World):
        self.world = world
        self.dragging = False
        self.last: Tuple[float, float] = (0.0, 0.0)
        self.travel = 0.0
        self.fingers: Dict[int, Tuple[float, float]] = {}
        self.pinch_dist: Optional[float] = None
        self.last_tap_t = -1e9

    # ----- primitives -----
    def pointer_down(self, x: float, y: float) -> None:
        self.dragging = True
        self.travel = 0.0
        self.last = (x, y)

    def pointer_move(self, x: float, y: float) -> None:
        if not self.dragging:
            return
        dx = x - self.last[0]
        dy = y - self.last[1]
        self.last = (x, y)
        self.travel += math.hypot(dx, dy)
        self.world.camera.pan_by(dx, dy)

    def pointer_up(self, x: float, y: float, now: float) -> Optional[int]:
        if not self.dragging:
            return None  # press was consumed elsewhere
        was_drag = self.travel > TAP_SLOP_PX
        self.dragging = False
        if was_drag:
            return None
        idx = self.world.select_at(x, y)
        if now - self.last_tap_t < DOUBLE_TAP_S:
            self.world.center_on_selected(False)
        self.last_tap_t = now
        return idx

    def wheel(self, dy: float) -> None:
        # dy > 0 scrolls up (away from the user): zoom in
        if dy > 0:
            self.world.camera.zoom_by(WHEEL_ZOOM_IN)
        elif dy < 0:
            self.world.camera.zoom_by(WHEEL_ZOOM_OUT)

    def pinch(self, prev_dist: float, new_dist: float) -> None:
        if prev_dist > 1e-6 and new_dist > 1e-6:
            self.world.camera.zoom_by(new_dist / prev_dist)

    # ----- pygame adapter -----
    def _finger_px(self, ev: pg.event.Event) -> Tuple[float, float]:
        cam = self.world.camera
        return float(ev.x) * cam.width, float(ev.y) * cam.height

    def _finger_span(self) -> Optional[float]:
        if len(self.fingers) < 2:
            return None
        (ax, ay), (bx, by) = list(self.fingers.values())[:2]
        return math.hypot(ax - bx, ay - by)

    def handle_event(self, ev: pg.event.Event, now: float) -> Optional[str]:
        """Feed one pygame event. Returns an action name for key presses."""
        if ev.type in (pg.MOUSEBUTTONDOWN, pg.MOUSEBUTTONUP, pg.MOUSEMOTION) and getattr(ev, "touch", False):
            return None  # synthesized from touch; FINGER* events handle it
        if ev.type == pg.MOUSEBUTTONDOWN and ev.button == 1:
            self.pointer_down(*ev.pos)
        elif ev.type == pg.MOUSEMOTION:
            self.pointer_move(*ev.pos)
        elif ev.type == pg.MOUSEBUTTONUP and ev.button == 1:
            self.pointer_up(*ev.pos, now=now)
        elif ev.type == pg.MOUSEWHEEL:
            self.wheel(ev.y)
        elif ev.type == pg.FINGERDOWN:
            self.fingers[ev.finger_id] = self._finger_px(ev)
            if len(self.fingers) == 1:
                self.pointer_down(*self.fingers[ev.finger_id])
            else:
                self.dragging = False
                self.pinch_dist = self._finger_span()
        elif ev.type == pg.FINGERMOTION:
            if ev.finger_id not in self.fingers:
                return None
            self.fingers[ev.finger_id] = self._finger_px(ev)
            if len(self.fingers) >= 2:
                span = self._finger_span()
                if self.pinch_dist is not None and span is not None:
                    self.pinch(self.pinch_dist, span)
                self.pinch_dist = span
            else:
                self.pointer_move(*self.fingers[ev.finger_id])
        elif ev.type == pg.FINGERUP:
            pos = self.fingers.pop(ev.finger_id, self._finger_px(ev))
            if len(self.fingers) < 2:
                self.pinch_dist = None
            if not self.fingers and self.dragging:
                self.pointer_up(*pos, now=now)
        elif ev.type == pg.KEYDOWN:
            return KEY_ACTIONS.get(ev.key)
        return None


class ActionButton:
    def __init__(self, rect: pg.Rect, label: str, action: str, on_click: Callable[[str], None]):
        self.rect = rect
        self.label = label
        self.action = action
        self.on_click = on_click

    def handle_event(self, ev: pg.event.Event) -> bool:
        if ev.type == pg.MOUSEBUTTONDOWN and ev.button == 1 and self.rect.collidepoint(ev.pos):
            self.on_click(self.action)
            return True
        return False

    def draw(self, surf: pg.Surface, font: pg.font.Font) -> None:
        radius = self.rect.h // 2
        pg.draw.rect(surf, (24, 36, 60), self.rect, border_radius=radius)
        pg.draw.rect(surf, (60, 90, 140), self.rect, width=2, border_radius=radius)
        img = font.render(self.label, True, (230, 235, 245))
        surf.blit(img, (self.rect.x + 10, self.rect.y + 6))
