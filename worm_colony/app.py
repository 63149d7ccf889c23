from __future__ import annotations

import argparse
import logging
import math
import os
from typing import List, Sequence, Tuple

import pygame as pg

from .camera import Camera
from .config import TARGET_FPS, WIN_SIZE, hue_to_rgb
from .loop import FrameLoop
from .ui import ActionButton, PointerController
from .world import World, WorldSnapshot

logger = logging.getLogger(__name__)

BG_COLOR = (6, 8, 16)
BUTTONS: List[Tuple[str, str]] = [
    ("Feed", "feed"),
    ("Buy", "small_buy"),
    ("Whale", "whale_buy"),
    ("Sell", "sell"),
    ("Storm", "storm"),
    ("Mutate", "mutate"),
    ("Focus", "focus"),
    ("Fit", "fit"),
]


def parse_size(text: str) -> Tuple[int, int]:
    try:
        w, h = (int(v) for v in text.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WxH, got {text!r}")
    if w <= 0 or h <= 0:
        raise argparse.ArgumentTypeError(f"size must be positive, got {text!r}")
    return w, h


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="worm_colony", description="Procedural worm colony ecosystem")
    env_seed = os.environ.get("WORM_SEED")
    p.add_argument("--seed", type=int, default=int(env_seed) if env_seed else None)
    p.add_argument("--size", type=parse_size, default=WIN_SIZE, help="window size as WxH")
    return p.parse_args(argv)


def display_dpr(surface_size: Tuple[int, int], window_size: Tuple[int, int]) -> float:
    """Drawable pixels per window pixel; 1.0 when the window size is unknown."""
    if window_size[0] <= 0 or surface_size[0] <= 0:
        return 1.0
    return surface_size[0] / window_size[0]


def _to_screen(
snap: WorldSnapshot, x: float, y: float) -> Tuple[int, int]:
    vw, vh = snap.viewport
    return (int((x + snap.pan[0]) * snap.zoom + vw * 0.5),
            int((y + snap.pan[1]) * snap.zoom + vh * 0.5))


def _draw_world(screen: pg.Surface, snap: WorldSnapshot) -> None:
    z = snap.zoom
    for c in snap.colonies:
        cx, cy = _to_screen(snap, c.x, c.y)
        col = hue_to_rgb(c.dna.hue, 0.6, 0.35)
        for node in c.nodes:
            pulse = 1.0 + 0.08 * math.sin(snap.time * node.speed + node.phase)
            nx, ny = _to_screen(snap, c.x + node.ox, c.y + node.oy)
            pg.draw.circle(screen, col, (nx, ny), max(1, int(node.r * pulse * z * 0.5)), width=1)
        if c.selected:
            pg.draw.circle(screen, hue_to_rgb(c.dna.hue), (cx, cy), max(2, int(105 * c.dna.aura_scale * z)), width=2)
        for radius, intensity, width in c.shocks:
            shade = hue_to_rgb(c.dna.hue, 0.9, max(0.1, min(1.0, intensity)))
            r = int(radius * z)
            if r > 1:
                pg.draw.circle(screen, shade, (cx, cy), r, width=max(1, int(width)))

    for c in snap.colonies:
        for w in c.worms:
            pts = [_to_screen(snap, float(p[0]), float(p[1])) for p in w.points]
            body = hue_to_rgb(w.hue, 0.85, 1.0 if w.is_boss else 0.9)
            if len(pts) >= 2:
                pg.draw.lines(screen, body, False, pts, max(1, int(w.width * z)))
            for at, length, angle, wobble in w.limbs:
                at = max(0, min(at, len(pts) - 1))
                base = w.points[at]
                a = w.headings[at] + angle + math.sin(snap.time * 2.0 * wobble + w.phase) * 0.35
                tip = (float(base[0]) + math.cos(a) * length, float(base[1]) + math.sin(a) * length)
                pg.draw.line(screen, hue_to_rgb(w.hue + 40.0, 0.8, 0.8), pts[at],
                             _to_screen(snap, *tip), max(1, int(w.width * 0.35 * z)))


def _draw_hud(screen: pg.Surface, snap: WorldSnapshot, world: World, font: pg.font.Font) -> None:
    s = snap.stats
    line = (f"Buyers {s.buyers}   Volume {s.volume}   MC {s.market_cap}   "
            f"Colonies {s.colonies}   Worms {s.worms}")
    screen.blit(font.render(line, True, (220, 230, 245)), (12, 10))
    info = world.selected_info()
    if info is not None:
        sel = f"{info.id}  {info.biome.value} · {info.style.value} · {info.temperament.value}  {info.dna_summary}"
        screen.blit(font.render(sel, True, (190, 205, 230)), (12, 30))
    y = 54
    for text in world.log.latest(6):
        screen.blit(font.render(text, True, (170, 185, 210)), (12, y))
        y += 18


def _build_buttons(world: World, size: Tuple[int, int]) -> List[ActionButton]:
    buttons: List[ActionButton] = []
    x = 12
    y = size[1] - 40
    for label, action in BUTTONS:
        buttons.append(ActionButton(pg.Rect(x, y, 80, 28), label, action, world.request))
        x += 88
    return buttons


def run(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    pg.init()
    pg.display.set_caption("Worm Colonies")
    screen = pg.display.set_mode(args.size, pg.RESIZABLE)
    clock = pg.time.Clock()
    font = pg.font.SysFont(None, 18)

    dpr = display_dpr(screen.get_size(), pg.display.get_window_size())
    world = World(seed=args.seed, camera=Camera(*args.size, dpr=dpr))
    logger.info("world ready: seed=%s size=%dx%d", args.seed, *args.size)
    controller = PointerController(world)
    buttons = _build_buttons(world, args.size)

    def render() -> None:
        snap = world.snapshot()
        screen.fill(BG_COLOR)
        _draw_world(screen, snap)
        _draw_hud(screen, snap, world, font)
        for b in buttons:
            b.draw(screen, font)
        pg.display.flip()

    loop = FrameLoop(world.step, render)
    running = True
    while running:
        clock.tick(TARGET_FPS)
        now = pg.time.get_ticks() / 1000.0
        for ev in pg.event.get():
            if ev.type == pg.QUIT:
                running = False
            elif ev.type == pg.KEYDOWN and ev.key in (pg.K_ESCAPE, pg.K_q):
                running = False
            elif ev.type == pg.VIDEORESIZE:
                dpr = display_dpr(pg.display.get_surface().get_size(), pg.display.get_window_size())
                world.camera.resize(ev.w, ev.h, dpr)
                buttons = _build_buttons(world, (ev.w, ev.h))
            elif any(b.handle_event(ev) for b in buttons):
                continue
            else:
                action = controller.handle_event(ev, now)
                if action is not None:
                    world.request(action)
        loop.frame(now)

    logger.info("shutting down after %d frames (%d rendered)", loop.frames, loop.renders)
    pg.quit()
