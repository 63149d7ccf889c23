"""
Tests for the world aggregate and its growth state machine.

Covers:
- initial population and camera framing
- colony split: one colony per crossed threshold, monotonic next_split_at,
  hard cap at MAX_COLONIES
- boss: exactly once, on the first tick at or above the threshold
- the whale-buy scenario (four buys of 15k MC)
- population scaling pauses at the target, mutation changes worms
- external actions are queued and applied by the next step
- stats, selected-colony descriptor, read-only snapshot
"""

import dataclasses

import numpy as np
import pytest

from worm_colony.colony import new_colony
from worm_colony.config import BOSS_MCAP, MAX_COLONIES, MC_STEP, MIN_ZOOM, MAX_ZOOM
from worm_colony.world import World

DT = 1.0 / 60.0


def _bosses(world):
    return sum(1 for c in world.colonies for w in c.worms if w.is_boss)


def _traits(world):
    return [(w.hue, w.speed, w.width, len(w.limbs)) for w in world.colonies[0].worms]


def test_initial_world(world):
    assert len(world.colonies) == 1
    assert world.total_worms() == 3
    assert world.colonies[0].dna.hue == pytest.approx(150.0)
    assert MIN_ZOOM <= world.camera.zoom <= MAX_ZOOM
    assert world.log.entries[0].kind == "INFO"
    assert world.next_split_at == MC_STEP


def test_single_split(world):
    world.economy.add(market_cap=MC_STEP)
    world.step(DT)
    assert len(world.colonies) == 2
    assert world.next_split_at == 2 * MC_STEP
    new = world.colonies[1]
    assert 2 <= len(new.worms) <= 6
    assert new.shocks
    dist = np.hypot(*(new.home - world.colonies[0].home))
    assert 260.0 - 1e-6 <= dist <= 420.0 + 1e-6


def test_multiple_crossings_in_one_tick(world):
    world.economy.add(market_cap=3.2 * MC_STEP)
    world.step(DT)
    assert len(world.colonies) == 4
    assert world.next_split_at == 4 * MC_STEP


def test_split_capped_at_max_colonies(world):
    world.economy.add(market_cap=1e8)
    world.step(DT)
    assert len(world.colonies) == MAX_COLONIES
    assert world.next_split_at == MAX_COLONIES * MC_STEP
    world.economy.add(market_cap=1e9)
    for _ in range(5):
        world.step(DT)
    assert len(world.colonies) == MAX_COLONIES


def test_boss_fires_exactly_once(world):
    world.economy.add(market_cap=BOSS_MCAP - 1)
    world.step(DT)
    assert _bosses(world) == 0 and not world.boss_spawned
    world.economy.add(market_cap=1)
    world.step(DT)
    assert _bosses(world) == 1
    boss = next(w for w in world.colonies[0].worms if w.is_boss)
    assert boss.hue == 120.0
    assert len(boss.limbs) == 4
    world.economy.add(market_cap=1e6)
    for _ in range(30):
        world.step(DT)
    world.economy.sell(world.rng)
    world.economy.add(market_cap=1e6)
    world.step(DT)
    assert _bosses(world) == 1


def test_whale_buy_scenario():
    world = World(seed=7)
    for _ in range(4):
        world.economy.add(buyers=3, volume=5000, market_cap=15000)
        world.step(DT)
    assert world.economy.market_cap == 60000
    assert world.economy.buyers == 12
    assert _bosses(world) == 1
    assert len(world.colonies) == 2
    assert world.next_split_at == 100000


def test_population_stops_at_target(world):
    target = world.economy.population_target()
    assert world.total_worms() >= target
    for _ in range(600):
        world.step(0.05)
    assert world.total_worms() == 3


def test_population_grows_toward_target(world):
    world.economy.add(buyers=20, volume=12000)  # g = 4 -> target 11
    target = world.economy.population_target()
    assert target == 11
    for _ in range(400):
        world.step(0.05)
    assert world.total_worms() == target
    assert any(e.message == "New worm hatched" for e in world.log.entries)


def test_mutation_changes_a_worm(world):
    before = _traits(world)
    msg = world.mutate_random()
    after = _traits(world)
    assert msg is not None
    assert before != after
    assert world.log.entries[0].kind == "MUTATION"


def test_mutation_timer_runs(world):
    for _ in range(400):
        world.step(0.05)
    assert any(e.kind == "MUTATION" for e in world.log.entries)


def test_actions_apply_on_next_step(world):
    world.request("whale_buy")
    assert world.economy.market_cap == 0
    assert not world.colonies[0].shocks
    world.step(DT)
    assert world.economy.market_cap > 0
    assert any(e.kind == "TRADE" for e in world.log.entries)
    assert world.colonies[0].shocks
    world.request("focus")
    world.step(DT)
    assert world.focus
    z = world.camera.zoom
    world.request("zoom_in")
    world.step(DT)
    assert world.camera.zoom == pytest.approx(min(MAX_ZOOM, z * 1.12))
    assert world.pending == []


def test_unknown_action_rejected(world):
    with pytest.raises(ValueError):
        world.request("launch_rocket")
    assert world.pending == []


def test_requested_mutation_waits_for_step(world):
    before = _traits(world)
    entries = len(world.log)
    world.request("mutate")
    assert _traits(world) == before
    assert len(world.log) == entries
    world.step(0.0)
    assert world.log.entries[0].kind == "MUTATION"
    assert world.pending == []


def test_focus_follows_selected(world):
    world.colonies.append(new_colony(800.0, 0.0, world.rng))
    world.selected = 1
    world.focus = True
    for _ in range(100):
        world.step(DT)
    c = world.colonies[1]
    assert world.camera.pan[0] == pytest.approx(-c.x, abs=5.0)


def test_select_at(world):
    world.colonies.append(new_colony(600.0, 0.0, world.rng))
    sx, sy = world.camera.world_to_screen(600.0, 0.0)
    assert world.select_at(sx, sy) == 1
    assert world.selected == 1
    far = world.camera.world_to_screen(5000.0, 5000.0)
    assert world.select_at(*far) is None
    assert world.selected == 1


def test_stale_selection_falls_back(world):
    world.selected = 99
    assert world.selected_colony() is world.colonies[0]


def test_stats_and_selected_info(world):
    world.economy.add(buyers=4, volume=1234.4, market_cap=56789.6)
    s = world.stats()
    assert (s.colonies, s.worms, s.buyers) == (1, 3, "4")
    assert s.volume == "$1,234"
    assert s.market_cap == "$56,790"
    info = world.selected_info()
    assert info.id == world.colonies[0].id
    assert info.dna_summary.startswith("CHAOS ")
    assert info.worms == 3


def test_snapshot_is_read_only_copy(world):
    world.step(DT)
    snap = world.snapshot()
    wv = snap.colonies[0].worms[0]
    assert not wv.points.flags.writeable
    with pytest.raises(ValueError):
        wv.points[0, 0] = 1.0
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.colonies[0].x = 5.0
    first = wv.points.copy()
    world.step(DT)
    assert np.array_equal(first, wv.points)
    assert snap.stats.worms == 3


def test_step_survives_bad_input(world):
    world.economy.market_cap = float("nan")
    world.economy.volume = float("inf")
    world.step(float("nan"))
    world.step(10.0)
    assert world.time == pytest.approx(0.05)
    for c in world.colonies:
        for w in c.worms:
            assert np.all(np.isfinite(w.positions()))


def test_seeded_worlds_are_reproducible():
    a = World(seed=99)
    b = World(seed=99)
    for _ in range(120):
        a.step(DT)
        b.step(DT)
    pa = a.colonies[0].worms[0].positions()
    pb = b.colonies[0].worms[0].positions()
    assert np.array_equal(pa, pb)
