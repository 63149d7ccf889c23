import random

import pytest

from worm_colony.camera import Camera
from worm_colony.colony import new_colony
from worm_colony.world import World


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def camera() -> Camera:
    return Camera(1280, 800)


@pytest.fixture
def world(camera) -> World:
    return World(seed=42, camera=camera)


@pytest.fixture
def colony(rng):
    return new_colony(0.0, 0.0, rng, hue=150.0)
