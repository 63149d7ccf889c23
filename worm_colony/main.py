from __future__ import annotations

"""
Entry point wrapper for the worm_colony app.

The window and frame loop live in `worm_colony/app.py`; the simulation
itself (world, worms, camera) has no pygame dependency.
"""

from .app import run


if __name__ == "__main__":
    run()
