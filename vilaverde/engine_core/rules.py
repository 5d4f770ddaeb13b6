"""
Game Rules - Numeric constants shared by the engine.

Injected into the reducer so tests and alternative setups can
change grid geometry or thresholds without touching engine code.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class GameRules:
    """Tunable constants for a settlement."""
    cell_size: int = 2  # world units per grid cell
    initial_terrain_half: int = 5  # half-width of the starting square, in cells
    population_per_house: int = 4
    terrain_unlock_threshold: int = 2  # houses/community centres per terrain ring

    min_level: int = 0
    max_level: int = 100
    min_energy: int = -1000
    max_energy: int = 1000

    def terrain_limit(self, unlocked_terrain_areas: int) -> int:
        """Half-width of the buildable square in world units (exclusive)."""
        return (self.initial_terrain_half + unlocked_terrain_areas) * self.cell_size


DEFAULT_RULES = GameRules()
