"""
Game State - The turn-indexed settlement aggregate.

Design principles:
- Immutable-friendly: transitions return a new GameState
- Collections are tuples/frozensets so a committed state cannot be
  mutated through a shared reference
- Indicators and unlocks are derived from placed buildings;
  the reducer keeps them in sync
"""

from __future__ import annotations
from dataclasses import dataclass, field
from copy import deepcopy

from ..catalog import BuildingKind, INITIAL_AVAILABLE_BUILDINGS
from .indicators import IndicatorSnapshot, INITIAL_INDICATORS
from .rules import GameRules, DEFAULT_RULES


@dataclass(frozen=True)
class GridPosition:
    """
    A grid cell in world units.

    y is always ground level; x and z are pre-snapped to the cell size.
    """
    x: int
    z: int
    y: int = 0

    @property
    def cell(self) -> tuple[int, int]:
        return (self.x, self.z)

    def to_dict(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y, "z": self.z}


@dataclass(frozen=True)
class PlacedBuilding:
    """
    A building instantiated at a grid cell.

    Note: The definition lives in the catalog, keyed by kind.
    """
    building_id: str  # Unique per placement
    kind: BuildingKind
    position: GridPosition


@dataclass(frozen=True)
class HistoricDataPoint:
    """Indicator snapshot recorded at the end of a turn."""
    turn: int
    indicators: IndicatorSnapshot


@dataclass
class GameState:
    """
    Complete settlement state at a point in time.

    This is the canonical state that the engine operates on.
    All state changes go through the reducer.
    """
    # Buildings in placement (= turn) order
    placed_buildings: tuple[PlacedBuilding, ...] = ()
    indicators: IndicatorSnapshot = INITIAL_INDICATORS

    # Progression (one-way ratchets)
    available_buildings: frozenset[BuildingKind] = INITIAL_AVAILABLE_BUILDINGS
    unlocked_terrain_areas: int = 0

    # Turn tracking; history[i].turn == i
    history: tuple[HistoricDataPoint, ...] = field(
        default_factory=lambda: (HistoricDataPoint(turn=0, indicators=INITIAL_INDICATORS),)
    )
    current_turn: int = 0

    # Challenges
    current_challenge_id: str | None = None
    completed_challenge_ids: frozenset[str] = frozenset()
    acknowledged_challenge_id: str | None = None  # reset whenever the turn advances

    # Transient UI selection, cleared on every placement
    selected_building_id: str | None = None

    @classmethod
    def initial(cls) -> GameState:
        """Turn 0: no buildings, baseline indicators, one history entry."""
        return cls()

    @property
    def has_active_challenge(self) -> bool:
        return self.current_challenge_id is not None

    @property
    def building_count(self) -> int:
        return len(self.placed_buildings)

    @property
    def house_count(self) -> int:
        return self.count_of(BuildingKind.SUSTAINABLE_HOUSE)

    def count_of(self, kind: BuildingKind) -> int:
        return sum(1 for b in self.placed_buildings if b.kind == kind)

    def has_building(self, kind: BuildingKind) -> bool:
        return any(b.kind == kind for b in self.placed_buildings)

    def building_at(self, position: GridPosition) -> PlacedBuilding | None:
        """Get the building occupying a cell (y is ignored)."""
        for b in self.placed_buildings:
            if b.position.cell == position.cell:
                return b
        return None

    def is_occupied(self, position: GridPosition) -> bool:
        return self.building_at(position) is not None

    def get_building(self, building_id: str) -> PlacedBuilding | None:
        for b in self.placed_buildings:
            if b.building_id == building_id:
                return b
        return None

    def terrain_limit(self, rules: GameRules = DEFAULT_RULES) -> int:
        return rules.terrain_limit(self.unlocked_terrain_areas)

    def within_terrain(self, position: GridPosition, rules: GameRules = DEFAULT_RULES) -> bool:
        limit = self.terrain_limit(rules)
        return abs(position.x) < limit and abs(position.z) < limit

    def clone(self) -> GameState:
        """Deep copy the state."""
        return deepcopy(self)
