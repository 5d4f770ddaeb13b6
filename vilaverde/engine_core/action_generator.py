"""
Action Generator - Enumerates legal placements from a game state.

The action generator is used by:
1. The build menu (which kinds to offer, which are affordable)
2. The CLI autoplay driver
3. Validation (is this placement legal?)

Design: Generates Action objects, not just kinds.
This ensures all generated actions are fully specified.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..catalog import BuildingCatalog, BuildingDefinition, BuildingKind, create_default_catalog
from .action import Action, ActionType
from .reducer import Reducer
from .rules import GameRules, DEFAULT_RULES
from .state import GameState, GridPosition


@dataclass(frozen=True)
class PlaceableKind:
    """A build-menu entry."""
    definition: BuildingDefinition
    affordable: bool

    @property
    def kind(self) -> BuildingKind:
        return self.definition.kind


@dataclass
class ActionGenerator:
    """
    Generates legal placements for the current state.

    Only offers kinds that are available; the reducer itself does not
    check availability.
    """
    catalog: BuildingCatalog = field(default_factory=create_default_catalog)
    rules: GameRules = DEFAULT_RULES

    def __post_init__(self):
        self._reducer = Reducer(catalog=self.catalog, rules=self.rules)

    def placeable_kinds(self, state: GameState) -> list[PlaceableKind]:
        """Available kinds in catalog order, flagged by energy affordability."""
        probe = self._any_free_cell(state)
        entries = []
        for kind in self.catalog.sort_kinds(state.available_buildings):
            if kind not in self.catalog:
                continue
            definition = self.catalog.definition_of(kind)
            if probe is None:
                affordable = False
            else:
                affordable = self._reducer.validate_placement(state, kind, probe) is None
            entries.append(PlaceableKind(definition=definition, affordable=affordable))
        return entries

    def free_cells(self, state: GameState) -> list[GridPosition]:
        """Unoccupied cells strictly inside the unlocked terrain, row by row."""
        limit = state.terrain_limit(self.rules)
        step = self.rules.cell_size
        # Largest multiple of the cell size strictly inside the limit
        edge = ((limit - 1) // step) * step
        occupied = {b.position.cell for b in state.placed_buildings}

        cells = []
        for z in range(-edge, edge + 1, step):
            for x in range(-edge, edge + 1, step):
                if (x, z) not in occupied:
                    cells.append(GridPosition(x=x, z=z))
        return cells

    def generate(self, state: GameState) -> list[Action]:
        """
        Generate every legal placement.

        Returns a list of fully-specified Action objects.
        """
        cells = self.free_cells(state)
        actions = []
        for entry in self.placeable_kinds(state):
            if not entry.affordable:
                continue
            for cell in cells:
                actions.append(Action.place(entry.kind, x=cell.x, z=cell.z))
        return actions

    def _any_free_cell(self, state: GameState) -> GridPosition | None:
        cells = self.free_cells(state)
        return cells[0] if cells else None


def legal_actions(state: GameState, catalog: BuildingCatalog | None = None) -> list[Action]:
    """
    Convenience function to get legal placements.

    Creates an ActionGenerator and generates actions.
    """
    generator = ActionGenerator(catalog=catalog or create_default_catalog())
    return generator.generate(state)


def is_legal(state: GameState, action: Action, catalog: BuildingCatalog | None = None) -> bool:
    """Check if a specific placement is legal."""
    if action.action_type != ActionType.PLACE_BUILDING:
        return False
    generator = ActionGenerator(catalog=catalog or create_default_catalog())
    try:
        kind = generator.catalog.coerce_kind(action.payload.kind)
    except KeyError:
        return False
    if kind not in state.available_buildings:
        return False
    return generator._reducer.validate_placement(state, kind, action.payload.position) is None
