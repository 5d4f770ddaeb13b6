"""
Tests for the action generator (build menu and legal placements).
"""

from ..catalog import BuildingKind
from ..engine_core.action import Action
from ..engine_core.action_generator import ActionGenerator, is_legal, legal_actions
from ..engine_core.reducer import Reducer

HOUSE = BuildingKind.SUSTAINABLE_HOUSE
GARDEN = BuildingKind.COMMUNITY_GARDEN


class TestActionGenerator:
    """Tests for ActionGenerator."""

    def test_free_cells_initial(self, initial_state, catalog):
        cells = ActionGenerator(catalog=catalog).free_cells(initial_state)
        assert len(cells) == 81
        assert max(abs(c.x) for c in cells) == 8
        assert all(initial_state.within_terrain(c) for c in cells)

    def test_free_cells_skip_occupied(self, initial_state, catalog):
        state = Reducer(catalog=catalog).apply(initial_state, Action.place(GARDEN, x=0, z=0)).new_state
        cells = ActionGenerator(catalog=catalog).free_cells(state)
        assert len(cells) == 80
        assert (0, 0) not in {c.cell for c in cells}

    def test_menu_flags_affordability(self, initial_state, catalog):
        generator = ActionGenerator(catalog=catalog)
        menu = {e.kind: e.affordable for e in generator.placeable_kinds(initial_state)}
        assert menu == {HOUSE: True, GARDEN: True}

        state = Reducer(catalog=catalog).apply(initial_state, Action.place(HOUSE, x=0, z=0)).new_state
        menu = {e.kind: e.affordable for e in generator.placeable_kinds(state)}
        assert menu == {HOUSE: False, GARDEN: True}

    def test_generate_only_available_kinds(self, initial_state, catalog):
        actions = legal_actions(initial_state, catalog)
        assert {a.payload.kind for a in actions} == {HOUSE, GARDEN}
        assert len(actions) == 2 * 81

    def test_generated_actions_are_legal(self, initial_state, catalog):
        for action in legal_actions(initial_state, catalog)[:20]:
            assert is_legal(initial_state, action, catalog)

    def test_locked_kind_not_legal(self, initial_state, catalog):
        action = Action.place(BuildingKind.SCHOOL, x=0, z=0)
        assert not is_legal(initial_state, action, catalog)

    def test_non_placement_not_legal(self, initial_state, catalog):
        assert not is_legal(initial_state, Action.close_challenge(), catalog)
