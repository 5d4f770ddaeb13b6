"""
Tests for the reducer (state transitions).

Tests:
- Placement application
- Precondition checks and their order
- Rejections leave state untouched
- Challenge and info-panel actions
"""

import pytest

from ..catalog import BuildingKind
from ..engine_core.action import Action, ActionType, RejectionCode
from ..engine_core.challenges import ChallengeId, NotificationKind
from ..engine_core.reducer import apply_action, place_building
from ..engine_core.state import GameState, GridPosition

HOUSE = BuildingKind.SUSTAINABLE_HOUSE
GARDEN = BuildingKind.COMMUNITY_GARDEN
SOLAR = BuildingKind.SOLAR_PANEL_ARRAY


def _play(reducer, state, *placements):
    """Apply (kind, x, z) placements, asserting each succeeds."""
    result = None
    for kind, x, z in placements:
        result = reducer.apply(state, Action.place(kind, x=x, z=z))
        assert result.success, result.error
        state = result.new_state
    return state, result


class TestPlacement:
    """Tests for successful placements."""

    def test_first_house(self, initial_state, catalog):
        """A house on an empty settlement."""
        result = place_building(initial_state, GridPosition(x=0, z=0), HOUSE, catalog)

        assert result.success
        state = result.new_state
        assert state.indicators.population == 4
        assert state.indicators.community_happiness == 55
        assert state.indicators.energy_balance == -1
        assert state.indicators.biodiversity == 31
        assert state.current_turn == 1
        assert len(state.history) == 2

    def test_input_state_not_mutated(self, initial_state, reducer):
        reducer.apply(initial_state, Action.place(HOUSE, x=0, z=0))
        assert initial_state.placed_buildings == ()
        assert initial_state.current_turn == 0
        assert len(initial_state.history) == 1

    def test_history_turns_contiguous(self, initial_state, reducer):
        state, _ = _play(
            reducer, initial_state,
            (HOUSE, 0, 0), (GARDEN, 2, 0), (SOLAR, 4, 0), (HOUSE, 6, 0),
        )
        assert [p.turn for p in state.history] == list(range(state.current_turn + 1))
        assert state.history[-1].indicators == state.indicators

    def test_building_ids_unique(self, initial_state, reducer):
        state, _ = _play(reducer, initial_state, (GARDEN, 0, 0), (GARDEN, 2, 0))
        ids = [b.building_id for b in state.placed_buildings]
        assert len(set(ids)) == 2
        assert all(i.startswith("community_garden-") for i in ids)

    def test_ground_level(self, initial_state, reducer):
        result = reducer.apply(initial_state, Action.place(GARDEN, x=0, z=0, y=3))
        assert result.new_state.placed_buildings[0].position.y == 0

    def test_accepts_kind_string(self, initial_state, reducer):
        result = reducer.apply(initial_state, Action.place("community_garden", x=0, z=0))
        assert result.success
        assert result.new_state.placed_buildings[0].kind == GARDEN

    def test_solar_unlocks_after_two(self, initial_state, reducer):
        state, result = _play(reducer, initial_state, (HOUSE, 0, 0), (GARDEN, 2, 0))
        assert SOLAR in state.available_buildings
        assert SOLAR in result.newly_unlocked

        state, result = _play(reducer, state, (GARDEN, 4, 0))
        assert SOLAR in state.available_buildings
        assert SOLAR not in result.newly_unlocked

    def test_terrain_expands(self, initial_state, reducer):
        state, result = _play(
            reducer, initial_state,
            (HOUSE, 0, 0), (GARDEN, 2, 0), (SOLAR, 4, 0), (HOUSE, 6, 0),
        )
        assert state.unlocked_terrain_areas == 1
        assert state.terrain_limit() == 12
        assert any("Terrain" in change for change in result.state_changes)

        state, _ = _play(reducer, state, (GARDEN, 10, -10))
        assert state.building_count == 5

    def test_placement_clears_selection(self, initial_state, reducer):
        state, _ = _play(reducer, initial_state, (GARDEN, 0, 0))
        building_id = state.placed_buildings[0].building_id
        state = reducer.apply(state, Action.select_building(building_id)).new_state
        assert state.selected_building_id == building_id

        state, _ = _play(reducer, state, (GARDEN, 2, 0))
        assert state.selected_building_id is None


class TestRejections:
    """Tests for placement preconditions."""

    def test_occupied(self, initial_state, reducer):
        state, _ = _play(reducer, initial_state, (GARDEN, 0, 0))
        result = reducer.apply(state, Action.place(GARDEN, x=0, z=0))
        assert not result.success
        assert result.error_code == RejectionCode.CELL_OCCUPIED
        assert result.new_state is None

    @pytest.mark.parametrize("x, z", [(10, 0), (0, -10), (-12, 4), (100, 100)])
    def test_out_of_bounds(self, initial_state, reducer, x, z):
        result = reducer.apply(initial_state, Action.place(GARDEN, x=x, z=z))
        assert result.error_code == RejectionCode.OUT_OF_BOUNDS

    def test_edge_cell_inside(self, initial_state, reducer):
        result = reducer.apply(initial_state, Action.place(GARDEN, x=8, z=-8))
        assert result.success

    def test_unknown_kind(self, initial_state, reducer):
        result = reducer.apply(initial_state, Action.place("skyscraper", x=0, z=0))
        assert result.error_code == RejectionCode.UNKNOWN_KIND

    def test_insufficient_energy(self, make_state, reducer):
        """Water treatment costs 2 energy; a balance of 1 is not enough."""
        state = make_state([HOUSE], energy_balance=1)
        before = state.clone()

        result = reducer.apply(state, Action.place(BuildingKind.WATER_TREATMENT, x=4, z=4))

        assert not result.success
        assert result.error_code == RejectionCode.INSUFFICIENT_ENERGY
        assert state == before

    def test_exact_energy_is_enough(self, make_state, reducer):
        state = make_state([HOUSE], energy_balance=2)
        result = reducer.apply(state, Action.place(BuildingKind.WATER_TREATMENT, x=4, z=4))
        assert result.success

    def test_second_house_needs_energy(self, initial_state, reducer):
        state, _ = _play(reducer, initial_state, (HOUSE, 0, 0))
        result = reducer.apply(state, Action.place(HOUSE, x=2, z=0))
        assert result.error_code == RejectionCode.INSUFFICIENT_ENERGY

    def test_first_building_exempt(self, initial_state, reducer):
        result = reducer.apply(initial_state, Action.place(BuildingKind.WATER_TREATMENT, x=0, z=0))
        assert result.success
        assert result.new_state.indicators.energy_balance == -2

    def test_solar_always_affordable(self, make_state, reducer):
        state = make_state([HOUSE] * 3, energy_balance=-3)
        assert reducer.apply(state, Action.place(SOLAR, x=4, z=4)).success

    def test_bounds_checked_before_energy(self, make_state, reducer):
        state = make_state([HOUSE], energy_balance=0)
        result = reducer.apply(state, Action.place(BuildingKind.SCHOOL, x=40, z=0))
        assert result.error_code == RejectionCode.OUT_OF_BOUNDS

    def test_occupied_checked_before_energy(self, make_state, reducer):
        state = make_state([HOUSE], energy_balance=0)
        occupied = state.placed_buildings[0].position
        result = reducer.apply(state, Action.place(BuildingKind.SCHOOL, x=occupied.x, z=occupied.z))
        assert result.error_code == RejectionCode.CELL_OCCUPIED

    def test_missing_kind(self, initial_state, reducer):
        result = reducer.apply(initial_state, Action(action_type=ActionType.PLACE_BUILDING))
        assert not result.success
        assert result.error_code == RejectionCode.UNKNOWN_KIND


class TestChallengeActions:
    """Tests for challenge transitions driven by the reducer."""

    def test_energy_challenge_triggers(self, initial_state, reducer):
        _, result = _play(reducer, initial_state, (HOUSE, 0, 0), (GARDEN, 2, 0), (GARDEN, 4, 0))
        assert result.new_state.current_challenge_id == ChallengeId.ENERGY.value
        assert result.notifications[0].kind == NotificationKind.TRIGGERED

    def test_overlay_blocks_trigger(self, initial_state, reducer):
        state, _ = _play(reducer, initial_state, (HOUSE, 0, 0), (GARDEN, 2, 0))
        result = reducer.apply(state, Action.place(GARDEN, x=4, z=0, overlay_open=True))
        assert result.new_state.current_challenge_id is None
        assert result.notifications == []

    def test_solar_completes_energy(self, initial_state, reducer):
        state, _ = _play(reducer, initial_state, (HOUSE, 0, 0), (GARDEN, 2, 0), (GARDEN, 4, 0))
        state, result = _play(reducer, state, (SOLAR, 6, 0))
        assert state.current_challenge_id is None
        assert state.completed_challenge_ids == {ChallengeId.ENERGY.value}
        assert [n.kind for n in result.notifications] == [NotificationKind.COMPLETED]

    def test_close_then_retrigger_next_turn(self, initial_state, reducer):
        state, _ = _play(reducer, initial_state, (HOUSE, 0, 0), (GARDEN, 2, 0), (GARDEN, 4, 0))

        result = reducer.apply(state, Action.close_challenge())
        assert result.success
        state = result.new_state
        assert state.current_challenge_id is None
        assert state.acknowledged_challenge_id == ChallengeId.ENERGY.value

        # Still short on energy: offered again once the turn advances
        state, _ = _play(reducer, state, (GARDEN, 6, 0))
        assert state.current_challenge_id == ChallengeId.ENERGY.value
        assert state.acknowledged_challenge_id is None

    def test_close_without_challenge(self, initial_state, reducer):
        result = reducer.apply(initial_state, Action.close_challenge())
        assert result.error_code == RejectionCode.NO_ACTIVE_CHALLENGE

    def test_evaluate_after_overlay_closes(self, initial_state, reducer):
        state, _ = _play(reducer, initial_state, (HOUSE, 0, 0), (GARDEN, 2, 0))
        state = reducer.apply(state, Action.place(GARDEN, x=4, z=0, overlay_open=True)).new_state
        turn = state.current_turn

        result = reducer.apply(state, Action.evaluate_challenges())
        assert result.new_state.current_challenge_id == ChallengeId.ENERGY.value
        assert result.new_state.current_turn == turn


class TestBuildingInfo:
    """Tests for the building info panel actions."""

    def test_select_unknown(self, initial_state, reducer):
        result = reducer.apply(initial_state, Action.select_building("nope"))
        assert result.error_code == RejectionCode.UNKNOWN_BUILDING

    def test_select_and_close(self, initial_state, reducer):
        state, _ = _play(reducer, initial_state, (GARDEN, 0, 0))
        building_id = state.placed_buildings[0].building_id
        state = reducer.apply(state, Action.select_building(building_id)).new_state
        state = reducer.apply(state, Action.close_building_info()).new_state
        assert state.selected_building_id is None
        assert state.current_turn == 1


def test_apply_action_uses_default_catalog():
    result = apply_action(GameState.initial(), Action.place(HOUSE, x=0, z=0))
    assert result.success
    assert result.new_state.current_turn == 1


@pytest.mark.parametrize("action_type", list(ActionType))
def test_every_action_type_has_handler(reducer, action_type):
    assert callable(reducer._get_handler(action_type))
