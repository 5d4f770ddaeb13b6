"""
Pytest fixtures for Vila Verde tests.
"""

from dataclasses import replace

import pytest

from ..catalog import BuildingCatalog, BuildingKind, EffectVector, get_all_building_definitions
from ..catalog import create_default_catalog
from ..engine_core.indicators import IndicatorSnapshot
from ..engine_core.reducer import Reducer
from ..engine_core.state import GameState, GridPosition, PlacedBuilding
from ..session import GameStore, Overlay


@pytest.fixture
def catalog() -> BuildingCatalog:
    """The base game catalog."""
    return create_default_catalog()


@pytest.fixture
def initial_state() -> GameState:
    """Turn 0 settlement."""
    return GameState.initial()


@pytest.fixture
def reducer(catalog) -> Reducer:
    return Reducer(catalog=catalog)


@pytest.fixture
def store(catalog) -> GameStore:
    """A store with the welcome screen already dismissed."""
    store = GameStore(catalog=catalog)
    store.open_overlays.discard(Overlay.WELCOME)
    return store


@pytest.fixture
def make_state():
    """
    Factory for hand-built states.

    Buildings are laid out along z=0 in the given order; indicator
    overrides replace the baseline snapshot values.
    """
    def _make(kinds=(), **indicators) -> GameState:
        buildings = tuple(
            PlacedBuilding(
                building_id=f"{kind.value}-{i}",
                kind=kind,
                position=GridPosition(x=2 * i - 8, z=0),
            )
            for i, kind in enumerate(kinds)
        )
        return GameState(
            placed_buildings=buildings,
            indicators=IndicatorSnapshot(**indicators),
        )

    return _make


@pytest.fixture
def social_catalog() -> BuildingCatalog:
    """
    Catalog where houses erode happiness and community centres restore it.

    Houses also produce energy so the energy challenge stays quiet while
    the settlement grows.
    """
    overrides = {
        BuildingKind.SUSTAINABLE_HOUSE: EffectVector(community_happiness=-2, energy=3, biodiversity=1),
        BuildingKind.COMMUNITY_CENTER: EffectVector(community_happiness=35, energy=-1),
    }
    definitions = [
        replace(d, effects=overrides[d.kind]) if d.kind in overrides else d
        for d in get_all_building_definitions()
    ]
    return BuildingCatalog(definitions)
