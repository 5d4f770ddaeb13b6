"""
Indicator Calculator - Pure reducer from placed buildings to indicators.

The snapshot is recomputed wholesale every turn, never patched.
All effects are additive, so the result does not depend on
placement order: the same multiset of buildings always yields
the same snapshot.
"""

from __future__ import annotations
from dataclasses import dataclass, asdict
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Sequence

from ..catalog import BuildingKind, EffectField, Indicator, create_default_catalog
from .rules import GameRules, DEFAULT_RULES

if TYPE_CHECKING:
    from ..catalog import BuildingCatalog
    from .state import PlacedBuilding, HistoricDataPoint


# Effect field -> snapshot field it accumulates into
EFFECT_TARGETS: dict[EffectField, Indicator] = {
    EffectField.AIR_QUALITY: Indicator.AIR_QUALITY,
    EffectField.WATER_QUALITY: Indicator.WATER_QUALITY,
    EffectField.COMMUNITY_HAPPINESS: Indicator.COMMUNITY_HAPPINESS,
    EffectField.BIODIVERSITY: Indicator.BIODIVERSITY,
    EffectField.ENERGY: Indicator.ENERGY_BALANCE,
    EffectField.FOOD: Indicator.FOOD_SUPPLY,
}

LEVEL_INDICATORS = (
    Indicator.AIR_QUALITY,
    Indicator.WATER_QUALITY,
    Indicator.COMMUNITY_HAPPINESS,
    Indicator.BIODIVERSITY,
    Indicator.FOOD_SUPPLY,
)


@dataclass(frozen=True)
class IndicatorSnapshot:
    """Settlement indicators at a point in time."""
    air_quality: int = 50
    water_quality: int = 50
    community_happiness: int = 50
    biodiversity: int = 30
    energy_balance: int = 0  # flow, clamped to a wide symmetric range
    food_supply: int = 20
    population: int = 0  # unclamped, derived from house count

    def get(self, indicator: Indicator | str) -> int:
        return getattr(self, Indicator(indicator).value)

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


INITIAL_INDICATORS = IndicatorSnapshot()


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def recompute_indicators(
    buildings: Iterable[PlacedBuilding],
    catalog: BuildingCatalog | None = None,
    rules: GameRules = DEFAULT_RULES,
) -> IndicatorSnapshot:
    """
    Recompute the full indicator snapshot from placed buildings.

    Starts from INITIAL_INDICATORS, adds every non-zero effect of every
    building, adds population per house, then clamps.
    """
    catalog = catalog or create_default_catalog()
    totals = INITIAL_INDICATORS.to_dict()

    for building in buildings:
        definition = catalog.definition_of(building.kind)
        for effect_field, delta in definition.effects.items():
            totals[EFFECT_TARGETS[effect_field].value] += delta
        if building.kind == BuildingKind.SUSTAINABLE_HOUSE:
            totals[Indicator.POPULATION.value] += rules.population_per_house

    for indicator in LEVEL_INDICATORS:
        totals[indicator.value] = _clamp(totals[indicator.value], rules.min_level, rules.max_level)
    totals[Indicator.ENERGY_BALANCE.value] = _clamp(
        totals[Indicator.ENERGY_BALANCE.value], rules.min_energy, rules.max_energy
    )

    return IndicatorSnapshot(**totals)


# =============================================================================
# History helpers (dashboard)
# =============================================================================

class Trend(Enum):
    UP = "up"
    DOWN = "down"
    FLAT = "flat"


def indicator_trend(history: Sequence[HistoricDataPoint], indicator: Indicator | str) -> Trend:
    """Direction of the last change of an indicator."""
    if len(history) < 2:
        return Trend.FLAT
    current = history[-1].indicators.get(indicator)
    previous = history[-2].indicators.get(indicator)
    if current > previous:
        return Trend.UP
    if current < previous:
        return Trend.DOWN
    return Trend.FLAT


def recent_history(history: Sequence[HistoricDataPoint], last: int = 5) -> list[HistoricDataPoint]:
    """The most recent `last` history entries, oldest first."""
    if last <= 0:
        return []
    return list(history[-last:])
