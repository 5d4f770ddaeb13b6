"""
Progression Unlocker - Derives newly available building kinds and terrain.

Every rule is a one-way ratchet: a kind once available is never removed,
and terrain never shrinks. Rules are evaluated against the availability
set as it was before the call, so a kind unlocked by one rule cannot
enable another rule in the same turn.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Sequence

from ..catalog import BuildingKind
from .indicators import IndicatorSnapshot
from .rules import GameRules, DEFAULT_RULES
from .state import PlacedBuilding


@dataclass(frozen=True)
class UnlockContext:
    """Facts the unlock rules look at."""
    total_buildings: int
    house_count: int
    indicators: IndicatorSnapshot
    rules: GameRules


@dataclass(frozen=True)
class UnlockRule:
    """Adds `kind` when `condition` holds."""
    name: str
    kind: BuildingKind
    condition: Callable[[UnlockContext], bool]


# Declared order is the order kinds appear in `newly_unlocked`
UNLOCK_RULES: tuple[UnlockRule, ...] = (
    UnlockRule(
        "solar",
        BuildingKind.SOLAR_PANEL_ARRAY,
        lambda c: c.total_buildings >= 2,
    ),
    UnlockRule(
        "water_treatment",
        BuildingKind.WATER_TREATMENT,
        lambda c: c.house_count >= 1 and (
            c.indicators.water_quality < 45
            or c.indicators.population >= c.rules.population_per_house * 2
        ),
    ),
    UnlockRule(
        "waste_collection",
        BuildingKind.WASTE_COLLECTION,
        lambda c: c.house_count >= 3,
    ),
    UnlockRule(
        "reforestation",
        BuildingKind.REFORESTATION_AREA,
        lambda c: c.indicators.biodiversity < 50 and c.total_buildings >= 4,
    ),
    UnlockRule(
        "community_center",
        BuildingKind.COMMUNITY_CENTER,
        lambda c: c.indicators.community_happiness < 60 and c.house_count >= 3,
    ),
    UnlockRule(
        "school",
        BuildingKind.SCHOOL,
        lambda c: c.indicators.population >= c.rules.population_per_house * 3,
    ),
    UnlockRule(
        "health_post",
        BuildingKind.HEALTH_POST,
        lambda c: c.indicators.population >= c.rules.population_per_house * 2,
    ),
)

# Buildings that count towards terrain expansion
TERRAIN_KINDS = frozenset({BuildingKind.SUSTAINABLE_HOUSE, BuildingKind.COMMUNITY_CENTER})


@dataclass(frozen=True)
class UnlockResult:
    available: frozenset[BuildingKind]
    terrain: int
    newly_unlocked: tuple[BuildingKind, ...] = field(default_factory=tuple)


def expected_terrain(buildings: Sequence[PlacedBuilding], rules: GameRules = DEFAULT_RULES) -> int:
    """Terrain rings earned by houses and community centres."""
    strategic = sum(1 for b in buildings if b.kind in TERRAIN_KINDS)
    return strategic // rules.terrain_unlock_threshold


def derive_unlocks(
    buildings: Sequence[PlacedBuilding],
    indicators: IndicatorSnapshot,
    previous_available: frozenset[BuildingKind] | set[BuildingKind],
    previous_terrain: int,
    rules: GameRules = DEFAULT_RULES,
) -> UnlockResult:
    """
    Compute the availability set and terrain after a turn.

    `indicators` is the freshly recomputed snapshot for `buildings`.
    """
    context = UnlockContext(
        total_buildings=len(buildings),
        house_count=sum(1 for b in buildings if b.kind == BuildingKind.SUSTAINABLE_HOUSE),
        indicators=indicators,
        rules=rules,
    )

    newly_unlocked: list[BuildingKind] = []
    for rule in UNLOCK_RULES:
        if rule.kind in previous_available or rule.kind in newly_unlocked:
            continue
        if rule.condition(context):
            newly_unlocked.append(rule.kind)

    return UnlockResult(
        available=frozenset(previous_available) | frozenset(newly_unlocked),
        terrain=max(previous_terrain, expected_terrain(buildings, rules)),
        newly_unlocked=tuple(newly_unlocked),
    )
