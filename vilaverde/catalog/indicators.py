"""
Indicator Info - Pedagogical metadata shown by the indicator info panel.

Explains what each indicator means, which buildings raise it and
what makes it worse.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum

from .buildings import BuildingKind


class Indicator(str, Enum):
    """The seven indicators of an IndicatorSnapshot."""
    AIR_QUALITY = "air_quality"
    WATER_QUALITY = "water_quality"
    COMMUNITY_HAPPINESS = "community_happiness"
    BIODIVERSITY = "biodiversity"
    ENERGY_BALANCE = "energy_balance"
    FOOD_SUPPLY = "food_supply"
    POPULATION = "population"


@dataclass(frozen=True)
class IndicatorInfo:
    title: str
    explanation: str
    how_to_improve: str
    positive_buildings: tuple[BuildingKind, ...] = ()
    what_worsens: str | None = None
    negative_buildings: tuple[BuildingKind, ...] = field(default_factory=tuple)


INDICATOR_INFO: dict[Indicator, IndicatorInfo] = {
    Indicator.AIR_QUALITY: IndicatorInfo(
        title="Air Quality",
        explanation=(
            "How clean the village air is. Clean air is vital for the health of people "
            "and ecosystems. Industrial pollution and burning fossil fuels make it worse."
        ),
        how_to_improve="Invest in reforestation areas and clean energy such as solar panels.",
        positive_buildings=(BuildingKind.REFORESTATION_AREA, BuildingKind.SOLAR_PANEL_ARRAY),
        what_worsens="Heavy energy use from non-renewable sources pollutes the air.",
    ),
    Indicator.WATER_QUALITY: IndicatorInfo(
        title="Water Quality",
        explanation=(
            "How clean the village waters are. Pure water is essential for drinking, "
            "farming and aquatic life. Dumping waste and poor sanitation contaminate it."
        ),
        how_to_improve=(
            "Build water treatment plants. Well-managed community gardens also help "
            "filter surface water."
        ),
        positive_buildings=(BuildingKind.WATER_TREATMENT, BuildingKind.COMMUNITY_GARDEN),
        what_worsens="Buildings without proper sewage treatment and careless waste disposal near rivers.",
    ),
    Indicator.COMMUNITY_HAPPINESS: IndicatorInfo(
        title="Community Happiness",
        explanation=(
            "The overall contentment of the inhabitants. Good housing, food, leisure, "
            "culture and a healthy environment all contribute."
        ),
        how_to_improve=(
            "Build sustainable houses, community centres, gardens, schools and health "
            "posts. Make sure energy and food needs are met."
        ),
        positive_buildings=(
            BuildingKind.SUSTAINABLE_HOUSE,
            BuildingKind.COMMUNITY_CENTER,
            BuildingKind.COMMUNITY_GARDEN,
            BuildingKind.REFORESTATION_AREA,
            BuildingKind.SCHOOL,
            BuildingKind.HEALTH_POST,
        ),
        what_worsens="Lack of housing, food shortages, pollution and no access to education or health care.",
    ),
    Indicator.BIODIVERSITY: IndicatorInfo(
        title="Biodiversity",
        explanation=(
            "The variety of plant and animal life in the village. Rich ecosystems are "
            "more resilient. Deforestation and pollution reduce biodiversity."
        ),
        how_to_improve="Create reforestation areas, keep community gardens and protect water and air quality.",
        positive_buildings=(BuildingKind.REFORESTATION_AREA, BuildingKind.COMMUNITY_GARDEN),
        what_worsens="Clearing native vegetation for unplanned construction, and pollution.",
    ),
    Indicator.ENERGY_BALANCE: IndicatorInfo(
        title="Energy Balance",
        explanation=(
            "The difference between energy produced and consumed. A positive balance "
            "from renewable sources is ideal."
        ),
        how_to_improve="Install solar panel arrays and promote energy efficiency.",
        positive_buildings=(BuildingKind.SOLAR_PANEL_ARRAY,),
        what_worsens="Many energy-consuming buildings without matching generation.",
        negative_buildings=(
            BuildingKind.SUSTAINABLE_HOUSE,
            BuildingKind.WATER_TREATMENT,
            BuildingKind.WASTE_COLLECTION,
            BuildingKind.COMMUNITY_CENTER,
            BuildingKind.SCHOOL,
            BuildingKind.HEALTH_POST,
        ),
    ),
    Indicator.FOOD_SUPPLY: IndicatorInfo(
        title="Food Supply",
        explanation="The village's capacity to feed its inhabitants. Food security is fundamental.",
        how_to_improve="Develop community gardens.",
        positive_buildings=(BuildingKind.COMMUNITY_GARDEN,),
        what_worsens="A growing population without more food production.",
    ),
    Indicator.POPULATION: IndicatorInfo(
        title="Population",
        explanation="The number of inhabitants. Growth brings new challenges and opportunities.",
        how_to_improve=(
            "Population grows with every sustainable house. Manage growth so it does "
            "not overload resources and infrastructure."
        ),
        positive_buildings=(BuildingKind.SUSTAINABLE_HOUSE,),
        what_worsens=(
            "Not directly applicable, but unchecked growth hurts other indicators "
            "without sustainable infrastructure."
        ),
    ),
}
