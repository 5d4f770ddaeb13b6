"""
Building Catalog - Static registry of building kinds and their effects.

The catalog is loaded once and never mutated at runtime.
Effects are fixed-schema vectors rather than free-form dicts so that
every indicator a building touches is checked at load time.

Flows vs. levels:
- energy and food feed the energy_balance / food_supply flows
- all other effect fields shift a level indicator
"""

from __future__ import annotations
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Iterator, Mapping


class BuildingKind(str, Enum):
    """Fixed building archetypes."""
    SUSTAINABLE_HOUSE = "sustainable_house"
    COMMUNITY_GARDEN = "community_garden"
    SOLAR_PANEL_ARRAY = "solar_panel_array"
    WATER_TREATMENT = "water_treatment"
    WASTE_COLLECTION = "waste_collection"
    REFORESTATION_AREA = "reforestation_area"
    COMMUNITY_CENTER = "community_center"
    SCHOOL = "school"
    HEALTH_POST = "health_post"


class EffectField(Enum):
    """Closed set of fields an effect vector may carry."""
    AIR_QUALITY = "air_quality"
    WATER_QUALITY = "water_quality"
    COMMUNITY_HAPPINESS = "community_happiness"
    BIODIVERSITY = "biodiversity"
    ENERGY = "energy"
    FOOD = "food"


class UnknownBuildingKind(KeyError):
    """Raised when a kind is not part of the catalog."""

    def __init__(self, kind: Any):
        self.kind = kind
        super().__init__(f"Unknown building kind: {kind!r}")


class CatalogValidationError(Exception):
    """Raised when catalog validation fails."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Catalog validation failed with {len(errors)} error(s)")


@dataclass(frozen=True)
class EffectVector:
    """
    Signed indicator deltas applied once per placed building.

    None means the building does not touch that indicator.
    """
    air_quality: int | None = None
    water_quality: int | None = None
    community_happiness: int | None = None
    biodiversity: int | None = None
    energy: int | None = None  # flow -> energy_balance
    food: int | None = None  # flow -> food_supply

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> EffectVector:
        """
        Build an effect vector from a plain mapping.

        Raises CatalogValidationError on unknown keys or non-integer values.
        """
        allowed = {f.value for f in EffectField}
        errors = []
        for key, value in data.items():
            if key not in allowed:
                errors.append(f"Unknown effect field '{key}'")
            elif value is not None and (isinstance(value, bool) or not isinstance(value, int)):
                errors.append(f"Effect '{key}' must be an integer, got {value!r}")
        if errors:
            raise CatalogValidationError(errors)
        return cls(**data)

    def items(self) -> Iterator[tuple[EffectField, int]]:
        """Iterate over the non-zero fields."""
        for f in fields(self):
            value = getattr(self, f.name)
            if value:
                yield EffectField(f.name), value

    def to_dict(self) -> dict[str, int]:
        return {field_.value: value for field_, value in self.items()}


@dataclass(frozen=True)
class BuildingDefinition:
    """
    Static definition of a building kind.

    Note: This is the definition, not a placed instance.
    Placed instances live in GameState.placed_buildings.
    """
    kind: BuildingKind
    name: str
    description: str
    effects: EffectVector

    @property
    def energy_cost(self) -> int:
        """Energy this building consumes (0 for producers and neutral ones)."""
        if self.effects.energy is not None and self.effects.energy < 0:
            return -self.effects.energy
        return 0


class BuildingCatalog:
    """
    Registry mapping building kinds to their definitions.

    Validated on construction; raises CatalogValidationError if invalid.
    Iteration follows declaration order, which is also build-menu order.
    """

    def __init__(self, definitions: list[BuildingDefinition], validate: bool = True):
        self._definitions: dict[BuildingKind, BuildingDefinition] = {}
        self._declared = list(definitions)
        for definition in definitions:
            self._definitions.setdefault(definition.kind, definition)

        if validate:
            from .validation import validate_catalog

            result = validate_catalog(self)
            if not result.valid:
                raise CatalogValidationError(result.errors)

    def __iter__(self) -> Iterator[BuildingDefinition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, kind: object) -> bool:
        try:
            return self.coerce_kind(kind) in self._definitions
        except UnknownBuildingKind:
            return False

    @property
    def kinds(self) -> list[BuildingKind]:
        return list(self._definitions)

    @property
    def declared(self) -> list[BuildingDefinition]:
        """All definitions as declared, including duplicates (for validation)."""
        return list(self._declared)

    def coerce_kind(self, value: Any) -> BuildingKind:
        """Turn a kind or its string value into a BuildingKind."""
        if isinstance(value, BuildingKind):
            return value
        try:
            return BuildingKind(value)
        except ValueError:
            raise UnknownBuildingKind(value) from None

    def definition_of(self, kind: BuildingKind | str) -> BuildingDefinition:
        """Get the definition for a kind. Raises UnknownBuildingKind."""
        coerced = self.coerce_kind(kind)
        try:
            return self._definitions[coerced]
        except KeyError:
            raise UnknownBuildingKind(kind) from None

    def sort_kinds(self, kinds) -> list[BuildingKind]:
        """Order a collection of kinds by catalog order."""
        order = {kind: idx for idx, kind in enumerate(self._definitions)}
        return sorted(kinds, key=lambda k: order.get(k, len(order)))


def _define(kind: BuildingKind, name: str, description: str, **effects: int) -> BuildingDefinition:
    return BuildingDefinition(
        kind=kind,
        name=name,
        description=description,
        effects=EffectVector.from_mapping(effects),
    )


def get_all_building_definitions() -> list[BuildingDefinition]:
    """Definitions for every building in the base game."""
    return [
        _define(
            BuildingKind.SUSTAINABLE_HOUSE,
            "Sustainable House",
            "Ecological housing that minimises environmental impact and promotes well-being.",
            community_happiness=5, energy=-1, biodiversity=1,
        ),
        _define(
            BuildingKind.COMMUNITY_GARDEN,
            "Community Garden",
            "Grows fresh food locally, strengthens community ties and improves biodiversity.",
            food=10, community_happiness=3, biodiversity=5, water_quality=2,
        ),
        _define(
            BuildingKind.SOLAR_PANEL_ARRAY,
            "Solar Panel Array",
            "Generates clean energy from the sun, reducing air pollution.",
            energy=15, air_quality=5,
        ),
        _define(
            BuildingKind.WATER_TREATMENT,
            "Water Treatment Plant",
            "Purifies water so it is safe for reuse and protects aquatic ecosystems.",
            water_quality=20, energy=-2,
        ),
        _define(
            BuildingKind.WASTE_COLLECTION,
            "Recycling Centre",
            "Manages waste effectively, promoting recycling and composting.",
            air_quality=3, water_quality=3, community_happiness=2, energy=-1,
        ),
        _define(
            BuildingKind.REFORESTATION_AREA,
            "Reforestation Area",
            "Plants native trees to raise biodiversity, clean the air and create green spaces.",
            biodiversity=15, air_quality=8, community_happiness=3,
        ),
        _define(
            BuildingKind.COMMUNITY_CENTER,
            "Community Centre",
            "A space for meetings, learning and culture that strengthens social cohesion.",
            community_happiness=10, energy=-1,
        ),
        _define(
            BuildingKind.SCHOOL,
            "School",
            "Promotes education and development, raising knowledge and overall happiness.",
            community_happiness=8, energy=-2,
        ),
        _define(
            BuildingKind.HEALTH_POST,
            "Health Post",
            "Provides basic health care, improving the well-being of the population.",
            community_happiness=10, energy=-2,
        ),
    ]


INITIAL_AVAILABLE_BUILDINGS: frozenset[BuildingKind] = frozenset({
    BuildingKind.SUSTAINABLE_HOUSE,
    BuildingKind.COMMUNITY_GARDEN,
})

_default_catalog: BuildingCatalog | None = None


def create_default_catalog() -> BuildingCatalog:
    """
    Get the base game catalog.

    Built and validated once, then shared; the catalog is immutable.
    """
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = BuildingCatalog(get_all_building_definitions())
    return _default_catalog
