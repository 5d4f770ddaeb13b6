"""
Catalog - Static building definitions and indicator metadata.

Immutable, loaded once at startup.
"""

from .buildings import (
    BuildingKind,
    EffectField,
    EffectVector,
    BuildingDefinition,
    BuildingCatalog,
    UnknownBuildingKind,
    CatalogValidationError,
    INITIAL_AVAILABLE_BUILDINGS,
    create_default_catalog,
    get_all_building_definitions,
)
from .indicators import Indicator, IndicatorInfo, INDICATOR_INFO
from .validation import ValidationResult, validate_catalog

__all__ = [
    "BuildingKind",
    "EffectField",
    "EffectVector",
    "BuildingDefinition",
    "BuildingCatalog",
    "UnknownBuildingKind",
    "CatalogValidationError",
    "INITIAL_AVAILABLE_BUILDINGS",
    "create_default_catalog",
    "get_all_building_definitions",
    "Indicator",
    "IndicatorInfo",
    "INDICATOR_INFO",
    "ValidationResult",
    "validate_catalog",
]
