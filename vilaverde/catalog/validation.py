"""
Catalog Validation - Load-time checks for building catalogs.

Validates that:
1. Every definition has a name and description
2. Kinds are not declared twice
3. Effect vectors only carry integer deltas
4. Kinds referenced by progression and challenges exist
"""

from __future__ import annotations
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING

from .buildings import BuildingKind

if TYPE_CHECKING:
    from .buildings import BuildingCatalog, BuildingDefinition


# Kinds the unlock rules and challenge predicates refer to by identity
REFERENCED_KINDS = (
    BuildingKind.SUSTAINABLE_HOUSE,
    BuildingKind.SOLAR_PANEL_ARRAY,
    BuildingKind.WATER_TREATMENT,
    BuildingKind.WASTE_COLLECTION,
    BuildingKind.COMMUNITY_CENTER,
)


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[str]
    warnings: list[str]


def validate_catalog(catalog: BuildingCatalog) -> ValidationResult:
    """
    Validate a building catalog.

    Returns ValidationResult with errors and warnings.
    """
    errors: list[str] = []
    warnings: list[str] = []

    seen: set[BuildingKind] = set()
    for definition in catalog.declared:
        if definition.kind in seen:
            errors.append(f"Building kind '{definition.kind.value}' declared more than once")
        seen.add(definition.kind)
        errors.extend(_validate_definition(definition))

    for kind in REFERENCED_KINDS:
        if kind not in seen:
            warnings.append(
                f"Catalog has no '{kind.value}'; rules referring to it will never fire"
            )

    if not seen:
        errors.append("Catalog defines no buildings")

    return ValidationResult(valid=len(errors) == 0, errors=errors, warnings=warnings)


def _validate_definition(definition: BuildingDefinition) -> list[str]:
    errors = []
    label = definition.kind.value if isinstance(definition.kind, BuildingKind) else repr(definition.kind)

    if not isinstance(definition.kind, BuildingKind):
        errors.append(f"Definition {label} has an invalid kind")
    if not definition.name:
        errors.append(f"Building '{label}' has no name")
    if not definition.description:
        errors.append(f"Building '{label}' has no description")

    for f in fields(definition.effects):
        value = getattr(definition.effects, f.name)
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            errors.append(f"Building '{label}' effect '{f.name}' is not an integer")

    return errors
