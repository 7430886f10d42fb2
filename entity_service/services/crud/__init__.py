"""
CRUD building blocks used by Service.

Provides:
- normalize: Identifier and attribute-set normalization
- references: Entity -> primary/unique key resolution
- unique_keys: Identity and predicate clause builders
- soft_delete: Soft delete, restore and active filters
- factory: ModelFactory for generated rows
"""

from .normalize import (
    flatten,
    normalize,
    unique,
    to_attributes,
    entity_attributes,
    resolve_value,
)
from .references import (
    is_entity,
    primary_key_of,
    attribute_of,
    resolve_id,
    resolve_ids,
    resolve_unique,
    resolve_unique_keys,
)
from .unique_keys import (
    MISSING,
    OPERATORS,
    primary_key_name,
    declared_unique_keys,
    identity_columns,
    values_for_column,
    build_match_clause,
    build_exclusion_clause,
    build_attribute_clause,
    build_predicates,
)
from .soft_delete import (
    supports_soft_delete,
    filter_active,
    filter_trashed,
    persist,
    soft_delete,
    restore_entity,
    hard_delete,
)
from .factory import ModelFactory, State

__all__ = [
    # Normalization
    "flatten",
    "normalize",
    "unique",
    "to_attributes",
    "entity_attributes",
    "resolve_value",
    # References
    "is_entity",
    "primary_key_of",
    "attribute_of",
    "resolve_id",
    "resolve_ids",
    "resolve_unique",
    "resolve_unique_keys",
    # Clause builders
    "MISSING",
    "OPERATORS",
    "primary_key_name",
    "declared_unique_keys",
    "identity_columns",
    "values_for_column",
    "build_match_clause",
    "build_exclusion_clause",
    "build_attribute_clause",
    "build_predicates",
    # Soft delete
    "supports_soft_delete",
    "filter_active",
    "filter_trashed",
    "persist",
    "soft_delete",
    "restore_entity",
    "hard_delete",
    # Factories
    "ModelFactory",
    "State",
]
