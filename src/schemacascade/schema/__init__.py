"""Schema definitions consumed by the generation core."""

from .models import (
    CONTEXT_KEY,
    INSTRUCTIONS_KEY,
    PRIMITIVE_TYPES,
    EntityDefinition,
    FieldDefinition,
    RelationOperator,
    Schema,
    is_primitive_type,
    is_prompt_field,
)

__all__ = [
    "CONTEXT_KEY",
    "INSTRUCTIONS_KEY",
    "PRIMITIVE_TYPES",
    "EntityDefinition",
    "FieldDefinition",
    "RelationOperator",
    "Schema",
    "is_primitive_type",
    "is_prompt_field",
]
