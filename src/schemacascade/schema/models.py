"""Schema model: entity definitions and their fields."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterator, List, Literal, Optional, Tuple
from pydantic import BaseModel, Field, model_validator


PRIMITIVE_TYPES = frozenset(
    ["string", "number", "boolean", "date", "datetime", "json", "markdown", "url"]
)

INSTRUCTIONS_KEY = "$instructions"
CONTEXT_KEY = "$context"


class RelationOperator(str, Enum):
    """Relationship operators. Only the exact ones are acted on by generation."""

    FORWARD_EXACT = "->"
    BACKWARD_EXACT = "<-"
    FORWARD_FUZZY = "~>"
    BACKWARD_FUZZY = "<~"


class FieldDefinition(BaseModel):
    """A single field of an entity type."""

    name: str
    type: str = "string"
    is_relation: bool = False
    operator: Optional[RelationOperator] = None
    direction: Optional[Literal["forward", "backward"]] = None
    related_type: Optional[str] = None
    union_types: Optional[List[str]] = None
    is_array: bool = False
    is_optional: bool = False
    prompt: Optional[str] = None
    enum_values: Optional[List[str]] = None

    @model_validator(mode="after")
    def fill_relation_defaults(self) -> "FieldDefinition":
        """Derive direction and related type for relation fields."""
        if not self.is_relation:
            return self
        if self.related_type is None:
            self.related_type = self.union_types[0] if self.union_types else self.type
        if self.direction is None and self.operator is not None:
            self.direction = (
                "backward"
                if self.operator in (RelationOperator.BACKWARD_EXACT, RelationOperator.BACKWARD_FUZZY)
                else "forward"
            )
        return self

    @property
    def is_forward_exact(self) -> bool:
        return (
            self.is_relation
            and self.operator == RelationOperator.FORWARD_EXACT
            and self.direction == "forward"
        )

    @property
    def is_backward_exact(self) -> bool:
        return (
            self.is_relation
            and self.operator == RelationOperator.BACKWARD_EXACT
            and self.direction == "backward"
        )

    @property
    def has_union_types(self) -> bool:
        return bool(self.union_types)

    @property
    def generation_target(self) -> Optional[str]:
        """Type to generate for this relation: first union type, else the related type."""
        if self.union_types:
            return self.union_types[0]
        return self.related_type


def is_primitive_type(type_name: str) -> bool:
    return type_name in PRIMITIVE_TYPES


def is_prompt_field(field: FieldDefinition) -> bool:
    """
    Check whether a field's declared type is a free-text generation prompt.

    A prompt field is a non-relation field whose type is neither a
    primitive nor an enum, e.g. ``"Describe the product (30 chars)"``.
    """
    if field.is_relation or field.enum_values:
        return False
    return bool(field.type) and not is_primitive_type(field.type)


class EntityDefinition(BaseModel):
    """An entity type: ordered fields plus a metadata bag."""

    name: str
    fields: Dict[str, FieldDefinition] = Field(default_factory=dict)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def name_fields(cls, values: Any) -> Any:
        """Allow field dicts without an explicit ``name`` key."""
        if isinstance(values, dict) and isinstance(values.get("fields"), dict):
            named = {}
            for field_name, raw in values["fields"].items():
                if isinstance(raw, dict) and "name" not in raw:
                    raw = {**raw, "name": field_name}
                named[field_name] = raw
            values = {**values, "fields": named}
        return values

    def iter_fields(self) -> Iterator[Tuple[str, FieldDefinition]]:
        """Iterate ``(name, field)`` pairs in declaration order."""
        return iter(self.fields.items())

    def get(self, key: str, default: Any = None) -> Any:
        """Read a metadata value such as ``$instructions``."""
        return self.metadata.get(key, default)

    @property
    def instructions(self) -> Optional[str]:
        value = self.metadata.get(INSTRUCTIONS_KEY)
        return value if isinstance(value, str) and value else None

    @property
    def context_paths(self) -> List[str]:
        value = self.metadata.get(CONTEXT_KEY)
        if isinstance(value, str):
            return [value] if value else []
        if isinstance(value, list):
            return [str(v) for v in value]
        return []


class Schema(BaseModel):
    """Registry of entity types keyed by name."""

    entities: Dict[str, EntityDefinition] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def name_entities(cls, values: Any) -> Any:
        """Allow entity dicts without an explicit ``name`` key."""
        if isinstance(values, dict) and isinstance(values.get("entities"), dict):
            named = {}
            for type_name, raw in values["entities"].items():
                if isinstance(raw, dict) and "name" not in raw:
                    raw = {**raw, "name": type_name}
                named[type_name] = raw
            values = {**values, "entities": named}
        return values

    def lookup(self, type_name: Optional[str]) -> Optional[EntityDefinition]:
        if type_name is None:
            return None
        return self.entities.get(type_name)

    def __contains__(self, type_name: str) -> bool:
        return type_name in self.entities
