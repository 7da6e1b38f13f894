"""Recursive entity generation.

``generate_entity`` builds an unpersisted record for a type: it asks the
content backend first, fills whatever is left with placeholder synthesis,
links backward references to the immediate parent and recursively
generates required singular forward relations. Nested results come back
as ``PendingChild`` entries next to the data, never inside it.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field
from schemacascade.errors import RecoveryPolicy, UnknownType
from schemacascade.schema.models import EntityDefinition, FieldDefinition, Schema, is_prompt_field
from schemacascade.config.logging import get_logger
from .config import GenerationConfig, resolve_config
from .context import render_schema_context, string_field_pairs
from .invoke import invoke_backend
from .providers.base import ValueRequest

logger = get_logger(__name__)


class GenerationContext(BaseModel):
    """
    Where a generation call sits in the cascade: its immediate parent.

    ``backlink`` names the one backward field that should receive
    ``parent_id``; when None every backward field aimed at the parent does.
    """

    parent_type: str
    parent_data: Dict[str, Any] = Field(default_factory=dict)
    parent_id: Optional[str] = None
    backlink: Optional[str] = None

    def child(self, type_name: str, data: Dict[str, Any]) -> "GenerationContext":
        """Context for generating an entity nested under ``type_name``."""
        return GenerationContext(parent_type=type_name, parent_data=data)


class PendingChild(BaseModel):
    """A nested entity that must be persisted before its owner links to it."""

    target_type: str
    entity: "GeneratedEntity"


class GeneratedEntity(BaseModel):
    """Result of ``generate_entity``: field values plus nested pending children."""

    data: Dict[str, Any] = Field(default_factory=dict)
    pending: Dict[str, PendingChild] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.data and not self.pending


PendingChild.model_rebuild()


def is_plain_string(field: FieldDefinition) -> bool:
    return not field.is_relation and field.type == "string" and not field.enum_values


def build_target_shape(entity: EntityDefinition) -> Dict[str, str]:
    """
    Describe the scalar fields of an entity for the backend.

    Args:
        entity: Entity definition

    Returns:
        Field name to generation instruction
    """
    shape: Dict[str, str] = {}
    for name, field in entity.iter_fields():
        if field.is_relation:
            continue
        if field.enum_values:
            shape[name] = f"One of: {', '.join(field.enum_values)}"
        elif field.type == "string":
            shape[name] = field.prompt or f"Generate a {name}"
        elif is_prompt_field(field):
            shape[name] = field.type
        elif field.type in ("number", "boolean"):
            shape[name] = field.type
    return shape


def build_entity_prompt(
    type_name: str,
    prompt: Optional[str],
    instructions: Optional[str],
    schema_context: Optional[str],
    parent_data: Dict[str, Any],
) -> str:
    parts: List[str] = []
    if prompt and prompt.strip():
        parts.append(prompt)
    if instructions:
        parts.append(f"Context: {instructions}")
    if schema_context:
        parts.append(schema_context)
    parent_fields = string_field_pairs(parent_data)
    if parent_fields:
        parts.append(f"Parent entity: {', '.join(parent_fields)}")
    parts.append(f"Generate a {type_name} entity with the following fields.")
    return "\n".join(parts)


def _synthesize_scalars(
    data: Dict[str, Any],
    type_name: str,
    entity: EntityDefinition,
    prompt: Optional[str],
    full_context: str,
    parent_data: Dict[str, Any],
    config: GenerationConfig,
) -> None:
    """Fill unset plain-string and prompt fields with placeholder values."""
    for name, field in entity.iter_fields():
        if data.get(name) is not None:
            continue
        prompt_field = is_prompt_field(field)
        if not (is_plain_string(field) or prompt_field):
            continue
        value = config.value_generator.generate(
            ValueRequest(
                field_name=name,
                type_name=type_name,
                full_context=full_context,
                hint=field.type if prompt_field else prompt,
                parent_data=parent_data,
            )
        )
        data[name] = [value] if field.is_array else value


def _process_relations(
    result: GeneratedEntity,
    type_name: str,
    entity: EntityDefinition,
    context: GenerationContext,
    schema: Schema,
    depth: int,
    config: GenerationConfig,
) -> None:
    for name, field in entity.iter_fields():
        if not field.is_relation:
            continue
        if (
            field.is_backward_exact
            and field.related_type == context.parent_type
            and context.parent_id
            and context.backlink in (None, name)
        ):
            result.data[name] = context.parent_id
        elif field.is_forward_exact and not field.is_array and not field.is_optional:
            nested = generate_entity(
                field.related_type,
                field.prompt,
                context.child(type_name, result.data),
                schema,
                depth + 1,
                config,
            )
            result.pending[name] = PendingChild(target_type=field.related_type, entity=nested)


def generate_entity(
    type_name: str,
    prompt: Optional[str],
    context: GenerationContext,
    schema: Schema,
    depth: int = 0,
    config: Optional[GenerationConfig] = None,
) -> GeneratedEntity:
    """
    Generate an unpersisted entity of ``type_name``.

    Args:
        type_name: Type to generate
        prompt: Optional generation prompt (usually the relation field's prompt)
        context: Immediate parent of the entity being generated
        schema: Schema
        depth: Current recursion depth
        config: Generation configuration (process default when None)

    Returns:
        GeneratedEntity; empty once ``depth`` reaches ``config.max_depth``

    Raises:
        UnknownType: If ``type_name`` is not in the schema
    """
    config = resolve_config(config)
    if depth >= config.max_depth:
        logger.debug(f"Depth ceiling {config.max_depth} reached at {type_name}")
        return GeneratedEntity()

    entity = schema.lookup(type_name)
    if entity is None:
        raise UnknownType(type_name)

    parent = schema.lookup(context.parent_type)
    instructions = parent.instructions if parent else None
    schema_context = render_schema_context(parent.get("$context")) if parent else None

    generated = invoke_backend(
        config,
        type_name,
        build_target_shape(entity),
        build_entity_prompt(type_name, prompt, instructions, schema_context, context.parent_data),
        RecoveryPolicy.FALLBACK,
    )

    result = GeneratedEntity(data=dict(generated) if generated else {})
    source = "backend" if generated else "placeholder"

    context_parts = [p for p in (prompt, instructions, schema_context) if p and p.strip()]
    parent_fields = string_field_pairs(context.parent_data)
    if parent_fields:
        context_parts.append(", ".join(parent_fields))
    _synthesize_scalars(
        result.data,
        type_name,
        entity,
        prompt,
        " | ".join(context_parts),
        context.parent_data,
        config,
    )

    _process_relations(result, type_name, entity, context, schema, depth, config)
    logger.debug(
        f"Generated {type_name} at depth {depth} from {source} "
        f"({len(result.data)} fields, {len(result.pending)} pending)"
    )
    return result
