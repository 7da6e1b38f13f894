"""Forward-relationship materialization.

Runs once the owning entity has an identity: every forward-exact (``->``)
field that is still empty is either generated, persisted and linked, or
left alone according to ``should_auto_generate``.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field
from schemacascade.schema.models import EntityDefinition, FieldDefinition, Schema
from schemacascade.store.base import ID_KEY, Store
from schemacascade.verbs import VerbRegistry, get_verb_registry
from schemacascade.config.logging import get_logger
from .config import GenerationConfig, resolve_config
from .entity import GeneratedEntity, GenerationContext, generate_entity

logger = get_logger(__name__)

MATCHED_TYPE_KEY = "$matchedType"


class PendingRelation(BaseModel):
    """A link row the caller creates once the owner is persisted."""

    field_name: str
    target_type: str
    target_id: str


class ForwardResolution(BaseModel):
    """Output of ``resolve_forward_exact``."""

    data: Dict[str, Any]
    pending_relations: List[PendingRelation] = Field(default_factory=list)


def backward_refs_to(target: EntityDefinition, owner_type: str) -> List[str]:
    """Names of backward-exact fields on ``target`` pointing at ``owner_type``."""
    return [
        name
        for name, field in target.iter_fields()
        if field.is_backward_exact and field.related_type == owner_type
    ]


def find_backward_counterpart(
    target: EntityDefinition,
    owner_type: str,
    field_name: str,
    verbs: Optional[VerbRegistry] = None,
) -> Optional[str]:
    """
    Find the field on ``target`` that mirrors ``owner_type.field_name``.

    When several backward fields point at the owner, the one named after
    the reverse verb of the forward field wins (``manager`` -> ``managedBy``),
    then the one named after the owner type, then the first declared.
    """
    candidates = backward_refs_to(target, owner_type)
    if len(candidates) <= 1:
        return candidates[0] if candidates else None

    verbs = verbs or get_verb_registry()
    reverse = verbs.derive_reverse_verb(verbs.field_name_to_verb(field_name))
    owner_name = owner_type[:1].lower() + owner_type[1:]
    for preferred in (reverse, owner_name):
        if preferred in candidates:
            return preferred
    return candidates[0]


def has_required_scalar_fields(target: EntityDefinition) -> bool:
    return any(not f.is_relation and not f.is_optional for _, f in target.iter_fields())


def should_auto_generate(
    target: EntityDefinition,
    owner_type: str,
    field: FieldDefinition,
    verbs: Optional[VerbRegistry] = None,
) -> bool:
    """
    Decide whether an empty forward array relation gets a generated entity.

    A target that points back at the owner and has required scalars is
    skipped, since it is expected to be created from its own side. Union
    relations always generate their first type.

    Args:
        target: Definition of the type that would be generated
        owner_type: Type owning the relation field
        field: The forward relation field
        verbs: Verb tables for locating the backward counterpart

    Returns:
        True if the target should be generated
    """
    has_backward_ref = find_backward_counterpart(target, owner_type, field.name, verbs) is not None
    required_scalars = has_required_scalar_fields(target)
    has_union = field.has_union_types

    should_skip = has_backward_ref and required_scalars and not has_union
    return not should_skip and (
        has_backward_ref or bool(field.prompt) or not required_scalars or has_union
    )


def resolve_nested_pending(
    generated: GeneratedEntity,
    entity: EntityDefinition,
    schema: Schema,
    store: Store,
) -> Dict[str, Any]:
    """
    Persist every pending child of a generated entity, depth first.

    Args:
        generated: Result of ``generate_entity``
        entity: Definition of the generated entity's type
        schema: Schema
        store: Store receiving the children

    Returns:
        Plain record with child identities in place of pending entries
    """
    resolved = dict(generated.data)
    for field_name, pending in generated.pending.items():
        related = schema.lookup(pending.target_type)
        if related is None:
            continue
        child_data = resolve_nested_pending(pending.entity, related, schema, store)
        created = store.create(pending.target_type, None, child_data)
        resolved[field_name] = created[ID_KEY]
        logger.info(f"Created nested {pending.target_type} {created[ID_KEY]} for {entity.name}.{field_name}")
    return resolved


def resolve_forward_exact(
    type_name: str,
    data: Dict[str, Any],
    entity: EntityDefinition,
    schema: Schema,
    store: Store,
    owner_id: str,
    config: Optional[GenerationConfig] = None,
) -> ForwardResolution:
    """
    Auto-generate and link the targets of empty forward-exact fields.

    Fields are processed in declaration order. Array targets are persisted
    and returned as PendingRelations; singular targets are stored inline.

    Args:
        type_name: Owner type
        data: Owner data (not yet persisted)
        entity: Owner definition
        schema: Schema
        store: Store receiving generated targets
        owner_id: Identity already assigned to the owner
        config: Generation configuration (process default when None)

    Returns:
        ForwardResolution with updated data and relation rows to create
    """
    config = resolve_config(config)
    resolved = dict(data)
    pending_relations: List[PendingRelation] = []

    for field_name, field in entity.iter_fields():
        if not field.is_forward_exact:
            continue

        current = resolved.get(field_name)
        if current is not None:
            if field.is_array and isinstance(current, list):
                for target_id in current:
                    pending_relations.append(
                        PendingRelation(
                            field_name=field_name,
                            target_type=field.related_type,
                            target_id=target_id,
                        )
                    )
            continue

        if field.is_optional:
            continue

        generate_type = field.generation_target if field.is_array else field.related_type
        related = schema.lookup(generate_type)
        if field.is_array:
            if related is None:
                continue
            if not should_auto_generate(related, type_name, field, config.verbs):
                logger.debug(f"Skipping auto-generation of {type_name}.{field_name} ({generate_type})")
                continue

        # Only the matching backward field on the target links back to the owner
        backlink = (
            find_backward_counterpart(related, type_name, field_name, config.verbs)
            if related is not None
            else None
        )
        context = GenerationContext(
            parent_type=type_name, parent_data=data, parent_id=owner_id, backlink=backlink
        )

        generated = generate_entity(generate_type, field.prompt, context, schema, config=config)
        child_data = resolve_nested_pending(generated, related, schema, store)

        if field.is_array:
            created = store.create(generate_type, None, {**child_data, MATCHED_TYPE_KEY: generate_type})
            resolved[field_name] = [created[ID_KEY]]
            resolved[f"{field_name}{MATCHED_TYPE_KEY}"] = generate_type
            pending_relations.append(
                PendingRelation(
                    field_name=field_name,
                    target_type=generate_type,
                    target_id=created[ID_KEY],
                )
            )
        else:
            created = store.create(generate_type, None, child_data)
            resolved[field_name] = created[ID_KEY]

        logger.info(f"Generated {type_name}.{field_name} -> {created[ID_KEY]}")

    return ForwardResolution(data=resolved, pending_relations=pending_relations)
