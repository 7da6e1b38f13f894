"""Create an entity and everything it points to."""

import uuid
from typing import Any, Dict, Optional
from schemacascade.errors import UnknownType
from schemacascade.schema.models import Schema
from schemacascade.store.base import Store
from schemacascade.generation.config import GenerationConfig, resolve_config
from schemacascade.generation.enrich import generate_ai_fields
from schemacascade.generation.materialize import resolve_forward_exact
from schemacascade.config.logging import get_logger

logger = get_logger(__name__)


def create_entity(
    type_name: str,
    data: Dict[str, Any],
    schema: Schema,
    store: Store,
    config: Optional[GenerationConfig] = None,
    entity_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create an entity, generating its required forward relations and scalars.

    The identity is assigned up front so generated children can point back
    at the owner. Relation rows are created only after the owner is stored.

    Args:
        type_name: Type to create
        data: Caller-supplied field values
        schema: Schema
        store: Store to write to
        config: Generation configuration (process default when None)
        entity_id: Optional identity; a uuid4 is assigned when omitted

    Returns:
        The stored owner record

    Raises:
        UnknownType: If ``type_name`` is not in the schema
        GenerationFailure: If scalar enrichment fails at the backend
    """
    config = resolve_config(config)
    entity = schema.lookup(type_name)
    if entity is None:
        raise UnknownType(type_name)

    entity_id = entity_id or str(uuid.uuid4())
    logger.info(f"Creating {type_name} {entity_id}")

    resolution = resolve_forward_exact(type_name, data, entity, schema, store, entity_id, config)
    final_data = generate_ai_fields(resolution.data, type_name, entity, schema, store, config)

    created = store.create(type_name, entity_id, final_data)
    for rel in resolution.pending_relations:
        store.relate(type_name, entity_id, rel.field_name, rel.target_type, rel.target_id)

    logger.info(
        f"Created {type_name} {entity_id} with {len(resolution.pending_relations)} relation(s)"
    )
    return created
