"""Scalar field enrichment for entities that already have an identity."""

import re
from typing import Any, Dict, List, Optional, Tuple
from schemacascade.errors import RecoveryPolicy
from schemacascade.schema.models import EntityDefinition, Schema, is_prompt_field
from schemacascade.store.base import Store
from schemacascade.config.logging import get_logger
from .config import GenerationConfig, resolve_config
from .context import build_combined_entity, build_context_string
from .invoke import invoke_backend
from .providers.base import ValueRequest

logger = get_logger(__name__)

CHAR_LIMIT_PATTERN = re.compile(r"\((\d+)\s*chars?\)")


def char_limit(hint: Optional[str]) -> Optional[int]:
    """Extract N from a ``(N chars)`` marker in a type hint."""
    if not hint:
        return None
    match = CHAR_LIMIT_PATTERN.search(hint)
    return int(match.group(1)) if match else None


def enforce_length_limits(
    data: Dict[str, Any], candidates: List[Tuple[str, Optional[str]]]
) -> None:
    """Truncate string values whose hint declares a ``(N chars)`` limit."""
    for field_name, hint in candidates:
        limit = char_limit(hint)
        value = data.get(field_name)
        if limit is not None and isinstance(value, str) and len(value) > limit:
            logger.debug(f"Truncating {field_name} from {len(value)} to {limit} chars")
            data[field_name] = value[:limit]


def select_candidates(
    data: Dict[str, Any],
    entity_def: EntityDefinition,
    enabled: bool,
) -> List[Tuple[str, Optional[str]]]:
    """
    Pick the scalar fields to generate, each with its hint.

    Prompt fields qualify even when populated if the backend is enabled or
    the entity has rich context (``$context`` or a templated
    ``$instructions``). Plain string fields qualify when empty and
    ``$instructions`` is present.
    """
    instructions = entity_def.instructions
    has_rich_context = bool(entity_def.context_paths) or bool(
        instructions and "{" in instructions
    )

    candidates: List[Tuple[str, Optional[str]]] = []
    for field_name, field in entity_def.iter_fields():
        if field.is_relation:
            continue
        prompt_field = is_prompt_field(field)

        if data.get(field_name) is not None:
            if prompt_field and (enabled or has_rich_context):
                candidates.append((field_name, field.type))
            continue

        if prompt_field:
            candidates.append((field_name, field.type))
        elif field.type == "string" and not field.enum_values and instructions:
            candidates.append((field_name, field.prompt))
    return candidates


def generate_ai_fields(
    data: Dict[str, Any],
    type_name: str,
    entity_def: EntityDefinition,
    schema: Schema,
    store: Store,
    config: Optional[GenerationConfig] = None,
) -> Dict[str, Any]:
    """
    Generate prompt-typed and instruction-driven scalar fields.

    One batched backend call covers every candidate field; anything still
    unset afterwards is filled by the value generator.

    Args:
        data: Current entity data
        type_name: Entity type
        entity_def: Entity definition
        schema: Schema
        store: Store used for context pre-fetch and template resolution
        config: Generation configuration (process default when None)

    Returns:
        New data dict with generated fields populated

    Raises:
        GenerationFailure: If the backend call fails
    """
    config = resolve_config(config)
    result = dict(data)
    instructions = entity_def.instructions
    context_paths = entity_def.context_paths

    context_data: Dict[str, Dict[str, Any]] = {}
    if context_paths:
        context_data = config.prefetcher(context_paths, result, type_name, schema, store)

    resolved_instructions = instructions
    if instructions:
        combined = build_combined_entity(result, context_data)
        resolved_instructions = config.template_resolver(
            instructions, combined, type_name, schema, store
        )

    full_context = build_context_string(resolved_instructions, result, context_data)
    candidates = select_candidates(result, entity_def, config.enabled)
    if not candidates:
        return result

    if config.backend_enabled:
        fields_shape = {name: hint or f"Generate a {name}" for name, hint in candidates}
        prompt_parts = []
        if resolved_instructions:
            prompt_parts.append(resolved_instructions)
        prompt_parts.append(f"Generate a {type_name} with the following fields.")

        generated = invoke_backend(
            config,
            type_name,
            fields_shape,
            "\n".join(prompt_parts),
            RecoveryPolicy.PROPAGATE,
        )
        for field_name, _ in candidates:
            if generated and generated.get(field_name) is not None:
                result[field_name] = generated[field_name]

    for field_name, hint in candidates:
        if result.get(field_name) is None:
            result[field_name] = config.value_generator.generate(
                ValueRequest(
                    field_name=field_name,
                    type_name=type_name,
                    full_context=full_context,
                    hint=hint,
                    parent_data=result,
                )
            )

    enforce_length_limits(result, candidates)
    logger.debug(f"Enriched {len(candidates)} field(s) on {type_name}")
    return result
