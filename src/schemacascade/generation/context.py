"""Context gathering for generation prompts.

Pre-fetches related entities named by ``$context``, resolves ``{field}``
placeholders in ``$instructions`` and flattens everything into the context
strings handed to backends and value generators.
"""

import re
from typing import Any, Dict, List, Optional
from schemacascade.schema.models import EntityDefinition, Schema
from schemacascade.store.base import Store
from schemacascade.config.logging import get_logger

logger = get_logger(__name__)

TEMPLATE_PATTERN = re.compile(r"\{([A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*)\}")


def is_internal_key(key: str) -> bool:
    return key.startswith("$") or key.startswith("_")


def string_field_pairs(data: Dict[str, Any], prefix: str = "") -> List[str]:
    """Render non-internal, non-empty string fields as ``key: value``."""
    pairs = []
    for key, value in data.items():
        if is_internal_key(key) or not isinstance(value, str) or not value:
            continue
        pairs.append(f"{prefix}{key}: {value}")
    return pairs


def render_schema_context(value: Any) -> Optional[str]:
    """Render a ``$context`` metadata value as prompt text."""
    if isinstance(value, str):
        return value or None
    if isinstance(value, list) and value:
        return ", ".join(str(v) for v in value)
    return None


def _follow(
    record: Dict[str, Any],
    definition: Optional[EntityDefinition],
    part: str,
    schema: Schema,
    store: Store,
) -> Optional[tuple]:
    """Follow one relation hop; returns (related record, related definition)."""
    if definition is None:
        return None
    field = definition.fields.get(part)
    if field is None or not field.is_relation:
        return None

    value = record.get(part)
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        return value, schema.lookup(field.related_type)
    if not isinstance(value, str) or not value:
        return None

    fetched = store.get(field.related_type, value)
    if fetched is None:
        logger.debug(f"Context reference {part}={value} not found in {field.related_type}")
        return None
    return fetched, schema.lookup(field.related_type)


def prefetch_context(
    paths: List[str],
    owner_data: Dict[str, Any],
    owner_type: str,
    schema: Schema,
    store: Store,
) -> Dict[str, Dict[str, Any]]:
    """
    Fetch the related entities named by dotted relation paths.

    Paths are resolved shallowest first so ``project`` is available before
    ``project.lead``. Unresolvable paths are skipped.

    Args:
        paths: Relation paths such as ``["project", "project.lead"]``
        owner_data: Data of the entity the paths start from
        owner_type: Type of that entity
        schema: Schema
        store: Store used to fetch referenced records

    Returns:
        Mapping from path to fetched record
    """
    fetched: Dict[str, Dict[str, Any]] = {}
    hops: Dict[str, tuple] = {"": (owner_data, schema.lookup(owner_type))}

    for path in sorted(set(paths), key=lambda p: (p.count("."), len(p))):
        parts = path.split(".")
        parent_key = ".".join(parts[:-1])
        if parent_key not in hops:
            # Resolve intermediate hops that were not requested themselves
            for i in range(1, len(parts)):
                key = ".".join(parts[:i])
                prev = ".".join(parts[:i - 1])
                if key in hops or prev not in hops:
                    continue
                hop = _follow(hops[prev][0], hops[prev][1], parts[i - 1], schema, store)
                if hop is not None:
                    hops[key] = hop
        if parent_key not in hops:
            continue

        record, definition = hops[parent_key]
        hop = _follow(record, definition, parts[-1], schema, store)
        if hop is None:
            continue
        hops[path] = hop
        fetched[path] = hop[0]

    logger.debug(f"Pre-fetched {len(fetched)}/{len(set(paths))} context paths for {owner_type}")
    return fetched


def build_combined_entity(
    entity_data: Dict[str, Any], context_data: Dict[str, Dict[str, Any]]
) -> Dict[str, Any]:
    """
    Overlay pre-fetched records onto entity data for template resolution.

    Identity strings are replaced by the fetched record; nested paths are
    attached under their (already attached) ancestor, and the leaf record is
    also exposed at top level when that key is free.
    """
    combined: Dict[str, Any] = dict(entity_data)

    for key in sorted(context_data, key=len):
        value = context_data[key]
        parts = key.split(".")

        if len(parts) == 1:
            current = combined.get(key)
            if current is None or isinstance(current, (str, list)):
                combined[key] = dict(value)
            continue

        node: Any = combined
        for part in parts[:-1]:
            child = node.get(part) if isinstance(node, dict) else None
            if not isinstance(child, dict):
                node = None
                break
            node = child
        if isinstance(node, dict):
            node[parts[-1]] = dict(value)

        leaf = parts[-1]
        if leaf not in combined:
            combined[leaf] = dict(value)

    return combined


def _display(value: Any) -> str:
    if isinstance(value, dict):
        for key in ("name", "title"):
            if isinstance(value.get(key), str) and value[key]:
                return value[key]
        return ", ".join(string_field_pairs(value)) or str(value.get("$id", ""))
    if isinstance(value, list):
        return ", ".join(_display(v) for v in value)
    return str(value)


def resolve_instructions(
    instructions: str,
    combined: Dict[str, Any],
    type_name: str,
    schema: Schema,
    store: Store,
) -> str:
    """
    Replace ``{path}`` placeholders in instructions with entity values.

    Relation hops that still hold an identity are fetched from the store.
    Placeholders that cannot be resolved are left as written.
    """

    def substitute(match: re.Match) -> str:
        parts = match.group(1).split(".")
        value: Any = combined
        definition = schema.lookup(type_name)
        for i, part in enumerate(parts):
            if not isinstance(value, dict) or value.get(part) is None:
                return match.group(0)
            is_last = i == len(parts) - 1
            if is_last:
                value = value[part]
                break
            hop = _follow(value, definition, part, schema, store)
            if hop is None:
                nxt = value[part]
                if not isinstance(nxt, dict):
                    return match.group(0)
                value, definition = nxt, None
            else:
                value, definition = hop
        return _display(value)

    return TEMPLATE_PATTERN.sub(substitute, instructions)


def build_context_string(
    resolved_instructions: Optional[str],
    entity_data: Dict[str, Any],
    context_data: Dict[str, Dict[str, Any]],
) -> str:
    """Flatten instructions, own fields and pre-fetched fields, joined by `` | ``."""
    parts: List[str] = []
    if resolved_instructions:
        parts.append(resolved_instructions)
    parts.extend(string_field_pairs(entity_data))
    for path, record in context_data.items():
        parts.extend(string_field_pairs(record, prefix=f"{path}."))
    return " | ".join(parts)
