"""In-memory entity store."""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from pydantic import BaseModel
from schemacascade.store.base import ID_KEY, TYPE_KEY
from schemacascade.config.logging import get_logger

logger = get_logger(__name__)


class Relation(BaseModel):
    """A stored link row between two entities."""

    from_type: str
    from_id: str
    field_name: str
    to_type: str
    to_id: str


class MemoryStore:
    """Dict-backed store keyed by type name, then identity."""

    def __init__(self):
        self.records: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.relations: List[Relation] = []

    def create(
        self, type_name: str, entity_id: Optional[str], data: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Store a record and return it with ``$id``, ``$type`` and ``$createdAt``.

        Raises:
            ValueError: If a record with the same id already exists
        """
        entity_id = entity_id or str(uuid.uuid4())
        table = self.records.setdefault(type_name, {})
        if entity_id in table:
            raise ValueError(f"{type_name} with id '{entity_id}' already exists")

        record = dict(data)
        record[ID_KEY] = entity_id
        record[TYPE_KEY] = type_name
        record["$createdAt"] = datetime.now(timezone.utc).isoformat()
        table[entity_id] = record
        logger.debug(f"Stored {type_name} {entity_id}")
        return dict(record)

    def get(self, type_name: str, entity_id: str) -> Optional[Dict[str, Any]]:
        record = self.records.get(type_name, {}).get(entity_id)
        return dict(record) if record is not None else None

    def list(self, type_name: str) -> List[Dict[str, Any]]:
        return [dict(r) for r in self.records.get(type_name, {}).values()]

    def search(self, type_name: str, query: str) -> List[Dict[str, Any]]:
        """Case-insensitive substring match over a record's string values."""
        needle = query.lower()
        matches = []
        for record in self.records.get(type_name, {}).values():
            for key, value in record.items():
                if key.startswith("$"):
                    continue
                if isinstance(value, str) and needle in value.lower():
                    matches.append(dict(record))
                    break
        return matches

    def relate(
        self,
        from_type: str,
        from_id: str,
        field_name: str,
        to_type: str,
        to_id: str,
    ) -> None:
        self.relations.append(
            Relation(
                from_type=from_type,
                from_id=from_id,
                field_name=field_name,
                to_type=to_type,
                to_id=to_id,
            )
        )
        logger.debug(f"Related {from_type}.{field_name} {from_id} -> {to_type} {to_id}")

    def related(self, from_id: str, field_name: Optional[str] = None) -> List[Relation]:
        """Return relation rows leaving ``from_id``, optionally for one field."""
        return [
            r
            for r in self.relations
            if r.from_id == from_id and (field_name is None or r.field_name == field_name)
        ]

    def count(self, type_name: str) -> int:
        return len(self.records.get(type_name, {}))
