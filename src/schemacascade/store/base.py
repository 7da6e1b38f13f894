"""Base protocol for entity stores."""

from typing import Any, Dict, List, Optional, Protocol

ID_KEY = "$id"
TYPE_KEY = "$type"


class Store(Protocol):
    """
    Protocol for the persistence layer the generation core writes to.

    Records are plain dicts; ``create`` returns the stored record with its
    identity under ``$id``.
    """

    def create(self, type_name: str, entity_id: Optional[str], data: Dict[str, Any]) -> Dict[str, Any]:
        ...

    def get(self, type_name: str, entity_id: str) -> Optional[Dict[str, Any]]:
        ...

    def list(self, type_name: str) -> List[Dict[str, Any]]:
        ...

    def search(self, type_name: str, query: str) -> List[Dict[str, Any]]:
        ...

    def relate(
        self,
        from_type: str,
        from_id: str,
        field_name: str,
        to_type: str,
        to_id: str,
    ) -> None:
        ...
