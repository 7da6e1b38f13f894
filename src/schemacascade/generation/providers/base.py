"""Base protocol for value generators."""

from typing import Any, Dict, Optional, Protocol
from pydantic import BaseModel, Field


class ValueRequest(BaseModel):
    """Everything a value generator may use to produce one field value."""

    field_name: str
    type_name: str
    full_context: str = ""
    hint: Optional[str] = None
    parent_data: Dict[str, Any] = Field(default_factory=dict)


class ValueGenerator(Protocol):
    """
    Protocol for value generators that synthesize scalar field values.

    Generators run offline (no HTTP calls); they are the fallback when the
    content backend is disabled, unavailable, or leaves fields unset.
    """

    name: str

    def generate(self, request: ValueRequest) -> str:
        """
        Generate a single string value.

        Args:
            request: Field, type, context and hint to generate for

        Returns:
            Generated value
        """
        ...
