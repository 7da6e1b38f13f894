"""Exception types and error-recovery policies for cascade generation."""

from enum import Enum
from typing import Optional


class SchemaCascadeError(Exception):
    """Base class for all schemacascade errors."""

    pass


class UnknownType(SchemaCascadeError):
    """Raised when a type name is not declared in the schema."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"Unknown type: {type_name}")


class SchemaLoadError(SchemaCascadeError):
    """Raised when a schema file cannot be read or validated."""

    pass


class BackendError(SchemaCascadeError):
    """Raised by a content backend when it cannot produce values."""

    pass


class GenerationFailure(SchemaCascadeError):
    """
    Classified failure of a content-generation backend call.

    Attributes:
        entity_type: Type whose values were being generated
        field_name: Field being generated, if the call targeted one field
        cause: Underlying exception
    """

    def __init__(
        self,
        message: str,
        entity_type: str,
        field_name: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.entity_type = entity_type
        self.field_name = field_name
        self.cause = cause
        location = f"{entity_type}.{field_name}" if field_name else entity_type
        super().__init__(f"Generation failed for {location}: {message}")


class RecoveryPolicy(str, Enum):
    """
    What to do when a backend call fails.

    FALLBACK: swallow the failure and use placeholder synthesis (entity level).
    PROPAGATE: raise GenerationFailure to the caller (field enrichment).
    """

    FALLBACK = "fallback"
    PROPAGATE = "propagate"
