"""schemacascade: cascade generation of schema-described entity graphs."""

__version__ = "0.1.0"

from .cascade import create_entity
from .errors import (
    BackendError,
    GenerationFailure,
    RecoveryPolicy,
    SchemaCascadeError,
    SchemaLoadError,
    UnknownType,
)
from .generation import (
    GenerationConfig,
    GenerationDetails,
    GeneratedEntity,
    GenerationContext,
    PendingChild,
    ForwardResolution,
    PendingRelation,
    configure_generation,
    generate_ai_fields,
    generate_entity,
    get_generation_config,
    reset_generation_config,
    resolve_forward_exact,
    resolve_nested_pending,
)
from .schema import EntityDefinition, FieldDefinition, RelationOperator, Schema
from .store import MemoryStore, Store
from .verbs import (
    VerbRegistry,
    derive_reverse_verb,
    field_name_to_verb,
    get_verb_registry,
    is_passive_verb,
    register_bidirectional_pair,
    register_field_verb,
    register_verb_pair,
)

__all__ = [
    "__version__",
    "create_entity",
    "BackendError",
    "GenerationFailure",
    "RecoveryPolicy",
    "SchemaCascadeError",
    "SchemaLoadError",
    "UnknownType",
    "GenerationConfig",
    "GenerationDetails",
    "GeneratedEntity",
    "GenerationContext",
    "PendingChild",
    "ForwardResolution",
    "PendingRelation",
    "configure_generation",
    "generate_ai_fields",
    "generate_entity",
    "get_generation_config",
    "reset_generation_config",
    "resolve_forward_exact",
    "resolve_nested_pending",
    "EntityDefinition",
    "FieldDefinition",
    "RelationOperator",
    "Schema",
    "MemoryStore",
    "Store",
    "VerbRegistry",
    "derive_reverse_verb",
    "field_name_to_verb",
    "get_verb_registry",
    "is_passive_verb",
    "register_bidirectional_pair",
    "register_field_verb",
    "register_verb_pair",
]
