"""Entity generation, scalar enrichment and forward-relation materialization."""

from .config import (
    DEFAULT_MAX_DEPTH,
    GenerationConfig,
    GenerationDetails,
    configure_generation,
    get_generation_config,
    reset_generation_config,
)
from .entity import GeneratedEntity, GenerationContext, PendingChild, generate_entity
from .enrich import generate_ai_fields
from .materialize import (
    ForwardResolution,
    PendingRelation,
    resolve_forward_exact,
    resolve_nested_pending,
    should_auto_generate,
)

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "GenerationConfig",
    "GenerationDetails",
    "configure_generation",
    "get_generation_config",
    "reset_generation_config",
    "GeneratedEntity",
    "GenerationContext",
    "PendingChild",
    "generate_entity",
    "generate_ai_fields",
    "ForwardResolution",
    "PendingRelation",
    "resolve_forward_exact",
    "resolve_nested_pending",
    "should_auto_generate",
]
