"""Generation configuration passed through every cascade call."""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field
from schemacascade.config.settings import get_settings
from schemacascade.config.logging import get_logger
from schemacascade.verbs import VerbRegistry, get_verb_registry

logger = get_logger(__name__)

DEFAULT_MAX_DEPTH = 10


class GenerationDetails(BaseModel):
    """Report of one backend call, handed to ``on_generate``."""

    entity_type: str
    model: Optional[str] = None
    prompt: str
    result: Optional[Dict[str, Any]] = None
    latency_ms: float = 0.0
    error: Optional[str] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class GenerationConfig(BaseModel):
    """
    Knobs for one generation tree.

    Attributes:
        enabled: Whether the content backend may be called at all
        model: Model identifier handed to the backend (None = backend default)
        max_depth: Recursion ceiling for nested entity generation
        backend: ContentBackend used when enabled
        value_generator: ValueGenerator used for placeholder synthesis
        verbs: Verb tables used to locate backward counterparts
        prefetcher: Callable matching ``prefetch_context``
        template_resolver: Callable matching ``resolve_instructions``
        on_generate: Optional callback receiving GenerationDetails
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    enabled: bool = True
    model: Optional[str] = None
    max_depth: int = DEFAULT_MAX_DEPTH
    backend: Any = None
    value_generator: Any = None
    verbs: VerbRegistry = Field(default_factory=get_verb_registry)
    prefetcher: Optional[Callable[..., Dict[str, Dict[str, Any]]]] = None
    template_resolver: Optional[Callable[..., str]] = None
    on_generate: Optional[Callable[[GenerationDetails], None]] = None

    def model_post_init(self, __context: Any) -> None:
        # Local imports: the default collaborators import this module.
        if self.value_generator is None:
            from .providers.registry import SEEDED_GENERATORS, get_value_generator
            settings = get_settings()
            name = settings.value_generator
            options = {"seed": settings.seed} if name in SEEDED_GENERATORS else {}
            self.value_generator = get_value_generator(name, options)
        if self.backend is None:
            from .backend.backend import LLMBackend
            self.backend = LLMBackend()
        if self.prefetcher is None:
            from .context import prefetch_context
            self.prefetcher = prefetch_context
        if self.template_resolver is None:
            from .context import resolve_instructions
            self.template_resolver = resolve_instructions

    @property
    def backend_enabled(self) -> bool:
        return self.enabled and self.backend is not None

    @classmethod
    def from_settings(cls, **overrides: Any) -> "GenerationConfig":
        """Build a config from application settings; backend is off without an LLM."""
        settings = get_settings()
        values: Dict[str, Any] = {
            "enabled": settings.generation_enabled and settings.has_llm,
            "model": settings.generation_model,
            "max_depth": settings.max_depth,
        }
        values.update(overrides)
        return cls(**values)

    def with_changes(self, **changes: Any) -> "GenerationConfig":
        """Return a copy with some knobs replaced."""
        return self.model_copy(update=changes)


_default_config: Optional[GenerationConfig] = None


def get_generation_config() -> GenerationConfig:
    """Get or create the process default configuration."""
    global _default_config
    if _default_config is None:
        _default_config = GenerationConfig.from_settings()
    return _default_config


def configure_generation(**changes: Any) -> GenerationConfig:
    """
    Replace the process default configuration with updated knobs.

    Only calls that pass no explicit config see this default.

    Returns:
        The new default configuration
    """
    global _default_config
    _default_config = get_generation_config().with_changes(**changes)
    logger.info(
        f"Generation configured: enabled={_default_config.enabled}, "
        f"model={_default_config.model}"
    )
    return _default_config


def reset_generation_config() -> None:
    global _default_config
    _default_config = None


def resolve_config(config: Optional[GenerationConfig]) -> GenerationConfig:
    return config if config is not None else get_generation_config()
