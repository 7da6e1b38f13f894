"""Registry of value generators."""

from typing import Any, Callable, Dict
from .base import ValueGenerator
from .faker_provider import FakerValueGenerator
from .mimesis_provider import MimesisValueGenerator
from .placeholder import PlaceholderValueGenerator
from schemacascade.config.logging import get_logger

logger = get_logger(__name__)

GENERATORS: Dict[str, Callable[[Dict[str, Any]], ValueGenerator]] = {
    "placeholder": lambda cfg: PlaceholderValueGenerator(**cfg),
    "faker": lambda cfg: FakerValueGenerator(**cfg),
    "mimesis": lambda cfg: MimesisValueGenerator(**cfg),
}

# Generators whose factories accept a ``seed`` option
SEEDED_GENERATORS = {"faker", "mimesis"}


def get_value_generator(name: str, config: Dict[str, Any] | None = None) -> ValueGenerator:
    """
    Get a value generator instance by name.

    Args:
        name: Generator name (e.g., "placeholder", "faker")
        config: Optional keyword arguments for the generator

    Returns:
        ValueGenerator instance

    Raises:
        KeyError: If the name is not registered
    """
    if config is None:
        config = {}

    if name not in GENERATORS:
        available = ", ".join(sorted(GENERATORS.keys()))
        raise KeyError(
            f"Value generator '{name}' not found. Available generators: {available}"
        )

    try:
        return GENERATORS[name](config)
    except Exception as e:
        logger.error(f"Failed to create value generator '{name}': {e}")
        raise


def register_value_generator(
    name: str, factory: Callable[[Dict[str, Any]], ValueGenerator]
) -> None:
    """
    Register a new value generator factory.

    Args:
        name: Generator name
        factory: Factory taking a config dict and returning a ValueGenerator
    """
    GENERATORS[name] = factory
    logger.info(f"Registered value generator: {name}")


def list_value_generators() -> list[str]:
    return sorted(GENERATORS.keys())
