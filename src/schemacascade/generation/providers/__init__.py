"""Value generators for synthesizing scalar field values."""

from .base import ValueGenerator, ValueRequest
from .faker_provider import FakerValueGenerator
from .mimesis_provider import MimesisValueGenerator
from .placeholder import PlaceholderValueGenerator
from .registry import (
    GENERATORS,
    get_value_generator,
    list_value_generators,
    register_value_generator,
)

__all__ = [
    "ValueGenerator",
    "ValueRequest",
    "FakerValueGenerator",
    "MimesisValueGenerator",
    "PlaceholderValueGenerator",
    "GENERATORS",
    "get_value_generator",
    "list_value_generators",
    "register_value_generator",
]
