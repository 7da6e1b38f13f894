"""Deterministic placeholder value generator.

Used whenever the content backend is disabled or fails at entity level.
The same request always yields the same value: free-text fields echo
their hint and context, personal-data fields get Faker output seeded from
the request itself.
"""

import hashlib
from faker import Faker
from .base import ValueRequest
from .faker_provider import FAKER_METHODS
from .heuristics import guess_data_kind

# Fields whose placeholder is a fixed categorical value
FIXED_VALUES = {
    "severity": "medium",
    "effort": "medium",
    "priority": "medium",
    "level": "intermediate",
    "status": "draft",
}


def request_seed(request: ValueRequest) -> int:
    """Stable 32-bit seed derived from type, field and context."""
    key = f"{request.type_name}|{request.field_name}|{request.full_context}"
    return int(hashlib.sha256(key.encode("utf-8")).hexdigest()[:8], 16)


class PlaceholderValueGenerator:
    """Context-aware, deterministic value synthesis."""

    name = "placeholder"

    def __init__(self, locale: str = "en_US"):
        self.fk = Faker(locale)

    def generate(self, request: ValueRequest) -> str:
        field_name = request.field_name
        type_name = request.type_name
        context = request.full_context.strip()
        hint = (request.hint or "").strip()

        if not context:
            return f"Generated {field_name} for {type_name}"

        if field_name in FIXED_VALUES:
            return FIXED_VALUES[field_name]

        if field_name == "name":
            if hint:
                return f"{type_name}: {hint}"
            return f"Generated {field_name} for {type_name}"

        if field_name == "title":
            if hint:
                return f"{type_name} title: {hint}"
            return f"{type_name} title in {context}"

        if field_name == "description":
            if hint:
                return f"Description: {hint} | {context}"
            return f"Description of {type_name} in context: {context}"

        kind = guess_data_kind(field_name)
        if kind is not None:
            self.fk.seed_instance(request_seed(request))
            return str(getattr(self.fk, FAKER_METHODS[kind])())

        return f"{field_name}: {context}"
