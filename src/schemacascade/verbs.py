"""Verb derivation for backward relationship resolution.

Maps an active relationship verb to its reverse form and back::

    derive_reverse_verb("manages")    # "managedBy"
    derive_reverse_verb("managedBy")  # "manages"
    derive_reverse_verb("parent_of")  # "child_of"
    field_name_to_verb("owner")       # "owns"

The module-level functions use a process-wide default registry, so
``register_*`` calls take effect globally. Callers that need isolated
tables build their own ``VerbRegistry``.
"""

from typing import Dict, Optional
from schemacascade.config.logging import get_logger

logger = get_logger(__name__)

FORWARD_TO_REVERSE: Dict[str, str] = {
    "manages": "managedBy",
    "owns": "ownedBy",
    "creates": "createdBy",
    "reviews": "reviewedBy",
    "employs": "employedBy",
    "contains": "containedBy",
    "assigns": "assignedBy",
}

BIDIRECTIONAL_PAIRS: Dict[str, str] = {
    "parent_of": "child_of",
    "child_of": "parent_of",
}

FIELD_TO_VERB: Dict[str, str] = {
    "manager": "manages",
    "owner": "owns",
    "creator": "creates",
    "reviewer": "reviews",
    "employer": "employs",
    "parent": "parent_of",
    "child": "child_of",
    "assignee": "assigns",
}

PASSIVE_SUFFIXES = ("By", "To", "Of", "_of")


class VerbRegistry:
    """Lookup tables for verb derivation."""

    def __init__(
        self,
        forward_to_reverse: Optional[Dict[str, str]] = None,
        bidirectional: Optional[Dict[str, str]] = None,
        field_to_verb: Optional[Dict[str, str]] = None,
    ):
        self.forward_to_reverse = dict(
            FORWARD_TO_REVERSE if forward_to_reverse is None else forward_to_reverse
        )
        self.reverse_to_forward = {v: k for k, v in self.forward_to_reverse.items()}
        self.bidirectional = dict(
            BIDIRECTIONAL_PAIRS if bidirectional is None else bidirectional
        )
        self.field_to_verb = dict(FIELD_TO_VERB if field_to_verb is None else field_to_verb)

    def copy(self) -> "VerbRegistry":
        """Return an independent registry with the same tables."""
        clone = VerbRegistry(
            forward_to_reverse=self.forward_to_reverse,
            bidirectional=self.bidirectional,
            field_to_verb=self.field_to_verb,
        )
        clone.reverse_to_forward = dict(self.reverse_to_forward)
        return clone

    def derive_reverse_verb(self, verb: str) -> str:
        """
        Derive the reverse form of a relationship verb.

        Resolution order: bidirectional pairs, known forward verbs, known
        reverse verbs, unknown ``...By`` verbs (strip the suffix), third
        person ``...s`` verbs (``creates`` -> ``createdBy``), anything else
        gets ``By`` appended.

        Args:
            verb: Verb to reverse

        Returns:
            The reverse verb (never raises)
        """
        if verb in self.bidirectional:
            return self.bidirectional[verb]
        if verb in self.forward_to_reverse:
            return self.forward_to_reverse[verb]
        if verb in self.reverse_to_forward:
            return self.reverse_to_forward[verb]

        if verb.endswith("By"):
            return self.reverse_to_forward.get(verb, verb[:-2])

        if verb.endswith("s") and len(verb) > 2:
            return verb[:-1] + "dBy"

        return verb + "By"

    def field_name_to_verb(self, field_name: str) -> str:
        """Map a field name like ``manager`` to its verb, or return it unchanged."""
        return self.field_to_verb.get(field_name, field_name)

    def register_verb_pair(self, forward: str, reverse: str) -> None:
        """Register (or override) a forward/reverse verb pair."""
        self.forward_to_reverse[forward] = reverse
        self.reverse_to_forward[reverse] = forward
        logger.debug(f"Registered verb pair: {forward} <-> {reverse}")

    def register_bidirectional_pair(self, verb_a: str, verb_b: str) -> None:
        """Register a symmetric pair; ``verb_a == verb_b`` makes a reflexive verb."""
        self.bidirectional[verb_a] = verb_b
        self.bidirectional[verb_b] = verb_a
        logger.debug(f"Registered bidirectional pair: {verb_a} <-> {verb_b}")

    def register_field_verb(self, field_name: str, verb: str) -> None:
        """Register a field name to verb mapping."""
        self.field_to_verb[field_name] = verb
        logger.debug(f"Registered field verb: {field_name} -> {verb}")


def is_passive_verb(verb: str) -> bool:
    """
    Check if a verb is in passive form.

    Args:
        verb: Verb to check

    Returns:
        True if the verb ends with By, To, Of or _of
    """
    if not verb:
        return False
    return verb.endswith(PASSIVE_SUFFIXES)


_default_registry = VerbRegistry()


def get_verb_registry() -> VerbRegistry:
    """Return the process-wide default registry."""
    return _default_registry


def derive_reverse_verb(verb: str) -> str:
    return _default_registry.derive_reverse_verb(verb)


def field_name_to_verb(field_name: str) -> str:
    return _default_registry.field_name_to_verb(field_name)


def register_verb_pair(forward: str, reverse: str) -> None:
    _default_registry.register_verb_pair(forward, reverse)


def register_bidirectional_pair(verb_a: str, verb_b: str) -> None:
    _default_registry.register_bidirectional_pair(verb_a, verb_b)


def register_field_verb(field_name: str, verb: str) -> None:
    _default_registry.register_field_verb(field_name, verb)
