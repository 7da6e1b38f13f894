"""Tests for relationship verb derivation."""

import pytest
from schemacascade.verbs import (
    BIDIRECTIONAL_PAIRS,
    FORWARD_TO_REVERSE,
    VerbRegistry,
    derive_reverse_verb,
    field_name_to_verb,
    is_passive_verb,
    register_bidirectional_pair,
    register_field_verb,
    register_verb_pair,
)


@pytest.mark.parametrize(
    "verb,expected",
    [
        ("manages", "managedBy"),
        ("owns", "ownedBy"),
        ("reviews", "reviewedBy"),
        ("managedBy", "manages"),
        ("createdBy", "creates"),
        ("parent_of", "child_of"),
        ("child_of", "parent_of"),
    ],
)
def test_table_verbs(verb, expected):
    """Known verbs resolve through the tables in both directions."""
    assert derive_reverse_verb(verb) == expected


def test_known_verbs_round_trip():
    """Reversing any table verb twice returns the original."""
    for verb, reverse in FORWARD_TO_REVERSE.items():
        assert derive_reverse_verb(verb) == reverse
        assert derive_reverse_verb(reverse) == verb
    for verb in BIDIRECTIONAL_PAIRS:
        assert derive_reverse_verb(derive_reverse_verb(verb)) == verb


def test_lexical_rules():
    """Unknown verbs fall through to suffix rules."""
    assert derive_reverse_verb("approvedBy") == "approved"
    assert derive_reverse_verb("follows") == "followdBy"
    assert derive_reverse_verb("sponsors") == "sponsordBy"
    assert derive_reverse_verb("is") == "isBy"
    assert derive_reverse_verb("lead") == "leadBy"
    assert derive_reverse_verb("") == "By"


def test_registering_pair_overrides_rules():
    """A registered pair wins over the lexical fallback in both directions."""
    registry = VerbRegistry()
    assert registry.derive_reverse_verb("sponsors") == "sponsordBy"

    registry.register_verb_pair("sponsors", "sponsoredBy")
    assert registry.derive_reverse_verb("sponsors") == "sponsoredBy"
    assert registry.derive_reverse_verb("sponsoredBy") == "sponsors"


def test_registry_copies_are_independent():
    """Registering on a copy leaves the original tables untouched."""
    registry = VerbRegistry()
    clone = registry.copy()
    clone.register_verb_pair("funds", "fundedBy")

    assert clone.derive_reverse_verb("funds") == "fundedBy"
    assert registry.derive_reverse_verb("funds") == "funddBy"


def test_module_level_registration():
    """Module-level helpers update the default registry."""
    register_verb_pair("mentors", "mentoredBy")
    register_field_verb("mentor", "mentors")

    assert derive_reverse_verb("mentors") == "mentoredBy"
    assert field_name_to_verb("mentor") == "mentors"


def test_bidirectional_and_reflexive_pairs():
    """Symmetric pairs map each member to the other; reflexive maps to itself."""
    register_bidirectional_pair("knows", "knows")
    register_bidirectional_pair("precedes", "follows")

    assert derive_reverse_verb("knows") == "knows"
    assert derive_reverse_verb("precedes") == "follows"
    assert derive_reverse_verb("follows") == "precedes"


def test_field_name_to_verb():
    """Field names map to verbs, unmapped names pass through."""
    assert field_name_to_verb("manager") == "manages"
    assert field_name_to_verb("owner") == "owns"
    assert field_name_to_verb("parent") == "parent_of"
    assert field_name_to_verb("widget") == "widget"


@pytest.mark.parametrize(
    "verb,expected",
    [
        ("managedBy", True),
        ("assignedTo", True),
        ("partOf", True),
        ("child_of", True),
        ("manages", False),
        ("", False),
    ],
)
def test_is_passive_verb(verb, expected):
    """Passive forms end in By, To, Of or _of."""
    assert is_passive_verb(verb) is expected
