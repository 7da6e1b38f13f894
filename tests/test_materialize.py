"""Tests for forward-relationship materialization."""

import pytest
from schemacascade.generation.materialize import (
    MATCHED_TYPE_KEY,
    find_backward_counterpart,
    resolve_forward_exact,
    should_auto_generate,
)
from schemacascade.schema.models import Schema
from schemacascade.store.base import ID_KEY
from conftest import relation


@pytest.fixture
def order_schema():
    """Order requires a Customer, which requires an Address."""
    return Schema.model_validate(
        {
            "entities": {
                "Order": {
                    "fields": {
                        "reference": {"type": "string"},
                        "customer": relation("Customer"),
                        "coupon": relation("Coupon", is_optional=True),
                        "notes": relation("Note", operator="~>", is_array=True),
                    }
                },
                "Customer": {
                    "fields": {
                        "name": {"type": "string"},
                        "address": relation("Address"),
                    }
                },
                "Address": {"fields": {"street": {"type": "string"}}},
                "Coupon": {"fields": {"code": {"type": "string"}}},
                "Note": {"fields": {"text": {"type": "string"}}},
            }
        }
    )


def test_skips_members_created_from_their_own_side(team_schema, store, disabled_config):
    """Back-referencing targets with required scalars are not auto-generated."""
    team = team_schema.lookup("Team")
    result = resolve_forward_exact("Team", {"name": "Core"}, team, team_schema, store, "team-1", disabled_config)

    assert result.pending_relations == []
    assert "members" not in result.data
    assert store.count("Member") == 0


def test_generates_member_without_required_scalars(team_schema_optional_scalars, store, disabled_config):
    """A target with no required scalars is generated, stored and linked."""
    schema = team_schema_optional_scalars
    result = resolve_forward_exact(
        "Team", {"name": "Core"}, schema.lookup("Team"), schema, store, "team-1", disabled_config
    )

    assert store.count("Member") == 1
    assert len(result.pending_relations) == 1
    member = store.list("Member")[0]
    pending = result.pending_relations[0]
    assert pending.field_name == "members"
    assert pending.target_type == "Member"
    assert pending.target_id == member[ID_KEY]
    assert result.data["members"] == [member[ID_KEY]]
    assert result.data[f"members{MATCHED_TYPE_KEY}"] == "Member"
    assert member["team"] == "team-1"


def test_existing_array_ids_become_relations(team_schema, store, disabled_config):
    """Populated array fields are linked as given, without generation."""
    data = {"name": "Core", "members": ["m-1", "m-2"]}
    result = resolve_forward_exact("Team", data, team_schema.lookup("Team"), team_schema, store, "team-1", disabled_config)

    assert [p.target_id for p in result.pending_relations] == ["m-1", "m-2"]
    assert store.count("Member") == 0


def test_singular_relation_is_stored_inline(order_schema, store, disabled_config):
    """Singular targets are persisted (nested children first) and stored by id."""
    result = resolve_forward_exact(
        "Order", {"reference": "A-1"}, order_schema.lookup("Order"), order_schema, store, "order-1", disabled_config
    )

    assert result.pending_relations == []
    customer = store.get("Customer", result.data["customer"])
    assert customer is not None
    address = store.list("Address")
    assert len(address) == 1
    assert customer["address"] == address[0][ID_KEY]


def test_optional_and_fuzzy_relations_are_left_alone(order_schema, store, disabled_config):
    """Optional forward fields and fuzzy operators are never generated."""
    result = resolve_forward_exact(
        "Order", {"reference": "A-1"}, order_schema.lookup("Order"), order_schema, store, "order-1", disabled_config
    )

    assert "coupon" not in result.data
    assert "notes" not in result.data
    assert store.count("Coupon") == 0
    assert store.count("Note") == 0


def test_populated_singular_relation_is_kept(order_schema, store, disabled_config):
    """An already set singular relation is not regenerated."""
    data = {"reference": "A-1", "customer": "cust-9"}
    result = resolve_forward_exact("Order", data, order_schema.lookup("Order"), order_schema, store, "order-1", disabled_config)

    assert result.data["customer"] == "cust-9"
    assert store.count("Customer") == 0


def test_union_relation_generates_first_type(store, disabled_config):
    """Union relations always generate their first listed type."""
    schema = Schema.model_validate(
        {
            "entities": {
                "Feed": {"fields": {"items": relation("Post", union_types=["Post", "Photo"], is_array=True)}},
                "Post": {
                    "fields": {
                        "title": {"type": "string"},
                        "feed": relation("Feed", operator="<-"),
                    }
                },
                "Photo": {"fields": {"url": {"type": "url"}}},
            }
        }
    )
    result = resolve_forward_exact("Feed", {}, schema.lookup("Feed"), schema, store, "feed-1", disabled_config)

    assert store.count("Post") == 1
    assert store.count("Photo") == 0
    assert result.data[f"items{MATCHED_TYPE_KEY}"] == "Post"
    assert result.pending_relations[0].target_type == "Post"


def test_should_auto_generate_rules():
    """Generation depends on back-references, required scalars, prompts and unions."""
    schema = Schema.model_validate(
        {
            "entities": {
                "Owner": {
                    "fields": {
                        "plain": relation("Leaf", is_array=True),
                        "prompted": relation("Task", is_array=True, prompt="First tasks"),
                        "tasks": relation("Task", is_array=True),
                    }
                },
                "Leaf": {"fields": {"label": {"type": "string", "is_optional": True}}},
                "Task": {"fields": {"title": {"type": "string"}}},
            }
        }
    )
    owner = schema.lookup("Owner")

    assert should_auto_generate(schema.lookup("Leaf"), "Owner", owner.fields["plain"])
    assert should_auto_generate(schema.lookup("Task"), "Owner", owner.fields["prompted"])
    assert not should_auto_generate(schema.lookup("Task"), "Owner", owner.fields["tasks"])


def test_backward_counterpart_prefers_reverse_verb():
    """With several back-references, the one named after the reverse verb wins."""
    schema = Schema.model_validate(
        {
            "entities": {
                "Employee": {
                    "fields": {
                        "ownedBy": relation("Person", operator="<-"),
                        "managedBy": relation("Person", operator="<-"),
                    }
                },
                "Person": {"fields": {"manager": relation("Employee", is_array=True)}},
            }
        }
    )
    employee = schema.lookup("Employee")

    assert find_backward_counterpart(employee, "Person", "manager") == "managedBy"
    assert find_backward_counterpart(employee, "Person", "unrelated") == "ownedBy"
    assert find_backward_counterpart(employee, "Team", "manager") is None


@pytest.fixture
def staff_schema():
    """Employee has two back-references to Person."""
    return Schema.model_validate(
        {
            "entities": {
                "Employee": {
                    "fields": {
                        "ownedBy": relation("Person", operator="<-"),
                        "managedBy": relation("Person", operator="<-"),
                    }
                },
                "Person": {
                    "fields": {
                        "manager": relation("Employee", is_array=True),
                        "boss": relation("Employee", is_array=True, is_optional=True),
                    }
                },
            }
        }
    )


def test_only_matching_back_reference_is_linked(staff_schema, store, disabled_config):
    """The owner id goes to the back-reference named by the reverse verb."""
    resolve_forward_exact("Person", {}, staff_schema.lookup("Person"), staff_schema, store, "person-1", disabled_config)

    employee = store.list("Employee")[0]
    assert employee["managedBy"] == "person-1"
    assert "ownedBy" not in employee


def test_configured_verbs_choose_the_back_reference(staff_schema, store, disabled_config):
    """Field verbs registered on the config's registry steer the link."""
    verbs = disabled_config.verbs.copy()
    verbs.register_field_verb("manager", "owns")
    config = disabled_config.with_changes(verbs=verbs)

    resolve_forward_exact("Person", {}, staff_schema.lookup("Person"), staff_schema, store, "person-1", config)

    employee = store.list("Employee")[0]
    assert employee["ownedBy"] == "person-1"
    assert "managedBy" not in employee
