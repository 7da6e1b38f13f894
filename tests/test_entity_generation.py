"""Tests for recursive entity generation."""

import pytest
from schemacascade.errors import UnknownType
from schemacascade.generation import entity as entity_module
from schemacascade.generation.backend.backend import StaticBackend
from schemacascade.generation.entity import (
    GenerationContext,
    build_target_shape,
    generate_entity,
)
from schemacascade.schema.models import Schema
from conftest import FailingBackend, failing_backend, make_config, relation


@pytest.fixture
def blog_schema():
    return Schema.model_validate(
        {
            "entities": {
                "Post": {
                    "fields": {
                        "title": {"type": "string"},
                        "body": {"type": "string", "prompt": "A short paragraph"},
                        "views": {"type": "number"},
                        "status": {"type": "string", "enum_values": ["draft", "live"]},
                        "tags": {"type": "Keyword tags", "is_array": True},
                        "comments": relation("Comment", is_array=True),
                    },
                    "metadata": {"$instructions": "A cooking blog"},
                },
                "Comment": {
                    "fields": {
                        "text": {"type": "string"},
                        "post": relation("Post", operator="<-"),
                    }
                },
            }
        }
    )


def count_calls(monkeypatch):
    """Wrap generate_entity so recursive calls are counted."""
    calls = []
    original = entity_module.generate_entity

    def counting(*args, **kwargs):
        calls.append(args[0])
        return original(*args, **kwargs)

    monkeypatch.setattr(entity_module, "generate_entity", counting)
    return calls


def test_self_reference_stops_at_depth_ceiling(self_referential_schema, disabled_config, monkeypatch):
    """A type requiring itself recurses at most ten levels."""
    calls = count_calls(monkeypatch)
    root = entity_module.generate_entity(
        "A", None, GenerationContext(parent_type="Root"), self_referential_schema, config=disabled_config
    )

    assert len(calls) == 11
    node = root
    for _ in range(10):
        assert not node.is_empty
        node = node.pending["next"].entity
    assert node.is_empty


def test_max_depth_is_configurable(self_referential_schema, disabled_config, monkeypatch):
    """The depth ceiling comes from the configuration."""
    calls = count_calls(monkeypatch)
    entity_module.generate_entity(
        "A",
        None,
        GenerationContext(parent_type="Root"),
        self_referential_schema,
        config=disabled_config.with_changes(max_depth=3),
    )
    assert len(calls) == 4


def test_depth_at_ceiling_returns_empty(self_referential_schema, disabled_config):
    """Starting at the ceiling yields an empty entity without touching the schema."""
    result = generate_entity(
        "Missing", None, GenerationContext(parent_type="Root"), self_referential_schema, 10, disabled_config
    )
    assert result.is_empty


def test_unknown_type_raises(blog_schema, disabled_config):
    """Generating a type absent from the schema raises UnknownType."""
    with pytest.raises(UnknownType, match="Unknown type: Ghost"):
        generate_entity("Ghost", None, GenerationContext(parent_type="Root"), blog_schema, config=disabled_config)


def test_placeholder_synthesis_when_disabled(blog_schema, disabled_config):
    """With the backend off, string and prompt fields are synthesized."""
    result = generate_entity(
        "Post", None, GenerationContext(parent_type="Root"), blog_schema, config=disabled_config
    )

    assert result.data["title"]
    assert result.data["body"]
    assert isinstance(result.data["tags"], list)
    assert len(result.data["tags"]) == 1
    assert "views" not in result.data
    assert "status" not in result.data
    assert "comments" not in result.data
    assert not result.pending


def test_backend_values_are_used(blog_schema):
    """Backend output wins; fields it leaves out are synthesized."""
    backend = StaticBackend({"title": "Perfect Risotto", "views": 42})
    result = generate_entity(
        "Post", "About rice", GenerationContext(parent_type="Root"), blog_schema, config=make_config(backend)
    )

    assert result.data["title"] == "Perfect Risotto"
    assert result.data["views"] == 42
    assert result.data["body"]
    assert len(backend.calls) == 1
    assert backend.calls[0]["prompt"].startswith("About rice")


def test_backend_failure_falls_back(blog_schema):
    """A BackendError at entity level is logged and replaced by synthesis."""
    details = []
    backend = failing_backend()
    config = make_config(backend, on_generate=details.append)

    result = generate_entity("Post", None, GenerationContext(parent_type="Root"), blog_schema, config=config)

    assert backend.calls == 1
    assert result.data["title"]
    assert len(details) == 1
    assert details[0].entity_type == "Post"
    assert "service unavailable" in details[0].error


def test_unclassified_backend_error_propagates(blog_schema):
    """Errors that are not BackendError are not swallowed."""
    config = make_config(FailingBackend(RuntimeError("boom")))
    with pytest.raises(RuntimeError, match="boom"):
        generate_entity("Post", None, GenerationContext(parent_type="Root"), blog_schema, config=config)


def test_backward_reference_links_to_parent(blog_schema, disabled_config):
    """A backward field targeting the immediate parent gets the parent id."""
    context = GenerationContext(parent_type="Post", parent_data={"title": "Risotto"}, parent_id="post-1")
    result = generate_entity("Comment", None, context, blog_schema, config=disabled_config)

    assert result.data["post"] == "post-1"
    assert not result.pending


def test_backward_reference_without_parent_id(blog_schema, disabled_config):
    """Without a parent identity the backward field stays unset."""
    context = GenerationContext(parent_type="Post", parent_data={"title": "Risotto"})
    result = generate_entity("Comment", None, context, blog_schema, config=disabled_config)
    assert "post" not in result.data


def test_parent_instructions_reach_the_prompt(blog_schema):
    """The parent's $instructions and string fields are part of the prompt."""
    backend = StaticBackend()
    context = GenerationContext(parent_type="Post", parent_data={"title": "Risotto"}, parent_id="post-1")
    generate_entity("Comment", None, context, blog_schema, config=make_config(backend))

    prompt = backend.calls[0]["prompt"]
    assert "Context: A cooking blog" in prompt
    assert "title: Risotto" in prompt


def test_target_shape(blog_schema):
    """Relations are excluded; enums list their values."""
    shape = build_target_shape(blog_schema.lookup("Post"))

    assert shape["title"] == "Generate a title"
    assert shape["body"] == "A short paragraph"
    assert shape["status"] == "One of: draft, live"
    assert shape["views"] == "number"
    assert shape["tags"] == "Keyword tags"
    assert "comments" not in shape
