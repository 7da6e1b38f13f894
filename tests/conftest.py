"""Shared fixtures for schemacascade tests."""

import pytest
from schemacascade import verbs
from schemacascade.config.settings import reset_settings
from schemacascade.errors import BackendError
from schemacascade.generation.backend.backend import StaticBackend
from schemacascade.generation.config import GenerationConfig, reset_generation_config
from schemacascade.generation.providers.placeholder import PlaceholderValueGenerator
from schemacascade.schema.models import Schema
from schemacascade.store.memory import MemoryStore


class FailingBackend:
    """Backend that always raises the given exception."""

    def __init__(self, error: Exception):
        self.error = error
        self.calls = 0

    def generate(self, target_shape, prompt, model):
        self.calls += 1
        raise self.error


@pytest.fixture(autouse=True)
def isolated_state(monkeypatch):
    """Fresh verb tables, settings and default generation config per test."""
    monkeypatch.setattr(verbs, "_default_registry", verbs.VerbRegistry())
    reset_settings()
    reset_generation_config()
    yield
    reset_settings()
    reset_generation_config()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def disabled_config():
    """Configuration with the content backend switched off."""
    return GenerationConfig(
        enabled=False,
        backend=StaticBackend(),
        value_generator=PlaceholderValueGenerator(),
    )


def make_config(backend, **kwargs):
    """Enabled configuration around an explicit backend."""
    return GenerationConfig(
        enabled=True,
        backend=backend,
        value_generator=PlaceholderValueGenerator(),
        **kwargs,
    )


def failing_backend(message: str = "service unavailable") -> FailingBackend:
    return FailingBackend(BackendError(message))


def relation(target, operator="->", **kwargs):
    """Field dict for a relation to ``target``."""
    return {"type": target, "is_relation": True, "operator": operator, **kwargs}


@pytest.fixture
def team_schema():
    """Team has members; Member points back at Team and has a required name."""
    return Schema.model_validate(
        {
            "entities": {
                "Team": {
                    "fields": {
                        "name": {"type": "string"},
                        "members": relation("Member", is_array=True),
                    }
                },
                "Member": {
                    "fields": {
                        "name": {"type": "string"},
                        "team": relation("Team", operator="<-"),
                    }
                },
            }
        }
    )


@pytest.fixture
def team_schema_optional_scalars():
    """Same as team_schema, but Member has no required scalar fields."""
    return Schema.model_validate(
        {
            "entities": {
                "Team": {
                    "fields": {
                        "name": {"type": "string"},
                        "members": relation("Member", is_array=True),
                    }
                },
                "Member": {
                    "fields": {
                        "nickname": {"type": "string", "is_optional": True},
                        "team": relation("Team", operator="<-"),
                    }
                },
            }
        }
    )


@pytest.fixture
def self_referential_schema():
    """Type A requires a singular forward relation to A."""
    return Schema.model_validate(
        {
            "entities": {
                "A": {
                    "fields": {
                        "label": {"type": "string"},
                        "next": relation("A"),
                    }
                }
            }
        }
    )
