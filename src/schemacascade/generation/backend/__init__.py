"""Content-generation backends and LLM plumbing."""

from .backend import ContentBackend, LLMBackend, StaticBackend, build_messages
from .json_parser import JSONParseError, extract_json
from .llm_client import chat, set_forced_provider
from .retry import retry_with_backoff

__all__ = [
    "ContentBackend",
    "LLMBackend",
    "StaticBackend",
    "build_messages",
    "JSONParseError",
    "extract_json",
    "chat",
    "set_forced_provider",
    "retry_with_backoff",
]
