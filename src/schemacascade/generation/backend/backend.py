"""Content-generation backends."""

import json
from typing import Any, Callable, Dict, List, Optional, Protocol
from schemacascade.errors import BackendError
from schemacascade.config.logging import get_logger
from .json_parser import JSONParseError, extract_json
from .llm_client import chat

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You generate realistic field values for records in a data model. "
    "Respond with a single JSON object and nothing else. Use exactly the "
    "keys you are given; every value must follow the instruction for its key."
)


class ContentBackend(Protocol):
    """Produces field values for a target shape."""

    def generate(
        self, target_shape: Dict[str, str], prompt: str, model: Optional[str]
    ) -> Dict[str, Any]:
        """
        Generate values for every key of ``target_shape``.

        Args:
            target_shape: Field name to generation instruction
            prompt: Combined generation prompt
            model: Model identifier, None for the backend default

        Returns:
            Field name to generated value

        Raises:
            BackendError: If values cannot be produced
        """
        ...


def build_messages(target_shape: Dict[str, str], prompt: str) -> List[Dict[str, str]]:
    """Build chat messages asking for one JSON object with the shape's keys."""
    shape = json.dumps(target_shape, indent=2, ensure_ascii=False)
    user = f"{prompt}\n\nReturn a JSON object with these keys and instructions:\n{shape}"
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user},
    ]


class LLMBackend:
    """Backend that asks a chat LLM for a JSON object."""

    def __init__(self, chat_fn: Callable[..., str] = chat):
        self.chat_fn = chat_fn

    def generate(
        self, target_shape: Dict[str, str], prompt: str, model: Optional[str]
    ) -> Dict[str, Any]:
        messages = build_messages(target_shape, prompt)
        try:
            response = self.chat_fn(messages, model=model)
        except Exception as e:
            raise BackendError(f"LLM call failed: {e}") from e

        try:
            parsed = extract_json(response)
        except JSONParseError as e:
            raise BackendError(str(e)) from e

        result = {key: parsed[key] for key in target_shape if key in parsed}
        missing = [key for key in target_shape if key not in parsed]
        if missing:
            logger.debug(f"LLM response missing keys: {', '.join(missing)}")
        return result


class StaticBackend:
    """Backend returning fixed values; records every call it receives."""

    def __init__(self, values: Optional[Dict[str, Any]] = None):
        self.values = dict(values or {})
        self.calls: List[Dict[str, Any]] = []

    def generate(
        self, target_shape: Dict[str, str], prompt: str, model: Optional[str]
    ) -> Dict[str, Any]:
        self.calls.append({"target_shape": dict(target_shape), "prompt": prompt, "model": model})
        return {key: self.values[key] for key in target_shape if key in self.values}
