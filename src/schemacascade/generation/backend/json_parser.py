"""Robust JSON extraction from LLM output."""

import json
import re
from typing import Any, Dict, List
from schemacascade.config.logging import get_logger

logger = get_logger(__name__)


class JSONParseError(Exception):
    """Raised when JSON parsing fails."""

    pass


def _fix_common_json_issues(json_str: str) -> str:
    """
    Attempt to fix common JSON formatting issues.

    Fixes trailing commas and single-quoted keys.
    """
    original = json_str
    json_str = re.sub(r',(\s*[}\]])', r'\1', json_str)
    json_str = re.sub(r"'(\w+)'\s*:", r'"\1":', json_str)
    if json_str != original:
        logger.debug("Fixed common JSON issues (trailing commas, quotes)")
    return json_str


def _loads_object(json_str: str, label: str, errors: List[str]) -> Dict[str, Any] | None:
    for candidate, suffix in ((json_str, ""), (_fix_common_json_issues(json_str), " (after fix)")):
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError as e:
            errors.append(f"{label} parse error{suffix}: {e}")
            continue
        if isinstance(parsed, dict):
            return parsed
        errors.append(f"{label} is not a JSON object")
        return None
    return None


def _balanced_object(text: str) -> str | None:
    """Return the first brace-balanced ``{...}`` span in text."""
    start_idx = text.find('{')
    if start_idx == -1:
        return None
    depth = 0
    in_string = False
    escaped = False
    for i in range(start_idx, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == '\\':
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == '{':
            depth += 1
        elif ch == '}':
            depth -= 1
            if depth == 0:
                return text[start_idx:i + 1]
    return None


def extract_json(text: str) -> Dict[str, Any]:
    """
    Extract a JSON object from LLM output text.

    Handles markdown code blocks and explanatory text around the object.

    Args:
        text: Raw LLM output text

    Returns:
        Parsed JSON object

    Raises:
        JSONParseError: If no valid JSON object can be extracted
    """
    errors: List[str] = []

    match = re.search(r"```(?:json)?\s*(\{.*?\})\s*```", text, re.DOTALL)
    if match:
        parsed = _loads_object(match.group(1), "Code block", errors)
        if parsed is not None:
            return parsed

    span = _balanced_object(text)
    if span is not None:
        parsed = _loads_object(span, "JSON object", errors)
        if parsed is not None:
            return parsed

    parsed = _loads_object(text.strip(), "Full text", errors)
    if parsed is not None:
        return parsed

    error_msg = (
        f"Could not extract valid JSON from LLM output. "
        f"Errors: {'; '.join(errors[-3:])}"
    )
    logger.debug(f"Text content (first 1000 chars): {text[:1000]}...")
    raise JSONParseError(error_msg)
