"""Backend invocation with named recovery policies."""

import time
from typing import Any, Dict, Optional
from schemacascade.errors import BackendError, GenerationFailure, RecoveryPolicy
from schemacascade.config.logging import get_logger
from .config import GenerationConfig, GenerationDetails

logger = get_logger(__name__)


def _report(config: GenerationConfig, details: GenerationDetails) -> None:
    if config.on_generate is not None:
        config.on_generate(details)


def invoke_backend(
    config: GenerationConfig,
    entity_type: str,
    target_shape: Dict[str, str],
    prompt: str,
    policy: RecoveryPolicy,
    field_name: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """
    Call the configured backend for one target shape.

    Args:
        config: Generation configuration
        entity_type: Type being generated (for error reporting)
        target_shape: Field name to generation instruction
        prompt: Combined prompt
        policy: FALLBACK returns None on failure, PROPAGATE raises
        field_name: Field being generated, when the call targets one field

    Returns:
        Generated values, or None when the backend is disabled or failed
        under the FALLBACK policy

    Raises:
        GenerationFailure: Backend failed under the PROPAGATE policy
    """
    if not config.backend_enabled or not target_shape:
        return None

    start = time.perf_counter()
    try:
        result = config.backend.generate(target_shape, prompt, config.model)
    except BackendError as e:
        _report(
            config,
            GenerationDetails(
                entity_type=entity_type,
                model=config.model,
                prompt=prompt,
                error=str(e),
            ),
        )
        failure = GenerationFailure(str(e), entity_type, field_name, cause=e)
        if policy is RecoveryPolicy.FALLBACK:
            logger.warning(f"{failure}; falling back to placeholder values")
            return None
        logger.error(str(failure))
        raise failure from e

    latency_ms = (time.perf_counter() - start) * 1000
    _report(
        config,
        GenerationDetails(
            entity_type=entity_type,
            model=config.model,
            prompt=prompt,
            result=result,
            latency_ms=latency_ms,
        ),
    )
    logger.debug(
        f"Backend generated {len(result)}/{len(target_shape)} fields for "
        f"{entity_type} in {latency_ms:.0f}ms"
    )
    return result
