"""LLM client wrapper supporting OpenAI, Gemini and local OpenAI-compatible servers."""

from typing import Dict, List, Optional
from schemacascade.config.settings import get_settings
from schemacascade.config.logging import get_logger
from .retry import retry_with_backoff

logger = get_logger(__name__)

# Global client instances
_gemini_client: Optional[object] = None
_openai_client: Optional[object] = None

# Global forced provider (None = use priority, "openai"/"local"/"gemini" = force that provider)
_forced_provider: Optional[str] = None


def _get_gemini_client():
    """Get or create the global Gemini client."""
    global _gemini_client
    if _gemini_client is None:
        try:
            import google.generativeai as genai
        except ImportError:
            raise ImportError(
                "google-generativeai package not installed. "
                "Install with: pip install 'schemacascade[gemini]'"
            )
        settings = get_settings()
        if not settings.gemini_api_key:
            raise ValueError("GEMINI_API_KEY not set in environment")
        genai.configure(api_key=settings.gemini_api_key)
        _gemini_client = genai
        logger.debug("Initialized Gemini client")
    return _gemini_client


def _get_openai_client():
    """Get or create the global OpenAI client."""
    global _openai_client
    if _openai_client is None:
        from openai import OpenAI
        settings = get_settings()
        if not settings.openai_api_key:
            raise ValueError("OPENAI_API_KEY not set in environment")
        _openai_client = OpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.llm_timeout,
        )
        logger.debug(f"Initialized OpenAI client with timeout={settings.llm_timeout}s")
    return _openai_client


def set_forced_provider(provider: Optional[str]) -> None:
    """
    Force a specific LLM provider to be used.

    Args:
        provider: "openai", "local", "gemini", or None to use priority order
    """
    global _forced_provider
    _forced_provider = provider
    logger.info(f"Forced LLM provider set to: {provider}")


def chat(messages: List[Dict[str, str]], model: Optional[str] = None) -> str:
    """
    Send messages to the configured LLM API.

    Args:
        messages: List of message dicts with 'role' and 'content' keys
        model: Optional model name overriding the provider's configured model

    Returns:
        Content of the assistant's response

    Raises:
        ValueError: If no provider is configured
        RuntimeError: If every configured provider failed
    """
    settings = get_settings()

    if _forced_provider == "openai":
        return _chat_openai(messages, model)
    elif _forced_provider == "local":
        return _chat_local(messages, model)
    elif _forced_provider == "gemini":
        return _chat_gemini(messages, model)

    # Priority order: OpenAI > Gemini > Local
    use_openai = settings.openai_api_key and settings.model_name
    use_gemini = settings.gemini_api_key and settings.gemini_model
    use_local = settings.llm_url and settings.model

    if not use_openai and not use_local and not use_gemini:
        raise ValueError(
            "No LLM API configured. Set either OPENAI_API_KEY/MODEL_NAME, "
            "LLM_URL/MODEL, or GEMINI_API_KEY/GEMINI_MODEL in .env"
        )

    if use_openai:
        try:
            return _chat_openai(messages, model)
        except Exception as e:
            logger.warning(f"OpenAI call failed: {e}. Falling back to next provider...")

    if use_gemini:
        try:
            return _chat_gemini(messages, model)
        except Exception as e:
            logger.warning(f"Gemini call failed: {e}. Falling back to next provider...")

    if use_local:
        return _chat_local(messages, model)

    raise RuntimeError(
        "All configured LLM providers failed. "
        "Please check your API keys and network connection."
    )


def _chat_gemini(messages: List[Dict[str, str]], model: Optional[str] = None) -> str:
    """Send messages to Gemini API."""
    settings = get_settings()
    genai = _get_gemini_client()
    model_name = model or settings.gemini_model

    system_content = ""
    user_parts = []
    for msg in messages:
        if msg["role"] == "system":
            system_content = msg["content"]
        elif msg["role"] == "user":
            user_parts.append(msg["content"])

    last_user = user_parts[-1] if user_parts else ""
    full_prompt = f"{system_content}\n\n{last_user}" if system_content else last_user

    logger.debug(
        f"Sending chat request to Gemini {model_name} "
        f"(temperature={settings.temperature}, timeout={settings.llm_timeout}s)"
    )

    def _make_request():
        response = genai.GenerativeModel(model_name=model_name).generate_content(
            full_prompt,
            generation_config={"temperature": settings.temperature},
            request_options={"timeout": settings.llm_timeout},
        )
        if getattr(response, "text", None):
            content = response.text
        elif getattr(response, "parts", None):
            content = "".join(part.text for part in response.parts if hasattr(part, "text"))
        else:
            content = str(response)
        logger.debug(f"Received response ({len(content)} chars)")
        return content

    return retry_with_backoff(
        func=_make_request,
        max_retries=settings.llm_max_retries,
        base_delay=settings.llm_retry_delay,
        timeout_errors=(TimeoutError,),
        operation_name=f"Gemini API call to {model_name}",
    )


def _chat_local(messages: List[Dict[str, str]], model: Optional[str] = None) -> str:
    """Send messages to a local OpenAI-compatible API."""
    from openai import APITimeoutError, OpenAI
    settings = get_settings()
    model_name = model or settings.model

    # Ensure base_url ends with /v1
    base_url = settings.llm_url.rstrip('/')
    if not base_url.endswith('/v1'):
        base_url = f"{base_url}/v1"

    client = OpenAI(
        base_url=base_url,
        api_key="not-needed",  # Local APIs often don't require a real key
        timeout=settings.llm_timeout,
    )

    logger.debug(
        f"Sending chat request to local model {model_name} at {settings.llm_url} "
        f"(temperature={settings.temperature}, timeout={settings.llm_timeout}s)"
    )

    def _make_request():
        response = client.chat.completions.create(
            model=model_name,
            messages=messages,
            temperature=settings.temperature,
        )
        if not response.choices:
            raise ValueError("No choices in response from local LLM")
        content = response.choices[0].message.content
        if content is None:
            raise ValueError("No content in message from local LLM")
        logger.debug(f"Received response ({len(content)} chars)")
        return content

    return retry_with_backoff(
        func=_make_request,
        max_retries=settings.llm_max_retries,
        base_delay=settings.llm_retry_delay,
        timeout_errors=(APITimeoutError, TimeoutError),
        operation_name=f"Local LLM API call to {model_name}",
    )


def _chat_openai(messages: List[Dict[str, str]], model: Optional[str] = None) -> str:
    """Send messages to OpenAI API."""
    from openai import APITimeoutError
    settings = get_settings()
    client = _get_openai_client()
    model_name = model or settings.model_name

    logger.debug(
        f"Sending chat request to OpenAI {model_name} "
        f"(temperature={settings.temperature}, timeout={settings.llm_timeout}s)"
    )

    def _make_request():
        response = client.chat.completions.create(
            model=model_name,
            messages=messages,
            temperature=settings.temperature,
            response_format={"type": "json_object"},
        )
        content = response.choices[0].message.content or ""
        logger.debug(f"Received response ({len(content)} chars)")
        return content

    return retry_with_backoff(
        func=_make_request,
        max_retries=settings.llm_max_retries,
        base_delay=settings.llm_retry_delay,
        timeout_errors=(APITimeoutError, TimeoutError),
        operation_name=f"OpenAI API call to {model_name}",
    )
