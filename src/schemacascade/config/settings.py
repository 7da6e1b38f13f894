"""Application settings using Pydantic Settings."""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv


def find_and_load_env_file():
    """Find and load .env file in current directory or parent directories."""
    search_paths = [
        Path.cwd(),
        Path(__file__).parent.parent.parent.parent,  # Project root
    ]

    for start_path in search_paths:
        current = start_path.resolve()
        # Check current directory and up to 3 levels up
        for _ in range(4):
            env_path = current / ".env"
            if env_path.exists():
                load_dotenv(env_path, override=False)
                return str(env_path)
            parent = current.parent
            if parent == current:  # Reached root
                break
            current = parent
    return None


# Load .env file before Settings class is defined
find_and_load_env_file()


class Settings(BaseSettings):
    """Application configuration settings."""

    # LLM Configuration (OpenAI, Gemini, or a local OpenAI-compatible server)
    openai_api_key: Optional[str] = None
    model_name: Optional[str] = None
    gemini_api_key: Optional[str] = None
    gemini_model: Optional[str] = None
    llm_url: Optional[str] = None
    model: Optional[str] = None
    temperature: float = 0.2

    # LLM Timeout Configuration (in seconds)
    llm_timeout: float = 120.0
    llm_max_retries: int = 3
    llm_retry_delay: float = 2.0

    # Generation Configuration
    generation_enabled: bool = True
    generation_model: Optional[str] = None  # None = provider default
    max_depth: int = 10
    value_generator: str = "placeholder"
    seed: int = 7

    # Logging Configuration
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    model_config = SettingsConfigDict(
        env_file=None,  # We load it manually with dotenv
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        protected_namespaces=(),
    )

    def __init__(self, **kwargs):
        """Initialize settings and create the log directory if needed."""
        find_and_load_env_file()
        super().__init__(**kwargs)
        if self.log_file:
            self.log_file = Path(self.log_file)
            self.log_file.parent.mkdir(parents=True, exist_ok=True)

    @property
    def has_llm(self) -> bool:
        """Whether any LLM provider is configured."""
        return bool(
            (self.openai_api_key and self.model_name)
            or (self.gemini_api_key and self.gemini_model)
            or (self.llm_url and self.model)
        )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
