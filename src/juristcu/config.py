"""
Configuration settings for the JurisTCU classification service.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development (see .env.example).
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "JurisTCU API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"

    # === Authentication ===
    API_KEY: str = ""  # Must start with "tcu_"
    API_KEY_PREFIX: str = "tcu_"

    # === Provider Credentials ===
    GEMINI_KEYS: str = ""  # Comma-separated, tried in order
    ANTHROPIC_API_KEY: Optional[str] = None
    OPENAI_API_KEY: Optional[str] = None

    # === Provider Models ===
    GEMINI_MODEL: str = "gemini-2.0-flash-exp"
    CLAUDE_MODEL_VERSION: str = "sonnet-4.5"
    OPENAI_MODEL_VERSION: str = "4.1"

    # === Provider Endpoints ===
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com"
    ANTHROPIC_BASE_URL: str = "https://api.anthropic.com"
    OPENAI_BASE_URL: str = "https://api.openai.com"
    PROVIDER_TIMEOUT: int = 60  # seconds, enforced by the transport clients

    # === LLM Generation Parameters ===
    LLM_TEMPERATURE: float = 0.1
    LLM_MAX_TOKENS: int = 500

    # === Evaluation ===
    BODY_PREFIX_LIMIT: int = 2000  # chars of texto_pdf sent per prompt
    JUSTIFICATION_MAX_LENGTH: int = 200
    COURTESY_DELAY_SECONDS: float = 0.5  # after every successful provider call
    QUALIFYING_THRESHOLD: float = 60.0  # percent

    # === Request Limits ===
    MIN_CASE_TEXT_LENGTH: int = 50
    DEFAULT_MAX_RESULTS: int = 10
    MAX_RESULTS_CAP: int = 100
    MAX_DOCUMENTS_CAP: int = 10000
    PROGRESS_LOG_INTERVAL: int = 10  # documents

    # === Document Store ===
    SUPABASE_URL: Optional[str] = None
    SUPABASE_KEY: Optional[str] = None
    DOCUMENTS_TABLE: str = "acordaos"
    DOCUMENTS_PAGE_SIZE: int = 1000
    DOCUMENTS_FILE: Optional[str] = None  # JSON corpus for local runs without Supabase

    # === Prompts ===
    PROMPT_TEMPLATES_DIR: Optional[str] = None  # defaults to the templates shipped in juristcu/prompts

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True

    @property
    def gemini_keys(self) -> list[str]:
        """Gemini keys in rotation order, blanks dropped."""
        return [key.strip() for key in self.GEMINI_KEYS.split(",") if key.strip()]

    @property
    def has_any_provider(self) -> bool:
        return bool(self.gemini_keys or self.ANTHROPIC_API_KEY or self.OPENAI_API_KEY)

    def startup_errors(self) -> list[str]:
        """Configuration problems that must stop the service from starting."""
        errors = []
        if not self.API_KEY:
            errors.append("API_KEY não configurada")
        elif not self.API_KEY.startswith(self.API_KEY_PREFIX):
            errors.append(f'API_KEY deve começar com "{self.API_KEY_PREFIX}"')
        if not self.has_any_provider:
            errors.append(
                "Pelo menos uma chave de IA é necessária "
                "(GEMINI_KEYS, ANTHROPIC_API_KEY ou OPENAI_API_KEY)"
            )
        return errors


# Global settings instance
settings = Settings()
