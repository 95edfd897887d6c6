from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Values come from the environment or a .env file and are validated at
    startup, so a missing DATABASE_URL fails immediately. Constructed once by
    the application factory and passed to whatever needs it.
    """

    # LLM
    LLM_PROVIDER: Literal["openai", "openrouter"] = "openai"
    OPENAI_API_KEY: str = ""
    OPENROUTER_API_KEY: str = ""
    OPENROUTER_BASE_URL: str = "https://openrouter.ai/api/v1"
    LLM_MODEL: str = "gpt-4o-mini"
    LLM_FALLBACK_MODELS: list[str] = []
    LLM_TIMEOUT_SECONDS: float = 30.0
    LLM_MAX_OUTPUT_TOKENS: int = 4000
    GENERATION_TEMPERATURE: float = 0.7
    TRANSLATION_TEMPERATURE: float = 0.2

    # Database
    DATABASE_URL: str  # async driver (asyncpg)
    DATABASE_URL_SYNC: str  # sync driver (for Alembic CLI)

    # Documents
    TRANSLATION_PREVIEW_TTL_MINUTES: int = 30
    PDF_OUTPUT_DIR: str = "generated_pdfs"
    PDF_COMPANY_NAME: str = "Company Name"
    MAX_UPLOAD_SIZE_MB: int = 20

    # App
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}
