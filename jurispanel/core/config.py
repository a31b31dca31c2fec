# # jurispanel/core/config.py
"""
Application configuration using Pydantic Settings
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
import json
from pydantic import field_validator


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables
    """

    # Application
    APP_NAME: str = "JurisPanel"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./jurispanel.db"
    DATABASE_ECHO: bool = False

    # CORS
    CORS_ORIGINS: str = '["http://localhost:3000", "http://localhost:5173"]'
    CORS_ORIGIN_REGEX: str | None = None

    # AI providers
    # Ambient credentials used when the reviewer has not stored a key for the
    # active provider. Anthropic additionally falls back to Bedrock.
    DEFAULT_AI_PROVIDER: str = "google"
    DEFAULT_AI_TEMPERATURE: float = 0.2
    GOOGLE_API_KEY: str = ""
    GEMINI_API_KEY: str = ""
    OPENAI_API_KEY: str = ""
    ANTHROPIC_API_KEY: str = ""
    GOOGLE_API_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    OPENAI_API_BASE_URL: str = "https://api.openai.com/v1"
    ANTHROPIC_API_BASE_URL: str = "https://api.anthropic.com/v1"
    ANTHROPIC_API_VERSION: str = "2023-06-01"
    AI_HTTP_TIMEOUT_SECONDS: float = 600.0
    AI_MAX_OUTPUT_TOKENS: int = 8192

    # AWS Bedrock (keyless Anthropic fallback)
    AWS_REGION: str = "us-east-1"
    BEDROCK_MODEL_ID: str = "anthropic.claude-3-5-sonnet-20240620-v1:0"

    # Extraction
    METADATA_MAX_CHARS: int = 30000
    METADATA_MODEL_GOOGLE: str = "gemini-2.5-flash"
    MAX_UPLOAD_BYTES: int = 52428800  # 50MB

    # Audit trail
    AUDIT_LOG_RETENTION: int = 1000

    @field_validator("DEFAULT_AI_PROVIDER", mode="before")
    @classmethod
    def normalize_provider(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("BEDROCK_MODEL_ID", mode="before")
    @classmethod
    def strip_bedrock_model_id(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip()
        return v

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from string to list"""
        try:
            if isinstance(self.CORS_ORIGINS, str):
                return json.loads(self.CORS_ORIGINS)
            return self.CORS_ORIGINS
        except json.JSONDecodeError:
            return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def google_ambient_key(self) -> str:
        return (self.GEMINI_API_KEY or self.GOOGLE_API_KEY).strip()


# Create settings instance
settings = Settings()
