"""
Name: Settings

Responsibilities:
  - Read every tunable from environment variables (or .env) with types
  - Reject inconsistent values before the app serves a request
  - Provide defaults for chunking, retrieval, providers and Storm

Collaborators:
  - main.py: reads settings for CORS and startup logging
  - container.py: reads settings to build chunker, providers and Storm client
  - routes.py: request size and top-k limits

Constraints:
  - Values only; nothing here talks to a provider

Notes:
  - Singleton via lru_cache; tests call get_settings.cache_clear()
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        google_api_key: Google Gemini API key
        allowed_origins: Comma-separated CORS origins
        chat_model: Default completion model
        embedding_model: Embedding model id
        chunk_size_tokens: Target tokens per chunk (default: 512)
        min_chunk_size_chars: Minimum chars before a punctuation cut (default: 350)
        min_chunk_length_to_embed: Fragments at or below this length are dropped (default: 5)
        max_num_chunks: Maximum chunks per document (default: 10_000)
        keep_separator: Keep newlines inside chunks (default: True)
        default_max_results: Retrieved chunks per RAG query (default: 3)
        max_top_k: Upper bound for max_results (default: 20)
        max_query_chars: Maximum query length (default: 2_000)
        max_upload_bytes: Maximum uploaded file size (default: 10MB)
        storm_api_key: Storm API key (Storm endpoints disabled when empty)
        storm_base_url: Storm API base URL
        storm_default_bucket_id: Bucket used when a request names none
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_env: str = "development"
    google_api_key: str = ""

    # CORS configuration
    allowed_origins: str = "http://localhost:3000"
    cors_allow_credentials: bool = False

    # Models
    chat_model: str = "gemini-1.5-flash"
    embedding_model: str = "text-embedding-004"

    # Chunking configuration
    chunk_size_tokens: int = 512
    min_chunk_size_chars: int = 350
    min_chunk_length_to_embed: int = 5
    max_num_chunks: int = 10_000
    keep_separator: bool = True
    tokenizer_encoding: str = "cl100k_base"

    # API limits
    default_max_results: int = 3
    max_top_k: int = 20
    max_query_chars: int = 2_000
    max_upload_bytes: int = 10 * 1024 * 1024  # 10MB

    # RAG
    prompt_version: str = "v1"

    # Testing/CI
    fake_llm: bool = False
    fake_embeddings: bool = False

    # Retry/Resilience
    retry_max_attempts: int = 3
    retry_base_delay_seconds: float = 1.0
    retry_max_delay_seconds: float = 30.0

    # Storm
    storm_api_key: str = ""
    storm_base_url: str = "https://live-stargate.sionic.im"
    storm_default_bucket_id: str = ""
    storm_timeout_seconds: float = 60.0

    # Logging
    log_level: str = "INFO"

    @field_validator(
        "chunk_size_tokens",
        "min_chunk_size_chars",
        "max_num_chunks",
        "default_max_results",
        "max_top_k",
    )
    @classmethod
    def must_be_positive(cls, v: int, info) -> int:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be greater than 0")
        return v

    @field_validator("min_chunk_length_to_embed")
    @classmethod
    def min_embed_length_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("min_chunk_length_to_embed must be >= 0")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper() or "INFO"

    def validate_chunk_params(self) -> None:
        """
        Cross-field validation for the chunker.
        R: Checks pydantic cannot express per field; run by get_settings().
        """
        if self.min_chunk_length_to_embed >= self.min_chunk_size_chars:
            raise ValueError(
                f"min_chunk_length_to_embed ({self.min_chunk_length_to_embed}) must be "
                f"less than min_chunk_size_chars ({self.min_chunk_size_chars})"
            )
        if self.default_max_results > self.max_top_k:
            raise ValueError(
                f"default_max_results ({self.default_max_results}) must not exceed "
                f"max_top_k ({self.max_top_k})"
            )

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    @property
    def storm_enabled(self) -> bool:
        return bool(self.storm_api_key.strip())

    @model_validator(mode="after")
    def validate_ai_requirements(self):
        if not self.google_api_key and not (self.fake_llm and self.fake_embeddings):
            raise ValueError(
                "GOOGLE_API_KEY is required unless FAKE_LLM=1 and FAKE_EMBEDDINGS=1"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """
    R: Process-wide Settings, validated once.

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    settings = Settings()
    settings.validate_chunk_params()
    return settings
