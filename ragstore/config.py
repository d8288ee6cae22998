"""
Runtime configuration for the document store service, read from the
environment and an optional .env file.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Where the snapshot lives, which embedding model fills it, and the top-k
    values used by the HTTP and CLI entry points.
    """

    model_config = SettingsConfigDict(
        env_file=(".env",),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    openai_api_key: SecretStr | None = Field(default=None, alias="OPENAI_API_KEY")
    embedding_model_name: str = Field(default="text-embedding-3-small", alias="EMBEDDING_MODEL_NAME")
    embed_batch_size: int = Field(default=64, gt=0, alias="EMBED_BATCH_SIZE")

    vector_store_path: str = Field(default="./data", alias="VECTOR_STORE_PATH")
    vector_store_id: str = Field(default="vectorstore", alias="VECTOR_STORE_ID")

    default_top_k: int = Field(default=4, alias="DEFAULT_TOP_K")
    context_top_k: int = Field(default=3, alias="CONTEXT_TOP_K")

    admin_token: SecretStr | None = Field(default=None, alias="ADMIN_TOKEN")

    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=8000, alias="APP_PORT")


settings = Settings()


def setup_logging() -> logging.Logger:
    """
    Route ragstore log records (store writes, searches, bootstrap) to stderr.
    """
    logging.basicConfig(
        level=logging.INFO,
        format="[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
    )
    return logging.getLogger("ragstore")


def public_settings() -> Dict[str, Any]:
    """
    Settings as logged at startup, minus the API key and admin token.
    """
    return settings.model_dump(
        exclude={"openai_api_key", "admin_token"},
        exclude_none=True,
    )


__all__ = ["Settings", "settings", "setup_logging", "public_settings"]
