from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    workspace_root: Path = Path.home() / "NotebookAI"
    models_dir: Path = Path.home() / "NotebookAI" / "models"
    index_dir: Path = Path.home() / "NotebookAI" / "indexes"
    log_level: str = "INFO"

    embedding_backend: Literal["sentence-transformers", "ollama", "openai", "hash"] = "openai"
    embedding_model: str = "text-embedding-3-small"

    llm_provider: Literal["none", "ollama", "openai"] = "openai"
    ollama_base_url: str = "http://127.0.0.1:11434"
    ollama_model: str = "llama3.1"
    openai_base_url: str = "https://api.openai.com/v1"
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o"
    llm_max_tokens: int = 2048
    llm_timeout: float = 60.0

    # Ingestion controls
    max_chunk_size: int = 4000
    summary_context_chars: int = 2000  # only this much of a document is sent for its summary
    preview_chars: int = 200

    model_config = SettingsConfigDict(env_file=".env", env_prefix="NOTEBOOKAI_", extra="ignore")

    def ensure_directories(self) -> None:
        for directory in (self.workspace_root, self.models_dir, self.index_dir):
            Path(directory).mkdir(parents=True, exist_ok=True)


@lru_cache(maxsize=1)
def get_settings() -> AppConfig:
    return AppConfig()


def reset_settings_cache() -> None:
    get_settings.cache_clear()
