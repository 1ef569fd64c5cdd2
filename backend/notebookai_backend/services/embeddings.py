from __future__ import annotations

import asyncio
import hashlib
from dataclasses import dataclass
from typing import Protocol

import httpx

from ..config import AppConfig
from ..errors import ProviderError

try:
    from sentence_transformers import SentenceTransformer  # type: ignore
except ImportError:  # pragma: no cover - optional dependency
    SentenceTransformer = None  # type: ignore


class EmbeddingBackend(Protocol):
    async def embed(self, text: str) -> list[float]:
        ...


@dataclass
class SentenceTransformerBackend:
    model_name: str
    cache_dir: str
    _model: SentenceTransformer | None = None

    def _ensure_model(self) -> SentenceTransformer:
        if SentenceTransformer is None:
            raise ProviderError("sentence-transformers package is not available.")

        if self._model is None:
            self._model = SentenceTransformer(self.model_name, cache_folder=self.cache_dir)  # type: ignore[arg-type]
        return self._model

    async def embed(self, text: str) -> list[float]:
        model = self._ensure_model()
        vector = await asyncio.to_thread(model.encode, text, show_progress_bar=False)
        return [float(value) for value in vector]


@dataclass
class OpenAIEmbeddingBackend:
    base_url: str
    api_key: str | None
    model: str
    timeout: float = 60.0

    async def embed(self, text: str) -> list[float]:
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/embeddings",
                    json={"model": self.model, "input": text},
                    headers=headers,
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise ProviderError(f"Embedding HTTP error: {e.response.status_code} - {e.response.text}") from e
        except httpx.RequestError as e:
            raise ProviderError(f"Cannot connect to embedding provider at {self.base_url}: {e}") from e

        try:
            return data["data"][0]["embedding"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError(f"Malformed embedding response: {data!r}") from e


@dataclass
class OllamaEmbeddingBackend:
    base_url: str
    model: str
    timeout: float = 60.0

    async def embed(self, text: str) -> list[float]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/api/embeddings",
                    json={"model": self.model, "prompt": text},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise ProviderError(f"Ollama HTTP error: {e.response.status_code} - {e.response.text}") from e
        except httpx.RequestError as e:
            raise ProviderError(f"Cannot connect to Ollama at {self.base_url}: {e}") from e

        embedding = data.get("embedding")
        if not embedding:
            raise ProviderError(f"Ollama returned no embedding: {data.get('error', data)!r}")
        return embedding


class HashEmbeddingBackend:
    """
    Deterministic lightweight embedding fallback that hashes text to a fixed-size vector.
    Intended for tests and environments without an embedding provider.
    """

    dimension: int = 256

    async def embed(self, text: str) -> list[float]:
        checksum = hashlib.sha256(text.encode("utf-8")).digest()
        repeated = (checksum * ((self.dimension // len(checksum)) + 1))[: self.dimension]
        return [byte / 255.0 for byte in repeated]


def create_embedding_backend(settings: AppConfig) -> EmbeddingBackend:
    if settings.embedding_backend == "hash":
        return HashEmbeddingBackend()
    if settings.embedding_backend == "openai":
        return OpenAIEmbeddingBackend(
            base_url=settings.openai_base_url,
            api_key=settings.openai_api_key,
            model=settings.embedding_model,
            timeout=settings.llm_timeout,
        )
    if settings.embedding_backend == "ollama":
        return OllamaEmbeddingBackend(
            base_url=settings.ollama_base_url,
            model=settings.embedding_model,
            timeout=settings.llm_timeout,
        )

    return SentenceTransformerBackend(
        model_name=settings.embedding_model,
        cache_dir=str(settings.models_dir),
    )
