from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import httpx

from ..config import AppConfig
from ..errors import ProviderError


class LLMBackend(Protocol):
    async def generate(self, prompt: str, max_tokens: int) -> str:
        ...


@dataclass
class OllamaBackend:
    base_url: str
    model: str
    timeout: float = 60.0

    async def generate(self, prompt: str, max_tokens: int) -> str:
        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {"num_predict": max_tokens},
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(f"{self.base_url}/api/generate", json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise ProviderError(f"Ollama HTTP error: {e.response.status_code} - {e.response.text}") from e
        except httpx.RequestError as e:
            raise ProviderError(f"Cannot connect to Ollama at {self.base_url}: {e}") from e

        if "error" in data:
            raise ProviderError(f"Ollama error: {data['error']}")
        return data.get("response", "").strip()


@dataclass
class OpenAIBackend:
    """Chat-completions client for OpenAI and API-compatible hosts."""

    base_url: str
    api_key: str | None
    model: str
    timeout: float = 60.0

    async def generate(self, prompt: str, max_tokens: int) -> str:
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": max_tokens,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(f"{self.base_url}/chat/completions", json=payload, headers=headers)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise ProviderError(f"OpenAI HTTP error: {e.response.status_code} - {e.response.text}") from e
        except httpx.RequestError as e:
            raise ProviderError(f"Cannot connect to OpenAI at {self.base_url}: {e}") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError(f"Malformed completion response: {data!r}") from e
        return (content or "").strip()


@dataclass
class DummyBackend:
    async def generate(self, prompt: str, max_tokens: int) -> str:
        return (
            "Offline model placeholder response. Configure NOTEBOOKAI_LLM_PROVIDER=openai "
            "or NOTEBOOKAI_LLM_PROVIDER=ollama to enable real answers."
        )


def create_llm_backend(settings: AppConfig) -> LLMBackend:
    if settings.llm_provider == "openai":
        return OpenAIBackend(
            base_url=settings.openai_base_url,
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            timeout=settings.llm_timeout,
        )
    if settings.llm_provider == "ollama":
        return OllamaBackend(
            base_url=settings.ollama_base_url,
            model=settings.ollama_model,
            timeout=settings.llm_timeout,
        )
    return DummyBackend()
