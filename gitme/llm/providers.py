"""HTTP adapters for the hosted model providers."""

from __future__ import annotations

import http.client
import json
from abc import ABC, abstractmethod
from typing import Any, Callable
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from ..config import ProviderConfig
from ..errors import ProviderError, RateLimitedError


class Provider(ABC):
    """Single-turn text generation against one hosted model."""

    def __init__(
        self,
        config: ProviderConfig,
        *,
        urlopen_fn: Callable[..., Any] = urlopen,
    ) -> None:
        self.config = config
        self._urlopen_fn = urlopen_fn

    @property
    def name(self) -> str:
        return self.config.name

    def generate(self, prompt: str) -> str:
        """Send the prompt and return the generated text verbatim."""
        # Read at call time so a key added to the config object is picked up.
        api_key = self.config.api_key
        if not api_key:
            raise ProviderError(self.name, f"{self.name} API key not configured")
        url, headers, payload = self._build_request(prompt, api_key)
        response_payload = self._post(url, headers, payload)
        content = self._extract_content(response_payload)
        if not content:
            raise ProviderError(self.name, f"Empty response from {self.name}")
        return content

    @abstractmethod
    def _build_request(
        self, prompt: str, api_key: str
    ) -> tuple[str, dict[str, str], dict[str, object]]:
        """Return the endpoint, headers and JSON body for the prompt."""

    @abstractmethod
    def _extract_content(self, payload: dict[str, Any]) -> str:
        """Pull the generated text out of a provider response."""

    def _post(self, url: str, headers: dict[str, str], payload: dict[str, object]) -> dict[str, Any]:
        data = json.dumps(payload).encode("utf-8")
        request = Request(url, data=data, headers=headers, method="POST")
        try:
            with self._urlopen_fn(request, timeout=self.config.request_timeout) as response:
                raw = response.read()
        except HTTPError as exc:
            if exc.code == 429:
                raise RateLimitedError(self.name, f"{self.name} API rate limited (HTTP 429)") from exc
            raise ProviderError(self.name, f"{self.name} API error: {exc.code}") from exc
        except URLError as exc:
            raise ProviderError(self.name, f"{self.name} API request failed: {exc.reason}") from exc
        except (OSError, http.client.HTTPException) as exc:
            raise ProviderError(self.name, f"{self.name} API connection failed: {exc!r}") from exc

        try:
            parsed = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ProviderError(self.name, f"{self.name} API returned invalid JSON") from exc
        if not isinstance(parsed, dict):
            raise ProviderError(self.name, f"{self.name} API returned an unexpected payload")
        return parsed


class GeminiProvider(Provider):
    """Google Gemini ``generateContent`` endpoint."""

    def _build_request(
        self, prompt: str, api_key: str
    ) -> tuple[str, dict[str, str], dict[str, object]]:
        url = (
            f"{self.config.base_url}/models/{quote(self.config.model)}:generateContent"
            f"?key={quote(api_key, safe='')}"
        )
        payload: dict[str, object] = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.config.temperature,
                "maxOutputTokens": self.config.max_tokens,
            },
        }
        return url, {"Content-Type": "application/json"}, payload

    def _extract_content(self, payload: dict[str, Any]) -> str:
        candidates = payload.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            return ""
        first = candidates[0]
        if not isinstance(first, dict):
            return ""
        content = first.get("content")
        if not isinstance(content, dict):
            return ""
        parts = content.get("parts")
        if not isinstance(parts, list) or not parts:
            return ""
        part = parts[0]
        if isinstance(part, dict) and isinstance(part.get("text"), str):
            return part["text"]
        return ""


class GroqProvider(Provider):
    """Groq's OpenAI-compatible chat completions endpoint."""

    def _build_request(
        self, prompt: str, api_key: str
    ) -> tuple[str, dict[str, str], dict[str, object]]:
        url = f"{self.config.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        payload: dict[str, object] = {
            "model": self.config.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }
        return url, headers, payload

    def _extract_content(self, payload: dict[str, Any]) -> str:
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            return ""
        first = choices[0]
        if not isinstance(first, dict):
            return ""
        message = first.get("message")
        if isinstance(message, dict):
            content = message.get("content")
            if isinstance(content, str):
                return content
        text = first.get("text")
        if isinstance(text, str):
            return text
        return ""


__all__ = ["GeminiProvider", "GroqProvider", "Provider"]
