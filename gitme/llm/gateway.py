"""Primary/secondary provider failover with bounded retry on rate limits."""

from __future__ import annotations

import time
from typing import Callable, List, Protocol

from ..config import GitMeConfig, RetryPolicy
from ..errors import AllProvidersFailedError, ProviderError, RateLimitedError
from ..logging import get_logger
from .providers import GeminiProvider, GroqProvider


class TextProvider(Protocol):
    name: str

    def generate(self, prompt: str) -> str:
        ...


class ProviderGateway:
    """Sends prompts to the primary provider and fails over to the secondary.

    HTTP 429 responses retry the same provider with exponential backoff until
    ``retry.max_attempts`` calls have been made. Any other failure moves on to
    the next provider straight away. Each provider has its own attempt budget.
    """

    def __init__(
        self,
        primary: TextProvider,
        secondary: TextProvider,
        *,
        retry: RetryPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.primary = primary
        self.secondary = secondary
        self.retry = retry or RetryPolicy()
        self._sleep = sleep
        self.logger = get_logger("llm.gateway")

    @classmethod
    def from_config(
        cls, config: GitMeConfig, *, sleep: Callable[[float], None] = time.sleep
    ) -> "ProviderGateway":
        return cls(
            GeminiProvider(config.primary),
            GroqProvider(config.secondary),
            retry=config.retry,
            sleep=sleep,
        )

    def generate(self, prompt: str) -> str:
        failures: List[ProviderError] = []
        providers = (self.primary, self.secondary)
        for index, provider in enumerate(providers):
            try:
                return self._call_with_retry(provider, prompt)
            except ProviderError as exc:
                failures.append(exc)
                if index + 1 < len(providers):
                    self.logger.warning(
                        "%s failed, falling back to %s: %s",
                        provider.name,
                        providers[index + 1].name,
                        exc,
                    )
        raise AllProvidersFailedError(failures)

    def _call_with_retry(self, provider: TextProvider, prompt: str) -> str:
        attempt = 0
        while True:
            attempt += 1
            try:
                return provider.generate(prompt)
            except RateLimitedError:
                if attempt >= self.retry.max_attempts:
                    self.logger.warning(
                        "%s still rate limited after %d attempts",
                        provider.name,
                        attempt,
                    )
                    raise
                delay = self.retry.delay_for(attempt)
                self.logger.info(
                    "%s rate limited, retrying in %.1fs (attempt %d/%d)",
                    provider.name,
                    delay,
                    attempt + 1,
                    self.retry.max_attempts,
                )
                self._sleep(delay)


__all__ = ["ProviderGateway", "TextProvider"]
