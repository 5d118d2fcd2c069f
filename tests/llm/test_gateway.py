"""Tests for provider failover and rate-limit backoff."""

from __future__ import annotations

import pytest

from gitme.config import GitMeConfig, RetryPolicy
from gitme.errors import AllProvidersFailedError, ProviderError, RateLimitedError
from gitme.llm import GeminiProvider, GroqProvider, ProviderGateway
from tests._fixtures.http_stub import FakeHTTP, ScriptedProvider

GROQ_URL = "https://api.groq.com/openai/v1/chat/completions"


def _rate_limited(name: str) -> RateLimitedError:
    return RateLimitedError(name, f"{name} API rate limited (HTTP 429)")


def test_primary_success_skips_secondary(sleeps) -> None:
    primary = ScriptedProvider(["primary text"], name="Gemini")
    secondary = ScriptedProvider(["secondary text"], name="Groq")
    gateway = ProviderGateway(primary, secondary, sleep=sleeps)

    assert gateway.generate("prompt") == "primary text"
    assert secondary.prompts == []
    assert sleeps.calls == []


def test_non_retryable_primary_failure_fails_over_immediately(sleeps) -> None:
    primary = ScriptedProvider([ProviderError("Gemini", "Gemini API error: 500")], name="Gemini")
    secondary = ScriptedProvider(["secondary text"], name="Groq")
    gateway = ProviderGateway(primary, secondary, sleep=sleeps)

    assert gateway.generate("prompt") == "secondary text"
    assert len(primary.prompts) == 1
    assert secondary.prompts == ["prompt"]
    assert sleeps.calls == []


def test_primary_rate_limited_three_times_fails_over_to_secondary(sleeps) -> None:
    primary = ScriptedProvider([_rate_limited("Gemini")] * 3, name="Gemini")
    secondary = ScriptedProvider(["secondary text"], name="Groq")
    gateway = ProviderGateway(primary, secondary, retry=RetryPolicy(max_attempts=3, base_delay=2.0), sleep=sleeps)

    assert gateway.generate("prompt") == "secondary text"
    assert len(primary.prompts) == 3
    assert sleeps.calls == [2.0, 4.0]


def test_rate_limited_primary_recovers_on_retry(sleeps) -> None:
    primary = ScriptedProvider([_rate_limited("Gemini"), "recovered"], name="Gemini")
    secondary = ScriptedProvider(name="Groq")
    gateway = ProviderGateway(primary, secondary, sleep=sleeps)

    assert gateway.generate("prompt") == "recovered"
    assert sleeps.calls == [2.0]
    assert secondary.prompts == []


def test_secondary_gets_its_own_retry_budget(sleeps) -> None:
    primary = ScriptedProvider([_rate_limited("Gemini")] * 3, name="Gemini")
    secondary = ScriptedProvider([_rate_limited("Groq"), _rate_limited("Groq"), "third time"], name="Groq")
    gateway = ProviderGateway(primary, secondary, sleep=sleeps)

    assert gateway.generate("prompt") == "third time"
    assert sleeps.calls == [2.0, 4.0, 2.0, 4.0]


def test_both_providers_failing_raises_combined_error(sleeps) -> None:
    primary = ScriptedProvider([ProviderError("Gemini", "Gemini API key not configured")], name="Gemini")
    secondary = ScriptedProvider([ProviderError("Groq", "Groq API error: 500")], name="Groq")
    gateway = ProviderGateway(primary, secondary, sleep=sleeps)

    with pytest.raises(AllProvidersFailedError) as excinfo:
        gateway.generate("prompt")

    message = str(excinfo.value)
    assert message.startswith("Both AI providers failed")
    assert "Gemini API key not configured" in message
    assert "Groq API error: 500" in message
    assert [failure.provider for failure in excinfo.value.failures] == ["Gemini", "Groq"]


def test_both_providers_rate_limited_reports_rate_limit(sleeps) -> None:
    primary = ScriptedProvider([_rate_limited("Gemini")] * 3, name="Gemini")
    secondary = ScriptedProvider([_rate_limited("Groq")] * 3, name="Groq")
    gateway = ProviderGateway(primary, secondary, sleep=sleeps)

    with pytest.raises(AllProvidersFailedError, match="Rate limit exceeded on both Gemini and Groq"):
        gateway.generate("prompt")
    assert len(primary.prompts) == 3
    assert len(secondary.prompts) == 3


def test_missing_primary_key_fails_over_over_http(fake_http: FakeHTTP, sleeps) -> None:
    config = GitMeConfig()
    config.secondary.api_key = "groq-key"
    fake_http.add(GROQ_URL, {"choices": [{"message": {"content": "from groq"}}]})
    gateway = ProviderGateway(
        GeminiProvider(config.primary, urlopen_fn=fake_http),
        GroqProvider(config.secondary, urlopen_fn=fake_http),
        retry=config.retry,
        sleep=sleeps,
    )

    assert gateway.generate("prompt") == "from groq"
    assert fake_http.urls() == [GROQ_URL]


def test_primary_read_timeout_fails_over_over_http(fake_http: FakeHTTP, sleeps) -> None:
    config = GitMeConfig()
    config.primary.api_key = "gem-key"
    config.secondary.api_key = "groq-key"
    gemini_url = (
        "https://generativelanguage.googleapis.com/v1beta/models/"
        "gemini-2.0-flash-exp:generateContent?key=gem-key"
    )
    fake_http.fail(gemini_url, TimeoutError("The read operation timed out"))
    fake_http.add(GROQ_URL, {"choices": [{"message": {"content": "from groq"}}]})
    gateway = ProviderGateway(
        GeminiProvider(config.primary, urlopen_fn=fake_http),
        GroqProvider(config.secondary, urlopen_fn=fake_http),
        retry=config.retry,
        sleep=sleeps,
    )

    assert gateway.generate("prompt") == "from groq"
    assert fake_http.urls() == [gemini_url, GROQ_URL]
    assert sleeps.calls == []


def test_connection_reset_surfaces_as_provider_error(fake_http: FakeHTTP) -> None:
    config = GitMeConfig()
    config.secondary.api_key = "groq-key"
    fake_http.fail(GROQ_URL, ConnectionResetError("Connection reset by peer"))

    with pytest.raises(ProviderError, match="Groq API connection failed") as excinfo:
        GroqProvider(config.secondary, urlopen_fn=fake_http).generate("prompt")
    assert excinfo.value.provider == "Groq"


def test_retry_policy_delay_schedule() -> None:
    policy = RetryPolicy(max_attempts=4, base_delay=0.5)

    assert [policy.delay_for(attempt) for attempt in (1, 2, 3)] == [0.5, 1.0, 2.0]
