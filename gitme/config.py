"""Configuration loading for gitme (.gitme.yml plus environment keys)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

CONFIG_FILENAME = ".gitme.yml"

CONTENT_SOURCES = ("blob", "raw")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ProviderConfig:
    """Connection settings for one model provider."""

    name: str
    model: str
    base_url: str
    api_key: Optional[str] = None
    temperature: float = 0.7
    max_tokens: int = 8192
    request_timeout: float = 60.0


def _default_primary() -> ProviderConfig:
    return ProviderConfig(
        name="Gemini",
        model="gemini-2.0-flash-exp",
        base_url="https://generativelanguage.googleapis.com/v1beta",
    )


def _default_secondary() -> ProviderConfig:
    return ProviderConfig(
        name="Groq",
        model="llama-3.3-70b-versatile",
        base_url="https://api.groq.com/openai/v1",
    )


@dataclass
class RetryPolicy:
    """Backoff settings applied to rate-limited provider calls."""

    max_attempts: int = 3
    base_delay: float = 2.0

    def delay_for(self, attempt: int) -> float:
        """Return the sleep before retry number ``attempt`` (1-based)."""
        return self.base_delay * (2 ** (attempt - 1))


@dataclass
class GitHubConfig:
    """GitHub REST API access settings."""

    token: Optional[str] = None
    api_base_url: str = "https://api.github.com"
    raw_base_url: str = "https://raw.githubusercontent.com"
    content_source: str = "blob"
    request_timeout: float = 30.0


@dataclass
class PipelineLimits:
    """Fan-out and size bounds for each pipeline stage."""

    max_fetch_files: int = 20
    max_file_chars: int = 50_000
    selector_prompt_paths: int = 100
    selector_fallback_files: int = 15
    max_summarized_files: int = 5
    summary_content_chars: int = 10_000
    summary_delay: float = 1.0
    tree_sample_size: int = 30


@dataclass
class GitMeConfig:
    """Process-wide settings, built once and passed into the pipeline."""

    primary: ProviderConfig = field(default_factory=_default_primary)
    secondary: ProviderConfig = field(default_factory=_default_secondary)
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    limits: PipelineLimits = field(default_factory=PipelineLimits)


def load_config(
    config_path: Path | None = None, *, env: Mapping[str, str] | None = None
) -> GitMeConfig:
    """Load configuration from disk, filling credentials from the environment."""
    environ = os.environ if env is None else env
    data: Dict[str, Any] = {}
    if config_path is not None:
        config_file = _resolve_config_path(config_path)
        if config_file.exists():
            data = _read_config(config_file)

    providers = _as_dict(data.get("providers"))
    primary = _provider_config(_default_primary(), _as_dict(providers.get("primary")))
    secondary = _provider_config(_default_secondary(), _as_dict(providers.get("secondary")))
    primary.api_key = primary.api_key or environ.get("GEMINI_API_KEY") or None
    secondary.api_key = secondary.api_key or environ.get("GROQ_API_KEY") or None

    retry_data = _as_dict(data.get("retry"))
    retry = RetryPolicy()
    retry.max_attempts = _positive_int(retry_data, "max_attempts", retry.max_attempts)
    retry.base_delay = _non_negative_float(retry_data, "base_delay", retry.base_delay)

    github_data = _as_dict(data.get("github"))
    github = GitHubConfig()
    github.token = _as_str(github_data.get("token")) or environ.get("GITHUB_TOKEN") or None
    github.api_base_url = (_as_str(github_data.get("api_base_url")) or github.api_base_url).rstrip("/")
    github.raw_base_url = (_as_str(github_data.get("raw_base_url")) or github.raw_base_url).rstrip("/")
    content_source = _as_str(github_data.get("content_source")) or github.content_source
    if content_source not in CONTENT_SOURCES:
        raise ConfigError(
            f"github.content_source must be one of {', '.join(CONTENT_SOURCES)}, got {content_source!r}"
        )
    github.content_source = content_source
    github.request_timeout = _positive_float(github_data, "request_timeout", github.request_timeout)

    limits_data = _as_dict(data.get("limits"))
    limits = PipelineLimits()
    for name in (
        "max_fetch_files",
        "max_file_chars",
        "selector_prompt_paths",
        "selector_fallback_files",
        "max_summarized_files",
        "summary_content_chars",
        "tree_sample_size",
    ):
        setattr(limits, name, _positive_int(limits_data, name, getattr(limits, name)))
    limits.summary_delay = _non_negative_float(limits_data, "summary_delay", limits.summary_delay)

    return GitMeConfig(
        primary=primary,
        secondary=secondary,
        retry=retry,
        github=github,
        limits=limits,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _provider_config(base: ProviderConfig, data: Dict[str, Any]) -> ProviderConfig:
    base.name = _as_str(data.get("name")) or base.name
    base.model = _as_str(data.get("model")) or base.model
    base.base_url = (_as_str(data.get("base_url")) or base.base_url).rstrip("/")
    base.api_key = _as_str(data.get("api_key"))
    temperature = _as_float(data.get("temperature"))
    if temperature is not None:
        base.temperature = temperature
    base.max_tokens = _positive_int(data, "max_tokens", base.max_tokens)
    base.request_timeout = _positive_float(data, "request_timeout", base.request_timeout)
    return base


def _positive_int(data: Dict[str, Any], key: str, default: int) -> int:
    if data.get(key) is None:
        return default
    value = _as_int(data.get(key))
    if value is None or value <= 0:
        raise ConfigError(f"{key} must be a positive integer, got {data.get(key)!r}")
    return value


def _positive_float(data: Dict[str, Any], key: str, default: float) -> float:
    if data.get(key) is None:
        return default
    value = _as_float(data.get(key))
    if value is None or value <= 0:
        raise ConfigError(f"{key} must be a positive number, got {data.get(key)!r}")
    return value


def _non_negative_float(data: Dict[str, Any], key: str, default: float) -> float:
    if data.get(key) is None:
        return default
    value = _as_float(data.get(key))
    if value is None or value < 0:
        raise ConfigError(f"{key} must be zero or a positive number, got {data.get(key)!r}")
    return value


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None
