"""Exception hierarchy for the README pipeline."""

from __future__ import annotations

from typing import Sequence


class GitMeError(RuntimeError):
    """Base class for pipeline failures reported to callers."""


class InvalidUrlError(GitMeError):
    """Raised when a repository URL does not match the GitHub pattern."""


class RepositoryNotFoundError(GitMeError):
    """Raised when repository metadata cannot be retrieved."""


class TreeFetchError(GitMeError):
    """Raised when the recursive file tree cannot be retrieved."""


class FileFetchError(GitMeError):
    """Raised when a single file's content cannot be retrieved."""


class ProviderError(GitMeError):
    """Raised when a model provider call fails."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(message)
        self.provider = provider


class RateLimitedError(ProviderError):
    """Raised when a provider answers with HTTP 429."""


class AllProvidersFailedError(ProviderError):
    """Raised once the primary and secondary providers have both failed."""

    def __init__(self, failures: Sequence[ProviderError]) -> None:
        self.failures = list(failures)
        super().__init__("all", self._compose_message(self.failures))

    @staticmethod
    def _compose_message(failures: Sequence[ProviderError]) -> str:
        names = [failure.provider for failure in failures]
        if failures and all(isinstance(failure, RateLimitedError) for failure in failures):
            return (
                f"Rate limit exceeded on both {' and '.join(names)}. "
                "Please try again in a few moments."
            )
        reasons = "; ".join(f"{failure.provider}: {failure}" for failure in failures)
        return f"Both AI providers failed: {reasons}"


__all__ = [
    "AllProvidersFailedError",
    "FileFetchError",
    "GitMeError",
    "InvalidUrlError",
    "ProviderError",
    "RateLimitedError",
    "RepositoryNotFoundError",
    "TreeFetchError",
]
