"""Final README generation from metadata, summaries and the file tree."""

from __future__ import annotations

from typing import Optional, Sequence

from .config import PipelineLimits
from .llm import TextProvider
from .models import FileSummary, RepoInfo, RequestMetadata
from .prompting import PromptBuilder


class ReadmeSynthesizer:
    """Builds the README prompt and returns the model's markdown untouched."""

    def __init__(
        self,
        provider: TextProvider,
        *,
        limits: PipelineLimits | None = None,
        prompt_builder: PromptBuilder | None = None,
    ) -> None:
        self.provider = provider
        self.limits = limits or PipelineLimits()
        self.prompt_builder = prompt_builder or PromptBuilder()

    def build_prompt(
        self,
        repo_info: RepoInfo,
        summaries: Sequence[FileSummary],
        metadata: Optional[RequestMetadata],
        paths: Sequence[str],
    ) -> str:
        tree_sample = list(paths[: self.limits.tree_sample_size])
        return self.prompt_builder.readme_prompt(repo_info, summaries, metadata, tree_sample)

    def synthesize(
        self,
        repo_info: RepoInfo,
        summaries: Sequence[FileSummary],
        metadata: Optional[RequestMetadata],
        paths: Sequence[str],
    ) -> str:
        prompt = self.build_prompt(repo_info, summaries, metadata, paths)
        return self.provider.generate(prompt)


__all__ = ["ReadmeSynthesizer"]
