"""Pipeline orchestration for the URL and pre-fetched-files flows."""

from __future__ import annotations

import time
from typing import Callable, Optional, Sequence

from .config import GitMeConfig
from .github import RepoFetcher
from .llm import ProviderGateway, TextProvider
from .logging import get_logger
from .models import FileData, RepoInfo, RequestMetadata
from .progress import ProgressLog
from .prompting import PromptBuilder
from .selector import FileSelector
from .summarizer import FileSummarizer
from .synthesizer import ReadmeSynthesizer


class Orchestrator:
    """Runs Fetcher → Selector → Summarizer → Synthesizer for one request."""

    def __init__(
        self,
        config: GitMeConfig | None = None,
        *,
        fetcher: RepoFetcher | None = None,
        gateway: TextProvider | None = None,
        prompt_builder: PromptBuilder | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config or GitMeConfig()
        limits = self.config.limits
        self.fetcher = fetcher or RepoFetcher.from_config(self.config.github, limits)
        self.gateway = gateway or ProviderGateway.from_config(self.config, sleep=sleep)
        builder = prompt_builder or PromptBuilder()
        self.selector = FileSelector(self.gateway, limits=limits, prompt_builder=builder)
        self.summarizer = FileSummarizer(
            self.gateway, limits=limits, prompt_builder=builder, sleep=sleep
        )
        self.synthesizer = ReadmeSynthesizer(self.gateway, limits=limits, prompt_builder=builder)
        self.logger = get_logger("orchestrator")

    def generate_from_url(
        self,
        url: str,
        metadata: Optional[RequestMetadata] = None,
        progress: Optional[ProgressLog] = None,
    ) -> str:
        """Fetch the repository behind ``url`` and generate its README."""
        progress = progress or ProgressLog()
        progress.info("Starting README generation...")
        progress.info(f"Repository: {url}")
        result = self.fetcher.fetch(url, progress)
        return self.generate_from_files(result.files, result.repo_info, metadata, progress)

    def generate_from_files(
        self,
        files: Sequence[FileData],
        repo_info: RepoInfo,
        metadata: Optional[RequestMetadata] = None,
        progress: Optional[ProgressLog] = None,
    ) -> str:
        """Generate a README from files the caller already collected."""
        progress = progress or ProgressLog()
        self.logger.debug("Processing %d files for %s", len(files), repo_info.name)

        selected = self.selector.select(files, repo_info, progress)

        progress.info("Reading file contents...")
        summaries = self.summarizer.summarize(selected, progress)
        progress.success(f"File analysis complete ({len(summaries)} summaries)")

        progress.info("Generating comprehensive README...")
        readme = self.synthesizer.synthesize(
            repo_info, summaries, metadata, [item.path for item in files]
        )
        progress.success("README generated successfully!")
        return readme


__all__ = ["Orchestrator"]
