"""Sequential per-file summaries with a fixed pause between model calls."""

from __future__ import annotations

import time
from typing import Callable, List, Optional, Sequence

from .config import PipelineLimits
from .errors import GitMeError
from .llm import TextProvider
from .models import FileData, FileSummary
from .progress import ProgressLog
from .prompting import PromptBuilder


class FileSummarizer:
    """Summarizes selected files one at a time to stay under provider rate limits."""

    def __init__(
        self,
        provider: TextProvider,
        *,
        limits: PipelineLimits | None = None,
        prompt_builder: PromptBuilder | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.provider = provider
        self.limits = limits or PipelineLimits()
        self.prompt_builder = prompt_builder or PromptBuilder()
        self._sleep = sleep

    def summarize(
        self, files: Sequence[FileData], progress: Optional[ProgressLog] = None
    ) -> List[FileSummary]:
        progress = progress or ProgressLog()
        to_summarize = list(files[: self.limits.max_summarized_files])
        summaries: List[FileSummary] = []

        for index, item in enumerate(to_summarize):
            if index > 0:
                self._sleep(self.limits.summary_delay)
            content = item.content[: self.limits.summary_content_chars]
            prompt = self.prompt_builder.summary_prompt(item.path, content)
            try:
                summary = self.provider.generate(prompt)
            except GitMeError as exc:
                progress.warning(f"Failed to analyze {item.path}: {exc}")
                continue
            summaries.append(FileSummary(path=item.path, summary=summary))
            progress.success(f"Analyzed {item.path}")

        return summaries


__all__ = ["FileSummarizer"]
