"""Model-assisted selection of the files worth summarizing."""

from __future__ import annotations

import json
from typing import List, Optional, Sequence

from .config import PipelineLimits
from .llm import TextProvider
from .models import FileData, RepoInfo
from .progress import ProgressLog
from .prompting import PromptBuilder


def extract_json_array(text: str) -> Optional[str]:
    """Return the first balanced ``[...]`` substring, skipping brackets inside strings."""
    start = text.find("[")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "[":
                depth += 1
            elif char == "]":
                depth -= 1
                if depth == 0:
                    return text[start : index + 1]
        start = text.find("[", start + 1)
    return None


def parse_selected_paths(text: str) -> Optional[List[str]]:
    """Decode the model's answer into a list of paths, or None when unusable."""
    candidate = extract_json_array(text)
    if candidate is None:
        return None
    try:
        decoded = json.loads(candidate)
    except json.JSONDecodeError:
        return None
    if not isinstance(decoded, list):
        return None
    return [item for item in decoded if isinstance(item, str)]


class FileSelector:
    """Asks the model which files matter most, degrading to a prefix slice."""

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

    def select(
        self,
        files: Sequence[FileData],
        repo_info: RepoInfo,
        progress: Optional[ProgressLog] = None,
    ) -> List[FileData]:
        progress = progress or ProgressLog()
        paths = [item.path for item in files][: self.limits.selector_prompt_paths]
        prompt = self.prompt_builder.selection_prompt(paths, repo_info)
        progress.info("AI analyzing important files...")
        response = self.provider.generate(prompt)

        selected = parse_selected_paths(response)
        if selected is None:
            progress.warning("Could not parse file selection; using the first files instead")
            return self.fallback(files)

        wanted = set(selected)
        chosen = [item for item in files if item.path in wanted]
        if not chosen:
            progress.warning("File selection matched no known paths; using the first files instead")
            return self.fallback(files)

        progress.success(f"Selected {len(chosen)} key files for analysis")
        return chosen

    def fallback(self, files: Sequence[FileData]) -> List[FileData]:
        return list(files[: self.limits.selector_fallback_files])


__all__ = ["FileSelector", "extract_json_array", "parse_selected_paths"]
