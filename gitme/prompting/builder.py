"""Builds the selection, summary and README prompts."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from ..models import FileSummary, RepoInfo, RequestMetadata
from .constants import ATTRIBUTION_LINE, README_SECTIONS

_METADATA_LABELS: tuple[tuple[str, str], ...] = (
    ("description", "Custom Description"),
    ("features", "Key Features"),
    ("license", "License"),
    ("additional_context", "Additional Context"),
)


class PromptBuilder:
    """Assembles prompt text for each model-backed pipeline stage."""

    def selection_prompt(self, paths: Sequence[str], repo_info: RepoInfo) -> str:
        lines = [
            "Analyze this repository and select the 10-15 most important files for understanding the project.",
            "Focus on: main source files, configuration files, package manifests, documentation.",
            "Exclude: test files, build outputs, minified files.",
            "",
            f"Repository: {repo_info.name}",
            f"Description: {repo_info.description or 'No description'}",
            f"Language: {repo_info.language or 'Unknown'}",
            "",
            "Files:",
            *paths,
            "",
            "Return ONLY a JSON array of file paths:",
            '["path/to/file1.js", "path/to/file2.json"]',
        ]
        return "\n".join(lines)

    def summary_prompt(self, path: str, content: str) -> str:
        return (
            "Briefly summarize this file's purpose and key functionality (2-3 sentences):\n\n"
            f"File: {path}\n"
            "Content:\n"
            f"{content}"
        )

    def readme_prompt(
        self,
        repo_info: RepoInfo,
        summaries: Iterable[FileSummary],
        metadata: RequestMetadata | None,
        tree_sample: Sequence[str],
    ) -> str:
        lines: List[str] = [
            "Generate a comprehensive, professional README.md for this GitHub repository.",
            "",
            "REPOSITORY INFORMATION:",
            f"- Name: {repo_info.name}",
            f"- Description: {repo_info.description or 'No description'}",
            f"- Language: {repo_info.language or 'Unknown'}",
            f"- Stars: {repo_info.stars}",
            f"- Forks: {repo_info.forks}",
        ]
        lines.extend(self._metadata_lines(metadata))
        lines.extend(["", "FILE STRUCTURE (sample):", *tree_sample, ""])
        lines.append("KEY FILES ANALYSIS:")
        lines.append("\n\n".join(f"{item.path}:\n{item.summary}" for item in summaries))
        lines.extend(["", "Generate a README with these sections:"])
        lines.extend(f"{index}. {title}" for index, title in enumerate(README_SECTIONS, start=1))
        lines.extend(
            [
                "",
                "Use proper markdown formatting, emojis for visual appeal, and make it developer-friendly.",
                f'End with: "{ATTRIBUTION_LINE}"',
            ]
        )
        return "\n".join(lines)

    @staticmethod
    def _metadata_lines(metadata: RequestMetadata | None) -> List[str]:
        if metadata is None:
            return []
        lines: List[str] = []
        for attr, label in _METADATA_LABELS:
            value = getattr(metadata, attr)
            if value and value.strip():
                lines.append(f"{label}: {value}")
        return lines


__all__ = ["PromptBuilder"]
