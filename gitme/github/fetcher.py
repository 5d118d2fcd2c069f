"""Collects repository metadata and a bounded set of file contents."""

from __future__ import annotations

import re
from typing import Any, List, Optional

from ..config import GitHubConfig, PipelineLimits
from ..errors import FileFetchError, InvalidUrlError, RepositoryNotFoundError, TreeFetchError
from ..models import FetchResult, FileData, FileTreeEntry, RepoInfo, RepoReference
from ..progress import ProgressLog
from .client import GitHubAPIError, GitHubClient
from .filters import is_relevant_path

_REPO_URL_PATTERN = re.compile(r"github\.com/([^/?#]+)/([^/?#]+)")


def parse_repo_url(url: str) -> RepoReference:
    """Return the owner/repo pair for a GitHub URL, dropping a ``.git`` suffix."""
    match = _REPO_URL_PATTERN.search(url or "")
    if not match:
        raise InvalidUrlError("Invalid GitHub URL format")
    owner, repo = match.groups()
    repo = re.sub(r"\.git$", "", repo)
    if not repo:
        raise InvalidUrlError("Invalid GitHub URL format")
    return RepoReference(owner=owner, repo=repo)


def repo_info_from_payload(payload: dict[str, Any]) -> RepoInfo:
    return RepoInfo(
        name=str(payload.get("name") or ""),
        description=payload.get("description") or "",
        language=payload.get("language") or "Unknown",
        stars=int(payload.get("stargazers_count") or 0),
        forks=int(payload.get("forks_count") or 0),
        default_branch=payload.get("default_branch") or None,
    )


def tree_entries_from_payload(payload: dict[str, Any]) -> List[FileTreeEntry]:
    """Return blob entries in tree order; directories and submodules are skipped."""
    items = payload.get("tree")
    if not isinstance(items, list):
        return []
    entries: List[FileTreeEntry] = []
    for item in items:
        if not isinstance(item, dict) or item.get("type") != "blob":
            continue
        path = item.get("path")
        sha = item.get("sha")
        if not isinstance(path, str) or not isinstance(sha, str):
            continue
        size = item.get("size")
        entries.append(
            FileTreeEntry(path=path, sha=sha, size=size if isinstance(size, int) else None)
        )
    return entries


class RepoFetcher:
    """Resolves a GitHub URL into filtered, size-bounded file contents."""

    def __init__(
        self,
        client: GitHubClient | None = None,
        *,
        limits: PipelineLimits | None = None,
        content_source: str | None = None,
    ) -> None:
        self.client = client or GitHubClient()
        self.limits = limits or PipelineLimits()
        self.content_source = content_source or self.client.config.content_source

    @classmethod
    def from_config(cls, github: GitHubConfig, limits: PipelineLimits) -> "RepoFetcher":
        return cls(GitHubClient(github), limits=limits, content_source=github.content_source)

    def fetch(self, url: str, progress: Optional[ProgressLog] = None) -> FetchResult:
        progress = progress or ProgressLog()

        progress.info("Parsing repository URL...")
        ref = parse_repo_url(url)

        progress.info(f"Fetching repository information for {ref.full_name}...")
        try:
            payload = self.client.get_repository(ref.owner, ref.repo)
        except GitHubAPIError as exc:
            raise RepositoryNotFoundError(
                f"Repository not found or not accessible: {ref.full_name}"
            ) from exc
        repo_info = repo_info_from_payload(payload)
        branch = repo_info.default_branch or "HEAD"
        progress.success("Repository data fetched")

        progress.info("Fetching repository file tree...")
        try:
            tree_payload = self.client.get_tree(ref.owner, ref.repo, branch)
        except GitHubAPIError as exc:
            raise TreeFetchError(f"Failed to fetch repository tree for {ref.full_name}") from exc
        if tree_payload.get("truncated"):
            progress.warning("Repository tree was truncated by GitHub; some files are not listed")

        entries = tree_entries_from_payload(tree_payload)
        progress.info(f"Found {len(entries)} files, filtering relevant ones...")
        relevant = [entry for entry in entries if is_relevant_path(entry.path)]
        progress.success(f"Selected {len(relevant)} relevant files for analysis")

        to_fetch = relevant[: self.limits.max_fetch_files]
        files: List[FileData] = []
        total = len(to_fetch)
        for index, entry in enumerate(to_fetch, start=1):
            progress.info(f"Reading file {index}/{total}: {entry.path}")
            try:
                content = self._read_content(ref, branch, entry)
            except FileFetchError as exc:
                progress.warning(f"Failed to read: {entry.path} ({exc})")
                continue
            if len(content) > self.limits.max_file_chars:
                progress.warning(f"Skipping large file: {entry.path}")
                continue
            files.append(FileData(path=entry.path, content=content))

        progress.success(f"Successfully fetched {len(files)} files")
        return FetchResult(files=files, repo_info=repo_info)

    def _read_content(self, ref: RepoReference, branch: str, entry: FileTreeEntry) -> str:
        try:
            if self.content_source == "raw":
                return self.client.get_raw_text(ref.owner, ref.repo, branch, entry.path)
            return self.client.get_blob_text(ref.owner, ref.repo, entry.sha)
        except GitHubAPIError as exc:
            raise FileFetchError(str(exc)) from exc


__all__ = [
    "RepoFetcher",
    "parse_repo_url",
    "repo_info_from_payload",
    "tree_entries_from_payload",
]
