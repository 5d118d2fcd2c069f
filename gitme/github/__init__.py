"""GitHub access: URL parsing, tree filtering and content fetching."""

from .client import GitHubAPIError, GitHubClient
from .fetcher import RepoFetcher, parse_repo_url
from .filters import filter_relevant_paths, is_relevant_path

__all__ = [
    "GitHubAPIError",
    "GitHubClient",
    "RepoFetcher",
    "filter_relevant_paths",
    "is_relevant_path",
    "parse_repo_url",
]
