"""Core data models shared across gitme components."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import List, Optional


@dataclass(frozen=True)
class RepoReference:
    """Owner/repository pair parsed from a GitHub URL."""

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass
class RepoInfo:
    """Repository metadata passed to every pipeline stage."""

    name: str
    description: str = ""
    language: str = "Unknown"
    stars: int = 0
    forks: int = 0
    default_branch: Optional[str] = None


@dataclass(frozen=True)
class FileTreeEntry:
    """A single blob from the recursive repository tree."""

    path: str
    sha: str
    size: Optional[int] = None


@dataclass
class FileData:
    """Repository file with its decoded text content."""

    path: str
    content: str


@dataclass
class FileSummary:
    """Short model-written description of one file."""

    path: str
    summary: str


@dataclass
class RequestMetadata:
    """Optional user-supplied context merged into the README prompt."""

    description: Optional[str] = None
    features: Optional[str] = None
    license: Optional[str] = None
    additional_context: Optional[str] = None


@dataclass
class FetchResult:
    """Files and repository metadata collected by the fetcher."""

    files: List[FileData]
    repo_info: RepoInfo


class LogKind(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class LogEvent:
    """Progress notification surfaced to the caller."""

    message: str
    kind: LogKind = LogKind.INFO
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
