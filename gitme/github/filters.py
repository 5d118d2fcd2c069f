"""Path denylist applied to repository trees before any content is read."""

from __future__ import annotations

import re
from typing import Iterable, List

# Dependency, VCS and build output folders, test files, minified bundles,
# binary/image and style assets, source maps and lockfiles.
_EXCLUDE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"node_modules"),
    re.compile(r"\.git/"),
    re.compile(r"dist/"),
    re.compile(r"build/"),
    re.compile(r"coverage/"),
    re.compile(r"\.test\."),
    re.compile(r"\.spec\."),
    re.compile(r"\.min\."),
    re.compile(r"\.(png|jpg|jpeg|gif|svg|ico|webp)$", re.IGNORECASE),
    re.compile(r"\.(css|scss|sass|less)$", re.IGNORECASE),
    re.compile(r"\.map$"),
    re.compile(r"package-lock\.json$"),
    re.compile(r"yarn\.lock$"),
    re.compile(r"pnpm-lock\.yaml$"),
)


def is_relevant_path(path: str) -> bool:
    """Return True unless the path matches any denylist pattern."""
    return not any(pattern.search(path) for pattern in _EXCLUDE_PATTERNS)


def filter_relevant_paths(paths: Iterable[str]) -> List[str]:
    return [path for path in paths if is_relevant_path(path)]


__all__ = ["filter_relevant_paths", "is_relevant_path"]
