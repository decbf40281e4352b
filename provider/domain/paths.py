from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

__all__ = [
    "PathMatcher",
    "SubtreeMatcher",
    "SuffixMatcher",
    "EXEMPT_PATHS",
    "extension",
    "is_exempt",
]


class PathMatcher(Protocol):
    def matches(self, path: str) -> bool: ...


@dataclass(frozen=True)
class SubtreeMatcher:
    """Match a path and everything below it.

    `SubtreeMatcher("/console")` matches "/console" and "/console/x" but not
    "/consoles".
    """

    root: str

    def matches(self, path: str) -> bool:
        root = self.root.rstrip("/")
        return path == root or path.startswith(root + "/")


@dataclass(frozen=True)
class SuffixMatcher:
    """Match any path whose file extension equals `suffix` (case-insensitive)."""

    suffix: str

    def matches(self, path: str) -> bool:
        return extension(path) == self.suffix.lstrip(".").lower()


# Evaluated in order, before any credential is looked at.
EXEMPT_PATHS: tuple[PathMatcher, ...] = (
    SubtreeMatcher("/console"),
    SubtreeMatcher("/health"),
    SuffixMatcher(".ico"),
)


def extension(path: str) -> str:
    """Return the lowercased extension of the last path segment, or empty string."""
    segment = path.rstrip("/").rpartition("/")[2]
    _, dot, ext = segment.rpartition(".")
    return ext.lower() if dot else ""


def is_exempt(path: str, matchers: Iterable[PathMatcher] = EXEMPT_PATHS) -> bool:
    return any(m.matches(path) for m in matchers)
