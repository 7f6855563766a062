"""Path reconciliation between diff paths and coverage report keys.

Diffs name files relative to the repository root (``src/app/main.py``).
Coverage tools write whatever their build saw: absolute paths, ``./``
prefixes, Windows separators, or paths relative to some other directory.
PathResolver bridges the two with an ordered list of strategies:

1. exact key
2. normalized target present as a key
3. scan: a key whose normalized form equals the normalized target
4. basename: a key with the same file name (optional, may false-positive)
"""

from __future__ import annotations

import os
import posixpath
import re
import threading
from collections.abc import Callable, Collection
from typing import TYPE_CHECKING

import pygit2

from diffgauge.core.logging import get_logger
from diffgauge.coverage.models import CoverageReport, FileCoverage

if TYPE_CHECKING:
    from diffgauge.config.models import DiffGaugeConfig

log = get_logger("coverage.paths")

_DRIVE_RE = re.compile(r"^[A-Za-z]:/")


def discover_repo_root(start: str | None = None) -> str | None:
    """Find the working tree root containing ``start`` (default: cwd)."""
    start = start or os.getcwd()
    try:
        git_dir = pygit2.discover_repository(start)
        if git_dir is None:
            return None
        workdir = pygit2.Repository(git_dir).workdir
    except (pygit2.GitError, KeyError) as e:
        log.debug("repo_root_discovery_failed", start=start, error=str(e))
        return None
    if not workdir:
        return None  # bare repository
    return workdir.rstrip("/\\") or "/"


class RepoRoot:
    """Lazily computed, memoized repository root.

    The discovery callable runs at most once per instance, even when several
    threads ask for the value at the same time. Tests pass a fixed value or a
    fake discovery function.
    """

    def __init__(
        self,
        discover: Callable[[], str | None] | None = None,
        *,
        value: str | None = None,
    ) -> None:
        self._discover = discover or discover_repo_root
        self._lock = threading.Lock()
        self._resolved = value is not None
        self._value = value

    @classmethod
    def fixed(cls, value: str | None) -> RepoRoot:
        """A root that never runs discovery (None means 'no repository')."""
        root = cls(lambda: value)
        root._resolved = True
        root._value = value
        return root

    def get(self) -> str | None:
        if self._resolved:
            return self._value
        with self._lock:
            if not self._resolved:
                self._value = self._discover()
                self._resolved = True
                log.debug("repo_root_resolved", root=self._value)
        return self._value


DEFAULT_REPO_ROOT = RepoRoot()
"""Process-wide root used when callers do not inject one."""


def _is_absolute(path: str) -> bool:
    return path.startswith("/") or bool(_DRIVE_RE.match(path))


def normalize_path(path: str, repo_root: str | None = None) -> str:
    """Canonicalize a path for comparison.

    - backslashes become forward slashes
    - leading ``./`` is removed
    - absolute paths under ``repo_root`` become root-relative
    - any remaining leading ``/`` is removed
    """
    if not path:
        return path

    normalized = path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]

    if _is_absolute(normalized) and repo_root:
        root = repo_root.replace("\\", "/").rstrip("/")
        if normalized == root:
            return ""
        if root and normalized.startswith(root + "/"):
            return normalized[len(root) + 1 :]

    return normalized.lstrip("/")


class PathResolver:
    """Find the coverage key that refers to a diff path."""

    def __init__(
        self,
        repo_root: RepoRoot | None = None,
        *,
        allow_basename_match: bool = True,
    ) -> None:
        self._repo_root = repo_root or DEFAULT_REPO_ROOT
        self.allow_basename_match = allow_basename_match

    @classmethod
    def from_config(
        cls, config: DiffGaugeConfig, repo_root: RepoRoot | None = None
    ) -> PathResolver:
        return cls(repo_root, allow_basename_match=config.paths.allow_basename_match)

    @property
    def repo_root(self) -> RepoRoot:
        return self._repo_root

    def normalize(self, path: str) -> str:
        if not _is_absolute(path.replace("\\", "/")):
            # Relative paths never need the root; skip discovery
            return normalize_path(path)
        return normalize_path(path, self._repo_root.get())

    def resolve(self, path: str, keys: Collection[str]) -> str | None:
        """Return the key in ``keys`` matching ``path``, or None."""
        if path in keys:
            return path

        target = self.normalize(path)
        if target != path and target in keys:
            return target

        ordered = sorted(keys)
        for key in ordered:
            if self.normalize(key) == target:
                return key

        if self.allow_basename_match:
            name = posixpath.basename(target)
            if name:
                for key in ordered:
                    if posixpath.basename(self.normalize(key)) == name:
                        log.debug("path_basename_match", path=path, key=key)
                        return key

        return None

    def lookup(self, report: CoverageReport, path: str) -> FileCoverage | None:
        """Resolve ``path`` against ``report`` and return its record."""
        key = self.resolve(path, report.files.keys())
        if key is None:
            log.debug("path_unresolved", path=path, candidates=len(report.files))
            return None
        return report.files[key]
