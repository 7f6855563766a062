"""Changed-line model produced by the diff parser."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True, slots=True)
class FileChange:
    """Lines touched in one post-change file.

    Line numbers in ``changed`` and ``added`` use post-change numbering.
    ``removed`` uses pre-change numbering and is informational only.
    """

    path: str
    is_new_file: bool
    changed: frozenset[int] = frozenset()
    added: frozenset[int] = frozenset()
    removed: frozenset[int] = frozenset()

    @property
    def is_modified_file(self) -> bool:
        return not self.is_new_file


@dataclass(frozen=True, slots=True)
class ChangeSet:
    """Per-file changed lines for one diff. Immutable once built."""

    _files: Mapping[str, FileChange] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_files", MappingProxyType(dict(self._files)))

    @classmethod
    def from_files(cls, files: list[FileChange]) -> ChangeSet:
        return cls({fc.path: fc for fc in files})

    def __contains__(self, path: object) -> bool:
        return path in self._files

    def __iter__(self) -> Iterator[FileChange]:
        return (self._files[p] for p in self.files)

    def __len__(self) -> int:
        return len(self._files)

    @property
    def files(self) -> list[str]:
        """Sorted paths of all files in the diff (deleted files excluded)."""
        return sorted(self._files)

    def get(self, path: str) -> FileChange | None:
        return self._files.get(path)

    def changed_lines(self, path: str) -> frozenset[int]:
        fc = self._files.get(path)
        return fc.changed if fc else frozenset()

    def added_lines(self, path: str) -> frozenset[int]:
        fc = self._files.get(path)
        return fc.added if fc else frozenset()

    def removed_lines(self, path: str) -> frozenset[int]:
        fc = self._files.get(path)
        return fc.removed if fc else frozenset()

    def is_new_file(self, path: str) -> bool:
        fc = self._files.get(path)
        return fc is not None and fc.is_new_file

    def is_modified_file(self, path: str) -> bool:
        fc = self._files.get(path)
        return fc is not None and fc.is_modified_file

    @property
    def new_files(self) -> list[str]:
        return [p for p in self.files if self._files[p].is_new_file]

    @property
    def modified_files(self) -> list[str]:
        return [p for p in self.files if self._files[p].is_modified_file]

    @property
    def has_changes(self) -> bool:
        """True when any file has at least one changed line."""
        return any(fc.changed for fc in self._files.values())
