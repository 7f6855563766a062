"""Diff parsing: unified diff text to per-file changed lines."""

from diffgauge.diff.hunks import parse_diff
from diffgauge.diff.models import ChangeSet, FileChange

__all__ = ["ChangeSet", "FileChange", "parse_diff"]
