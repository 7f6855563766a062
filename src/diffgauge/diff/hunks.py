"""Unified diff parser.

Turns ``git diff`` style text into a ChangeSet of post-change line numbers.

Recognized lines:
- ``--- a/<path>`` / ``--- /dev/null``: pre-image marker (remembered)
- ``+++ b/<path>`` / ``+++ /dev/null``: post-image marker (commits a file)
- ``@@ -<old>[,<n>] +<new>[,<n>] @@``: hunk header
- ``+``/``-``/`` `` body lines, ``\\ No newline at end of file``

A ``---`` line directly followed by ``+++`` always begins a new file; a lone
``---`` or ``+++`` inside an open hunk is a removed or added line.

Everything else (``diff --git``, ``index``, mode lines, binary notices) is
skipped. Only a non-numeric range in a hunk header aborts the parse.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from diffgauge.core.errors import MalformedHunkHeaderError
from diffgauge.core.logging import get_logger
from diffgauge.diff.models import ChangeSet, FileChange

log = get_logger("diff.hunks")

DEV_NULL = "/dev/null"

_UNSEEN = object()


@dataclass
class _FileBuilder:
    path: str
    is_new_file: bool
    added: set[int] = field(default_factory=set)
    removed: set[int] = field(default_factory=set)

    def build(self) -> FileChange:
        added = frozenset(self.added)
        return FileChange(
            path=self.path,
            is_new_file=self.is_new_file,
            changed=added,
            added=added,
            removed=frozenset(self.removed),
        )


def _marker_path(raw: str, prefix: str) -> str | None:
    """Extract the path from a ``---``/``+++`` marker, None for /dev/null."""
    # Plain `diff -u` appends a tab and timestamp
    path = raw.split("\t", 1)[0].strip()
    if path == DEV_NULL:
        return None
    if path.startswith(prefix):
        path = path[len(prefix) :]
    return path


def _parse_range(part: str, header: str, line_no: int) -> tuple[int, int]:
    """Parse ``15,7`` or ``15`` into (start, count)."""
    start_str, _, count_str = part.partition(",")
    try:
        start = int(start_str)
    except ValueError:
        raise MalformedHunkHeaderError.bad_number(header, start_str, line_no) from None
    if not count_str:
        return start, 1
    try:
        return start, int(count_str)
    except ValueError:
        raise MalformedHunkHeaderError.bad_number(header, count_str, line_no) from None


def parse_diff(diff_text: str) -> ChangeSet:
    """Parse unified diff text into a ChangeSet.

    Args:
        diff_text: Output of ``git diff`` (one or more file blocks).

    Returns:
        ChangeSet keyed by post-change path. Deleted files are omitted.

    Raises:
        MalformedHunkHeaderError: If a hunk header has a non-numeric range.
    """
    builders: dict[str, _FileBuilder] = {}
    current: _FileBuilder | None = None
    old_path: object = _UNSEEN
    in_hunk = False
    new_line = 0
    old_line = 0
    remaining_old = 0
    remaining_new = 0

    lines = diff_text.splitlines()
    for line_no, line in enumerate(lines, start=1):
        hunk_open = in_hunk and (remaining_old > 0 or remaining_new > 0)
        # A ---/+++ pair starts a new file even inside an open hunk
        starts_file = (
            line.startswith("--- ") and line_no < len(lines) and lines[line_no].startswith("+++ ")
        )

        if line.startswith("diff --git "):
            current = None
            old_path = _UNSEEN
            in_hunk = False
            continue

        if starts_file or (not hunk_open and line.startswith("--- ")):
            old_path = _marker_path(line[4:], "a/")
            in_hunk = False
            continue

        if not hunk_open and line.startswith("+++ "):
            new_path = _marker_path(line[4:], "b/")
            in_hunk = False
            if new_path is None:
                # Deleted file: nothing in the post-change tree to measure
                current = None
            else:
                is_new = old_path is _UNSEEN or old_path is None
                current = builders.get(new_path)
                if current is None:
                    current = _FileBuilder(path=new_path, is_new_file=is_new)
                    builders[new_path] = current
            old_path = _UNSEEN
            continue

        if line.startswith("@@"):
            parts = line.split()
            if len(parts) < 3 or not parts[2].startswith("+"):
                continue
            new_line, remaining_new = _parse_range(parts[2][1:], line, line_no)
            new_line -= 1
            if parts[1].startswith("-"):
                old_line, remaining_old = _parse_range(parts[1][1:], line, line_no)
                old_line -= 1
            else:
                old_line, remaining_old = 0, 0
            in_hunk = True
            continue

        if not in_hunk:
            continue

        # Counters advance for deleted files too so their hunks close normally
        if line.startswith("+"):
            new_line += 1
            remaining_new -= 1
            if current is not None:
                current.added.add(new_line)
        elif line.startswith("-"):
            old_line += 1
            remaining_old -= 1
            if current is not None:
                current.removed.add(old_line)
        elif line.startswith("\\"):
            # "\ No newline at end of file"
            continue
        else:
            new_line += 1
            old_line += 1
            remaining_new -= 1
            remaining_old -= 1

    # Files with only deletions or context have nothing to measure
    change_set = ChangeSet.from_files([b.build() for b in builders.values() if b.added])
    log.debug(
        "diff_parsed",
        files=len(change_set),
        new_files=len(change_set.new_files),
        changed_lines=sum(len(fc.changed) for fc in change_set),
    )
    return change_set
