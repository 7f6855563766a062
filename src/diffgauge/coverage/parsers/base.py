"""Coverage parser protocol."""

import os
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from diffgauge.coverage.models import CoverageFormat, CoverageReport
from diffgauge.coverage.paths import DEFAULT_REPO_ROOT, RepoRoot

if TYPE_CHECKING:
    from diffgauge.config.models import DiffGaugeConfig

DEFAULT_SNIFF_BYTES = 1024


@dataclass(frozen=True, slots=True)
class ParseOptions:
    """Environment a parser may consult while building keys.

    ``exists`` backs the Cobertura source-root lookup so tests can stub the
    filesystem. ``strip_prefixes`` applies to Go module paths. ``sniff_bytes``
    bounds how much leading text format detection inspects.
    """

    repo_root: RepoRoot = DEFAULT_REPO_ROOT
    strip_prefixes: tuple[str, ...] = ()
    sniff_bytes: int = DEFAULT_SNIFF_BYTES
    exists: Callable[[str], bool] = field(default=os.path.exists)

    @classmethod
    def from_config(
        cls, config: "DiffGaugeConfig", repo_root: RepoRoot = DEFAULT_REPO_ROOT
    ) -> "ParseOptions":
        return cls(
            repo_root=repo_root,
            strip_prefixes=tuple(config.paths.strip_prefixes),
            sniff_bytes=config.detection.sniff_bytes,
        )


DEFAULT_OPTIONS = ParseOptions()


class CoverageParser(Protocol):
    """Protocol for coverage dialect parsers.

    Each parser handles one dialect and converts artifact text to the
    unified CoverageReport model.
    """

    @property
    def format(self) -> CoverageFormat:
        """Dialect tag this parser handles."""
        ...

    def parse(self, content: str, *, options: ParseOptions = DEFAULT_OPTIONS) -> CoverageReport:
        """Parse artifact text into the unified model.

        Raises:
            CoverageParseError: If the content is not recognizable at all.
        """
        ...
