"""Cobertura XML format parser.

Cobertura XML is written by coverage.py, coverlet (.NET), gocover-cobertura
and several JVM tools.

Structure:
<coverage line-rate="0.85" branch-rate="0.50" ...>
  <sources>
    <source>/home/ci/project/src</source>
  </sources>
  <packages>
    <package name="...">
      <classes>
        <class name="..." filename="..." line-rate="...">
          <methods>
            <method name="..." signature="...">
              <lines>
                <line number="1" hits="1"/>
              </lines>
            </method>
          </methods>
          <lines>
            <line number="1" hits="1"/>
          </lines>
        </class>
      </classes>
    </package>
  </packages>
</coverage>
"""

import posixpath
import xml.etree.ElementTree as ET
from collections.abc import Callable

from diffgauge.core.errors import CoverageParseError
from diffgauge.core.logging import get_logger
from diffgauge.coverage.models import CoverageFormat, CoverageReport, FileCoverage
from diffgauge.coverage.paths import PathResolver

from .base import DEFAULT_OPTIONS, ParseOptions

log = get_logger("coverage.cobertura")


def resolve_filename(
    filename: str,
    sources: list[str],
    exists: Callable[[str], bool],
) -> str:
    """Resolve a class filename against the declared source roots.

    Order: the name itself when it is a declared root, then the first
    root-joined path that exists, then the bare name.
    """
    if filename in sources:
        return filename
    for source in sources:
        candidate = posixpath.join(source.replace("\\", "/"), filename.replace("\\", "/"))
        if exists(candidate):
            return candidate
    return filename


def _read_lines(parent: ET.Element) -> tuple[list[tuple[int, int]], int]:
    """Return ([(number, hits)], skipped) for ``parent/lines/line``."""
    pairs: list[tuple[int, int]] = []
    skipped = 0
    for elem in parent.findall("./lines/line"):
        try:
            number = int(elem.get("number", ""))
            hits = int(elem.get("hits", "0"))
        except ValueError:
            skipped += 1
            continue
        if number <= 0:
            skipped += 1
            continue
        pairs.append((number, hits))
    return pairs, skipped


class CoberturaParser:
    """Parser for Cobertura XML format."""

    @property
    def format(self) -> CoverageFormat:
        return CoverageFormat.COBERTURA

    def parse(self, content: str, *, options: ParseOptions = DEFAULT_OPTIONS) -> CoverageReport:
        """Parse Cobertura XML into CoverageReport with normalized keys."""
        try:
            root = ET.fromstring(content)
        except ET.ParseError as e:
            raise CoverageParseError.unparseable(
                CoverageFormat.COBERTURA.value, f"invalid XML: {e}"
            ) from e

        # Strip namespace if present
        for elem in root.iter():
            if isinstance(elem.tag, str) and "}" in elem.tag:
                elem.tag = elem.tag.split("}", 1)[1]

        if root.tag != "coverage":
            raise CoverageParseError.unparseable(
                CoverageFormat.COBERTURA.value, f"unexpected root element <{root.tag}>"
            )

        sources = [
            s.text.strip() for s in root.findall("./sources/source") if s.text and s.text.strip()
        ]
        normalizer = PathResolver(options.repo_root)
        report = CoverageReport(source_format=CoverageFormat.COBERTURA.value)
        skipped = 0

        for cls in root.iter("class"):
            filename = cls.get("filename", "")
            if not filename:
                skipped += 1
                continue

            path = normalizer.normalize(resolve_filename(filename, sources, options.exists))
            file_cov: FileCoverage = report.file(path)

            # Class-level lines take precedence
            class_lines, bad = _read_lines(cls)
            skipped += bad
            for number, hits in class_lines:
                file_cov.record(number, hits)

            # Method-level lines only fill gaps
            for method in cls.findall("./methods/method"):
                method_lines, bad = _read_lines(method)
                skipped += bad
                for number, hits in method_lines:
                    if number not in file_cov.lines:
                        file_cov.record(number, hits)

        log.debug(
            "cobertura_parsed",
            files=len(report.files),
            sources=len(sources),
            skipped=skipped,
        )
        return report
