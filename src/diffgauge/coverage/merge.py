"""Coverage report merging with max-hit semantics.

When merging coverage from several test suites:

- line[i] = max(line[i] across all reports)
- function[k] = max(function[k].hits across all reports)

so the merged result means "covered by any suite", and the result does not
depend on the order of the inputs. The one order-dependent figure is
``reported_total``: the last report processed supplies it.
"""

from collections.abc import Callable, Iterable

from diffgauge.core.logging import get_logger
from diffgauge.coverage.models import MERGED, CoverageReport, FileCoverage, FunctionCoverage

log = get_logger("coverage.merge")


def merge_file_coverage(files: Iterable[FileCoverage], *, path: str | None = None) -> FileCoverage:
    """Merge multiple FileCoverage objects for the same file.

    Args:
        files: FileCoverage objects to merge.
        path: Key for the result. Defaults to the first input's path.

    Returns:
        New FileCoverage with max hits across all inputs.
    """
    files_list = list(files)
    if not files_list:
        raise ValueError("Cannot merge empty file coverage list")

    result = FileCoverage(path=path if path is not None else files_list[0].path)

    for fc in files_list:
        for line_num, hits in fc.lines.items():
            result.record(line_num, hits)

    # Function coverage keyed by name: earliest start line, max hits
    func_data: dict[str, tuple[int, int]] = {}
    for fc in files_list:
        for name, func in fc.functions.items():
            if name in func_data:
                existing_line, existing_hits = func_data[name]
                func_data[name] = (
                    min(existing_line, func.start_line),
                    max(existing_hits, func.hits),
                )
            else:
                func_data[name] = (func.start_line, func.hits)
    result.functions.update(
        {
            name: FunctionCoverage(name=name, start_line=start_line, hits=hits)
            for name, (start_line, hits) in func_data.items()
        }
    )

    totals = [fc.total_lines for fc in files_list]
    result.reported_total = totals[-1]
    if len(set(totals)) > 1:
        log.warning(
            "merge_total_lines_disagree",
            path=result.path,
            totals=totals,
            kept=totals[-1],
        )
    return result


def merge_reports(
    reports: Iterable[CoverageReport],
    *,
    key: Callable[[str], str] | None = None,
) -> CoverageReport:
    """Merge multiple CoverageReport objects into a new report.

    Args:
        reports: CoverageReport objects to merge. Inputs are not modified.
        key: Optional function mapping each report's path to the merged key
             (e.g. a path normalizer) so differently spelled paths combine.

    Returns:
        Merged CoverageReport tagged ``"merged"`` unless every input had the
        same source format.
    """
    reports_list = list(reports)

    files_by_path: dict[str, list[FileCoverage]] = {}
    source_formats: set[str] = set()
    approximate = False

    for report in reports_list:
        source_formats.add(report.source_format)
        approximate = approximate or report.approximate
        for path, fc in report.files.items():
            merged_key = key(path) if key else path
            files_by_path.setdefault(merged_key, []).append(fc)

    merged_files = {
        path: merge_file_coverage(file_list, path=path) for path, file_list in files_by_path.items()
    }
    source_format = source_formats.pop() if len(source_formats) == 1 else MERGED

    return CoverageReport(source_format=source_format, files=merged_files, approximate=approximate)


def merge(*reports: CoverageReport) -> CoverageReport:
    """Convenience function to merge reports as varargs."""
    return merge_reports(reports)
