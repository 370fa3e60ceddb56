"""Main orchestrator coordinating all components."""
import os
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from compat_lint.aggregator import aggregate
from compat_lint.collector import filter_candidate_files, load_module_list, scan_dependency_tree
from compat_lint.config import Config
from compat_lint.detector import analyze_source
from compat_lint.errors import MalformedSyntaxError
from compat_lint.file_reader import read_source
from compat_lint.logging_config import get_logger
from compat_lint.metrics import AnalysisMetrics
from compat_lint.package_version import PackageVersionLookup, get_default_lookup
from compat_lint.restrictions import RestrictionTable
from compat_lint.types import FileError, FileResult, LinterResult
from compat_lint.validation import validate_allow_list, validate_scan_root

logger = get_logger(__name__)


@dataclass
class FileOutcome:
    """What happened to one candidate file."""

    file_path: str
    result: FileResult | None = None
    error: FileError | None = None
    skipped: bool = False


def analyze_file(
    file_path: str, restrictions: RestrictionTable, max_size_bytes: int, fail_fast: bool = False
) -> FileOutcome:
    """Read, parse and check a single file.

    Read and syntax errors are recorded on the outcome unless fail_fast is set.

    Args:
        file_path: File to analyze
        restrictions: Restriction table for the run
        max_size_bytes: Files larger than this are skipped
        fail_fast: Raise instead of recording errors

    Returns:
        FileOutcome for the file
    """
    try:
        source = read_source(file_path, max_size_bytes)
    except OSError as e:
        if fail_fast:
            raise
        logger.warning(f"Cannot read {file_path}: {e}")
        return FileOutcome(file_path, error=FileError(file_path, "read", str(e)))

    if source is None:
        return FileOutcome(file_path, skipped=True)

    try:
        violations = analyze_source(source, file_path, restrictions)
    except MalformedSyntaxError as e:
        if fail_fast:
            raise
        logger.warning(str(e))
        return FileOutcome(file_path, error=FileError(file_path, "syntax", str(e)))

    return FileOutcome(file_path, result=FileResult(file_path, violations))


def _analyze_all(
    file_paths: list[str], restrictions: RestrictionTable, config: Config
) -> list[FileOutcome]:
    """Analyze files on a bounded thread pool, keeping input order.

    Args:
        file_paths: Files to analyze
        restrictions: Restriction table shared read-only by all workers
        config: Configuration

    Returns:
        One outcome per file, in the order of file_paths
    """
    max_size_bytes = int(config.max_file_size_mb * 1024 * 1024)
    show_progress = config.show_progress and not os.environ.get("COMPAT_LINT_NO_PROGRESS")

    with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
        futures: list[Future[FileOutcome]] = [
            executor.submit(analyze_file, path, restrictions, max_size_bytes, config.fail_fast)
            for path in file_paths
        ]

        try:
            if show_progress:
                from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

                with Progress(
                    SpinnerColumn(),
                    TextColumn("[bold blue]{task.description}"),
                    BarColumn(),
                    TaskProgressColumn(),
                    transient=True,
                ) as progress:
                    task = progress.add_task("Analyzing dependencies", total=len(futures))
                    for future in as_completed(futures):
                        future.result()
                        progress.update(task, advance=1)
            else:
                for future in as_completed(futures):
                    future.result()
        except BaseException:
            # Queued files are dropped; only files already being analyzed finish
            executor.shutdown(wait=False, cancel_futures=True)
            raise

        return [future.result() for future in futures]


def run_linter(
    file_paths: Iterable[str],
    config: Config,
    allow_list: Iterable[str] | None = None,
    version_lookup: PackageVersionLookup | None = None,
) -> tuple[LinterResult, AnalysisMetrics]:
    """Check dependency files for restricted exports.

    Args:
        file_paths: Candidate file paths, e.g. from a modules list
        config: Configuration
        allow_list: Extra allowed package names on top of config.allowed_packages
        version_lookup: package.json version cache (defaults to the process-wide one)

    Returns:
        Tuple of (linter result, metrics)

    Raises:
        ValueError: If the allow-list is invalid
        CompatLintError: On the first per-file error when config.fail_fast is set
    """
    metrics = AnalysisMetrics()

    allowed = list(config.allowed_packages) + list(allow_list or [])
    validate_allow_list(allowed)

    restrictions = RestrictionTable.from_config(config.restricted_imports)
    lookup = version_lookup or get_default_lookup()

    candidates = filter_candidate_files(list(file_paths), config)
    metrics.total_files_collected = len(candidates)
    logger.info(f"Checking {len(candidates)} dependency files")

    outcomes = _analyze_all(candidates, restrictions, config)

    file_results = []
    errors = []
    for outcome in outcomes:
        if outcome.skipped:
            metrics.files_skipped += 1
        elif outcome.error is not None:
            metrics.files_failed += 1
            errors.append(outcome.error)
        elif outcome.result is not None:
            metrics.files_analyzed += 1
            file_results.append(outcome.result)

    hits_before, misses_before = lookup.hits, lookup.misses
    result = aggregate(
        file_results, allowed, version_lookup=lookup, fail_fast=config.fail_fast
    )
    metrics.files_failed += len(result.errors)
    result.errors = errors + result.errors

    metrics.manifest_cache_hits = lookup.hits - hits_before
    metrics.manifest_lookups = metrics.manifest_cache_hits + (lookup.misses - misses_before)
    metrics.files_with_violations = sum(len(p.files) for p in result.packages)
    metrics.total_violations = sum(
        len(f.violations) for p in result.packages for f in p.files
    )
    metrics.packages_with_violations = len(result.packages)

    logger.info(
        f"Found {metrics.total_violations} violation(s) in "
        f"{metrics.packages_with_violations} package(s)"
    )

    metrics.finish()
    return result, metrics


def run_linter_from_module_list(
    list_path: Path, config: Config, allow_list: Iterable[str] | None = None
) -> tuple[LinterResult, AnalysisMetrics]:
    """Run the linter on the files named in a modules list JSON file."""
    return run_linter(load_module_list(list_path), config, allow_list)


def run_linter_on_tree(
    scan_root: Path, config: Config, allow_list: Iterable[str] | None = None
) -> tuple[LinterResult, AnalysisMetrics]:
    """Run the linter on every dependency file found below scan_root."""
    validate_scan_root(scan_root)
    return run_linter(scan_dependency_tree(scan_root, config), config, allow_list)
