"""Report formatting and output."""
import json

from compat_lint.metrics import AnalysisMetrics
from compat_lint.types import LinterResult


def format_detailed_report(result: LinterResult, metrics: AnalysisMetrics) -> str:
    """Format results as detailed human-readable report.

    Args:
        result: Linter result grouped by package
        metrics: Analysis metrics

    Returns:
        Formatted report string
    """
    lines = []
    lines.append("=" * 70)
    lines.append("DEPENDENCY COMPATIBILITY REPORT")
    lines.append("=" * 70)
    lines.append("")

    if result.packages:
        lines.append(f"Found violations in {len(result.packages)} package(s):")
        lines.append("")
    elif not result.errors:
        lines.append("[OK] No restricted imports found")
        lines.append("")

    for package in result.packages:
        lines.append(f"[PACKAGE] {package.identity} ({len(package.files)} file(s))")
        for file_result in package.files:
            lines.append(f"   {file_result.file_path}:")
            for violation in file_result.violations:
                lines.append(f"      {violation.line}:{violation.column} - {violation.message}")
        lines.append("")

    if result.errors:
        lines.append(f"[ERROR] {len(result.errors)} file(s) could not be checked:")
        for error in result.errors:
            lines.append(f"   [{error.kind}] {error.file_path}")
            lines.append(f"      {error.message}")
            for violation in error.violations:
                lines.append(f"      {violation.line}:{violation.column} - {violation.message}")
        lines.append("")

    status = "COMPLIANT" if result.is_compliant else "NOT COMPLIANT"
    lines.append(f"Status: {status}")
    lines.append("")

    lines.append("=" * 70)
    lines.append("ANALYSIS METRICS")
    lines.append("=" * 70)
    lines.append(f"Elapsed time: {metrics.elapsed_seconds:.2f}s")
    lines.append(f"Files collected: {metrics.total_files_collected}")
    lines.append(f"Files analyzed: {metrics.files_analyzed}")
    lines.append(f"Files skipped: {metrics.files_skipped}")
    lines.append(f"Files failed: {metrics.files_failed}")
    lines.append(f"Manifest cache hit rate: {metrics.manifest_cache_hit_rate:.1f}%")
    lines.append("")

    return "\n".join(lines)


def format_json_report(result: LinterResult, metrics: AnalysisMetrics) -> str:
    """Format results as JSON.

    Args:
        result: Linter result grouped by package
        metrics: Analysis metrics

    Returns:
        JSON string
    """
    report = {
        "result": result.to_dict(),
        "summary": get_summary(result),
        "metrics": metrics.to_dict(),
    }

    return json.dumps(report, indent=2)


def get_exit_code(result: LinterResult) -> int:
    """Get exit code based on results.

    Args:
        result: Linter result

    Returns:
        0 if compliant, 1 otherwise
    """
    return 0 if result.is_compliant else 1


def get_summary(result: LinterResult) -> dict[str, int]:
    """Get summary statistics.

    Args:
        result: Linter result

    Returns:
        Dict with summary counts
    """
    return {
        "packages": len(result.packages),
        "files_with_violations": sum(len(p.files) for p in result.packages),
        "total_violations": sum(
            len(f.violations) for p in result.packages for f in p.files
        ),
        "errors": len(result.errors),
    }
