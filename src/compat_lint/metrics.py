"""Metrics collected during a run."""
import time
from dataclasses import dataclass, field


@dataclass
class AnalysisMetrics:
    """Metrics collected during analysis."""

    # Timing
    start_time: float = field(default_factory=time.time)
    end_time: float | None = None

    # Files
    total_files_collected: int = 0
    files_analyzed: int = 0
    files_skipped: int = 0
    files_failed: int = 0
    files_with_violations: int = 0

    # Findings
    total_violations: int = 0
    packages_with_violations: int = 0

    # package.json lookups
    manifest_lookups: int = 0
    manifest_cache_hits: int = 0

    def finish(self) -> None:
        """Mark analysis as finished."""
        self.end_time = time.time()

    @property
    def elapsed_seconds(self) -> float:
        """Get elapsed time in seconds."""
        end = self.end_time or time.time()
        return end - self.start_time

    @property
    def manifest_cache_hit_rate(self) -> float:
        """Get package.json cache hit rate as percentage."""
        if self.manifest_lookups == 0:
            return 0.0
        return (self.manifest_cache_hits / self.manifest_lookups) * 100

    def to_dict(self) -> dict:
        """Convert metrics to dictionary."""
        return {
            "elapsed_seconds": round(self.elapsed_seconds, 2),
            "total_files_collected": self.total_files_collected,
            "files_analyzed": self.files_analyzed,
            "files_skipped": self.files_skipped,
            "files_failed": self.files_failed,
            "files_with_violations": self.files_with_violations,
            "total_violations": self.total_violations,
            "packages_with_violations": self.packages_with_violations,
            "manifest_lookups": self.manifest_lookups,
            "manifest_cache_hits": self.manifest_cache_hits,
            "manifest_cache_hit_rate": round(self.manifest_cache_hit_rate, 1),
        }
