"""
Metrics Collection
Prometheus metrics for generation pass tracking
"""

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest


class MetricsCollector:
    """
    Collects and exposes Prometheus metrics for generation passes.

    Each collector owns its registry, so several FileManagers (or tests) can
    coexist in one process.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()

        self.passes_total = Counter(
            "catalyst_generation_passes_total",
            "Total number of generation passes",
            ["mode", "status"],
            registry=self.registry,
        )
        self.pass_duration = Histogram(
            "catalyst_generation_duration_seconds",
            "Generation pass duration in seconds",
            ["mode"],
            buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0],
            registry=self.registry,
        )
        self.files_written = Counter(
            "catalyst_files_written_total",
            "Files written by generation passes",
            ["mode"],
            registry=self.registry,
        )
        self.files_failed = Counter(
            "catalyst_files_failed_total",
            "Files that failed to generate or write",
            ["mode"],
            registry=self.registry,
        )
        self.conflicts_total = Counter(
            "catalyst_user_edit_conflicts_total",
            "Writes skipped because the file was edited by hand",
            registry=self.registry,
        )
        self.cached_components = Gauge(
            "catalyst_cached_components",
            "Components in the change detector snapshot",
            registry=self.registry,
        )

    def record_pass(
        self,
        mode: str,
        status: str,
        duration: float,
        files_written: int = 0,
        files_failed: int = 0,
    ) -> None:
        """Record a finished generation pass."""
        self.passes_total.labels(mode=mode, status=status).inc()
        self.pass_duration.labels(mode=mode).observe(duration)
        self.files_written.labels(mode=mode).inc(files_written)
        self.files_failed.labels(mode=mode).inc(files_failed)

    def record_conflict(self) -> None:
        self.conflicts_total.inc()

    def set_cached_components(self, count: int) -> None:
        self.cached_components.set(count)

    def get_metrics(self) -> bytes:
        """Get metrics in Prometheus format."""
        return generate_latest(self.registry)
