"""
Prometheus metrics for user-type resolution.
"""

from typing import Optional

from prometheus_client import CollectorRegistry, Counter


class UserTypeMetrics:
    """Counters for cache lookups, remote fetch attempts and failed resolutions.

    Each instance owns its registry unless one is passed in, so several
    resolvers (and tests) can coexist without duplicate registrations.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry if registry is not None else CollectorRegistry()

        self.cache_lookups_total = Counter(
            "user_type_cache_lookups_total",
            "User-type cache lookups",
            ["kind", "result"],
            registry=self.registry,
        )
        self.fetch_attempts_total = Counter(
            "user_type_fetch_attempts_total",
            "Remote store fetch attempts",
            ["operation", "outcome"],
            registry=self.registry,
        )
        self.resolution_failures_total = Counter(
            "user_type_resolution_failures_total",
            "Resolutions that failed after the retry policy",
            ["kind", "code"],
            registry=self.registry,
        )

    def record_cache_lookup(self, kind: str, hit: bool):
        self.cache_lookups_total.labels(kind=kind, result="hit" if hit else "miss").inc()

    def record_fetch_attempt(self, operation: str, outcome: str):
        self.fetch_attempts_total.labels(operation=operation, outcome=outcome).inc()

    def record_resolution_failure(self, kind: str, code: str):
        self.resolution_failures_total.labels(kind=kind, code=code).inc()

    def sample(self, name: str, **labels) -> float:
        """Current value of a counter sample, 0.0 when never incremented."""
        value = self.registry.get_sample_value(name, labels)
        return value if value is not None else 0.0
