"""Prometheus metrics exposition."""

from prometheus_client import REGISTRY, CollectorRegistry, generate_latest


class MetricsService:
    """Renders the registered Prometheus collectors.

    Domain counters live next to the services that increment them; this
    service only exposes them for scraping.
    """

    def __init__(self, registry: CollectorRegistry = REGISTRY) -> None:
        self.registry = registry

    def get_metrics_text(self) -> str:
        """Get metrics in Prometheus text format."""
        return generate_latest(self.registry).decode("utf-8")
