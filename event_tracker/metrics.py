"""
Prometheus counters for the event tracker service.
"""
from typing import Callable

from prometheus_client import Counter, Gauge, CollectorRegistry


class Metrics:
    """
    Centralized counters for the event tracker service.

    Each instance owns its registry, so several apps (e.g. in tests) can
    coexist in one process.
    """

    def __init__(self, service_name: str = "event-tracker", version: str = "0.1.0", registry=None):
        self.service_name = service_name
        self.version = version
        self.registry = registry or CollectorRegistry()

        # HTTP Metrics
        self.http_requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["service", "method", "path", "status"],
            registry=self.registry,
        )

        self.http_requests_active = Gauge(
            "http_requests_active",
            "Number of active HTTP requests",
            ["service"],
            registry=self.registry,
        )
        self.http_requests_active.labels(service=service_name).set(0)

        self.app_up = Gauge(
            "app_up",
            "Application up status (1=up, 0=down)",
            ["service", "version"],
            registry=self.registry,
        )
        self.app_up.labels(service=service_name, version=version).set(1)

        # Business Metrics
        self.events_created_total = Counter(
            "event_tracker_events_created_total",
            "Total events stored",
            registry=self.registry,
        )

        self.event_queries_total = Counter(
            "event_tracker_event_queries_total",
            "Total event list queries served",
            registry=self.registry,
        )

        self.event_lookups_total = Counter(
            "event_tracker_event_lookups_total",
            "Total lookups by event id",
            ["outcome"],
            registry=self.registry,
        )

        self.events_stored = Gauge(
            "event_tracker_events_stored",
            "Number of events currently held by the store",
            registry=self.registry,
        )

    def track_store_size(self, count: Callable[[], int]):
        """Report ``count()`` as the stored-events gauge on every scrape."""
        self.events_stored.set_function(count)

    def record_event_created(self):
        """Record a successful insert."""
        self.events_created_total.inc()

    def record_query(self):
        self.event_queries_total.inc()

    def record_lookup(self, found: bool):
        self.event_lookups_total.labels(outcome="found" if found else "not_found").inc()

    def mark_down(self):
        self.app_up.labels(service=self.service_name, version=self.version).set(0)
