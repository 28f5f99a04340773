"""
Metrics Collection for Companion Chat.

Process-local counters and timers, exposed as JSON at /metrics.
"""

import time
from typing import Dict, Any
from collections import defaultdict
from contextlib import contextmanager
from datetime import datetime, timezone
import threading


class MetricsCollector:
    """Collects and manages metrics for the API."""

    def __init__(self):
        self.metrics = defaultdict(int)
        self.timers = defaultdict(float)
        self.lock = threading.Lock()

        # Initialize counters
        self.metrics["requests_total"] = 0
        self.metrics["registrations_total"] = 0
        self.metrics["logins_failed_total"] = 0
        self.metrics["messages_processed_total"] = 0
        self.metrics["completion_errors_total"] = 0

    def increment_counter(self, metric_name: str, value: int = 1):
        """Increment a counter metric."""
        with self.lock:
            self.metrics[metric_name] += value

    def record_timer(self, metric_name: str, duration: float):
        """Record a timing metric."""
        with self.lock:
            self.timers[metric_name] += duration

    def get_metrics(self) -> Dict[str, Any]:
        """Get current metrics values."""
        with self.lock:
            return {
                "counters": dict(self.metrics),
                "timers": dict(self.timers),
                "timestamp": datetime.now(timezone.utc).isoformat()
            }

    def request_handled(self):
        self.increment_counter("requests_total")

    def user_registered(self):
        self.increment_counter("registrations_total")

    def login_failed(self):
        self.increment_counter("logins_failed_total")

    def message_processed(self):
        self.increment_counter("messages_processed_total")

    def completion_error(self):
        self.increment_counter("completion_errors_total")

    @contextmanager
    def time_operation(self, metric_name: str):
        """Context manager to time an operation, including failed ones."""
        start_time = time.perf_counter()
        try:
            yield
        finally:
            self.record_timer(metric_name, time.perf_counter() - start_time)


# Global metrics instance
metrics_collector = MetricsCollector()
