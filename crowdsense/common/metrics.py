from dataclasses import dataclass
from typing import Dict, List
import threading
import time

@dataclass
class ServiceMetrics:
    """Aggregation service metrics"""
    uptime_seconds: float
    aggregations: int
    avg_aggregation_time_ms: float
    reports_processed: int
    fetch_failures: int

    def to_dict(self) -> Dict:
        return {
            'uptime_seconds': self.uptime_seconds,
            'aggregations': self.aggregations,
            'avg_aggregation_time_ms': self.avg_aggregation_time_ms,
            'reports_processed': self.reports_processed,
            'fetch_failures': self.fetch_failures
        }


class MetricsCollector:
    """Collects and aggregates service metrics"""

    MAX_SAMPLES = 1000

    def __init__(self):
        self.aggregation_times: List[float] = []
        self.aggregations = 0
        self.reports_processed = 0
        self.fetch_failures = 0
        self.start_time = time.time()
        self._lock = threading.Lock()

    def record_aggregation(self, duration_ms: float, report_count: int):
        with self._lock:
            self.aggregation_times.append(duration_ms)
            self.aggregations += 1
            self.reports_processed += report_count
            # Keep buffer size manageable
            if len(self.aggregation_times) > self.MAX_SAMPLES:
                self.aggregation_times.pop(0)

    def record_fetch_failure(self):
        with self._lock:
            self.fetch_failures += 1

    def get_metrics(self) -> ServiceMetrics:
        with self._lock:
            times = list(self.aggregation_times)
            avg_time = sum(times) / len(times) if times else 0.0
            return ServiceMetrics(
                uptime_seconds=time.time() - self.start_time,
                aggregations=self.aggregations,
                avg_aggregation_time_ms=avg_time,
                reports_processed=self.reports_processed,
                fetch_failures=self.fetch_failures
            )
