"""
Service layer that wires a report-fetch capability to the aggregation engine.
"""
import logging
import time
from typing import Iterable, List, Optional, Tuple

from ...common.exceptions import ReportStoreError
from ...common.logging import log_execution_time
from ...common.metrics import MetricsCollector
from ...common.schemas.office import Office
from ...geo.distance import DEFAULT_RADIUS_KM, NearbyEntity, find_within_radius
from ..domain.entities import AggregationResult, Report, DEFAULT_WINDOW_MINUTES
from ..domain.protocols import ReportFetcher
from .aggregation import aggregate, current_millis

logger = logging.getLogger(__name__)

class CrowdSummaryService:
    """
    Fetches reports for an office and reduces them to an AggregationResult.

    Fetch failures never reach the engine: they are logged and the office
    is summarized from an empty report set instead.
    """
    def __init__(
        self,
        fetch_reports: ReportFetcher,
        window_minutes: int = DEFAULT_WINDOW_MINUTES,
        fetch_limit: int = 50,
        metrics: Optional[MetricsCollector] = None
    ):
        if window_minutes <= 0:
            raise ValueError(f"window_minutes must be positive, got {window_minutes}")
        self.fetch_reports = fetch_reports
        self.window_minutes = window_minutes
        self.fetch_limit = fetch_limit
        self.metrics = metrics

    def fetch(self, entity_id: str) -> List[Report]:
        try:
            return list(self.fetch_reports(entity_id, self.fetch_limit))
        except (ReportStoreError, OSError) as e:
            logger.warning(f"Report fetch failed for {entity_id}, using empty report set: {e}")
            if self.metrics:
                self.metrics.record_fetch_failure()
            return []

    @log_execution_time(logger)
    def summarize(
        self,
        entity_id: str,
        now: Optional[int] = None,
        window_minutes: Optional[int] = None
    ) -> AggregationResult:
        if now is None:
            now = current_millis()
        window = self.window_minutes if window_minutes is None else window_minutes

        reports = self.fetch(entity_id)
        start = time.perf_counter()
        result = aggregate(reports, window, now)
        if self.metrics:
            self.metrics.record_aggregation((time.perf_counter() - start) * 1000, len(reports))

        logger.info(
            f"Summary for {entity_id}: level={result.level.value} "
            f"wait={result.average_wait_minutes}min reports={result.total_report_count} "
            f"(user={result.user_report_count})"
        )
        return result

    def summarize_nearby(
        self,
        ref_lat: float,
        ref_lon: float,
        offices: Iterable[Office],
        radius_km: float = DEFAULT_RADIUS_KM,
        now: Optional[int] = None
    ) -> List[Tuple[NearbyEntity[Office], AggregationResult]]:
        """Offices within the radius, nearest first, each with its summary."""
        if now is None:
            now = current_millis()
        nearby = find_within_radius(ref_lat, ref_lon, offices, radius_km)
        return [(item, self.summarize(item.entity.id, now)) for item in nearby]
