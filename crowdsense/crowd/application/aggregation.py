"""
Aggregation engine: reduces the reports of one office to a single
time-windowed, source-weighted AggregationResult.

All functions are pure. They only read the reports they are given and
build fresh results, so they can be called concurrently without locking.
"""
import logging
import math
import time
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence

from ..domain.entities import (
    AggregationResult,
    CrowdLevel,
    Report,
    ReportSource,
    WAIT_MINUTES,
    DEFAULT_LEVEL,
    DEFAULT_WAIT_MINUTES,
    DEFAULT_WINDOW_MINUTES
)

logger = logging.getLogger(__name__)

MS_PER_MINUTE = 60_000
USER_WEIGHT = 2
DEFAULT_WEIGHT = 1

def current_millis() -> int:
    return int(time.time() * 1000)

def parse_millis(value) -> Optional[int]:
    # bool is an int subclass but never a timestamp
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, float) and math.isfinite(value) and value >= 0:
        return int(value)
    return None

def resolve_timestamp(report: Report, now: int) -> int:
    """
    Returns the report timestamp, or `now` when it is missing or malformed.
    """
    parsed = parse_millis(report.timestamp)
    if parsed is None:
        logger.debug(f"Report {report.id} has malformed timestamp {report.timestamp!r}, using now")
        return now
    return parsed

def report_weight(report: Report) -> int:
    """User reports count twice as much as seed/system reports."""
    if report.source is ReportSource.USER:
        return USER_WEIGHT
    return DEFAULT_WEIGHT

def estimate_wait_minutes(level: CrowdLevel) -> int:
    return WAIT_MINUTES[level]

def filter_by_window(
    reports: Iterable[Report],
    window_minutes: int,
    now: Optional[int] = None
) -> List[Report]:
    """
    Keep the reports created at most `window_minutes` before `now`.

    Timestamps in the future (clock skew) are kept. Reports with a
    malformed timestamp count as created at `now` and are always kept.
    """
    if window_minutes <= 0:
        raise ValueError(f"window_minutes must be positive, got {window_minutes}")
    if now is None:
        now = current_millis()

    window_ms = window_minutes * MS_PER_MINUTE
    windowed = []
    for report in reports:
        timestamp = resolve_timestamp(report, now)
        age = now - timestamp
        if age < 0:
            logger.debug(f"Report {report.id} is {-age}ms in the future, keeping it")
        if age <= window_ms:
            windowed.append(report)
    return windowed

def select_authoritative_subset(windowed: Sequence[Report]) -> List[Report]:
    """
    User reports override everything else: when at least one is present the
    subset is exactly the user reports, otherwise it is all the others.
    """
    user_reports = [r for r in windowed if r.source is ReportSource.USER]
    if user_reports:
        return user_reports
    return [r for r in windowed if r.source is not ReportSource.USER]

def compute_level(subset: Iterable[Report]) -> CrowdLevel:
    """
    Weighted plurality vote. Ties go to the more urgent level.
    """
    counts: Dict[CrowdLevel, int] = defaultdict(int)
    seen = False
    for report in subset:
        counts[report.level] += report_weight(report)
        seen = True

    if not seen:
        return DEFAULT_LEVEL

    low = counts[CrowdLevel.LOW]
    medium = counts[CrowdLevel.MEDIUM]
    high = counts[CrowdLevel.HIGH]

    if high >= medium and high >= low:
        return CrowdLevel.HIGH
    if medium >= low:
        return CrowdLevel.MEDIUM
    return CrowdLevel.LOW

def compute_average_wait_minutes(subset: Iterable[Report]) -> int:
    """
    Weighted average of the canonical wait per level, rounded half up.
    """
    total_weighted = 0
    total_weight = 0
    for report in subset:
        weight = report_weight(report)
        total_weighted += estimate_wait_minutes(report.level) * weight
        total_weight += weight

    if total_weight == 0:
        return DEFAULT_WAIT_MINUTES

    # Integer round-half-up of total_weighted / total_weight
    return (2 * total_weighted + total_weight) // (2 * total_weight)

def last_updated_at(reports: Iterable[Report], now: Optional[int] = None) -> Optional[int]:
    if now is None:
        now = current_millis()
    timestamps = [resolve_timestamp(r, now) for r in reports]
    if not timestamps:
        return None
    return max(timestamps)

def aggregate(
    reports: Iterable[Report],
    window_minutes: int = DEFAULT_WINDOW_MINUTES,
    now: Optional[int] = None
) -> AggregationResult:
    """
    Compose window filtering, source selection and weighting into one result.

    Seed/system reports inside the window are counted in
    `total_report_count` but only influence level and wait when there
    are no user reports at all.
    """
    if now is None:
        now = current_millis()

    windowed = filter_by_window(reports, window_minutes, now)
    subset = select_authoritative_subset(windowed)
    user_count = sum(1 for r in windowed if r.source is ReportSource.USER)

    logger.debug(
        f"Aggregating {len(windowed)} reports ({user_count} user, "
        f"{len(subset)} used) over {window_minutes} minutes"
    )

    return AggregationResult(
        level=compute_level(subset),
        average_wait_minutes=compute_average_wait_minutes(subset),
        total_report_count=len(windowed),
        user_report_count=user_count,
        last_updated_at=last_updated_at(windowed, now),
        window_minutes=window_minutes
    )
