"""
Domain entities for the Crowd module.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

class CrowdLevel(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

class ReportSource(Enum):
    """
    Trust tier of a report. USER is a live citizen submission,
    SEED and SYSTEM are synthetic or bootstrap data.
    """
    USER = "user"
    SEED = "seed"
    SYSTEM = "system"

# Canonical wait (minutes) per level
WAIT_MINUTES = {
    CrowdLevel.LOW: 10,
    CrowdLevel.MEDIUM: 30,
    CrowdLevel.HIGH: 60,
}

DEFAULT_LEVEL = CrowdLevel.MEDIUM
DEFAULT_WAIT_MINUTES = 30
DEFAULT_WINDOW_MINUTES = 60

@dataclass(frozen=True)
class Report:
    """
    A single timestamped congestion observation for an office.
    """
    id: str
    entity_id: str
    level: CrowdLevel
    timestamp: Any  # ms since epoch; malformed values are resolved to "now"
    source: ReportSource = ReportSource.USER
    submitter_id: Optional[str] = None  # None means anonymous

@dataclass(frozen=True)
class AggregationResult:
    """
    Summary of the reports that fell inside one time window.
    Recomputed on every call, never stored by the engine.
    """
    level: CrowdLevel
    average_wait_minutes: int
    total_report_count: int
    user_report_count: int
    last_updated_at: Optional[int]
    window_minutes: int

    def to_dict(self) -> dict:
        return {
            'level': self.level.value,
            'average_wait_minutes': self.average_wait_minutes,
            'total_report_count': self.total_report_count,
            'user_report_count': self.user_report_count,
            'last_updated_at': self.last_updated_at,
            'window_minutes': self.window_minutes
        }
