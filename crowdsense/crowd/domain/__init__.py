"""
Domain module initialization.
"""
from .entities import (
    CrowdLevel,
    ReportSource,
    Report,
    AggregationResult,
    WAIT_MINUTES,
    DEFAULT_LEVEL,
    DEFAULT_WAIT_MINUTES,
    DEFAULT_WINDOW_MINUTES
)
from .protocols import ReportFetcher, AdvisoryGenerator
from .repositories import ReportRepository, OfficeRepository
