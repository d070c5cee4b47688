"""
API for office crowd summaries, report submission and visit advisories.

Handlers are plain functions so FastAPI runs the blocking store calls
in its threadpool.
"""
import uuid
from dataclasses import dataclass, field
from datetime import timezone, tzinfo
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query

from .....common.exceptions import EntityNotFoundError
from .....common.metrics import MetricsCollector
from .....common.schemas import (
    AdvisoryContext, AggregationSummary, NearbyOfficeSummary, Office, ReportCreate
)
from .....geo.distance import DEFAULT_RADIUS_KM
from ....application.advisory import (
    AdvisoryService, build_advisory_context, describe_day_of_week, describe_time_of_day
)
from ....application.aggregation import current_millis
from ....application.formatting import format_age
from ....application.service import CrowdSummaryService
from ....domain.entities import AggregationResult, Report, ReportSource
from ....domain.repositories import OfficeRepository, ReportRepository

app = FastAPI()

@dataclass
class CrowdApiContext:
    service: CrowdSummaryService
    offices: OfficeRepository
    reports: ReportRepository
    metrics: MetricsCollector = field(default_factory=MetricsCollector)
    tz: tzinfo = timezone.utc
    default_radius_km: float = DEFAULT_RADIUS_KM
    low_confidence_threshold: int = 3
    advisory: Optional[AdvisoryService] = None

# Singleton
_context: Optional[CrowdApiContext] = None

def init_context(context: CrowdApiContext):
    global _context
    _context = context

def get_context() -> CrowdApiContext:
    if _context is None:
        raise HTTPException(503, "Crowd service not initialized")
    return _context

def _require_office(context: CrowdApiContext, office_id: str) -> Office:
    office = context.offices.get(office_id)
    if office is None:
        raise EntityNotFoundError(f"Office not found: {office_id}")
    return office

def _to_summary(
    context: CrowdApiContext,
    office_id: str,
    result: AggregationResult,
    now: int
) -> AggregationSummary:
    age_text = None
    if result.last_updated_at is not None:
        age_text = format_age(result.last_updated_at, now, context.tz)
    return AggregationSummary.from_result(office_id, result, age_text)

@app.get("/offices", response_model=List[Office])
def list_offices(city: Optional[str] = None):
    """Offices, optionally restricted to one city."""
    return get_context().offices.list(city)

@app.get("/offices/nearby", response_model=List[NearbyOfficeSummary])
def nearby_offices(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    radius_km: Optional[float] = Query(None, ge=0),
    city: Optional[str] = None
):
    """Offices around a point, nearest first, with their current summaries."""
    context = get_context()
    now = current_millis()
    radius = context.default_radius_km if radius_km is None else radius_km

    nearby = context.service.summarize_nearby(lat, lon, context.offices.list(city), radius, now)
    return [
        NearbyOfficeSummary(
            office=item.entity,
            distance_km=item.distance_km,
            summary=_to_summary(context, item.entity.id, result, now)
        )
        for item, result in nearby
    ]

@app.get("/offices/{office_id}/summary", response_model=AggregationSummary)
def office_summary(office_id: str, window_minutes: Optional[int] = Query(None, gt=0)):
    """Current crowd estimate for one office."""
    context = get_context()
    _require_office(context, office_id)
    now = current_millis()
    result = context.service.summarize(office_id, now, window_minutes)
    return _to_summary(context, office_id, result, now)

@app.post("/offices/{office_id}/reports", response_model=AggregationSummary, status_code=201)
def submit_report(office_id: str, payload: ReportCreate):
    """
    Stores a citizen report and returns the refreshed summary.

    Body example:
    {
        "level": "high",
        "submitter_id": "u-123"
    }
    """
    context = get_context()
    _require_office(context, office_id)
    now = current_millis()

    report = Report(
        id=uuid.uuid4().hex,
        entity_id=office_id,
        level=payload.level,
        timestamp=now,
        source=ReportSource.USER,
        submitter_id=payload.submitter_id
    )
    context.reports.add(report)

    result = context.service.summarize(office_id, now)
    return _to_summary(context, office_id, result, now)

def _advisory_context(context: CrowdApiContext, office_id: str) -> AdvisoryContext:
    office = _require_office(context, office_id)
    now = current_millis()
    result = context.service.summarize(office_id, now)
    return build_advisory_context(
        result,
        now=now,
        office=office,
        time_of_day=describe_time_of_day(now, context.tz),
        day_of_week=describe_day_of_week(now, context.tz),
        low_confidence_threshold=context.low_confidence_threshold
    )

@app.get("/offices/{office_id}/advisory-context", response_model=AdvisoryContext)
def advisory_context(office_id: str):
    """Aggregated fields an advisory generator may use for this office."""
    return _advisory_context(get_context(), office_id)

@app.get("/offices/{office_id}/advisory")
def visit_advisory(office_id: str) -> Dict[str, str]:
    """
    Visit advisory text from the configured generator.
    Answers 503 when no generator is configured or it fails.
    """
    context = get_context()
    if context.advisory is None:
        raise HTTPException(503, "Advisory generator not configured")
    text = context.advisory.advise(_advisory_context(context, office_id))
    return {"office_id": office_id, "advisory": text}
