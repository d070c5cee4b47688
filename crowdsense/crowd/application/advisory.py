"""
Boundary between crowd facts and advisory text generation.

The generator only ever receives an AdvisoryContext built from an
AggregationResult. Individual reports never cross this boundary.
"""
import calendar
import logging
from datetime import datetime, timezone, tzinfo
from typing import Optional

from ...common.exceptions import AdvisoryUnavailableError
from ...common.schemas.advisory import AdvisoryContext
from ...common.schemas.office import Office
from ..domain.entities import AggregationResult
from ..domain.protocols import AdvisoryGenerator
from .aggregation import MS_PER_MINUTE, current_millis

logger = logging.getLogger(__name__)

LOW_CONFIDENCE_THRESHOLD = 3

def describe_time_of_day(now: Optional[int] = None, tz: tzinfo = timezone.utc) -> str:
    if now is None:
        now = current_millis()
    hour = datetime.fromtimestamp(now / 1000, tz=tz).hour
    if 5 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 21:
        return "evening"
    return "night"

def describe_day_of_week(now: Optional[int] = None, tz: tzinfo = timezone.utc) -> str:
    """Full weekday name, e.g. 'Tuesday'."""
    if now is None:
        now = current_millis()
    return calendar.day_name[datetime.fromtimestamp(now / 1000, tz=tz).weekday()]

def build_advisory_context(
    result: AggregationResult,
    now: Optional[int] = None,
    office: Optional[Office] = None,
    time_of_day: Optional[str] = None,
    day_of_week: Optional[str] = None,
    low_confidence_threshold: int = LOW_CONFIDENCE_THRESHOLD
) -> AdvisoryContext:
    if now is None:
        now = current_millis()

    minutes_since_update = None
    if result.last_updated_at is not None:
        # Future timestamps count as just updated
        minutes_since_update = max(0, (now - result.last_updated_at) // MS_PER_MINUTE)

    return AdvisoryContext(
        level=result.level,
        average_wait_minutes=result.average_wait_minutes,
        total_report_count=result.total_report_count,
        minutes_since_update=minutes_since_update,
        data_confidence='low' if result.total_report_count < low_confidence_threshold else 'normal',
        data_source='user' if result.user_report_count > 0 else 'seed',
        office_type=office.type if office else None,
        city=office.city if office else None,
        time_of_day=time_of_day,
        day_of_week=day_of_week
    )

class AdvisoryService:
    """
    Asks an external generator for a visit advisory.
    Any generator failure surfaces as AdvisoryUnavailableError so the UI
    can show a placeholder instead.
    """
    def __init__(self, generator: AdvisoryGenerator):
        self.generator = generator

    def advise(self, context: AdvisoryContext) -> str:
        logger.info(
            f"Requesting advisory: level={context.level.value} "
            f"wait={context.average_wait_minutes} reports={context.total_report_count} "
            f"source={context.data_source}"
        )
        try:
            text = self.generator.generate(context)
        except Exception as e:
            logger.error(f"Advisory generator failed: {e}")
            raise AdvisoryUnavailableError("Advisory temporarily unavailable") from e

        if not isinstance(text, str) or not text.strip():
            logger.error("Advisory generator returned an empty reply")
            raise AdvisoryUnavailableError("Advisory temporarily unavailable")
        return text.strip()
