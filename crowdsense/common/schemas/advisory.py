from typing import Literal, Optional
from pydantic import BaseModel, Field, ConfigDict

from ...crowd.domain.entities import CrowdLevel

class AdvisoryContext(BaseModel):
    """
    Everything an advisory text generator is allowed to see.
    Only aggregated fields, never individual reports.
    """
    model_config = ConfigDict(frozen=True, extra='forbid')

    level: CrowdLevel = Field(..., description="Aggregated crowd level")
    average_wait_minutes: int = Field(..., ge=0, description="Aggregated wait in minutes")
    total_report_count: int = Field(..., ge=0, description="Reports inside the window")
    minutes_since_update: Optional[int] = Field(None, ge=0, description="Age of the latest report, None if unknown")
    data_confidence: Literal['low', 'normal'] = Field(..., description="'low' when there are few reports")
    data_source: Literal['user', 'seed'] = Field(..., description="Tier the estimate was computed from")
    office_type: Optional[str] = Field(None, description="Kind of office")
    city: Optional[str] = Field(None, description="City of the office")
    time_of_day: Optional[str] = Field(None, description="Caller's time of day, e.g. 'morning'")
    day_of_week: Optional[str] = Field(None, description="Caller's weekday, e.g. 'Tuesday'")
