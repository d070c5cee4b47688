from typing import Optional
from pydantic import BaseModel, Field

from ...crowd.domain.entities import AggregationResult, CrowdLevel
from .office import Office

class AggregationSummary(BaseModel):
    """
    Aggregated crowd estimate for one office, as served to the UI.
    """
    office_id: str = Field(..., description="Office the summary describes")
    level: CrowdLevel = Field(..., description="Estimated crowd level")
    average_wait_minutes: int = Field(..., ge=0, description="Expected wait in minutes")
    total_report_count: int = Field(..., ge=0, description="Reports inside the window")
    user_report_count: int = Field(..., ge=0, description="User reports inside the window")
    last_updated_at: Optional[int] = Field(None, description="Most recent report time (ms)")
    last_updated_text: Optional[str] = Field(None, description="Relative age of the most recent report")
    window_minutes: int = Field(..., gt=0, description="Window used for the aggregation")

    @classmethod
    def from_result(
        cls,
        office_id: str,
        result: AggregationResult,
        last_updated_text: Optional[str] = None
    ) -> "AggregationSummary":
        return cls(
            office_id=office_id,
            level=result.level,
            average_wait_minutes=result.average_wait_minutes,
            total_report_count=result.total_report_count,
            user_report_count=result.user_report_count,
            last_updated_at=result.last_updated_at,
            last_updated_text=last_updated_text,
            window_minutes=result.window_minutes
        )

class NearbyOfficeSummary(BaseModel):
    """
    An office close to the caller together with its current summary.
    """
    office: Office
    distance_km: float = Field(..., ge=0, description="Distance from the reference point")
    summary: AggregationSummary
