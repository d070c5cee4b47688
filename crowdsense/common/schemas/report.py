from typing import Optional, Union
from pydantic import BaseModel, Field, ConfigDict

from ...crowd.domain.entities import CrowdLevel, ReportSource, Report

class ReportCreate(BaseModel):
    """
    A crowd report as submitted by a citizen through the API.
    """
    level: CrowdLevel = Field(..., description="Perceived crowd level (low, medium, high)")
    submitter_id: Optional[str] = Field(None, description="Submitter identifier, omitted for anonymous reports")

class ReportRecord(BaseModel):
    """
    A stored crowd report as returned by a report store.
    The timestamp is kept as delivered; malformed values are resolved by the engine.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique identifier of the report")
    entity_id: str = Field(..., description="Office the report concerns")
    level: CrowdLevel = Field(..., description="Perceived crowd level (low, medium, high)")
    timestamp: Optional[Union[int, float, str]] = Field(None, description="Creation time in ms since epoch")
    source: ReportSource = Field(ReportSource.USER, description="Trust tier (user, seed, system)")
    submitter_id: Optional[str] = Field(None, description="Submitter identifier, None if anonymous")

    def to_domain(self) -> Report:
        return Report(
            id=self.id,
            entity_id=self.entity_id,
            level=self.level,
            timestamp=self.timestamp,
            source=self.source,
            submitter_id=self.submitter_id
        )
