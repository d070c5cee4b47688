from .report import ReportCreate, ReportRecord
from .office import Office, OfficeType
from .summary import AggregationSummary, NearbyOfficeSummary
from .advisory import AdvisoryContext

__all__ = [
    "ReportCreate",
    "ReportRecord",
    "Office",
    "OfficeType",
    "AggregationSummary",
    "NearbyOfficeSummary",
    "AdvisoryContext",
]
