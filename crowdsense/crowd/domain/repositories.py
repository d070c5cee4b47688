"""
Domain repositories for the Crowd module.
"""
from typing import List, Optional, Protocol, TYPE_CHECKING
from .entities import Report

if TYPE_CHECKING:
    from ...common.schemas.office import Office

class ReportRepository(Protocol):
    """
    Abstract store of crowd reports.
    """
    def fetch_recent(self, entity_id: str, limit: int = 50) -> List[Report]:
        ...

    def add(self, report: Report) -> str:
        ...

class OfficeRepository(Protocol):
    """
    Abstract directory of offices.
    """
    def get(self, office_id: str) -> Optional["Office"]:
        ...

    def list(self, city: Optional[str] = None) -> List["Office"]:
        ...
