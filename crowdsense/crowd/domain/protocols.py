"""
Domain protocols for the Crowd module.
"""
from typing import List, Protocol, TYPE_CHECKING
from .entities import Report

if TYPE_CHECKING:
    from ...common.schemas.advisory import AdvisoryContext

class ReportFetcher(Protocol):
    """
    Capability that returns candidate reports for one office.
    """
    def __call__(self, entity_id: str, limit: int) -> List[Report]:
        ...

class AdvisoryGenerator(Protocol):
    """
    External text generator. Receives aggregated fields only.
    """
    def generate(self, context: "AdvisoryContext") -> str:
        ...
