"""
Report and office stores. They are the report-fetch collaborators of the
aggregation service; the engine itself never touches them.
"""
import logging
import threading
from collections import defaultdict
from typing import Callable, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...common.database.models import CrowdReportDB, OfficeDB
from ...common.exceptions import ReportStoreError
from ...common.schemas.office import Office
from ..application.aggregation import parse_millis
from ..domain.entities import CrowdLevel, Report, ReportSource

logger = logging.getLogger(__name__)

class InMemoryReportRepository:
    """
    Keeps reports in process memory. Newest additions are returned first.
    """
    def __init__(self, reports: Iterable[Report] = ()):
        self._reports: Dict[str, List[Report]] = defaultdict(list)
        self._lock = threading.Lock()
        for report in reports:
            self.add(report)

    def fetch_recent(self, entity_id: str, limit: int = 50) -> List[Report]:
        with self._lock:
            reports = list(self._reports.get(entity_id, []))
        return list(reversed(reports))[:limit]

    def add(self, report: Report) -> str:
        with self._lock:
            self._reports[report.entity_id].append(report)
        return report.id

class SQLReportRepository:
    """
    Reads and writes reports through SQLAlchemy sessions.
    """
    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def fetch_recent(self, entity_id: str, limit: int = 50) -> List[Report]:
        try:
            with self.session_factory() as session:
                rows = (
                    session.query(CrowdReportDB)
                    .filter(CrowdReportDB.office_id == entity_id)
                    .order_by(CrowdReportDB.timestamp.desc().nulls_first())
                    .limit(limit)
                    .all()
                )
                reports = [self._to_domain(row) for row in rows]
        except SQLAlchemyError as e:
            raise ReportStoreError(f"Failed to fetch reports for {entity_id}: {e}") from e

        logger.debug(f"Fetched {len(reports)} reports for {entity_id}")
        return reports

    def add(self, report: Report) -> str:
        row = CrowdReportDB(
            report_id=report.id,
            office_id=report.entity_id,
            level=report.level.value,
            timestamp=parse_millis(report.timestamp),
            source=report.source.value,
            submitter_id=report.submitter_id
        )
        try:
            with self.session_factory() as session:
                session.add(row)
                session.commit()
        except SQLAlchemyError as e:
            raise ReportStoreError(f"Failed to store report {report.id}: {e}") from e
        return report.id

    @staticmethod
    def _to_domain(row: CrowdReportDB) -> Report:
        return Report(
            id=row.report_id,
            entity_id=row.office_id,
            level=CrowdLevel(row.level),
            timestamp=row.timestamp,
            source=ReportSource(row.source),
            submitter_id=row.submitter_id
        )

class InMemoryOfficeRepository:
    def __init__(self, offices: Iterable[Office] = ()):
        self._offices: Dict[str, Office] = {o.id: o for o in offices}

    def get(self, office_id: str) -> Optional[Office]:
        return self._offices.get(office_id)

    def add(self, office: Office) -> str:
        self._offices[office.id] = office
        return office.id

    def list(self, city: Optional[str] = None) -> List[Office]:
        offices = list(self._offices.values())
        if city:
            offices = [o for o in offices if o.city == city.lower()]
        return offices

class SQLOfficeRepository:
    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get(self, office_id: str) -> Optional[Office]:
        try:
            with self.session_factory() as session:
                row = session.get(OfficeDB, office_id)
                return self._to_schema(row) if row else None
        except SQLAlchemyError as e:
            raise ReportStoreError(f"Failed to load office {office_id}: {e}") from e

    def list(self, city: Optional[str] = None) -> List[Office]:
        try:
            with self.session_factory() as session:
                query = session.query(OfficeDB)
                if city:
                    query = query.filter(OfficeDB.city == city.lower())
                return [self._to_schema(row) for row in query.all()]
        except SQLAlchemyError as e:
            raise ReportStoreError(f"Failed to list offices: {e}") from e

    def add(self, office: Office) -> str:
        try:
            with self.session_factory() as session:
                session.add(OfficeDB(
                    office_id=office.id,
                    name=office.name,
                    type=office.type,
                    city=office.city.lower(),
                    latitude=office.latitude,
                    longitude=office.longitude,
                    address=office.address
                ))
                session.commit()
        except SQLAlchemyError as e:
            raise ReportStoreError(f"Failed to store office {office.id}: {e}") from e
        return office.id

    @staticmethod
    def _to_schema(row: OfficeDB) -> Office:
        return Office(
            id=row.office_id,
            name=row.name,
            type=row.type,
            city=row.city,
            latitude=row.latitude,
            longitude=row.longitude,
            address=row.address
        )
