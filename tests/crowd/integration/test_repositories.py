import pytest
from unittest.mock import MagicMock
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from crowdsense.common.database import init_db, make_engine
from crowdsense.common.exceptions import ReportStoreError
from crowdsense.crowd.application.aggregation import aggregate
from crowdsense.crowd.domain.entities import CrowdLevel, ReportSource
from crowdsense.crowd.infrastructure.repositories import (
    InMemoryReportRepository, InMemoryOfficeRepository,
    SQLReportRepository, SQLOfficeRepository
)

@pytest.fixture
def session_factory(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'crowd.db'}")
    init_db(engine)
    yield sessionmaker(bind=engine)
    engine.dispose()

# --- In memory ---
def test_in_memory_returns_newest_first(make_report):
    first, second, other = make_report(), make_report(), make_report(entity_id="office2")
    repo = InMemoryReportRepository([first, second, other])
    assert repo.fetch_recent("office1") == [second, first]
    assert repo.fetch_recent("office1", limit=1) == [second]
    assert repo.fetch_recent("missing") == []

def test_in_memory_offices(offices):
    repo = InMemoryOfficeRepository(offices)
    assert repo.get("po-cp").city == "delhi"
    assert repo.get("nope") is None
    assert [o.id for o in repo.list("Mumbai")] == ["psk-andheri", "aadhaar-bandra"]
    assert len(repo.list()) == 3

# --- SQL ---
def test_sql_round_trip(session_factory, make_report, offices, now):
    SQLOfficeRepository(session_factory).add(offices[0])
    repo = SQLReportRepository(session_factory)

    old = make_report("low", entity_id="psk-andheri", minutes_ago=30)
    new = make_report("high", entity_id="psk-andheri", source="seed", minutes_ago=2, submitter_id="u1")
    repo.add(old)
    repo.add(new)

    fetched = repo.fetch_recent("psk-andheri")
    assert [r.id for r in fetched] == [new.id, old.id]
    assert fetched[0].level is CrowdLevel.HIGH
    assert fetched[0].source is ReportSource.SEED
    assert fetched[0].submitter_id == "u1"
    assert fetched[1].timestamp == now - 30 * 60_000

def test_sql_malformed_timestamp_is_stored_as_null(session_factory, make_report, offices, now):
    SQLOfficeRepository(session_factory).add(offices[0])
    repo = SQLReportRepository(session_factory)
    repo.add(make_report("high", entity_id="psk-andheri", timestamp="garbage"))
    repo.add(make_report("low", entity_id="psk-andheri", minutes_ago=5))

    fetched = repo.fetch_recent("psk-andheri", limit=1)
    assert fetched[0].timestamp is None
    assert aggregate(repo.fetch_recent("psk-andheri"), 60, now).last_updated_at == now

def test_sql_offices(session_factory, offices):
    repo = SQLOfficeRepository(session_factory)
    for office in offices:
        repo.add(office)
    assert repo.get("aadhaar-bandra") == offices[1]
    assert repo.get("missing") is None
    assert {o.id for o in repo.list("delhi")} == {"po-cp"}

def test_sql_errors_become_report_store_errors(make_report):
    session = MagicMock()
    session.__enter__.return_value.query.side_effect = OperationalError("SELECT", {}, Exception("locked"))
    repo = SQLReportRepository(lambda: session)
    with pytest.raises(ReportStoreError):
        repo.fetch_recent("office1")
