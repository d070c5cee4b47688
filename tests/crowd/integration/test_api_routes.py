import asyncio
import threading
import httpx
import pytest
from fastapi.testclient import TestClient
from omegaconf import OmegaConf
from unittest.mock import MagicMock, patch
from crowdsense.common.config import default_config
from crowdsense.common.exceptions import ReportStoreError
from crowdsense.common.metrics import MetricsCollector
from crowdsense.crowd.application.advisory import AdvisoryService
from crowdsense.crowd.application.aggregation import current_millis
from crowdsense.crowd.application.service import CrowdSummaryService
from crowdsense.crowd.domain.entities import CrowdLevel, Report, ReportSource
from crowdsense.crowd.infrastructure.repositories import (
    InMemoryOfficeRepository, InMemoryReportRepository
)
from crowdsense.crowd.presentation.api import app, configure
from crowdsense.crowd.presentation.api.routes import offices as offices_routes

@pytest.fixture
def reports():
    return InMemoryReportRepository()

@pytest.fixture(autouse=True)
def context(offices, reports):
    metrics = MetricsCollector()
    ctx = offices_routes.CrowdApiContext(
        service=CrowdSummaryService(reports.fetch_recent, metrics=metrics),
        offices=InMemoryOfficeRepository(offices),
        reports=reports,
        metrics=metrics
    )
    offices_routes.init_context(ctx)
    yield ctx
    offices_routes.init_context(None)

@pytest.fixture
def client():
    return TestClient(app)

def _report(entity_id, level, source=ReportSource.USER, minutes_ago=0):
    return Report(
        id=f"{entity_id}-{level}-{minutes_ago}",
        entity_id=entity_id,
        level=CrowdLevel(level),
        timestamp=current_millis() - minutes_ago * 60_000,
        source=source
    )

def test_status(client):
    response = client.get("/status")
    assert response.status_code == 200
    assert response.json() == {"status": "running", "service_active": True}

def test_list_offices_by_city(client):
    response = client.get("/offices", params={"city": "delhi"})
    assert response.status_code == 200
    assert [o["id"] for o in response.json()] == ["po-cp"]

def test_summary_without_reports(client):
    response = client.get("/offices/psk-andheri/summary")
    assert response.status_code == 200
    data = response.json()
    assert data["level"] == "medium"
    assert data["average_wait_minutes"] == 30
    assert data["total_report_count"] == 0
    assert data["last_updated_at"] is None
    assert data["last_updated_text"] is None
    assert data["window_minutes"] == 60

def test_summary_prefers_user_reports(client, reports):
    reports.add(_report("psk-andheri", "high", ReportSource.SEED, minutes_ago=1))
    reports.add(_report("psk-andheri", "low", minutes_ago=10))

    data = client.get("/offices/psk-andheri/summary").json()
    assert data["level"] == "low"
    assert data["average_wait_minutes"] == 10
    assert data["total_report_count"] == 2
    assert data["user_report_count"] == 1
    assert data["last_updated_text"] == "1 minute ago"

def test_summary_window_parameter(client, reports):
    reports.add(_report("psk-andheri", "high", minutes_ago=90))
    assert client.get("/offices/psk-andheri/summary").json()["total_report_count"] == 0

    data = client.get("/offices/psk-andheri/summary", params={"window_minutes": 120}).json()
    assert data["total_report_count"] == 1
    assert data["window_minutes"] == 120

def test_summary_rejects_bad_window(client):
    response = client.get("/offices/psk-andheri/summary", params={"window_minutes": 0})
    assert response.status_code == 422

def test_unknown_office_is_404(client):
    response = client.get("/offices/missing/summary")
    assert response.status_code == 404

def test_submit_report(client, reports):
    response = client.post("/offices/po-cp/reports", json={"level": "high", "submitter_id": "u-1"})
    assert response.status_code == 201
    data = response.json()
    assert data["level"] == "high"
    assert data["average_wait_minutes"] == 60
    assert data["user_report_count"] == 1
    assert data["last_updated_text"] == "Just now"

    stored = reports.fetch_recent("po-cp")
    assert len(stored) == 1
    assert stored[0].source is ReportSource.USER
    assert stored[0].submitter_id == "u-1"

def test_submit_report_rejects_invalid_level(client, reports):
    response = client.post("/offices/po-cp/reports", json={"level": "packed"})
    assert response.status_code == 422
    assert reports.fetch_recent("po-cp") == []

def test_store_failure_is_503(client, context):
    context.reports = MagicMock()
    context.reports.add.side_effect = ReportStoreError("disk full")
    response = client.post("/offices/po-cp/reports", json={"level": "low"})
    assert response.status_code == 503

def test_nearby_offices(client, reports):
    reports.add(_report("aadhaar-bandra", "high"))
    response = client.get("/offices/nearby", params={"lat": 19.06, "lon": 72.83, "radius_km": 10})
    assert response.status_code == 200
    data = response.json()
    assert [item["office"]["id"] for item in data] == ["aadhaar-bandra", "psk-andheri"]
    assert data[0]["summary"]["level"] == "high"
    assert data[1]["summary"]["level"] == "medium"
    assert data[0]["distance_km"] < data[1]["distance_km"]

def test_nearby_uses_default_radius(client, context):
    context.default_radius_km = 1.0
    data = client.get("/offices/nearby", params={"lat": 19.06, "lon": 72.83}).json()
    assert [item["office"]["id"] for item in data] == ["aadhaar-bandra"]

def test_advisory_context(client, reports):
    reports.add(_report("psk-andheri", "high", minutes_ago=5))
    response = client.get("/offices/psk-andheri/advisory-context")
    assert response.status_code == 200
    data = response.json()
    assert data["level"] == "high"
    assert data["minutes_since_update"] == 5
    assert data["data_confidence"] == "low"
    assert data["data_source"] == "user"
    assert data["office_type"] == "passport"
    assert data["city"] == "mumbai"
    assert data["time_of_day"] in {"morning", "afternoon", "evening", "night"}
    assert data["day_of_week"] in {"Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"}
    assert "reports" not in data

def test_metrics(client):
    client.get("/offices/psk-andheri/summary")
    data = client.get("/metrics").json()
    assert data["aggregations"] == 1
    assert data["fetch_failures"] == 0

def test_uninitialized_service_is_503(client):
    with patch.object(offices_routes, "_context", None):
        response = client.get("/offices/psk-andheri/summary")
    assert response.status_code == 503

def test_advisory_not_configured_is_503(client):
    response = client.get("/offices/psk-andheri/advisory")
    assert response.status_code == 503

def test_advisory_uses_generator(client, context, reports):
    reports.add(_report("psk-andheri", "low", minutes_ago=3))
    generator = MagicMock()
    generator.generate.return_value = "Good time to visit."
    context.advisory = AdvisoryService(generator)

    response = client.get("/offices/psk-andheri/advisory")
    assert response.status_code == 200
    assert response.json() == {"office_id": "psk-andheri", "advisory": "Good time to visit."}

    sent = generator.generate.call_args.args[0]
    assert sent.level == CrowdLevel.LOW
    assert sent.office_type == "passport"

def test_advisory_generator_failure_is_503(client, context):
    generator = MagicMock()
    generator.generate.side_effect = RuntimeError("quota exceeded")
    context.advisory = AdvisoryService(generator)

    response = client.get("/offices/psk-andheri/advisory")
    assert response.status_code == 503
    assert response.json()["detail"] == "Advisory temporarily unavailable"

def test_advisory_unknown_office_is_404(client, context):
    context.advisory = AdvisoryService(MagicMock())
    assert client.get("/offices/missing/advisory").status_code == 404

def test_concurrent_summaries_do_not_block_each_other(context):
    # Every fetch waits until all requests are fetching at once
    requests = 4
    barrier = threading.Barrier(requests, timeout=5)

    def blocking_fetch(entity_id, limit):
        barrier.wait()
        return []

    context.service = CrowdSummaryService(blocking_fetch)

    async def fetch_all():
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            return await asyncio.gather(*[
                client.get("/offices/psk-andheri/summary") for _ in range(requests)
            ])

    responses = asyncio.run(fetch_all())
    assert [r.status_code for r in responses] == [200] * requests

def test_configure_builds_sql_backed_service(tmp_path, client):
    cfg = OmegaConf.merge(
        default_config(),
        OmegaConf.from_dotlist([f"database.url=sqlite:///{tmp_path / 'api.db'}"])
    )
    generator = MagicMock()
    ctx = configure(cfg, advisory_generator=generator)

    assert ctx.advisory is not None
    assert ctx.offices.list() == []
    assert client.get("/offices/psk-andheri/summary").status_code == 404
