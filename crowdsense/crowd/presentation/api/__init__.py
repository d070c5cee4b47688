"""
API package.
"""
import logging
from typing import Optional
from zoneinfo import ZoneInfo

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from omegaconf import DictConfig
from sqlalchemy.orm import sessionmaker

from ....common.database import init_db, make_engine
from ....common.exceptions import AdvisoryUnavailableError, EntityNotFoundError, ReportStoreError
from ....common.metrics import MetricsCollector
from ...application.advisory import AdvisoryService
from ...application.service import CrowdSummaryService
from ...domain.protocols import AdvisoryGenerator
from ...infrastructure.repositories import SQLOfficeRepository, SQLReportRepository
from .routes import offices, system

logger = logging.getLogger(__name__)

# Initialize main app
app = FastAPI(title="CrowdSense API")

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allow all origins for development
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(offices.app.router, tags=["offices"])
app.include_router(system.app.router, tags=["system"])

@app.exception_handler(EntityNotFoundError)
async def entity_not_found_handler(request: Request, exc: EntityNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})

@app.exception_handler(ReportStoreError)
async def report_store_error_handler(request: Request, exc: ReportStoreError):
    logger.error(f"Report store error on {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"detail": "Report store unavailable"})

@app.exception_handler(AdvisoryUnavailableError)
async def advisory_unavailable_handler(request: Request, exc: AdvisoryUnavailableError):
    return JSONResponse(status_code=503, content={"detail": str(exc)})

def configure(
    cfg: DictConfig,
    advisory_generator: Optional[AdvisoryGenerator] = None
) -> offices.CrowdApiContext:
    """
    Builds the SQL-backed service from a crowd config and installs it.
    The advisory route stays disabled unless a generator is given.
    """
    engine = make_engine(cfg.database.url)
    init_db(engine)
    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    reports = SQLReportRepository(session_factory)
    metrics = MetricsCollector()
    service = CrowdSummaryService(
        reports.fetch_recent,
        window_minutes=cfg.aggregation.window_minutes,
        fetch_limit=cfg.aggregation.fetch_limit,
        metrics=metrics
    )
    context = offices.CrowdApiContext(
        service=service,
        offices=SQLOfficeRepository(session_factory),
        reports=reports,
        metrics=metrics,
        tz=ZoneInfo(cfg.formatter.timezone),
        default_radius_km=cfg.geo.default_radius_km,
        low_confidence_threshold=cfg.advisory.low_confidence_threshold,
        advisory=AdvisoryService(advisory_generator) if advisory_generator is not None else None
    )
    offices.init_context(context)
    logger.info(f"CrowdSense API configured with database {cfg.database.url}")
    return context
