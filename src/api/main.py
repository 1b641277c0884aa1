"""
FloodDataSync - REST API

FastAPI application for submitting flood reports, peer-validating them,
and serving the dashboard.

Run with: uvicorn src.api.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional, List

from fastapi import FastAPI, HTTPException, Query, Request, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, Response
from pydantic import BaseModel, Field

from src.core.config import get_settings
from src.core.exceptions import (
    NoReportAvailable,
    ReportNotEligible,
    StaleReport,
    StoreUnavailable,
)
from src.core.logging import setup_logging
from src.crowdsource.refresher import ReportRefresher
from src.crowdsource.report_handler import FloodReport, ReportStatus, create_report, format_timestamp
from src.crowdsource.service import ValidationService, build_service
from src.crowdsource.validation import VoteKind, report_status
from src.visualization.map_generator import create_flood_map

VERSION = "0.2.0"

logger = logging.getLogger(__name__)


# ============================================================================
# Pydantic Models
# ============================================================================

class ReportCreateRequest(BaseModel):
    """Request to submit a flood report."""
    location: str = Field(..., min_length=1, max_length=200)
    water_level: float = Field(..., ge=0, description="Water level in meters")
    description: str = Field(..., min_length=1)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    image_url: Optional[str] = None


class ReportResponse(BaseModel):
    """Flood report response."""
    id: str
    location: str
    latitude: float
    longitude: float
    water_level: float
    description: str
    image_url: str
    timestamp: str
    upvotes: int
    downvotes: int
    validated: bool
    status: str


class ReportListResponse(BaseModel):
    """List of flood reports."""
    count: int
    pending_count: int
    reports: List[ReportResponse]


class ReportStatsResponse(BaseModel):
    """Report statistics."""
    total_reports: int
    eligible_count: int
    by_status: dict
    validation_rate: float


class VoteRequest(BaseModel):
    """A peer vote on the report currently shown."""
    vote: VoteKind


class VoteResponse(BaseModel):
    """Result of a vote and the next report to show."""
    outcome: str
    report: ReportResponse
    next_report: Optional[ReportResponse]
    exhausted_round: bool
    message: str


class SensorResponse(BaseModel):
    """Water-level sensor reading."""
    id: str
    location: str
    latitude: float
    longitude: float
    current_water_level: float
    timestamp: str


class HealthResponse(BaseModel):
    """API health check response."""
    status: str
    version: str
    timestamp: str
    store_reachable: bool
    report_count: int


OUTCOME_MESSAGES = {
    "validated": "Report validated successfully!",
    "rejected": "Report rejected by peer validation!",
    "pending": "Vote recorded.",
}


def to_response(report: FloodReport, service: ValidationService) -> ReportResponse:
    return ReportResponse(
        id=report.id,
        location=report.location,
        latitude=report.latitude,
        longitude=report.longitude,
        water_level=report.water_level,
        description=report.description,
        image_url=report.image_url,
        timestamp=format_timestamp(report.timestamp),
        upvotes=report.upvotes,
        downvotes=report.downvotes,
        validated=report.validated,
        status=report_status(report, service.rules).value,
    )


def get_service(request: Request) -> ValidationService:
    return request.app.state.service


# ============================================================================
# Application
# ============================================================================

def create_app(
    service: Optional[ValidationService] = None,
    enable_refresher: bool = True,
) -> FastAPI:
    """
    Build the API application.

    Args:
        service: Prewired service; built from settings at startup if None
        enable_refresher: Poll the store in the background while running
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging()
        logger.info(f"Starting FloodDataSync {VERSION} ({settings.app_env})")
        if app.state.service is None:
            app.state.service = build_service(settings)
        refresher = None
        if enable_refresher:
            refresher = ReportRefresher(app.state.service, settings.refresh_interval_seconds)
            refresher.start()
        app.state.refresher = refresher
        try:
            yield
        finally:
            if refresher is not None:
                await refresher.stop()

    app = FastAPI(
        title="FloodDataSync",
        description="Citizen flood reporting with peer validation",
        version=VERSION,
        debug=settings.debug,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.service = service
    app.state.refresher = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


def register_routes(app: FastAPI) -> None:

    # ========================================================================
    # System Routes
    # ========================================================================

    @app.get("/", response_class=HTMLResponse)
    async def root():
        """Welcome page."""
        return """
        <!DOCTYPE html>
        <html>
        <head><title>FloodDataSync</title></head>
        <body style="font-family: Arial; max-width: 800px; margin: 50px auto;">
            <h1>FloodDataSync</h1>
            <p>Report floods, validate your neighbours' reports, watch the dashboard.</p>
            <ul>
                <li><a href="/docs">API documentation</a></li>
                <li><a href="/api/v1/validation/next">Next report to validate</a></li>
                <li><a href="/api/v1/dashboard">Dashboard data</a></li>
                <li><a href="/api/v1/map/reports">Flood map</a></li>
            </ul>
        </body>
        </html>
        """

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health_check(service: ValidationService = Depends(get_service)):
        """Check API health and store reachability."""
        try:
            await service.refresh()
            reachable = True
        except StoreUnavailable:
            reachable = False

        return HealthResponse(
            status="healthy" if reachable else "degraded",
            version=VERSION,
            timestamp=datetime.now(timezone.utc).isoformat(),
            store_reachable=reachable,
            report_count=len(service.reports),
        )

    # ========================================================================
    # Report Routes
    # ========================================================================

    @app.post("/api/v1/reports", response_model=ReportResponse, status_code=201, tags=["Reports"])
    async def submit_report(
        request: ReportCreateRequest,
        service: ValidationService = Depends(get_service),
    ):
        """Submit a flood report for peer validation."""
        try:
            report = create_report(
                location=request.location,
                water_level=request.water_level,
                description=request.description,
                latitude=request.latitude,
                longitude=request.longitude,
                image_url=request.image_url,
            )
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))

        try:
            created = await service.submit_report(report)
        except StoreUnavailable as e:
            raise HTTPException(status_code=503, detail=str(e))

        return to_response(created, service)

    @app.get("/api/v1/reports", response_model=ReportListResponse, tags=["Reports"])
    async def list_reports(
        status: Optional[ReportStatus] = Query(None, description="Filter by status"),
        service: ValidationService = Depends(get_service),
    ):
        """List reports, optionally filtered by status."""
        reports = service.reports
        if status is not None:
            reports = [r for r in reports if report_status(r, service.rules) == status]

        return ReportListResponse(
            count=len(reports),
            pending_count=len(service.pending_reports()),
            reports=[to_response(r, service) for r in reports],
        )

    @app.get("/api/v1/reports/stats/summary", response_model=ReportStatsResponse, tags=["Reports"])
    async def get_report_stats(service: ValidationService = Depends(get_service)):
        """Report counts by status."""
        return ReportStatsResponse(**service.statistics())

    @app.get("/api/v1/reports/{report_id}", response_model=ReportResponse, tags=["Reports"])
    async def get_report(report_id: str, service: ValidationService = Depends(get_service)):
        """Get a specific flood report by ID."""
        report = service.get_report(report_id)

        if not report:
            raise HTTPException(status_code=404, detail="Report not found")

        return to_response(report, service)

    # ========================================================================
    # Validation Routes
    # ========================================================================

    @app.get(
        "/api/v1/validation/next",
        response_model=ReportResponse,
        responses={204: {"description": "No reports pending validation"}},
        tags=["Validation"],
    )
    async def next_report(service: ValidationService = Depends(get_service)):
        """The report the validator should look at now."""
        report = service.current_report()
        if report is None:
            return Response(status_code=204)
        return to_response(report, service)

    @app.post("/api/v1/validation/vote", response_model=VoteResponse, tags=["Validation"])
    async def vote(request: VoteRequest, service: ValidationService = Depends(get_service)):
        """Upvote or downvote the current report."""
        try:
            session_vote = await service.cast_vote(request.vote)
        except (NoReportAvailable, ReportNotEligible, StaleReport) as e:
            raise HTTPException(status_code=409, detail=str(e))
        except StoreUnavailable as e:
            raise HTTPException(status_code=503, detail=str(e))

        outcome = session_vote.result.outcome.value
        message = OUTCOME_MESSAGES[outcome]
        if session_vote.exhausted_round:
            message = f"{message} No more pending reports for now! Check back later."

        next_report = session_vote.next_report
        return VoteResponse(
            outcome=outcome,
            report=to_response(session_vote.result.report, service),
            next_report=to_response(next_report, service) if next_report else None,
            exhausted_round=session_vote.exhausted_round,
            message=message,
        )

    # ========================================================================
    # Dashboard Routes
    # ========================================================================

    @app.get("/api/v1/dashboard", tags=["Dashboard"])
    async def dashboard(service: ValidationService = Depends(get_service)):
        """Validated reports, all reports with status, sensors and chart data."""
        return service.dashboard().to_dict()

    @app.get("/api/v1/sensors", response_model=List[SensorResponse], tags=["Dashboard"])
    async def list_sensors(service: ValidationService = Depends(get_service)):
        """Latest simulated sensor readings."""
        return [
            SensorResponse(
                id=s.id,
                location=s.location,
                latitude=s.latitude,
                longitude=s.longitude,
                current_water_level=s.current_water_level,
                timestamp=format_timestamp(s.timestamp),
            )
            for s in service.sensors
        ]

    @app.get("/api/v1/map/reports", response_class=HTMLResponse, tags=["Map"])
    async def reports_map(service: ValidationService = Depends(get_service)):
        """Interactive map of validated reports and sensors."""
        settings = get_settings()
        flood_map = create_flood_map(
            reports=service.reports,
            sensors=service.sensors,
            center=(settings.map_center_lat, settings.map_center_lon),
            zoom=settings.map_zoom,
        )
        return flood_map.get_root().render()


app = create_app()


# ============================================================================
# Main
# ============================================================================

if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
