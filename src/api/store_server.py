"""
FloodDataSync - Report Store Server

Serves ``/reports`` and ``/sensors`` in json-server shape so the REST
store client has something to talk to during local development.

Run with: uvicorn src.api.store_server:app --port 3000
"""

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Body
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.core.exceptions import ReportNotFound, StaleReport, StoreUnavailable
from src.crowdsource.report_handler import FloodReport
from src.database.base import ReportStore, SensorStore
from src.database.memory import InMemoryReportStore, InMemorySensorStore


def create_store_app(
    report_store: Optional[ReportStore] = None,
    sensor_store: Optional[SensorStore] = None,
) -> FastAPI:
    """
    Build the store application.

    Args:
        report_store: Backing report store (in-memory if None)
        sensor_store: Backing sensor store (simulated if None)
    """
    report_store = report_store or InMemoryReportStore()
    sensor_store = sensor_store or InMemorySensorStore()

    store_app = FastAPI(title="FloodDataSync Store", docs_url="/docs")
    store_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @store_app.get("/reports")
    def list_reports() -> List[Dict[str, Any]]:
        try:
            return [r.to_dict() for r in report_store.list()]
        except StoreUnavailable as e:
            raise HTTPException(status_code=503, detail=str(e))

    @store_app.get("/reports/{report_id}")
    def get_report(report_id: str) -> Dict[str, Any]:
        try:
            return report_store.get(report_id).to_dict()
        except ReportNotFound:
            raise HTTPException(status_code=404, detail="Report not found")
        except StoreUnavailable as e:
            raise HTTPException(status_code=503, detail=str(e))

    @store_app.post("/reports", status_code=201)
    def create_report(payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
        payload.pop("id", None)
        try:
            created = report_store.create(FloodReport.from_dict(payload))
        except StoreUnavailable as e:
            raise HTTPException(status_code=503, detail=str(e))
        return created.to_dict()

    @store_app.put("/reports/{report_id}")
    def replace_report(report_id: str, payload: Dict[str, Any] = Body(...)):
        try:
            stored = report_store.update(report_id, FloodReport.from_dict(payload))
        except ReportNotFound:
            raise HTTPException(status_code=404, detail="Report not found")
        except StaleReport as e:
            return JSONResponse(
                status_code=409,
                content={"detail": str(e), "version": e.actual_version},
            )
        except StoreUnavailable as e:
            raise HTTPException(status_code=503, detail=str(e))
        return stored.to_dict()

    @store_app.get("/sensors")
    def list_sensors() -> List[Dict[str, Any]]:
        try:
            return [s.to_dict() for s in sensor_store.list()]
        except StoreUnavailable as e:
            raise HTTPException(status_code=503, detail=str(e))

    return store_app


app = create_store_app()
