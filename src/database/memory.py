"""
In-memory stores for FloodDataSync
Used for local development and tests
"""

import logging
from dataclasses import replace
from threading import RLock
from typing import Dict, List, Optional

from src.core.exceptions import ReportNotFound, StaleReport
from src.crowdsource.report_handler import FloodReport
from src.ingestion.sensors import SensorReading, SensorSimulator

logger = logging.getLogger(__name__)


class InMemoryReportStore:
    """
    Report store kept in a dict.

    Ids are sequential strings, as json-server assigns them. Updates check
    the report version and bump it.
    """

    def __init__(self, reports: Optional[List[FloodReport]] = None):
        self._lock = RLock()
        self._reports: Dict[str, FloodReport] = {}
        self._next_id = 1

        for report in reports or []:
            self.create(report)

    def list(self) -> List[FloodReport]:
        with self._lock:
            return [replace(r) for r in self._reports.values()]

    def get(self, report_id: str) -> FloodReport:
        with self._lock:
            report = self._reports.get(str(report_id))
            if report is None:
                raise ReportNotFound(report_id)
            return replace(report)

    def create(self, report: FloodReport) -> FloodReport:
        with self._lock:
            report_id = str(self._next_id)
            self._next_id += 1
            stored = replace(report, id=report_id, version=0)
            self._reports[report_id] = stored
            logger.info(f"Report {report_id} created at {stored.location}")
            return replace(stored)

    def update(self, report_id: str, report: FloodReport) -> FloodReport:
        with self._lock:
            report_id = str(report_id)
            current = self._reports.get(report_id)
            if current is None:
                raise ReportNotFound(report_id)
            if report.version != current.version:
                raise StaleReport(report_id, report.version, current.version)

            stored = replace(
                report,
                id=report_id,
                timestamp=current.timestamp,
                version=current.version + 1,
            )
            self._reports[report_id] = stored
            return replace(stored)


class InMemorySensorStore:
    """Sensor store that re-simulates readings on every list()."""

    def __init__(self, simulator: Optional[SensorSimulator] = None):
        self.simulator = simulator or SensorSimulator()

    def list(self) -> List[SensorReading]:
        return self.simulator.read_all()
