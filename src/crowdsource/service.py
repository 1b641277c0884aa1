"""
Validation service
Owns the local report cache and runs votes against the report store
"""

import asyncio
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional

from src.core.exceptions import NoReportAvailable, StoreUnavailable
from src.crowdsource.dashboard import DashboardSnapshot, build_dashboard, status_counts
from src.crowdsource.report_handler import FloodReport
from src.crowdsource.session import SessionVote, ValidationSession
from src.crowdsource.validation import (
    DEFAULT_RULES,
    ValidationRules,
    VoteKind,
    apply_vote,
    eligible_reports,
)
from src.database.base import ReportStore, SensorStore
from src.ingestion.sensors import SensorReading

logger = logging.getLogger(__name__)


@dataclass
class RefreshResult:
    """Counts from one refresh cycle."""
    reports: int
    sensors: int


class ValidationService:
    """
    Coordinates the validation engine with the report store.

    The cache holds the last snapshot fetched from the store, in store
    order. A refresh replaces it wholesale (last write wins). Store calls
    are blocking and run in a worker thread.

    Store failures never touch the cache: the error is logged and
    re-raised to the caller.
    """

    def __init__(
        self,
        report_store: ReportStore,
        sensor_store: Optional[SensorStore] = None,
        rules: ValidationRules = DEFAULT_RULES,
    ):
        self.report_store = report_store
        self.sensor_store = sensor_store
        self.rules = rules
        self.session = ValidationSession(rules)

        self._reports: Dict[str, FloodReport] = {}
        self._sensors: List[SensorReading] = []
        self._locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

        logger.info("ValidationService initialized")

    @property
    def reports(self) -> List[FloodReport]:
        return list(self._reports.values())

    @property
    def sensors(self) -> List[SensorReading]:
        return list(self._sensors)

    def get_report(self, report_id: str) -> Optional[FloodReport]:
        return self._reports.get(str(report_id))

    async def refresh(self) -> RefreshResult:
        """
        Fetch reports and sensors and replace the cache.

        Raises:
            StoreUnavailable: If either store call fails
        """
        try:
            reports = await asyncio.to_thread(self.report_store.list)
            sensors = []
            if self.sensor_store is not None:
                sensors = await asyncio.to_thread(self.sensor_store.list)
        except StoreUnavailable as e:
            logger.error(f"Refresh failed: {e}")
            raise

        self._reports = {r.id: r for r in reports}
        self._sensors = sensors
        return RefreshResult(reports=len(reports), sensors=len(sensors))

    async def submit_report(self, report: FloodReport) -> FloodReport:
        """
        Store a new report and add it to the cache.

        Raises:
            StoreUnavailable: If the store call fails
        """
        try:
            created = await asyncio.to_thread(self.report_store.create, report)
        except StoreUnavailable as e:
            logger.error(f"Submission failed: {e}")
            raise

        self._reports[created.id] = created
        logger.info(f"Report {created.id} submitted for peer validation")
        return created

    def current_report(self) -> Optional[FloodReport]:
        """The report the validator should see, or None."""
        return self.session.current(self._reports)

    def pending_reports(self) -> List[FloodReport]:
        return eligible_reports(self._reports, self.rules)

    async def cast_vote(self, kind: VoteKind) -> SessionVote:
        """
        Vote on the current report and persist the result.

        Reading, applying and writing happen under a per-report lock; the
        cursor only moves once the store has accepted the update.

        Raises:
            NoReportAvailable: If nothing is pending
            StoreUnavailable: If the update could not be stored
            StaleReport: If the store saw a concurrent update
        """
        target = self.current_report()
        if target is None:
            raise NoReportAvailable()

        async with self._locks[target.id]:
            target = self._reports.get(target.id, target)
            result = apply_vote(target, kind, self.rules)
            try:
                stored = await asyncio.to_thread(
                    self.report_store.update, target.id, result.report
                )
            except StoreUnavailable as e:
                logger.error(f"Vote on report {target.id} not stored: {e}")
                raise

            self._reports[stored.id] = stored
            result.report = stored

        wrapped = self.session.advance(self._reports)
        return SessionVote(
            result=result,
            next_report=self.current_report(),
            cursor=self.session.cursor,
            exhausted_round=wrapped,
        )

    def dashboard(self) -> DashboardSnapshot:
        return build_dashboard(self._reports, self._sensors, self.rules)

    def statistics(self) -> Dict[str, object]:
        counts = status_counts(self._reports, self.rules)
        total = len(self._reports)
        return {
            "total_reports": total,
            "eligible_count": len(self.pending_reports()),
            "by_status": counts,
            "validation_rate": counts["validated"] / total if total > 0 else 0,
        }


def build_service(settings) -> ValidationService:
    """
    Wire a ValidationService to the store backend named in settings.

    ``store_backend`` is one of ``http`` (json-server style REST store),
    ``sql`` (SQLAlchemy, ``database_url``) or ``memory``.
    """
    from src.database.connection import init_db
    from src.database.memory import InMemoryReportStore, InMemorySensorStore
    from src.database.repository import SqlReportStore, SqlSensorStore
    from src.ingestion.sensors import SensorSimulator
    from src.ingestion.store_client import ReportStoreClient, SensorStoreClient

    rules = ValidationRules.from_settings(settings)
    backend = settings.store_backend.lower()

    if backend == "http":
        report_store = ReportStoreClient(settings.store_base_url, settings.store_timeout_seconds)
        sensor_store = SensorStoreClient(settings.store_base_url, settings.store_timeout_seconds)
    elif backend == "sql":
        db = init_db(settings.database_url)
        report_store = SqlReportStore(db)
        sensor_store = SqlSensorStore(db)
        sensor_store.add(SensorSimulator().read_all())
    elif backend == "memory":
        report_store = InMemoryReportStore()
        sensor_store = InMemorySensorStore()
    else:
        raise ValueError(f"Unknown store backend: {settings.store_backend}")

    logger.info(f"Using {backend} store backend")
    return ValidationService(report_store, sensor_store, rules)
