"""
SQL-backed report and sensor stores for FloodDataSync
"""

import logging
import uuid
from typing import List

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from src.core.exceptions import ReportNotFound, StaleReport, StoreUnavailable
from src.crowdsource.report_handler import FloodReport
from src.ingestion.sensors import SensorReading

from .connection import DatabaseConnection
from .models import ReportRecord, SensorReadingRecord

logger = logging.getLogger(__name__)


class SqlReportStore:
    """
    Report store persisted with SQLAlchemy.

    ``update`` is a compare-and-swap on the version column, so two voters
    that read the same report cannot both write.
    """

    def __init__(self, db: DatabaseConnection):
        self.db = db

    def list(self) -> List[FloodReport]:
        try:
            with self.db.get_session() as session:
                records = session.scalars(
                    select(ReportRecord).order_by(ReportRecord.seq)
                ).all()
                return [r.to_report() for r in records]
        except SQLAlchemyError as e:
            raise StoreUnavailable("list reports", e) from e

    def get(self, report_id: str) -> FloodReport:
        try:
            with self.db.get_session() as session:
                record = session.scalars(
                    select(ReportRecord).where(ReportRecord.id == str(report_id))
                ).first()
                if record is None:
                    raise ReportNotFound(report_id)
                return record.to_report()
        except SQLAlchemyError as e:
            raise StoreUnavailable("get report", e) from e

    def create(self, report: FloodReport) -> FloodReport:
        record = ReportRecord.from_report(report)
        record.id = uuid.uuid4().hex[:12]
        record.version = 0
        try:
            with self.db.get_session() as session:
                session.add(record)
                session.flush()
                stored = record.to_report()
        except SQLAlchemyError as e:
            raise StoreUnavailable("create report", e) from e

        logger.info(f"Report {stored.id} created at {stored.location}")
        return stored

    def update(self, report_id: str, report: FloodReport) -> FloodReport:
        report_id = str(report_id)
        try:
            with self.db.get_session() as session:
                result = session.execute(
                    update(ReportRecord)
                    .where(ReportRecord.id == report_id)
                    .where(ReportRecord.version == report.version)
                    .values(
                        location=report.location,
                        latitude=report.latitude,
                        longitude=report.longitude,
                        water_level=report.water_level,
                        description=report.description,
                        image_url=report.image_url,
                        upvotes=report.upvotes,
                        downvotes=report.downvotes,
                        validated=report.validated,
                        version=ReportRecord.version + 1,
                    )
                )

                record = session.scalars(
                    select(ReportRecord)
                    .where(ReportRecord.id == report_id)
                    .execution_options(populate_existing=True)
                ).first()
                if record is None:
                    raise ReportNotFound(report_id)
                if result.rowcount == 0:
                    raise StaleReport(report_id, report.version, record.version)
                return record.to_report()
        except SQLAlchemyError as e:
            raise StoreUnavailable("update report", e) from e


class SqlSensorStore:
    """Sensor readings persisted with SQLAlchemy; newest reading per station."""

    def __init__(self, db: DatabaseConnection):
        self.db = db

    def add(self, readings: List[SensorReading]) -> None:
        try:
            with self.db.get_session() as session:
                session.add_all([SensorReadingRecord.from_reading(r) for r in readings])
        except SQLAlchemyError as e:
            raise StoreUnavailable("add sensor readings", e) from e

    def list(self) -> List[SensorReading]:
        try:
            with self.db.get_session() as session:
                records = session.scalars(
                    select(SensorReadingRecord).order_by(SensorReadingRecord.seq)
                ).all()
        except SQLAlchemyError as e:
            raise StoreUnavailable("list sensors", e) from e

        latest = {}
        for record in records:
            latest[record.id] = record.to_reading()
        return list(latest.values())
