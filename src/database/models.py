"""
SQLAlchemy models for FloodDataSync
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Column, Integer, Float, String, Text, Boolean, DateTime, Index
)
from sqlalchemy.orm import declarative_base

from src.crowdsource.report_handler import FloodReport
from src.ingestion.sensors import SensorReading

Base = declarative_base()


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ReportRecord(Base):
    """
    Flood report submitted by a citizen.

    ``seq`` keeps insertion order; ``version`` guards concurrent updates.
    """
    __tablename__ = "reports"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), unique=True, nullable=False, index=True)

    location = Column(String(200), nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    water_level = Column(Float, nullable=False)
    description = Column(Text, nullable=False)
    image_url = Column(String(500))
    timestamp = Column(DateTime(timezone=True), nullable=False)

    # Peer validation
    upvotes = Column(Integer, nullable=False, default=0)
    downvotes = Column(Integer, nullable=False, default=0)
    validated = Column(Boolean, nullable=False, default=False)

    version = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("idx_report_validated", validated),
    )

    def __repr__(self):
        return f"<ReportRecord({self.id}, up={self.upvotes}, down={self.downvotes}, validated={self.validated})>"

    @classmethod
    def from_report(cls, report: FloodReport) -> "ReportRecord":
        return cls(
            id=report.id,
            location=report.location,
            latitude=report.latitude,
            longitude=report.longitude,
            water_level=report.water_level,
            description=report.description,
            image_url=report.image_url,
            timestamp=report.timestamp,
            upvotes=report.upvotes,
            downvotes=report.downvotes,
            validated=report.validated,
            version=report.version,
        )

    def to_report(self) -> FloodReport:
        return FloodReport(
            id=self.id,
            location=self.location,
            latitude=self.latitude,
            longitude=self.longitude,
            water_level=self.water_level,
            description=self.description,
            image_url=self.image_url,
            timestamp=_as_utc(self.timestamp),
            upvotes=self.upvotes,
            downvotes=self.downvotes,
            validated=self.validated,
            version=self.version,
        )


class SensorReadingRecord(Base):
    """Water-level reading from a (simulated) IoT station."""
    __tablename__ = "sensor_readings"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), nullable=False, index=True)
    location = Column(String(200), nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    current_water_level = Column(Float, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self):
        return f"<SensorReadingRecord({self.id}, level={self.current_water_level})>"

    @classmethod
    def from_reading(cls, reading: SensorReading) -> "SensorReadingRecord":
        return cls(
            id=reading.id,
            location=reading.location,
            latitude=reading.latitude,
            longitude=reading.longitude,
            current_water_level=reading.current_water_level,
            timestamp=reading.timestamp,
        )

    def to_reading(self) -> SensorReading:
        return SensorReading(
            id=self.id,
            location=self.location,
            latitude=self.latitude,
            longitude=self.longitude,
            current_water_level=self.current_water_level,
            timestamp=_as_utc(self.timestamp),
        )
