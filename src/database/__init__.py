"""
Database module for FloodDataSync
Report and sensor persistence: SQL, in-memory, and the shared interface
"""

from .base import ReportStore, SensorStore
from .connection import DatabaseConnection, init_db
from .memory import InMemoryReportStore, InMemorySensorStore
from .models import Base, ReportRecord, SensorReadingRecord
from .repository import SqlReportStore, SqlSensorStore

__all__ = [
    "ReportStore",
    "SensorStore",
    "DatabaseConnection",
    "init_db",
    "InMemoryReportStore",
    "InMemorySensorStore",
    "Base",
    "ReportRecord",
    "SensorReadingRecord",
    "SqlReportStore",
    "SqlSensorStore",
]
