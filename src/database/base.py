"""
Store interfaces for FloodDataSync

Any object with these methods can back the validation service: the HTTP
client, the SQL repository and the in-memory store all satisfy them.
"""

from typing import List, Protocol

from src.crowdsource.report_handler import FloodReport
from src.ingestion.sensors import SensorReading


class ReportStore(Protocol):
    """Key-value collection of reports addressable by id."""

    def list(self) -> List[FloodReport]:
        """All reports, insertion order."""
        ...

    def get(self, report_id: str) -> FloodReport:
        """One report; raises ReportNotFound."""
        ...

    def create(self, report: FloodReport) -> FloodReport:
        """Assign an id and store the report."""
        ...

    def update(self, report_id: str, report: FloodReport) -> FloodReport:
        """Replace the record at ``report_id``."""
        ...


class SensorStore(Protocol):
    """Read-only collection of sensor readings."""

    def list(self) -> List[SensorReading]:
        ...
