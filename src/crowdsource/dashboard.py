"""
Dashboard projection
Validated incidents for the map, every report with its status, sensor chart
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from src.core.constants import SENSOR_CHART_TITLE, SENSOR_CHART_Y_RANGE
from src.crowdsource.report_handler import FloodReport, ReportStatus
from src.crowdsource.validation import (
    DEFAULT_RULES,
    ReportCollection,
    ValidationRules,
    report_status,
    validated_reports,
    iter_reports,
)
from src.ingestion.sensors import SensorReading


def status_counts(
    reports: ReportCollection,
    rules: ValidationRules = DEFAULT_RULES
) -> Dict[str, int]:
    counts = {status.value: 0 for status in ReportStatus}
    for report in iter_reports(reports):
        counts[report_status(report, rules).value] += 1
    return counts


def sensor_chart(sensors: List[SensorReading]) -> Dict[str, Any]:
    """
    Line-chart series for the first sensor station.

    Labels are reading times, values are water levels in meters.
    """
    if not sensors:
        return {"title": SENSOR_CHART_TITLE, "labels": [], "data": [], "y_range": list(SENSOR_CHART_Y_RANGE)}

    station = sensors[0].location
    series = sorted(
        (s for s in sensors if s.location == station),
        key=lambda s: s.timestamp,
    )
    return {
        "title": SENSOR_CHART_TITLE,
        "station": station,
        "labels": [s.timestamp.strftime("%H:%M:%S") for s in series],
        "data": [s.current_water_level for s in series],
        "y_range": list(SENSOR_CHART_Y_RANGE),
    }


@dataclass
class DashboardSnapshot:
    """Everything the dashboard view needs at one point in time."""
    validated: List[FloodReport]
    reports: List[FloodReport]
    sensors: List[SensorReading]
    counts: Dict[str, int] = field(default_factory=dict)
    chart: Dict[str, Any] = field(default_factory=dict)
    rules: ValidationRules = DEFAULT_RULES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "validated_reports": [r.to_dict() for r in self.validated],
            "reports": [
                {**r.to_dict(), "status": report_status(r, self.rules).value}
                for r in self.reports
            ],
            "sensors": [s.to_dict() for s in self.sensors],
            "counts": self.counts,
            "chart": self.chart,
        }


def build_dashboard(
    reports: ReportCollection,
    sensors: List[SensorReading],
    rules: ValidationRules = DEFAULT_RULES
) -> DashboardSnapshot:
    """
    Build the dashboard view.

    Rejected reports stay off the map but are listed with their status.
    """
    reports = list(iter_reports(reports))
    return DashboardSnapshot(
        validated=validated_reports(reports),
        reports=reports,
        sensors=list(sensors),
        counts=status_counts(reports, rules),
        chart=sensor_chart(list(sensors)),
        rules=rules,
    )
