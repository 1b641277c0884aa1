"""
Pytest configuration and fixtures
"""
import pytest
import sys
from datetime import datetime, timezone
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.crowdsource.report_handler import FloodReport
from src.crowdsource.service import ValidationService
from src.database.memory import InMemoryReportStore, InMemorySensorStore
from src.ingestion.sensors import SensorSimulator


@pytest.fixture
def make_report():
    """Factory for reports with chosen counters."""
    def _make(report_id=None, upvotes=0, downvotes=0, validated=False, **kwargs):
        fields = {
            "location": "Ikorodu",
            "latitude": 6.6194,
            "longitude": 3.5105,
            "water_level": 1.5,
            "description": "Heavy flooding, blocked drain",
            "timestamp": datetime(2026, 6, 1, 9, 30, tzinfo=timezone.utc),
        }
        fields.update(kwargs)
        return FloodReport(
            id=report_id,
            upvotes=upvotes,
            downvotes=downvotes,
            validated=validated,
            **fields,
        )
    return _make


@pytest.fixture
def sample_reports(make_report):
    """Mixed pool: three eligible, one validated, one at the vote cap."""
    return [
        make_report("1", location="Ikorodu"),
        make_report("2", upvotes=3, validated=True, location="Lekki"),
        make_report("3", upvotes=1, location="Ajegunle"),
        make_report("4", upvotes=2, downvotes=2, location="Surulere"),
        make_report("5", upvotes=3, downvotes=2, location="Yaba"),
    ]


@pytest.fixture
def sample_store_payload():
    """Reports as the REST store returns them."""
    return [
        {
            "id": 1,
            "location": "Ikorodu",
            "latitude": 6.62,
            "longitude": 3.51,
            "waterLevel": 1.5,
            "imageUrl": "https://example.org/flood.png",
            "description": "Road under water",
            "timestamp": "2026-06-01T09:30:00.000Z",
            "validated": False,
            "upvotes": 0,
            "downvotes": 0,
        },
        {
            "id": 2,
            "location": "Lekki",
            "latitude": 6.44,
            "longitude": 3.47,
            "waterLevel": 0.8,
            "imageUrl": "https://example.org/lekki.png",
            "description": "Knee-deep water",
            "timestamp": "2026-06-01T10:00:00.000Z",
            "validated": True,
            "upvotes": 3,
            "downvotes": 0,
        },
    ]


@pytest.fixture
def memory_store():
    return InMemoryReportStore()


@pytest.fixture
def service(memory_store):
    """Service over in-memory stores with reproducible sensors."""
    return ValidationService(
        memory_store,
        InMemorySensorStore(SensorSimulator(seed=7)),
    )
