"""
FloodDataSync - Data Ingestion Module

Clients for the remote report/sensor store and the simulated sensor feed.
"""

from src.ingestion.sensors import (
    SensorReading,
    SensorSimulator,
)
from src.ingestion.store_client import (
    ReportStoreClient,
    SensorStoreClient,
)

__all__ = [
    "SensorReading",
    "SensorSimulator",
    "ReportStoreClient",
    "SensorStoreClient",
]
