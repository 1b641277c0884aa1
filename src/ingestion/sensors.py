"""
Water-level sensor readings for FloodDataSync

Readings are simulated: each configured station reports a random level
within SENSOR_LEVEL_RANGE. No real sensor ingestion happens here.
"""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Any

from src.core.constants import SENSOR_STATIONS, SENSOR_LEVEL_RANGE
from src.crowdsource.report_handler import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)


@dataclass
class SensorReading:
    """
    A single water-level reading.

    Attributes:
        id: Reading identifier
        location: Station name
        latitude: Station latitude
        longitude: Station longitude
        current_water_level: Water level in meters
        timestamp: When the level was read
    """

    id: str
    location: str
    latitude: float
    longitude: float
    current_water_level: float
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the store's camelCase JSON shape."""
        return {
            "id": self.id,
            "location": self.location,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "currentWaterLevel": self.current_water_level,
            "timestamp": format_timestamp(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SensorReading":
        return cls(
            id=str(data.get("id", "")),
            location=data.get("location", ""),
            latitude=float(data.get("latitude", 0.0)),
            longitude=float(data.get("longitude", 0.0)),
            current_water_level=float(data.get("currentWaterLevel", 0.0)),
            timestamp=parse_timestamp(data.get("timestamp")),
        )


class SensorSimulator:
    """
    Produces simulated readings for a fixed set of stations.

    Usage:
        simulator = SensorSimulator(seed=42)
        readings = simulator.read_all()
    """

    def __init__(
        self,
        stations: Optional[List[Dict[str, Any]]] = None,
        level_range: tuple = SENSOR_LEVEL_RANGE,
        seed: Optional[int] = None,
    ):
        self.stations = stations if stations is not None else SENSOR_STATIONS
        self.level_range = level_range
        self._rng = random.Random(seed)

    def read(self, station: Dict[str, Any], at: Optional[datetime] = None) -> SensorReading:
        low, high = self.level_range
        level = round(self._rng.uniform(low, high), 2)
        return SensorReading(
            id=str(station["id"]),
            location=str(station["location"]),
            latitude=float(station["latitude"]),
            longitude=float(station["longitude"]),
            current_water_level=level,
            timestamp=at or datetime.now(timezone.utc),
        )

    def read_all(self, at: Optional[datetime] = None) -> List[SensorReading]:
        """One reading per station."""
        readings = [self.read(station, at) for station in self.stations]
        logger.debug(f"Simulated {len(readings)} sensor readings")
        return readings
