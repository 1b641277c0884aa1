"""
Flood report model for crowdsourced data
Builds citizen submissions and converts reports to and from the store format
"""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Dict, Any

from src.core.constants import (
    LAGOS_CENTER,
    PLACEHOLDER_IMAGE_URL,
)
from src.core.geo_utils import jitter_point, is_valid_coordinate

logger = logging.getLogger(__name__)


class ReportStatus(str, Enum):
    """Status of a flood report, derived from its vote counters."""
    PENDING = "pending"
    VALIDATED = "validated"
    REJECTED = "rejected"


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp, accepting the trailing 'Z' form."""
    if isinstance(value, datetime):
        return value
    if not value:
        return datetime.now(timezone.utc)
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def format_timestamp(value: datetime) -> str:
    """Format a timestamp the way browsers do (millisecond precision, 'Z')."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


@dataclass
class FloodReport:
    """
    Flood incident reported by a citizen.

    Carries the peer-validation counters. ``id`` is None until the
    store assigns one.
    """
    location: str
    latitude: float
    longitude: float
    water_level: float
    description: str
    image_url: str = PLACEHOLDER_IMAGE_URL
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # Peer validation
    upvotes: int = 0
    downvotes: int = 0
    validated: bool = False

    id: Optional[str] = None

    # Optimistic concurrency token, bumped by stores that check it
    version: int = 0

    @property
    def total_votes(self) -> int:
        return self.upvotes + self.downvotes

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the store's camelCase JSON shape."""
        data = {
            "location": self.location,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "waterLevel": self.water_level,
            "imageUrl": self.image_url,
            "description": self.description,
            "timestamp": format_timestamp(self.timestamp),
            "validated": self.validated,
            "upvotes": self.upvotes,
            "downvotes": self.downvotes,
            "version": self.version,
        }
        if self.id is not None:
            data["id"] = self.id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FloodReport":
        """Create a report from a store record. Unknown keys are ignored."""
        report_id = data.get("id")
        return cls(
            id=str(report_id) if report_id is not None else None,
            location=data.get("location", ""),
            latitude=float(data.get("latitude", 0.0)),
            longitude=float(data.get("longitude", 0.0)),
            water_level=float(data.get("waterLevel", 0.0)),
            description=data.get("description", ""),
            image_url=data.get("imageUrl") or PLACEHOLDER_IMAGE_URL,
            timestamp=parse_timestamp(data.get("timestamp")),
            upvotes=int(data.get("upvotes", 0)),
            downvotes=int(data.get("downvotes", 0)),
            validated=bool(data.get("validated", False)),
            version=int(data.get("version", 0)),
        )


def create_report(
    location: str,
    water_level: float,
    description: str,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    image_url: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> FloodReport:
    """
    Build a new pending report from a citizen submission.

    Coordinates are simulated near central Lagos when not supplied.

    Args:
        location: Free-text place name
        water_level: Observed water level in meters
        description: What the reporter saw
        latitude: Optional latitude
        longitude: Optional longitude
        image_url: Optional image reference
        rng: Optional random generator for coordinate simulation

    Returns:
        FloodReport without an id, counters at zero

    Raises:
        ValueError: On empty text fields, negative water level or
            out-of-range coordinates
    """
    if not location or not location.strip():
        raise ValueError("location is required")
    if not description or not description.strip():
        raise ValueError("description is required")
    if water_level is None or water_level < 0:
        raise ValueError("water_level must be a non-negative number")

    if latitude is None or longitude is None:
        latitude, longitude = jitter_point(LAGOS_CENTER, rng=rng)
    elif not is_valid_coordinate(latitude, longitude):
        raise ValueError(f"Invalid coordinates: ({latitude}, {longitude})")

    report = FloodReport(
        location=location.strip(),
        latitude=latitude,
        longitude=longitude,
        water_level=float(water_level),
        description=description.strip(),
        image_url=image_url or PLACEHOLDER_IMAGE_URL,
    )

    logger.debug(f"Built submission for {report.location} ({latitude:.4f}, {longitude:.4f})")

    return report
