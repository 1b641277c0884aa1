"""
FloodDataSync - Geospatial Utilities
Small helpers for coordinate simulation and map framing.
"""

import random
from typing import Iterable, Optional, Tuple

from src.core.constants import LAGOS_CENTER, REPORT_JITTER_DEGREES


def jitter_point(
    center: Tuple[float, float] = LAGOS_CENTER,
    max_offset: float = REPORT_JITTER_DEGREES,
    rng: Optional[random.Random] = None,
) -> Tuple[float, float]:
    """
    Simulate a point near a center.

    Args:
        center: (latitude, longitude) to scatter around
        max_offset: Maximum offset in degrees on each axis
        rng: Optional random generator (for reproducible tests)

    Returns:
        (latitude, longitude) tuple
    """
    rng = rng or random
    lat = center[0] + (rng.random() - 0.5) * 2 * max_offset
    lon = center[1] + (rng.random() - 0.5) * 2 * max_offset
    return (lat, lon)


def calculate_center(
    points: Iterable[Tuple[float, float]],
    default: Tuple[float, float] = LAGOS_CENTER,
) -> Tuple[float, float]:
    """Mean of (lat, lon) points, or the default when there are none."""
    points = list(points)
    if not points:
        return default
    lat = sum(p[0] for p in points) / len(points)
    lon = sum(p[1] for p in points) / len(points)
    return (lat, lon)


def is_valid_coordinate(latitude: float, longitude: float) -> bool:
    """Check latitude/longitude ranges."""
    return -90 <= latitude <= 90 and -180 <= longitude <= 180
