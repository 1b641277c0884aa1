"""
FloodDataSync - Constants and Reference Data
Static values used throughout the application.
"""

from typing import Dict, List, Tuple

# =============================================================================
# GEOGRAPHIC REFERENCE
# =============================================================================

# Central Lagos coordinates
LAGOS_CENTER: Tuple[float, float] = (6.5244, 3.3792)

# Half-width (degrees) of the box used to simulate report coordinates
REPORT_JITTER_DEGREES: float = 0.05

# =============================================================================
# PEER VALIDATION
# =============================================================================

# Upvotes needed to validate a report
VALIDATION_UPVOTES: int = 3

# A report can only be validated while downvotes stay below this
VALIDATION_MAX_DOWNVOTES: int = 2

# Downvotes that mark a report as rejected
REJECTION_DOWNVOTES: int = 3

# Total votes after which a report leaves the voting pool
MAX_VOTES_PER_REPORT: int = 5

# =============================================================================
# SUBMISSION DEFAULTS
# =============================================================================

PLACEHOLDER_IMAGE_URL: str = (
    "https://via.placeholder.com/150/0000FF/FFFFFF?text=Simulated+Flood"
)

# =============================================================================
# SENSORS
# =============================================================================

# Simulated IoT water-level stations
SENSOR_STATIONS: List[Dict[str, object]] = [
    {"id": "sensor-1", "location": "Lagos Island", "latitude": 6.4550, "longitude": 3.3941},
    {"id": "sensor-2", "location": "Ikorodu", "latitude": 6.6194, "longitude": 3.5105},
    {"id": "sensor-3", "location": "Ajegunle", "latitude": 6.4592, "longitude": 3.3347},
]

# Range of simulated water levels (meters)
SENSOR_LEVEL_RANGE: Tuple[float, float] = (0.2, 2.2)

# Y-axis bounds for the sensor chart (meters)
SENSOR_CHART_Y_RANGE: Tuple[float, float] = (0.0, 2.5)

SENSOR_CHART_TITLE: str = "Simulated Sensor Data (Lagos Island)"
