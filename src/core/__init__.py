"""
FloodDataSync - Core Utilities
Central configuration, logging, errors, and utility functions.
"""

from src.core.config import settings, get_settings
from src.core.constants import (
    LAGOS_CENTER,
    PLACEHOLDER_IMAGE_URL,
    VALIDATION_UPVOTES,
    VALIDATION_MAX_DOWNVOTES,
    REJECTION_DOWNVOTES,
    MAX_VOTES_PER_REPORT,
)
from src.core.exceptions import (
    FloodDataSyncError,
    StoreUnavailable,
    ReportNotFound,
    ReportNotEligible,
    NoReportAvailable,
    StaleReport,
)
from src.core.geo_utils import (
    jitter_point,
    calculate_center,
    is_valid_coordinate,
)

__all__ = [
    "settings",
    "get_settings",
    "LAGOS_CENTER",
    "PLACEHOLDER_IMAGE_URL",
    "VALIDATION_UPVOTES",
    "VALIDATION_MAX_DOWNVOTES",
    "REJECTION_DOWNVOTES",
    "MAX_VOTES_PER_REPORT",
    "FloodDataSyncError",
    "StoreUnavailable",
    "ReportNotFound",
    "ReportNotEligible",
    "NoReportAvailable",
    "StaleReport",
    "jitter_point",
    "calculate_center",
    "is_valid_coordinate",
]
