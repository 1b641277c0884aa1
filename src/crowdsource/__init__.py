"""
FloodDataSync - Crowdsource Module
Handles citizen flood reports and peer validation.
"""

from src.crowdsource.report_handler import (
    FloodReport,
    ReportStatus,
    create_report,
)
from src.crowdsource.validation import (
    ValidationRules,
    VoteKind,
    VoteOutcome,
    VoteResult,
    apply_vote,
    eligible_reports,
    is_eligible,
    report_status,
    validated_reports,
)
from src.crowdsource.session import (
    SessionVote,
    ValidationSession,
)

__all__ = [
    # Reports
    "FloodReport",
    "ReportStatus",
    "create_report",
    # Validation
    "ValidationRules",
    "VoteKind",
    "VoteOutcome",
    "VoteResult",
    "apply_vote",
    "eligible_reports",
    "is_eligible",
    "report_status",
    "validated_reports",
    # Session
    "SessionVote",
    "ValidationSession",
]
