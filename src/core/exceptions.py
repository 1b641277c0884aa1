"""
FloodDataSync - Exceptions
"""

from typing import Optional


class FloodDataSyncError(Exception):
    """Base class for application errors."""


class StoreUnavailable(FloodDataSyncError):
    """A report or sensor store call failed or timed out."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        message = f"Store unavailable during {operation}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class ReportNotFound(FloodDataSyncError):
    """No report exists with the given id."""

    def __init__(self, report_id: str):
        self.report_id = report_id
        super().__init__(f"Report not found: {report_id}")


class ReportNotEligible(FloodDataSyncError):
    """The report already left the voting pool."""

    def __init__(self, report_id: str):
        self.report_id = report_id
        super().__init__(f"Report {report_id} is no longer open for voting")


class NoReportAvailable(FloodDataSyncError):
    """The voting pool is empty."""

    def __init__(self):
        super().__init__("No reports pending validation")


class StaleReport(FloodDataSyncError):
    """The stored report changed since it was read."""

    def __init__(self, report_id: str, expected_version: int, actual_version: int):
        self.report_id = report_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Report {report_id} was modified concurrently "
            f"(expected version {expected_version}, found {actual_version})"
        )
