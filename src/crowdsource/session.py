"""
Validation session
Chooses which pending report a validator sees next
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from src.core.exceptions import NoReportAvailable
from src.crowdsource.report_handler import FloodReport
from src.crowdsource.validation import (
    DEFAULT_RULES,
    ReportCollection,
    ValidationRules,
    VoteKind,
    VoteResult,
    apply_vote,
    eligible_reports,
)

logger = logging.getLogger(__name__)


@dataclass
class SessionVote:
    """What a validator sees after voting."""
    result: VoteResult
    next_report: Optional[FloodReport]
    cursor: int
    exhausted_round: bool = False


class ValidationSession:
    """
    Cursor over the eligible reports.

    The eligible sequence is recomputed from the report collection on
    every call; the session only remembers the cursor position and
    whether the pool was empty the last time it looked.
    """

    def __init__(self, rules: ValidationRules = DEFAULT_RULES):
        self.rules = rules
        self.cursor = 0
        self._pool_empty = True

    def _sync(self, pool: List[FloodReport]) -> None:
        if not pool:
            self.cursor = 0
            self._pool_empty = True
            return
        if self._pool_empty:
            self.cursor = 0
            self._pool_empty = False
        self.cursor = min(max(self.cursor, 0), len(pool) - 1)

    def pool(self, reports: ReportCollection) -> List[FloodReport]:
        return eligible_reports(reports, self.rules)

    def current(self, reports: ReportCollection) -> Optional[FloodReport]:
        """The report to show, or None when nothing is pending."""
        pool = self.pool(reports)
        self._sync(pool)
        if not pool:
            return None
        return pool[self.cursor]

    def advance(self, reports: ReportCollection) -> bool:
        """
        Move the cursor after a vote.

        ``reports`` must already contain the voted report's new value, so
        the pool length reflects a report that just dropped out.

        Returns:
            True when the cursor wrapped back to the start
        """
        pool = self.pool(reports)
        if not pool:
            self._sync(pool)
            return True

        if self._pool_empty:
            self._sync(pool)
            return False

        if self.cursor < len(pool) - 1:
            self.cursor += 1
            wrapped = False
        else:
            self.cursor = 0
            wrapped = True

        self._sync(pool)
        if wrapped:
            logger.info("No more pending reports in this round, starting over")
        return wrapped

    def vote(self, reports: List[FloodReport], kind: VoteKind) -> SessionVote:
        """
        Vote on the current report of an in-memory list.

        The voted report is replaced in ``reports`` in place.

        Raises:
            NoReportAvailable: If the pool is empty
        """
        target = self.current(reports)
        if target is None:
            raise NoReportAvailable()

        result = apply_vote(target, kind, self.rules)
        for index, report in enumerate(reports):
            if report is target:
                reports[index] = result.report
                break

        wrapped = self.advance(reports)
        return SessionVote(
            result=result,
            next_report=self.current(reports),
            cursor=self.cursor,
            exhausted_round=wrapped,
        )
