"""
Peer validation for crowdsourced flood reports
Decides, from upvotes and downvotes, whether a report is validated or rejected
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Union

from src.core.constants import (
    VALIDATION_UPVOTES,
    VALIDATION_MAX_DOWNVOTES,
    REJECTION_DOWNVOTES,
    MAX_VOTES_PER_REPORT,
)
from src.core.exceptions import ReportNotEligible
from src.crowdsource.report_handler import FloodReport, ReportStatus

logger = logging.getLogger(__name__)

ReportCollection = Union[Mapping[str, FloodReport], Iterable[FloodReport]]


class VoteKind(str, Enum):
    """Direction of a peer vote."""
    UP = "up"
    DOWN = "down"


class VoteOutcome(str, Enum):
    """Status signaled to the voter after a vote is applied."""
    VALIDATED = "validated"
    REJECTED = "rejected"
    PENDING = "pending"


@dataclass(frozen=True)
class ValidationRules:
    """Thresholds of the consensus rule set."""
    validation_upvotes: int = VALIDATION_UPVOTES
    validation_max_downvotes: int = VALIDATION_MAX_DOWNVOTES
    rejection_downvotes: int = REJECTION_DOWNVOTES
    max_votes: int = MAX_VOTES_PER_REPORT

    @classmethod
    def from_settings(cls, settings) -> "ValidationRules":
        return cls(
            validation_upvotes=settings.validation_upvotes,
            validation_max_downvotes=settings.validation_max_downvotes,
            rejection_downvotes=settings.rejection_downvotes,
            max_votes=settings.max_votes_per_report,
        )


DEFAULT_RULES = ValidationRules()


@dataclass
class VoteResult:
    """Updated report plus the outcome to show the voter."""
    report: FloodReport
    outcome: VoteOutcome

    def to_dict(self) -> Dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "report": self.report.to_dict(),
        }


def report_status(report: FloodReport, rules: ValidationRules = DEFAULT_RULES) -> ReportStatus:
    """Derive the tagged status of a report under the given rules."""
    if report.validated:
        return ReportStatus.VALIDATED
    if report.downvotes >= rules.rejection_downvotes:
        return ReportStatus.REJECTED
    return ReportStatus.PENDING


def is_eligible(report: FloodReport, rules: ValidationRules = DEFAULT_RULES) -> bool:
    """
    Check whether a report may still receive votes.

    A report leaves the pool once validated, once rejected, or once it
    has collected ``max_votes`` votes. It never comes back.

    Rejected reports drop out below ``max_votes`` too: a report that
    reached ``rejection_downvotes`` is never shown to a validator again,
    even with votes to spare.
    """
    if report.validated:
        return False
    if report.total_votes >= rules.max_votes:
        return False
    return report_status(report, rules) == ReportStatus.PENDING


def iter_reports(reports: ReportCollection) -> Iterable[FloodReport]:
    if isinstance(reports, Mapping):
        return reports.values()
    return reports


def eligible_reports(
    reports: ReportCollection,
    rules: ValidationRules = DEFAULT_RULES
) -> List[FloodReport]:
    """
    Reports open for voting, in the store's insertion order.

    Args:
        reports: Mapping of id -> report, or a sequence of reports

    Returns:
        List of eligible reports
    """
    return [r for r in iter_reports(reports) if is_eligible(r, rules)]


def validated_reports(reports: ReportCollection) -> List[FloodReport]:
    """Reports shown on the dashboard map."""
    return [r for r in iter_reports(reports) if r.validated]


def apply_vote(
    report: FloodReport,
    kind: VoteKind,
    rules: ValidationRules = DEFAULT_RULES
) -> VoteResult:
    """
    Apply one vote and evaluate the transition rules.

    The input report is not modified. Rules are checked in order and the
    first match wins:

    1. enough upvotes with few downvotes -> validated
    2. enough downvotes -> rejected (``validated`` stays False)
    3. otherwise -> pending

    Args:
        report: Report being voted on
        kind: Vote direction
        rules: Consensus thresholds

    Returns:
        VoteResult with the new report value and signaled outcome

    Raises:
        ReportNotEligible: If the report already left the voting pool
    """
    if not is_eligible(report, rules):
        raise ReportNotEligible(report.id)

    kind = VoteKind(kind)
    if kind == VoteKind.UP:
        updated = replace(report, upvotes=report.upvotes + 1)
    else:
        updated = replace(report, downvotes=report.downvotes + 1)

    if (updated.upvotes >= rules.validation_upvotes
            and updated.downvotes < rules.validation_max_downvotes):
        updated.validated = True
        outcome = VoteOutcome.VALIDATED
        logger.info(f"Report {report.id} validated ({updated.upvotes} up / {updated.downvotes} down)")
    elif updated.downvotes >= rules.rejection_downvotes:
        updated.validated = False
        outcome = VoteOutcome.REJECTED
        logger.info(f"Report {report.id} rejected ({updated.upvotes} up / {updated.downvotes} down)")
    else:
        outcome = VoteOutcome.PENDING

    return VoteResult(report=updated, outcome=outcome)
