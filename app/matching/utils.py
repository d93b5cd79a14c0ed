"""Utility functions for turning scoring outcomes into storable records.

This module provides helpers for rendering tagged criteria into the display
strings persisted with each match, and for building log-friendly rationale.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from app.domain.models import MatchRecord

from .models import CandidateMatch, Criterion, Disqualified, Scored, ScoreOutcome


def render_criteria(criteria: Iterable[Criterion]) -> Tuple[List[str], List[str]]:
    """Split criteria into matched and unmatched display strings.

    Order within each list follows evaluation order.

    Args:
        criteria: Criteria emitted by the scorer

    Returns:
        Tuple of (matched_criteria, unmatched_criteria)
    """
    matched: List[str] = []
    unmatched: List[str] = []
    for criterion in criteria:
        (matched if criterion.passed else unmatched).append(criterion.render())
    return matched, unmatched


def build_match_record(
    student_id: int, candidate: CandidateMatch, score_cap: Optional[int] = None
) -> MatchRecord:
    """Build the persisted row for a surviving candidate.

    Args:
        student_id: Owning student
        candidate: Candidate whose outcome is Scored
        score_cap: Optional upper bound applied to the stored score

    Returns:
        MatchRecord ready for insertion (match_id unset)

    Raises:
        ValueError: If the candidate was disqualified
    """
    outcome = candidate.outcome
    if not isinstance(outcome, Scored):
        raise ValueError(
            f"Cannot persist disqualified scholarship {candidate.scholarship.scholarship_id}"
        )

    score = outcome.score
    if score_cap is not None:
        score = min(score, score_cap)

    matched, unmatched = render_criteria(outcome.criteria)
    return MatchRecord(
        student_id=student_id,
        scholarship_id=candidate.scholarship.scholarship_id,
        match_score=score,
        matched_criteria=matched,
        unmatched_criteria=unmatched,
    )


def build_rationale_dict(outcome: ScoreOutcome) -> Dict:
    """Build a lightweight rationale dict for a scoring outcome.

    Useful for structured logs and debugging output.

    Args:
        outcome: Scored or Disqualified

    Returns:
        Dict with:
        - disqualified: Whether a hard check failed
        - score: Accumulated score (None when disqualified)
        - failed_check: Kind of the failing hard check (None when scored)
        - checks: Mapping of check kind -> passed for every emitted criterion
    """
    checks = {c.kind.value: c.passed for c in outcome.criteria}
    if isinstance(outcome, Disqualified):
        checks[outcome.failed.kind.value] = False
        return {
            "disqualified": True,
            "score": None,
            "failed_check": outcome.failed.kind.value,
            "reason": outcome.failed.detail,
            "checks": checks,
        }
    return {
        "disqualified": False,
        "score": outcome.score,
        "failed_check": None,
        "reason": None,
        "checks": checks,
    }
