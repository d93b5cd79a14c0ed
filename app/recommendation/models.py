"""Data models for recommendation runs and match breakdowns."""

from dataclasses import dataclass, field
from typing import List

from app.domain.models import Recommendation


@dataclass
class RecommendationRun:
    """
    Outcome of one recompute-and-replace call for a student.

    Attributes:
        student_id: Student the run computed for
        deleted_count: Stale match rows removed at the start of the run
        candidates_evaluated: Approved, open scholarships scored
        disqualified_count: Candidates excluded by a failed hard check
        below_threshold_count: Candidates that scored under the inclusion threshold
        stored_count: Match rows inserted
        duration_seconds: Wall time of the run
        recommendations: Freshly persisted matches, best score first
    """

    student_id: int
    deleted_count: int = 0
    candidates_evaluated: int = 0
    disqualified_count: int = 0
    below_threshold_count: int = 0
    stored_count: int = 0
    duration_seconds: float = 0.0
    recommendations: List[Recommendation] = field(default_factory=list)

    @property
    def returned_count(self) -> int:
        return len(self.recommendations)


@dataclass
class MatchBreakdown:
    """
    Stored criteria for a single match, as used to explain a recommendation.

    Attributes:
        match_id: Match row id
        scholarship_id: Matched scholarship
        match_score: Stored score
        matched_criteria: Satisfied conditions
        unmatched_criteria: Failed or unverifiable conditions
    """

    match_id: int
    scholarship_id: int
    match_score: int
    matched_criteria: List[str] = field(default_factory=list)
    unmatched_criteria: List[str] = field(default_factory=list)

    @property
    def matched_count(self) -> int:
        return len(self.matched_criteria)

    @property
    def total_criteria(self) -> int:
        return len(self.matched_criteria) + len(self.unmatched_criteria)

    def to_payload(self) -> dict:
        return {
            "match_id": self.match_id,
            "scholarship_id": self.scholarship_id,
            "match_score": self.match_score,
            "matched_criteria": list(self.matched_criteria),
            "unmatched_criteria": list(self.unmatched_criteria),
            "matched_count": self.matched_count,
            "total_criteria": self.total_criteria,
        }
