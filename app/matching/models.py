"""Data models for the eligibility matching engine.

This module defines the tagged criterion records produced by each check and
the two possible scoring outcomes:
- Scored: every check ran; carries the accumulated score and criteria
- Disqualified: a hard check failed; evaluation stopped at that check
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Union

from app.domain.models import Scholarship


class CriterionKind(str, Enum):
    """The checks the engine performs, in evaluation order."""

    ACADEMIC_LEVEL = "academic_level"
    FIELD_OF_STUDY = "field_of_study"
    INTEREST = "interest"
    GENDER = "gender"
    COUNTRY = "country"
    AGE = "age"
    EDUCATION_LEVEL_ALLOWED = "education_level_allowed"
    DISABILITY = "disability"
    INCOME_LEVEL = "income_level"
    GPA = "gpa"


@dataclass(frozen=True)
class Criterion:
    """Result of a single check.

    Attributes:
        kind: Which check produced this record
        passed: True if the condition was satisfied
        points: Contribution to the score (negative for penalties)
        detail: Human-readable description shown to students
        disqualifies: True if this failed check excludes the candidate outright
    """

    kind: CriterionKind
    passed: bool
    points: int = 0
    detail: str = ""
    disqualifies: bool = False

    def render(self) -> str:
        """Display string for API output and persistence."""
        return self.detail


@dataclass
class Scored:
    """All checks ran without a disqualification.

    Attributes:
        score: Sum of criterion points
        criteria: Every emitted criterion, in evaluation order
    """

    score: int
    criteria: List[Criterion] = field(default_factory=list)

    is_disqualified = False

    @property
    def matched(self) -> List[Criterion]:
        return [c for c in self.criteria if c.passed]

    @property
    def unmatched(self) -> List[Criterion]:
        return [c for c in self.criteria if not c.passed]

    def meets(self, threshold: int) -> bool:
        """Whether the score reaches the inclusion threshold."""
        return self.score >= threshold


@dataclass
class Disqualified:
    """A hard check failed and evaluation stopped.

    Attributes:
        failed: The criterion that caused disqualification
        criteria: Criteria emitted before the failing check
    """

    failed: Criterion
    criteria: List[Criterion] = field(default_factory=list)

    is_disqualified = True


ScoreOutcome = Union[Scored, Disqualified]


@dataclass
class CandidateMatch:
    """A scholarship paired with its scoring outcome during orchestration.

    Attributes:
        scholarship: The candidate scholarship
        outcome: Scored or Disqualified
        included: Whether the candidate survives (scored and above threshold)
    """

    scholarship: Scholarship
    outcome: ScoreOutcome
    included: bool = False
