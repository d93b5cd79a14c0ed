"""Eligibility matching engine for scoring scholarships against student profiles.

This module provides:
- EligibilityScorer: Scores one scholarship for one student
- Criterion / CriterionKind: Tagged result of a single check
- Scored / Disqualified: The two scoring outcomes
- CandidateMatch: Coordination structure used during orchestration
- InterestTaxonomy: Interest category -> related fields lookup
- Utility functions for rendering criteria and building match records
"""

from .engine import EligibilityScorer
from .models import CandidateMatch, Criterion, CriterionKind, Disqualified, Scored, ScoreOutcome
from .taxonomy import DEFAULT_INTEREST_CATEGORIES, InterestTaxonomy
from .utils import build_match_record, build_rationale_dict, render_criteria

__all__ = [
    "EligibilityScorer",
    "Criterion",
    "CriterionKind",
    "Scored",
    "Disqualified",
    "ScoreOutcome",
    "CandidateMatch",
    "InterestTaxonomy",
    "DEFAULT_INTEREST_CATEGORIES",
    "build_match_record",
    "build_rationale_dict",
    "render_criteria",
]
