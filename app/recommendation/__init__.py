"""Recommendation orchestration for the Scholarship Matcher."""

from .exceptions import (
    ExplanationUnavailableError,
    MatchAccessDeniedError,
    MatchNotFoundError,
    ProfileNotFoundError,
    RecommendationError,
    error_envelope,
)
from .models import MatchBreakdown, RecommendationRun
from .service import (
    RecommendationService,
    RecommendationStores,
    StudentLockRegistry,
    build_scorer,
    sql_unit_of_work,
)

__all__ = [
    "RecommendationService",
    "RecommendationStores",
    "StudentLockRegistry",
    "build_scorer",
    "sql_unit_of_work",
    "RecommendationRun",
    "MatchBreakdown",
    "RecommendationError",
    "ProfileNotFoundError",
    "MatchNotFoundError",
    "MatchAccessDeniedError",
    "ExplanationUnavailableError",
    "error_envelope",
]
