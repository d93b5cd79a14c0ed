"""Domain models for the Scholarship Matcher."""

from .models import (
    Gender,
    MatchRecord,
    Recommendation,
    Scholarship,
    ScholarshipStatus,
    StudentProfile,
)

__all__ = [
    "StudentProfile",
    "Scholarship",
    "MatchRecord",
    "Recommendation",
    "Gender",
    "ScholarshipStatus",
]
